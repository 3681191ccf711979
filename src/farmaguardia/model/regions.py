"""Static catalogue of served regions and rural health zones (ZBS)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .duty import FULL_DAY_HOURS, DutyTimeSpan, TimeRange


@dataclass(frozen=True, slots=True)
class RegionMetadata:
    has_24h_pharmacies: bool = False
    is_monthly_schedule: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Region:
    """A region with its own duty calendar document."""

    id: str
    name: str
    icon: str
    pdf_url: str
    metadata: RegionMetadata = field(default_factory=RegionMetadata)


@dataclass(frozen=True, slots=True)
class ZBS:
    """Zona Básica de Salud: a rural zone with its own duty rotation."""

    id: str
    name: str
    icon: str
    hours: TimeRange

    @property
    def span(self) -> DutyTimeSpan:
        return DutyTimeSpan.for_hours(self.hours)


_COF_UPLOADS = "https://cofsegovia.com/wp-content/uploads"

SEGOVIA_CAPITAL = Region(
    id="segovia-capital",
    name="Segovia Capital",
    icon="🏙",
    pdf_url=f"{_COF_UPLOADS}/2025/05/CALENDARIO-GUARDIAS-SEGOVIA-CAPITAL-DIA-2025.pdf",
    metadata=RegionMetadata(notes="Incluye turnos de día y de noche"),
)
CUELLAR = Region(
    id="cuellar",
    name="Cuéllar",
    icon="🌳",
    pdf_url=f"{_COF_UPLOADS}/2025/01/GUARDIAS-CUELLAR_2025.pdf",
    metadata=RegionMetadata(notes="Servicios semanales excepto primera semana de septiembre"),
)
EL_ESPINAR = Region(
    id="el-espinar",
    name="El Espinar / San Rafael",
    icon="⛰",
    pdf_url=f"{_COF_UPLOADS}/2025/01/Guardias-EL-ESPINAR_2025.pdf",
    metadata=RegionMetadata(notes="Servicios semanales"),
)
SEGOVIA_RURAL = Region(
    id="segovia-rural",
    name="Segovia Rural",
    icon="🚜",
    pdf_url=f"{_COF_UPLOADS}/2025/06/SERVICIOS-DE-URGENCIA-RURALES-2025.pdf",
    metadata=RegionMetadata(has_24h_pharmacies=True, notes="Servicios de urgencia rurales"),
)

REGIONS: Tuple[Region, ...] = (SEGOVIA_CAPITAL, CUELLAR, EL_ESPINAR, SEGOVIA_RURAL)

_STANDARD_RURAL_HOURS = TimeRange(10 * 60, 20 * 60)
_EXTENDED_RURAL_HOURS = TimeRange(10 * 60, 22 * 60)

ZBS_CATALOGUE: Tuple[ZBS, ...] = (
    ZBS("riaza-sepulveda", "Riaza / Sepúlveda", "🏔️", FULL_DAY_HOURS),
    ZBS("la-granja", "La Granja", "🏰", _EXTENDED_RURAL_HOURS),
    ZBS("la-sierra", "La Sierra", "⛰️", _STANDARD_RURAL_HOURS),
    ZBS("fuentidueña", "Fuentidueña", "🏞️", _STANDARD_RURAL_HOURS),
    ZBS("carbonero", "Carbonero", "🌲", _STANDARD_RURAL_HOURS),
    ZBS("navas-asuncion", "Nava de la Asunción", "🏘️", _STANDARD_RURAL_HOURS),
    ZBS("villacastin", "Villacastín", "🚂", _STANDARD_RURAL_HOURS),
    ZBS("cantalejo", "Cantalejo", "🏘️", _STANDARD_RURAL_HOURS),
)

_REGIONS_BY_ID: Dict[str, Region] = {region.id: region for region in REGIONS}
_ZBS_BY_ID: Dict[str, ZBS] = {zone.id: zone for zone in ZBS_CATALOGUE}


def region_by_id(region_id: str) -> Region:
    try:
        return _REGIONS_BY_ID[region_id]
    except KeyError:
        raise KeyError(f"Unknown region: {region_id}") from None


def zbs_by_id(zone_id: str) -> ZBS:
    try:
        return _ZBS_BY_ID[zone_id]
    except KeyError:
        raise KeyError(f"Unknown ZBS: {zone_id}") from None


__all__ = [
    "Region",
    "RegionMetadata",
    "ZBS",
    "REGIONS",
    "ZBS_CATALOGUE",
    "SEGOVIA_CAPITAL",
    "CUELLAR",
    "EL_ESPINAR",
    "SEGOVIA_RURAL",
    "region_by_id",
    "zbs_by_id",
]
