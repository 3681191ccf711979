"""El Espinar / San Rafael weekly rotation calendar.

The calendar spells the street pharmacies loosely ("AV. HONTANILLA",
"Hontanilla 18", "MARQUES DE PERALES"), so codes are matched on their
distinctive word rather than on the full directory key.
"""

from __future__ import annotations

import re
from typing import Optional

from farmaguardia.model.regions import EL_ESPINAR

from .directory import EL_ESPINAR_PHARMACIES
from .market import MarketTownStrategy

_HONTANILLA_RE = re.compile(r"HONTANILLA", re.IGNORECASE)
_PERALES_RE = re.compile(r"MARQU[ÉE]S\s+(?:DE\s+)?PERALES", re.IGNORECASE)
_SAN_RAFAEL_RE = re.compile(r"SAN\s+RAFAEL\s*$", re.IGNORECASE)


class ElEspinarStrategy(MarketTownStrategy):
    region_id = EL_ESPINAR.id
    directory = EL_ESPINAR_PHARMACIES
    location_re = re.compile(r"\bEL\s+ESPINAR\b", re.IGNORECASE)

    def match_code(self, line: str) -> Optional[str]:
        if _HONTANILLA_RE.search(line):
            return "AV. HONTANILLA 18"
        if _PERALES_RE.search(line):
            return "C/ MARQUES PERALES"
        # Titles and headers read "EL ESPINAR / SAN RAFAEL"; the town name is not a pharmacy.
        if self.location_re.search(line):
            return None
        if _SAN_RAFAEL_RE.search(line):
            return "SAN RAFAEL"
        return None


__all__ = ["ElEspinarStrategy"]
