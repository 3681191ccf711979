"""Pharmacy and schedule records produced by the parsing strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from .duty import DutyDate, DutyTimeSpan, TimeRange

PLACEHOLDER_ADDRESS = "Dirección no disponible"
PLACEHOLDER_PHONE = "No disponible"


@dataclass(frozen=True, slots=True)
class Pharmacy:
    """A pharmacy as listed in a duty calendar.

    ``additional_info`` is display text only; hours and zone membership live
    in ``operating_hours`` and ``zone_id``.
    """

    name: str
    address: str
    phone: str = PLACEHOLDER_PHONE
    additional_info: Optional[str] = None
    operating_hours: Optional[TimeRange] = None
    zone_id: Optional[str] = None

    @property
    def has_phone(self) -> bool:
        return bool(self.phone) and self.phone != PLACEHOLDER_PHONE

    @property
    def formatted_phone(self) -> str:
        digits = "".join(ch for ch in self.phone if ch.isdigit())
        if len(digits) != 9:
            return self.phone
        return f"{digits[0:3]} {digits[3:6]} {digits[6:9]}"


def _freeze_groups(groups: Mapping) -> Dict:
    return {key: tuple(value) for key, value in groups.items()}


@dataclass(frozen=True, slots=True)
class PharmacySchedule:
    """All shift assignments for one calendar day."""

    date: DutyDate
    shifts: Mapping[DutyTimeSpan, Tuple[Pharmacy, ...]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "shifts", _freeze_groups(self.shifts))

    @property
    def spans(self) -> FrozenSet[DutyTimeSpan]:
        return frozenset(self.shifts)

    def pharmacies(self, span: DutyTimeSpan) -> Tuple[Pharmacy, ...]:
        return self.shifts.get(span, ())


@dataclass(frozen=True, slots=True)
class ZBSSchedule(PharmacySchedule):
    """Rural schedule for one date with an independent list per health zone.

    A zone mapped to an empty tuple had no pharmacy on duty that day.
    """

    zones: Mapping[str, Tuple[Pharmacy, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        PharmacySchedule.__post_init__(self)
        object.__setattr__(self, "zones", _freeze_groups(self.zones))

    @classmethod
    def from_zones(
        cls,
        date: DutyDate,
        zones: Mapping[str, Iterable[Pharmacy]],
    ) -> "ZBSSchedule":
        frozen = _freeze_groups(zones)
        everyone = tuple(pharmacy for group in frozen.values() for pharmacy in group)
        return cls(date=date, shifts={DutyTimeSpan.FULL_DAY: everyone}, zones=frozen)

    @property
    def zone_ids(self) -> Tuple[str, ...]:
        return tuple(self.zones)

    def pharmacies_in(self, zone_id: str) -> Tuple[Pharmacy, ...]:
        """Return the zone's pharmacies; ``KeyError`` for undeclared zones."""

        return self.zones[zone_id]


__all__ = [
    "PLACEHOLDER_ADDRESS",
    "PLACEHOLDER_PHONE",
    "Pharmacy",
    "PharmacySchedule",
    "ZBSSchedule",
]
