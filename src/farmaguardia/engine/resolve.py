"""Which schedule entry and shift window is active at a given instant.

Everything here is a pure function over already-parsed schedules. Naive
datetimes are read as local time in :func:`farmaguardia.config.local_tz`;
aware ones are converted to it first.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from farmaguardia.config import local_tz
from farmaguardia.model.duty import DutyTimeSpan
from farmaguardia.model.pharmacy import Pharmacy, PharmacySchedule, ZBSSchedule
from farmaguardia.model.regions import Region, zbs_by_id

LOGGER = logging.getLogger(__name__)

SHIFT_BOUNDARIES: Tuple[time, ...] = (time(10, 15), time(22, 0))


class ShiftPattern(Enum):
    SINGLE = "single"
    SPLIT = "split"


class UnknownHoursPolicy(Enum):
    """What to assume for a pharmacy printed without opening hours."""

    ASSUME_OPEN = "assume-open"
    ASSUME_CLOSED = "assume-closed"


# Key sets that are neither FULL_DAY alone nor the capital pair resolve like
# a full-day rotation: the entry for the calendar day is open all day.
UNRECOGNIZED_PATTERN_POLICY = ShiftPattern.SINGLE

_SPLIT_SPANS = frozenset({DutyTimeSpan.CAPITAL_DAY, DutyTimeSpan.CAPITAL_NIGHT})


def _local(at: datetime) -> datetime:
    tz = local_tz()
    if at.tzinfo is None:
        return at.replace(tzinfo=tz)
    return at.astimezone(tz)


def shift_pattern(schedules: Sequence[PharmacySchedule]) -> Optional[ShiftPattern]:
    """Classify a region's schedules by the span keys of the first entry."""

    if not schedules:
        return None
    spans = schedules[0].spans
    if spans == frozenset({DutyTimeSpan.FULL_DAY}):
        return ShiftPattern.SINGLE
    if spans & _SPLIT_SPANS:
        return ShiftPattern.SPLIT
    LOGGER.debug("Unrecognised span keys %s; using %s", sorted(s.key for s in spans), UNRECOGNIZED_PATTERN_POLICY)
    return UNRECOGNIZED_PATTERN_POLICY


def find_schedule(day: date, schedules: Iterable[PharmacySchedule]) -> Optional[PharmacySchedule]:
    """Return the first entry for calendar ``day`` in document order."""

    for schedule in schedules:
        if schedule.date.is_same_day(day):
            return schedule
    return None


def duty_time_info(at: datetime) -> Tuple[date, DutyTimeSpan]:
    """Return the (entry day, span) that owns ``at`` in a day/night rotation."""

    local = _local(at)
    if DutyTimeSpan.CAPITAL_DAY.contains(local):
        return local.date(), DutyTimeSpan.CAPITAL_DAY
    return DutyTimeSpan.CAPITAL_NIGHT.duty_date_for(local), DutyTimeSpan.CAPITAL_NIGHT


def resolve(
    schedules: Sequence[PharmacySchedule],
    at: datetime,
    region: Optional[Region] = None,
) -> Optional[Tuple[PharmacySchedule, DutyTimeSpan]]:
    """Return the active ``(schedule, span)`` at ``at``, or ``None`` on a gap."""

    pattern = shift_pattern(schedules)
    if pattern is None:
        return None

    label = region.id if region is not None else "region"
    local = _local(at)

    if pattern is ShiftPattern.SINGLE:
        schedule = find_schedule(local.date(), schedules)
        if schedule is None:
            LOGGER.info("[%s] no entry for %s", label, local.date())
            return None
        return schedule, DutyTimeSpan.FULL_DAY

    day, span = duty_time_info(local)
    schedule = find_schedule(day, schedules)
    if schedule is None or span not in schedule.spans:
        LOGGER.info("[%s] no %s entry for %s", label, span.key, day)
        return None
    return schedule, span


def find_zone_pharmacies(
    schedules: Iterable[PharmacySchedule],
    day: date,
    zone_id: str,
) -> Optional[Tuple[Pharmacy, ...]]:
    """Pharmacies of ``zone_id`` on ``day``.

    ``None`` means the day is not in the calendar; an empty tuple means the
    zone had nobody on duty. Unknown zone ids raise ``KeyError``.
    """

    zbs_by_id(zone_id)
    schedule = find_schedule(day, schedules)
    if schedule is None:
        return None
    if not isinstance(schedule, ZBSSchedule):
        return ()
    return schedule.zones.get(zone_id, ())


def is_open_at(
    pharmacy: Pharmacy,
    at: datetime,
    policy: UnknownHoursPolicy = UnknownHoursPolicy.ASSUME_OPEN,
) -> bool:
    if pharmacy.operating_hours is None:
        return policy is UnknownHoursPolicy.ASSUME_OPEN
    return pharmacy.operating_hours.contains(_local(at))


def open_zone_pharmacies(
    schedule: ZBSSchedule,
    zone_id: str,
    at: datetime,
    policy: UnknownHoursPolicy = UnknownHoursPolicy.ASSUME_OPEN,
) -> Tuple[Pharmacy, ...]:
    return tuple(
        pharmacy for pharmacy in schedule.pharmacies_in(zone_id) if is_open_at(pharmacy, at, policy)
    )


def zone_pharmacies_at(
    schedules: Iterable[PharmacySchedule],
    zone_id: str,
    at: datetime,
    policy: UnknownHoursPolicy = UnknownHoursPolicy.ASSUME_OPEN,
) -> Optional[Tuple[Pharmacy, ...]]:
    """Open pharmacies of ``zone_id`` at ``at``, looked up on the local calendar day.

    Returns ``None`` when that day is not in the calendar.
    """

    local = _local(at)
    found = find_zone_pharmacies(schedules, local.date(), zone_id)
    if found is None:
        return None
    return tuple(pharmacy for pharmacy in found if is_open_at(pharmacy, local, policy))


def next_shift_boundary(now: datetime) -> datetime:
    """Return the first 10:15 or 22:00 local instant strictly after ``now``."""

    local = _local(now)
    candidates = (
        datetime.combine(local.date() + timedelta(days=offset), boundary, tzinfo=local.tzinfo)
        for offset in (0, 1)
        for boundary in SHIFT_BOUNDARIES
    )
    return next(candidate for candidate in candidates if candidate > local)


__all__ = [
    "SHIFT_BOUNDARIES",
    "ShiftPattern",
    "UnknownHoursPolicy",
    "UNRECOGNIZED_PATTERN_POLICY",
    "shift_pattern",
    "find_schedule",
    "duty_time_info",
    "resolve",
    "find_zone_pharmacies",
    "is_open_at",
    "open_zone_pharmacies",
    "zone_pharmacies_at",
    "next_shift_boundary",
]
