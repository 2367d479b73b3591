"""Read-time status derivation"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from domain.entities import ReservationDetails
from domain.enums import ReservationStatus
from domain.value_objects import to_utc_date, utc_midnight

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _end_instant(end_date: Any) -> Optional[datetime]:
    if end_date is None:
        return None
    try:
        return utc_midnight(to_utc_date(end_date))
    except (TypeError, ValueError, OverflowError):
        return None


def is_past(end_date: Any, now: datetime) -> bool:
    """True when end_date is a readable date whose start lies before ``now``"""
    end = _end_instant(end_date)
    return end is not None and end < now


@dataclass(frozen=True)
class ReservationView:
    details: ReservationDetails
    computed_status: ReservationStatus
    is_past: bool


def with_computed_status(
    items: Iterable[ReservationDetails], clock: Clock = utc_now
) -> List[ReservationView]:
    """Annotate reservations with their display status.

    The stored status is left untouched. ``computed_status`` becomes ``past``
    once the end date has gone by and mirrors the stored status otherwise.
    """
    now = clock()
    derived = []
    for item in items:
        past = is_past(item.reservation.end_date, now)
        computed = ReservationStatus.PAST if past else item.reservation.status
        derived.append(ReservationView(
            details=item,
            computed_status=computed,
            is_past=computed == ReservationStatus.PAST
        ))
    return derived
