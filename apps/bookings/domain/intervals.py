"""
Interval Algebra

Pure wall-clock interval helpers used by availability resolution and by
the store when it checks a venue for collisions:
- overlaps: intersection test between two ranges
- is_busy: buffered collision check of a proposed meeting
- clip_to_hours: drop candidates outside venue operating hours
"""

from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, List, Sequence, Union

from shared.domain.base import ValueObject
from shared.domain.value_objects import TimeRange

DEFAULT_BUFFER_MINUTES = 15

Slot = Union[TimeRange, datetime]


@dataclass(frozen=True)
class VenueHours(ValueObject):
    """Daily operating window of a venue, e.g. 09:00-17:00."""
    opens_at: time
    closes_at: time

    def admits(self, moment: datetime) -> bool:
        """
        Check that a slot starting at ``moment`` is inside the hours

        Only the starting hour is compared, so a venue closing at 17:00
        still admits a slot at 16:00 but not one at 17:00. Minutes of the
        opening and closing times are ignored: a venue opening at 09:30
        admits 09:00, and one closing at 17:30 refuses 17:00.
        """
        return self.opens_at.hour <= moment.hour < self.closing_hour

    @property
    def closing_hour(self) -> int:
        """Closing hour, with a close at or before opening read as midnight"""
        if self.closes_at <= self.opens_at:
            return 24
        return self.closes_at.hour


def overlaps(a: TimeRange, b: TimeRange, inclusive: bool = False) -> bool:
    """Standard interval intersection test."""
    return a.overlaps_with(b, inclusive=inclusive)


def is_busy(
    proposed_start: datetime,
    proposed_duration: int,
    conflicts: Iterable[TimeRange],
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> bool:
    """
    Check whether a proposed meeting collides with existing commitments

    The proposed interval [start, start + duration] is widened by
    ``buffer_minutes`` on both sides and compared inclusively, so a
    meeting ending exactly when the buffer starts still counts as busy.

    Example:
        Commitment 14:00-15:30, proposal 15:00 for 60 minutes with a
        15 minute buffer -> [14:45, 16:15] overlaps -> busy.
    """
    proposed = TimeRange.starting_at(proposed_start, proposed_duration).expanded(buffer_minutes)
    return any(proposed.overlaps_with(conflict, inclusive=True) for conflict in conflicts)


def _slot_start(slot: Slot) -> datetime:
    return slot.start if isinstance(slot, TimeRange) else slot


def clip_to_hours(slots: Sequence[Slot], hours: VenueHours | None) -> List[Slot]:
    """Discard candidate slots that start outside the venue's operating hours."""
    if hours is None:
        return list(slots)
    return [slot for slot in slots if hours.admits(_slot_start(slot))]
