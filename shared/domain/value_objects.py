"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- TimeRange: Represents a wall-clock interval (meeting, hold, conflict)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('GBP', 'EUR', 'USD')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'GBP'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")
        return Money(self.amount - other.amount, self.currency)

    @property
    def symbol(self) -> str:
        return {'GBP': '£', 'EUR': '€', 'USD': '$'}[self.currency]

    def display(self) -> str:
        """Short human form used in user-facing messages, e.g. £1.99"""
        return f"{self.symbol}{self.amount:.2f}"

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


def _parse_timestamp(raw: str) -> datetime:
    value = raw.strip().strip('"').strip()
    if not value:
        raise ValueError("Empty timestamp in range literal")
    # Postgres renders "2025-01-01 18:00:00+00"; fromisoformat needs "+00:00"
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    elif ':' in value and value[-3] in '+-' and value[-2:].isdigit():
        value = value + ':00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents an interval from start (inclusive) to end (exclusive) on the
    wall clock. Used for meetings, holds, bookings and conflict intervals.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    @classmethod
    def starting_at(cls, start: datetime, minutes: int) -> 'TimeRange':
        return cls(start, start + timedelta(minutes=minutes))

    @classmethod
    def parse(cls, literal: str) -> 'TimeRange':
        """
        Parse a bracketed range literal such as '["2025-01-01 18:00:00+00","2025-01-01 19:30:00+00")'

        Either bracket style is accepted; naive timestamps are read as UTC.
        """
        if not literal or ',' not in literal:
            raise ValueError(f"Invalid time range literal: {literal!r}")
        body = literal.strip()
        if body[0] in '[(':
            body = body[1:]
        if body and body[-1] in '])':
            body = body[:-1]
        start_raw, _, end_raw = body.partition(',')
        return cls(_parse_timestamp(start_raw), _parse_timestamp(end_raw))

    def to_literal(self) -> str:
        """Render as the half-open literal persisted with bookings and holds"""
        return f"[{self.start.isoformat()},{self.end.isoformat()})"

    def overlaps_with(self, other: 'TimeRange', inclusive: bool = False) -> bool:
        """
        Check if this range overlaps with another

        With inclusive=False adjacent ranges do not overlap (half-open).
        With inclusive=True touching endpoints count as an overlap.

        Examples:
            - 14:00-15:00 vs 15:00-16:00 -> False
            - 14:00-15:00 vs 15:00-16:00, inclusive -> True
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        if inclusive:
            return self.start <= other.end and other.start <= self.end
        return self.start < other.end and other.start < self.end

    def expanded(self, minutes: int) -> 'TimeRange':
        """Range widened by the given number of minutes on both sides"""
        margin = timedelta(minutes=minutes)
        return TimeRange(self.start - margin, self.end + margin)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def __str__(self):
        return f"{self.start:%d.%m.%Y %H:%M} - {self.end:%H:%M}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"
