"""
Scheduling Domain Entities

Plain values exchanged between the scheduling services, the store and
the API layer:
- MeetingContext: professional or social meeting, with default durations
- AvailabilityView: whose commitments filter the candidate slots
- SwapEligibility: verdict of the swap eligibility check
- ServiceResult: structured outcome of command-style operations
"""

from dataclasses import dataclass
from enum import Enum

from apps.bookings.domain.errors import SchedulingError


class MeetingContext(Enum):
    """Meeting context selects the calendar link and the default duration"""
    BUSINESS = 'business'
    SOCIAL = 'social'

    @property
    def default_duration(self) -> int:
        return 60 if self is MeetingContext.BUSINESS else 90


class AvailabilityView(Enum):
    """
    Perspective used when filtering candidate slots

    - MUTUAL: free for both parties
    - INITIATOR_ONLY: organizer reviewing their own outgoing proposal
    - COUNTERPART_ONLY: receiver deciding whether to accept
    """
    MUTUAL = 'mutual'
    INITIATOR_ONLY = 'initiator-only'
    COUNTERPART_ONLY = 'counterpart-only'


@dataclass(frozen=True)
class SwapEligibility:
    """Result of the read-only swap check; message is shown verbatim"""
    allowed: bool
    message: str


@dataclass(frozen=True)
class ServiceResult:
    """
    Outcome of a command-style operation

    An empty result means success. Failures carry the user-facing message
    and the error code so the API layer can render them without special
    casing.
    """
    error: str | None = None
    code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: SchedulingError) -> 'ServiceResult':
        return cls(error=exc.message, code=exc.code)

    def to_dict(self) -> dict:
        return {} if self.ok else {'error': self.error, 'code': self.code}
