from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import MatchedBy, ScanStatus
from ..members.model import Member


@dataclass(frozen=True)
class Candidate:
    """One of several members sharing a scanned mobile number."""

    member_id: int
    first_name: str
    last_name: str
    member_number: str

    @classmethod
    def from_member(cls, member: Member) -> "Candidate":
        return cls(
            member_id=member.member_id,
            first_name=member.first_name,
            last_name=member.last_name,
            member_number=member.member_number,
        )


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a scanned identifier.

    ``outcome`` is None when a single active member was found; otherwise it
    is ``unknown``, ``disabled`` or ``ambiguous``.
    """

    outcome: Optional[ScanStatus] = None
    member: Optional[Member] = None
    matched_by: Optional[MatchedBy] = None
    candidates: Sequence[Candidate] = ()

    @property
    def is_resolved(self) -> bool:
        return self.outcome is None and self.member is not None

    @classmethod
    def unknown(cls) -> "Resolution":
        return cls(outcome=ScanStatus.UNKNOWN)

    @classmethod
    def disabled(cls, member: Member) -> "Resolution":
        return cls(outcome=ScanStatus.DISABLED, member=member)

    @classmethod
    def ambiguous(cls, candidates: Sequence[Candidate]) -> "Resolution":
        return cls(outcome=ScanStatus.AMBIGUOUS, candidates=tuple(candidates))

    @classmethod
    def resolved(cls, member: Member, matched_by: MatchedBy) -> "Resolution":
        return cls(member=member, matched_by=matched_by)


@dataclass(frozen=True)
class ScanResult:
    status: ScanStatus
    member: Optional[Member] = None
    session_id: Optional[int] = None
    start_time: Optional[datetime] = None
    matched_by: Optional[MatchedBy] = None
    candidates: Sequence[Candidate] = ()


@dataclass(frozen=True)
class CheckoutTask:
    category_id: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class CheckoutResult:
    session_id: int
    duration_minutes: int
    allocations: Sequence[tuple[int, int]] = ()
