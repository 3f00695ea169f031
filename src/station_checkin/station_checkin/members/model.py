from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import MemberStatus


@dataclass(frozen=True)
class Member:
    """Domain entity: a brigade member, or a per-visit visitor row.

    Note: Plain data object (no DB access code).
    """

    member_id: int
    organisation_id: int
    member_number: str
    first_name: str
    last_name: str
    mobile: Optional[str]
    mobile_normalized: Optional[str]
    status: MemberStatus
    is_visitor: bool = False

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE


@dataclass(frozen=True)
class MemberTag:
    tag_id: int
    organisation_id: int
    member_id: int
    tag_value: str
    active: bool = True


@dataclass(frozen=True)
class MemberChanges:
    """Validated partial update; None means "leave unchanged"."""

    member_number: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    mobile: Optional[str] = None
    mobile_normalized: Optional[str] = None
    status: Optional[MemberStatus] = None

    def as_columns(self) -> dict:
        columns = {
            "member_number": self.member_number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "mobile": self.mobile,
            "mobile_normalized": self.mobile_normalized,
            "status": self.status.value if self.status else None,
        }
        return {k: v for k, v in columns.items() if v is not None}
