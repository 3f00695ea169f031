from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SessionStatus


@dataclass(frozen=True)
class Session:
    """Domain entity: one check-in interval of a member at a station."""

    session_id: int
    organisation_id: int
    station_id: int
    member_id: int
    device_id: Optional[int]
    start_time: datetime
    status: SessionStatus
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    visitor_agency: Optional[str] = None
    visitor_purpose: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN


@dataclass(frozen=True)
class SessionView:
    """Read-model: session joined with the member's display fields."""

    session_id: int
    member_id: int
    first_name: str
    last_name: str
    is_visitor: bool
    status: SessionStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    visitor_agency: Optional[str] = None
    visitor_purpose: Optional[str] = None


@dataclass(frozen=True)
class TaskAllocation:
    """One allocation row to write at checkout, with the category snapshot."""

    category_id: int
    minutes: int
    category_code_snapshot: str
    category_name_snapshot: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class ActivityReportRow:
    """Read-model for the activity report (one row per allocation)."""

    session_id: int
    member_id: int
    member_number: str
    first_name: str
    last_name: str
    is_visitor: bool
    station_name: str
    start_time: datetime
    end_time: datetime
    category_code_snapshot: str
    category_name_snapshot: str
    minutes: int
