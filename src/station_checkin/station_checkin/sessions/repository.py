from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import ActivityReportRow, Session, SessionView, TaskAllocation


class SessionRepository(Protocol):
    """Repository interface for check-in sessions.

    Every write that touches more than one row runs in a single transaction.
    Open-session creation raises ``ConflictError`` when the member already has
    an open session (unique index on the open member).
    """

    def get_by_id(self, session_id: int) -> Optional[Session]:
        raise NotImplementedError

    def get_open_for_member(self, member_id: int) -> Optional[Session]:
        raise NotImplementedError

    def open_session(
        self,
        *,
        organisation_id: int,
        station_id: int,
        member_id: int,
        device_id: int,
        start_time: datetime,
    ) -> int:
        raise NotImplementedError

    def open_visitor_session(
        self,
        *,
        organisation_id: int,
        station_id: int,
        device_id: int,
        start_time: datetime,
        member_number: str,
        first_name: str,
        last_name: str,
        mobile: Optional[str],
        mobile_normalized: Optional[str],
        agency: Optional[str],
        purpose: Optional[str],
    ) -> tuple[int, int]:
        """Create the visitor row and its open session; returns (member_id, session_id)."""

        raise NotImplementedError

    def close_with_allocations(
        self,
        *,
        session_id: int,
        end_time: datetime,
        duration_minutes: int,
        closed_at: datetime,
        allocations: Sequence[TaskAllocation],
    ) -> None:
        """Close an open session and write its allocation rows atomically.

        Raises ``ConflictError("not_open")`` if the session is no longer open.
        """

        raise NotImplementedError

    def close_visitor_session(
        self,
        *,
        session_id: int,
        end_time: datetime,
        duration_minutes: int,
        closed_at: datetime,
        purpose: str,
        agency: Optional[str],
    ) -> None:
        raise NotImplementedError

    def list_open_for_station(self, organisation_id: int, station_id: int) -> Sequence[SessionView]:
        raise NotImplementedError

    def get_view(self, *, session_id: int, organisation_id: int, station_id: int) -> Optional[SessionView]:
        raise NotImplementedError

    def count_open(self, organisation_id: int) -> int:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        organisation_id: int,
        start: datetime,
        end: datetime,
    ) -> Sequence[ActivityReportRow]:
        raise NotImplementedError
