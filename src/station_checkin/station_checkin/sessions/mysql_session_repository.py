from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db, to_db
from ..core.enums import SessionStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ActivityReportRow, Session, SessionView, TaskAllocation
from .repository import SessionRepository

_SESSION_COLUMNS = """
    session_id, organisation_id, station_id, member_id, device_id, start_time, end_time,
    status, duration_minutes, visitor_agency, visitor_purpose
"""

_VIEW_COLUMNS = """
    s.session_id, s.member_id, s.status, s.start_time, s.end_time,
    s.visitor_agency, s.visitor_purpose,
    m.first_name, m.last_name, m.is_visitor
"""


def _session(row: dict) -> Session:
    device_id = row.get("device_id")
    duration = row.get("duration_minutes")
    return Session(
        session_id=int(row["session_id"]),
        organisation_id=int(row["organisation_id"]),
        station_id=int(row["station_id"]),
        member_id=int(row["member_id"]),
        device_id=int(device_id) if device_id is not None else None,
        start_time=from_db(row["start_time"]),
        status=SessionStatus(row["status"]),
        end_time=from_db(row.get("end_time")),
        duration_minutes=int(duration) if duration is not None else None,
        visitor_agency=row.get("visitor_agency"),
        visitor_purpose=row.get("visitor_purpose"),
    )


def _view(row: dict) -> SessionView:
    return SessionView(
        session_id=int(row["session_id"]),
        member_id=int(row["member_id"]),
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        is_visitor=bool(row.get("is_visitor", False)),
        status=SessionStatus(row["status"]),
        start_time=from_db(row["start_time"]),
        end_time=from_db(row.get("end_time")),
        visitor_agency=row.get("visitor_agency"),
        visitor_purpose=row.get("visitor_purpose"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: int) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE session_id=%s", (int(session_id),))
            row = fetchone(cur)
            return _session(row) if row else None

    def get_open_for_member(self, member_id: int) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS} FROM sessions
                WHERE member_id=%s AND status='open'
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (int(member_id),),
            )
            row = fetchone(cur)
            return _session(row) if row else None

    def open_session(
        self,
        *,
        organisation_id: int,
        station_id: int,
        member_id: int,
        device_id: int,
        start_time: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sessions(organisation_id, station_id, member_id, device_id,
                                     start_time, raw_checkin_at, status)
                VALUES(%s,%s,%s,%s,%s,%s,'open')
                """,
                (
                    int(organisation_id),
                    int(station_id),
                    int(member_id),
                    int(device_id),
                    to_db(start_time),
                    to_db(start_time),
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO members(organisation_id, member_number, first_name, last_name,
                                    mobile, mobile_normalized, status, is_visitor)
                VALUES(%s,%s,%s,%s,%s,%s,'active',1)
                """,
                (int(organisation_id), member_number, first_name, last_name, mobile, mobile_normalized),
            )
            member_id = int(cur.lastrowid)

            cur.execute(
                """
                INSERT INTO sessions(organisation_id, station_id, member_id, device_id,
                                     start_time, raw_checkin_at, status, visitor_agency, visitor_purpose)
                VALUES(%s,%s,%s,%s,%s,%s,'open',%s,%s)
                """,
                (
                    int(organisation_id),
                    int(station_id),
                    member_id,
                    int(device_id),
                    to_db(start_time),
                    to_db(start_time),
                    agency,
                    purpose,
                ),
            )
            return member_id, int(cur.lastrowid)

    def close_with_allocations(
        self,
        *,
        session_id: int,
        end_time: datetime,
        duration_minutes: int,
        closed_at: datetime,
        allocations: Sequence[TaskAllocation],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sessions
                SET end_time=%s, status='closed', duration_minutes=%s, raw_checkout_at=%s
                WHERE session_id=%s AND status='open'
                """,
                (to_db(end_time), int(duration_minutes), to_db(closed_at), int(session_id)),
            )
            if cur.rowcount == 0:
                raise ConflictError("not_open")

            cur.executemany(
                """
                INSERT INTO session_tasks(session_id, category_id, minutes, notes,
                                          category_code_snapshot, category_name_snapshot)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        int(session_id),
                        a.category_id,
                        a.minutes,
                        a.notes,
                        a.category_code_snapshot,
                        a.category_name_snapshot,
                    )
                    for a in allocations
                ],
            )

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sessions
                SET end_time=%s, status='closed', duration_minutes=%s, raw_checkout_at=%s,
                    visitor_purpose=%s, visitor_agency=COALESCE(%s, visitor_agency)
                WHERE session_id=%s AND status='open'
                """,
                (to_db(end_time), int(duration_minutes), to_db(closed_at), purpose, agency, int(session_id)),
            )
            if cur.rowcount == 0:
                raise ConflictError("not_open")

    def list_open_for_station(self, organisation_id: int, station_id: int) -> Sequence[SessionView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_VIEW_COLUMNS}
                FROM sessions s
                JOIN members m ON m.member_id = s.member_id
                WHERE s.organisation_id=%s AND s.station_id=%s AND s.status='open'
                ORDER BY s.start_time DESC, s.session_id DESC
                """,
                (int(organisation_id), int(station_id)),
            )
            return [_view(r) for r in fetchall(cur)]

    def get_view(self, *, session_id: int, organisation_id: int, station_id: int) -> Optional[SessionView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_VIEW_COLUMNS}
                FROM sessions s
                JOIN members m ON m.member_id = s.member_id
                WHERE s.session_id=%s AND s.organisation_id=%s AND s.station_id=%s
                """,
                (int(session_id), int(organisation_id), int(station_id)),
            )
            row = fetchone(cur)
            return _view(row) if row else None

    def count_open(self, organisation_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM sessions WHERE organisation_id=%s AND status='open'",
                (int(organisation_id),),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def get_report_rows(
        self,
        *,
        organisation_id: int,
        start: datetime,
        end: datetime,
    ) -> Sequence[ActivityReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.session_id, s.member_id, s.start_time, s.end_time,
                    m.member_number, m.first_name, m.last_name, m.is_visitor,
                    st.name AS station_name,
                    t.category_code_snapshot, t.category_name_snapshot, t.minutes
                FROM sessions s
                JOIN members m ON m.member_id = s.member_id
                JOIN stations st ON st.station_id = s.station_id
                JOIN session_tasks t ON t.session_id = s.session_id
                WHERE s.organisation_id=%s AND s.status='closed'
                  AND s.start_time >= %s AND s.start_time < %s
                ORDER BY s.start_time DESC, s.session_id DESC, t.task_id ASC
                """,
                (int(organisation_id), to_db(start), to_db(end)),
            )
            return [
                ActivityReportRow(
                    session_id=int(r["session_id"]),
                    member_id=int(r["member_id"]),
                    member_number=r["member_number"],
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                    is_visitor=bool(r.get("is_visitor", False)),
                    station_name=r["station_name"],
                    start_time=from_db(r["start_time"]),
                    end_time=from_db(r["end_time"]),
                    category_code_snapshot=r["category_code_snapshot"],
                    category_name_snapshot=r["category_name_snapshot"],
                    minutes=int(r["minutes"]),
                )
                for r in fetchall(cur)
            ]
