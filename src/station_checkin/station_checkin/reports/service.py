from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from ..auth.context import AdminContext
from ..categories.repository import CategoryRepository
from ..common.datetime_utils import to_iso
from ..core.exceptions import ValidationError
from ..members.repository import MemberRepository
from ..sessions.repository import SessionRepository

REPORT_FIELDS = [
    "session_id",
    "member_number",
    "first_name",
    "last_name",
    "is_visitor",
    "station",
    "start_time",
    "end_time",
    "category_code",
    "category_name",
    "minutes",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    total_minutes: int


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class ActivityReportService:
    """Minutes per activity over a date range (UTC days, end inclusive).

    Rows carry the category code and name recorded at checkout, not the
    category's current values.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        members: MemberRepository,
        categories: CategoryRepository,
    ):
        self._sessions = sessions
        self._members = members
        self._categories = categories

    def build(self, admin: AdminContext, *, start: date, end: date) -> ReportData:
        if end < start:
            raise ValidationError("bad_range")

        start_at = datetime.combine(start, time.min, tzinfo=timezone.utc)
        end_at = datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
        query_rows = self._sessions.get_report_rows(organisation_id=admin.organisation_id, start=start_at, end=end_at)

        out_rows: list[dict] = []
        summary_map: dict[str, dict] = {}
        total = 0

        for r in query_rows:
            out_rows.append(
                {
                    "session_id": r.session_id,
                    "member_number": r.member_number,
                    "first_name": r.first_name,
                    "last_name": r.last_name,
                    "is_visitor": r.is_visitor,
                    "station": r.station_name,
                    "start_time": to_iso(r.start_time),
                    "end_time": to_iso(r.end_time),
                    "category_code": r.category_code_snapshot,
                    "category_name": r.category_name_snapshot,
                    "minutes": r.minutes,
                }
            )
            total += r.minutes

            s = summary_map.get(r.category_code_snapshot)
            if not s:
                s = {
                    "category_code": r.category_code_snapshot,
                    "category_name": r.category_name_snapshot,
                    "minutes": 0,
                }
                summary_map[r.category_code_snapshot] = s
            s["minutes"] += r.minutes

        summary = sorted(summary_map.values(), key=lambda x: x["category_code"])
        for s in summary:
            s["hours"] = _hhmm(s["minutes"])
        return ReportData(rows=out_rows, summary=summary, total_minutes=total)

    def dashboard_counts(self, admin: AdminContext) -> dict:
        org_id = admin.organisation_id
        return {
            "members": self._members.count_members(org_id),
            "openSessions": self._sessions.count_open(org_id),
            "categories": self._categories.count_for_organisation(org_id),
        }
