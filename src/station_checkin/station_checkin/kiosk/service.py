from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..allocation.base import MinuteAllocator
from ..allocation.even_split import EvenSplitAllocator
from ..auth.context import KioskContext
from ..categories.repository import CategoryRepository
from ..common.datetime_utils import elapsed_minutes, parse_iso_datetime, utc_now
from ..common.phone import normalize_au_mobile
from ..common.validators import optional_text, require_id, require_non_empty
from ..core.constants import (
    DEFAULT_CHECKOUT_TOLERANCE_MINUTES,
    DEFAULT_VISITOR_END_MAX_FUTURE_HOURS,
    VISITOR_DEFAULT_LAST_NAME,
    VISITOR_NUMBER_PREFIX,
)
from ..core.enums import ScanStatus, SessionStatus
from ..core.exceptions import ConflictError, DisabledError, NotFoundError, ValidationError
from ..members.model import Member
from ..sessions.model import Session, SessionView, TaskAllocation
from ..sessions.repository import SessionRepository
from .model import CheckoutResult, CheckoutTask, Resolution, ScanResult
from .scan_resolver import ScanResolver

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def parse_checkout_tasks(raw: Any) -> list[CheckoutTask]:
    """Read ``[{categoryId, notes?}, ...]`` (bare ids are accepted too)."""
    if not isinstance(raw, list) or not raw:
        raise ValidationError("no_tasks")

    tasks: list[CheckoutTask] = []
    for item in raw:
        if isinstance(item, CheckoutTask):
            tasks.append(item)
            continue
        if isinstance(item, dict):
            category_id = require_id(item.get("categoryId"), "category_id")
            notes = optional_text(item.get("notes"))
        else:
            category_id = require_id(item, "category_id")
            notes = None
        tasks.append(CheckoutTask(category_id=category_id, notes=notes))
    return tasks


class KioskService:
    """Use cases behind the kiosk: scan to check in, check out, list who is in."""

    def __init__(
        self,
        sessions: SessionRepository,
        categories: CategoryRepository,
        resolver: ScanResolver,
        *,
        allocator: Optional[MinuteAllocator] = None,
        tolerance_minutes: int = DEFAULT_CHECKOUT_TOLERANCE_MINUTES,
        visitor_end_max_future_hours: int = DEFAULT_VISITOR_END_MAX_FUTURE_HOURS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._sessions = sessions
        self._categories = categories
        self._resolver = resolver
        self._allocator = allocator or EvenSplitAllocator()
        self._tolerance_minutes = int(tolerance_minutes)
        self._visitor_future = timedelta(hours=int(visitor_end_max_future_hours))
        self._clock = clock

    # ----- check-in -----

    def scan(self, kiosk: KioskContext, identifier: Any, *, now: Optional[datetime] = None) -> ScanResult:
        return self._complete(self._resolver.resolve(identifier, kiosk), kiosk, now=now)

    def scan_as(self, kiosk: KioskContext, member_id: Any, *, now: Optional[datetime] = None) -> ScanResult:
        return self._complete(self._resolver.resolve_member_id(member_id, kiosk), kiosk, now=now)

    def _complete(self, resolution: Resolution, kiosk: KioskContext, *, now: Optional[datetime]) -> ScanResult:
        if not resolution.is_resolved:
            return ScanResult(
                status=resolution.outcome or ScanStatus.UNKNOWN,
                member=resolution.member,
                candidates=resolution.candidates,
            )
        try:
            result = self.check_in(resolution.member, kiosk, now=now)
        except DisabledError:
            return ScanResult(status=ScanStatus.DISABLED, member=resolution.member)
        return ScanResult(
            status=result.status,
            member=result.member,
            session_id=result.session_id,
            start_time=result.start_time,
            matched_by=resolution.matched_by,
        )

    def check_in(self, member: Member, kiosk: KioskContext, *, now: Optional[datetime] = None) -> ScanResult:
        """Open a session for the member, or report the one already open."""
        if not member.is_active:
            raise DisabledError("member_disabled")

        existing = self._sessions.get_open_for_member(member.member_id)
        if existing:
            return self._already_in(member, existing)

        now = now or self._clock()
        try:
            session_id = self._sessions.open_session(
                organisation_id=kiosk.organisation_id,
                station_id=kiosk.station_id,
                member_id=member.member_id,
                device_id=kiosk.device_id,
                start_time=now,
            )
        except ConflictError:
            # Lost a double-submit race on the open-session unique key.
            existing = self._sessions.get_open_for_member(member.member_id)
            if not existing:
                raise
            return self._already_in(member, existing)

        logger.info(
            "check-in member=%s session=%s station=%s device=%s",
            member.member_id, session_id, kiosk.station_id, kiosk.device_id,
        )
        return ScanResult(status=ScanStatus.CHECKED_IN, member=member, session_id=session_id, start_time=now)

    @staticmethod
    def _already_in(member: Member, session: Session) -> ScanResult:
        return ScanResult(
            status=ScanStatus.ALREADY_IN,
            member=member,
            session_id=session.session_id,
            start_time=session.start_time,
        )

    # ----- check-out -----

    def check_out(
        self,
        kiosk: KioskContext,
        *,
        session_id: Any,
        end_time: Any,
        tasks: Any,
        minutes: Any = None,
        now: Optional[datetime] = None,
    ) -> CheckoutResult:
        end = parse_iso_datetime(end_time)
        task_list = parse_checkout_tasks(tasks)
        sid = require_id(session_id, "session_id")
        now = now or self._clock()

        session = self._sessions.get_by_id(sid)
        if (
            not session
            or session.organisation_id != kiosk.organisation_id
            or session.station_id != kiosk.station_id
        ):
            raise NotFoundError("session_not_found")
        if not session.is_open:
            raise ConflictError("not_open")

        self._check_end_bounds(session.start_time, end, latest=now + timedelta(minutes=self._tolerance_minutes))

        elapsed = elapsed_minutes(session.start_time, end)
        total = self._effective_minutes(elapsed, minutes)

        unique_tasks: list[CheckoutTask] = []
        seen: set[int] = set()
        for task in task_list:
            if task.category_id in seen:
                continue
            seen.add(task.category_id)
            unique_tasks.append(task)

        ids = [t.category_id for t in unique_tasks]
        categories = {c.category_id: c for c in self._categories.get_many(kiosk.organisation_id, ids)}
        if len(categories) != len(ids):
            raise NotFoundError("category_not_found")

        notes = {t.category_id: t.notes for t in unique_tasks}
        split = self._allocator.allocate(total, ids)
        allocations = [
            TaskAllocation(
                category_id=category_id,
                minutes=share,
                category_code_snapshot=categories[category_id].code,
                category_name_snapshot=categories[category_id].name,
                notes=notes.get(category_id),
            )
            for category_id, share in split
        ]

        self._sessions.close_with_allocations(
            session_id=session.session_id,
            end_time=end,
            duration_minutes=total,
            closed_at=now,
            allocations=allocations,
        )
        logger.info(
            "check-out session=%s member=%s minutes=%s categories=%s",
            session.session_id, session.member_id, total, ids,
        )
        return CheckoutResult(session_id=session.session_id, duration_minutes=total, allocations=split)

    def _effective_minutes(self, elapsed: int, minutes: Any) -> int:
        """Caller minutes (a kiosk may show rounded time) clamped to what really elapsed."""
        if minutes is None or minutes == "":
            return elapsed
        if isinstance(minutes, bool):
            raise ValidationError("bad_minutes")
        try:
            requested = int(minutes)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("bad_minutes")
        return min(max(requested, 0), elapsed + self._tolerance_minutes)

    @staticmethod
    def _check_end_bounds(start: datetime, end: datetime, *, latest: datetime) -> None:
        if end < start:
            raise ValidationError("end_before_start")
        if end > latest:
            raise ValidationError("end_in_future")

    # ----- read models -----

    def active_sessions(self, kiosk: KioskContext) -> Sequence[SessionView]:
        return self._sessions.list_open_for_station(kiosk.organisation_id, kiosk.station_id)

    def session_detail(self, kiosk: KioskContext, session_id: Any) -> SessionView:
        sid = require_id(session_id, "session_id")
        view = self._sessions.get_view(
            session_id=sid,
            organisation_id=kiosk.organisation_id,
            station_id=kiosk.station_id,
        )
        if not view:
            raise NotFoundError("session_not_found")
        return view

    # ----- visitors -----

    def visitor_check_in(
        self,
        kiosk: KioskContext,
        *,
        first_name: Optional[str],
        last_name: Optional[str] = None,
        mobile: Optional[str] = None,
        agency: Optional[str] = None,
        purpose: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScanResult:
        """Every visit gets its own visitor row, so visitors never collide."""
        first = require_non_empty(first_name, "first_name")
        last = optional_text(last_name) or VISITOR_DEFAULT_LAST_NAME
        mobile_text = optional_text(mobile)
        now = now or self._clock()

        member_id, session_id = self._sessions.open_visitor_session(
            organisation_id=kiosk.organisation_id,
            station_id=kiosk.station_id,
            device_id=kiosk.device_id,
            start_time=now,
            member_number=self._visitor_number(now),
            first_name=first,
            last_name=last,
            mobile=mobile_text,
            mobile_normalized=normalize_au_mobile(mobile_text),
            agency=optional_text(agency),
            purpose=optional_text(purpose),
        )
        logger.info("visitor check-in member=%s session=%s station=%s", member_id, session_id, kiosk.station_id)
        return ScanResult(status=ScanStatus.CHECKED_IN, session_id=session_id, start_time=now)

    def visitor_check_out(
        self,
        kiosk: KioskContext,
        *,
        session_id: Any,
        end_time: Any,
        purpose: Optional[str],
        agency: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutResult:
        end = parse_iso_datetime(end_time)
        purpose_text = require_non_empty(purpose, "purpose")
        view = self.session_detail(kiosk, session_id)
        if not view.is_visitor:
            raise NotFoundError("session_not_found")
        if view.status != SessionStatus.OPEN:
            raise ConflictError("not_open")

        now = now or self._clock()
        self._check_end_bounds(view.start_time, end, latest=now + self._visitor_future)
        duration = elapsed_minutes(view.start_time, end)

        self._sessions.close_visitor_session(
            session_id=view.session_id,
            end_time=end,
            duration_minutes=duration,
            closed_at=now,
            purpose=purpose_text,
            agency=optional_text(agency),
        )
        logger.info("visitor check-out session=%s minutes=%s", view.session_id, duration)
        return CheckoutResult(session_id=view.session_id, duration_minutes=duration)

    @staticmethod
    def _visitor_number(now: datetime) -> str:
        stamp = _base36(int(now.timestamp() * 1000))
        return f"{VISITOR_NUMBER_PREFIX}-{stamp}-{secrets.token_hex(3)}"
