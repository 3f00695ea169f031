from datetime import timedelta

import pytest

from src.station_checkin.station_checkin.common.datetime_utils import to_iso
from src.station_checkin.station_checkin.core.enums import ScanStatus, SessionStatus
from src.station_checkin.station_checkin.core.exceptions import ConflictError, NotFoundError, ValidationError


def _visitor_in(world, now, **kwargs):
    kwargs.setdefault("first_name", "Pat")
    return world.container.kiosk_service.visitor_check_in(world.kiosk, now=now, **kwargs)


def test_visitor_check_in_creates_fresh_visitor_row_each_time(world, fixed_now):
    first = _visitor_in(world, fixed_now, mobile="0412 000 111", agency="SES")
    second = _visitor_in(world, fixed_now, mobile="0412 000 111", agency="SES")

    assert first.status == second.status == ScanStatus.CHECKED_IN
    assert first.session_id != second.session_id

    a = world.members.get_by_id(world.sessions.get_by_id(first.session_id).member_id)
    b = world.members.get_by_id(world.sessions.get_by_id(second.session_id).member_id)
    assert a.member_id != b.member_id
    assert a.is_visitor and b.is_visitor
    assert a.last_name == "Visitor"
    assert a.member_number.startswith("VIS-")
    assert a.member_number != b.member_number
    assert a.mobile_normalized == "0412000111"


def test_visitor_phone_never_resolves_at_scan(world, fixed_now):
    _visitor_in(world, fixed_now, mobile="0412000111")
    assert world.container.kiosk_service.scan(world.kiosk, "0412000111", now=fixed_now).status == ScanStatus.UNKNOWN


def test_visitor_requires_first_name(world, fixed_now):
    with pytest.raises(ValidationError) as exc:
        _visitor_in(world, fixed_now, first_name="  ")
    assert exc.value.reason == "first_name_required"


def test_visitor_shows_in_active_list(world, fixed_now):
    _visitor_in(world, fixed_now, last_name="Jones")
    active = world.container.kiosk_service.active_sessions(world.kiosk)
    assert [(v.first_name, v.last_name, v.is_visitor) for v in active] == [("Pat", "Jones", True)]


def test_visitor_check_out_records_purpose_and_duration(world, fixed_now):
    sid = _visitor_in(world, fixed_now, agency="SES").session_id
    end = fixed_now + timedelta(minutes=95)

    result = world.container.kiosk_service.visitor_check_out(
        world.kiosk, session_id=sid, end_time=to_iso(end), purpose="Equipment check", now=end
    )

    assert result.duration_minutes == 95
    session = world.sessions.get_by_id(sid)
    assert session.status == SessionStatus.CLOSED
    assert session.visitor_purpose == "Equipment check"
    assert session.visitor_agency == "SES"


def test_visitor_check_out_requires_purpose(world, fixed_now):
    sid = _visitor_in(world, fixed_now).session_id
    with pytest.raises(ValidationError) as exc:
        world.container.kiosk_service.visitor_check_out(
            world.kiosk, session_id=sid, end_time=to_iso(fixed_now), purpose="", now=fixed_now
        )
    assert exc.value.reason == "purpose_required"


def test_visitor_end_may_be_hours_ahead_but_not_beyond_limit(world, fixed_now):
    svc = world.container.kiosk_service
    sid = _visitor_in(world, fixed_now).session_id

    with pytest.raises(ValidationError) as exc:
        svc.visitor_check_out(
            world.kiosk,
            session_id=sid,
            end_time=to_iso(fixed_now + timedelta(hours=6, minutes=1)),
            purpose="Meeting",
            now=fixed_now,
        )
    assert exc.value.reason == "end_in_future"

    result = svc.visitor_check_out(
        world.kiosk, session_id=sid, end_time=to_iso(fixed_now + timedelta(hours=5)), purpose="Meeting", now=fixed_now
    )
    assert result.duration_minutes == 300


def test_visitor_check_out_twice_is_conflict(world, fixed_now):
    svc = world.container.kiosk_service
    sid = _visitor_in(world, fixed_now).session_id
    svc.visitor_check_out(world.kiosk, session_id=sid, end_time=to_iso(fixed_now), purpose="x", now=fixed_now)
    with pytest.raises(ConflictError):
        svc.visitor_check_out(world.kiosk, session_id=sid, end_time=to_iso(fixed_now), purpose="x", now=fixed_now)


def test_member_session_is_not_a_visitor_session(world, fixed_now):
    svc = world.container.kiosk_service
    sid = svc.scan(world.kiosk, "12345678", now=fixed_now).session_id
    with pytest.raises(NotFoundError):
        svc.visitor_check_out(world.kiosk, session_id=sid, end_time=to_iso(fixed_now), purpose="x", now=fixed_now)
