import pytest

from src.station_checkin.station_checkin.core.enums import MemberStatus, ScanStatus
from src.station_checkin.station_checkin.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_list_excludes_visitors_and_other_orgs(world, fixed_now):
    world.container.kiosk_service.visitor_check_in(world.kiosk, first_name="Pat", now=fixed_now)
    members = world.container.member_service.list_members(world.admin)
    assert [m.last_name for m in members] == ["Brown", "Demo", "Off", "Smith", "Timer"]


def test_create_member_normalises_mobile(world):
    member = world.container.member_service.create_member(
        world.admin, member_number="87654321", first_name=" Casey ", last_name="New", mobile="+61 401 222 333"
    )
    assert member.first_name == "Casey"
    assert member.mobile_normalized == "0401222333"
    assert member.status == MemberStatus.ACTIVE


@pytest.mark.parametrize(
    "kwargs, reason",
    [
        ({"member_number": "1234567"}, "member_number_invalid"),
        ({"member_number": "abcdefgh"}, "member_number_invalid"),
        ({"first_name": ""}, "first_name_required"),
        ({"last_name": None}, "last_name_required"),
        ({"mobile": "02 9999 0000"}, "mobile_invalid"),
    ],
)
def test_create_member_validation(world, kwargs, reason):
    data = {"member_number": "87654321", "first_name": "Casey", "last_name": "New", "mobile": None}
    data.update(kwargs)
    with pytest.raises(ValidationError) as exc:
        world.container.member_service.create_member(world.admin, **data)
    assert exc.value.reason == reason


def test_duplicate_member_number_conflicts(world):
    with pytest.raises(ConflictError):
        world.container.member_service.create_member(
            world.admin, member_number="12345678", first_name="Dup", last_name="Licate"
        )


def test_update_assigns_and_clears_tag(world, fixed_now):
    svc = world.container.member_service

    detail = svc.update_member(world.admin, 2, first_name="Samuel", rfid_tag="RFID-SAM")
    assert detail.member.first_name == "Samuel"
    assert detail.member.last_name == "Smith"
    assert detail.rfid_tag == "RFID-SAM"
    assert world.container.kiosk_service.scan(world.kiosk, "RFID-SAM", now=fixed_now).member.member_id == 2

    detail = svc.update_member(world.admin, 2, rfid_tag="")
    assert detail.rfid_tag is None


def test_update_status_and_invalid_status(world):
    svc = world.container.member_service
    assert svc.update_member(world.admin, 4, status="active").member.status == MemberStatus.ACTIVE
    with pytest.raises(ValidationError) as exc:
        svc.update_member(world.admin, 4, status="retired")
    assert exc.value.reason == "status_invalid"


def test_archive_hides_member_from_kiosk_but_keeps_row(world, fixed_now):
    svc = world.container.member_service
    svc.archive_member(world.admin, 1)

    assert world.members.get_by_id(1).status == MemberStatus.ARCHIVED
    assert world.container.kiosk_service.scan(world.kiosk, "12345678", now=fixed_now).status == ScanStatus.UNKNOWN


def test_members_of_other_org_or_visitors_are_not_found(world, fixed_now):
    svc = world.container.member_service
    with pytest.raises(NotFoundError):
        svc.get_member(world.admin, 6)

    sid = world.container.kiosk_service.visitor_check_in(world.kiosk, first_name="Pat", now=fixed_now).session_id
    visitor_id = world.sessions.get_by_id(sid).member_id
    with pytest.raises(NotFoundError):
        svc.get_member(world.admin, visitor_id)
