from src.station_checkin.station_checkin.core.enums import MatchedBy, MemberStatus, ScanStatus
from src.station_checkin.station_checkin.kiosk.scan_resolver import ScanResolver

from tests.fakes import make_member


def _resolver(world):
    return ScanResolver(world.members)


def test_tag_match(world):
    r = _resolver(world).resolve("RFID-ALEX", world.kiosk)
    assert r.is_resolved
    assert r.member.member_id == 1
    assert r.matched_by == MatchedBy.TAG


def test_member_number_match(world):
    r = _resolver(world).resolve(" 12345678 ", world.kiosk)
    assert r.is_resolved
    assert r.member.member_id == 1
    assert r.matched_by == MatchedBy.NUMBER


def test_phone_match_with_formatting(world):
    r = _resolver(world).resolve("+61 412 345 678", world.kiosk)
    assert r.is_resolved
    assert r.member.member_id == 1
    assert r.matched_by == MatchedBy.PHONE


def test_digits_fall_back_to_phone_when_no_number_matches(world):
    r = _resolver(world).resolve("0412345678", world.kiosk)
    assert r.matched_by == MatchedBy.PHONE


def test_shared_phone_is_ambiguous_with_exactly_the_sharers(world):
    r = _resolver(world).resolve("0400 111 222", world.kiosk)
    assert r.outcome == ScanStatus.AMBIGUOUS
    assert [c.member_id for c in r.candidates] == [3, 2]  # Brown before Smith
    assert r.candidates[0].member_number == "33334444"


def test_ambiguity_ignores_inactive_and_visitor_rows(world):
    world.members.members[7] = make_member(7, "77778888", "Kim", "Away", mobile="0400111222", status=MemberStatus.DISABLED)
    world.members.members[8] = make_member(8, "VIS-x-1", "Vic", "Visitor", mobile="0400111222", visitor=True)
    world.members.members[9] = make_member(9, "99990000", "Lee", "Adams", mobile="0400111222")

    r = _resolver(world).resolve("0400111222", world.kiosk)
    assert r.outcome == ScanStatus.AMBIGUOUS
    assert [c.member_id for c in r.candidates] == [9, 3, 2]


def test_empty_and_unmatched_input_is_unknown(world):
    resolver = _resolver(world)
    assert resolver.resolve("", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve("   ", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve(None, world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve("NO-SUCH-TAG", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve("99999999", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve("0411000000", world.kiosk).outcome == ScanStatus.UNKNOWN


def test_disabled_member_by_tag_or_number(world):
    resolver = _resolver(world)
    assert resolver.resolve("RFID-DANA", world.kiosk).outcome == ScanStatus.DISABLED
    assert resolver.resolve("44445555", world.kiosk).outcome == ScanStatus.DISABLED


def test_archived_member_is_unknown(world):
    resolver = _resolver(world)
    assert resolver.resolve("55556666", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve("0499000111", world.kiosk).outcome == ScanStatus.UNKNOWN


def test_lookups_are_scoped_to_the_kiosk_organisation(world):
    resolver = _resolver(world)
    assert resolver.resolve("RFID-FAR", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve("66667777", world.kiosk).outcome == ScanStatus.UNKNOWN


def test_inactive_tag_does_not_match(world):
    world.members.add_tag(2, "RFID-OLD", active=False)
    assert _resolver(world).resolve("RFID-OLD", world.kiosk).outcome == ScanStatus.UNKNOWN


def test_resolve_member_id(world):
    resolver = _resolver(world)
    assert resolver.resolve_member_id("2", world.kiosk).member.member_id == 2
    assert resolver.resolve_member_id(4, world.kiosk).outcome == ScanStatus.DISABLED
    assert resolver.resolve_member_id(5, world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve_member_id(6, world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve_member_id("abc", world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve_member_id(None, world.kiosk).outcome == ScanStatus.UNKNOWN
    assert resolver.resolve_member_id(404, world.kiosk).outcome == ScanStatus.UNKNOWN
