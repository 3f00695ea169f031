from datetime import timedelta

import pytest

from src.station_checkin.station_checkin.core.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.station_checkin.station_checkin.devices.service import clamp_expiry_days

from tests.fakes import KIOSK_KEY


def test_authenticate_returns_kiosk_context_and_touches_last_seen(world, fixed_now):
    kiosk = world.container.device_service.authenticate(KIOSK_KEY)
    assert (kiosk.device_id, kiosk.organisation_id, kiosk.station_id) == (1, 1, 1)
    assert kiosk.device_name == "Front door"
    assert world.devices.devices[1].last_seen_at == fixed_now


@pytest.mark.parametrize("key, reason", [(None, "missing_kiosk_key"), ("  ", "missing_kiosk_key"), ("c" * 64, "invalid_kiosk_key")])
def test_authenticate_rejects_missing_or_unknown_keys(world, key, reason):
    with pytest.raises(UnauthorizedError) as exc:
        world.container.device_service.authenticate(key)
    assert exc.value.reason == reason


def test_deactivated_device_stops_authenticating(world):
    svc = world.container.device_service
    svc.deactivate(world.admin, 1)
    assert world.devices.devices[1].kiosk_key == KIOSK_KEY
    with pytest.raises(UnauthorizedError):
        svc.authenticate(KIOSK_KEY)


def test_invite_then_register(world, fixed_now):
    svc = world.container.device_service
    issued = svc.create_invite(world.admin, station_id=2, now=fixed_now)
    assert issued.expires_at == fixed_now + timedelta(days=7)

    typed = issued.passphrase.upper().replace("-", " ")
    registered = svc.register(typed, name="Bay kiosk", now=fixed_now + timedelta(hours=1))

    assert registered.station_id == 2
    assert len(registered.kiosk_key) == 64
    assert svc.authenticate(registered.kiosk_key).station_id == 2
    assert world.devices.devices[registered.device_id].name == "Bay kiosk"


def test_invite_stores_only_a_hash(world, fixed_now):
    issued = world.container.device_service.create_invite(world.admin, station_id=1, now=fixed_now)
    invite = world.devices.invites[issued.invite_id]
    assert invite.passphrase_hash != issued.passphrase
    assert len(invite.passphrase_hash) == 64


def test_invite_can_only_be_used_once(world, fixed_now):
    svc = world.container.device_service
    issued = svc.create_invite(world.admin, station_id=1, now=fixed_now)
    svc.register(issued.passphrase, now=fixed_now)
    with pytest.raises(ConflictError) as exc:
        svc.register(issued.passphrase, now=fixed_now)
    assert exc.value.reason == "used"


def test_expired_or_unknown_invite(world, fixed_now):
    svc = world.container.device_service
    issued = svc.create_invite(world.admin, station_id=1, expires_days=1, now=fixed_now)
    with pytest.raises(NotFoundError) as exc:
        svc.register(issued.passphrase, now=fixed_now + timedelta(days=1, seconds=1))
    assert exc.value.reason == "invalid"

    with pytest.raises(NotFoundError):
        svc.register("never-issued-phrase-0000", now=fixed_now)

    with pytest.raises(ValidationError) as exc:
        svc.register("  ", now=fixed_now)
    assert exc.value.reason == "missing"


def test_invite_for_foreign_station_is_refused(world, fixed_now):
    with pytest.raises(NotFoundError) as exc:
        world.container.device_service.create_invite(world.admin, station_id=3, now=fixed_now)
    assert exc.value.reason == "invalid_station"


@pytest.mark.parametrize("value, expected", [(0, 1), (1, 1), (14, 14), (90, 30), ("5", 5), ("x", 7), (None, 7)])
def test_expiry_days_are_clamped(value, expected):
    assert clamp_expiry_days(value) == expected


def test_overview_and_rename(world, fixed_now):
    svc = world.container.device_service
    svc.create_invite(world.admin, station_id=1, now=fixed_now)
    svc.rename(world.admin, 1, "Main hall")

    overview = svc.overview(world.admin, now=fixed_now)
    assert [s.code for s in overview.stations] == ["ENG", "HEA"]
    assert [d.name for d in overview.devices] == ["Main hall"]
    assert len(overview.invites) == 1

    with pytest.raises(ValidationError):
        svc.rename(world.admin, 1, "")
    with pytest.raises(NotFoundError):
        svc.rename(world.admin, 2, "Not mine")
