from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from src.station_checkin.station_checkin.auth.context import AdminContext, KioskContext
from src.station_checkin.station_checkin.categories.model import Category
from src.station_checkin.station_checkin.container import Container, assemble_container
from src.station_checkin.station_checkin.core.enums import AdminRole, MemberStatus
from src.station_checkin.station_checkin.devices.model import Device
from src.station_checkin.station_checkin.organisations.model import Organisation, Station

from tests.fakes import (
    InMemoryCategories,
    InMemoryDevices,
    InMemoryMembers,
    InMemoryOrganisations,
    KIOSK_KEY,
    OTHER_ORG_KIOSK_KEY,
    InMemorySessions,
    make_member,
)

TEST_SETTINGS = {
    "ADMIN_USERNAME": "admin",
    "ADMIN_PASSWORD": "s3cret",
    "KIOSK_INVITE_PEPPER": "pepper",
    "CHECKOUT_TOLERANCE_MINUTES": 10,
    "VISITOR_END_MAX_FUTURE_HOURS": 6,
}


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 14, 9, 30, 0, tzinfo=timezone.utc)


@dataclass
class World:
    organisations: InMemoryOrganisations
    members: InMemoryMembers
    devices: InMemoryDevices
    categories: InMemoryCategories
    sessions: InMemorySessions
    container: Container
    kiosk: KioskContext
    other_station_kiosk: KioskContext
    admin: AdminContext


@pytest.fixture
def world(fixed_now) -> World:
    organisations = InMemoryOrganisations(
        organisations=[
            Organisation(organisation_id=1, name="Engadine RFB", timezone="Australia/Sydney"),
            Organisation(organisation_id=2, name="Other RFB", timezone="Australia/Sydney"),
        ],
        stations=[
            Station(station_id=1, organisation_id=1, name="Engadine", code="ENG"),
            Station(station_id=2, organisation_id=1, name="Heathcote", code="HEA"),
            Station(station_id=3, organisation_id=2, name="Elsewhere", code="ELS"),
        ],
    )
    members = InMemoryMembers(
        [
            make_member(1, "12345678", "Alex", "Demo", mobile="0412345678"),
            make_member(2, "22223333", "Sam", "Smith", mobile="0400111222"),
            make_member(3, "33334444", "Jo", "Brown", mobile="0400111222"),
            make_member(4, "44445555", "Dana", "Off", status=MemberStatus.DISABLED),
            make_member(5, "55556666", "Old", "Timer", mobile="0499000111", status=MemberStatus.ARCHIVED),
            make_member(6, "66667777", "Far", "Away", org=2),
        ]
    )
    members.add_tag(1, "RFID-ALEX")
    members.add_tag(4, "RFID-DANA")
    members.add_tag(6, "RFID-FAR")

    devices = InMemoryDevices(
        [
            Device(device_id=1, organisation_id=1, station_id=1, name="Front door", kiosk_key=KIOSK_KEY),
            Device(device_id=2, organisation_id=2, station_id=3, name="Elsewhere", kiosk_key=OTHER_ORG_KIOSK_KEY),
        ]
    )
    sessions = InMemorySessions(members, organisations)
    categories = InMemoryCategories(
        [
            Category(category_id=1, organisation_id=1, parent_id=None, code="1", name="Operations", sort=1),
            Category(category_id=2, organisation_id=1, parent_id=None, code="2", name="Training", sort=2),
            Category(category_id=3, organisation_id=1, parent_id=1, code="1A", name="Fire call", sort=1),
            Category(category_id=4, organisation_id=1, parent_id=1, code="1B", name="Hazard reduction", sort=2),
            Category(category_id=5, organisation_id=2, parent_id=None, code="1", name="Elsewhere ops", sort=1),
        ],
        sessions=sessions,
    )

    container = assemble_container(
        organisations_repo=organisations,
        members_repo=members,
        devices_repo=devices,
        categories_repo=categories,
        sessions_repo=sessions,
        settings=TEST_SETTINGS,
        clock=lambda: fixed_now,
    )
    return World(
        organisations=organisations,
        members=members,
        devices=devices,
        categories=categories,
        sessions=sessions,
        container=container,
        kiosk=KioskContext(device_id=1, organisation_id=1, station_id=1, device_name="Front door"),
        other_station_kiosk=KioskContext(device_id=9, organisation_id=1, station_id=2),
        admin=AdminContext(
            user_id="env-admin",
            email="admin",
            role=AdminRole.OWNER,
            organisation_id=1,
            name="admin",
        ),
    )


@pytest.fixture
def app(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.station_checkin.station_checkin.main import create_app

    flask_app = create_app(world.container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def kiosk_headers():
    return {"X-Kiosk-Key": KIOSK_KEY}


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "s3cret"})
    assert resp.status_code == 200
    return client
