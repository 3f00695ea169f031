from datetime import date, timedelta

import pytest

from src.station_checkin.station_checkin.common.datetime_utils import to_iso
from src.station_checkin.station_checkin.core.exceptions import ValidationError


def _visit(world, now, identifier, minutes, categories):
    svc = world.container.kiosk_service
    sid = svc.scan(world.kiosk, identifier, now=now).session_id
    end = now + timedelta(minutes=minutes)
    svc.check_out(
        world.kiosk,
        session_id=sid,
        end_time=to_iso(end),
        tasks=[{"categoryId": c} for c in categories],
        now=end,
    )
    return sid


def test_report_rows_use_snapshots_and_summary_totals(world, fixed_now):
    _visit(world, fixed_now, "12345678", 60, [3, 4])
    _visit(world, fixed_now + timedelta(hours=2), "RFID-ALEX", 31, [3])
    world.container.category_service.update(world.admin, 4, name="Renamed later")

    data = world.container.report_service.build(world.admin, start=fixed_now.date(), end=fixed_now.date())

    assert len(data.rows) == 3
    assert {r["category_name"] for r in data.rows} == {"Fire call", "Hazard reduction"}
    assert data.total_minutes == 91
    assert data.summary == [
        {"category_code": "1A", "category_name": "Fire call", "minutes": 61, "hours": "01:01"},
        {"category_code": "1B", "category_name": "Hazard reduction", "minutes": 30, "hours": "00:30"},
    ]


def test_open_sessions_and_out_of_range_are_excluded(world, fixed_now):
    _visit(world, fixed_now - timedelta(days=3), "12345678", 20, [3])
    world.container.kiosk_service.scan(world.kiosk, "22223333", now=fixed_now)

    data = world.container.report_service.build(world.admin, start=fixed_now.date(), end=fixed_now.date())
    assert data.rows == []
    assert data.total_minutes == 0


def test_reversed_range_is_rejected(world):
    with pytest.raises(ValidationError):
        world.container.report_service.build(world.admin, start=date(2026, 3, 2), end=date(2026, 3, 1))


def test_dashboard_counts(world, fixed_now):
    world.container.kiosk_service.scan(world.kiosk, "12345678", now=fixed_now)
    counts = world.container.report_service.dashboard_counts(world.admin)
    assert counts == {"members": 5, "openSessions": 1, "categories": 4}
