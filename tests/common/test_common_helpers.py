from datetime import datetime, timedelta, timezone

import pytest

from src.station_checkin.station_checkin.common.datetime_utils import (
    elapsed_minutes,
    parse_iso_datetime,
    to_db,
    to_iso,
)
from src.station_checkin.station_checkin.common.passphrase import (
    generate_passphrase,
    hash_passphrase,
    normalize_passphrase,
    random_kiosk_key,
)
from src.station_checkin.station_checkin.common.phone import normalize_au_mobile
from src.station_checkin.station_checkin.common.validators import parse_id, require_member_number, require_non_empty
from src.station_checkin.station_checkin.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw",
    ["0412 345 678", "+61 412 345 678", "61412345678", "412345678", "(04) 1234-5678"],
)
def test_au_mobile_variants_normalise(raw):
    assert normalize_au_mobile(raw) == "0412345678"


@pytest.mark.parametrize("raw", [None, "", "12345678", "0212345678", "04123", "abc"])
def test_non_mobiles_are_rejected(raw):
    assert normalize_au_mobile(raw) is None


def test_parse_iso_datetime_accepts_z_and_naive_as_utc():
    expected = datetime(2026, 3, 14, 10, 7, tzinfo=timezone.utc)
    assert parse_iso_datetime("2026-03-14T10:07:00Z") == expected
    assert parse_iso_datetime("2026-03-14T10:07:00") == expected
    assert parse_iso_datetime("2026-03-14T21:07:00+11:00") == expected


@pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
def test_parse_iso_datetime_rejects_garbage(value):
    with pytest.raises(ValidationError) as exc:
        parse_iso_datetime(value)
    assert exc.value.reason == "bad_time"


def test_elapsed_minutes_rounds_down_and_never_negative():
    start = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
    assert elapsed_minutes(start, start + timedelta(minutes=37, seconds=59)) == 37
    assert elapsed_minutes(start, start - timedelta(minutes=5)) == 0


def test_db_datetimes_are_naive_utc():
    aware = datetime(2026, 3, 14, 20, 30, tzinfo=timezone(timedelta(hours=11)))
    stored = to_db(aware)
    assert stored.tzinfo is None
    assert stored.hour == 9
    assert to_iso(stored) == "2026-03-14T09:30:00Z"


def test_passphrase_shape_and_hash_normalisation():
    phrase = generate_passphrase()
    words = phrase.split("-")
    assert len(words) == 4
    assert words[3].isdigit() and len(words[3]) == 4
    assert normalize_passphrase("  Ember Bright  Flame 1234 ") == "ember-bright-flame-1234"
    assert hash_passphrase("EMBER bright-flame 1234", pepper="p") == hash_passphrase("ember-bright-flame-1234", pepper="p")
    assert hash_passphrase("ember-bright-flame-1234", pepper="p") != hash_passphrase("ember-bright-flame-1234", pepper="q")


def test_kiosk_key_is_64_hex_chars():
    key = random_kiosk_key()
    assert len(key) == 64
    int(key, 16)


def test_parse_id_only_accepts_positive_integers():
    assert parse_id("12") == 12
    assert parse_id(12) == 12
    assert parse_id(True) is None
    assert parse_id("0") is None
    assert parse_id("-3") is None
    assert parse_id("x") is None
    assert parse_id(None) is None


def test_member_number_must_be_eight_digits():
    assert require_member_number(" 12345678 ") == "12345678"
    with pytest.raises(ValidationError):
        require_member_number("1234567")
    with pytest.raises(ValidationError):
        require_member_number(12345678)


@pytest.mark.parametrize("value", [None, "", "   ", 123, ["Pat"], {"name": "Pat"}])
def test_required_text_rejects_blank_and_non_strings(value):
    with pytest.raises(ValidationError) as exc:
        require_non_empty(value, "first_name")
    assert exc.value.reason == "first_name_required"


def test_required_text_is_trimmed():
    assert require_non_empty("  Pat ", "first_name") == "Pat"
