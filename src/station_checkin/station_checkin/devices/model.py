from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Device:
    """A registered kiosk. ``kiosk_key`` is its bearer credential."""

    device_id: int
    organisation_id: int
    station_id: int
    name: str
    kiosk_key: str
    active: bool = True
    last_seen_at: Optional[datetime] = None


@dataclass(frozen=True)
class KioskInvite:
    invite_id: int
    organisation_id: int
    station_id: int
    passphrase_hash: str
    phrase_display: str
    expires_at: datetime
    used: bool = False
    used_at: Optional[datetime] = None
    created_by: Optional[str] = None
