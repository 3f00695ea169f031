from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..auth.context import AdminContext, KioskContext
from ..common.datetime_utils import utc_now
from ..common.passphrase import generate_passphrase, hash_passphrase, normalize_passphrase, random_kiosk_key
from ..common.validators import optional_text, require_id, require_non_empty
from ..core.constants import (
    DEFAULT_INVITE_EXPIRY_DAYS,
    DEFAULT_KIOSK_NAME,
    MAX_INVITE_EXPIRY_DAYS,
    MIN_INVITE_EXPIRY_DAYS,
)
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..organisations.model import Station
from ..organisations.repository import OrganisationRepository
from .model import Device, KioskInvite
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InviteIssued:
    invite_id: int
    station_id: int
    passphrase: str
    expires_at: datetime


@dataclass(frozen=True)
class RegisteredKiosk:
    device_id: int
    organisation_id: int
    station_id: int
    name: str
    kiosk_key: str


@dataclass(frozen=True)
class KioskOverview:
    stations: Sequence[Station]
    devices: Sequence[Device]
    invites: Sequence[KioskInvite]


def clamp_expiry_days(value: Any) -> int:
    try:
        days = int(value)
    except (TypeError, ValueError):
        return DEFAULT_INVITE_EXPIRY_DAYS
    return min(max(days, MIN_INVITE_EXPIRY_DAYS), MAX_INVITE_EXPIRY_DAYS)


class DeviceService:
    """Kiosk credentials: invite passphrases, registration and key checks."""

    def __init__(
        self,
        devices: DeviceRepository,
        organisations: OrganisationRepository,
        *,
        pepper: str,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._devices = devices
        self._organisations = organisations
        self._pepper = pepper
        self._clock = clock

    def authenticate(self, kiosk_key: Optional[str]) -> KioskContext:
        key = (kiosk_key or "").strip()
        if not key:
            raise UnauthorizedError("missing_kiosk_key")

        device = self._devices.get_by_kiosk_key(key)
        if not device or not device.active:
            logger.warning("rejected kiosk key ending %s", key[-4:])
            raise UnauthorizedError("invalid_kiosk_key")

        self._devices.touch_last_seen(device.device_id, self._clock())
        return KioskContext(
            device_id=device.device_id,
            organisation_id=device.organisation_id,
            station_id=device.station_id,
            device_name=device.name,
        )

    def create_invite(
        self,
        admin: AdminContext,
        *,
        station_id: Any,
        expires_days: Any = None,
        now: Optional[datetime] = None,
    ) -> InviteIssued:
        sid = require_id(station_id, "station_id")
        station = self._organisations.get_station(sid)
        if not station or station.organisation_id != admin.organisation_id:
            raise NotFoundError("invalid_station")

        days = clamp_expiry_days(expires_days) if expires_days is not None else DEFAULT_INVITE_EXPIRY_DAYS
        now = now or self._clock()
        expires_at = now + timedelta(days=days)
        phrase = generate_passphrase()

        invite_id = self._devices.create_invite(
            organisation_id=admin.organisation_id,
            station_id=station.station_id,
            passphrase_hash=hash_passphrase(phrase, pepper=self._pepper),
            phrase_display=phrase,
            expires_at=expires_at,
            created_by=admin.user_id,
        )
        logger.info("kiosk invite %s created for station=%s by %s (days=%s)", invite_id, station.station_id, admin.email, days)
        return InviteIssued(invite_id=invite_id, station_id=station.station_id, passphrase=phrase, expires_at=expires_at)

    def register(
        self,
        passphrase: Optional[str],
        *,
        name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RegisteredKiosk:
        normalized = normalize_passphrase(passphrase)
        if not normalized:
            raise ValidationError("missing")

        invite = self._devices.get_invite_by_hash(hash_passphrase(normalized, pepper=self._pepper))
        now = now or self._clock()
        if not invite or invite.expires_at <= now:
            raise NotFoundError("invalid")
        if invite.used:
            raise ConflictError("used")

        device_name = optional_text(name) or DEFAULT_KIOSK_NAME
        kiosk_key = random_kiosk_key()
        device_id = self._devices.register_from_invite(
            invite=invite,
            name=device_name,
            kiosk_key=kiosk_key,
            used_at=now,
        )
        logger.info("kiosk registered device=%s station=%s invite=%s", device_id, invite.station_id, invite.invite_id)
        return RegisteredKiosk(
            device_id=device_id,
            organisation_id=invite.organisation_id,
            station_id=invite.station_id,
            name=device_name,
            kiosk_key=kiosk_key,
        )

    # ----- admin -----

    def overview(self, admin: AdminContext, *, now: Optional[datetime] = None) -> KioskOverview:
        now = now or self._clock()
        org_id = admin.organisation_id
        return KioskOverview(
            stations=list(self._organisations.list_stations(org_id)),
            devices=list(self._devices.list_for_organisation(org_id)),
            invites=list(self._devices.list_open_invites(org_id, now)),
        )

    def rename(self, admin: AdminContext, device_id: Any, name: Optional[str]) -> None:
        did = require_id(device_id, "device_id")
        new_name = require_non_empty(name, "name")
        if not self._devices.rename(organisation_id=admin.organisation_id, device_id=did, name=new_name):
            raise NotFoundError("device_not_found")

    def deactivate(self, admin: AdminContext, device_id: Any) -> None:
        """Keep the row for audit; its key simply stops authenticating."""
        did = require_id(device_id, "device_id")
        if not self._devices.deactivate(organisation_id=admin.organisation_id, device_id=did):
            raise NotFoundError("device_not_found")
        logger.info("kiosk device=%s deactivated by %s", did, admin.email)
