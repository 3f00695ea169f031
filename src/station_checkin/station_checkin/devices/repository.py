from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Device, KioskInvite


class DeviceRepository(Protocol):
    def get_by_kiosk_key(self, kiosk_key: str) -> Optional[Device]:
        raise NotImplementedError

    def touch_last_seen(self, device_id: int, seen_at: datetime) -> None:
        raise NotImplementedError

    def list_for_organisation(self, organisation_id: int) -> Sequence[Device]:
        raise NotImplementedError

    def rename(self, *, organisation_id: int, device_id: int, name: str) -> bool:
        raise NotImplementedError

    def deactivate(self, *, organisation_id: int, device_id: int) -> bool:
        raise NotImplementedError

    def create_invite(
        self,
        *,
        organisation_id: int,
        station_id: int,
        passphrase_hash: str,
        phrase_display: str,
        expires_at: datetime,
        created_by: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_invite_by_hash(self, passphrase_hash: str) -> Optional[KioskInvite]:
        raise NotImplementedError

    def list_open_invites(self, organisation_id: int, now: datetime) -> Sequence[KioskInvite]:
        raise NotImplementedError

    def register_from_invite(
        self,
        *,
        invite: KioskInvite,
        name: str,
        kiosk_key: str,
        used_at: datetime,
    ) -> int:
        """Consume the invite and create the device atomically.

        Raises ``ConflictError("used")`` if the invite was consumed concurrently.
        """

        raise NotImplementedError
