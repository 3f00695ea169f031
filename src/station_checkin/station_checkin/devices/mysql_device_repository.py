from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db, to_db
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Device, KioskInvite
from .repository import DeviceRepository


def _device(row: dict) -> Device:
    return Device(
        device_id=int(row["device_id"]),
        organisation_id=int(row["organisation_id"]),
        station_id=int(row["station_id"]),
        name=row["name"],
        kiosk_key=row["kiosk_key"],
        active=bool(row.get("active", True)),
        last_seen_at=from_db(row.get("last_seen_at")),
    )


def _invite(row: dict) -> KioskInvite:
    return KioskInvite(
        invite_id=int(row["invite_id"]),
        organisation_id=int(row["organisation_id"]),
        station_id=int(row["station_id"]),
        passphrase_hash=row["passphrase_hash"],
        phrase_display=row["phrase_display"],
        expires_at=from_db(row["expires_at"]),
        used=bool(row.get("used", False)),
        used_at=from_db(row.get("used_at")),
        created_by=row.get("created_by"),
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_kiosk_key(self, kiosk_key: str) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT device_id, organisation_id, station_id, name, kiosk_key, active, last_seen_at
                FROM devices
                WHERE kiosk_key=%s
                """,
                (kiosk_key,),
            )
            row = fetchone(cur)
            return _device(row) if row else None

    def touch_last_seen(self, device_id: int, seen_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE devices SET last_seen_at=%s WHERE device_id=%s", (to_db(seen_at), int(device_id)))

    def list_for_organisation(self, organisation_id: int) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT device_id, organisation_id, station_id, name, kiosk_key, active, last_seen_at
                FROM devices
                WHERE organisation_id=%s
                ORDER BY created_at DESC, device_id DESC
                """,
                (int(organisation_id),),
            )
            return [_device(r) for r in fetchall(cur)]

    def rename(self, *, organisation_id: int, device_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE devices SET name=%s WHERE device_id=%s AND organisation_id=%s",
                (name, int(device_id), int(organisation_id)),
            )
            return cur.rowcount > 0

    def deactivate(self, *, organisation_id: int, device_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE devices SET active=0 WHERE device_id=%s AND organisation_id=%s",
                (int(device_id), int(organisation_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kiosk_invites(organisation_id, station_id, passphrase_hash,
                                          phrase_display, expires_at, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(organisation_id), int(station_id), passphrase_hash, phrase_display, to_db(expires_at), created_by),
            )
            return int(cur.lastrowid)

    def get_invite_by_hash(self, passphrase_hash: str) -> Optional[KioskInvite]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT invite_id, organisation_id, station_id, passphrase_hash, phrase_display,
                       expires_at, used, used_at, created_by
                FROM kiosk_invites
                WHERE passphrase_hash=%s
                """,
                (passphrase_hash,),
            )
            row = fetchone(cur)
            return _invite(row) if row else None

    def list_open_invites(self, organisation_id: int, now: datetime) -> Sequence[KioskInvite]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT invite_id, organisation_id, station_id, passphrase_hash, phrase_display,
                       expires_at, used, used_at, created_by
                FROM kiosk_invites
                WHERE organisation_id=%s AND used=0 AND expires_at > %s
                ORDER BY expires_at ASC
                """,
                (int(organisation_id), to_db(now)),
            )
            return [_invite(r) for r in fetchall(cur)]

    def register_from_invite(
        self,
        *,
        invite: KioskInvite,
        name: str,
        kiosk_key: str,
        used_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE kiosk_invites SET used=1, used_at=%s WHERE invite_id=%s AND used=0",
                (to_db(used_at), invite.invite_id),
            )
            if cur.rowcount == 0:
                raise ConflictError("used")

            cur.execute(
                """
                INSERT INTO devices(organisation_id, station_id, name, kiosk_key, active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (invite.organisation_id, invite.station_id, name, kiosk_key),
            )
            return int(cur.lastrowid)
