from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Organisation, Station
from .repository import OrganisationRepository


def _station(row: dict) -> Station:
    return Station(
        station_id=int(row["station_id"]),
        organisation_id=int(row["organisation_id"]),
        name=row["name"],
        code=row["code"],
        active=bool(row.get("active", True)),
    )


class MySQLOrganisationRepository(OrganisationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_first(self) -> Optional[Organisation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organisation_id, name, timezone
                FROM organisations
                ORDER BY organisation_id ASC
                LIMIT 1
                """
            )
            row = fetchone(cur)
            if not row:
                return None
            return Organisation(
                organisation_id=int(row["organisation_id"]),
                name=row["name"],
                timezone=row["timezone"],
            )

    def get_station(self, station_id: int) -> Optional[Station]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT station_id, organisation_id, name, code, active
                FROM stations
                WHERE station_id=%s
                """,
                (int(station_id),),
            )
            row = fetchone(cur)
            return _station(row) if row else None

    def list_stations(self, organisation_id: int) -> Sequence[Station]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT station_id, organisation_id, name, code, active
                FROM stations
                WHERE organisation_id=%s
                ORDER BY name ASC
                """,
                (int(organisation_id),),
            )
            return [_station(r) for r in fetchall(cur)]
