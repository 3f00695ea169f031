from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MemberStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Member, MemberChanges
from .repository import MemberRepository

_MEMBER_COLUMNS = """
    m.member_id, m.organisation_id, m.member_number, m.first_name, m.last_name,
    m.mobile, m.mobile_normalized, m.status, m.is_visitor
"""


def _member(row: dict) -> Member:
    return Member(
        member_id=int(row["member_id"]),
        organisation_id=int(row["organisation_id"]),
        member_number=row["member_number"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        mobile=row.get("mobile"),
        mobile_normalized=row.get("mobile_normalized"),
        status=MemberStatus(row["status"]),
        is_visitor=bool(row.get("is_visitor", False)),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, member_id: int) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MEMBER_COLUMNS} FROM members m WHERE m.member_id=%s", (int(member_id),))
            row = fetchone(cur)
            return _member(row) if row else None

    def find_by_tag(self, organisation_id: int, tag_value: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MEMBER_COLUMNS}
                FROM member_tags t
                JOIN members m ON m.member_id = t.member_id
                WHERE t.organisation_id=%s AND t.tag_value=%s AND t.active=1
                  AND m.organisation_id=%s AND m.is_visitor=0 AND m.status <> 'archived'
                """,
                (int(organisation_id), tag_value, int(organisation_id)),
            )
            row = fetchone(cur)
            return _member(row) if row else None

    def find_by_number(self, organisation_id: int, member_number: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MEMBER_COLUMNS}
                FROM members m
                WHERE m.organisation_id=%s AND m.member_number=%s
                  AND m.is_visitor=0 AND m.status <> 'archived'
                """,
                (int(organisation_id), member_number),
            )
            row = fetchone(cur)
            return _member(row) if row else None

    def find_active_by_mobile(self, organisation_id: int, mobile_normalized: str) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MEMBER_COLUMNS}
                FROM members m
                WHERE m.organisation_id=%s AND m.mobile_normalized=%s
                  AND m.is_visitor=0 AND m.status='active'
                ORDER BY m.last_name ASC, m.first_name ASC, m.member_id ASC
                """,
                (int(organisation_id), mobile_normalized),
            )
            return [_member(r) for r in fetchall(cur)]

    def list_members(self, organisation_id: int) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MEMBER_COLUMNS}
                FROM members m
                WHERE m.organisation_id=%s AND m.is_visitor=0
                ORDER BY m.last_name ASC, m.first_name ASC
                """,
                (int(organisation_id),),
            )
            return [_member(r) for r in fetchall(cur)]

    def get_active_tag_value(self, member_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tag_value FROM member_tags
                WHERE member_id=%s AND active=1
                ORDER BY tag_id DESC
                LIMIT 1
                """,
                (int(member_id),),
            )
            row = fetchone(cur)
            return row["tag_value"] if row else None

    def count_members(self, organisation_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM members WHERE organisation_id=%s AND is_visitor=0",
                (int(organisation_id),),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create_member(
        self,
        *,
        organisation_id: int,
        member_number: str,
        first_name: str,
        last_name: str,
        mobile: Optional[str],
        mobile_normalized: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO members(organisation_id, member_number, first_name, last_name,
                                    mobile, mobile_normalized, status, is_visitor)
                VALUES(%s,%s,%s,%s,%s,%s,'active',0)
                """,
                (int(organisation_id), member_number, first_name, last_name, mobile, mobile_normalized),
            )
            return int(cur.lastrowid)

    def update_member(
        self,
        *,
        organisation_id: int,
        member_id: int,
        changes: MemberChanges,
        rfid_tag: Optional[str] = None,
    ) -> None:
        columns = changes.as_columns()

        with db_cursor(self._conn_factory) as (_, cur):
            if columns:
                assignments = ", ".join(f"{name}=%s" for name in columns)
                cur.execute(
                    f"UPDATE members SET {assignments} WHERE member_id=%s AND organisation_id=%s",
                    (*columns.values(), int(member_id), int(organisation_id)),
                )

            if rfid_tag is None:
                return

            if not rfid_tag:
                cur.execute(
                    """
                    UPDATE member_tags SET active=0
                    WHERE organisation_id=%s AND member_id=%s AND active=1
                    """,
                    (int(organisation_id), int(member_id)),
                )
                return

            cur.execute(
                """
                INSERT INTO member_tags(organisation_id, member_id, tag_value, active)
                VALUES(%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE member_id=VALUES(member_id), active=1
                """,
                (int(organisation_id), int(member_id), rfid_tag),
            )
