from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import Category
from .repository import CategoryRepository

_COLUMNS = "category_id, organisation_id, parent_id, code, name, active, sort"


def _category(row: dict) -> Category:
    parent_id = row.get("parent_id")
    return Category(
        category_id=int(row["category_id"]),
        organisation_id=int(row["organisation_id"]),
        parent_id=int(parent_id) if parent_id is not None else None,
        code=row["code"],
        name=row["name"],
        active=bool(row.get("active", True)),
        sort=int(row.get("sort") or 0),
    )


class MySQLCategoryRepository(CategoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM categories WHERE category_id=%s", (int(category_id),))
            row = fetchone(cur)
            return _category(row) if row else None

    def get_many(self, organisation_id: int, category_ids: Sequence[int]) -> Sequence[Category]:
        if not category_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM categories
                WHERE organisation_id=%s AND category_id IN ({placeholders(len(category_ids))})
                """,
                (int(organisation_id), *[int(c) for c in category_ids]),
            )
            return [_category(r) for r in fetchall(cur)]

    def list_for_organisation(self, organisation_id: int, *, active_only: bool = False) -> Sequence[Category]:
        where = "organisation_id=%s AND active=1" if active_only else "organisation_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE {where} ORDER BY sort ASC, code ASC",
                (int(organisation_id),),
            )
            return [_category(r) for r in fetchall(cur)]

    def list_children(self, organisation_id: int, parent_id: Optional[int]) -> Sequence[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            if parent_id is None:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM categories
                    WHERE organisation_id=%s AND parent_id IS NULL
                    ORDER BY sort ASC, category_id ASC
                    """,
                    (int(organisation_id),),
                )
            else:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM categories
                    WHERE organisation_id=%s AND parent_id=%s
                    ORDER BY sort ASC, category_id ASC
                    """,
                    (int(organisation_id), int(parent_id)),
                )
            return [_category(r) for r in fetchall(cur)]

    def count_for_organisation(self, organisation_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM categories WHERE organisation_id=%s", (int(organisation_id),))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def count_snapshot_usage(self, category_id: int, code: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n FROM session_tasks
                WHERE category_id=%s AND category_code_snapshot=%s
                """,
                (int(category_id), code),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(self, *, organisation_id: int, parent_id: Optional[int], code: str, name: str, sort: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO categories(organisation_id, parent_id, code, name, active, sort)
                VALUES(%s,%s,%s,%s,1,%s)
                """,
                (int(organisation_id), parent_id, code, name, int(sort)),
            )
            return int(cur.lastrowid)

    def update(self, *, category_id: int, name: str, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE categories SET name=%s, code=%s WHERE category_id=%s",
                (name, code, int(category_id)),
            )
            return cur.rowcount > 0

    def set_active(self, category_id: int, *, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE categories SET active=%s WHERE category_id=%s",
                (1 if active else 0, int(category_id)),
            )
            return cur.rowcount > 0

    def swap_sort(self, first: Category, second: Category) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE categories SET sort=%s WHERE category_id=%s", (second.sort, first.category_id))
            cur.execute("UPDATE categories SET sort=%s WHERE category_id=%s", (first.sort, second.category_id))
