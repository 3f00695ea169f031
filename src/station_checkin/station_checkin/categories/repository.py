from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Category


class CategoryRepository(Protocol):
    def get_by_id(self, category_id: int) -> Optional[Category]:
        raise NotImplementedError

    def get_many(self, organisation_id: int, category_ids: Sequence[int]) -> Sequence[Category]:
        raise NotImplementedError

    def list_for_organisation(self, organisation_id: int, *, active_only: bool = False) -> Sequence[Category]:
        """Ordered by sort then code."""

        raise NotImplementedError

    def list_children(self, organisation_id: int, parent_id: Optional[int]) -> Sequence[Category]:
        """Siblings at one level (``parent_id=None`` is top level), ordered by sort."""

        raise NotImplementedError

    def count_for_organisation(self, organisation_id: int) -> int:
        raise NotImplementedError

    def count_snapshot_usage(self, category_id: int, code: str) -> int:
        """Allocation rows that recorded ``code`` for this category."""

        raise NotImplementedError

    def create(self, *, organisation_id: int, parent_id: Optional[int], code: str, name: str, sort: int) -> int:
        raise NotImplementedError

    def update(self, *, category_id: int, name: str, code: str) -> bool:
        raise NotImplementedError

    def set_active(self, category_id: int, *, active: bool) -> bool:
        raise NotImplementedError

    def swap_sort(self, first: Category, second: Category) -> None:
        raise NotImplementedError
