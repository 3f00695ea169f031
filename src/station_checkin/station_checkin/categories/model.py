from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Category:
    """Two-level activity taxonomy: ``parent_id`` is None for top level."""

    category_id: int
    organisation_id: int
    parent_id: Optional[int]
    code: str
    name: str
    active: bool = True
    sort: int = 0

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None
