from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..auth.context import AdminContext, KioskContext
from ..common.validators import optional_text, require_id, require_non_empty
from ..core.constants import CHILD_CODE_LETTERS, TOP_LEVEL_CODES
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Category
from .repository import CategoryRepository

logger = logging.getLogger(__name__)

_DIRECTIONS = {"up": -1, "down": 1}


class CategoryService:
    """Activity categories: ``1``..``8`` at the top, ``1A``..``1H`` beneath.

    A category's code is frozen once checkouts have recorded it, so reports
    keep meaning what they meant at the time.
    """

    def __init__(self, categories: CategoryRepository):
        self._categories = categories

    # ----- codes -----

    def suggest_top_level_code(self, organisation_id: int) -> Optional[str]:
        used = {c.code for c in self._categories.list_children(organisation_id, None)}
        return next((code for code in TOP_LEVEL_CODES if code not in used), None)

    def suggest_child_code(self, organisation_id: int, parent: Category) -> Optional[str]:
        prefix = re.sub(r"[^A-Za-z0-9]", "", parent.code)
        used = {c.code for c in self._categories.list_children(organisation_id, parent.category_id)}
        return next((prefix + letter for letter in CHILD_CODE_LETTERS if prefix + letter not in used), None)

    # ----- admin -----

    def list_categories(self, admin: AdminContext) -> Sequence[Category]:
        return self._categories.list_for_organisation(admin.organisation_id)

    def create(
        self,
        admin: AdminContext,
        *,
        name: Optional[str],
        parent_id: Any = None,
        code: Optional[str] = None,
    ) -> Category:
        org_id = admin.organisation_id
        clean_name = require_non_empty(name, "name")

        parent = None
        if parent_id not in (None, ""):
            parent = self._get_owned(org_id, parent_id)
            if not parent.is_top_level:
                raise ValidationError("parent_not_top_level")

        clean_code = (optional_text(code) or "").upper()
        if not clean_code:
            suggested = (
                self.suggest_child_code(org_id, parent) if parent else self.suggest_top_level_code(org_id)
            )
            if not suggested:
                raise ConflictError("max_reached")
            clean_code = suggested

        siblings = self._categories.list_children(org_id, parent.category_id if parent else None)
        sort = max((c.sort for c in siblings), default=0) + 1

        category_id = self._categories.create(
            organisation_id=org_id,
            parent_id=parent.category_id if parent else None,
            code=clean_code,
            name=clean_name,
            sort=sort,
        )
        logger.info("category %s (%s) created by %s", category_id, clean_code, admin.email)
        return self._get_owned(org_id, category_id)

    def update(self, admin: AdminContext, category_id: Any, *, name: Optional[str], code: Optional[str] = None) -> Category:
        category = self._get_owned(admin.organisation_id, category_id)
        clean_name = require_non_empty(name, "name")
        new_code = (optional_text(code) or "").upper() or category.code

        if new_code != category.code and self._categories.count_snapshot_usage(category.category_id, category.code) > 0:
            raise ConflictError("code_immutable")

        self._categories.update(category_id=category.category_id, name=clean_name, code=new_code)
        return replace(category, name=clean_name, code=new_code)

    def toggle(self, admin: AdminContext, category_id: Any) -> Category:
        category = self._get_owned(admin.organisation_id, category_id)
        self._categories.set_active(category.category_id, active=not category.active)
        return replace(category, active=not category.active)

    def move(self, admin: AdminContext, category_id: Any, direction: Optional[str]) -> None:
        step = _DIRECTIONS.get((direction or "").strip().lower())
        if step is None:
            raise ValidationError("bad_direction")

        category = self._get_owned(admin.organisation_id, category_id)
        siblings = list(self._categories.list_children(admin.organisation_id, category.parent_id))
        index = next(i for i, c in enumerate(siblings) if c.category_id == category.category_id)
        target = index + step
        if target < 0 or target >= len(siblings):
            return

        neighbour = siblings[target]
        if neighbour.sort == category.sort:
            # Equal sort values would swap to the same order; use positions.
            category, neighbour = replace(category, sort=index), replace(neighbour, sort=target)
        self._categories.swap_sort(category, neighbour)

    def _get_owned(self, organisation_id: int, category_id: Any) -> Category:
        cid = require_id(category_id, "category_id")
        category = self._categories.get_by_id(cid)
        if not category or category.organisation_id != organisation_id:
            raise NotFoundError("category_not_found")
        return category

    # ----- kiosk -----

    def kiosk_tree(self, kiosk: KioskContext) -> list[dict]:
        """Active categories as top-level entries with their children.

        A top-level category without active children lists itself as its only
        child, so the kiosk can always select at the second level.
        """
        active = self._categories.list_for_organisation(kiosk.organisation_id, active_only=True)
        children: dict[int, list[Category]] = {}
        for c in active:
            if c.parent_id is not None:
                children.setdefault(c.parent_id, []).append(c)

        tree = []
        for top in (c for c in active if c.is_top_level):
            kids = children.get(top.category_id) or [top]
            tree.append(
                {
                    "id": top.category_id,
                    "code": top.code,
                    "name": top.name,
                    "children": [{"id": k.category_id, "code": k.code, "name": k.name} for k in kids],
                }
            )
        return tree
