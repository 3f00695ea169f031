from __future__ import annotations

from typing import Sequence

from ..core.exceptions import ValidationError
from .base import MinuteAllocator


class EvenSplitAllocator(MinuteAllocator):
    """Even rule: ``total // n`` each; the first ``total % n`` categories get one more."""

    def allocate(self, total_minutes: int, category_ids: Sequence[int]) -> list[tuple[int, int]]:
        if not category_ids:
            raise ValidationError("no_tasks")
        total = int(total_minutes)
        if total < 0:
            raise ValidationError("bad_minutes")

        base, remainder = divmod(total, len(category_ids))
        return [
            (category_id, base + 1 if index < remainder else base)
            for index, category_id in enumerate(category_ids)
        ]
