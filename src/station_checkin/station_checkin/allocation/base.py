from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class MinuteAllocator(ABC):
    """Allocator interface (Strategy Pattern for splitting session minutes)."""

    @abstractmethod
    def allocate(self, total_minutes: int, category_ids: Sequence[int]) -> list[tuple[int, int]]:
        """Return ``(category_id, minutes)`` pairs whose minutes sum to ``total_minutes``."""
        raise NotImplementedError
