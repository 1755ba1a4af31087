"""
Navigation History - capped log of visited slides.

Storage is FIFO-capped (the oldest entry is evicted once the cap is exceeded),
while ``go_back`` consumes entries LIFO, newest first.
"""

from collections import deque
from typing import Deque, List, Optional

from ..config import settings
from ..domain.models import NavigationMethod
from .models import NavigationBreadcrumb, NavigationEntry


class NavigationHistory:
    def __init__(self, capacity: int = settings.NAVIGATION_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[NavigationEntry] = deque(maxlen=capacity)

    def push(
        self,
        slide_index: int,
        method: NavigationMethod,
        slide_title: Optional[str] = None,
    ) -> None:
        self._entries.append(
            NavigationEntry(slide_index=slide_index, slide_title=slide_title, method=method)
        )

    def go_back(self) -> Optional[int]:
        """Pops the most recent entry and returns its slide index, or None when empty."""
        if not self._entries:
            return None
        return self._entries.pop().slide_index

    def get_recent(self, count: int) -> List[NavigationBreadcrumb]:
        """Up to ``count`` breadcrumbs, newest first. Does not modify the history."""
        if count <= 0:
            return []
        recent = list(self._entries)[-count:]
        return [entry.breadcrumb() for entry in reversed(recent)]

    def can_go_back(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
