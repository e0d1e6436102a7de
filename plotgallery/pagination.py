"""Page windowing over the items of the selected category."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil

from .manifests.models import Category, GalleryItem

PLOTS_PER_PAGE = 12
EMPTY_LABEL = "0 / 0"


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Half-open ``[start, stop)`` range of item indexes."""

    start: int
    stop: int

    def __len__(self) -> int:
        return max(self.stop - self.start, 0)

    @property
    def is_empty(self) -> bool:
        return self.stop <= self.start


class PaginationState:
    """Track the current category and zero-based page index."""

    def __init__(self, *, page_size: int = PLOTS_PER_PAGE) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.current_category: Category | None = None
        self.current_page = 0

    def reset(self, category: Category | None) -> None:
        self.current_category = category
        self.current_page = 0

    def total_pages(self, category: Category | None = None) -> int:
        category = self._resolve(category)
        if category is None or not category.items:
            return 0
        return ceil(len(category.items) / self.page_size)

    def visible_window(self, category: Category | None = None, page: int | None = None) -> PageWindow:
        category = self._resolve(category)
        page = self.current_page if page is None else page
        if category is None or page < 0 or page >= self.total_pages(category):
            return PageWindow(0, 0)
        start = page * self.page_size
        stop = min(start + self.page_size, len(category.items))
        return PageWindow(start, stop)

    def visible_items(self, category: Category | None = None, page: int | None = None) -> list[GalleryItem]:
        category = self._resolve(category)
        window = self.visible_window(category, page)
        if category is None or window.is_empty:
            return []
        return category.items[window.start : window.stop]

    @property
    def prev_disabled(self) -> bool:
        return self.current_page == 0

    @property
    def next_disabled(self) -> bool:
        return self.current_page >= self.total_pages() - 1

    def next_page(self) -> bool:
        """Advance one page; returns False at the last page."""
        if self.next_disabled:
            return False
        self.current_page += 1
        return True

    def prev_page(self) -> bool:
        """Step back one page; returns False at the first page."""
        if self.prev_disabled:
            return False
        self.current_page -= 1
        return True

    def label(self, category: Category | None = None, page: int | None = None) -> str:
        category = self._resolve(category)
        page = self.current_page if page is None else page
        window = self.visible_window(category, page)
        if category is None or window.is_empty:
            return EMPTY_LABEL
        return f"{window.start + 1}-{window.stop} / {len(category.items)}"

    def _resolve(self, category: Category | None) -> Category | None:
        return self.current_category if category is None else category
