"""Ownership of the loaded categories and the current selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from .manifests.models import Category
from .pagination import PaginationState

logger = logging.getLogger(__name__)

CategoryListener = Callable[[Category], None]


@dataclass(frozen=True, slots=True)
class CategoryNavEntry:
    """Navigation pill data for a single category."""

    slug: str
    name: str
    item_count: int
    active: bool


class CategoryStore:
    """Resolve categories by slug and broadcast selection changes."""

    def __init__(self, categories: Sequence[Category], pagination: PaginationState | None = None) -> None:
        if not categories:
            raise ValueError("CategoryStore requires at least one category")
        self._categories: tuple[Category, ...] = tuple(categories)
        self._listeners: list[CategoryListener] = []
        self.pagination = pagination or PaginationState()
        self.current_category: Category | None = None

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def default_category(self) -> Category:
        return self._categories[0]

    def has_slug(self, slug: str | None) -> bool:
        return bool(slug) and any(category.slug == slug for category in self._categories)

    def find_by_slug(self, slug: str | None) -> Category:
        """Return the matching category, or the first one when none matches."""
        for category in self._categories:
            if category.slug == slug:
                return category
        if slug:
            logger.debug("Unknown category slug %r; falling back to %r", slug, self.default_category.slug)
        return self.default_category

    def select(self, slug: str | None) -> Category:
        category = self.find_by_slug(slug)
        self.current_category = category
        self.pagination.reset(category)
        for listener in list(self._listeners):
            listener(category)
        return category

    def subscribe(self, listener: CategoryListener) -> Callable[[], None]:
        """Register ``listener`` for selection changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def nav_entries(self) -> list[CategoryNavEntry]:
        current_slug = self.current_category.slug if self.current_category else None
        return [
            CategoryNavEntry(
                slug=category.slug,
                name=category.name,
                item_count=category.item_count,
                active=category.slug == current_slug,
            )
            for category in self._categories
        ]
