"""Gallery session wiring the category store, pagination and navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import Config, MessageConfig
from .manifests import (
    Category,
    GalleryItem,
    GalleryManifest,
    fetch_gallery_data,
    format_source_label,
    resolve_manifest_path,
)
from .navigation import BrowserHistory, History, NavigationSync
from .pagination import PLOTS_PER_PAGE, PaginationState
from .store import CategoryNavEntry, CategoryStore
from .tags import TagLabel, label_tags, resolve_tags
from .urls import join_asset_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ItemView:
    """Everything the renderer needs to draw one gallery card."""

    title: str
    kind: str
    src: str
    tags: tuple[TagLabel, ...]


@dataclass(frozen=True, slots=True)
class PaginationView:
    label: str
    prev_disabled: bool
    next_disabled: bool
    page: int
    total_pages: int


class GallerySession:
    """State machine for one loaded manifest.

    Owns exactly one ``CategoryStore``/``PaginationState`` pair and the
    ``NavigationSync`` bound to ``history``. Call ``initialize`` once before
    using the view accessors.
    """

    def __init__(
        self,
        manifest: GalleryManifest,
        history: History | None = None,
        *,
        page_size: int = PLOTS_PER_PAGE,
        messages: MessageConfig | None = None,
    ) -> None:
        self.manifest = manifest
        self.messages = messages or MessageConfig()
        self.pagination = PaginationState(page_size=page_size)
        self.store = CategoryStore(manifest.categories, self.pagination)
        self.history: History = history if history is not None else BrowserHistory()
        self.navigation = NavigationSync(self.store, self.history)
        self.manifest_path: Path | None = None
        self._initialized = False

    @classmethod
    def open(
        cls,
        config: Config,
        *,
        page_url: str | None = None,
        declared: str | None = None,
        history: History | None = None,
    ) -> "GallerySession":
        """Resolve and load the manifest for ``page_url``, then initialize a session.

        Raises ``GalleryLoadError`` when the manifest cannot be loaded.
        """
        manifest_path = resolve_manifest_path(
            page_url,
            declared=declared or config.manifest_path,
            data_dir=config.data_dir,
        )
        manifest = fetch_gallery_data(manifest_path, root=config.site_root)
        if history is None and page_url:
            history = BrowserHistory(page_url)
        session = cls(manifest, history, page_size=config.page_size, messages=config.messages)
        session.manifest_path = Path(manifest_path)
        session.initialize()
        return session

    def initialize(self) -> Category:
        category = self.navigation.initialize()
        self._initialized = True
        logger.debug("Gallery initialized on category %r", category.slug)
        return category

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def current_category(self) -> Category | None:
        return self.store.current_category

    @property
    def current_page(self) -> int:
        return self.pagination.current_page

    @property
    def source_label(self) -> str:
        return format_source_label(self.manifest)

    @property
    def category_meta(self) -> str:
        category = self.current_category
        if category is None:
            return ""
        return f"{category.item_count} plots • {category.path}"

    @property
    def message(self) -> str | None:
        """Empty-state message for the current category, if any."""
        category = self.current_category
        if category is None or not category.items:
            return self.messages.empty_category
        return None

    def select_category(self, slug: str) -> Category:
        return self.navigation.select_category(slug)

    def next_page(self) -> bool:
        return self.pagination.next_page()

    def prev_page(self) -> bool:
        return self.pagination.prev_page()

    def go_back(self) -> bool:
        return self._traverse(-1)

    def go_forward(self) -> bool:
        return self._traverse(1)

    def nav_entries(self) -> list[CategoryNavEntry]:
        return self.store.nav_entries()

    def item_src(self, item: GalleryItem, category: Category | None = None) -> str:
        category = category or self.current_category
        return join_asset_url(self.manifest.base_url, category.path if category else None, item.file)

    def item_views(self) -> list[ItemView]:
        category = self.current_category
        views: list[ItemView] = []
        for item in self.pagination.visible_items():
            views.append(
                ItemView(
                    title=item.title,
                    kind="iframe" if item.is_html else "image",
                    src=self.item_src(item, category),
                    tags=tuple(label_tags(resolve_tags(item, category))),
                )
            )
        return views

    def pagination_view(self) -> PaginationView:
        pagination = self.pagination
        category = self.current_category
        has_items = category is not None and bool(category.items)
        return PaginationView(
            label=pagination.label(),
            prev_disabled=not has_items or pagination.prev_disabled,
            next_disabled=not has_items or pagination.next_disabled,
            page=pagination.current_page,
            total_pages=pagination.total_pages(),
        )

    def _traverse(self, delta: int) -> bool:
        history = self.history
        if not isinstance(history, BrowserHistory):
            raise TypeError("History traversal requires a BrowserHistory instance")
        return history.go(delta)
