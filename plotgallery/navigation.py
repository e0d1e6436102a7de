"""Keep the selected category in step with the address bar and history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol

from .manifests.models import Category
from .store import CategoryStore
from .urls import get_query_param, with_query_param

logger = logging.getLogger(__name__)

CATEGORY_PARAM = "category"
DEFAULT_URL = "http://localhost/"

HistoryState = Optional[Mapping[str, Any]]
PopListener = Callable[[HistoryState], None]


class History(Protocol):
    """Subset of the browser history API the synchronizer relies on."""

    @property
    def url(self) -> str:
        ...

    def push_state(self, state: HistoryState, url: str) -> None:
        ...

    def replace_state(self, state: HistoryState, url: str) -> None:
        ...

    def add_pop_listener(self, listener: PopListener) -> None:
        ...


@dataclass(slots=True)
class HistoryEntry:
    state: HistoryState
    url: str


class BrowserHistory:
    """In-memory session history with browser push/replace/pop semantics."""

    def __init__(self, url: str = DEFAULT_URL, state: HistoryState = None) -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(state=state, url=url)]
        self._index = 0
        self._listeners: list[PopListener] = []

    @property
    def url(self) -> str:
        return self._entries[self._index].url

    @property
    def state(self) -> HistoryState:
        return self._entries[self._index].state

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._entries)

    def push_state(self, state: HistoryState, url: str) -> None:
        # Pushing discards any forward entries.
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(state=_copy_state(state), url=url))
        self._index += 1

    def replace_state(self, state: HistoryState, url: str) -> None:
        self._entries[self._index] = HistoryEntry(state=_copy_state(state), url=url)

    def add_pop_listener(self, listener: PopListener) -> None:
        self._listeners.append(listener)

    def can_go_back(self) -> bool:
        return self._index > 0

    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)

    def go(self, delta: int) -> bool:
        """Move ``delta`` entries and fire pop listeners; False when out of range."""
        target = self._index + delta
        if delta == 0 or target < 0 or target >= len(self._entries):
            return False
        self._index = target
        state = self.state
        for listener in list(self._listeners):
            listener(state)
        return True


class NavigationSync:
    """Two-way binding between the store selection and the ``category`` parameter."""

    def __init__(self, store: CategoryStore, history: History) -> None:
        self._store = store
        self._history = history
        self._attached = False

    @property
    def history(self) -> History:
        return self._history

    def initialize(self) -> Category:
        """Select the category named by the URL (or the default) and canonicalize the URL."""
        slug = get_query_param(self._history.url, CATEGORY_PARAM)
        if not self._store.has_slug(slug):
            if slug:
                logger.debug("URL names unknown category %r; using default", slug)
            slug = self._store.default_category.slug
        category = self._store.select(slug)
        self._write_url(category.slug, replace=True)
        if not self._attached:
            self._history.add_pop_listener(self.handle_pop)
            self._attached = True
        return category

    def select_category(self, slug: str) -> Category:
        """Handle a user-initiated category change by pushing a history entry."""
        current = self._store.current_category
        if current is not None and current.slug == slug:
            return current
        category = self._store.select(slug)
        self._write_url(category.slug, replace=False)
        return category

    def handle_pop(self, state: HistoryState) -> bool:
        """React to back/forward navigation without writing history."""
        slug = None
        if state:
            slug = state.get(CATEGORY_PARAM)
        if not slug:
            slug = get_query_param(self._history.url, CATEGORY_PARAM)
        current = self._store.current_category
        if not slug or (current is not None and slug == current.slug):
            return False
        self._store.select(slug)
        return True

    def _write_url(self, slug: str, *, replace: bool) -> None:
        url = with_query_param(self._history.url, CATEGORY_PARAM, slug)
        state = {CATEGORY_PARAM: slug}
        if replace:
            self._history.replace_state(state, url)
        else:
            self._history.push_state(state, url)


def _copy_state(state: HistoryState) -> HistoryState:
    return dict(state) if state is not None else None
