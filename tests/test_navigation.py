from __future__ import annotations

from plotgallery.manifests import Category, GalleryItem
from plotgallery.navigation import BrowserHistory, NavigationSync
from plotgallery.store import CategoryStore
from plotgallery.urls import get_query_param


def _store() -> CategoryStore:
    return CategoryStore(
        [
            Category(slug="first", name="First", items=[GalleryItem(title="1", file="1.png")]),
            Category(slug="second", name="Second", items=[GalleryItem(title="2", file="2.png")]),
            Category(slug="third", name="Third", items=[]),
        ]
    )


def _sync(url: str = "http://localhost/gallery/") -> tuple[CategoryStore, BrowserHistory, NavigationSync]:
    store = _store()
    history = BrowserHistory(url)
    sync = NavigationSync(store, history)
    return store, history, sync


def test_browser_history_push_truncates_forward_entries() -> None:
    history = BrowserHistory("http://localhost/")
    history.push_state({"category": "a"}, "http://localhost/?category=a")
    history.push_state({"category": "b"}, "http://localhost/?category=b")
    history.back()
    history.push_state({"category": "c"}, "http://localhost/?category=c")

    assert [entry.state for entry in history.entries] == [None, {"category": "a"}, {"category": "c"}]
    assert not history.can_go_forward()


def test_browser_history_traversal_fires_pop_listeners() -> None:
    history = BrowserHistory("http://localhost/")
    history.push_state({"category": "a"}, "http://localhost/?category=a")
    events: list[object] = []
    history.add_pop_listener(events.append)

    assert history.back() is True
    assert history.back() is False
    assert history.forward() is True
    assert events == [None, {"category": "a"}]
    assert history.go(0) is False


def test_initialize_selects_category_from_url_without_new_entry() -> None:
    store, history, sync = _sync("http://localhost/gallery/?category=second")

    category = sync.initialize()

    assert category.slug == "second"
    assert store.current_category is category
    assert len(history) == 1
    assert history.state == {"category": "second"}


def test_initialize_with_unknown_slug_rewrites_url_to_default() -> None:
    store, history, sync = _sync("http://localhost/gallery/?data=runs&category=missing")

    sync.initialize()

    assert store.current_category is not None and store.current_category.slug == "first"
    assert len(history) == 1
    assert get_query_param(history.url, "category") == "first"
    assert get_query_param(history.url, "data") == "runs"
    assert history.state == {"category": "first"}


def test_initialize_without_parameter_adds_default() -> None:
    _, history, sync = _sync()

    sync.initialize()

    assert history.url == "http://localhost/gallery/?category=first"


def test_select_category_pushes_history_entry() -> None:
    store, history, sync = _sync()
    sync.initialize()

    sync.select_category("second")

    assert store.current_category is not None and store.current_category.slug == "second"
    assert len(history) == 2
    assert history.state == {"category": "second"}
    assert get_query_param(history.url, "category") == "second"


def test_select_current_category_is_noop() -> None:
    _, history, sync = _sync()
    sync.initialize()

    sync.select_category("first")

    assert len(history) == 1


def test_select_unknown_category_pushes_resolved_slug() -> None:
    store, history, sync = _sync()
    sync.initialize()
    sync.select_category("second")

    sync.select_category("bogus")

    assert store.current_category is not None and store.current_category.slug == "first"
    assert history.state == {"category": "first"}
    assert len(history) == 3


def test_back_navigation_restores_previous_category_without_new_entries() -> None:
    store, history, sync = _sync()
    sync.initialize()
    sync.select_category("second")

    history.back()

    assert store.current_category is not None and store.current_category.slug == "first"
    assert len(history) == 2
    assert history.can_go_forward()

    history.forward()

    assert store.current_category.slug == "second"
    assert len(history) == 2
    assert not history.can_go_forward()


def test_pop_without_state_reparses_url() -> None:
    store, history, sync = _sync()
    sync.initialize()
    history.push_state(None, "http://localhost/gallery/?category=third")

    changed = sync.handle_pop(None)

    assert changed is True
    assert store.current_category is not None and store.current_category.slug == "third"


def test_pop_for_current_category_is_ignored() -> None:
    store, _, sync = _sync()
    sync.initialize()
    seen: list[str] = []
    store.subscribe(lambda category: seen.append(category.slug))

    assert sync.handle_pop({"category": "first"}) is False
    assert seen == []


def test_initialize_registers_pop_listener_once() -> None:
    _, history, sync = _sync()

    sync.initialize()
    sync.initialize()

    assert len(history._listeners) == 1
    assert len(history) == 1
