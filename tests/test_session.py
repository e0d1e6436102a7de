from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from plotgallery.config import Config, MessageConfig
from plotgallery.manifests import GalleryLoadError, GalleryManifest
from plotgallery.navigation import BrowserHistory
from plotgallery.session import GallerySession
from plotgallery.tags import TagLabel


def _manifest_payload(base_url: str = "assets/plots") -> dict[str, Any]:
    return {
        "baseUrl": base_url,
        "sourceLabel": "results/embeddings",
        "categories": [
            {
                "slug": "scatter",
                "name": "Scatter",
                "path": "plots/scatter runs",
                "items": [
                    {"title": f"Figure {i}", "file": f"fig {i}.png", "type": "image", "filename": f"fig {i}.png"}
                    for i in range(25)
                ],
            },
            {
                "slug": "reports",
                "name": "Reports",
                "path": "reports",
                "tags": ["Report", "Interactive"],
                "items": [{"title": "Summary", "file": "summary.html", "type": "html"}],
            },
            {"slug": "empty", "name": "Empty", "path": "nothing", "items": []},
        ],
    }


def _session(url: str = "http://localhost/gallery/", **kwargs: Any) -> GallerySession:
    manifest = GalleryManifest.model_validate(_manifest_payload(**kwargs))
    session = GallerySession(manifest, BrowserHistory(url))
    session.initialize()
    return session


def test_initialize_selects_default_category() -> None:
    session = _session()

    assert session.initialized
    assert session.current_category is not None and session.current_category.slug == "scatter"
    assert session.current_page == 0
    assert session.category_meta == "25 plots • plots/scatter runs"
    assert session.source_label == "results/embeddings"
    assert session.message is None


def test_item_views_encode_sources_and_derive_tags() -> None:
    session = _session()

    views = session.item_views()

    assert len(views) == 12
    first = views[0]
    assert first.title == "Figure 0"
    assert first.kind == "image"
    assert first.src == "assets/plots/plots/scatter%20runs/fig%200.png"
    assert first.tags == (TagLabel("plots", 1), TagLabel("scatter runs", 2))


def test_item_views_for_html_category() -> None:
    session = _session()
    session.select_category("reports")

    (view,) = session.item_views()

    assert view.kind == "iframe"
    assert view.src == "assets/plots/reports/summary.html"
    assert [tag.label for tag in view.tags] == ["Report", "Interactive"]


def test_absolute_base_url_is_not_encoded() -> None:
    session = _session(base_url="https://cdn.example.com/gallery/")
    session.select_category("reports")

    assert session.item_views()[0].src == "https://cdn.example.com/gallery/reports/summary.html"


def test_pagination_view_tracks_page_changes() -> None:
    session = _session()

    view = session.pagination_view()
    assert (view.label, view.prev_disabled, view.next_disabled) == ("1-12 / 25", True, False)

    assert session.next_page()
    assert session.next_page()
    assert not session.next_page()

    view = session.pagination_view()
    assert (view.label, view.prev_disabled, view.next_disabled) == ("25-25 / 25", False, True)
    assert view.page == 2 and view.total_pages == 3
    assert [item.title for item in session.item_views()] == ["Figure 24"]


def test_category_change_resets_page() -> None:
    session = _session()
    session.next_page()

    session.select_category("reports")

    assert session.current_page == 0
    assert session.pagination_view().label == "1-1 / 1"


def test_empty_category_state() -> None:
    session = _session("http://localhost/gallery/?category=empty")

    view = session.pagination_view()

    assert view.label == "0 / 0"
    assert view.prev_disabled and view.next_disabled
    assert session.item_views() == []
    assert session.message == MessageConfig().empty_category


def test_back_and_forward_restore_categories() -> None:
    session = _session()
    session.select_category("reports")
    session.select_category("empty")

    assert session.go_back() is True
    assert session.current_category is not None and session.current_category.slug == "reports"
    assert session.go_back() is True
    assert session.current_category.slug == "scatter"
    assert session.go_back() is False
    assert session.go_forward() is True
    assert session.current_category.slug == "reports"
    assert len(session.history) == 3  # type: ignore[arg-type]


def test_nav_entries_reflect_selection() -> None:
    session = _session()
    session.select_category("reports")

    entries = session.nav_entries()

    assert [(entry.slug, entry.item_count, entry.active) for entry in entries] == [
        ("scatter", 25, False),
        ("reports", 1, True),
        ("empty", 0, False),
    ]


def test_open_resolves_manifest_from_data_parameter(tmp_path: Path) -> None:
    data_dir = tmp_path / "assets" / "data"
    data_dir.mkdir(parents=True)
    (data_dir / "session2.json").write_text(json.dumps(_manifest_payload()), encoding="utf-8")
    config = Config(site_root=tmp_path, page_size=10)

    session = GallerySession.open(config, page_url="http://localhost/?data=session2&category=reports")

    assert session.manifest_path == Path("assets/data/session2.json")
    assert session.current_category is not None and session.current_category.slug == "reports"
    assert session.pagination.page_size == 10
    assert session.history.url == "http://localhost/?data=session2&category=reports"


def test_open_raises_load_error_for_missing_manifest(tmp_path: Path) -> None:
    config = Config(site_root=tmp_path)

    with pytest.raises(GalleryLoadError):
        GallerySession.open(config)
