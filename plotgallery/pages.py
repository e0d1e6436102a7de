"""Render static HTML snapshots of gallery category pages."""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from textwrap import dedent, indent
from urllib.parse import urlsplit

from .session import GallerySession, ItemView, PaginationView
from .store import CategoryNavEntry

logger = logging.getLogger(__name__)

DEFAULT_PAGE_TITLE = "Plot Gallery"

GALLERY_STYLE = dedent(
    """
    body {
      margin: 0;
      padding: 2rem 1.5rem;
      font-family: "Segoe UI", system-ui, -apple-system, sans-serif;
      background: #0f172a;
      color: #e2e8f0;
    }

    .category-nav {
      display: flex;
      flex-wrap: wrap;
      gap: 0.5rem;
      margin-bottom: 1rem;
    }

    .category-pill {
      display: inline-flex;
      gap: 0.5rem;
      padding: 0.4rem 0.9rem;
      border-radius: 999px;
      background: #1e293b;
      color: inherit;
      text-decoration: none;
    }

    .category-pill.active {
      background: #2563eb;
    }

    .gallery-grid {
      display: grid;
      grid-template-columns: repeat(auto-fill, minmax(18rem, 1fr));
      gap: 1.25rem;
    }

    .gallery-item {
      background: #1e293b;
      border-radius: 12px;
      padding: 1rem;
    }

    .gallery-item-content iframe {
      width: 100%;
      min-height: 18rem;
      border: 0;
    }

    .gallery-item-tags {
      display: flex;
      flex-wrap: wrap;
      gap: 0.35rem;
      margin-top: 0.75rem;
    }

    .gallery-item-tag {
      font-size: 0.75rem;
      padding: 0.15rem 0.5rem;
      border-radius: 999px;
    }

    .tag-level-1 { background: #1d4ed8; }
    .tag-level-2 { background: #0f766e; }
    .tag-level-3 { background: #6d28d9; }

    .gallery-message.is-visible {
      padding: 1rem;
      border-radius: 8px;
      background: #334155;
    }

    .pagination {
      display: flex;
      align-items: center;
      gap: 1rem;
      margin-top: 1.5rem;
    }

    .pagination .is-disabled {
      opacity: 0.4;
      pointer-events: none;
    }
    """
).strip()


def page_filename(page: int) -> str:
    """Filename for a zero-based page index inside a category directory."""
    return "index.html" if page == 0 else f"page-{page + 1}.html"


def render_gallery_page(
    session: GallerySession,
    *,
    title: str = DEFAULT_PAGE_TITLE,
    depth: int = 1,
) -> str:
    """Render the session's current category and page as a standalone document.

    ``depth`` is the number of directories between the written file and the
    site root; relative links and asset sources are prefixed accordingly.
    """
    prefix = "../" * depth
    category = session.current_category
    heading = (category.name or category.slug) if category else ""
    pagination = session.pagination_view()

    sections = [
        f'<h1 class="gallery-title">{escape(title)}</h1>',
        _render_source(session.source_label),
        _render_nav(session.nav_entries(), prefix),
        f'<p id="category-meta" class="category-meta">{escape(session.category_meta)}</p>',
        _render_message(session.message),
        _render_grid(session.item_views(), prefix),
        _render_pagination(pagination, category.slug if category else "", prefix),
    ]
    body = "\n".join(section for section in sections if section)

    document = dedent(
        """
        <!DOCTYPE html>
        <html lang="en">
        <head>
          <meta charset="utf-8">
          <meta name="viewport" content="width=device-width, initial-scale=1">
          <title>{page_title}</title>
          <style>
        {style}
          </style>
        </head>
        <body>
        <main class="gallery" data-category="{slug}" data-page="{page}">
        {body}
        </main>
        </body>
        </html>
        """
    ).strip()
    page_title = f"{title} | {heading}" if heading else title
    return (
        document.replace("{page_title}", escape(page_title))
        .replace("{style}", indent(GALLERY_STYLE, "    "))
        .replace("{slug}", escape(category.slug if category else "", quote=True))
        .replace("{page}", str(pagination.page + 1))
        .replace("{body}", indent(body, "  "))
        + "\n"
    )


def write_gallery_site(
    session: GallerySession,
    output_dir: Path,
    *,
    title: str = DEFAULT_PAGE_TITLE,
) -> list[Path]:
    """Write every page of every category, plus a root index for the default category.

    The session's category selection is restored before returning; its
    history is left untouched.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    store = session.store
    pagination = session.pagination
    original = store.current_category
    original_page = pagination.current_page
    written: list[Path] = []

    try:
        for category in store.categories:
            store.select(category.slug)
            category_dir = output_dir / category.slug
            category_dir.mkdir(parents=True, exist_ok=True)
            while True:
                target = category_dir / page_filename(pagination.current_page)
                target.write_text(render_gallery_page(session, title=title, depth=1), encoding="utf-8")
                written.append(target)
                if not pagination.next_page():
                    break

        store.select(store.default_category.slug)
        root_index = output_dir / "index.html"
        root_index.write_text(render_gallery_page(session, title=title, depth=0), encoding="utf-8")
        written.append(root_index)
    finally:
        if original is not None:
            store.select(original.slug)
            pagination.current_page = original_page

    logger.debug("Wrote %d gallery page(s) to %s", len(written), output_dir)
    return written


def _render_source(label: str) -> str:
    if not label:
        return ""
    return f'<p id="gallery-source" class="gallery-source">Source: {escape(label)}</p>'


def _render_nav(entries: list[CategoryNavEntry], prefix: str) -> str:
    pills: list[str] = []
    for entry in entries:
        classes = "category-pill active" if entry.active else "category-pill"
        href = f"{prefix}{escape(entry.slug, quote=True)}/index.html"
        current = ' aria-current="page"' if entry.active else ""
        pills.append(
            f'<a class="{classes}" href="{href}" data-slug="{escape(entry.slug, quote=True)}"{current}>'
            f'<span class="pill-label">{escape(entry.name)}</span>'
            f'<span class="pill-count">{entry.item_count}</span></a>'
        )
    return '<nav id="category-nav" class="category-nav">\n' + indent("\n".join(pills), "  ") + "\n</nav>"


def _render_message(message: str | None) -> str:
    if not message:
        return ""
    return f'<p id="gallery-message" class="gallery-message is-visible">{escape(message)}</p>'


def _render_grid(items: list[ItemView], prefix: str) -> str:
    if not items:
        return ""
    cards = "\n".join(_render_item(item, prefix) for item in items)
    return '<section id="gallery-container" class="gallery-grid">\n' + indent(cards, "  ") + "\n</section>"


def _render_item(item: ItemView, prefix: str) -> str:
    src = escape(_relative_src(item.src, prefix), quote=True)
    title = escape(item.title, quote=True)
    if item.kind == "iframe":
        content = f'<iframe src="{src}" title="{title}" loading="lazy"></iframe>'
    else:
        content = f'<img src="{src}" alt="{title}" loading="lazy" style="width: 100%; height: auto;">'

    lines = [
        '<div class="gallery-item">',
        f'  <h3 class="gallery-item-title">{escape(item.title)}</h3>',
        f'  <div class="gallery-item-content">{content}</div>',
    ]
    if item.tags:
        spans = "".join(
            f'<span class="gallery-item-tag tag-level-{tag.tier}">{escape(tag.label)}</span>'
            for tag in item.tags
        )
        lines.append(f'  <div class="gallery-item-tags">{spans}</div>')
    lines.append("</div>")
    return "\n".join(lines)


def _render_pagination(view: PaginationView, slug: str, prefix: str) -> str:
    base = f"{prefix}{escape(slug, quote=True)}/"
    prev_link = _pager_link("prev-btn", "Previous", view.prev_disabled, base + page_filename(view.page - 1))
    next_link = _pager_link("next-btn", "Next", view.next_disabled, base + page_filename(view.page + 1))
    return "\n".join(
        [
            '<nav class="pagination">',
            f"  {prev_link}",
            f'  <span id="pagination-info" class="pagination-info">{escape(view.label)}</span>',
            f"  {next_link}",
            "</nav>",
        ]
    )


def _pager_link(element_id: str, label: str, disabled: bool, href: str) -> str:
    if disabled:
        return f'<span id="{element_id}" class="pager is-disabled" aria-disabled="true">{label}</span>'
    return f'<a id="{element_id}" class="pager" href="{href}">{label}</a>'


def _relative_src(src: str, prefix: str) -> str:
    if src.startswith("/") or urlsplit(src).scheme:
        return src
    return f"{prefix}{src}"
