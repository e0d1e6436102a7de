"""Derive short display tags for gallery items.

Tags come from the first probe in a fixed priority chain that yields
anything: explicit ``tags``, the legacy singular ``tag``, descriptive meta
fields, the item's location on disk, and finally its type or extension.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from .manifests.models import Category, EntryMeta, GalleryItem
from .segments import clean_segments, coerce_to_segments, split_path_segments

MAX_TAGS = 3
MAX_TIER = 3
FILENAME_PATTERN = re.compile(r"\.[A-Za-z0-9]+$")

TagProbe = Callable[[GalleryItem, Optional[Category]], list[str]]


@dataclass(frozen=True, slots=True)
class TagLabel:
    """Tag text paired with the styling tier used by the renderer."""

    label: str
    tier: int


def probe_explicit_tags(item: GalleryItem, category: Category | None) -> list[str]:
    return _first_non_empty(_field_sources(item, category, "tags"))


def probe_legacy_tag(item: GalleryItem, category: Category | None) -> list[str]:
    return _first_non_empty(_field_sources(item, category, "tag"))


def probe_meta_segments(item: GalleryItem, category: Category | None) -> list[str]:
    """Collect dataset, embedding model and cebra-or-notes values."""
    dataset = _meta_value(item, category, "dataset")
    embedding = _meta_value(item, category, "embedding_model")
    cebra = _meta_value(item, category, "cebra")
    notes = _meta_value(item, category, "notes")

    segments: list[Any] = []
    if dataset:
        segments.append(dataset)
    if embedding:
        segments.append(embedding)
    if cebra:
        segments.append(cebra)
    elif notes:
        segments.append(notes)
    return clean_segments(segments)


def probe_path_segments(item: GalleryItem, category: Category | None) -> list[str]:
    """Use the trailing directories of the category path and item file."""
    category_segments = split_path_segments(category.path if category else None)
    item_segments = split_path_segments(item.file)
    if item_segments and FILENAME_PATTERN.search(item_segments[-1]):
        item_segments.pop()

    combined = category_segments + item_segments
    if not combined:
        return []
    return clean_segments(combined[-MAX_TAGS:])


def probe_type_fallback(item: GalleryItem, category: Category | None) -> list[str]:
    if item.is_html:
        return ["HTML"]
    parts = item.filename.split(".")
    extension = parts[-1] if len(parts) > 1 else item.type
    return [str(extension).upper()] if extension else []


DEFAULT_PROBES: tuple[TagProbe, ...] = (
    probe_explicit_tags,
    probe_legacy_tag,
    probe_meta_segments,
    probe_path_segments,
    probe_type_fallback,
)


def resolve_tags(
    item: GalleryItem,
    category: Category | None = None,
    probes: Sequence[TagProbe] = DEFAULT_PROBES,
) -> list[str]:
    """Return at most three tags from the first probe yielding any."""
    for probe in probes:
        segments = probe(item, category)
        if segments:
            return segments[:MAX_TAGS]
    return []


def label_tags(tags: Iterable[str]) -> list[TagLabel]:
    return [TagLabel(label=tag, tier=min(index + 1, MAX_TIER)) for index, tag in enumerate(tags)]


def _field_sources(item: GalleryItem, category: Category | None, field: str) -> list[Any]:
    sources = [getattr(item, field), _meta_attr(item.meta, field)]
    if category is not None:
        sources.extend([getattr(category, field), _meta_attr(category.meta, field)])
    return sources


def _first_non_empty(sources: Iterable[Any]) -> list[str]:
    for source in sources:
        segments = coerce_to_segments(source)
        if segments:
            return segments
    return []


def _meta_value(item: GalleryItem, category: Category | None, field: str) -> Any:
    value = _meta_attr(item.meta, field)
    if value:
        return value
    if category is None:
        return None
    return _meta_attr(category.meta, field)


def _meta_attr(meta: EntryMeta | None, field: str) -> Any:
    if meta is None:
        return None
    return getattr(meta, field, None)
