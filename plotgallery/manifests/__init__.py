"""Manifest data structures and helpers."""

from .loader import (
    GalleryLoadError,
    fetch_gallery_data,
    format_source_label,
    parse_manifest,
    read_manifest_payload,
    resolve_manifest_path,
)
from .models import Category, EntryMeta, GalleryItem, GalleryManifest

__all__ = [
    "Category",
    "EntryMeta",
    "GalleryItem",
    "GalleryLoadError",
    "GalleryManifest",
    "fetch_gallery_data",
    "format_source_label",
    "parse_manifest",
    "read_manifest_payload",
    "resolve_manifest_path",
]
