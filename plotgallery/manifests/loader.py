"""Locate, read and parse gallery manifests."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..urls import get_query_param
from .models import GalleryManifest

logger = logging.getLogger(__name__)

DATA_PARAM = "data"
DEFAULT_DATA_DIR = "assets/data"
DEFAULT_MANIFEST_PATH = "assets/data/gallery-data.json"
DRIVE_PREFIX = re.compile(r"^[A-Za-z]:/")


class GalleryLoadError(RuntimeError):
    """Raised when the manifest cannot be loaded; the gallery never initializes."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path


def resolve_manifest_path(
    page_url: str | None = None,
    *,
    declared: str | None = None,
    data_dir: str = DEFAULT_DATA_DIR,
    default: str = DEFAULT_MANIFEST_PATH,
) -> str:
    """Pick the manifest location for a page.

    An explicitly declared path wins, then the page's ``data`` query
    parameter, then the default manifest. A ``data`` value without a
    ``.json`` suffix names a file inside ``data_dir``.
    """
    if declared:
        return declared
    requested = get_query_param(page_url, DATA_PARAM)
    if requested:
        if requested.endswith(".json"):
            return requested
        return f"{data_dir.rstrip('/')}/{requested}.json"
    return default


def read_manifest_payload(path: Path | str, *, root: Path | None = None) -> dict[str, Any]:
    """Read the raw JSON object stored at ``path``."""
    target = _resolve_target(path, root)
    try:
        text = target.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise GalleryLoadError(f"Failed to load gallery data (not found: {target})", path=target) from exc
    except OSError as exc:
        raise GalleryLoadError(f"Failed to load gallery data ({exc})", path=target) from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GalleryLoadError(f"Invalid JSON in gallery data {target}: {exc}", path=target) from exc
    if not isinstance(payload, dict):
        raise GalleryLoadError(
            f"Expected a JSON object in {target}, received {type(payload).__name__}",
            path=target,
        )
    return payload


def parse_manifest(payload: dict[str, Any], *, path: Path | str | None = None) -> GalleryManifest:
    try:
        manifest = GalleryManifest.model_validate(payload)
    except ValidationError as exc:
        raise GalleryLoadError(f"Malformed gallery data: {exc}", path=path) from exc
    if not manifest.categories:
        raise GalleryLoadError("No categories found in gallery data", path=path)
    return manifest


def fetch_gallery_data(path: Path | str, *, root: Path | None = None) -> GalleryManifest:
    """Load and validate the manifest, raising ``GalleryLoadError`` on any failure."""
    target = _resolve_target(path, root)
    payload = read_manifest_payload(target)
    try:
        manifest = parse_manifest(payload, path=target)
    except GalleryLoadError as exc:
        logger.warning("%s", exc)
        raise
    logger.debug("Loaded %d categories from %s", len(manifest.categories), target)
    return manifest


def format_source_label(manifest: GalleryManifest) -> str:
    """Describe where the plots came from, shortening absolute directories."""
    if manifest.source_label:
        return manifest.source_label
    if not manifest.source_dir:
        return ""
    normalized = manifest.source_dir.replace("\\", "/").rstrip("/")
    if DRIVE_PREFIX.match(normalized) or normalized.startswith("/"):
        parts = [part for part in normalized.split("/") if part]
        if len(parts) >= 2:
            return "/".join(parts[-2:])
    return manifest.source_dir


def _resolve_target(path: Path | str, root: Path | None) -> Path:
    target = Path(path)
    if root is not None and not target.is_absolute():
        target = root / target
    return target
