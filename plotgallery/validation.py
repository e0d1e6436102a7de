"""Schema validation and lint diagnostics for gallery manifests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, cast
from urllib.parse import urlsplit

from jsonschema import Draft202012Validator
from pydantic import ValidationError

from .manifests import GalleryManifest
from .segments import has_malformed_escape
from .tags import resolve_tags

SCHEMA_PACKAGE = "plotgallery.schemas"
MANIFEST_SCHEMA_NAME = "gallery_manifest.schema.json"


class IssueSeverity(Enum):
    """Severity level for lint issues."""

    ERROR = auto()
    WARNING = auto()


@dataclass(slots=True)
class ManifestIssue:
    """A single lint finding, located by a JSON-pointer-like path."""

    message: str
    severity: IssueSeverity
    pointer: str | None = None


@dataclass(slots=True)
class LintReport:
    """Aggregate lint results for one manifest."""

    issues: list[ManifestIssue] = field(default_factory=list)
    category_count: int = 0
    item_count: int = 0

    def add(self, message: str, severity: IssueSeverity, pointer: str | None = None) -> None:
        self.issues.append(ManifestIssue(message=message, severity=severity, pointer=pointer))

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.WARNING)


def lint_manifest(payload: Any, *, asset_root: Path | None = None) -> LintReport:
    """Check a raw manifest payload for schema violations and common mistakes.

    When ``asset_root`` is given and the manifest's ``baseUrl`` is relative,
    referenced files are also checked for existence under that directory.
    """
    report = LintReport()

    schema_errors = sorted(_get_manifest_validator().iter_errors(payload), key=lambda err: [str(elem) for elem in err.path])
    for error in schema_errors:
        pointer = "/".join(str(elem) for elem in error.path)
        report.add(error.message, IssueSeverity.ERROR, pointer or None)
    if schema_errors:
        return report

    categories = payload.get("categories") or []
    report.category_count = len(categories)
    report.item_count = sum(len(category.get("items") or []) for category in categories)
    if not categories:
        report.add("No categories found in gallery data.", IssueSeverity.ERROR, "categories")
        return report

    seen: dict[str, int] = {}
    for index, category in enumerate(categories):
        slug = str(category.get("slug", "")).strip()
        if slug in seen:
            report.add(
                f"Duplicate category slug '{slug}' (first used at categories/{seen[slug]}).",
                IssueSeverity.ERROR,
                f"categories/{index}/slug",
            )
        else:
            seen[slug] = index
    if report.error_count:
        return report

    try:
        manifest = GalleryManifest.model_validate(payload)
    except ValidationError as exc:
        report.add(f"Manifest failed model validation: {exc}", IssueSeverity.ERROR)
        return report

    _lint_categories(manifest, report, asset_root)
    return report


def _lint_categories(manifest: GalleryManifest, report: LintReport, asset_root: Path | None) -> None:
    check_files = asset_root is not None and not urlsplit(manifest.base_url).scheme
    for c_index, category in enumerate(manifest.categories):
        pointer = f"categories/{c_index}"
        if not category.items:
            report.add(f"Category '{category.slug}' has no items.", IssueSeverity.WARNING, f"{pointer}/items")
        if has_malformed_escape(category.path):
            report.add(
                f"Category path '{category.path}' contains a malformed percent escape.",
                IssueSeverity.WARNING,
                f"{pointer}/path",
            )

        for i_index, item in enumerate(category.items):
            item_pointer = f"{pointer}/items/{i_index}"
            if has_malformed_escape(item.file):
                report.add(
                    f"Item file '{item.file}' contains a malformed percent escape.",
                    IssueSeverity.WARNING,
                    f"{item_pointer}/file",
                )
            if not resolve_tags(item, category):
                report.add(
                    f"Item '{item.title or item.file}' has no derivable tags.",
                    IssueSeverity.WARNING,
                    item_pointer,
                )
            if check_files:
                expected = cast(Path, asset_root) / manifest.base_url.lstrip("/") / category.path / item.file
                if not expected.exists():
                    report.add(
                        f"Asset not found: {item.file} (expected at {expected})",
                        IssueSeverity.WARNING,
                        f"{item_pointer}/file",
                    )


@lru_cache(maxsize=1)
def _get_manifest_validator() -> Draft202012Validator:
    return Draft202012Validator(_load_schema(MANIFEST_SCHEMA_NAME))


def _load_schema(name: str) -> dict[str, Any]:
    with resources.files(SCHEMA_PACKAGE).joinpath(name).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"Schema '{name}' must be a JSON object.")
    return cast(dict[str, Any], payload)
