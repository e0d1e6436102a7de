"""Pydantic models describing the gallery manifest."""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SLUG_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class EntryMeta(BaseModel):
    """Optional descriptive fields shared by categories and items."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    tags: Any = Field(default=None, description="Preferred tag source (list or delimited string).")
    tag: Any = Field(default=None, description="Legacy singular tag source.")
    dataset: Any = Field(default=None)
    embedding_model: Any = Field(default=None, alias="embeddingModel")
    cebra: Any = Field(default=None)
    notes: Any = Field(default=None)


class GalleryItem(BaseModel):
    """A single plot artifact rendered as an image or embedded HTML."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str = Field(default="")
    file: str = Field(description="Path of the artifact relative to the category path.")
    type: str = Field(default="", description="'html' for embedded documents, anything else for images.")
    filename: str = Field(default="", description="Display filename used for extension fallback tags.")
    tags: Any = Field(default=None)
    tag: Any = Field(default=None)
    meta: Optional[EntryMeta] = Field(default=None)

    @field_validator("title", "type", "filename", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @model_validator(mode="after")
    def _default_filename(self) -> "GalleryItem":
        if not self.filename:
            self.filename = self.file.replace("\\", "/").rsplit("/", 1)[-1]
        return self

    @property
    def is_html(self) -> bool:
        return self.type == "html"


class Category(BaseModel):
    """A named group of items addressed by a URL-safe slug."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slug: str
    name: str = Field(default="")
    path: str = Field(default="")
    items: list[GalleryItem] = Field(default_factory=list)
    tags: Any = Field(default=None)
    tag: Any = Field(default=None)
    meta: Optional[EntryMeta] = Field(default=None)

    @field_validator("slug", mode="before")
    @classmethod
    def _normalize_slug(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        if not text:
            raise ValueError("Category slug cannot be empty.")
        if not SLUG_PATTERN.match(text):
            raise ValueError(f"Category slug '{text}' must contain only letters, digits, '-', '_' or '.'.")
        return text

    @field_validator("name", "path", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @property
    def item_count(self) -> int:
        return len(self.items)


class GalleryManifest(BaseModel):
    """Top-level manifest produced by the gallery build step."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    base_url: str = Field(default="", alias="baseUrl")
    source_dir: Optional[str] = Field(default=None, alias="sourceDir")
    source_label: Optional[str] = Field(default=None, alias="sourceLabel")
    categories: list[Category] = Field(default_factory=list)

    @field_validator("base_url", mode="before")
    @classmethod
    def _coerce_base_url(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @model_validator(mode="after")
    def _check_unique_slugs(self) -> "GalleryManifest":
        seen: set[str] = set()
        for category in self.categories:
            if category.slug in seen:
                raise ValueError(f"Duplicate category slug '{category.slug}'.")
            seen.add(category.slug)
        return self
