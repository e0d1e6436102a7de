from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .manifests.loader import DEFAULT_DATA_DIR
from .pagination import PLOTS_PER_PAGE

CONFIG_FILENAME = "plotgallery.yml"


class MessageConfig(BaseModel):
    """User-facing status strings shown by the gallery."""

    loading: str = Field(default="Loading plots...")
    empty_category: str = Field(
        default="This category has no plots to display.",
        description="Shown in place of the grid when the selected category has no items.",
    )
    load_failed: str = Field(
        default="Failed to load gallery data. Rebuild the gallery manifest and try again.",
        description="Single user-visible error shown when the manifest cannot be loaded.",
    )


class Config(BaseModel):
    project_name: str = Field(default="Plot Gallery")
    site_root: Path = Field(
        default=Path("."),
        description="Directory that manifest and asset paths are resolved against.",
    )
    data_dir: str = Field(
        default=DEFAULT_DATA_DIR,
        description="Site-relative directory used to expand short 'data' parameters.",
    )
    manifest_path: str | None = Field(
        default=None,
        description="Explicit manifest path; overrides the 'data' URL parameter when set.",
    )
    output_dir: Path = Field(default=Path("site"))
    page_size: int = Field(default=PLOTS_PER_PAGE, ge=1)
    messages: MessageConfig = Field(default_factory=MessageConfig)

    @field_validator("site_root", "output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("data_dir", mode="before")
    def _normalize_data_dir(cls, value: Any) -> str:
        text = str(value or "").strip().replace("\\", "/").rstrip("/")
        return text or DEFAULT_DATA_DIR

    @field_validator("manifest_path", mode="before")
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point at a ``plotgallery.yml`` file or at a directory that
    contains one. A directory without a config file yields the defaults,
    anchored to that directory.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)

    def _abs(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.site_root = _abs(cfg.site_root)
    cfg.output_dir = _abs(cfg.output_dir)
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must define a mapping.")
    return data
