from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from plotgallery.config import Config, load_config


def _write_project_config(root: Path) -> Path:
    config_text = (
        "project_name: Embedding Plots\n"
        "site_root: public\n"
        "data_dir: assets/manifests/\n"
        "output_dir: build/site\n"
        "page_size: 8\n"
        "messages:\n"
        "  empty_category: Nothing here yet.\n"
    )
    cfg_path = root / "plotgallery.yml"
    cfg_path.write_text(config_text, encoding="utf-8")
    return cfg_path


def test_load_config_resolves_paths_relative_to_config_directory(tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()
    _write_project_config(project)

    # Pass a directory path; loader should find plotgallery.yml inside it.
    cfg = load_config(project)

    assert cfg.project_name == "Embedding Plots"
    assert cfg.site_root == (project / "public").resolve()
    assert cfg.output_dir == (project / "build" / "site").resolve()
    assert cfg.data_dir == "assets/manifests"
    assert cfg.page_size == 8
    assert cfg.messages.empty_category == "Nothing here yet."
    assert cfg.manifest_path is None


def test_load_config_accepts_config_file_path(tmp_path: Path) -> None:
    project = tmp_path / "siteproj"
    project.mkdir()
    config_file = _write_project_config(project)

    cfg = load_config(config_file)
    assert cfg.output_dir == (project / "build" / "site").resolve()


def test_load_config_uses_defaults_when_directory_has_no_config(tmp_path: Path) -> None:
    project = tmp_path / "emptyproj"
    project.mkdir()

    cfg = load_config(project)

    assert cfg.site_root == project.resolve()
    assert cfg.output_dir == (project / "site").resolve()
    assert cfg.page_size == 12
    assert cfg.data_dir == "assets/data"


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yml")


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    cfg_path = tmp_path / "plotgallery.yml"
    cfg_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must define a mapping"):
        load_config(cfg_path)


def test_page_size_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Config(page_size=0)


def test_blank_manifest_path_is_ignored() -> None:
    assert Config(manifest_path="  ").manifest_path is None
