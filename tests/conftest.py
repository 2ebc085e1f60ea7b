"""Shared pytest fixtures for the projectboot test suite.

Provides reusable fixtures for:
- Temporary output roots
- Writing small template trees on disk
- Valid configurations for every built-in service
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from projectboot.config import BaseLintConfig, BaseLocalConfig, BaseProjectConfig, BaseTestConfig
from projectboot.scaffolder.root import OutputRoot

REPO_ROOT = Path(__file__).resolve().parents[1]
TEMPLATES_DIR = REPO_ROOT / "templates"


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Directory generated projects are written below."""
    target = tmp_path / "outputs"
    target.mkdir()
    return target


@pytest.fixture
def output_root(target_dir: Path) -> Iterator[OutputRoot]:
    """An open output root at ``<target_dir>/Foo``."""
    root = OutputRoot.open(target_dir, "Foo")
    yield root
    root.close()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str], str], Path]:
    """Return a helper that writes ``{relative path: content}`` under tmp_path.

    Paths ending in ``/`` become empty directories.
    """

    def _write(files: dict[str, str], name: str = "src") -> Path:
        base = tmp_path / name
        base.mkdir(parents=True, exist_ok=True)
        for rel_path, content in files.items():
            path = base / rel_path
            if rel_path.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return base

    return _write


# ---------------------------------------------------------------------------
# Service configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def project_config_data() -> dict:
    """Raw, valid ``base_project`` settings."""
    return {
        "source_path": str(TEMPLATES_DIR / "project_base"),
        "project_name": "Foo",
        "project_url": "https://github.com/acme",
        "used_go_version": "1.24.3",
        "used_node_version": "20",
        "current_year": 2026,
        "release_current_window": "Q2 2026",
        "release_upcoming_window": "Q4 2026",
        "release_long_term": "2028",
        "author": "Acme Inc.",
        "git_provider": "github",
        "git_user": "acme",
    }


@pytest.fixture
def project_config(project_config_data: dict) -> BaseProjectConfig:
    return BaseProjectConfig.model_validate(project_config_data)


@pytest.fixture
def lint_config() -> BaseLintConfig:
    return BaseLintConfig.model_validate(
        {
            "source_path": str(TEMPLATES_DIR / "lint_base"),
            "project_name": "Foo",
            "repo_import_path": "github.com/acme/foo",
            "linters": {
                "golang": {"enabled": True},
                "yaml": {"cmd": "yamllint .", "enabled": True},
                "make": {"enabled": True},
                "markdown": {"enabled": False},
            },
        }
    )


@pytest.fixture
def base_test_config() -> BaseTestConfig:
    return BaseTestConfig.model_validate(
        {
            "source_path": str(TEMPLATES_DIR / "test_base"),
            "project_name": "Foo",
            "repo_import_path": "github.com/acme/foo",
            "use_style": "go",
        }
    )


@pytest.fixture
def local_config() -> BaseLocalConfig:
    return BaseLocalConfig.model_validate(
        {
            "source_path": str(TEMPLATES_DIR / "local_base"),
            "project_name": "Foo",
            "file_list": ["make", "task", "commit", "script"],
        }
    )
