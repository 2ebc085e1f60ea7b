"""``base_project`` -- the project skeleton.

Renders the whole ``project_base`` template tree (README, license, go.mod,
``cmd/<name>/main.go`` and friends) into the output root.  It always runs
first, so later services find the directory layout in place.
"""

from __future__ import annotations

from pathlib import Path

from ..config import BaseProjectConfig
from ..constants import SERVICE_BASE_PROJECT
from .root import OutputRoot
from .service import TemplateService
from .walker import TreeWalker


class BaseProject(TemplateService[BaseProjectConfig]):
    """Two-pass walk of the project skeleton."""

    service_id = SERVICE_BASE_PROJECT
    config_type = BaseProjectConfig

    def __init__(self, target_dir: str | Path, walker: TreeWalker | None = None) -> None:
        super().__init__(target_dir)
        self.walker = walker or TreeWalker()

    def generate(self, root: OutputRoot) -> None:
        self.walker.materialize(self.source_path, root, self.config)
