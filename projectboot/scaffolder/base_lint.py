"""``base_lint`` -- linter configuration files.

For every enabled linter that has a configuration file (``.golangci.yml``,
``.yamllint.yml``, ``.markdownlint.yml``) the file is copied from the
``lint_base`` tree into the project root and rendered in place.  Linters that
are configured by flags only, and names this tool does not know, produce no
file.

When a registrar is injected, the enabled linters' commands are handed to the
local scripts as the ``base_lint`` line group and as ``scripts/lint.sh``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import BaseLintConfig
from ..constants import LINT_CONFIG_FILES, SCRIPT_FILE_LINT, SERVICE_BASE_LINT
from ..errors import FilesystemError, MissingTemplateError
from .root import OutputRoot
from .service import Registrar, ScriptReceiver, TemplateService
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


class BaseLint(TemplateService[BaseLintConfig], ScriptReceiver):
    """Copies and renders linter configs, then registers lint commands."""

    service_id = SERVICE_BASE_LINT
    config_type = BaseLintConfig

    def __init__(self, target_dir: str | Path, renderer: TemplateRenderer | None = None) -> None:
        super().__init__(target_dir)
        self.renderer = renderer or TemplateRenderer()
        self.registrar: Registrar | None = None

    def set_script_receiver(self, registrar: Registrar) -> None:
        self.registrar = registrar

    def generate(self, root: OutputRoot) -> None:
        for name, _linter in self.config.enabled_linters():
            if name not in LINT_CONFIG_FILES:
                logger.debug("Unknown linter %r; no config file to copy", name)
                continue
            file_name = LINT_CONFIG_FILES[name]
            if file_name is None:
                logger.debug("Linter %r needs no config file", name)
                continue
            self.copy_config(root, file_name)

        self.register_scripts()

    def copy_config(self, root: OutputRoot, file_name: str) -> None:
        """Copy *file_name* from the template directory and render it."""
        src = self.source_path / file_name
        if not src.is_file():
            raise MissingTemplateError(file_name, str(src))
        try:
            data = src.read_bytes()
        except OSError as exc:
            raise FilesystemError(f"failed to read template file {str(src)!r}: {exc}") from exc

        root.write_bytes(file_name, data)
        self.renderer.render_file_in_place("lint_file", root, file_name, self.config)

    def register_scripts(self) -> None:
        if self.registrar is None:
            logger.debug("No registrar injected; %s registers no scripts", self.service_id)
            return
        commands = [
            linter.cmd for _name, linter in self.config.enabled_linters() if linter.cmd.strip()
        ]
        self.registrar.register_lines(self.service_id, commands)
        self.registrar.register_file(SCRIPT_FILE_LINT, commands)
