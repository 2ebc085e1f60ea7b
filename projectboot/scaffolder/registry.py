"""In-memory script registrar owned by the ``base_local`` service.

Other services contribute shell commands in two shapes:

* **line groups** -- ``service id -> commands``, rendered into the
  ``Makefile``, ``Taskfile.yml`` and ``.pre-commit-config.yaml``;
* **files** -- ``file name -> commands``, each rendered into its own script
  under ``scripts/``.

Which shapes are kept depends on the owner's ``file_list``.  A contribution
for a channel that is not active is accepted and dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..constants import (
    SCRIPT_CHANNEL_COMMIT,
    SCRIPT_CHANNEL_MAKE,
    SCRIPT_CHANNEL_SCRIPT,
    SCRIPT_CHANNEL_TASK,
)
from ..errors import DuplicateRegistrationError
from .service import Registrar

logger = logging.getLogger(__name__)

_LINE_CHANNELS = frozenset({SCRIPT_CHANNEL_MAKE, SCRIPT_CHANNEL_TASK, SCRIPT_CHANNEL_COMMIT})


class ScriptContext(BaseModel):
    """Rendering context for the local script templates."""

    model_config = ConfigDict(frozen=True)

    project_name: str = ""
    make_scripts: dict[str, list[str]] = Field(default_factory=dict)
    task_scripts: dict[str, list[str]] = Field(default_factory=dict)
    commit_scripts: dict[str, list[str]] = Field(default_factory=dict)
    script_files: dict[str, list[str]] = Field(default_factory=dict)


class ScriptRegistry(Registrar):
    """Aggregates line groups and script files, rejecting duplicates."""

    def __init__(self, channels: Iterable[str] = ()) -> None:
        self.channels = frozenset(channels)
        self.lines: dict[str, list[str]] = {}
        self.files: dict[str, list[str]] = {}

    @property
    def stores_lines(self) -> bool:
        return bool(self.channels & _LINE_CHANNELS)

    @property
    def stores_files(self) -> bool:
        return SCRIPT_CHANNEL_SCRIPT in self.channels

    def register_lines(self, service_id: str, commands: list[str]) -> None:
        """Store *commands* under *service_id*.

        Raises:
            DuplicateRegistrationError: If *service_id* already has a group.
        """
        if not self.stores_lines:
            logger.debug("No line channel active; dropping lines from %s", service_id)
            return
        if service_id in self.lines:
            raise DuplicateRegistrationError(f"service {service_id!r} already registered lines")
        self.lines[service_id] = list(commands)

    def register_file(self, file_name: str, commands: list[str]) -> None:
        """Store *commands* as the script *file_name*.

        Raises:
            DuplicateRegistrationError: If *file_name* is already registered.
        """
        if not self.stores_files:
            logger.debug("Script channel inactive; dropping file %s", file_name)
            return
        if file_name in self.files:
            raise DuplicateRegistrationError(f"file {file_name!r} already registered in scripts")
        self.files[file_name] = list(commands)

    def context(self, project_name: str) -> ScriptContext:
        """Snapshot the registrations as a :class:`ScriptContext`."""

        def lines_for(channel: str) -> dict[str, list[str]]:
            if channel not in self.channels:
                return {}
            return {key: list(value) for key, value in self.lines.items()}

        return ScriptContext(
            project_name=project_name,
            make_scripts=lines_for(SCRIPT_CHANNEL_MAKE),
            task_scripts=lines_for(SCRIPT_CHANNEL_TASK),
            commit_scripts=lines_for(SCRIPT_CHANNEL_COMMIT),
            script_files={key: list(value) for key, value in self.files.items()},
        )
