"""Service contracts shared by the generation modules and the orchestrator.

Three small abstract interfaces:

* :class:`Service` -- one self-contained generation module.
* :class:`Registrar` -- accepts shell-command contributions (line groups and
  whole script files).
* :class:`ScriptReceiver` -- a service that wants a registrar injected
  before it runs.

The capability check is nominal: the orchestrator asks
``isinstance(service, ScriptReceiver)``, so a class opts in by inheriting.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel

from ..errors import InvalidConfigTypeError
from ..utils import compare_paths
from .root import OutputRoot

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


class Service(ABC):
    """A generation module run by the orchestrator."""

    service_id: ClassVar[str]

    @abstractmethod
    def set_config(self, cfg: BaseModel) -> None:
        """Accept this service's validated configuration."""

    @abstractmethod
    def run(self) -> None:
        """Produce this service's output."""


class Registrar(ABC):
    """Collects command contributions from other services."""

    @abstractmethod
    def register_lines(self, service_id: str, commands: list[str]) -> None:
        """Store *commands* as the line group of *service_id*."""

    @abstractmethod
    def register_file(self, file_name: str, commands: list[str]) -> None:
        """Store *commands* as the body of the script *file_name*."""


class ScriptReceiver(ABC):
    """A service that contributes commands through an injected registrar."""

    @abstractmethod
    def set_script_receiver(self, registrar: Registrar) -> None:
        """Inject the registrar used during :meth:`Service.run`."""


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class TemplateService(Service, Generic[ConfigT]):
    """Common plumbing for services that render from a template directory.

    Subclasses set ``service_id`` and ``config_type`` and implement
    :meth:`generate`, which receives an open output root that is closed
    again once it returns or raises.
    """

    config_type: ClassVar[type[BaseModel]]

    def __init__(self, target_dir: str | Path) -> None:
        self.target_dir = Path(target_dir)
        self.cfg: ConfigT | None = None

    def set_config(self, cfg: BaseModel) -> None:
        """Type-check *cfg* and make sure it does not render onto itself.

        Raises:
            InvalidConfigTypeError: If *cfg* is not ``config_type``.
            IdenticalSourceAndTargetError: If the template source directory
                is the output directory.
        """
        if not isinstance(cfg, self.config_type):
            raise InvalidConfigTypeError(self.service_id, cfg)
        compare_paths(cfg.source_path, self.target_dir, force_differ=True)
        self.cfg = cfg  # type: ignore[assignment]

    def run(self) -> None:
        cfg = self.config
        with OutputRoot.open(self.target_dir, cfg.project_name) as root:
            logger.debug("Running %s in %s", self.service_id, root.path)
            self.generate(root)

    @property
    def config(self) -> ConfigT:
        if self.cfg is None:
            raise RuntimeError(f"{self.service_id} has no configuration")
        return self.cfg

    @property
    def source_path(self) -> Path:
        return Path(self.config.source_path)

    @abstractmethod
    def generate(self, root: OutputRoot) -> None:
        """Write this service's files into *root*."""
