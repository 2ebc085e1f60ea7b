"""projectboot configuration.

Typed configuration for the boot run and for every built-in service.  All
settings use Pydantic v2 models loaded from YAML, so they are validated at
construction time.  Service configurations are frozen once validated: their
fields are exactly what the templates of that service may reference.

Derived values (upper/lower-case project names, the repository path, default
commands) are filled in during validation.  Re-validating a dumped model
yields an equal model.
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any, ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .constants import (
    DEFAULT_GO_TEST_CMD,
    DEFAULT_LINT_CMDS,
    SCRIPT_CHANNELS,
    SERVICE_BASE_LINT,
    SERVICE_BASE_LOCAL,
    SERVICE_BASE_PROJECT,
    SERVICE_BASE_TEST,
    TEST_STYLES,
)
from .errors import ConfigLoadError, UnknownServiceError
from .utils import strip_scheme

logger = logging.getLogger(__name__)


def _missing(data: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    """Return the *fields* that are absent, ``None`` or whitespace-only."""
    missing = []
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
        elif isinstance(value, (list, tuple, dict)) and not value:
            missing.append(name)
    return missing


# ---------------------------------------------------------------------------
# Service configurations
# ---------------------------------------------------------------------------


class ServiceConfig(BaseModel):
    """Fields and validation shared by every service configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    service_id: ClassVar[str] = ""
    required_fields: ClassVar[tuple[str, ...]] = ("source_path", "project_name")

    source_path: str = Field(default="", description="Directory the templates are read from")
    project_name: str = Field(default="", description="Name of the generated project")

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        missing = _missing(data, cls.required_fields) + cls.extra_missing(data)
        if missing:
            raise ValueError(f"missing required config fields: {', '.join(missing)}")
        return cls.fill_needed(data)

    @classmethod
    def extra_missing(cls, data: dict[str, Any]) -> list[str]:
        """Conditionally required fields; empty by default."""
        return []

    @classmethod
    def fill_needed(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Compute derived fields on the already-checked input."""
        return data


class BaseProjectConfig(ServiceConfig):
    """Metadata for the project skeleton (``base_project``)."""

    service_id: ClassVar[str] = SERVICE_BASE_PROJECT
    required_fields: ClassVar[tuple[str, ...]] = (
        "source_path",
        "project_url",
        "project_name",
        "used_go_version",
        "used_node_version",
        "release_current_window",
        "release_upcoming_window",
        "release_long_term",
        "author",
    )

    project_url: str = Field(default="", description="Repository home URL, e.g. https://github.com/acme")
    repo_path: str = ""
    caps_project_name: str = ""
    lower_project_name: str = ""
    used_go_version: str = ""
    used_node_version: str = ""
    current_year: int = Field(default=0, description="Copyright year; 0 means the current year")
    release_current_window: str = ""
    release_upcoming_window: str = ""
    release_long_term: str = ""
    author: str = ""
    git_provider: str = ""
    git_user: str = ""

    @classmethod
    def extra_missing(cls, data: dict[str, Any]) -> list[str]:
        if str(data.get("git_provider") or "").strip():
            return _missing(data, ("git_user",))
        return []

    @classmethod
    def fill_needed(cls, data: dict[str, Any]) -> dict[str, Any]:
        name = data["project_name"]
        data["caps_project_name"] = name.upper()
        data["lower_project_name"] = name.lower()
        data["repo_path"] = strip_scheme(data["project_url"])
        if not data.get("current_year"):
            data["current_year"] = datetime.date.today().year
        return data


class Linter(BaseModel):
    """One linter entry: the command to run and whether it is used."""

    model_config = ConfigDict(frozen=True)

    cmd: str = ""
    enabled: bool = False


class BaseLintConfig(ServiceConfig):
    """Linter selection for ``base_lint``."""

    service_id: ClassVar[str] = SERVICE_BASE_LINT
    required_fields: ClassVar[tuple[str, ...]] = ("source_path", "project_name", "repo_import_path")

    repo_import_path: str = ""
    linters: dict[str, Linter] = Field(default_factory=dict)

    @classmethod
    def fill_needed(cls, data: dict[str, Any]) -> dict[str, Any]:
        linters: dict[str, Any] = {}
        for name, raw in (data.get("linters") or {}).items():
            linter = raw if isinstance(raw, Linter) else Linter.model_validate(raw or {})
            if linter.enabled and not linter.cmd.strip():
                default = DEFAULT_LINT_CMDS.get(name)
                if default is None:
                    logger.warning("Unknown linter %r; no default command defined", name)
                else:
                    linter = linter.model_copy(update={"cmd": default})
            linters[name] = linter
        data["linters"] = linters
        return data

    def enabled_linters(self) -> list[tuple[str, Linter]]:
        """Return the enabled linters in configuration order."""
        return [(name, linter) for name, linter in self.linters.items() if linter.enabled]


class BaseLocalConfig(ServiceConfig):
    """Script channels generated by ``base_local``."""

    service_id: ClassVar[str] = SERVICE_BASE_LOCAL
    required_fields: ClassVar[tuple[str, ...]] = ("source_path", "project_name", "file_list")

    file_list: list[str] = Field(default_factory=list)

    @classmethod
    def fill_needed(cls, data: dict[str, Any]) -> dict[str, Any]:
        seen: set[str] = set()
        for index, entry in enumerate(data["file_list"]):
            if not isinstance(entry, str) or not entry.strip():
                raise ValueError(f"file_list entry {index} must not be empty")
            if entry in seen:
                raise ValueError(f"duplicate file_list entry: {entry!r}")
            if entry not in SCRIPT_CHANNELS:
                raise ValueError(
                    f"unknown file_list entry {entry!r}; expected one of {', '.join(SCRIPT_CHANNELS)}"
                )
            seen.add(entry)
        return data


class BaseTestConfig(ServiceConfig):
    """Test scaffold options for ``base_test``."""

    service_id: ClassVar[str] = SERVICE_BASE_TEST
    required_fields: ClassVar[tuple[str, ...]] = (
        "source_path",
        "project_name",
        "repo_import_path",
        "use_style",
    )

    repo_import_path: str = ""
    use_style: str = Field(default="", description="Either 'ginkgo' or 'go'")
    test_cmd: str = ""
    caps_project_name: str = ""
    lower_project_name: str = ""

    @classmethod
    def fill_needed(cls, data: dict[str, Any]) -> dict[str, Any]:
        name = data["project_name"]
        data["caps_project_name"] = name.upper()
        data["lower_project_name"] = name.lower()
        if not str(data.get("test_cmd") or "").strip():
            data["test_cmd"] = DEFAULT_GO_TEST_CMD

        style = str(data["use_style"]).strip()
        if style not in TEST_STYLES:
            raise ValueError(f"use_style must be {TEST_STYLES[0]!r} or {TEST_STYLES[1]!r}")
        data["use_style"] = style
        return data


CONFIG_TYPES: dict[str, type[ServiceConfig]] = {
    cfg_type.service_id: cfg_type
    for cfg_type in (BaseProjectConfig, BaseLintConfig, BaseLocalConfig, BaseTestConfig)
}


# ---------------------------------------------------------------------------
# Boot configuration
# ---------------------------------------------------------------------------


class ServiceDeclaration(BaseModel):
    """A service listed in the boot configuration."""

    model_config = ConfigDict(frozen=True)

    id: str
    conf_path: str
    enabled: bool = True


class BootConfig(BaseModel):
    """Where to generate and which services to run.

    Service order in the file does not decide execution order; the
    orchestrator runs ``base_project`` first and ``base_local`` last.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    target_path: str = ""
    project_name: str = ""
    repo_url: str = Field(default="", description="Repository URL used to derive import paths")
    services: list[ServiceDeclaration] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, data: Any) -> Any:
        if isinstance(data, dict):
            missing = _missing(data, ("target_path", "project_name"))
            if missing:
                raise ValueError(f"missing required config fields: {', '.join(missing)}")
        return data

    @classmethod
    def load(cls, path: str | Path) -> BootConfig:
        """Load the boot configuration from YAML.

        Relative ``conf_path`` entries are resolved against the directory of
        *path*.

        Raises:
            ConfigLoadError: If the file is unreadable or invalid.
        """
        config_path = Path(path)
        data = read_yaml(config_path)
        base = config_path.parent
        for entry in data.get("services") or []:
            if isinstance(entry, dict) and entry.get("conf_path"):
                conf = Path(entry["conf_path"])
                entry["conf_path"] = str(conf if conf.is_absolute() else base / conf)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigLoadError(f"invalid boot config {str(config_path)!r}: {exc}") from exc

    def enabled_services(self) -> list[ServiceDeclaration]:
        return [decl for decl in self.services if decl.enabled]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def read_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping from *path*.

    An empty file yields an empty mapping.

    Raises:
        ConfigLoadError: If the file cannot be read, is not valid YAML or
            does not hold a mapping.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"failed to read config {str(file_path)!r}: {exc}") from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"failed to parse config {str(file_path)!r}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"config {str(file_path)!r} must be a mapping")
    return data


def load_service_config(declaration: ServiceDeclaration, boot: BootConfig) -> ServiceConfig:
    """Read and validate the configuration file of one declared service.

    The project name always comes from the boot configuration.  When the file
    leaves them unset, ``project_url`` is ``boot.repo_url`` and
    ``repo_import_path`` is that URL without its scheme, joined with the
    lower-case project name.

    Raises:
        UnknownServiceError: If the declared id has no configuration type.
        ConfigLoadError: If the file is unreadable or invalid.
    """
    cfg_type = CONFIG_TYPES.get(declaration.id)
    if cfg_type is None:
        raise UnknownServiceError(declaration.id)

    data = read_yaml(declaration.conf_path)
    data["project_name"] = boot.project_name
    if boot.repo_url:
        if "project_url" in cfg_type.model_fields:
            data.setdefault("project_url", boot.repo_url)
        if "repo_import_path" in cfg_type.model_fields:
            data.setdefault(
                "repo_import_path", f"{strip_scheme(boot.repo_url)}/{boot.project_name.lower()}"
            )

    try:
        cfg = cfg_type.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(f"invalid {declaration.id} config {declaration.conf_path!r}: {exc}") from exc
    logger.debug("Loaded %s config from %s", declaration.id, declaration.conf_path)
    return cfg


# ---------------------------------------------------------------------------
# ConfigManager
# ---------------------------------------------------------------------------


class ConfigManager:
    """Holds the validated configuration of every loaded service."""

    def __init__(self) -> None:
        self.configs: dict[str, ServiceConfig] = {}

    def register(self, cfg: ServiceConfig) -> None:
        """Store *cfg* under its service id, replacing any earlier entry."""
        if cfg.service_id in self.configs:
            logger.debug("Replacing config for %s", cfg.service_id)
        self.configs[cfg.service_id] = cfg

    def get(self, service_id: str) -> ServiceConfig | None:
        return self.configs.get(service_id)

