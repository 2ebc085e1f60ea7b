"""Exception hierarchy for projectboot.

Every failure raised by the scaffolding core derives from :class:`BootError`
so the CLI can map the whole family to a single exit code.  The concrete
classes keep the failure kinds apart (a bad template is not a bad path, a
wrong config shape is not a duplicate registration) so callers and tests can
tell them apart without parsing messages.
"""

from __future__ import annotations


class BootError(Exception):
    """Base class for all projectboot errors."""


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


class FilesystemError(BootError):
    """Raised when an output-root filesystem operation fails."""


class PathEscapeError(FilesystemError):
    """Raised when a relative path would resolve outside the output root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"invalid path {path!r}: path escapes root")


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateRenderError(BootError):
    """Base class for template failures."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class TemplateParseError(TemplateRenderError):
    """Raised when a template has malformed syntax."""


class TemplateExecutionError(TemplateRenderError):
    """Raised when a template fails while rendering (e.g. an unknown field)."""


class MissingTemplateError(BootError):
    """Raised when a service's source tree lacks a file it always needs."""

    def __init__(self, name: str, expected: str) -> None:
        self.name = name
        self.expected = expected
        super().__init__(f"missing required template {name!r} (expected {expected!r})")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(BootError):
    """Raised for invalid or unusable configuration."""


class ConfigLoadError(ConfigError):
    """Raised when a configuration file cannot be read, parsed or validated."""


class InvalidConfigTypeError(ConfigError):
    """Raised when a service receives a configuration of the wrong type."""

    def __init__(self, service_id: str, received: object) -> None:
        self.service_id = service_id
        super().__init__(
            f"invalid config type for {service_id}: {type(received).__name__}"
        )


class IdenticalSourceAndTargetError(ConfigError):
    """Raised when a service's template source is its own output target."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"source and target path must be different: {source!r} == {target!r}")


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class DuplicateRegistrationError(BootError):
    """Raised when a service, line group or script file registers twice."""


class UnknownServiceError(BootError):
    """Raised when a declared service identifier has no implementation."""

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(f"unknown service ID: {service_id}")


class ServiceError(BootError):
    """Raised when a service fails during one of the orchestrator phases."""

    def __init__(self, service_id: str, phase: str, message: str) -> None:
        self.service_id = service_id
        self.phase = phase
        super().__init__(f"{phase} service {service_id!r} failed: {message}")
