"""projectboot orchestrator.

Runs the configured generation services in three phases:

Prior      -- services that lay out the project (``base_project``).
Main       -- every other configured service, in registration order.  Any
              service that contributes scripts gets the registrar injected.
Subsequent -- services that consume contributions (``base_local``).

Usage::

    python -m projectboot.pipeline --config ./configs/projectboot.yml
    python -m projectboot.pipeline -c ./configs/projectboot.yml --target ./out -v
"""

from __future__ import annotations

import argparse
import enum
import logging
import sys
from pathlib import Path

from rich.logging import RichHandler

from .config import BootConfig, ConfigManager, load_service_config
from .constants import SERVICE_BASE_LINT, SERVICE_BASE_LOCAL, SERVICE_BASE_PROJECT, SERVICE_BASE_TEST
from .errors import (
    BootError,
    DuplicateRegistrationError,
    FilesystemError,
    ServiceError,
    UnknownServiceError,
)
from .scaffolder import BaseLint, BaseLocal, BaseProject, BaseTest, Registrar, ScriptReceiver, Service
from .utils import console, print_error, print_success, print_summary_table

logger = logging.getLogger(__name__)

PRIOR_SERVICE_IDS: tuple[str, ...] = (SERVICE_BASE_PROJECT,)
SUBSEQUENT_SERVICE_IDS: tuple[str, ...] = (SERVICE_BASE_LOCAL,)

PHASE_ASSIGN = "assign"
PHASE_PRIOR = "prior"
PHASE_MAIN = "main"
PHASE_SUBSEQUENT = "subsequent"


# ---------------------------------------------------------------------------
# Service kinds
# ---------------------------------------------------------------------------


class ServiceKind(enum.Enum):
    """Every built-in service id."""

    BASE_PROJECT = SERVICE_BASE_PROJECT
    BASE_LINT = SERVICE_BASE_LINT
    BASE_LOCAL = SERVICE_BASE_LOCAL
    BASE_TEST = SERVICE_BASE_TEST

    @classmethod
    def parse(cls, service_id: str) -> ServiceKind:
        """Map *service_id* to its kind.

        Raises:
            UnknownServiceError: If the id is not a built-in service.
        """
        try:
            return cls(service_id)
        except ValueError:
            raise UnknownServiceError(service_id) from None


def create_service(kind: ServiceKind, target_dir: str | Path) -> Service:
    """Instantiate the service for *kind*, writing below *target_dir*."""
    if kind is ServiceKind.BASE_PROJECT:
        return BaseProject(target_dir)
    if kind is ServiceKind.BASE_LINT:
        return BaseLint(target_dir)
    if kind is ServiceKind.BASE_LOCAL:
        return BaseLocal(target_dir)
    if kind is ServiceKind.BASE_TEST:
        return BaseTest(target_dir)
    raise UnknownServiceError(kind.value)


# ---------------------------------------------------------------------------
# ServiceManager
# ---------------------------------------------------------------------------


class ServiceManager:
    """Holds registered services and runs them in phase order.

    A service without a configuration in the config manager is skipped in
    every phase; that is not an error.
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        self.config_manager = config_manager
        self.services: dict[str, Service] = {}
        self.configured: set[str] = set()
        self.completed: list[str] = []

    def register(self, service: Service) -> None:
        """Add *service*.

        Raises:
            DuplicateRegistrationError: If its id is already registered.
        """
        service_id = service.service_id
        if service_id in self.services:
            raise DuplicateRegistrationError(f"service {service_id!r} already registered")
        self.services[service_id] = service
        logger.debug("Registered service %s", service_id)

    def run(self) -> list[str]:
        """Assign configurations and run all three phases.

        Returns:
            The ids of the services that ran, in execution order.

        Raises:
            ServiceError: Wrapping the first failure, with the failing
                service and phase.
        """
        self.completed = []
        self.assign_configs()

        for service_id in PRIOR_SERVICE_IDS:
            self.run_one(service_id, PHASE_PRIOR)

        reserved = set(PRIOR_SERVICE_IDS) | set(SUBSEQUENT_SERVICE_IDS)
        for service_id in self.services:
            if service_id not in reserved:
                self.run_one(service_id, PHASE_MAIN)

        for service_id in SUBSEQUENT_SERVICE_IDS:
            self.run_one(service_id, PHASE_SUBSEQUENT)

        return list(self.completed)

    def assign_configs(self) -> None:
        self.configured = set()
        for service_id, service in self.services.items():
            cfg = self.config_manager.get(service_id)
            if cfg is None:
                logger.info("Service %s skipped, no configuration loaded", service_id)
                continue
            try:
                service.set_config(cfg)
            except BootError as exc:
                raise ServiceError(service_id, PHASE_ASSIGN, str(exc)) from exc
            self.configured.add(service_id)

    def run_one(self, service_id: str, phase: str) -> None:
        service = self.services.get(service_id)
        if service is None or service_id not in self.configured:
            logger.debug("Service %s not active; nothing to run in %s phase", service_id, phase)
            return

        if phase == PHASE_MAIN:
            self.inject_registrar(service)

        logger.info("Running %s (%s phase)", service_id, phase)
        try:
            service.run()
        except BootError as exc:
            raise ServiceError(service_id, phase, str(exc)) from exc
        self.completed.append(service_id)

    def inject_registrar(self, service: Service) -> None:
        if not isinstance(service, ScriptReceiver):
            return
        registrar = self.services.get(SERVICE_BASE_LOCAL)
        if isinstance(registrar, Registrar):
            service.set_script_receiver(registrar)


# ---------------------------------------------------------------------------
# Bootstrapper
# ---------------------------------------------------------------------------


class Bootstrapper:
    """Connects a boot configuration to a :class:`ServiceManager`."""

    def __init__(self, boot: BootConfig, config_manager: ConfigManager) -> None:
        self.boot = boot
        self.config_manager = config_manager
        self.manager = ServiceManager(config_manager)

    @classmethod
    def from_config_file(cls, path: str | Path, target: str | Path | None = None) -> Bootstrapper:
        """Load the boot configuration and every enabled service config.

        Args:
            path: Boot configuration YAML.
            target: Optional override for ``target_path``.

        Raises:
            ConfigLoadError: If any configuration is invalid.
            UnknownServiceError: If an enabled declaration has an unknown id.
        """
        boot = BootConfig.load(path)
        if target is not None:
            boot = boot.model_copy(update={"target_path": str(target)})

        config_manager = ConfigManager()
        for declaration in boot.enabled_services():
            ServiceKind.parse(declaration.id)
            config_manager.register(load_service_config(declaration, boot))
        return cls(boot, config_manager)

    def register_services(self) -> None:
        """Create the target directory and register every enabled service.

        Raises:
            FilesystemError: If the target directory cannot be created.
            UnknownServiceError: On an unknown service id.
            DuplicateRegistrationError: On a repeated service id.
        """
        target = Path(self.boot.target_path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"failed to create target dir {str(target)!r}: {exc}") from exc

        for declaration in self.boot.enabled_services():
            kind = ServiceKind.parse(declaration.id)
            self.manager.register(create_service(kind, target))

    def run_services(self) -> list[str]:
        return self.manager.run()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for projectboot."""
    parser = argparse.ArgumentParser(
        prog="projectboot",
        description="Generate a project skeleton from template trees.",
    )
    parser.add_argument(
        "--config",
        "-c",
        default="./configs/projectboot.yml",
        help="Boot configuration file (default: ./configs/projectboot.yml)",
    )
    parser.add_argument(
        "--target",
        default=None,
        help="Override target_path from the configuration",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

    try:
        boot = Bootstrapper.from_config_file(args.config, target=args.target)
        boot.register_services()
        completed = boot.run_services()
    except BootError as exc:
        print_error(f"projectboot failed: {exc}")
        return 1

    print_summary_table(
        {
            "Project": boot.boot.project_name,
            "Output": str(Path(boot.boot.target_path) / boot.boot.project_name),
            "Services run": ", ".join(completed) or "(none)",
        },
        title="projectboot",
    )
    print_success("Project generated successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
