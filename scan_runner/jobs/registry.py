"""Process-wide registry binding scan job names to job factories.

Worker tasks receive only a job's registry name and configuration, never the
job object itself, and rebuild the job through this registry. Names default
to the fully-qualified class name, so a worker process that has not imported
the job's module yet imports it once on first lookup.
"""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from .errors import JobClassResolutionError

logger = logging.getLogger(__name__)

_JobClassT = TypeVar("_JobClassT", bound=type)


def job_registry_class_name(job_or_class: Any) -> str:
    """Return the fully-qualified class name of a job instance or class."""

    job_class = job_or_class if isinstance(job_or_class, type) else type(job_or_class)
    return f"{job_class.__module__}.{job_class.__qualname__}"


class ScanJobRegistry:
    """Thread-safe name to zero-argument factory registry for scan jobs."""

    def __init__(self):
        self._factories: dict[str, Callable[[], Any]] = {}
        self._names_by_factory: dict[Callable[[], Any], str] = {}
        self._lock = threading.Lock()

    def registry_register(self, factory: Callable[[], Any], name: str | None = None) -> str:
        """Register one job factory.

        Args:
            factory: Job class or zero-argument callable returning a job.
            name: Optional registry name; defaults to the factory's qualified name.

        Returns:
            str: Registered name.

        Raises:
            ValueError: Raised when the name is blank or bound to another factory.
        """

        if factory is None or not callable(factory):
            raise ValueError("factory must be callable")
        registry_name = (name or job_registry_class_name(factory)).strip()
        if not registry_name:
            raise ValueError("name must not be blank")

        with self._lock:
            existing_factory = self._factories.get(registry_name)
            if existing_factory is not None and existing_factory is not factory:
                raise ValueError(f"scan job name {registry_name} is already registered")
            self._factories[registry_name] = factory
            self._names_by_factory[factory] = registry_name
        logger.debug("Registered scan job %s", registry_name)
        return registry_name

    def registry_unregister(self, name: str) -> None:
        with self._lock:
            factory = self._factories.pop(name, None)
            if factory is not None:
                self._names_by_factory.pop(factory, None)

    def registry_contains(self, name: str) -> bool:
        with self._lock:
            return name in self._factories

    def registry_names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._factories))

    def registry_name_for(self, job: Any) -> str:
        """Return the name a job's class is registered under, or its qualified name."""

        job_class = job if isinstance(job, type) else type(job)
        with self._lock:
            registered_name = self._names_by_factory.get(job_class)
        return registered_name or job_registry_class_name(job_class)

    def registry_resolve(self, name: str, owner_module: str | None = None) -> Callable[[], Any]:
        """Resolve a registered factory by name.

        Args:
            name: Registry name.
            owner_module: Module defining the job; imported when the name is not yet
                registered. Defaults to the module part of a qualified name.

        Returns:
            Callable[[], Any]: Registered factory.

        Raises:
            JobClassResolutionError: Raised when no factory is registered under the name,
                including after importing the owning module.
        """

        with self._lock:
            factory = self._factories.get(name)
        if factory is not None:
            return factory

        if owner_module:
            try:
                importlib.import_module(owner_module)
            except ImportError as error:
                raise JobClassResolutionError(
                    f"Unable to import module {owner_module} defining scan job {name}: {error}",
                    class_name=name,
                ) from error
        else:
            self._registry_import_owner_module(name)
        with self._lock:
            factory = self._factories.get(name)
        if factory is None:
            raise JobClassResolutionError(f"No scan job registered with name {name}", class_name=name)
        return factory

    def registry_create(self, name: str, owner_module: str | None = None) -> Any:
        return self.registry_resolve(name, owner_module=owner_module)()

    def _registry_import_owner_module(self, name: str) -> None:
        name_parts = name.split(".")
        for part_count in range(len(name_parts) - 1, 0, -1):
            module_name = ".".join(name_parts[:part_count])
            try:
                importlib.import_module(module_name)
            except ModuleNotFoundError as error:
                missing_name = error.name or ""
                if missing_name and module_name != missing_name and not module_name.startswith(missing_name + "."):
                    raise
                continue
            return


_DEFAULT_REGISTRY = ScanJobRegistry()


def job_registry_default() -> ScanJobRegistry:
    """Return the process-wide registry worker tasks resolve jobs through."""

    return _DEFAULT_REGISTRY


def scan_job_register(
    job_class: _JobClassT | None = None,
    *,
    name: str | None = None,
    registry: ScanJobRegistry | None = None,
) -> Any:
    """Class decorator registering a scan job class.

    Usable bare (`@scan_job_register`) or with arguments
    (`@scan_job_register(name="row-count")`).
    """

    target_registry = registry or _DEFAULT_REGISTRY

    def _register(decorated_class: _JobClassT) -> _JobClassT:
        target_registry.registry_register(decorated_class, name=name)
        return decorated_class

    if job_class is not None:
        return _register(job_class)
    return _register
