"""Regression tests for scan job registry binding and preflight class resolution."""

import logging
from types import SimpleNamespace

import pytest

from scan_runner.jobs import (
    JOB_CLASS_NOT_FOUND_CODE,
    JobClassResolutionError,
    ScanJob,
    ScanJobRegistry,
    job_preflight_resolve_class,
    job_registry_class_name,
)


class _RegisteredJob(ScanJob):
    """Scan job registered under its qualified name."""

    def job_config_namespace(self):
        return None


class _UnregisteredJob(ScanJob):
    """Scan job never registered."""

    def job_config_namespace(self):
        return None


def test_jobs_registry_resolves_qualified_and_custom_names() -> None:
    """Resolve factories under qualified and explicit names.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when registry lookups are unexpected.
    """

    registry = ScanJobRegistry()

    qualified_name = registry.registry_register(_RegisteredJob)
    custom_name = registry.registry_register(_UnregisteredJob, name="custom-job")

    assert qualified_name == job_registry_class_name(_RegisteredJob)
    assert qualified_name.endswith("._RegisteredJob")
    assert registry.registry_name_for(_UnregisteredJob()) == "custom-job"
    assert isinstance(registry.registry_create(qualified_name), _RegisteredJob)
    assert registry.registry_names() == tuple(sorted((qualified_name, "custom-job")))


def test_jobs_registry_rejects_conflicting_registration() -> None:
    registry = ScanJobRegistry()
    registry.registry_register(_RegisteredJob, name="job")

    registry.registry_register(_RegisteredJob, name="job")
    with pytest.raises(ValueError, match="already registered"):
        registry.registry_register(_UnregisteredJob, name="job")


def test_jobs_registry_raises_for_unknown_module_names() -> None:
    registry = ScanJobRegistry()

    with pytest.raises(JobClassResolutionError, match="missing_scan_module.Job") as error_info:
        registry.registry_resolve("missing_scan_module.Job")

    assert error_info.value.class_name == "missing_scan_module.Job"
    assert error_info.value.error_code == JOB_CLASS_NOT_FOUND_CODE


def test_jobs_registry_imports_owner_module_before_resolving_custom_names(monkeypatch: pytest.MonkeyPatch) -> None:
    """Import the recorded owning module when a custom name is not registered yet.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the owning module is not imported.
    """

    registry = ScanJobRegistry()
    imported_modules: list[str] = []

    def _import_module(module_name: str) -> None:
        imported_modules.append(module_name)
        registry.registry_register(_RegisteredJob, name="custom-job")

    monkeypatch.setattr("scan_runner.jobs.registry.importlib", SimpleNamespace(import_module=_import_module))

    job = registry.registry_create("custom-job", owner_module="scan_jobs.custom")

    assert isinstance(job, _RegisteredJob)
    assert imported_modules == ["scan_jobs.custom"]


def test_jobs_registry_wraps_missing_owner_module() -> None:
    registry = ScanJobRegistry()

    with pytest.raises(JobClassResolutionError, match="Unable to import module missing_scan_module") as error_info:
        registry.registry_resolve("custom-job", owner_module="missing_scan_module")

    assert error_info.value.class_name == "custom-job"
    assert isinstance(error_info.value.__cause__, ImportError)


def test_jobs_preflight_returns_registered_name() -> None:
    registry = ScanJobRegistry()
    registry.registry_register(_RegisteredJob)

    assert job_preflight_resolve_class(_RegisteredJob(), registry=registry) == job_registry_class_name(_RegisteredJob)


def test_jobs_preflight_logs_and_raises_for_unresolvable_class(caplog: pytest.LogCaptureFixture) -> None:
    """Log the offending class name before surfacing the resolution error.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the failure is not logged or not raised.
    """

    registry = ScanJobRegistry()
    class_name = job_registry_class_name(_UnregisteredJob)

    with caplog.at_level(logging.ERROR, logger="scan_runner.jobs.preflight"):
        with pytest.raises(JobClassResolutionError):
            job_preflight_resolve_class(_UnregisteredJob(), registry=registry)

    assert f"Unable to locate class with name {class_name}" in caplog.text


def test_jobs_preflight_rejects_name_bound_to_other_class() -> None:
    registry = ScanJobRegistry()
    registry.registry_register(_RegisteredJob, name=job_registry_class_name(_UnregisteredJob))

    with pytest.raises(JobClassResolutionError, match="resolves to a different class"):
        job_preflight_resolve_class(_UnregisteredJob(), registry=registry)
