"""Job class preflight check run on the submitting side before any submission."""

from __future__ import annotations

import logging
from typing import Any

from .errors import JobClassResolutionError
from .registry import ScanJobRegistry, job_registry_default

logger = logging.getLogger(__name__)


def job_preflight_resolve_class(scan_job: Any, registry: ScanJobRegistry | None = None) -> str:
    """Confirm a scan job can be rebuilt by name where its worker tasks run.

    Args:
        scan_job: Job instance about to be submitted.
        registry: Registry worker tasks resolve jobs through; defaults to the process-wide one.

    Returns:
        str: Registry name worker tasks will resolve.

    Raises:
        ValueError: Raised when `scan_job` is None.
        JobClassResolutionError: Raised when the name does not resolve to the job's class.
    """

    if scan_job is None:
        raise ValueError("scan_job must not be None")

    target_registry = registry or job_registry_default()
    job_class_name = target_registry.registry_name_for(scan_job)
    try:
        factory = target_registry.registry_resolve(job_class_name)
    except JobClassResolutionError:
        logger.error("Unable to locate class with name %s", job_class_name, exc_info=True)
        raise

    if isinstance(factory, type) and factory is not type(scan_job):
        logger.error(
            "Class name %s resolves to %s, not to the submitted job class %s",
            job_class_name,
            factory.__qualname__,
            type(scan_job).__qualname__,
        )
        raise JobClassResolutionError(
            f"Scan job name {job_class_name} resolves to a different class",
            class_name=job_class_name,
        )
    return job_class_name
