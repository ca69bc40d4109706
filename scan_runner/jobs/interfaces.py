"""Typed interfaces for scan job implementations."""

from collections.abc import Sequence
from typing import Any, Protocol

from scan_runner.config import ApplicationConfiguration, ConfigNamespace
from scan_runner.domain import ScanVertex

from .metrics import WorkerScanMetrics


class ScanJob(Protocol):
    """Port for a computation applied independently to every row of the store.

    Implementations are registered by name and instantiated inside every
    worker task without arguments; `str(job)` names the job in engine listings.
    """

    def job_config_namespace(self) -> ConfigNamespace | None:
        """Return the namespace root declaring this job's configuration keys.

        Returns:
            ConfigNamespace | None: Namespace root, or None for jobs without configuration.
        """

    def job_worker_iteration_start(
        self,
        job_config: ApplicationConfiguration | None,
        metrics: WorkerScanMetrics,
    ) -> None:
        """Prepare one worker task before its first row.

        Args:
            job_config: Typed job configuration rebuilt from the engine configuration.
            metrics: Worker-side metric accumulator.
        """

    def job_process(self, key: Any, entries: Sequence[tuple[Any, Any]], metrics: WorkerScanMetrics) -> None:
        """Process one row.

        Args:
            key: Row key.
            entries: Column entries of the row.
            metrics: Worker-side metric accumulator.
        """

    def job_worker_iteration_end(self, metrics: WorkerScanMetrics) -> None:
        """Finish one worker task after its last row."""


class VertexScanJob(Protocol):
    """Port for a computation applied independently to every vertex of the store."""

    def job_config_namespace(self) -> ConfigNamespace | None:
        """Return the namespace root declaring this job's configuration keys."""

    def job_worker_iteration_start(
        self,
        job_config: ApplicationConfiguration | None,
        metrics: WorkerScanMetrics,
    ) -> None:
        """Prepare one worker task before its first vertex."""

    def job_process(self, vertex: ScanVertex, metrics: WorkerScanMetrics) -> None:
        """Process one vertex."""

    def job_worker_iteration_end(self, metrics: WorkerScanMetrics) -> None:
        """Finish one worker task after its last vertex."""
