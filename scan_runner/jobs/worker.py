"""Worker-side map tasks that rebuild a scan job by name and run it over one split."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from scan_runner.config import (
    SCAN_ENGINE_KEYS,
    ApplicationConfiguration,
    EngineConfiguration,
    PrefixedEngineConfiguration,
)
from scan_runner.domain import SCAN_METRIC_FAILURE, SCAN_METRIC_SUCCESS, ScanVertex
from scan_runner.engines import TaskCounters, WorkerTaskPort

from .errors import JobBindingError
from .metrics import WorkerScanMetrics
from .registry import job_registry_default


class ScanWorkerTask(WorkerTaskPort):
    """Map task running a registered scan job over every row of one split.

    Each processed row increments `SUCCESS`; a row whose processing raises
    increments `FAILURE` and fails the task.
    """

    def __init__(self):
        self._registry = job_registry_default()
        self._job: Any = None
        self._metrics: WorkerScanMetrics | None = None

    def task_setup(self, engine_config: EngineConfiguration, counters: TaskCounters) -> None:
        """Resolve the job, rebuild its configuration, and start its worker iteration.

        Args:
            engine_config: Engine configuration of the running job.
            counters: Task counter accumulator.

        Returns:
            None: This method does not return a value.

        Raises:
            JobBindingError: Raised when the engine configuration names no scan job.
            JobClassResolutionError: Raised when the named job is not registered.
        """

        job_name = engine_config.config_get(SCAN_ENGINE_KEYS.job_class)
        if job_name is None or not job_name.strip():
            raise JobBindingError(f"Engine configuration does not name a scan job under {SCAN_ENGINE_KEYS.job_class}")

        self._job = self._registry.registry_create(
            job_name.strip(),
            owner_module=engine_config.config_get(SCAN_ENGINE_KEYS.job_module),
        )
        self._metrics = WorkerScanMetrics(counters)
        self._job.job_worker_iteration_start(self._task_job_configuration(engine_config), self._metrics)

    def task_map(self, key: Any, entries: Sequence[tuple[Any, Any]]) -> None:
        if self._job is None or self._metrics is None:
            raise RuntimeError("task_setup must run before task_map")
        try:
            self._task_process(key, entries)
        except Exception:
            self._metrics.metrics_increment(SCAN_METRIC_FAILURE)
            raise
        self._metrics.metrics_increment(SCAN_METRIC_SUCCESS)

    def task_cleanup(self) -> None:
        if self._job is not None and self._metrics is not None:
            self._job.job_worker_iteration_end(self._metrics)

    def _task_process(self, key: Any, entries: Sequence[tuple[Any, Any]]) -> None:
        self._job.job_process(key, entries, self._metrics)

    def _task_job_configuration(self, engine_config: EngineConfiguration) -> ApplicationConfiguration | None:
        config_root = self._job.job_config_namespace()
        if config_root is None:
            return None
        job_view = PrefixedEngineConfiguration(
            root=config_root,
            prefix=SCAN_ENGINE_KEYS.config_keys_prefix,
            engine_config=engine_config,
        )
        return job_view.config_to_application_configuration()


class VertexScanWorkerTask(ScanWorkerTask):
    """Map task running a registered vertex scan job, one vertex per row."""

    def _task_process(self, key: Any, entries: Sequence[tuple[Any, Any]]) -> None:
        vertex = ScanVertex(vertex_id=key, properties=dict(entries))
        self._job.job_process(vertex, self._metrics)
