"""Scan job runner: configuration merge, preflight, descriptor build and blocking execution."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from scan_runner.config import (
    SCAN_ENGINE_KEYS,
    ApplicationConfiguration,
    ConfigNamespace,
    EngineConfiguration,
    config_copy_job_namespace,
    config_validate_pairing,
)
from scan_runner.domain import ScanMetrics
from scan_runner.engines import CancellationToken, ExecutionEnginePort

from .descriptor import job_descriptor_build, job_descriptor_name
from .executor import JobOutcome, job_executor_run, job_outcome_raise_for_failure
from .preflight import job_preflight_resolve_class
from .registry import job_registry_default
from .worker import ScanWorkerTask, VertexScanWorkerTask

logger = logging.getLogger(__name__)


class ScanJobRunner:
    """Construct and submit map-only engine jobs that execute scan jobs.

    Every call is one synchronous unit of work on the calling thread: it owns
    the engine configuration it is given, submits exactly one job and blocks
    until the job ends. Nothing is retried.

    Registered jobs are checked against the process-wide registry, the same
    registry worker tasks rebuild jobs from.
    """

    def __init__(self, engine: ExecutionEnginePort):
        """Initialize runner dependencies.

        Args:
            engine: Execution engine receiving submitted jobs.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when the engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    @property
    def engine(self) -> ExecutionEnginePort:
        return self._engine

    def runner_execute_job(
        self,
        app_config: ApplicationConfiguration | None,
        config_root: ConfigNamespace | None,
        engine_config: EngineConfiguration,
        input_reader_class: type,
        job_name: str,
        worker_task_class: type,
        cancellation: CancellationToken | None = None,
    ) -> JobOutcome:
        """Merge job configuration, submit one map-only job and return its outcome.

        Unlike `runner_run_job`, a failed job is returned as an outcome with
        its diagnostics and state timeline instead of being raised.

        Args:
            app_config: Job configuration; must be paired with `config_root`.
            config_root: Namespace root of the job configuration; must be paired with `app_config`.
            engine_config: Engine configuration for this job, mutated in place.
            input_reader_class: Reader class producing (key, column-set) rows.
            job_name: Human-readable job name.
            worker_task_class: Map task class each worker instantiates.
            cancellation: Optional token ending the wait when requested.

        Returns:
            JobOutcome: Succeeded, failed, or failed with unreadable status.

        Raises:
            ConfigurationPairingError: Raised when configuration and root are not supplied together.
            ConfigurationParseError: Raised when a configuration key does not fit the root.
            JobBindingError: Raised when task or reader arguments are not classes.
            ScanJobExecutionError: Raised when the job cannot be submitted.
            EngineJobInterruptedError: Raised when cancellation is requested while waiting.
        """

        return self._runner_execute(
            app_config=app_config,
            config_root=config_root,
            engine_config=engine_config,
            input_reader_class=input_reader_class,
            job_name=job_name,
            worker_task_class=worker_task_class,
            cancellation=cancellation,
            job_keys={},
        )

    def runner_run_job(
        self,
        app_config: ApplicationConfiguration | None,
        config_root: ConfigNamespace | None,
        engine_config: EngineConfiguration,
        input_reader_class: type,
        job_name: str,
        worker_task_class: type,
        cancellation: CancellationToken | None = None,
    ) -> ScanMetrics:
        """Merge job configuration, submit one map-only job and wait for it.

        Args:
            app_config: Job configuration; must be paired with `config_root`.
            config_root: Namespace root of the job configuration; must be paired with `app_config`.
            engine_config: Engine configuration for this job, mutated in place.
            input_reader_class: Reader class producing (key, column-set) rows.
            job_name: Human-readable job name.
            worker_task_class: Map task class each worker instantiates.
            cancellation: Optional token ending the wait when requested.

        Returns:
            ScanMetrics: Metrics generated by the job.

        Raises:
            ConfigurationPairingError: Raised when configuration and root are not supplied together.
            ConfigurationParseError: Raised when a configuration key does not fit the root.
            JobBindingError: Raised when task or reader arguments are not classes.
            ScanJobExecutionError: Raised when the job cannot be submitted or does not succeed.
            EngineJobInterruptedError: Raised when cancellation is requested while waiting.
        """

        outcome = self.runner_execute_job(
            app_config=app_config,
            config_root=config_root,
            engine_config=engine_config,
            input_reader_class=input_reader_class,
            job_name=job_name,
            worker_task_class=worker_task_class,
            cancellation=cancellation,
        )
        return job_outcome_raise_for_failure(outcome)

    def runner_run_scan_job(
        self,
        scan_job: Any,
        app_config: ApplicationConfiguration | None,
        engine_config: EngineConfiguration,
        input_reader_class: type,
        cancellation: CancellationToken | None = None,
    ) -> ScanMetrics:
        """Run a registered row scan job.

        Raises:
            JobClassResolutionError: Raised when the job cannot be resolved by name; nothing is submitted.
        """

        return self._runner_run_registered_job(
            scan_job=scan_job,
            app_config=app_config,
            engine_config=engine_config,
            input_reader_class=input_reader_class,
            worker_task_class=ScanWorkerTask,
            cancellation=cancellation,
        )

    def runner_run_vertex_scan_job(
        self,
        vertex_scan_job: Any,
        app_config: ApplicationConfiguration | None,
        engine_config: EngineConfiguration,
        input_reader_class: type,
        cancellation: CancellationToken | None = None,
    ) -> ScanMetrics:
        """Run a registered vertex scan job.

        Raises:
            JobClassResolutionError: Raised when the job cannot be resolved by name; nothing is submitted.
        """

        return self._runner_run_registered_job(
            scan_job=vertex_scan_job,
            app_config=app_config,
            engine_config=engine_config,
            input_reader_class=input_reader_class,
            worker_task_class=VertexScanWorkerTask,
            cancellation=cancellation,
        )

    def _runner_run_registered_job(
        self,
        scan_job: Any,
        app_config: ApplicationConfiguration | None,
        engine_config: EngineConfiguration,
        input_reader_class: type,
        worker_task_class: type,
        cancellation: CancellationToken | None,
    ) -> ScanMetrics:
        if scan_job is None:
            raise ValueError("scan_job must not be None")
        if engine_config is None:
            raise ValueError("engine_config must not be None")

        config_root = scan_job.job_config_namespace() if app_config is not None else None
        config_validate_pairing(app_config=app_config, config_root=config_root)

        job_registry_name = job_preflight_resolve_class(scan_job, registry=job_registry_default())
        job_name = job_descriptor_name(worker_task_class, scan_job)
        logger.info("Running scan job %s as %s", job_registry_name, job_name)
        outcome = self._runner_execute(
            app_config=app_config,
            config_root=config_root,
            engine_config=engine_config,
            input_reader_class=input_reader_class,
            job_name=job_name,
            worker_task_class=worker_task_class,
            cancellation=cancellation,
            job_keys={
                SCAN_ENGINE_KEYS.job_class: job_registry_name,
                SCAN_ENGINE_KEYS.job_module: type(scan_job).__module__,
            },
        )
        return job_outcome_raise_for_failure(outcome)

    def _runner_execute(
        self,
        app_config: ApplicationConfiguration | None,
        config_root: ConfigNamespace | None,
        engine_config: EngineConfiguration,
        input_reader_class: type,
        job_name: str,
        worker_task_class: type,
        cancellation: CancellationToken | None,
        job_keys: Mapping[str, str],
    ) -> JobOutcome:
        if engine_config is None:
            raise ValueError("engine_config must not be None")
        if input_reader_class is None:
            raise ValueError("input_reader_class must not be None")

        # The descriptor shares engine_config; keys written below still reach the job.
        descriptor = job_descriptor_build(
            engine_config=engine_config,
            input_reader_class=input_reader_class,
            job_name=job_name,
            worker_task_class=worker_task_class,
        )
        config_copy_job_namespace(app_config=app_config, config_root=config_root, engine_config=engine_config)
        for key, value in job_keys.items():
            engine_config.config_set(key, value)
        return job_executor_run(engine=self._engine, descriptor=descriptor, cancellation=cancellation)
