"""End-to-end tests for scan job runs on the local engine."""

from __future__ import annotations

import pytest

from scan_runner.config import (
    SCAN_ENGINE_KEYS,
    ApplicationConfiguration,
    ConfigNamespace,
    ConfigOption,
    ConfigurationPairingError,
    ConfigurationParseError,
    EngineConfiguration,
)
from scan_runner.domain import SCAN_METRIC_FAILURE, SCAN_METRIC_SUCCESS
from scan_runner.engines import LocalExecutionEngine
from scan_runner.jobs import (
    JOB_FAILED_CODE,
    JobClassResolutionError,
    JobFailed,
    JobSucceeded,
    ScanJob,
    ScanJobExecutionError,
    ScanJobRegistry,
    ScanJobRunner,
    ScanWorkerTask,
    VertexScanJob,
    job_registry_class_name,
    scan_job_register,
)

ROW_COUNT_ROOT = ConfigNamespace(None, "row-count", "Row count job configuration")
ROW_COUNT_LIMITS = ConfigNamespace(ROW_COUNT_ROOT, "limits", "Row selection limits")
ROW_COUNT_MIN_KEY = ConfigOption(ROW_COUNT_LIMITS, "min-key", "Smallest row key counted", int, default=3)


class _RowReader:
    """Reader serving `ROWS` in two splits."""

    ROWS = [
        (1, [("label", "person"), ("name", "ada")]),
        (2, [("label", "person"), ("name", "alan")]),
        (3, [("label", "software"), ("name", "engine")]),
        (4, [("label", "person"), ("name", "grace")]),
    ]

    def __init__(self, engine_config: EngineConfiguration):
        self._engine_config = engine_config

    def reader_splits(self):
        return [(0, 2), (2, 4)]

    def reader_read(self, split):
        start, end = split
        return self.ROWS[start:end]


@scan_job_register
class _RowCountJob(ScanJob):
    """Counts rows at or above a configured minimum key."""

    def __init__(self):
        self._min_key = 0

    def __str__(self) -> str:
        return "row-count"

    def job_config_namespace(self):
        return ROW_COUNT_ROOT

    def job_worker_iteration_start(self, job_config, metrics) -> None:
        self._min_key = job_config.config_get(ROW_COUNT_MIN_KEY)

    def job_process(self, key, entries, metrics) -> None:
        if key >= self._min_key:
            metrics.metrics_increment_custom("selected_rows")


@scan_job_register
class _PersonCountJob(VertexScanJob):
    """Counts vertices labelled `person`."""

    def job_config_namespace(self):
        return None

    def job_process(self, vertex, metrics) -> None:
        if vertex.properties["label"] == "person":
            metrics.metrics_increment_custom("persons")


@scan_job_register
class _FailingJob(ScanJob):
    """Raises on row 3."""

    def job_config_namespace(self):
        return None

    def job_process(self, key, entries, metrics) -> None:
        if key == 3:
            raise ValueError("row 3 is corrupt")


class _UnregisteredJob(ScanJob):
    """Scan job never registered."""

    def job_config_namespace(self):
        return None


class _PrivateRegistryJob(ScanJob):
    """Scan job registered only in a registry worker tasks never read."""

    def job_config_namespace(self):
        return None


class _RecordingEngine:
    """Engine stub failing the test when a job is created."""

    def __init__(self):
        self.created_jobs = 0

    def engine_name(self) -> str:
        return "recording"

    def engine_create_job(self, engine_config):
        self.created_jobs += 1
        raise AssertionError("no job should be created")

    def engine_job_failure_string(self, job) -> str:
        raise AssertionError("no job should fail")


def _create_runner() -> ScanJobRunner:
    return ScanJobRunner(engine=LocalExecutionEngine(executor_kind="thread", max_workers=2))


def test_jobs_runner_runs_configured_scan_job() -> None:
    """Run a configured row scan job and return its aggregated metrics.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when metrics or merged engine keys are unexpected.
    """

    engine_config = EngineConfiguration({"engine.cluster": "local"})
    app_config = ApplicationConfiguration({"limits": {"min-key": 2}, "unrelated": {"flag": True}})

    metrics = _create_runner().runner_run_scan_job(
        scan_job=_RowCountJob(),
        app_config=app_config,
        engine_config=engine_config,
        input_reader_class=_RowReader,
    )

    assert metrics.metrics_get(SCAN_METRIC_SUCCESS) == 4
    assert metrics.metrics_get(SCAN_METRIC_FAILURE) == 0
    assert metrics.metrics_get_custom("selected_rows") == 3
    assert engine_config.config_get(SCAN_ENGINE_KEYS.job_class) == job_registry_class_name(_RowCountJob)
    assert engine_config.config_get(f"{SCAN_ENGINE_KEYS.config_keys_prefix}.limits.min-key") == "2"
    assert engine_config.config_get(SCAN_ENGINE_KEYS.config_root) == "row-count"
    assert not any("unrelated" in key for key in engine_config.config_keys())


def test_jobs_runner_runs_scan_job_without_configuration() -> None:
    metrics = _create_runner().runner_run_scan_job(
        scan_job=_RowCountJob(),
        app_config=None,
        engine_config=EngineConfiguration(),
        input_reader_class=_RowReader,
    )

    assert metrics.metrics_get(SCAN_METRIC_SUCCESS) == 4
    assert metrics.metrics_get_custom("selected_rows") == 2


def test_jobs_runner_runs_vertex_scan_job() -> None:
    metrics = _create_runner().runner_run_vertex_scan_job(
        vertex_scan_job=_PersonCountJob(),
        app_config=None,
        engine_config=EngineConfiguration(),
        input_reader_class=_RowReader,
    )

    assert metrics.metrics_get(SCAN_METRIC_SUCCESS) == 4
    assert metrics.metrics_get_custom("persons") == 3


def test_jobs_runner_raises_engine_failure_text() -> None:
    """Raise the engine failure diagnostic when a worker task fails.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the failure diagnostic is unexpected.
    """

    with pytest.raises(ScanJobExecutionError, match="terminated abnormally") as error_info:
        _create_runner().runner_run_scan_job(
            scan_job=_FailingJob(),
            app_config=None,
            engine_config=EngineConfiguration(),
            input_reader_class=_RowReader,
        )

    assert error_info.value.error_code == JOB_FAILED_CODE
    assert error_info.value.job_id.startswith("job_local_")
    assert "row 3 is corrupt" in str(error_info.value)


def test_jobs_runner_stops_before_submission_when_job_is_unregistered() -> None:
    """Skip job creation when the job cannot be resolved by name.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the engine receives a job.
    """

    engine = _RecordingEngine()
    engine_config = EngineConfiguration()

    with pytest.raises(JobClassResolutionError, match="No scan job registered"):
        ScanJobRunner(engine=engine).runner_run_scan_job(
            scan_job=_UnregisteredJob(),
            app_config=None,
            engine_config=engine_config,
            input_reader_class=_RowReader,
        )

    assert engine.created_jobs == 0
    assert SCAN_ENGINE_KEYS.job_class not in engine_config


def test_jobs_runner_rejects_configuration_for_job_without_namespace() -> None:
    engine = _RecordingEngine()

    with pytest.raises(ConfigurationPairingError, match="Configuration root must be provided"):
        ScanJobRunner(engine=engine).runner_run_scan_job(
            scan_job=_FailingJob(),
            app_config=ApplicationConfiguration({"limits.min-key": 1}),
            engine_config=EngineConfiguration(),
            input_reader_class=_RowReader,
        )

    assert engine.created_jobs == 0


def test_jobs_runner_requires_engine() -> None:
    with pytest.raises(ValueError, match="engine must not be None"):
        ScanJobRunner(engine=None)


def test_jobs_runner_checks_jobs_against_the_worker_registry() -> None:
    """Reject jobs registered only outside the registry worker tasks resolve through.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the job reaches the engine.
    """

    private_registry = ScanJobRegistry()
    private_registry.registry_register(_PrivateRegistryJob)
    engine = _RecordingEngine()

    with pytest.raises(JobClassResolutionError, match="No scan job registered"):
        ScanJobRunner(engine=engine).runner_run_scan_job(
            scan_job=_PrivateRegistryJob(),
            app_config=None,
            engine_config=EngineConfiguration(),
            input_reader_class=_RowReader,
        )

    assert engine.created_jobs == 0


def test_jobs_runner_leaves_engine_configuration_untouched_on_parse_error() -> None:
    """Write no reserved or copied keys when the job configuration does not parse.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the engine configuration is mutated.
    """

    engine = _RecordingEngine()
    engine_config = EngineConfiguration({"engine.cluster": "local"})

    with pytest.raises(ConfigurationParseError, match="Unknown configuration element"):
        ScanJobRunner(engine=engine).runner_run_scan_job(
            scan_job=_RowCountJob(),
            app_config=ApplicationConfiguration({"limits.max-key": 9}),
            engine_config=engine_config,
            input_reader_class=_RowReader,
        )

    assert engine_config.config_as_dict() == {"engine.cluster": "local"}
    assert engine.created_jobs == 0


def test_jobs_runner_execute_job_returns_outcome_with_timeline() -> None:
    """Return succeeded and failed outcomes, timeline included, without raising.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when outcomes or timelines are unexpected.
    """

    runner = _create_runner()

    succeeded = runner.runner_execute_job(
        app_config=ApplicationConfiguration({"limits.min-key": 4}),
        config_root=ROW_COUNT_ROOT,
        engine_config=EngineConfiguration({SCAN_ENGINE_KEYS.job_class: job_registry_class_name(_RowCountJob)}),
        input_reader_class=_RowReader,
        job_name="ScanWorkerTask[row-count]",
        worker_task_class=ScanWorkerTask,
    )
    failed = runner.runner_execute_job(
        app_config=None,
        config_root=None,
        engine_config=EngineConfiguration({SCAN_ENGINE_KEYS.job_class: job_registry_class_name(_FailingJob)}),
        input_reader_class=_RowReader,
        job_name="ScanWorkerTask[failing]",
        worker_task_class=ScanWorkerTask,
    )

    assert isinstance(succeeded, JobSucceeded)
    assert succeeded.metrics.metrics_get_custom("selected_rows") == 1
    assert [event["state"] for event in succeeded.timeline] == ["built", "running", "succeeded"]
    assert isinstance(failed, JobFailed)
    assert "row 3 is corrupt" in failed.failure_text
    assert [event["state"] for event in failed.timeline] == ["built", "running", "failed"]
    assert failed.timeline[-1]["details"] == {"job_id": failed.job_id}


def test_jobs_runner_runs_custom_named_job_on_spawned_process_pool() -> None:
    """Run a custom-named job in spawned workers that must import its module themselves.

    The job module is imported here rather than at module level, so spawned
    workers only learn about it from the engine configuration.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when worker tasks cannot rebuild the job.
    """

    from tests.sample_scan_jobs import SAMPLE_LABEL_COUNT_JOB_NAME, SampleLabelCountJob

    engine = LocalExecutionEngine(executor_kind="process", max_workers=2, start_method="spawn")
    engine_config = EngineConfiguration()

    metrics = ScanJobRunner(engine=engine).runner_run_scan_job(
        scan_job=SampleLabelCountJob(),
        app_config=None,
        engine_config=engine_config,
        input_reader_class=_RowReader,
    )

    assert metrics.metrics_get(SCAN_METRIC_SUCCESS) == 4
    assert metrics.metrics_get_custom("label_person") == 3
    assert metrics.metrics_get_custom("label_software") == 1
    assert engine_config.config_get(SCAN_ENGINE_KEYS.job_class) == SAMPLE_LABEL_COUNT_JOB_NAME
    assert engine_config.config_get(SCAN_ENGINE_KEYS.job_module) == SampleLabelCountJob.__module__
