"""Submit one job descriptor, block until completion, and classify the outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Final, Union

from scan_runner.domain import ScanMetrics, domain_build_state_event
from scan_runner.engines import (
    CancellationToken,
    EngineJobPort,
    EngineJobSubmissionError,
    ExecutionEnginePort,
)

from .descriptor import JobDescriptor
from .errors import (
    JOB_FAILED_CODE,
    JOB_STATUS_UNREADABLE_CODE,
    JOB_SUBMISSION_ERROR_CODE,
    ScanJobExecutionError,
)
from .metrics import metrics_from_engine_counters

logger = logging.getLogger(__name__)

JOB_STATUS_UNREADABLE_MESSAGE: Final[str] = (
    "Job failed (unable to read job status programmatically -- see engine logs for information)"
)


@dataclass(frozen=True)
class JobSucceeded:
    """Outcome of a job the engine reported as succeeded.

    Attributes:
        job_name: Descriptor job name.
        metrics: Metrics translated from engine counters.
        timeline: State transition events.
    """

    job_name: str
    metrics: ScanMetrics
    timeline: list[dict[str, object]] = field(default_factory=list)


@dataclass(frozen=True)
class JobFailed:
    """Outcome of a failed job whose engine status could be read.

    Attributes:
        job_name: Descriptor job name.
        job_id: Engine job identifier.
        failure_text: Engine-reported failure text.
        timeline: State transition events.
    """

    job_name: str
    job_id: str
    failure_text: str
    timeline: list[dict[str, object]] = field(default_factory=list)

    def outcome_message(self) -> str:
        return f"Job {self.job_id} terminated abnormally: {self.failure_text}"


@dataclass(frozen=True)
class JobFailedUnreadable:
    """Outcome of a failed job whose engine status lookup itself failed.

    Attributes:
        job_name: Descriptor job name.
        timeline: State transition events.
    """

    job_name: str
    timeline: list[dict[str, object]] = field(default_factory=list)

    def outcome_message(self) -> str:
        return JOB_STATUS_UNREADABLE_MESSAGE


JobOutcome = Union[JobSucceeded, JobFailed, JobFailedUnreadable]


def job_executor_run(
    engine: ExecutionEnginePort,
    descriptor: JobDescriptor,
    cancellation: CancellationToken | None = None,
) -> JobOutcome:
    """Submit a descriptor and block until the engine reports a terminal state.

    There is no timeout. The wait ends when the job finishes, when
    `cancellation` is requested, or when the calling thread is interrupted;
    the last two propagate and leave the engine-side job as it is.

    Args:
        engine: Execution engine receiving the job.
        descriptor: Map-only job descriptor.
        cancellation: Optional token ending the wait when requested.

    Returns:
        JobOutcome: Succeeded with metrics, or failed with diagnostics.

    Raises:
        ValueError: Raised when engine or descriptor is None.
        ScanJobExecutionError: Raised when the job cannot be submitted or monitored.
        EngineJobInterruptedError: Raised when cancellation is requested while waiting.
    """

    if engine is None:
        raise ValueError("engine must not be None")
    if descriptor is None:
        raise ValueError("descriptor must not be None")

    timeline: list[dict[str, object]] = [domain_build_state_event(state="built", job_name=descriptor.job_name)]
    job = engine.engine_create_job(descriptor.engine_configuration)
    _job_executor_apply_descriptor(job=job, descriptor=descriptor)

    logger.info("Submitting job %s to engine %s", descriptor.job_name, engine.engine_name())
    timeline.append(domain_build_state_event(state="running", job_name=descriptor.job_name))
    try:
        succeeded = job.job_submit_and_wait(cancellation=cancellation)
    except EngineJobSubmissionError as error:
        raise ScanJobExecutionError(
            f"Job {descriptor.job_name} could not be submitted: {error}",
            error_code=JOB_SUBMISSION_ERROR_CODE,
            job_id=error.job_id,
        ) from error

    if succeeded:
        metrics = metrics_from_engine_counters(job.job_counters())
        timeline.append(
            domain_build_state_event(
                state="succeeded",
                job_name=descriptor.job_name,
                details={"counter_count": len(metrics.metrics_as_dict())},
            )
        )
        logger.info("Job %s succeeded", descriptor.job_name)
        return JobSucceeded(job_name=descriptor.job_name, metrics=metrics, timeline=timeline)

    return _job_executor_describe_failure(engine=engine, job=job, descriptor=descriptor, timeline=timeline)


def job_outcome_raise_for_failure(outcome: JobOutcome) -> ScanMetrics:
    """Return metrics of a succeeded outcome or raise its failure diagnostic.

    Args:
        outcome: Executor outcome.

    Returns:
        ScanMetrics: Metrics of the succeeded job.

    Raises:
        ScanJobExecutionError: Raised for failed outcomes.
    """

    if isinstance(outcome, JobSucceeded):
        return outcome.metrics
    if isinstance(outcome, JobFailed):
        raise ScanJobExecutionError(outcome.outcome_message(), error_code=JOB_FAILED_CODE, job_id=outcome.job_id)
    raise ScanJobExecutionError(outcome.outcome_message(), error_code=JOB_STATUS_UNREADABLE_CODE)


def _job_executor_apply_descriptor(job: EngineJobPort, descriptor: JobDescriptor) -> None:
    job.job_set_name(descriptor.job_name)
    job.job_set_output_key_class(descriptor.output_key_class)
    job.job_set_output_value_class(descriptor.output_value_class)
    job.job_set_map_output_key_class(descriptor.map_output_key_class)
    job.job_set_map_output_value_class(descriptor.map_output_value_class)
    job.job_set_reduce_task_count(descriptor.reduce_task_count)
    job.job_set_worker_task_class(descriptor.worker_task_class)
    job.job_set_input_reader_class(descriptor.input_reader_class)


def _job_executor_describe_failure(
    engine: ExecutionEnginePort,
    job: EngineJobPort,
    descriptor: JobDescriptor,
    timeline: list[dict[str, object]],
) -> JobFailed | JobFailedUnreadable:
    """Build the failure outcome from engine status, falling back when status is unreadable.

    Args:
        engine: Engine the job ran on.
        job: Failed job handle.
        descriptor: Submitted descriptor.
        timeline: Mutable state timeline.

    Returns:
        JobFailed | JobFailedUnreadable: Structured or generic failure outcome.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    outcome: JobFailed | JobFailedUnreadable
    try:
        job_id = job.job_id()
        failure_text = engine.engine_job_failure_string(job)
    except Exception as error:  # pylint: disable=broad-exception-caught
        logger.warning("Unable to read status of failed job %s: %s", descriptor.job_name, error)
        timeline.append(
            domain_build_state_event(
                state="failed",
                job_name=descriptor.job_name,
                details={"status_error_type": type(error).__name__, "status_error_message": str(error)},
            )
        )
        outcome = JobFailedUnreadable(job_name=descriptor.job_name, timeline=timeline)
    else:
        timeline.append(
            domain_build_state_event(state="failed", job_name=descriptor.job_name, details={"job_id": job_id})
        )
        outcome = JobFailed(
            job_name=descriptor.job_name,
            job_id=job_id,
            failure_text=failure_text,
            timeline=timeline,
        )

    logger.error("Job %s failed: %s", descriptor.job_name, outcome.outcome_message())
    return outcome
