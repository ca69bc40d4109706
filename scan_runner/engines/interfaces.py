"""Typed interfaces for execution engine and engine-hosted collaborators."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from scan_runner.config import EngineConfiguration

from .cancellation import CancellationToken
from .counters import TaskCounters


class InputReaderPort(Protocol):
    """Port for reading raw (key, column-set) rows out of the backing store.

    Engines construct readers with the job's engine configuration, once on the
    submitting side to plan splits and once per worker task to read a split.
    """

    def __init__(self, engine_config: EngineConfiguration):
        """Initialize reader from engine configuration.

        Args:
            engine_config: Engine configuration of the submitted job.
        """

    def reader_splits(self) -> Sequence[Any]:
        """Return the disjoint key-range splits covering the whole store.

        Returns:
            Sequence[Any]: Picklable split descriptors, one per worker task.

        Raises:
            ConnectionError: Raised when the store cannot be reached.
        """

    def reader_read(self, split: Any) -> Iterable[tuple[Any, Sequence[tuple[Any, Any]]]]:
        """Yield (row key, column entries) pairs of one split in key order.

        Args:
            split: One split returned by `reader_splits`.

        Returns:
            Iterable[tuple[Any, Sequence[tuple[Any, Any]]]]: Rows of the split.

        Raises:
            ConnectionError: Raised when the store cannot be reached.
        """


class WorkerTaskPort(Protocol):
    """Port for the per-split map task an engine runs inside a worker."""

    def task_setup(self, engine_config: EngineConfiguration, counters: TaskCounters) -> None:
        """Prepare the task before the first row of a split."""

    def task_map(self, key: Any, entries: Sequence[tuple[Any, Any]]) -> None:
        """Process one row."""

    def task_cleanup(self) -> None:
        """Release task resources after the last row of a split."""


class EngineJobPort(Protocol):
    """Port for one engine-native job handle between construction and completion."""

    def job_set_name(self, name: str) -> None:
        """Set the human-readable job name shown in engine job listings."""

    def job_set_worker_task_class(self, worker_task_class: type) -> None:
        """Set the map task class each worker instantiates."""

    def job_set_input_reader_class(self, input_reader_class: type) -> None:
        """Set the input reader class used to plan and read splits."""

    def job_set_output_key_class(self, output_key_class: type) -> None:
        """Set the job output key class."""

    def job_set_output_value_class(self, output_value_class: type) -> None:
        """Set the job output value class."""

    def job_set_map_output_key_class(self, map_output_key_class: type) -> None:
        """Set the map-phase output key class."""

    def job_set_map_output_value_class(self, map_output_value_class: type) -> None:
        """Set the map-phase output value class."""

    def job_set_reduce_task_count(self, reduce_task_count: int) -> None:
        """Set the number of reduce tasks."""

    def job_submit_and_wait(self, cancellation: CancellationToken | None = None) -> bool:
        """Submit the job and block until it reaches a terminal state.

        Args:
            cancellation: Optional token that ends the wait when requested.

        Returns:
            bool: True when the job succeeded.

        Raises:
            EngineJobSubmissionError: Raised when the job cannot be submitted or monitored.
            EngineJobInterruptedError: Raised when cancellation is requested while waiting.
        """

    def job_id(self) -> str:
        """Return the engine-assigned job identifier."""

    def job_counters(self) -> Mapping[str, Mapping[str, int]]:
        """Return aggregated counters as `{group: {name: value}}`."""


class ExecutionEnginePort(Protocol):
    """Port for the distributed batch engine scan jobs are submitted to."""

    def engine_name(self) -> str:
        """Return engine identifier for diagnostics and logs."""

    def engine_create_job(self, engine_config: EngineConfiguration) -> EngineJobPort:
        """Construct a new job handle bound to an engine configuration.

        Args:
            engine_config: Engine configuration owned by the new job.

        Returns:
            EngineJobPort: Job handle in its initial state.

        Raises:
            EngineJobSubmissionError: Raised when the engine cannot create jobs.
        """

    def engine_job_failure_string(self, job: EngineJobPort) -> str:
        """Return the engine-reported failure text of a failed job.

        Args:
            job: Job handle created by this engine.

        Returns:
            str: Failure diagnostics.

        Raises:
            EngineJobStatusError: Raised when job status cannot be read.
        """
