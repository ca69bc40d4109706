"""Local execution engine running map-only jobs on a thread or process pool."""

from __future__ import annotations

import logging
import multiprocessing
import traceback
from collections.abc import Mapping
from concurrent.futures import FIRST_COMPLETED, Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Final
from uuid import uuid4

from scan_runner.config import EngineConfiguration

from .cancellation import CancellationToken
from .counters import TaskCounters
from .errors import EngineJobInterruptedError, EngineJobStatusError, EngineJobSubmissionError
from .interfaces import EngineJobPort, ExecutionEnginePort

logger = logging.getLogger(__name__)

LOCAL_TASK_COUNTER_GROUP: Final[str] = "engine.task"
LOCAL_MAP_INPUT_RECORDS: Final[str] = "MAP_INPUT_RECORDS"
LOCAL_MAP_TASKS: Final[str] = "MAP_TASKS"

JOB_STATE_DEFINE: Final[str] = "DEFINE"
JOB_STATE_RUNNING: Final[str] = "RUNNING"
JOB_STATE_SUCCEEDED: Final[str] = "SUCCEEDED"
JOB_STATE_FAILED: Final[str] = "FAILED"

_DEFAULT_REDUCE_TASK_COUNT: Final[int] = 1


@dataclass(frozen=True)
class _LocalTaskResult:
    """Outcome of one worker task.

    Attributes:
        split_index: Position of the split in the planned split list.
        counters: Task counters; empty for failed tasks.
        error: Formatted failure, or None when the task succeeded.
    """

    split_index: int
    counters: dict[str, dict[str, int]]
    error: str | None = None


def _local_run_task(
    engine_values: dict[str, str],
    worker_task_class: type,
    input_reader_class: type,
    split_index: int,
    split: Any,
) -> _LocalTaskResult:
    engine_config = EngineConfiguration(engine_values)
    counters = TaskCounters()
    try:
        reader = input_reader_class(engine_config)
        task = worker_task_class()
        task.task_setup(engine_config, counters)
        try:
            for key, entries in reader.reader_read(split):
                counters.counter_increment(LOCAL_TASK_COUNTER_GROUP, LOCAL_MAP_INPUT_RECORDS)
                task.task_map(key, entries)
        finally:
            task.task_cleanup()
    except Exception as error:  # pylint: disable=broad-exception-caught
        return _LocalTaskResult(
            split_index=split_index,
            counters={},
            error=f"{type(error).__name__}: {error}\n{traceback.format_exc()}",
        )

    counters.counter_increment(LOCAL_TASK_COUNTER_GROUP, LOCAL_MAP_TASKS)
    return _LocalTaskResult(split_index=split_index, counters=counters.counter_groups())


class LocalEngineJob(EngineJobPort):
    """Job handle of the local engine.

    One worker task runs per split planned by the input reader. Counters of
    succeeded tasks are summed; any failed task fails the job.
    """

    def __init__(
        self,
        engine_config: EngineConfiguration,
        executor_kind: str,
        max_workers: int,
        poll_interval_seconds: float,
        start_method: str | None = None,
    ):
        self._engine_config = engine_config
        self._executor_kind = executor_kind
        self._start_method = start_method
        self._max_workers = max_workers
        self._poll_interval_seconds = poll_interval_seconds
        self._job_id = f"job_local_{uuid4().hex[:12]}"
        self._state = JOB_STATE_DEFINE
        self._name = self._job_id
        self._worker_task_class: type | None = None
        self._input_reader_class: type | None = None
        self._output_classes: dict[str, type] = {}
        self._reduce_task_count = _DEFAULT_REDUCE_TASK_COUNT
        self._counters = TaskCounters()
        self._failure_info: str | None = None

    @property
    def job_state(self) -> str:
        return self._state

    @property
    def job_name(self) -> str:
        return self._name

    def job_set_name(self, name: str) -> None:
        self._local_require_define_state()
        self._name = name

    def job_set_worker_task_class(self, worker_task_class: type) -> None:
        self._local_require_define_state()
        self._worker_task_class = worker_task_class

    def job_set_input_reader_class(self, input_reader_class: type) -> None:
        self._local_require_define_state()
        self._input_reader_class = input_reader_class

    def job_set_output_key_class(self, output_key_class: type) -> None:
        self._local_set_output_class("output_key", output_key_class)

    def job_set_output_value_class(self, output_value_class: type) -> None:
        self._local_set_output_class("output_value", output_value_class)

    def job_set_map_output_key_class(self, map_output_key_class: type) -> None:
        self._local_set_output_class("map_output_key", map_output_key_class)

    def job_set_map_output_value_class(self, map_output_value_class: type) -> None:
        self._local_set_output_class("map_output_value", map_output_value_class)

    def job_set_reduce_task_count(self, reduce_task_count: int) -> None:
        self._local_require_define_state()
        if reduce_task_count < 0:
            raise ValueError("reduce_task_count must be >= 0")
        self._reduce_task_count = reduce_task_count

    def job_output_class(self, slot: str) -> type | None:
        return self._output_classes.get(slot)

    def job_id(self) -> str:
        return self._job_id

    def job_counters(self) -> Mapping[str, Mapping[str, int]]:
        return self._counters.counter_groups()

    def job_failure_info(self) -> str | None:
        return self._failure_info

    def job_submit_and_wait(self, cancellation: CancellationToken | None = None) -> bool:
        """Run every split and block until all worker tasks finish.

        Args:
            cancellation: Optional token that ends the wait when requested.

        Returns:
            bool: True when every worker task succeeded.

        Raises:
            EngineJobSubmissionError: Raised when the job is incomplete, has reduce
                tasks, or its splits cannot be planned.
            EngineJobInterruptedError: Raised when cancellation is requested while waiting.
        """

        self._local_require_define_state()
        if self._worker_task_class is None or self._input_reader_class is None:
            raise EngineJobSubmissionError(
                f"Job {self._job_id} requires a worker task class and an input reader class",
                job_id=self._job_id,
            )
        if self._reduce_task_count != 0:
            raise EngineJobSubmissionError(
                f"Local engine runs map-only jobs; job {self._job_id} requested "
                f"reduce_task_count={self._reduce_task_count}",
                job_id=self._job_id,
            )

        try:
            splits = list(self._input_reader_class(self._engine_config).reader_splits())
        except Exception as error:  # pylint: disable=broad-exception-caught
            raise EngineJobSubmissionError(
                f"Job {self._job_id} could not plan input splits: {error}",
                job_id=self._job_id,
            ) from error

        self._state = JOB_STATE_RUNNING
        logger.info("Running job %s (%s) with %d splits", self._job_id, self._name, len(splits))

        engine_values = self._engine_config.config_as_dict()
        executor = self._local_create_executor()
        try:
            futures = [
                executor.submit(
                    _local_run_task,
                    engine_values,
                    self._worker_task_class,
                    self._input_reader_class,
                    split_index,
                    split,
                )
                for split_index, split in enumerate(splits)
            ]
            self._local_wait_for_tasks(futures, cancellation)
        except BaseException:
            executor.shutdown(wait=False)
            raise
        executor.shutdown(wait=True)

        return self._local_finish([future.result() for future in futures])

    def _local_wait_for_tasks(self, futures: list[Future], cancellation: CancellationToken | None) -> None:
        if cancellation is None:
            wait(futures)
            return

        pending = set(futures)
        while pending:
            if cancellation.cancellation_is_requested():
                raise EngineJobInterruptedError(
                    f"Interrupted while waiting for job {self._job_id}",
                    job_id=self._job_id,
                )
            _, pending = wait(pending, timeout=self._poll_interval_seconds, return_when=FIRST_COMPLETED)

    def _local_finish(self, task_results: list[_LocalTaskResult]) -> bool:
        failed_results = [result for result in task_results if result.error is not None]
        for result in task_results:
            if result.error is None:
                self._counters.counter_merge(result.counters)

        if failed_results:
            self._state = JOB_STATE_FAILED
            self._failure_info = "\n".join(
                f"Task {result.split_index} failed: {result.error}" for result in failed_results
            )
            logger.info("Job %s failed with %d failed tasks", self._job_id, len(failed_results))
            return False

        self._state = JOB_STATE_SUCCEEDED
        logger.info("Job %s completed successfully", self._job_id)
        return True

    def _local_create_executor(self) -> Executor:
        if self._executor_kind == "process":
            mp_context = multiprocessing.get_context(self._start_method) if self._start_method else None
            return ProcessPoolExecutor(max_workers=self._max_workers, mp_context=mp_context)
        return ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix=self._job_id)

    def _local_set_output_class(self, slot: str, output_class: type) -> None:
        self._local_require_define_state()
        self._output_classes[slot] = output_class

    def _local_require_define_state(self) -> None:
        if self._state != JOB_STATE_DEFINE:
            raise RuntimeError(f"Job {self._job_id} is in state {self._state}, not {JOB_STATE_DEFINE}")


class LocalExecutionEngine(ExecutionEnginePort):
    """In-process execution engine for development, tests and single-host scans."""

    def __init__(
        self,
        executor_kind: str = "process",
        max_workers: int = 4,
        poll_interval_seconds: float = 0.5,
        start_method: str | None = None,
    ):
        """Initialize local engine worker pool settings.

        Args:
            executor_kind: `thread` or `process` worker pool.
            max_workers: Maximum number of concurrently running worker tasks.
            poll_interval_seconds: Cancellation poll interval while waiting.
            start_method: Optional multiprocessing start method of the process pool
                (`fork`, `spawn` or `forkserver`); the platform default when omitted.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when settings are out of range.
        """

        if executor_kind not in ("thread", "process"):
            raise ValueError(f"unsupported executor_kind={executor_kind}")
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be > 0")
        if start_method is not None and start_method not in multiprocessing.get_all_start_methods():
            raise ValueError(f"unsupported start_method={start_method}")

        self._executor_kind = executor_kind
        self._max_workers = max_workers
        self._poll_interval_seconds = poll_interval_seconds
        self._start_method = start_method

    def engine_name(self) -> str:
        return f"local[{self._executor_kind}x{self._max_workers}]"

    def engine_create_job(self, engine_config: EngineConfiguration) -> LocalEngineJob:
        if engine_config is None:
            raise ValueError("engine_config must not be None")
        return LocalEngineJob(
            engine_config=engine_config,
            executor_kind=self._executor_kind,
            max_workers=self._max_workers,
            poll_interval_seconds=self._poll_interval_seconds,
            start_method=self._start_method,
        )

    def engine_job_failure_string(self, job: EngineJobPort) -> str:
        if not isinstance(job, LocalEngineJob):
            raise EngineJobStatusError(f"Job {job!r} was not created by the local engine")
        if job.job_state != JOB_STATE_FAILED or job.job_failure_info() is None:
            raise EngineJobStatusError(
                f"Job {job.job_id()} is in state {job.job_state}; no failure information available",
                job_id=job.job_id(),
            )
        return job.job_failure_info()
