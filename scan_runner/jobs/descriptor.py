"""Map-only engine job descriptor construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scan_runner.config import EngineConfiguration
from scan_runner.domain import NullType

from .errors import JobBindingError


@dataclass(frozen=True)
class JobDescriptor:
    """Fully assembled, submittable map-only job.

    Attributes:
        job_name: Human-readable job name shown in engine job listings.
        engine_configuration: Engine configuration owned by this job.
        worker_task_class: Map task class instantiated by every worker.
        input_reader_class: Reader class planning and reading store splits.
        output_key_class: Job output key class, always `NullType`.
        output_value_class: Job output value class, always `NullType`.
        map_output_key_class: Map output key class, always `NullType`.
        map_output_value_class: Map output value class, always `NullType`.
        reduce_task_count: Reduce task count, always 0.
    """

    job_name: str
    engine_configuration: EngineConfiguration
    worker_task_class: type
    input_reader_class: type
    output_key_class: type = NullType
    output_value_class: type = NullType
    map_output_key_class: type = NullType
    map_output_value_class: type = NullType
    reduce_task_count: int = 0

    def __post_init__(self) -> None:
        if self.reduce_task_count != 0:
            raise ValueError("scan jobs are map-only; reduce_task_count must be 0")
        output_classes = (
            self.output_key_class,
            self.output_value_class,
            self.map_output_key_class,
            self.map_output_value_class,
        )
        if any(output_class is not NullType for output_class in output_classes):
            raise ValueError("scan jobs produce no output; output classes must be NullType")


def job_descriptor_name(worker_task_class: type, scan_job: Any) -> str:
    """Return `<WorkerTaskName>[<job description>]` for engine job listings."""

    return f"{worker_task_class.__name__}[{scan_job}]"


def job_descriptor_build(
    engine_config: EngineConfiguration,
    input_reader_class: type,
    job_name: str,
    worker_task_class: type,
) -> JobDescriptor:
    """Build a map-only job descriptor.

    Args:
        engine_config: Engine configuration already holding merged job keys.
        input_reader_class: Reader class planning and reading store splits.
        job_name: Human-readable job name.
        worker_task_class: Map task class instantiated by every worker.

    Returns:
        JobDescriptor: Descriptor with no reduce phase and no output.

    Raises:
        ValueError: Raised when the configuration is missing or the name is blank.
        JobBindingError: Raised when a task or reader argument is not a class.
    """

    if engine_config is None:
        raise ValueError("engine_config must not be None")
    if job_name is None or not job_name.strip():
        raise ValueError("job_name must not be blank")
    if not isinstance(worker_task_class, type):
        raise JobBindingError(f"worker_task_class must be a class, got {worker_task_class!r}")
    if not isinstance(input_reader_class, type):
        raise JobBindingError(f"input_reader_class must be a class, got {input_reader_class!r}")

    return JobDescriptor(
        job_name=job_name.strip(),
        engine_configuration=engine_config,
        worker_task_class=worker_task_class,
        input_reader_class=input_reader_class,
    )
