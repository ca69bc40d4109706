"""Execution engine package: engine ports, counters, cancellation and the local engine."""

from .cancellation import CancellationToken
from .counters import TaskCounters
from .errors import (
	EngineJobInterruptedError,
	EngineJobStatusError,
	EngineJobSubmissionError,
	ExecutionEngineError,
)
from .interfaces import EngineJobPort, ExecutionEnginePort, InputReaderPort, WorkerTaskPort
from .local import LocalEngineJob, LocalExecutionEngine

__all__ = [
	"CancellationToken",
	"EngineJobInterruptedError",
	"EngineJobPort",
	"EngineJobStatusError",
	"EngineJobSubmissionError",
	"ExecutionEngineError",
	"ExecutionEnginePort",
	"InputReaderPort",
	"LocalEngineJob",
	"LocalExecutionEngine",
	"TaskCounters",
	"WorkerTaskPort",
]
