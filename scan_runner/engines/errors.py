"""Project-native typed exceptions for execution engine failures."""

from __future__ import annotations


class ExecutionEngineError(Exception):
    """Base exception for execution engine failures.

    Attributes:
        job_id: Optional engine job identifier.
    """

    def __init__(self, message: str, job_id: str | None = None):
        super().__init__(message)
        self.job_id = job_id


class EngineJobSubmissionError(ExecutionEngineError, OSError):
    """Job could not be submitted to, or monitored by, the engine."""


class EngineJobStatusError(ExecutionEngineError, RuntimeError):
    """Engine status introspection failed for a job."""


class EngineJobInterruptedError(ExecutionEngineError, InterruptedError):
    """Caller stopped waiting for a running job; the job itself is left running."""
