"""Project-native typed exceptions for scan job orchestration failures."""

from __future__ import annotations

from typing import Final

JOB_CLASS_NOT_FOUND_CODE: Final[str] = "JOB_CLASS_NOT_FOUND"
JOB_BINDING_ERROR_CODE: Final[str] = "JOB_BINDING_ERROR"
JOB_SUBMISSION_ERROR_CODE: Final[str] = "JOB_SUBMISSION_ERROR"
JOB_FAILED_CODE: Final[str] = "JOB_FAILED"
JOB_STATUS_UNREADABLE_CODE: Final[str] = "JOB_STATUS_UNREADABLE"


class ScanRunnerError(Exception):
    """Base exception for scan job orchestration failures.

    Attributes:
        error_code: Optional deterministic error code.
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class JobClassResolutionError(ScanRunnerError, LookupError):
    """Scan job implementation cannot be located by name.

    Attributes:
        class_name: Offending registry name.
    """

    def __init__(self, message: str, class_name: str):
        super().__init__(message=message, error_code=JOB_CLASS_NOT_FOUND_CODE)
        self.class_name = class_name


class JobBindingError(ScanRunnerError, TypeError):
    """Worker-task, input-reader or job binding needed for submission is unusable."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code=JOB_BINDING_ERROR_CODE)


class ScanJobExecutionError(ScanRunnerError, RuntimeError):
    """Job could not be submitted, or the engine reported it did not succeed.

    Attributes:
        job_id: Engine job identifier when known.
    """

    def __init__(self, message: str, error_code: str | None = None, job_id: str | None = None):
        super().__init__(message=message, error_code=error_code)
        self.job_id = job_id
