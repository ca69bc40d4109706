"""Job layer package: scan job registry, preflight, descriptors, execution and worker tasks."""

from .descriptor import JobDescriptor, job_descriptor_build, job_descriptor_name
from .errors import (
	JOB_BINDING_ERROR_CODE,
	JOB_CLASS_NOT_FOUND_CODE,
	JOB_FAILED_CODE,
	JOB_STATUS_UNREADABLE_CODE,
	JOB_SUBMISSION_ERROR_CODE,
	JobBindingError,
	JobClassResolutionError,
	ScanJobExecutionError,
	ScanRunnerError,
)
from .executor import (
	JOB_STATUS_UNREADABLE_MESSAGE,
	JobFailed,
	JobFailedUnreadable,
	JobOutcome,
	JobSucceeded,
	job_executor_run,
	job_outcome_raise_for_failure,
)
from .interfaces import ScanJob, VertexScanJob
from .metrics import WorkerScanMetrics, metrics_from_engine_counters
from .preflight import job_preflight_resolve_class
from .registry import ScanJobRegistry, job_registry_class_name, job_registry_default, scan_job_register
from .runner import ScanJobRunner
from .worker import ScanWorkerTask, VertexScanWorkerTask

__all__ = [
	"JOB_BINDING_ERROR_CODE",
	"JOB_CLASS_NOT_FOUND_CODE",
	"JOB_FAILED_CODE",
	"JOB_STATUS_UNREADABLE_CODE",
	"JOB_STATUS_UNREADABLE_MESSAGE",
	"JOB_SUBMISSION_ERROR_CODE",
	"JobBindingError",
	"JobClassResolutionError",
	"JobDescriptor",
	"JobFailed",
	"JobFailedUnreadable",
	"JobOutcome",
	"JobSucceeded",
	"ScanJob",
	"ScanJobExecutionError",
	"ScanJobRegistry",
	"ScanJobRunner",
	"ScanRunnerError",
	"ScanWorkerTask",
	"VertexScanJob",
	"VertexScanWorkerTask",
	"WorkerScanMetrics",
	"job_descriptor_build",
	"job_descriptor_name",
	"job_executor_run",
	"job_outcome_raise_for_failure",
	"job_preflight_resolve_class",
	"job_registry_class_name",
	"job_registry_default",
	"metrics_from_engine_counters",
	"scan_job_register",
]
