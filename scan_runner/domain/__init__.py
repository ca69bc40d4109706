"""Domain models used across scan runner layer boundaries."""

from .models import (
    SCAN_CUSTOM_COUNTER_GROUP,
    SCAN_METRIC_FAILURE,
    SCAN_METRIC_SUCCESS,
    SCAN_STANDARD_COUNTER_GROUP,
    SCAN_STANDARD_METRICS,
    NullType,
    ScanMetrics,
    ScanVertex,
)
from .timeline import domain_build_state_event

__all__ = [
    "NullType",
    "SCAN_CUSTOM_COUNTER_GROUP",
    "SCAN_METRIC_FAILURE",
    "SCAN_METRIC_SUCCESS",
    "SCAN_STANDARD_COUNTER_GROUP",
    "SCAN_STANDARD_METRICS",
    "ScanMetrics",
    "ScanVertex",
    "domain_build_state_event",
]
