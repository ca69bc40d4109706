"""Typed domain models shared across runtime layers.

This module provides the data contracts exchanged between the scan job
runner, worker tasks and execution engines.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

SCAN_METRIC_SUCCESS: Final[str] = "SUCCESS"
SCAN_METRIC_FAILURE: Final[str] = "FAILURE"
SCAN_STANDARD_METRICS: Final[tuple[str, ...]] = (SCAN_METRIC_SUCCESS, SCAN_METRIC_FAILURE)

SCAN_STANDARD_COUNTER_GROUP: Final[str] = "scanjob.standard"
SCAN_CUSTOM_COUNTER_GROUP: Final[str] = "scanjob.custom"


class NullType:
    """Sentinel type marking an absent output key or value of an engine job."""

    def __init__(self):
        raise TypeError("NullType is a marker type and cannot be instantiated")


@dataclass(frozen=True)
class ScanMetrics:
    """Metrics produced by a completed scan job.

    Attributes:
        standard: Standard scan counters (`SUCCESS`, `FAILURE`) by name.
        custom: Job-defined counters by name.
        engine: Remaining engine counters keyed as `<group>.<name>`.
    """

    standard: Mapping[str, int] = field(default_factory=dict)
    custom: Mapping[str, int] = field(default_factory=dict)
    engine: Mapping[str, int] = field(default_factory=dict)

    def metrics_get(self, metric: str) -> int:
        """Return one standard counter value, 0 when never incremented.

        Args:
            metric: Standard metric name.

        Returns:
            int: Counter value.

        Raises:
            ValueError: Raised when the metric is not a standard metric.
        """

        if metric not in SCAN_STANDARD_METRICS:
            raise ValueError(f"unknown standard scan metric={metric}")
        return int(self.standard.get(metric, 0))

    def metrics_get_custom(self, name: str) -> int:
        return int(self.custom.get(name, 0))

    def metrics_as_dict(self) -> dict[str, int]:
        """Return every counter keyed as `<group>.<name>`."""

        flattened: dict[str, int] = dict(self.engine)
        flattened.update({f"{SCAN_STANDARD_COUNTER_GROUP}.{name}": value for name, value in self.standard.items()})
        flattened.update({f"{SCAN_CUSTOM_COUNTER_GROUP}.{name}": value for name, value in self.custom.items()})
        return flattened


@dataclass(frozen=True)
class ScanVertex:
    """One vertex handed to a vertex scan job.

    Attributes:
        vertex_id: Row key of the vertex in the backing store.
        properties: Column to value mapping read for the vertex row.
    """

    vertex_id: Any
    properties: Mapping[Any, Any]
