"""Scan metrics: worker-side accumulation and engine counter translation."""

from __future__ import annotations

from collections.abc import Mapping

from scan_runner.domain import (
    SCAN_CUSTOM_COUNTER_GROUP,
    SCAN_STANDARD_COUNTER_GROUP,
    SCAN_STANDARD_METRICS,
    ScanMetrics,
)
from scan_runner.engines import TaskCounters


class WorkerScanMetrics:
    """Metric accumulator handed to scan jobs inside one worker task."""

    def __init__(self, counters: TaskCounters):
        if counters is None:
            raise ValueError("counters must not be None")
        self._counters = counters

    def metrics_increment(self, metric: str, delta: int = 1) -> None:
        if metric not in SCAN_STANDARD_METRICS:
            raise ValueError(f"unknown standard scan metric={metric}")
        self._counters.counter_increment(SCAN_STANDARD_COUNTER_GROUP, metric, delta)

    def metrics_increment_custom(self, name: str, delta: int = 1) -> None:
        self._counters.counter_increment(SCAN_CUSTOM_COUNTER_GROUP, name, delta)

    def metrics_get(self, metric: str) -> int:
        return self._counters.counter_value(SCAN_STANDARD_COUNTER_GROUP, metric)

    def metrics_get_custom(self, name: str) -> int:
        return self._counters.counter_value(SCAN_CUSTOM_COUNTER_GROUP, name)


def metrics_from_engine_counters(counters: Mapping[str, Mapping[str, int]]) -> ScanMetrics:
    """Translate engine counters of a succeeded job into scan metrics.

    Every engine counter maps to exactly one metric entry: standard and custom
    scan groups by counter name, every other group as `<group>.<name>`.

    Args:
        counters: Engine counters as `{group: {name: value}}`.

    Returns:
        ScanMetrics: Immutable metrics payload.

    Raises:
        ValueError: Raised when a counter value is not numeric.
    """

    standard: dict[str, int] = {}
    custom: dict[str, int] = {}
    engine: dict[str, int] = {}
    for group, group_counters in counters.items():
        for name, value in group_counters.items():
            if group == SCAN_STANDARD_COUNTER_GROUP:
                standard[name] = int(value)
            elif group == SCAN_CUSTOM_COUNTER_GROUP:
                custom[name] = int(value)
            else:
                engine[f"{group}.{name}"] = int(value)
    return ScanMetrics(standard=standard, custom=custom, engine=engine)
