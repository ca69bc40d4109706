"""Grouped numeric counters accumulated by worker tasks."""

from __future__ import annotations

from collections.abc import Mapping


class TaskCounters:
    """Mutable `{group: {name: value}}` counter accumulator for one worker task."""

    def __init__(self):
        self._groups: dict[str, dict[str, int]] = {}

    def counter_increment(self, group: str, name: str, delta: int = 1) -> None:
        if not group.strip() or not name.strip():
            raise ValueError("counter group and name must not be blank")
        group_counters = self._groups.setdefault(group, {})
        group_counters[name] = group_counters.get(name, 0) + int(delta)

    def counter_value(self, group: str, name: str) -> int:
        return self._groups.get(group, {}).get(name, 0)

    def counter_merge(self, groups: Mapping[str, Mapping[str, int]]) -> None:
        """Add every counter of another grouped mapping into this accumulator."""

        for group, group_counters in groups.items():
            for name, value in group_counters.items():
                self.counter_increment(group, name, value)

    def counter_groups(self) -> dict[str, dict[str, int]]:
        return {group: dict(group_counters) for group, group_counters in self._groups.items()}
