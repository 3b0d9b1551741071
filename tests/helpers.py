"""Shared helpers for condition-set tests."""

from __future__ import annotations

import textwrap

from conditionset import ConditionSet, DataFile


class ScriptedRandom:
    """RandomSource that returns queued values and counts draws."""

    def __init__(self, *values: int) -> None:
        self._values = list(values)
        self.draws = 0

    def int(self, upper: int) -> int:
        self.draws += 1
        if self._values:
            return self._values.pop(0) % upper
        return 0


def parse(text: str) -> DataFile:
    """Parse dedented data-file text."""
    return DataFile.from_string(textwrap.dedent(text).strip("\n"))


def load_set(text: str) -> tuple[ConditionSet, DataFile]:
    """Load the first top-level block of ``text`` as a condition set."""
    data = parse(text)
    node = next(iter(data))
    return ConditionSet.from_node(node), data
