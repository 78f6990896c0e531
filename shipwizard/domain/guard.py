"""Ordering guard for step writes.

A step may only be written once every step before it in the graph has
been written. The guard runs ahead of value validation so that a caller
who is out of order is told what to do next.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from shipwizard.domain.exceptions import PrerequisiteBlockedError
from shipwizard.domain.steps import StepGraph


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a prerequisite check.

    Attributes:
        step_id: Step that was checked.
        missing_steps: Earlier steps absent from the record, in graph order.
    """

    step_id: str
    missing_steps: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.missing_steps

    @property
    def blocked(self) -> bool:
        return bool(self.missing_steps)


def check_prerequisites(
    graph: StepGraph,
    step_id: str,
    record: Mapping[str, Any],
) -> GuardResult:
    """Find earlier steps that are not yet in the record.

    Args:
        graph: Active step graph.
        step_id: Step about to be written.
        record: Current configuration record.

    Returns:
        GuardResult, ok when nothing is missing.

    Raises:
        UnknownStepError: If the step is not part of the graph.
    """
    missing = tuple(s for s in graph.steps_before(step_id) if s not in record)
    return GuardResult(step_id=step_id, missing_steps=missing)


def ensure_prerequisites(
    graph: StepGraph,
    step_id: str,
    record: Mapping[str, Any],
) -> None:
    """Raise if the step cannot be written yet.

    Raises:
        PrerequisiteBlockedError: If earlier steps are missing.
        UnknownStepError: If the step is not part of the graph.
    """
    result = check_prerequisites(graph, step_id, record)
    if result.blocked:
        first = graph.get(result.missing_steps[0])
        raise PrerequisiteBlockedError(
            step_id=step_id,
            missing_steps=list(result.missing_steps),
            next_tool=first.tool_name,
        )
