"""Wizard status derivation.

Status is a pure function of the step graph and the configuration
record. It never mutates and never fails.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from shipwizard.domain.steps import StepGraph


@dataclass(frozen=True)
class WizardStatus:
    """Read-only summary of configuration progress.

    Attributes:
        completed_steps: Written step ids, in graph order.
        missing_steps: Unwritten step ids, in graph order.
        next_step: First unwritten step id, None when all are written.
        snapshot: Step id -> stored value for every completed step.
    """

    completed_steps: tuple[str, ...]
    missing_steps: tuple[str, ...]
    next_step: str | None
    snapshot: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def ready(self) -> bool:
        return self.next_step is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "completed_steps": list(self.completed_steps),
            "missing_steps": list(self.missing_steps),
            "next_step": self.next_step,
            "ready": self.ready,
            "snapshot": copy.deepcopy(self.snapshot),
        }


def compute_status(graph: StepGraph, record: Mapping[str, Any]) -> WizardStatus:
    """Derive status from the current record.

    Args:
        graph: Active step graph.
        record: Configuration record (step id -> value).

    Returns:
        WizardStatus. An empty record yields the first step as next.
    """
    completed = tuple(s for s in graph.step_ids if s in record)
    missing = tuple(s for s in graph.step_ids if s not in record)
    return WizardStatus(
        completed_steps=completed,
        missing_steps=missing,
        next_step=missing[0] if missing else None,
        snapshot={s: copy.deepcopy(record[s]) for s in completed},
    )
