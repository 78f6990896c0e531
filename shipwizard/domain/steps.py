"""Step graph for the shipping wizard.

The step graph is the fixed, ordered checklist of configuration steps.
Each step names the tool that writes it and the input fields the tool
accepts. Which steps exist is data: named step sets select a graph at
startup, the write path is the same for all of them.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from shipwizard.domain.exceptions import StepDefinitionError, UnknownStepError

PLAN_VERSION = "1.0"


@dataclass(frozen=True)
class StepDefinition:
    """A single configuration step.

    Attributes:
        id: Step identifier, also the key in the configuration record.
        tool_name: Name of the tool that writes this step.
        input_fields: Ordered input fields the tool accepts.
        description: Short human-readable purpose of the step.
    """

    id: str
    tool_name: str
    input_fields: tuple[str, ...]
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tool": self.tool_name,
            "inputs": list(self.input_fields),
            "description": self.description,
        }


class StepGraph:
    """Ordered, immutable sequence of step definitions.

    Example usage:
        graph = StepGraph([CARRIER_STEP, LABEL_STEP])
        graph.index_of("label")       # 1
        graph.steps_before("label")   # ["carrier"]

    Raises:
        StepDefinitionError: On construction, if the graph is empty or
            has duplicate step ids or tool names.
    """

    def __init__(self, steps: Iterable[StepDefinition]) -> None:
        self._steps: tuple[StepDefinition, ...] = tuple(steps)
        if not self._steps:
            raise StepDefinitionError("Step graph must define at least one step")

        self._index: dict[str, int] = {}
        self._by_tool: dict[str, StepDefinition] = {}
        for position, step in enumerate(self._steps):
            if step.id in self._index:
                raise StepDefinitionError(
                    f"Duplicate step id '{step.id}'",
                    details={"step_id": step.id},
                )
            if step.tool_name in self._by_tool:
                raise StepDefinitionError(
                    f"Duplicate tool name '{step.tool_name}'",
                    details={"tool_name": step.tool_name},
                )
            self._index[step.id] = position
            self._by_tool[step.tool_name] = step

    def __iter__(self) -> Iterator[StepDefinition]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._index

    @property
    def step_ids(self) -> list[str]:
        return [step.id for step in self._steps]

    def index_of(self, step_id: str) -> int:
        """Get the position of a step in checklist order.

        Raises:
            UnknownStepError: If the step is not part of this graph.
        """
        try:
            return self._index[step_id]
        except KeyError:
            raise UnknownStepError(step_id, self.step_ids) from None

    def get(self, step_id: str) -> StepDefinition:
        return self._steps[self.index_of(step_id)]

    def by_tool(self, tool_name: str) -> StepDefinition | None:
        return self._by_tool.get(tool_name)

    def steps_before(self, step_id: str) -> list[str]:
        """Step ids strictly before the given step, in order."""
        return self.step_ids[: self.index_of(step_id)]

    def plan(self) -> dict[str, Any]:
        """The ordered execution plan a caller should follow."""
        return {
            "version": PLAN_VERSION,
            "on_failure": "stop-and-ask",
            "steps": [step.to_dict() for step in self._steps],
        }


# ============================================================================
# Shipping Steps
# ============================================================================


CARRIER_STEP = StepDefinition(
    id="carrier",
    tool_name="carrier_create",
    input_fields=("carrier", "service"),
    description="Choose the carrier and one of its services.",
)

OPTIONS_STEP = StepDefinition(
    id="options",
    tool_name="options_set",
    input_fields=("insurance", "signature_required"),
    description="Choose service options such as insurance.",
)

LABEL_STEP = StepDefinition(
    id="label",
    tool_name="label_set",
    input_fields=("label_size",),
    description="Choose the label size.",
)

PRINTER_STEP = StepDefinition(
    id="printer",
    tool_name="printer_set",
    input_fields=("printer_name",),
    description="Choose the printer labels are sent to.",
)

NOTIFICATION_STEP = StepDefinition(
    id="notification",
    tool_name="notification_set",
    input_fields=("email",),
    description="Choose the email address that receives shipment notifications.",
)

STEP_SETS: dict[str, tuple[StepDefinition, ...]] = {
    "basic": (CARRIER_STEP, LABEL_STEP),
    "full": (CARRIER_STEP, OPTIONS_STEP, LABEL_STEP, PRINTER_STEP, NOTIFICATION_STEP),
}


def build_step_graph(step_set: str = "full") -> StepGraph:
    """Build the step graph for a named step set.

    Raises:
        StepDefinitionError: If the step set is not defined.
    """
    try:
        steps = STEP_SETS[step_set]
    except KeyError:
        raise StepDefinitionError(
            f"Unknown step set '{step_set}'. Available: {', '.join(STEP_SETS)}",
            details={"step_set": step_set},
        ) from None
    return StepGraph(steps)
