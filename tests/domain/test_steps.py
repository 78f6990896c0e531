"""Tests for the step graph."""

import pytest

from shipwizard.domain.exceptions import StepDefinitionError, UnknownStepError
from shipwizard.domain.steps import (
    CARRIER_STEP,
    LABEL_STEP,
    STEP_SETS,
    StepDefinition,
    StepGraph,
    build_step_graph,
)


class TestStepGraph:
    """Tests for StepGraph ordering and lookup."""

    def test_basic_order(self, basic_graph: StepGraph) -> None:
        """Basic set is carrier then label."""
        assert basic_graph.step_ids == ["carrier", "label"]

    def test_full_order(self, full_graph: StepGraph) -> None:
        """Full set has all five steps in checklist order."""
        assert full_graph.step_ids == ["carrier", "options", "label", "printer", "notification"]

    def test_index_of(self, full_graph: StepGraph) -> None:
        """index_of returns checklist position."""
        assert full_graph.index_of("carrier") == 0
        assert full_graph.index_of("label") == 2

    def test_index_of_unknown_step(self, basic_graph: StepGraph) -> None:
        """Unknown ids raise UnknownStepError with the known steps."""
        with pytest.raises(UnknownStepError) as exc_info:
            basic_graph.index_of("printer")

        assert exc_info.value.details["step_id"] == "printer"
        assert exc_info.value.details["known_steps"] == ["carrier", "label"]
        assert exc_info.value.error_code == "UNKNOWN_STEP"

    def test_steps_before(self, full_graph: StepGraph) -> None:
        """steps_before lists strictly earlier steps in order."""
        assert full_graph.steps_before("carrier") == []
        assert full_graph.steps_before("label") == ["carrier", "options"]

    def test_by_tool(self, basic_graph: StepGraph) -> None:
        """Steps can be found by tool name."""
        assert basic_graph.by_tool("label_set") is LABEL_STEP
        assert basic_graph.by_tool("printer_set") is None

    def test_contains_and_len(self, basic_graph: StepGraph) -> None:
        """Graph supports membership and length."""
        assert "carrier" in basic_graph
        assert "options" not in basic_graph
        assert len(basic_graph) == 2

    def test_get_returns_definition(self, basic_graph: StepGraph) -> None:
        """get returns the step definition."""
        step = basic_graph.get("carrier")
        assert step.tool_name == "carrier_create"
        assert step.input_fields == ("carrier", "service")


class TestStepGraphDefinitionErrors:
    """Tests for startup-time definition errors."""

    def test_empty_graph(self) -> None:
        """A graph must have steps."""
        with pytest.raises(StepDefinitionError):
            StepGraph([])

    def test_duplicate_step_id(self) -> None:
        """Duplicate step ids are rejected."""
        duplicate = StepDefinition(id="carrier", tool_name="carrier_again", input_fields=())
        with pytest.raises(StepDefinitionError) as exc_info:
            StepGraph([CARRIER_STEP, duplicate])

        assert exc_info.value.details == {"step_id": "carrier"}

    def test_duplicate_tool_name(self) -> None:
        """Duplicate tool names are rejected."""
        duplicate = StepDefinition(id="other", tool_name="carrier_create", input_fields=())
        with pytest.raises(StepDefinitionError):
            StepGraph([CARRIER_STEP, duplicate])

    def test_unknown_step_set(self) -> None:
        """Only defined step sets can be built."""
        with pytest.raises(StepDefinitionError) as exc_info:
            build_step_graph("deluxe")

        assert exc_info.value.details == {"step_set": "deluxe"}


class TestPlan:
    """Tests for the execution plan payload."""

    def test_plan_payload(self, basic_graph: StepGraph) -> None:
        """Plan lists steps with tools and inputs."""
        plan = basic_graph.plan()

        assert plan["version"] == "1.0"
        assert plan["on_failure"] == "stop-and-ask"
        assert [s["id"] for s in plan["steps"]] == ["carrier", "label"]
        assert plan["steps"][1]["tool"] == "label_set"
        assert plan["steps"][1]["inputs"] == ["label_size"]

    def test_all_step_sets_build(self) -> None:
        """Every named step set is a valid graph starting at carrier."""
        for name in STEP_SETS:
            assert build_step_graph(name).step_ids[0] == "carrier"
