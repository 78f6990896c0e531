"""Tests for the finalize/confirm commit controller."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from shipwizard.domain.commit import CommitController
from shipwizard.domain.exceptions import (
    IncompleteConfigurationError,
    NoPendingConfirmationError,
)
from shipwizard.domain.state_machines import CommitStatus
from shipwizard.domain.steps import StepGraph
from shipwizard.domain.store import ConfigStore

FIXED_NOW = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def controller(basic_graph: StepGraph, store: ConfigStore) -> CommitController:
    """Create a commit controller with a fixed clock."""
    return CommitController(basic_graph, store, clock=lambda: FIXED_NOW)


@pytest.fixture
def complete_store(store: ConfigStore) -> ConfigStore:
    """Store holding a complete basic configuration."""
    store.set("carrier", {"carrier": "UPS", "service": "Ground"})
    store.set("label", {"size": "4x6"})
    return store


class TestFinalize:
    """Tests for finalize."""

    def test_incomplete_configuration(self, controller: CommitController, store: ConfigStore) -> None:
        """Finalize before every step is written fails with the status payload."""
        store.set("carrier", {"carrier": "UPS", "service": "Ground"})

        with pytest.raises(IncompleteConfigurationError) as exc_info:
            controller.finalize()

        details = exc_info.value.details
        assert details["missing"] == ["label"]
        assert details["next_step"] == "label"
        assert details["status"]["completed_steps"] == ["carrier"]
        assert not store.pending_confirmation

    def test_arms_and_returns_snapshot(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Finalize on a complete record arms and returns the snapshot."""
        snapshot = controller.finalize()

        assert snapshot == complete_store.snapshot()
        assert complete_store.pending_confirmation
        assert controller.state == CommitStatus.ARMED

    def test_refinalize_while_armed(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Finalize can be repeated while armed."""
        controller.finalize()
        controller.finalize()
        assert controller.state == CommitStatus.ARMED


class TestConfirm:
    """Tests for confirm."""

    def test_confirm_without_finalize(self, controller: CommitController, complete_store: ConfigStore) -> None:
        """Confirm from IDLE fails."""
        with pytest.raises(NoPendingConfirmationError):
            controller.confirm(True)

    def test_confirm_yes_commits(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Confirm(yes) seals the configuration with a timestamp."""
        controller.finalize()
        outcome = controller.confirm(True)

        assert outcome.committed
        assert outcome.status == CommitStatus.COMMITTED
        assert outcome.receipt is not None
        assert outcome.receipt.committed_at == FIXED_NOW
        assert outcome.receipt.snapshot == complete_store.snapshot()
        assert complete_store.last_commit is outcome.receipt
        assert controller.state == CommitStatus.IDLE

    def test_confirm_yes_keeps_record(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Commit does not transform the record."""
        before = complete_store.snapshot()
        controller.finalize()
        controller.confirm(True)
        assert complete_store.snapshot() == before

    def test_confirm_no_cancels(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Confirm(no) disarms without touching the record."""
        before = complete_store.snapshot()
        controller.finalize()
        outcome = controller.confirm(False)

        assert not outcome.committed
        assert outcome.status == CommitStatus.CANCELLED
        assert outcome.receipt is None
        assert complete_store.snapshot() == before
        assert complete_store.last_commit is None
        assert controller.state == CommitStatus.IDLE

    def test_confirm_consumes_armed_state(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """A second confirm needs a new finalize."""
        controller.finalize()
        controller.confirm(False)

        with pytest.raises(NoPendingConfirmationError):
            controller.confirm(True)

    def test_write_after_finalize_disarms(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Any step write after finalize forces a new finalize."""
        controller.finalize()
        complete_store.set("label", {"size": "6x9"})

        with pytest.raises(NoPendingConfirmationError):
            controller.confirm(True)

    def test_confirm_follows_transition_table(
        self, controller: CommitController, complete_store: ConfigStore
    ) -> None:
        """Confirm is refused when the table has no edge to the outcome."""
        controller.finalize()

        with patch.object(CommitStatus, "can_transition_to", return_value=False):
            with pytest.raises(NoPendingConfirmationError):
                controller.confirm(True)

        assert complete_store.pending_confirmation
        assert complete_store.last_commit is None
