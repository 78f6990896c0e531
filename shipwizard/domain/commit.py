"""Two-phase commit controller.

`finalize` arms a complete configuration for review; `confirm` consumes
the armed state and either seals the configuration or cancels. Writing
any step in between disarms, so the caller has to review again.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from shipwizard.domain.exceptions import (
    IncompleteConfigurationError,
    NoPendingConfirmationError,
)
from shipwizard.domain.state_machines import CommitStatus
from shipwizard.domain.status import compute_status
from shipwizard.domain.steps import StepGraph
from shipwizard.domain.store import CommitReceipt, ConfigStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class ConfirmOutcome:
    """Result of a confirm call.

    Attributes:
        status: COMMITTED or CANCELLED.
        snapshot: Configuration at the time of the decision.
        receipt: Commit receipt, only when committed.
    """

    status: CommitStatus
    snapshot: dict[str, dict[str, Any]]
    receipt: CommitReceipt | None = None

    @property
    def committed(self) -> bool:
        return self.status == CommitStatus.COMMITTED


class CommitController:
    """Finalize/confirm sequence over a config store."""

    def __init__(
        self,
        graph: StepGraph,
        store: ConfigStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.graph = graph
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def state(self) -> CommitStatus:
        return CommitStatus.from_pending(self.store.pending_confirmation)

    def finalize(self) -> dict[str, dict[str, Any]]:
        """Arm the configuration for confirmation.

        Returns:
            Snapshot of the complete configuration for review.

        Raises:
            IncompleteConfigurationError: If any step is still missing.
        """
        with self.store.lock:
            status = compute_status(self.graph, self.store.snapshot())
            if not status.ready:
                raise IncompleteConfigurationError(status.to_dict())

            self.store.arm()

        logger.info("Configuration armed", steps=list(status.completed_steps))
        return status.snapshot

    def confirm(self, yes: bool) -> ConfirmOutcome:
        """Commit or cancel an armed configuration.

        Args:
            yes: True to commit, False to cancel.

        Raises:
            NoPendingConfirmationError: If finalize was not called, or a
                step was written after it.
        """
        target = CommitStatus.COMMITTED if yes else CommitStatus.CANCELLED
        with self.store.lock:
            if not self.state.can_transition_to(target):
                raise NoPendingConfirmationError()

            self.store.disarm()
            snapshot = self.store.snapshot()

            receipt = None
            if yes:
                receipt = CommitReceipt(committed_at=self._clock(), snapshot=snapshot)
                self.store.record_commit(receipt)

        if receipt is not None:
            logger.info(
                "Configuration committed",
                commit_id=str(receipt.commit_id),
                committed_at=receipt.committed_at.isoformat(),
            )
        else:
            logger.info("Configuration commit cancelled")
        return ConfirmOutcome(status=target, snapshot=snapshot, receipt=receipt)
