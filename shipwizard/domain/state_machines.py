"""Commit state machine.

Deterministic transitions for the finalize/confirm sequence that gates
the final submit behind an explicit re-confirmation.
"""

from enum import Enum


class CommitStatus(str, Enum):
    """Commit lifecycle states.

    State diagram:
        IDLE ◄───────────────────────────────────┐
          │                                      │
          │ finalize (configuration ready)       │ step write / reset
          ▼                                      │ clears the pending flag
        ARMED ───────────────────────────────────┘
          │       │
          │       │ confirm(no)
          │       ▼
          │     CANCELLED
          │
          │ confirm(yes)
          ▼
        COMMITTED

    COMMITTED and CANCELLED are outcomes of a single confirm; the
    pending flag reads as IDLE again afterwards.
    """

    IDLE = "idle"
    ARMED = "armed"
    COMMITTED = "committed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "CommitStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _COMMIT_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["CommitStatus"]:
        """Get list of valid target states, in declaration order."""
        allowed = _COMMIT_TRANSITIONS.get(self, set())
        return [status for status in CommitStatus if status in allowed]

    @classmethod
    def from_pending(cls, pending_confirmation: bool) -> "CommitStatus":
        """Resting state implied by the pending-confirmation flag."""
        return cls.ARMED if pending_confirmation else cls.IDLE


_COMMIT_TRANSITIONS: dict[CommitStatus, set[CommitStatus]] = {
    CommitStatus.IDLE: {CommitStatus.ARMED},
    # Re-finalize re-arms with a fresh snapshot
    CommitStatus.ARMED: {
        CommitStatus.ARMED,
        CommitStatus.COMMITTED,
        CommitStatus.CANCELLED,
    },
    CommitStatus.COMMITTED: set(),
    CommitStatus.CANCELLED: set(),
}
