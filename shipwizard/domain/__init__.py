"""Domain layer - catalog, step graph, guard, store, status, commit.

This module exports the core wizard building blocks:

- **Catalog**: Closed sets of carriers, services and label sizes
- **Step Graph**: Ordered step definitions (checklist order)
- **Guard**: Prerequisite checks for out-of-order writes
- **Store**: The single configuration record and pending flag
- **Status**: Read-only progress summary
- **Commit**: Finalize/confirm state machine
- **Exceptions**: Domain-specific errors

Example usage:
    from shipwizard.domain import ConfigStore, build_step_graph, compute_status

    graph = build_step_graph("basic")
    store = ConfigStore()
    store.set("carrier", {"carrier": "UPS", "service": "Ground"})
    compute_status(graph, store.snapshot()).next_step  # "label"
"""

from shipwizard.domain.catalog import ValidationCatalog
from shipwizard.domain.commit import CommitController, ConfirmOutcome
from shipwizard.domain.exceptions import (
    DomainError,
    IncompleteConfigurationError,
    NoPendingConfirmationError,
    PrerequisiteBlockedError,
    StepDefinitionError,
    UnknownStepError,
    ValidationError,
)
from shipwizard.domain.guard import GuardResult, check_prerequisites, ensure_prerequisites
from shipwizard.domain.state_machines import CommitStatus
from shipwizard.domain.status import WizardStatus, compute_status
from shipwizard.domain.steps import (
    STEP_SETS,
    StepDefinition,
    StepGraph,
    build_step_graph,
)
from shipwizard.domain.store import CommitReceipt, ConfigStore

__all__ = [
    # Catalog
    "ValidationCatalog",
    # Steps
    "STEP_SETS",
    "StepDefinition",
    "StepGraph",
    "build_step_graph",
    # Guard
    "GuardResult",
    "check_prerequisites",
    "ensure_prerequisites",
    # Store
    "CommitReceipt",
    "ConfigStore",
    # Status
    "WizardStatus",
    "compute_status",
    # Commit
    "CommitController",
    "CommitStatus",
    "ConfirmOutcome",
    # Exceptions
    "DomainError",
    "IncompleteConfigurationError",
    "NoPendingConfirmationError",
    "PrerequisiteBlockedError",
    "StepDefinitionError",
    "UnknownStepError",
    "ValidationError",
]
