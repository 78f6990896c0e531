"""Wizard application service.

Orchestrates the shipping configuration operations:
- Listing the plan and the choices for each step
- Writing steps (ordering guard first, then value validation)
- Reporting status
- Finalizing and confirming the configuration
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from shipwizard.domain.catalog import ValidationCatalog
from shipwizard.domain.commit import CommitController, ConfirmOutcome
from shipwizard.domain.exceptions import (
    DomainError,
    StepDefinitionError,
    ValidationError,
)
from shipwizard.domain.guard import check_prerequisites, ensure_prerequisites
from shipwizard.domain.state_machines import CommitStatus
from shipwizard.domain.status import WizardStatus, compute_status
from shipwizard.domain.steps import StepDefinition, StepGraph
from shipwizard.domain.store import ConfigStore

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class WriteStepResult:
    """Result of writing a step."""

    step_id: str
    saved: dict[str, Any]
    status: WizardStatus


@dataclass
class StepOptions:
    """Choices available for a step."""

    step: StepDefinition
    choices: dict[str, Any]
    blocked_by: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_id": self.step.id,
            "tool": self.step.tool_name,
            "inputs": list(self.step.input_fields),
            "description": self.step.description,
            "choices": self.choices,
            "blocked_by": self.blocked_by,
        }


@dataclass(frozen=True)
class StepRule:
    """Per-step behavior: value validation and the choices offered."""

    validate: Callable[[dict[str, Any]], dict[str, Any]]
    choices: Callable[[], dict[str, Any]]


# ============================================================================
# Field Helpers
# ============================================================================


def _require_text(step_id: str, fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(step_id, name, value, f"{name} is required")
    return value.strip()


def _require_bool(step_id: str, fields: dict[str, Any], name: str, default: bool | None = None) -> bool:
    value = fields.get(name, default)
    if not isinstance(value, bool):
        raise ValidationError(step_id, name, value, f"{name} must be true or false")
    return value


class WizardService:
    """Service for the step-ordered shipping configuration.

    The store is owned by the caller and injected; every read-modify-write
    runs under the store's lock so finalize sees a consistent record.
    """

    def __init__(
        self,
        graph: StepGraph,
        store: ConfigStore | None = None,
        catalog: ValidationCatalog | None = None,
        commit_controller: CommitController | None = None,
    ) -> None:
        self.graph = graph
        self.store = store or ConfigStore()
        self.catalog = catalog or ValidationCatalog()
        self.commits = commit_controller or CommitController(graph, self.store)

        self._rules: dict[str, StepRule] = {
            "carrier": StepRule(self._validate_carrier, self._carrier_choices),
            "options": StepRule(self._validate_options, self._options_choices),
            "label": StepRule(self._validate_label, self._label_choices),
            "printer": StepRule(self._validate_printer, self._printer_choices),
            "notification": StepRule(self._validate_notification, self._notification_choices),
        }
        undefined = [s for s in graph.step_ids if s not in self._rules]
        if undefined:
            raise StepDefinitionError(
                f"No rule for steps: {', '.join(undefined)}",
                details={"step_ids": undefined},
            )

    # =========================================================================
    # Read Operations
    # =========================================================================

    def plan(self) -> dict[str, Any]:
        return self.graph.plan()

    def list_supported(self) -> dict[str, Any]:
        return self.catalog.supported()

    def status(self) -> WizardStatus:
        """Current progress. Pure read, identical on repeated calls."""
        with self.store.lock:
            return compute_status(self.graph, self.store.snapshot())

    @property
    def commit_state(self) -> CommitStatus:
        return self.commits.state

    def get_step_options(self, step_id: str) -> StepOptions:
        """Choices for a step plus the earlier steps still blocking it.

        Raises:
            UnknownStepError: If the step is not in the graph.
        """
        step = self.graph.get(step_id)
        with self.store.lock:
            guard = check_prerequisites(self.graph, step_id, self.store.snapshot())
        return StepOptions(
            step=step,
            choices=self._rules[step_id].choices(),
            blocked_by=list(guard.missing_steps),
        )

    def get_next_options(self) -> StepOptions | None:
        """Choices for the next unwritten step, or None when complete.

        The next step and its blockers are read under one hold of the lock.
        """
        with self.store.lock:
            status = compute_status(self.graph, self.store.snapshot())
            if status.next_step is None:
                return None
            return self.get_step_options(status.next_step)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def write_step(self, step_id: str, /, **fields: Any) -> WriteStepResult:
        """Validate and store one step.

        Ordering is checked before the step's own values, so an
        out-of-order caller is told which step to run next.

        Raises:
            UnknownStepError: If the step is not in the graph.
            PrerequisiteBlockedError: If earlier steps are missing.
            ValidationError: If a value fails a catalog check.
        """
        step = self.graph.get(step_id)

        with self.store.lock:
            try:
                ensure_prerequisites(self.graph, step_id, self.store.snapshot())

                unexpected = sorted(set(fields) - set(step.input_fields))
                if unexpected:
                    raise ValidationError(
                        step_id,
                        unexpected[0],
                        fields[unexpected[0]],
                        f"Unexpected input for {step.tool_name}",
                        allowed=list(step.input_fields),
                    )

                saved = self._rules[step_id].validate(fields)
            except DomainError as e:
                logger.info(
                    "Step write rejected",
                    step_id=step_id,
                    error_code=e.error_code,
                    details=e.details,
                )
                raise

            was_armed = self.store.pending_confirmation
            self.store.set(step_id, saved)
            status = compute_status(self.graph, self.store.snapshot())

        logger.info(
            "Step written",
            step_id=step_id,
            saved=saved,
            next_step=status.next_step,
            disarmed=was_armed,
        )
        return WriteStepResult(step_id=step_id, saved=saved, status=status)

    def set_carrier(self, carrier: str, service: str) -> WriteStepResult:
        return self.write_step("carrier", carrier=carrier, service=service)

    def set_options(self, insurance: bool, signature_required: bool = False) -> WriteStepResult:
        return self.write_step("options", insurance=insurance, signature_required=signature_required)

    def set_label(self, label_size: str) -> WriteStepResult:
        return self.write_step("label", label_size=label_size)

    def set_printer(self, printer_name: str) -> WriteStepResult:
        return self.write_step("printer", printer_name=printer_name)

    def set_notification(self, email: str) -> WriteStepResult:
        return self.write_step("notification", email=email)

    def reset(self) -> None:
        """Clear the configuration and any armed confirmation."""
        self.store.clear()
        logger.info("Configuration reset")

    # =========================================================================
    # Commit Operations
    # =========================================================================

    def finalize(self) -> dict[str, dict[str, Any]]:
        """Arm the complete configuration and return it for review.

        Raises:
            IncompleteConfigurationError: If any step is missing.
        """
        return self.commits.finalize()

    def confirm(self, yes: bool) -> ConfirmOutcome:
        """Commit (yes) or cancel (no) an armed configuration.

        Raises:
            NoPendingConfirmationError: Without a prior armed finalize.
        """
        return self.commits.confirm(yes)

    # =========================================================================
    # Step Validators
    # =========================================================================

    def _validate_carrier(self, fields: dict[str, Any]) -> dict[str, Any]:
        carrier = _require_text("carrier", fields, "carrier")
        service = _require_text("carrier", fields, "service")

        canonical_carrier = self.catalog.canonical_carrier(carrier)
        if canonical_carrier is None:
            raise ValidationError(
                "carrier",
                "carrier",
                carrier,
                f"Unsupported carrier '{carrier}'",
                allowed=self.catalog.carriers(),
            )

        canonical_service = self.catalog.canonical_service(canonical_carrier, service)
        if canonical_service is None:
            raise ValidationError(
                "carrier",
                "service",
                service,
                f"Unsupported service '{service}' for {canonical_carrier}",
                allowed=self.catalog.services_for(canonical_carrier),
            )

        return {"carrier": canonical_carrier, "service": canonical_service}

    def _validate_options(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {
            "insurance": _require_bool("options", fields, "insurance"),
            "signature_required": _require_bool(
                "options", fields, "signature_required", default=False
            ),
        }

    def _validate_label(self, fields: dict[str, Any]) -> dict[str, Any]:
        label_size = _require_text("label", fields, "label_size")
        size = self.catalog.normalize_label_size(label_size)
        if size is None:
            raise ValidationError(
                "label",
                "label_size",
                label_size,
                f"Invalid size '{label_size}'",
                allowed=list(self.catalog.label_sizes),
            )
        return {"size": size}

    def _validate_printer(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {"printer_name": _require_text("printer", fields, "printer_name")}

    def _validate_notification(self, fields: dict[str, Any]) -> dict[str, Any]:
        email = _require_text("notification", fields, "email").lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError(
                "notification",
                "email",
                email,
                f"Invalid email address '{email}'",
            )
        return {"email": email}

    # =========================================================================
    # Step Choices
    # =========================================================================

    def _carrier_choices(self) -> dict[str, Any]:
        return {
            "carrier": self.catalog.carriers(),
            "service": self.catalog.supported()["carriers"],
        }

    def _options_choices(self) -> dict[str, Any]:
        return {"insurance": [True, False], "signature_required": [True, False]}

    def _label_choices(self) -> dict[str, Any]:
        return {"label_size": list(self.catalog.label_sizes)}

    def _printer_choices(self) -> dict[str, Any]:
        return {"printer_name": "any printer name"}

    def _notification_choices(self) -> dict[str, Any]:
        return {"email": "an email address, e.g. shipping@example.com"}
