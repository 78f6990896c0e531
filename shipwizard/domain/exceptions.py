"""Domain exceptions.

All wizard-level errors that represent rule violations. These are raised
by the step graph, guard, catalog checks and commit controller, and are
turned into structured tool results at the MCP tools boundary.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching wizard-specific errors at the tools layer.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Step Graph Errors
# ============================================================================


class StepDefinitionError(DomainError):
    """Raised when a step graph definition is inconsistent.

    Happens at startup (duplicate ids, empty graph) and is not meant
    to be recovered from.
    """

    error_code = "STEP_DEFINITION_ERROR"


class UnknownStepError(DomainError):
    """Raised when a step id is not part of the active step graph."""

    error_code = "UNKNOWN_STEP"

    def __init__(self, step_id: str, known_steps: list[str]) -> None:
        """Initialize unknown step error.

        Args:
            step_id: The step id that was requested.
            known_steps: Step ids defined in the graph, in order.
        """
        super().__init__(
            f"Unknown step '{step_id}'. Known steps: {', '.join(known_steps)}",
            details={"step_id": step_id, "known_steps": known_steps},
        )


# ============================================================================
# Write Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when a step value fails a catalog check."""

    error_code = "VALIDATION_ERROR"

    def __init__(
        self,
        step_id: str,
        field: str,
        value: Any,
        reason: str,
        allowed: list[str] | None = None,
    ) -> None:
        """Initialize validation error.

        Args:
            step_id: Step being written.
            field: Input field that failed.
            value: The rejected value.
            reason: Explanation of why the value is invalid.
            allowed: Accepted values, when the set is closed.
        """
        message = reason
        if allowed:
            message = f"{reason} (allowed: {', '.join(allowed)})"
        super().__init__(
            message,
            details={
                "step_id": step_id,
                "field": field,
                "value": value,
                "allowed": allowed or [],
            },
        )


class PrerequisiteBlockedError(DomainError):
    """Raised when earlier steps must be completed before this one."""

    error_code = "PREREQUISITE_BLOCKED"

    def __init__(self, step_id: str, missing_steps: list[str], next_tool: str | None = None) -> None:
        """Initialize prerequisite blocked error.

        Args:
            step_id: Step that was attempted.
            missing_steps: Earlier steps not yet written, in graph order.
            next_tool: Tool that completes the first missing step.
        """
        message = f"Step '{step_id}' is blocked; complete {', '.join(missing_steps)} first"
        if next_tool:
            message = f"{message} (run {next_tool})"
        super().__init__(
            message,
            details={
                "step_id": step_id,
                "missing_steps": missing_steps,
                "next_step": missing_steps[0] if missing_steps else None,
                "next_tool": next_tool,
            },
        )


# ============================================================================
# Commit Errors
# ============================================================================


class IncompleteConfigurationError(DomainError):
    """Raised when finalize is attempted before every step is written."""

    error_code = "INCOMPLETE_CONFIGURATION"

    def __init__(self, status: dict[str, Any]) -> None:
        """Initialize incomplete configuration error.

        Args:
            status: Current status payload (missing steps, next step).
        """
        missing = status.get("missing_steps", [])
        super().__init__(
            f"Configuration is incomplete; missing: {', '.join(missing)}",
            details={
                "missing": missing,
                "next_step": status.get("next_step"),
                "status": status,
            },
        )


class NoPendingConfirmationError(DomainError):
    """Raised when confirm is called without an armed finalize."""

    error_code = "NO_PENDING_CONFIRMATION"

    def __init__(self) -> None:
        super().__init__(
            "Nothing to confirm; run finalize first",
            details={"pending_confirmation": False},
        )
