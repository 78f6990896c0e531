"""MCP Tools for ShipWizard.

Defines the wizard tools as thin adapters over the WizardService:
1. get_plan - Ordered steps and the tool that writes each one
2. list_supported - Supported carriers, services and label sizes
3. get_step_options - Choices for one step
4. get_next_options - Choices for the next unwritten step
5. carrier_create / options_set / label_set / printer_set / notification_set
   - Write one step
6. write_step - Write any step by id
7. get_status - Progress summary
8. finalize - Arm the complete configuration for confirmation
9. confirm - Commit or cancel the armed configuration
10. reset - Clear the configuration

Domain errors stop here and are returned as structured results.
"""

from typing import Any

import structlog

from shipwizard.application.wizard_service import WizardService, WriteStepResult
from shipwizard.domain.exceptions import DomainError

logger = structlog.get_logger()


def format_error(error: DomainError) -> dict[str, Any]:
    """Format a domain error for MCP output."""
    return {
        "success": False,
        "error_code": error.error_code,
        "error": error.message,
        **error.details,
    }


class MCPTools:
    """MCP Tools for ShipWizard.

    Provides methods for each MCP tool that wrap the WizardService.
    Each method returns a formatted response suitable for AI agent consumption.
    """

    def __init__(self, service: WizardService) -> None:
        """Initialize MCP tools.

        Args:
            service: Wizard service owning the configuration store.
        """
        self.service = service

    def tool_names(self) -> list[str]:
        """Names of every tool available for the active step graph."""
        return [
            "get_plan",
            "list_supported",
            "get_step_options",
            "get_next_options",
            *(step.tool_name for step in self.service.graph),
            "write_step",
            "get_status",
            "finalize",
            "confirm",
            "reset",
        ]

    # =========================================================================
    # Discovery
    # =========================================================================

    async def get_plan(self) -> dict[str, Any]:
        """Return the ordered steps needed to set up shipping."""
        return {
            "success": True,
            **self.service.plan(),
            "message": "Run the steps in order, then finalize and confirm.",
        }

    async def list_supported(self) -> dict[str, Any]:
        """List supported carriers, services and label sizes."""
        return {"success": True, **self.service.list_supported()}

    async def get_step_options(self, step_id: str) -> dict[str, Any]:
        """Get the choices for a step.

        Args:
            step_id: Step identifier from get_plan.

        Returns:
            Step inputs and choices, plus any earlier steps blocking it.
        """
        try:
            options = self.service.get_step_options(step_id)
        except DomainError as e:
            return format_error(e)

        return {"success": True, **options.to_dict()}

    async def get_next_options(self) -> dict[str, Any]:
        """Get the choices for the next step, or report completion."""
        options = self.service.get_next_options()
        if options is None:
            return {
                "success": True,
                "complete": True,
                "next_step": None,
                "message": "All steps complete. Use finalize to review and confirm.",
            }

        return {
            "success": True,
            "complete": False,
            "next_step": options.step.id,
            **options.to_dict(),
            "message": f"Next: run {options.step.tool_name}.",
        }

    # =========================================================================
    # Step Writes
    # =========================================================================

    async def write_step(self, step_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Write any step by id.

        Args:
            step_id: Step identifier from get_plan.
            fields: Step inputs, keyed by input field name.

        Returns:
            Saved value and updated status.
        """
        logger.info("Writing step", step_id=step_id)
        try:
            result = self.service.write_step(step_id, **fields)
        except DomainError as e:
            return format_error(e)
        return self._format_write(result)

    async def carrier_create(self, carrier: str, service: str) -> dict[str, Any]:
        """Create the carrier with a service."""
        return await self.write_step("carrier", {"carrier": carrier, "service": service})

    async def options_set(self, insurance: bool, signature_required: bool = False) -> dict[str, Any]:
        """Set service options."""
        return await self.write_step(
            "options",
            {"insurance": insurance, "signature_required": signature_required},
        )

    async def label_set(self, label_size: str) -> dict[str, Any]:
        """Set the label size."""
        return await self.write_step("label", {"label_size": label_size})

    async def printer_set(self, printer_name: str) -> dict[str, Any]:
        """Set the label printer."""
        return await self.write_step("printer", {"printer_name": printer_name})

    async def notification_set(self, email: str) -> dict[str, Any]:
        """Set the notification email."""
        return await self.write_step("notification", {"email": email})

    def _format_write(self, result: WriteStepResult) -> dict[str, Any]:
        status = result.status
        if status.ready:
            message = "All steps complete. Use finalize to review and confirm."
        else:
            next_tool = self.service.graph.get(status.next_step).tool_name
            message = f"Step '{result.step_id}' saved. Next: run {next_tool}."
        return {
            "success": True,
            "step_id": result.step_id,
            "saved": result.saved,
            "status": status.to_dict(),
            "message": message,
        }

    # =========================================================================
    # Status and Commit
    # =========================================================================

    async def get_status(self) -> dict[str, Any]:
        """Summarize which steps are done and what comes next."""
        status = self.service.status()
        return {
            "success": True,
            **status.to_dict(),
            "commit_state": self.service.commit_state.value,
        }

    async def finalize(self) -> dict[str, Any]:
        """Arm the complete configuration for confirmation.

        Returns:
            The configuration snapshot to review before calling confirm.
        """
        try:
            snapshot = self.service.finalize()
        except DomainError as e:
            return format_error(e)

        return {
            "success": True,
            "pending_confirmation": True,
            "snapshot": snapshot,
            "message": "Review the configuration, then call confirm with yes=true to submit or yes=false to cancel.",
            "requires_action": "confirm",
        }

    async def confirm(self, yes: bool) -> dict[str, Any]:
        """Commit or cancel the armed configuration.

        Args:
            yes: True to submit, False to cancel.
        """
        try:
            outcome = self.service.confirm(yes)
        except DomainError as e:
            return format_error(e)

        if outcome.receipt is not None:
            return {
                "success": True,
                "committed": True,
                **outcome.receipt.to_dict(),
                "message": "Shipping configuration submitted.",
            }
        return {
            "success": True,
            "committed": False,
            "cancelled": True,
            "snapshot": outcome.snapshot,
            "message": "Submission cancelled. The configuration is unchanged; finalize again when ready.",
        }

    async def reset(self) -> dict[str, Any]:
        """Clear the configuration."""
        self.service.reset()
        return {
            "success": True,
            "message": "Configuration cleared.",
            "next_step": self.service.graph.step_ids[0],
        }
