"""ShipWizard MCP Server.

Exposes the shipping configuration wizard as MCP tools for AI agent
interaction. Steps are written in checklist order, then the complete
configuration is finalized and confirmed.

MCP Tools:
1. get_plan - Ordered steps and their tools
2. list_supported - Supported carriers, services and label sizes
3. get_step_options - Choices for one step
4. get_next_options - Choices for the next unwritten step
5. <step tools> - carrier_create, options_set, label_set, printer_set,
   notification_set (only those in the active step set)
6. write_step - Write any step by id
7. get_status - Progress summary
8. finalize - Arm the configuration for confirmation
9. confirm - Commit or cancel
10. reset - Clear the configuration
"""

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    TextContent,
    Tool,
)
from pydantic import BaseModel, Field
from pydantic import ValidationError as InputValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

from shipwizard.application.wizard_service import WizardService
from shipwizard.domain.steps import build_step_graph
from shipwizard.domain.store import ConfigStore
from shipwizard.tools import MCPTools


# ============================================================================
# Configuration
# ============================================================================


class Settings(BaseSettings):
    """MCP Server settings."""

    server_name: str = Field(
        default="shipwizard-mcp",
        description="Name the MCP server reports to clients",
    )
    step_set: str = Field(
        default="full",
        description="Named step set: 'full' or 'basic'",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (false for human-readable console output)",
    )

    model_config = SettingsConfigDict(
        env_prefix="SHIPWIZARD_",
        env_file=".env",
        extra="ignore",
    )


def configure_logging(settings: Settings) -> None:
    """Configure structlog over stdlib logging on stderr.

    stdout is reserved for the MCP stdio transport.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(message)s",
        stream=sys.stderr,
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


settings = Settings()
configure_logging(settings)

logger = structlog.get_logger()


# ============================================================================
# Tool Input Schemas
# ============================================================================


class EmptyInput(BaseModel):
    """Input schema for tools that take no arguments."""


class GetStepOptionsInput(BaseModel):
    """Input schema for get_step_options tool."""

    step_id: str = Field(
        ...,
        description="Step identifier from get_plan, e.g. 'carrier' or 'label'.",
    )


class CarrierCreateInput(BaseModel):
    """Input schema for carrier_create tool."""

    carrier: str = Field(
        ...,
        description="Carrier name. Example: 'UPS' or 'FedEx'.",
    )
    service: str = Field(
        ...,
        description="Service offered by the carrier. Example: 'Ground' for UPS.",
    )


class OptionsSetInput(BaseModel):
    """Input schema for options_set tool."""

    insurance: bool = Field(
        ...,
        description="Whether shipments are insured.",
    )
    signature_required: bool = Field(
        default=False,
        description="Whether delivery requires a signature.",
    )


class LabelSetInput(BaseModel):
    """Input schema for label_set tool."""

    label_size: str = Field(
        ...,
        description="Label size: '4x6' or '6x9'.",
    )


class PrinterSetInput(BaseModel):
    """Input schema for printer_set tool."""

    printer_name: str = Field(
        ...,
        description="Name of the printer labels are sent to.",
    )


class NotificationSetInput(BaseModel):
    """Input schema for notification_set tool."""

    email: str = Field(
        ...,
        description="Email address that receives shipment notifications.",
    )


class WriteStepInput(BaseModel):
    """Input schema for write_step tool."""

    step_id: str = Field(
        ...,
        description="Step identifier from get_plan.",
    )
    fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Step inputs keyed by field name, as listed in get_plan.",
    )


class ConfirmInput(BaseModel):
    """Input schema for confirm tool."""

    yes: bool = Field(
        ...,
        description="true to submit the finalized configuration, false to cancel.",
    )


# ============================================================================
# Tool Registry
# ============================================================================


ToolHandler = Callable[[MCPTools, BaseModel], Awaitable[dict[str, Any]]]

TOOL_SPECS: dict[str, tuple[type[BaseModel], str, ToolHandler]] = {
    "get_plan": (
        EmptyInput,
        "Return the ordered steps needed to set up shipping, "
        "with the tool and inputs for each step.",
        lambda tools, _: tools.get_plan(),
    ),
    "list_supported": (
        EmptyInput,
        "List supported carriers, their services, and label sizes.",
        lambda tools, _: tools.list_supported(),
    ),
    "get_step_options": (
        GetStepOptionsInput,
        "Get the choices for a step and which earlier steps still block it.",
        lambda tools, args: tools.get_step_options(step_id=args.step_id),
    ),
    "get_next_options": (
        EmptyInput,
        "Get the next step to complete and its choices, or report that all steps are complete.",
        lambda tools, _: tools.get_next_options(),
    ),
    "carrier_create": (
        CarrierCreateInput,
        "Create or update the carrier and service.",
        lambda tools, args: tools.carrier_create(carrier=args.carrier, service=args.service),
    ),
    "options_set": (
        OptionsSetInput,
        "Set service options: insurance and signature on delivery.",
        lambda tools, args: tools.options_set(
            insurance=args.insurance,
            signature_required=args.signature_required,
        ),
    ),
    "label_set": (
        LabelSetInput,
        "Set label size (4x6 or 6x9). Requires earlier steps to be complete.",
        lambda tools, args: tools.label_set(label_size=args.label_size),
    ),
    "printer_set": (
        PrinterSetInput,
        "Set the printer labels are sent to.",
        lambda tools, args: tools.printer_set(printer_name=args.printer_name),
    ),
    "notification_set": (
        NotificationSetInput,
        "Set the email address that receives shipment notifications.",
        lambda tools, args: tools.notification_set(email=args.email),
    ),
    "write_step": (
        WriteStepInput,
        "Write any step by id with its input fields.",
        lambda tools, args: tools.write_step(step_id=args.step_id, fields=args.fields),
    ),
    "get_status": (
        EmptyInput,
        "Show completed steps, the next step, and whether the configuration is ready to finalize.",
        lambda tools, _: tools.get_status(),
    ),
    "finalize": (
        EmptyInput,
        "Review the complete configuration and arm it for confirmation. "
        "Fails if any step is missing.",
        lambda tools, _: tools.finalize(),
    ),
    "confirm": (
        ConfirmInput,
        "Submit (yes=true) or cancel (yes=false) the finalized configuration. "
        "Any step write after finalize requires finalize again.",
        lambda tools, args: tools.confirm(yes=args.yes),
    ),
    "reset": (
        EmptyInput,
        "Clear the configuration and start over.",
        lambda tools, _: tools.reset(),
    ),
}


def build_tool_list(tools: MCPTools) -> list[Tool]:
    """Tool descriptors for the active step graph, in presentation order."""
    return [
        Tool(
            name=name,
            description=TOOL_SPECS[name][1],
            inputSchema=TOOL_SPECS[name][0].model_json_schema(),
        )
        for name in tools.tool_names()
    ]


async def dispatch_tool(tools: MCPTools, name: str, arguments: dict | None) -> dict[str, Any]:
    """Validate arguments and run a tool by name.

    Unknown tools and invalid arguments come back as failed results.
    """
    if name not in tools.tool_names():
        return {
            "success": False,
            "error": f"Unknown tool: {name}",
        }

    input_model, _, handler = TOOL_SPECS[name]
    try:
        input_data = input_model(**(arguments or {}))
    except InputValidationError as e:
        return {
            "success": False,
            "error_code": "INVALID_ARGUMENTS",
            "error": f"Invalid arguments for {name}",
            "errors": e.errors(include_url=False),
        }

    return await handler(tools, input_data)


# ============================================================================
# MCP Server Implementation
# ============================================================================


def create_tools(settings: Settings) -> MCPTools:
    """Build the tools over a fresh, process-owned configuration store.

    Raises:
        StepDefinitionError: If the configured step set is invalid.
    """
    graph = build_step_graph(settings.step_set)
    service = WizardService(graph=graph, store=ConfigStore())
    return MCPTools(service=service)


def create_mcp_server(
    settings: Settings = settings,
    tools: MCPTools | None = None,
) -> Server:
    """Create and configure the MCP server with all tools."""
    server = Server(settings.server_name)
    tools = tools or create_tools(settings)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available MCP tools."""
        return build_tool_list(tools)

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool invocation."""
        logger.info("Tool called", tool=name, arguments=arguments)

        try:
            result = await dispatch_tool(tools, name, arguments)

            logger.info(
                "Tool completed",
                tool=name,
                success=result.get("success"),
                error_code=result.get("error_code"),
            )

            return [
                TextContent(
                    type="text",
                    text=json.dumps(result, indent=2, default=str),
                )
            ]

        except Exception as e:
            logger.exception("Tool execution failed", tool=name)
            return [
                TextContent(
                    type="text",
                    text=json.dumps(
                        {
                            "success": False,
                            "error": f"Tool execution failed: {str(e)}",
                        },
                        indent=2,
                    ),
                )
            ]

    return server


async def run_server() -> None:
    """Run the MCP server using stdio transport."""
    logger.info(
        "Starting ShipWizard MCP Server",
        server_name=settings.server_name,
        step_set=settings.step_set,
    )

    server = create_mcp_server(settings)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Run the MCP server.

    Entry point for the MCP server. Uses stdio transport for
    communication with AI agents.
    """
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
