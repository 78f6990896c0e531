"""ShipWizard MCP Server.

Exposes a step-ordered shipping configuration wizard as MCP tools for
AI agent interaction.

This package provides:
- A fixed checklist of configuration steps (carrier, options, label,
  printer, notification) written in order
- Catalog validation of carriers, services and label sizes
- A finalize/confirm commit that requires re-confirmation after edits

Tools:
1. get_plan - Ordered steps and their tools
2. list_supported - Supported carriers, services and label sizes
3. get_step_options / get_next_options - Choices for a step
4. carrier_create, options_set, label_set, printer_set, notification_set,
   write_step - Write a step
5. get_status - Progress summary
6. finalize / confirm - Two-phase commit
7. reset - Clear the configuration
"""

__version__ = "1.0.0"
