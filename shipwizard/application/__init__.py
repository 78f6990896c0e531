"""Application layer module.

Contains the wizard service that orchestrates the step graph, guard,
store and commit controller.
"""

from shipwizard.application.wizard_service import (
    StepOptions,
    WizardService,
    WriteStepResult,
)

__all__ = [
    "StepOptions",
    "WizardService",
    "WriteStepResult",
]
