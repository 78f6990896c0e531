"""Pytest configuration and fixtures for ShipWizard tests."""

import pytest

from shipwizard.application.wizard_service import WizardService
from shipwizard.domain.catalog import ValidationCatalog
from shipwizard.domain.steps import StepGraph, build_step_graph
from shipwizard.domain.store import ConfigStore
from shipwizard.tools import MCPTools


@pytest.fixture
def catalog() -> ValidationCatalog:
    """Create the default validation catalog."""
    return ValidationCatalog()


@pytest.fixture
def basic_graph() -> StepGraph:
    """Create the carrier -> label step graph."""
    return build_step_graph("basic")


@pytest.fixture
def full_graph() -> StepGraph:
    """Create the full five-step graph."""
    return build_step_graph("full")


@pytest.fixture
def store() -> ConfigStore:
    """Create an empty configuration store."""
    return ConfigStore()


@pytest.fixture
def basic_service(basic_graph: StepGraph, store: ConfigStore) -> WizardService:
    """Create a wizard service over the basic step set."""
    return WizardService(graph=basic_graph, store=store)


@pytest.fixture
def full_service(full_graph: StepGraph) -> WizardService:
    """Create a wizard service over the full step set."""
    return WizardService(graph=full_graph, store=ConfigStore())


@pytest.fixture
def mcp_tools(full_service: WizardService) -> MCPTools:
    """Create MCPTools over the full step set."""
    return MCPTools(service=full_service)


@pytest.fixture
def basic_tools(basic_service: WizardService) -> MCPTools:
    """Create MCPTools over the basic step set."""
    return MCPTools(service=basic_service)


def complete_full(service: WizardService) -> None:
    """Write every step of the full step set in order."""
    service.set_carrier("UPS", "Ground")
    service.set_options(insurance=True)
    service.set_label("4x6")
    service.set_printer("Warehouse Zebra")
    service.set_notification("ops@example.com")


@pytest.fixture
def completed_full_service(full_service: WizardService) -> WizardService:
    """Full-set wizard service with every step written."""
    complete_full(full_service)
    return full_service
