"""
Dependency injection providers for CharForge.

Route handlers obtain services through these functions, which read them from
the ApplicationContainer on request.app.state. Tests can install a container
directly on app.state or override these with app.dependency_overrides.
"""

from fastapi import Depends, Request

from .container import ApplicationContainer
from .services.character_service import CharacterService
from .services.reference_client import ReferenceCatalogClient
from .services.sheet_assembler import CharacterSheetAssembler
from .services.wizard_service import WizardService
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def get_container(request: Request) -> ApplicationContainer:
    """
    Get the application container from request state.

    This is the base dependency that all other dependencies use.
    """
    if not hasattr(request.app.state, "container"):
        raise RuntimeError(
            "ApplicationContainer not found in app.state - ensure container is initialized in lifespan context"
        )
    return request.app.state.container


def get_catalog(request: Request) -> ReferenceCatalogClient:
    """Get the reference catalog client from the container."""
    container = get_container(request)
    if container.catalog is None:
        raise RuntimeError("ReferenceCatalogClient not initialized in container")
    return container.catalog


def get_character_service(request: Request) -> CharacterService:
    """Get the CharacterService from the container."""
    container = get_container(request)
    if container.character_service is None:
        raise RuntimeError("CharacterService not initialized in container")
    return container.character_service


def get_sheet_assembler(request: Request) -> CharacterSheetAssembler:
    """Get the CharacterSheetAssembler from the container."""
    container = get_container(request)
    if container.sheet_assembler is None:
        raise RuntimeError("CharacterSheetAssembler not initialized in container")
    return container.sheet_assembler


def get_wizard_service(request: Request) -> WizardService:
    """Get the WizardService from the container."""
    container = get_container(request)
    if container.wizard_service is None:
        raise RuntimeError("WizardService not initialized in container")
    return container.wizard_service


# Dependency injection aliases for use in route handlers
ContainerDep = Depends(get_container)
CatalogDep = Depends(get_catalog)
CharacterServiceDep = Depends(get_character_service)
SheetAssemblerDep = Depends(get_sheet_assembler)
WizardServiceDep = Depends(get_wizard_service)
