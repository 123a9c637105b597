"""
Character creation wizard API endpoints for CharForge.

Each route advances the authenticated user's draft and returns the new
state. Rule violations (selection limits, incomplete assignment, missing
fields on submit) answer 400 with a message naming the problem.
"""

from fastapi import APIRouter, Depends, status

from ..auth.users import get_current_active_user
from ..dependencies import WizardServiceDep
from ..models.user import User
from ..schemas.characters import CharacterResponse
from ..schemas.wizard import (
    AssignRequest,
    DetailsRequest,
    GenerateStatsRequest,
    IndexRequest,
    WizardStateResponse,
)
from ..services.wizard_service import WizardService
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

wizard_router = APIRouter(prefix="/api/wizard", tags=["wizard"])


@wizard_router.get("/state", response_model=WizardStateResponse)
async def get_wizard_state(
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """The user's current draft."""
    return WizardStateResponse.from_state(wizard.get_state(current_user.id))


@wizard_router.post("/reset", response_model=WizardStateResponse)
async def reset_wizard(
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """Discard the draft and start over."""
    return WizardStateResponse.from_state(wizard.reset(current_user.id))


@wizard_router.post("/details", response_model=WizardStateResponse)
async def set_wizard_details(
    body: DetailsRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """Set name, background and alignment."""
    state = wizard.set_details(
        current_user.id,
        name=body.name,
        background=body.background,
        alignment=body.alignment,
    )
    return WizardStateResponse.from_state(state)


@wizard_router.post("/race", response_model=WizardStateResponse)
async def select_wizard_race(
    body: IndexRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """Choose a race; recommended classes are recomputed from its ability bonuses."""
    return WizardStateResponse.from_state(await wizard.select_race(current_user.id, body.index))


@wizard_router.post("/class", response_model=WizardStateResponse)
async def select_wizard_class(
    body: IndexRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """Choose a class; skill and cantrip selections are cleared."""
    return WizardStateResponse.from_state(await wizard.select_class(current_user.id, body.index))


@wizard_router.post("/stats/generate", response_model=WizardStateResponse)
async def generate_wizard_stats(
    body: GenerateStatsRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """Generate a new stat pool; any existing assignment is cleared."""
    return WizardStateResponse.from_state(wizard.generate_stats(current_user.id, body.method))


@wizard_router.post("/stats/assign", response_model=WizardStateResponse)
async def assign_wizard_stat(
    body: AssignRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    """Bind an ability to a pool value, taking it from any ability that held it."""
    return WizardStateResponse.from_state(wizard.assign(current_user.id, body.ability, body.pool_index))


@wizard_router.post("/skills/toggle", response_model=WizardStateResponse)
async def toggle_wizard_skill(
    body: IndexRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    return WizardStateResponse.from_state(wizard.toggle_skill(current_user.id, body.index))


@wizard_router.post("/cantrips/toggle", response_model=WizardStateResponse)
async def toggle_wizard_cantrip(
    body: IndexRequest,
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> WizardStateResponse:
    return WizardStateResponse.from_state(wizard.toggle_cantrip(current_user.id, body.index))


@wizard_router.post("/submit", response_model=CharacterResponse, status_code=status.HTTP_201_CREATED)
async def submit_wizard(
    current_user: User = Depends(get_current_active_user),
    wizard: WizardService = WizardServiceDep,
) -> CharacterResponse:
    """Validate the draft, save it as a level-1 character and clear the draft."""
    logger.info("Wizard submit requested", user_id=str(current_user.id))
    character = await wizard.submit(current_user.id)
    return CharacterResponse.from_character(character)
