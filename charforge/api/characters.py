"""
Saved character API endpoints for CharForge.

Every route acts on the authenticated user's own characters; another user's
character answers 404 exactly like a missing one.
"""

import uuid

from fastapi import APIRouter, Depends, Response, status

from ..auth.users import get_current_active_user
from ..dependencies import CharacterServiceDep, SheetAssemblerDep
from ..models.user import User
from ..schemas.characters import (
    CharacterCreateRequest,
    CharacterResponse,
    CharacterSummary,
    CharacterUpdateRequest,
    LevelUpRequest,
)
from ..schemas.sheet import CharacterSheet
from ..services.character_service import CharacterService
from ..services.sheet_assembler import CharacterSheetAssembler
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

character_router = APIRouter(prefix="/api/characters", tags=["characters"])


@character_router.get("", response_model=list[CharacterSummary])
async def list_characters(
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
) -> list[CharacterSummary]:
    """List the user's characters for the dashboard."""
    characters = await character_service.list_characters(current_user.id)
    return [CharacterSummary.model_validate(character) for character in characters]


@character_router.post("", response_model=CharacterResponse, status_code=status.HTTP_201_CREATED)
async def create_character(
    body: CharacterCreateRequest,
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
) -> CharacterResponse:
    """
    Save a fully specified character at level 1.

    Max HP is derived from the class hit die, so the catalog must be reachable.
    """
    logger.info("Character creation requested", user_id=str(current_user.id), character_class=body.character_class)
    fields = body.model_dump(exclude={"stats"})
    fields.update(body.stats.model_dump())
    character = await character_service.create_character(current_user.id, fields)
    return CharacterResponse.from_character(character)


@character_router.get("/{character_id}", response_model=CharacterResponse)
async def get_character(
    character_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
) -> CharacterResponse:
    """Fetch one of the user's characters."""
    character = await character_service.get_character(current_user.id, character_id)
    return CharacterResponse.from_character(character)


@character_router.patch("/{character_id}", response_model=CharacterResponse)
async def update_character(
    character_id: uuid.UUID,
    body: CharacterUpdateRequest,
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
) -> CharacterResponse:
    """Change a character's name, background, alignment, proficiencies or spells."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    character = await character_service.update_character(current_user.id, character_id, changes)
    return CharacterResponse.from_character(character)


@character_router.delete("/{character_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_character(
    character_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
) -> Response:
    """Delete one of the user's characters."""
    await character_service.delete_character(current_user.id, character_id)
    logger.info("Character deleted", user_id=str(current_user.id), character_id=str(character_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@character_router.post("/{character_id}/levelup", response_model=CharacterResponse)
async def level_up_character(
    character_id: uuid.UUID,
    body: LevelUpRequest,
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
) -> CharacterResponse:
    """
    Raise a character one level.

    Rejected with 400 at level 20 or when the roll exceeds the class hit die;
    502 when the catalog cannot supply the hit die.
    """
    logger.info(
        "Level up requested", user_id=str(current_user.id), character_id=str(character_id), hp_roll=body.hp_roll
    )
    character = await character_service.level_up(current_user.id, character_id, body.hp_roll)
    return CharacterResponse.from_character(character)


@character_router.get("/{character_id}/sheet", response_model=CharacterSheet)
async def get_character_sheet(
    character_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    character_service: CharacterService = CharacterServiceDep,
    assembler: CharacterSheetAssembler = SheetAssemblerDep,
) -> CharacterSheet:
    """
    Assemble the full character sheet.

    Catalog records that cannot be fetched are listed in ``missing`` instead of
    failing the request.
    """
    character = await character_service.get_character(current_user.id, character_id)
    return await assembler.assemble(character)
