"""
Character service: ownership-scoped CRUD and leveling.

A character belonging to another user is reported exactly like a missing
one, so character IDs cannot be discovered by guessing.
"""

import uuid
from typing import Any

from ..error_types import ErrorMessages
from ..exceptions import ResourceNotFoundError, create_error_context
from ..game.leveling import MAX_LEVEL, hp_gain, initial_max_hp, validate_level_up
from ..models.character import Character
from ..persistence.repositories.character_repository import CharacterRepository
from ..structured_logging.enhanced_logging_config import get_logger
from .reference_client import ReferenceCatalogClient

logger = get_logger(__name__)


class CharacterService:
    """Service for saved characters."""

    def __init__(self, repository: CharacterRepository, catalog: ReferenceCatalogClient) -> None:
        self.repository = repository
        self.catalog = catalog
        logger.info("CharacterService initialized")

    def _not_found(self, user_id: uuid.UUID, character_id: uuid.UUID) -> ResourceNotFoundError:
        context = create_error_context(user_id=str(user_id), character_id=str(character_id))
        return ResourceNotFoundError(
            f"Character {character_id} not found for user {user_id}",
            context,
            resource_type="character",
            resource_id=str(character_id),
            user_friendly=ErrorMessages.CHARACTER_NOT_FOUND,
        )

    async def list_characters(self, user_id: uuid.UUID) -> list[Character]:
        return await self.repository.list_characters_for_user(user_id)

    async def get_character(self, user_id: uuid.UUID, character_id: uuid.UUID) -> Character:
        """
        Get one of the user's characters.

        Raises:
            ResourceNotFoundError: If it does not exist or belongs to someone else
        """
        character = await self.repository.get_character(character_id)
        if character is None or character.user_id != user_id:
            raise self._not_found(user_id, character_id)
        return character

    async def create_character(self, user_id: uuid.UUID, fields: dict[str, Any]) -> Character:
        """
        Save a new level-1 character.

        Max HP is the class hit die plus the CON modifier (at least 1); the hit
        die comes from the catalog.

        Args:
            user_id: Owner
            fields: name, race, character_class, background, alignment, the six
                ability scores, proficiencies and spells

        Raises:
            NetworkError: If the catalog cannot be reached
            ResourceNotFoundError: If the class is not in the catalog
        """
        class_detail = await self.catalog.require_class(fields["character_class"])
        record = {
            **fields,
            "level": 1,
            "max_hp": initial_max_hp(class_detail.hit_die, fields["constitution"]),
        }
        character = await self.repository.create_character(user_id, record)
        logger.info(
            "Character saved",
            user_id=str(user_id),
            character_id=str(character.id),
            character_class=character.character_class,
            max_hp=character.max_hp,
        )
        return character

    async def update_character(
        self, user_id: uuid.UUID, character_id: uuid.UUID, changes: dict[str, Any]
    ) -> Character:
        """Apply descriptive changes to one of the user's characters."""
        character = await self.get_character(user_id, character_id)
        if not changes:
            return character
        updated = await self.repository.update_character(character_id, changes)
        if updated is None:
            raise self._not_found(user_id, character_id)
        return updated

    async def delete_character(self, user_id: uuid.UUID, character_id: uuid.UUID) -> None:
        await self.get_character(user_id, character_id)
        if not await self.repository.delete_character(character_id):
            raise self._not_found(user_id, character_id)

    async def level_up(self, user_id: uuid.UUID, character_id: uuid.UUID, hp_roll: int) -> Character:
        """
        Raise a character one level.

        HP gain is max(1, hp_roll + CON modifier). The record is only written
        after every check passes, and the write increments level and max HP
        in the database rather than storing values read earlier.

        Raises:
            ValidationError: At level 20, or if hp_roll is outside 1..hit_die
            NetworkError: If the catalog cannot supply the class hit die
        """
        character = await self.get_character(user_id, character_id)
        class_detail = await self.catalog.require_class(character.character_class)

        validate_level_up(character.level, class_detail.hit_die, hp_roll)

        gain = hp_gain(hp_roll, character.constitution)
        updated = await self.repository.apply_level_up(character_id, gain, MAX_LEVEL)
        if updated is None:
            # Deleted meanwhile, or a concurrent level-up reached the cap first
            current = await self.get_character(user_id, character_id)
            validate_level_up(current.level, class_detail.hit_die, hp_roll)
            raise self._not_found(user_id, character_id)

        logger.info(
            "Character leveled up",
            character_id=str(character_id),
            new_level=updated.level,
            hp_roll=hp_roll,
            hp_gain=gain,
            max_hp=updated.max_hp,
        )
        return updated
