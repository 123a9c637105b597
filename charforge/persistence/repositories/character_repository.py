"""
Character repository for async persistence operations.

CRUD over the ``characters`` table using SQLAlchemy 2.0 ORM. Every
SQLAlchemyError is logged and re-raised as a DatabaseError.
"""

# pylint: disable=too-few-public-methods

import uuid
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from ...database import get_session_maker
from ...exceptions import DatabaseError
from ...models.character import Character
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "race",
        "character_class",
        "background",
        "alignment",
        "strength",
        "dexterity",
        "constitution",
        "intelligence",
        "wisdom",
        "charisma",
        "proficiencies",
        "spells",
        "level",
        "max_hp",
    }
)


class CharacterRepository:
    """
    Repository for character persistence operations.

    Ownership is not checked here; CharacterService scopes every call to the
    requesting user.
    """

    def __init__(self) -> None:
        self._logger = get_logger(__name__)

    async def create_character(self, user_id: uuid.UUID, fields: dict[str, Any]) -> Character:
        """
        Insert a new character.

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context(user_id=str(user_id))
        context.metadata["operation"] = "create_character"

        try:
            async with get_session_maker()() as session:
                character = Character(user_id=user_id, **fields)
                session.add(character)
                await session.commit()
                await session.refresh(character)
                self._logger.info("Character created", character_id=str(character.id), user_id=str(user_id))
                return character
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error creating character: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to save character",
                operation="create_character",
                table="characters",
            )

    async def get_character(self, character_id: uuid.UUID) -> Character | None:
        """
        Get a character by ID.

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context(character_id=str(character_id))
        context.metadata["operation"] = "get_character"

        try:
            async with get_session_maker()() as session:
                return await session.get(Character, character_id)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving character: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to retrieve character",
                operation="get_character",
                table="characters",
            )

    async def list_characters_for_user(self, user_id: uuid.UUID) -> list[Character]:
        """
        List a user's characters, oldest first.

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context(user_id=str(user_id))
        context.metadata["operation"] = "list_characters_for_user"

        try:
            async with get_session_maker()() as session:
                stmt = (
                    select(Character)
                    .where(Character.user_id == user_id)
                    .order_by(Character.created_at, Character.name)
                )
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error listing characters: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to retrieve characters",
                operation="list_characters_for_user",
                table="characters",
            )

    async def update_character(self, character_id: uuid.UUID, changes: dict[str, Any]) -> Character | None:
        """
        Apply field changes to a character.

        Returns:
            Character | None: The updated character, or None if it does not exist

        Raises:
            ValueError: If ``changes`` names a field that cannot be updated
            DatabaseError: If database operation fails
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update character fields: {sorted(unknown)}")

        context = create_error_context(character_id=str(character_id))
        context.metadata["operation"] = "update_character"

        try:
            async with get_session_maker()() as session:
                character = await session.get(Character, character_id)
                if character is None:
                    return None
                for key, value in changes.items():
                    setattr(character, key, value)
                await session.commit()
                await session.refresh(character)
                self._logger.info(
                    "Character updated", character_id=str(character_id), fields=sorted(changes)
                )
                return character
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error updating character: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to update character",
                operation="update_character",
                table="characters",
            )

    async def apply_level_up(self, character_id: uuid.UUID, hp_gain: int, max_level: int) -> Character | None:
        """
        Add one level and ``hp_gain`` max HP in a single UPDATE.

        The increment is computed by the database, so concurrent level-ups of
        the same character each count once and the ``level < max_level`` guard
        holds when they race.

        Returns:
            Character | None: The updated character, or None if it does not exist
            or is already at ``max_level``

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context(character_id=str(character_id))
        context.metadata["operation"] = "apply_level_up"

        try:
            async with get_session_maker()() as session:
                stmt = (
                    update(Character)
                    .where(Character.id == character_id, Character.level < max_level)
                    .values(level=Character.level + 1, max_hp=Character.max_hp + hp_gain)
                    .execution_options(synchronize_session=False)
                )
                result = await session.execute(stmt)
                if result.rowcount != 1:
                    await session.rollback()
                    return None
                await session.commit()
                character = await session.get(Character, character_id)
                self._logger.info("Character level applied", character_id=str(character_id), hp_gain=hp_gain)
                return character
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error leveling up character: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to update character",
                operation="apply_level_up",
                table="characters",
            )

    async def delete_character(self, character_id: uuid.UUID) -> bool:
        """
        Delete a character.

        Returns:
            bool: True if a row was deleted

        Raises:
            DatabaseError: If database operation fails
        """
        context = create_error_context(character_id=str(character_id))
        context.metadata["operation"] = "delete_character"

        try:
            async with get_session_maker()() as session:
                character = await session.get(Character, character_id)
                if character is None:
                    return False
                await session.delete(character)
                await session.commit()
                self._logger.info("Character deleted", character_id=str(character_id))
                return True
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error deleting character: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Failed to delete character",
                operation="delete_character",
                table="characters",
            )
