"""
Tests for CharacterService.

The repository and catalog are mocked; persistence itself is covered by the
API tests.
"""

# pylint: disable=redefined-outer-name
# Justification: pytest fixtures redefine names

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from charforge.error_types import ErrorMessages
from charforge.exceptions import NetworkError, ResourceNotFoundError, ValidationError
from charforge.services.character_service import CharacterService

OWNER_ID = uuid.uuid4()
OTHER_ID = uuid.uuid4()


def _character(**overrides):
    values = {
        "id": uuid.uuid4(),
        "user_id": OWNER_ID,
        "name": "Elara",
        "character_class": "wizard",
        "constitution": 13,
        "level": 1,
        "max_hp": 7,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.get_character = AsyncMock()
    repo.create_character = AsyncMock()
    repo.update_character = AsyncMock()
    repo.apply_level_up = AsyncMock()
    repo.delete_character = AsyncMock(return_value=True)
    repo.list_characters_for_user = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def catalog():
    client = MagicMock()
    client.require_class = AsyncMock(return_value=SimpleNamespace(index="wizard", hit_die=6))
    return client


@pytest.fixture
def service(repository, catalog):
    return CharacterService(repository, catalog)


class TestOwnership:
    """Characters of other users look missing."""

    @pytest.mark.asyncio
    async def test_get_own_character(self, service, repository):
        character = _character()
        repository.get_character.return_value = character
        assert await service.get_character(OWNER_ID, character.id) is character

    @pytest.mark.asyncio
    async def test_foreign_character_is_not_found(self, service, repository):
        character = _character()
        repository.get_character.return_value = character
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await service.get_character(OTHER_ID, character.id)
        assert exc_info.value.user_friendly == ErrorMessages.CHARACTER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_foreign_character_cannot_be_deleted(self, service, repository):
        repository.get_character.return_value = _character()
        with pytest.raises(ResourceNotFoundError):
            await service.delete_character(OTHER_ID, uuid.uuid4())
        repository.delete_character.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, service, repository):
        await service.list_characters(OWNER_ID)
        repository.list_characters_for_user.assert_awaited_once_with(OWNER_ID)


class TestCreate:
    """Test create_character."""

    @pytest.mark.asyncio
    async def test_max_hp_from_hit_die_and_constitution(self, service, repository, catalog):
        repository.create_character.side_effect = lambda user_id, record: _character(**record)
        fields = {"name": "Elara", "character_class": "wizard", "constitution": 13}

        character = await service.create_character(OWNER_ID, fields)

        catalog.require_class.assert_awaited_once_with("wizard")
        record = repository.create_character.await_args.args[1]
        assert record["level"] == 1
        assert record["max_hp"] == 7
        assert character.max_hp == 7

    @pytest.mark.asyncio
    async def test_catalog_outage_prevents_save(self, service, repository, catalog):
        catalog.require_class.side_effect = NetworkError("down", connection_type="http")
        with pytest.raises(NetworkError):
            await service.create_character(OWNER_ID, {"character_class": "wizard", "constitution": 13})
        repository.create_character.assert_not_awaited()


class TestLevelUp:
    """Test level_up."""

    @pytest.mark.asyncio
    async def test_level_up_adds_roll_and_con_modifier(self, service, repository):
        character = _character(level=3, max_hp=17)
        repository.get_character.return_value = character
        repository.apply_level_up.return_value = _character(id=character.id, level=4, max_hp=22)

        updated = await service.level_up(OWNER_ID, character.id, 4)

        repository.apply_level_up.assert_awaited_once_with(character.id, 5, 20)
        assert updated.level == 4

    @pytest.mark.asyncio
    async def test_level_twenty_is_rejected_without_writing(self, service, repository):
        character = _character(level=20)
        repository.get_character.return_value = character
        with pytest.raises(ValidationError) as exc_info:
            await service.level_up(OWNER_ID, character.id, 3)
        assert exc_info.value.user_friendly == ErrorMessages.MAX_LEVEL_REACHED
        repository.apply_level_up.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_roll_above_hit_die_rejected(self, service, repository):
        character = _character()
        repository.get_character.return_value = character
        with pytest.raises(ValidationError):
            await service.level_up(OWNER_ID, character.id, 7)
        repository.apply_level_up.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cap_reached_by_concurrent_level_up(self, service, repository):
        """The conditional update matched nothing because another request hit level 20."""
        character = _character(level=19)
        repository.get_character.side_effect = [character, _character(id=character.id, level=20)]
        repository.apply_level_up.return_value = None

        with pytest.raises(ValidationError) as exc_info:
            await service.level_up(OWNER_ID, character.id, 3)
        assert exc_info.value.user_friendly == ErrorMessages.MAX_LEVEL_REACHED

    @pytest.mark.asyncio
    async def test_deleted_during_level_up_is_not_found(self, service, repository):
        character = _character()
        repository.get_character.side_effect = [character, None]
        repository.apply_level_up.return_value = None

        with pytest.raises(ResourceNotFoundError):
            await service.level_up(OWNER_ID, character.id, 3)


class TestUpdate:
    """Test update_character."""

    @pytest.mark.asyncio
    async def test_empty_changes_skip_write(self, service, repository):
        character = _character()
        repository.get_character.return_value = character
        assert await service.update_character(OWNER_ID, character.id, {}) is character
        repository.update_character.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_changes_are_written(self, service, repository):
        character = _character()
        repository.get_character.return_value = character
        repository.update_character.return_value = _character(id=character.id, name="Elara the Wise")
        updated = await service.update_character(OWNER_ID, character.id, {"name": "Elara the Wise"})
        assert updated.name == "Elara the Wise"
