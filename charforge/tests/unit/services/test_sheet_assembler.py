"""
Tests for CharacterSheetAssembler.
"""

# pylint: disable=redefined-outer-name
# Justification: pytest fixtures redefine names

import uuid

import pytest

from charforge.models.character import Character
from charforge.services.sheet_assembler import CharacterSheetAssembler


@pytest.fixture
def wizard_character():
    return Character(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        name="Elara",
        race="elf",
        character_class="wizard",
        background="acolyte",
        alignment="neutral-good",
        strength=8,
        dexterity=14,
        constitution=13,
        intelligence=15,
        wisdom=12,
        charisma=10,
        proficiencies=["daggers", "skill-arcana"],
        spells=["fire-bolt", "light"],
        level=1,
        max_hp=7,
    )


class TestAssemble:
    """Test sheet assembly."""

    @pytest.mark.asyncio
    async def test_full_sheet(self, catalog_client, wizard_character):
        sheet = await CharacterSheetAssembler(catalog_client).assemble(wizard_character)

        assert sheet.missing == []
        assert sheet.race_name == "Elf"
        assert sheet.class_name == "Wizard"
        assert sheet.background_name == "Acolyte"
        assert sheet.alignment_name == "Neutral Good"
        assert sheet.hit_die == 6
        assert sheet.speed == 30
        assert sheet.armor_class == 12
        assert sheet.initiative == 2
        assert sheet.initiative_display == "+2"
        assert sheet.can_level_up is True
        assert [line.ability for line in sheet.abilities][0] == "strength"
        assert sheet.abilities[0].modifier_display == "-1"
        assert [entry.index for entry in sheet.proficiencies] == ["daggers", "skill-arcana"]
        assert [entry.index for entry in sheet.spells] == ["fire-bolt", "light"]
        assert [entry.index for entry in sheet.features] == ["spellcasting-wizard", "arcane-recovery"]

    @pytest.mark.asyncio
    async def test_features_follow_level(self, catalog_client, wizard_character):
        wizard_character.level = 2
        sheet = await CharacterSheetAssembler(catalog_client).assemble(wizard_character)
        assert [entry.index for entry in sheet.features] == [
            "spellcasting-wizard",
            "arcane-recovery",
            "arcane-tradition",
        ]

    @pytest.mark.asyncio
    async def test_missing_entries_are_recorded(self, catalog_client, wizard_character):
        wizard_character.proficiencies = ["daggers", "skill-stealth"]
        wizard_character.spells = ["wish"]
        sheet = await CharacterSheetAssembler(catalog_client).assemble(wizard_character)
        assert [entry.index for entry in sheet.proficiencies] == ["daggers"]
        assert sheet.spells == []
        assert sheet.missing == ["proficiencies/skill-stealth", "spells/wish"]

    @pytest.mark.asyncio
    async def test_missing_feature_recorded_by_url(self, catalog_client, catalog_data, wizard_character):
        del catalog_data["/api/features/arcane-recovery"]
        sheet = await CharacterSheetAssembler(catalog_client).assemble(wizard_character)
        assert [entry.index for entry in sheet.features] == ["spellcasting-wizard"]
        assert sheet.missing == ["/api/features/arcane-recovery"]

    @pytest.mark.asyncio
    async def test_unreachable_catalog_still_renders_sheet(self, unreachable_catalog_client, wizard_character):
        sheet = await CharacterSheetAssembler(unreachable_catalog_client).assemble(wizard_character)
        assert sheet.armor_class == 12
        assert sheet.race_name is None
        assert sheet.hit_die is None
        assert sheet.features == []
        assert sheet.missing[:5] == [
            "races/elf",
            "classes/wizard",
            "backgrounds/acolyte",
            "alignments/neutral-good",
            "classes/wizard/levels",
        ]
        assert "spells/fire-bolt" in sheet.missing

    @pytest.mark.asyncio
    async def test_unknown_background_keeps_index(self, catalog_client, wizard_character):
        wizard_character.background = "sage"
        sheet = await CharacterSheetAssembler(catalog_client).assemble(wizard_character)
        assert sheet.background == "sage"
        assert sheet.background_name is None
        assert sheet.alignment_name == "Neutral Good"
        assert sheet.missing == ["backgrounds/sage"]
