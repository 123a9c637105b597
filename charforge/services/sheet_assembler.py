"""
Character sheet assembly.

The sheet is built in dependent stages:

1. race, class, background, alignment, level table, every proficiency and
   every spell, concurrently;
2. the features of every level up to the character's level, concurrently;
3. combine.

Assembly is best-effort. A sub-fetch that fails is dropped from the sheet,
its locator is recorded in ``missing`` and a warning is logged.
"""

import asyncio

from ..game.abilities import ABILITY_ORDER, ability_modifier, format_modifier
from ..game.leveling import can_level_up
from ..models.character import Character
from ..schemas.reference import ClassLevel, FeatureDetail, ProficiencyDetail, SpellDetail
from ..schemas.sheet import AbilityLine, CharacterSheet, SheetEntry
from ..structured_logging.enhanced_logging_config import get_logger
from .reference_client import ReferenceCatalogClient

logger = get_logger(__name__)


class CharacterSheetAssembler:
    """Builds CharacterSheet documents from saved characters and catalog data."""

    def __init__(self, catalog: ReferenceCatalogClient) -> None:
        self.catalog = catalog

    async def assemble(self, character: Character) -> CharacterSheet:
        """Assemble the sheet for a saved character."""
        missing: list[str] = []
        proficiency_indices = list(character.proficiencies or [])
        spell_indices = list(character.spells or [])

        race, class_detail, background, alignment, levels, proficiencies, spells = await asyncio.gather(
            self.catalog.get_race(character.race),
            self.catalog.get_class(character.character_class),
            self.catalog.get_background(character.background),
            self.catalog.get_alignment(character.alignment),
            self.catalog.get_class_levels(character.character_class),
            asyncio.gather(*(self.catalog.get_proficiency(index) for index in proficiency_indices)),
            asyncio.gather(*(self.catalog.get_spell(index) for index in spell_indices)),
        )

        if race is None:
            missing.append(f"races/{character.race}")
        if class_detail is None:
            missing.append(f"classes/{character.character_class}")
        if background is None:
            missing.append(f"backgrounds/{character.background}")
        if alignment is None:
            missing.append(f"alignments/{character.alignment}")
        if not levels:
            missing.append(f"classes/{character.character_class}/levels")

        feature_locators = self._feature_locators(levels, character.level)
        features = await asyncio.gather(*(self.catalog.get_feature(locator) for locator in feature_locators))

        proficiency_entries = self._entries(proficiency_indices, proficiencies, "proficiencies", missing)
        spell_entries = self._entries(spell_indices, spells, "spells", missing)
        feature_entries = self._entries(feature_locators, features, "features", missing)

        if missing:
            logger.warning(
                "Character sheet assembled with missing catalog data",
                character_id=str(character.id),
                missing=missing,
            )

        dex_modifier = ability_modifier(character.dexterity)
        stats = character.get_stats()
        return CharacterSheet(
            id=character.id,
            name=character.name,
            race=character.race,
            race_name=race.name if race else None,
            character_class=character.character_class,
            class_name=class_detail.name if class_detail else None,
            background=character.background,
            background_name=background.name if background else None,
            alignment=character.alignment,
            alignment_name=alignment.name if alignment else None,
            level=character.level,
            max_hp=character.max_hp,
            abilities=[
                AbilityLine(
                    ability=ability.value,
                    score=stats[ability.value],
                    modifier=ability_modifier(stats[ability.value]),
                    modifier_display=format_modifier(ability_modifier(stats[ability.value])),
                )
                for ability in ABILITY_ORDER
            ],
            armor_class=10 + dex_modifier,
            initiative=dex_modifier,
            initiative_display=format_modifier(dex_modifier),
            speed=race.speed if race else None,
            size_description=race.size_description if race else None,
            hit_die=class_detail.hit_die if class_detail else None,
            proficiencies=proficiency_entries,
            spells=spell_entries,
            features=feature_entries,
            can_level_up=can_level_up(character.level),
            missing=missing,
        )

    @staticmethod
    def _feature_locators(levels: list[ClassLevel], character_level: int) -> list[str]:
        locators: list[str] = []
        for level in levels:
            if level.level > character_level:
                continue
            for feature in level.features:
                locator = feature.url or f"/api/features/{feature.index}"
                if locator not in locators:
                    locators.append(locator)
        return locators

    @staticmethod
    def _entries(
        locators: list[str],
        details: list[ProficiencyDetail | SpellDetail | FeatureDetail | None],
        category: str,
        missing: list[str],
    ) -> list[SheetEntry]:
        entries: list[SheetEntry] = []
        for locator, detail in zip(locators, details, strict=True):
            if detail is None:
                missing.append(locator if "/" in locator else f"{category}/{locator}")
                continue
            entries.append(
                SheetEntry(
                    index=detail.index,
                    name=detail.name,
                    level=getattr(detail, "level", None),
                    description=list(getattr(detail, "desc", []) or []),
                )
            )
        return entries
