"""
Character sheet schema: a saved character combined with catalog data.
"""

import uuid

from pydantic import BaseModel, Field


class AbilityLine(BaseModel):
    """One ability row of the sheet."""

    ability: str = Field(..., description="Ability name")
    score: int = Field(..., description="Ability score")
    modifier: int = Field(..., description="floor((score - 10) / 2)")
    modifier_display: str = Field(..., description="Signed modifier, e.g. '+2'")


class SheetEntry(BaseModel):
    """A proficiency, spell or feature resolved from the catalog."""

    index: str
    name: str
    level: int | None = Field(default=None, description="Spell or feature level, where applicable")
    description: list[str] = Field(default_factory=list)


class CharacterSheet(BaseModel):
    """The read-only character sheet."""

    id: uuid.UUID
    name: str
    race: str
    race_name: str | None = None
    character_class: str
    class_name: str | None = None
    background: str
    background_name: str | None = None
    alignment: str
    alignment_name: str | None = None
    level: int
    max_hp: int
    abilities: list[AbilityLine]
    armor_class: int = Field(..., description="10 + DEX modifier")
    initiative: int = Field(..., description="DEX modifier")
    initiative_display: str
    speed: int | None = Field(default=None, description="Walking speed from the race")
    size_description: str | None = None
    hit_die: int | None = None
    proficiencies: list[SheetEntry] = Field(default_factory=list)
    spells: list[SheetEntry] = Field(default_factory=list)
    features: list[SheetEntry] = Field(default_factory=list)
    can_level_up: bool = Field(..., description="True while level < 20")
    missing: list[str] = Field(default_factory=list, description="Catalog locators that could not be fetched")
