"""
Character API request and response schemas.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models.character import Character


class AbilityScores(BaseModel):
    """The six ability scores."""

    strength: int = Field(..., ge=1, le=30, description="Strength score")
    dexterity: int = Field(..., ge=1, le=30, description="Dexterity score")
    constitution: int = Field(..., ge=1, le=30, description="Constitution score")
    intelligence: int = Field(..., ge=1, le=30, description="Intelligence score")
    wisdom: int = Field(..., ge=1, le=30, description="Wisdom score")
    charisma: int = Field(..., ge=1, le=30, description="Charisma score")


class CharacterCreateRequest(BaseModel):
    """Request model for saving a new character directly (outside the wizard)."""

    name: str = Field(..., min_length=1, max_length=100, description="Character name")
    race: str = Field(..., min_length=1, max_length=64, description="Race index, e.g. 'elf'")
    character_class: str = Field(..., min_length=1, max_length=64, description="Class index, e.g. 'wizard'")
    background: str = Field(..., min_length=1, max_length=64, description="Background index")
    alignment: str = Field(..., min_length=1, max_length=64, description="Alignment index")
    stats: AbilityScores = Field(..., description="Ability scores")
    proficiencies: list[str] = Field(default_factory=list, description="Proficiency indices")
    spells: list[str] = Field(default_factory=list, description="Spell indices")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Elara",
                "race": "elf",
                "character_class": "wizard",
                "background": "sage",
                "alignment": "neutral-good",
                "stats": {
                    "strength": 8,
                    "dexterity": 14,
                    "constitution": 13,
                    "intelligence": 15,
                    "wisdom": 12,
                    "charisma": 10,
                },
                "proficiencies": ["skill-arcana", "skill-history"],
                "spells": ["fire-bolt", "light", "mage-hand"],
            }
        }
    )


class CharacterUpdateRequest(BaseModel):
    """Partial update of a character's descriptive fields."""

    name: str | None = Field(default=None, min_length=1, max_length=100, description="Character name")
    background: str | None = Field(default=None, min_length=1, max_length=64, description="Background index")
    alignment: str | None = Field(default=None, min_length=1, max_length=64, description="Alignment index")
    proficiencies: list[str] | None = Field(default=None, description="Proficiency indices")
    spells: list[str] | None = Field(default=None, description="Spell indices")


class LevelUpRequest(BaseModel):
    """Request model for leveling a character up."""

    hp_roll: int = Field(..., ge=1, description="Result of the hit die roll")

    model_config = ConfigDict(json_schema_extra={"example": {"hp_roll": 4}})


class CharacterSummary(BaseModel):
    """A character in the dashboard list."""

    id: uuid.UUID = Field(..., description="Character ID")
    name: str = Field(..., description="Character name")
    race: str = Field(..., description="Race index")
    character_class: str = Field(..., description="Class index")
    level: int = Field(..., description="Character level")

    model_config = ConfigDict(from_attributes=True)


class CharacterResponse(BaseModel):
    """A full character record."""

    id: uuid.UUID = Field(..., description="Character ID")
    name: str = Field(..., description="Character name")
    race: str = Field(..., description="Race index")
    character_class: str = Field(..., description="Class index")
    background: str = Field(..., description="Background index")
    alignment: str = Field(..., description="Alignment index")
    stats: AbilityScores = Field(..., description="Ability scores")
    proficiencies: list[str] = Field(default_factory=list, description="Proficiency indices")
    spells: list[str] = Field(default_factory=list, description="Spell indices")
    level: int = Field(..., description="Character level (1-20)")
    max_hp: int = Field(..., description="Maximum hit points")
    created_at: datetime = Field(..., description="Creation time (UTC)")
    updated_at: datetime = Field(..., description="Last update time (UTC)")

    @classmethod
    def from_character(cls, character: Character) -> "CharacterResponse":
        return cls(
            id=character.id,
            name=character.name,
            race=character.race,
            character_class=character.character_class,
            background=character.background,
            alignment=character.alignment,
            stats=AbilityScores(**character.get_stats()),
            proficiencies=list(character.proficiencies or []),
            spells=list(character.spells or []),
            level=character.level,
            max_hp=character.max_hp,
            created_at=character.created_at,
            updated_at=character.updated_at,
        )
