"""
Wizard API request and response schemas.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..game.wizard_state import WizardState, is_complete


class DetailsRequest(BaseModel):
    """Identity fields; omitted fields keep their current value."""

    name: str | None = Field(default=None, max_length=100, description="Character name")
    background: str | None = Field(default=None, max_length=64, description="Background index")
    alignment: str | None = Field(default=None, max_length=64, description="Alignment index")


class IndexRequest(BaseModel):
    """A catalog index (race, class, skill or cantrip)."""

    index: str = Field(..., min_length=1, max_length=64, description="Catalog index")


class GenerateStatsRequest(BaseModel):
    """Request model for generating a stat pool."""

    method: Literal["standard_array", "4d6_drop_lowest"] = Field(
        default="4d6_drop_lowest", description="Stat generation method"
    )

    model_config = ConfigDict(json_schema_extra={"example": {"method": "4d6_drop_lowest"}})


class AssignRequest(BaseModel):
    """Bind an ability to a pool index, or clear it with null."""

    ability: str = Field(..., description="Ability name, e.g. 'strength' or 'str'")
    pool_index: int | None = Field(default=None, description="Index into the stat pool, or null to unassign")

    model_config = ConfigDict(json_schema_extra={"example": {"ability": "strength", "pool_index": 0}})


class WizardStateResponse(BaseModel):
    """The user's current draft."""

    revision: int
    name: str | None = None
    background: str | None = None
    alignment: str | None = None
    race: str | None = None
    recommended_classes: list[str] = Field(default_factory=list)
    character_class: str | None = None
    hit_die: int | None = None
    stat_method: str | None = None
    pool: list[int] = Field(default_factory=list)
    assignment: dict[str, int | None] = Field(..., description="Ability to pool index, in display order")
    scores: dict[str, int | None] = Field(..., description="Ability to assigned score, in display order")
    assignment_complete: bool
    skill_options: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    skill_limit: int = 0
    cantrip_options: list[str] = Field(default_factory=list)
    cantrips: list[str] = Field(default_factory=list)
    cantrip_limit: int = 0

    @classmethod
    def from_state(cls, state: WizardState) -> "WizardStateResponse":
        assignment = {ability.value: slot for ability, slot in state.assignment_map().items()}
        scores = {ability: (state.pool[slot] if slot is not None else None) for ability, slot in assignment.items()}
        return cls(
            revision=state.revision,
            name=state.name,
            background=state.background,
            alignment=state.alignment,
            race=state.race,
            recommended_classes=list(state.recommended_classes),
            character_class=state.character_class,
            hit_die=state.hit_die,
            stat_method=state.stat_method,
            pool=list(state.pool),
            assignment=assignment,
            scores=scores,
            assignment_complete=is_complete(state),
            skill_options=list(state.skill_options),
            skills=list(state.skills),
            skill_limit=state.skill_limit,
            cantrip_options=list(state.cantrip_options),
            cantrips=list(state.cantrips),
            cantrip_limit=state.cantrip_limit,
        )
