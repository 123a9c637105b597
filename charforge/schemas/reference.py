"""
Reference catalog record schemas.

Detail records are tagged variants discriminated by ``kind``; the catalog's
own JSON is validated into them, ignoring fields CharForge does not use.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ReferenceItem(BaseModel):
    """An entry in a catalog list: ``{index, name, url}``."""

    index: str
    name: str
    url: str = ""


class AbilityBonus(BaseModel):
    ability_score: ReferenceItem
    bonus: int


class ChoiceOption(BaseModel):
    option_type: str | None = None
    item: ReferenceItem | None = None


class ChoiceOptionSet(BaseModel):
    option_set_type: str | None = None
    options: list[ChoiceOption] = Field(default_factory=list)


class ProficiencyChoice(BaseModel):
    """A "choose N from ..." group in a class record."""

    model_config = ConfigDict(populate_by_name=True)

    desc: str = ""
    choose: int = 0
    type: str = ""
    from_: ChoiceOptionSet = Field(default_factory=ChoiceOptionSet, alias="from")

    def item_indices(self) -> list[str]:
        return [option.item.index for option in self.from_.options if option.item is not None]

    @property
    def is_skill_group(self) -> bool:
        indices = self.item_indices()
        return bool(indices) and all(index.startswith("skill-") for index in indices)


class Spellcasting(BaseModel):
    level: int = 1
    spellcasting_ability: ReferenceItem | None = None


class RaceDetail(BaseModel):
    kind: Literal["race"] = "race"
    index: str
    name: str
    speed: int = 30
    size: str | None = None
    size_description: str | None = None
    ability_bonuses: list[AbilityBonus] = Field(default_factory=list)


class ClassDetail(BaseModel):
    kind: Literal["class"] = "class"
    index: str
    name: str
    hit_die: int
    proficiencies: list[ReferenceItem] = Field(default_factory=list)
    proficiency_choices: list[ProficiencyChoice] = Field(default_factory=list)
    saving_throws: list[ReferenceItem] = Field(default_factory=list)
    spellcasting: Spellcasting | None = None

    def skill_options(self) -> list[str]:
        """Skill indices offered by the class's skill choice group(s), in catalog order."""
        options: list[str] = []
        for choice in self.proficiency_choices:
            if choice.is_skill_group:
                options.extend(index for index in choice.item_indices() if index not in options)
        return options

    def fixed_proficiencies(self) -> list[str]:
        """Proficiencies granted outright (saving throws are listed separately by the catalog)."""
        return [item.index for item in self.proficiencies]


class BackgroundFeature(BaseModel):
    name: str = ""
    desc: list[str] = Field(default_factory=list)


class BackgroundDetail(BaseModel):
    kind: Literal["background"] = "background"
    index: str
    name: str
    starting_proficiencies: list[ReferenceItem] = Field(default_factory=list)
    feature: BackgroundFeature | None = None


class AlignmentDetail(BaseModel):
    kind: Literal["alignment"] = "alignment"
    index: str
    name: str
    abbreviation: str = ""
    desc: str = ""


class SpellDetail(BaseModel):
    kind: Literal["spell"] = "spell"
    index: str
    name: str
    level: int = 0
    school: ReferenceItem | None = None
    casting_time: str | None = None
    range: str | None = None
    duration: str | None = None
    components: list[str] = Field(default_factory=list)
    desc: list[str] = Field(default_factory=list)


class ProficiencyDetail(BaseModel):
    kind: Literal["proficiency"] = "proficiency"
    index: str
    name: str
    type: str = ""


class FeatureDetail(BaseModel):
    kind: Literal["feature"] = "feature"
    index: str
    name: str
    level: int = 1
    desc: list[str] = Field(default_factory=list)


ReferenceDetail = Annotated[
    RaceDetail | ClassDetail | BackgroundDetail | AlignmentDetail | SpellDetail | ProficiencyDetail | FeatureDetail,
    Field(discriminator="kind"),
]

DETAIL_MODELS: dict[str, type[BaseModel]] = {
    "race": RaceDetail,
    "class": ClassDetail,
    "background": BackgroundDetail,
    "alignment": AlignmentDetail,
    "spell": SpellDetail,
    "proficiency": ProficiencyDetail,
    "feature": FeatureDetail,
}


class ClassLevel(BaseModel):
    """One row of a class's level table."""

    level: int
    prof_bonus: int | None = None
    features: list[ReferenceItem] = Field(default_factory=list)
    subclass: ReferenceItem | None = None


class ClassSpell(ReferenceItem):
    """An entry of a class spell list, which also carries the spell level."""

    level: int = 0
