"""
Reference catalog fixtures.

A small slice of the dnd5eapi.co catalog served through httpx.MockTransport,
so tests run the real ReferenceCatalogClient without network access. Paths
not listed answer 404.
"""

import copy
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest

from charforge.config.models import CatalogConfig
from charforge.services.reference_client import ReferenceCatalogClient

# pylint: disable=redefined-outer-name  # Reason: pytest fixture parameter names must match fixture names


def _ref(category: str, index: str, name: str) -> dict[str, str]:
    return {"index": index, "name": name, "url": f"/api/{category}/{index}"}


def _skill_option(index: str, name: str) -> dict[str, Any]:
    return {"option_type": "reference", "item": _ref("proficiencies", index, f"Skill: {name}")}


CATALOG_DATA: dict[str, Any] = {
    "/api/races": {
        "count": 2,
        "results": [_ref("races", "dwarf", "Dwarf"), _ref("races", "elf", "Elf")],
    },
    "/api/races/elf": {
        "index": "elf",
        "name": "Elf",
        "speed": 30,
        "size": "Medium",
        "size_description": "Elves range from under 5 to over 6 feet tall. Your size is Medium.",
        "ability_bonuses": [{"ability_score": _ref("ability-scores", "dex", "DEX"), "bonus": 2}],
    },
    "/api/races/dwarf": {
        "index": "dwarf",
        "name": "Dwarf",
        "speed": 25,
        "size": "Medium",
        "size_description": "Dwarves stand between 4 and 5 feet tall. Your size is Medium.",
        "ability_bonuses": [{"ability_score": _ref("ability-scores", "con", "CON"), "bonus": 2}],
    },
    "/api/classes": {
        "count": 2,
        "results": [_ref("classes", "fighter", "Fighter"), _ref("classes", "wizard", "Wizard")],
    },
    "/api/classes/wizard": {
        "index": "wizard",
        "name": "Wizard",
        "hit_die": 6,
        "proficiencies": [_ref("proficiencies", "daggers", "Daggers")],
        "proficiency_choices": [
            {
                "desc": "Choose two from Arcana, History, Insight and Investigation",
                "choose": 2,
                "type": "proficiencies",
                "from": {
                    "option_set_type": "options_array",
                    "options": [
                        _skill_option("skill-arcana", "Arcana"),
                        _skill_option("skill-history", "History"),
                        _skill_option("skill-insight", "Insight"),
                        _skill_option("skill-investigation", "Investigation"),
                    ],
                },
            }
        ],
        "saving_throws": [_ref("ability-scores", "int", "INT"), _ref("ability-scores", "wis", "WIS")],
        "spellcasting": {"level": 1, "spellcasting_ability": _ref("ability-scores", "int", "INT")},
    },
    "/api/classes/wizard/spells": {
        "count": 4,
        "results": [
            {**_ref("spells", "fire-bolt", "Fire Bolt"), "level": 0},
            {**_ref("spells", "light", "Light"), "level": 0},
            {**_ref("spells", "mage-hand", "Mage Hand"), "level": 0},
            {**_ref("spells", "magic-missile", "Magic Missile"), "level": 1},
        ],
    },
    "/api/classes/wizard/levels": [
        {
            "level": 2,
            "prof_bonus": 2,
            "features": [_ref("features", "arcane-tradition", "Arcane Tradition")],
        },
        {
            "level": 1,
            "prof_bonus": 2,
            "features": [
                _ref("features", "spellcasting-wizard", "Spellcasting: Wizard"),
                _ref("features", "arcane-recovery", "Arcane Recovery"),
            ],
        },
        {
            "level": 2,
            "features": [_ref("features", "evocation-savant", "Evocation Savant")],
            "subclass": _ref("subclasses", "evocation", "Evocation"),
        },
    ],
    "/api/classes/fighter": {
        "index": "fighter",
        "name": "Fighter",
        "hit_die": 10,
        "proficiencies": [_ref("proficiencies", "all-armor", "All armor")],
        "proficiency_choices": [
            {
                "desc": "Choose two skills",
                "choose": 2,
                "type": "proficiencies",
                "from": {
                    "option_set_type": "options_array",
                    "options": [
                        _skill_option("skill-acrobatics", "Acrobatics"),
                        _skill_option("skill-athletics", "Athletics"),
                        _skill_option("skill-history", "History"),
                    ],
                },
            }
        ],
        "saving_throws": [_ref("ability-scores", "str", "STR"), _ref("ability-scores", "con", "CON")],
    },
    "/api/classes/fighter/levels": [
        {"level": 1, "prof_bonus": 2, "features": [_ref("features", "second-wind", "Second Wind")]},
    ],
    "/api/backgrounds": {"count": 1, "results": [_ref("backgrounds", "acolyte", "Acolyte")]},
    "/api/backgrounds/acolyte": {
        "index": "acolyte",
        "name": "Acolyte",
        "starting_proficiencies": [_ref("proficiencies", "skill-insight", "Skill: Insight")],
        "feature": {"name": "Shelter of the Faithful", "desc": ["You command the respect of your faith."]},
    },
    "/api/alignments": {"count": 1, "results": [_ref("alignments", "neutral-good", "Neutral Good")]},
    "/api/alignments/neutral-good": {
        "index": "neutral-good",
        "name": "Neutral Good",
        "abbreviation": "NG",
        "desc": "Neutral good folk do the best they can to help others.",
    },
    "/api/proficiencies/daggers": {"index": "daggers", "name": "Daggers", "type": "Weapons"},
    "/api/proficiencies/skill-arcana": {"index": "skill-arcana", "name": "Skill: Arcana", "type": "Skills"},
    "/api/proficiencies/skill-history": {"index": "skill-history", "name": "Skill: History", "type": "Skills"},
    "/api/spells/fire-bolt": {
        "index": "fire-bolt",
        "name": "Fire Bolt",
        "level": 0,
        "school": _ref("magic-schools", "evocation", "Evocation"),
        "desc": ["You hurl a mote of fire at a creature or object within range."],
    },
    "/api/spells/light": {"index": "light", "name": "Light", "level": 0, "desc": ["You touch one object."]},
    "/api/spells/mage-hand": {"index": "mage-hand", "name": "Mage Hand", "level": 0, "desc": ["A spectral hand."]},
    "/api/features/spellcasting-wizard": {
        "index": "spellcasting-wizard",
        "name": "Spellcasting: Wizard",
        "level": 1,
        "desc": ["As a student of arcane magic, you have a spellbook."],
    },
    "/api/features/arcane-recovery": {
        "index": "arcane-recovery",
        "name": "Arcane Recovery",
        "level": 1,
        "desc": ["You have learned to regain some of your magical energy."],
    },
    "/api/features/arcane-tradition": {
        "index": "arcane-tradition",
        "name": "Arcane Tradition",
        "level": 2,
        "desc": ["When you reach 2nd level, you choose an arcane tradition."],
    },
    "/api/features/second-wind": {
        "index": "second-wind",
        "name": "Second Wind",
        "level": 1,
        "desc": ["You have a limited well of stamina."],
    },
}


class CatalogRecorder:
    """Serves CATALOG_DATA and records every requested path."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        if path not in self.data:
            return httpx.Response(404, json={"error": "Not found"})
        return httpx.Response(200, json=self.data[path])


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    """A private copy of the catalog slice; tests may edit it."""
    return copy.deepcopy(CATALOG_DATA)


@pytest.fixture
def catalog_recorder(catalog_data: dict[str, Any]) -> CatalogRecorder:
    return CatalogRecorder(catalog_data)


@pytest.fixture
def catalog_config() -> CatalogConfig:
    return CatalogConfig(base_url="http://catalog.test", timeout_seconds=2.0, max_concurrency=4)


@pytest.fixture
def make_catalog_client(
    catalog_config: CatalogConfig,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], ReferenceCatalogClient]:
    """Factory building a ReferenceCatalogClient over an arbitrary request handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> ReferenceCatalogClient:
        return ReferenceCatalogClient(catalog_config, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
async def catalog_client(
    make_catalog_client: Callable[..., ReferenceCatalogClient],
    catalog_recorder: CatalogRecorder,
) -> AsyncGenerator[ReferenceCatalogClient, None]:
    """ReferenceCatalogClient backed by the in-memory catalog slice."""
    client = make_catalog_client(catalog_recorder)
    yield client
    await client.aclose()


@pytest.fixture
async def unreachable_catalog_client(
    make_catalog_client: Callable[..., ReferenceCatalogClient],
) -> AsyncGenerator[ReferenceCatalogClient, None]:
    """ReferenceCatalogClient whose every request fails to connect."""

    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = make_catalog_client(_refuse)
    yield client
    await client.aclose()
