"""
Tests for the wizard draft transitions.

The transitions are pure, so these tests build states directly and never
touch the catalog.
"""

# pylint: disable=redefined-outer-name
# Justification: pytest fixtures redefine names

import pytest

from charforge.exceptions import IncompleteAssignmentError, SelectionLimitError, ValidationError
from charforge.game import wizard_state as ws
from charforge.game.abilities import Ability
from charforge.game.stats_generator import STANDARD_ARRAY


@pytest.fixture
def wizard_class_state():
    """A draft with the wizard class selected."""
    return ws.select_class(
        ws.WizardState(),
        "wizard",
        hit_die=6,
        proficiencies=("daggers",),
        skill_options=("skill-arcana", "skill-history", "skill-insight"),
        cantrip_options=("fire-bolt", "light", "mage-hand", "minor-illusion"),
    )


@pytest.fixture
def pooled_state():
    return ws.accept_pool(ws.WizardState(), STANDARD_ARRAY, "standard_array")


def _assign_all(state):
    for position, ability in enumerate(
        [Ability.INT, Ability.DEX, Ability.CON, Ability.WIS, Ability.CHA, Ability.STR]
    ):
        state = ws.assign(state, ability, position)
    return state


class TestRevisions:
    """Every change bumps the revision."""

    def test_transitions_increment_revision(self):
        state = ws.WizardState()
        state = ws.set_details(state, name="Elara")
        assert state.revision == 1
        state = ws.select_race(state, "elf", (Ability.DEX,))
        assert state.revision == 2

    def test_reset_clears_draft_but_keeps_counting(self):
        state = ws.set_details(ws.WizardState(), name="Elara", background="acolyte")
        reset = ws.reset(state)
        assert reset.name is None
        assert reset.background is None
        assert reset.revision == state.revision + 1

    def test_set_details_without_changes_is_a_no_op(self):
        state = ws.WizardState()
        assert ws.set_details(state) is state

    def test_blank_details_are_cleared(self):
        state = ws.set_details(ws.WizardState(), name="Elara")
        state = ws.set_details(state, name="   ")
        assert state.name is None


class TestRaceAndClass:
    """Test race and class selection."""

    def test_race_sets_recommendations(self):
        state = ws.select_race(ws.WizardState(), "elf", (Ability.DEX,))
        assert state.race == "elf"
        assert state.recommended_classes == ("bard", "monk", "ranger", "rogue")

    def test_changing_class_clears_selections(self, wizard_class_state):
        state = ws.toggle_skill(wizard_class_state, "skill-arcana")
        state = ws.toggle_cantrip(state, "light")
        state = ws.select_class(
            state, "fighter", hit_die=10, proficiencies=(), skill_options=("skill-athletics",), cantrip_options=()
        )
        assert state.skills == ()
        assert state.cantrips == ()
        assert state.skill_limit == 2
        assert state.cantrip_limit == 0


class TestAssignment:
    """Test the stat allocator."""

    def test_new_pool_clears_assignment(self, pooled_state):
        state = ws.assign(pooled_state, Ability.STR, 0)
        state = ws.accept_pool(state, (10, 11, 12, 13, 14, 15), "4d6_drop_lowest")
        assert state.assignment_map()[Ability.STR] is None
        assert state.stat_method == "4d6_drop_lowest"

    def test_pool_must_have_six_positive_values(self):
        with pytest.raises(ValidationError):
            ws.accept_pool(ws.WizardState(), (15, 14, 13), "standard_array")
        with pytest.raises(ValidationError):
            ws.accept_pool(ws.WizardState(), (15, 14, 13, 12, 10, 0), "standard_array")

    def test_reassigning_an_index_moves_it(self, pooled_state):
        """An index held by another ability is taken away from it."""
        state = ws.assign(pooled_state, Ability.STR, 0)
        state = ws.assign(state, Ability.DEX, 0)
        mapping = state.assignment_map()
        assert mapping[Ability.STR] is None
        assert mapping[Ability.DEX] == 0

    def test_no_index_is_held_twice(self, pooled_state):
        state = pooled_state
        for ability in Ability:
            state = ws.assign(state, ability, 2)
        held = [slot for slot in state.assignment if slot is not None]
        assert held == [2]

    def test_identical_assignment_returns_same_state(self, pooled_state):
        state = ws.assign(pooled_state, Ability.WIS, 3)
        assert ws.assign(state, Ability.WIS, 3) is state

    def test_none_unassigns(self, pooled_state):
        state = ws.assign(pooled_state, Ability.CHA, 4)
        state = ws.assign(state, Ability.CHA, None)
        assert state.assignment_map()[Ability.CHA] is None

    def test_out_of_range_index_rejected(self, pooled_state):
        with pytest.raises(ValidationError):
            ws.assign(pooled_state, Ability.STR, 6)

    def test_assign_without_pool_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ws.assign(ws.WizardState(), Ability.STR, 0)
        assert exc_info.value.user_friendly == "Generate ability scores before assigning them"

    def test_materialize(self, pooled_state):
        state = _assign_all(pooled_state)
        assert ws.is_complete(state)
        scores = ws.materialize(state)
        assert scores == {
            Ability.STR: 8,
            Ability.DEX: 14,
            Ability.CON: 13,
            Ability.INT: 15,
            Ability.WIS: 12,
            Ability.CHA: 10,
        }

    def test_materialize_in_display_order(self, pooled_state):
        state = pooled_state
        for position, ability in enumerate(Ability):
            state = ws.assign(state, ability, position)
        assert {ability.value: score for ability, score in ws.materialize(state).items()} == {
            "strength": 15,
            "dexterity": 14,
            "constitution": 13,
            "intelligence": 12,
            "wisdom": 10,
            "charisma": 8,
        }

    def test_materialize_incomplete_lists_unassigned(self, pooled_state):
        state = ws.assign(pooled_state, Ability.STR, 0)
        with pytest.raises(IncompleteAssignmentError) as exc_info:
            ws.materialize(state)
        assert exc_info.value.unassigned == ["dexterity", "constitution", "intelligence", "wisdom", "charisma"]


class TestToggles:
    """Test capped skill and cantrip selections."""

    def test_toggle_selection_adds_and_removes(self):
        selected = ws.toggle_selection((), "a", 2, "skills")
        assert selected == ("a",)
        assert ws.toggle_selection(selected, "a", 2, "skills") == ()

    def test_full_selection_rejects_additions(self):
        with pytest.raises(SelectionLimitError) as exc_info:
            ws.toggle_selection(("a", "b"), "c", 2, "skills")
        assert exc_info.value.limit == 2
        assert exc_info.value.user_friendly == "You can only choose 2 skills"

    def test_double_toggle_restores_selection(self):
        original = ("a",)
        toggled = ws.toggle_selection(original, "b", 2, "skills")
        assert ws.toggle_selection(toggled, "b", 2, "skills") == original

    def test_removal_allowed_when_full(self):
        assert ws.toggle_selection(("a", "b"), "b", 2, "skills") == ("a",)

    def test_skill_limit_enforced(self, wizard_class_state):
        state = ws.toggle_skill(wizard_class_state, "skill-arcana")
        state = ws.toggle_skill(state, "skill-history")
        with pytest.raises(SelectionLimitError):
            ws.toggle_skill(state, "skill-insight")
        assert state.skills == ("skill-arcana", "skill-history")

    def test_skill_must_be_an_option(self, wizard_class_state):
        with pytest.raises(ValidationError):
            ws.toggle_skill(wizard_class_state, "skill-stealth")

    def test_cantrip_limit_enforced(self, wizard_class_state):
        state = wizard_class_state
        for spell in ("fire-bolt", "light", "mage-hand"):
            state = ws.toggle_cantrip(state, spell)
        with pytest.raises(SelectionLimitError) as exc_info:
            ws.toggle_cantrip(state, "minor-illusion")
        assert exc_info.value.user_friendly == "You can only choose 3 cantrips"


class TestSubmitValidation:
    """Test validate_for_submit and build_character_fields."""

    @pytest.fixture
    def complete_state(self, wizard_class_state):
        state = ws.set_details(wizard_class_state, name="Elara", background="acolyte", alignment="neutral-good")
        state = ws.select_race(state, "elf", (Ability.DEX,))
        state = ws.accept_pool(state, STANDARD_ARRAY, "standard_array")
        state = _assign_all(state)
        state = ws.toggle_skill(state, "skill-arcana")
        state = ws.toggle_skill(state, "skill-history")
        for spell in ("fire-bolt", "light", "mage-hand"):
            state = ws.toggle_cantrip(state, spell)
        return state

    def test_complete_draft_builds_fields(self, complete_state):
        scores = ws.validate_for_submit(complete_state)
        fields = ws.build_character_fields(complete_state, scores)
        assert fields["name"] == "Elara"
        assert fields["character_class"] == "wizard"
        assert fields["constitution"] == 13
        assert fields["proficiencies"] == ["daggers", "skill-arcana", "skill-history"]
        assert fields["spells"] == ["fire-bolt", "light", "mage-hand"]

    def test_missing_name(self, complete_state):
        state = ws.set_details(complete_state, name="")
        with pytest.raises(ValidationError) as exc_info:
            ws.validate_for_submit(state)
        assert exc_info.value.user_friendly == "Please choose a name before saving"

    def test_wrong_skill_count(self, complete_state):
        state = ws.toggle_skill(complete_state, "skill-history")
        with pytest.raises(ValidationError) as exc_info:
            ws.validate_for_submit(state)
        assert exc_info.value.user_friendly == "Please choose exactly 2 skills"

    def test_unassigned_ability(self, complete_state):
        state = ws.assign(complete_state, Ability.STR, None)
        with pytest.raises(IncompleteAssignmentError):
            ws.validate_for_submit(state)
