"""
Character wizard draft state and its pure transitions.

A WizardState is immutable; every transition returns a new state. Any
change bumps ``revision`` so results of network fetches started against an
older revision can be recognised as stale and discarded.

The stat allocator keeps one slot per ability (in display order) holding
either None or an index into the current pool. No two abilities ever hold
the same index.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from ..error_types import ErrorMessages
from ..exceptions import IncompleteAssignmentError, SelectionLimitError, ValidationError
from .abilities import ABILITY_ORDER, Ability
from .class_tables import cantrip_limit, recommended_classes, skill_limit
from .stats_generator import POOL_SIZE

_UNASSIGNED: tuple[int | None, ...] = (None,) * len(ABILITY_ORDER)


@dataclass(frozen=True)
class WizardState:
    """A user's in-progress character."""

    revision: int = 0
    name: str | None = None
    background: str | None = None
    alignment: str | None = None

    race: str | None = None
    race_bonuses: tuple[Ability, ...] = ()
    recommended_classes: tuple[str, ...] = ()

    character_class: str | None = None
    hit_die: int | None = None
    class_proficiencies: tuple[str, ...] = ()
    skill_options: tuple[str, ...] = ()
    cantrip_options: tuple[str, ...] = ()

    stat_method: str | None = None
    pool: tuple[int, ...] = ()
    assignment: tuple[int | None, ...] = field(default=_UNASSIGNED)

    skills: tuple[str, ...] = ()
    cantrips: tuple[str, ...] = ()

    @property
    def skill_limit(self) -> int:
        return skill_limit(self.character_class)

    @property
    def cantrip_limit(self) -> int:
        return cantrip_limit(self.character_class)

    def assignment_map(self) -> dict[Ability, int | None]:
        """Ability to pool index (or None), in display order."""
        return dict(zip(ABILITY_ORDER, self.assignment, strict=True))


def _advance(state: WizardState, **changes: Any) -> WizardState:
    return replace(state, revision=state.revision + 1, **changes)


def reset(state: WizardState) -> WizardState:
    """Discard the draft, keeping the revision sequence monotonic."""
    return WizardState(revision=state.revision + 1)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def set_details(
    state: WizardState,
    name: str | None = None,
    background: str | None = None,
    alignment: str | None = None,
) -> WizardState:
    """Update identity fields; arguments left as None keep their current value."""
    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = _clean(name)
    if background is not None:
        changes["background"] = _clean(background)
    if alignment is not None:
        changes["alignment"] = _clean(alignment)
    if not changes:
        return state
    return _advance(state, **changes)


def select_race(state: WizardState, race_index: str, bonus_abilities: tuple[Ability, ...]) -> WizardState:
    """Store the race and recompute the recommended classes from its ability bonuses."""
    return _advance(
        state,
        race=race_index,
        race_bonuses=tuple(bonus_abilities),
        recommended_classes=tuple(recommended_classes(bonus_abilities)),
    )


def select_class(  # pylint: disable=too-many-arguments
    state: WizardState,
    class_index: str,
    *,
    hit_die: int,
    proficiencies: tuple[str, ...],
    skill_options: tuple[str, ...],
    cantrip_options: tuple[str, ...],
) -> WizardState:
    """Store the class and its options. Skill and cantrip selections start over."""
    return _advance(
        state,
        character_class=class_index,
        hit_die=hit_die,
        class_proficiencies=tuple(proficiencies),
        skill_options=tuple(skill_options),
        cantrip_options=tuple(cantrip_options),
        skills=(),
        cantrips=(),
    )


def accept_pool(state: WizardState, pool: tuple[int, ...], method: str) -> WizardState:
    """
    Replace the stat pool. The assignment map is cleared.

    Raises:
        ValidationError: If the pool is not six positive integers
    """
    if len(pool) != POOL_SIZE or any(value < 1 for value in pool):
        raise ValidationError(
            f"Stat pool must be {POOL_SIZE} positive integers, got {list(pool)}",
            field="pool",
            value=list(pool),
        )
    return _advance(state, pool=tuple(pool), stat_method=method, assignment=_UNASSIGNED)


def assign(state: WizardState, ability: Ability, pool_index: int | None) -> WizardState:
    """
    Bind an ability to a pool entry, or clear it with None.

    Any other ability holding ``pool_index`` is silently unassigned first.
    Repeating an identical call returns the state unchanged.

    Raises:
        ValidationError: If there is no pool or the index is out of range
    """
    if pool_index is not None and not 0 <= pool_index < len(state.pool):
        raise ValidationError(
            f"Pool index {pool_index} out of range for pool of size {len(state.pool)}",
            field="pool_index",
            value=pool_index,
            user_friendly="Generate ability scores before assigning them"
            if not state.pool
            else f"Choose a score between 0 and {len(state.pool) - 1}",
        )

    position = ABILITY_ORDER.index(ability)
    slots = list(state.assignment)
    if pool_index is not None:
        slots = [None if slot == pool_index else slot for slot in slots]
    slots[position] = pool_index

    new_assignment = tuple(slots)
    if new_assignment == state.assignment:
        return state
    return _advance(state, assignment=new_assignment)


def is_complete(state: WizardState) -> bool:
    """All six abilities are bound to a pool entry."""
    return bool(state.pool) and all(slot is not None for slot in state.assignment)


def materialize(state: WizardState) -> dict[Ability, int]:
    """
    Resolve the assignment into ability scores.

    Raises:
        IncompleteAssignmentError: If any ability is still unassigned
    """
    if not is_complete(state):
        unassigned = [
            ability.value for ability, slot in zip(ABILITY_ORDER, state.assignment, strict=True) if slot is None
        ]
        raise IncompleteAssignmentError(
            f"Unassigned abilities: {', '.join(unassigned)}",
            unassigned=unassigned,
            user_friendly=ErrorMessages.INCOMPLETE_ASSIGNMENT,
        )
    pairs = zip(ABILITY_ORDER, state.assignment, strict=True)
    return {ability: state.pool[slot] for ability, slot in pairs}  # type: ignore[index]


def toggle_selection(selected: tuple[str, ...], item: str, limit: int, label: str) -> tuple[str, ...]:
    """
    Toggle membership of ``item`` in a capped selection set.

    Removing is always allowed. Adding to a full set is rejected and the set
    is left unchanged.

    Raises:
        SelectionLimitError: If the set already holds ``limit`` items
    """
    if item in selected:
        return tuple(member for member in selected if member != item)
    if len(selected) >= limit:
        raise SelectionLimitError(
            f"{label} selection is full ({len(selected)}/{limit}); rejected {item}",
            limit=limit,
            field=label,
            value=item,
            user_friendly=f"You can only choose {limit} {label}",
        )
    return selected + (item,)


def _check_option(options: tuple[str, ...], item: str, label: str) -> None:
    if item not in options:
        raise ValidationError(
            f"{item} is not an available {label} option",
            field=label,
            value=item,
            user_friendly=f"'{item}' is not one of the {label} available to this class",
        )


def toggle_skill(state: WizardState, skill_index: str) -> WizardState:
    """Toggle a skill proficiency within the class's skill limit."""
    if skill_index not in state.skills:
        _check_option(state.skill_options, skill_index, "skills")
    skills = toggle_selection(state.skills, skill_index, state.skill_limit, "skills")
    return _advance(state, skills=skills)


def toggle_cantrip(state: WizardState, spell_index: str) -> WizardState:
    """Toggle a cantrip within the class's cantrip limit."""
    if spell_index not in state.cantrips:
        _check_option(state.cantrip_options, spell_index, "cantrips")
    cantrips = toggle_selection(state.cantrips, spell_index, state.cantrip_limit, "cantrips")
    return _advance(state, cantrips=cantrips)


def validate_for_submit(state: WizardState) -> dict[Ability, int]:
    """
    Check the draft is ready to be saved and return its materialized scores.

    Raises:
        ValidationError: If a required field is missing or a selection count is wrong
        IncompleteAssignmentError: If any ability is unassigned
    """
    required = {
        "name": state.name,
        "race": state.race,
        "class": state.character_class,
        "background": state.background,
        "alignment": state.alignment,
    }
    missing = [field_name for field_name, value in required.items() if not value]
    if missing:
        raise ValidationError(
            f"Missing required selections: {', '.join(missing)}",
            field=missing[0],
            details={"missing": missing},
            user_friendly=f"Please choose a {missing[0]} before saving",
        )

    scores = materialize(state)

    if len(state.skills) != state.skill_limit:
        raise ValidationError(
            f"Expected {state.skill_limit} skills, got {len(state.skills)}",
            field="skills",
            user_friendly=f"Please choose exactly {state.skill_limit} skills",
        )
    if len(state.cantrips) != state.cantrip_limit:
        raise ValidationError(
            f"Expected {state.cantrip_limit} cantrips, got {len(state.cantrips)}",
            field="cantrips",
            user_friendly=f"Please choose exactly {state.cantrip_limit} cantrips",
        )
    return scores


def build_character_fields(state: WizardState, scores: dict[Ability, int]) -> dict[str, Any]:
    """Flatten a validated draft into the fields of a new character record."""
    proficiencies = list(dict.fromkeys(state.class_proficiencies + state.skills))
    return {
        "name": state.name,
        "race": state.race,
        "character_class": state.character_class,
        "background": state.background,
        "alignment": state.alignment,
        **{ability.value: score for ability, score in scores.items()},
        "proficiencies": proficiencies,
        "spells": list(state.cantrips),
    }
