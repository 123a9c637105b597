"""
Wizard service: owns each user's draft character.

Drafts live in process memory, one per user, and are dropped on submit or
reset. The service only fetches catalog data and stores states; every
change to a draft goes through the pure transitions in
``charforge.game.wizard_state``.

Transitions that await the catalog remember the draft revision they started
from. If the draft moved on in the meantime, the fetched result is stale and
is discarded rather than applied.
"""

import uuid
from collections.abc import Callable

from ..exceptions import ValidationError
from ..game import wizard_state as transitions
from ..game.abilities import ABILITY_SCORE_MAP, Ability, parse_ability
from ..game.stats_generator import StatsGenerator
from ..game.wizard_state import WizardState
from ..models.character import Character
from ..schemas.reference import ClassDetail, RaceDetail
from ..structured_logging.enhanced_logging_config import get_logger
from .character_service import CharacterService
from .reference_client import ReferenceCatalogClient

logger = get_logger(__name__)


class WizardService:
    """Holds and advances per-user wizard drafts."""

    def __init__(
        self,
        catalog: ReferenceCatalogClient,
        character_service: CharacterService,
        stats_generator: StatsGenerator | None = None,
    ) -> None:
        self.catalog = catalog
        self.character_service = character_service
        self.stats_generator = stats_generator or StatsGenerator()
        self._drafts: dict[uuid.UUID, WizardState] = {}
        logger.info("WizardService initialized")

    def get_state(self, user_id: uuid.UUID) -> WizardState:
        """The user's current draft, created empty on first access."""
        state = self._drafts.get(user_id)
        if state is None:
            state = WizardState()
            self._drafts[user_id] = state
        return state

    def _apply(self, user_id: uuid.UUID, transition: Callable[[WizardState], WizardState]) -> WizardState:
        new_state = transition(self.get_state(user_id))
        self._drafts[user_id] = new_state
        return new_state

    def _apply_if_current(
        self, user_id: uuid.UUID, started: WizardState, transition: Callable[[WizardState], WizardState], what: str
    ) -> WizardState:
        current = self.get_state(user_id)
        if current.revision != started.revision:
            logger.info(
                "Discarding stale wizard result",
                user_id=str(user_id),
                result=what,
                started_revision=started.revision,
                current_revision=current.revision,
            )
            return current
        return self._apply(user_id, transition)

    def reset(self, user_id: uuid.UUID) -> WizardState:
        state = self._apply(user_id, transitions.reset)
        logger.info("Wizard draft reset", user_id=str(user_id))
        return state

    def set_details(
        self,
        user_id: uuid.UUID,
        name: str | None = None,
        background: str | None = None,
        alignment: str | None = None,
    ) -> WizardState:
        return self._apply(
            user_id, lambda state: transitions.set_details(state, name=name, background=background, alignment=alignment)
        )

    async def select_race(self, user_id: uuid.UUID, race_index: str) -> WizardState:
        """
        Fetch the race and store it with the resulting class recommendations.

        Raises:
            ResourceNotFoundError: If the catalog has no such race
            NetworkError: If the catalog cannot be reached
        """
        started = self.get_state(user_id)
        race: RaceDetail = await self.catalog.fetch_detail(f"races/{race_index}", "race")  # type: ignore[assignment]

        bonuses = tuple(
            dict.fromkeys(
                ABILITY_SCORE_MAP[bonus.ability_score.index]
                for bonus in race.ability_bonuses
                if bonus.ability_score.index in ABILITY_SCORE_MAP
            )
        )
        return self._apply_if_current(
            user_id, started, lambda state: transitions.select_race(state, race.index, bonuses), "race"
        )

    async def select_class(self, user_id: uuid.UUID, class_index: str) -> WizardState:
        """
        Fetch the class, then its cantrip list, and store both.

        Raises:
            ResourceNotFoundError: If the catalog has no such class
            NetworkError: If the catalog cannot be reached
        """
        started = self.get_state(user_id)
        class_detail: ClassDetail = await self.catalog.fetch_detail(  # type: ignore[assignment]
            f"classes/{class_index}", "class"
        )
        cantrips = await self.catalog.get_cantrips(class_detail.index, class_detail)

        return self._apply_if_current(
            user_id,
            started,
            lambda state: transitions.select_class(
                state,
                class_detail.index,
                hit_die=class_detail.hit_die,
                proficiencies=tuple(class_detail.fixed_proficiencies()),
                skill_options=tuple(class_detail.skill_options()),
                cantrip_options=tuple(spell.index for spell in cantrips),
            ),
            "class",
        )

    def generate_stats(self, user_id: uuid.UUID, method: str) -> WizardState:
        """Generate a fresh pool; any existing assignment is cleared."""
        pool = self.stats_generator.generate_pool(method)
        return self._apply(user_id, lambda state: transitions.accept_pool(state, pool, method))

    def assign(self, user_id: uuid.UUID, ability: str | Ability, pool_index: int | None) -> WizardState:
        """
        Bind an ability to a pool entry (None clears it).

        Raises:
            ValidationError: If the ability name or pool index is invalid
        """
        try:
            resolved = ability if isinstance(ability, Ability) else parse_ability(ability)
        except ValueError as e:
            raise ValidationError(
                f"Unknown ability: {ability}",
                field="ability",
                value=ability,
                user_friendly=f"'{ability}' is not an ability",
            ) from e
        return self._apply(user_id, lambda state: transitions.assign(state, resolved, pool_index))

    def toggle_skill(self, user_id: uuid.UUID, skill_index: str) -> WizardState:
        return self._apply(user_id, lambda state: transitions.toggle_skill(state, skill_index))

    def toggle_cantrip(self, user_id: uuid.UUID, spell_index: str) -> WizardState:
        return self._apply(user_id, lambda state: transitions.toggle_cantrip(state, spell_index))

    async def submit(self, user_id: uuid.UUID) -> Character:
        """
        Validate the draft, save it as a character and drop the draft.

        The draft is taken out before saving, so a second submit arriving
        while the first is in flight sees an empty draft and is rejected. It
        is put back if validation or saving fails.
        """
        taken = self._drafts.pop(user_id, None)
        state = taken if taken is not None else WizardState()
        try:
            scores = transitions.validate_for_submit(state)
            fields = transitions.build_character_fields(state, scores)
            character = await self.character_service.create_character(user_id, fields)
        except BaseException:
            # Keep any draft started while this submit was in flight
            if taken is not None:
                self._drafts.setdefault(user_id, taken)
            raise

        logger.info("Wizard draft submitted", user_id=str(user_id), character_id=str(character.id))
        return character
