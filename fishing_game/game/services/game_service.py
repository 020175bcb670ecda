import logging
import random
from typing import Any, Dict, Optional

from ...core.models import CatchResult, DayOutcome, DayPhase
from ...database.repositories.base_repository import StatsRepository
from ..exceptions import (CatchAbandonedException, InvalidActionException, SpeciesNotFoundException,
                          StatIndexOutOfRangeException)
from ..managers.catch_resolver import CatchResolver
from ..managers.economy_manager import EconomyEngine
from ..managers.fish_catalog import FishCatalog
from ..managers.fishing_session import FishingSession
from ..managers.shop_manager import ShopManager
from ..presentation import SCENE_BEACH, SCENE_SHOP, LoggingPresentation, PresentationBridge

log = logging.getLogger(__name__)


class GameService:
    """
    Composition root for one player's game: fishing session, catch
    resolution, economy and shop.

    Managers treat disallowed actions as no-ops; this layer turns them into
    InvalidActionException so callers can report the rejection.
    """

    def __init__(self, catalog: FishCatalog, presentation: Optional[PresentationBridge] = None,
                 repository: Optional[StatsRepository] = None, rng: Optional[random.Random] = None,
                 economy: Optional[EconomyEngine] = None):
        self.catalog = catalog
        self.presentation = presentation or LoggingPresentation()
        if economy is None:
            # A passed-in economy already carries the player's stats
            economy = EconomyEngine(catalog.get_species_count(), repository, self.presentation)
            economy.load_stats()
        self.economy = economy
        self.economy.presentation = self.presentation
        self.session = FishingSession(catalog, self.presentation, rng=rng)
        self.resolver = CatchResolver(rng=rng)
        self.shop = ShopManager(self.economy)
        self.last_catch: Optional[CatchResult] = None
        log.info("GameService initialized.")

    def attach_scene_context(self, catalog: FishCatalog, presentation: PresentationBridge):
        """Re-links scene-owned collaborators when the host enters a scene."""
        log.info(f"Attaching scene context ({catalog.get_species_count()} species)")
        self.catalog = catalog
        self.presentation = presentation
        self.session.catalog = catalog
        self.session.presentation = presentation
        self.economy.presentation = presentation
        if catalog.get_species_count() != self.economy.species_count:
            self.economy.species_count = catalog.get_species_count()
            self.economy.stats.lifetime.per_species.resize(self.economy.species_count)
        self.economy.notify_hud()

    # --- Frame update ---

    def tick(self, delta: float) -> Optional[DayOutcome]:
        """
        One frame. The day clock runs first; if the day ends, the fishing
        session is stopped in the same frame so nothing can be caught after it.
        Inputs for the frame are dispatched after this returns.
        """
        outcome = self.economy.tick(delta)
        if outcome is not None:
            self.session.set_can_cast(False)
            return outcome
        self.session.tick(delta)
        return None

    # --- Player input ---

    def handle_cast(self, cast_strength: float = 0.0):
        if self.economy.phase != DayPhase.ACTIVE_DAY:
            raise InvalidActionException("Cannot cast, the day is over.")
        if not self.session.cast(cast_strength):
            raise InvalidActionException("Cannot cast line right now.")

    def handle_reel(self) -> CatchResult:
        """
        Reels in and credits the catch. If the species or its stats slot is
        missing the catch is abandoned: casting is allowed again and
        CatchAbandonedException is raised for the caller to report.
        """
        reel = self.session.reel()
        if reel is None:
            raise InvalidActionException("Nothing on the line to reel in.")

        upgrades = self.economy.upgrades
        try:
            species = self.catalog.get_species(reel.species_id)
            slot = self.catalog.index_of(reel.species_id)
            result = self.resolver.resolve(species, upgrades.hook_level, reel.reaction_elapsed,
                                           upgrades, self.economy.economy.prestige_level)
            self.economy.apply_catch(result, slot)
        except (SpeciesNotFoundException, StatIndexOutOfRangeException) as e:
            log.error(f"Catch abandoned: {e}")
            self.session.allow_casting()
            raise CatchAbandonedException(str(e)) from e

        self.last_catch = result
        self.presentation.show_catch_result(result)
        return result

    def handle_retract(self):
        if not self.session.retract_early():
            raise InvalidActionException("Cannot retract, no line waiting for a bite.")

    def handle_cancel(self):
        """Player-initiated stop; they may cast again straight away."""
        if not self.session.cancel():
            raise InvalidActionException("Cannot cancel cast, not currently fishing.")
        self.session.allow_casting()

    def dismiss_catch(self):
        """Catch panel closed."""
        self.last_catch = None
        if self.economy.phase == DayPhase.ACTIVE_DAY:
            self.session.allow_casting()

    def open_panel(self):
        """A panel that blocks fishing opened; any cast in progress is dropped."""
        self.session.set_can_cast(False)

    def close_panel(self):
        if self.economy.phase == DayPhase.ACTIVE_DAY:
            self.session.allow_casting()

    def open_shop(self):
        self.open_panel()
        self.presentation.trigger_scene_transition(SCENE_SHOP)

    def purchase_upgrade(self, kind: str):
        if not self.shop.purchase(kind):
            raise InvalidActionException(f"Cannot buy '{kind}' upgrade.")

    # --- Progression ---

    def start_next_day(self):
        if not self.economy.start_next_day():
            raise InvalidActionException("The next day cannot start yet.")
        self.session.allow_casting()
        self.presentation.trigger_scene_transition(SCENE_BEACH)

    def continue_game(self):
        if not self.economy.continue_game():
            raise InvalidActionException("Can only continue after paying off the debt.")
        self.session.allow_casting()
        self.presentation.trigger_scene_transition(SCENE_BEACH)

    def get_state(self) -> Dict[str, Any]:
        """Snapshot for clients."""
        return {
            "economy": self.economy.economy.model_dump(),
            "phase": self.economy.phase.value,
            "time": self.economy.time_string,
            "fishCaughtToday": self.economy.daily.fish_caught_today,
            "upgrades": self.economy.upgrades.model_dump(),
            "upgradeCosts": self.shop.get_costs(),
            "session": {
                "state": self.session.state.value,
                "canCast": self.session.can_cast,
                "lastOutcome": self.session.last_outcome.value if self.session.last_outcome else None,
            },
            "highScore": self.economy.stats.high_score,
        }
