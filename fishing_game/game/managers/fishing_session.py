import logging
import random
from typing import NamedTuple, Optional

from ...config import settings
from ...core.models import SessionOutcome, SessionState
from ..exceptions import SpeciesNotFoundException
from ..presentation import LoggingPresentation, PresentationBridge
from .fish_catalog import FishCatalog

log = logging.getLogger(__name__)

FISH_ON_STATES = (SessionState.PERFECT_WINDOW, SessionState.LATE_WINDOW)
CASTING_STATES = (SessionState.WAITING_FOR_BITE,) + FISH_ON_STATES


class ReelResult(NamedTuple):
    species_id: int
    reaction_elapsed: float


class FishingSession:
    """
    Tick-driven state machine for one casting attempt.

    Time only moves through tick(delta). Deadlines are absolute values on the
    session clock, which restarts at zero on every cast. Within a frame the
    host ticks before dispatching input, so a reel that arrives in the frame
    the bite window expires finds the fish already gone.
    """

    def __init__(self, catalog: FishCatalog, presentation: Optional[PresentationBridge] = None,
                 rng: Optional[random.Random] = None,
                 bite_delay_min: Optional[float] = None, bite_delay_max: Optional[float] = None,
                 perfect_window: Optional[float] = None, total_window: Optional[float] = None):
        self.catalog = catalog
        self.presentation = presentation or LoggingPresentation()
        self.rng = rng or random.Random()
        self.bite_delay_min = settings.BITE_DELAY_MIN if bite_delay_min is None else bite_delay_min
        self.bite_delay_max = settings.BITE_DELAY_MAX if bite_delay_max is None else bite_delay_max
        self.perfect_window = settings.PERFECT_WINDOW if perfect_window is None else perfect_window
        self.total_window = settings.TOTAL_WINDOW if total_window is None else total_window

        self.state = SessionState.IDLE
        self.can_cast = True
        self.last_outcome: Optional[SessionOutcome] = None
        self.hooked_species_id: Optional[int] = None
        self.cast_strength = 0.0
        self.escape_count = 0
        self.clock = 0.0
        self.reaction_elapsed = 0.0
        self.bite_deadline: Optional[float] = None
        self.perfect_window_end: Optional[float] = None
        self.total_window_end: Optional[float] = None

    @property
    def is_casting(self) -> bool:
        return self.state in CASTING_STATES

    @property
    def is_fish_on(self) -> bool:
        return self.state in FISH_ON_STATES

    # --- Player actions ---

    def cast(self, cast_strength: float = 0.0) -> bool:
        """Puts the line in the water. Only valid from idle with casting allowed."""
        if self.state != SessionState.IDLE or not self.can_cast:
            log.debug(f"Cast ignored (state: {self.state.value}, can_cast: {self.can_cast})")
            return False

        self.clock = 0.0
        try:
            self._schedule_bite(0.0)
        except SpeciesNotFoundException as e:
            log.error(f"Cannot cast, no species available: {e}")
            return False

        self.can_cast = False
        self.cast_strength = cast_strength
        self.last_outcome = None
        self.escape_count = 0
        self.state = SessionState.WAITING_FOR_BITE
        log.info(f"Line cast (strength {cast_strength:.2f}); bite due at {self.bite_deadline:.2f}s")
        return True

    def reel(self) -> Optional[ReelResult]:
        """Hooks the biting fish. Returns None unless a fish is on the line."""
        if not self.is_fish_on:
            log.debug(f"Reel ignored (state: {self.state.value})")
            return None

        result = ReelResult(species_id=self.hooked_species_id, reaction_elapsed=self.reaction_elapsed)
        window = "perfect" if self.state == SessionState.PERFECT_WINDOW else "late"
        self._clear_deadlines()
        self.state = SessionState.RESOLVED
        self.last_outcome = SessionOutcome.SUCCESS
        self.presentation.show_bite_alert(False)
        log.info(f"Reeled in species {result.species_id} after {result.reaction_elapsed:.3f}s ({window} window)")
        return result

    def retract_early(self) -> bool:
        """Pulls the line out before anything bites. Casting is allowed again at once."""
        if self.state != SessionState.WAITING_FOR_BITE:
            log.debug(f"Early retract ignored (state: {self.state.value})")
            return False

        self._clear_deadlines()
        self.last_outcome = SessionOutcome.EARLY
        self.hooked_species_id = None
        self.state = SessionState.IDLE
        self.can_cast = True
        log.info("Line retracted before a bite.")
        return True

    def cancel(self) -> bool:
        """Forced stop. Discards any in-flight bite; casting stays blocked until allow_casting()."""
        if self.state == SessionState.IDLE:
            return False

        was_fish_on = self.is_fish_on
        self._clear_deadlines()
        self.hooked_species_id = None
        self.state = SessionState.IDLE
        if was_fish_on:
            self.presentation.show_bite_alert(False)
        log.info("Fishing session cancelled.")
        return True

    def set_can_cast(self, allowed: bool):
        if allowed:
            self.allow_casting()
        else:
            self.cancel()
            self.can_cast = False

    def allow_casting(self):
        """Re-enables casting, e.g. once the catch panel is dismissed."""
        self.can_cast = True
        if self.state == SessionState.RESOLVED:
            self.state = SessionState.IDLE

    # --- Timers ---

    def tick(self, delta: float):
        """Advances the session clock and fires every deadline that falls inside it."""
        if delta <= 0 or not self.is_casting:
            return

        self.clock += delta
        while True:
            if self.state == SessionState.WAITING_FOR_BITE:
                if self.clock < self.bite_deadline:
                    break
                self._start_bite()
            elif self.state in FISH_ON_STATES:
                reaction = self.clock - self.bite_deadline
                if reaction >= self.total_window:
                    self._escape()
                elif self.state == SessionState.PERFECT_WINDOW and reaction > self.perfect_window:
                    self.state = SessionState.LATE_WINDOW
                    log.debug("Perfect window closed; late window open.")
                else:
                    self.reaction_elapsed = reaction
                    break
            else:
                break

    def _schedule_bite(self, start: float):
        species_id, _ = self.catalog.get_random_species()
        self.hooked_species_id = species_id
        self.bite_deadline = start + self.rng.uniform(self.bite_delay_min, self.bite_delay_max)
        self.perfect_window_end = None
        self.total_window_end = None
        self.reaction_elapsed = 0.0

    def _start_bite(self):
        self.state = SessionState.PERFECT_WINDOW
        self.reaction_elapsed = 0.0
        self.perfect_window_end = self.bite_deadline + self.perfect_window
        self.total_window_end = self.bite_deadline + self.total_window
        self.presentation.show_bite_alert(True)
        log.debug(f"Fish on! Species {self.hooked_species_id} at {self.bite_deadline:.2f}s")

    def _escape(self):
        expired_at = self.total_window_end
        self.escape_count += 1
        self.last_outcome = SessionOutcome.ESCAPED
        self.presentation.show_bite_alert(False)
        log.info(f"Fish got away! Too slow (species {self.hooked_species_id}).")
        self.state = SessionState.WAITING_FOR_BITE
        self._schedule_bite(expired_at)

    def _clear_deadlines(self):
        self.bite_deadline = None
        self.perfect_window_end = None
        self.total_window_end = None
