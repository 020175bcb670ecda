import logging
import math
from typing import Optional

from ...config import settings
from ...core.models import (CatchResult, DailyStats, DayOutcome, DayPhase, PlayerEconomy,
                            PlayerStats, PlayerUpgrades)
from ...database.repositories.base_repository import StatsRepository
from ..exceptions import StatsPersistenceException
from ..presentation import (SCENE_DAY_OVER, SCENE_GAME_OVER, SCENE_VICTORY,
                            LoggingPresentation, PresentationBridge)

log = logging.getLogger(__name__)


def victory_bonus(days_remaining: int, prestige_level: int,
                  start: Optional[int] = None, prestige_base: Optional[int] = None) -> int:
    """Points for finishing early: start value, halved (floored) for each further day."""
    start = settings.VICTORY_BONUS_START if start is None else start
    prestige_base = settings.PRESTIGE_POINTS_BASE if prestige_base is None else prestige_base
    bonus = 0
    term = start
    for _ in range(max(days_remaining, 0)):
        bonus += term
        term //= 2
    return bonus * prestige_base ** prestige_level


def format_game_time(game_minutes: float) -> str:
    minutes = int(game_minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class EconomyEngine:
    """
    Owns the player's money, debt, points, prestige and stats, and the day
    cycle that decides whether the run continues, is won, or is lost.

    Every mutation of PlayerEconomy goes through this class, synchronously,
    from the host's tick or input handlers.
    """

    def __init__(self, species_count: int, repository: Optional[StatsRepository] = None,
                 presentation: Optional[PresentationBridge] = None,
                 base_debt: Optional[int] = None, interest_rate: Optional[float] = None,
                 max_days: Optional[int] = None):
        self.species_count = species_count
        self.repository = repository
        self.presentation = presentation or LoggingPresentation()
        self.interest_rate = settings.INTEREST_RATE if interest_rate is None else interest_rate
        self.max_days = settings.MAX_DAYS if max_days is None else max_days
        self.time_scale = settings.TIME_SCALE
        self.day_start_minutes = settings.DAY_START_MINUTES
        self.day_end_minutes = settings.DAY_END_MINUTES

        debt = settings.BASE_DEBT if base_debt is None else base_debt
        self.economy = PlayerEconomy(base_debt=debt, current_debt=debt, game_minutes=self.day_start_minutes)
        self.upgrades = PlayerUpgrades()
        self.stats = PlayerStats.for_catalog(species_count)
        self.daily = DailyStats()
        self.phase = DayPhase.ACTIVE_DAY
        self.last_points_interest = 0
        self.last_victory_bonus = 0

    # --- Persistence ---

    def load_stats(self) -> bool:
        """Loads the stored record; anything missing or unreadable leaves the defaults."""
        if self.repository is None:
            return False
        try:
            stored = self.repository.load()
        except StatsPersistenceException as e:
            log.warning(f"Using default stats, stored record unreadable: {e}")
            return False
        if stored is None:
            return False

        table = stored.lifetime.per_species
        if table.size != self.species_count:
            log.warning(f"Stored stats cover {table.size} species, catalog has {self.species_count}; resizing.")
            table.resize(self.species_count)
        self.stats = stored
        log.info(f"Loaded stats: {stored.lifetime.overall.num_caught} fish caught, high score {stored.high_score}")
        return True

    def persist_stats(self) -> bool:
        if self.repository is None:
            return False
        saved = self.repository.save(self.stats)
        if not saved:
            log.warning("Stats were not saved; play continues.")
        return saved

    # --- Day clock ---

    @property
    def time_string(self) -> str:
        return format_game_time(self.economy.game_minutes)

    def tick(self, delta: float) -> Optional[DayOutcome]:
        """Advances the in-game clock. Returns the day-end outcome on the tick the day ends."""
        if self.phase != DayPhase.ACTIVE_DAY or delta <= 0:
            return None
        self.economy.game_minutes += delta * self.time_scale
        if self.economy.game_minutes >= self.day_end_minutes:
            self.economy.game_minutes = self.day_end_minutes
            self.notify_hud()
            return self.evaluate_day_end()
        self.notify_hud()
        return None

    def notify_hud(self):
        e = self.economy
        self.presentation.update_hud(e.day, self.time_string, e.current_debt, e.points, e.prestige_level)

    # --- Catches ---

    def apply_catch(self, result: CatchResult, slot: int) -> bool:
        """
        Credits a catch to the per-species stats at `slot` (see FishCatalog.index_of).
        Slots are checked before anything changes, so a bad slot raises
        StatIndexOutOfRangeException with no mutation.
        """
        if self.phase != DayPhase.ACTIVE_DAY:
            log.warning(f"Catch ignored outside an active day (phase: {self.phase.value})")
            return False

        lifetime = self.stats.lifetime
        species_stats = lifetime.per_species.get(slot)

        e = self.economy
        e.money += result.money_earned
        e.total_money_earned += result.money_earned
        e.points += result.points_earned
        e.current_debt -= result.money_earned
        for hook in result.hooks:
            lifetime.overall.record(hook.weight, hook.length)
            species_stats.record(hook.weight, hook.length)
        self.daily.fish_caught_today += result.hook_count

        log.info(f"Catch applied: +${result.money_earned}, +{result.points_earned} pts, debt now {e.current_debt}")
        self.notify_hud()
        return True

    def spend_points(self, amount: int) -> bool:
        if amount < 0 or self.economy.points < amount:
            return False
        self.economy.points -= amount
        self.notify_hud()
        return True

    # --- Day end ---

    def evaluate_day_end(self) -> DayOutcome:
        """Decides how the day ends. Re-evaluating a settled day returns the same outcome."""
        if self.phase == DayPhase.VICTORY:
            return DayOutcome.VICTORY
        if self.phase == DayPhase.DEFEAT:
            return DayOutcome.DEFEAT
        if self.phase == DayPhase.NEXT_DAY:
            return DayOutcome.NEXT_DAY

        self.phase = DayPhase.DAY_END_EVALUATION
        e = self.economy
        log.info(f"Day {e.day} over. Debt: {e.current_debt}, points: {e.points}")

        if e.day < self.max_days and e.current_debt > 0:
            self.last_points_interest = math.floor(e.points * settings.POINTS_INTEREST_RATE)
            e.points += self.last_points_interest
            self.persist_stats()
            self.phase = DayPhase.NEXT_DAY
            self.presentation.trigger_scene_transition(SCENE_DAY_OVER)
            return DayOutcome.NEXT_DAY

        if e.current_debt <= 0:
            return self._declare_victory()

        log.info(f"Debt of {e.current_debt} still owed after day {e.day}. Game over.")
        self.phase = DayPhase.DEFEAT
        self.presentation.trigger_scene_transition(SCENE_GAME_OVER)
        return DayOutcome.DEFEAT

    def _declare_victory(self) -> DayOutcome:
        e = self.economy
        days_remaining = self.max_days - e.day
        self.last_victory_bonus = 0
        if days_remaining > 0:
            e.extra_days_banked += days_remaining
            self.last_victory_bonus = victory_bonus(days_remaining, e.prestige_level)
            e.points += self.last_victory_bonus
        e.final_score = e.total_money_earned * (1 + e.extra_days_banked)
        if e.final_score > self.stats.high_score:
            log.info(f"New high score: {e.final_score}")
            self.stats.high_score = e.final_score

        log.info(f"Debt paid off on day {e.day}! Bonus {self.last_victory_bonus} pts, final score {e.final_score}")
        self.persist_stats()
        self.phase = DayPhase.VICTORY
        self.presentation.trigger_scene_transition(SCENE_VICTORY)
        return DayOutcome.VICTORY

    def start_next_day(self) -> bool:
        """Moves to the next day, compounding interest on any remaining debt."""
        if self.phase != DayPhase.NEXT_DAY:
            log.debug(f"start_next_day ignored (phase: {self.phase.value})")
            return False

        e = self.economy
        e.day += 1
        e.game_minutes = self.day_start_minutes
        self.daily = DailyStats()
        if e.current_debt > 0:
            interest = math.floor(e.current_debt * (self.interest_rate - 1.0))
            e.current_debt += interest
            log.info(f"Interest of {interest} added; debt now {e.current_debt}")
        self.phase = DayPhase.ACTIVE_DAY
        log.info(f"Day {e.day} begins.")
        self.notify_hud()
        return True

    def continue_game(self) -> bool:
        """Prestige: after a win, start over at day 1 with ten times the debt."""
        if self.phase != DayPhase.VICTORY:
            log.debug(f"continue_game ignored (phase: {self.phase.value})")
            return False

        e = self.economy
        e.prestige_level += 1
        e.base_debt *= settings.PRESTIGE_DEBT_MULTIPLIER
        e.current_debt = e.base_debt
        e.day = 1
        e.game_minutes = self.day_start_minutes
        self.daily = DailyStats()
        self.phase = DayPhase.ACTIVE_DAY
        log.info(f"Prestige {e.prestige_level}: new debt {e.current_debt}")
        self.notify_hud()
        return True
