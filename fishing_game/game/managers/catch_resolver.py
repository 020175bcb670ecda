import logging
import math
import random
from typing import List, Optional

from ...config import settings
from ...core.models import CatchResult, FishSpecies, HookYield, PlayerUpgrades

log = logging.getLogger(__name__)


def timing_multiplier(reaction_elapsed: float, perfect_window: Optional[float] = None,
                      perfect_multiplier: Optional[float] = None) -> float:
    """Yield bonus for reeling inside the perfect window."""
    perfect_window = settings.PERFECT_WINDOW if perfect_window is None else perfect_window
    perfect_multiplier = settings.PERFECT_MULTIPLIER if perfect_multiplier is None else perfect_multiplier
    return perfect_multiplier if reaction_elapsed <= perfect_window else 1.0


def catch_points(hook_count: int, prestige_level: int, prestige_base: Optional[int] = None) -> int:
    """Half a point per hooked fish, rounded half up, scaled by prestige."""
    prestige_base = settings.PRESTIGE_POINTS_BASE if prestige_base is None else prestige_base
    base_points = math.floor(hook_count / 2 + 0.5)
    return base_points * prestige_base ** prestige_level


class CatchResolver:
    """Turns a reel into a randomized catch: weights, lengths, money and points."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.variance_min = settings.YIELD_VARIANCE_MIN
        self.variance_max = settings.YIELD_VARIANCE_MAX

    def resolve(self, species: FishSpecies, hook_count: int, reaction_elapsed: float,
                upgrades: PlayerUpgrades, prestige_level: int) -> CatchResult:
        timing = timing_multiplier(reaction_elapsed)
        hooks: List[HookYield] = []
        total_value = 0.0
        for _ in range(hook_count):
            weight = species.base_weight * self.rng.uniform(self.variance_min, self.variance_max)
            length = species.base_length * self.rng.uniform(self.variance_min, self.variance_max)
            weight *= timing * upgrades.weight_mult
            length *= timing * upgrades.length_mult
            total_value += weight + length
            hooks.append(HookYield(weight=weight, length=length))

        display = hooks[0] if hooks else HookYield(weight=0.0, length=0.0)
        result = CatchResult(
            species_id=species.id,
            display_weight=display.weight,
            display_length=display.length,
            hook_count=hook_count,
            total_value=total_value,
            money_earned=math.floor(total_value),
            points_earned=catch_points(hook_count, prestige_level),
            perfect=reaction_elapsed <= settings.PERFECT_WINDOW,
            hooks=hooks,
        )
        log.info(f"Caught {hook_count} {species.name}(s) for ${result.money_earned} and {result.points_earned} pts"
                 f"{' (perfect!)' if result.perfect else ''}")
        return result
