import sys
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..game.exceptions import StatIndexOutOfRangeException

# Using Pydantic for data validation and clear schemas.

ACHIEVEMENT_COUNT = 12
# Sentinel for "nothing caught yet" minimums; stays finite so it survives JSON.
UNSET_MINIMUM = sys.float_info.max


class SessionState(str, Enum):
    """Where a single casting attempt currently is."""
    IDLE = "idle"
    WAITING_FOR_BITE = "waiting_for_bite"
    PERFECT_WINDOW = "perfect_window"
    LATE_WINDOW = "late_window"
    RESOLVED = "resolved"


class SessionOutcome(str, Enum):
    SUCCESS = "success"
    ESCAPED = "escaped"
    EARLY = "early"


class DayPhase(str, Enum):
    """Progression state of the economy for the current day."""
    ACTIVE_DAY = "active_day"
    DAY_END_EVALUATION = "day_end_evaluation"
    NEXT_DAY = "next_day"
    VICTORY = "victory"
    DEFEAT = "defeat"


class DayOutcome(str, Enum):
    NEXT_DAY = "next_day"
    VICTORY = "victory"
    DEFEAT = "defeat"


class FishSpecies(BaseModel):
    """A catalog entry. Base stats are scaled per catch."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    base_weight: float
    base_length: float


class HookYield(BaseModel):
    """Randomized weight and length of one hooked fish."""
    weight: float
    length: float


class CatchResult(BaseModel):
    """Outcome of one successful reel (one or more hooked fish)."""
    species_id: int
    display_weight: float
    display_length: float
    hook_count: int
    total_value: float
    money_earned: int
    points_earned: int
    perfect: bool = False
    hooks: List[HookYield] = Field(default_factory=list)


class PlayerUpgrades(BaseModel):
    """Shop-bought multipliers applied to every catch."""
    weight_mult: float = 1.0
    length_mult: float = 1.0
    hook_level: int = 1
    weight_level: int = 1
    length_level: int = 1


class PlayerEconomy(BaseModel):
    """Money, debt and progression totals. Only EconomyEngine mutates this."""
    money: int = 0
    total_money_earned: int = 0
    points: int = 0
    base_debt: int = 0
    current_debt: int = 0
    prestige_level: int = 0
    day: int = 1
    game_minutes: float = 0.0
    extra_days_banked: int = 0
    final_score: int = 0


class SpeciesStats(BaseModel):
    """Count and extremes for a group of caught fish."""
    num_caught: int = 0
    heaviest: float = 0.0
    lightest: float = UNSET_MINIMUM
    longest: float = 0.0
    shortest: float = UNSET_MINIMUM

    def record(self, weight: float, length: float):
        self.num_caught += 1
        if weight > self.heaviest:
            self.heaviest = weight
        if weight < self.lightest:
            self.lightest = weight
        if length > self.longest:
            self.longest = length
        if length < self.shortest:
            self.shortest = length


class StatsTable(BaseModel):
    """Fixed-size per-species stats, addressed by catalog index."""
    slots: List[SpeciesStats] = Field(default_factory=list)

    @classmethod
    def sized(cls, count: int) -> "StatsTable":
        return cls(slots=[SpeciesStats() for _ in range(count)])

    @property
    def size(self) -> int:
        return len(self.slots)

    def check_index(self, index: int) -> int:
        if not 0 <= index < len(self.slots):
            raise StatIndexOutOfRangeException(index, len(self.slots))
        return index

    def get(self, index: int) -> SpeciesStats:
        return self.slots[self.check_index(index)]

    def resize(self, count: int):
        """Pads with empty slots or drops trailing ones to match the catalog."""
        if count > len(self.slots):
            self.slots.extend(SpeciesStats() for _ in range(count - len(self.slots)))
        else:
            del self.slots[count:]


class LifetimeStats(BaseModel):
    """Never reset within a playthrough."""
    overall: SpeciesStats = Field(default_factory=SpeciesStats)
    per_species: StatsTable = Field(default_factory=StatsTable)


class DailyStats(BaseModel):
    fish_caught_today: int = 0


class PlayerStats(BaseModel):
    """The persisted stats record."""
    lifetime: LifetimeStats = Field(default_factory=LifetimeStats)
    achievements: List[bool] = Field(
        default_factory=lambda: [False] * ACHIEVEMENT_COUNT,
        min_length=ACHIEVEMENT_COUNT,
        max_length=ACHIEVEMENT_COUNT,
    )
    high_score: int = 0

    @classmethod
    def for_catalog(cls, species_count: int) -> "PlayerStats":
        return cls(lifetime=LifetimeStats(per_species=StatsTable.sized(species_count)))
