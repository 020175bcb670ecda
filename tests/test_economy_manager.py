import pytest

from fishing_game.core.models import (CatchResult, DayOutcome, DayPhase, HookYield, PlayerStats,
                                      StatsTable)
from fishing_game.game.exceptions import StatIndexOutOfRangeException, StatsPersistenceException
from fishing_game.game.managers.economy_manager import EconomyEngine, format_game_time, victory_bonus

from .conftest import MemoryStatsRepository


def make_catch(money=100, points=1, species_id=0, hooks=None):
    hooks = hooks or [HookYield(weight=12.0, length=6.0)]
    return CatchResult(
        species_id=species_id,
        display_weight=hooks[0].weight,
        display_length=hooks[0].length,
        hook_count=len(hooks),
        total_value=float(money),
        money_earned=money,
        points_earned=points,
        hooks=hooks,
    )


@pytest.fixture
def engine(repository, presentation):
    return EconomyEngine(3, repository, presentation, base_debt=1000)


def test_new_engine_starts_day_one_owing_base_debt(engine):
    e = engine.economy
    assert (e.day, e.base_debt, e.current_debt, e.money, e.points) == (1, 1000, 1000, 0, 0)
    assert engine.phase == DayPhase.ACTIVE_DAY
    assert engine.time_string == "08:00"
    assert engine.stats.lifetime.per_species.size == 3


def test_apply_catch_credits_money_points_and_debt(engine, presentation):
    assert engine.apply_catch(make_catch(money=150, points=2), 0)

    e = engine.economy
    assert e.money == 150
    assert e.total_money_earned == 150
    assert e.points == 2
    assert e.current_debt == 850
    assert engine.daily.fish_caught_today == 1
    assert presentation.huds[-1] == (1, "08:00", 850, 2, 0)


def test_overpayment_leaves_negative_debt(engine):
    engine.apply_catch(make_catch(money=1200), 0)
    assert engine.economy.current_debt == -200


def test_catch_updates_lifetime_extremes(engine):
    engine.apply_catch(make_catch(species_id=1, hooks=[HookYield(weight=5.0, length=3.0),
                                                         HookYield(weight=9.0, length=2.0)]), 1)
    engine.apply_catch(make_catch(species_id=1, hooks=[HookYield(weight=7.0, length=4.0)]), 1)

    slot = engine.stats.lifetime.per_species.get(1)
    assert slot.num_caught == 3
    assert slot.heaviest == 9.0
    assert slot.lightest == 5.0
    assert slot.longest == 4.0
    assert slot.shortest == 2.0
    assert engine.stats.lifetime.overall.num_caught == 3
    assert engine.stats.lifetime.per_species.get(0).num_caught == 0
    assert engine.daily.fish_caught_today == 3


def test_out_of_range_slot_changes_nothing(engine):
    before = engine.economy.model_copy()
    with pytest.raises(StatIndexOutOfRangeException):
        engine.apply_catch(make_catch(species_id=3), 3)
    assert engine.economy == before
    assert engine.stats.lifetime.overall.num_caught == 0


def test_clock_runs_ten_game_minutes_per_second(engine):
    assert engine.tick(1.0) is None
    assert engine.economy.game_minutes == pytest.approx(490.0)
    assert engine.time_string == "08:10"


def test_day_ends_at_eight_pm_with_points_interest(engine, repository, presentation):
    engine.economy.points = 10
    assert engine.tick(72.0) == DayOutcome.NEXT_DAY

    assert engine.phase == DayPhase.NEXT_DAY
    assert engine.economy.points == 12
    assert engine.last_points_interest == 2
    assert len(repository.saves) == 1
    assert presentation.scenes == ["DayOver"]
    # The clock stays stopped until the next day starts
    assert engine.tick(5.0) is None
    assert engine.time_string == "20:00"


def test_next_day_compounds_interest(engine):
    engine.evaluate_day_end()
    assert engine.start_next_day()

    assert engine.economy.day == 2
    assert engine.economy.current_debt == 1050
    assert engine.economy.game_minutes == 480.0
    assert engine.phase == DayPhase.ACTIVE_DAY


@pytest.mark.parametrize("debt", [0, -5])
def test_next_day_never_charges_interest_on_cleared_debt(engine, debt):
    engine.phase = DayPhase.NEXT_DAY
    engine.economy.current_debt = debt
    engine.start_next_day()
    assert engine.economy.current_debt == debt


def test_next_day_resets_daily_stats(engine):
    engine.apply_catch(make_catch(money=10), 0)
    engine.evaluate_day_end()
    engine.start_next_day()
    assert engine.daily.fish_caught_today == 0
    assert engine.stats.lifetime.overall.num_caught == 1


def test_start_next_day_requires_finished_day(engine):
    assert engine.start_next_day() is False
    assert engine.economy.day == 1


@pytest.mark.parametrize("days, prestige, expected", [
    (0, 0, 0),
    (1, 0, 250),
    (3, 0, 437),
    (3, 1, 2185),
    (6, 0, 250 + 125 + 62 + 31 + 15 + 7),
])
def test_victory_bonus_halves_each_day(days, prestige, expected):
    assert victory_bonus(days, prestige) == expected


def test_early_payoff_wins_with_banked_days(engine, repository, presentation):
    engine.economy.day = 4
    engine.apply_catch(make_catch(money=1000, points=0), 0)

    assert engine.evaluate_day_end() == DayOutcome.VICTORY
    e = engine.economy
    assert e.extra_days_banked == 3
    assert e.points == 437
    assert e.final_score == 1000 * 4
    assert engine.stats.high_score == 4000
    assert repository.stored.high_score == 4000
    assert presentation.scenes == ["Victory"]


def test_victory_is_stable_under_repeated_evaluation(engine):
    engine.economy.day = 4
    engine.apply_catch(make_catch(money=1000, points=0), 0)

    outcomes = [engine.evaluate_day_end() for _ in range(3)]
    assert outcomes == [DayOutcome.VICTORY] * 3
    assert engine.economy.extra_days_banked == 3
    assert engine.economy.points == 437


def test_payoff_on_last_day_wins_without_bonus(engine):
    engine.economy.day = 7
    engine.apply_catch(make_catch(money=1000, points=0), 0)

    assert engine.evaluate_day_end() == DayOutcome.VICTORY
    assert engine.economy.extra_days_banked == 0
    assert engine.economy.points == 0
    assert engine.economy.final_score == 1000


def test_debt_left_after_last_day_loses(engine, repository, presentation):
    engine.economy.day = 7
    assert engine.evaluate_day_end() == DayOutcome.DEFEAT
    assert engine.phase == DayPhase.DEFEAT
    assert presentation.scenes == ["GameOver"]
    assert engine.start_next_day() is False
    assert engine.continue_game() is False


def test_lower_score_keeps_previous_high_score(engine):
    engine.stats.high_score = 99999
    engine.apply_catch(make_catch(money=1000), 0)
    engine.evaluate_day_end()
    assert engine.stats.high_score == 99999


def test_prestige_resets_debt_and_day_only(engine):
    engine.economy.day = 5
    engine.apply_catch(make_catch(money=1500, points=4), 0)
    engine.evaluate_day_end()

    assert engine.continue_game()
    e = engine.economy
    assert e.prestige_level == 1
    assert e.base_debt == 10000
    assert e.current_debt == 10000
    assert e.day == 1
    assert e.money == 1500
    assert e.points == 4 + 375
    assert engine.stats.lifetime.overall.num_caught == 1
    assert engine.phase == DayPhase.ACTIVE_DAY


def test_continue_requires_victory(engine):
    assert engine.continue_game() is False
    assert engine.economy.prestige_level == 0


def test_spend_points(engine):
    engine.economy.points = 5
    assert engine.spend_points(4)
    assert engine.economy.points == 1
    assert engine.spend_points(2) is False
    assert engine.economy.points == 1


def test_load_stats_without_saved_record_keeps_defaults(engine):
    assert engine.load_stats() is False
    assert engine.stats.high_score == 0


def test_load_stats_resizes_to_catalog(presentation):
    stored = PlayerStats(high_score=321)
    stored.lifetime.per_species = StatsTable.sized(2)
    engine = EconomyEngine(4, MemoryStatsRepository(stored=stored), presentation)

    assert engine.load_stats()
    assert engine.stats.high_score == 321
    assert engine.stats.lifetime.per_species.size == 4


def test_unreadable_stats_fall_back_to_defaults(presentation):
    class BrokenRepository(MemoryStatsRepository):
        def load(self):
            raise StatsPersistenceException("corrupt")

    engine = EconomyEngine(2, BrokenRepository(), presentation)
    assert engine.load_stats() is False
    assert engine.stats.lifetime.per_species.size == 2


def test_failed_save_does_not_stop_progression(presentation):
    engine = EconomyEngine(1, MemoryStatsRepository(fail_save=True), presentation, base_debt=1000)
    assert engine.evaluate_day_end() == DayOutcome.NEXT_DAY
    assert engine.start_next_day()


def test_format_game_time():
    assert format_game_time(0) == "00:00"
    assert format_game_time(725.9) == "12:05"
    assert format_game_time(1200) == "20:00"
