import os
import random

# Settings require a secret key; tests run without a .env
os.environ.setdefault("FLASK_SECRET_KEY", "test-secret")

import pytest

from fishing_game.core.models import FishSpecies, PlayerStats
from fishing_game.game.managers.fish_catalog import FishCatalog


class RecordingPresentation:
    """Collects every notification the game sends."""

    def __init__(self):
        self.alerts = []
        self.catches = []
        self.huds = []
        self.scenes = []

    def show_bite_alert(self, visible):
        self.alerts.append(visible)

    def show_catch_result(self, result):
        self.catches.append(result)

    def update_hud(self, day, time_string, current_debt, points, prestige_level):
        self.huds.append((day, time_string, current_debt, points, prestige_level))

    def trigger_scene_transition(self, name):
        self.scenes.append(name)


class MemoryStatsRepository:
    """In-memory stand-in for the stats store."""

    def __init__(self, stored=None, fail_save=False):
        self.stored = stored
        self.fail_save = fail_save
        self.saves = []

    def save(self, stats: PlayerStats) -> bool:
        if self.fail_save:
            return False
        self.saves.append(stats.model_copy(deep=True))
        self.stored = stats.model_copy(deep=True)
        return True

    def load(self):
        return self.stored


@pytest.fixture
def presentation():
    return RecordingPresentation()


@pytest.fixture
def repository():
    return MemoryStatsRepository()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def salmon():
    return FishSpecies(id=0, name="Salmon", base_weight=10.0, base_length=5.0)


@pytest.fixture
def catalog(salmon, rng):
    return FishCatalog([salmon], rng=rng)
