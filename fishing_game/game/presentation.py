import logging
from typing import Protocol

from ..core.models import CatchResult

log = logging.getLogger(__name__)

# Scene names requested through trigger_scene_transition
SCENE_BEACH = "Beach"
SCENE_DAY_OVER = "DayOver"
SCENE_VICTORY = "Victory"
SCENE_GAME_OVER = "GameOver"
SCENE_SHOP = "Shop"


class PresentationBridge(Protocol):
    """Notifications the game core sends to whatever draws the game."""

    def show_bite_alert(self, visible: bool) -> None: ...

    def show_catch_result(self, result: CatchResult) -> None: ...

    def update_hud(self, day: int, time_string: str, current_debt: int, points: int, prestige_level: int) -> None: ...

    def trigger_scene_transition(self, name: str) -> None: ...


class LoggingPresentation:
    """Presentation bridge for headless runs; only logs what would be shown."""

    def show_bite_alert(self, visible: bool) -> None:
        log.debug(f"Bite alert {'shown' if visible else 'hidden'}")

    def show_catch_result(self, result: CatchResult) -> None:
        log.info(f"Caught {result.hook_count}x species {result.species_id} for ${result.money_earned} (+{result.points_earned} pts)")

    def update_hud(self, day: int, time_string: str, current_debt: int, points: int, prestige_level: int) -> None:
        pass

    def trigger_scene_transition(self, name: str) -> None:
        log.info(f"Scene transition requested: {name}")
