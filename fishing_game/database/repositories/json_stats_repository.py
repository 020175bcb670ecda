import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .base_repository import StatsRepository
from ...core.models import PlayerStats
from ...game.exceptions import StatsPersistenceException

log = logging.getLogger(__name__)


class JsonStatsRepository(StatsRepository):
    """Stores the stats record as a JSON file."""

    def __init__(self, save_dir: str, file_name: str = "player_stats.json"):
        self.path = Path(save_dir) / file_name

    def save(self, stats: PlayerStats) -> bool:
        log.debug(f"Saving stats to {self.path}")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(stats.model_dump_json(), encoding="utf-8")
        except OSError as e:
            log.error(f"Unable to save stats to {self.path}: {e}")
            return False
        log.info(f"Stats saved to {self.path}")
        return True

    def load(self) -> Optional[PlayerStats]:
        if not self.path.exists():
            log.info(f"No stats file at {self.path}; starting fresh.")
            return None
        try:
            return PlayerStats.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            log.error(f"Unable to load stats from {self.path}: {e}")
            raise StatsPersistenceException(f"Could not read stats file {self.path}") from e
