import logging
from typing import Optional
from pydantic import ValidationError
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.results import UpdateResult

from .base_repository import StatsRepository
from ...core.models import PlayerStats
from ...game.exceptions import StatsPersistenceException

log = logging.getLogger(__name__)

class MongoStatsRepository(StatsRepository):
    """Repository for the player stats record in MongoDB."""

    def __init__(self, db: Database, profile_id: str = "default"):
        self.db = db
        self.collection = self.db["player_stats"]
        self.profile_id = profile_id

    def save(self, stats: PlayerStats) -> bool:
        """Upsert the record for this profile."""
        log.debug(f"Saving stats for profile {self.profile_id}")
        document = stats.model_dump()
        document["profile_id"] = self.profile_id
        try:
            result: UpdateResult = self.collection.replace_one(
                {"profile_id": self.profile_id},
                document,
                upsert=True
            )
        except PyMongoError as e:
            log.error(f"Unable to save stats for profile {self.profile_id}: {e}")
            return False
        log.info(f"Stats saved for profile {self.profile_id} ({result.modified_count} modified).")
        return True

    def load(self) -> Optional[PlayerStats]:
        log.debug(f"Loading stats for profile {self.profile_id}")
        try:
            document = self.collection.find_one({"profile_id": self.profile_id})
        except PyMongoError as e:
            log.error(f"Unable to load stats for profile {self.profile_id}: {e}")
            raise StatsPersistenceException(f"Could not read stats for profile {self.profile_id}") from e
        if document is None:
            log.info(f"No stored stats for profile {self.profile_id}; starting fresh.")
            return None
        document.pop("_id", None)
        document.pop("profile_id", None)
        try:
            return PlayerStats.model_validate(document)
        except ValidationError as e:
            log.error(f"Stored stats for profile {self.profile_id} are invalid: {e}")
            raise StatsPersistenceException(f"Invalid stats record for profile {self.profile_id}") from e
