from abc import ABC, abstractmethod
from typing import Optional

from ...core.models import PlayerStats


class StatsRepository(ABC):
    """Abstract base class for stats record storage."""

    @abstractmethod
    def save(self, stats: PlayerStats) -> bool:
        """Write the record. Returns False (and logs) when storage fails."""
        pass

    @abstractmethod
    def load(self) -> Optional[PlayerStats]:
        """
        Read the record.

        Returns None when nothing has been saved yet. Raises
        StatsPersistenceException when a record exists but cannot be read.
        """
        pass
