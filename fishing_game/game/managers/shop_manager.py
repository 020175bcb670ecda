import logging
from typing import Dict

from ...config import settings
from .economy_manager import EconomyEngine

log = logging.getLogger(__name__)

UPGRADE_KINDS = ("weight", "length", "hooks")


class ShopManager:
    """Sells catch upgrades for points. Each upgrade costs 2 ** its current level."""

    def __init__(self, economy: EconomyEngine):
        self.economy = economy
        self.multiplier = settings.UPGRADE_MULTIPLIER

    def get_costs(self) -> Dict[str, int]:
        upgrades = self.economy.upgrades
        return {
            "weight": 2 ** upgrades.weight_level,
            "length": 2 ** upgrades.length_level,
            "hooks": 2 ** upgrades.hook_level,
        }

    def upgrade_weight(self) -> bool:
        upgrades = self.economy.upgrades
        if not self.economy.spend_points(2 ** upgrades.weight_level):
            return False
        upgrades.weight_mult *= self.multiplier
        upgrades.weight_level += 1
        log.info(f"Upgraded weight to level {upgrades.weight_level} (x{upgrades.weight_mult:.2f})")
        return True

    def upgrade_length(self) -> bool:
        upgrades = self.economy.upgrades
        if not self.economy.spend_points(2 ** upgrades.length_level):
            return False
        upgrades.length_mult *= self.multiplier
        upgrades.length_level += 1
        log.info(f"Upgraded length to level {upgrades.length_level} (x{upgrades.length_mult:.2f})")
        return True

    def upgrade_hooks(self) -> bool:
        upgrades = self.economy.upgrades
        if not self.economy.spend_points(2 ** upgrades.hook_level):
            return False
        upgrades.hook_level += 1
        log.info(f"Upgraded hooks to {upgrades.hook_level}")
        return True

    def purchase(self, kind: str) -> bool:
        handlers = {
            "weight": self.upgrade_weight,
            "length": self.upgrade_length,
            "hooks": self.upgrade_hooks,
        }
        handler = handlers.get(kind)
        if handler is None:
            log.warning(f"Unknown upgrade '{kind}'")
            return False
        return handler()
