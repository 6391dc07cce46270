"""Per-world upgrade registry — buy-on and upgrade catalogs plus aggregate CPS."""

from __future__ import annotations

from typing import Mapping

from clicker.data.worlds import BuyOnDef, UpgradeDef, WorldDef
from clicker.engine.economy import effective_multiplier
from clicker.engine.registry import Registry


class WorldUpgradeRegistry:
    """Buy-ons and one-time upgrades for a single world, in config order."""

    def __init__(self) -> None:
        self._buy_ons: Registry[BuyOnDef] = Registry(lambda b: b.id, kind="buy-on")
        self._upgrades: Registry[UpgradeDef] = Registry(lambda u: u.id, kind="upgrade")

    @classmethod
    def from_world(cls, world: WorldDef) -> WorldUpgradeRegistry:
        """Copy a world's static catalog into a dedicated, sealed lookup."""
        reg = cls()
        for buy_on in world.buy_ons:
            reg.register_buy_on(buy_on)
        for upgrade in world.upgrades:
            reg.register_upgrade(upgrade)
        reg.seal()
        return reg

    def register_buy_on(self, buy_on: BuyOnDef) -> None:
        self._buy_ons.register(buy_on)

    def register_upgrade(self, upgrade: UpgradeDef) -> None:
        self._upgrades.register(upgrade)

    def seal(self) -> None:
        self._buy_ons.seal()
        self._upgrades.seal()

    def get_buy_on(self, buy_on_id: str) -> BuyOnDef | None:
        return self._buy_ons.get(buy_on_id)

    def get_upgrade(self, upgrade_id: str) -> UpgradeDef | None:
        return self._upgrades.get(upgrade_id)

    def list_buy_ons(self) -> list[BuyOnDef]:
        return self._buy_ons.list()

    def list_upgrades(self) -> list[UpgradeDef]:
        return self._upgrades.list()


def calculate_world_cps(
    registry: WorldUpgradeRegistry,
    buy_on_counts: Mapping[str, int],
    purchased_upgrades: Mapping[str, bool],
    prestige_multiplier: float,
    global_multiplier: float = 1.0,
) -> float:
    """Aggregate coins per second for a world.

    total = Σ(base_cps × count × upgrade_mult) × prestige_mult × global_mult
    """
    upgrades = registry.list_upgrades()
    total = 0.0
    for buy_on in registry.list_buy_ons():
        count = buy_on_counts.get(buy_on.id, 0)
        if count <= 0:
            continue
        mult = effective_multiplier(buy_on.id, upgrades, purchased_upgrades)
        total += buy_on.base_cps * count * mult
    return total * prestige_multiplier * global_multiplier
