"""World definitions — static per-world economy configuration.

These are the already-parsed value objects the engine consumes: buy-on
catalogs, one-time upgrades, prestige thresholds and completion milestones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ThresholdType(str, Enum):
    """Metric a prestige threshold or completion milestone is measured on."""

    COINS_EARNED = "coins_earned"
    BUY_ONS_OWNED = "buy_ons_owned"
    COMPLETION_PERCENT = "completion_percent"
    PRESTIGE_COUNT = "prestige_count"


@dataclass(frozen=True)
class BuyOnDef:
    """A repeatedly purchasable passive income generator."""

    id: str
    name: str
    description: str
    base_cost: float
    # Cost multiplier per unit already owned (>= 1.0)
    cost_scaling: float
    base_cps: float
    level_requirement: int = 0


@dataclass(frozen=True)
class UpgradeDef:
    """A one-time multiplier on a single buy-on's income."""

    id: str
    name: str
    description: str
    target_buy_on_id: str
    multiplier: float
    cost: float
    level_requirement: int = 0


@dataclass(frozen=True)
class PrestigeThreshold:
    """When a world prestige becomes available.

    ``type`` is kept as a plain string so that an unrecognised kind coming
    from configuration simply never qualifies.
    """

    type: str
    value: float


@dataclass(frozen=True)
class CompletionMilestone:
    """One weighted step towards a world's completion ratio."""

    id: str
    description: str
    type: str
    value: float
    weight: float


@dataclass(frozen=True)
class WorldDef:
    """Full static configuration of one world."""

    id: str
    name: str
    coin_name: str
    coin_symbol: str
    accent_color: str
    ambient_animation: str
    base_exchange_rate: float
    offline_percentage: float
    offline_cap_hours: float
    buy_ons: tuple[BuyOnDef, ...] = ()
    upgrades: tuple[UpgradeDef, ...] = ()
    prestige_threshold: PrestigeThreshold = field(
        default_factory=lambda: PrestigeThreshold(ThresholdType.COINS_EARNED.value, 1_000_000)
    )
    completion_milestones: tuple[CompletionMilestone, ...] = ()


# ── Terra ────────────────────────────────────────────────────────

TERRA = WorldDef(
    id="terra",
    name="Terra",
    coin_name="Terra-Coin",
    coin_symbol="TC",
    accent_color="#4caf50",
    ambient_animation="stars",
    base_exchange_rate=0.001,
    offline_percentage=0.10,
    offline_cap_hours=8.0,
    buy_ons=(
        BuyOnDef(
            id="auto_miner",
            name="Auto-Miner",
            description="A humble drill that never sleeps.",
            base_cost=15,
            cost_scaling=1.15,
            base_cps=0.5,
        ),
        BuyOnDef(
            id="smelter",
            name="Smelter",
            description="Turns raw ore into refined coin.",
            base_cost=100,
            cost_scaling=1.15,
            base_cps=4,
            level_requirement=2,
        ),
        BuyOnDef(
            id="deep_excavator",
            name="Deep Excavator",
            description="Reaches veins nobody else can.",
            base_cost=1_100,
            cost_scaling=1.16,
            base_cps=30,
            level_requirement=5,
        ),
        BuyOnDef(
            id="quantum_extractor",
            name="Quantum Extractor",
            description="Pulls ore from neighbouring realities.",
            base_cost=120_000,
            cost_scaling=1.18,
            base_cps=900,
            level_requirement=10,
        ),
    ),
    upgrades=(
        UpgradeDef(
            id="diamond_drills",
            name="Diamond Drills",
            description="Auto-Miners dig twice as fast.",
            target_buy_on_id="auto_miner",
            multiplier=2.0,
            cost=500,
        ),
        UpgradeDef(
            id="blast_furnace",
            name="Blast Furnace",
            description="Smelters produce twice as much.",
            target_buy_on_id="smelter",
            multiplier=2.0,
            cost=5_000,
            level_requirement=2,
        ),
        UpgradeDef(
            id="seismic_mapping",
            name="Seismic Mapping",
            description="Deep Excavators produce 50% more.",
            target_buy_on_id="deep_excavator",
            multiplier=1.5,
            cost=60_000,
            level_requirement=5,
        ),
    ),
    prestige_threshold=PrestigeThreshold(ThresholdType.COINS_EARNED.value, 1_000_000),
    completion_milestones=(
        CompletionMilestone("terra_first_miner", "Own a buy-on", ThresholdType.BUY_ONS_OWNED.value, 1, 0.2),
        CompletionMilestone("terra_10k", "Earn 10K Terra-Coins", ThresholdType.COINS_EARNED.value, 10_000, 0.3),
        CompletionMilestone("terra_fleet", "Own 50 buy-ons", ThresholdType.BUY_ONS_OWNED.value, 50, 0.2),
        CompletionMilestone("terra_ascended", "Prestige once", ThresholdType.PRESTIGE_COUNT.value, 1, 0.3),
    ),
)

# ── Aqua ─────────────────────────────────────────────────────────

AQUA = WorldDef(
    id="aqua",
    name="Aqua",
    coin_name="Aqua-Coin",
    coin_symbol="AC",
    accent_color="#2196f3",
    ambient_animation="stars",
    base_exchange_rate=0.0008,
    offline_percentage=0.12,
    offline_cap_hours=6.0,
    buy_ons=(
        BuyOnDef(
            id="kelp_farm",
            name="Kelp Farm",
            description="Slow, steady, and very green.",
            base_cost=20,
            cost_scaling=1.14,
            base_cps=0.6,
        ),
        BuyOnDef(
            id="pearl_diver",
            name="Pearl Diver",
            description="Brings up treasure from the shallows.",
            base_cost=150,
            cost_scaling=1.15,
            base_cps=5,
            level_requirement=3,
        ),
        BuyOnDef(
            id="tidal_turbine",
            name="Tidal Turbine",
            description="Harnesses the pull of two moons.",
            base_cost=2_000,
            cost_scaling=1.16,
            base_cps=40,
            level_requirement=6,
        ),
    ),
    upgrades=(
        UpgradeDef(
            id="fertile_currents",
            name="Fertile Currents",
            description="Kelp Farms grow twice as fast.",
            target_buy_on_id="kelp_farm",
            multiplier=2.0,
            cost=800,
        ),
        UpgradeDef(
            id="deep_lungs",
            name="Deep Lungs",
            description="Pearl Divers stay down 50% longer.",
            target_buy_on_id="pearl_diver",
            multiplier=1.5,
            cost=7_500,
            level_requirement=3,
        ),
    ),
    prestige_threshold=PrestigeThreshold(ThresholdType.BUY_ONS_OWNED.value, 150),
    completion_milestones=(
        CompletionMilestone("aqua_first_farm", "Own a buy-on", ThresholdType.BUY_ONS_OWNED.value, 1, 0.25),
        CompletionMilestone("aqua_100k", "Earn 100K Aqua-Coins", ThresholdType.COINS_EARNED.value, 100_000, 0.35),
        CompletionMilestone("aqua_ascended", "Prestige once", ThresholdType.PRESTIGE_COUNT.value, 1, 0.4),
    ),
)

# ── Built-in worlds, in galaxy-map order ─────────────────────────

ALL_WORLDS: tuple[WorldDef, ...] = (TERRA, AQUA)
