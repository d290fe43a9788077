"""
Cashback Rules - Static tier tables, limits and per-platform profiles.

This is the single source of truth for every number the calculator uses.
Platform differences are expressed as entries in RULE_OVERRIDES and
PLATFORM_PROFILES; adding a platform never requires touching calculator code.

All structures are built once at import time and are immutable.
"""
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Tuple, List, Union


class Category(str, Enum):
    WEEKLY = "weekly"       # Live casino, paid per Monday-starting week
    DAILY = "daily"         # Slots, paid per day
    SPORTS = "sports"       # Multiple bets, paid per week
    AVIATOR = "aviator"     # Aviator crash game, paid per day


class Platform(str, Enum):
    SEVEN_K = "7K"
    CASSINO = "Cassino"
    VERA = "Vera"


class UnsupportedRuleSetError(ValueError):
    """Raised when no rule set exists for a category/platform pair."""


@dataclass(frozen=True)
class Tier:
    min: float
    max: float
    percent: float


@dataclass(frozen=True)
class RuleSet:
    tiers: Tuple[Tier, ...]
    min_cashback: float       # Below this truncated rebate nothing is paid
    max_cashback: float       # Hard cap per period
    calc_limit_base: float    # Loss ceiling used for the percentage

    def find_tier(self, amount: float):
        """Last tier whose min is reached; amounts between max and the next min stay in the lower tier."""
        match = None
        for tier in self.tiers:
            if tier.min > amount:
                break
            match = tier
        return match


@dataclass(frozen=True)
class PlatformProfile:
    platform: Platform
    name: str
    has_sports: bool
    has_aviator: bool
    weekly_exclusions: Tuple[str, ...]
    daily_exclusions: Tuple[str, ...]

    def supports(self, category: Category) -> bool:
        if category == Category.SPORTS:
            return self.has_sports
        if category == Category.AVIATOR:
            return self.has_aviator
        return True


def _tiers(*rows: Tuple[float, float, float]) -> Tuple[Tier, ...]:
    return tuple(Tier(lo, hi, pct) for lo, hi, pct in rows)


# ─────────────────────────────────────────────────────────────
# Tier Tables
# ─────────────────────────────────────────────────────────────

WEEKLY_TIERS = _tiers(
    (1.00, 499.99, 0.01),
    (500.00, 999.99, 0.02),
    (1000.00, 1499.99, 0.03),
    (1500.00, 4999.99, 0.04),
    (5000.00, math.inf, 0.05),
)

DAILY_TIERS = _tiers(
    (1.00, 399.99, 0.02),
    (400.00, 999.99, 0.04),
    (1000.00, 4999.99, 0.06),
    (5000.00, 9999.99, 0.08),
    (10000.00, 11999.99, 0.12),
    (12000.00, 19999.99, 0.15),
    (20000.00, math.inf, 0.25),
)

VERA_DAILY_TIERS = _tiers(
    (1.00, 299.99, 0.02),
    (300.00, 999.99, 0.04),
    (1000.00, 4999.99, 0.06),
    (5000.00, 14999.99, 0.08),
    (15000.00, 24999.99, 0.10),
    (25000.00, 29999.99, 0.15),
    (30000.00, math.inf, 0.20),
)

SPORTS_TIERS = _tiers(
    (0.01, 499.99, 0.02),
    (500.00, 1999.99, 0.03),
    (2000.00, 9999.99, 0.04),
    (10000.00, 19999.99, 0.05),
    (20000.00, 24999.99, 0.06),
    (25000.00, 29999.99, 0.07),
    (30000.00, 49999.99, 0.08),
    (50000.00, math.inf, 0.10),
)

# Aviator follows the slots table in its own context
AVIATOR_TIERS = DAILY_TIERS


# ─────────────────────────────────────────────────────────────
# Rule Sets
# ─────────────────────────────────────────────────────────────
# calc_limit_base * top percent == max_cashback for every table.

DEFAULT_RULES = MappingProxyType({
    Category.WEEKLY: RuleSet(WEEKLY_TIERS, 0.50, 5000.00, 100000.00),
    Category.DAILY: RuleSet(DAILY_TIERS, 0.01, 5000.00, 20000.00),
    Category.SPORTS: RuleSet(SPORTS_TIERS, 0.01, 5000.00, 50000.00),
    Category.AVIATOR: RuleSet(AVIATOR_TIERS, 0.01, 5000.00, 20000.00),
})

RULE_OVERRIDES = MappingProxyType({
    (Category.WEEKLY, Platform.VERA): RuleSet(WEEKLY_TIERS, 0.01, 5000.00, 100000.00),
    (Category.DAILY, Platform.VERA): RuleSet(VERA_DAILY_TIERS, 0.01, 5000.00, 25000.00),
})


# ─────────────────────────────────────────────────────────────
# Game Exclusions
# ─────────────────────────────────────────────────────────────

EXCLUDED_GAMES_WEEKLY = (
    "Dragon Tiger", "Bac Bo", "Double Red Dog", "Sic BO", "Jogos de Crash", "Betting Games"
)

VERA_EXCLUDED_GAMES_WEEKLY = (
    "Dragon Tiger", "Bac Bo", "Double Red Dog", "Baccarat", "Sic BO", "Jogos de Crash"
)

EXCLUDED_GAMES_DAILY = (
    "Jogos de Crash", "Vídeo Pôquer", "Inbet", "Mines", "Banana Mines", "Jogos Zeus", "Jogos de Mesa"
)

VERA_EXCLUDED_GAMES_DAILY = (
    "Crash (Aviator, JetX...)", "Apostas Esportivas", "Jogos de Mesa", "Vídeo Pôquer", "Cassino Ao Vivo"
)

# Shown to operators only; classification never reads these two.
EXCLUDED_GAMES_AVIATOR = (
    "JetX", "Spaceman", "Mines", "Banana Mines", "Aviator Spribe", "Slots", "Cassino Ao Vivo"
)

EXCLUDED_GAMES_SPORTS = (
    "Apostas Simples", "Odds < 3.0", "Odds > 1000", "Cash-out", "Apostas Canceladas"
)


PLATFORM_PROFILES = MappingProxyType({
    Platform.SEVEN_K: PlatformProfile(
        Platform.SEVEN_K, "7K.bet", has_sports=True, has_aviator=False,
        weekly_exclusions=EXCLUDED_GAMES_WEEKLY, daily_exclusions=EXCLUDED_GAMES_DAILY,
    ),
    Platform.CASSINO: PlatformProfile(
        Platform.CASSINO, "Cassino.bet.br", has_sports=False, has_aviator=True,
        weekly_exclusions=EXCLUDED_GAMES_WEEKLY, daily_exclusions=EXCLUDED_GAMES_DAILY,
    ),
    Platform.VERA: PlatformProfile(
        Platform.VERA, "Vera.bet", has_sports=False, has_aviator=False,
        weekly_exclusions=VERA_EXCLUDED_GAMES_WEEKLY, daily_exclusions=VERA_EXCLUDED_GAMES_DAILY,
    ),
})


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────

def to_category(value: Union[str, Category]) -> Category:
    try:
        return Category(value)
    except ValueError:
        raise UnsupportedRuleSetError(f"Unsupported cashback category: {value!r}") from None


def to_platform(value: Union[str, Platform]) -> Platform:
    try:
        return Platform(value)
    except ValueError:
        raise UnsupportedRuleSetError(f"Unsupported platform: {value!r}") from None


def get_rule_set(category: Union[str, Category], platform: Union[str, Platform]) -> RuleSet:
    """
    Resolve the rule set for a category on a platform.

    Platform overrides win over the category default. Unknown values raise
    UnsupportedRuleSetError instead of degrading to a zero-limit table.
    """
    cat = to_category(category)
    plat = to_platform(platform)
    rule_set = RULE_OVERRIDES.get((cat, plat)) or DEFAULT_RULES.get(cat)
    if rule_set is None:
        raise UnsupportedRuleSetError(f"No rule set for {cat.value}/{plat.value}")
    return rule_set


def get_platform_profile(platform: Union[str, Platform]) -> PlatformProfile:
    return PLATFORM_PROFILES[to_platform(platform)]


def excluded_games(category: Union[str, Category], platform: Union[str, Platform]) -> List[str]:
    """Game list an operator shows as not eligible for a category."""
    cat = to_category(category)
    profile = get_platform_profile(platform)
    if cat == Category.WEEKLY:
        return list(profile.weekly_exclusions)
    if cat == Category.DAILY:
        return list(profile.daily_exclusions)
    if cat == Category.AVIATOR:
        return list(EXCLUDED_GAMES_AVIATOR)
    return list(EXCLUDED_GAMES_SPORTS)
