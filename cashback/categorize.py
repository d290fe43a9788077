"""
CategoryMapper - Rule-Based Game Categorization Engine.

Maps the game name of a spreadsheet row to a cashback category using keyword
and exclusion-list matching. No AI/ML - pure substring matching for full
auditability.

Rules are applied in order; first match wins. A rule may also decide that a
row belongs to no category at all (excluded).
"""
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .rules import Category, Platform, PlatformProfile, get_platform_profile


# ─────────────────────────────────────────────────────────────
# Keyword Configuration
# ─────────────────────────────────────────────────────────────

AVIATOR_KEYWORDS = ["aviator"]

SPORTS_KEYWORDS = ["sport", "esport", "apostas", "odds"]

LIVE_CASINO_KEYWORDS = [
    "live", "ao vivo", "roulette", "roleta", "blackjack", "baccarat",
    "crazy time", "monopoly", "mega ball", "dream catcher", "sic bo", "dragon tiger"
]


def normalize(text) -> str:
    return str(text).lower().strip() if text else ""


def contains_any(name: str, keywords: Iterable[str]) -> bool:
    return any(k in name for k in keywords)


def is_excluded(game_name: str, exclusions: Iterable[str]) -> bool:
    """True when any exclusion entry appears inside the game name."""
    norm_game = normalize(game_name)
    return any(normalize(excluded) in norm_game for excluded in exclusions)


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    matches: Callable[[str, PlatformProfile], bool]
    category: Optional[Category]      # None: row is excluded


def _is_aviator(name: str, profile: PlatformProfile) -> bool:
    return contains_any(name, AVIATOR_KEYWORDS) and profile.has_aviator


def _is_sports(name: str, profile: PlatformProfile) -> bool:
    return contains_any(name, SPORTS_KEYWORDS) and profile.has_sports


def _is_unsupported_sports(name: str, profile: PlatformProfile) -> bool:
    return contains_any(name, SPORTS_KEYWORDS)


def _is_live_casino(name: str, profile: PlatformProfile) -> bool:
    return contains_any(name, LIVE_CASINO_KEYWORDS) and not is_excluded(name, profile.weekly_exclusions)


def _is_slots(name: str, profile: PlatformProfile) -> bool:
    return not is_excluded(name, profile.daily_exclusions)


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("aviator", _is_aviator, Category.AVIATOR),
    ClassificationRule("sports", _is_sports, Category.SPORTS),
    # Sports rows on a platform without sports cashback never fall through to slots
    ClassificationRule("sports_unsupported", _is_unsupported_sports, None),
    ClassificationRule("live_casino", _is_live_casino, Category.WEEKLY),
    ClassificationRule("slots", _is_slots, Category.DAILY),
)

NO_MATCH = "excluded"


class CategoryMapper:
    """
    Deterministic game categorizer.

    Usage:
        mapper = CategoryMapper()
        category = mapper.categorize("Roleta ao Vivo", "7K")
        # Returns: Category.WEEKLY
    """

    def __init__(self, rules: Optional[Iterable[ClassificationRule]] = None):
        self.rules = tuple(rules) if rules is not None else CLASSIFICATION_RULES

    def categorize(self, game_name: str, platform: Union[str, Platform]) -> Optional[Category]:
        """
        Categorize a game for a platform.

        Returns:
            Category, or None when the game earns no cashback on the platform
        """
        return self._decide(game_name, platform)[1]

    def explain(self, game_name: str, platform: Union[str, Platform]) -> str:
        """Name of the rule that decided, or 'excluded' when none matched."""
        return self._decide(game_name, platform)[0]

    def _decide(self, game_name: str, platform) -> Tuple[str, Optional[Category]]:
        profile = get_platform_profile(platform)
        name = normalize(game_name)
        for rule in self.rules:
            if rule.matches(name, profile):
                return rule.name, rule.category
        return NO_MATCH, None

    def get_rules(self) -> List[str]:
        """Return rule names in evaluation order for transparency/audit."""
        return [rule.name for rule in self.rules]
