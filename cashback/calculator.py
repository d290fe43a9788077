"""
Cashback Calculator - Tiered rebate computation.

Pure and deterministic: the same (loss, category, platform) always yields the
same CashbackResult. Money is handled as Decimal cents internally so binary
float artefacts (1.15 -> 1.1499999...) never cost the player a cent, while the
platform never rounds up in the player's favour either.
"""
import math
from decimal import Context, Decimal, ROUND_FLOOR, ROUND_HALF_EVEN
from typing import Union

from .config import Config
from .rules import Category, Platform, get_rule_set
from .schema import CashbackResult

CENT = Decimal("0.01")
STABLE_DIGITS = Decimal("1e-10")
_CONTEXT = Context(prec=60)


def _to_decimal(value) -> Decimal:
    # str() gives the shortest repr of a float, which drops the binary noise
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _floor_cents(value: Decimal) -> Decimal:
    if not value.is_finite():
        return value
    # 1.9999999997 is float noise for 2.00, not 1.99
    stable = value.quantize(STABLE_DIGITS, rounding=ROUND_HALF_EVEN, context=_CONTEXT)
    return stable.quantize(CENT, rounding=ROUND_FLOOR, context=_CONTEXT)


def truncate_to_cents(value: float) -> float:
    """Truncate to two decimals without rounding (1.9994 -> 1.99)."""
    return float(_floor_cents(_to_decimal(value)))


def calculate_cashback(
    loss_amount: float,
    category: Union[str, Category],
    platform: Union[str, Platform],
) -> CashbackResult:
    """
    Calculate the cashback owed for a reported loss.

    Args:
        loss_amount: Absolute value of the player's loss for the period
        category: Cashback category (weekly, daily, sports, aviator)
        platform: Platform identifier

    Returns:
        CashbackResult; invalid amounts give a zero result, never an exception.

    Raises:
        UnsupportedRuleSetError: unknown category or platform
    """
    rule_set = get_rule_set(category, platform)

    if math.isnan(loss_amount) or loss_amount <= 0:
        return _zero_result(loss_amount, "Valor inválido ou sem prejuízo.")

    tier = rule_set.find_tier(loss_amount)
    if tier is None:
        return _zero_result(
            loss_amount,
            f"Perda de {Config.CURRENCY_SYMBOL} {loss_amount:.2f} não atingiu o mínimo para cashback."
        )

    # Losses above the base limit earn nothing extra
    base = min(_to_decimal(loss_amount), _to_decimal(rule_set.calc_limit_base))
    cashback = _floor_cents(base * _to_decimal(tier.percent))

    if cashback < _to_decimal(rule_set.min_cashback):
        return _zero_result(
            loss_amount,
            f"Cashback abaixo do mínimo de {format_currency(rule_set.min_cashback)}."
        )
    cashback = min(cashback, _to_decimal(rule_set.max_cashback))

    return {
        "lossAmount": loss_amount,
        "cashbackAmount": float(cashback),
        "appliedPercent": tier.percent,
        "message": "Cashback disponível!"
    }


def _zero_result(loss_amount: float, message: str) -> CashbackResult:
    return {
        "lossAmount": loss_amount,
        "cashbackAmount": 0.0,
        "appliedPercent": 0.0,
        "message": message
    }


# ─────────────────────────────────────────────────────────────
# Divergence Check
# ─────────────────────────────────────────────────────────────

def amount_to_credit(result: CashbackResult, received: float) -> float:
    """What is still owed when the player already received part of the cashback."""
    owed = _to_decimal(result["cashbackAmount"]) - _to_decimal(received or 0)
    return float(max(owed, Decimal("0")))


def is_divergent(result: CashbackResult, received: float) -> bool:
    cashback = result["cashbackAmount"]
    return cashback > 0 and _to_decimal(received or 0) < _to_decimal(cashback)


# ─────────────────────────────────────────────────────────────
# Formatting
# ─────────────────────────────────────────────────────────────

def format_currency(value: float) -> str:
    """pt-BR currency string of the truncated value: 1234.569 -> 'R$ 1.234,56'."""
    truncated = _floor_cents(_to_decimal(value))
    # NaN does not order, so read the sign bit
    sign = "-" if truncated.is_signed() and not truncated.is_zero() else ""
    # 1,234.56 -> 1.234,56
    digits = f"{abs(truncated):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{Config.CURRENCY_SYMBOL} {digits}"


def format_percent(value: float) -> str:
    return f"{value * 100:.0f}%"
