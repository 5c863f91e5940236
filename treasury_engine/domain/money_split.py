"""Gross revenue split into tax reserve, partner shares and available cash"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from treasury_engine.config import settings
from treasury_engine.domain.exceptions import InvalidAmountError, UnreachableTargetError
from treasury_engine.domain.models import SplitResult

HUNDRED = Decimal(100)


def round_cents(value: Decimal) -> int:
    """Round half-up to a whole cent"""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _require_cents(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"{name} must be integer cents, got {value!r}")
    if value < 0:
        raise InvalidAmountError(f"{name} must be non-negative, got {value}")


def parse_rate(value, name: str = "commission_rate_percent") -> Decimal:
    # str() keeps float inputs like 12.5 exact
    rate = Decimal(str(value))
    if rate < 0 or rate > HUNDRED:
        raise InvalidAmountError(f"{name} must be between 0 and 100, got {value}")
    return rate


def _tax_factor(tax_rate_percent: Optional[int]) -> Decimal:
    rate = settings.tax_rate_percent if tax_rate_percent is None else tax_rate_percent
    return 1 + Decimal(rate) / HUNDRED


def _partner_percents(partner_share_percents: Optional[Sequence[int]]) -> Sequence[int]:
    if partner_share_percents is None:
        return settings.partner_share_percents
    return partner_share_percents


def split(
    gross_amount_cents: int,
    commission_rate_percent=0,
    tax_rate_percent: Optional[int] = None,
    partner_share_percents: Optional[Sequence[int]] = None,
) -> SplitResult:
    """
    Split a tax-inclusive gross amount into its shares.

    Formula (each stage rounded half-up on its own):
        net            = gross / 1.22
        commission     = net * commission%
        post           = net - commission
        tax_reserve    = net * 22%
        partner share  = post * share%      (10% and 20% by default, display only)
        partner total  = post * sum(share%) (rounded once)
        available      = post - partner total

    The stages are not reconciled against gross, so
    tax_reserve + partners + available may drift from gross by a few cents.

    Example:
        100000 gross -> net 81967, tax 18033, partners (8197, 16393)
        totalling 24590, available 57377
    """
    _require_cents("gross_amount_cents", gross_amount_cents)
    rate = parse_rate(commission_rate_percent)
    tax_factor = _tax_factor(tax_rate_percent)

    net = round_cents(Decimal(gross_amount_cents) / tax_factor)
    commission = round_cents(net * rate / HUNDRED)
    post_commission = net - commission
    tax_reserve = round_cents(net * (tax_factor - 1))
    percents = _partner_percents(partner_share_percents)
    shares = tuple(round_cents(post_commission * Decimal(pct) / HUNDRED) for pct in percents)
    partner_total = round_cents(post_commission * Decimal(sum(percents)) / HUNDRED)

    return SplitResult(
        gross_amount_cents=gross_amount_cents,
        net_amount_cents=net,
        commission_cents=commission,
        post_commission_cents=post_commission,
        tax_reserve_cents=tax_reserve,
        partner_shares_cents=shares,
        partner_total_cents=partner_total,
        available_amount_cents=post_commission - partner_total,
    )


def required_gross(
    target_available_cents: int,
    commission_rate_percent=0,
    tax_rate_percent: Optional[int] = None,
    partner_share_percents: Optional[Sequence[int]] = None,
) -> int:
    """
    Gross amount to bill so that split() leaves target_available_cents.

    Works backwards through the split:
        available = (gross / 1.22) * (1 - commission%) * (1 - partners%)
        gross     = available * 1.22 / ((1 - commission%) * (1 - partners%))

    Returns 0 for a non-positive target. A 100% commission (or partner
    shares summing to 100%) leaves nothing available, which raises
    UnreachableTargetError.
    """
    if isinstance(target_available_cents, bool) or not isinstance(target_available_cents, int):
        raise InvalidAmountError(
            f"target_available_cents must be integer cents, got {target_available_cents!r}"
        )
    rate = parse_rate(commission_rate_percent)
    if target_available_cents <= 0:
        return 0

    commission_factor = 1 - rate / HUNDRED
    partners_factor = 1 - Decimal(sum(_partner_percents(partner_share_percents))) / HUNDRED
    retained = commission_factor * partners_factor
    if retained <= 0:
        raise UnreachableTargetError(
            f"No gross amount yields {target_available_cents} available "
            f"at {commission_rate_percent}% commission"
        )

    return round_cents(Decimal(target_available_cents) * _tax_factor(tax_rate_percent) / retained)


def verify_split(result: SplitResult, tolerance_cents: int = 1) -> bool:
    """Check that tax + commission + partners + available adds back up to gross"""
    total = (
        result.tax_reserve_cents
        + result.commission_cents
        + result.partner_total_cents
        + result.available_amount_cents
    )
    return abs(total - result.gross_amount_cents) <= tolerance_cents
