"""Installment schedules for sales commitments and debt repayment plans"""

from decimal import Decimal
from typing import Callable, Dict, List

from treasury_engine.domain.exceptions import InvalidAmountError, UnsupportedPaymentPlanTypeError
from treasury_engine.domain.models import (
    DebtInstallment,
    DebtInstallmentPlan,
    PaymentPlanType,
    ScheduledInstallment,
)
from treasury_engine.domain.money_split import round_cents
from treasury_engine.utils.date_utils import add_months, roll_month


def _at(month: int, year: int, offset: int, amount_cents: int) -> ScheduledInstallment:
    year, month = roll_month(year, month, offset)
    return ScheduledInstallment(month=month, year=year, amount_cents=amount_cents)


def _single(total: int, month: int, year: int) -> List[ScheduledInstallment]:
    return [_at(month, year, 0, total)]


def _half_now_half_60d(total: int, month: int, year: int) -> List[ScheduledInstallment]:
    first = round_cents(Decimal(total) / 2)
    return [_at(month, year, 0, first), _at(month, year, 2, total - first)]


def _thirty_seventy_21d(total: int, month: int, year: int) -> List[ScheduledInstallment]:
    # 21 days never crosses into the next month in this model
    first = round_cents(Decimal(total) * Decimal("0.30"))
    return [_at(month, year, 0, first), _at(month, year, 0, total - first)]


def _quarterly_4x(total: int, month: int, year: int) -> List[ScheduledInstallment]:
    share = round_cents(Decimal(total) / 4)
    installments = [_at(month, year, i * 3, share) for i in range(3)]
    installments.append(_at(month, year, 9, total - share * 3))
    return installments


PLAN_HANDLERS: Dict[PaymentPlanType, Callable[[int, int, int], List[ScheduledInstallment]]] = {
    PaymentPlanType.IMMEDIATE: _single,
    PaymentPlanType.CUSTOM: _single,
    PaymentPlanType.HALF_NOW_HALF_60D: _half_now_half_60d,
    PaymentPlanType.THIRTY_SEVENTY_21D: _thirty_seventy_21d,
    PaymentPlanType.QUARTERLY_4X: _quarterly_4x,
}


def schedule(
    gross_amount_cents: int,
    payment_plan_type,
    start_month: int,
    start_year: int,
) -> List[ScheduledInstallment]:
    """
    Spread a sale's gross amount over the months it will be collected.

    Plans:
    - immediate / custom:  100% in the start month
    - half_now_half_60d:   50% now, rest two months later
    - thirty_seventy_21d:  30% now, rest in the same month
    - quarterly_4x:        four quarterly installments (+0, +3, +6, +9 months)

    The last installment always takes the remainder, so the amounts add up
    to gross_amount_cents exactly.

    Example:
        10001 cents quarterly_4x from Nov 2025
        -> 2500 (11/2025), 2500 (2/2026), 2500 (5/2026), 2501 (8/2026)
    """
    if isinstance(gross_amount_cents, bool) or not isinstance(gross_amount_cents, int):
        raise InvalidAmountError(f"gross_amount_cents must be integer cents, got {gross_amount_cents!r}")
    if gross_amount_cents < 0:
        raise InvalidAmountError(f"gross_amount_cents must be non-negative, got {gross_amount_cents}")
    if not 1 <= start_month <= 12:
        raise InvalidAmountError(f"start_month must be 1-12, got {start_month}")

    try:
        plan_type = PaymentPlanType(payment_plan_type)
    except ValueError:
        raise UnsupportedPaymentPlanTypeError(payment_plan_type) from None

    return PLAN_HANDLERS[plan_type](gross_amount_cents, start_month, start_year)


def generate_debt_installments(plan: DebtInstallmentPlan) -> List[DebtInstallment]:
    """
    Generate the monthly installments of a debt repayment plan.

    Requirements:
    - One installment per month from start_date (day clamped to month end)
    - Fixed installment amount; the last one absorbs the rounding remainder
    - The first paid_count installments are flagged as paid

    Plans without an installment amount or count have no schedule and
    return [].

    Example:
        100000 total, 33334 x 3 -> 33334, 33334, 33332
    """
    if plan.total_amount_cents < 0 or plan.installment_amount_cents < 0:
        raise InvalidAmountError(f"Debt plan {plan.id} has a negative amount")
    if not plan.has_schedule:
        return []

    count = plan.installment_count
    installments = []
    for i in range(count):
        # Last installment absorbs remainder to ensure exact total
        if i == count - 1:
            amount = plan.total_amount_cents - plan.installment_amount_cents * (count - 1)
        else:
            amount = plan.installment_amount_cents

        installments.append(
            DebtInstallment(
                plan_id=plan.id,
                creditor=plan.creditor,
                sequence=i,
                due_date=add_months(plan.start_date, i),
                amount_cents=amount,
                paid=i < plan.paid_count,
            )
        )

    return installments


def remaining_debt(plan: DebtInstallmentPlan) -> int:
    """Outstanding balance: total minus installments already paid"""
    return max(0, plan.total_amount_cents - plan.paid_count * plan.installment_amount_cents)
