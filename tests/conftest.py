"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import List

from treasury_engine.domain.models import (
    DatedEvent,
    DebtInstallmentPlan,
    EventKind,
    FlowDirection,
    Priority,
    RecurringObligation,
    Reliability,
    SalesCommitment,
    SalesStatus,
)


AS_OF = date(2026, 3, 1)


@pytest.fixture
def as_of() -> date:
    """Fixed as-of date so projections never depend on the wall clock"""
    return AS_OF


def make_obligation(**overrides) -> RecurringObligation:
    """Monthly 1000.00 expense due on the 1st, valid from Jan 2026"""
    values = dict(
        id="exp-1",
        label="Rent",
        gross_amount_cents=100_000,
        frequency="monthly",
        anchor_day=1,
        valid_from=date(2026, 1, 1),
        valid_until=None,
        direction=FlowDirection.EXPENSE,
        tag="office",
        priority=Priority.ESSENTIAL,
    )
    values.update(overrides)
    return RecurringObligation(**values)


def make_income(**overrides) -> RecurringObligation:
    """Monthly high-reliability retainer due on the 20th"""
    values = dict(
        id="inc-1",
        label="Retainer ACME",
        gross_amount_cents=122_000,
        frequency="monthly",
        anchor_day=20,
        valid_from=date(2026, 1, 1),
        direction=FlowDirection.INCOME,
        reliability=Reliability.HIGH,
    )
    values.update(overrides)
    return RecurringObligation(**values)


def expense_event(day: date, amount_cents: int, source_id: str = "exp", settled: bool = False) -> DatedEvent:
    return DatedEvent(
        date=day,
        amount_cents=-abs(amount_cents),
        source_id=source_id,
        source_kind=EventKind.OBLIGATION,
        settled=settled,
        priority=Priority.NORMAL,
    )


def income_event(
    day: date, amount_cents: int, reliability: str = Reliability.HIGH, source_id: str = "inc", settled: bool = False
) -> DatedEvent:
    return DatedEvent(
        date=day,
        amount_cents=abs(amount_cents),
        source_id=source_id,
        source_kind=EventKind.OBLIGATION,
        settled=settled,
        reliability=reliability,
        direction=FlowDirection.INCOME,
    )


@pytest.fixture
def sample_obligations() -> List[RecurringObligation]:
    """Typical agency cost base plus two client retainers"""
    return [
        make_obligation(id="rent", label="Office rent", gross_amount_cents=120_000, anchor_day=5),
        make_obligation(
            id="software",
            label="Software licences",
            gross_amount_cents=30_000,
            frequency="quarterly",
            anchor_day=31,
            valid_from=date(2026, 1, 31),
            priority=Priority.IMPORTANT,
        ),
        make_obligation(
            id="insurance",
            label="Insurance",
            gross_amount_cents=90_000,
            frequency="annual",
            anchor_day=15,
            valid_from=date(2025, 6, 15),
            priority=Priority.NORMAL,
        ),
        make_income(id="acme", label="Retainer ACME", gross_amount_cents=244_000),
        make_income(
            id="globex",
            label="Retainer Globex",
            gross_amount_cents=122_000,
            anchor_day=10,
            reliability=Reliability.MEDIUM,
        ),
    ]


@pytest.fixture
def sample_debt_plans() -> List[DebtInstallmentPlan]:
    """Tax authority repayment plan, two installments already paid"""
    return [
        DebtInstallmentPlan(
            id="tax-plan",
            creditor="Revenue Agency",
            total_amount_cents=120_000,
            installment_amount_cents=10_000,
            installment_count=12,
            paid_count=2,
            start_date=date(2026, 1, 16),
        )
    ]


@pytest.fixture
def sample_sales() -> List[SalesCommitment]:
    """Pipeline mixing won, open and lost deals"""
    return [
        SalesCommitment(
            id="website",
            gross_amount_cents=610_000,
            commission_rate_percent=0,
            payment_plan_type="half_now_half_60d",
            target_month=3,
            target_year=2026,
            status=SalesStatus.WON,
        ),
        SalesCommitment(
            id="marketing",
            gross_amount_cents=488_000,
            commission_rate_percent=10,
            payment_plan_type="quarterly_4x",
            target_month=11,
            target_year=2026,
            status=SalesStatus.OPPORTUNITY,
        ),
        SalesCommitment(
            id="lost-deal",
            gross_amount_cents=1_000_000,
            commission_rate_percent=0,
            payment_plan_type="immediate",
            target_month=3,
            target_year=2026,
            status=SalesStatus.LOST,
        ),
    ]
