"""
E2E tests for typical small-business situations, run through the public
projection operations with records shaped like the bookkeeping exports.

Scenarios:
- studio_growth: healthy retainers, projection stays positive
- agency_defense: rent due before the only invoice, cash runs out early
- freelancer_plan: yearly gap report with debt and a mixed sales pipeline
"""

import pytest
from treasury_engine.api.main import project_cash, report_funding_gap
from treasury_engine.api.v1.schemas import CashProjectionRequest, GapReportRequest

RENT = {
    "id": "rent",
    "label": "Office rent",
    "gross_amount_cents": 120_000,
    "frequency": "monthly",
    "anchor_day": 5,
    "valid_from": "2025-01-01",
    "priority": "essential",
}

SOFTWARE = {
    "id": "software",
    "label": "Software licences",
    "gross_amount_cents": 30_000,
    "frequency": "quarterly",
    "anchor_day": 31,
    "valid_from": "2026-01-31",
    "priority": "important",
}

RETAINER = {
    "id": "retainer",
    "label": "Retainer",
    "gross_amount_cents": 244_000,
    "frequency": "monthly",
    "anchor_day": 20,
    "valid_from": "2025-01-01",
    "direction": "income",
    "reliability": "high",
}

TAX_PLAN = {
    "id": "tax-plan",
    "creditor": "Revenue Agency",
    "total_amount_cents": 120_000,
    "installment_amount_cents": 10_000,
    "installment_count": 12,
    "paid_count": 2,
    "start_date": "2026-01-16",
}


@pytest.mark.integration
def test_studio_growth():
    """
    studio_growth: 5000.00 in the bank, rent, debt and one strong retainer
    Expected: solvent all quarter, growth status
    """
    response = project_cash(
        CashProjectionRequest(
            starting_balance_cents=500_000,
            as_of_date="2026-03-01",
            horizon_days=90,
            obligations=[RENT, SOFTWARE, RETAINER],
            debt_plans=[TAX_PLAN],
        )
    )

    assert response.insolvency_day_offset is None, "retainer should keep the studio afloat"
    # 3 x rent, April software, 3 debt installments, 3 retainer shares
    assert response.end_period_balance_cents == 500_000 - 360_000 - 30_000 - 30_000 + 420_000
    assert response.status == "growth"
    assert response.debt.remaining_cents == 100_000


@pytest.mark.integration
def test_agency_defense():
    """
    agency_defense: 500.00 in the bank, rent on the 5th, retainer only on the 20th
    Expected: insolvency on day 4, defense status, positive end balance
    """
    response = project_cash(
        CashProjectionRequest(
            starting_balance_cents=50_000,
            as_of_date="2026-03-01",
            horizon_days=30,
            obligations=[RENT, RETAINER],
            debt_plans=[TAX_PLAN],
        )
    )

    assert response.insolvency_day_offset == 4
    assert str(response.insolvency_date) == "2026-03-05"
    assert response.status == "defense"
    assert response.end_period_balance_cents == 50_000 - 120_000 - 10_000 + 140_000
    assert [e.source_id for e in response.upcoming_expenses] == ["rent"]


@pytest.mark.integration
def test_agency_out_of_cash_needs_billing():
    """
    agency_defense without the retainer
    Expected: negative end balance translated into gross billing needed
    """
    response = project_cash(
        CashProjectionRequest(
            starting_balance_cents=50_000,
            as_of_date="2026-03-01",
            horizon_days=30,
            obligations=[RENT],
            debt_plans=[TAX_PLAN],
        )
    )

    assert response.end_period_balance_cents == -80_000
    assert response.required_revenue_cents == 139_429  # 80000 * 1.22 / 0.7


@pytest.mark.integration
def test_freelancer_plan():
    """
    freelancer_plan: yearly plan with one won deal, one open deal and one lost deal
    Expected: lost deal ignored, won deal counted as closed, gap totals consistent
    """
    response = report_funding_gap(
        GapReportRequest(
            year=2026,
            commission_rate_percent=10,
            obligations=[RENT, SOFTWARE, RETAINER],
            debt_plans=[TAX_PLAN],
            sales_commitments=[
                {
                    "id": "website",
                    "gross_amount_cents": 610_000,
                    "payment_plan_type": "half_now_half_60d",
                    "target_month": 3,
                    "target_year": 2026,
                    "status": "won",
                },
                {
                    "id": "campaign",
                    "gross_amount_cents": 244_000,
                    "commission_rate_percent": 20,
                    "payment_plan_type": "thirty_seventy_21d",
                    "target_month": 6,
                    "target_year": 2026,
                },
                {
                    "id": "rebrand",
                    "gross_amount_cents": 5_000_000,
                    "payment_plan_type": "immediate",
                    "target_month": 6,
                    "target_year": 2026,
                    "status": "lost",
                },
            ],
        )
    )

    months = {m.month: m for m in response.months}
    assert months[1].gap_cents == 10_000  # rent + software - retainer share
    assert months[1].required_gross_revenue_cents == 19_365  # at 10% commission
    assert months[4].gap_cents == 20_000  # software + debt
    assert months[3].closed_available_cents == 175_000
    assert months[6].sales_gross_cents == 244_000
    assert months[6].closed_available_cents == 0
    assert months[6].sales_count == 1
    assert response.totals.closed_available_cents == 350_000
    assert response.totals.gap_cents == sum(m.gap_cents for m in response.months)
    assert response.skipped == []
