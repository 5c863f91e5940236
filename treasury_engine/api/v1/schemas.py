"""Pydantic schemas for projection request/response validation"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from treasury_engine.config import settings
from treasury_engine.domain.models import (
    BusinessStatus,
    CashPosition,
    DebtInstallmentPlan,
    EventKind,
    FlowDirection,
    Priority,
    RecurringObligation,
    Reliability,
    SalesCommitment,
    SalesStatus,
)


class RecordModel(BaseModel):
    """Base for records handed over by the CRUD layer (numeric ids accepted)"""

    model_config = ConfigDict(coerce_numbers_to_str=True)


class ObligationRecord(RecordModel):
    """Expected expense or expected income"""

    id: str
    label: str = ""
    gross_amount_cents: int = Field(..., ge=0, description="Tax-inclusive amount in cents")
    frequency: str = Field(..., description="monthly | quarterly | semiannual | annual | one_time")
    anchor_day: Optional[int] = Field(None, ge=1, le=31, description="Due day of month")
    valid_from: date
    valid_until: Optional[date] = None
    direction: FlowDirection = FlowDirection.EXPENSE
    tag: Optional[str] = None
    priority: Priority = Priority.NORMAL
    reliability: Reliability = Reliability.HIGH

    def to_domain(self) -> RecurringObligation:
        anchor_day = self.anchor_day
        if anchor_day is None:
            anchor_day = (
                settings.default_income_day
                if self.direction == FlowDirection.INCOME
                else settings.default_expense_day
            )
        return RecurringObligation(
            id=self.id,
            label=self.label,
            gross_amount_cents=self.gross_amount_cents,
            frequency=self.frequency,
            anchor_day=anchor_day,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
            direction=self.direction,
            tag=self.tag,
            priority=self.priority,
            reliability=self.reliability,
        )


class DebtPlanRecord(RecordModel):
    """Repayment plan with a creditor"""

    id: str
    creditor: str
    total_amount_cents: int = Field(..., ge=0)
    installment_amount_cents: int = Field(0, ge=0)
    installment_count: int = Field(0, ge=0)
    paid_count: int = Field(0, ge=0)
    start_date: date
    active: bool = True

    def to_domain(self) -> DebtInstallmentPlan:
        return DebtInstallmentPlan(**self.model_dump())


class SalesCommitmentRecord(RecordModel):
    """Sales target, opportunity or closed deal"""

    id: str
    label: str = ""
    gross_amount_cents: int = Field(..., ge=0)
    commission_rate_percent: int = Field(0, ge=0, le=100)
    payment_plan_type: str = Field(..., description="immediate | half_now_half_60d | thirty_seventy_21d | quarterly_4x | custom")
    target_month: int = Field(..., ge=1, le=12)
    target_year: int
    status: SalesStatus = SalesStatus.OPPORTUNITY

    def to_domain(self) -> SalesCommitment:
        return SalesCommitment(**self.model_dump())


class SettledEventRecord(RecordModel):
    """Occurrence already paid or received"""

    source_kind: EventKind
    source_id: str
    date: date

    def key(self):
        return (self.source_kind.value, self.source_id, self.date)


class CashProjectionRequest(BaseModel):
    """Input for the short-horizon cash projection"""

    starting_balance_cents: int
    as_of_date: date
    horizon_days: Optional[int] = Field(None, ge=0)
    obligations: List[ObligationRecord] = []
    debt_plans: List[DebtPlanRecord] = []
    settled: List[SettledEventRecord] = []

    def position(self) -> CashPosition:
        return CashPosition(starting_balance_cents=self.starting_balance_cents, as_of_date=self.as_of_date)


class GapReportRequest(BaseModel):
    """Input for the yearly funding gap report"""

    year: int = Field(..., ge=1900, le=9999)
    commission_rate_percent: int = Field(0, ge=0, le=100)
    obligations: List[ObligationRecord] = []
    debt_plans: List[DebtPlanRecord] = []
    sales_commitments: List[SalesCommitmentRecord] = []


class SplitRequest(BaseModel):
    """Input for a single revenue split"""

    gross_amount_cents: int = Field(..., ge=0)
    commission_rate_percent: int = Field(0, ge=0, le=100)


class DomainView(BaseModel):
    """Response built from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class EventSchema(DomainView):
    date: date
    amount_cents: int
    source_id: str
    source_kind: EventKind
    label: str
    tags: List[str]
    settled: bool
    reliability: Optional[Reliability] = None
    priority: Optional[Priority] = None
    direction: FlowDirection


class DailyBalanceSchema(DomainView):
    date: date
    credits_cents: int
    debits_cents: int
    balance_cents: int


class DebtSummarySchema(DomainView):
    total_cents: int
    remaining_cents: int
    plans_count: int
    plans_without_schedule: int


class SkippedItemSchema(DomainView):
    source_kind: str
    source_id: str
    reason: str


class CashProjectionResponse(BaseModel):
    """Survival day, period totals and next payments"""

    as_of_date: date
    horizon_days: int
    current_balance_cents: int
    insolvency_day_offset: Optional[int]
    insolvency_date: Optional[date]
    end_period_balance_cents: int
    total_expenses_cents: int
    total_certain_income_cents: int
    required_revenue_cents: int
    status: BusinessStatus
    upcoming_expenses: List[EventSchema]
    upcoming_incomes: List[EventSchema]
    daily_balances: List[DailyBalanceSchema]
    debt: DebtSummarySchema
    skipped: List[SkippedItemSchema]


class SplitResponse(DomainView):
    gross_amount_cents: int
    net_amount_cents: int
    commission_cents: int
    post_commission_cents: int
    tax_reserve_cents: int
    partner_shares_cents: List[int]
    partner_total_cents: int
    available_amount_cents: int
    balanced: bool = True


class GapSnapshotSchema(DomainView):
    month: int
    year: int
    expected_outflow_cents: int
    expected_inflow_available_cents: int
    debt_installment_cents: int
    gap_cents: int
    required_gross_revenue_cents: int
    committed_available_cents: int
    closed_available_cents: int
    coverage_percent: int
    obligation_outflow_cents: int
    expected_inflow_gross_cents: int
    sales_gross_cents: int
    sales_commission_cents: int
    closed_gross_cents: int
    sales_count: int
    remaining_gap_cents: int
    remaining_target_gross_cents: int


class GapTotalsSchema(DomainView):
    expected_outflow_cents: int
    expected_inflow_available_cents: int
    expected_inflow_gross_cents: int
    obligation_outflow_cents: int
    debt_installment_cents: int
    gap_cents: int
    required_gross_revenue_cents: int
    committed_available_cents: int
    closed_available_cents: int
    sales_gross_cents: int
    sales_commission_cents: int
    closed_gross_cents: int
    remaining_gap_cents: int
    coverage_percent: int


class GapReportResponse(DomainView):
    """Twelve monthly snapshots, year totals and skipped records"""

    year: int
    commission_rate_percent: int
    months: List[GapSnapshotSchema]
    totals: GapTotalsSchema
    skipped: List[SkippedItemSchema]
