"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Frequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"
    ONE_TIME = "one_time"


class PaymentPlanType(str, Enum):
    IMMEDIATE = "immediate"
    HALF_NOW_HALF_60D = "half_now_half_60d"
    THIRTY_SEVENTY_21D = "thirty_seventy_21d"
    QUARTERLY_4X = "quarterly_4x"
    CUSTOM = "custom"


class SalesStatus(str, Enum):
    OBJECTIVE = "objective"
    OPPORTUNITY = "opportunity"
    WON = "won"
    LOST = "lost"


class Reliability(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    ESSENTIAL = "essential"
    IMPORTANT = "important"
    INVESTMENT = "investment"
    NORMAL = "normal"


class FlowDirection(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class EventKind(str, Enum):
    OBLIGATION = "obligation"
    DEBT_INSTALLMENT = "debt_installment"
    SALES_INSTALLMENT = "sales_installment"


class BusinessStatus(str, Enum):
    DEFENSE = "defense"  # insolvency inside the defense window
    STABILIZATION = "stabilization"  # solvent but thin end balance
    GROWTH = "growth"


@dataclass
class RecurringObligation:
    """Recurring expense or expected income template from the record layer"""

    id: str
    label: str
    gross_amount_cents: int
    frequency: str  # Frequency value; validated at expansion time
    anchor_day: int
    valid_from: date
    valid_until: Optional[date] = None
    direction: str = FlowDirection.EXPENSE
    tag: Optional[str] = None
    priority: str = Priority.NORMAL  # outflows only
    reliability: str = Reliability.HIGH  # inflows only

    @property
    def is_income(self) -> bool:
        return self.direction == FlowDirection.INCOME


@dataclass
class DatedEvent:
    """Concrete occurrence of an obligation, debt installment or sales installment"""

    date: date
    amount_cents: int  # negative = outflow, positive = inflow
    source_id: str
    source_kind: str
    tags: Tuple[str, ...] = ()
    label: str = ""
    settled: bool = False  # paid (expense) or received (income)
    reliability: Optional[str] = None
    priority: Optional[str] = None
    direction: str = FlowDirection.EXPENSE  # taken from the source record, not the sign

    @property
    def is_income(self) -> bool:
        return self.direction == FlowDirection.INCOME

    @property
    def key(self) -> Tuple[str, str, date]:
        kind = self.source_kind.value if isinstance(self.source_kind, Enum) else self.source_kind
        return (kind, self.source_id, self.date)


@dataclass
class DebtInstallmentPlan:
    """Repayment plan owed to a creditor, paid monthly from start_date"""

    id: str
    creditor: str
    total_amount_cents: int
    installment_amount_cents: int
    installment_count: int
    paid_count: int
    start_date: date
    active: bool = True

    @property
    def has_schedule(self) -> bool:
        return self.installment_amount_cents > 0 and self.installment_count > 0


@dataclass
class DebtInstallment:
    """Single monthly installment of a debt plan"""

    plan_id: str
    creditor: str
    sequence: int  # 0-based
    due_date: date
    amount_cents: int
    paid: bool


@dataclass
class SalesCommitment:
    """Sale (target, opportunity or closed deal) with its payment plan"""

    id: str
    gross_amount_cents: int
    commission_rate_percent: int
    payment_plan_type: str
    target_month: int
    target_year: int
    status: str = SalesStatus.OPPORTUNITY
    label: str = ""


@dataclass
class ScheduledInstallment:
    """Partial amount of a sale falling in a calendar month"""

    month: int
    year: int
    amount_cents: int


@dataclass(frozen=True)
class SplitResult:
    """Breakdown of a gross (tax-inclusive) amount"""

    gross_amount_cents: int
    net_amount_cents: int
    commission_cents: int
    post_commission_cents: int
    tax_reserve_cents: int
    partner_shares_cents: Tuple[int, ...]  # per partner, for display
    partner_total_cents: int  # rounded once on the combined share
    available_amount_cents: int


@dataclass
class CashPosition:
    """Starting cash for one simulation run"""

    starting_balance_cents: int
    as_of_date: date


@dataclass
class DailyBalance:
    """End-of-day position in a simulated horizon"""

    date: date
    credits_cents: int
    debits_cents: int
    balance_cents: int


@dataclass
class SimulationResult:
    """Outcome of a day-by-day cash simulation"""

    insolvency_day_offset: Optional[int]
    insolvency_date: Optional[date]
    ending_balance_cents: int
    daily_balances: List[DailyBalance] = field(default_factory=list)

    @property
    def is_solvent(self) -> bool:
        return self.insolvency_day_offset is None


@dataclass
class SkippedItem:
    """Record left out of a batch computation, with the reason"""

    source_kind: str
    source_id: str
    reason: str


@dataclass
class MonthlyGapSnapshot:
    """Funding gap and sales coverage for one month"""

    month: int
    year: int
    expected_outflow_cents: int  # expense obligations + debt installments
    expected_inflow_available_cents: int
    debt_installment_cents: int
    gap_cents: int
    required_gross_revenue_cents: int
    committed_available_cents: int
    closed_available_cents: int
    coverage_percent: int
    obligation_outflow_cents: int = 0
    expected_inflow_gross_cents: int = 0
    sales_gross_cents: int = 0
    sales_commission_cents: int = 0
    closed_gross_cents: int = 0
    sales_count: int = 0
    remaining_gap_cents: int = 0
    remaining_target_gross_cents: int = 0


@dataclass
class GapTotals:
    """Year-level sums of the monthly snapshots"""

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


@dataclass
class GapReport:
    """Twelve monthly snapshots plus year totals and skipped records"""

    year: int
    commission_rate_percent: int
    months: List[MonthlyGapSnapshot]
    totals: GapTotals
    skipped: List[SkippedItem] = field(default_factory=list)

    def month(self, month: int) -> MonthlyGapSnapshot:
        return self.months[month - 1]


@dataclass
class DebtSummary:
    """Outstanding debt across active repayment plans"""

    total_cents: int
    remaining_cents: int
    plans_count: int
    plans_without_schedule: int


@dataclass
class CashOverview:
    """Short-horizon dashboard: survival day, totals, next payments"""

    as_of_date: date
    horizon_days: int
    current_balance_cents: int
    simulation: SimulationResult
    total_expenses_cents: int  # unsettled outflows, negative
    total_certain_income_cents: int  # available share of high-reliability inflows
    end_period_balance_cents: int
    required_revenue_cents: int
    status: BusinessStatus
    upcoming_expenses: List[DatedEvent]
    upcoming_incomes: List[DatedEvent]
    debt: DebtSummary
    skipped: List[SkippedItem] = field(default_factory=list)

    @property
    def insolvency_day_offset(self) -> Optional[int]:
        return self.simulation.insolvency_day_offset

    @property
    def insolvency_date(self) -> Optional[date]:
        return self.simulation.insolvency_date


MonthTotals = Dict[int, int]
