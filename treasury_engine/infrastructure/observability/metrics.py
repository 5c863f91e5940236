"""Prometheus metrics for insolvency signals, funding gaps and skipped records"""

from prometheus_client import Counter, Histogram

# Projection metrics
simulation_counter = Counter(
    "treasury_simulation_total",
    "Total cash projections run",
    ["outcome"],  # solvent | insolvent
)

insolvency_day_histogram = Histogram(
    "treasury_insolvency_day",
    "Days until the first insolvency day, when one is found",
    buckets=[0, 7, 14, 30, 60, 90, 180, 365],
)

gap_report_counter = Counter(
    "treasury_gap_report_total",
    "Total yearly gap reports built",
)

required_gross_histogram = Histogram(
    "treasury_required_gross_cents",
    "Yearly gross revenue required to close the funding gap",
    buckets=[0, 100_000, 1_000_000, 5_000_000, 10_000_000, 50_000_000, 100_000_000],
)

# Data quality
skipped_items_counter = Counter(
    "treasury_skipped_items_total",
    "Records left out of a batch computation",
    ["source_kind"],  # obligation | debt_installment | sales_installment
)

# Engine latency
projection_duration_histogram = Histogram(
    "treasury_projection_duration_seconds",
    "Projection engine call latency",
    ["operation"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)


def record_simulation(insolvency_day_offset) -> None:
    """Record projection outcome for monitoring how often cash runs out"""
    if insolvency_day_offset is None:
        simulation_counter.labels(outcome="solvent").inc()
        return

    simulation_counter.labels(outcome="insolvent").inc()
    insolvency_day_histogram.observe(insolvency_day_offset)


def record_gap_report(required_gross_cents: int) -> None:
    """Record a yearly gap report and its billing target"""
    gap_report_counter.inc()
    required_gross_histogram.observe(required_gross_cents)


def record_skipped_item(source_kind: str) -> None:
    skipped_items_counter.labels(source_kind=source_kind).inc()
