"""Engine entry point for the host application"""

from treasury_engine.api.v1.projections import project_cash, report_funding_gap, split_amount
from treasury_engine.config import settings
from treasury_engine.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)

__all__ = ["project_cash", "report_funding_gap", "split_amount"]
