"""Data model for a saved DCF input set."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Any
from datetime import datetime, timezone

from constants.constants import SCENARIOS, DCF_DATA_MAX_AGE_SECONDS
from .projection_models import CompanyFinancials, ScenarioAssumptions

logger = logging.getLogger(__name__)


def _zero_scenarios() -> Dict[str, Decimal]:
    return {scenario: Decimal('0') for scenario in SCENARIOS}


@dataclass
class DCFData:
    """Inputs for one projection run, as stored in the dcf_data table."""
    symbol: str
    stock_price: Decimal = Decimal('0')
    revenue: Decimal = Decimal('0')
    net_income: Decimal = Decimal('0')
    shares_outstanding: Optional[int] = None
    current_eps: Optional[Decimal] = None
    revenue_growth: Dict[str, Decimal] = field(default_factory=_zero_scenarios)
    net_income_growth: Dict[str, Decimal] = field(default_factory=_zero_scenarios)
    pe_low: Dict[str, Decimal] = field(default_factory=_zero_scenarios)
    pe_high: Dict[str, Decimal] = field(default_factory=_zero_scenarios)
    timestamp: Optional[str] = None
    id: Optional[int] = None

    def to_financials(self) -> CompanyFinancials:
        return CompanyFinancials(
            revenue=self.revenue,
            net_income=self.net_income,
            stock_price=self.stock_price,
            shares_outstanding=self.shares_outstanding,
            current_eps=self.current_eps,
        )

    def to_scenarios(self) -> Dict[str, ScenarioAssumptions]:
        return {
            scenario: ScenarioAssumptions(
                revenue_growth_rate=self.revenue_growth[scenario],
                net_income_growth_rate=self.net_income_growth[scenario],
                pe_low=self.pe_low[scenario],
                pe_high=self.pe_high[scenario],
            )
            for scenario in SCENARIOS
        }

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        """True when the inputs were captured more than an hour ago."""
        if not self.timestamp:
            return False
        try:
            captured = datetime.fromisoformat(self.timestamp.replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Unparseable DCF timestamp for {self.symbol}: {self.timestamp}")
            return False
        if captured.tzinfo is None:
            captured = captured.replace(tzinfo=timezone.utc)
        now = now or datetime.now(timezone.utc)
        return (now - captured).total_seconds() > DCF_DATA_MAX_AGE_SECONDS

    def to_dict(self) -> Dict[str, Any]:
        """camelCase rendering matching the dashboard front end."""
        def _floats(values: Dict[str, Decimal]) -> Dict[str, float]:
            return {k: float(v) for k, v in values.items()}

        return {
            'symbol': self.symbol,
            'stockPrice': float(self.stock_price),
            'revenue': float(self.revenue),
            'netIncome': float(self.net_income),
            'sharesOutstanding': self.shares_outstanding,
            'currentEps': float(self.current_eps) if self.current_eps is not None else None,
            'revenueGrowth': _floats(self.revenue_growth),
            'netIncomeGrowth': _floats(self.net_income_growth),
            'peLow': _floats(self.pe_low),
            'peHigh': _floats(self.pe_high),
            'timestamp': self.timestamp,
        }
