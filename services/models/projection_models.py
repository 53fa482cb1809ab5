"""Data models for scenario projections."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple
from datetime import datetime, timezone

from constants.constants import SCENARIOS


@dataclass(frozen=True)
class CompanyFinancials:
    """Base financials a projection starts from."""
    revenue: Decimal
    net_income: Decimal
    stock_price: Decimal
    shares_outstanding: Optional[int] = None
    current_eps: Optional[Decimal] = None


@dataclass(frozen=True)
class ScenarioAssumptions:
    """Growth and multiple assumptions for one scenario."""
    revenue_growth_rate: Decimal
    net_income_growth_rate: Decimal
    pe_low: Decimal
    pe_high: Decimal


@dataclass(frozen=True)
class ProjectionSeries:
    """Year-by-year projection for one scenario (index 0 is year 1)."""
    revenue_by_year: Tuple[Decimal, ...]
    net_income_by_year: Tuple[Decimal, ...]
    eps_by_year: Tuple[Decimal, ...]
    share_price_low_by_year: Tuple[Decimal, ...]
    share_price_high_by_year: Tuple[Decimal, ...]

    def to_dict(self) -> Dict[str, list]:
        return {
            'revenue': [float(v) for v in self.revenue_by_year],
            'net_income': [float(v) for v in self.net_income_by_year],
            'eps': [float(v) for v in self.eps_by_year],
            'share_price_low': [float(v) for v in self.share_price_low_by_year],
            'share_price_high': [float(v) for v in self.share_price_high_by_year],
        }


@dataclass(frozen=True)
class ProjectionResult:
    """Projections for every scenario plus 5-year CAGR of each price band.

    A CAGR of None means it is not computable (non-positive current price or
    non-positive projected price).
    """
    series: Dict[str, ProjectionSeries]
    cagr_low: Dict[str, Optional[Decimal]]
    cagr_high: Dict[str, Optional[Decimal]]
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def bear(self) -> ProjectionSeries:
        return self.series['bear']

    @property
    def base(self) -> ProjectionSeries:
        return self.series['base']

    @property
    def bull(self) -> ProjectionSeries:
        return self.series['bull']

    def case_prices(self) -> Dict[str, Decimal]:
        """Final-year price band per scenario, keyed like the stock_valuations columns."""
        prices = {}
        for scenario in SCENARIOS:
            low = self.series[scenario].share_price_low_by_year[-1]
            high = self.series[scenario].share_price_high_by_year[-1]
            prices[f'{scenario}_case_low_price'] = low
            prices[f'{scenario}_case_high_price'] = high
            prices[f'{scenario}_case_avg_price'] = (low + high) / 2
        return prices

    def to_dict(self) -> Dict[str, object]:
        """Plain-float rendering for JSON responses."""
        def _cagr(values: Dict[str, Optional[Decimal]]) -> Dict[str, Optional[float]]:
            return {k: (float(v) if v is not None else None) for k, v in values.items()}

        return {
            **{scenario: self.series[scenario].to_dict() for scenario in SCENARIOS},
            'cagr_low': _cagr(self.cagr_low),
            'cagr_high': _cagr(self.cagr_high),
            'timestamp': self.timestamp,
        }
