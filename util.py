"""
Simplified utilities for valuation calculations.
All functions in one file for easier debugging and maintenance.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Any, Optional
from urllib.parse import urlparse

from constants.constants import (
    SCENARIOS,
    DEFAULT_SHARES_OUTSTANDING,
    DEFAULT_REVENUE_GROWTH,
    DEFAULT_NET_INCOME_GROWTH,
    NET_INCOME_GROWTH_MULTIPLIERS,
    DEFAULT_PE,
    PE_LOW_MULTIPLIERS,
    PE_HIGH_MULTIPLIERS,
    INDUSTRY_AVERAGE_PE,
    PRICE_PRECISION,
)

logger = logging.getLogger(__name__)


# =============================================================================
# NUMBER CONVERSION
# =============================================================================

def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON/database number to Decimal without binary float drift."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so 0.1 becomes Decimal('0.1'), not its binary expansion
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def round_or_none(value: Optional[Decimal], precision: int = PRICE_PRECISION) -> Optional[float]:
    """Round a Decimal for display, passing None through."""
    if value is None:
        return None
    return round(float(value), precision)


# =============================================================================
# PROJECTION CALCULATIONS
# =============================================================================

def calculate_projected_value(base_value: Decimal, growth_rate: Decimal, years: int = 1) -> Decimal:
    """Compound a value forward by a fractional growth rate."""
    return base_value * ((1 + growth_rate) ** years)


def resolve_shares_outstanding(shares_outstanding: Optional[int]) -> int:
    """Substitute the default share count for a missing or non-positive one."""
    if shares_outstanding is None or shares_outstanding <= 0:
        return DEFAULT_SHARES_OUTSTANDING
    return int(shares_outstanding)


def calculate_eps(net_income: Decimal, shares_outstanding: Optional[int]) -> Decimal:
    """Calculate earnings per share."""
    return net_income / resolve_shares_outstanding(shares_outstanding)


def calculate_stock_price_range(eps: Decimal, pe_low: Decimal, pe_high: Decimal) -> Dict[str, Decimal]:
    """Calculate stock price range based on EPS and P/E ratios."""
    return {
        'low': eps * pe_low,
        'high': eps * pe_high
    }


def calculate_cagr(initial_value: Decimal, final_value: Decimal, years: int) -> Optional[Decimal]:
    """Calculate Compound Annual Growth Rate, or None when it is not computable."""
    if initial_value is None or final_value is None:
        return None
    if initial_value <= 0 or final_value <= 0 or years <= 0:
        return None
    return (final_value / initial_value) ** (Decimal(1) / Decimal(years)) - 1


# =============================================================================
# DEFAULT ASSUMPTIONS
# =============================================================================

def build_default_assumptions(
    historical_net_income_growth: Optional[Any] = None,
    current_pe: Optional[Any] = None
) -> Dict[str, Dict[str, Decimal]]:
    """
    Seed bear/base/bull assumptions for a freshly researched ticker.

    Revenue growth uses fixed rates. Net income growth centres on the
    historical rate; P/E bands centre on the current P/E.

    Args:
        historical_net_income_growth: Fractional historical growth rate, if known
        current_pe: Current P/E ratio, if known

    Returns:
        Dictionary keyed by field name, each a bear/base/bull dictionary
    """
    base_growth = to_decimal(historical_net_income_growth)
    if not base_growth:
        base_growth = DEFAULT_NET_INCOME_GROWTH

    base_pe = to_decimal(current_pe)
    if base_pe is None or base_pe <= 0:
        base_pe = DEFAULT_PE

    return {
        'revenue_growth': dict(DEFAULT_REVENUE_GROWTH),
        'net_income_growth': {s: base_growth * NET_INCOME_GROWTH_MULTIPLIERS[s] for s in SCENARIOS},
        'pe_low': {s: base_pe * PE_LOW_MULTIPLIERS[s] for s in SCENARIOS},
        'pe_high': {s: base_pe * PE_HIGH_MULTIPLIERS[s] for s in SCENARIOS},
    }


def get_industry_average_pe(sector: Optional[str]) -> Optional[float]:
    """Look up the industry average P/E for a sector (exact, then partial match)."""
    if not sector:
        return None

    if sector in INDUSTRY_AVERAGE_PE:
        return INDUSTRY_AVERAGE_PE[sector]

    sector_lower = sector.lower()
    for industry, pe in INDUSTRY_AVERAGE_PE.items():
        industry_lower = industry.lower()
        if industry_lower in sector_lower or sector_lower in industry_lower:
            return pe

    return None


# =============================================================================
# INPUT VALIDATION
# =============================================================================

def validate_scenario_inputs(scenario_inputs: Dict[str, Dict[str, Any]]) -> List[str]:
    """Validate bear/base/bull scenario inputs.

    Only presence and numeric type are checked; inverted P/E bands are allowed.
    """
    errors = []

    if not scenario_inputs:
        errors.append("Scenario inputs cannot be empty")
        return errors

    required_fields = ['revenue_growth', 'net_income_growth', 'pe_low', 'pe_high']
    for scenario in SCENARIOS:
        prefix = f"Scenario {scenario}:"
        inputs = scenario_inputs.get(scenario)
        if not isinstance(inputs, dict):
            errors.append(f"{prefix} Missing scenario")
            continue

        for field_name in required_fields:
            if field_name not in inputs:
                errors.append(f"{prefix} Missing required field '{field_name}'")
            elif to_decimal(inputs[field_name]) is None:
                errors.append(f"{prefix} {field_name} must be a number")

    unknown = set(scenario_inputs) - set(SCENARIOS)
    for scenario in sorted(unknown):
        errors.append(f"Unknown scenario '{scenario}'")

    return errors


def validate_ticker_symbol(ticker: str) -> List[str]:
    """Validate ticker symbol format."""
    errors = []

    if not ticker or not isinstance(ticker, str):
        errors.append("Ticker must be a non-empty string")
        return errors

    ticker = ticker.strip()

    if len(ticker) < 1 or len(ticker) > 10:
        errors.append("Ticker must be 1-10 characters")

    # Allow class shares and index/forex symbols such as BRK.B, ^GSPC, EURUSD=X
    if not all(ch.isalnum() or ch in '.-^=' for ch in ticker):
        errors.append("Ticker contains invalid characters")

    return errors


def validate_url(link: str) -> bool:
    """Check that a link is an absolute http(s) URL."""
    if not link or not isinstance(link, str):
        return False
    parsed = urlparse(link.strip())
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)
