"""Projection service for bear/base/bull scenario projections."""

import logging
from decimal import Decimal, localcontext
from typing import Dict, Any, Optional, Mapping
from constants.constants import SCENARIOS, PROJECTION_YEARS, DECIMAL_PRECISION, PERCENTAGE_MULTIPLIER, GROWTH_PRECISION
from services.models import CompanyFinancials, ScenarioAssumptions, ProjectionSeries, ProjectionResult
import util

logger = logging.getLogger(__name__)


def project(
    financials: CompanyFinancials,
    scenarios: Mapping[str, ScenarioAssumptions],
    years: int = PROJECTION_YEARS
) -> ProjectionResult:
    """
    Project revenue, net income, EPS and price bands for every scenario.

    Year 1 carries the base financials unchanged and growth compounds from
    year 2. Once seeded, EPS grows at the net income growth rate rather than
    being re-derived from the share count. CAGR values that cannot be
    computed come back as None instead of raising.

    Args:
        financials: Base financials shared by all scenarios
        scenarios: Assumptions keyed 'bear', 'base' and 'bull'
        years: Projection horizon

    Returns:
        ProjectionResult with one series per scenario
    """
    series = {}
    cagr_low = {}
    cagr_high = {}

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION

        if financials.current_eps is not None and financials.current_eps > 0:
            seed_eps = financials.current_eps
        else:
            seed_eps = util.calculate_eps(financials.net_income, financials.shares_outstanding)

        for scenario in SCENARIOS:
            assumptions = scenarios[scenario]
            series[scenario] = _project_scenario(financials, seed_eps, assumptions, years)

            final_low = series[scenario].share_price_low_by_year[-1]
            final_high = series[scenario].share_price_high_by_year[-1]
            cagr_low[scenario] = util.calculate_cagr(financials.stock_price, final_low, years)
            cagr_high[scenario] = util.calculate_cagr(financials.stock_price, final_high, years)

    return ProjectionResult(series=series, cagr_low=cagr_low, cagr_high=cagr_high)


def _project_scenario(
    financials: CompanyFinancials,
    seed_eps: Decimal,
    assumptions: ScenarioAssumptions,
    years: int
) -> ProjectionSeries:
    revenue = [financials.revenue]
    net_income = [financials.net_income]
    eps = [seed_eps]

    for _ in range(1, years):
        revenue.append(util.calculate_projected_value(revenue[-1], assumptions.revenue_growth_rate))
        net_income.append(util.calculate_projected_value(net_income[-1], assumptions.net_income_growth_rate))
        eps.append(util.calculate_projected_value(eps[-1], assumptions.net_income_growth_rate))

    price_ranges = [util.calculate_stock_price_range(e, assumptions.pe_low, assumptions.pe_high) for e in eps]

    return ProjectionSeries(
        revenue_by_year=tuple(revenue),
        net_income_by_year=tuple(net_income),
        eps_by_year=tuple(eps),
        share_price_low_by_year=tuple(p['low'] for p in price_ranges),
        share_price_high_by_year=tuple(p['high'] for p in price_ranges),
    )


class ProjectionService:
    """Service for resolving projection inputs and running scenario projections."""

    def __init__(self, yfinance_service=None, dcf_service=None):
        # Imported here so the pure projector above has no client dependencies
        from services.yfinance_service import YFinanceService
        from services.dcf_service import DCFDataService

        self.yfinance_service = yfinance_service or YFinanceService()
        self.dcf_service = dcf_service or DCFDataService()

    def calculate_financial_projections(
        self,
        ticker: str,
        scenario_inputs: Dict[str, Dict[str, Any]],
        revenue: Optional[float] = None,
        net_income: Optional[float] = None,
        shares_outstanding: Optional[int] = None,
        current_stock_price: Optional[float] = None,
        current_eps: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Calculate scenario projections for a stock.

        Any base figure not supplied by the caller is fetched from Yahoo Finance.

        Args:
            ticker: Stock ticker symbol
            scenario_inputs: bear/base/bull dictionaries of revenue_growth,
                net_income_growth, pe_low and pe_high
            revenue: Optional - Base revenue
            net_income: Optional - Base net income
            shares_outstanding: Optional - Number of shares outstanding
            current_stock_price: Optional - Current stock price
            current_eps: Optional - Current EPS used to seed the EPS series

        Returns:
            Dictionary containing per-scenario projections and a summary
        """
        try:
            validation_errors = util.validate_scenario_inputs(scenario_inputs)
            if validation_errors:
                return {
                    'success': False,
                    'error': 'Validation failed',
                    'details': validation_errors,
                    'ticker': ticker
                }

            financials = self._resolve_financials(
                ticker, revenue, net_income, shares_outstanding, current_stock_price, current_eps
            )
            if financials is None:
                return {
                    'success': False,
                    'error': f'Failed to fetch base financial data for {ticker}',
                    'ticker': ticker
                }

            scenarios = self._build_scenarios(scenario_inputs)
            result = project(financials, scenarios)
            return self._build_response(ticker, financials, result)

        except Exception as e:
            logger.error(f"Error calculating projections for {ticker}: {e}")
            return {
                'success': False,
                'error': f'Internal error: {str(e)}',
                'ticker': ticker
            }

    def calculate_saved_projections(self, symbol: Optional[str] = None, dcf_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Run the projection over the latest saved DCF input set.

        Raises:
            InvalidInputError: neither symbol nor id given
            RecordNotFoundError: no saved input set matches
        """
        dcf_data = self.dcf_service.get(symbol=symbol, id=dcf_id)
        if dcf_data.is_stale():
            logger.warning(f"DCF data for {dcf_data.symbol} is older than 1 hour, consider refreshing")

        financials = dcf_data.to_financials()
        result = project(financials, dcf_data.to_scenarios())
        response = self._build_response(dcf_data.symbol, financials, result)
        response['dcf_id'] = dcf_data.id
        response['stale'] = dcf_data.is_stale()
        return response

    def get_default_inputs(self, ticker: str) -> Optional[Dict[str, Any]]:
        """Fetch base data for a ticker and seed default scenario assumptions."""
        base_data = self.yfinance_service.fetch_dcf_base_data(ticker)
        if not base_data:
            logger.warning(f"No base data available for {ticker}")
            return None

        defaults = util.build_default_assumptions(
            base_data.get('earnings_growth'), base_data.get('current_pe')
        )

        return {
            'symbol': ticker.upper(),
            'stockPrice': base_data.get('price') or 0,
            'revenue': base_data.get('revenue') or 0,
            'netIncome': base_data.get('net_income') or 0,
            'sharesOutstanding': base_data.get('shares_outstanding') or 0,
            'currentEps': base_data.get('eps'),
            'revenueGrowth': {s: float(v) for s, v in defaults['revenue_growth'].items()},
            'netIncomeGrowth': {s: float(v) for s, v in defaults['net_income_growth'].items()},
            'peLow': {s: float(v) for s, v in defaults['pe_low'].items()},
            'peHigh': {s: float(v) for s, v in defaults['pe_high'].items()},
        }

    def _resolve_financials(
        self,
        ticker: str,
        revenue: Optional[float],
        net_income: Optional[float],
        shares_outstanding: Optional[int],
        stock_price: Optional[float],
        current_eps: Optional[float]
    ) -> Optional[CompanyFinancials]:
        """Combine caller-supplied figures with fetched ones."""
        needs_fetch = revenue is None or net_income is None or stock_price is None
        fetched: Dict[str, Any] = {}
        if needs_fetch:
            fetched = self.yfinance_service.fetch_dcf_base_data(ticker) or {}

        revenue = revenue if revenue is not None else fetched.get('revenue')
        net_income = net_income if net_income is not None else fetched.get('net_income')
        if revenue is None or net_income is None:
            return None

        if stock_price is None:
            stock_price = fetched.get('price')
            if stock_price is None:
                # CAGR comes back as not computable rather than failing the whole run
                logger.warning(f"No current price for {ticker}, CAGR will not be computable")
                stock_price = 0

        if shares_outstanding is None:
            shares_outstanding = fetched.get('shares_outstanding')
        if current_eps is None:
            current_eps = fetched.get('eps')

        return CompanyFinancials(
            revenue=util.to_decimal(revenue),
            net_income=util.to_decimal(net_income),
            stock_price=util.to_decimal(stock_price),
            shares_outstanding=int(shares_outstanding) if shares_outstanding else None,
            current_eps=util.to_decimal(current_eps),
        )

    def _build_scenarios(self, scenario_inputs: Dict[str, Dict[str, Any]]) -> Dict[str, ScenarioAssumptions]:
        return {
            scenario: ScenarioAssumptions(
                revenue_growth_rate=util.to_decimal(scenario_inputs[scenario]['revenue_growth']),
                net_income_growth_rate=util.to_decimal(scenario_inputs[scenario]['net_income_growth']),
                pe_low=util.to_decimal(scenario_inputs[scenario]['pe_low']),
                pe_high=util.to_decimal(scenario_inputs[scenario]['pe_high']),
            )
            for scenario in SCENARIOS
        }

    def _build_response(self, ticker: str, financials: CompanyFinancials, result: ProjectionResult) -> Dict[str, Any]:
        return {
            'success': True,
            'ticker': ticker.upper(),
            'base_data': {
                'current_stock_price': float(financials.stock_price),
                'shares_outstanding': util.resolve_shares_outstanding(financials.shares_outstanding),
                'current_revenue': float(financials.revenue),
                'current_net_income': float(financials.net_income),
                'current_eps': float(financials.current_eps) if financials.current_eps is not None else None
            },
            'projections': result.to_dict(),
            'summary': self._calculate_summary(result, financials.stock_price)
        }

    def _calculate_summary(self, result: ProjectionResult, current_price: Decimal) -> Dict[str, Any]:
        """Calculate summary statistics from projections."""
        case_prices = result.case_prices()
        upside_potential = {}
        for scenario in SCENARIOS:
            low = case_prices[f'{scenario}_case_low_price']
            high = case_prices[f'{scenario}_case_high_price']
            if current_price > 0:
                upside_potential[scenario] = {
                    'low_estimate': util.round_or_none((low / current_price - 1) * PERCENTAGE_MULTIPLIER, GROWTH_PRECISION),
                    'high_estimate': util.round_or_none((high / current_price - 1) * PERCENTAGE_MULTIPLIER, GROWTH_PRECISION)
                }
            else:
                upside_potential[scenario] = {'low_estimate': None, 'high_estimate': None}

        return {
            'projection_years': PROJECTION_YEARS,
            'case_prices': {key: util.round_or_none(value) for key, value in case_prices.items()},
            'upside_potential': upside_potential,
            'cagr_percent': {
                scenario: {
                    'low': util.round_or_none(
                        result.cagr_low[scenario] * PERCENTAGE_MULTIPLIER if result.cagr_low[scenario] is not None else None,
                        GROWTH_PRECISION
                    ),
                    'high': util.round_or_none(
                        result.cagr_high[scenario] * PERCENTAGE_MULTIPLIER if result.cagr_high[scenario] is not None else None,
                        GROWTH_PRECISION
                    )
                }
                for scenario in SCENARIOS
            }
        }
