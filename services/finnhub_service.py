"""Finnhub API service for quote, metric and profile data."""

import requests
import logging
from typing import Dict, Any, Optional
from datetime import datetime
from constants.constants import FINNHUB_API_KEY, FINNHUB_BASE_URL, FINNHUB_TIMEOUT
import util

logger = logging.getLogger(__name__)


class FinnhubService:
    """Service for interacting with the Finnhub REST API."""

    def __init__(self, api_key: Optional[str] = FINNHUB_API_KEY):
        self.api_key = api_key
        self.base_url = FINNHUB_BASE_URL

    def _get(self, path: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """GET one endpoint; failures are logged and reported as None."""
        url = f"{self.base_url}/{path}"
        try:
            response = requests.get(url, params={**params, 'token': self.api_key}, timeout=FINNHUB_TIMEOUT)
            response.raise_for_status()
            data = response.json()
            return data if isinstance(data, dict) else None

        except requests.exceptions.RequestException as e:
            logger.error(f"Finnhub request failed for {path} {params.get('symbol')}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid JSON from Finnhub {path} for {params.get('symbol')}: {e}")
            return None

    def fetch_quote(self, symbol: str) -> Optional[Dict[str, Any]]:
        return self._get('quote', {'symbol': symbol})

    def fetch_metrics(self, symbol: str) -> Optional[Dict[str, Any]]:
        return self._get('stock/metric', {'symbol': symbol, 'metric': 'all'})

    def fetch_company_profile(self, symbol: str) -> Optional[Dict[str, Any]]:
        return self._get('stock/profile2', {'symbol': symbol})

    def fetch_pe_ratios(self, symbol: str, current_year: Optional[int] = None) -> Dict[str, Any]:
        """
        Build the P/E summary for a symbol.

        Forward P/E comes from analyst estimates in the profile when present,
        otherwise it is projected from trailing EPS and 3-year EPS growth.
        A failed sub-request leaves its fields as None.

        Args:
            symbol: Stock ticker symbol
            current_year: Fiscal year treated as the 1-year forward year (defaults to now)

        Returns:
            Dictionary of P/E, EPS estimate, dividend and sector fields

        Raises:
            ValueError: FINNHUB_API_KEY is not configured
        """
        if not self.api_key:
            raise ValueError('FINNHUB_API_KEY environment variable is not set')

        year_one = current_year or datetime.now().year
        year_two = year_one + 1

        result: Dict[str, Any] = {
            'current_pe': None,
            'forward_pe_1_year': None,
            'forward_pe_2_year': None,
            'current_price': None,
            'eps_1_year': None,
            'eps_2_year': None,
            'dividend_per_share': None,
            'dividend_yield': None,
            'dividend_growth_rate': None,
            'industry_average_pe': None,
            'sector': None,
        }

        quote = self.fetch_quote(symbol)
        metrics = self.fetch_metrics(symbol)
        profile = self.fetch_company_profile(symbol)

        if quote:
            result['current_price'] = quote.get('c')

        metric = (metrics or {}).get('metric') or {}
        if metric:
            result['current_pe'] = metric.get('peTTM')
            result['forward_pe_1_year'] = metric.get('forwardPE')
            result['dividend_per_share'] = metric.get('dividendPerShareTTM')
            result['dividend_yield'] = metric.get('currentDividendYieldTTM')
            result['dividend_growth_rate'] = metric.get('dividendGrowthRate5Y')
        else:
            logger.info(f"Metrics data not available for {symbol}")

        if profile:
            sector = profile.get('finnhubIndustry')
            if sector:
                result['sector'] = sector
                result['industry_average_pe'] = util.get_industry_average_pe(sector)

            estimates = profile.get('estimates') or []
            eps_one = self._find_estimate(estimates, year_one)
            eps_two = self._find_estimate(estimates, year_two)
            price = result['current_price']

            if eps_one and price:
                result['eps_1_year'] = eps_one
                result['forward_pe_1_year'] = price / eps_one
            if eps_two and price:
                result['eps_2_year'] = eps_two
                result['forward_pe_2_year'] = price / eps_two
        else:
            logger.info(f"Company profile not available for {symbol}")

        # Fall back to projecting EPS from trailing growth
        if result['current_price'] and not result['forward_pe_1_year']:
            eps_ttm = metric.get('epsTTM')
            eps_growth = metric.get('epsGrowth3Y')
            if eps_ttm and eps_growth:
                growth_rate = eps_growth / 100
                price = result['current_price']

                eps_one = eps_ttm * (1 + growth_rate)
                eps_two = eps_ttm * (1 + growth_rate) ** 2
                result['eps_1_year'] = eps_one
                result['forward_pe_1_year'] = price / eps_one if eps_one else None
                result['eps_2_year'] = eps_two
                result['forward_pe_2_year'] = price / eps_two if eps_two else None

        logger.info(f"P/E ratios for {symbol}: {result}")
        return result

    @staticmethod
    def _find_estimate(estimates: list, year: int) -> Optional[float]:
        for estimate in estimates:
            period = str(estimate.get('period') or '')
            if str(year) in period:
                return estimate.get('epsAvg')
        return None
