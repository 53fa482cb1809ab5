"""YFinance service for fetching stock data from Yahoo Finance."""

import yfinance as yf
import pandas as pd
import logging
from typing import Dict, Any, Optional, List
from constants.constants import (
    TICKER_KEY, PRICE_KEY, REVENUE_KEY, NET_INCOME_KEY, EPS_KEY,
    SHARES_OUTSTANDING_KEY, CURRENT_PE_KEY, EARNINGS_GROWTH_KEY
)

logger = logging.getLogger(__name__)


class YFinanceService:
    """Service for interacting with Yahoo Finance API via yfinance."""

    PRICE_FIELDS = ['currentPrice', 'regularMarketPrice', 'previousClose']
    SHARES_FIELDS = ['sharesOutstanding', 'impliedSharesOutstanding']
    REVENUE_ROWS = ['Total Revenue', 'Revenue']
    NET_INCOME_ROWS = ['Net Income', 'Net Income Common Stockholders']
    EPS_ROWS = ['Basic EPS', 'Diluted EPS']

    def fetch_dcf_base_data(self, ticker: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the base figures a DCF projection starts from.

        Revenue and net income come from the latest annual income statement,
        falling back to the trailing figures in the quote summary.

        Args:
            ticker: Stock ticker symbol

        Returns:
            Dictionary with ticker, price, revenue, net_income, eps,
            shares_outstanding, current_pe and earnings_growth, or None if failed
        """
        try:
            stock = yf.Ticker(ticker)
            info = stock.info

            if not info:
                logger.warning(f"No stock info available for {ticker}")
                return None

            financials = stock.financials

            revenue = self._latest_statement_value(financials, self.REVENUE_ROWS)
            if revenue is None:
                revenue = info.get('totalRevenue')

            net_income = self._latest_statement_value(financials, self.NET_INCOME_ROWS)
            if net_income is None:
                net_income = info.get('netIncomeToCommon')

            eps = info.get('trailingEps')
            if eps is None:
                eps = self._latest_statement_value(financials, self.EPS_ROWS)

            shares = self._first_present(info, self.SHARES_FIELDS)

            return {
                TICKER_KEY: ticker.upper(),
                PRICE_KEY: self._first_present(info, self.PRICE_FIELDS),
                REVENUE_KEY: float(revenue) if revenue is not None else None,
                NET_INCOME_KEY: float(net_income) if net_income is not None else None,
                EPS_KEY: float(eps) if eps is not None else None,
                SHARES_OUTSTANDING_KEY: int(shares) if shares is not None else None,
                CURRENT_PE_KEY: info.get('trailingPE'),
                EARNINGS_GROWTH_KEY: info.get('earningsGrowth'),
            }

        except Exception as e:
            logger.error(f"Error fetching DCF base data for {ticker}: {e}")
            return None

    def get_current_price(self, ticker: str) -> Optional[float]:
        """
        Get current stock price.

        Args:
            ticker: Stock ticker symbol

        Returns:
            Current stock price or None if failed
        """
        try:
            info = yf.Ticker(ticker).info
            price = self._first_present(info, self.PRICE_FIELDS)
            if price is None:
                logger.warning(f"No current price available for {ticker}")
            return price

        except Exception as e:
            logger.error(f"Error fetching current price for {ticker}: {e}")
            return None

    def get_shares_outstanding(self, ticker: str) -> Optional[int]:
        """
        Get shares outstanding.

        Args:
            ticker: Stock ticker symbol

        Returns:
            Shares outstanding or None if failed
        """
        try:
            info = yf.Ticker(ticker).info
            shares = self._first_present(info, self.SHARES_FIELDS)
            if shares is None:
                logger.warning(f"No shares outstanding data for {ticker}")
                return None
            return int(shares)

        except Exception as e:
            logger.error(f"Error fetching shares outstanding for {ticker}: {e}")
            return None

    @staticmethod
    def _first_present(info: Dict[str, Any], fields: List[str]) -> Optional[float]:
        for field in fields:
            value = info.get(field)
            if value is not None:
                return float(value)
        return None

    @staticmethod
    def _latest_statement_value(statement: Optional[pd.DataFrame], row_names: List[str]) -> Optional[float]:
        """Most recent non-null value of the first matching statement row."""
        if statement is None or statement.empty:
            return None

        for name in row_names:
            if name not in statement.index:
                continue
            # yfinance orders statement columns newest first
            for value in statement.loc[name]:
                if not pd.isna(value):
                    return float(value)
        return None
