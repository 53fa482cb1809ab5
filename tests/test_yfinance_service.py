"""Tests for services.yfinance_service."""

from unittest.mock import MagicMock, patch

import pandas as pd

from services.yfinance_service import YFinanceService


def _ticker(info, financials=None):
    ticker = MagicMock()
    ticker.info = info
    ticker.financials = financials if financials is not None else pd.DataFrame()
    return ticker


@patch('services.yfinance_service.yf.Ticker')
def test_base_data_prefers_latest_statement_values(mock_ticker):
    financials = pd.DataFrame(
        {'2024-09-30': [391e9, 94e9, 6.11], '2023-09-30': [383e9, 97e9, 6.16]},
        index=['Total Revenue', 'Net Income', 'Basic EPS'],
    )
    mock_ticker.return_value = _ticker({
        'currentPrice': 230.0,
        'sharesOutstanding': 15_000_000_000,
        'trailingPE': 37.5,
        'earningsGrowth': 0.1,
        'totalRevenue': 1.0,
    }, financials)

    data = YFinanceService().fetch_dcf_base_data('aapl')

    assert data == {
        'ticker': 'AAPL',
        'price': 230.0,
        'revenue': 391e9,
        'net_income': 94e9,
        'eps': 6.11,
        'shares_outstanding': 15_000_000_000,
        'current_pe': 37.5,
        'earnings_growth': 0.1,
    }


@patch('services.yfinance_service.yf.Ticker')
def test_base_data_skips_missing_statement_values(mock_ticker):
    financials = pd.DataFrame(
        {'2024-12-31': [float('nan')], '2023-12-31': [50e9]},
        index=['Net Income'],
    )
    mock_ticker.return_value = _ticker({
        'regularMarketPrice': 99.0,
        'impliedSharesOutstanding': 1000,
        'totalRevenue': 300e9,
        'trailingEps': 2.5,
    }, financials)

    data = YFinanceService().fetch_dcf_base_data('XYZ')

    assert data['revenue'] == 300e9
    assert data['net_income'] == 50e9
    assert data['eps'] == 2.5
    assert data['price'] == 99.0
    assert data['shares_outstanding'] == 1000


@patch('services.yfinance_service.yf.Ticker')
def test_base_data_none_without_info(mock_ticker):
    mock_ticker.return_value = _ticker({})

    assert YFinanceService().fetch_dcf_base_data('NONE') is None


@patch('services.yfinance_service.yf.Ticker')
def test_base_data_none_on_error(mock_ticker):
    mock_ticker.side_effect = RuntimeError('rate limited')

    assert YFinanceService().fetch_dcf_base_data('AAPL') is None


@patch('services.yfinance_service.yf.Ticker')
def test_current_price_falls_back_to_previous_close(mock_ticker):
    mock_ticker.return_value = _ticker({'previousClose': 10.5})

    assert YFinanceService().get_current_price('ABC') == 10.5


@patch('services.yfinance_service.yf.Ticker')
def test_shares_outstanding_missing(mock_ticker):
    mock_ticker.return_value = _ticker({'currentPrice': 1.0})

    assert YFinanceService().get_shares_outstanding('ABC') is None
