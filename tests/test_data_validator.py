"""Tests for services.validators.data_validator."""

from decimal import Decimal

from services.validators import DataValidator

PAYLOAD = {
    'symbol': 'aapl',
    'stockPrice': 250,
    'revenue': 40195000000,
    'netIncome': 7873970000,
    'sharesOutstanding': 962000000,
    'currentEps': None,
    'revenueGrowth': {'bear': 0.05, 'base': 0.1, 'bull': 0.15},
    'netIncomeGrowth': {'bear': 0.1, 'base': 0.18, 'bull': 0.25},
    'peLow': {'bear': 15, 'base': 20, 'bull': 25},
    'peHigh': {'bear': 18, 'base': 24, 'bull': 30},
    'timestamp': '2025-06-01T12:00:00Z',
}


def test_valid_payload():
    assert DataValidator.validate_dcf_payload(PAYLOAD) == []


def test_invalid_payload_messages():
    payload = {**PAYLOAD, 'symbol': '', 'revenue': 'lots', 'peLow': {'bear': 'x'}, 'peHigh': [1, 2]}

    errors = DataValidator.validate_dcf_payload(payload)

    assert 'Symbol is required' in errors
    assert 'revenue must be a number' in errors
    assert 'peLow.bear must be a number' in errors
    assert 'peHigh must be an object with bear, base and bull' in errors


def test_empty_payload():
    assert DataValidator.validate_dcf_payload({}) == ['DCF payload is empty']
    assert DataValidator.validate_dcf_payload(None) == ['DCF payload is empty']


def test_convert_to_dcf_data():
    data = DataValidator.convert_to_dcf_data(PAYLOAD)

    assert data.symbol == 'AAPL'
    assert data.stock_price == Decimal('250')
    assert data.shares_outstanding == 962000000
    assert data.current_eps is None
    assert data.net_income_growth['base'] == Decimal('0.18')
    assert data.timestamp == '2025-06-01T12:00:00Z'


def test_convert_defaults_missing_scenarios():
    data = DataValidator.convert_to_dcf_data({'symbol': 'x'})

    assert data.revenue == Decimal('0')
    assert data.pe_high == {'bear': Decimal('0'), 'base': Decimal('0'), 'bull': Decimal('0')}
    assert data.shares_outstanding is None
