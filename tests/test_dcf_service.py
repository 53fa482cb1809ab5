"""Tests for services.dcf_service."""

from decimal import Decimal

import pytest

from services.dcf_service import DCF_COLUMNS, DCFDataService
from services.exceptions import InvalidInputError, RecordNotFoundError
from services.models import DCFData


def _row(**overrides):
    row = {
        'id': 3,
        'symbol': 'AAPL',
        'stock_price': Decimal('250.0000'),
        'revenue': Decimal('40195000000.00'),
        'net_income': Decimal('7873970000.00'),
        'shares_outstanding': 962000000,
        'current_eps': None,
        'revenue_growth_bear': Decimal('0.05'),
        'revenue_growth_base': Decimal('0.10'),
        'revenue_growth_bull': Decimal('0.15'),
        'net_income_growth_bear': Decimal('0.10'),
        'net_income_growth_base': Decimal('0.18'),
        'net_income_growth_bull': Decimal('0.25'),
        'pe_low_bear': Decimal('15.6'),
        'pe_low_base': Decimal('20'),
        'pe_low_bull': Decimal('25'),
        'pe_high_bear': Decimal('18'),
        'pe_high_base': Decimal('24.9'),
        'pe_high_bull': Decimal('30'),
        'timestamp': '2025-01-01T00:00:00Z',
    }
    row.update(overrides)
    return row


def test_get_requires_symbol_or_id(fake_db):
    with pytest.raises(InvalidInputError):
        DCFDataService(fake_db).get()
    assert fake_db.calls == []


def test_get_by_symbol_upper_cases(fake_db):
    fake_db.queue([_row()])

    data = DCFDataService(fake_db).get(symbol='aapl')

    assert 'WHERE symbol = %s' in fake_db.last_sql
    assert fake_db.last_params == ('AAPL',)
    assert data.id == 3
    assert data.revenue_growth['base'] == Decimal('0.10')


def test_get_prefers_id(fake_db):
    fake_db.queue([_row()])

    DCFDataService(fake_db).get(symbol='AAPL', id=3)

    assert 'WHERE id = %s' in fake_db.last_sql
    assert fake_db.last_params == (3,)


def test_get_not_found(fake_db):
    with pytest.raises(RecordNotFoundError, match='No DCF data found'):
        DCFDataService(fake_db).get(symbol='NONE')


def test_row_conversion_truncates_pe_values():
    data = DCFDataService.row_to_dcf_data(_row(current_eps=Decimal('0')))

    assert data.pe_low['bear'] == Decimal('15')
    assert data.pe_high['base'] == Decimal('24')
    assert data.current_eps is None


def test_create_defaults_missing_figures(fake_db):
    fake_db.queue([{'id': 11, 'created_at': '2025-01-01', 'updated_at': '2025-01-01'}])

    result = DCFDataService(fake_db).create(DCFData(symbol='msft'))

    assert result == {'success': True, 'id': 11, 'created_at': '2025-01-01'}
    params = dict(zip(DCF_COLUMNS, fake_db.last_params))
    assert params['symbol'] == 'MSFT'
    assert params['revenue'] == 0
    assert params['shares_outstanding'] == 50_000_000
    assert params['current_eps'] is None
    assert params['timestamp']


def test_create_requires_symbol(fake_db):
    with pytest.raises(InvalidInputError):
        DCFDataService(fake_db).create(DCFData(symbol=''))


def test_update_not_found(fake_db):
    with pytest.raises(RecordNotFoundError):
        DCFDataService(fake_db).update(99, DCFData(symbol='AAPL'))
    assert 'updated_at = NOW()' in fake_db.last_sql
    assert fake_db.last_params[-1] == 99


def test_update_requires_id(fake_db):
    with pytest.raises(InvalidInputError):
        DCFDataService(fake_db).update(None, DCFData(symbol='AAPL'))


def test_delete(fake_db):
    fake_db.queue([{'id': 5}])

    assert DCFDataService(fake_db).delete(5) == {'success': True, 'id': 5}

    with pytest.raises(RecordNotFoundError):
        DCFDataService(fake_db).delete(6)


def test_list_newest_first_with_limit(fake_db):
    fake_db.queue([{'id': 1, 'symbol': 'AAPL', 'stock_price': Decimal('250.12344'),
                    'revenue': Decimal('1000.554'), 'created_at': None, 'updated_at': None}])

    rows = DCFDataService(fake_db).list(symbol='aapl', limit=10)

    assert 'ORDER BY created_at DESC LIMIT %s' in fake_db.last_sql
    assert fake_db.last_params == ('AAPL', 10)
    assert rows[0]['stock_price'] == 250.1234
    assert rows[0]['revenue'] == 1000.55
