"""Tests for services.watchlist_service."""

import pytest

from services.exceptions import DuplicateRecordError, InvalidInputError, RecordNotFoundError
from services.watchlist_service import WatchlistService

ROWS = [
    {'symbol': 'SPY', 'name': 'S&P 500', 'category': 'INDICES', 'icon': '', 'color': None,
     'data_source': 'yahoo', 'fred_series_id': None},
    {'symbol': 'DGS10', 'name': '10Y Treasury', 'category': 'RATES', 'icon': None, 'color': '#fff',
     'data_source': 'fred', 'fred_series_id': 'DGS10'},
]


def test_list_groups_by_category(fake_db):
    fake_db.queue(ROWS)

    result = WatchlistService(fake_db).list()

    assert 'ORDER BY category, display_order, symbol' in fake_db.last_sql
    assert fake_db.last_params == (True,)
    assert list(result['data']) == ['INDICES', 'RATES']
    assert result['symbols'][0]['icon'] is None
    assert result['symbols'][1]['fredSeriesId'] == 'DGS10'
    assert result['data']['RATES'][0]['dataSource'] == 'fred'


def test_list_all_category_is_unfiltered(fake_db):
    WatchlistService(fake_db).list(category='ALL')
    assert 'category = %s' not in fake_db.last_sql

    WatchlistService(fake_db).list(category='RATES')
    assert fake_db.last_params == (True, 'RATES')


def test_add_appends_to_category(fake_db):
    fake_db.queue([], [{'next_order': 4}], [{'symbol': 'QQQ', 'display_order': 4}])

    row = WatchlistService(fake_db).add('qqq', 'Nasdaq 100', 'INDICES')

    assert row['display_order'] == 4
    insert_params = fake_db.last_params
    assert insert_params[0] == 'QQQ'
    assert insert_params[8] == 4


def test_add_duplicate(fake_db):
    fake_db.queue([{'id': 1}])

    with pytest.raises(DuplicateRecordError):
        WatchlistService(fake_db).add('SPY', 'S&P 500', 'INDICES')


def test_add_requires_fields(fake_db):
    with pytest.raises(InvalidInputError):
        WatchlistService(fake_db).add('SPY', None, 'INDICES')


def test_remove_not_found(fake_db):
    with pytest.raises(RecordNotFoundError):
        WatchlistService(fake_db).remove('SPY')
