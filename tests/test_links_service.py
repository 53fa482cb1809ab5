"""Tests for services.links_service."""

import pytest

from services.exceptions import InvalidInputError, RecordNotFoundError
from services.links_service import LinksService


def test_get_by_valuation_newest_first(fake_db):
    fake_db.queue([{'id': 2, 'link': 'https://a.example', 'date_added': None, 'stock_valuations_id': 1}])

    links = LinksService(fake_db).get(stock_valuations_id=1)

    assert 'ORDER BY date_added DESC' in fake_db.last_sql
    assert links[0]['link'] == 'https://a.example'


def test_get_requires_a_filter(fake_db):
    with pytest.raises(InvalidInputError):
        LinksService(fake_db).get()


def test_create_validates_url(fake_db):
    service = LinksService(fake_db)

    with pytest.raises(InvalidInputError, match='Invalid URL format'):
        service.create('not a url', 1)
    with pytest.raises(InvalidInputError, match='Invalid URL format'):
        service.create('ftp://files.example/report', 1)
    with pytest.raises(InvalidInputError):
        service.create('https://a.example', None)
    assert fake_db.calls == []


def test_create_strips_link(fake_db):
    fake_db.queue([{'id': 3, 'link': 'https://a.example/x', 'date_added': None, 'stock_valuations_id': 1}])

    link = LinksService(fake_db).create('  https://a.example/x ', 1)

    assert fake_db.last_params == ('https://a.example/x', 1)
    assert link['id'] == 3


def test_update_and_delete_not_found(fake_db):
    service = LinksService(fake_db)

    with pytest.raises(RecordNotFoundError):
        service.update(1, 'https://a.example')
    with pytest.raises(RecordNotFoundError):
        service.delete(1)
