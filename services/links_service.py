"""Persistence service for research links attached to a stock valuation."""

import logging
from typing import Dict, Any, Optional, List

from services.database import Database
from services.exceptions import InvalidInputError, RecordNotFoundError
import util

logger = logging.getLogger(__name__)

LINK_FIELDS = 'id, link, date_added, stock_valuations_id'


class LinksService:
    """CRUD over the links table."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or Database()

    def get(self, stock_valuations_id: Optional[int] = None, id: Optional[int] = None) -> List[Dict[str, Any]]:
        if not stock_valuations_id and not id:
            raise InvalidInputError('Either stock_valuations_id or id parameter is required')

        if id:
            rows = self.db.query(
                f'SELECT {LINK_FIELDS} FROM links WHERE id = %s ORDER BY date_added DESC',
                (id,)
            )
        else:
            rows = self.db.query(
                f'SELECT {LINK_FIELDS} FROM links WHERE stock_valuations_id = %s ORDER BY date_added DESC',
                (stock_valuations_id,)
            )
        return [self._to_link(row) for row in rows]

    def create(self, link: Optional[str], stock_valuations_id: Optional[int]) -> Dict[str, Any]:
        if not link or not stock_valuations_id:
            raise InvalidInputError('Link and stock_valuations_id are required')
        if not util.validate_url(link):
            raise InvalidInputError('Invalid URL format')

        rows = self.db.query(
            f'INSERT INTO links (link, stock_valuations_id, date_added) VALUES (%s, %s, CURRENT_TIMESTAMP) '
            f'RETURNING {LINK_FIELDS}',
            (link.strip(), stock_valuations_id)
        )
        return self._to_link(rows[0])

    def update(self, id: Optional[int], link: Optional[str]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required for update')
        if not link:
            raise InvalidInputError('Link is required')
        if not util.validate_url(link):
            raise InvalidInputError('Invalid URL format')

        rows = self.db.query(
            f'UPDATE links SET link = %s, updated_at = NOW() WHERE id = %s RETURNING {LINK_FIELDS}',
            (link.strip(), id)
        )
        if not rows:
            raise RecordNotFoundError('Link not found')
        return self._to_link(rows[0])

    def delete(self, id: Optional[int]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required')

        rows = self.db.query('DELETE FROM links WHERE id = %s RETURNING id', (id,))
        if not rows:
            raise RecordNotFoundError('Link not found')
        return {'success': True, 'id': rows[0]['id']}

    @staticmethod
    def _to_link(row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'id': row.get('id'),
            'link': row.get('link'),
            'date_added': row.get('date_added'),
            'stock_valuations_id': row.get('stock_valuations_id'),
        }
