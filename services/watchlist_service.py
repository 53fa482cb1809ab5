"""Persistence service for the dashboard watchlist."""

import logging
from typing import Dict, Any, Optional, List

from services.database import Database
from services.exceptions import InvalidInputError, RecordNotFoundError, DuplicateRecordError

logger = logging.getLogger(__name__)

WATCHLIST_FIELDS = (
    'id, symbol, name, category, icon, color, data_source, fred_series_id, notes, '
    'display_order, is_active, created_at, updated_at'
)


class WatchlistService:
    """Read and maintain the dashboard_watchlist table."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or Database()

    def list(self, category: Optional[str] = None, is_active: bool = True) -> Dict[str, Any]:
        """
        List watchlist symbols.

        Args:
            category: Optional category filter; 'ALL' disables the filter
            is_active: Only return rows with this active flag

        Returns:
            Dictionary with symbols grouped by category ('data') and as a flat list ('symbols')
        """
        sql = f'SELECT {WATCHLIST_FIELDS} FROM dashboard_watchlist WHERE is_active = %s'
        params: List[Any] = [is_active]

        if category and category != 'ALL':
            sql += ' AND category = %s'
            params.append(category)

        sql += ' ORDER BY category, display_order, symbol'
        rows = self.db.query(sql, tuple(params))

        symbols = [
            {
                'symbol': row['symbol'],
                'name': row['name'],
                'category': row['category'],
                'icon': row.get('icon') or None,
                'color': row.get('color') or None,
                'dataSource': row.get('data_source') or None,
                'fredSeriesId': row.get('fred_series_id') or None,
            }
            for row in rows
        ]

        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for entry in symbols:
            grouped.setdefault(entry['category'], []).append(entry)

        return {'data': grouped, 'symbols': symbols}

    def add(
        self,
        symbol: Optional[str],
        name: Optional[str],
        category: Optional[str],
        icon: Optional[str] = None,
        color: Optional[str] = None,
        data_source: Optional[str] = None,
        fred_series_id: Optional[str] = None,
        notes: Optional[str] = None,
        display_order: Optional[int] = None
    ) -> Dict[str, Any]:
        """Add a symbol, appending it to the end of its category when no order is given."""
        if not symbol or not name or not category:
            raise InvalidInputError('symbol, name, and category are required')

        symbol = symbol.upper()
        existing = self.db.query('SELECT id FROM dashboard_watchlist WHERE symbol = %s', (symbol,))
        if existing:
            raise DuplicateRecordError('Symbol already exists in watchlist')

        if display_order is None:
            order_rows = self.db.query(
                'SELECT COALESCE(MAX(display_order), 0) + 1 AS next_order FROM dashboard_watchlist WHERE category = %s',
                (category,)
            )
            display_order = order_rows[0]['next_order']

        rows = self.db.query(
            'INSERT INTO dashboard_watchlist '
            '(symbol, name, category, icon, color, data_source, fred_series_id, notes, display_order, is_active) '
            f'VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING {WATCHLIST_FIELDS}',
            (
                symbol, name, category,
                icon or None, color or None, data_source or None,
                fred_series_id or None, notes or None,
                display_order, True,
            )
        )
        logger.info(f"Added {symbol} to dashboard watchlist ({category})")
        return rows[0]

    def remove(self, symbol: Optional[str]) -> Dict[str, Any]:
        if not symbol:
            raise InvalidInputError('symbol parameter is required')

        rows = self.db.query(
            f'DELETE FROM dashboard_watchlist WHERE symbol = %s RETURNING {WATCHLIST_FIELDS}',
            (symbol.upper(),)
        )
        if not rows:
            raise RecordNotFoundError('Symbol not found in watchlist')
        return rows[0]
