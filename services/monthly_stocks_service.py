"""Persistence service for the monthly investment picks (monthly_stocks table)."""

import logging
from datetime import date
from typing import Dict, Any, Optional, List

from services.database import Database
from services.exceptions import InvalidInputError, RecordNotFoundError, DuplicateRecordError
import util

logger = logging.getLogger(__name__)

MONTHLY_STOCK_SELECT = """
SELECT ms.id, ms.stock_id, ms.investment_date, ms.created_at, ms.updated_at,
       sv.stock AS stock_symbol, sv.buy_price, sv.active_price
FROM monthly_stocks ms
JOIN stock_valuations sv ON ms.stock_id = sv.id
"""


class MonthlyStocksService:
    """CRUD over monthly_stocks, joined to stock_valuations for the symbol and prices."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or Database()

    def list(
        self,
        id: Optional[int] = None,
        stock_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Picks newest first, then by symbol.

        The month filter applies only when both month and year are given.
        """
        conditions = []
        params: List[Any] = []
        if id:
            conditions.append('ms.id = %s')
            params.append(id)
        if stock_id:
            conditions.append('ms.stock_id = %s')
            params.append(stock_id)
        if month and year:
            conditions.append('EXTRACT(MONTH FROM ms.investment_date) = %s')
            conditions.append('EXTRACT(YEAR FROM ms.investment_date) = %s')
            params.extend([month, year])

        sql = MONTHLY_STOCK_SELECT
        if conditions:
            sql += ' WHERE ' + ' AND '.join(conditions)
        sql += ' ORDER BY ms.investment_date DESC, sv.stock ASC'

        rows = self.db.query(sql, tuple(params))
        return [self._to_monthly_stock(row) for row in rows]

    def create(self, stock_id: Optional[int], investment_date: Optional[str]) -> Dict[str, Any]:
        if not stock_id or not investment_date:
            raise InvalidInputError('stock_id and investment_date are required')
        parsed = parse_investment_date(investment_date)

        existing = self.db.query(
            'SELECT id FROM monthly_stocks WHERE stock_id = %s AND investment_date = %s',
            (stock_id, parsed)
        )
        if existing:
            raise DuplicateRecordError('Monthly stock entry already exists for this stock and date')

        rows = self.db.query(
            'INSERT INTO monthly_stocks (stock_id, investment_date) VALUES (%s, %s) '
            'RETURNING id, stock_id, investment_date, created_at, updated_at',
            (stock_id, parsed)
        )
        logger.info(f"Added monthly stock {rows[0]['id']} for stock {stock_id} on {parsed}")
        return rows[0]

    def update(self, id: Optional[int], stock_id: Optional[int], investment_date: Optional[str]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required for update')
        if not stock_id or not investment_date:
            raise InvalidInputError('stock_id and investment_date are required')
        parsed = parse_investment_date(investment_date)

        rows = self.db.query(
            'UPDATE monthly_stocks SET stock_id = %s, investment_date = %s, updated_at = NOW() WHERE id = %s '
            'RETURNING id, stock_id, investment_date, created_at, updated_at',
            (stock_id, parsed, id)
        )
        if not rows:
            raise RecordNotFoundError('Monthly stock entry not found')
        return rows[0]

    def delete(self, id: Optional[int]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required for deletion')

        rows = self.db.query('DELETE FROM monthly_stocks WHERE id = %s RETURNING id', (id,))
        if not rows:
            raise RecordNotFoundError('Monthly stock entry not found')
        return {'success': True, 'message': 'Monthly stock entry deleted successfully', 'id': rows[0]['id']}

    @staticmethod
    def _to_monthly_stock(row: Dict[str, Any]) -> Dict[str, Any]:
        def _float(column: str) -> Optional[float]:
            value = util.to_decimal(row.get(column))
            return float(value) if value is not None else None

        return {
            'id': row.get('id'),
            'stock_id': row.get('stock_id'),
            'investment_date': row.get('investment_date'),
            'created_at': row.get('created_at'),
            'updated_at': row.get('updated_at'),
            'stock_symbol': row.get('stock_symbol'),
            'buy_price': _float('buy_price'),
            'active_price': _float('active_price'),
        }


def parse_investment_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise InvalidInputError('Invalid investment_date format. Use YYYY-MM-DD')
