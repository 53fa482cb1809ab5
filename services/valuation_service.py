"""Persistence service for the stock_valuations table."""

import logging
from typing import Dict, Any, Optional, List, Iterable

from constants.constants import VALUATION_LIST_DEFAULT_LIMIT
from services.database import Database
from services.exceptions import InvalidInputError, RecordNotFoundError
import util

logger = logging.getLogger(__name__)

VALUATION_NUMERIC_FIELDS = [
    'buy_price', 'active_price', 'dcf_price', 'ddm_price', 'reit_valuation',
    'average_valuations', 'dividend_per_share', 'gross_profit_pct', 'roic',
    'long_term_earning_growth', 'simplywall_valuation', 'change_pct',
    'year_high', 'year_low', 'pe', 'eps',
    'bear_case_avg_price', 'bear_case_low_price', 'bear_case_high_price',
    'base_case_avg_price', 'base_case_low_price', 'base_case_high_price',
    'bull_case_avg_price', 'bull_case_low_price', 'bull_case_high_price',
]
VALUATION_COLUMNS = ['stock'] + VALUATION_NUMERIC_FIELDS


class StockValuationService:
    """CRUD over stock_valuations plus the lookups the watchlist page needs."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or Database()

    def get(self, stock: Optional[str] = None, id: Optional[int] = None) -> Dict[str, Any]:
        if not stock and not id:
            raise InvalidInputError('Either stock or id parameter is required')

        if id:
            rows = self.db.query(
                'SELECT * FROM stock_valuations WHERE id = %s ORDER BY created_at DESC LIMIT 1',
                (id,)
            )
        else:
            rows = self.db.query(
                'SELECT * FROM stock_valuations WHERE stock = %s ORDER BY created_at DESC LIMIT 1',
                (stock.upper(),)
            )

        if not rows:
            raise RecordNotFoundError('No stock valuation found')

        return self.row_to_valuation(rows[0])

    def create(self, valuation: Dict[str, Any]) -> Dict[str, Any]:
        if not valuation.get('stock'):
            raise InvalidInputError('Stock symbol is required')

        placeholders = ', '.join(['%s'] * len(VALUATION_COLUMNS))
        rows = self.db.query(
            f"INSERT INTO stock_valuations ({', '.join(VALUATION_COLUMNS)}) VALUES ({placeholders}) "
            "RETURNING id, created_at, updated_at",
            self._to_params(valuation)
        )
        logger.info(f"Created stock valuation {rows[0]['id']} for {valuation['stock'].upper()}")
        return {'success': True, 'id': rows[0]['id'], 'created_at': rows[0]['created_at']}

    def update(self, id: Optional[int], valuation: Dict[str, Any]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required for update')

        assignments = ', '.join(f'{column} = %s' for column in VALUATION_COLUMNS)
        rows = self.db.query(
            f"UPDATE stock_valuations SET {assignments}, updated_at = NOW() WHERE id = %s "
            "RETURNING id, updated_at",
            (*self._to_params(valuation), id)
        )
        if not rows:
            raise RecordNotFoundError('Stock valuation not found')

        return {'success': True, 'id': rows[0]['id'], 'updated_at': rows[0]['updated_at']}

    def delete(self, id: Optional[int]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required')

        rows = self.db.query('DELETE FROM stock_valuations WHERE id = %s RETURNING id', (id,))
        if not rows:
            raise RecordNotFoundError('Stock valuation not found')

        return {'success': True, 'id': rows[0]['id']}

    def list(self, stock: Optional[str] = None, limit: int = VALUATION_LIST_DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """Short listing used to fill the valuation dropdown."""
        if stock:
            rows = self.db.query(
                'SELECT id, stock, buy_price, active_price, created_at FROM stock_valuations '
                'WHERE stock = %s ORDER BY created_at DESC LIMIT %s',
                (stock.upper(), limit)
            )
        else:
            rows = self.db.query(
                'SELECT id, stock, buy_price, active_price, created_at FROM stock_valuations '
                'ORDER BY created_at DESC LIMIT %s',
                (limit,)
            )

        return [
            {
                'id': row['id'],
                'stock': row['stock'],
                'buy_price': self._to_float(row.get('buy_price')),
                'active_price': self._to_float(row.get('active_price')),
                'created_at': row.get('created_at'),
            }
            for row in rows
        ]

    def ids_by_symbols(self, symbols: Iterable[str]) -> Dict[str, int]:
        """Map each known symbol (upper-cased) to its stock_valuations id."""
        symbol_list = [s.strip().upper() for s in symbols if s and s.strip()]
        if not symbol_list:
            return {}

        rows = self.db.query(
            'SELECT id, UPPER(stock) AS stock FROM stock_valuations WHERE UPPER(stock) = ANY(%s)',
            (symbol_list,)
        )
        return {(row['stock'] or '').upper(): row['id'] for row in rows}

    @classmethod
    def row_to_valuation(cls, row: Dict[str, Any]) -> Dict[str, Any]:
        valuation = {'id': row.get('id'), 'stock': row.get('stock')}
        for field_name in VALUATION_NUMERIC_FIELDS:
            valuation[field_name] = cls._to_float(row.get(field_name))
        return valuation

    @staticmethod
    def _to_float(value: Any) -> Optional[float]:
        number = util.to_decimal(value)
        return float(number) if number is not None else None

    @staticmethod
    def _to_params(valuation: Dict[str, Any]) -> tuple:
        stock = valuation.get('stock')
        return (
            stock.upper() if stock else None,
            *(valuation.get(field_name) for field_name in VALUATION_NUMERIC_FIELDS),
        )
