"""Persistence service for saved DCF input sets (dcf_data table)."""

import logging
from decimal import Decimal
from typing import Dict, Any, Optional, List
from datetime import datetime, timezone

from constants.constants import SCENARIOS, DEFAULT_SHARES_OUTSTANDING, DCF_LIST_DEFAULT_LIMIT
from services.database import Database
from services.exceptions import InvalidInputError, RecordNotFoundError
from services.models import DCFData
import util

logger = logging.getLogger(__name__)

DCF_COLUMNS = [
    'symbol', 'stock_price', 'revenue', 'net_income', 'shares_outstanding', 'current_eps',
    'revenue_growth_bear', 'revenue_growth_base', 'revenue_growth_bull',
    'net_income_growth_bear', 'net_income_growth_base', 'net_income_growth_bull',
    'pe_low_bear', 'pe_low_base', 'pe_low_bull',
    'pe_high_bear', 'pe_high_base', 'pe_high_bull',
    'timestamp',
]


class DCFDataService:
    """CRUD over the dcf_data table."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or Database()

    def get(self, symbol: Optional[str] = None, id: Optional[int] = None) -> DCFData:
        """Fetch the latest DCF input set by id, or by symbol when no id is given."""
        if not symbol and not id:
            raise InvalidInputError('Either symbol or id parameter is required')

        if id:
            rows = self.db.query(
                'SELECT * FROM dcf_data WHERE id = %s ORDER BY created_at DESC LIMIT 1',
                (id,)
            )
        else:
            rows = self.db.query(
                'SELECT * FROM dcf_data WHERE symbol = %s ORDER BY created_at DESC LIMIT 1',
                (symbol.upper(),)
            )

        if not rows:
            raise RecordNotFoundError('No DCF data found')

        return self.row_to_dcf_data(rows[0])

    def create(self, data: DCFData) -> Dict[str, Any]:
        if not data.symbol:
            raise InvalidInputError('Symbol is required')

        placeholders = ', '.join(['%s'] * len(DCF_COLUMNS))
        rows = self.db.query(
            f"INSERT INTO dcf_data ({', '.join(DCF_COLUMNS)}) VALUES ({placeholders}) "
            "RETURNING id, created_at, updated_at",
            self._to_params(data)
        )
        logger.info(f"Created DCF data {rows[0]['id']} for {data.symbol.upper()}")
        return {'success': True, 'id': rows[0]['id'], 'created_at': rows[0]['created_at']}

    def update(self, id: Optional[int], data: DCFData) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required for update')

        assignments = ', '.join(f'{column} = %s' for column in DCF_COLUMNS)
        rows = self.db.query(
            f"UPDATE dcf_data SET {assignments}, updated_at = NOW() WHERE id = %s "
            "RETURNING id, updated_at",
            (*self._to_params(data), id)
        )
        if not rows:
            raise RecordNotFoundError('DCF data not found')

        return {'success': True, 'id': rows[0]['id'], 'updated_at': rows[0]['updated_at']}

    def delete(self, id: Optional[int]) -> Dict[str, Any]:
        if not id:
            raise InvalidInputError('ID parameter is required')

        rows = self.db.query('DELETE FROM dcf_data WHERE id = %s RETURNING id', (id,))
        if not rows:
            raise RecordNotFoundError('DCF data not found')

        return {'success': True, 'id': rows[0]['id']}

    def list(self, symbol: Optional[str] = None, limit: int = DCF_LIST_DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """List saved input sets newest first, optionally for one symbol."""
        if symbol:
            rows = self.db.query(
                'SELECT id, symbol, stock_price, revenue, created_at, updated_at FROM dcf_data '
                'WHERE symbol = %s ORDER BY created_at DESC LIMIT %s',
                (symbol.upper(), limit)
            )
        else:
            rows = self.db.query(
                'SELECT id, symbol, stock_price, revenue, created_at, updated_at FROM dcf_data '
                'ORDER BY created_at DESC LIMIT %s',
                (limit,)
            )

        return [
            {
                **row,
                'stock_price': util.round_or_none(util.to_decimal(row.get('stock_price')), 4),
                'revenue': util.round_or_none(util.to_decimal(row.get('revenue')), 2),
            }
            for row in rows
        ]

    @staticmethod
    def row_to_dcf_data(row: Dict[str, Any]) -> DCFData:
        """Convert a dcf_data row to DCFData. P/E columns are read back as whole numbers."""
        def _decimal(column: str) -> Decimal:
            return util.to_decimal(row.get(column)) or Decimal('0')

        def _pe(column: str) -> Decimal:
            return Decimal(int(_decimal(column)))

        current_eps = util.to_decimal(row.get('current_eps'))
        shares = row.get('shares_outstanding')

        return DCFData(
            id=row.get('id'),
            symbol=row.get('symbol'),
            stock_price=_decimal('stock_price'),
            revenue=_decimal('revenue'),
            net_income=_decimal('net_income'),
            shares_outstanding=int(shares) if shares is not None else None,
            current_eps=current_eps if current_eps else None,
            revenue_growth={s: _decimal(f'revenue_growth_{s}') for s in SCENARIOS},
            net_income_growth={s: _decimal(f'net_income_growth_{s}') for s in SCENARIOS},
            pe_low={s: _pe(f'pe_low_{s}') for s in SCENARIOS},
            pe_high={s: _pe(f'pe_high_{s}') for s in SCENARIOS},
            timestamp=row.get('timestamp') or datetime.now(timezone.utc).isoformat(),
        )

    @staticmethod
    def _to_params(data: DCFData) -> tuple:
        """Column values in DCF_COLUMNS order, with missing figures defaulted."""
        shares = data.shares_outstanding if data.shares_outstanding else DEFAULT_SHARES_OUTSTANDING
        params = [
            data.symbol.upper() if data.symbol else None,
            data.stock_price or 0,
            data.revenue or 0,
            data.net_income or 0,
            shares,
            data.current_eps or None,
        ]
        for values in (data.revenue_growth, data.net_income_growth, data.pe_low, data.pe_high):
            params.extend(values.get(s) or 0 for s in SCENARIOS)
        params.append(data.timestamp or datetime.now(timezone.utc).isoformat())
        return tuple(params)
