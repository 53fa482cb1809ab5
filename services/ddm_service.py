"""Persistence service for dividend discount model inputs (ddm_data table)."""

import logging
from typing import Dict, Any, Optional

import psycopg
from psycopg.types.json import Jsonb

from services.database import Database
from services.exceptions import InvalidInputError, RecordNotFoundError, DuplicateRecordError
import util

logger = logging.getLogger(__name__)

DDM_FIELDS = [
    'wacc', 'margin_of_safety', 'high_growth_years', 'stable_growth_rate', 'current_price',
    'dividends_by_year', 'current_year_projected', 'dividend_growth_rate', 'latest_dividend',
    'historical_dividends', 'dividend_projections',
    'intrinsic_value', 'ddm_with_safety', 'terminal_value',
]
REQUIRED_DDM_FIELDS = ['wacc', 'margin_of_safety', 'high_growth_years', 'stable_growth_rate']
JSON_DDM_FIELDS = {'dividends_by_year', 'historical_dividends', 'dividend_projections'}


class DDMDataService:
    """CRUD over the ddm_data table, one row per symbol."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or Database()

    def get(self, symbol: Optional[str]) -> Dict[str, Any]:
        if not symbol:
            raise InvalidInputError('Symbol is required')

        rows = self.db.query(
            f"SELECT id, symbol, {', '.join(DDM_FIELDS)}, last_updated, created_at "
            "FROM ddm_data WHERE symbol = %s",
            (symbol.upper(),)
        )
        if not rows:
            raise RecordNotFoundError('DDM data not found for symbol')

        return self.row_to_ddm(rows[0])

    def list(self) -> Dict[str, Any]:
        rows = self.db.query('SELECT symbol, last_updated, created_at FROM ddm_data ORDER BY symbol ASC')
        return {
            'stocks': [
                {'symbol': row['symbol'], 'lastUpdated': row.get('last_updated'), 'createdAt': row.get('created_at')}
                for row in rows
            ]
        }

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert DDM inputs for a new symbol.

        Args:
            data: snake_case field values; symbol and the four model inputs are required

        Raises:
            InvalidInputError: symbol or a model input is missing
            DuplicateRecordError: the symbol already has DDM data
        """
        symbol = data.get('symbol')
        if not symbol:
            raise InvalidInputError('Symbol is required')
        if any(data.get(field) is None for field in REQUIRED_DDM_FIELDS):
            raise InvalidInputError('WACC, margin of safety, high growth years, and stable growth rate are required')

        values = {field: data.get(field) for field in DDM_FIELDS}
        values['current_year_projected'] = bool(values['current_year_projected'])

        placeholders = ', '.join(['%s'] * (len(DDM_FIELDS) + 1))
        try:
            rows = self.db.query(
                f"INSERT INTO ddm_data (symbol, {', '.join(DDM_FIELDS)}) VALUES ({placeholders}) "
                "RETURNING id, symbol, last_updated",
                (symbol.upper(), *(self._to_param(field, values[field]) for field in DDM_FIELDS))
            )
        except psycopg.errors.UniqueViolation:
            raise DuplicateRecordError('DDM data already exists for this symbol. Use PUT to update.')

        logger.info(f"Created DDM data {rows[0]['id']} for {rows[0]['symbol']}")
        return self._summary(rows[0])

    def update(self, symbol: Optional[str], changes: Dict[str, Any]) -> Dict[str, Any]:
        """Update only the fields present in changes."""
        if not symbol:
            raise InvalidInputError('Symbol is required')

        fields = [field for field in DDM_FIELDS if field in changes]
        if not fields:
            raise InvalidInputError('No fields to update')

        assignments = ', '.join(f'{field} = %s' for field in fields)
        rows = self.db.query(
            f"UPDATE ddm_data SET {assignments}, last_updated = NOW() WHERE symbol = %s "
            "RETURNING id, symbol, last_updated",
            (*(self._to_param(field, changes[field]) for field in fields), symbol.upper())
        )
        if not rows:
            raise RecordNotFoundError('DDM data not found for symbol')

        return self._summary(rows[0])

    def delete(self, symbol: Optional[str]) -> Dict[str, Any]:
        if not symbol:
            raise InvalidInputError('Symbol is required')

        rows = self.db.query('DELETE FROM ddm_data WHERE symbol = %s RETURNING id, symbol', (symbol.upper(),))
        if not rows:
            raise RecordNotFoundError('DDM data not found for symbol')

        return {'success': True, 'message': f"DDM data deleted for {rows[0]['symbol']}"}

    @staticmethod
    def row_to_ddm(row: Dict[str, Any]) -> Dict[str, Any]:
        """camelCase rendering with NUMERIC columns as floats."""
        def _float(column: str) -> Optional[float]:
            value = util.to_decimal(row.get(column))
            return float(value) if value is not None else None

        return {
            'id': row.get('id'),
            'symbol': row.get('symbol'),
            'wacc': _float('wacc'),
            'marginOfSafety': _float('margin_of_safety'),
            'highGrowthYears': row.get('high_growth_years'),
            'stableGrowthRate': _float('stable_growth_rate'),
            'currentPrice': _float('current_price'),
            'dividendsByYear': row.get('dividends_by_year'),
            'currentYearProjected': bool(row.get('current_year_projected')),
            'dividendGrowthRate': _float('dividend_growth_rate'),
            'latestDividend': _float('latest_dividend'),
            'historicalDividends': row.get('historical_dividends'),
            'dividendProjections': row.get('dividend_projections'),
            'intrinsicValue': _float('intrinsic_value'),
            'ddmWithSafety': _float('ddm_with_safety'),
            'terminalValue': _float('terminal_value'),
            'lastUpdated': row.get('last_updated'),
            'createdAt': row.get('created_at'),
        }

    @staticmethod
    def _to_param(field: str, value: Any) -> Any:
        if field in JSON_DDM_FIELDS and value is not None:
            return Jsonb(value)
        return value

    @staticmethod
    def _summary(row: Dict[str, Any]) -> Dict[str, Any]:
        return {'success': True, 'id': row['id'], 'symbol': row['symbol'], 'lastUpdated': row.get('last_updated')}
