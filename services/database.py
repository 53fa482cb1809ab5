"""Postgres access for the dashboard tables."""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import psycopg
from psycopg.rows import dict_row

from constants.constants import DATABASE_URL, PG_UNDEFINED_TABLE, PG_INVALID_PASSWORD

logger = logging.getLogger(__name__)


SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS dcf_data (
    id SERIAL PRIMARY KEY,
    symbol TEXT NOT NULL,
    stock_price NUMERIC,
    revenue NUMERIC,
    net_income NUMERIC,
    shares_outstanding BIGINT,
    current_eps NUMERIC,
    revenue_growth_bear NUMERIC,
    revenue_growth_base NUMERIC,
    revenue_growth_bull NUMERIC,
    net_income_growth_bear NUMERIC,
    net_income_growth_base NUMERIC,
    net_income_growth_bull NUMERIC,
    pe_low_bear NUMERIC,
    pe_low_base NUMERIC,
    pe_low_bull NUMERIC,
    pe_high_bear NUMERIC,
    pe_high_base NUMERIC,
    pe_high_bull NUMERIC,
    timestamp TEXT,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_dcf_data_symbol ON dcf_data (symbol);

CREATE TABLE IF NOT EXISTS stock_valuations (
    id SERIAL PRIMARY KEY,
    stock TEXT NOT NULL,
    buy_price NUMERIC,
    active_price NUMERIC,
    dcf_price NUMERIC,
    ddm_price NUMERIC,
    reit_valuation NUMERIC,
    average_valuations NUMERIC,
    dividend_per_share NUMERIC,
    gross_profit_pct NUMERIC,
    roic NUMERIC,
    long_term_earning_growth NUMERIC,
    simplywall_valuation NUMERIC,
    change_pct NUMERIC,
    year_high NUMERIC,
    year_low NUMERIC,
    pe NUMERIC,
    eps NUMERIC,
    bear_case_avg_price NUMERIC,
    bear_case_low_price NUMERIC,
    bear_case_high_price NUMERIC,
    base_case_avg_price NUMERIC,
    base_case_low_price NUMERIC,
    base_case_high_price NUMERIC,
    bull_case_avg_price NUMERIC,
    bull_case_low_price NUMERIC,
    bull_case_high_price NUMERIC,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS links (
    id SERIAL PRIMARY KEY,
    link TEXT NOT NULL,
    stock_valuations_id INTEGER NOT NULL REFERENCES stock_valuations (id) ON DELETE CASCADE,
    date_added TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS dashboard_watchlist (
    id SERIAL PRIMARY KEY,
    symbol TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    icon TEXT,
    color TEXT,
    data_source TEXT,
    fred_series_id TEXT,
    notes TEXT,
    display_order INTEGER DEFAULT 0,
    is_active BOOLEAN DEFAULT TRUE,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS ddm_data (
    id SERIAL PRIMARY KEY,
    symbol TEXT NOT NULL UNIQUE,
    wacc NUMERIC NOT NULL,
    margin_of_safety NUMERIC NOT NULL,
    high_growth_years INTEGER NOT NULL,
    stable_growth_rate NUMERIC NOT NULL,
    current_price NUMERIC,
    dividends_by_year JSONB,
    current_year_projected BOOLEAN DEFAULT FALSE,
    dividend_growth_rate NUMERIC,
    latest_dividend NUMERIC,
    historical_dividends JSONB,
    dividend_projections JSONB,
    intrinsic_value NUMERIC,
    ddm_with_safety NUMERIC,
    terminal_value NUMERIC,
    last_updated TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS monthly_stocks (
    id SERIAL PRIMARY KEY,
    stock_id INTEGER NOT NULL REFERENCES stock_valuations (id) ON DELETE CASCADE,
    investment_date DATE NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    UNIQUE (stock_id, investment_date)
);
CREATE INDEX IF NOT EXISTS idx_monthly_stocks_investment_date ON monthly_stocks (investment_date);
"""


class Database:
    """Thin wrapper that runs parameterized SQL and returns rows as dictionaries."""

    def __init__(self, url: str = DATABASE_URL):
        self.url = url

    def get_conn(self):
        return psycopg.connect(self.url, row_factory=dict_row)

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute one statement and return its rows.

        Statements without a result set (DDL, UPDATE without RETURNING)
        return an empty list.
        """
        start = time.monotonic()
        try:
            with self.get_conn() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    rows = cur.fetchall() if cur.description else []
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Database query error: {e} | sql: {' '.join(sql.split())}")
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"Executed query in {duration_ms}ms, rows: {len(rows)}")
        return [dict(row) for row in rows]

    def ensure_schema(self) -> None:
        self.query(SCHEMA_DDL)


def describe_database_error(error: Exception) -> Dict[str, str]:
    """Build the error/code/hint triple returned to clients for a failed query."""
    code = getattr(error, 'sqlstate', None) or 'UNKNOWN'
    message = str(error) or 'Unknown error'
    lowered = message.lower()

    hint = 'Check database connection settings'
    if code == PG_UNDEFINED_TABLE:
        hint = 'Table does not exist - run the schema setup script'
    elif code == PG_INVALID_PASSWORD or 'password' in lowered:
        hint = 'Database authentication failed - check POSTGRES_PASSWORD or DATABASE_URL'
    elif 'connection refused' in lowered:
        hint = 'Connection refused - check the database is running and reachable'
    elif 'timeout' in lowered or 'timed out' in lowered:
        hint = 'Connection timeout - check network/firewall settings'

    return {'details': message, 'code': code, 'hint': hint}
