"""Consolidated constants for the application."""

import os
from decimal import Decimal
from dotenv import load_dotenv

# Load environment variables from .env file in the project root
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))

# ============================================================================
# APPLICATION CONSTANTS
# ============================================================================

ENVIRONMENT = os.getenv('ENVIRONMENT', 'production').lower()

# Finnhub key is checked when a request needs it, not at import time
FINNHUB_API_KEY = os.getenv("FINNHUB_API_KEY")
FINNHUB_BASE_URL = "https://finnhub.io/api/v1"
FINNHUB_TIMEOUT = 10

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{os.getenv('POSTGRES_USER', 'postgres')}:{os.getenv('POSTGRES_PASSWORD', 'postgres')}"
    f"@{os.getenv('POSTGRES_HOST', 'localhost')}:{os.getenv('POSTGRES_PORT', '5432')}/{os.getenv('POSTGRES_DB', 'postgres')}",
)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

# Session auth
SESSION_SECRET = os.getenv("SESSION_SECRET")
DASHBOARD_USERNAME = os.getenv("DASHBOARD_USERNAME")
SESSION_COOKIE_NAME = "session"
SESSION_MAX_AGE = 60 * 60 * 24 * 30  # 30 days
SESSION_ALGORITHM = "HS256"

# ============================================================================
# PROJECTION CONSTANTS
# ============================================================================

PROJECTION_YEARS = 5
SCENARIOS = ('bear', 'base', 'bull')

# Substituted when shares outstanding is missing or non-positive
DEFAULT_SHARES_OUTSTANDING = 50_000_000

# Working precision for projection arithmetic
DECIMAL_PRECISION = 34

# Saved DCF inputs older than this are flagged as stale
DCF_DATA_MAX_AGE_SECONDS = 60 * 60

# Rounding precision for API output
PRICE_PRECISION = 2
GROWTH_PRECISION = 2
PERCENTAGE_MULTIPLIER = 100

# ============================================================================
# DEFAULT ASSUMPTIONS
# ============================================================================

DEFAULT_REVENUE_GROWTH = {
    'bear': Decimal('0.03'),
    'base': Decimal('0.04'),
    'bull': Decimal('0.12'),
}
DEFAULT_NET_INCOME_GROWTH = Decimal('0.2')
NET_INCOME_GROWTH_MULTIPLIERS = {
    'bear': Decimal('0.75'),
    'base': Decimal('1'),
    'bull': Decimal('1.25'),
}

DEFAULT_PE = Decimal('16')
PE_LOW_MULTIPLIERS = {
    'bear': Decimal('0.9'),
    'base': Decimal('1'),
    'bull': Decimal('1.1'),
}
PE_HIGH_MULTIPLIERS = {
    'bear': Decimal('0.8'),
    'base': Decimal('1'),
    'bull': Decimal('1.2'),
}

# Industry average P/E ratios keyed by sector
INDUSTRY_AVERAGE_PE = {
    'Restaurants': 20.72,
    'Technology': 25.5,
    'Healthcare': 22.8,
    'Financial Services': 12.4,
    'Consumer Discretionary': 18.9,
    'Consumer Staples': 19.2,
    'Energy': 15.6,
    'Industrials': 17.8,
    'Materials': 16.2,
    'Real Estate': 14.3,
    'Utilities': 18.1,
    'Communication Services': 21.7,
}

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

DCF_LIST_DEFAULT_LIMIT = 50
VALUATION_LIST_DEFAULT_LIMIT = 100

# Postgres error codes surfaced with a hint
PG_UNDEFINED_TABLE = '42P01'
PG_INVALID_PASSWORD = '28P01'

# ============================================================================
# RESULT KEYS
# ============================================================================

TICKER_KEY = 'ticker'
PRICE_KEY = 'price'
REVENUE_KEY = 'revenue'
NET_INCOME_KEY = 'net_income'
EPS_KEY = 'eps'
SHARES_OUTSTANDING_KEY = 'shares_outstanding'
CURRENT_PE_KEY = 'current_pe'
EARNINGS_GROWTH_KEY = 'earnings_growth'
