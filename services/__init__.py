"""Services package for data access, API interactions and projection orchestration."""

from .database import Database
from .dcf_service import DCFDataService
from .valuation_service import StockValuationService
from .links_service import LinksService
from .ddm_service import DDMDataService
from .monthly_stocks_service import MonthlyStocksService
from .watchlist_service import WatchlistService
from .yfinance_service import YFinanceService
from .finnhub_service import FinnhubService
from .projection_service import ProjectionService

__all__ = [
    "Database",
    "DCFDataService",
    "StockValuationService",
    "LinksService",
    "DDMDataService",
    "MonthlyStocksService",
    "WatchlistService",
    "YFinanceService",
    "FinnhubService",
    "ProjectionService"
]
