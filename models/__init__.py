# Models package for FastAPI application
from .requests import (
    ScenarioProjection,
    ProjectionRequest,
    ScenarioValues,
    DCFDataRequest,
    StockValuationRequest,
    LinkRequest,
    DDMDataRequest,
    MonthlyStockRequest,
    WatchlistSymbolRequest,
    LoginRequest
)
from .responses import ProjectionResponse, ProjectionsResponse, ScenarioSeriesResponse, PERatiosResponse, AuthCheckResponse, ErrorResponse

__all__ = [
    "ScenarioProjection",
    "ProjectionRequest",
    "ScenarioValues",
    "DCFDataRequest",
    "StockValuationRequest",
    "LinkRequest",
    "DDMDataRequest",
    "MonthlyStockRequest",
    "WatchlistSymbolRequest",
    "LoginRequest",
    "ProjectionResponse",
    "ProjectionsResponse",
    "ScenarioSeriesResponse",
    "PERatiosResponse",
    "AuthCheckResponse",
    "ErrorResponse"
]
