"""Response models for the FastAPI application"""

from pydantic import BaseModel
from typing import Dict, Optional, Any, List


class ScenarioSeriesResponse(BaseModel):
    """Five-year series for one scenario"""
    revenue: List[float]
    net_income: List[float]
    eps: List[float]
    share_price_low: List[float]
    share_price_high: List[float]


class ProjectionsResponse(BaseModel):
    """Per-scenario series plus CAGR; a null CAGR means not computable"""
    bear: ScenarioSeriesResponse
    base: ScenarioSeriesResponse
    bull: ScenarioSeriesResponse
    cagr_low: Dict[str, Optional[float]]
    cagr_high: Dict[str, Optional[float]]
    timestamp: str


class ProjectionResponse(BaseModel):
    """Model for the projection response"""
    success: bool
    ticker: str
    base_data: Dict[str, Optional[float]]
    projections: ProjectionsResponse
    summary: Dict[str, Any]
    dcf_id: Optional[int] = None
    stale: Optional[bool] = None


class PERatiosResponse(BaseModel):
    """Model for the P/E ratio summary"""
    current_pe: Optional[float] = None
    forward_pe_1_year: Optional[float] = None
    forward_pe_2_year: Optional[float] = None
    current_price: Optional[float] = None
    eps_1_year: Optional[float] = None
    eps_2_year: Optional[float] = None
    dividend_per_share: Optional[float] = None
    dividend_yield: Optional[float] = None
    dividend_growth_rate: Optional[float] = None
    industry_average_pe: Optional[float] = None
    sector: Optional[str] = None


class AuthCheckResponse(BaseModel):
    """Model for the authentication check"""
    authenticated: bool
    username: Optional[str] = None


class ErrorResponse(BaseModel):
    """Model for error responses"""
    success: bool = False
    error: str
    details: Optional[Any] = None
    code: Optional[str] = None
    hint: Optional[str] = None
    ticker: Optional[str] = None
