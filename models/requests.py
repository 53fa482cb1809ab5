"""Request models for the FastAPI application"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

from constants.constants import SCENARIOS


class ScenarioProjection(BaseModel):
    """Assumptions for one scenario. pe_high below pe_low is allowed and yields an inverted band."""
    revenue_growth: float = Field(..., description="Revenue growth rate (decimal, e.g., 0.10 for 10%)")
    net_income_growth: float = Field(..., description="Net income and EPS growth rate (decimal)")
    pe_low: float = Field(..., description="Low PE ratio estimate")
    pe_high: float = Field(..., description="High PE ratio estimate")


class ProjectionRequest(BaseModel):
    """Model for a projection run over posted inputs"""
    ticker: str = Field(..., min_length=1, max_length=10)
    scenarios: Dict[str, ScenarioProjection] = Field(..., description="Assumptions keyed bear, base and bull")
    revenue: Optional[float] = Field(None, ge=0, description="Base revenue; fetched when omitted")
    net_income: Optional[float] = Field(None, description="Base net income; fetched when omitted")
    shares_outstanding: Optional[int] = Field(None, description="Non-positive values use the default share count")
    current_stock_price: Optional[float] = Field(None, description="Current price; fetched when omitted")
    current_eps: Optional[float] = Field(None, description="Seeds the EPS series when positive")

    @field_validator('scenarios')
    @classmethod
    def validate_scenario_names(cls, v):
        if set(v.keys()) != set(SCENARIOS):
            raise ValueError("scenarios must contain exactly bear, base and bull")
        return v


class ScenarioValues(BaseModel):
    """One number per scenario"""
    bear: Optional[float] = None
    base: Optional[float] = None
    bull: Optional[float] = None


class DCFDataRequest(BaseModel):
    """Saved DCF input set, in the dashboard's camelCase shape"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[int] = None
    symbol: Optional[str] = None
    stock_price: Optional[float] = None
    revenue: Optional[float] = None
    net_income: Optional[float] = None
    shares_outstanding: Optional[int] = None
    current_eps: Optional[float] = None
    revenue_growth: Optional[ScenarioValues] = None
    net_income_growth: Optional[ScenarioValues] = None
    pe_low: Optional[ScenarioValues] = None
    pe_high: Optional[ScenarioValues] = None
    timestamp: Optional[str] = None


class StockValuationRequest(BaseModel):
    """Model for creating or updating a stock valuation"""
    id: Optional[int] = None
    stock: Optional[str] = None
    buy_price: Optional[float] = None
    active_price: Optional[float] = None
    dcf_price: Optional[float] = None
    ddm_price: Optional[float] = None
    reit_valuation: Optional[float] = None
    average_valuations: Optional[float] = None
    dividend_per_share: Optional[float] = None
    gross_profit_pct: Optional[float] = None
    roic: Optional[float] = None
    long_term_earning_growth: Optional[float] = None
    simplywall_valuation: Optional[float] = None
    change_pct: Optional[float] = None
    year_high: Optional[float] = None
    year_low: Optional[float] = None
    pe: Optional[float] = None
    eps: Optional[float] = None
    bear_case_avg_price: Optional[float] = None
    bear_case_low_price: Optional[float] = None
    bear_case_high_price: Optional[float] = None
    base_case_avg_price: Optional[float] = None
    base_case_low_price: Optional[float] = None
    base_case_high_price: Optional[float] = None
    bull_case_avg_price: Optional[float] = None
    bull_case_low_price: Optional[float] = None
    bull_case_high_price: Optional[float] = None


class LinkRequest(BaseModel):
    """Model for creating or updating a research link"""
    id: Optional[int] = None
    link: Optional[str] = None
    stock_valuations_id: Optional[int] = None


class WatchlistSymbolRequest(BaseModel):
    """Model for adding a symbol to the dashboard watchlist"""
    symbol: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    data_source: Optional[str] = None
    fred_series_id: Optional[str] = None
    notes: Optional[str] = None
    display_order: Optional[int] = None


class LoginRequest(BaseModel):
    """Model for dashboard login"""
    username: str = Field(..., min_length=1)


class DDMDataRequest(BaseModel):
    """Saved dividend discount model inputs, camelCase like the DCF payload"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: Optional[str] = None
    wacc: Optional[float] = None
    margin_of_safety: Optional[float] = None
    high_growth_years: Optional[int] = None
    stable_growth_rate: Optional[float] = None
    current_price: Optional[float] = None
    dividends_by_year: Optional[List[Any]] = None
    current_year_projected: Optional[bool] = None
    dividend_growth_rate: Optional[float] = None
    latest_dividend: Optional[float] = None
    historical_dividends: Optional[List[Any]] = None
    dividend_projections: Optional[List[Any]] = None
    intrinsic_value: Optional[float] = None
    ddm_with_safety: Optional[float] = None
    terminal_value: Optional[float] = None


class MonthlyStockRequest(BaseModel):
    """Model for a monthly investment pick"""
    id: Optional[int] = None
    stock_id: Optional[int] = None
    investment_date: Optional[str] = Field(None, description="YYYY-MM-DD")
