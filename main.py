"""
FastAPI application for the stock valuation dashboard
Serves DCF scenario projections, saved valuation data and market data lookups
"""

from fastapi import FastAPI, Depends, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from typing import Dict, Optional
import logging
import psycopg

import auth
from auth import verify_token, auth_validator, extract_token, security
from constants.constants import (
    CORS_ORIGINS,
    ENVIRONMENT,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE,
    DCF_LIST_DEFAULT_LIMIT,
    VALUATION_LIST_DEFAULT_LIMIT
)
from models import (
    ProjectionRequest,
    DCFDataRequest,
    StockValuationRequest,
    LinkRequest,
    DDMDataRequest,
    MonthlyStockRequest,
    WatchlistSymbolRequest,
    LoginRequest,
    ProjectionResponse,
    PERatiosResponse,
    AuthCheckResponse,
    ErrorResponse
)
from services import (
    Database,
    DCFDataService,
    StockValuationService,
    LinksService,
    DDMDataService,
    MonthlyStocksService,
    WatchlistService,
    YFinanceService,
    FinnhubService,
    ProjectionService
)
from services.database import describe_database_error
from services.exceptions import InvalidInputError, RecordNotFoundError, DuplicateRecordError
from services.validators import DataValidator
import util

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse} for status_code in (400, 404, 409, 500)
}

app = FastAPI(
    title="Stock Valuation Dashboard API",
    description="Bear/base/bull DCF projections and saved valuation data",
    version="1.0.0",
    responses=ERROR_RESPONSES
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# DEPENDENCIES
# ============================================================================

database = Database()


def get_db() -> Database:
    return database


def get_dcf_service(db: Database = Depends(get_db)) -> DCFDataService:
    return DCFDataService(db)


def get_valuation_service(db: Database = Depends(get_db)) -> StockValuationService:
    return StockValuationService(db)


def get_links_service(db: Database = Depends(get_db)) -> LinksService:
    return LinksService(db)


def get_ddm_service(db: Database = Depends(get_db)) -> DDMDataService:
    return DDMDataService(db)


def get_monthly_stocks_service(db: Database = Depends(get_db)) -> MonthlyStocksService:
    return MonthlyStocksService(db)


def get_watchlist_service(db: Database = Depends(get_db)) -> WatchlistService:
    return WatchlistService(db)


def get_yfinance_service() -> YFinanceService:
    return YFinanceService()


def get_finnhub_service() -> FinnhubService:
    return FinnhubService()


def get_projection_service(
    yfinance_service: YFinanceService = Depends(get_yfinance_service),
    dcf_service: DCFDataService = Depends(get_dcf_service)
) -> ProjectionService:
    return ProjectionService(yfinance_service=yfinance_service, dcf_service=dcf_service)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={'success': False, 'error': str(exc)})


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse(status_code=404, content={'success': False, 'error': str(exc)})


@app.exception_handler(DuplicateRecordError)
async def duplicate_handler(request: Request, exc: DuplicateRecordError):
    return JSONResponse(status_code=409, content={'success': False, 'error': str(exc)})


@app.exception_handler(psycopg.Error)
async def database_error_handler(request: Request, exc: psycopg.Error):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={'success': False, 'error': 'Database error', **describe_database_error(exc)}
    )


def _require_valid_ticker(ticker: Optional[str]) -> str:
    errors = util.validate_ticker_symbol(ticker or '')
    if errors:
        raise InvalidInputError('; '.join(errors))
    return ticker.strip().upper()


# ============================================================================
# HEALTH
# ============================================================================

@app.get("/health")
def health_check():
    return {'status': 'healthy', 'timestamp': datetime.now(timezone.utc).isoformat()}


@app.get("/api/keepalive")
def keepalive(db: Database = Depends(get_db)):
    """Touch the database so hosted instances do not idle out."""
    rows = db.query('SELECT NOW() AS now')
    return {'status': 'ok', 'database_time': rows[0]['now'] if rows else None}


# ============================================================================
# AUTH
# ============================================================================

@app.post("/api/auth/login")
def login(payload: LoginRequest, response: Response):
    if not auth_validator.check_username(payload.username):
        logger.warning(f"Rejected login for {payload.username}")
        raise HTTPException(status_code=401, detail="Invalid username")

    try:
        token = auth_validator.issue_token(payload.username.strip())
    except ValueError as e:
        logger.error(f"Cannot issue session token: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite='lax',
        secure=ENVIRONMENT == 'production'
    )
    return {'success': True, 'token': token, 'username': payload.username.strip()}


@app.post("/api/auth/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {'success': True}


@app.get("/api/auth/check", response_model=AuthCheckResponse)
def check_auth(request: Request, credentials=Depends(security)):
    if auth.ENVIRONMENT == 'local':
        return {'authenticated': True, 'username': 'local-dev-user'}

    is_valid, payload, _ = auth_validator.validate_token(extract_token(request, credentials))
    if not is_valid:
        return {'authenticated': False, 'username': None}
    return {'authenticated': True, 'username': payload.get('sub')}


# ============================================================================
# PROJECTIONS
# ============================================================================

@app.post("/api/dcf/project", response_model=ProjectionResponse)
def project_scenarios(
    payload: ProjectionRequest,
    projection_service: ProjectionService = Depends(get_projection_service)
):
    """Run bear/base/bull projections; base figures not posted are fetched from Yahoo Finance."""
    ticker = _require_valid_ticker(payload.ticker)
    result = projection_service.calculate_financial_projections(
        ticker,
        {name: scenario.model_dump() for name, scenario in payload.scenarios.items()},
        revenue=payload.revenue,
        net_income=payload.net_income,
        shares_outstanding=payload.shares_outstanding,
        current_stock_price=payload.current_stock_price,
        current_eps=payload.current_eps
    )

    if not result.get('success'):
        error = result.get('error', '')
        if error == 'Validation failed':
            status_code = 400
        elif error.startswith('Failed to fetch'):
            status_code = 404
        else:
            status_code = 500
        return JSONResponse(status_code=status_code, content=result)

    return result


@app.get("/api/dcf/project", response_model=ProjectionResponse)
def project_saved_scenarios(
    symbol: Optional[str] = Query(None),
    id: Optional[int] = Query(None),
    projection_service: ProjectionService = Depends(get_projection_service)
):
    return projection_service.calculate_saved_projections(symbol=symbol, dcf_id=id)


@app.get("/api/dcf/defaults/{ticker}")
def get_dcf_defaults(
    ticker: str,
    projection_service: ProjectionService = Depends(get_projection_service)
):
    """Base data and default scenario assumptions used to pre-fill a new DCF input set."""
    ticker = _require_valid_ticker(ticker)
    defaults = projection_service.get_default_inputs(ticker)
    if defaults is None:
        raise RecordNotFoundError(f'No base data found for {ticker}')
    return defaults


# ============================================================================
# DCF DATA
# ============================================================================

def _dcf_payload(payload: DCFDataRequest):
    data = payload.model_dump(by_alias=True)
    errors = DataValidator.validate_dcf_payload(data)
    if errors:
        return None, JSONResponse(
            status_code=400,
            content={'success': False, 'error': 'Validation failed', 'details': errors}
        )
    return DataValidator.convert_to_dcf_data(data), None


@app.get("/api/dcf")
def get_dcf_data(
    symbol: Optional[str] = Query(None),
    id: Optional[int] = Query(None),
    dcf_service: DCFDataService = Depends(get_dcf_service)
):
    dcf_data = dcf_service.get(symbol=symbol, id=id)
    return {'data': dcf_data.to_dict(), 'id': dcf_data.id, 'stale': dcf_data.is_stale()}


@app.get("/api/dcf/list")
def list_dcf_data(
    symbol: Optional[str] = Query(None),
    limit: int = Query(DCF_LIST_DEFAULT_LIMIT, ge=1),
    dcf_service: DCFDataService = Depends(get_dcf_service)
):
    return dcf_service.list(symbol=symbol, limit=limit)


@app.post("/api/dcf")
def create_dcf_data(
    payload: DCFDataRequest,
    dcf_service: DCFDataService = Depends(get_dcf_service),
    user: Dict = Depends(verify_token)
):
    data, error_response = _dcf_payload(payload)
    if error_response:
        return error_response
    return dcf_service.create(data)


@app.put("/api/dcf")
def update_dcf_data(
    payload: DCFDataRequest,
    id: Optional[int] = Query(None),
    dcf_service: DCFDataService = Depends(get_dcf_service),
    user: Dict = Depends(verify_token)
):
    data, error_response = _dcf_payload(payload)
    if error_response:
        return error_response
    return dcf_service.update(id or payload.id, data)


@app.delete("/api/dcf")
def delete_dcf_data(
    id: Optional[int] = Query(None),
    dcf_service: DCFDataService = Depends(get_dcf_service),
    user: Dict = Depends(verify_token)
):
    return dcf_service.delete(id)


# ============================================================================
# STOCK VALUATIONS
# ============================================================================

@app.get("/api/stock-valuations")
def get_stock_valuation(
    stock: Optional[str] = Query(None),
    id: Optional[int] = Query(None),
    valuation_service: StockValuationService = Depends(get_valuation_service)
):
    return valuation_service.get(stock=stock, id=id)


@app.get("/api/stock-valuations/list")
def list_stock_valuations(
    stock: Optional[str] = Query(None),
    limit: int = Query(VALUATION_LIST_DEFAULT_LIMIT, ge=1),
    valuation_service: StockValuationService = Depends(get_valuation_service)
):
    return valuation_service.list(stock=stock, limit=limit)


@app.get("/api/stock-valuations/by-symbols")
def get_stock_valuation_ids(
    symbols: str = Query('', description="Comma-separated ticker symbols"),
    valuation_service: StockValuationService = Depends(get_valuation_service)
):
    return {'success': True, 'data': valuation_service.ids_by_symbols(symbols.split(','))}


@app.post("/api/stock-valuations")
def create_stock_valuation(
    payload: StockValuationRequest,
    valuation_service: StockValuationService = Depends(get_valuation_service),
    user: Dict = Depends(verify_token)
):
    return valuation_service.create(payload.model_dump(exclude={'id'}))


@app.put("/api/stock-valuations")
def update_stock_valuation(
    payload: StockValuationRequest,
    id: Optional[int] = Query(None),
    valuation_service: StockValuationService = Depends(get_valuation_service),
    user: Dict = Depends(verify_token)
):
    return valuation_service.update(id or payload.id, payload.model_dump(exclude={'id'}))


@app.delete("/api/stock-valuations")
def delete_stock_valuation(
    id: Optional[int] = Query(None),
    valuation_service: StockValuationService = Depends(get_valuation_service),
    user: Dict = Depends(verify_token)
):
    return valuation_service.delete(id)


# ============================================================================
# LINKS
# ============================================================================

@app.get("/api/links")
def get_links(
    stock_valuations_id: Optional[int] = Query(None),
    id: Optional[int] = Query(None),
    links_service: LinksService = Depends(get_links_service)
):
    return links_service.get(stock_valuations_id=stock_valuations_id, id=id)


@app.post("/api/links")
def create_link(
    payload: LinkRequest,
    links_service: LinksService = Depends(get_links_service),
    user: Dict = Depends(verify_token)
):
    return links_service.create(payload.link, payload.stock_valuations_id)


@app.put("/api/links")
def update_link(
    payload: LinkRequest,
    id: Optional[int] = Query(None),
    links_service: LinksService = Depends(get_links_service),
    user: Dict = Depends(verify_token)
):
    return links_service.update(id or payload.id, payload.link)


@app.delete("/api/links")
def delete_link(
    id: Optional[int] = Query(None),
    links_service: LinksService = Depends(get_links_service),
    user: Dict = Depends(verify_token)
):
    return links_service.delete(id)


# ============================================================================
# DDM DATA
# ============================================================================

@app.get("/api/ddm-data")
def get_ddm_data(
    symbol: Optional[str] = Query(None),
    ddm_service: DDMDataService = Depends(get_ddm_service)
):
    """One symbol's saved DDM inputs, or the list of symbols that have them."""
    if symbol:
        return ddm_service.get(symbol)
    return ddm_service.list()


@app.post("/api/ddm-data")
def create_ddm_data(
    payload: DDMDataRequest,
    ddm_service: DDMDataService = Depends(get_ddm_service),
    user: Dict = Depends(verify_token)
):
    return ddm_service.create(payload.model_dump())


@app.put("/api/ddm-data")
def update_ddm_data(
    payload: DDMDataRequest,
    symbol: Optional[str] = Query(None),
    ddm_service: DDMDataService = Depends(get_ddm_service),
    user: Dict = Depends(verify_token)
):
    changes = payload.model_dump(exclude_unset=True, exclude={'symbol'})
    return ddm_service.update(symbol or payload.symbol, changes)


@app.delete("/api/ddm-data")
def delete_ddm_data(
    symbol: Optional[str] = Query(None),
    ddm_service: DDMDataService = Depends(get_ddm_service),
    user: Dict = Depends(verify_token)
):
    return ddm_service.delete(symbol)


# ============================================================================
# MONTHLY STOCKS
# ============================================================================

@app.get("/api/monthly-stocks")
def get_monthly_stocks(
    id: Optional[int] = Query(None),
    stock_id: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    monthly_stocks_service: MonthlyStocksService = Depends(get_monthly_stocks_service)
):
    return {'data': monthly_stocks_service.list(id=id, stock_id=stock_id, month=month, year=year)}


@app.post("/api/monthly-stocks")
def create_monthly_stock(
    payload: MonthlyStockRequest,
    monthly_stocks_service: MonthlyStocksService = Depends(get_monthly_stocks_service),
    user: Dict = Depends(verify_token)
):
    row = monthly_stocks_service.create(payload.stock_id, payload.investment_date)
    return {'success': True, 'data': row}


@app.put("/api/monthly-stocks")
def update_monthly_stock(
    payload: MonthlyStockRequest,
    id: Optional[int] = Query(None),
    monthly_stocks_service: MonthlyStocksService = Depends(get_monthly_stocks_service),
    user: Dict = Depends(verify_token)
):
    row = monthly_stocks_service.update(id or payload.id, payload.stock_id, payload.investment_date)
    return {'success': True, 'data': row}


@app.delete("/api/monthly-stocks")
def delete_monthly_stock(
    id: Optional[int] = Query(None),
    monthly_stocks_service: MonthlyStocksService = Depends(get_monthly_stocks_service),
    user: Dict = Depends(verify_token)
):
    return monthly_stocks_service.delete(id)


# ============================================================================
# DASHBOARD WATCHLIST
# ============================================================================

@app.get("/api/dashboard-watchlist")
def get_watchlist(
    category: Optional[str] = Query(None),
    is_active: bool = Query(True),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    return {'success': True, **watchlist_service.list(category=category, is_active=is_active)}


@app.post("/api/dashboard-watchlist", status_code=201)
def add_watchlist_symbol(
    payload: WatchlistSymbolRequest,
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
    user: Dict = Depends(verify_token)
):
    row = watchlist_service.add(**payload.model_dump())
    return {'success': True, 'data': row}


@app.delete("/api/dashboard-watchlist")
def remove_watchlist_symbol(
    symbol: Optional[str] = Query(None),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
    user: Dict = Depends(verify_token)
):
    row = watchlist_service.remove(symbol)
    return {'success': True, 'data': row}


# ============================================================================
# MARKET DATA
# ============================================================================

@app.get("/api/pe-ratios", response_model=PERatiosResponse)
def get_pe_ratios(
    symbol: Optional[str] = Query(None),
    finnhub_service: FinnhubService = Depends(get_finnhub_service)
):
    ticker = _require_valid_ticker(symbol)
    try:
        return finnhub_service.fetch_pe_ratios(ticker)
    except ValueError as e:
        logger.error(f"P/E lookup unavailable for {ticker}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=ENVIRONMENT == 'local')
