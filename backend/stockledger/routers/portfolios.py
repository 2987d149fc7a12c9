# backend/stockledger/routers/portfolios.py
"""
Portfolio (ledger) endpoints.

- POST /portfolios - Create an empty portfolio
- GET /portfolios - Names of active portfolios
- GET /portfolios/saved - Handles of saved portfolios
- POST /portfolios/load - Restore a saved portfolio
- GET /portfolios/{name} - Holdings and watermark
- POST /portfolios/{name}/buy, /sell - Trade on a trading day
- GET /portfolios/{name}/value, /composition, /distribution - Date-scoped reads
- POST /portfolios/{name}/rebalance - Rebalance to percentage weights
- GET /portfolios/{name}/chart - Text performance chart
- POST /portfolios/{name}/save - Persist and close

Note: value, composition, distribution and rebalance advance the
portfolio's watermark just like trades do. Earlier dates are then
rejected with 409.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from stockledger.dependencies import (
    get_chart_service,
    get_ledger_repository,
    get_portfolio_store,
)
from stockledger.routers.mappers import map_chart, map_portfolio, map_trade
from stockledger.schemas.charts import ChartResponse
from stockledger.schemas.portfolios import (
    CompositionResponse,
    DistributionResponse,
    LoadRequest,
    PortfolioCreate,
    PortfolioListResponse,
    PortfolioResponse,
    RebalanceRequest,
    RebalanceResponse,
    SavedHandlesResponse,
    SaveRequest,
    SaveResponse,
    TradeRequest,
    ValueResponse,
)
from stockledger.services.charting import PerformanceChartService
from stockledger.services.ledger import LedgerRepository, PortfolioStore

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/portfolios",
    tags=["Portfolios"],
)


# =============================================================================
# REGISTRY ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=PortfolioResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a portfolio",
)
def create_portfolio(
        payload: PortfolioCreate,
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PortfolioResponse:
    """
    Create a new, empty portfolio.

    Raises **409** if a portfolio with the same name is already active.
    """
    return map_portfolio(store.create(payload.name))


@router.get("", response_model=PortfolioListResponse, summary="List active portfolios")
def list_portfolios(store: PortfolioStore = Depends(get_portfolio_store)) -> PortfolioListResponse:
    return PortfolioListResponse(names=store.names())


@router.get("/saved", response_model=SavedHandlesResponse, summary="List saved portfolios")
def list_saved_portfolios(
        repository: LedgerRepository = Depends(get_ledger_repository),
) -> SavedHandlesResponse:
    return SavedHandlesResponse(handles=repository.list_handles())


@router.post("/load", response_model=PortfolioResponse, summary="Load a saved portfolio")
def load_portfolio(
        payload: LoadRequest,
        store: PortfolioStore = Depends(get_portfolio_store),
        repository: LedgerRepository = Depends(get_ledger_repository),
) -> PortfolioResponse:
    """
    Restore a saved portfolio into the active set.

    An identical active portfolio is replaced; a different one with the
    same name is a **409**.
    """
    return map_portfolio(store.load(payload.handle, repository))


@router.get("/{name}", response_model=PortfolioResponse, summary="Get a portfolio")
def get_portfolio(name: str, store: PortfolioStore = Depends(get_portfolio_store)) -> PortfolioResponse:
    return map_portfolio(store.get(name))


# =============================================================================
# TRADING ENDPOINTS
# =============================================================================

@router.post("/{name}/buy", response_model=PortfolioResponse, summary="Buy shares")
def buy_shares(
        name: str,
        payload: TradeRequest,
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PortfolioResponse:
    """
    Buy shares on a trading day of the ticker.

    Raises:
    - **400** for fractional shares
    - **404** if the date isn't a trading day of the ticker
    - **409** if the date is before the portfolio's most recent operation
    """
    return map_portfolio(store.buy(name, payload.ticker, payload.shares, payload.date))


@router.post("/{name}/sell", response_model=PortfolioResponse, summary="Sell shares")
def sell_shares(
        name: str,
        payload: TradeRequest,
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PortfolioResponse:
    """
    Sell shares of a held ticker. Selling everything removes the holding.

    Raises **400** when selling more than is held, **404** for a ticker
    that isn't held.
    """
    return map_portfolio(store.sell(name, payload.ticker, payload.shares, payload.date))


# =============================================================================
# VALUATION ENDPOINTS
# =============================================================================

@router.get("/{name}/value", response_model=ValueResponse, summary="Total value on a date")
def get_total_value(
        name: str,
        on: date | None = Query(default=None, alias="date", description="Valuation date (default: today)"),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> ValueResponse:
    on = on or store.clock()
    return ValueResponse(name=name, date=on, total_value=store.total_value(name, on))


@router.get("/{name}/composition", response_model=CompositionResponse, summary="Shares per ticker")
def get_composition(
        name: str,
        on: date | None = Query(default=None, alias="date", description="Date (default: today)"),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> CompositionResponse:
    on = on or store.clock()
    return CompositionResponse(name=name, date=on, shares=store.composition(name, on))


@router.get("/{name}/distribution", response_model=DistributionResponse, summary="Value per ticker")
def get_distribution(
        name: str,
        on: date | None = Query(default=None, alias="date", description="Valuation date (default: today)"),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> DistributionResponse:
    on = on or store.clock()
    return DistributionResponse(name=name, date=on, values=store.distribution(name, on))


@router.post("/{name}/rebalance", response_model=RebalanceResponse, summary="Rebalance to weights")
def rebalance_portfolio(
        name: str,
        payload: RebalanceRequest,
        store: PortfolioStore = Depends(get_portfolio_store),
) -> RebalanceResponse:
    """
    Rebalance to integer percentages, one per holding in holding order.

    Raises **400** if the number of weights doesn't match the holdings or
    the weights don't add up to 100.
    """
    trades = store.rebalance(name, payload.weights, payload.date)
    return RebalanceResponse(
        trades=[map_trade(t) for t in trades],
        portfolio=map_portfolio(store.get(name)),
    )


@router.get("/{name}/chart", response_model=ChartResponse, summary="Portfolio performance chart")
def get_portfolio_chart(
        name: str,
        start: date = Query(..., description="First day of the chart"),
        end: date = Query(..., description="Last day of the chart"),
        absolute: bool = Query(default=True, description="Scale from 0 (true) or from the lowest value"),
        store: PortfolioStore = Depends(get_portfolio_store),
        charts: PerformanceChartService = Depends(get_chart_service),
) -> ChartResponse:
    """Chart the portfolio's value. Does not move the portfolio's watermark."""
    return map_chart(charts.portfolio_chart(store.get(name), start, end, absolute))


# =============================================================================
# PERSISTENCE ENDPOINTS
# =============================================================================

@router.post("/{name}/save", response_model=SaveResponse, summary="Save and close a portfolio")
def save_portfolio(
        name: str,
        payload: SaveRequest | None = None,
        store: PortfolioStore = Depends(get_portfolio_store),
        repository: LedgerRepository = Depends(get_ledger_repository),
) -> SaveResponse:
    """
    Persist the portfolio under a handle (its name by default).

    The portfolio is no longer active afterwards; load it to continue.
    """
    handle = payload.handle if payload else None
    return SaveResponse(name=name, handle=store.save(name, repository, handle))
