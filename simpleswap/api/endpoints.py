"""API endpoints for the pool engine."""

import structlog
from fastapi import APIRouter, Depends, Query

from simpleswap.engine import PoolEngine, get_default_engine
from simpleswap.models.requests import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    PoolResponse,
    PositionResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from simpleswap.pools.pair import pair_key

logger = structlog.get_logger()

router = APIRouter()


def get_engine() -> PoolEngine:
    """Dependency provider for the engine instance.

    Override this in tests to inject an engine with seeded ledgers:
        app.dependency_overrides[get_engine] = lambda: engine

    Returns:
        The engine instance serving requests.
    """
    return get_default_engine()


# Mutating endpoints are plain functions so FastAPI runs them in its worker
# thread pool; the engine lock serializes them.


@router.post("/liquidity/add", response_model=AddLiquidityResponse)
def add_liquidity(
    request: AddLiquidityRequest,
    engine: PoolEngine = Depends(get_engine),
) -> AddLiquidityResponse:
    """Provision liquidity into a pair."""
    logger.info(
        "received_add_liquidity",
        sender=request.sender,
        token_a=request.token_a,
        token_b=request.token_b,
    )
    result = engine.add_liquidity(
        request.token_a,
        request.token_b,
        int(request.amount_a_desired),
        int(request.amount_b_desired),
        int(request.amount_a_min),
        int(request.amount_b_min),
        request.to,
        request.deadline,
        sender=request.sender,
    )
    return AddLiquidityResponse(
        amount_a=str(result.amount_a),
        amount_b=str(result.amount_b),
        liquidity=str(result.liquidity),
    )


@router.post("/liquidity/remove", response_model=RemoveLiquidityResponse)
def remove_liquidity(
    request: RemoveLiquidityRequest,
    engine: PoolEngine = Depends(get_engine),
) -> RemoveLiquidityResponse:
    """Withdraw liquidity from a pair."""
    logger.info(
        "received_remove_liquidity",
        sender=request.sender,
        token_a=request.token_a,
        token_b=request.token_b,
        liquidity=request.liquidity,
    )
    amount_a, amount_b = engine.remove_liquidity(
        request.token_a,
        request.token_b,
        int(request.liquidity),
        int(request.amount_a_min),
        int(request.amount_b_min),
        request.to,
        request.deadline,
        sender=request.sender,
    )
    return RemoveLiquidityResponse(amount_a=str(amount_a), amount_b=str(amount_b))


@router.post("/swap", response_model=SwapResponse)
def swap(
    request: SwapRequest,
    engine: PoolEngine = Depends(get_engine),
) -> SwapResponse:
    """Swap an exact input amount along a two-asset path."""
    logger.info(
        "received_swap",
        sender=request.sender,
        path=request.path,
        amount_in=request.amount_in,
    )
    amounts = engine.swap_exact_tokens_for_tokens(
        int(request.amount_in),
        int(request.amount_out_min),
        request.path,
        request.to,
        request.deadline,
        sender=request.sender,
    )
    return SwapResponse(amounts=[str(a) for a in amounts])


@router.get("/price/{token_a}/{token_b}", response_model=PriceResponse)
def price(
    token_a: str,
    token_b: str,
    engine: PoolEngine = Depends(get_engine),
) -> PriceResponse:
    """Spot price of token_a in units of token_b."""
    return PriceResponse(
        token_a=token_a,
        token_b=token_b,
        price=str(engine.get_price(token_a, token_b)),
        scale=str(engine.config.price_scale),
    )


@router.get("/quote", response_model=QuoteResponse)
def quote(
    amount_in: int = Query(alias="amountIn", ge=0),
    reserve_in: int = Query(alias="reserveIn", ge=0),
    reserve_out: int = Query(alias="reserveOut", ge=0),
    engine: PoolEngine = Depends(get_engine),
) -> QuoteResponse:
    """Fee-free constant-product output for arbitrary reserves."""
    amount_out = engine.get_amount_out(amount_in, reserve_in, reserve_out)
    return QuoteResponse(amount_out=str(amount_out))


@router.get("/pools/{token_a}/{token_b}", response_model=PoolResponse)
def pool(
    token_a: str,
    token_b: str,
    engine: PoolEngine = Depends(get_engine),
) -> PoolResponse:
    """Reserves of a pair, ordered as requested."""
    state = engine.get_pool(token_a, token_b)
    reserve_a, reserve_b = state.get_reserves(token_a)
    return PoolResponse(
        pair_id=pair_key(token_a, token_b).pair_id,
        token_a=token_a,
        token_b=token_b,
        reserve_a=str(reserve_a),
        reserve_b=str(reserve_b),
        total_liquidity=str(state.total_shares),
    )


@router.get("/positions/{holder}/{token_a}/{token_b}", response_model=PositionResponse)
def position(
    holder: str,
    token_a: str,
    token_b: str,
    engine: PoolEngine = Depends(get_engine),
) -> PositionResponse:
    """Liquidity claim of a holder on a pair."""
    return PositionResponse(
        holder=holder,
        token_a=token_a,
        token_b=token_b,
        liquidity=str(engine.get_liquidity(holder, token_a, token_b)),
    )
