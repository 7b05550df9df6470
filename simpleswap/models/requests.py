"""Pydantic models for the HTTP interface of the pool engine.

Amounts travel as uint256 decimal strings; field aliases follow the camelCase
names of the on-chain router this engine mirrors.
"""

from pydantic import BaseModel, Field

from simpleswap.models.types import Address, Uint256


class AddLiquidityRequest(BaseModel):
    """Provision both assets of a pair."""

    sender: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    amount_a_desired: Uint256 = Field(alias="amountADesired")
    amount_b_desired: Uint256 = Field(alias="amountBDesired")
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")
    to: Address
    deadline: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")
    liquidity: Uint256

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn part of a liquidity claim."""

    sender: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    liquidity: Uint256
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")
    to: Address
    deadline: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Exact-input swap along a path of assets.

    The path is validated by the engine, so a multi-hop path reaches it and
    is rejected with INVALID_PATH rather than a schema error.
    """

    sender: Address
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(default="0", alias="amountOutMin")
    path: list[Address]
    to: Address
    deadline: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    amounts: list[Uint256]


class PriceResponse(BaseModel):
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    price: Uint256
    scale: Uint256

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class PoolResponse(BaseModel):
    """Reserves of a pair, ordered as requested."""

    pair_id: str = Field(alias="pairId")
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_liquidity: Uint256 = Field(alias="totalLiquidity")

    model_config = {"populate_by_name": True}


class PositionResponse(BaseModel):
    holder: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    liquidity: Uint256

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str
    detail: str
