"""Boundary models: address/amount types and HTTP request/response schemas."""

from simpleswap.models.requests import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ErrorResponse,
    PoolResponse,
    PositionResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from simpleswap.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "SwapRequest",
    "SwapResponse",
    "PriceResponse",
    "QuoteResponse",
    "PoolResponse",
    "PositionResponse",
    "ErrorResponse",
]
