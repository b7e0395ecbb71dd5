"""Pydantic models and shared types for relayer composition."""

from composer.models.requests import (
    ActionType,
    BatchSwapRequest,
    BatchSwapStep,
    ExitPoolRequest,
    FundManagement,
    JoinPoolRequest,
    SwapKind,
    request_pool_id,
)
from composer.models.types import Address, Bytes, PoolId, Uint256, get_pool_address

__all__ = [
    # Types
    "Address",
    "Bytes",
    "PoolId",
    "Uint256",
    "get_pool_address",
    # Requests
    "ActionType",
    "SwapKind",
    "BatchSwapStep",
    "FundManagement",
    "JoinPoolRequest",
    "ExitPoolRequest",
    "BatchSwapRequest",
    "request_pool_id",
]
