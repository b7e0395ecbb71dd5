"""Pydantic models for Vault requests issued through the relayer.

Each planned action is lowered into exactly one request. Requests are what the
off-chain vault model replays; the amounts they carry may be literals or
chained references.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from composer.models.types import Address, Bytes, PoolId, Uint256
from composer.relayer.references import OutputReference


class ActionType(str, Enum):
    """The kind of Vault call an action performs."""

    JOIN = "join"
    EXIT = "exit"
    BATCH_SWAP = "batch_swap"


class SwapKind(str, Enum):
    """Which side of a batch swap is fixed."""

    GIVEN_IN = "given_in"
    GIVEN_OUT = "given_out"


class BatchSwapStep(BaseModel):
    """A single step of a Vault batch swap.

    Asset indices point into the owning request's `assets` list.
    """

    pool_id: PoolId = Field(alias="poolId")
    asset_in_index: int = Field(alias="assetInIndex", ge=0)
    asset_out_index: int = Field(alias="assetOutIndex", ge=0)
    amount: Uint256 = Field(description="Amount in, literal or chained reference")
    user_data: Bytes = Field(default="0x", alias="userData")

    model_config = {"populate_by_name": True, "frozen": True}


class FundManagement(BaseModel):
    """Where a batch swap takes its inputs from and sends its outputs to."""

    sender: Address
    from_internal_balance: bool = Field(alias="fromInternalBalance")
    recipient: Address
    to_internal_balance: bool = Field(alias="toInternalBalance")

    model_config = {"populate_by_name": True, "frozen": True}


class JoinPoolRequest(BaseModel):
    """Single-token join: deposit `amount_in` of `token_in`, receive BPT."""

    action_type: Literal[ActionType.JOIN] = ActionType.JOIN
    pool_id: PoolId
    sender: Address
    recipient: Address
    token_in: Address
    amount_in: Uint256
    min_amount_out: Uint256 = "0"
    from_internal_balance: bool = False
    output_reference: OutputReference | None = None


class ExitPoolRequest(BaseModel):
    """Single-token exit: burn `amount_in` BPT, receive `token_out`."""

    action_type: Literal[ActionType.EXIT] = ActionType.EXIT
    pool_id: PoolId
    sender: Address
    recipient: Address
    token_out: Address
    amount_in: Uint256
    min_amount_out: Uint256 = "0"
    to_internal_balance: bool = False
    output_reference: OutputReference | None = None


class BatchSwapRequest(BaseModel):
    """A Vault batch swap over a shared asset list."""

    action_type: Literal[ActionType.BATCH_SWAP] = ActionType.BATCH_SWAP
    kind: SwapKind = SwapKind.GIVEN_IN
    swaps: list[BatchSwapStep]
    assets: list[Address]
    funds: FundManagement
    limits: list[int] = Field(description="Signed per-asset limits (positive = max in)")
    deadline: int = 2**256 - 1
    output_references: list[OutputReference] = Field(default_factory=list)


def request_pool_id(request: JoinPoolRequest | ExitPoolRequest | BatchSwapRequest) -> str:
    """Return the pool a request settles against.

    For a batch swap this is the pool of its first step.
    """
    if isinstance(request, BatchSwapRequest):
        return request.swaps[0].pool_id
    return request.pool_id


__all__ = [
    "ActionType",
    "BatchSwapRequest",
    "BatchSwapStep",
    "ExitPoolRequest",
    "FundManagement",
    "JoinPoolRequest",
    "SwapKind",
    "request_pool_id",
]
