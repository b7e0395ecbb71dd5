"""Type definitions for relayer actions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, TypeAlias

from pydantic import BaseModel, Field

from composer.models.requests import ActionType, SwapKind
from composer.models.types import Bytes, PoolId, Uint256

if TYPE_CHECKING:
    from composer.actions.exit import Exit
    from composer.actions.join import Join
    from composer.actions.swap import Swap


class ActionStep(str, Enum):
    """Where an action sits in the chain between token in and token out.

    DIRECT:    tokenIn > tokenOut
    TOKEN_IN:  tokenIn > chain...
    TOKEN_OUT: ...chain > tokenOut
    MIDDLE:    ...chain > action > chain...
    """

    DIRECT = "direct"
    TOKEN_IN = "token_in"
    TOKEN_OUT = "token_out"
    MIDDLE = "middle"


class RouteSwap(BaseModel):
    """One hop of a router-produced path, before it becomes an action.

    Asset indices point into the route's shared asset list. A hop whose output
    asset is the pool's own BPT is a join; one whose input is the BPT is an exit.
    """

    pool_id: PoolId = Field(alias="poolId")
    asset_in_index: int = Field(alias="assetInIndex", ge=0)
    asset_out_index: int = Field(alias="assetOutIndex", ge=0)
    amount: Uint256
    user_data: Bytes = Field(default="0x", alias="userData")
    return_amount: Uint256 = Field(default="0", alias="returnAmount")

    model_config = {"populate_by_name": True, "frozen": True}


# Tagged union of every planned step
Action: TypeAlias = "Join | Exit | Swap"

__all__ = ["Action", "ActionStep", "ActionType", "RouteSwap", "SwapKind"]
