"""Turn a router path into relayer actions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from composer.actions.exit import Exit
from composer.actions.join import Join
from composer.actions.swap import Swap
from composer.actions.types import RouteSwap
from composer.models.types import get_pool_address, normalize_address

if TYPE_CHECKING:
    from composer.actions.types import Action

logger = structlog.get_logger()


def is_join(swap: RouteSwap, assets: Sequence[str]) -> bool:
    """A hop joins a pool when its output asset is that pool's BPT."""
    return normalize_address(assets[swap.asset_out_index]) == get_pool_address(swap.pool_id)


def is_exit(swap: RouteSwap, assets: Sequence[str]) -> bool:
    """A hop exits a pool when its input asset is that pool's BPT."""
    return normalize_address(assets[swap.asset_in_index]) == get_pool_address(swap.pool_id)


def get_actions(
    token_in_index: int,
    token_out_index: int,
    swaps: Sequence[RouteSwap],
    assets: Sequence[str],
    slippage: int,
    user: str,
    relayer: str,
    op_ref_key: int = 0,
) -> list[Action]:
    """Convert route hops into actions, threading the reference counter.

    The counter is passed through every hop in route order, so the returned
    actions carry consistent chained references. Reorder them with
    `order_actions`, never by hand.

    Args:
        token_in_index: Index of the overall input token in `assets`
        token_out_index: Index of the overall output token in `assets`
        swaps: Route hops in execution order
        assets: Asset list shared by the hops
        slippage: Slippage tolerance in bps applied to each hop's output
        user: Account holding the overall input and receiving the output
        relayer: Relayer address holding intermediate amounts
        op_ref_key: First reference counter value for this run

    Returns:
        One action per hop
    """
    actions: list[Action] = []
    for swap in swaps:
        if is_join(swap, assets):
            builder = Join.from_route_swap
        elif is_exit(swap, assets):
            builder = Exit.from_route_swap
        else:
            builder = Swap.from_route_swap
        action, op_ref_key = builder(
            swap,
            token_in_index,
            token_out_index,
            op_ref_key,
            assets,
            slippage,
            user,
            relayer,
        )
        actions.append(action)

    logger.debug("actions_built", count=len(actions), next_op_ref_key=op_ref_key)
    return actions


__all__ = ["get_actions", "is_exit", "is_join"]
