"""Ordering and batching of relayer actions.

The goal is the fewest relayer calls that still respect the data flow:
joins/exits fed by the overall input run first, joins/exits producing the
overall output run last, everything else (all swaps included) runs in between,
and adjacent swaps with the same funding source collapse into one batch swap.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from functools import reduce, singledispatch
from typing import TYPE_CHECKING

import structlog

from composer.actions.base import (
    get_action_amount,
    get_action_min_out,
    get_action_output_ref,
    get_action_step,
)
from composer.actions.exit import Exit
from composer.actions.join import Join
from composer.actions.swap import Swap

if TYPE_CHECKING:
    from composer.actions.types import Action

logger = structlog.get_logger()


class _Category(Enum):
    ENTER = "enter"
    MIDDLE = "middle"
    EXIT = "exit"


@singledispatch
def _categorize(action: object) -> _Category:
    raise TypeError(f"Unknown action type: {type(action).__name__}")


@_categorize.register(Join)
@_categorize.register(Exit)
def _categorize_pool_action(action: Join | Exit) -> _Category:
    # joins/exits with tokenIn can always be done first
    if action.has_token_in:
        return _Category.ENTER
    # joins/exits with tokenOut (and not tokenIn) can always be done last
    if action.has_token_out:
        return _Category.EXIT
    return _Category.MIDDLE


@_categorize.register(Swap)
def _categorize_swap(_action: Swap) -> _Category:
    # swaps are always chained in between
    return _Category.MIDDLE


def categorize_actions(actions: Sequence[Action]) -> list[Action]:
    """Stable-partition actions into enter, middle and exit groups.

    Args:
        actions: Actions in caller order

    Returns:
        enter + middle + exit, each group keeping its input order
    """
    groups: dict[_Category, list[Action]] = {category: [] for category in _Category}
    for action in actions:
        groups[_categorize(action)].append(action)
    return [*groups[_Category.ENTER], *groups[_Category.MIDDLE], *groups[_Category.EXIT]]


@dataclass(frozen=True)
class _BatchState:
    """Fold accumulator: actions emitted so far and the swap being built."""

    ordered: tuple[Action, ...] = ()
    pending: Swap | None = None

    def flushed(self) -> tuple[Action, ...]:
        if self.pending is None:
            return self.ordered
        return (*self.ordered, self.pending)


@singledispatch
def _batch_step(action: object, state: _BatchState) -> _BatchState:
    raise TypeError(f"Unknown action type: {type(action).__name__}")


@_batch_step.register(Join)
@_batch_step.register(Exit)
def _batch_pool_action(action: Join | Exit, state: _BatchState) -> _BatchState:
    # A join/exit changes what later swaps read from internal balances,
    # so the pending batch ends here.
    return _BatchState(ordered=(*state.flushed(), action))


@_batch_step.register(Swap)
def _batch_swap(action: Swap, state: _BatchState) -> _BatchState:
    if state.pending is None:
        return _BatchState(ordered=state.ordered, pending=action)
    if state.pending.can_add_swap(action):
        return _BatchState(ordered=state.ordered, pending=state.pending.add_swap(action))
    return _BatchState(ordered=state.flushed(), pending=action)


def batch_swap_actions(actions: Sequence[Action]) -> list[Action]:
    """Merge runs of compatible adjacent swaps into single batch swaps.

    Swaps with the same source can be batched: a swap carrying the overall
    token in (or a BPT) is funded externally, any other swap reads from
    internal balances, and the two cannot share one batch swap.

    Args:
        actions: Ordered actions

    Returns:
        Actions with compatible adjacent swaps merged
    """
    final_state = reduce(lambda state, action: _batch_step(action, state), actions, _BatchState())
    return list(final_state.flushed())


def order_actions(actions: Sequence[Action]) -> list[Action]:
    """Organise actions into a valid order with the fewest relayer calls."""
    categorized = categorize_actions(actions)
    ordered = batch_swap_actions(categorized)
    logger.debug(
        "actions_ordered",
        input_count=len(actions),
        output_count=len(ordered),
        merged=len(actions) - len(ordered),
    )
    return ordered


def get_number_of_output_actions(actions: Sequence[Action]) -> int:
    """Count the actions that end with the overall output token."""
    return sum(1 for action in actions if action.has_token_out)


__all__ = [
    "batch_swap_actions",
    "categorize_actions",
    "get_action_amount",
    "get_action_min_out",
    "get_action_output_ref",
    "get_action_step",
    "get_number_of_output_actions",
    "order_actions",
]
