"""Relayer actions and the helpers that order, chain and batch them."""

from composer.actions.base import (
    action_has_token_in,
    action_has_token_out,
    get_action_amount,
    get_action_min_out,
    get_action_output_ref,
    get_action_step,
)
from composer.actions.builder import get_actions
from composer.actions.exit import Exit
from composer.actions.helpers import (
    batch_swap_actions,
    categorize_actions,
    get_number_of_output_actions,
    order_actions,
)
from composer.actions.join import Join
from composer.actions.swap import Swap
from composer.actions.types import Action, ActionStep, ActionType, RouteSwap, SwapKind

__all__ = [
    # Types
    "Action",
    "ActionStep",
    "ActionType",
    "RouteSwap",
    "SwapKind",
    # Actions
    "Join",
    "Exit",
    "Swap",
    # Classification and chained references
    "get_action_step",
    "action_has_token_in",
    "action_has_token_out",
    "get_action_amount",
    "get_action_output_ref",
    "get_action_min_out",
    # Ordering
    "categorize_actions",
    "batch_swap_actions",
    "order_actions",
    "get_number_of_output_actions",
    "get_actions",
]
