"""Classification and chained-reference allocation shared by every action.

The reference counter is threaded explicitly: every allocation returns the
next counter value, and callers must pass it on to the following action in
execution order.
"""

from __future__ import annotations

from composer.actions.types import ActionStep, ActionType
from composer.relayer.references import OutputReference, get_output_ref, to_chained_reference
from composer.slippage import sub_slippage


def get_action_step(
    token_in_index: int,
    token_out_index: int,
    token_in_index_action: int,
    token_out_index_action: int,
) -> ActionStep:
    """Find where an action sits relative to the overall token in/out.

    The DIRECT check runs first since it is the most specific.

    Args:
        token_in_index: Index of the overall input token
        token_out_index: Index of the overall output token
        token_in_index_action: Index of this action's input token
        token_out_index_action: Index of this action's output token

    Returns:
        The action's step in the chain
    """
    if token_in_index_action == token_in_index and token_out_index_action == token_out_index:
        return ActionStep.DIRECT
    if token_in_index_action == token_in_index:
        return ActionStep.TOKEN_IN
    if token_out_index_action == token_out_index:
        return ActionStep.TOKEN_OUT
    return ActionStep.MIDDLE


def action_has_token_in(action_step: ActionStep) -> bool:
    """True if the action consumes the overall input token."""
    return action_step in (ActionStep.DIRECT, ActionStep.TOKEN_IN)


def action_has_token_out(action_step: ActionStep) -> bool:
    """True if the action produces the overall output token."""
    return action_step in (ActionStep.DIRECT, ActionStep.TOKEN_OUT)


def get_action_amount(
    amount: str,
    action_type: ActionType,
    action_step: ActionStep,
    op_ref_key: int,
) -> str:
    """Return the amount an action spends.

    Amounts are only known up front at the start of the chain. Chain-ending
    actions, and joins/exits in the middle, read the previous action's output
    through the most recently allocated chained reference instead.

    Args:
        amount: Literal amount from the route
        action_type: Kind of action
        action_step: Action's position in the chain
        op_ref_key: Current reference counter

    Returns:
        The literal amount, or a chained reference as a decimal string
    """
    if action_step == ActionStep.TOKEN_OUT or (
        action_step == ActionStep.MIDDLE and action_type in (ActionType.JOIN, ActionType.EXIT)
    ):
        return str(to_chained_reference(op_ref_key - 1))
    return amount


def get_action_output_ref(
    action_step: ActionStep,
    token_out_index: int,
    op_ref_key: int,
) -> tuple[OutputReference | None, int]:
    """Allocate an output reference when a later action consumes this output.

    Args:
        action_step: Action's position in the chain
        token_out_index: Index of the output being stored
        op_ref_key: Current reference counter

    Returns:
        Tuple of (reference or None, next counter value)
    """
    if action_step in (ActionStep.TOKEN_IN, ActionStep.MIDDLE):
        return get_output_ref(op_ref_key, token_out_index), op_ref_key + 1
    return None, op_ref_key


def get_action_min_out(amount_out: str, slippage: int) -> str:
    """Apply slippage (in bps) to an expected output to get the minimum out.

    Only exact-in is handled; exact-out would add slippage to the input.
    """
    return str(sub_slippage(int(amount_out), slippage))


def get_from_internal(has_token_in: bool, is_bpt_in: bool = False) -> bool:
    """Whether inputs are pulled from the relayer's internal balance."""
    return not (has_token_in or is_bpt_in)


def get_to_internal(has_token_out: bool, is_bpt_out: bool = False) -> bool:
    """Whether outputs are left in the relayer's internal balance."""
    return not (has_token_out or is_bpt_out)


def get_sender(has_token_in: bool, user: str, relayer: str) -> str:
    return user if has_token_in else relayer


def get_receiver(has_token_out: bool, user: str, relayer: str) -> str:
    return user if has_token_out else relayer


__all__ = [
    "action_has_token_in",
    "action_has_token_out",
    "get_action_amount",
    "get_action_min_out",
    "get_action_output_ref",
    "get_action_step",
    "get_from_internal",
    "get_receiver",
    "get_sender",
    "get_to_internal",
]
