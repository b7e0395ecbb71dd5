"""Exit action: burn BPT for a single pool token."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from composer.actions.base import (
    action_has_token_in,
    action_has_token_out,
    get_action_amount,
    get_action_min_out,
    get_action_output_ref,
    get_action_step,
    get_receiver,
    get_sender,
    get_to_internal,
)
from composer.actions.types import ActionType, RouteSwap
from composer.models.requests import ExitPoolRequest
from composer.models.types import get_pool_address, normalize_address
from composer.relayer.references import OutputReference


@dataclass(frozen=True)
class Exit:
    """A planned single-token pool exit.

    Attributes:
        pool_id: Pool being exited
        token_out: Token withdrawn
        amount_in: BPT burned, literal or chained reference (decimal string)
        min_amount_out: Minimum token out after slippage
        has_token_in: BPT is the overall input token
        has_token_out: Withdrawn token is the overall output token
        sender: Account burning the BPT (user or relayer)
        recipient: Account receiving the token (user or relayer)
        op_ref: Where the token out is stored for a later action, if any
    """

    type: ClassVar[ActionType] = ActionType.EXIT

    pool_id: str
    token_out: str
    amount_in: str
    min_amount_out: str
    has_token_in: bool
    has_token_out: bool
    sender: str
    recipient: str
    op_ref: OutputReference | None = None

    @property
    def token_in(self) -> str:
        """The BPT burned by the exit."""
        return get_pool_address(self.pool_id)

    @property
    def to_internal(self) -> bool:
        return get_to_internal(self.has_token_out)

    @classmethod
    def from_route_swap(
        cls,
        swap: RouteSwap,
        main_token_in_index: int,
        main_token_out_index: int,
        op_ref_key: int,
        assets: Sequence[str],
        slippage: int,
        user: str,
        relayer: str,
    ) -> tuple[Exit, int]:
        """Build an exit from a route hop and advance the reference counter.

        Returns:
            Tuple of (exit, next reference counter)
        """
        action_step = get_action_step(
            main_token_in_index,
            main_token_out_index,
            swap.asset_in_index,
            swap.asset_out_index,
        )
        amount_in = get_action_amount(swap.amount, ActionType.EXIT, action_step, op_ref_key)
        op_ref, next_key = get_action_output_ref(action_step, swap.asset_out_index, op_ref_key)
        has_token_in = action_has_token_in(action_step)
        has_token_out = action_has_token_out(action_step)
        exit_action = cls(
            pool_id=swap.pool_id,
            token_out=normalize_address(assets[swap.asset_out_index]),
            amount_in=amount_in,
            min_amount_out=get_action_min_out(swap.return_amount, slippage),
            has_token_in=has_token_in,
            has_token_out=has_token_out,
            sender=get_sender(has_token_in, user, relayer),
            recipient=get_receiver(has_token_out, user, relayer),
            op_ref=op_ref,
        )
        return exit_action, next_key

    def to_request(self) -> ExitPoolRequest:
        """Lower the exit into the Vault request replayed by simulations."""
        return ExitPoolRequest(
            pool_id=self.pool_id,
            sender=self.sender,
            recipient=self.recipient,
            token_out=self.token_out,
            amount_in=self.amount_in,
            min_amount_out=self.min_amount_out,
            to_internal_balance=self.to_internal,
            output_reference=self.op_ref,
        )
