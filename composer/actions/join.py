"""Join action: single-token deposit into a pool in exchange for BPT."""

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
    get_from_internal,
    get_receiver,
    get_sender,
)
from composer.actions.types import ActionType, RouteSwap
from composer.models.requests import JoinPoolRequest
from composer.models.types import get_pool_address, normalize_address
from composer.relayer.references import OutputReference


@dataclass(frozen=True)
class Join:
    """A planned single-token pool join.

    Attributes:
        pool_id: Pool being joined
        token_in: Token deposited
        amount_in: Literal amount or chained reference (decimal string)
        min_amount_out: Minimum BPT out after slippage
        has_token_in: Spends the overall input token
        has_token_out: BPT is the overall output token
        sender: Account funding the join (user or relayer)
        recipient: Account receiving the BPT (user or relayer)
        op_ref: Where the BPT out is stored for a later action, if any
    """

    type: ClassVar[ActionType] = ActionType.JOIN

    pool_id: str
    token_in: str
    amount_in: str
    min_amount_out: str
    has_token_in: bool
    has_token_out: bool
    sender: str
    recipient: str
    op_ref: OutputReference | None = None

    @property
    def token_out(self) -> str:
        """The BPT minted by the join."""
        return get_pool_address(self.pool_id)

    @property
    def from_internal(self) -> bool:
        return get_from_internal(self.has_token_in)

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
    ) -> tuple[Join, int]:
        """Build a join from a route hop and advance the reference counter.

        Returns:
            Tuple of (join, next reference counter)
        """
        action_step = get_action_step(
            main_token_in_index,
            main_token_out_index,
            swap.asset_in_index,
            swap.asset_out_index,
        )
        amount_in = get_action_amount(swap.amount, ActionType.JOIN, action_step, op_ref_key)
        op_ref, next_key = get_action_output_ref(action_step, swap.asset_out_index, op_ref_key)
        has_token_in = action_has_token_in(action_step)
        has_token_out = action_has_token_out(action_step)
        join = cls(
            pool_id=swap.pool_id,
            token_in=normalize_address(assets[swap.asset_in_index]),
            amount_in=amount_in,
            min_amount_out=get_action_min_out(swap.return_amount, slippage),
            has_token_in=has_token_in,
            has_token_out=has_token_out,
            sender=get_sender(has_token_in, user, relayer),
            recipient=get_receiver(has_token_out, user, relayer),
            op_ref=op_ref,
        )
        return join, next_key

    def to_request(self) -> JoinPoolRequest:
        """Lower the join into the Vault request replayed by simulations."""
        return JoinPoolRequest(
            pool_id=self.pool_id,
            sender=self.sender,
            recipient=self.recipient,
            token_in=self.token_in,
            amount_in=self.amount_in,
            min_amount_out=self.min_amount_out,
            from_internal_balance=self.from_internal,
            output_reference=self.op_ref,
        )
