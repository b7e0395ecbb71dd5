"""Batch swap action and the rules for merging swaps into one Vault call."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
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
    get_to_internal,
)
from composer.actions.types import ActionType, RouteSwap, SwapKind
from composer.models.requests import BatchSwapRequest, BatchSwapStep, FundManagement
from composer.models.types import get_pool_address, normalize_address
from composer.relayer.references import OutputReference, is_chained_reference

# Limit used when the amount in is only known on-chain (chained reference)
MAX_INT256 = 2**255 - 1


@dataclass(frozen=True)
class Swap:
    """A planned Vault batch swap, possibly aggregating several route hops.

    Swaps are immutable: merging returns a new Swap and leaves both inputs
    untouched.

    Attributes:
        swaps: Batch swap steps; asset indices point into `assets`
        assets: Asset list shared by all steps
        limits: Signed per-asset limits (positive = max in, negative = min out)
        has_token_in: Some step spends the overall input token
        has_token_out: Some step produces the overall output token
        from_internal: Inputs come from the relayer's internal balance
        to_internal: Outputs stay in the relayer's internal balance
        sender: Account funding the swap
        recipient: Account receiving the swap outputs
        op_refs: Outputs stored for later actions
        kind: Exact-in or exact-out
    """

    type: ClassVar[ActionType] = ActionType.BATCH_SWAP

    swaps: tuple[BatchSwapStep, ...]
    assets: tuple[str, ...]
    limits: tuple[int, ...]
    has_token_in: bool
    has_token_out: bool
    from_internal: bool
    to_internal: bool
    sender: str
    recipient: str
    op_refs: tuple[OutputReference, ...] = ()
    kind: SwapKind = SwapKind.GIVEN_IN

    @property
    def amount_in(self) -> str:
        """Amount spent by the first step (literal or chained reference)."""
        return self.swaps[0].amount

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
    ) -> tuple[Swap, int]:
        """Build a single-step swap from a route hop and advance the counter.

        Returns:
            Tuple of (swap, next reference counter)
        """
        action_step = get_action_step(
            main_token_in_index,
            main_token_out_index,
            swap.asset_in_index,
            swap.asset_out_index,
        )
        amount_in = get_action_amount(swap.amount, ActionType.BATCH_SWAP, action_step, op_ref_key)
        op_ref, next_key = get_action_output_ref(action_step, swap.asset_out_index, op_ref_key)
        min_amount_out = get_action_min_out(swap.return_amount, slippage)

        normalized_assets = tuple(normalize_address(a) for a in assets)
        pool_address = get_pool_address(swap.pool_id)
        is_bpt_in = normalized_assets[swap.asset_in_index] == pool_address
        is_bpt_out = normalized_assets[swap.asset_out_index] == pool_address
        has_token_in = action_has_token_in(action_step)
        has_token_out = action_has_token_out(action_step)

        limits = [0] * len(normalized_assets)
        limits[swap.asset_in_index] = (
            MAX_INT256 if is_chained_reference(amount_in) else int(amount_in)
        )
        limits[swap.asset_out_index] = -int(min_amount_out)

        step = BatchSwapStep(
            pool_id=swap.pool_id,
            asset_in_index=swap.asset_in_index,
            asset_out_index=swap.asset_out_index,
            amount=amount_in,
            user_data=swap.user_data,
        )
        action = cls(
            swaps=(step,),
            assets=normalized_assets,
            limits=tuple(limits),
            has_token_in=has_token_in,
            has_token_out=has_token_out,
            from_internal=get_from_internal(has_token_in, is_bpt_in),
            to_internal=get_to_internal(has_token_out, is_bpt_out),
            sender=get_sender(has_token_in, user, relayer),
            recipient=get_receiver(has_token_out, user, relayer),
            op_refs=(op_ref,) if op_ref is not None else (),
        )
        return action, next_key

    def can_add_swap(self, other: Swap) -> bool:
        """Check whether `other` can run inside the same Vault batch swap.

        A batch swap has a single funding source and a single destination, so
        both swaps must agree on kind, internal-balance usage and accounts.
        The relayer stores a batch's whole per-asset delta under each output
        reference, so two references on the same asset cannot share a batch.
        """
        if not (
            self.kind == other.kind
            and self.from_internal == other.from_internal
            and self.to_internal == other.to_internal
            and self.sender == other.sender
            and self.recipient == other.recipient
        ):
            return False
        referenced_assets = {self.assets[ref.index] for ref in self.op_refs}
        return all(other.assets[ref.index] not in referenced_assets for ref in other.op_refs)

    def add_swap(self, other: Swap) -> Swap:
        """Return a new swap running this batch followed by `other`.

        Assets are merged (first occurrence wins), `other`'s asset indices are
        remapped onto the merged list and per-asset limits are summed.
        """
        assets = list(self.assets)
        index_map: dict[int, int] = {}
        for i, asset in enumerate(other.assets):
            if asset not in assets:
                assets.append(asset)
            index_map[i] = assets.index(asset)

        limits = list(self.limits) + [0] * (len(assets) - len(self.limits))
        for i, limit in enumerate(other.limits):
            limits[index_map[i]] = _add_limits(limits[index_map[i]], limit)

        swaps = self.swaps + tuple(
            step.model_copy(
                update={
                    "asset_in_index": index_map[step.asset_in_index],
                    "asset_out_index": index_map[step.asset_out_index],
                }
            )
            for step in other.swaps
        )
        op_refs = self.op_refs + tuple(
            OutputReference(index=index_map[ref.index], key=ref.key) for ref in other.op_refs
        )
        return replace(
            self,
            swaps=swaps,
            assets=tuple(assets),
            limits=tuple(limits),
            has_token_in=self.has_token_in or other.has_token_in,
            has_token_out=self.has_token_out or other.has_token_out,
            op_refs=op_refs,
        )

    def to_request(self) -> BatchSwapRequest:
        """Lower the swap into the Vault request replayed by simulations."""
        return BatchSwapRequest(
            kind=self.kind,
            swaps=list(self.swaps),
            assets=list(self.assets),
            funds=FundManagement(
                sender=self.sender,
                from_internal_balance=self.from_internal,
                recipient=self.recipient,
                to_internal_balance=self.to_internal,
            ),
            limits=list(self.limits),
            output_references=list(self.op_refs),
        )


def _add_limits(a: int, b: int) -> int:
    if MAX_INT256 in (a, b):
        return MAX_INT256
    return a + b


__all__ = ["MAX_INT256", "Swap"]
