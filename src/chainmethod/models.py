from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_CALL_VALUE, DEFAULT_FEE_LIMIT

__all__ = ["InvocationOptions", "Parameter", "PendingTransaction", "EventWatermark"]


class InvocationOptions(BaseModel):
    """
    Per-call invocation options.

    Fields accept both their Python names and the camelCase keys used in
    node-facing code (``feeLimit``, ``callValue``, ``from``,
    ``shouldPollResponse``). Unknown keys are ignored.

    Instances are immutable; :meth:`merge` returns a new record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    fee_limit: int = Field(
        default=DEFAULT_FEE_LIMIT,
        ge=0,
        alias="feeLimit",
        description="Resource ceiling for state-changing calls",
    )
    call_value: int = Field(
        default=DEFAULT_CALL_VALUE,
        ge=0,
        alias="callValue",
        description="Native value attached to the call",
    )
    from_address: Optional[str] = Field(
        default=None,
        alias="from",
        description="Sender address for constant calls",
    )
    should_poll_response: bool = Field(
        default=True,
        alias="shouldPollResponse",
        description="Wait for the transaction receipt after broadcasting",
    )

    def merge(
        self,
        overrides: Optional[Union["InvocationOptions", Mapping[str, Any]]] = None,
    ) -> "InvocationOptions":
        """
        Combine these defaults with caller overrides.

        Only fields the caller actually supplied replace the defaults.

        Args:
            overrides: Options record or mapping of option keys

        Returns:
            New InvocationOptions
        """
        if not overrides:
            return self
        if not isinstance(overrides, InvocationOptions):
            overrides = InvocationOptions.model_validate(dict(overrides))
        update = {name: getattr(overrides, name) for name in overrides.model_fields_set}
        return self.model_copy(update=update)


@dataclass(frozen=True)
class Parameter:
    type: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass(frozen=True)
class PendingTransaction:
    """Signed transaction awaiting broadcast or confirmation.

    Attributes:
        tx_id: Transaction id (hex, no prefix)
        signed_transaction: Signed payload as returned by the chain client
    """
    tx_id: str
    signed_transaction: Dict[str, Any]


def event_fingerprint(event: Mapping[str, Any]) -> str:
    """Canonical serialization of a full event record."""
    return json.dumps(event, sort_keys=True, separators=(",", ":"), default=str)


@dataclass
class EventWatermark:
    """In-memory cursor for one event watch.

    Attributes:
        block: Highest block number seen so far (None until the first
            non-empty batch)
        delivered: Fingerprints of delivered records, keyed to their block.
            Entries below the watermark are pruned since the block filter
            already rejects them. Records without a ``block`` are never
            pruned, so for a feed that carries no block numbers this grows
            with every distinct record delivered during the watch.
    """
    block: Optional[int] = None
    delivered: Dict[str, Optional[int]] = field(default_factory=dict)

    def admit(self, events: List[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        """
        Filter a polled batch down to records not delivered before.

        A record is admitted when it is not an exact duplicate of an earlier
        record in the batch, was not delivered by a previous poll, and is not
        in a block below the watermark. The watermark then advances to the
        batch maximum, duplicates included.

        Args:
            events: Records in source order

        Returns:
            Admitted records in source order
        """
        batch_keys = set()
        admitted: List[Mapping[str, Any]] = []

        for event in events:
            key = event_fingerprint(event)
            if key in batch_keys:
                continue
            batch_keys.add(key)

            if key in self.delivered:
                continue

            block = _block_number(event)
            if self.block is not None and block is not None and block < self.block:
                continue

            admitted.append(event)
            self.delivered[key] = block

        blocks = [b for b in (_block_number(e) for e in events) if b is not None]
        if blocks:
            latest = max(blocks)
            if self.block is None or latest > self.block:
                self.block = latest
                self.delivered = {
                    key: block
                    for key, block in self.delivered.items()
                    if block is None or block >= latest
                }

        return admitted


def _block_number(event: Mapping[str, Any]) -> Optional[int]:
    block = event.get("block")
    if block is None:
        return None
    return int(block)
