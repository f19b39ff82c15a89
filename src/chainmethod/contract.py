"""
Contract handle.

Holds the bound address, the deployment flag and one MethodInvoker per
named ABI entry.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from chainmethod.abi import get_function_selector
from chainmethod.client import ChainClient
from chainmethod.constants import EVENT_POLL_INTERVAL_SECONDS
from chainmethod.method import MethodInvoker
from chainmethod.utils.logging import get_logger
from chainmethod.utils.polling import PollConfig

_logger = get_logger(__name__)


class ContractMethods(Dict[str, MethodInvoker]):
    """Invokers keyed by name and by canonical signature.

    Also reachable as attributes: ``contract.methods.balanceOf``.
    """

    def __getattr__(self, name: str) -> MethodInvoker:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"Contract has no method {name!r}") from None


class Contract:
    """
    Smart contract handle.

    Example:
        >>> token = Contract(client, abi=TRC20_ABI).at("TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t")
        >>> decimals = await token.methods.decimals().call()

    Args:
        client: Chain client used by every invoker
        abi: ABI entries
        address: Contract address in any accepted form
        deployed: Deployment flag (defaults to whether an address is given)
        receipt_poll: Confirmation polling cadence for send()
        event_poll_interval: Seconds between event feed polls for watch()
    """

    def __init__(
        self,
        client: ChainClient,
        abi: Optional[Sequence[Mapping[str, Any]]] = None,
        address: Optional[str] = None,
        deployed: Optional[bool] = None,
        receipt_poll: Optional[PollConfig] = None,
        event_poll_interval: float = EVENT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.client = client
        self.address: Optional[str] = client.to_hex_address(address) if address else None
        self.deployed = bool(address) if deployed is None else deployed
        self.receipt_poll = receipt_poll
        self.event_poll_interval = event_poll_interval
        self.abi: List[Mapping[str, Any]] = []
        self.methods = ContractMethods()
        self.load_abi(abi or [])

    def load_abi(self, abi: Sequence[Mapping[str, Any]]) -> None:
        """Replace the ABI and rebuild the method invokers."""
        self.abi = list(abi)
        self.methods = ContractMethods()

        for entry in self.abi:
            if not entry.get("name"):
                continue
            invoker = MethodInvoker(
                self,
                entry,
                receipt_poll=self.receipt_poll,
                event_poll_interval=self.event_poll_interval,
            )
            # First overload wins the bare name; the signature is always unique
            self.methods.setdefault(invoker.name, invoker)
            self.methods[get_function_selector(entry)] = invoker

        _logger.debug("Loaded contract ABI", extra={"address": self.address, "entries": len(self.abi)})

    def at(self, address: str) -> "Contract":
        """Bind to a deployed contract address."""
        self.address = self.client.to_hex_address(address)
        self.deployed = True
        return self

    def __repr__(self) -> str:
        return f"Contract(address={self.address!r}, deployed={self.deployed}, methods={len(self.abi)})"
