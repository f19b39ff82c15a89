"""Chain client for contract invocation.

This module defines the :class:`ChainClient` protocol consumed by
:class:`chainmethod.method.MethodInvoker`, and :class:`HttpChainClient`,
an implementation backed by the HTTP API of a TRON-style full node,
solidity node and event server.

Example:
    >>> from chainmethod import HttpChainClient, Network
    >>> client = HttpChainClient(
    ...     network=Network.NILE,
    ...     private_key="0x..."
    ... )
    >>> receipt = await client.get_transaction_receipt(tx_id)
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

import httpx
from eth_account import Account

from .abi import encode_parameters
from .config import ChainConfig, Network, get_chain_config
from .errors import RpcError, ValidationError
from .models import Parameter
from .utils import address as addresses
from .utils.logging import get_logger

_logger = get_logger(__name__)

ParameterList = Sequence[Union[Parameter, Dict[str, Any]]]


@runtime_checkable
class ChainClient(Protocol):
    """Collaborator contract of the invocation paths."""

    default_address: Optional[str]
    default_private_key: Optional[str]
    event_server: Optional[str]

    async def build_call(
        self,
        contract_address: str,
        function_selector: str,
        fee_limit: int,
        call_value: int,
        parameters: ParameterList,
        owner_address: Optional[str],
    ) -> Dict[str, Any]: ...

    async def build_transaction(
        self,
        contract_address: str,
        function_selector: str,
        fee_limit: int,
        call_value: int,
        parameters: ParameterList,
        owner_address: str,
    ) -> Dict[str, Any]: ...

    async def sign(self, transaction: Dict[str, Any], private_key: str) -> Dict[str, Any]: ...

    async def broadcast(self, signed_transaction: Dict[str, Any]) -> Dict[str, Any]: ...

    async def get_transaction_receipt(self, tx_id: str) -> Dict[str, Any]: ...

    async def get_events(self, contract_address: str, event_name: str) -> List[Dict[str, Any]]: ...

    def to_hex_address(self, address: str) -> str: ...

    def address_from_private_key(self, private_key: str) -> str: ...

    def sha3(self, text: str) -> str: ...

    def to_utf8(self, hex_string: str) -> str: ...


class HttpChainClient:
    """ChainClient over the node HTTP API using httpx."""

    def __init__(
        self,
        network: Network = Network.MAINNET,
        private_key: Optional[str] = None,
        config: Optional[ChainConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        **overrides: Any,
    ):
        self.config = config or get_chain_config(network, **overrides)
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(self.config.timeout))
        self._owns_http = http_client is None
        self.default_private_key: Optional[str] = None
        self.default_address: Optional[str] = None
        if private_key:
            self.set_private_key(private_key)

    @property
    def event_server(self) -> Optional[str]:
        return self.config.event_server

    def set_private_key(self, private_key: str) -> None:
        # Validates the key before storing it
        self.default_address = addresses.address_from_private_key(private_key)
        self.default_private_key = private_key

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "HttpChainClient":
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transaction building
    # ------------------------------------------------------------------
    async def build_call(
        self,
        contract_address: str,
        function_selector: str,
        fee_limit: int,
        call_value: int,
        parameters: ParameterList,
        owner_address: Optional[str],
    ) -> Dict[str, Any]:
        return await self._trigger(
            "/wallet/triggerconstantcontract",
            contract_address,
            function_selector,
            fee_limit,
            call_value,
            parameters,
            owner_address,
        )

    async def build_transaction(
        self,
        contract_address: str,
        function_selector: str,
        fee_limit: int,
        call_value: int,
        parameters: ParameterList,
        owner_address: str,
    ) -> Dict[str, Any]:
        return await self._trigger(
            "/wallet/triggersmartcontract",
            contract_address,
            function_selector,
            fee_limit,
            call_value,
            parameters,
            owner_address,
        )

    async def _trigger(
        self,
        path: str,
        contract_address: str,
        function_selector: str,
        fee_limit: int,
        call_value: int,
        parameters: ParameterList,
        owner_address: Optional[str],
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contract_address": self.to_hex_address(contract_address),
            "function_selector": function_selector,
            "fee_limit": int(fee_limit),
            "call_value": int(call_value),
            "parameter": encode_parameters(parameters),
        }
        if owner_address:
            payload["owner_address"] = self.to_hex_address(owner_address)
        return await self._request("POST", self.config.full_node, path, json=payload)

    # ------------------------------------------------------------------
    # Signing and broadcast
    # ------------------------------------------------------------------
    async def sign(self, transaction: Dict[str, Any], private_key: str) -> Dict[str, Any]:
        """Sign ``transaction['txID']`` with secp256k1.

        Returns a copy of the transaction with the hex signature appended.

        Raises:
            ValidationError: If the transaction has no txID, is already signed
                by this key, or the key is malformed
        """
        tx_id = transaction.get("txID")
        if not tx_id:
            raise ValidationError("Transaction is missing txID")

        owner = self._owner_address(transaction)
        signer = self.address_from_private_key(private_key)
        if owner and owner.lower() != signer:
            raise ValidationError("Private key does not match address in transaction")

        signed = Account.unsafe_sign_hash(bytes.fromhex(tx_id), private_key)
        signature = signed.signature.hex()
        if signature.startswith("0x"):
            signature = signature[2:]

        result = copy.deepcopy(transaction)
        existing = result.setdefault("signature", [])
        if signature in existing:
            raise ValidationError("Transaction is already signed")
        existing.append(signature)
        return result

    @staticmethod
    def _owner_address(transaction: Dict[str, Any]) -> Optional[str]:
        try:
            return transaction["raw_data"]["contract"][0]["parameter"]["value"]["owner_address"]
        except (KeyError, IndexError, TypeError):
            return None

    async def broadcast(self, signed_transaction: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            self.config.full_node,
            "/wallet/broadcasttransaction",
            json=signed_transaction,
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    async def get_transaction_receipt(self, tx_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            self.config.solidity_node,
            "/walletsolidity/gettransactioninfobyid",
            json={"value": tx_id},
        )

    async def get_events(self, contract_address: str, event_name: str) -> List[Dict[str, Any]]:
        """Fetch the events currently reported for a contract event.

        Records are mapped to ``{block, timestamp, contract, name,
        transaction, result, resourceNode}``.

        Raises:
            RpcError: If no event server is configured or the request fails
        """
        if not self.event_server:
            raise RpcError("No event server configured")

        address = addresses.to_base58_address(contract_address)
        raw = await self._request(
            "GET",
            self.event_server,
            f"/event/contract/{address}/{event_name}",
        )
        if isinstance(raw, dict):
            raw = raw.get("data") or []
        if not isinstance(raw, list):
            raise RpcError("Unexpected event server response", details={"response": raw})

        return [
            {
                "block": event.get("block_number"),
                "timestamp": event.get("block_timestamp"),
                "contract": event.get("contract_address"),
                "name": event.get("event_name"),
                "transaction": event.get("transaction_id"),
                "result": event.get("result"),
                "resourceNode": event.get("resource_Node") or event.get("resource_node"),
            }
            for event in raw
        ]

    # ------------------------------------------------------------------
    # Address and encoding helpers
    # ------------------------------------------------------------------
    def to_hex_address(self, address: str) -> str:
        return addresses.to_hex_address(address)

    def address_from_private_key(self, private_key: str) -> str:
        return addresses.address_from_private_key(private_key)

    def sha3(self, text: str) -> str:
        return addresses.sha3(text)

    def to_utf8(self, hex_string: str) -> str:
        return addresses.to_utf8(hex_string)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _request(
        self,
        method: str,
        base_url: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = base_url.rstrip("/") + path
        _logger.debug("Node request", extra={"method": method, "url": url})
        try:
            response = await self._http.request(method, url, json=json)
        except httpx.HTTPError as e:
            raise RpcError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code != 200:
            raise RpcError(
                f"Node returned HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
                details={"body": response.text[:500]},
            )

        try:
            return response.json()
        except ValueError as e:
            raise RpcError(f"Invalid JSON from {url}", url=url) from e
