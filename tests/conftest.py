"""
Shared fixtures: a recording stub of the chain client and ABI entries.
"""

from typing import Any, Dict, List, Optional

import pytest
from eth_abi import encode as abi_encode
from eth_account import Account
from eth_utils import keccak

from chainmethod import Contract, PollConfig

# Private key for tests (DO NOT USE IN PRODUCTION)
TEST_PRIVATE_KEY = "0x" + "11" * 32
TEST_ADDRESS_HEX = "41" + Account.from_key(TEST_PRIVATE_KEY).address[2:].lower()

CONTRACT_HEX = "41" + "ab" * 20
HOLDER_HEX = "41" + "cd" * 20
TX_ID = "aa" * 32

BALANCE_OF_ABI = {
    "name": "balanceOf",
    "type": "function",
    "inputs": [{"name": "who", "type": "address"}],
    "outputs": [{"type": "uint256"}],
    "stateMutability": "view",
}

TRANSFER_ABI = {
    "name": "transfer",
    "type": "function",
    "inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint256"}],
    "outputs": [{"name": "success", "type": "bool"}],
    "stateMutability": "nonpayable",
}

TRANSFER_EVENT_ABI = {
    "name": "Transfer",
    "type": "event",
    "inputs": [
        {"name": "from", "type": "address", "indexed": True},
        {"name": "to", "type": "address", "indexed": True},
        {"name": "value", "type": "uint256"},
    ],
}


def encode_hex(types: List[str], values: List[Any]) -> str:
    return abi_encode(types, values).hex()


class StubChainClient:
    """Records every collaborator call; responses are set per test."""

    def __init__(self) -> None:
        self.default_address: Optional[str] = TEST_ADDRESS_HEX
        self.default_private_key: Optional[str] = TEST_PRIVATE_KEY
        self.event_server: Optional[str] = "https://events.example"
        self.calls: List[tuple] = []

        self.call_response: Any = {"constant_result": [encode_hex(["uint256"], [42])]}
        self.build_response: Any = {
            "result": {"result": True},
            "transaction": {"txID": TX_ID, "raw_data": {}},
        }
        self.broadcast_response: Any = {"result": True, "txid": TX_ID}
        self.receipts: List[Dict[str, Any]] = []
        self.event_batches: List[Any] = []

    async def build_call(self, *args):
        self.calls.append(("build_call", args))
        if isinstance(self.call_response, Exception):
            raise self.call_response
        return self.call_response

    async def build_transaction(self, *args):
        self.calls.append(("build_transaction", args))
        if isinstance(self.build_response, Exception):
            raise self.build_response
        return self.build_response

    async def sign(self, transaction, private_key):
        self.calls.append(("sign", (transaction, private_key)))
        return {**transaction, "signature": ["ff" * 65]}

    async def broadcast(self, signed_transaction):
        self.calls.append(("broadcast", (signed_transaction,)))
        return self.broadcast_response

    async def get_transaction_receipt(self, tx_id):
        self.calls.append(("get_transaction_receipt", (tx_id,)))
        if self.receipts:
            return self.receipts.pop(0)
        return {}

    async def get_events(self, contract_address, event_name):
        self.calls.append(("get_events", (contract_address, event_name)))
        # The last batch repeats once the queue is drained
        if len(self.event_batches) > 1:
            batch = self.event_batches.pop(0)
        elif self.event_batches:
            batch = self.event_batches[0]
        else:
            batch = []
        if isinstance(batch, Exception):
            raise batch
        return list(batch)

    def to_hex_address(self, address):
        value = address[2:] if address.startswith("0x") else address
        return value.lower() if len(value) == 42 else "41" + value.lower()

    def address_from_private_key(self, private_key):
        return TEST_ADDRESS_HEX

    def sha3(self, text):
        return keccak(text=text).hex()

    def to_utf8(self, hex_string):
        return bytes.fromhex(hex_string).decode()

    def called(self, name: str) -> List[tuple]:
        return [args for call, args in self.calls if call == name]


@pytest.fixture()
def chain_client() -> StubChainClient:
    return StubChainClient()


@pytest.fixture()
def contract(chain_client) -> Contract:
    return Contract(
        chain_client,
        abi=[BALANCE_OF_ABI, TRANSFER_ABI, TRANSFER_EVENT_ABI],
        address=CONTRACT_HEX,
        receipt_poll=PollConfig(max_attempts=20, interval_seconds=0),
        event_poll_interval=0.01,
    )
