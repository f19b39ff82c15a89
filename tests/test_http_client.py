"""
Tests for HttpChainClient against a mocked node HTTP API.
"""

import json

import httpx
import pytest
from eth_account import Account

from chainmethod import HttpChainClient, Network, Parameter, RpcError, ValidationError
from chainmethod.utils import to_base58_address

from conftest import CONTRACT_HEX, HOLDER_HEX, TEST_ADDRESS_HEX, TEST_PRIVATE_KEY, TX_ID


class Recorder:
    """httpx MockTransport handler returning canned JSON per path."""

    def __init__(self, responses=None, status_code=200):
        self.responses = responses or {}
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.responses.get(request.url.path, {})
        return httpx.Response(self.status_code, json=body)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


def make_client(handler, **kwargs) -> HttpChainClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpChainClient(network=Network.NILE, private_key=TEST_PRIVATE_KEY, http_client=http, **kwargs)


class TestConstruction:
    def test_default_address_from_key(self) -> None:
        client = make_client(Recorder())

        assert client.default_address == TEST_ADDRESS_HEX
        assert client.default_private_key == TEST_PRIVATE_KEY
        assert client.event_server == "https://nile.trongrid.io"

    def test_invalid_key_not_leaked(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            HttpChainClient(private_key="0xnot-a-key")

        assert "not-a-key" not in str(exc_info.value)

    def test_overrides(self) -> None:
        client = HttpChainClient(network=Network.SHASTA, event_server="https://events.local")

        assert client.config.full_node == "https://api.shasta.trongrid.io"
        assert client.event_server == "https://events.local"
        assert client.default_address is None


class TestTrigger:
    @pytest.mark.asyncio
    async def test_build_call_payload(self) -> None:
        recorder = Recorder({"/wallet/triggerconstantcontract": {"constant_result": ["00"]}})
        client = make_client(recorder)

        response = await client.build_call(
            CONTRACT_HEX,
            "balanceOf(address)",
            1000,
            0,
            [Parameter(type="address", value="0x" + "cd" * 20)],
            HOLDER_HEX,
        )

        assert response == {"constant_result": ["00"]}
        request = recorder.requests[-1]
        assert request.method == "POST"
        assert str(request.url) == "https://nile.trongrid.io/wallet/triggerconstantcontract"
        assert recorder.last_json == {
            "contract_address": CONTRACT_HEX,
            "function_selector": "balanceOf(address)",
            "fee_limit": 1000,
            "call_value": 0,
            "parameter": "000000000000000000000000" + "cd" * 20,
            "owner_address": HOLDER_HEX,
        }

    @pytest.mark.asyncio
    async def test_build_call_without_owner(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)

        await client.build_call(CONTRACT_HEX, "totalSupply()", 1000, 0, [], None)

        assert "owner_address" not in recorder.last_json
        assert recorder.last_json["parameter"] == ""

    @pytest.mark.asyncio
    async def test_build_transaction_path(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)

        await client.build_transaction(
            CONTRACT_HEX, "transfer(address,uint256)", 5, 1, [{"type": "uint256", "value": 1}], TEST_ADDRESS_HEX
        )

        assert recorder.requests[-1].url.path == "/wallet/triggersmartcontract"
        assert recorder.last_json["call_value"] == 1


class TestSignAndBroadcast:
    @pytest.mark.asyncio
    async def test_sign_appends_signature(self) -> None:
        client = make_client(Recorder())
        transaction = {"txID": TX_ID, "raw_data": {}}

        signed = await client.sign(transaction, TEST_PRIVATE_KEY)

        expected = Account.unsafe_sign_hash(bytes.fromhex(TX_ID), TEST_PRIVATE_KEY).signature.hex()
        assert signed["signature"] == [expected.removeprefix("0x")]
        assert "signature" not in transaction

    @pytest.mark.asyncio
    async def test_sign_rejects_foreign_owner(self) -> None:
        client = make_client(Recorder())
        transaction = {
            "txID": TX_ID,
            "raw_data": {"contract": [{"parameter": {"value": {"owner_address": HOLDER_HEX}}}]},
        }

        with pytest.raises(ValidationError, match="does not match"):
            await client.sign(transaction, TEST_PRIVATE_KEY)

    @pytest.mark.asyncio
    async def test_sign_requires_tx_id(self) -> None:
        client = make_client(Recorder())

        with pytest.raises(ValidationError, match="txID"):
            await client.sign({"raw_data": {}}, TEST_PRIVATE_KEY)

    @pytest.mark.asyncio
    async def test_broadcast(self) -> None:
        recorder = Recorder({"/wallet/broadcasttransaction": {"result": True, "txid": TX_ID}})
        client = make_client(recorder)

        response = await client.broadcast({"txID": TX_ID, "signature": ["ff"]})

        assert response["result"] is True
        assert recorder.last_json == {"txID": TX_ID, "signature": ["ff"]}


class TestLookups:
    @pytest.mark.asyncio
    async def test_receipt_from_solidity_node(self) -> None:
        recorder = Recorder({"/walletsolidity/gettransactioninfobyid": {"id": TX_ID}})
        client = make_client(recorder)

        assert await client.get_transaction_receipt(TX_ID) == {"id": TX_ID}
        assert recorder.last_json == {"value": TX_ID}

    @pytest.mark.asyncio
    async def test_events_mapped(self) -> None:
        base58_address = to_base58_address(CONTRACT_HEX)
        raw = [
            {
                "block_number": 12,
                "block_timestamp": 1700000000000,
                "contract_address": base58_address,
                "event_name": "Transfer",
                "transaction_id": TX_ID,
                "result": {"value": "1"},
                "resource_Node": "fullNode",
            }
        ]
        recorder = Recorder({f"/event/contract/{base58_address}/Transfer": raw})
        client = make_client(recorder)

        events = await client.get_events(CONTRACT_HEX, "Transfer")

        assert recorder.requests[-1].method == "GET"
        assert events == [
            {
                "block": 12,
                "timestamp": 1700000000000,
                "contract": base58_address,
                "name": "Transfer",
                "transaction": TX_ID,
                "result": {"value": "1"},
                "resourceNode": "fullNode",
            }
        ]

    @pytest.mark.asyncio
    async def test_events_wrapped_in_data(self) -> None:
        base58_address = to_base58_address(CONTRACT_HEX)
        recorder = Recorder({f"/event/contract/{base58_address}/Transfer": {"data": [{"block_number": 1}]}})
        client = make_client(recorder)

        [event] = await client.get_events(CONTRACT_HEX, "Transfer")

        assert event["block"] == 1

    @pytest.mark.asyncio
    async def test_events_without_server(self) -> None:
        client = make_client(Recorder(), event_server="")

        with pytest.raises(RpcError, match="No event server"):
            await client.get_events(CONTRACT_HEX, "Transfer")


class TestTransportErrors:
    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        client = make_client(Recorder(status_code=503))

        with pytest.raises(RpcError) as exc_info:
            await client.get_transaction_receipt(TX_ID)

        assert exc_info.value.status_code == 503
        assert exc_info.value.code == "RPC_ERROR"

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(refuse)

        with pytest.raises(RpcError, match="connection refused"):
            await client.broadcast({"txID": TX_ID})
