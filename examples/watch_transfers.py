#!/usr/bin/env python3
"""
Example: Watch Transfer events

Prints every new Transfer event of a token for one minute.

Run with:
    python examples/watch_transfers.py
"""

import asyncio
import os

from chainmethod import Contract, HttpChainClient, Network

TOKEN_ADDRESS = os.environ.get("TOKEN_ADDRESS", "TXYZopYRdj2D9XRtbG411XZZ3kM5VkAeBf")

TRANSFER_EVENT = {
    "name": "Transfer",
    "type": "event",
    "inputs": [
        {"name": "from", "type": "address", "indexed": True},
        {"name": "to", "type": "address", "indexed": True},
        {"name": "value", "type": "uint256"},
    ],
}


def on_event(error, event) -> None:
    if error is not None:
        print(f"Error: {error}")
        return
    result = event["result"]
    print(f"[block {event['block']}] {result['from']} -> {result['to']}: {result['value']}")


async def main() -> None:
    async with HttpChainClient(network=Network.NILE) as client:
        token = Contract(client, abi=[TRANSFER_EVENT]).at(TOKEN_ADDRESS)

        watch = await token.methods.Transfer.watch(on_event)
        if watch is None:
            return

        try:
            await asyncio.sleep(60)
        finally:
            watch.stop()
            await watch.wait_stopped()


if __name__ == "__main__":
    asyncio.run(main())
