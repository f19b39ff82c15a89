#!/usr/bin/env python3
"""
Example: Read and transfer a TRC20 token

Reads a holder's balance with call() and, when a private key is set,
transfers one base unit with send() and waits for the receipt.

Run with:
    PRIVATE_KEY=0x... python examples/token_balance.py
"""

import asyncio
import os

from chainmethod import ChainMethodError, Contract, HttpChainClient, Network
from chainmethod.utils import configure_logging

TOKEN_ADDRESS = os.environ.get("TOKEN_ADDRESS", "TXYZopYRdj2D9XRtbG411XZZ3kM5VkAeBf")  # USDT on Nile
HOLDER_ADDRESS = os.environ.get("HOLDER_ADDRESS", TOKEN_ADDRESS)

TRC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "inputs": [{"name": "who", "type": "address"}],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "name": "transfer",
        "type": "function",
        "inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint256"}],
        "outputs": [{"type": "bool"}],
        "stateMutability": "nonpayable",
    },
]


async def main() -> None:
    configure_logging("INFO")

    async with HttpChainClient(network=Network.NILE, private_key=os.environ.get("PRIVATE_KEY")) as client:
        token = Contract(client, abi=TRC20_ABI).at(TOKEN_ADDRESS)

        balance = await token.methods.balanceOf(HOLDER_ADDRESS).call()
        print(f"Balance of {HOLDER_ADDRESS}: {balance}")

        if client.default_private_key is None:
            print("PRIVATE_KEY not set, skipping transfer")
            return

        try:
            ok = await token.methods.transfer(HOLDER_ADDRESS, 1).send({"feeLimit": 50_000_000})
            print(f"Transfer result: {ok}")
        except ChainMethodError as e:
            print(f"Transfer failed: {e}")
            print(e.to_dict())


if __name__ == "__main__":
    asyncio.run(main())
