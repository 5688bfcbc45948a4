#!/usr/bin/env python3
"""
Check the balance and nonce of an account on an Ethereum node.
"""

import asyncio
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from provider_adapter.config import AdapterConfig, TransportType
from provider_adapter.core.adapter import ProviderAdapter
from provider_adapter.providers import create_provider


async def check_balance(address: str, config: AdapterConfig, block: str = "latest"):
    """Print balance, nonce and chain position for an address."""
    provider = create_provider(config)
    await provider.connect()

    try:
        adapter = ProviderAdapter(provider, config)

        network_id = await adapter.get_network_id()
        head = await adapter.get_block_number()
        balance_wei = await adapter.get_balance(address, block)
        nonce = await adapter.get_transaction_count(address, block)
        code = await adapter.get_code(address, block)

        balance_eth = int(balance_wei) / 10**18

        print(f"\n📬 Address: {address}")
        print(f"   Network: {network_id}")
        print(f"   Head block: {head:,}")
        print(f"\n💰 Balance at {block}:")
        print(f"   {balance_eth:.6f} ETH ({int(balance_wei):,} wei)")
        print(f"   Nonce: {nonce}")

        if code not in (None, "0x"):
            print(f"\n📦 Contract account ({(len(code) - 2) // 2:,} bytes of code)")

        if int(balance_wei) == 0:
            print(f"\n⚠️  No balance found at this address")

        return {
            "address": address,
            "network_id": network_id,
            "block_number": head,
            "balance_wei": balance_wei,
            "nonce": nonce,
        }

    finally:
        await provider.disconnect()


def main():
    parser = argparse.ArgumentParser(description="Check an account balance")
    parser.add_argument("address", help="0x-prefixed account address")
    parser.add_argument(
        "--rpc-url", "-r",
        default="http://localhost:8545",
        help="Node endpoint (default: http://localhost:8545)"
    )
    parser.add_argument(
        "--websocket", "-w",
        action="store_true",
        help="Treat --rpc-url as a WebSocket endpoint"
    )
    parser.add_argument(
        "--block", "-b",
        default="latest",
        help="Block number or tag (default: latest)"
    )

    args = parser.parse_args()
    if args.websocket:
        config = AdapterConfig(transport=TransportType.WEBSOCKET, ws_url=args.rpc_url)
    else:
        config = AdapterConfig(transport=TransportType.HTTP, rpc_url=args.rpc_url)
    asyncio.run(check_balance(args.address, config, args.block))


if __name__ == "__main__":
    main()
