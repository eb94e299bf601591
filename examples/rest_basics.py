#!/usr/bin/env python3
"""
Public and private REST calls.

Usage:
    uv run examples/rest_basics.py

Environment:
    EDGEX_BASE_URL: REST base URL (optional, e.g. https://testnet.edgex.exchange)
    EDGEX_ACCOUNT_ID / EDGEX_STARK_PRIVATE_KEY: enable the private calls
"""

import asyncio

from edgex_client import Client, DomainError


async def main():
    async with Client() as client:
        server_time = await client.metadata.get_server_time()
        print(f"Server time: {server_time['data']}")

        contracts = await client.metadata.get_contracts()
        print(f"{len(contracts)} contracts listed")
        if contracts:
            contract_id = contracts[0]["contractId"]
            ticker = await client.quote.get_ticker(contract_id)
            print(f"Ticker {contract_id}: {ticker['data']}")

        if client.credential is None:
            print("No credential configured, skipping private calls")
            return

        try:
            positions = await client.account.get_positions()
            print(f"Positions: {positions['data']}")
        except DomainError as e:
            print(f"Positions request rejected: code={e.code} message={e.message}")


if __name__ == "__main__":
    asyncio.run(main())
