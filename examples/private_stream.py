#!/usr/bin/env python3
"""
Stream account, position and order events, reconnecting on drops.

The session keeps its subscriptions across disconnects, so reconnecting is
a single connect() call.

Usage:
    uv run examples/private_stream.py

Environment:
    EDGEX_ACCOUNT_ID: Your edgeX account ID
    EDGEX_STARK_PRIVATE_KEY: Your STARK private key (hex)
"""

import asyncio

from edgex_client import Client, TransportError, setup_logging


async def main():
    setup_logging()
    disconnected = asyncio.Event()

    async with Client() as client:
        await client.ws.connect_private()
        session = client.ws.private
        session.add_disconnect_hook(lambda err: disconnected.set())

        await client.ws.subscribe_account(lambda msg: print(f"account:  {msg}"))
        await client.ws.subscribe_position(lambda msg: print(f"position: {msg}"))
        await client.ws.subscribe_order(lambda msg: print(f"order:    {msg}"))

        retries = 0
        while True:
            await disconnected.wait()
            disconnected.clear()
            while True:
                retries += 1
                wait_time = min(2 ** retries, 30)  # exponential backoff, max 30s
                print(f"Reconnecting in {wait_time}s (attempt {retries})...")
                await asyncio.sleep(wait_time)
                try:
                    await session.connect()
                    # failed attempts above also fired the hook
                    disconnected.clear()
                    retries = 0
                    break
                except TransportError as e:
                    print(f"Reconnect failed: {e}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
