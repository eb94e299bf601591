#!/usr/bin/env python3
"""
Stream public ticker and trade updates.

Usage:
    uv run examples/stream_ticker.py
    uv run examples/stream_ticker.py 10000001 10000002

Environment:
    EDGEX_WS_URL: WebSocket base URL (optional)
"""

import asyncio
import logging
import sys

from edgex_client import Client, setup_logging


def on_ticker(message: dict):
    content = message.get("content", message)
    print(f"ticker {message.get('channel', '')}: {content}")


def on_trade(message: dict):
    print(f"trade  {message.get('channel', '')}: {message.get('content', message)}")


async def main():
    contract_ids = sys.argv[1:] or ["10000001"]
    setup_logging(logging.INFO)

    async with Client() as client:
        await client.ws.connect_public()
        client.ws.public.add_disconnect_hook(lambda err: print(f"disconnected: {err}"))

        for contract_id in contract_ids:
            await client.ws.subscribe_market_ticker(contract_id, on_ticker)
            await client.ws.subscribe_trade(contract_id, on_trade)

        while True:
            await asyncio.sleep(10)
            print(f"stats: {client.ws.public.get_stats()}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
