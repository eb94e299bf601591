"""
Real-time streams: ticker, k-line, depth and trade on the public
endpoint; account, position and order events on the private endpoint.
"""

from .manager import (
    PRIVATE_WS_PATH,
    PUBLIC_WS_PATH,
    StreamManager,
    depth_channel,
    kline_channel,
    ticker_channel,
    trade_channel,
)
from .session import ChannelSession, SessionState

__all__ = [
    "StreamManager",
    "ChannelSession",
    "SessionState",
    "PUBLIC_WS_PATH",
    "PRIVATE_WS_PATH",
    "ticker_channel",
    "kline_channel",
    "depth_channel",
    "trade_channel",
]
