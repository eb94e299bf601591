"""
Stream manager: at most one public and one private ChannelSession.

Sessions are created by connect_public() / connect_private(). Topic
subscribe methods register the topic's handler on the matching session and
subscribe to the topic's channel.

Channel grammar:
    ticker.<contractId>
    kline.<priceType>.<contractId>.<interval>
    depth.<contractId>
    trade.<contractId>
    account | position | order
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..auth import RequestAuthenticator
from ..errors import NotConnectedError
from .session import ChannelSession, MessageHandler

logger = logging.getLogger(__name__)


PUBLIC_WS_PATH = "/api/v1/public/ws"
PRIVATE_WS_PATH = "/api/v1/private/ws"


def ticker_channel(contract_id: str) -> str:
    return f"ticker.{contract_id}"


def kline_channel(contract_id: str, interval: str, price_type: str = "LAST_PRICE") -> str:
    return f"kline.{price_type}.{contract_id}.{interval}"


def depth_channel(contract_id: str) -> str:
    return f"depth.{contract_id}"


def trade_channel(contract_id: str) -> str:
    return f"trade.{contract_id}"


class StreamManager:
    """
    Owns the public and private stream sessions.

    Args:
        ws_url: WebSocket base URL, e.g. "wss://quote.edgex.exchange".
        authenticator: Authenticator for the private stream. May hold no
                       credential; connect_private() then fails.
        http_session: Optional aiohttp session shared by both sessions.
        heartbeat_interval: Seconds between client pings on each session.

    Example:
        >>> await manager.connect_public()
        >>> await manager.subscribe_market_ticker("10000001", on_ticker)
    """

    def __init__(
        self,
        ws_url: str,
        authenticator: Optional[RequestAuthenticator] = None,
        http_session: Optional[aiohttp.ClientSession] = None,
        heartbeat_interval: float = ChannelSession.HEARTBEAT_INTERVAL,
    ):
        self.ws_url = ws_url.rstrip("/")
        self.authenticator = authenticator or RequestAuthenticator()
        self.heartbeat_interval = heartbeat_interval
        self._http = http_session

        self.public: Optional[ChannelSession] = None
        self.private: Optional[ChannelSession] = None

    @property
    def public_url(self) -> str:
        return f"{self.ws_url}{PUBLIC_WS_PATH}"

    @property
    def private_url(self) -> str:
        credential = self.authenticator.credential
        account_id = credential.account_id if credential is not None else ""
        return f"{self.ws_url}{PRIVATE_WS_PATH}?accountId={account_id}"

    async def connect_public(self):
        """Create and connect the public session. No-op if it already exists."""
        if self.public is not None:
            return
        session = ChannelSession(
            self.public_url,
            http_session=self._http,
            heartbeat_interval=self.heartbeat_interval,
            name="public",
        )
        self.public = session
        try:
            await session.connect()
        except BaseException:
            self.public = None
            await session.close()
            raise

    async def connect_private(self):
        """
        Create and connect the authenticated private session. No-op if it
        already exists.

        Raises:
            AuthConfigurationError: No credential configured.
        """
        if self.private is not None:
            return
        session = ChannelSession(
            self.private_url,
            private=True,
            authenticator=self.authenticator,
            http_session=self._http,
            heartbeat_interval=self.heartbeat_interval,
            name="private",
        )
        self.private = session
        try:
            await session.connect()
        except BaseException:
            self.private = None
            await session.close()
            raise

    def _require_public(self) -> ChannelSession:
        if self.public is None:
            raise NotConnectedError(
                "Public WebSocket connection not established; call connect_public() first"
            )
        return self.public

    def _require_private(self) -> ChannelSession:
        if self.private is None:
            raise NotConnectedError(
                "Private WebSocket connection not established; call connect_private() first"
            )
        return self.private

    async def _subscribe(self, session: ChannelSession, msg_type: str, channel: str, handler: MessageHandler):
        session.on_message(msg_type, handler)
        await session.subscribe(channel)
        logger.debug("Subscribed %s to %s", session.name, channel)

    # =========================================================================
    # Public topics
    # =========================================================================

    async def subscribe_market_ticker(self, contract_id: str, handler: MessageHandler):
        """Subscribe to ticker updates for one contract."""
        session = self._require_public()
        await self._subscribe(session, "ticker", ticker_channel(contract_id), handler)

    async def subscribe_kline(
        self,
        contract_id: str,
        interval: str,
        handler: MessageHandler,
        price_type: str = "LAST_PRICE",
    ):
        """Subscribe to candlesticks, e.g. interval "MINUTE_1" or "1m"."""
        session = self._require_public()
        await self._subscribe(session, "kline", kline_channel(contract_id, interval, price_type), handler)

    async def subscribe_depth(self, contract_id: str, handler: MessageHandler):
        """Subscribe to order book depth updates for one contract."""
        session = self._require_public()
        await self._subscribe(session, "depth", depth_channel(contract_id), handler)

    async def subscribe_trade(self, contract_id: str, handler: MessageHandler):
        """Subscribe to public trades for one contract."""
        session = self._require_public()
        await self._subscribe(session, "trade", trade_channel(contract_id), handler)

    # =========================================================================
    # Private topics
    # =========================================================================

    async def subscribe_account(self, handler: MessageHandler):
        session = self._require_private()
        await self._subscribe(session, "account", "account", handler)

    async def subscribe_position(self, handler: MessageHandler):
        session = self._require_private()
        await self._subscribe(session, "position", "position", handler)

    async def subscribe_order(self, handler: MessageHandler):
        session = self._require_private()
        await self._subscribe(session, "order", "order", handler)

    async def unsubscribe(self, channel: str):
        """
        Unsubscribe ``channel`` on whichever session holds it.

        Raises:
            NotConnectedError: No connected session holds the channel.
        """
        for session in (self.public, self.private):
            if session is not None and channel in session.subscriptions:
                await session.unsubscribe(channel)
                return
        raise NotConnectedError(f"No connected session is subscribed to {channel!r}")

    async def close(self):
        """Close and discard both sessions. Later connects start from empty sessions."""
        sessions = [s for s in (self.public, self.private) if s is not None]
        self.public = None
        self.private = None
        # Close every session even if one of them fails
        results = await asyncio.gather(*(s.close() for s in sessions), return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                raise result
