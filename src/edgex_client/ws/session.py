"""
Single WebSocket channel session.

One long-lived connection to either the public or the private stream
endpoint. The session owns:
- connection state and the heartbeat task
- the subscription set, which survives disconnects and is replayed on connect
- message dispatch to hooks and per-type handlers

Frames are handled in arrival order on the event loop driving the session.
Handlers run inline, so a slow handler delays every later frame and the
heartbeat.
"""

import asyncio
import json
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

import aiohttp

from .._internal.stats import TimingStats
from ..auth import RequestAuthenticator
from ..errors import AuthConfigurationError, TransportError

logger = logging.getLogger(__name__)


MessageHandler = Callable[[dict], None]
MessageHook = Callable[[str], None]
ConnectHook = Callable[[], None]
DisconnectHook = Callable[[TransportError], None]

# Errors aiohttp raises when writing to a socket that is going away.
_SEND_ERRORS = (aiohttp.ClientError, ConnectionError, RuntimeError)


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


class ChannelSession:
    """
    WebSocket session with subscription replay and typed dispatch.

    Args:
        url: Full WebSocket URL, including the accountId query for private streams.
        private: If True, connect() sends signed auth headers.
        authenticator: Authenticator holding the credential. Required when private.
        http_session: aiohttp session to open the socket with. If None, one is
                      created on first connect and closed by close().
        heartbeat_interval: Seconds between client pings.
        name: Label used in log lines.

    Example:
        >>> session = ChannelSession("wss://quote.edgex.exchange/api/v1/public/ws")
        >>> session.on_message("ticker", print)
        >>> await session.subscribe("ticker.10000001")
        >>> await session.connect()
    """

    HEARTBEAT_INTERVAL = 30.0

    def __init__(
        self,
        url: str,
        private: bool = False,
        authenticator: Optional[RequestAuthenticator] = None,
        http_session: Optional[aiohttp.ClientSession] = None,
        heartbeat_interval: float = HEARTBEAT_INTERVAL,
        name: str | None = None,
    ):
        self.url = url
        self.private = private
        self.heartbeat_interval = heartbeat_interval
        self.name = name or ("private" if private else "public")
        self.state = SessionState.DISCONNECTED

        self._authenticator = authenticator
        self._http = http_session
        self._owns_http = False

        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._heartbeat_task: Optional[asyncio.Task] = None

        # channel -> extra subscribe params; dict keeps replay in subscribe order
        self._subscriptions: dict[str, Optional[dict]] = {}
        self._handlers: dict[str, MessageHandler] = {}
        self._connect_hooks: list[ConnectHook] = []
        self._message_hooks: list[MessageHook] = []
        self._disconnect_hooks: list[DisconnectHook] = []

        self._frames_received = 0
        self._frames_dispatched = 0
        self._raw_bytes = 0
        self._handler_latency = TimingStats()

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    @property
    def subscriptions(self) -> set[str]:
        """Channels currently desired, independent of connection state."""
        return set(self._subscriptions)

    # =========================================================================
    # Registration
    # =========================================================================

    def on_message(self, msg_type: str, handler: MessageHandler):
        """
        Register the handler for one message type.

        One handler per type: registering again replaces the previous handler.
        Handlers receive the decoded frame.
        """
        if msg_type in self._handlers:
            logger.debug("[%s] Replacing handler for %r", self.name, msg_type)
        self._handlers[msg_type] = handler

    def add_connect_hook(self, hook: ConnectHook):
        """Call ``hook()`` after every successful connect, once replay has been sent."""
        self._connect_hooks.append(hook)

    def add_message_hook(self, hook: MessageHook):
        """Call ``hook(raw_text)`` for every non-heartbeat frame."""
        self._message_hooks.append(hook)

    def add_disconnect_hook(self, hook: DisconnectHook):
        """Call ``hook(error)`` when the transport closes or fails."""
        self._disconnect_hooks.append(hook)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _connect_headers(self) -> dict[str, str]:
        if not self.private:
            return {}
        if self._authenticator is None:
            raise AuthConfigurationError(
                "Account ID and STARK private key are required for the private stream"
            )
        return self._authenticator.stream_headers(self.url)

    async def connect(self):
        """
        Open the socket, start the heartbeat and replay subscriptions.

        No-op unless the session is disconnected.

        Raises:
            AuthConfigurationError: Private session without a credential.
            TransportError: The socket could not be opened. Disconnect hooks
                            have already been called with the same error.
        """
        if self.state is not SessionState.DISCONNECTED:
            logger.debug("[%s] connect() ignored in state %s", self.name, self.state.value)
            return

        headers = self._connect_headers()
        self.state = SessionState.CONNECTING

        if self._http is None:
            self._http = aiohttp.ClientSession()
            self._owns_http = True

        logger.info("[%s] Connecting to %s", self.name, self.url)
        try:
            ws = await self._http.ws_connect(self.url, headers=headers)
        except asyncio.CancelledError:
            self.state = SessionState.DISCONNECTED
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self.state = SessionState.DISCONNECTED
            error = TransportError(f"Failed to connect to {self.url}: {e}")
            logger.error("[%s] %s", self.name, error)
            self._notify_disconnect(error)
            raise error from e

        if self.state is not SessionState.CONNECTING:
            # close() ran while the handshake was in flight
            await ws.close()
            return

        self._ws = ws
        self.state = SessionState.OPEN
        logger.info("[%s] Connected", self.name)
        self._heartbeat_task = asyncio.create_task(self._heartbeat(ws))

        try:
            for channel in list(self._subscriptions):
                # unsubscribe() may run while an earlier frame is in flight
                if channel not in self._subscriptions:
                    continue
                await self._send(self._frame("subscribe", channel, self._subscriptions[channel]))
        except TransportError as e:
            await self._handle_disconnect(ws, e)
            raise

        if self._subscriptions:
            logger.info("[%s] Replayed %d subscription(s)", self.name, len(self._subscriptions))

        for hook in list(self._connect_hooks):
            self._invoke(hook)

        self._reader_task = asyncio.create_task(self._read_loop(ws))

    async def close(self):
        """
        Stop the heartbeat and close the socket. Safe to call repeatedly.

        Subscriptions and handlers are kept; disconnect hooks are not called.
        """
        ws, self._ws = self._ws, None
        if ws is not None:
            self.state = SessionState.CLOSING

        current = asyncio.current_task()
        tasks = [
            t for t in (self._heartbeat_task, self._reader_task)
            if t is not None and t is not current
        ]
        self._heartbeat_task = None
        self._reader_task = None
        for task in tasks:
            if not task.done():
                task.cancel()

        try:
            if ws is not None and not ws.closed:
                await ws.close()
        finally:
            await asyncio.gather(*tasks, return_exceptions=True)
            if self._owns_http and self._http is not None:
                await self._http.close()
                self._http = None
                self._owns_http = False
            self.state = SessionState.DISCONNECTED

        if ws is not None:
            logger.info("[%s] Closed", self.name)

    # =========================================================================
    # Subscriptions
    # =========================================================================

    @staticmethod
    def _frame(frame_type: str, channel: str, params: Optional[dict] = None) -> dict:
        frame = {"type": frame_type, "channel": channel}
        if params:
            frame.update(params)
        return frame

    async def subscribe(self, channel: str, params: Optional[dict] = None):
        """
        Add ``channel`` to the subscription set, sending the frame if open.

        Recorded even while disconnected; the next connect() replays it.
        """
        self._subscriptions[channel] = dict(params) if params else None
        if self.state is SessionState.OPEN:
            await self._send(self._frame("subscribe", channel, params))

    async def unsubscribe(self, channel: str):
        """Drop ``channel`` from the subscription set, sending the frame if open."""
        self._subscriptions.pop(channel, None)
        if self.state is SessionState.OPEN:
            await self._send(self._frame("unsubscribe", channel))

    async def _send(self, payload: dict):
        ws = self._ws
        if ws is None:
            raise TransportError(f"Cannot send {payload.get('type')} frame: socket is not open")
        try:
            await ws.send_json(payload)
        except _SEND_ERRORS as e:
            raise TransportError(f"Failed to send {payload.get('type')} frame: {e}") from e
        logger.debug("[%s] SEND %s", self.name, payload)

    # =========================================================================
    # Internal
    # =========================================================================

    def _invoke(self, callback: Callable, *args):
        try:
            callback(*args)
        except Exception:
            logger.exception("[%s] Callback %r raised", self.name, callback)

    def _resolve_handler(self, message: dict) -> Optional[MessageHandler]:
        msg_type = message.get("type")
        handler = self._handlers.get(msg_type) if isinstance(msg_type, str) else None
        if handler is None:
            channel = message.get("channel")
            if isinstance(channel, str):
                handler = self._handlers.get(channel.split(".", 1)[0])
        return handler

    def _handle_message(self, raw: str):
        self._frames_received += 1
        self._raw_bytes += len(raw)

        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("[%s] Failed to decode frame: %.200s", self.name, raw)
            return
        if not isinstance(message, dict):
            logger.warning("[%s] Ignoring non-object frame: %.200s", self.name, raw)
            return

        if message.get("type") == "pong":
            return

        logger.debug("[%s] RECV %.200s", self.name, raw)

        for hook in list(self._message_hooks):
            self._invoke(hook, raw)

        handler = self._resolve_handler(message)
        if handler is None:
            return

        start = time.perf_counter()
        self._invoke(handler, message)
        self._handler_latency.record((time.perf_counter() - start) * 1000)
        self._frames_dispatched += 1

    async def _read_loop(self, ws: aiohttp.ClientWebSocketResponse):
        """Read frames until the socket closes, then run disconnect handling."""
        error: Optional[BaseException] = None
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._handle_message(msg.data)
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    self._handle_message(msg.data.decode("utf-8", errors="replace"))
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = ws.exception()
                    break
        except (aiohttp.ClientError, ConnectionError) as e:
            error = e

        if self._ws is ws:
            await self._handle_disconnect(ws, error)

    async def _heartbeat(self, ws: aiohttp.ClientWebSocketResponse):
        """Send a ping every heartbeat_interval seconds while ``ws`` is current."""
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            if self._ws is not ws:
                return
            try:
                await ws.send_json({"type": "ping"})
            except _SEND_ERRORS as e:
                logger.warning("[%s] Heartbeat send failed: %s", self.name, e)
                return

    def _cancel_heartbeat(self):
        task, self._heartbeat_task = self._heartbeat_task, None
        if task is not None and not task.done():
            task.cancel()

    async def _handle_disconnect(self, ws: aiohttp.ClientWebSocketResponse, error: Optional[BaseException]):
        self._ws = None
        self._reader_task = None
        self.state = SessionState.DISCONNECTED
        self._cancel_heartbeat()

        code = ws.close_code
        try:
            if not ws.closed:
                await ws.close()
        finally:
            reason = str(error) if error is not None else ""
            exc = TransportError(f"Connection closed: {code} {reason}".rstrip(), code=code, reason=reason)
            logger.info("[%s] %s", self.name, exc)
            self._notify_disconnect(exc)

    def _notify_disconnect(self, error: TransportError):
        for hook in list(self._disconnect_hooks):
            self._invoke(hook, error)

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_stats(self) -> dict:
        """Get frame counters and rolling handler latency."""
        return {
            "state": self.state.value,
            "subscriptions": len(self._subscriptions),
            "frames_received": self._frames_received,
            "frames_dispatched": self._frames_dispatched,
            "raw_bytes": self._raw_bytes,
            "handler_latency": str(self._handler_latency),
            "handler_latency_avg_ms": self._handler_latency.avg_ms(),
        }

    def reset_stats(self):
        """Reset statistics counters."""
        self._frames_received = 0
        self._frames_dispatched = 0
        self._raw_bytes = 0
        self._handler_latency.reset()
