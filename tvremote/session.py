from __future__ import annotations
import asyncio
from contextlib import suppress
from typing import Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ssap.log import get_logger
from ssap.message import Message, MessageError
from ssap.types import INBOUND_MESSAGES, MessageType
from tvremote.commands import Dispatcher
from tvremote.credentials import CredentialStore
from tvremote.errors import DeviceError, RemoteError, TransportError
from tvremote.pairing import build_register, is_pairing_prompt, rotated_key
from tvremote.router import Outcome, ResponseRouter

logger = get_logger(__name__)

# Upper bound for the close handshake, both on interrupt and at exit
CLOSE_GRACE_PERIOD = 1.0

# listApps replies include icon metadata for every installed app
MAX_MESSAGE_SIZE = 16 * 1024 * 1024


class RemoteSession:
    """
    One SSAP connection running exactly one command.

    Connecting -> Handshaking -> Ready -> (AppResolving) -> Acting/Reading -> Done
    """

    def __init__(
        self,
        url: str,
        store: CredentialStore,
        dispatcher: Dispatcher,
        *,
        proxy: Optional[str] = None,
        close_timeout: float = CLOSE_GRACE_PERIOD,
    ) -> None:
        self.url = url
        self.store = store
        self.dispatcher = dispatcher
        self.proxy = proxy
        self.close_timeout = close_timeout
        self.router = ResponseRouter(dispatcher)
        self.websocket: Optional[websockets.ClientConnection] = None
        self.ready = False

        # initialize-key always pairs from scratch
        self.client_key = "" if dispatcher.initialize_key else store.load()

    async def connect(self) -> None:
        """Open the WebSocket, through the SOCKS5 proxy when one is configured"""
        logger.info("Connecting to %s", self.url)
        if self.proxy:
            logger.info("Using SOCKS5 proxy: %s", self.proxy)
        try:
            self.websocket = await websockets.connect(
                self.url,
                proxy=f"socks5h://{self.proxy}" if self.proxy else None,
                max_size=MAX_MESSAGE_SIZE,
                ping_interval=15,
                ping_timeout=45,
            )
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            raise TransportError(f"dial: {e}") from e

    async def send(self, message: Message) -> None:
        assert self.websocket is not None
        logger.debug("Sending %s", message.uri or message.type, extra={"msg_id": message.id})
        try:
            await self.websocket.send(message.to_json())
        except ConnectionClosed as e:
            raise TransportError(f"write {message.type}: {e}") from e

    async def handshake(self) -> None:
        await self.send(build_register(self.client_key))

    async def recv_loop(self) -> Outcome:
        """Read until a message produces an outcome; fatal conditions raise."""
        assert self.websocket is not None
        try:
            async for raw in self.websocket:
                if isinstance(raw, bytes):
                    raw = raw.decode('utf-8', errors='replace')
                try:
                    message = Message.from_json(raw)
                except MessageError as e:
                    logger.debug("Skipping unparsable frame: %s", e)
                    continue
                outcome = await self.handle(message)
                if outcome is not None:
                    return outcome
        except ConnectionClosed as e:
            raise TransportError(f"read: {e}") from e
        raise TransportError("read: connection closed before the command completed")

    async def handle(self, message: Message) -> Optional[Outcome]:
        if not MessageType.is_valid(message.type) or MessageType(message.type) not in INBOUND_MESSAGES:
            logger.debug("Ignoring %s message", message.type, extra={"msg_id": message.id})
            return None

        if message.is_type(MessageType.REGISTERED):
            return await self._on_registered(message)

        if message.is_type(MessageType.ERROR):
            logger.error(
                "Error: %s",
                message.error,
                extra={"msg_id": message.id, "msg_type": message.type},
            )
            raise DeviceError(message.error or "", message.payload)

        # Only responses are left
        if is_pairing_prompt(message):
            logger.info("Please accept the pairing prompt on the TV")
            return None
        route = self.router.route(message)
        if route.send is not None:
            await self.send(route.send)
        return route.outcome

    async def _on_registered(self, message: Message) -> Optional[Outcome]:
        if self.ready:
            logger.warning("Ignoring repeated registration acknowledgment")
            return None
        self.ready = True
        logger.info("Registered successfully!")

        new_key = rotated_key(message, self.client_key)
        if new_key is not None:
            self.client_key = new_key
            logger.info("New client key received, saving to %s", self.store.path)
            try:
                self.store.save(new_key)
            except OSError as e:
                logger.warning("Could not save client key: %s", e)

        dispatch = self.dispatcher.initial()
        if dispatch.request is None:
            logger.info("Key initialized and saved to file.")
            return Outcome(0)

        self.router.pending = dispatch.pending
        await self.send(dispatch.request)
        return None

    async def close(self) -> None:
        """Send a normal close frame; gives up after close_timeout."""
        if self.websocket is None:
            return
        try:
            await asyncio.wait_for(self.websocket.close(code=1000), timeout=self.close_timeout)
        except asyncio.TimeoutError:
            logger.debug("Close handshake did not finish within %.1fs", self.close_timeout)

    async def serve(self, interrupted: Optional[asyncio.Event] = None) -> Outcome:
        """
        Run the handshake and the reader on an open connection.

        When interrupted is set first, the connection is closed within the
        grace period and the run ends cleanly.
        """
        reader = asyncio.create_task(self.recv_loop())
        try:
            await self.handshake()
        except BaseException:
            reader.cancel()
            with suppress(asyncio.CancelledError, RemoteError):
                await reader
            raise

        if interrupted is None:
            return await reader

        waiter = asyncio.create_task(interrupted.wait())
        done, _ = await asyncio.wait({reader, waiter}, return_when=asyncio.FIRST_COMPLETED)
        if reader in done:
            waiter.cancel()
            return reader.result()

        logger.warning("Interrupted, closing connection")
        await self.close()
        reader.cancel()
        with suppress(asyncio.CancelledError, RemoteError):
            await reader
        return Outcome(0)

    async def run(self, interrupted: Optional[asyncio.Event] = None) -> Outcome:
        await self.connect()
        try:
            return await self.serve(interrupted)
        finally:
            await self.close()
