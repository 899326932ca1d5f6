"""Executors driving one Get, Set or Subscribe exchange against a target.

Each exchange is attempted once. Transport failures come back as
TransportError from the client; errors the target reports inside a
response are raised as ProtocolError.
"""
import logging
import sys
from contextlib import aclosing
from enum import Enum
from typing import AsyncIterator, Optional, TextIO

from ..errors import ProtocolError
from ..messages import (
    CODE_OK,
    GetRequest,
    Notification,
    SetRequest,
    SubscribeRequest,
)
from ..paths import str_path
from ..transport.base import GNMIClient, SubscribeStream
from ..utils.logging_config import timed
from .builder import Request, build_request
from .decoder import str_val
from .schema import ParsedCommand

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of a subscription."""
    OPENED = "opened"        # Stream open, nothing sent yet
    SYNCING = "syncing"      # Request sent, waiting for sync_response
    STREAMING = "streaming"  # Initial sync done, live updates
    CLOSED = "closed"


class SubscriptionSession:
    """Receive loop over one open Subscribe stream."""

    def __init__(self, stream: SubscribeStream):
        self.stream = stream
        self.state = SessionState.OPENED

    async def start(self, request: SubscribeRequest) -> None:
        await self.stream.send(request)
        self.state = SessionState.SYNCING
        logger.debug("Subscription sent, waiting for initial sync")

    async def notifications(self) -> AsyncIterator[Notification]:
        """Yield each update notification as it arrives.

        Updates received before the sync response are yielded too; the
        target sends the initial snapshot that way.

        Raises:
            ProtocolError: On an error response or a failed initial sync
            TransportError: If the stream breaks
        """
        try:
            while True:
                response = await self.stream.recv()
                if response is None:
                    logger.debug("Subscription stream ended")
                    return
                if response.error is not None:
                    raise ProtocolError(
                        response.error.message,
                        details={"code": response.error.code},
                    )
                if response.sync_response is not None:
                    if not response.sync_response:
                        raise ProtocolError("initial sync failed")
                    self.state = SessionState.STREAMING
                    logger.debug("Initial sync complete")
                    continue
                if response.update is not None:
                    yield response.update
        finally:
            self.state = SessionState.CLOSED


class CommandExecutor:
    """Run parsed commands against a gNMI client and print the results."""

    def __init__(self, client: GNMIClient, out: Optional[TextIO] = None):
        self.client = client
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    async def run(self, command: ParsedCommand) -> None:
        """Build the request for a parsed command and execute it."""
        await self.execute(build_request(command))

    async def execute(self, request: Request) -> None:
        """Dispatch an already built request to its executor."""
        if isinstance(request, GetRequest):
            await self.get(request)
        elif isinstance(request, SubscribeRequest):
            await self.subscribe(request)
        else:
            await self.set(request)

    @timed("get")
    async def get(self, req: GetRequest) -> None:
        """Issue the Get and print each update as ``path:`` then value."""
        resp = await self.client.get(req)
        for notif in resp.notification:
            for update in notif.update:
                print(f"{str_path(update.path)}:", file=self.out)
                print(str_val(update), file=self.out)

    @timed("set")
    async def set(self, req: SetRequest) -> None:
        """Apply the queued operations in a single Set."""
        logger.info(
            f"Set: {req.total_operations} operations ({len(req.delete)} delete, "
            f"{len(req.replace)} replace, {len(req.update)} update)"
        )
        resp = await self.client.set(req)
        if resp.message is not None and resp.message.code != CODE_OK:
            raise ProtocolError(
                resp.message.message, details={"code": resp.message.code}
            )
        # TODO: report per-path failures from resp.response once targets
        # populate UpdateResult with error detail

    async def iter_subscription(
        self, req: SubscribeRequest
    ) -> AsyncIterator[list[tuple[str, str]]]:
        """Lazily yield decoded ``(path, value)`` batches from a subscription.

        The stream is closed however iteration ends: exhausted, error,
        cancellation or the consumer closing the generator.
        """
        async with self.client.subscribe() as stream:
            session = SubscriptionSession(stream)
            await session.start(req)
            async for notif in session.notifications():
                yield [(str_path(u.path), str_val(u)) for u in notif.update]

    @timed("subscribe")
    async def subscribe(self, req: SubscribeRequest) -> None:
        """Print ``path = value`` for every streamed update until the end."""
        async with aclosing(self.iter_subscription(req)) as batches:
            async for batch in batches:
                for path, value in batch:
                    print(f"{path} = {value}", file=self.out, flush=True)
