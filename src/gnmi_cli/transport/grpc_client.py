"""gRPC transport for gNMI targets.

Uses grpcio's asyncio API with the gNMI stubs generated in pygnmi. Channel
setup is retried; each RPC is issued exactly once and gRPC failures are
re-raised as TransportError.

This handler supports:
- Plaintext or TLS channels (server CA, optional client certificate)
- Username/password sent as per-call metadata
- Get, Set and bidirectional Subscribe
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import grpc
from pygnmi.spec.v080.gnmi_pb2_grpc import gNMIStub

from ..config import ClientConfig
from ..errors import TransportError, ValidationError
from ..messages import (
    GetRequest,
    GetResponse,
    SetRequest,
    SetResponse,
    SubscribeRequest,
    SubscribeResponse,
)
from ..utils.connection import with_retry
from ..utils.logging_config import timed_section
from .base import GNMIClient, SubscribeStream
from .convert import (
    from_proto_get_response,
    from_proto_set_response,
    from_proto_subscribe_response,
    to_proto_get_request,
    to_proto_set_request,
    to_proto_subscribe_request,
)

logger = logging.getLogger(__name__)


def _rpc_error(rpc: str, e: grpc.aio.AioRpcError) -> TransportError:
    code = e.code()
    status = code.name if code is not None else "UNKNOWN"
    message = f"{rpc} failed: {status}"
    if e.details():
        message += f": {e.details()}"
    return TransportError(message, status=status)


def _read_file(path: Optional[str]) -> Optional[bytes]:
    if not path:
        return None
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ValidationError(f"cannot read {path}: {e}", details={"file": path})


def channel_credentials(config: ClientConfig) -> grpc.ChannelCredentials:
    """TLS credentials from the configured CA and client certificate."""
    return grpc.ssl_channel_credentials(
        root_certificates=_read_file(config.cafile),
        private_key=_read_file(config.keyfile),
        certificate_chain=_read_file(config.certfile),
    )


class GrpcSubscribeStream(SubscribeStream):
    """Subscribe call on a grpc.aio channel."""

    def __init__(self, call: grpc.aio.StreamStreamCall):
        self._call = call

    async def send(self, request: SubscribeRequest) -> None:
        try:
            await self._call.write(to_proto_subscribe_request(request))
        except grpc.aio.AioRpcError as e:
            raise _rpc_error("Subscribe", e) from e

    async def recv(self) -> Optional[SubscribeResponse]:
        try:
            msg = await self._call.read()
        except grpc.aio.AioRpcError as e:
            raise _rpc_error("Subscribe", e) from e
        if msg is grpc.aio.EOF:
            return None
        return from_proto_subscribe_response(msg)

    async def close(self) -> None:
        if not self._call.done():
            self._call.cancel()
            logger.debug("Subscribe call cancelled")


class GrpcClient(GNMIClient):
    """gNMI client over a grpc.aio channel."""

    def __init__(self, config: ClientConfig, channel: grpc.aio.Channel):
        super().__init__(config.target)
        self.config = config
        self._channel = channel
        self._stub = gNMIStub(channel)
        self._metadata = tuple(config.metadata()) or None

    @classmethod
    async def dial(cls, config: ClientConfig) -> "GrpcClient":
        """Open a channel to the configured target and wait until it is ready.

        Raises:
            ValidationError: On bad flag combinations or unreadable cert files
            TransportError: If the channel never became ready
        """
        config.validate()
        if config.use_tls:
            channel = grpc.aio.secure_channel(
                config.target, channel_credentials(config)
            )
        else:
            channel = grpc.aio.insecure_channel(config.target)

        client = cls(config, channel)
        try:
            await client._wait_ready()
        except BaseException:
            await channel.close()
            raise
        return client

    async def _wait_ready(self) -> None:
        @with_retry(
            max_attempts=self.config.dial_retries,
            min_wait=0.5,
            max_wait=5,
        )
        async def _ready():
            logger.debug(f"Waiting for channel to {self.target}")
            await asyncio.wait_for(
                self._channel.channel_ready(), timeout=self.config.timeout
            )

        async with timed_section("dial", target=self.target, tls=self.config.use_tls):
            try:
                await _ready()
            except asyncio.TimeoutError:
                raise TransportError(
                    f"could not connect to {self.target}", status="UNAVAILABLE"
                )
        logger.info(f"Connected to {self.target}")

    async def get(self, request: GetRequest) -> GetResponse:
        try:
            resp = await self._stub.Get(
                to_proto_get_request(request), metadata=self._metadata
            )
        except grpc.aio.AioRpcError as e:
            raise _rpc_error("Get", e) from e
        return from_proto_get_response(resp)

    async def set(self, request: SetRequest) -> SetResponse:
        try:
            resp = await self._stub.Set(
                to_proto_set_request(request), metadata=self._metadata
            )
        except grpc.aio.AioRpcError as e:
            raise _rpc_error("Set", e) from e
        return from_proto_set_response(resp)

    def subscribe(self) -> GrpcSubscribeStream:
        return GrpcSubscribeStream(self._stub.Subscribe(metadata=self._metadata))

    async def close(self) -> None:
        await self._channel.close()
        logger.debug(f"Channel to {self.target} closed")


async def dial(config: ClientConfig) -> GrpcClient:
    """Connect to the target described by config."""
    return await GrpcClient.dial(config)
