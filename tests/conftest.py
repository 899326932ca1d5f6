"""Shared fixtures: an in-memory gNMI client standing in for a target."""
import asyncio
from typing import Optional

import pytest

from gnmi_cli.messages import (
    GetResponse,
    SetResponse,
    SubscribeResponse,
)
from gnmi_cli.transport.base import GNMIClient, SubscribeStream


class FakeStream(SubscribeStream):
    """Replays canned responses; an Exception in the list is raised."""

    def __init__(self, responses: list, block_at_end: bool = False):
        self.responses = list(responses)
        self.block_at_end = block_at_end
        self.sent = []
        self.closed = False

    async def send(self, request) -> None:
        self.sent.append(request)

    async def recv(self) -> Optional[SubscribeResponse]:
        if not self.responses:
            if self.block_at_end:
                await asyncio.Event().wait()
            return None
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


class FakeClient(GNMIClient):
    """Records requests and returns preset responses."""

    def __init__(
        self,
        get_response: Optional[GetResponse] = None,
        set_response: Optional[SetResponse] = None,
        stream: Optional[FakeStream] = None,
        error: Optional[Exception] = None,
    ):
        super().__init__("fake-target:6030")
        self.get_response = get_response or GetResponse()
        self.set_response = set_response or SetResponse()
        self.stream = stream or FakeStream([])
        self.error = error
        self.requests = []
        self.closed = False

    async def get(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.get_response

    async def set(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.set_response

    def subscribe(self):
        return self.stream

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeClient()
