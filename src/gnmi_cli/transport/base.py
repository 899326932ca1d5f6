"""Client handle abstraction for gNMI targets."""
from abc import ABC, abstractmethod
from typing import Optional

from ..messages import (
    GetRequest,
    GetResponse,
    SetRequest,
    SetResponse,
    SubscribeRequest,
    SubscribeResponse,
)


class SubscribeStream(ABC):
    """Bidirectional Subscribe call.

    Use as an async context manager so the call is torn down on every exit
    path, including cancellation.
    """

    @abstractmethod
    async def send(self, request: SubscribeRequest) -> None:
        """Send a request on the stream."""
        pass

    @abstractmethod
    async def recv(self) -> Optional[SubscribeResponse]:
        """Wait for the next response.

        Returns:
            The response, or None once the target closed the stream cleanly

        Raises:
            TransportError: If the call failed
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Cancel the call. Safe to call more than once."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False


class GNMIClient(ABC):
    """Abstract handle to a gNMI target."""

    def __init__(self, target: str):
        self.target = target

    @abstractmethod
    async def get(self, request: GetRequest) -> GetResponse:
        """Issue a Get RPC."""
        pass

    @abstractmethod
    async def set(self, request: SetRequest) -> SetResponse:
        """Issue a Set RPC."""
        pass

    @abstractmethod
    def subscribe(self) -> SubscribeStream:
        """Open a Subscribe stream."""
        pass

    async def close(self) -> None:
        """Release the underlying connection."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
