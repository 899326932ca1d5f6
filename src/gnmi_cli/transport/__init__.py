"""Transports carrying gNMI RPCs to a target.

The gRPC implementation lives in ``gnmi_cli.transport.grpc_client`` and is
imported on demand, so the operation processor can be used with any
GNMIClient without pulling in grpcio.
"""
from .base import GNMIClient, SubscribeStream

__all__ = [
    "GNMIClient",
    "SubscribeStream",
]
