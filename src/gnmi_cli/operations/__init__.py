"""Operation processor: command tokens in, gNMI exchanges and text out.

Usage:
    from gnmi_cli.operations import CommandExecutor, build_request, parse_operations

    command = parse_operations(["get", "/interfaces/interface[name=eth0]"])
    request = build_request(command)  # local validation, no network
    await CommandExecutor(client).execute(request)
"""

from .schema import CommandType, Operation, OpType, ParsedCommand
from .parser import OperationParser, parse_operations
from .builder import (
    Request,
    build_request,
    extract_json,
    new_get_request,
    new_path,
    new_set_request,
    new_subscribe_request,
)
from .decoder import str_decimal64, str_typed_value, str_val
from .executor import CommandExecutor, SessionState, SubscriptionSession

__all__ = [
    # Schema classes
    "CommandType",
    "Operation",
    "OpType",
    "ParsedCommand",
    # Parser
    "OperationParser",
    "parse_operations",
    # Builders
    "Request",
    "build_request",
    "extract_json",
    "new_get_request",
    "new_path",
    "new_set_request",
    "new_subscribe_request",
    # Decoder
    "str_decimal64",
    "str_typed_value",
    "str_val",
    # Executors
    "CommandExecutor",
    "SessionState",
    "SubscriptionSession",
]
