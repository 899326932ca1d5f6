"""Build gNMI request messages from parsed command intent."""
import logging
from pathlib import Path as FilePath
from typing import Callable, Union

from ..errors import ValidationError
from ..messages import (
    GetRequest,
    Path,
    SetRequest,
    SubscribeRequest,
    Subscription,
    SubscriptionList,
    SubscriptionListMode,
    TypedValue,
    Update,
)
from ..paths import parse_elements
from .schema import CommandType, Operation, OpType, ParsedCommand

logger = logging.getLogger(__name__)


def extract_json(val: str) -> bytes:
    """Payload for an update/replace value token.

    The token may name a file holding the JSON, or be the JSON itself. A
    readable file wins; anything else is taken literally.
    """
    try:
        data = FilePath(val).read_bytes()
    except (OSError, ValueError):
        return val.encode()
    logger.debug(f"Read {len(data)} bytes of JSON from {val}")
    return data


def new_path(elements: list[str]) -> Path:
    """Path carrying both the legacy flat list and the structured elements.

    Raises:
        PathParseError: If an element is malformed
    """
    return Path(element=list(elements), elem=parse_elements(elements))


def _new_paths(paths: list[list[str]]) -> list[Path]:
    if not paths:
        raise ValidationError("no paths given")
    result = []
    for p in paths:
        if not p:
            raise ValidationError("empty path")
        result.append(new_path(p))
    return result


def new_get_request(paths: list[list[str]]) -> GetRequest:
    """GetRequest for one or more split paths.

    Raises:
        ValidationError: If there are no paths, a path is empty, or an
            element does not parse
    """
    return GetRequest(path=_new_paths(paths))


def new_subscribe_request(
    paths: list[list[str]],
    mode: SubscriptionListMode = SubscriptionListMode.STREAM,
) -> SubscribeRequest:
    """SubscribeRequest with one subscription per split path.

    Raises:
        ValidationError: Same conditions as new_get_request
    """
    subscriptions = [Subscription(path=p) for p in _new_paths(paths)]
    return SubscribeRequest(
        subscribe=SubscriptionList(subscription=subscriptions, mode=mode)
    )


def new_set_request(
    operations: list[Operation],
    read_value: Callable[[str], bytes] = extract_json,
) -> SetRequest:
    """Aggregate queued operations into one SetRequest.

    Each of the delete/update/replace lists keeps the order its operations
    were given in.
    """
    req = SetRequest()
    for op in operations:
        p = new_path(op.path)
        if op.op_type == OpType.DELETE:
            req.delete.append(p)
            continue
        update = Update(path=p, val=TypedValue.json_ietf(read_value(op.value)))
        if op.op_type == OpType.UPDATE:
            req.update.append(update)
        else:
            req.replace.append(update)
    return req


Request = Union[GetRequest, SetRequest, SubscribeRequest]


def build_request(
    command: ParsedCommand,
    read_value: Callable[[str], bytes] = extract_json,
) -> Request:
    """The one request a parsed command sends.

    Runs every local check (path syntax, empty paths, JSON payloads) so
    nothing needs to reach the target to report a malformed command.

    Raises:
        ValidationError: If a path is empty or does not parse
    """
    if command.command == CommandType.GET:
        return new_get_request(command.paths)
    if command.command == CommandType.SUBSCRIBE:
        return new_subscribe_request(command.paths)
    return new_set_request(command.operations, read_value=read_value)
