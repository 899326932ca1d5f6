"""gNMI wire message model.

Plain dataclasses mirroring the gNMI protobuf messages the client sends and
receives. The transport layer converts them to and from protobuf; everything
above it (builders, decoder, executors) only sees these types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# gRPC status code for success, as carried in Error.code
CODE_OK = 0


class ValueKind(str, Enum):
    """Populated variant of a TypedValue."""
    UNSET = "unset"
    STRING = "string_val"
    INT = "int_val"
    UINT = "uint_val"
    BOOL = "bool_val"
    BYTES = "bytes_val"
    FLOAT = "float_val"
    DOUBLE = "double_val"
    DECIMAL = "decimal_val"
    LEAFLIST = "leaflist_val"
    ANY = "any_val"
    JSON = "json_val"
    JSON_IETF = "json_ietf_val"
    ASCII = "ascii_val"
    PROTO_BYTES = "proto_bytes"


class SubscriptionListMode(str, Enum):
    """How long a subscription lives."""
    STREAM = "stream"  # Long-lived, updates pushed as they happen
    ONCE = "once"      # Single snapshot, then stream ends
    POLL = "poll"      # Snapshot on each poll request


class SubscriptionMode(str, Enum):
    """Per-path trigger for streamed updates."""
    TARGET_DEFINED = "target_defined"
    ON_CHANGE = "on_change"
    SAMPLE = "sample"


# --- Paths ---

@dataclass
class PathElem:
    """One structured path element, e.g. interface[name=eth0]."""
    name: str
    key: dict[str, str] = field(default_factory=dict)


@dataclass
class Path:
    """Path to a node in the data tree.

    `element` is the flat pre-0.4 encoding, `elem` the structured one.
    Requests built by this client always populate both.
    """
    element: list[str] = field(default_factory=list)
    elem: list[PathElem] = field(default_factory=list)
    origin: str = ""
    target: str = ""


# --- Values ---

@dataclass
class Decimal64:
    """Fixed-point number: digits scaled down by 10**precision."""
    digits: int
    precision: int = 0


@dataclass
class TypedValue:
    """Tagged union of the value types a leaf can carry.

    `variant` holds the wire name of a populated variant this client has no
    ValueKind for; `kind` is UNSET in that case.
    """
    kind: ValueKind = ValueKind.UNSET
    value: Any = None
    variant: str = ""

    @classmethod
    def json_ietf(cls, data: bytes) -> "TypedValue":
        return cls(ValueKind.JSON_IETF, data)


@dataclass
class Value:
    """Deprecated raw-bytes value from gNMI before 0.4."""
    value: bytes = b""
    type: int = 0


@dataclass
class Update:
    """A value at a path. `value` is the legacy field, `val` the modern one."""
    path: Optional[Path] = None
    val: Optional[TypedValue] = None
    value: Optional[Value] = None
    duplicates: int = 0


@dataclass
class Notification:
    """A timestamped batch of updates and deletes."""
    timestamp: int = 0
    prefix: Optional[Path] = None
    update: list[Update] = field(default_factory=list)
    delete: list[Path] = field(default_factory=list)


@dataclass
class Error:
    """Status carried inside a response."""
    code: int = CODE_OK
    message: str = ""


# --- Get ---

@dataclass
class GetRequest:
    path: list[Path] = field(default_factory=list)
    prefix: Optional[Path] = None


@dataclass
class GetResponse:
    notification: list[Notification] = field(default_factory=list)


# --- Set ---

@dataclass
class SetRequest:
    """Deletes, replaces and updates applied in one transaction."""
    delete: list[Path] = field(default_factory=list)
    replace: list[Update] = field(default_factory=list)
    update: list[Update] = field(default_factory=list)
    prefix: Optional[Path] = None

    @property
    def total_operations(self) -> int:
        return len(self.delete) + len(self.replace) + len(self.update)


@dataclass
class UpdateResult:
    """Per-path outcome of a Set."""
    path: Optional[Path] = None
    op: str = ""
    timestamp: int = 0


@dataclass
class SetResponse:
    response: list[UpdateResult] = field(default_factory=list)
    message: Optional[Error] = None
    timestamp: int = 0


# --- Subscribe ---

@dataclass
class Subscription:
    path: Path
    mode: SubscriptionMode = SubscriptionMode.TARGET_DEFINED
    sample_interval: int = 0


@dataclass
class SubscriptionList:
    subscription: list[Subscription] = field(default_factory=list)
    mode: SubscriptionListMode = SubscriptionListMode.STREAM
    prefix: Optional[Path] = None
    updates_only: bool = False


@dataclass
class SubscribeRequest:
    subscribe: SubscriptionList = field(default_factory=SubscriptionList)


@dataclass
class SubscribeResponse:
    """Exactly one of update, sync_response or error is set."""
    update: Optional[Notification] = None
    sync_response: Optional[bool] = None
    error: Optional[Error] = None
