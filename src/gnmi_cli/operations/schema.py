"""Schema definitions for parsed command-line operations."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class OpType(str, Enum):
    """Kind of mutation queued for a Set."""
    UPDATE = "update"    # Merge value into existing data
    REPLACE = "replace"  # Replace existing data with value
    DELETE = "delete"    # Remove data at path


class CommandType(str, Enum):
    """RPC chosen by the parsed command line."""
    GET = "get"
    SUBSCRIBE = "subscribe"
    SET = "set"


@dataclass
class Operation:
    """A single queued mutation. `value` is None only for deletes."""
    op_type: OpType
    path: list[str]
    value: Optional[str] = None


@dataclass
class ParsedCommand:
    """Result of parsing the command tokens.

    GET and SUBSCRIBE carry `paths`; SET carries `operations` in the order
    they were given.
    """
    command: CommandType
    paths: list[list[str]] = field(default_factory=list)
    operations: list[Operation] = field(default_factory=list)
