"""Parser for the command tokens that follow the flags.

Grammar:
    capabilities
    get PATH+
    subscribe PATH+
    ((update|replace PATH JSON)|(delete PATH))+

get and subscribe swallow every remaining token as a path, so they can only
lead the command line. Mutations queue up and go out as a single Set.
"""
from ..errors import UsageError
from ..paths import split_path, split_paths
from .schema import CommandType, Operation, OpType, ParsedCommand


READ_COMMANDS = {
    "get": CommandType.GET,
    "subscribe": CommandType.SUBSCRIBE,
}


class OperationParser:
    """Parse command tokens into a ParsedCommand."""

    def parse(self, args: list[str]) -> ParsedCommand:
        """
        Parse the full token sequence.

        Args:
            args: Positional command-line tokens

        Returns:
            ParsedCommand for a Get, Subscribe or Set

        Raises:
            UsageError: If the tokens do not follow the grammar
        """
        set_ops: list[Operation] = []
        i = 0
        while i < len(args):
            token = args[i]

            if token in ("capabilities", "get", "subscribe") and set_ops:
                raise UsageError(
                    f"error: '{token}' not allowed after 'merge|replace|delete'"
                )

            if token == "capabilities":
                raise UsageError("error: 'capabilities' not supported")

            if token in READ_COMMANDS:
                return ParsedCommand(
                    command=READ_COMMANDS[token],
                    paths=split_paths(args[i + 1:]),
                )

            try:
                op_type = OpType(token)
            except ValueError:
                raise UsageError(f"error: unknown operation {token!r}")

            i = self._parse_operation(args, i, op_type, set_ops)

        if not set_ops:
            # Nothing recognized at all: just the usage text
            raise UsageError("")

        return ParsedCommand(command=CommandType.SET, operations=set_ops)

    def _parse_operation(
        self,
        args: list[str],
        i: int,
        op_type: OpType,
        set_ops: list[Operation],
    ) -> int:
        """Queue one mutation starting at args[i]; return the next index."""
        if i + 1 >= len(args):
            raise UsageError("error: missing path")
        i += 1
        op = Operation(op_type=op_type, path=split_path(args[i]))

        if op_type != OpType.DELETE:
            if i + 1 >= len(args):
                raise UsageError("error: missing JSON")
            i += 1
            op.value = args[i]

        set_ops.append(op)
        return i + 1


def parse_operations(args: list[str]) -> ParsedCommand:
    """Convenience wrapper around OperationParser().parse()."""
    return OperationParser().parse(args)
