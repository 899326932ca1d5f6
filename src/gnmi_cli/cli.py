#!/usr/bin/env python3
"""gNMI command-line client.

Usage:
    gnmi-cli [options] capabilities
    gnmi-cli [options] get PATH+
    gnmi-cli [options] subscribe PATH+
    gnmi-cli [options] ((update|replace PATH JSON)|(delete PATH))+

Environment variables:
    GNMI_PASSWORD           Password when --password is not given
    GNMI_CLI_LOG_LEVEL      Console log level (default: WARNING)
    GNMI_CLI_LOG_FILE       Also log to this file, with rotation
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional, TextIO

from . import __version__
from .config import ClientConfig
from .errors import GNMIError, UsageError, ValidationError
from .operations import CommandExecutor, Request, build_request, parse_operations
from .transport.base import GNMIClient
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

COMMANDS = """commands:
  capabilities
  get PATH+
  subscribe PATH+
  ((update|replace PATH JSON)|(delete PATH))+
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gnmi-cli",
        usage="%(prog)s [options] COMMAND...",
        description="Get, set or subscribe to paths on a gNMI target\n\n" + COMMANDS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    gnmi-cli --addr switch1 get /system/config/hostname
    gnmi-cli --addr switch1 subscribe /interfaces/interface[name=eth0]/state
    gnmi-cli --addr switch1 update /system/config '{"hostname": "sw1"}' delete /foo
    gnmi-cli --addr switch1 replace /system/config config.json

A JSON argument naming a readable file is replaced by the file's contents.
""",
    )
    parser.add_argument("--addr", default="localhost",
                        help="Address of gNMI gRPC server (default port 6030)")
    parser.add_argument("--cafile", help="Path to server TLS certificate file")
    parser.add_argument("--certfile", help="Path to client TLS certificate file")
    parser.add_argument("--keyfile", help="Path to client TLS private key file")
    parser.add_argument("--username", help="Username to authenticate with")
    parser.add_argument("--password",
                        help="Password to authenticate with (or set GNMI_PASSWORD)")
    parser.add_argument("--tls", action="store_true", help="Enable TLS")
    parser.add_argument("--timeout", type=float, default=10,
                        help="Seconds to wait for the connection (default: 10)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("args", nargs=argparse.REMAINDER,
                        help=argparse.SUPPRESS)
    return parser


def config_from_args(args: argparse.Namespace) -> ClientConfig:
    return ClientConfig(
        addr=args.addr,
        cafile=args.cafile,
        certfile=args.certfile,
        keyfile=args.keyfile,
        username=args.username,
        password=args.password,
        tls=args.tls,
        timeout=args.timeout,
    )


def exit_with_error(
    parser: argparse.ArgumentParser, message: str, err: Optional[TextIO] = None
) -> int:
    """Print usage and the message to stderr; return the failure code."""
    err = err or sys.stderr
    parser.print_help(err)
    if message:
        print(message, file=err)
    return 1


async def run_command(
    client: GNMIClient, request: Request, out: Optional[TextIO] = None
) -> None:
    """Execute a built request on an already connected client."""
    await CommandExecutor(client, out).execute(request)


async def _dial_and_run(config: ClientConfig, request: Request) -> None:
    from .transport.grpc_client import dial

    async with await dial(config) as client:
        await run_command(client, request)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the gNMI CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        command = parse_operations(args.args)
    except UsageError as e:
        return exit_with_error(parser, e.message)

    # Paths and payloads are checked here so a malformed command never dials
    try:
        request = build_request(command)
    except ValidationError as e:
        return exit_with_error(parser, f"error: {e.message}")

    config = config_from_args(args)
    logger.debug(f"Running {command.command.value} against {config.target}")

    try:
        asyncio.run(_dial_and_run(config, request))
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except ValidationError as e:
        return exit_with_error(parser, f"error: {e.message}")
    except GNMIError as e:
        logger.error(e.message)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
