"""
Main entry point for modemlink.

Usage:
    python -m modemlink encode NAME [--version N] [--source ADDR] [--dest ADDR ...] [--arg TEXT ...]
    python -m modemlink decode FRAME
    python -m modemlink serve [--config CONFIG_PATH] [--simulate]
"""

import argparse
import logging
import signal
import sys

import uvicorn

from modemlink import __version__
from modemlink.api.app import create_app
from modemlink.config.loader import ConfigurationError, load_config
from modemlink.config.models import AppConfig, LoggingConfig
from modemlink.protocol.command import Command
from modemlink.protocol.encoder import decode_command, encode_command
from modemlink.protocol.link import CommandLink
from modemlink.protocol.logger import init_protocol_logger
from modemlink.protocol.serial_link import SerialLink
from modemlink.simulator.loopback import LoopbackLink
from modemlink.utils.exceptions import ModemLinkException, ProtocolError
from modemlink.utils.logging_setup import setup_logging


logger = logging.getLogger(__name__)


# Global resources for cleanup
command_link = None


def signal_handler(signum, frame):
    """Handle shutdown signals (SIGINT, SIGTERM)."""
    logger.info(f"Received signal {signum}, shutting down...")

    if command_link:
        command_link.disconnect()

    sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modemlink",
        description="Checksum-framed modem command protocol"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level for encode/decode"
    )
    sub = parser.add_subparsers(dest="action", required=True)

    enc = sub.add_parser("encode", help="Encode a command and print the frame")
    enc.add_argument("name", help="Command name")
    enc.add_argument("--version", type=int, default=0, dest="cmd_version", help="Command version")
    enc.add_argument("--source", type=int, default=0, help="Source address")
    enc.add_argument("--dest", type=int, action="append", default=[], help="Destination address (repeatable)")
    enc.add_argument("--arg", action="append", default=[], help="Argument (repeatable)")

    dec = sub.add_parser("decode", help="Decode a frame and print it as JSON")
    dec.add_argument("frame", help="Frame text; use '-' to read lines from stdin")

    srv = sub.add_parser("serve", help="Run the HTTP API on top of a command link")
    srv.add_argument(
        "--config",
        type=str,
        default="config.json",
        help="Path to configuration file (default: config.json)"
    )
    srv.add_argument(
        "--simulate",
        action="store_true",
        help="Use the loopback link instead of the serial port"
    )
    return parser


def run_encode(args) -> int:
    try:
        command = Command(args.name, args.cmd_version).set_source(args.source)
        for addr in args.dest:
            command.add_destination(addr)
    except ModemLinkException as e:
        print(f"Invalid command: {e}", file=sys.stderr)
        return 1
    for arg in args.arg:
        command.add_argument(arg)

    sys.stdout.write(encode_command(command))
    return 0


def run_decode(args) -> int:
    frames = sys.stdin if args.frame == "-" else [args.frame]
    status = 0

    for frame in frames:
        if not frame.strip():
            continue
        try:
            command = decode_command(frame)
        except ProtocolError as e:
            print(f"{type(e).__name__}: {e}", file=sys.stderr)
            status = 1
            continue
        print(command.to_json())

    return status


def create_link(config: AppConfig, simulate: bool):
    """Build the command link described by the configuration."""
    protocol_logger = init_protocol_logger(
        config.protocol_log.max_messages,
        config.protocol_log.enabled,
    )

    if simulate or config.simulator.enabled:
        logger.info("Using LOOPBACK link")
        transport = LoopbackLink(config.simulator)
    else:
        if not config.serial.port:
            raise ConfigurationError(
                "No serial port specified. Set 'serial.port' in the config or use --simulate"
            )
        logger.info(f"Using serial link on {config.serial.port}")
        transport = SerialLink(config.serial)

    return CommandLink(transport, config.link, protocol_logger)


def run_serve(args) -> int:
    global command_link

    try:
        config = load_config(args.config, require_serial_port=not args.simulate)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)

    logger.info("=" * 60)
    logger.info(f"modemlink v{__version__}")
    logger.info("=" * 60)

    try:
        command_link = create_link(config, args.simulate)
        command_link.connect()
    except (ConfigurationError, ModemLinkException) as e:
        logger.error(f"Cannot open link: {e}")
        return 1

    app = create_app(command_link)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info(f"Starting API server on {config.server.ip}:{config.server.port}")
    logger.info("Press Ctrl+C to stop")

    try:
        uvicorn.run(
            app,
            host=config.server.ip,
            port=config.server.port,
            log_level=config.logging.level.lower(),
            access_log=False
        )
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        return 1
    finally:
        if command_link:
            command_link.disconnect()
        logger.info("Shutdown complete")

    return 0


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    if args.action == "serve":
        return run_serve(args)

    setup_logging(LoggingConfig(level=args.log_level))

    if args.action == "encode":
        return run_encode(args)
    return run_decode(args)


if __name__ == "__main__":
    sys.exit(main())
