"""
Command line entry point: load the configuration, build the Rocket.Chat
client and serve the webhook with uvicorn.

Usage:
    rocketchat-webhook --config.file config/rocketchat.yml --listen.address :9876
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

import uvicorn

from rocketchat_webhook.core.config import get_settings, load_config
from rocketchat_webhook.core.exceptions import ConfigError
from rocketchat_webhook.core.logging_config import configure_logging
from rocketchat_webhook.main import create_app

logger = logging.getLogger(__name__)


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split "host:port" into its parts; an empty host listens everywhere.

    Raises:
        ValueError: If the port is missing or not a valid number
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid listen address: {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Relay Prometheus Alertmanager notifications to Rocket.Chat"
    )
    parser.add_argument(
        "--config.file",
        dest="config_file",
        default=settings.CONFIG_FILE,
        help="RocketChat configuration file.",
    )
    parser.add_argument(
        "--listen.address",
        dest="listen_address",
        default=settings.LISTEN_ADDRESS,
        help="The address to listen on for HTTP requests.",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default=settings.LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        host, port = parse_listen_address(args.listen_address)
    except ValueError as e:
        logger.error(str(e))
        return 2

    try:
        config = load_config(args.config_file)
    except ConfigError as e:
        logger.error(f"Missing Rocket.Chat config parameters: {e}")
        return 1

    app = create_app(config, settings=get_settings())

    logger.info(f"listening on: {args.listen_address}")
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
