# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import argparse
import asyncio
import logging
import os

from .api.server import start_unified_server
from .config import Config
from .service import ImageToggleService


def setup_logging(config, override_level=None):
    """Configure logging based on config settings."""
    # Determine log level from override, config, or default
    log_level_str = override_level.lower() if override_level else str(config.get("log.level")).lower()

    # Map string levels to logging constants
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "warn": logging.WARNING,  # alias
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    log_level = level_map.get(log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] [%(name)s] %(message)s",  # Level first, then logger name
        handlers=[logging.StreamHandler()],
        force=True,  # Reset any existing configuration
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Image color/grayscale toggle service")
    parser.add_argument("--host", default=None, help="Host to bind to (overrides server.host)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (overrides server.port)")
    parser.add_argument("--config", default=None, help="Path to YAML/TOML/JSON config file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "warn", "error", "critical"],
        type=str.lower,
        help="Set logging level (overrides config file)",
    )
    return parser.parse_args(argv)


async def main(argv=None):
    """Main entry point for the image toggle service."""
    args = parse_args(argv)

    # Load configuration
    config = Config()
    config.load(args.config)
    if args.host is not None:
        config.set("server.host", args.host)
    if args.port is not None:
        config.set("server.port", args.port)

    # Setup logging
    setup_logging(config, override_level=args.log_level)
    logger = logging.getLogger("main")
    logger.info(f"loaded config: {config.get()}")

    service = ImageToggleService.from_config(config)
    runner = await start_unified_server(config.get("server.host"), int(config.get("server.port")), service)

    try:
        # Keep running until interrupted
        await asyncio.Future()  # run forever
    finally:
        await runner.cleanup()


def _install_fast_loop():
    """Use uvloop/winloop when installed."""
    logger = logging.getLogger("main")
    if os.name == "nt":
        try:
            import winloop  # type: ignore[import-not-found]

            asyncio.set_event_loop_policy(winloop.EventLoopPolicy())
            logger.info("winloop enabled")
        except ImportError:
            logger.info("winloop not available, using default asyncio loop")
    else:
        try:
            import uvloop  # type: ignore[import-not-found]

            asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
            logger.info("uvloop enabled")
        except ImportError:
            logger.info("uvloop not available, using default asyncio loop")


def run():
    """Entry point for setuptools console scripts."""
    _install_fast_loop()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.getLogger("main").info("Shutting down...")


if __name__ == "__main__":
    run()
