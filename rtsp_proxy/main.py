#!/usr/bin/env python3
import logging
import sys
from typing import Optional, Sequence

from rtsp_proxy import __version__
from rtsp_proxy.config import USAGE, resolve_config
from rtsp_proxy.core import BootstrapOrchestrator
from rtsp_proxy.engine import MediaEngine, SocketEngine
from rtsp_proxy.exceptions import ServerUnavailable, ValidationException
from rtsp_proxy.models import Verbosity
from rtsp_proxy.services import build_registry

logger = logging.getLogger(__name__)


def setup_logging():
    """Configure root logging for the process"""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run(argv: Sequence[str], engine: Optional[MediaEngine] = None) -> int:
    """Resolve the configuration, build the registry and bootstrap the server"""
    logger.info(f"RTSP Proxy Server v{__version__}")

    try:
        config = resolve_config(argv)

        if config.verbosity >= Verbosity.VERBOSE:
            logging.getLogger().setLevel(logging.DEBUG)

        registry = build_registry(config)
    except ValidationException as e:
        logger.error(e.message)
        logger.error(f"Usage: {USAGE}")
        return 1

    for url in config.source_urls:
        logger.debug(f"Command line stream: {url}")

    orchestrator = BootstrapOrchestrator(engine or SocketEngine(), config, registry)

    try:
        orchestrator.run()
    except ServerUnavailable as e:
        logger.error(e.message)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down")

    return 0


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point"""
    setup_logging()
    sys.exit(run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    main()
