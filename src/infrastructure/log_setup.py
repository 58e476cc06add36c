from __future__ import annotations

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # Suppress noisy loggers
    for noisy_logger in ["PIL", "httpx", "httpcore", "hpack"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)
