"""
Logging setup for the forum API.

One stream handler on the root logger; modules log through
``logging.getLogger(__name__)``.
"""

import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def setup_logging(level: str = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    global _configured

    root = logging.getLogger()
    root.setLevel(level or settings.LOG_LEVEL)

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # uvicorn's access log already covers every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    _configured = True
