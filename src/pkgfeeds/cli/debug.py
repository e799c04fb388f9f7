"""Debug logging switch shared by the group and its commands."""

import logging
import os

DEBUG_ENV_VAR = "PKGFEEDS_DEBUG"
DEBUG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


def debug_requested(flag: bool) -> bool:
    return flag or os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes")


def enable_debug_logging() -> None:
    """Send DEBUG records from every pkgfeeds module to stderr."""
    logging.basicConfig(level=logging.DEBUG, format=DEBUG_FORMAT)
    # httpx and httpcore narrate every connection at DEBUG
    logging.getLogger("httpcore").setLevel(logging.INFO)
