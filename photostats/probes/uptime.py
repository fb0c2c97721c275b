"""Process uptime."""

import logging
import time

import psutil

logger = logging.getLogger(__name__)


def process_uptime() -> float:
    """Seconds since this process started, or 0.0 if the start time is unavailable."""
    try:
        started = psutil.Process().create_time()
    except (psutil.Error, OSError) as exc:
        logger.debug("Cannot read process start time: %s", exc)
        return 0.0
    return max(0.0, time.time() - started)
