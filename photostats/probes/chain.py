"""Ordered fallback chains.

A chain is a list of named strategies tried in order.  Each strategy returns a
value on success or ``None`` to signal "not applicable / no data".  Exceptions
raised by a strategy are logged and treated the same as ``None``.  The first
non-None result wins; if every strategy fails the chain's default is returned,
so running a chain never raises.
"""

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Strategy = tuple[str, Callable[[], T | None]]


def run_chain(strategies: Sequence[Strategy[T]], default: T) -> T:
    """Run *strategies* in order and return the first successful result."""
    for name, strategy in strategies:
        try:
            result = strategy()
        except Exception as exc:
            logger.debug("Strategy %s failed: %s", name, exc)
            continue
        if result is not None:
            logger.debug("Strategy %s succeeded", name)
            return result
        logger.debug("Strategy %s returned no result", name)
    return default
