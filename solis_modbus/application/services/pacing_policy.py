"""Minimum spacing between consecutive exchanges.

The inverter needs a turnaround pause after each reply before it will
accept the next request. The delay is measured from the completion of
the previous exchange, not from its start.
"""

import asyncio
import logging
from typing import Optional

from ...const import DEFAULT_COMMAND_DELAY

_LOGGER = logging.getLogger(__name__)


class PacingPolicy:
    """Enforce ``min_delay`` seconds between one exchange and the next."""

    def __init__(self, min_delay: float = DEFAULT_COMMAND_DELAY):
        if min_delay < 0:
            raise ValueError(f"Minimum delay must be >= 0, got {min_delay}")
        self.min_delay = min_delay
        self._last_completed: Optional[float] = None

    async def wait_turn(self) -> None:
        """Sleep until the device is ready for the next request."""
        if self._last_completed is None or self.min_delay == 0:
            return

        remaining = self._last_completed + self.min_delay - asyncio.get_running_loop().time()
        if remaining > 0:
            _LOGGER.debug("Pacing: waiting %.3fs before next request", remaining)
            await asyncio.sleep(remaining)

    def mark_complete(self) -> None:
        """Record the end of an exchange, successful or not."""
        self._last_completed = asyncio.get_running_loop().time()

    def reset(self) -> None:
        self._last_completed = None
