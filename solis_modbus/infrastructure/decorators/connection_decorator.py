"""Connection guard decorator."""

from functools import wraps
from typing import Callable

from ...domain.exceptions import NotConnectedError


def require_connection(func: Callable):
    """Ensure the owning object has a live session before running.

    The decorated coroutine's ``self`` must expose ``is_connected``.

    Example:
        @require_connection
        async def get_all_data(self) -> InverterSnapshot:
            return await self._sequencer.get_all_data()
    """

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        if not self.is_connected:
            raise NotConnectedError(
                f"{func.__name__} requires an open connection to the inverter"
            )
        return await func(self, *args, **kwargs)

    return wrapper
