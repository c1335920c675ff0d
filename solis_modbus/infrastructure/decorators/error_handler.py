"""Error handling decorators for standardized exception handling."""

import asyncio
import logging
from functools import wraps
from typing import Callable, Optional

from serial import SerialException

from ...domain.exceptions import InverterConnectionError, SolisModbusError


def handle_transport_errors(
    operation_name: str,
    logger: Optional[logging.Logger] = None,
):
    """Decorator for standardized transport error handling.

    Engine errors pass through unchanged after being logged. Low-level
    serial and OS failures are logged and re-raised as
    InverterConnectionError with the original error chained.

    Args:
        operation_name: Human-readable operation name for logging
        logger: Logger to use (defaults to function's module logger)

    Example:
        @handle_transport_errors("Serial write")
        async def write(self, data: bytes) -> None:
            self._transport.write(data)
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            log = logger or logging.getLogger(func.__module__)
            try:
                return await func(*args, **kwargs)
            except SolisModbusError as err:
                log.error("%s failed: %s", operation_name, err)
                raise
            except asyncio.TimeoutError as err:
                log.warning("%s timed out: %s", operation_name, err)
                raise InverterConnectionError(
                    f"{operation_name} timed out"
                ) from err
            except (SerialException, OSError) as err:
                log.error("%s serial error: %s", operation_name, err)
                raise InverterConnectionError(
                    f"{operation_name} failed: {err}"
                ) from err

        return wrapper

    return decorator
