"""ITransport interface for byte-oriented half-duplex links."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

DataHandler = Callable[[bytes], None]
ErrorHandler = Callable[[Optional[Exception]], None]


class ITransport(ABC):
    """Interface for transport layer implementations.

    The transport layer handles low-level communication with the device.
    Incoming bytes are not returned from a call; they are pushed to the
    registered data handler in arbitrarily sized, arbitrarily timed
    chunks. Transport-level failures are pushed to the error handler.

    Connection lifecycle:
        1. set_data_handler(cb) / set_error_handler(cb)
        2. open(port, ...) → establishes the link or raises
        3. write(data) → sends one request frame (multiple times)
        4. close() → releases the link (idempotent)

    Example:
        >>> transport = SerialTransport()
        >>> transport.set_data_handler(assembler.feed)
        >>> await transport.open("/dev/ttyUSB0", baudrate=9600)
        >>> await transport.write(request_bytes)
        >>> await transport.close()
    """

    @abstractmethod
    async def open(
        self,
        port: str,
        baudrate: int = 9600,
        bytesize: int = 8,
        stopbits: int = 1,
        parity: str = "none",
    ) -> None:
        """Open the link and wait until it is ready.

        Raises:
            InverterConnectionError: If the port cannot be opened
        """

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Write raw bytes to the link.

        Raises:
            NotConnectedError: If the link is not open
            InverterConnectionError: If the write fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the link.

        This method must be idempotent (safe to call multiple times) and
        must never raise.
        """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Check if the link is currently open."""

    @abstractmethod
    def set_data_handler(self, handler: Optional[DataHandler]) -> None:
        """Register the callback that receives incoming byte chunks."""

    @abstractmethod
    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        """Register the callback that receives transport-level errors."""
