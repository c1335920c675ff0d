"""RS485 serial transport built on pyserial-asyncio-fast.

Bytes read from the port are pushed to the registered data handler as
they arrive; no framing is attempted here. A lost port is reported once
to the error handler as InverterConnectionError.
"""

import asyncio
import logging
from typing import Optional

import serial_asyncio_fast

from ...const import (
    DEFAULT_BAUD_RATE,
    DEFAULT_DATA_BITS,
    DEFAULT_PARITY,
    DEFAULT_STOP_BITS,
    PARITY_MAP,
    TRANSPORT_OPEN_TIMEOUT,
)
from ...domain.exceptions import (
    InvalidParameterError,
    InverterConnectionError,
    NotConnectedError,
)
from ...domain.interfaces import DataHandler, ErrorHandler, ITransport
from ..decorators import handle_transport_errors

_LOGGER = logging.getLogger(__name__)


class _SerialLinkProtocol(asyncio.Protocol):
    """asyncio protocol forwarding serial events to the owning transport."""

    def __init__(self, owner: "SerialTransport"):
        self._owner = owner

    def connection_made(self, transport):
        _LOGGER.debug("Serial connection made")

    def data_received(self, data: bytes):
        self._owner._on_data(data)

    def connection_lost(self, exc):
        self._owner._on_connection_lost(exc)


class SerialTransport(ITransport):
    """Serial port transport for the inverter's RS485 link.

    Example:
        >>> transport = SerialTransport()
        >>> transport.set_data_handler(assembler.feed)
        >>> await transport.open("/dev/ttyUSB0", baudrate=9600)
        >>> await transport.write(request)
        >>> await transport.close()
    """

    def __init__(self, open_timeout: float = TRANSPORT_OPEN_TIMEOUT):
        self._open_timeout = open_timeout
        self._transport: Optional[asyncio.Transport] = None
        self._port: Optional[str] = None
        self._closing = False
        self._data_handler: Optional[DataHandler] = None
        self._error_handler: Optional[ErrorHandler] = None

    @property
    def is_open(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    @property
    def port(self) -> Optional[str]:
        return self._port

    def set_data_handler(self, handler: Optional[DataHandler]) -> None:
        self._data_handler = handler

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        self._error_handler = handler

    @handle_transport_errors("Serial open")
    async def open(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUD_RATE,
        bytesize: int = DEFAULT_DATA_BITS,
        stopbits: int = DEFAULT_STOP_BITS,
        parity: str = DEFAULT_PARITY,
    ) -> None:
        """Open the serial port (8N1 by default)."""
        if self.is_open:
            _LOGGER.debug("Serial port %s already open", self._port)
            return

        parity_code = PARITY_MAP.get(str(parity).lower())
        if parity_code is None:
            raise InvalidParameterError(f"Unsupported parity: {parity!r}")

        _LOGGER.info(
            "Opening serial port %s (%d baud, %d%s%d)",
            port,
            baudrate,
            bytesize,
            parity_code,
            stopbits,
        )

        loop = asyncio.get_running_loop()
        self._closing = False
        transport, _ = await asyncio.wait_for(
            serial_asyncio_fast.create_serial_connection(
                loop,
                lambda: _SerialLinkProtocol(self),
                port,
                baudrate=baudrate,
                bytesize=bytesize,
                parity=parity_code,
                stopbits=stopbits,
            ),
            timeout=self._open_timeout,
        )
        self._transport = transport
        self._port = port
        _LOGGER.info("Serial port %s open", port)

    @handle_transport_errors("Serial write")
    async def write(self, data: bytes) -> None:
        if not self.is_open:
            raise NotConnectedError("Serial port is not open")

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("TX %s", bytes(data).hex())
        self._transport.write(data)

    async def close(self) -> None:
        if self._transport is None:
            return

        self._closing = True
        transport, self._transport = self._transport, None
        try:
            transport.close()
        except Exception as err:
            _LOGGER.debug("Error while closing serial port %s: %s", self._port, err)
        _LOGGER.info("Serial port %s closed", self._port)

    def _on_data(self, data: bytes) -> None:
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("RX %s", bytes(data).hex())
        if self._data_handler is not None:
            self._data_handler(bytes(data))

    def _on_connection_lost(self, exc: Optional[Exception]) -> None:
        self._transport = None
        if self._closing:
            return

        _LOGGER.error("Serial port %s lost: %s", self._port, exc)
        if self._error_handler is not None:
            error = InverterConnectionError(f"Serial port {self._port} lost: {exc}")
            if exc is not None:
                error.__cause__ = exc
            self._error_handler(error)
