"""ModbusExchangeService: one request, one response, strictly serialized.

Runs encode -> write -> assemble -> decode under a lock so that at most
one request is ever in flight on the transport, applies pacing between
exchanges and re-issues byte-identical requests according to the retry
policy.
"""

import asyncio
import logging
from typing import Callable, Optional, Tuple

from ...const import DEFAULT_SLAVE_ID, FUNC_READ_INPUT
from ...domain.exceptions import InverterConnectionError, MalformedFrameError
from ...domain.interfaces import ITransport
from ...domain.value_objects import ResponseFrame
from ...infrastructure.protocol import ModbusRTUProtocol, ResponseAssembler
from .pacing_policy import PacingPolicy
from .retry_policy import RetryPolicy

_LOGGER = logging.getLogger(__name__)


class ModbusExchangeService:
    """Serialized Modbus read exchanges over one transport.

    The service wires itself into the transport: incoming bytes go to
    the assembler and transport failures are delivered to the
    outstanding request.

    Example:
        >>> exchange = ModbusExchangeService(protocol, transport, assembler)
        >>> await exchange.read_input_registers(33139, 1)
        (85,)
    """

    def __init__(
        self,
        protocol: ModbusRTUProtocol,
        transport: ITransport,
        assembler: ResponseAssembler,
        pacing: Optional[PacingPolicy] = None,
        retry: Optional[RetryPolicy] = None,
        slave_id: int = DEFAULT_SLAVE_ID,
        function_code: int = FUNC_READ_INPUT,
    ):
        self._protocol = protocol
        self._transport = transport
        self._assembler = assembler
        self._pacing = pacing or PacingPolicy()
        self._retry = retry or RetryPolicy()
        self._slave_id = slave_id
        self._function_code = function_code
        self._lock = asyncio.Lock()
        self._connection_lost_callback: Optional[Callable[[Exception], None]] = None

        self.exchange_count = 0
        self.failure_count = 0

        transport.set_data_handler(assembler.feed)
        transport.set_error_handler(self._on_transport_error)

    @property
    def transport(self) -> ITransport:
        return self._transport

    def set_connection_lost_callback(
        self, callback: Optional[Callable[[Exception], None]]
    ) -> None:
        """Register a callback notified when the transport reports a failure."""
        self._connection_lost_callback = callback

    async def read_input_registers(
        self, start_address: int, quantity: int = 1
    ) -> Tuple[int, ...]:
        """Read ``quantity`` registers starting at ``start_address``.

        Raises:
            InvalidParameterError: If the request fields are out of range
            ResponseTimeoutError: No complete response before the deadline
            FrameError: CRC, framing or device exception failure
            InverterConnectionError: Transport failed during the exchange
        """
        request = self._protocol.encode_read(
            self._slave_id, self._function_code, start_address, quantity
        )

        async with self._lock:
            attempt = 0
            while True:
                attempt += 1
                try:
                    frame = await self._exchange(request, quantity)
                except Exception as err:
                    self.failure_count += 1
                    if not self._retry.should_retry(err, attempt):
                        raise
                    _LOGGER.warning(
                        "Read of %d register(s) at %d failed (%s), retry %d/%d",
                        quantity,
                        start_address,
                        err,
                        attempt,
                        self._retry.count,
                    )
                    await asyncio.sleep(self._retry.delay)
                    continue
                return frame.registers

    async def _exchange(self, request: bytes, quantity: int) -> ResponseFrame:
        await self._pacing.wait_turn()
        await self._assembler.wait_for_quiet_line()

        generation = self._assembler.begin(
            self._protocol.expected_response_length(quantity)
        )
        self.exchange_count += 1
        try:
            try:
                await self._transport.write(request)
            except BaseException as err:
                self._assembler.cancel(generation)
                if isinstance(err, InverterConnectionError):
                    self._notify_connection_lost(err)
                raise
            raw = await self._assembler.wait(generation)
        finally:
            self._pacing.mark_complete()

        frame = self._protocol.decode_response(raw)
        self._check_echo(frame, quantity)
        return frame

    def _check_echo(self, frame: ResponseFrame, quantity: int) -> None:
        if frame.slave_id != self._slave_id:
            raise MalformedFrameError(
                f"Response from slave {frame.slave_id}, expected {self._slave_id}"
            )
        if frame.function_code != self._function_code:
            raise MalformedFrameError(
                f"Response function 0x{frame.function_code:02X}, "
                f"expected 0x{self._function_code:02X}"
            )
        if frame.register_count != quantity:
            raise MalformedFrameError(
                f"Response carries {frame.register_count} register(s), "
                f"expected {quantity}"
            )

    def _on_transport_error(self, error: Optional[Exception]) -> None:
        if not isinstance(error, InverterConnectionError):
            error = InverterConnectionError(f"Transport failure: {error}")

        generation = self._assembler.active_generation
        if generation is not None:
            self._assembler.fail(generation, error)

        self._notify_connection_lost(error)

    def _notify_connection_lost(self, error: InverterConnectionError) -> None:
        if self._connection_lost_callback is not None:
            self._connection_lost_callback(error)
