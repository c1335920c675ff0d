"""Response assembler.

Reconstructs one complete Modbus RTU response from the chunked byte
stream delivered by the transport. RTU has no delimiter: a frame ends
either when its expected length is reached or when the line stays quiet
for the quiet window. An overall deadline bounds every exchange.

Every request is tagged with a generation token. Timer callbacks and
bytes that belong to an older generation are discarded, so a late reply
to a timed-out request can never be taken as the answer to the next one.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from ...const import (
    DEFAULT_QUIET_WINDOW,
    DEFAULT_RESPONSE_TIMEOUT,
    EXCEPTION_FLAG,
    EXCEPTION_RESPONSE_LENGTH,
    FRAMING_LENGTH,
    FRAMING_QUIET_WINDOW,
)
from ...domain.exceptions import RequestInProgressError, ResponseTimeoutError
from ..state_machines import AssemblerEvent, AssemblerState, AssemblerStateMachine
from .modbus_rtu_protocol import ModbusRTUProtocol

_LOGGER = logging.getLogger(__name__)


class FramingMode(str, Enum):
    """How the end of a response frame is detected."""

    LENGTH = FRAMING_LENGTH
    QUIET_WINDOW = FRAMING_QUIET_WINDOW


class ResponseAssembler:
    """Assemble response frames for one outstanding request at a time.

    Usage per exchange:
        generation = assembler.begin(expected_length)
        await transport.write(request)
        frame = await assembler.wait(generation)

    ``feed`` is registered as the transport's data handler.

    Attributes:
        quiet_window: Silence (seconds) that ends a frame of unknown length
        deadline: Overall time (seconds) allowed for one response
        framing_mode: LENGTH (default) or QUIET_WINDOW
    """

    def __init__(
        self,
        protocol: Optional[ModbusRTUProtocol] = None,
        quiet_window: float = DEFAULT_QUIET_WINDOW,
        deadline: float = DEFAULT_RESPONSE_TIMEOUT,
        framing_mode: FramingMode = FramingMode.LENGTH,
    ):
        if quiet_window <= 0:
            raise ValueError(f"Quiet window must be positive, got {quiet_window}")
        if deadline <= 0:
            raise ValueError(f"Deadline must be positive, got {deadline}")

        self._protocol = protocol
        self.quiet_window = quiet_window
        self.deadline = deadline
        self.framing_mode = FramingMode(framing_mode)

        self._state_machine = AssemblerStateMachine()
        self._generation = 0
        self._active: Optional[int] = None
        self._buffer = bytearray()
        self._expected_length: Optional[int] = None
        self._future: Optional[asyncio.Future] = None
        self._quiet_handle: Optional[asyncio.TimerHandle] = None
        self._deadline_handle: Optional[asyncio.TimerHandle] = None
        # Loop time from which the line must stay quiet after a timeout
        self._settle_from: Optional[float] = None

    @property
    def state(self) -> AssemblerState:
        return self._state_machine.state

    @property
    def active_generation(self) -> Optional[int]:
        """Generation of the outstanding request, or None when idle."""
        return self._active

    def begin(self, expected_length: Optional[int] = None) -> int:
        """Start collecting the response to a new request.

        Must be called before the request is written so that no byte of
        the reply can be missed.

        Args:
            expected_length: Byte length of a normal response, if known

        Returns:
            Generation token identifying this exchange

        Raises:
            RequestInProgressError: If a request is already outstanding
        """
        if self._active is not None:
            raise RequestInProgressError(
                f"Request generation {self._active} is still outstanding"
            )

        loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation

        self._active = generation
        self._buffer.clear()
        self._settle_from = None
        self._expected_length = expected_length
        self._future = loop.create_future()
        self._deadline_handle = loop.call_later(
            self.deadline, self._on_deadline, generation
        )
        self._state_machine.transition(AssemblerEvent.BEGIN)

        _LOGGER.debug(
            "Awaiting response generation %d (expected=%s, mode=%s)",
            generation,
            expected_length,
            self.framing_mode.value,
        )
        return generation

    def feed(self, chunk: bytes) -> None:
        """Accept a chunk of bytes from the transport."""
        if not chunk:
            return

        if self._active is None or self._future is None or self._future.done():
            if self._settle_from is not None:
                self._settle_from = asyncio.get_running_loop().time()
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug(
                    "Discarding %d stale byte(s): %s", len(chunk), bytes(chunk).hex()
                )
            return

        self._buffer.extend(chunk)

        if self.framing_mode is FramingMode.LENGTH:
            target = self._target_length()
            if target is not None:
                if len(self._buffer) >= target:
                    if len(self._buffer) > target:
                        _LOGGER.debug(
                            "Dropping %d trailing byte(s) after frame",
                            len(self._buffer) - target,
                        )
                        del self._buffer[target:]
                    self._complete()
                elif self._quiet_handle is not None:
                    # Length is known now; only the deadline bounds the rest
                    self._quiet_handle.cancel()
                    self._quiet_handle = None
                return

        self._restart_quiet_timer()

    async def wait(self, generation: int) -> bytes:
        """Wait for the frame of ``generation``.

        The assembler is back in IDLE when this returns or raises.

        Raises:
            ResponseTimeoutError: If the deadline expired first
            InverterConnectionError: If the transport failed meanwhile
        """
        if generation != self._active or self._future is None:
            raise ValueError(f"Generation {generation} is not outstanding")

        try:
            return await self._future
        finally:
            self._release(generation)

    def fail(self, generation: int, exc: BaseException) -> None:
        """Deliver a transport-level failure to the outstanding request."""
        if generation != self._active or self._future is None or self._future.done():
            return

        self._cancel_timers()
        self._buffer.clear()
        self._state_machine.transition(AssemblerEvent.TRANSPORT_ERROR)
        self._future.set_exception(exc)

    def cancel(self, generation: int) -> None:
        """Abandon the request of ``generation`` and return to IDLE."""
        if generation != self._active:
            return
        future = self._future
        if future is not None:
            if not future.done():
                future.cancel()
            elif not future.cancelled():
                # Mark a pending error as retrieved
                future.exception()
        self._release(generation)

    async def wait_for_quiet_line(self) -> None:
        """After a timeout, wait until the line has been quiet for one quiet window.

        The tail of a timed-out reply may still be on its way. Every
        discarded byte restarts the wait, which is bounded by the deadline
        so a chattering line cannot stall the caller forever.
        """
        if self._settle_from is None:
            return

        loop = asyncio.get_running_loop()
        give_up = loop.time() + self.deadline
        while self._settle_from is not None:
            now = loop.time()
            remaining = self._settle_from + self.quiet_window - now
            if remaining <= 0:
                break
            if now >= give_up:
                _LOGGER.warning(
                    "Line still busy %.3fs after timeout, sending next request anyway",
                    self.deadline,
                )
                break
            await asyncio.sleep(min(remaining, give_up - now))
        self._settle_from = None

    def _target_length(self) -> Optional[int]:
        buffer = self._buffer
        if len(buffer) >= 2 and buffer[1] & EXCEPTION_FLAG:
            return EXCEPTION_RESPONSE_LENGTH
        if self._expected_length is not None:
            return self._expected_length
        if self._protocol is not None:
            return self._protocol.expected_length_from_prefix(buffer)
        return None

    def _complete(self) -> None:
        self._cancel_timers()
        self._state_machine.transition(AssemblerEvent.FRAME_COMPLETE)
        frame = bytes(self._buffer)
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Frame complete for generation %s: %s", self._active, frame.hex()
            )
        self._future.set_result(frame)

    def _restart_quiet_timer(self) -> None:
        if self._quiet_handle is not None:
            self._quiet_handle.cancel()
        loop = asyncio.get_running_loop()
        self._quiet_handle = loop.call_later(
            self.quiet_window, self._on_quiet, self._active
        )

    def _on_quiet(self, generation: int) -> None:
        if generation != self._active or self._future is None or self._future.done():
            return
        self._quiet_handle = None
        self._complete()

    def _on_deadline(self, generation: int) -> None:
        if generation != self._active or self._future is None or self._future.done():
            return

        self._deadline_handle = None
        self._cancel_timers()
        received = len(self._buffer)
        self._buffer.clear()
        self._settle_from = asyncio.get_running_loop().time()
        self._state_machine.transition(AssemblerEvent.DEADLINE_EXPIRED)
        _LOGGER.warning(
            "Response timeout after %.3fs (generation %d, %d byte(s) discarded)",
            self.deadline,
            generation,
            received,
        )
        self._future.set_exception(
            ResponseTimeoutError(
                f"No complete response within {self.deadline:.3f}s "
                f"({received} byte(s) received)"
            )
        )

    def _cancel_timers(self) -> None:
        if self._quiet_handle is not None:
            self._quiet_handle.cancel()
            self._quiet_handle = None
        if self._deadline_handle is not None:
            self._deadline_handle.cancel()
            self._deadline_handle = None

    def _release(self, generation: int) -> None:
        if generation != self._active:
            return
        self._cancel_timers()
        self._buffer.clear()
        self._expected_length = None
        self._active = None
        self._future = None
        self._state_machine.transition(AssemblerEvent.RELEASE)
