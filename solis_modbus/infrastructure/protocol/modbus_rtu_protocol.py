"""Modbus RTU frame codec.

Builds read requests and validates/decodes responses. The codec is pure:
it performs no I/O and never retries; framing of the incoming byte
stream is the ResponseAssembler's job.
"""

import logging
import struct
from typing import Optional, Union

from ...const import (
    CRC_LENGTH,
    EXCEPTION_FLAG,
    EXCEPTION_RESPONSE_LENGTH,
    MAX_READ_QUANTITY,
    MAX_REGISTER_ADDRESS,
    MAX_SLAVE_ID,
    MIN_READ_QUANTITY,
    MIN_RESPONSE_LENGTH,
    MIN_SLAVE_ID,
    READ_FUNCTION_CODES,
    RESPONSE_HEADER_LENGTH,
)
from ...domain.exceptions import (
    CrcMismatchError,
    ExceptionResponseError,
    InvalidParameterError,
    MalformedPayloadError,
    ShortFrameError,
)
from ...domain.interfaces import ICRC, IProtocol
from ...domain.value_objects import ExceptionCode, RequestFrame, ResponseFrame

_LOGGER = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray]


class ModbusRTUProtocol(IProtocol):
    """Modbus RTU codec for read requests.

    Request:  [Slave][Func][Addr_H][Addr_L][Qty_H][Qty_L][CRC_L][CRC_H]
    Response: [Slave][Func][ByteCount][Data...][CRC_L][CRC_H]
    Error:    [Slave][Func|0x80][ExceptionCode][CRC_L][CRC_H]

    Example:
        >>> protocol = ModbusRTUProtocol(ModbusCRC16())
        >>> request = protocol.encode_read(1, 0x04, 33095, 1)
        >>> len(request)
        8
        >>> frame = protocol.decode_response(response_bytes)
        >>> frame.registers
        (2,)
    """

    def __init__(self, crc: ICRC):
        self._crc = crc

    def build_request(
        self,
        slave_id: int,
        function_code: int,
        start_address: int,
        quantity: int,
    ) -> RequestFrame:
        """Validate the request fields and return the immutable frame.

        Raises:
            InvalidParameterError: If any field is out of range
        """
        if not MIN_SLAVE_ID <= slave_id <= MAX_SLAVE_ID:
            raise InvalidParameterError(
                f"Slave ID must be {MIN_SLAVE_ID}-{MAX_SLAVE_ID}, got {slave_id}"
            )
        if function_code not in READ_FUNCTION_CODES:
            raise InvalidParameterError(
                f"Function code must be a read function (1-4), got {function_code}"
            )
        if not 0 <= start_address <= MAX_REGISTER_ADDRESS:
            raise InvalidParameterError(
                f"Register address must be 0-{MAX_REGISTER_ADDRESS}, got {start_address}"
            )
        if not MIN_READ_QUANTITY <= quantity <= MAX_READ_QUANTITY:
            raise InvalidParameterError(
                f"Register count must be {MIN_READ_QUANTITY}-{MAX_READ_QUANTITY}, "
                f"got {quantity}"
            )
        if start_address + quantity - 1 > MAX_REGISTER_ADDRESS:
            raise InvalidParameterError(
                f"Read of {quantity} registers at {start_address} exceeds address space"
            )

        header = struct.pack(">BBHH", slave_id, function_code, start_address, quantity)
        return RequestFrame(
            slave_id=slave_id,
            function_code=function_code,
            start_address=start_address,
            quantity=quantity,
            crc=self._crc.calculate(header),
        )

    def encode_read(
        self,
        slave_id: int,
        function_code: int,
        start_address: int,
        quantity: int,
    ) -> bytes:
        """Build a complete read request frame including CRC."""
        frame = self.build_request(slave_id, function_code, start_address, quantity)
        data = frame.to_bytes()

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Built read command: addr=%d, count=%d, frame=%s",
                start_address,
                quantity,
                data.hex(),
            )
        return data

    def decode_response(self, response: Buffer) -> ResponseFrame:
        """Validate and decode a complete response frame.

        Checks are ordered: length, CRC, exception flag, byte count.
        No field is trusted before the CRC has been verified.
        """
        data = bytes(response)

        if len(data) < MIN_RESPONSE_LENGTH:
            raise ShortFrameError(
                f"Response too short: {len(data)} bytes "
                f"(minimum {MIN_RESPONSE_LENGTH})"
            )

        received_crc = struct.unpack("<H", data[-CRC_LENGTH:])[0]
        calculated_crc = self._crc.calculate(data[:-CRC_LENGTH])
        if received_crc != calculated_crc:
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("CRC mismatch on frame %s", data.hex())
            raise CrcMismatchError(received_crc, calculated_crc)

        slave_id, function_code = data[0], data[1]

        if function_code & EXCEPTION_FLAG:
            code = data[2]
            description = ExceptionCode.describe(code)
            _LOGGER.warning(
                "Device exception response: code=0x%02X (%s), function=0x%02X",
                code,
                description,
                function_code & ~EXCEPTION_FLAG,
            )
            raise ExceptionResponseError(
                code,
                function_code=function_code & ~EXCEPTION_FLAG,
                description=description,
            )

        byte_count = data[2]
        payload = data[RESPONSE_HEADER_LENGTH:-CRC_LENGTH]
        if byte_count != len(payload):
            raise MalformedPayloadError(
                f"Byte count {byte_count} does not match payload length {len(payload)}"
            )
        if byte_count % 2:
            raise MalformedPayloadError(f"Odd byte count {byte_count}")

        registers = struct.unpack(f">{byte_count // 2}H", payload)
        return ResponseFrame(
            slave_id=slave_id,
            function_code=function_code,
            registers=tuple(registers),
            crc=received_crc,
        )

    def expected_response_length(self, quantity: int) -> int:
        """Total length of a normal response carrying ``quantity`` registers."""
        return RESPONSE_HEADER_LENGTH + 2 * quantity + CRC_LENGTH

    def expected_length_from_prefix(self, buffer: Buffer) -> Optional[int]:
        """Frame length implied by the bytes received so far.

        Returns None while the prefix is too short to tell. An exception
        frame is always 5 bytes; a normal frame is known once the byte
        count (third byte) has arrived.
        """
        if len(buffer) >= 2 and buffer[1] & EXCEPTION_FLAG:
            return EXCEPTION_RESPONSE_LENGTH
        if len(buffer) >= RESPONSE_HEADER_LENGTH:
            return RESPONSE_HEADER_LENGTH + buffer[2] + CRC_LENGTH
        return None
