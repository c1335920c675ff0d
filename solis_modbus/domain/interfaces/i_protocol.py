"""IProtocol interface for the Modbus RTU frame codec."""

from abc import ABC, abstractmethod

from ..value_objects.response_frame import ResponseFrame


class IProtocol(ABC):
    """Interface for Modbus frame encoding and decoding.

    The protocol implementation handles Modbus RTU framing, request
    building and response parsing. It is purely functional: no I/O and
    no retries.

    Modbus RTU Frame Structure:
        Request:  [Slave ID][Function][Start Addr][Quantity][CRC-16]
        Response: [Slave ID][Function][Byte Count][Data...][CRC-16]
        Error:    [Slave ID][Function+0x80][Exception Code][CRC-16]
    """

    @abstractmethod
    def encode_read(
        self,
        slave_id: int,
        function_code: int,
        start_address: int,
        quantity: int,
    ) -> bytes:
        """Build a complete read request frame including CRC.

        Raises:
            InvalidParameterError: If any field is out of range
        """

    @abstractmethod
    def decode_response(self, response: bytes) -> ResponseFrame:
        """Validate and decode a complete response frame.

        Raises:
            ShortFrameError: Fewer than 5 bytes
            CrcMismatchError: CRC trailer does not match
            ExceptionResponseError: Device reported a Modbus exception
            MalformedPayloadError: Byte count disagrees with payload
        """

    @abstractmethod
    def expected_response_length(self, quantity: int) -> int:
        """Total byte length of a normal response for ``quantity`` registers."""
