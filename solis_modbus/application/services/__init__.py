"""Application services: decoding, pacing, retry and serialized exchanges."""

from .modbus_exchange_service import ModbusExchangeService
from .pacing_policy import PacingPolicy
from .register_decoder_service import RegisterDecoder
from .retry_policy import RetryPolicy

__all__ = [
    "ModbusExchangeService",
    "PacingPolicy",
    "RegisterDecoder",
    "RetryPolicy",
]
