"""Domain layer for the Solis Modbus engine.

This layer contains:
- Interfaces: contracts for the CRC, codec and transport
- Value Objects: immutable frames, status and snapshots
- Entities: register definitions and the register map
- Helpers: pure value transformations

The domain layer has ZERO dependencies on external libraries (except Python stdlib).
"""
