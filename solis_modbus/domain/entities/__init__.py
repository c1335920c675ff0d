"""Domain entities: register definitions and the register map."""

from .register_definition import RegisterDefinition
from .register_map import RegisterMap

__all__ = [
    "RegisterDefinition",
    "RegisterMap",
]
