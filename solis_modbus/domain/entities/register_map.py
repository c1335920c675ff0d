"""RegisterMap entity: the ordered, immutable register table."""

import logging
from typing import Dict, Iterable, Iterator, List, Tuple

from .register_definition import RegisterDefinition

_LOGGER = logging.getLogger(__name__)


class RegisterMap:
    """Ordered collection of register definitions.

    Provides lookup by quantity name and by poll group. Names and start
    addresses must be unique; the table order is preserved and drives
    the read order inside a group.

    Example:
        >>> register_map = RegisterMap(definitions)
        >>> register_map["battery_soc"].address
        33139
        >>> [d.name for d in register_map.group("house")]
        ['house_consumption', 'backup_consumption']
    """

    def __init__(self, definitions: Iterable[RegisterDefinition]):
        self._definitions: Tuple[RegisterDefinition, ...] = tuple(definitions)
        self._by_name: Dict[str, RegisterDefinition] = {}
        seen_addresses: Dict[int, str] = {}

        for definition in self._definitions:
            if definition.name in self._by_name:
                raise ValueError(f"Duplicate register name: {definition.name}")
            if definition.address in seen_addresses:
                raise ValueError(
                    f"Duplicate register address {definition.address}: "
                    f"{seen_addresses[definition.address]} and {definition.name}"
                )
            self._by_name[definition.name] = definition
            seen_addresses[definition.address] = definition.name

        _LOGGER.debug(
            "Register map built: %d quantities in %d groups",
            len(self._definitions),
            len(self.groups),
        )

    def __getitem__(self, name: str) -> RegisterDefinition:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown register: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[RegisterDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def groups(self) -> List[str]:
        """Group names in first-appearance order."""
        ordered: List[str] = []
        for definition in self._definitions:
            if definition.group not in ordered:
                ordered.append(definition.group)
        return ordered

    def group(self, group: str) -> List[RegisterDefinition]:
        """All definitions of one group, in table order."""
        return [d for d in self._definitions if d.group == group]
