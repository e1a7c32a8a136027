"""
Identity registries for ships and cargo.

A Registry maps numeric identifiers to entities of one family and enforces
uniqueness. Registries live on an explicit Registries context that is handed
to decoders and to Port, so independent simulations never share identifiers.
"""

from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Type

from .constants import IMO_NUMBER_MIN, IMO_NUMBER_MAX
from .errors import ConstructionError, NoSuchShipError, NoSuchCargoError


class Registry:
    """
    Identifier -> entity mapping for a single entity family.

    Iteration and snapshot_all() follow registration order.
    """

    def __init__(
        self,
        family: str,
        id_of: Callable[[Any], int],
        missing_error: Type[LookupError],
        id_range: Tuple[int, Optional[int]] = (0, None)
    ):
        """
        Args:
            family: Human readable family name used in error messages
            id_of: Extracts the identifier from an entity
            missing_error: Error raised by lookup() for unknown identifiers
            id_range: Inclusive (min, max) identifier bounds, max None = unbounded
        """
        self.family = family
        self._id_of = id_of
        self._missing_error = missing_error
        self._min_id, self._max_id = id_range
        self._entries: Dict[int, Any] = {}

    def register(self, entity: Any) -> Any:
        """
        Add entity to the registry.

        Returns:
            The registered entity (so construction and registration chain)

        Raises:
            ConstructionError: identifier out of range or already registered
        """
        entity_id = self._id_of(entity)

        if entity_id < self._min_id or (self._max_id is not None and entity_id > self._max_id):
            raise ConstructionError(f"Illegal {self.family} ID: {entity_id}")

        if entity_id in self._entries:
            raise ConstructionError(
                f"{self.family} ID already exists in the registry: {entity_id}")

        self._entries[entity_id] = entity
        return entity

    def lookup(self, entity_id: int) -> Any:
        """Return the entity registered under entity_id"""
        if entity_id not in self._entries:
            raise self._missing_error(
                f"{self.family} ID {entity_id} does not exist in the registry")
        return self._entries[entity_id]

    def exists(self, entity_id: int) -> bool:
        return entity_id in self._entries

    def snapshot_all(self) -> Dict[int, Any]:
        """Defensive copy of every entry, in registration order"""
        return dict(self._entries)

    def reset(self):
        """Discard all entries (test isolation only)"""
        self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._entries.values()))

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self._entries


class Registries:
    """
    Context object holding the ship and cargo registries of one simulation.

    Attributes:
        ships: IMO number -> ship, IMO numbers restricted to 7 digits
        cargo: cargo ID -> cargo, IDs non-negative
    """

    def __init__(self):
        self.ships = Registry(
            'Ship',
            lambda ship: ship.imo_number,
            NoSuchShipError,
            id_range=(IMO_NUMBER_MIN, IMO_NUMBER_MAX)
        )
        self.cargo = Registry(
            'Cargo',
            lambda cargo: cargo.id,
            NoSuchCargoError
        )

    def register_ship(self, ship):
        return self.ships.register(ship)

    def register_cargo(self, cargo):
        return self.cargo.register(cargo)

    def reset(self):
        """Discard every ship and cargo entry"""
        self.ships.reset()
        self.cargo.reset()
