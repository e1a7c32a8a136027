"""
Quay variants.

A BulkQuay accepts bulk carriers up to a tonnage limit; a ContainerQuay
accepts container ships up to a container-count limit. A quay references at
most one docked ship but does not own it.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from .errors import ConstructionError


def _check_quay(quay_id: int, capacity: int):
    if quay_id < 0:
        raise ConstructionError(f"Quay ID must be greater than or equal to 0: {quay_id}")
    if capacity < 0:
        raise ConstructionError(f"Quay capacity must be greater than or equal to 0: {capacity}")


@dataclass(eq=False)
class BulkQuay:
    """
    Quay for bulk carriers.

    Attributes:
        id: Non-negative quay identifier (not registered)
        max_tonnage: Largest cargo tonnage a docking ship may carry
        ship: Currently docked ship, None when empty
    """
    id: int
    max_tonnage: int
    ship: Optional[Any] = field(default=None, init=False)

    kind: ClassVar[str] = 'BulkQuay'

    def __post_init__(self):
        _check_quay(self.id, self.max_tonnage)

    @property
    def capacity(self) -> int:
        return self.max_tonnage

    def is_empty(self) -> bool:
        return self.ship is None

    def ship_arrives(self, ship):
        self.ship = ship

    def ship_departs(self):
        """Detach and return the docked ship (None if empty)"""
        departing, self.ship = self.ship, None
        return departing

    def __str__(self) -> str:
        docked = self.ship.imo_number if self.ship is not None else 'None'
        return f"BulkQuay {self.id} [Ship: {docked}]"


@dataclass(eq=False)
class ContainerQuay:
    """
    Quay for container ships.

    Attributes:
        id: Non-negative quay identifier (not registered)
        max_containers: Largest container count a docking ship may carry
        ship: Currently docked ship, None when empty
    """
    id: int
    max_containers: int
    ship: Optional[Any] = field(default=None, init=False)

    kind: ClassVar[str] = 'ContainerQuay'

    def __post_init__(self):
        _check_quay(self.id, self.max_containers)

    @property
    def capacity(self) -> int:
        return self.max_containers

    def is_empty(self) -> bool:
        return self.ship is None

    def ship_arrives(self, ship):
        self.ship = ship

    def ship_departs(self):
        """Detach and return the docked ship (None if empty)"""
        departing, self.ship = self.ship, None
        return departing

    def __str__(self) -> str:
        docked = self.ship.imo_number if self.ship is not None else 'None'
        return f"ContainerQuay {self.id} [Ship: {docked}]"


Quay = Union[BulkQuay, ContainerQuay]
