"""
Ship variants and their capability predicates.

BulkCarrier and ContainerShip share one capability set (can_dock, can_load,
load_cargo, unload_cargo, unload_all, manifest) without a common base class.
Dispatch against quays and cargo is done on their `kind` tag.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, List, Optional, Union

from .cargo import BulkCargo, Container
from .constants import IMO_NUMBER_MIN, IMO_NUMBER_MAX
from .errors import ConstructionError, NoCargoError
from .quays import BulkQuay, ContainerQuay


class NauticalFlag(Enum):
    """Nautical status flag flown by a ship"""
    BRAVO = 'BRAVO'        # Carrying dangerous goods
    HOTEL = 'HOTEL'        # Ready to dock
    NOVEMBER = 'NOVEMBER'  # Default, no special status
    WHISKEY = 'WHISKEY'    # Requires medical attention


def _check_ship(imo_number: int, flag: NauticalFlag, capacity: int):
    # 7 digits, no leading zero
    if imo_number < IMO_NUMBER_MIN or imo_number > IMO_NUMBER_MAX:
        raise ConstructionError(f"Illegal imoNumber: {imo_number}")
    if not isinstance(flag, NauticalFlag):
        raise ConstructionError(f"Invalid nautical flag: {flag}")
    if capacity < 0:
        raise ConstructionError(f"The capacity of the ship must be positive: {capacity}")


@dataclass(eq=False)
class BulkCarrier:
    """
    Ship carrying at most one BulkCargo.

    Attributes:
        imo_number: 7-digit IMO number
        name: Ship name
        origin_flag: Origin country tag, cargo destinations must match it
        flag: Nautical status flag
        capacity: Maximum tonnage of a loadable BulkCargo
    """
    imo_number: int
    name: str
    origin_flag: str
    flag: NauticalFlag
    capacity: int
    _cargo: Optional[BulkCargo] = field(default=None, init=False, repr=False)

    kind: ClassVar[str] = 'BulkCarrier'

    def __post_init__(self):
        _check_ship(self.imo_number, self.flag, self.capacity)

    @property
    def cargo(self) -> Optional[BulkCargo]:
        return self._cargo

    def manifest(self) -> List[BulkCargo]:
        """Cargo currently aboard, as a list"""
        return [self._cargo] if self._cargo is not None else []

    def can_dock(self, quay: Any) -> bool:
        """
        Check whether this ship may dock at quay.

        The quay must be a BulkQuay and, when loaded, its max tonnage must
        cover the carried tonnage.
        """
        if getattr(quay, 'kind', None) != BulkQuay.kind:
            return False
        if self._cargo is None:
            return True
        return quay.max_tonnage >= self._cargo.tonnage

    def can_load(self, cargo: Any) -> bool:
        """Empty hold, BulkCargo within capacity, destined for our origin"""
        if self._cargo is not None:
            return False
        if getattr(cargo, 'kind', None) != BulkCargo.kind:
            return False
        return cargo.tonnage <= self.capacity and cargo.destination == self.origin_flag

    def load_cargo(self, cargo: BulkCargo):
        if getattr(cargo, 'kind', None) != BulkCargo.kind:
            raise ValueError(f"BulkCarrier can only load BulkCargo: {cargo}")
        self._cargo = cargo

    def unload_cargo(self) -> BulkCargo:
        """
        Remove and return the carried cargo.

        Raises:
            NoCargoError: if nothing is aboard
        """
        if self._cargo is None:
            raise NoCargoError(f"Cargo has already been unloaded from {self.imo_number}")
        unloaded, self._cargo = self._cargo, None
        return unloaded

    def unload_all(self) -> List[BulkCargo]:
        return [self.unload_cargo()]

    def __str__(self) -> str:
        carrying = self._cargo.type.value if self._cargo is not None else 'nothing'
        return (f"BulkCarrier {self.name} from {self.origin_flag} [{self.flag.value}] "
                f"carrying {carrying}")


@dataclass(eq=False)
class ContainerShip:
    """
    Ship carrying a bounded list of Containers.

    Attributes:
        imo_number: 7-digit IMO number
        name: Ship name
        origin_flag: Origin country tag, container destinations must match it
        flag: Nautical status flag
        capacity: Maximum number of containers aboard
    """
    imo_number: int
    name: str
    origin_flag: str
    flag: NauticalFlag
    capacity: int
    _containers: List[Container] = field(default_factory=list, init=False, repr=False)

    kind: ClassVar[str] = 'ContainerShip'

    def __post_init__(self):
        _check_ship(self.imo_number, self.flag, self.capacity)

    @property
    def cargo(self) -> List[Container]:
        return list(self._containers)

    def manifest(self) -> List[Container]:
        return list(self._containers)

    def can_dock(self, quay: Any) -> bool:
        """ContainerQuay whose max containers covers the containers aboard"""
        if getattr(quay, 'kind', None) != ContainerQuay.kind:
            return False
        return quay.max_containers >= len(self._containers)

    def can_load(self, cargo: Any) -> bool:
        """Container, free slot aboard, destined for our origin"""
        if getattr(cargo, 'kind', None) != Container.kind:
            return False
        return len(self._containers) < self.capacity and cargo.destination == self.origin_flag

    def load_cargo(self, cargo: Container):
        if getattr(cargo, 'kind', None) != Container.kind:
            raise ValueError(f"ContainerShip can only load Containers: {cargo}")
        self._containers.append(cargo)

    def unload_cargo(self) -> List[Container]:
        """
        Remove and return every container aboard.

        Raises:
            NoCargoError: if no containers are aboard
        """
        if not self._containers:
            raise NoCargoError(f"No containers to unload from {self.imo_number}")
        unloaded, self._containers = self._containers, []
        return unloaded

    def unload_all(self) -> List[Container]:
        return self.unload_cargo()

    def __str__(self) -> str:
        return (f"ContainerShip {self.name} from {self.origin_flag} [{self.flag.value}] "
                f"carrying {len(self._containers)} containers")


Ship = Union[BulkCarrier, ContainerShip]
