"""
Cargo variants.

Cargo is a closed set of two immutable records: BulkCargo (tonnage of a bulk
commodity) and Container (one container of a given type). Each carries a
`kind` tag used by the codec and by ship capability checks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from .errors import ConstructionError


class BulkCargoType(Enum):
    """Bulk commodity carried by a BulkCargo"""
    GRAIN = 'GRAIN'
    MINERALS = 'MINERALS'
    COAL = 'COAL'
    OIL = 'OIL'
    OTHER = 'OTHER'


class ContainerType(Enum):
    """Physical type of a Container"""
    STANDARD = 'STANDARD'
    REEFER = 'REEFER'
    OPEN_TOP = 'OPEN_TOP'
    FLAT_RACK = 'FLAT_RACK'
    TANKER = 'TANKER'
    OTHER = 'OTHER'


def _check_cargo_id(cargo_id: int):
    if cargo_id < 0:
        raise ConstructionError(f"Cargo ID must be greater than or equal to 0: {cargo_id}")


@dataclass(frozen=True)
class BulkCargo:
    """
    Bulk commodity measured in tonnes.

    Attributes:
        id: Non-negative cargo identifier
        destination: Destination tag, matched against ship origin when loading
        tonnage: Non-negative weight in tonnes
        type: Commodity carried
    """
    id: int
    destination: str
    tonnage: int
    type: BulkCargoType

    kind: ClassVar[str] = 'BulkCargo'

    def __post_init__(self):
        _check_cargo_id(self.id)
        if self.tonnage < 0:
            raise ConstructionError(
                f"The cargo tonnage must be greater than or equal to 0: {self.tonnage}")
        if not isinstance(self.type, BulkCargoType):
            raise ConstructionError(f"Invalid bulk cargo type: {self.type}")

    def __str__(self) -> str:
        return f"BulkCargo {self.id} to {self.destination} [{self.type.value} - {self.tonnage}]"


@dataclass(frozen=True)
class Container:
    """
    A single shipping container.

    Attributes:
        id: Non-negative cargo identifier
        destination: Destination tag, matched against ship origin when loading
        type: Container type
    """
    id: int
    destination: str
    type: ContainerType

    kind: ClassVar[str] = 'Container'

    def __post_init__(self):
        _check_cargo_id(self.id)
        if not isinstance(self.type, ContainerType):
            raise ConstructionError(f"Invalid container type: {self.type}")

    def __str__(self) -> str:
        return f"Container {self.id} to {self.destination} [{self.type.value}]"


Cargo = Union[BulkCargo, Container]
