"""
Movement records.

A movement is an immutable, time-stamped instruction to move one ship or a
batch of cargo across the port boundary. Ordering is by action time only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple, Union

from .cargo import Cargo
from .errors import ConstructionError
from .ships import Ship


class MovementDirection(Enum):
    """Direction of travel relative to the port"""
    INBOUND = 'INBOUND'
    OUTBOUND = 'OUTBOUND'


def _check_movement(time: int, direction: MovementDirection):
    if time < 0:
        raise ConstructionError(f"Movement time must be greater than or equal to 0: {time}")
    if not isinstance(direction, MovementDirection):
        raise ConstructionError(f"Invalid movement direction: {direction}")


@dataclass(frozen=True)
class ShipMovement:
    """Ship entering (INBOUND) or leaving (OUTBOUND) the port at `time`"""
    time: int
    direction: MovementDirection
    ship: Ship

    kind: ClassVar[str] = 'ShipMovement'

    def __post_init__(self):
        _check_movement(self.time, self.direction)

    def __str__(self) -> str:
        return (f"{self.direction.value} ShipMovement at {self.time} "
                f"involving the ship {self.ship.name}")


@dataclass(frozen=True)
class CargoMovement:
    """Cargo batch delivered to (INBOUND) or collected from (OUTBOUND) the warehouse"""
    time: int
    direction: MovementDirection
    cargo: Tuple[Cargo, ...]

    kind: ClassVar[str] = 'CargoMovement'

    def __post_init__(self):
        _check_movement(self.time, self.direction)
        # Accept any iterable, store immutably
        object.__setattr__(self, 'cargo', tuple(self.cargo))

    def __str__(self) -> str:
        return (f"{self.direction.value} CargoMovement at {self.time} "
                f"involving {len(self.cargo)} piece(s) of cargo")


Movement = Union[ShipMovement, CargoMovement]
