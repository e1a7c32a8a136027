"""
Data types mirroring YAML schema structures.

These dataclasses are populated by loader.py from YAML files.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    DOCK_INTERVAL_DEFAULT,
    UNLOAD_INTERVAL_DEFAULT,
    THROUGHPUT_WINDOW_MINUTES,
    TICK_SUMMARY_INTERVAL,
)


# ============================================================================
# Simulation Configuration
# ============================================================================

@dataclass
class SimulationConfig:
    """Tick engine tunables"""
    dock_interval: int = DOCK_INTERVAL_DEFAULT
    unload_interval: int = UNLOAD_INTERVAL_DEFAULT
    throughput_window: int = THROUGHPUT_WINDOW_MINUTES
    tick_summary_interval: int = TICK_SUMMARY_INTERVAL

    def __post_init__(self):
        for name in ('dock_interval', 'unload_interval', 'throughput_window',
                     'tick_summary_interval'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive: {getattr(self, name)}")


# ============================================================================
# Scenario Definition
# ============================================================================

@dataclass
class CargoDefinition:
    """A cargo item to register"""
    id: int
    kind: str  # BulkCargo, Container
    destination: str
    type: str
    tonnage: Optional[int] = None  # BulkCargo only


@dataclass
class ShipDefinition:
    """A ship to register, with the cargo already aboard"""
    imo: int
    kind: str  # BulkCarrier, ContainerShip
    name: str
    origin: str
    flag: str = 'NOVEMBER'
    capacity: int = 0
    cargo: List[int] = field(default_factory=list)


@dataclass
class QuayDefinition:
    """A quay, optionally with a docked ship"""
    id: int
    kind: str  # BulkQuay, ContainerQuay
    capacity: int
    ship: Optional[int] = None


@dataclass
class MovementDefinition:
    """A pending movement"""
    kind: str  # ShipMovement, CargoMovement
    time: int
    direction: str
    ship: Optional[int] = None  # ShipMovement only
    cargo: List[int] = field(default_factory=list)  # CargoMovement only


@dataclass
class ScenarioDefinition:
    """Complete initial port state"""
    name: str
    time: int = 0
    cargo: List[CargoDefinition] = field(default_factory=list)
    ships: List[ShipDefinition] = field(default_factory=list)
    quays: List[QuayDefinition] = field(default_factory=list)
    queue: List[int] = field(default_factory=list)
    warehouse: List[int] = field(default_factory=list)
    movements: List[MovementDefinition] = field(default_factory=list)
    evaluators: List[str] = field(default_factory=list)
    description: Optional[str] = None
