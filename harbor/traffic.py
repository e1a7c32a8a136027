"""
Synthetic traffic generator.

Builds a reproducible port with quays, ships, cargo and scheduled movements
from a single seed. Used for determinism checks and tick performance runs.
Same seed -> byte-identical snapshot.
"""

from typing import List, Optional

from .cargo import BulkCargo, BulkCargoType, Container, ContainerType
from .constants import TRAFFIC_ORIGINS, TRAFFIC_IMO_BASE
from .data_types import SimulationConfig
from .evaluators import EVALUATOR_NAMES, evaluator_by_name
from .movement import CargoMovement, MovementDirection, ShipMovement
from .port import Port
from .quays import BulkQuay, ContainerQuay
from .registry import Registries
from .rng import make_seed, make_rng, choose
from .ships import BulkCarrier, ContainerShip, NauticalFlag


def build_traffic_port(
    seed: int,
    n_ships: int = 20,
    n_quays: int = 4,
    n_cargo: int = 40,
    horizon: int = 240,
    registries: Optional[Registries] = None,
    config: Optional[SimulationConfig] = None
) -> Port:
    """
    Build a synthetic port scenario.

    Layout:
    - quays alternate BulkQuay / ContainerQuay
    - each ship arrives once (INBOUND) in the first half of the horizon and
      leaves (OUTBOUND) 20+ minutes later
    - cargo is destined for a ship origin and delivered in inbound batches
    - every evaluator kind is attached

    Args:
        seed: Traffic seed
        n_ships: Ships to register
        n_quays: Quays to create
        n_cargo: Cargo items to register
        horizon: Minutes over which movements are spread (>= 4)
        registries: Registries to populate (fresh if None)
        config: Tick engine tunables

    Returns:
        Port at minute 0 with every movement pending
    """
    if registries is None:
        registries = Registries()

    port = Port(f"Synthetic-{seed}", registries=registries, config=config)
    half = max(2, horizon // 2)

    # Quays
    for i in range(n_quays):
        rng = make_rng(make_seed(seed, "quays", i))
        if i % 2 == 0:
            port.add_quay(BulkQuay(i, int(rng.integers(100, 1000))))
        else:
            port.add_quay(ContainerQuay(i, int(rng.integers(5, 50))))

    # Cargo
    cargo_items = []
    for i in range(n_cargo):
        rng = make_rng(make_seed(seed, "cargo", i))
        destination = choose(rng, TRAFFIC_ORIGINS)
        if rng.random() < 0.5:
            cargo = BulkCargo(i, destination, int(rng.integers(10, 500)),
                              choose(rng, list(BulkCargoType)))
        else:
            cargo = Container(i, destination, choose(rng, list(ContainerType)))
        cargo_items.append(registries.register_cargo(cargo))

    # Ships, each with one arrival and one departure
    for i in range(n_ships):
        rng = make_rng(make_seed(seed, "ships", i))
        ship_type = BulkCarrier if rng.random() < 0.5 else ContainerShip
        capacity = int(rng.integers(100, 1000)) if ship_type is BulkCarrier else int(rng.integers(5, 30))
        ship = registries.register_ship(ship_type(
            TRAFFIC_IMO_BASE + i,
            f"Vessel-{i:04d}",
            choose(rng, TRAFFIC_ORIGINS),
            choose(rng, list(NauticalFlag)),
            capacity
        ))

        arrival = int(rng.integers(1, half))
        departure = arrival + 20 + int(rng.integers(0, half))
        port.add_movement(ShipMovement(arrival, MovementDirection.INBOUND, ship))
        port.add_movement(ShipMovement(departure, MovementDirection.OUTBOUND, ship))

    # Cargo deliveries in batches of up to 5
    for batch_index, start in enumerate(range(0, n_cargo, 5)):
        rng = make_rng(make_seed(seed, "batches", batch_index))
        batch: List = cargo_items[start:start + 5]
        port.add_movement(CargoMovement(int(rng.integers(1, half)), MovementDirection.INBOUND, batch))

    for name in EVALUATOR_NAMES:
        port.add_statistics_evaluator(evaluator_by_name(name, port))

    return port
