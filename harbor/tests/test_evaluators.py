"""
Test statistics evaluators.

Verifies:
- Throughput window: exit at evaluator time T counted for T..T+60, gone at T+61
- Cargo decomposition counts inbound ship manifests and cargo batches only
- Ship flag counts on inbound ships
- Quay occupancy follows the port
- evaluator_by_name builds every kind and rejects unknown names
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from harbor.cargo import BulkCargo, BulkCargoType, Container, ContainerType
from harbor.data_types import SimulationConfig
from harbor.evaluators import (
    EVALUATOR_NAMES,
    CargoDecompositionEvaluator,
    QuayOccupancyEvaluator,
    ShipFlagEvaluator,
    ShipThroughputEvaluator,
    evaluator_by_name,
)
from harbor.movement import CargoMovement, MovementDirection, ShipMovement
from harbor.port import Port
from harbor.quays import BulkQuay, ContainerQuay
from harbor.ships import BulkCarrier, ContainerShip, NauticalFlag


INBOUND = MovementDirection.INBOUND
OUTBOUND = MovementDirection.OUTBOUND


def test_throughput_window():
    """Exit recorded at T stays counted through T+60 inclusive"""
    print("=" * 60)
    print("Test: Throughput Window")
    print("=" * 60)

    evaluator = ShipThroughputEvaluator()
    ship = BulkCarrier(1000000, "Leaver", "AU", NauticalFlag.NOVEMBER, 10)

    for _ in range(5):
        evaluator.elapse_one_minute()
    exit_time = evaluator.time

    evaluator.on_process_movement(ShipMovement(5, OUTBOUND, ship))
    assert evaluator.throughput_per_hour == 1

    while evaluator.time < exit_time + 60:
        evaluator.elapse_one_minute()
        assert evaluator.throughput_per_hour == 1, f"Exit dropped early at {evaluator.time}"

    evaluator.elapse_one_minute()
    assert evaluator.time == exit_time + 61
    assert evaluator.throughput_per_hour == 0, "Exit still counted at T+61"
    print(f"[OK] Exit at {exit_time} counted until {exit_time + 60}\n")


def test_throughput_ignores_inbound_and_cargo():
    evaluator = ShipThroughputEvaluator()
    ship = ContainerShip(1000000, "Arriver", "AU", NauticalFlag.NOVEMBER, 10)

    evaluator.on_process_movement(ShipMovement(0, INBOUND, ship))
    evaluator.on_process_movement(
        CargoMovement(0, OUTBOUND, [Container(1, "AU", ContainerType.STANDARD)]))
    evaluator.on_process_movement(None)
    assert evaluator.throughput_per_hour == 0


def test_throughput_custom_window():
    evaluator = ShipThroughputEvaluator(window=2)
    ship = BulkCarrier(1000000, "Quick", "AU", NauticalFlag.NOVEMBER, 10)
    evaluator.on_process_movement(ShipMovement(0, OUTBOUND, ship))

    evaluator.elapse_one_minute()
    evaluator.elapse_one_minute()
    assert evaluator.throughput_per_hour == 1
    evaluator.elapse_one_minute()
    assert evaluator.throughput_per_hour == 0


def test_cargo_decomposition():
    """Inbound manifests and batches are tallied; outbound ignored"""
    print("=" * 60)
    print("Test: Cargo Decomposition")
    print("=" * 60)

    evaluator = CargoDecompositionEvaluator()

    carrier = BulkCarrier(1000000, "Grainer", "AU", NauticalFlag.NOVEMBER, 1000)
    carrier.load_cargo(BulkCargo(1, "AU", 500, BulkCargoType.GRAIN))
    evaluator.on_process_movement(ShipMovement(1, INBOUND, carrier))

    batch = [
        Container(2, "NZ", ContainerType.REEFER),
        Container(3, "NZ", ContainerType.REEFER),
        BulkCargo(4, "NZ", 20, BulkCargoType.OIL),
    ]
    evaluator.on_process_movement(CargoMovement(2, INBOUND, batch))
    evaluator.on_process_movement(CargoMovement(3, OUTBOUND, batch))

    assert evaluator.cargo_distribution == {'BulkCargo': 2, 'Container': 2}, \
        f"Unexpected cargo distribution {evaluator.cargo_distribution}"
    assert evaluator.bulk_cargo_distribution == {BulkCargoType.GRAIN: 1, BulkCargoType.OIL: 1}
    assert evaluator.container_distribution == {ContainerType.REEFER: 2}
    print("[OK] Inbound cargo tallied\n")


def test_ship_flags():
    evaluator = ShipFlagEvaluator()
    flags = [NauticalFlag.BRAVO, NauticalFlag.HOTEL, NauticalFlag.BRAVO]
    for i, flag in enumerate(flags):
        ship = BulkCarrier(1000000 + i, f"Ship {i}", "AU", flag, 10)
        evaluator.on_process_movement(ShipMovement(i, INBOUND, ship))
        evaluator.on_process_movement(ShipMovement(i + 1, OUTBOUND, ship))

    assert evaluator.flag_statistic(NauticalFlag.BRAVO) == 2
    assert evaluator.flag_statistic(NauticalFlag.HOTEL) == 1
    assert evaluator.flag_statistic(NauticalFlag.WHISKEY) == 0
    assert evaluator.flag_distribution == {NauticalFlag.BRAVO: 2, NauticalFlag.HOTEL: 1}


def test_quay_occupancy():
    port = Port("Occupancy")
    port.add_quay(BulkQuay(0, 100))
    port.add_quay(ContainerQuay(1, 100))
    evaluator = QuayOccupancyEvaluator(port)
    assert evaluator.quays_occupied == 0

    port.quays[1].ship_arrives(ContainerShip(1000000, "Box", "AU", NauticalFlag.NOVEMBER, 1))
    assert evaluator.quays_occupied == 1


def test_evaluator_by_name():
    port = Port("Names", config=SimulationConfig(throughput_window=15))

    for name in EVALUATOR_NAMES:
        evaluator = evaluator_by_name(name, port)
        assert evaluator.name == name, f"{name} built {evaluator.name}"
        assert evaluator.time == 0

    assert evaluator_by_name('ShipThroughputEvaluator', port).window == 15
    assert evaluator_by_name('QuayOccupancyEvaluator', port).port is port

    with pytest.raises(ValueError):
        evaluator_by_name('FooEvaluator', port)


def test_evaluators_never_mutate_movements():
    ship = ContainerShip(1000000, "Box", "AU", NauticalFlag.NOVEMBER, 2)
    ship.load_cargo(Container(1, "AU", ContainerType.STANDARD))
    movement = ShipMovement(0, INBOUND, ship)

    for evaluator in [CargoDecompositionEvaluator(), ShipFlagEvaluator(), ShipThroughputEvaluator()]:
        evaluator.on_process_movement(movement)

    assert len(ship.cargo) == 1


if __name__ == "__main__":
    test_throughput_window()
    test_cargo_decomposition()
    print("=" * 60)
    print("ALL TESTS PASSED")
    print("=" * 60)
