"""
Test the entity text codec.

Verifies:
- Entity lines decode, register and re-encode to the same text
- ShipQueue / StoredCargo / Evaluators list fields (empty, counts, trailing delimiters)
- Malformed numbers, enum tokens, tags and field counts raise BadEncodingError
- Unknown references and rejected constructors raise BadEncodingError with a cause
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from harbor.cargo import BulkCargoType, ContainerType
from harbor.codec import (
    decode_cargo,
    decode_evaluators,
    decode_movement,
    decode_quay,
    decode_ship,
    decode_ship_queue,
    decode_stored_cargo,
    encode,
    encode_ship_queue,
    encode_stored_cargo,
)
from harbor.errors import BadEncodingError, ConstructionError, NoSuchShipError
from harbor.movement import MovementDirection
from harbor.ship_queue import ShipQueue


# ============================================================================
# Entities
# ============================================================================

def test_cargo_lines(registries):
    """Cargo lines decode, register and encode back unchanged"""
    print("=" * 60)
    print("Test: Cargo Lines")
    print("=" * 60)

    for line in ["BulkCargo:1:AU:GRAIN:300", "Container:2:NZ:FLAT_RACK", "BulkCargo:0::OIL:0"]:
        cargo = decode_cargo(line, registries)
        assert encode(cargo) == line, f"{line} re-encoded as {encode(cargo)}"
        assert registries.cargo.lookup(cargo.id) is cargo

    bulk = registries.cargo.lookup(1)
    assert bulk.type is BulkCargoType.GRAIN and bulk.tonnage == 300
    assert registries.cargo.lookup(2).type is ContainerType.FLAT_RACK
    print("[OK] Cargo lines round-trip\n")


def test_ship_lines(registries):
    decode_cargo("BulkCargo:1:AU:COAL:50", registries)
    decode_cargo("Container:2:SG:STANDARD", registries)
    decode_cargo("Container:3:SG:REEFER", registries)

    lines = [
        "BulkCarrier:1000001:Coal Hauler:AU:BRAVO:100:1",
        "BulkCarrier:1000002:Empty Hauler:AU:NOVEMBER:100:",
        "ContainerShip:1000003:Lion City:SG:HOTEL:4:2:2,3",
        "ContainerShip:1000004:Ghost:SG:WHISKEY:4:0:",
    ]
    for line in lines:
        ship = decode_ship(line, registries)
        assert encode(ship) == line, f"{line} re-encoded as {encode(ship)}"

    assert registries.ships.lookup(1000001).cargo.id == 1
    assert [c.id for c in registries.ships.lookup(1000003).cargo] == [2, 3]


def test_quay_lines(registries):
    ship = decode_ship("ContainerShip:1000000:Box:AU:NOVEMBER:1:0:", registries)

    quay = decode_quay("ContainerQuay:3:1000000:10", registries)
    assert quay.ship is ship
    assert encode(quay) == "ContainerQuay:3:1000000:10"

    quay = decode_quay("BulkQuay:4:None:120", registries)
    assert quay.is_empty() and quay.max_tonnage == 120
    assert encode(quay) == "BulkQuay:4:None:120"


def test_movement_lines(registries):
    decode_ship("BulkCarrier:1000000:Mover:AU:NOVEMBER:1:", registries)
    decode_cargo("Container:7:AU:STANDARD", registries)
    decode_cargo("Container:8:AU:STANDARD", registries)

    movement = decode_movement("ShipMovement:15:OUTBOUND:1000000", registries)
    assert movement.direction is MovementDirection.OUTBOUND
    assert encode(movement) == "ShipMovement:15:OUTBOUND:1000000"

    movement = decode_movement("CargoMovement:2:INBOUND:2:7,8", registries)
    assert [c.id for c in movement.cargo] == [7, 8]
    assert encode(movement) == "CargoMovement:2:INBOUND:2:7,8"


def test_decode_is_idempotent_after_first_decode(registries):
    """decode(encode(decode(E))) equals decode(E)"""
    from harbor.registry import Registries

    line = "ContainerShip:1000003:Lion City:SG:HOTEL:4:1:2"
    decode_cargo("Container:2:SG:STANDARD", registries)
    first = decode_ship(line, registries)

    other = Registries()
    decode_cargo("Container:2:SG:STANDARD", other)
    second = decode_ship(encode(first), other)

    assert encode(second) == encode(first)


# ============================================================================
# List fields
# ============================================================================

def test_ship_queue_counts(registries):
    """`ShipQueue:0:` is empty; `ShipQueue:0:1000009` is malformed"""
    print("=" * 60)
    print("Test: ShipQueue List Fields")
    print("=" * 60)

    queue = decode_ship_queue("ShipQueue:0:", registries)
    assert len(queue) == 0

    with pytest.raises(BadEncodingError):
        decode_ship_queue("ShipQueue:0:1000009", registries)

    decode_ship("BulkCarrier:1000009:One:AU:NOVEMBER:1:", registries)
    decode_ship("BulkCarrier:1000010:Two:AU:NOVEMBER:1:", registries)

    queue = decode_ship_queue("ShipQueue:2:1000009,1000010", registries)
    assert [s.imo_number for s in queue] == [1000009, 1000010]
    assert encode_ship_queue(queue) == "ShipQueue:2:1000009,1000010"
    assert encode_ship_queue(ShipQueue()) == "ShipQueue:0:"

    for line in [
        "ShipQueue:2:1000009,1000010,",   # trailing delimiter
        "ShipQueue:1:1000009,1000010",    # count too small
        "ShipQueue:3:1000009,1000010",    # count too large
        "ShipQueue:-1:",                  # negative count
        "ShipQueue:1:",                   # count but no ids
        "ShipQueue:1:1000011",            # unknown ship
        "ShipQueue:1",                    # missing field
        "ShipQueue:1:1000009:",           # extra field
        "Queue:1:1000009",                # wrong header
    ]:
        with pytest.raises(BadEncodingError):
            decode_ship_queue(line, registries)

    print("[OK] Malformed queue lines rejected\n")


def test_stored_cargo(registries):
    assert decode_stored_cargo("StoredCargo:0:", registries) == []

    decode_cargo("Container:1:AU:STANDARD", registries)
    decode_cargo("Container:2:AU:STANDARD", registries)
    stored = decode_stored_cargo("StoredCargo:2:2,1", registries)
    assert [c.id for c in stored] == [2, 1]
    assert encode_stored_cargo(stored) == "StoredCargo:2:2,1"

    with pytest.raises(BadEncodingError):
        decode_stored_cargo("StoredCargo:1:3", registries)
    with pytest.raises(BadEncodingError):
        decode_stored_cargo("StoredCargo:2:1,", registries)


def test_evaluator_names():
    assert decode_evaluators("Evaluators:0:") == []
    assert decode_evaluators("Evaluators:2:ShipFlagEvaluator,QuayOccupancyEvaluator") == [
        "ShipFlagEvaluator", "QuayOccupancyEvaluator"]

    with pytest.raises(BadEncodingError):
        decode_evaluators("Evaluators:1:")
    with pytest.raises(BadEncodingError):
        decode_evaluators("Evaluators:0:ShipFlagEvaluator")
    with pytest.raises(BadEncodingError):
        decode_evaluators("Movements:0:")


# ============================================================================
# Malformed entities
# ============================================================================

@pytest.mark.parametrize("line", [
    None,
    "",
    "BulkCargo:1:AU:GRAIN",            # missing tonnage
    "BulkCargo:1:AU:GRAIN:10:extra",   # extra field
    "Container:x:AU:STANDARD",         # non-numeric id
    "Container:+1:AU:STANDARD",        # sign not accepted
    "Container: 1:AU:STANDARD",        # whitespace not accepted
    "Container:1_0:AU:STANDARD",       # underscore not accepted
    "Container:1:AU:standard",         # enum tokens are case sensitive
    "Container:1:AU:GRAIN",            # bulk type on a container
    "BulkCargo:1:AU:REEFER:10",        # container type on bulk
    "BulkCargo:1:AU:GRAIN:-10",        # negative tonnage
    "Container:-1:AU:STANDARD",        # negative id
    "Crate:1:AU:STANDARD",             # unknown tag
])
def test_malformed_cargo(registries, line):
    with pytest.raises(BadEncodingError):
        decode_cargo(line, registries)
    assert len(registries.cargo) == 0, "Malformed cargo was registered"


@pytest.mark.parametrize("line", [
    "BulkCarrier:1000000:Name:AU:NOVEMBER:100",           # missing cargo field
    "BulkCarrier:100000:Name:AU:NOVEMBER:100:",           # 6-digit IMO
    "BulkCarrier:1000000:Name:AU:PAPA:100:",              # unknown flag
    "BulkCarrier:1000000:Name:AU:NOVEMBER:-1:",           # negative capacity
    "BulkCarrier:1000000:Name:AU:NOVEMBER:100:99",        # unknown cargo
    "ContainerShip:1000000:Name:AU:NOVEMBER:5:1:",        # count without ids
    "ContainerShip:1000000:Name:AU:NOVEMBER:5:0:1",       # ids without count
    "ContainerShip:1000000:Name:AU:NOVEMBER:5:1:1,",      # trailing delimiter
    "Tanker:1000000:Name:AU:NOVEMBER:5:",                 # unknown tag
])
def test_malformed_ship(registries, line):
    with pytest.raises(BadEncodingError):
        decode_ship(line, registries)
    assert len(registries.ships) == 0, "Malformed ship was registered"


def test_ship_cargo_must_be_loadable(registries):
    """Listed cargo must exist and pass can_load"""
    decode_cargo("BulkCargo:1:NZ:GRAIN:10", registries)        # wrong destination
    decode_cargo("BulkCargo:2:AU:GRAIN:1000", registries)      # too heavy
    decode_cargo("Container:3:AU:STANDARD", registries)
    decode_cargo("Container:4:AU:STANDARD", registries)

    for line in [
        "BulkCarrier:1000000:Name:AU:NOVEMBER:100:1",
        "BulkCarrier:1000000:Name:AU:NOVEMBER:100:2",
        "BulkCarrier:1000000:Name:AU:NOVEMBER:100:3",
        "ContainerShip:1000000:Name:AU:NOVEMBER:1:2:3,4",      # over capacity
    ]:
        with pytest.raises(BadEncodingError):
            decode_ship(line, registries)


def test_duplicate_registration_is_bad_encoding(registries):
    """Constructor rejections surface as BadEncodingError with the cause chained"""
    decode_ship("BulkCarrier:1000000:Name:AU:NOVEMBER:1:", registries)

    with pytest.raises(BadEncodingError) as excinfo:
        decode_ship("BulkCarrier:1000000:Twin:AU:NOVEMBER:1:", registries)
    assert isinstance(excinfo.value.__cause__, ConstructionError)
    assert excinfo.value.fragment == "BulkCarrier:1000000:Twin:AU:NOVEMBER:1:"


def test_unknown_reference_chains_lookup_error(registries):
    with pytest.raises(BadEncodingError) as excinfo:
        decode_quay("BulkQuay:0:1234567:10", registries)
    assert isinstance(excinfo.value.__cause__, NoSuchShipError)


@pytest.mark.parametrize("line", [
    "BulkQuay:0:None",
    "BulkQuay:0:None:10:5",
    "DryDock:0:None:10",
    "BulkQuay:-1:None:10",
    "BulkQuay:0:None:-10",
    "BulkQuay:0:none:10",
    "BulkQuay:x:None:10",
])
def test_malformed_quay(registries, line):
    with pytest.raises(BadEncodingError):
        decode_quay(line, registries)


@pytest.mark.parametrize("line", [
    "ShipMovement:5:INBOUND",
    "ShipMovement:5:SIDEWAYS:1000000",
    "ShipMovement:-5:INBOUND:1000000",
    "ShipMovement:5:INBOUND:2000000",
    "CargoMovement:5:INBOUND:0:",          # at least one cargo
    "CargoMovement:5:INBOUND:1:",
    "CargoMovement:5:INBOUND:1:9",         # unknown cargo
    "CargoMovement:5:INBOUND:2:1,",
    "CargoMovement:5:INBOUND:1:1:extra",
    "BoatMovement:5:INBOUND:1000000",
])
def test_malformed_movement(registries, line):
    decode_ship("BulkCarrier:1000000:Mover:AU:NOVEMBER:1:", registries)
    decode_cargo("Container:1:AU:STANDARD", registries)

    with pytest.raises(BadEncodingError):
        decode_movement(line, registries)


def test_encode_rejects_unknown_objects():
    with pytest.raises(TypeError):
        encode(object())


if __name__ == "__main__":
    from harbor.registry import Registries

    test_cargo_lines(Registries())
    test_ship_queue_counts(Registries())
    print("=" * 60)
    print("ALL TESTS PASSED")
    print("=" * 60)
