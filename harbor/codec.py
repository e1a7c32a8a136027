"""
Text codec for entities and port snapshots.

Every entity encodes to one colon-delimited line whose field count is fixed
by its kind tag; identifier lists inside a field are comma-delimited. No
escaping is supported, so names and destinations must not contain ':' or ','.

Decoding validates, in order: field count, kind tag, numeric fields,
enum tokens, registry references, and finally the domain constructors.
Every failure raises BadEncodingError chained to the underlying cause.
"""

import io
import re
from typing import Callable, Dict, Iterable, List, Optional, TextIO, Union

from .cargo import BulkCargo, BulkCargoType, Cargo, Container, ContainerType
from .constants import (
    FIELD_DELIMITER,
    LIST_DELIMITER,
    EMPTY_QUAY_TOKEN,
    SHIP_QUEUE_HEADER,
    STORED_CARGO_HEADER,
    MOVEMENTS_HEADER,
    EVALUATORS_HEADER,
)
from .data_types import SimulationConfig
from .errors import BadEncodingError, HarborError
from .evaluators import evaluator_by_name
from .movement import CargoMovement, Movement, MovementDirection, ShipMovement
from .port import Port
from .quays import BulkQuay, ContainerQuay, Quay
from .registry import Registries
from .ship_queue import ShipQueue
from .ships import BulkCarrier, ContainerShip, NauticalFlag, Ship


# Decimal ASCII only: no '+', whitespace, underscores or non-ASCII digits
_INTEGER = re.compile(r'-?[0-9]+')


# ============================================================================
# Field helpers
# ============================================================================

def _split(encoding: Optional[str], expected: int, delimiter: str = FIELD_DELIMITER) -> List[str]:
    """Split encoding and require exactly `expected` parts"""
    if encoding is None:
        raise BadEncodingError("Encoding was missing")
    parts = encoding.split(delimiter)
    if len(parts) != expected:
        raise BadEncodingError(
            f"Expected {expected} fields but got {len(parts)}", encoding)
    return parts


def _parse_int(fragment: str, what: str) -> int:
    if _INTEGER.fullmatch(fragment) is None:
        raise BadEncodingError(f"{what} cannot be parsed as a number", fragment)
    return int(fragment)


def _parse_count(fragment: str, what: str) -> int:
    count = _parse_int(fragment, what)
    if count < 0:
        raise BadEncodingError(f"{what} can't be negative", fragment)
    return count


def _parse_enum(enum_type, fragment: str):
    try:
        return enum_type(fragment)
    except ValueError as e:
        raise BadEncodingError(
            f"{fragment!r} is not a valid {enum_type.__name__}", fragment) from e


def _parse_id_list(count_fragment: str, list_fragment: str, what: str) -> List[int]:
    """
    Parse a `<n>:<id,id,...>` field pair.

    A zero count requires an empty list. Otherwise the number of list entries
    must equal the count, so a trailing delimiter is rejected.
    """
    count = _parse_count(count_fragment, f"Number of {what}")

    if count == 0 and list_fragment == '':
        return []

    entries = list_fragment.split(LIST_DELIMITER)
    if len(entries) != count:
        raise BadEncodingError(
            f"Expected {count} {what} but got {len(entries)}", list_fragment)

    return [_parse_int(entry, f"{what} ID") for entry in entries]


def _expect_tag(parts: List[str], tag: str, encoding: str):
    if parts[0] != tag:
        raise BadEncodingError(f"Expected {tag} but got {parts[0]!r}", encoding)


def _lookup(registry, entity_id: int, encoding: str):
    try:
        return registry.lookup(entity_id)
    except LookupError as e:
        raise BadEncodingError(
            f"{registry.family} {entity_id} does not exist", encoding) from e


def _build(what: str, encoding: str, factory: Callable, *args):
    """Call a domain constructor, wrapping its rejection as a decode error"""
    try:
        return factory(*args)
    except (HarborError, ValueError) as e:
        raise BadEncodingError(f"Invalid argument(s) for {what}", encoding) from e


def _join_ids(ids: Iterable[int]) -> str:
    return LIST_DELIMITER.join(str(entity_id) for entity_id in ids)


# ============================================================================
# Encoding
# ============================================================================

def _encode_bulk_cargo(cargo: BulkCargo) -> str:
    return f"BulkCargo:{cargo.id}:{cargo.destination}:{cargo.type.value}:{cargo.tonnage}"


def _encode_container(cargo: Container) -> str:
    return f"Container:{cargo.id}:{cargo.destination}:{cargo.type.value}"


def _encode_bulk_carrier(ship: BulkCarrier) -> str:
    cargo_id = ship.cargo.id if ship.cargo is not None else ''
    return (f"BulkCarrier:{ship.imo_number}:{ship.name}:{ship.origin_flag}:"
            f"{ship.flag.value}:{ship.capacity}:{cargo_id}")


def _encode_container_ship(ship: ContainerShip) -> str:
    containers = ship.cargo
    return (f"ContainerShip:{ship.imo_number}:{ship.name}:{ship.origin_flag}:"
            f"{ship.flag.value}:{ship.capacity}:{len(containers)}:"
            f"{_join_ids(c.id for c in containers)}")


def _encode_quay(quay: Quay) -> str:
    docked = quay.ship.imo_number if quay.ship is not None else EMPTY_QUAY_TOKEN
    return f"{quay.kind}:{quay.id}:{docked}:{quay.capacity}"


def _encode_ship_movement(movement: ShipMovement) -> str:
    return f"ShipMovement:{movement.time}:{movement.direction.value}:{movement.ship.imo_number}"


def _encode_cargo_movement(movement: CargoMovement) -> str:
    return (f"CargoMovement:{movement.time}:{movement.direction.value}:"
            f"{len(movement.cargo)}:{_join_ids(c.id for c in movement.cargo)}")


_ENCODERS: Dict[str, Callable] = {
    BulkCargo.kind: _encode_bulk_cargo,
    Container.kind: _encode_container,
    BulkCarrier.kind: _encode_bulk_carrier,
    ContainerShip.kind: _encode_container_ship,
    BulkQuay.kind: _encode_quay,
    ContainerQuay.kind: _encode_quay,
    ShipMovement.kind: _encode_ship_movement,
    CargoMovement.kind: _encode_cargo_movement,
}


def encode(entity) -> str:
    """
    Encode a cargo, ship, quay or movement as one snapshot line.

    Raises:
        TypeError: entity has no known kind tag
    """
    encoder = _ENCODERS.get(getattr(entity, 'kind', None))
    if encoder is None:
        raise TypeError(f"Cannot encode {type(entity).__name__}")
    return encoder(entity)


def encode_ship_queue(queue: ShipQueue) -> str:
    ships = queue.ships
    return f"{SHIP_QUEUE_HEADER}:{len(ships)}:{_join_ids(s.imo_number for s in ships)}"


def encode_stored_cargo(stored_cargo: List[Cargo]) -> str:
    return f"{STORED_CARGO_HEADER}:{len(stored_cargo)}:{_join_ids(c.id for c in stored_cargo)}"


def encode_evaluators(evaluators) -> str:
    names = [evaluator.name for evaluator in evaluators]
    return f"{EVALUATORS_HEADER}:{len(names)}:{LIST_DELIMITER.join(names)}"


def encode_port(port: Port) -> str:
    """
    Encode the complete port state as a multi-line snapshot.

    Registries are written in registration order and pending movements in
    the order they will be applied, so the output is deterministic.
    """
    lines = [port.name, str(port.time)]

    sections = [
        list(port.registries.cargo),
        list(port.registries.ships),
        port.quays,
    ]
    for entities in sections:
        lines.append(str(len(entities)))
        lines.extend(encode(entity) for entity in entities)

    lines.append(encode_ship_queue(port.ship_queue))
    lines.append(encode_stored_cargo(port.stored_cargo))

    movements = port.movements
    lines.append(f"{MOVEMENTS_HEADER}:{len(movements)}")
    lines.extend(encode(movement) for movement in movements)

    lines.append(encode_evaluators(port.evaluators))

    return '\n'.join(lines)


# ============================================================================
# Entity decoding
# ============================================================================

def decode_cargo(encoding: Optional[str], registries: Registries) -> Cargo:
    """
    Decode and register a cargo line.

    `BulkCargo:<id>:<destination>:<type>:<tonnage>` or
    `Container:<id>:<destination>:<type>`
    """
    if encoding is None:
        raise BadEncodingError("Cargo encoding was missing")

    parts = encoding.split(FIELD_DELIMITER)
    if parts[0] == BulkCargo.kind:
        parts = _split(encoding, 5)
        cargo_id = _parse_int(parts[1], "Cargo ID")
        cargo_type = _parse_enum(BulkCargoType, parts[3])
        tonnage = _parse_int(parts[4], "Tonnage")
        cargo = _build(BulkCargo.kind, encoding, BulkCargo, cargo_id, parts[2], tonnage, cargo_type)

    elif parts[0] == Container.kind:
        parts = _split(encoding, 4)
        cargo_id = _parse_int(parts[1], "Cargo ID")
        cargo_type = _parse_enum(ContainerType, parts[3])
        cargo = _build(Container.kind, encoding, Container, cargo_id, parts[2], cargo_type)

    else:
        raise BadEncodingError("Invalid cargo class", parts[0])

    return _build(cargo.kind, encoding, registries.register_cargo, cargo)


def _load_decoded_cargo(ship: Ship, cargo_ids: List[int], registries: Registries, encoding: str):
    for cargo_id in cargo_ids:
        cargo = _lookup(registries.cargo, cargo_id, encoding)
        if not ship.can_load(cargo):
            raise BadEncodingError(f"{cargo} could not be loaded onto {ship}", encoding)
        ship.load_cargo(cargo)


def decode_ship(encoding: Optional[str], registries: Registries) -> Ship:
    """
    Decode and register a ship line, loading the cargo it lists.

    `BulkCarrier:<imo>:<name>:<origin>:<flag>:<capacity>:<cargoId-or-empty>` or
    `ContainerShip:<imo>:<name>:<origin>:<flag>:<capacity>:<n>:<id,id,...>`
    """
    if encoding is None:
        raise BadEncodingError("Ship encoding was missing")

    tag = encoding.split(FIELD_DELIMITER)[0]
    if tag == BulkCarrier.kind:
        parts = _split(encoding, 7)
    elif tag == ContainerShip.kind:
        parts = _split(encoding, 8)
    else:
        raise BadEncodingError("Invalid ship type", tag)

    imo_number = _parse_int(parts[1], "IMO number")
    name, origin = parts[2], parts[3]
    flag = _parse_enum(NauticalFlag, parts[4])
    capacity = _parse_int(parts[5], "Capacity")

    if tag == BulkCarrier.kind:
        cargo_ids = [] if parts[6] == '' else [_parse_int(parts[6], "Cargo ID")]
        ship = _build(tag, encoding, BulkCarrier, imo_number, name, origin, flag, capacity)
    else:
        cargo_ids = _parse_id_list(parts[6], parts[7], "containers")
        ship = _build(tag, encoding, ContainerShip, imo_number, name, origin, flag, capacity)

    _load_decoded_cargo(ship, cargo_ids, registries, encoding)

    return _build(tag, encoding, registries.register_ship, ship)


def decode_quay(encoding: Optional[str], registries: Registries) -> Quay:
    """
    Decode a quay line, docking the referenced ship.

    `BulkQuay:<id>:<imo-or-None>:<maxTonnage>` or
    `ContainerQuay:<id>:<imo-or-None>:<maxContainers>`
    """
    parts = _split(encoding, 4)

    if parts[0] == BulkQuay.kind:
        factory = BulkQuay
    elif parts[0] == ContainerQuay.kind:
        factory = ContainerQuay
    else:
        raise BadEncodingError("Invalid quay type", parts[0])

    quay_id = _parse_int(parts[1], "Quay ID")
    capacity = _parse_int(parts[3], "Quay capacity")

    ship = None
    if parts[2] != EMPTY_QUAY_TOKEN:
        imo_number = _parse_int(parts[2], "IMO number")
        ship = _lookup(registries.ships, imo_number, encoding)

    quay = _build(parts[0], encoding, factory, quay_id, capacity)
    if ship is not None:
        quay.ship_arrives(ship)
    return quay


def decode_movement(encoding: Optional[str], registries: Registries) -> Movement:
    """
    Decode a movement line.

    `ShipMovement:<time>:<direction>:<imo>` or
    `CargoMovement:<time>:<direction>:<n>:<id,id,...>` with n >= 1
    """
    if encoding is None:
        raise BadEncodingError("Movement encoding was missing")

    tag = encoding.split(FIELD_DELIMITER)[0]

    if tag == ShipMovement.kind:
        parts = _split(encoding, 4)
        movement_time = _parse_int(parts[1], "Movement time")
        direction = _parse_enum(MovementDirection, parts[2])
        imo_number = _parse_int(parts[3], "IMO number")
        ship = _lookup(registries.ships, imo_number, encoding)
        return _build(tag, encoding, ShipMovement, movement_time, direction, ship)

    if tag == CargoMovement.kind:
        parts = _split(encoding, 5)
        movement_time = _parse_int(parts[1], "Movement time")
        direction = _parse_enum(MovementDirection, parts[2])
        cargo_ids = _parse_id_list(parts[3], parts[4], "cargo")
        if not cargo_ids:
            raise BadEncodingError("A cargo movement must carry at least one cargo", encoding)
        cargo = [_lookup(registries.cargo, cargo_id, encoding) for cargo_id in cargo_ids]
        return _build(tag, encoding, CargoMovement, movement_time, direction, cargo)

    raise BadEncodingError("Invalid movement type", tag)


def decode_ship_queue(encoding: Optional[str], registries: Registries) -> ShipQueue:
    """Decode `ShipQueue:<n>:<imo,imo,...>`"""
    parts = _split(encoding, 3)
    _expect_tag(parts, SHIP_QUEUE_HEADER, encoding)

    queue = ShipQueue()
    for imo_number in _parse_id_list(parts[1], parts[2], "ships"):
        queue.add(_lookup(registries.ships, imo_number, encoding))
    return queue


def decode_stored_cargo(encoding: Optional[str], registries: Registries) -> List[Cargo]:
    """Decode `StoredCargo:<n>:<id,id,...>`"""
    parts = _split(encoding, 3)
    _expect_tag(parts, STORED_CARGO_HEADER, encoding)

    return [
        _lookup(registries.cargo, cargo_id, encoding)
        for cargo_id in _parse_id_list(parts[1], parts[2], "cargo")
    ]


def decode_evaluators(encoding: Optional[str]) -> List[str]:
    """Decode `Evaluators:<n>:<Name,Name,...>` into evaluator kind names"""
    parts = _split(encoding, 3)
    _expect_tag(parts, EVALUATORS_HEADER, encoding)

    count = _parse_count(parts[1], "Number of evaluators")
    if count == 0 and parts[2] == '':
        return []

    names = parts[2].split(LIST_DELIMITER)
    if len(names) != count:
        raise BadEncodingError(f"Expected {count} evaluators but got {len(names)}", parts[2])
    if '' in names:
        raise BadEncodingError("Evaluator name is empty", parts[2])
    return names


# ============================================================================
# Port snapshot decoding
# ============================================================================

class _LineReader:
    """Line source that returns None at end of input, like readLine()"""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def next_line(self) -> Optional[str]:
        line = self._stream.readline()
        if line == '':
            return None
        if line.endswith('\n'):
            line = line[:-1]
        if line.endswith('\r'):
            line = line[:-1]
        return line

    def require(self, what: str) -> str:
        line = self.next_line()
        if line is None:
            raise BadEncodingError(f"Snapshot ended before {what}")
        return line


def _check_port_invariants(port: Port):
    """
    Reject snapshots where a ship or a cargo item is in two places at once.

    A ship is docked at one quay at most and is never both docked and
    queued, or queued twice. A cargo item is aboard one ship, in the
    warehouse, or awaiting one pending inbound movement, never more than
    one of these.
    """
    docked = set()
    for quay in port.quays:
        if quay.ship is None:
            continue
        if quay.ship.imo_number in docked:
            raise BadEncodingError(
                "Ship is docked at more than one quay", str(quay.ship.imo_number))
        docked.add(quay.ship.imo_number)

    queued = set()
    for ship in port.ship_queue:
        if ship.imo_number in docked:
            raise BadEncodingError("Ship is both docked and queued", str(ship.imo_number))
        if ship.imo_number in queued:
            raise BadEncodingError("Ship is queued more than once", str(ship.imo_number))
        queued.add(ship.imo_number)

    placed = set()
    holders = [ship.manifest() for ship in port.registries.ships] + [port.stored_cargo]
    holders.extend(
        movement.cargo for movement in port.movements
        if movement.kind == CargoMovement.kind and movement.direction is MovementDirection.INBOUND
    )
    for items in holders:
        for cargo in items:
            if cargo.id in placed:
                raise BadEncodingError(
                    "Cargo is held in more than one place", str(cargo.id))
            placed.add(cargo.id)


def decode_port(
    source: Union[str, TextIO],
    registries: Optional[Registries] = None,
    config: Optional[SimulationConfig] = None
) -> Port:
    """
    Rebuild a port, its registries and pending movements from a snapshot.

    Args:
        source: Snapshot text or an open text stream
        registries: Registries to populate (fresh Registries if None)
        config: Tick engine tunables for the decoded port

    Returns:
        Decoded Port

    Raises:
        BadEncodingError: any deviation from the snapshot structure
    """
    if isinstance(source, str):
        source = io.StringIO(source, newline=None)
    if registries is None:
        registries = Registries()

    reader = _LineReader(source)

    name = reader.require("port name")
    port_time = _parse_int(reader.require("port time"), "Port time")

    for _ in range(_parse_count(reader.require("cargo count"), "Number of cargo")):
        decode_cargo(reader.require("cargo"), registries)

    for _ in range(_parse_count(reader.require("ship count"), "Number of ships")):
        decode_ship(reader.require("ship"), registries)

    quays = [
        decode_quay(reader.require("quay"), registries)
        for _ in range(_parse_count(reader.require("quay count"), "Number of quays"))
    ]

    ship_queue = decode_ship_queue(reader.require("ship queue"), registries)
    stored_cargo = decode_stored_cargo(reader.require("stored cargo"), registries)

    port = _build("Port", str(port_time), Port, name, port_time, ship_queue, quays, stored_cargo,
                  registries, config)

    header = reader.require("movements header")
    parts = _split(header, 2)
    _expect_tag(parts, MOVEMENTS_HEADER, header)

    for _ in range(_parse_count(parts[1], "Number of movements")):
        encoded = reader.require("movement")
        movement = decode_movement(encoded, registries)
        try:
            port.add_movement(movement)
        except ValueError as e:
            raise BadEncodingError("Movement occurs before the port time", encoded) from e

    _check_port_invariants(port)

    encoded = reader.require("evaluators")
    for evaluator_name in decode_evaluators(encoded):
        evaluator = _build("Evaluators", encoded, evaluator_by_name, evaluator_name, port)
        port.add_statistics_evaluator(evaluator)

    trailing = reader.next_line()
    if trailing is not None:
        raise BadEncodingError("Expected end of snapshot", trailing)

    return port
