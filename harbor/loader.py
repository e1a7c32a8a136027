"""
YAML data loader with schema validation.

Loads simulation configuration and port scenarios from YAML files and
validates them against JSON schemas. Also reads and writes text snapshots.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .cargo import BulkCargo, BulkCargoType, Container, ContainerType
from .codec import decode_port, encode_port
from .data_types import (
    SimulationConfig, ScenarioDefinition,
    CargoDefinition, ShipDefinition, QuayDefinition, MovementDefinition
)
from .errors import HarborError
from .evaluators import evaluator_by_name
from .movement import CargoMovement, MovementDirection, ShipMovement
from .port import Port
from .quays import BulkQuay, ContainerQuay
from .registry import Registries
from .ship_queue import ShipQueue
from .ships import BulkCarrier, ContainerShip, NauticalFlag


# JSON schemas shipped with the package
SCHEMA_DIR = Path(__file__).parent / "schemas"


class DataLoadError(HarborError):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}") from e


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        raise DataLoadError(f"Schema not found: {schema_path}")

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}") from e
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}") from e


# ============================================================================
# Configuration
# ============================================================================

def load_config(file_path: Path, schema_dir: Optional[Path] = SCHEMA_DIR) -> SimulationConfig:
    """Load tick engine configuration from the `simulation:` block of a YAML file"""
    data = load_yaml(file_path)

    # Validate if schema dir given
    if schema_dir:
        validate_against_schema(data, Path(schema_dir) / "config.schema.json", file_path)

    try:
        return SimulationConfig(**data.get('simulation', {}))
    except (TypeError, ValueError) as e:
        raise DataLoadError(f"Invalid simulation config in {file_path}: {e}") from e


# ============================================================================
# Scenarios
# ============================================================================

def parse_scenario(data: dict) -> ScenarioDefinition:
    """Convert a validated scenario dict into dataclasses"""
    port_data = data['port']

    return ScenarioDefinition(
        name=port_data['name'],
        time=port_data.get('time', 0),
        cargo=[CargoDefinition(**c) for c in data.get('cargo', [])],
        ships=[ShipDefinition(**s) for s in data.get('ships', [])],
        quays=[QuayDefinition(**q) for q in data.get('quays', [])],
        queue=data.get('queue', []),
        warehouse=data.get('warehouse', []),
        movements=[MovementDefinition(**m) for m in data.get('movements', [])],
        evaluators=data.get('evaluators', []),
        description=port_data.get('description')
    )


def _build_cargo(definition: CargoDefinition):
    if definition.kind == BulkCargo.kind:
        return BulkCargo(definition.id, definition.destination, definition.tonnage or 0,
                         BulkCargoType(definition.type))
    return Container(definition.id, definition.destination, ContainerType(definition.type))


def _build_ship(definition: ShipDefinition, registries: Registries):
    ship_type = BulkCarrier if definition.kind == BulkCarrier.kind else ContainerShip
    ship = ship_type(definition.imo, definition.name, definition.origin,
                     NauticalFlag(definition.flag), definition.capacity)

    for cargo_id in definition.cargo:
        cargo = registries.cargo.lookup(cargo_id)
        if not ship.can_load(cargo):
            raise ValueError(f"{cargo} could not be loaded onto {ship}")
        ship.load_cargo(cargo)

    return ship


def _build_quay(definition: QuayDefinition, registries: Registries):
    quay_type = BulkQuay if definition.kind == BulkQuay.kind else ContainerQuay
    quay = quay_type(definition.id, definition.capacity)
    if definition.ship is not None:
        quay.ship_arrives(registries.ships.lookup(definition.ship))
    return quay


def _build_movement(definition: MovementDefinition, registries: Registries):
    direction = MovementDirection(definition.direction)
    if definition.kind == ShipMovement.kind:
        return ShipMovement(definition.time, direction, registries.ships.lookup(definition.ship))
    cargo = [registries.cargo.lookup(cargo_id) for cargo_id in definition.cargo]
    return CargoMovement(definition.time, direction, cargo)


def build_port(
    scenario: ScenarioDefinition,
    registries: Optional[Registries] = None,
    config: Optional[SimulationConfig] = None
) -> Port:
    """
    Build a Port (and populate registries) from a scenario definition.

    Entities are registered in definition order, which is also the order
    they are written to a snapshot.
    """
    if registries is None:
        registries = Registries()

    for cargo_def in scenario.cargo:
        registries.register_cargo(_build_cargo(cargo_def))

    for ship_def in scenario.ships:
        registries.register_ship(_build_ship(ship_def, registries))

    quays = [_build_quay(q, registries) for q in scenario.quays]

    ship_queue = ShipQueue()
    for imo_number in scenario.queue:
        ship_queue.add(registries.ships.lookup(imo_number))

    stored_cargo = [registries.cargo.lookup(cargo_id) for cargo_id in scenario.warehouse]

    port = Port(scenario.name, scenario.time, ship_queue, quays, stored_cargo,
                registries=registries, config=config)

    for movement_def in scenario.movements:
        port.add_movement(_build_movement(movement_def, registries))

    for evaluator_name in scenario.evaluators:
        port.add_statistics_evaluator(evaluator_by_name(evaluator_name, port))

    return port


def load_scenario(
    file_path: Path,
    registries: Optional[Registries] = None,
    config: Optional[SimulationConfig] = None,
    schema_dir: Optional[Path] = SCHEMA_DIR,
    verbose: bool = False
) -> Port:
    """Load a port scenario from YAML"""
    data = load_yaml(file_path)

    # Validate if schema dir given
    if schema_dir:
        validate_against_schema(data, Path(schema_dir) / "scenario.schema.json", file_path)

    scenario = parse_scenario(data)

    try:
        port = build_port(scenario, registries, config)
    except (HarborError, LookupError, ValueError) as e:
        raise DataLoadError(f"Invalid scenario {file_path}: {e}") from e

    if verbose:
        print(f"[OK] Scenario loaded: {port.name} at minute {port.time}, "
              f"{len(port.registries.ships)} ships, {len(port.registries.cargo)} cargo, "
              f"{len(port.quays)} quays, {len(port.movements)} pending movements")

    return port


# ============================================================================
# Text snapshots
# ============================================================================

def load_snapshot(
    file_path: Path,
    registries: Optional[Registries] = None,
    config: Optional[SimulationConfig] = None,
    verbose: bool = False
) -> Port:
    """
    Load a port from a text snapshot file.

    Raises:
        DataLoadError: file missing
        BadEncodingError: file does not follow the snapshot format
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    with open(file_path, 'r') as f:
        port = decode_port(f, registries, config)

    if verbose:
        print(f"[OK] Snapshot loaded: {port.name} at minute {port.time}, "
              f"{len(port.registries.ships)} ships, {len(port.quays)} quays")

    return port


def save_snapshot(port: Port, file_path: Path):
    """Write the port snapshot followed by a newline"""
    with open(Path(file_path), 'w', newline='') as f:
        f.write(encode_port(port))
        f.write('\n')


def load_all_data(data_root: Path, schema_dir: Optional[Path] = SCHEMA_DIR) -> dict:
    """Load every scenario under data_root/scenarios with the shared config

    Each scenario gets its own Registries. Returns dict with keys: config, ports
    """
    data_root = Path(data_root)

    config = load_config(data_root / "config" / "simulation.yaml", schema_dir)

    scenario_dir = data_root / "scenarios"
    if not scenario_dir.exists():
        raise DataLoadError(f"Scenario directory not found: {scenario_dir}")

    ports = [
        load_scenario(path, Registries(), config, schema_dir)
        for path in sorted(scenario_dir.glob("*.yaml"))
    ]
    if not ports:
        raise DataLoadError(f"No scenario files found in {scenario_dir}")

    return {
        'config': config,
        'ports': ports
    }
