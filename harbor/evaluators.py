"""
Statistics evaluators.

Evaluators observe every processed movement and every elapsed minute but
never mutate simulation state. A port holds at most one evaluator per kind;
the kind is the class name, which is also its snapshot encoding.
"""

from collections import Counter
from typing import Dict, List

from .cargo import BulkCargo, BulkCargoType, Container, ContainerType
from .constants import THROUGHPUT_WINDOW_MINUTES
from .movement import CargoMovement, MovementDirection, ShipMovement
from .ships import NauticalFlag


class StatisticsEvaluator:
    """
    Common evaluator behaviour.

    Attributes:
        time: Minutes elapsed since the evaluator was created
    """

    def __init__(self):
        self.time: int = 0

    @property
    def name(self) -> str:
        return type(self).__name__

    def on_process_movement(self, movement):
        """Called once for every movement the port processes"""
        pass

    def elapse_one_minute(self):
        """Called once per simulated minute, after movements are processed"""
        self.time += 1


class ShipThroughputEvaluator(StatisticsEvaluator):
    """
    Counts ships that left the port within the last `window` minutes.

    An exit recorded at evaluator time T is counted while time <= T + window.
    """

    def __init__(self, window: int = THROUGHPUT_WINDOW_MINUTES):
        super().__init__()
        self.window = window
        self._exit_times: List[int] = []

    @property
    def throughput_per_hour(self) -> int:
        return len(self._exit_times)

    def on_process_movement(self, movement):
        if movement is None or movement.kind != ShipMovement.kind:
            return
        if movement.direction is MovementDirection.OUTBOUND:
            self._exit_times.append(self.time)

    def elapse_one_minute(self):
        super().elapse_one_minute()
        self._exit_times = [t for t in self._exit_times if self.time <= t + self.window]


class CargoDecompositionEvaluator(StatisticsEvaluator):
    """
    Frequency tables of cargo arriving at the port.

    Only INBOUND movements are counted. Every item aboard an inbound ship, or
    carried by an inbound cargo batch, increments its class count and its
    bulk-type or container-type count.
    """

    def __init__(self):
        super().__init__()
        self._cargo_distribution: Counter = Counter()
        self._bulk_cargo_distribution: Counter = Counter()
        self._container_distribution: Counter = Counter()

    @property
    def cargo_distribution(self) -> Dict[str, int]:
        return dict(self._cargo_distribution)

    @property
    def bulk_cargo_distribution(self) -> Dict[BulkCargoType, int]:
        return dict(self._bulk_cargo_distribution)

    @property
    def container_distribution(self) -> Dict[ContainerType, int]:
        return dict(self._container_distribution)

    def on_process_movement(self, movement):
        if movement is None or movement.direction is not MovementDirection.INBOUND:
            return

        if movement.kind == ShipMovement.kind:
            items = movement.ship.manifest()
        elif movement.kind == CargoMovement.kind:
            items = movement.cargo
        else:
            return

        for cargo in items:
            self._cargo_distribution[cargo.kind] += 1
            if cargo.kind == BulkCargo.kind:
                self._bulk_cargo_distribution[cargo.type] += 1
            elif cargo.kind == Container.kind:
                self._container_distribution[cargo.type] += 1


class QuayOccupancyEvaluator(StatisticsEvaluator):
    """Number of quays with a docked ship, computed on demand"""

    def __init__(self, port):
        super().__init__()
        self.port = port

    @property
    def quays_occupied(self) -> int:
        return sum(1 for quay in self.port.quays if not quay.is_empty())


class ShipFlagEvaluator(StatisticsEvaluator):
    """Frequency of nautical flags flown by ships entering the port"""

    def __init__(self):
        super().__init__()
        self._flag_distribution: Counter = Counter()

    @property
    def flag_distribution(self) -> Dict[NauticalFlag, int]:
        return dict(self._flag_distribution)

    def flag_statistic(self, flag: NauticalFlag) -> int:
        return self._flag_distribution.get(flag, 0)

    def on_process_movement(self, movement):
        if movement is None or movement.kind != ShipMovement.kind:
            return
        if movement.direction is MovementDirection.INBOUND:
            self._flag_distribution[movement.ship.flag] += 1


EVALUATOR_NAMES = [
    'CargoDecompositionEvaluator',
    'QuayOccupancyEvaluator',
    'ShipFlagEvaluator',
    'ShipThroughputEvaluator',
]


def evaluator_by_name(name: str, port) -> StatisticsEvaluator:
    """
    Build a fresh evaluator from its encoded kind name.

    Args:
        name: Evaluator class name (see EVALUATOR_NAMES)
        port: Port the evaluator observes (needed by QuayOccupancyEvaluator)

    Raises:
        ValueError: unknown evaluator name
    """
    if name == 'CargoDecompositionEvaluator':
        return CargoDecompositionEvaluator()
    if name == 'QuayOccupancyEvaluator':
        return QuayOccupancyEvaluator(port)
    if name == 'ShipFlagEvaluator':
        return ShipFlagEvaluator()
    if name == 'ShipThroughputEvaluator':
        window = port.config.throughput_window if port is not None else THROUGHPUT_WINDOW_MINUTES
        return ShipThroughputEvaluator(window=window)
    raise ValueError(f"Invalid statistics evaluator name: {name}")
