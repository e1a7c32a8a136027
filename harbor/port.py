"""
Port tick engine.

Port owns the quays, admission queue, warehouse, pending movements and
statistics evaluators, and advances them one simulated minute at a time.
"""

import heapq
import itertools
import time as wallclock
from typing import Dict, List, Optional, Tuple

import numpy as np

from .cargo import Cargo
from .constants import TICK_TIME_WINDOW
from .data_types import SimulationConfig
from .errors import ConstructionError, NoCargoError
from .evaluators import StatisticsEvaluator
from .movement import CargoMovement, Movement, MovementDirection, ShipMovement
from .quays import Quay
from .registry import Registries
from .ship_queue import ShipQueue
from .ships import Ship


class Port:
    """
    Aggregate root of the simulation.

    Ships enter through the admission queue, dock at quays, and exchange
    cargo with the warehouse (stored cargo).

    Attributes:
        name: Port name
        registries: Ship and cargo registries this port was built against
        config: Tick engine tunables
    """

    def __init__(
        self,
        name: str,
        time: int = 0,
        ship_queue: Optional[ShipQueue] = None,
        quays: Optional[List[Quay]] = None,
        stored_cargo: Optional[List[Cargo]] = None,
        registries: Optional[Registries] = None,
        config: Optional[SimulationConfig] = None
    ):
        """
        Args:
            name: Port name
            time: Minutes since the simulation started (>= 0)
            ship_queue: Ships awaiting a quay (empty queue if None)
            quays: Quays in docking scan order
            stored_cargo: Warehouse contents
            registries: Registries holding every ship and cargo of this port
            config: Tick engine tunables (defaults if None)
        """
        if time < 0:
            raise ConstructionError(f"The time can't be less than zero: {time}")

        self.name = name
        self.registries = registries if registries is not None else Registries()
        self.config = config if config is not None else SimulationConfig()

        # Simulation state
        self._time: int = time
        self._ship_queue = ship_queue if ship_queue is not None else ShipQueue()
        self._quays: List[Quay] = list(quays) if quays else []
        self._stored_cargo: List[Cargo] = list(stored_cargo) if stored_cargo else []
        self._evaluators: List[StatisticsEvaluator] = []

        # Pending movements: heap of (time, schedule_seq, movement).
        # schedule_seq makes equal-time movements apply in schedule order.
        self._movements: List[Tuple[int, int, Movement]] = []
        self._schedule_seq = itertools.count()

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window

    # ========================================================================
    # Read-only accessors
    # ========================================================================

    @property
    def time(self) -> int:
        return self._time

    @property
    def ship_queue(self) -> ShipQueue:
        return self._ship_queue

    @property
    def quays(self) -> List[Quay]:
        return list(self._quays)

    @property
    def stored_cargo(self) -> List[Cargo]:
        return list(self._stored_cargo)

    @property
    def evaluators(self) -> List[StatisticsEvaluator]:
        return list(self._evaluators)

    @property
    def movements(self) -> List[Movement]:
        """Pending movements in the order they will be applied"""
        return [movement for _, _, movement in sorted(self._movements, key=lambda e: e[:2])]

    # ========================================================================
    # Setup
    # ========================================================================

    def add_quay(self, quay: Quay):
        self._quays.append(quay)

    def add_movement(self, movement: Movement):
        """
        Schedule a movement.

        Only the action time is validated here; ship/cargo consistency is
        the caller's responsibility.

        Raises:
            ValueError: movement time is earlier than the port time
        """
        if movement.time < self._time:
            raise ValueError(
                f"The given movement's action time {movement.time} is less than "
                f"the current time {self._time}")
        heapq.heappush(self._movements, (movement.time, next(self._schedule_seq), movement))

    def add_statistics_evaluator(self, evaluator: StatisticsEvaluator):
        """Add evaluator unless one of the exact same kind is already present"""
        for existing in self._evaluators:
            if type(existing) is type(evaluator):
                return
        self._evaluators.append(evaluator)

    # ========================================================================
    # Movement processing
    # ========================================================================

    def process_movement(self, movement: Movement):
        """Apply a movement to port state, then notify every evaluator"""
        if movement.kind == ShipMovement.kind:
            self._process_ship_movement(movement)
        elif movement.kind == CargoMovement.kind:
            self._process_cargo_movement(movement)

        for evaluator in self._evaluators:
            evaluator.on_process_movement(movement)

    def _process_ship_movement(self, movement: ShipMovement):
        ship = movement.ship

        if movement.direction is MovementDirection.INBOUND:
            self._ship_queue.add(ship)
            return

        # Outbound: load everything the ship accepts, in warehouse order
        remaining = []
        for cargo in self._stored_cargo:
            if ship.can_load(cargo):
                ship.load_cargo(cargo)
            else:
                remaining.append(cargo)
        self._stored_cargo = remaining

        # A ship is docked at one quay at most
        for quay in self._quays:
            if quay.ship is ship:
                quay.ship_departs()
                break

    def _process_cargo_movement(self, movement: CargoMovement):
        if movement.direction is MovementDirection.INBOUND:
            self._stored_cargo.extend(movement.cargo)
        else:
            leaving = {cargo.id for cargo in movement.cargo}
            self._stored_cargo = [c for c in self._stored_cargo if c.id not in leaving]

    # ========================================================================
    # Tick loop
    # ========================================================================

    def elapse_one_minute(self):
        """
        Advance the port by one simulated minute.

        Order of operations (strict):
            1. time += 1
            2. every dock_interval minutes: dock one ship from the queue
            3. every unload_interval minutes: unload every docked ship
            4. process every pending movement due by now, schedule order for ties
            5. elapse_one_minute() on every evaluator
        """
        start_time = wallclock.perf_counter()

        self._time += 1

        if self._time % self.config.dock_interval == 0:
            self._dock_ship_from_queue()

        if self._time % self.config.unload_interval == 0:
            self._unload_docked_ships()

        while self._movements and self._movements[0][0] <= self._time:
            _, _, movement = heapq.heappop(self._movements)
            self.process_movement(movement)

        for evaluator in self._evaluators:
            evaluator.elapse_one_minute()

        self._record_tick_time(wallclock.perf_counter() - start_time)

    def run(self, minutes: int, verbose: bool = False):
        """
        Elapse `minutes` minutes.

        Args:
            minutes: Number of ticks to run
            verbose: Print a tick summary every config.tick_summary_interval minutes
        """
        for _ in range(minutes):
            self.elapse_one_minute()
            if verbose and self._time % self.config.tick_summary_interval == 0:
                self.print_tick_summary()

    def _dock_ship_from_queue(self):
        ship = self._ship_queue.peek()
        if ship is None:
            return

        for quay in self._quays:
            if quay.is_empty() and ship.can_dock(quay):
                quay.ship_arrives(self._ship_queue.poll())
                break  # Only docking once

    def _unload_docked_ships(self):
        for quay in self._quays:
            if quay.is_empty():
                continue
            try:
                self._stored_cargo.extend(quay.ship.unload_all())
            except NoCargoError:
                continue  # Nothing aboard, next quay

    def find_docked_quay(self, ship: Ship) -> Optional[Quay]:
        """Quay the ship is docked at, or None"""
        for quay in self._quays:
            if quay.ship is ship:
                return quay
        return None

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            self._tick_times.pop(0)

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with time, ticks_measured, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'time': self._time,
                'ticks_measured': 0,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        times = np.asarray(self._tick_times, dtype=np.float64)

        return {
            'time': self._time,
            'ticks_measured': len(times),
            'avg_tick_time_ms': float(np.mean(times)) * 1000.0,
            'last_tick_time_ms': float(times[-1]) * 1000.0
        }

    def get_snapshot(self) -> Dict:
        """
        Get a JSON-compatible summary of port state.

        Returns:
            Dict with time, queue, docked ships, warehouse, pending movements,
            evaluator names, timing
        """
        return {
            'name': self.name,
            'time': self._time,
            'queue': [ship.imo_number for ship in self._ship_queue],
            'docked': {
                quay.id: (quay.ship.imo_number if quay.ship is not None else None)
                for quay in self._quays
            },
            'stored_cargo': [cargo.id for cargo in self._stored_cargo],
            'pending_movements': len(self._movements),
            'evaluators': [evaluator.name for evaluator in self._evaluators],
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        docked = sum(1 for quay in self._quays if not quay.is_empty())
        print(f"Minute {self._time:6d} | "
              f"Queue: {len(self._ship_queue):3d} | "
              f"Docked: {docked:3d}/{len(self._quays):<3d} | "
              f"Stored: {len(self._stored_cargo):4d} | "
              f"Pending: {len(self._movements):4d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms")

    def __str__(self) -> str:
        return f"Port {self.name} at minute {self._time}"
