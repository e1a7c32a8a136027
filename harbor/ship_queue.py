"""
Ship admission queue.

Ships wait here for a free quay. Selection is not FIFO: every peek/poll
rescans the whole queue for the highest priority class present, and
insertion order breaks ties within a class.
"""

from typing import Callable, Iterator, List, Optional

from .ships import ContainerShip, NauticalFlag, Ship


# Priority classes, highest first. Fallback is the head of the queue.
PRIORITY_CLASSES: List[Callable[[Ship], bool]] = [
    lambda ship: ship.flag is NauticalFlag.BRAVO,     # dangerous goods
    lambda ship: ship.flag is NauticalFlag.WHISKEY,   # medical attention
    lambda ship: ship.flag is NauticalFlag.HOTEL,     # ready to dock
    lambda ship: ship.kind == ContainerShip.kind,
]


class ShipQueue:
    """Insertion-ordered holding area for ships awaiting a quay"""

    def __init__(self):
        self._ships: List[Ship] = []

    @property
    def ships(self) -> List[Ship]:
        """Copy of the queue in insertion order"""
        return list(self._ships)

    def add(self, ship: Ship):
        self._ships.append(ship)

    def peek(self) -> Optional[Ship]:
        """
        Select the next ship to admit without removing it.

        Returns:
            First ship (in insertion order) of the highest priority class
            present, the head of the queue if no class matches, or None when
            the queue is empty.
        """
        for in_class in PRIORITY_CLASSES:
            for ship in self._ships:
                if in_class(ship):
                    return ship

        return self._ships[0] if self._ships else None

    def poll(self) -> Optional[Ship]:
        """Select the next ship as peek() does and remove exactly that ship"""
        ship = self.peek()
        if ship is not None:
            # Identity, not equality: two ships never share a queue slot
            index = next(i for i, queued in enumerate(self._ships) if queued is ship)
            del self._ships[index]
        return ship

    def __len__(self) -> int:
        return len(self._ships)

    def __iter__(self) -> Iterator[Ship]:
        return iter(list(self._ships))

    def __contains__(self, ship: Ship) -> bool:
        return any(queued is ship for queued in self._ships)
