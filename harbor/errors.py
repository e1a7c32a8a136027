"""
Error taxonomy for the harbor simulation.

- ConstructionError: invalid field values or duplicate identifiers
- NoSuchShipError / NoSuchCargoError: registry lookups for unknown identifiers
- BadEncodingError: any violation of the text snapshot contract
- NoCargoError: operations against an empty hold
"""

from typing import Optional


class HarborError(Exception):
    """Base class for all harbor simulation errors"""
    pass


class ConstructionError(HarborError, ValueError):
    """Raised when an entity is built from invalid values"""
    pass


class NoSuchShipError(HarborError, LookupError):
    """Raised when an IMO number is not in the ship registry"""
    pass


class NoSuchCargoError(HarborError, LookupError):
    """Raised when a cargo ID is not in the cargo registry"""
    pass


class NoCargoError(HarborError):
    """Raised when unloading a ship that carries nothing"""
    pass


class BadEncodingError(HarborError):
    """
    Raised when text does not follow the snapshot format.

    Attributes:
        fragment: The offending piece of text (None when not applicable)
    """

    def __init__(self, message: str, fragment: Optional[str] = None):
        if fragment is not None:
            message = f"{message}: {fragment!r}"
        super().__init__(message)
        self.fragment = fragment
