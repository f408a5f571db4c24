"""Simulated hardware libraries that scripts can `#include`."""

from .arduino import ArduinoLibrary
from .base import LibraryProvider
from .ledcontrol import LedControlLibrary, LedMatrix

LIBRARIES: dict[str, type[LibraryProvider]] = {
    ArduinoLibrary.name: ArduinoLibrary,
    LedControlLibrary.name: LedControlLibrary,
}

__all__ = [
    "LIBRARIES",
    "ArduinoLibrary",
    "LedControlLibrary",
    "LedMatrix",
    "LibraryProvider",
]
