"""Arduino.h: simulated digital pins and timing."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from ..objects import NULL, Error, Integer, Object
from .base import LibraryProvider, int_args

logger = logging.getLogger(__name__)

INPUT = 0
INPUT_PULLUP = 1
OUTPUT = 2

LOW = 0
HIGH = 1

PIN_MODES: dict[int, str] = {INPUT: "INPUT", INPUT_PULLUP: "INPUT_PULLUP", OUTPUT: "OUTPUT"}
PIN_LEVELS: dict[int, str] = {LOW: "LOW", HIGH: "HIGH"}


@dataclass
class Pin:
    mode: int = INPUT
    level: int = LOW


class ArduinoLibrary(LibraryProvider):
    """Board with pinMode/digitalWrite/digitalRead/delay."""

    name = "Arduino.h"

    def initialize(self) -> None:
        self.pins: dict[int, Pin] = {}
        self.elapsed_ms = 0
        self._function("pinMode", self.pin_mode)
        self._function("digitalWrite", self.digital_write)
        self._function("digitalRead", self.digital_read)
        self._function("delay", self.delay)
        for value, label in PIN_MODES.items():
            self._constant(label, value)
        for value, label in PIN_LEVELS.items():
            self._constant(label, value)

    def pin_mode(self, args: list[Object]) -> Object:
        values = int_args("pinMode", args, 2)
        if isinstance(values, Error):
            return values
        pin, mode = values
        if mode not in PIN_MODES:
            return Error(f"invalid pin mode: {mode}")
        self.pins.setdefault(pin, Pin()).mode = mode
        logger.info("pin %d set to %s", pin, PIN_MODES[mode])
        return NULL

    def digital_write(self, args: list[Object]) -> Object:
        values = int_args("digitalWrite", args, 2)
        if isinstance(values, Error):
            return values
        pin, level = values
        if level not in PIN_LEVELS:
            return Error(f"invalid pin level: {level}")
        state = self.pins.get(pin)
        if state is None or state.mode != OUTPUT:
            return Error(f"pin {pin} is not configured as OUTPUT")
        state.level = level
        logger.info("pin %d written %s", pin, PIN_LEVELS[level])
        return NULL

    def digital_read(self, args: list[Object]) -> Object:
        values = int_args("digitalRead", args, 1)
        if isinstance(values, Error):
            return values
        state = self.pins.get(values[0])
        if state is None:
            return Integer(LOW)
        return Integer(state.level)

    def delay(self, args: list[Object]) -> Object:
        values = int_args("delay", args, 1)
        if isinstance(values, Error):
            return values
        ms = values[0]
        if ms < 0:
            return Error(f"delay must be non-negative, got {ms}")
        waited = min(ms, self.config.max_delay_ms)
        if waited < ms:
            logger.warning("delay of %d ms clamped to %d ms", ms, waited)
        self.sleep(waited / 1000.0)
        self.elapsed_ms += ms
        logger.info("delayed %d milliseconds", ms)
        return NULL
