"""LedControl.h: MAX7219-style 8x8 LED matrix driver."""

from __future__ import annotations

import logging

from ..environment import Environment
from ..objects import NULL, VOID_OBJ, Class, Error, HostFunction, Object
from .base import LibraryProvider, int_args

logger = logging.getLogger(__name__)

ROWS = 8
COLUMNS = 8
MAX_DEVICES = 8
MAX_INTENSITY = 15


class LedMatrix:
    """State of one chain of matrix devices."""

    def __init__(self, data_pin: int, clk_pin: int, cs_pin: int, num_devices: int):
        self.data_pin = data_pin
        self.clk_pin = clk_pin
        self.cs_pin = cs_pin
        self.rows: list[list[int]] = [[0] * ROWS for _ in range(num_devices)]
        self.shutdown: list[bool] = [True] * num_devices
        self.intensity: list[int] = [0] * num_devices

    @property
    def num_devices(self) -> int:
        return len(self.rows)

    def lit(self, addr: int, row: int, col: int) -> bool:
        return bool(self.rows[addr][row] & (0x80 >> col))

    def render(self, addr: int) -> list[str]:
        """Rows of device addr as '#'/'.' strings."""
        return [
            "".join("#" if self.lit(addr, r, c) else "." for c in range(COLUMNS))
            for r in range(ROWS)
        ]

    # ── Script methods ──────────────────────────────────────

    def _check_addr(self, addr: int) -> Error | None:
        if 0 <= addr < self.num_devices:
            return None
        return Error(f"device address {addr} out of range 0..{self.num_devices - 1}")

    def set_row(self, args: list[Object]) -> Object:
        values = int_args("setRow", args, 3)
        if isinstance(values, Error):
            return values
        addr, row, value = values
        err = self._check_addr(addr)
        if err is not None:
            return err
        if not 0 <= row < ROWS:
            return Error(f"row {row} out of range 0..{ROWS - 1}")
        self.rows[addr][row] = value & 0xFF
        logger.info("device %d row %d = %s", addr, row, format(value & 0xFF, "08b"))
        return NULL

    def set_led(self, args: list[Object]) -> Object:
        values = int_args("setLed", args, 4)
        if isinstance(values, Error):
            return values
        addr, row, col, state = values
        err = self._check_addr(addr)
        if err is not None:
            return err
        if not 0 <= row < ROWS:
            return Error(f"row {row} out of range 0..{ROWS - 1}")
        if not 0 <= col < COLUMNS:
            return Error(f"column {col} out of range 0..{COLUMNS - 1}")
        mask = 0x80 >> col
        if state:
            self.rows[addr][row] |= mask
        else:
            self.rows[addr][row] &= ~mask & 0xFF
        logger.info("device %d led (%d, %d) %s", addr, row, col, "on" if state else "off")
        return NULL

    def clear_display(self, args: list[Object]) -> Object:
        values = int_args("clearDisplay", args, 1)
        if isinstance(values, Error):
            return values
        addr = values[0]
        err = self._check_addr(addr)
        if err is not None:
            return err
        self.rows[addr] = [0] * ROWS
        logger.info("device %d cleared", addr)
        return NULL

    def set_shutdown(self, args: list[Object]) -> Object:
        values = int_args("shutdown", args, 2)
        if isinstance(values, Error):
            return values
        addr, state = values
        err = self._check_addr(addr)
        if err is not None:
            return err
        self.shutdown[addr] = bool(state)
        logger.info("device %d shutdown %s", addr, "on" if state else "off")
        return NULL

    def set_intensity(self, args: list[Object]) -> Object:
        values = int_args("setIntensity", args, 2)
        if isinstance(values, Error):
            return values
        addr, level = values
        err = self._check_addr(addr)
        if err is not None:
            return err
        if not 0 <= level <= MAX_INTENSITY:
            return Error(f"intensity {level} out of range 0..{MAX_INTENSITY}")
        self.intensity[addr] = level
        logger.info("device %d intensity %d", addr, level)
        return NULL


class LedControlLibrary(LibraryProvider):
    """Provides the `LedControl` class."""

    name = "LedControl.h"

    def initialize(self) -> None:
        self.displays: list[LedMatrix] = []
        self._constructor("LedControl", self.construct)

    def construct(self, args: list[Object]) -> Object:
        values = int_args("LedControl", args, 4)
        if isinstance(values, Error):
            return values
        data_pin, clk_pin, cs_pin, num_devices = values
        if not 1 <= num_devices <= MAX_DEVICES:
            return Error(f"number of devices must be 1..{MAX_DEVICES}, got {num_devices}")
        matrix = LedMatrix(data_pin, clk_pin, cs_pin, num_devices)
        self.displays.append(matrix)
        env = Environment()
        methods = {
            "setRow": matrix.set_row,
            "setLed": matrix.set_led,
            "clearDisplay": matrix.clear_display,
            "shutdown": matrix.set_shutdown,
            "setIntensity": matrix.set_intensity,
        }
        for name, fn in methods.items():
            env.declare(name, HostFunction(fn, name), VOID_OBJ)
        logger.info("LedControl with %d device(s) on pins %d/%d/%d", num_devices, *values[:3])
        return Class("LedControl", env)
