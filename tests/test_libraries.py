"""Linker and simulated hardware library tests."""

from sketchlang import Evaluator, InterpreterConfig, Keywords, Linker
from sketchlang.libraries.arduino import HIGH, LOW, OUTPUT, ArduinoLibrary
from sketchlang.libraries.base import LibraryProvider, int_args
from sketchlang.libraries.ledcontrol import LedControlLibrary, LedMatrix
from sketchlang.objects import NULL, Error, Integer, RealNumber, String


def make_linker(**kwargs) -> tuple[Keywords, Evaluator, Linker]:
    keywords = Keywords()
    evaluator = Evaluator()
    return keywords, evaluator, Linker(keywords, evaluator, **kwargs)


# ---------------------------------------------------------------------------
# Linker
# ---------------------------------------------------------------------------


def test_link_known_library():
    keywords, evaluator, linker = make_linker()
    assert linker.link_library("Arduino.h")
    assert "pinMode" in evaluator.builtins
    assert evaluator.builtins["OUTPUT"] == Integer(OUTPUT)
    assert len(evaluator.libraries) == 1


def test_link_is_idempotent():
    _, evaluator, linker = make_linker()
    assert linker.link_library("Arduino.h")
    provider = linker.linked["Arduino.h"]
    assert linker.link_library("Arduino.h")
    assert linker.linked["Arduino.h"] is provider
    assert len(evaluator.libraries) == 1


def test_unknown_library_changes_nothing():
    keywords, evaluator, linker = make_linker()
    before_keywords = len(keywords)
    before_builtins = dict(evaluator.builtins)
    assert not linker.link_library("Servo.h")
    assert len(keywords) == before_keywords
    assert evaluator.builtins == before_builtins
    assert linker.linked == {}


def test_class_names_become_keywords():
    keywords, evaluator, linker = make_linker()
    assert not keywords.is_class("LedControl")
    linker.link_library("LedControl.h")
    assert keywords.is_class("LedControl")
    assert "LedControl" in evaluator.classes


def test_register_custom_provider():
    class Counter(LibraryProvider):
        name = "Counter.h"

        def initialize(self):
            self.count = 0
            self._function("tick", self.tick)
            self._constant("STEP", 1)

        def tick(self, args):
            self.count += 1
            return Integer(self.count)

    _, evaluator, linker = make_linker()
    linker.register("Counter.h", Counter)
    assert linker.link_library("Counter.h")
    assert evaluator.builtins["tick"].fn([]) == Integer(1)
    assert linker.linked["Counter.h"].count == 1


def test_restricted_library_table():
    _, _, linker = make_linker(libraries={"Arduino.h": ArduinoLibrary})
    assert linker.link_library("Arduino.h")
    assert not linker.link_library("LedControl.h")


def test_include_in_session(session):
    result = session.run_code("#include <LedControl.h>\nLedControl lc = LedControl(1, 2, 3, 2);")
    assert not result.is_error
    assert session.keywords.is_class("LedControl")
    displays = session.linker.linked["LedControl.h"].displays
    assert len(displays) == 1
    assert displays[0].num_devices == 2


# ---------------------------------------------------------------------------
# Argument conversion
# ---------------------------------------------------------------------------


def test_int_args_converts():
    assert int_args("f", [Integer(1), RealNumber(2.7)], 2) == [1, 2]


def test_int_args_arity():
    assert int_args("f", [Integer(1)], 2) == Error("wrong number of arguments. got=1, want=2")


def test_int_args_rejects_strings():
    assert int_args("f", [String("x")], 1) == Error(
        "argument 1 to `f` must be INTEGER_OBJ, got STRING_OBJ"
    )


# ---------------------------------------------------------------------------
# Arduino.h
# ---------------------------------------------------------------------------


def test_arduino_pin_state(session):
    session.run_code("#include <Arduino.h>\npinMode(13, OUTPUT);\ndigitalWrite(13, HIGH);")
    board = session.linker.linked["Arduino.h"]
    assert board.pins[13].mode == OUTPUT
    assert board.pins[13].level == HIGH


def test_arduino_unknown_pin_reads_low():
    board = ArduinoLibrary(sleep=lambda s: None)
    board.initialize()
    assert board.digital_read([Integer(7)]) == Integer(LOW)


def test_arduino_invalid_mode():
    board = ArduinoLibrary(sleep=lambda s: None)
    board.initialize()
    assert board.pin_mode([Integer(7), Integer(9)]) == Error("invalid pin mode: 9")


def test_arduino_delay_sleeps(session, sleeps):
    session.run_code("#include <Arduino.h>\ndelay(250);")
    assert sleeps == [0.25]
    assert session.linker.linked["Arduino.h"].elapsed_ms == 250


def test_arduino_delay_is_clamped(sleeps):
    board = ArduinoLibrary(InterpreterConfig(max_delay_ms=10), sleep=sleeps.append)
    board.initialize()
    assert board.delay([Integer(5000)]) is NULL
    assert sleeps == [0.01]
    assert board.elapsed_ms == 5000


def test_arduino_delay_clamp_warns(caplog, sleeps):
    board = ArduinoLibrary(InterpreterConfig(max_delay_ms=0), sleep=sleeps.append)
    board.initialize()
    board.delay([Integer(20)])
    assert "clamped" in caplog.text


# ---------------------------------------------------------------------------
# LedControl.h
# ---------------------------------------------------------------------------


def test_matrix_set_row_and_render():
    matrix = LedMatrix(12, 11, 10, 1)
    assert matrix.set_row([Integer(0), Integer(2), Integer(0b10000001)]) is NULL
    rows = matrix.render(0)
    assert rows[2] == "#......#"
    assert rows[0] == "........"


def test_matrix_set_led():
    matrix = LedMatrix(12, 11, 10, 1)
    matrix.set_led([Integer(0), Integer(3), Integer(4), Integer(1)])
    assert matrix.lit(0, 3, 4)
    matrix.set_led([Integer(0), Integer(3), Integer(4), Integer(0)])
    assert not matrix.lit(0, 3, 4)


def test_matrix_row_value_masked_to_byte():
    matrix = LedMatrix(12, 11, 10, 1)
    matrix.set_row([Integer(0), Integer(0), Integer(0x1FF)])
    assert matrix.rows[0][0] == 0xFF


def test_matrix_clear_display():
    matrix = LedMatrix(12, 11, 10, 2)
    matrix.set_row([Integer(1), Integer(0), Integer(255)])
    matrix.clear_display([Integer(1)])
    assert matrix.rows[1] == [0] * 8


def test_matrix_shutdown_and_intensity():
    matrix = LedMatrix(12, 11, 10, 1)
    assert matrix.shutdown == [True]
    matrix.set_shutdown([Integer(0), Integer(0)])
    assert matrix.shutdown == [False]
    matrix.set_intensity([Integer(0), Integer(8)])
    assert matrix.intensity == [8]


def test_matrix_range_errors():
    matrix = LedMatrix(12, 11, 10, 1)
    assert matrix.set_row([Integer(0), Integer(8), Integer(1)]) == Error(
        "row 8 out of range 0..7"
    )
    assert matrix.set_led([Integer(0), Integer(0), Integer(9), Integer(1)]) == Error(
        "column 9 out of range 0..7"
    )
    assert matrix.set_intensity([Integer(0), Integer(16)]) == Error(
        "intensity 16 out of range 0..15"
    )
    assert matrix.clear_display([Integer(-1)]) == Error("device address -1 out of range 0..0")


def test_ledcontrol_device_count_bounds():
    library = LedControlLibrary()
    library.initialize()
    args = [Integer(1), Integer(2), Integer(3), Integer(9)]
    assert library.construct(args) == Error("number of devices must be 1..8, got 9")
    assert library.displays == []


def test_ledcontrol_script_draws(session):
    session.run_code(
        "#include <LedControl.h>\n"
        "LedControl lc = LedControl(12, 11, 10, 1);\n"
        "lc.shutdown(0, false);\n"
        "lc.setLed(0, 0, 0, true);\n"
        "lc.setRow(0, 7, 15);"
    )
    matrix = session.linker.linked["LedControl.h"].displays[0]
    assert matrix.shutdown == [False]
    assert matrix.render(0)[0] == "#......."
    assert matrix.render(0)[7] == "....####"


def test_matrix_state_changes_are_logged(caplog):
    caplog.set_level("INFO", logger="sketchlang.libraries.ledcontrol")
    matrix = LedMatrix(12, 11, 10, 1)
    matrix.set_row([Integer(0), Integer(0), Integer(1)])
    matrix.set_led([Integer(0), Integer(1), Integer(1), Integer(1)])
    matrix.clear_display([Integer(0)])
    matrix.set_shutdown([Integer(0), Integer(0)])
    matrix.set_intensity([Integer(0), Integer(5)])
    assert len(caplog.records) == 5
    assert caplog.records[-1].getMessage() == "device 0 intensity 5"
