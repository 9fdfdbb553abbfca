"""
Debugger Session Unit Tests
===========================

Tests for stepping, breakpoints, run limits and program reloading.

Copyright (c) 2026 ibmasm Contributors
"""

import pytest

from ibmasm.debugger import Debugger, StopEvent, StopReason
from ibmasm.errors import DataOrderError, UndefinedLabelError
from ibmasm.interpreter import InterpreterConfig


COUNTDOWN = """\
TEN    DC INTEGER(10)
ONE    DC INTEGER(1)
       L  1, TEN
LOOP   S  1, ONE
       JZ DONE
       J  LOOP
DONE   ST 1, TEN"""


@pytest.fixture
def dbg():
    """Debugger loaded with the countdown program."""
    return Debugger(COUNTDOWN)


# =============================================================================
# Loading Tests
# =============================================================================

class TestLoading:
    """Test program loading and reloading."""

    def test_preprocessed_on_load(self, dbg):
        assert dbg.interpreter.layout is not None
        assert dbg.current_line == 1
        assert not dbg.is_finished

    def test_preprocessing_error_on_load(self):
        with pytest.raises(DataOrderError):
            Debugger("AR 1,1\nX DC INTEGER(1)")

    def test_reload_replaces_state(self, dbg):
        dbg.run()
        dbg.reload("LA 1, 3")
        assert dbg.history == []
        assert dbg.interpreter.registers[1] == 0
        assert dbg.current_line == 1

    def test_reload_drops_missing_breakpoints(self, dbg):
        dbg.add_breakpoint(2)
        dbg.add_breakpoint(7)
        dbg.reload("AR 1,1\nAR 1,1\nAR 1,1")
        assert dbg.breakpoints == [2]


# =============================================================================
# Stepping Tests
# =============================================================================

class TestStep:
    """Test single stepping."""

    def test_step_reports_next_line(self):
        dbg = Debugger("AR 1, 1\nSR 1, 1")
        event = dbg.step()
        assert event.reason == StopReason.STEP
        assert event.line == 2
        assert event.address == 2

    def test_step_to_end(self):
        dbg = Debugger("AR 1, 1\nSR 1, 1")
        dbg.step()
        event = dbg.step()
        assert event.reason == StopReason.END
        assert event.line is None
        assert dbg.is_finished

    def test_step_after_end(self):
        dbg = Debugger("AR 1, 1")
        dbg.step()
        assert dbg.step().reason == StopReason.END
        assert dbg.history == [1]

    def test_step_follows_jumps(self, dbg):
        for _ in range(6):
            dbg.step()
        assert dbg.current_line == 4
        assert dbg.history == [1, 2, 3, 4, 5, 6]

    def test_step_raises(self):
        dbg = Debugger("L 1, NOPE")
        with pytest.raises(UndefinedLabelError):
            dbg.step()


# =============================================================================
# Run and Breakpoint Tests
# =============================================================================

class TestRun:
    """Test running with breakpoints and limits."""

    def test_run_to_end(self, dbg):
        event = dbg.run()
        assert event.reason == StopReason.END
        assert dbg.interpreter.registers[1] == 0

    def test_breakpoint(self, dbg):
        dbg.add_breakpoint(4)
        event = dbg.run()
        assert event.reason == StopReason.BREAKPOINT
        assert event.line == 4
        assert event.address == 12
        assert dbg.interpreter.registers[1] == 10

    def test_run_resumes_past_breakpoint(self, dbg):
        """Running again executes the breakpoint line before stopping."""
        dbg.add_breakpoint(4)
        dbg.run()
        event = dbg.run()
        assert event.reason == StopReason.BREAKPOINT
        assert dbg.interpreter.registers[1] == 9
        assert dbg.history == [1, 2, 3, 4, 5, 6]

    def test_remove_breakpoint(self, dbg):
        dbg.add_breakpoint(4)
        dbg.remove_breakpoint(4)
        assert dbg.run().reason == StopReason.END

    def test_clear_breakpoints(self, dbg):
        dbg.add_breakpoint(4)
        dbg.add_breakpoint(7)
        dbg.clear_breakpoints()
        assert dbg.breakpoints == []

    @pytest.mark.parametrize("line", [0, 8, 100])
    def test_breakpoint_outside_program(self, dbg, line):
        with pytest.raises(ValueError):
            dbg.add_breakpoint(line)

    def test_step_budget(self):
        dbg = Debugger("SELF J SELF")
        event = dbg.run(max_steps=10)
        assert event.reason == StopReason.LIMIT
        assert dbg.interpreter.executed_steps == 10

    def test_execution_ceiling(self):
        dbg = Debugger("SELF J SELF", InterpreterConfig(max_steps=5))
        assert dbg.run().reason == StopReason.LIMIT
        # ceiling is cumulative across calls
        assert dbg.run().reason == StopReason.LIMIT
        assert dbg.interpreter.executed_steps == 5

    def test_error_event(self):
        dbg = Debugger("LA 1, 1\nL 2, NOPE")
        event = dbg.run()
        assert event.reason == StopReason.ERROR
        assert event.line == 2
        assert isinstance(event.error, UndefinedLabelError)
        assert "NOPE" in str(event)
        assert dbg.interpreter.registers[1] == 1


class TestStopEvent:
    """Test StopEvent descriptions."""

    def test_default_messages(self):
        assert str(StopEvent(StopReason.BREAKPOINT, line=4)) == "Breakpoint at line 4"
        assert str(StopEvent(StopReason.END)) == "Program finished"

    def test_custom_message(self):
        assert str(StopEvent(StopReason.LIMIT, message="stop")) == "stop"
