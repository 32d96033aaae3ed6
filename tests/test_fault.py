"""Tests for the execution trap and fault state machine."""

import io

import pytest

from livecode import EventBus, EventType, LivecodeConfig
from livecode.console import Diagnostics
from livecode.fault import ExecutionTrap, FaultStateMachine, FaultStatus, Phase, format_report
from livecode.host.interface import Chunk


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def state(config, graphics) -> FaultStateMachine:
    return FaultStateMachine(config, graphics)


@pytest.fixture
def trap(config, stream, state) -> ExecutionTrap:
    return ExecutionTrap(config, Diagnostics(config, stream), state)


def explode() -> None:
    raise RuntimeError("boom")


class TestProtect:
    """Tests for ExecutionTrap.protect."""

    def test_success_returns_value(self, trap, state):
        """A successful call returns its value and leaves the state clear."""
        outcome = trap.protect(lambda a, b: a + b, Phase.UPDATE, 2, 3)

        assert outcome.ok
        assert outcome.value == 5
        assert state.status is FaultStatus.CLEAR

    def test_failure_is_contained(self, trap, state, stream):
        """A failing call faults the state machine and prints the report."""
        outcome = trap.protect(explode, Phase.DRAW)

        assert not outcome.ok
        assert outcome.fault.phase is Phase.DRAW
        assert isinstance(outcome.fault.error, RuntimeError)
        assert state.faulted
        assert state.message == outcome.fault.report
        assert stream.getvalue() == outcome.fault.report + "\n"

    def test_error_callback_transforms_report(self, trap, config, state, stream):
        """error_callback post-processes the report before display."""
        config.error_callback = lambda text: text.upper()

        trap.protect(explode, Phase.UPDATE)

        assert state.message.startswith("ERROR: RUNTIMEERROR: BOOM")
        assert stream.getvalue().startswith("ERROR: RUNTIMEERROR: BOOM")

    def test_failing_error_callback_falls_back(self, trap, config, state):
        """A broken error_callback does not lose the report."""

        def bad_callback(text: str) -> str:
            raise ValueError("callback bug")

        config.error_callback = bad_callback
        trap.protect(explode, Phase.UPDATE)

        assert state.message.startswith("Error: RuntimeError: boom")

    def test_keyboard_interrupt_not_trapped(self, trap):
        """Interrupts propagate so the host can stop the process."""

        def interrupt() -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            trap.protect(interrupt, Phase.UPDATE)

    def test_fault_event_published(self, config, stream, state):
        """Trapped failures are announced on the event bus."""
        bus = EventBus()
        seen = []
        bus.add_callback(seen.append)
        trap = ExecutionTrap(config, Diagnostics(config, stream), state, bus)

        trap.protect(explode, Phase.ASSET)

        assert [event.type for event in seen] == [EventType.FAULT_RAISED]
        assert seen[0].data["phase"] == "asset"


class TestFormatReport:
    """Tests for report formatting."""

    def test_header_and_application_frames(self, trap):
        """Reports start with the error and keep application frames."""
        outcome = trap.protect(explode, Phase.UPDATE)
        report = outcome.fault.report

        assert report.splitlines()[0] == "Error: RuntimeError: boom"
        assert "in explode" in report
        assert "test_fault.py" in report

    def test_internal_frames_removed(self, trap):
        """Frames from the trap and chunk execution are stripped."""
        code = compile("def f():\n    raise KeyError('missing')\nf()\n", "player.py", "exec")
        outcome = trap.protect(Chunk("player.py", code), Phase.EXECUTE)
        report = outcome.fault.report

        assert 'File "player.py", line 2, in f' in report
        assert "trap.py" not in report
        assert "interface.py" not in report

    def test_syntax_error_details(self):
        """Syntax errors show the offending location."""
        try:
            compile("def broken(:\n    pass\n", "broken.py", "exec")
        except SyntaxError as e:
            report = format_report(e)

        assert report.startswith("Error: SyntaxError:")
        assert 'File "broken.py", line 1' in report


class TestFaultStateMachine:
    """Tests for fault state transitions and presentation snapshots."""

    def test_restore_is_exact(self, trap, state, graphics):
        """Presentation is identical after fault display and clear."""
        graphics.translate(10, 5)
        graphics.state["scissor"] = (0, 0, 64, 64)
        before = (graphics.transform, dict(graphics.state), graphics.font)

        trap.protect(explode, Phase.UPDATE)
        assert state.snapshot is not None
        assert graphics.font.name == "fallback"
        assert graphics.transform == ()
        assert graphics.state["scissor"] is None

        # Mutations while faulted are discarded by the restore
        graphics.translate(99, 99)

        assert state.clear_if_faulted()
        assert (graphics.transform, graphics.state, graphics.font) == before
        assert state.snapshot is None
        assert state.status is FaultStatus.CLEAR

    def test_fallback_font_scaled(self, trap, graphics):
        """The fallback font size follows the display scale."""
        graphics.scale = 2.5
        trap.protect(explode, Phase.UPDATE)
        assert graphics.font.size == 35

    def test_second_fault_keeps_single_snapshot(self, trap, state, graphics):
        """Faulting twice pushes once, so one clear restores everything."""
        trap.protect(explode, Phase.UPDATE)
        trap.protect(lambda: 1 / 0, Phase.ASSET)

        assert graphics.calls.count("push") == 1
        assert "ZeroDivisionError" in state.message

        state.clear_if_faulted()
        assert graphics.calls.count("pop") == 1
        assert graphics.stack == []

    def test_no_snapshot_when_screen_display_disabled(self, trap, config, state, graphics):
        """Without on-screen errors the presentation state is untouched."""
        config.show_error_on_screen = False
        trap.protect(explode, Phase.UPDATE)

        assert state.faulted
        assert state.snapshot is None
        assert "push" not in graphics.calls

    def test_no_snapshot_without_active_surface(self, trap, state, graphics):
        """No snapshot is taken when no display surface is active."""
        graphics.active = False
        trap.protect(explode, Phase.UPDATE)

        assert state.faulted
        assert state.snapshot is None

    def test_headless_fault_and_clear(self, config, stream):
        """Without a graphics subsystem faults are tracked but nothing is drawn."""
        state = FaultStateMachine(config, None)
        trap = ExecutionTrap(config, Diagnostics(config, stream), state)

        trap.protect(explode, Phase.UPDATE)
        assert state.faulted
        assert state.snapshot is None
        state.draw_fault()

        assert state.clear_if_faulted()
        assert not state.faulted

    def test_clear_when_not_faulted(self, state):
        """Clearing a clear state is a no-op returning False."""
        assert not state.clear_if_faulted()
        assert state.status is FaultStatus.CLEAR

    def test_draw_fault_prints_message(self, trap, state, graphics):
        """The placeholder clears the surface and prints the report."""
        graphics.scale = 2.0
        trap.protect(explode, Phase.UPDATE)

        state.draw_fault()

        assert graphics.calls[-2:] == ["clear", "print"]
        text, x, y = graphics.printed[-1]
        assert text == state.message
        assert (x, y) == (40.0, 40.0)


class TestConfig:
    """Tests for LivecodeConfig."""

    def test_defaults(self):
        """Defaults match the documented behavior."""
        config = LivecodeConfig()

        assert config.reset_on_reload is False
        assert config.log_reloads is True
        assert config.reload_on_keypress is True
        assert config.reload_key == "f5"
        assert config.show_error_on_screen is True
        assert config.track_assets is True
        assert config.autoflush_output is True
        assert config.error_callback is None

    def test_assignment_is_validated(self):
        """Invalid values are rejected on assignment."""
        from pydantic import ValidationError

        config = LivecodeConfig()
        with pytest.raises(ValidationError):
            config.error_callback = "not callable"  # type: ignore[assignment]
        with pytest.raises(ValidationError):
            config.reload_key = ""
