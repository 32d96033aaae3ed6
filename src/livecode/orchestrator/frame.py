"""Frame orchestrator: the replacement main loop.

Each tick runs, in order:
1. Event pump and dispatch (quit handling, reload key)
2. Clock step
3. Reload pipeline: code units, changed assets, due pending fires
4. Reset or livereload hook, if anything was reloaded
5. Update hook (skipped while faulted)
6. Frame setup and draw hook, or the fault placeholder while faulted
7. Present
8. Short sleep, yielding to the host
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from livecode.events import EventType
from livecode.fault.trap import Phase
from livecode.host.interface import Event
from livecode.reload.reloader import ReloadResult

if TYPE_CHECKING:
    from livecode.supervisor import Supervisor

logger = logging.getLogger(__name__)

FRAME_SLEEP = 0.001


@dataclass
class TickReport:
    """What happened during one tick."""

    frame: int
    dt: float = 0.0
    reload_results: list[ReloadResult] = field(default_factory=list)
    assets_fired: int = 0
    changed: bool = False
    hook: str | None = None  # "reset" or "livereload"
    updated: bool = False
    presented: bool = False
    faulted: bool = False
    quit: bool = False
    exit_value: Any = None


class FrameOrchestrator:
    """Sequences event handling, reloads, update and draw every tick."""

    def __init__(self, supervisor: "Supervisor"):
        self.supervisor = supervisor
        self.frame = 0

    def startup(self, *args: Any) -> None:
        """Run the load hook and prime the event queue and clock."""
        sup = self.supervisor
        runtime = sup.runtime

        load = runtime.hook("load")
        if load is not None:
            sup.trap.protect(load, Phase.LOAD, *args)

        if runtime.events is not None:
            runtime.events.pump()

        # The first delta should not include the time spent in load
        if runtime.timer is not None:
            runtime.timer.step()

    def run(self, *args: Any) -> Any:
        """Run the main loop until a quit event is accepted.

        Args:
            *args: Forwarded to the load hook.

        Returns:
            The first argument of the accepted quit event, if any.
        """
        self.startup(*args)
        logger.info("Entering main loop")

        while True:
            report = self.tick()
            if report.quit:
                self.shutdown()
                return report.exit_value

    def shutdown(self) -> None:
        """Run the runtime's teardown callback."""
        teardown = self.supervisor.runtime.teardown
        if teardown is not None:
            self.supervisor.trap.protect(teardown, Phase.QUIT)
        logger.info("Main loop finished")

    def _quit_accepted(self) -> bool:
        quit_hook = self.supervisor.runtime.hook("quit")
        if quit_hook is None:
            return True
        outcome = self.supervisor.trap.protect(quit_hook, Phase.QUIT)
        # A failing quit hook cannot hold the application open
        return not (outcome.ok and outcome.value)

    def _is_reload_key(self, event: Event) -> bool:
        config = self.supervisor.config
        return (
            config.reload_on_keypress
            and event.name == "keypressed"
            and bool(event.args)
            and event.args[0] == config.reload_key
        )

    def process_events(self, report: TickReport) -> None:
        """Dispatch pending events; sets ``report.quit`` when quitting."""
        sup = self.supervisor
        events = sup.runtime.events
        if events is None:
            return

        events.pump()
        for event in events.poll():
            if event.name == "quit":
                if self._quit_accepted():
                    report.quit = True
                    report.exit_value = event.args[0] if event.args else None
                    return
                logger.debug("Quit suppressed by quit hook")
                # Only the handler table; the quit hook already ran
                handler = sup.runtime.handlers.get("quit")
                if handler is not None:
                    sup.trap.protect(handler, Phase.EVENT, *event.args)
                continue

            sup.trap.protect(sup.runtime.dispatch, Phase.EVENT, event)

            if self._is_reload_key(event):
                sup.reset()

    def run_reload_pipeline(self, report: TickReport) -> None:
        """Reload changed code units and fire asset callbacks."""
        sup = self.supervisor

        report.reload_results = sup.reloader.reload_all(sup.tracker.poll_units())
        if any(result.ok for result in report.reload_results):
            report.changed = True

        if not sup.config.track_assets:
            return

        now = sup.now()
        for asset in sup.tracker.poll_assets():
            if sup.scheduler.handle_changed_asset(asset, now):
                report.assets_fired += 1

        report.assets_fired += sup.scheduler.fire_due(now)
        if report.assets_fired:
            report.changed = True

    def run_reload_hook(self, report: TickReport) -> None:
        """Invoke exactly one of the reset or livereload hooks."""
        sup = self.supervisor
        if not report.changed:
            return

        if sup.config.reset_on_reload:
            load = sup.runtime.hook("load")
            if load is not None:
                sup.trap.protect(load, Phase.RESET)
                report.hook = "reset"
                sup.event_bus.emit(EventType.HOOK_RESET, {"reason": "reload"})
            return

        livereload = sup.runtime.hook("livereload")
        if livereload is not None:
            sup.trap.protect(livereload, Phase.LIVE_RELOAD)
            report.hook = "livereload"
            sup.event_bus.emit(EventType.HOOK_LIVERELOAD, {})

    def draw(self, report: TickReport) -> None:
        """Prepare the surface, draw the frame or the fault, and present."""
        sup = self.supervisor
        runtime = sup.runtime
        if not runtime.graphics_active():
            return
        graphics = runtime.graphics

        graphics.clear()
        graphics.origin()
        if not sup.state.faulted:
            draw = runtime.hook("draw")
            if draw is not None:
                sup.trap.protect(draw, Phase.DRAW)
        elif sup.config.show_error_on_screen:
            sup.state.draw_fault()
        graphics.present()
        report.presented = True

    def tick(self) -> TickReport:
        """Run one frame."""
        sup = self.supervisor
        runtime = sup.runtime
        self.frame += 1
        report = TickReport(frame=self.frame)

        self.process_events(report)
        if report.quit:
            return report

        if runtime.timer is not None:
            runtime.timer.step()
            report.dt = runtime.timer.get_delta()

        self.run_reload_pipeline(report)
        self.run_reload_hook(report)

        if not sup.state.faulted:
            update = runtime.hook("update")
            if update is not None:
                report.updated = sup.trap.protect(update, Phase.UPDATE, report.dt).ok

        self.draw(report)
        report.faulted = sup.state.faulted

        if runtime.timer is not None:
            runtime.timer.sleep(FRAME_SLEEP)

        return report
