"""Event loop driving the menu.

The loop thread is the only owner of ``MenuState``. Keyboard events and
action outcomes arrive over one ``queue.Queue`` and are processed strictly in
arrival order: transition, apply the effect, redraw.
"""

from __future__ import annotations

import queue
import threading
from typing import List, Optional, Sequence

from rich.console import Console
from rich.live import Live

from windowsfix.config import settings
from windowsfix.logging import LoggerFactory
from windowsfix.menu.machine import transition
from windowsfix.menu.model import (
    ERROR_MARKER,
    Effect,
    Failure,
    Launch,
    MenuItem,
    MenuState,
    Outcome,
    OutcomeReceived,
    Quit,
    Terminate,
    initial_state,
)
from windowsfix.ui.keyboard import KeyReader, map_key
from windowsfix.ui.renderer import render

log = LoggerFactory.for_system()

EVENT_WAIT_TIMEOUT = 0.1


class Runtime:
    def __init__(
        self,
        items: Sequence[MenuItem],
        *,
        console: Optional[Console] = None,
        key_reader: Optional[KeyReader] = None,
        refresh_per_second: Optional[float] = None,
    ) -> None:
        self.state: MenuState = initial_state(items)
        self.events: "queue.Queue[object]" = queue.Queue()
        self.console = console or Console()
        self.key_reader = key_reader or KeyReader(
            poll_interval=settings.get_float("input_poll_interval", 0.05)
        )
        if refresh_per_second is None:
            refresh_per_second = settings.get_float("refresh_per_second", 10)
        self.refresh_per_second = refresh_per_second
        self.workers: List[threading.Thread] = []
        self.running = False

    # ------------------------------------------------------------------
    # Event channel
    # ------------------------------------------------------------------

    def post(self, event) -> None:
        self.events.put(event)

    def deliver(self, outcome: Outcome) -> None:
        """Outcome callback handed to actions; safe to call from any thread."""
        self.events.put(OutcomeReceived(outcome))

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def step(self, event) -> Effect:
        """Feed one event through the state machine and apply its effect."""
        self.state, effect = transition(self.state, event)
        if isinstance(effect, Launch):
            self._launch(effect.index)
        elif isinstance(effect, Terminate):
            self.running = False
        return effect

    def process_next(self, timeout: Optional[float] = EVENT_WAIT_TIMEOUT) -> Optional[Effect]:
        """Process the next queued event, or return None if none arrived in time."""
        try:
            event = self.events.get(timeout=timeout)
        except queue.Empty:
            return None
        return self.step(event)

    def _launch(self, index: int) -> None:
        item = self.state.items[index]
        try:
            worker = item.action.invoke(self.deliver)
        except Exception as error:
            # The machine is waiting for exactly one outcome; supply it here.
            log.exception(f"Could not start {item.label!r}")
            self.deliver(Failure(f"{ERROR_MARKER} Failed to start {item.label} - {error}"))
            return
        if worker is not None:
            self.workers.append(worker)

    def pending_workers(self) -> List[threading.Thread]:
        return [worker for worker in self.workers if worker.is_alive()]

    # ------------------------------------------------------------------
    # Interactive loop
    # ------------------------------------------------------------------

    def _read_input(self) -> None:
        while self.running:
            event = map_key(self.key_reader.read_key())
            if event is not None:
                self.post(event)

    def run(self) -> MenuState:
        """Run until the terminal item or Quit is taken; return the final state."""
        self.running = True
        log.info("Menu started", items=len(self.state.items))
        input_thread = threading.Thread(
            target=self._read_input, name="menu-input", daemon=True
        )
        with self.key_reader, Live(
            render(self.state),
            console=self.console,
            refresh_per_second=self.refresh_per_second,
            auto_refresh=False,
        ) as live:
            input_thread.start()
            try:
                while self.running:
                    try:
                        effect = self.process_next()
                    except KeyboardInterrupt:
                        effect = self.step(Quit())
                    if effect is not None:
                        live.update(render(self.state), refresh=True)
            finally:
                self.running = False
                input_thread.join(timeout=1.0)

        abandoned = self.pending_workers()
        if abandoned:
            log.warning(
                f"Exiting with {len(abandoned)} action(s) still running; "
                "they are abandoned, not cancelled"
            )
        log.info("Menu stopped")
        return self.state
