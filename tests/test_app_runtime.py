"""Tests for the event loop runtime."""

import io
import threading
import time

import pytest
from rich.console import Console

from windowsfix.actions.base import ThreadedAction
from windowsfix.app.runtime import Runtime
from windowsfix.menu.model import (
    Activate,
    Launch,
    MenuItem,
    MoveDown,
    NoEffect,
    Quit,
    Success,
    Terminate,
)
from windowsfix.ui import keyboard

from conftest import FakeAction, make_items


class ScriptedKeyReader:
    """Key reader that hands out keys once ``gate`` allows the next one."""

    def __init__(self, keys, gate=None):
        self.keys = list(keys)
        self.gate = gate or (lambda key: True)
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, *exc_info):
        self.exited = True

    def read_key(self):
        if self.keys and self.gate(self.keys[0]):
            return self.keys.pop(0)
        time.sleep(0.01)
        return None


def make_runtime(items, key_reader=None):
    return Runtime(
        items,
        console=Console(file=io.StringIO(), width=80, color_system=None),
        key_reader=key_reader or ScriptedKeyReader([]),
        refresh_per_second=4,
    )


class TestStep:
    def test_activate_invokes_action_once(self, menu_items):
        runtime = make_runtime(menu_items)

        effect = runtime.step(Activate())

        assert effect == Launch(0)
        assert len(menu_items[0].action.delivers) == 1
        assert runtime.state.busy is True

    def test_outcome_flows_back_through_queue(self, menu_items):
        runtime = make_runtime(menu_items)
        runtime.step(Activate())

        menu_items[0].action.delivers[0](Success("Success: done"))
        effect = runtime.process_next(timeout=1.0)

        assert isinstance(effect, NoEffect)
        assert runtime.state.busy is False
        assert runtime.state.completed == frozenset({0})
        assert runtime.state.status_text == "Success: done"

    def test_busy_activation_does_not_invoke(self, menu_items):
        runtime = make_runtime(menu_items)
        runtime.step(Activate())
        runtime.step(MoveDown())

        runtime.step(Activate())

        assert menu_items[1].action.delivers == []

    def test_terminate_stops_loop(self, menu_items):
        runtime = make_runtime(menu_items)
        runtime.running = True

        effect = runtime.step(Quit())

        assert isinstance(effect, Terminate)
        assert runtime.running is False

    def test_process_next_times_out(self, menu_items):
        runtime = make_runtime(menu_items)

        assert runtime.process_next(timeout=0.01) is None

    def test_synchronous_delivery_is_queued(self):
        items = (MenuItem(label="Instant", action=FakeAction(outcome=Success("Success: now"))),)
        items += make_items()[-1:]
        runtime = make_runtime(items)

        runtime.step(Activate())
        assert runtime.state.busy is True

        runtime.process_next(timeout=1.0)
        assert runtime.state.completed == frozenset({0})


class TestLaunchFailures:
    def test_invoke_error_still_delivers_failure(self, log_records):
        class Exploding(FakeAction):
            def invoke(self, deliver):
                raise OSError("cannot spawn")

        items = (MenuItem(label="Boom", action=Exploding()),) + make_items()[-1:]
        runtime = make_runtime(items)

        runtime.step(Activate())
        runtime.process_next(timeout=1.0)

        assert runtime.state.busy is False
        assert runtime.state.status_text == "Error: Failed to start Boom - cannot spawn"
        assert runtime.state.completed == frozenset({0})
        assert any(r["level"].name == "ERROR" for r in log_records)


class TestThreadedActions:
    def test_worker_outcome_reaches_state(self):
        release = threading.Event()

        def slow():
            release.wait(2.0)
            return Success("Success: finished")

        items = (MenuItem(label="Slow", action=ThreadedAction("slow", slow)),)
        runtime = make_runtime(items + make_items()[-1:])

        runtime.step(Activate())
        assert runtime.process_next(timeout=0.05) is None
        assert len(runtime.pending_workers()) == 1

        release.set()
        runtime.process_next(timeout=2.0)

        assert runtime.state.completed == frozenset({0})
        assert runtime.state.status_text == "Success: finished"
        runtime.workers[0].join(timeout=2.0)
        assert runtime.pending_workers() == []


class TestRun:
    def test_quit_key_exits(self, menu_items):
        reader = ScriptedKeyReader(["q"])
        runtime = make_runtime(menu_items, reader)

        state = runtime.run()

        assert reader.entered and reader.exited
        assert state.completed == frozenset()
        assert runtime.running is False

    def test_full_session(self):
        items = (
            MenuItem(
                label="Task",
                action=ThreadedAction("task", lambda: Success("Success: task done")),
                in_progress_text="Working...",
            ),
        ) + make_items()[-1:]
        holder = {}

        def gate(key):
            # Hold the quit key until the outcome has been processed.
            return key != "q" or holder["runtime"].state.completed

        keys = [keyboard.KEY_ENTER, "x", keyboard.KEY_DOWN, keyboard.KEY_UP, "q"]
        runtime = make_runtime(items, ScriptedKeyReader(keys, gate))
        holder["runtime"] = runtime

        state = runtime.run()

        assert state.completed == frozenset({0})
        assert state.status_text == "Success: task done"
        assert state.cursor == 0

    def test_exit_item_exits(self):
        items = make_items(count=1)
        reader = ScriptedKeyReader([keyboard.KEY_DOWN, keyboard.KEY_ENTER])
        runtime = make_runtime(items, reader)

        state = runtime.run()

        assert state.cursor == 1
        assert state.completed == frozenset()

    def test_keyboard_interrupt_quits(self, menu_items, monkeypatch):
        runtime = make_runtime(menu_items)

        def interrupted(timeout=None):
            raise KeyboardInterrupt

        monkeypatch.setattr(runtime, "process_next", interrupted)

        state = runtime.run()

        assert runtime.running is False
        assert state.busy is False

    def test_quit_while_busy_abandons_worker(self, log_records):
        release = threading.Event()

        def blocked():
            release.wait(2.0)
            return Success("Success: too late")

        items = (
            MenuItem(label="Blocked", action=ThreadedAction("blocked", blocked)),
        ) + make_items()[-1:]
        holder = {}

        def gate(key):
            return key != "q" or holder["runtime"].state.busy

        runtime = make_runtime(items, ScriptedKeyReader([keyboard.KEY_ENTER, "q"], gate))
        holder["runtime"] = runtime

        try:
            state = runtime.run()
        finally:
            release.set()

        assert state.busy is True
        assert state.completed == frozenset()
        assert any("abandoned" in r["message"] for r in log_records)


@pytest.fixture(autouse=True)
def _no_real_terminal(monkeypatch):
    """Fail loudly if a test forgets to inject a key reader."""

    def refuse(*args, **kwargs):
        raise AssertionError("KeyReader constructed in a runtime test")

    monkeypatch.setattr("windowsfix.app.runtime.KeyReader", refuse)
