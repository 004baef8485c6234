"""Menu state machine.

``transition`` is the only way a ``MenuState`` changes. It consumes one event
and returns the next state plus at most one effect for the event loop to
apply. It never blocks and performs no I/O beyond logging.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from windowsfix.logging import LoggerFactory
from windowsfix.menu.model import (
    NO_EFFECT,
    TERMINATE,
    Activate,
    Effect,
    Launch,
    MenuState,
    MoveDown,
    MoveUp,
    OutcomeReceived,
    Quit,
)

log = LoggerFactory.for_menu()


def move_cursor(state: MenuState, delta: int) -> MenuState:
    new_cursor = max(0, min(len(state.items) - 1, state.cursor + delta))
    if new_cursor == state.cursor:
        return state
    return replace(state, cursor=new_cursor)


def activate(state: MenuState) -> Tuple[MenuState, Effect]:
    if state.busy:
        log.debug(f"Activate ignored: item {state.last_launched} still running")
        return state, NO_EFFECT
    if state.is_completed(state.cursor):
        log.debug(f"Activate ignored: item {state.cursor} already completed")
        return state, NO_EFFECT

    item = state.current_item
    if item.terminal:
        return state, TERMINATE

    # Only one action is ever in flight, so last_launched doubles as the
    # correlation key for the next outcome.
    new_state = replace(
        state,
        busy=item.affects_busy_flag,
        last_launched=state.cursor,
        status_text=item.in_progress_text or state.status_text,
    )
    log.info(f"Launching {item.label!r}", index=state.cursor)
    return new_state, Launch(state.cursor)


def receive_outcome(state: MenuState, event: OutcomeReceived) -> MenuState:
    outcome = event.outcome
    if state.last_launched is None:
        log.warning(f"Outcome with no launched item: {outcome.message!r}")
        return replace(state, status_text=outcome.message, busy=False)

    label = state.items[state.last_launched].label
    if outcome.ok:
        log.info(f"{label!r} finished: {outcome.message}")
    else:
        log.warning(f"{label!r} failed: {outcome.message}")
    return replace(
        state,
        status_text=outcome.message,
        busy=False,
        completed=state.completed | {state.last_launched},
        last_launched=None,
    )


def transition(state: MenuState, event) -> Tuple[MenuState, Effect]:
    if isinstance(event, MoveUp):
        return move_cursor(state, -1), NO_EFFECT
    if isinstance(event, MoveDown):
        return move_cursor(state, 1), NO_EFFECT
    if isinstance(event, Activate):
        return activate(state)
    if isinstance(event, Quit):
        return state, TERMINATE
    if isinstance(event, OutcomeReceived):
        return receive_outcome(state, event), NO_EFFECT
    log.debug(f"Ignoring unknown event: {event!r}")
    return state, NO_EFFECT
