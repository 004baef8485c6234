from windowsfix.menu.machine import transition
from windowsfix.menu.model import (
    Activate,
    Failure,
    Launch,
    MenuItem,
    MenuState,
    MoveDown,
    MoveUp,
    NoEffect,
    Outcome,
    OutcomeReceived,
    Quit,
    Success,
    Terminate,
    initial_state,
)

__all__ = [
    "Activate",
    "Failure",
    "Launch",
    "MenuItem",
    "MenuState",
    "MoveDown",
    "MoveUp",
    "NoEffect",
    "Outcome",
    "OutcomeReceived",
    "Quit",
    "Success",
    "Terminate",
    "initial_state",
    "transition",
]
