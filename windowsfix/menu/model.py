"""Menu data model: items, outcomes, state, events and effects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Optional, Sequence, Tuple, Union

from windowsfix.exceptions import RegistryError

if TYPE_CHECKING:
    from windowsfix.actions.base import Action

DEFAULT_STATUS = "Choose an option and press Enter to execute ;)"

# Outcome messages start with one of these to pick their rendering style.
SUCCESS_MARKER = "Success:"
ERROR_MARKER = "Error:"


# ==============================================================================
# Outcomes
# ==============================================================================


class OutcomeKind(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Outcome:
    """Single result value produced by a launched action.

    Carries no reference to the item that produced it; the state machine
    correlates it through ``MenuState.last_launched``.
    """

    kind: OutcomeKind
    message: str

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


def Success(message: str) -> Outcome:
    return Outcome(OutcomeKind.SUCCESS, message)


def Failure(message: str) -> Outcome:
    return Outcome(OutcomeKind.FAILURE, message)


# ==============================================================================
# Items and state
# ==============================================================================


@dataclass(frozen=True)
class MenuItem:
    label: str
    action: Optional[Action] = None
    in_progress_text: str = ""
    affects_busy_flag: bool = True
    terminal: bool = False


@dataclass(frozen=True)
class MenuState:
    cursor: int
    items: Tuple[MenuItem, ...]
    completed: FrozenSet[int] = field(default_factory=frozenset)
    busy: bool = False
    last_launched: Optional[int] = None
    status_text: str = DEFAULT_STATUS

    @property
    def current_item(self) -> MenuItem:
        return self.items[self.cursor]

    def is_completed(self, index: int) -> bool:
        return index in self.completed


def initial_state(
    items: Sequence[MenuItem], status_text: str = DEFAULT_STATUS
) -> MenuState:
    """Build the start-up state: cursor on the first item, nothing running."""
    items = tuple(items)
    if not items:
        raise RegistryError("Menu must contain at least one item")
    return MenuState(cursor=0, items=items, status_text=status_text)


# ==============================================================================
# Events
# ==============================================================================


@dataclass(frozen=True)
class MoveUp:
    pass


@dataclass(frozen=True)
class MoveDown:
    pass


@dataclass(frozen=True)
class Activate:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class OutcomeReceived:
    outcome: Outcome


Event = Union[MoveUp, MoveDown, Activate, Quit, OutcomeReceived]


# ==============================================================================
# Effects
# ==============================================================================


@dataclass(frozen=True)
class NoEffect:
    pass


@dataclass(frozen=True)
class Launch:
    index: int


@dataclass(frozen=True)
class Terminate:
    pass


Effect = Union[NoEffect, Launch, Terminate]

NO_EFFECT = NoEffect()
TERMINATE = Terminate()
