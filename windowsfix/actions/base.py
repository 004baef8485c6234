"""Action contract shared by every menu operation.

An action is started with ``invoke(deliver)``. The call returns immediately,
and ``deliver`` is called exactly once, later and from another thread, with
the action's ``Outcome``.
"""

from __future__ import annotations

import abc
import threading
from typing import Callable, Optional

from windowsfix.exceptions import ActionFailedError, WindowsFixError
from windowsfix.logging import operation_context
from windowsfix.menu.model import ERROR_MARKER, Failure, Outcome

Deliver = Callable[[Outcome], None]


class Action(abc.ABC):
    name: str = "action"

    @abc.abstractmethod
    def invoke(self, deliver: Deliver) -> Optional[threading.Thread]:
        """Schedule the work and return without waiting for it."""


class ThreadedAction(Action):
    """Runs a blocking function on a daemon worker thread.

    ``func`` returns an ``Outcome``. Exceptions never escape the worker: a
    ``WindowsFixError`` becomes ``Failure("Error: <message>")`` and anything
    else becomes ``Failure("Error: <name> failed - <exc>")``. A ``Failure``
    returned by ``func`` is raised as ``ActionFailedError`` so the operation
    is logged as failed, then handed back unchanged.
    """

    def __init__(self, name: str, func: Callable[[], Outcome]) -> None:
        self.name = name
        self.func = func

    def __repr__(self) -> str:
        return f"ThreadedAction({self.name!r})"

    def invoke(self, deliver: Deliver) -> threading.Thread:
        thread = threading.Thread(
            target=self._run,
            args=(deliver,),
            name=f"action-{self.name}",
            daemon=True,
        )
        thread.start()
        return thread

    def _run(self, deliver: Deliver) -> None:
        deliver(self.execute())

    def execute(self) -> Outcome:
        """Run ``func`` synchronously and always return exactly one Outcome."""
        try:
            with operation_context(self.name):
                outcome = self.func()
                if not isinstance(outcome, Outcome):
                    raise TypeError(f"returned {type(outcome).__name__}, not Outcome")
                if not outcome.ok:
                    raise ActionFailedError(outcome.message)
                return outcome
        except ActionFailedError as error:
            return Failure(error.message)
        except WindowsFixError as error:
            return Failure(f"{ERROR_MARKER} {error}")
        except Exception as error:
            return Failure(f"{ERROR_MARKER} {self.name} failed - {error}")


class TerminateAction(Action):
    """Action of the terminal menu item.

    The state machine answers activation of a terminal item with a
    ``Terminate`` effect, so this is never invoked by the event loop.
    """

    name = "exit"

    def invoke(self, deliver: Deliver) -> None:
        raise RuntimeError("The terminal item is handled by the event loop")


TERMINATE_ACTION = TerminateAction()
