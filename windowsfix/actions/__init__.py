"""Maintenance actions and the contract they implement."""

from windowsfix.actions.base import TERMINATE_ACTION, Action, ThreadedAction

__all__ = ["Action", "TERMINATE_ACTION", "ThreadedAction"]
