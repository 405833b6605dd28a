"""
Logging actions.

An action turns a (problem, algorithm, state) snapshot into log data.
Returning None means "nothing to log this time".  Actions are composed
the same way criteria are: wrap, filter, group.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional

import pandas as pd


class LoggingAction(ABC):
    """Base class for anything that can be registered on an event."""

    level: int = logging.INFO

    @abstractmethod
    def handle(self, problem, algorithm, state) -> Any:
        """Produce the data for one log record, or None."""


class CallbackAction(LoggingAction):
    """
    Wrap a plain function ``fn(problem, algorithm, state)``.

    Usable as a decorator::

        @CallbackAction
        def show(problem, algorithm, state):
            return f"iteration {state.iteration}"
    """

    def __init__(self, fn: Callable, level: int = logging.INFO):
        self.fn = fn
        self.level = level

    def handle(self, problem, algorithm, state) -> Any:
        return self.fn(problem, algorithm, state)

    def __repr__(self) -> str:
        return f"CallbackAction({getattr(self.fn, '__name__', self.fn)!r})"


class IfAction(LoggingAction):
    """Run ``action`` only when ``predicate(problem, algorithm, state)`` holds."""

    def __init__(self, predicate: Callable[..., bool], action: LoggingAction):
        self.predicate = predicate
        self.action = action

    @property
    def level(self) -> int:
        return self.action.level

    def handle(self, problem, algorithm, state) -> Any:
        if self.predicate(problem, algorithm, state):
            return self.action.handle(problem, algorithm, state)
        return None


class ActionGroup(LoggingAction):
    """Run several actions in order; logs at the highest of their levels."""

    def __init__(self, *actions: LoggingAction):
        self.actions: List[LoggingAction] = list(actions)

    @property
    def level(self) -> int:
        return max((a.level for a in self.actions), default=logging.INFO)

    def handle(self, problem, algorithm, state) -> Any:
        data = [a.handle(problem, algorithm, state) for a in self.actions]
        data = [d for d in data if d is not None]
        return data or None


class LevelAction(LoggingAction):
    """Re-emit ``action`` at a fixed logging level."""

    def __init__(self, action: LoggingAction, level: int):
        self.action = action
        self.level = level

    def handle(self, problem, algorithm, state) -> Any:
        return self.action.handle(problem, algorithm, state)


class RecordAction(LoggingAction):
    """
    Collect one row per call into an in-memory history.

    Nothing is sent to the log; read the rows back with ``to_dataframe()``.

    Args:
        fields: column name -> ``fn(problem, algorithm, state)``.  Defaults
            to the iteration counter and the iterate.
    """

    def __init__(self, fields: Optional[Mapping[str, Callable]] = None):
        self.fields: Dict[str, Callable] = dict(fields) if fields else {
            'iteration': lambda problem, algorithm, state: state.iteration,
            'iterate': lambda problem, algorithm, state: state.iterate,
        }
        self.records: List[Dict[str, Any]] = []
        self._df: Optional[pd.DataFrame] = None

    def handle(self, problem, algorithm, state) -> None:
        self.records.append({name: fn(problem, algorithm, state) for name, fn in self.fields.items()})
        self._df = None
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """Get pandas DataFrame of all records."""
        if self._df is None:
            if not self.records:
                return pd.DataFrame(columns=list(self.fields))
            self._df = pd.DataFrame(self.records)
        return self._df

    def clear(self) -> None:
        self.records.clear()
        self._df = None

    def __len__(self) -> int:
        return len(self.records)
