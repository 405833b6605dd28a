"""
Event boundary between the solve loop and its observers.

The loop calls ``emit`` at fixed points.  When no AlgorithmLogger is
passed in, each call is a single ``is None`` check.  Faults raised by an
action are logged and swallowed here so observers cannot break a run.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Union

from .actions import LoggingAction

logger = logging.getLogger(__name__)

LOGGER_ROOT = "iterative_algorithms"


class Event(str, Enum):
    """Events emitted by the generic solve loop."""
    START = "Start"          # State initialized, loop about to begin
    PRE_STEP = "PreStep"     # Between the termination check and the step
    POST_STEP = "PostStep"   # Step done, before the next termination check
    STOP = "Stop"            # Loop finished


EventName = Union[Event, str]


def _event_key(event: EventName) -> str:
    return event.value if isinstance(event, Event) else str(event)


class AlgorithmLogger:
    """
    Maps event names to logging actions.

    Algorithms may emit their own event names in addition to the four
    standard ones; any string works as a key.

    Example::

        log = AlgorithmLogger({Event.POST_STEP: CallbackAction(show)})
        solve(problem, algorithm, logger=log)
    """

    def __init__(self, actions: Optional[Mapping[EventName, LoggingAction]] = None,
                 enabled: bool = True, **named_actions: LoggingAction):
        self._actions: Dict[str, LoggingAction] = {}
        self.enabled = enabled
        for event, action in dict(actions or {}, **named_actions).items():
            self.register(event, action)

    def register(self, event: EventName, action: LoggingAction) -> None:
        self._actions[_event_key(event)] = action

    def unregister(self, event: EventName) -> Optional[LoggingAction]:
        return self._actions.pop(_event_key(event), None)

    def action_for(self, event: EventName) -> Optional[LoggingAction]:
        return self._actions.get(_event_key(event))

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def emit(self, problem, algorithm, state, event: EventName) -> None:
        """Run the action registered for ``event``, if any."""
        if not self.enabled:
            return
        key = _event_key(event)
        action = self._actions.get(key)
        if action is None:
            return
        try:
            data = action.handle(problem, algorithm, state)
            if data is not None:
                group = getattr(algorithm, "name", type(algorithm).__name__)
                logging.getLogger(f"{LOGGER_ROOT}.{group}").log(
                    action.level, "%s", data,
                    extra={"algorithm_event": key, "iteration": getattr(state, "iteration", None)},
                )
        except Exception:
            logger.exception("Error during the handling of a logging action")

    def __contains__(self, event: EventName) -> bool:
        return _event_key(event) in self._actions

    def __repr__(self) -> str:
        status = "enabled" if self.enabled else "disabled"
        return f"AlgorithmLogger({sorted(self._actions)}, {status})"


def emit(algorithm_logger: Optional[AlgorithmLogger], problem, algorithm, state,
         event: EventName) -> None:
    """Null-safe emit used by the solve loop."""
    if algorithm_logger is None:
        return
    algorithm_logger.emit(problem, algorithm, state, event)
