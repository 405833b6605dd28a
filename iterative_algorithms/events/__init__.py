"""events – event names, logging actions and the AlgorithmLogger boundary."""

from .actions import (
    LoggingAction, CallbackAction, IfAction, ActionGroup, LevelAction, RecordAction,
)
from .logger import Event, AlgorithmLogger, emit

__all__ = [
    "LoggingAction", "CallbackAction", "IfAction", "ActionGroup", "LevelAction", "RecordAction",
    "Event", "AlgorithmLogger", "emit",
]
