"""stopping – criterion capability set, concrete criteria, composites and presets."""

from .base import (
    Criterion, CriterionState, DefaultState,
    init_stopping_state, reset_stopping_state,
    is_finished, check_finished, get_reason, indicates_convergence,
)
from .iteration import AfterIteration
from .duration import AfterDuration, DurationState
from .composite import All, Any, GroupState
from .change import ChangeBelow, ChangeState
from .flag import WhenFlagged
from .config import StoppingConfig

__all__ = [
    "Criterion", "CriterionState", "DefaultState",
    "init_stopping_state", "reset_stopping_state",
    "is_finished", "check_finished", "get_reason", "indicates_convergence",
    "AfterIteration", "AfterDuration", "DurationState",
    "All", "Any", "GroupState",
    "ChangeBelow", "ChangeState", "WhenFlagged", "StoppingConfig",
]
