"""
StoppingConfig – declarative stopping setup with factory presets.

Lets callers describe the usual limits as plain data and turn them into a
composed Criterion with build().
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from .base import Criterion
from .change import ChangeBelow
from .composite import All, Any
from .duration import AfterDuration
from .iteration import AfterIteration


@dataclass
class StoppingConfig:
    """Configuration for stopping criteria."""
    # Hard caps
    max_iterations: Optional[int] = 1000
    max_seconds: Optional[float] = None

    # Convergence (norm of the change between iterates)
    tolerance: Optional[float] = None

    # How configured limits combine: "any" stops on the first, "all" waits for every one
    combine: str = "any"

    def build(self) -> Criterion:
        """Assemble the configured limits into a single Criterion."""
        criteria: List[Criterion] = []
        if self.max_iterations is not None:
            criteria.append(AfterIteration(self.max_iterations))
        if self.max_seconds is not None:
            criteria.append(AfterDuration(self.max_seconds))
        if self.tolerance is not None:
            criteria.append(ChangeBelow(self.tolerance))

        if not criteria:
            raise ValueError("StoppingConfig has no limit configured; the run would never stop")
        if self.combine not in ("any", "all"):
            raise ValueError(f"combine must be 'any' or 'all', got {self.combine!r}")

        if len(criteria) == 1:
            return criteria[0]
        return Any(*criteria) if self.combine == "any" else All(*criteria)

    def to_dict(self) -> Dict:
        """Convert to dictionary (for serialization)."""
        return asdict(self)

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def quick(cls) -> StoppingConfig:
        """Short exploratory runs."""
        return cls(max_iterations=100, max_seconds=10.0, tolerance=1e-4)

    @classmethod
    def thorough(cls) -> StoppingConfig:
        """Long runs that rely on the convergence test."""
        return cls(max_iterations=100_000, max_seconds=None, tolerance=1e-10)

    @classmethod
    def time_boxed(cls, seconds: float) -> StoppingConfig:
        """Wall-clock budget only."""
        return cls(max_iterations=None, max_seconds=seconds)
