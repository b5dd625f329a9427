# scalar_aad/core/config.py
"""
Configuration for backward propagation.

Strategies:
    recursive   : depth-first chain-rule distribution with no visited set.
                  A shared node is re-expanded once per root-to-node path, so
                  cost grows with the number of paths (exponential on stacked
                  diamonds). Default.
    topological : visit each reachable node once in reverse topological order.
                  Same gradients, cost linear in the number of edges.
"""

from dataclasses import dataclass
from typing import Optional

STRATEGIES = ("recursive", "topological")


@dataclass
class BackwardConfig:
    """Configuration for a backward pass."""
    # Traversal
    strategy: str = "recursive"  # 'recursive', 'topological'

    # Guards (off by default: values and paths flow through unchecked)
    check_finite: bool = False          # warn on the first NaN/Inf contribution
    max_visits: Optional[int] = None    # abort once this many node visits happen

    # Logging
    verbose: bool = False

    def validate(self) -> "BackwardConfig":
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown backward strategy: {self.strategy}")
        if self.max_visits is not None and self.max_visits < 1:
            raise ValueError(f"max_visits must be a positive integer, got {self.max_visits}")
        return self


DEFAULT_CONFIG = BackwardConfig()
