# scalar_aad/__init__.py
# Scalar reverse-mode automatic differentiation

from .core.node import Node, Operation
from .core.tape import Tape, use_tape
from .core.config import BackwardConfig
from .core.engine import (
    backward,
    zero_gradients,
    reachable,
)
from .core.seeds import grad, grads, grads_list, check_grads, value
from .ops import leaf, add, mul, neg, sub, tanh

# Diagnostics
from .core import graph_utils
from .core.graph_utils import get_graph_stats, count_paths, gradient_table

__all__ = [
    # Core
    'Node',
    'Operation',
    'Tape',
    'use_tape',
    'BackwardConfig',
    # Construction
    'leaf',
    'add',
    'mul',
    'neg',
    'sub',
    'tanh',
    # Engine
    'backward',
    'zero_gradients',
    'reachable',
    # Convenience
    'grad',
    'grads',
    'grads_list',
    'check_grads',
    'value',
    # Diagnostics
    'graph_utils',
    'get_graph_stats',
    'count_paths',
    'gradient_table',
]
