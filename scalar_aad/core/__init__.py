# scalar_aad/core/__init__.py

"""
Core public API for the scalar AAD package.

Exports:
    Node, Operation : The graph data model.
    Tape, use_tape  : Optional construction-order recording.
    BackwardConfig  : Traversal strategy and guards for a backward pass.
    backward        : Run one backward pass from a root with a seed gradient.
    zero_gradients  : Reset gradients below a root (or on the active tape).
    reachable       : Unique nodes below a root, in topological order.
    grad, grads     : Convenience: gradients of a function at given inputs.
    value           : Convenience: extract the primal value of a Node.
"""

from .node import Node, Operation
from .tape import Tape, use_tape
from .config import BackwardConfig, DEFAULT_CONFIG
from .engine import backward, zero_gradients, reachable, local_gradients
from .seeds import grad, grads, grads_list, check_grads, value

__all__ = [
    "Node", "Operation",
    "Tape", "use_tape",
    "BackwardConfig", "DEFAULT_CONFIG",
    "backward", "zero_gradients", "reachable", "local_gradients",
    "grad", "grads", "grads_list", "check_grads", "value",
]
