# scalar_aad/ops/transcendental.py
import numpy as np
from typing import Optional
from ..core.node import Node, Operation
from ..core import tape as tape_mod  # Use module access for use_tape() compatibility
from .arithmetic import _as_node


def tanh(a, name: Optional[str] = None) -> Node:
    """
    Hyperbolic tangent: out.value = tanh(a.value)

    Derivative in terms of the output: d/da tanh(a) = 1 - out.value**2
    """
    a = _as_node(a)
    return tape_mod.record(Node(np.tanh(a.value), Operation.TANH, a, name=name))
