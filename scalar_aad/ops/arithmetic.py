# scalar_aad/ops/arithmetic.py
from typing import Optional
from ..core.node import Node, Operation
from ..core import tape as tape_mod  # Use module access for use_tape() compatibility


def leaf(value, name: Optional[str] = None) -> Node:
    """Input constant: no producing operation, no operands, gradient 0.0."""
    return tape_mod.record(Node(value, name=name))


def _as_node(x):
    """Ensure x is a Node; otherwise wrap it as a constant leaf."""
    return x if isinstance(x, Node) else leaf(x)


def add(a, b, name: Optional[str] = None) -> Node:
    """
    out.value = a.value + b.value
    Local partials: d/da = 1, d/db = 1. `a` and `b` may be the same node.
    """
    a = _as_node(a)
    b = _as_node(b)
    return tape_mod.record(Node(a.value + b.value, Operation.ADD, a, b, name=name))


def mul(a, b, name: Optional[str] = None) -> Node:
    """
    out.value = a.value * b.value
    Local partials: d/da = b.value, d/db = a.value. `a` and `b` may be the same node.
    """
    a = _as_node(a)
    b = _as_node(b)
    return tape_mod.record(Node(a.value * b.value, Operation.MUL, a, b, name=name))


# Composites: expressed through the primitives so the operation set stays closed
def neg(a, name: Optional[str] = None) -> Node:
    return mul(a, leaf(-1.0), name=name)


def sub(a, b, name: Optional[str] = None) -> Node:
    return add(a, neg(b), name=name)
