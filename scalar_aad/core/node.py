# scalar_aad/core/node.py
from __future__ import annotations
from enum import Enum
from numbers import Real
from typing import Optional
import numpy as np


class Operation(Enum):
    """Closed set of primitives a Node can be produced by."""
    ADD = "add"
    MUL = "mul"
    TANH = "tanh"


# Number of operands each primitive consumes
ARITY = {
    Operation.ADD: 2,
    Operation.MUL: 2,
    Operation.TANH: 1,
}


class Node:
    """
    One scalar value in the computation graph.

    Attributes
    ----------
    value : np.float64
        Forward (primal) value. Read-only: fixed at construction.
    gradient : np.float64
        Accumulated partial derivative of the backward root w.r.t. this node.
        Starts at 0.0 and is only ever increased by backward passes.
    operation : Optional[Operation]
        Primitive that produced this node, None for a leaf.
    left, right : Optional[Node]
        Operands. Unary primitives (tanh) use `left` only; leaves use neither.
    name : Optional[str]
        Optional debug/pretty-print name.

    Operands are fixed at construction, and a node cannot reference itself
    before it exists, so every graph built through this class is acyclic.
    """

    def __init__(self, value, operation: Optional[Operation] = None,
                 left: Optional["Node"] = None, right: Optional["Node"] = None,
                 *, name: Optional[str] = None):
        # bool is a Real subclass but never a meaningful graph input
        if isinstance(value, bool) or not isinstance(value, (Real, np.floating, np.integer)):
            raise TypeError(f"Node only accepts real scalars, but got {type(value)}")

        n_operands = int(left is not None) + int(right is not None)
        if operation is None:
            if n_operands:
                raise ValueError("A leaf node cannot have operands")
        else:
            if left is None or n_operands != ARITY[operation]:
                raise ValueError(
                    f"Operation {operation.value!r} expects {ARITY[operation]} operand(s), "
                    f"got left={left is not None}, right={right is not None}"
                )
        for operand in (left, right):
            if operand is not None and not isinstance(operand, Node):
                raise TypeError(f"Operands must be Node instances, got {type(operand)}")

        self._value = np.float64(value)
        self._operation = operation
        self._left = left
        self._right = right
        self.gradient = np.float64(0.0)
        self.name = name

    @property
    def value(self) -> np.float64:
        return self._value

    @property
    def operation(self) -> Optional[Operation]:
        return self._operation

    @property
    def left(self) -> Optional["Node"]:
        return self._left

    @property
    def right(self) -> Optional["Node"]:
        return self._right

    @property
    def is_leaf(self) -> bool:
        return self._operation is None

    def operands(self):
        """Present operands, left first. The same node may appear twice."""
        return tuple(p for p in (self._left, self._right) if p is not None)

    def __repr__(self):
        op = self._operation.value if self._operation is not None else "leaf"
        return (f"Node(value={float(self._value)!r}, gradient={float(self.gradient)!r}, "
                f"op={op}, name={self.name!r})")

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def tanh(self):
        from ..ops.transcendental import tanh
        return tanh(self)
