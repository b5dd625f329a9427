# scalar_aad/core/tape.py
from __future__ import annotations
from typing import Dict, List, Optional
from contextlib import contextmanager
from .node import Node


class Tape:
    """
    Records Nodes in construction (forward) order.

    Nothing is recorded unless a tape is activated with `use_tape`, so plain
    graph building never keeps nodes alive beyond their own references.
    """
    def __init__(self):
        self.nodes: List[Node] = []
        self._index: Dict[int, int] = {}

    def __len__(self):
        return len(self.nodes)

    def reset(self):
        self.nodes.clear()
        self._index.clear()

    def push_node(self, node: Node) -> int:
        """Append `node` to the tape and return its position."""
        self._index[id(node)] = len(self.nodes)
        self.nodes.append(node)
        return len(self.nodes) - 1

    def index_of(self, node: Node) -> Optional[int]:
        """Position of `node` on this tape, or None if it was never recorded."""
        return self._index.get(id(node))


# Currently active tape; None means "do not record"
active_tape: Optional[Tape] = None


def record(node: Node) -> Node:
    """Push `node` onto the active tape, if any, and return it."""
    if active_tape is not None:
        active_tape.push_node(node)
    return node


@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily record onto a (fresh) tape:
        with use_tape() as t:
            ... build computation ...
            backward(y)
            zero_gradients()
    """
    global active_tape
    prev = active_tape
    try:
        active_tape = tape if tape is not None else Tape()
        yield active_tape
    finally:
        active_tape = prev
