# scalar_aad/core/engine.py
from __future__ import annotations
import time
import warnings
from typing import List, Optional, Tuple
import numpy as np
from . import tape as tape_mod  # module access so use_tape() swaps are visible
from .config import BackwardConfig, DEFAULT_CONFIG
from .node import Node, Operation


# -------- Chain rule per primitive -------- #
def local_gradients(node: Node, upstream) -> List[Tuple[Node, float]]:
    """
    Distribute `upstream` (d root / d node) to the operands of `node`.

    Returns a list of (operand, contribution) pairs, left operand first.
    Contributions only read forward values, which never change, so they can
    be applied in any order.

        add : d(a+b)/da = 1,        d(a+b)/db = 1
        mul : d(a*b)/da = b.value,  d(a*b)/db = a.value
        tanh: d tanh(a)/da = 1 - out.value**2
    """
    op = node.operation
    if op is None:
        return []

    if op is Operation.ADD:
        return [(node.left, upstream), (node.right, upstream)]

    if op is Operation.MUL:
        left_value, right_value = node.left.value, node.right.value
        return [(node.left, upstream * right_value), (node.right, upstream * left_value)]

    if op is Operation.TANH:
        return [(node.left, upstream * (1.0 - node.value ** 2))]

    raise ValueError(f"Unsupported operation: {op!r}")


# -------- Traversal helpers -------- #
def reachable(root: Node) -> List[Node]:
    """
    Unique nodes reachable from `root` through operand links, in topological
    order (operands before the nodes that use them; `root` is last).
    Iterative post-order DFS, so graph depth is not bounded by the recursion limit.
    """
    order: List[Node] = []
    visited = set()
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        for operand in reversed(node.operands()):
            if id(operand) not in visited:
                stack.append((operand, False))
    return order


def zero_gradients(root: Optional[Node] = None) -> int:
    """
    Set gradients back to 0.0 and return how many nodes were reset.

    With a root: every node reachable from it.
    Without:     every node recorded on the active tape, plus their operands.
    """
    if root is not None:
        nodes = reachable(root)
        for node in nodes:
            node.gradient = np.float64(0.0)
        return len(nodes)

    if tape_mod.active_tape is None:
        return 0
    seen = set()
    for node in tape_mod.active_tape.nodes:
        for v in (node,) + node.operands():
            if id(v) not in seen:
                v.gradient = np.float64(0.0)
                seen.add(id(v))
    return len(seen)


class _PassState:
    """
    Visit counting, optional guards and per-pass gradient totals.

    Contributions are summed locally and only added to `node.gradient` by
    `commit()`, so a pass aborted by `max_visits` leaves gradients untouched.
    """

    def __init__(self, config: BackwardConfig):
        self.config = config
        self.visits = 0
        self._warned = False
        self._totals = {}  # id(node) -> (node, summed contribution)

    def accumulate(self, node: Node, contribution):
        self.visits += 1
        if self.config.max_visits is not None and self.visits > self.config.max_visits:
            raise RuntimeError(
                f"Backward pass exceeded max_visits={self.config.max_visits}; "
                f"the graph has too many root-to-node paths (or a cycle)"
            )
        key = id(node)
        total = self._totals[key][1] + contribution if key in self._totals else contribution
        self._totals[key] = (node, total)
        if self.config.check_finite and not self._warned and not np.isfinite(contribution):
            warnings.warn(
                f"Non-finite gradient contribution {float(contribution)} reached {node!r}",
                RuntimeWarning,
                stacklevel=4,
            )
            self._warned = True

    def commit(self):
        for node, total in self._totals.values():
            node.gradient += total
        self._totals.clear()


# -------- Backward propagation -------- #
def _backward_recursive(root: Node, seed, state: _PassState):
    """
    Depth-first distribution with no visited set: a shared node is expanded
    once per path that reaches it. Explicit stack, same visiting order as the
    plain recursive form (left subtree fully before right).
    """
    stack = [(root, seed)]
    while stack:
        node, g = stack.pop()
        state.accumulate(node, g)
        for operand, contribution in reversed(local_gradients(node, g)):
            stack.append((operand, contribution))


def _backward_topological(root: Node, seed, state: _PassState):
    """Each reachable node visited once, users before operands."""
    pending = {id(root): seed}
    for node in reversed(reachable(root)):
        g = pending.pop(id(node))
        state.accumulate(node, g)
        for operand, contribution in local_gradients(node, g):
            key = id(operand)
            pending[key] = pending[key] + contribution if key in pending else contribution


def backward(root: Node, seed=1.0, *, config: Optional[BackwardConfig] = None) -> dict:
    """
    Run one backward pass from `root`, seeding d root / d root = `seed`.

    Gradients are accumulated into every reachable node (never overwritten),
    so repeated passes add up; call `zero_gradients` in between if needed.

    Args:
        root:   output node to differentiate.
        seed:   incoming gradient at the root (1.0 for a plain gradient).
        config: BackwardConfig; DEFAULT_CONFIG when omitted.

    Returns:
        {'strategy': str, 'visits': int, 'time_ms': float}

    Notes:
        - The default 'recursive' strategy costs one visit per root-to-node
          path; use strategy='topological' on heavily shared graphs.
        - Cyclic graphs are not valid input and are not detected, unless
          `max_visits` is set.
        - Gradients are written once the traversal completes; a pass aborted
          by `max_visits` raises RuntimeError and changes no gradient.
    """
    if not isinstance(root, Node):
        raise TypeError(f"backward() expects a Node root, got {type(root)}")
    cfg = (config if config is not None else DEFAULT_CONFIG).validate()

    state = _PassState(cfg)
    t0 = time.perf_counter()
    if cfg.strategy == "recursive":
        _backward_recursive(root, np.float64(seed), state)
    else:
        _backward_topological(root, np.float64(seed), state)
    state.commit()
    time_ms = (time.perf_counter() - t0) * 1000.0

    if cfg.verbose:
        print(f"[backward] strategy={cfg.strategy} visits={state.visits:,} time={time_ms:.3f} ms")

    return {
        'strategy': cfg.strategy,
        'visits': state.visits,
        'time_ms': time_ms,
    }
