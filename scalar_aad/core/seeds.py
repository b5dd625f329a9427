# scalar_aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional
import numpy as np
from scipy.optimize import approx_fprime

from .node import Node
from .tape import use_tape
from .config import BackwardConfig
from .engine import backward, zero_gradients
from ..ops.arithmetic import leaf


def value(x: Any) -> Any:
    """Return the numeric value of a Node; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Node) else x


def _ensure_node(v: Any, *, name: str) -> Node:
    """Wrap a plain value as a leaf if needed; otherwise return the Node itself."""
    return v if isinstance(v, Node) else leaf(v, name=name)


def _as_output(y: Any) -> Node:
    return y if isinstance(y, Node) else leaf(y, name="y")


def _zero_for_pass(y: Node, inputs: Iterable[Node]):
    """Clear stale gradients so the pass returns d y / d input only."""
    zero_gradients()
    zero_gradients(y)
    for x in inputs:
        x.gradient = np.float64(0.0)


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Node], Node], x0: float,
         *, config: Optional[BackwardConfig] = None) -> float:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one backward pass within a fresh, isolated tape.
    """
    with use_tape():
        x = _ensure_node(x0, name="x")
        y = _as_output(f(x))
        _zero_for_pass(y, [x])
        backward(y, 1.0, config=config)
        return x.gradient


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Node]], Node], inputs: Dict[str, float],
          *, config: Optional[BackwardConfig] = None) -> Dict[str, float]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form), from ONE backward pass.

    Parameters
    ----------
    f       : function taking a dict {name: Node} and returning a Node
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: gradient}  # same key order as `inputs`
    """
    with use_tape():
        nodes: Dict[str, Node] = {k: _ensure_node(v, name=k) for k, v in inputs.items()}
        y = _as_output(f(nodes))
        _zero_for_pass(y, nodes.values())
        backward(y, 1.0, config=config)
        return {k: nodes[k].gradient for k in inputs.keys()}


def grads_list(f: Callable[[List[Node]], Node], x0_list: Iterable[float],
               *, config: Optional[BackwardConfig] = None) -> List[float]:
    """
    Same as grads(), with positional inputs.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_tape():
        xs: List[Node] = [_ensure_node(v, name=f"x{i}") for i, v in enumerate(x0_list)]
        y = _as_output(f(xs))
        _zero_for_pass(y, xs)
        backward(y, 1.0, config=config)
        return [x.gradient for x in xs]


def check_grads(f: Callable[[Dict[str, Node]], Node], inputs: Dict[str, float],
                epsilon: float = 1e-6) -> Dict[str, Any]:
    """
    Compare backward-pass gradients against forward finite differences.

    Returns
    -------
    {
        'analytic'   : np.ndarray,  # from grads(), in inputs.keys() order
        'numeric'    : np.ndarray,  # scipy.optimize.approx_fprime estimate
        'max_abs_err': float,
    }
    """
    keys = list(inputs.keys())
    x0 = np.array([float(inputs[k]) for k in keys], dtype=np.float64)

    def forward_only(x: np.ndarray) -> float:
        with use_tape():
            y = f({k: leaf(x[i], name=k) for i, k in enumerate(keys)})
            return float(value(y))

    analytic_map = grads(f, {k: x0[i] for i, k in enumerate(keys)})
    analytic = np.array([float(analytic_map[k]) for k in keys], dtype=np.float64)
    numeric = approx_fprime(x0, forward_only, epsilon)
    return {
        'analytic': analytic,
        'numeric': numeric,
        'max_abs_err': float(np.max(np.abs(analytic - numeric))) if keys else 0.0,
    }
