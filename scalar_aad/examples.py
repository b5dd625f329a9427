"""
Example graphs.

Each builder returns {name: Node} with the output last; `run_example` builds
one, runs a backward pass from the output and returns the nodes with their
gradients filled in.

    1. chain    : loss = (a*b + c) * f
    2. neuron   : o = tanh(x1*w1 + x2*w2 + b), bias b added as a constant
    3. self_add : b = a + a
    4. diamond  : f = (a*b) * (a+b)
"""

from typing import Callable, Dict, Optional

from .core.node import Node
from .core.config import BackwardConfig
from .core.engine import backward
from .ops import leaf, add, mul, tanh


def build_chain() -> Dict[str, Node]:
    a = leaf(2.0, name="a")
    b = leaf(-3.0, name="b")
    c = leaf(10.0, name="c")
    e = mul(a, b, name="e")
    d = add(e, c, name="d")
    f = leaf(-2.0, name="f")
    loss = mul(d, f, name="loss")
    return {"a": a, "b": b, "c": c, "d": d, "e": e, "f": f, "loss": loss}


def build_neuron() -> Dict[str, Node]:
    x1 = leaf(2.0, name="x1")
    x2 = leaf(0.0, name="x2")
    w1 = leaf(-3.0, name="w1")
    w2 = leaf(1.0, name="w2")
    x1w1 = mul(x1, w1, name="x1w1")
    x2w2 = mul(x2, w2, name="x2w2")
    x1w1x2w2 = add(x1w1, x2w2, name="x1w1x2w2")
    n = add(x1w1x2w2, 6.881373, name="n")  # constant bias, wrapped as a leaf
    o = tanh(n, name="o")
    return {
        "x1": x1, "x2": x2, "w1": w1, "w2": w2,
        "x1w1": x1w1, "x2w2": x2w2, "x1w1x2w2": x1w1x2w2, "n": n, "o": o,
    }


def build_self_add() -> Dict[str, Node]:
    a = leaf(3.0, name="a")
    b = add(a, a, name="b")
    return {"a": a, "b": b}


def build_diamond() -> Dict[str, Node]:
    a = leaf(-2.0, name="a")
    b = leaf(3.0, name="b")
    d = mul(a, b, name="d")
    e = add(a, b, name="e")
    f = mul(d, e, name="f")
    return {"a": a, "b": b, "d": d, "e": e, "f": f}


EXAMPLES: Dict[int, Callable[[], Dict[str, Node]]] = {
    1: build_chain,
    2: build_neuron,
    3: build_self_add,
    4: build_diamond,
}


def run_example(number: int, seed: float = 1.0,
                config: Optional[BackwardConfig] = None) -> Dict[str, Node]:
    """Build example `number`, backpropagate from its output and return its nodes."""
    if number not in EXAMPLES:
        raise ValueError(f"Unknown example {number}; choose from {sorted(EXAMPLES)}")
    nodes = EXAMPLES[number]()
    output = list(nodes.values())[-1]
    backward(output, seed, config=config)
    return nodes
