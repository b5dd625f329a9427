import numpy as np
import pytest

from scalar_aad import BackwardConfig, Node, grad, grads, grads_list, check_grads, value, leaf
from scalar_aad.core import tape as tape_mod


def test_value_passthrough():
    assert value(leaf(2.5)) == 2.5
    assert value(3.0) == 3.0


def test_grad_single_input():
    assert grad(lambda x: x * x, 3.0) == 6.0
    assert grad(lambda x: x.tanh(), 0.0) == 1.0


def test_grad_constant_output_is_zero():
    assert grad(lambda x: 5.0, 1.0) == 0.0


def test_grads_dict():
    def f(v):
        return v["a"] * v["b"] + v["c"]

    g = grads(f, {"a": 2.0, "b": -3.0, "c": 10.0})
    assert list(g) == ["a", "b", "c"]
    assert g == {"a": -3.0, "b": 2.0, "c": 1.0}


def test_grads_list_docstring_example():
    assert grads_list(lambda xs: xs[0] * xs[0] + 3 * xs[1], [2.0, 4.0]) == [4.0, 3.0]


def test_grads_accepts_existing_nodes():
    a = leaf(2.0)
    g = grads(lambda v: v["a"] * v["a"], {"a": a})
    assert g["a"] == 4.0
    assert a.gradient == 4.0


def test_grads_with_topological_strategy():
    def f(v):
        d = v["a"] * v["b"]
        return d * (v["a"] + v["b"])

    config = BackwardConfig(strategy="topological")
    assert grads(f, {"a": -2.0, "b": 3.0}, config=config) == {"a": -3.0, "b": -8.0}


def test_convenience_helpers_isolate_tape():
    grads(lambda v: v["x"] * v["x"], {"x": 1.0})
    assert tape_mod.active_tape is None


def test_check_grads_agrees_with_finite_differences():
    def f(v):
        return (v["x1"] * v["w1"] + v["x2"] * v["w2"] + 0.5).tanh() * v["x1"]

    report = check_grads(f, {"x1": 0.7, "x2": -0.2, "w1": 1.3, "w2": 0.4})
    assert report['analytic'].shape == (4,)
    assert report['numeric'].shape == (4,)
    assert report['max_abs_err'] < 1e-4
    np.testing.assert_allclose(report['analytic'], report['numeric'], atol=1e-4)


def test_check_grads_detects_mismatch():
    # A function whose forward value ignores the graph: analytic gradient 0
    def f(v):
        return leaf(float(v["x"].value) ** 2)

    report = check_grads(f, {"x": 3.0})
    assert report['analytic'][0] == 0.0
    assert report['numeric'][0] == pytest.approx(6.0, abs=1e-3)
    assert report['max_abs_err'] > 5.0


def test_results_are_plain_nodes_inputs():
    seen = {}

    def f(v):
        seen.update(v)
        return v["x"] + 1.0

    grads(f, {"x": 1.0})
    assert isinstance(seen["x"], Node)
    assert seen["x"].name == "x"


def test_repeated_grads_on_same_node_do_not_accumulate():
    a = leaf(2.0)
    first = grads(lambda v: v["a"] * v["a"], {"a": a})
    second = grads(lambda v: v["a"] * v["a"], {"a": a})
    assert first["a"] == 4.0
    assert second["a"] == 4.0


def test_stale_gradient_on_input_is_cleared():
    a = leaf(2.0)
    a.gradient = np.float64(10.0)
    assert grad(lambda x: x, a) == 1.0
    assert grads_list(lambda xs: xs[0] * 3.0, [a]) == [3.0]
