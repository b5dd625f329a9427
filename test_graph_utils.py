import json

import pandas as pd
import pytest

from scalar_aad import BackwardConfig, add, leaf, backward
from scalar_aad.core.graph_utils import (
    analyze_graph_complexity,
    count_paths,
    get_graph_json,
    get_graph_stats,
    gradient_table,
    print_computation_graph,
    print_graph_summary,
)
from scalar_aad.examples import EXAMPLES, build_diamond, build_self_add, run_example


def _stacked_diamonds(levels):
    y = leaf(1.0)
    for _ in range(levels):
        y = add(y, y)
    return y


def test_stats_for_diamond():
    nodes = build_diamond()
    stats = get_graph_stats(nodes["f"])
    assert stats['nodes'] == 5
    assert stats['edges'] == 6
    assert stats['leaves'] == 2
    assert stats['max_fan_out'] == 2
    assert stats['depth'] == 2
    assert stats['paths'] == 7
    assert stats['operations'] == {'leaf': 2, 'mul': 2, 'add': 1}


def test_stats_for_single_leaf():
    stats = get_graph_stats(leaf(1.0))
    assert stats['nodes'] == 1
    assert stats['edges'] == 0
    assert stats['depth'] == 0
    assert stats['paths'] == 1
    assert stats['max_fan_out'] == 0


def test_self_add_counts_both_edges():
    nodes = build_self_add()
    stats = get_graph_stats(nodes["b"])
    assert stats['nodes'] == 2
    assert stats['edges'] == 2
    assert stats['max_fan_out'] == 2
    assert stats['paths'] == 3


@pytest.mark.parametrize("levels", [1, 5, 12])
def test_count_paths_matches_recursive_visits(levels):
    root = _stacked_diamonds(levels)
    result = backward(root, 1.0)
    assert count_paths(root) == result['visits'] == 2 ** (levels + 1) - 1


def test_count_paths_matches_visits_on_examples():
    for build in EXAMPLES.values():
        root = list(build().values())[-1]
        visits = backward(root, config=BackwardConfig(strategy="recursive"))['visits']
        assert count_paths(root) == visits


def test_complexity_report_flags_blow_up():
    report = analyze_graph_complexity(_stacked_diamonds(12))
    assert "Recursive visits: 8,191" in report
    assert "Topological visits: 13" in report
    assert "(High)" in report
    assert "strategy='topological'" in report

    small = analyze_graph_complexity(build_diamond()["f"])
    assert "Recursive visits: 7" in small
    assert "(Low)" in small


def test_gradient_table():
    nodes = run_example(4)
    table = gradient_table(nodes)
    assert isinstance(table, pd.DataFrame)
    assert list(table.columns) == ['value', 'gradient', 'op']
    assert list(table.index) == ["a", "b", "d", "e", "f"]
    assert table.loc["a", "gradient"] == -3.0
    assert table.loc["b", "gradient"] == -8.0
    assert table.loc["f", "op"] == "mul"
    assert table.loc["e", "value"] == 1.0


def test_graph_json_is_serialisable():
    nodes = run_example(4)
    data = get_graph_json(nodes["f"])
    assert len(data["nodes"]) == 5
    assert len(data["edges"]) == 6
    json.dumps(data)
    labels = {n["label"].split(" |")[0]: n for n in data["nodes"]}
    assert labels["a"]["op"] == "leaf"
    assert "grad: -3.0000" in labels["a"]["label"]


def test_print_graph_summary(capsys):
    stats = print_graph_summary(build_diamond()["f"])
    out = capsys.readouterr().out
    assert "COMPUTATION GRAPH SUMMARY" in out
    assert "Root-to-node paths: 7" in out
    assert stats['nodes'] == 5


def test_print_computation_graph(capsys):
    nodes = run_example(1)
    print_computation_graph(nodes["loss"], max_nodes=3)
    out = capsys.readouterr().out
    assert "COMPUTATION GRAPH STRUCTURE" in out
    assert "[leaf/input]" in out
    assert "(4 more nodes)" in out

    print_computation_graph(nodes["loss"])
    out = capsys.readouterr().out
    assert "<- [d, f]" in out
