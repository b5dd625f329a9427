"""
Graph utilities
Printing and analysing the structure of a scalar computation graph.
"""

import numpy as np
import pandas as pd
from typing import Dict, List
from collections import Counter

from .node import Node
from .engine import reachable


def _label(node: Node, index: Dict[int, int]) -> str:
    return node.name if node.name else f"Node{index[id(node)]}"


def _op_tag(node: Node) -> str:
    return node.operation.value if node.operation is not None else "leaf"


def count_paths(root: Node) -> int:
    """
    Number of root-to-node paths, summed over every reachable node.

    This is exactly the number of visits the 'recursive' backward strategy
    makes from `root`; compare with the node count to see the blow-up.
    """
    order = reachable(root)
    paths = {id(root): 1}
    for node in reversed(order):
        n = paths[id(node)]
        for operand in node.operands():
            paths[id(operand)] = paths.get(id(operand), 0) + n
    return int(sum(paths.values()))


def get_graph_stats(root: Node) -> Dict:
    """
    Graph statistics for everything reachable from `root` (no printing).

    Returns:
        Dictionary of statistics
    """
    order = reachable(root)
    n_nodes = len(order)
    n_edges = sum(len(node.operands()) for node in order)

    # Fan-out: how many edges leave each node towards its users
    fan_outs = Counter()
    for node in order:
        for operand in node.operands():
            fan_outs[id(operand)] += 1
    fan_out_values = [fan_outs.get(id(node), 0) for node in order]

    # Depth: longest operand chain from a leaf
    depth = {}
    for node in order:
        ops = node.operands()
        depth[id(node)] = 1 + max(depth[id(p)] for p in ops) if ops else 0

    op_counter = Counter(_op_tag(node) for node in order)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'leaves': op_counter.get('leaf', 0),
        'max_fan_out': max(fan_out_values),
        'avg_fan_out': float(np.mean(fan_out_values)),
        'depth': depth[id(root)],
        'paths': count_paths(root),
        'operations': dict(op_counter),
    }


def analyze_graph_complexity(root: Node) -> str:
    """
    Analyse the graph and return a text report, including how much work the
    recursive backward strategy does compared to a topological pass.
    """
    stats = get_graph_stats(root)

    report = []
    report.append("Graph Complexity Analysis:")
    report.append(f"  Total nodes: {stats['nodes']:,}")
    report.append(f"  Total edges: {stats['edges']:,}")
    report.append(f"  Depth: {stats['depth']}")
    report.append(f"  Recursive visits: {stats['paths']:,}")
    report.append(f"  Topological visits: {stats['nodes']:,}")

    ratio = stats['paths'] / stats['nodes']
    if ratio < 2.0:
        sharing = "Low"
    elif ratio < 100.0:
        sharing = "Medium"
    else:
        sharing = "High"
    report.append(f"  Path blow-up: {ratio:.1f}x ({sharing})")
    if sharing == "High":
        report.append("  Consider BackwardConfig(strategy='topological')")

    top_ops = sorted(stats['operations'].items(), key=lambda x: x[1], reverse=True)[:3]
    report.append("  Top operations:")
    for op, count in top_ops:
        pct = 100.0 * count / stats['nodes']
        report.append(f"    - {op}: {pct:.1f}%")

    return "\n".join(report)


def print_graph_summary(root: Node) -> Dict:
    """Print summary statistics of the graph below `root` and return them."""
    stats = get_graph_stats(root)

    print("\n" + "=" * 70)
    print("COMPUTATION GRAPH SUMMARY")
    print("=" * 70)
    print(f"Total nodes:        {stats['nodes']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Leaves:             {stats['leaves']:,}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print(f"Depth:              {stats['depth']}")
    print(f"Root-to-node paths: {stats['paths']:,}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common():
        pct = 100.0 * count / stats['nodes']
        print(f"  {op_type:6s}: {count:6,} ({pct:5.1f}%)")
    print("=" * 70 + "\n")

    return stats


def print_computation_graph(root: Node, max_nodes: int = 20) -> None:
    """
    Print the graph structure in topological order.

    Args:
        root: output node
        max_nodes: maximum number of nodes to print
    """
    order = reachable(root)
    index = {id(node): i for i, node in enumerate(order)}

    print("\n" + "=" * 70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("=" * 70)

    for i, node in enumerate(order[:max_nodes]):
        label = _label(node, index)
        info = f"{float(node.value):10.6f} | grad {float(node.gradient):10.6f}"
        if node.is_leaf:
            print(f"{i:4d} {label:10s}: {'leaf':5s} ({info}) [leaf/input]")
        else:
            operands = ", ".join(_label(p, index) for p in node.operands())
            print(f"{i:4d} {label:10s}: {_op_tag(node):5s} ({info}) <- [{operands}]")

    if len(order) > max_nodes:
        print(f"... ({len(order) - max_nodes} more nodes)")

    print("=" * 70 + "\n")


def gradient_table(nodes: Dict[str, Node]) -> pd.DataFrame:
    """Tabulate value, gradient and producing op for named nodes."""
    rows: List[Dict] = [
        {
            'name': name,
            'value': float(node.value),
            'gradient': float(node.gradient),
            'op': _op_tag(node),
        }
        for name, node in nodes.items()
    ]
    return pd.DataFrame(rows, columns=['name', 'value', 'gradient', 'op']).set_index('name')


def get_graph_json(root: Node) -> Dict:
    """Export nodes and operand->user edges as plain JSON-serialisable data."""
    order = reachable(root)
    index = {id(node): i for i, node in enumerate(order)}
    data = {"nodes": [], "edges": []}

    for node in order:
        data["nodes"].append({
            "id": str(index[id(node)]),
            "label": f"{_label(node, index)} | data: {float(node.value):.4f} | grad: {float(node.gradient):.4f}",
            "op": _op_tag(node),
        })
        for operand in node.operands():
            data["edges"].append({"source": str(index[id(operand)]), "target": str(index[id(node)])})

    return data
