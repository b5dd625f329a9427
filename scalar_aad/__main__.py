"""
Run an example graph and print its gradients.

    python -m scalar_aad --example 4 --strategy topological --stats
"""

import argparse
import sys

from .core.config import BackwardConfig, STRATEGIES
from .core.graph_utils import gradient_table, analyze_graph_complexity
from .examples import EXAMPLES, run_example


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='scalar_aad',
        description='Reverse-mode AD on the built-in example graphs',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--example', type=int, default=4, choices=sorted(EXAMPLES),
                        help='Example graph to run (1 chain, 2 neuron, 3 self-add, 4 diamond)')
    parser.add_argument('--strategy', type=str, default='recursive', choices=STRATEGIES,
                        help='Backward traversal strategy')
    parser.add_argument('--seed', type=float, default=1.0,
                        help='Seed gradient at the output node')
    parser.add_argument('--check-finite', action='store_true',
                        help='Warn when a NaN/Inf gradient contribution appears')
    parser.add_argument('--verbose', action='store_true',
                        help='Print a summary line for the backward pass')
    parser.add_argument('--stats', action='store_true',
                        help='Also print a graph complexity report')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = BackwardConfig(strategy=args.strategy,
                            check_finite=args.check_finite,
                            verbose=args.verbose)
    nodes = run_example(args.example, seed=args.seed, config=config)

    for name, node in nodes.items():
        print(f"grad {name} = {float(node.gradient)!r}")

    if args.stats:
        print()
        print(gradient_table(nodes).to_string())
        print()
        print(analyze_graph_complexity(list(nodes.values())[-1]))
    return 0


if __name__ == '__main__':
    sys.exit(main())
