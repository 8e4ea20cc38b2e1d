from collections import Counter

from .expr import Operand


def _reachable(output_nodes):
    visited = {}
    stack = list(output_nodes)
    while stack:
        node = stack.pop()
        if node is None or id(node) in visited:
            continue
        visited[id(node)] = node
        stack.extend(node.children)
    return list(visited.values())


def get_graph_io(output_nodes):
    input_matrices = [node for node in _reachable(output_nodes) if isinstance(node, Operand)]
    return sorted(input_matrices, key=lambda m: m.name)


def count_nodes(expr):
    """Distinct nodes reachable from ``expr``, per kind; shared nodes count once."""
    return Counter(node.kind for node in _reachable([expr]))
