"""
Traversal and structural statistics for B-tree nodes

These walk a subtree from any node; they only read node.keys,
node.children and node.is_leaf.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from ..core.errors import InvariantViolation


@dataclass
class TreeStats:
    """Snapshot of a tree's shape"""
    min_degree: int
    size: int  # Number of keys
    height: int
    node_count: int
    unique: bool = False

    def to_dict(self) -> dict:
        return {
            'min_degree': self.min_degree,
            'size': self.size,
            'height': self.height,
            'node_count': self.node_count,
            'unique': self.unique,
        }


def inorder(node) -> Iterator[int]:
    """Yield the keys of the subtree in ascending order"""
    for i, key in enumerate(node.keys):
        if not node.is_leaf:
            yield from inorder(node.children[i])
        yield key
    if not node.is_leaf:
        yield from inorder(node.children[-1])


def height(node) -> int:
    """Edges from node down to its leaves, following the leftmost path"""
    h = 0
    while not node.is_leaf:
        node = node.children[0]
        h += 1
    return h


def count_nodes(node) -> int:
    return 1 + sum(count_nodes(child) for child in node.children)


def count_keys(node) -> int:
    return len(node.keys) + sum(count_keys(child) for child in node.children)


def levels(node) -> List[List[List[int]]]:
    """Keys of every node grouped by depth, left to right"""
    result: List[List[List[int]]] = []
    _collect_levels(node, 0, result)
    return result


def _collect_levels(node, depth: int, result: List[List[List[int]]]) -> None:
    if len(result) <= depth:
        result.append([])
    result[depth].append(list(node.keys))
    for child in node.children:
        _collect_levels(child, depth + 1, result)


def format_levels(level_keys: List[List[List[int]]]) -> str:
    """Render the output of levels() one line per depth"""
    return "\n".join(
        f"Level {depth}: " + " | ".join(str(keys) for keys in nodes)
        for depth, nodes in enumerate(level_keys)
    )


def validate(root, t: int) -> int:
    """
    Check the B-tree invariants for the tree under root.

    - every non-root node holds t-1 .. 2t-1 keys, the root 0 .. 2t-1
    - an internal node with k keys has k+1 children
    - keys are sorted and each subtree lies between its separators
    - all leaves sit at the same depth

    Returns the number of keys. Raises InvariantViolation on the first
    problem found.
    """
    if not root.is_leaf and not root.keys:
        raise InvariantViolation("internal root has no keys")

    leaf_depths = set()
    total = _validate_node(root, t, 0, None, None, True, leaf_depths)

    if len(leaf_depths) > 1:
        raise InvariantViolation(f"leaves at different depths: {sorted(leaf_depths)}")
    return total


def _validate_node(node, t: int, depth: int, low: Optional[Any], high: Optional[Any],
                   is_root: bool, leaf_depths: set) -> int:
    keys = node.keys
    where = f"node {keys} at depth {depth}"

    if node.t != t:
        raise InvariantViolation(f"{where} has degree {node.t}, tree has {t}")
    if len(keys) > 2 * t - 1:
        raise InvariantViolation(f"{where} holds more than {2 * t - 1} keys")
    if not is_root and len(keys) < t - 1:
        raise InvariantViolation(f"{where} holds fewer than {t - 1} keys")

    for a, b in zip(keys, keys[1:]):
        if a > b:
            raise InvariantViolation(f"{where} is not sorted")
    for key in keys:
        if (low is not None and key < low) or (high is not None and key > high):
            raise InvariantViolation(f"{where} has key {key} outside [{low}, {high}]")

    if node.is_leaf:
        if node.children:
            raise InvariantViolation(f"leaf {where} has children")
        leaf_depths.add(depth)
        return len(keys)

    if len(node.children) != len(keys) + 1:
        raise InvariantViolation(
            f"{where} has {len(node.children)} children, expected {len(keys) + 1}")

    total = len(keys)
    for i, child in enumerate(node.children):
        if child is None:
            raise InvariantViolation(f"{where} has a missing child at {i}")
        child_low = keys[i - 1] if i > 0 else low
        child_high = keys[i] if i < len(keys) else high
        total += _validate_node(child, t, depth + 1, child_low, child_high,
                                False, leaf_depths)
    return total
