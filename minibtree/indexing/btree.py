"""
B-Tree Index Implementation

A B-tree is a self-balancing tree data structure that maintains sorted data
and allows searches, insertions, and deletions in O(log n) time.

This implementation supports:
- Configurable minimum degree (t)
- Point search and ordered traversal
- Deletion with borrow/merge rebalancing
- Duplicate keys (or rejection of them, for unique trees)

Keys are plain integers. The tree performs no I/O.
"""

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum, auto
from threading import Lock
from typing import Iterable, Iterator, List, Optional, Tuple

from ..core.config import DEFAULT_MIN_DEGREE, TreeConfig
from ..core.errors import DuplicateKeyError, InvalidKeyError, InvariantViolation
from .stats import TreeStats, count_keys, count_nodes, height, inorder, levels, validate


logger = logging.getLogger(__name__)


class DeleteResult(Enum):
    """Outcome of BTree.delete"""
    SUCCESS = auto()
    KEY_NOT_FOUND = auto()

    def __bool__(self) -> bool:
        return self is DeleteResult.SUCCESS


@dataclass(eq=False)
class BTreeNode:
    """
    A node in the B-tree.

    For a B-tree of minimum degree t:
    - Each node has at most 2t-1 keys
    - Each node (except root) has at least t-1 keys
    - Each internal node with k keys has exactly k+1 children
    - A leaf node has no children
    """
    t: int
    is_leaf: bool = True
    keys: List[int] = field(default_factory=list)
    children: List['BTreeNode'] = field(default_factory=list, repr=False)

    @property
    def max_keys(self) -> int:
        return 2 * self.t - 1

    @property
    def is_full(self) -> bool:
        return len(self.keys) >= self.max_keys

    def search(self, key: int) -> Optional[Tuple['BTreeNode', int]]:
        """Find the node holding key, returning (node, position) or None"""
        # Find the first key greater than or equal to key
        i = bisect_left(self.keys, key)

        if i < len(self.keys) and self.keys[i] == key:
            return self, i

        if self.is_leaf:
            return None

        return self.children[i].search(key)

    def insert_non_full(self, key: int) -> None:
        """Insert key into the subtree rooted here; this node must not be full"""
        if self.is_full:
            raise InvariantViolation(
                f"insert_non_full called on a full node ({len(self.keys)} keys)")

        # Equal keys go to the right of existing ones
        i = bisect_right(self.keys, key)

        if self.is_leaf:
            self.keys.insert(i, key)
            return

        if self.children[i].is_full:
            self.split_child(i)

            # The promoted middle key decides which half receives key
            if key > self.keys[i]:
                i += 1

        self.children[i].insert_non_full(key)

    def split_child(self, index: int) -> 'BTreeNode':
        """Split the full child at index, promoting its middle key into this node"""
        t = self.t
        child = self.children[index]

        if len(child.keys) != child.max_keys:
            raise InvariantViolation(
                f"split_child on a child with {len(child.keys)} keys, "
                f"expected {child.max_keys}")
        if self.is_full:
            raise InvariantViolation("split_child on a full parent")

        # New node takes the upper t-1 keys (and t children) of child
        sibling = BTreeNode(t, is_leaf=child.is_leaf, keys=child.keys[t:])
        middle = child.keys[t - 1]
        del child.keys[t - 1:]

        if not child.is_leaf:
            sibling.children = child.children[t:]
            del child.children[t:]

        self.keys.insert(index, middle)
        self.children.insert(index + 1, sibling)
        return sibling

    def delete(self, key: int) -> bool:
        """
        Remove one occurrence of key from the subtree rooted here.

        Every node this recurses into has at least t keys beforehand, so
        removing one never leaves it underfull. Returns False if the key
        is absent.
        """
        idx = bisect_left(self.keys, key)

        if idx < len(self.keys) and self.keys[idx] == key:
            if self.is_leaf:
                self.remove_from_leaf(idx)
            else:
                self.remove_from_non_leaf(idx)
            return True

        if self.is_leaf:
            return False

        if len(self.children[idx].keys) < self.t:
            idx = self.fill(idx)

        return self.children[idx].delete(key)

    def remove_from_leaf(self, idx: int) -> None:
        del self.keys[idx]

    def remove_from_non_leaf(self, idx: int) -> None:
        key = self.keys[idx]
        t = self.t

        if len(self.children[idx].keys) >= t:
            pred = self.predecessor(idx)
            self.keys[idx] = pred
            self.children[idx].delete(pred)
        elif len(self.children[idx + 1].keys) >= t:
            succ = self.successor(idx)
            self.keys[idx] = succ
            self.children[idx + 1].delete(succ)
        else:
            # Both neighbours are minimal: pull the key down into a merged child
            self.merge(idx)
            self.children[idx].delete(key)

    def predecessor(self, idx: int) -> int:
        """Largest key in the subtree left of keys[idx]"""
        node = self.children[idx]
        while not node.is_leaf:
            node = node.children[-1]
        return node.keys[-1]

    def successor(self, idx: int) -> int:
        """Smallest key in the subtree right of keys[idx]"""
        node = self.children[idx + 1]
        while not node.is_leaf:
            node = node.children[0]
        return node.keys[0]

    def fill(self, idx: int) -> int:
        """
        Give children[idx] at least t keys by borrowing or merging.

        Returns the index of the child that now covers the keys which
        children[idx] covered before.
        """
        t = self.t

        if idx > 0 and len(self.children[idx - 1].keys) >= t:
            self.borrow_from_prev(idx)
        elif idx < len(self.keys) and len(self.children[idx + 1].keys) >= t:
            self.borrow_from_next(idx)
        elif idx < len(self.keys):
            self.merge(idx)
        else:
            # Last child has no right sibling
            self.merge(idx - 1)
            idx -= 1
        return idx

    def borrow_from_prev(self, idx: int) -> None:
        """Rotate one key from the left sibling through the parent into children[idx]"""
        child = self.children[idx]
        sibling = self.children[idx - 1]

        child.keys.insert(0, self.keys[idx - 1])
        if not child.is_leaf:
            child.children.insert(0, sibling.children.pop())
        self.keys[idx - 1] = sibling.keys.pop()
        logger.debug("borrowed %s from left sibling of child %d", child.keys[0], idx)

    def borrow_from_next(self, idx: int) -> None:
        """Rotate one key from the right sibling through the parent into children[idx]"""
        child = self.children[idx]
        sibling = self.children[idx + 1]

        child.keys.append(self.keys[idx])
        if not child.is_leaf:
            child.children.append(sibling.children.pop(0))
        self.keys[idx] = sibling.keys.pop(0)
        logger.debug("borrowed %s from right sibling of child %d", child.keys[-1], idx)

    def merge(self, idx: int) -> None:
        """Fold keys[idx] and children[idx+1] into children[idx]"""
        child = self.children[idx]
        sibling = self.children.pop(idx + 1)

        child.keys.append(self.keys.pop(idx))
        child.keys.extend(sibling.keys)
        if not child.is_leaf:
            child.children.extend(sibling.children)

        if len(child.keys) > child.max_keys:
            raise InvariantViolation(
                f"merge produced {len(child.keys)} keys, limit is {child.max_keys}")
        logger.debug("merged children %d and %d (%d keys)", idx, idx + 1, len(child.keys))


class BTree:
    """
    B-tree of integer keys.

    Usage:
        tree = BTree(t=3)
        tree.insert(10)
        tree.search(10)       # True
        tree.delete(10)       # DeleteResult.SUCCESS
        list(tree.traverse())

    Each public operation holds a per-tree lock, so a single tree can be
    shared between threads. traverse() is lazy and does not hold the lock;
    mutating the tree while iterating raises RuntimeError.
    """

    def __init__(self, t: int = DEFAULT_MIN_DEGREE, unique: bool = False):
        TreeConfig(min_degree=t, unique=unique).validate()

        self.t = t
        self.unique = unique
        self.root = BTreeNode(t)
        self._size = 0
        self._version = 0
        self._lock = Lock()

    @classmethod
    def from_config(cls, config: TreeConfig) -> 'BTree':
        config.validate()
        return cls(t=config.min_degree, unique=config.unique)

    @classmethod
    def from_keys(cls, keys: Iterable[int], t: int = DEFAULT_MIN_DEGREE,
                  unique: bool = False) -> 'BTree':
        """Build a tree by inserting keys in order"""
        tree = cls(t=t, unique=unique)
        tree.insert_many(keys)
        return tree

    @staticmethod
    def _check_key(key) -> None:
        if isinstance(key, bool) or not isinstance(key, int):
            raise InvalidKeyError(f"Keys must be integers, got {type(key).__name__}")

    def insert(self, key: int) -> None:
        """Insert a key, growing the tree by one level if the root is full"""
        self.insert_many([key])

    def insert_many(self, keys: Iterable[int]) -> None:
        """
        Insert several keys as one batch.

        Every key is checked first (type, and duplicates for unique trees),
        so a bad key leaves the tree unchanged.
        """
        keys = list(keys)
        for key in keys:
            self._check_key(key)

        with self._lock:
            if self.unique:
                seen = set()
                for key in keys:
                    if key in seen or self.root.search(key) is not None:
                        raise DuplicateKeyError(f"Duplicate key {key} in unique tree")
                    seen.add(key)

            for key in keys:
                self._insert(key)

    def _insert(self, key: int) -> None:
        # Caller holds the lock
        root = self.root
        if root.is_full:
            new_root = BTreeNode(self.t, is_leaf=False, children=[root])
            new_root.split_child(0)
            self.root = new_root
            logger.debug("root split, promoted %s", new_root.keys[0])

        self.root.insert_non_full(key)
        self._size += 1
        self._version += 1

    def search(self, key: int) -> bool:
        """Return True if key is stored in the tree"""
        return self.find(key) is not None

    def find(self, key: int) -> Optional[Tuple[BTreeNode, int]]:
        """Return the (node, position) holding key, or None"""
        self._check_key(key)
        with self._lock:
            if not self.root.keys:
                return None
            return self.root.search(key)

    def delete(self, key: int) -> DeleteResult:
        """Remove one occurrence of key, shrinking the tree if the root empties"""
        self._check_key(key)
        with self._lock:
            if not self.root.keys:
                return DeleteResult.KEY_NOT_FOUND

            found = self.root.delete(key)
            # Borrows and merges on the way down change the structure even on a miss
            self._version += 1

            if not self.root.keys and not self.root.is_leaf:
                self.root = self.root.children[0]
                logger.debug("root emptied, height is now %d", height(self.root))

            if not found:
                return DeleteResult.KEY_NOT_FOUND
            self._size -= 1
            return DeleteResult.SUCCESS

    def traverse(self) -> Iterator[int]:
        """Yield every key in ascending order"""
        version = self._version
        for key in inorder(self.root):
            if self._version != version:
                raise RuntimeError("BTree changed during iteration")
            yield key

    def keys(self) -> List[int]:
        """Snapshot of every key in ascending order, safe against concurrent writers"""
        with self._lock:
            return list(inorder(self.root))

    def height(self) -> int:
        with self._lock:
            return height(self.root)

    def count_nodes(self) -> int:
        with self._lock:
            return count_nodes(self.root)

    def levels(self) -> List[List[List[int]]]:
        """Keys of every node, grouped by depth"""
        with self._lock:
            return levels(self.root)

    def stats(self) -> TreeStats:
        with self._lock:
            return TreeStats(
                min_degree=self.t,
                size=self._size,
                height=height(self.root),
                node_count=count_nodes(self.root),
                unique=self.unique,
            )

    def validate(self) -> None:
        """Check every structural invariant, raising InvariantViolation on failure"""
        with self._lock:
            total = validate(self.root, self.t)
            if total != self._size:
                raise InvariantViolation(
                    f"tree holds {total} keys but recorded size is {self._size}")
            if self.unique and count_keys(self.root) != len(set(inorder(self.root))):
                raise InvariantViolation("unique tree holds duplicate keys")

    def clear(self) -> None:
        with self._lock:
            self.root = BTreeNode(self.t)
            self._size = 0
            self._version += 1

    def __contains__(self, key) -> bool:
        if isinstance(key, bool) or not isinstance(key, int):
            return False
        return self.search(key)

    def __iter__(self) -> Iterator[int]:
        return self.traverse()

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"BTree(t={self.t}, size={self._size}, unique={self.unique})"
