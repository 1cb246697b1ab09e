"""
MiniBTree - An in-memory B-tree index of integer keys

Usage:
    from minibtree import BTree
    tree = BTree(t=3)
    tree.insert(42)
    42 in tree
"""

__version__ = "1.0.0"

from .indexing.btree import BTree, BTreeNode, DeleteResult
from .indexing.stats import TreeStats
from .core.config import TreeConfig
from .core.errors import (
    BTreeError, InvalidConfiguration, InvalidKeyError, DuplicateKeyError,
    InvariantViolation, CommandError,
)
from .core.commands import CommandExecutor, CommandResult
from .core.repl import REPL

__all__ = [
    "BTree", "BTreeNode", "DeleteResult", "TreeStats", "TreeConfig",
    "BTreeError", "InvalidConfiguration", "InvalidKeyError", "DuplicateKeyError",
    "InvariantViolation", "CommandError",
    "CommandExecutor", "CommandResult", "REPL",
]
