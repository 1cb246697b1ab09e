"""Indexing module - B-Tree"""

from .btree import BTree, BTreeNode, DeleteResult
from .stats import TreeStats

__all__ = ['BTree', 'BTreeNode', 'DeleteResult', 'TreeStats']
