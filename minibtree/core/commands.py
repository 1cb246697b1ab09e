"""
Command Executor - Runs text commands against a BTree

Commands are whitespace separated and case-insensitive, one per line:

    insert 10 20 5
    search 10
    delete 20
    traverse

A '#' starts a comment. Several commands can share a line when
separated by ';'.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..indexing.btree import BTree, DeleteResult
from ..indexing.stats import format_levels
from .errors import CommandError


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a command execution"""
    command: str
    message: str = ""
    keys: List[int] = field(default_factory=list)  # Keys inserted, found, deleted or listed
    missing: List[int] = field(default_factory=list)  # Keys searched or deleted but absent


class CommandExecutor:
    """Parses and executes shell commands against one tree"""

    ALIASES = {
        'insert': 'insert', 'i': 'insert', 'add': 'insert',
        'search': 'search', 's': 'search', 'find': 'search',
        'delete': 'delete', 'd': 'delete', 'del': 'delete', 'remove': 'delete',
        'traverse': 'traverse', 't': 'traverse', 'list': 'traverse',
        'height': 'height',
        'count': 'count', 'nodes': 'count',
        'size': 'size',
        'stats': 'stats',
        'print': 'print', 'tree': 'print',
        'validate': 'validate',
        'clear': 'clear',
    }

    # Commands that need at least one integer argument
    KEYED = {'insert', 'search', 'delete'}

    def __init__(self, tree: BTree):
        self.tree = tree
        self._handlers: Dict[str, Callable[[List[int]], CommandResult]] = {
            'insert': self._insert,
            'search': self._search,
            'delete': self._delete,
            'traverse': self._traverse,
            'height': self._height,
            'count': self._count,
            'size': self._size,
            'stats': self._stats,
            'print': self._print,
            'validate': self._validate,
            'clear': self._clear,
        }

    @classmethod
    def commands(cls) -> List[str]:
        return sorted(set(cls.ALIASES.values()))

    def parse(self, line: str) -> Optional[Tuple[str, List[int]]]:
        """Split a line into (command, keys); None for blank lines and comments"""
        line = line.split('#', 1)[0].strip()
        if not line:
            return None

        parts = line.split()
        name = parts[0].lower()
        command = self.ALIASES.get(name)
        if command is None:
            raise CommandError(f"Unknown command: {parts[0]}")

        keys = []
        for arg in parts[1:]:
            try:
                keys.append(int(arg))
            except ValueError:
                raise CommandError(f"Invalid integer: {arg}") from None

        if command in self.KEYED and not keys:
            raise CommandError(f"Usage: {command} KEY [KEY ...]")
        if command not in self.KEYED and keys:
            raise CommandError(f"{command} takes no arguments")

        return command, keys

    def execute(self, line: str) -> Optional[CommandResult]:
        """Execute a single command line"""
        parsed = self.parse(line)
        if parsed is None:
            return None

        command, keys = parsed
        logger.info("executing %s %s", command, keys)
        return self._handlers[command](keys)

    def execute_many(self, text: str) -> List[CommandResult]:
        """Execute every command in text, split on newlines and ';'"""
        results = []
        for line in text.splitlines():
            # Drop comments first so a ';' inside one is ignored
            line = line.split('#', 1)[0]
            for statement in line.split(';'):
                result = self.execute(statement)
                if result is not None:
                    results.append(result)
        return results

    def _insert(self, keys: List[int]) -> CommandResult:
        self.tree.insert_many(keys)
        return CommandResult('insert', f"Inserted {len(keys)} key(s)", keys=list(keys))

    def _search(self, keys: List[int]) -> CommandResult:
        result = CommandResult('search')
        lines = []
        for key in keys:
            if self.tree.search(key):
                result.keys.append(key)
                lines.append(f"{key}: found")
            else:
                result.missing.append(key)
                lines.append(f"{key}: not found")
        result.message = "\n".join(lines)
        return result

    def _delete(self, keys: List[int]) -> CommandResult:
        result = CommandResult('delete')
        lines = []
        for key in keys:
            if self.tree.delete(key) is DeleteResult.SUCCESS:
                result.keys.append(key)
                lines.append(f"Deleted {key}")
            else:
                result.missing.append(key)
                lines.append(f"Key {key} not found")
        result.message = "\n".join(lines)
        return result

    def _traverse(self, keys: List[int]) -> CommandResult:
        listed = self.tree.keys()
        message = " ".join(str(key) for key in listed) if listed else "(empty)"
        return CommandResult('traverse', message, keys=listed)

    def _height(self, keys: List[int]) -> CommandResult:
        return CommandResult('height', f"Height: {self.tree.height()}")

    def _count(self, keys: List[int]) -> CommandResult:
        return CommandResult('count', f"Nodes: {self.tree.count_nodes()}")

    def _size(self, keys: List[int]) -> CommandResult:
        return CommandResult('size', f"Keys: {len(self.tree)}")

    def _stats(self, keys: List[int]) -> CommandResult:
        stats = self.tree.stats()
        message = "\n".join(f"{name:12} {value}" for name, value in stats.to_dict().items())
        return CommandResult('stats', message)

    def _print(self, keys: List[int]) -> CommandResult:
        return CommandResult('print', format_levels(self.tree.levels()))

    def _validate(self, keys: List[int]) -> CommandResult:
        self.tree.validate()
        return CommandResult('validate', "OK")

    def _clear(self, keys: List[int]) -> CommandResult:
        self.tree.clear()
        return CommandResult('clear', "Tree cleared")
