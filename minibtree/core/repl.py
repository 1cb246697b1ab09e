"""
REPL - Interactive shell for MiniBTree

Provides a command-line interface for building and inspecting a
B-tree one command at a time.
"""

import os
import sys
import logging
from typing import List, Optional

from ..indexing.btree import BTree
from .commands import CommandExecutor, CommandResult
from .config import DEFAULT_MIN_DEGREE, LOG_LEVELS, TreeConfig, configure_logging
from .errors import BTreeError, InvalidConfiguration


logger = logging.getLogger(__name__)


class REPL:
    """
    Interactive REPL (Read-Eval-Print Loop) for MiniBTree.

    Features:
    - Text commands (insert 1 2 3, search 2, delete 1, ...)
    - Numbered menu (1 insert, 2 search, 3 traverse, 4 delete, 5 exit)
    - Special commands (.help, .menu, .degree, .quit, etc.)
    """

    BANNER = """
MiniBTree - an in-memory B-tree of integer keys

Type .help for commands, or .menu for the numbered menu.
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .menu             Show the numbered menu
  .degree           Show the tree's minimum degree
  .clear            Clear the screen
  .quit / .exit     Exit the REPL

Tree Commands:
  insert K [K ...]  Insert keys
  search K [K ...]  Look keys up
  delete K [K ...]  Delete keys
  traverse          List keys in ascending order
  height            Show tree height
  count             Show number of nodes
  size              Show number of keys
  stats             Show all statistics
  print             Show keys level by level
  validate          Check the B-tree invariants
  clear             Remove every key

Example:
  insert 10 20 5 6 12 30 7 17
  search 17
  delete 6
  print
"""

    MENU = """
1. Insert
2. Search
3. Traverse
4. Delete
5. Exit"""

    # Menu choice -> (command, prompt for a key or None)
    MENU_CHOICES = {
        '1': ('insert', "Enter key to insert: "),
        '2': ('search', "Enter key to search: "),
        '3': ('traverse', None),
        '4': ('delete', "Enter key to delete: "),
    }

    def __init__(self, tree: Optional[BTree] = None, config: Optional[TreeConfig] = None):
        """Initialize REPL around an existing tree or a new one built from config."""
        if tree is None:
            tree = BTree.from_config(config or TreeConfig())
        self.tree = tree
        self.executor = CommandExecutor(tree)
        self.running = False

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        print(self.BANNER)

        while self.running:
            try:
                self._process_input()
            except KeyboardInterrupt:
                print("\n(Use .quit to exit)")
            except EOFError:
                print()
                self._quit()

    def _get_prompt(self) -> str:
        return "btree> "

    def _process_input(self) -> None:
        """Read and process user input."""
        line = input(self._get_prompt()).strip()

        if not line:
            return

        if line.startswith('.'):
            self._handle_command(line)
        elif line in self.MENU_CHOICES or line == '5':
            self._handle_menu(line)
        else:
            self._execute(line)

    def _handle_command(self, cmd: str) -> None:
        """Handle special dot commands."""
        command = cmd.split(None, 1)[0].lower()

        if command in ('.quit', '.exit', '.q'):
            self._quit()
        elif command == '.help':
            print(self.HELP)
        elif command == '.menu':
            print(self.MENU)
        elif command == '.degree':
            print(f"Minimum degree: {self.tree.t}")
        elif command == '.clear':
            os.system('clear' if os.name == 'posix' else 'cls')
        else:
            print(f"Unknown command: {command}")
            print("Type .help for available commands.")

    def _handle_menu(self, choice: str) -> None:
        """Handle a numbered menu choice."""
        if choice == '5':
            self._quit()
            return

        command, prompt = self.MENU_CHOICES[choice]
        if prompt is None:
            self._execute(command)
            return

        key = input(prompt).strip()
        self._execute(f"{command} {key}")

    def _quit(self) -> None:
        """Exit the REPL."""
        print("Goodbye!")
        self.running = False

    def _execute(self, line: str) -> None:
        """Execute a tree command and display the result."""
        try:
            result = self.executor.execute(line)
        except BTreeError as e:
            print(f"Error: {e}")
            return

        if result is not None:
            self._print_result(result)

    def _print_result(self, result: CommandResult) -> None:
        if result.message:
            print(result.message)


def _build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="minibtree",
        description="MiniBTree - an in-memory B-tree of integer keys"
    )
    parser.add_argument(
        '-t', '--min-degree',
        type=int,
        default=DEFAULT_MIN_DEGREE,
        help=f'Minimum degree of the tree (default: {DEFAULT_MIN_DEGREE})'
    )
    parser.add_argument(
        '--unique',
        action='store_true',
        help='Reject duplicate keys'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        type=str.upper,
        choices=LOG_LEVELS,
        help='Logging level (default: WARNING)'
    )
    parser.add_argument(
        '-e', '--execute',
        help='Execute commands (separated by ;) and exit'
    )
    parser.add_argument(
        '-f', '--file',
        help='Execute commands from file and exit'
    )
    return parser


def _run_script(tree: BTree, text: str) -> None:
    executor = CommandExecutor(tree)
    try:
        for result in executor.execute_many(text):
            if result.message:
                print(result.message)
    except BTreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the REPL."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = TreeConfig.from_args(args)
    except InvalidConfiguration as e:
        parser.error(str(e))

    configure_logging(config.log_level)
    logger.debug("starting with %s", config)
    tree = BTree.from_config(config)

    # Execute commands given on the command line
    if args.execute:
        _run_script(tree, args.execute)
        return

    # Execute from file
    if args.file:
        try:
            with open(args.file, 'r') as f:
                text = f.read()
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        _run_script(tree, text)
        return

    # Start interactive REPL
    repl = REPL(tree)
    repl.run()


if __name__ == '__main__':
    main()
