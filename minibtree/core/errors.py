"""
Errors - Exception taxonomy for MiniBTree

A missing key is not an error: delete() reports it through DeleteResult
and search() simply returns False.
"""


class BTreeError(Exception):
    """Base class for all MiniBTree errors"""


class InvalidConfiguration(BTreeError, ValueError):
    """Raised when a tree is built with an unusable minimum degree"""


class InvalidKeyError(BTreeError, TypeError):
    """Raised when a key is not a plain integer"""


class DuplicateKeyError(BTreeError, ValueError):
    """Raised when inserting an existing key into a unique tree"""


class InvariantViolation(BTreeError, AssertionError):
    """Raised when the node structure breaks a B-tree invariant"""


class CommandError(BTreeError, ValueError):
    """Raised for malformed shell commands"""
