"""Core module - Errors, Configuration, Commands, REPL"""

from .errors import (
    BTreeError, InvalidConfiguration, InvalidKeyError, DuplicateKeyError,
    InvariantViolation, CommandError,
)
from .config import TreeConfig, configure_logging

__all__ = [
    'BTreeError', 'InvalidConfiguration', 'InvalidKeyError', 'DuplicateKeyError',
    'InvariantViolation', 'CommandError',
    'TreeConfig', 'configure_logging',
]
