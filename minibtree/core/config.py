"""
Configuration - Tree settings and logging setup
"""

import logging
from dataclasses import dataclass
from typing import Any

from .errors import InvalidConfiguration


LOG_FORMAT = "[%(filename)s:%(lineno)s - %(funcName)s ] %(message)s"
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

DEFAULT_MIN_DEGREE = 3


@dataclass
class TreeConfig:
    """Settings used to build a BTree"""
    min_degree: int = DEFAULT_MIN_DEGREE
    unique: bool = False  # Reject duplicate keys
    log_level: str = 'WARNING'

    def validate(self) -> 'TreeConfig':
        """Check the settings, raising InvalidConfiguration on bad values"""
        if isinstance(self.min_degree, bool) or not isinstance(self.min_degree, int):
            raise InvalidConfiguration(
                f"Minimum degree must be an integer, got {self.min_degree!r}")
        if self.min_degree < 2:
            raise InvalidConfiguration(
                f"Minimum degree must be at least 2, got {self.min_degree}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise InvalidConfiguration(f"Unknown log level: {self.log_level}")
        return self

    @classmethod
    def from_args(cls, args: Any) -> 'TreeConfig':
        """Build a config from an argparse namespace"""
        return cls(
            min_degree=args.min_degree,
            unique=args.unique,
            log_level=args.log_level,
        ).validate()


def configure_logging(level: str = 'WARNING') -> None:
    """Configure the root logger for the command-line tools"""
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level.upper()))
