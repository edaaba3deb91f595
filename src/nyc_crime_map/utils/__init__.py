from .exceptions import (
    CrimeMapException,
    EmptyDomainError,
    InvalidRangeError,
    UnknownCategoryError,
    ConfigError,
)
from .logger_config import setup_logger

__all__ = [
    "CrimeMapException",
    "EmptyDomainError",
    "InvalidRangeError",
    "UnknownCategoryError",
    "ConfigError",
    "setup_logger",
]
