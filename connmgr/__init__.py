"""Named, lazily created and cached connections."""

from __future__ import annotations

__version__ = "0.1.0"

from .cache import ConnectionCache
from .config import ConfigResolver, ConnectionDefinition, ManagerConfig
from .creators import Creator, CreatorFunc, CreatorRegistry, FunctionCreator, as_creator
from .database import DatabaseManager
from .errors import (
    ConnectionCreationError,
    ConnectionManagerError,
    InvalidConfigError,
    ReentrantConnectionError,
    UnknownConnectionError,
    UnknownDriverError,
)
from .manager import ConnectionManager

__all__ = [
    "ConfigResolver",
    "ConnectionCache",
    "ConnectionCreationError",
    "ConnectionDefinition",
    "ConnectionManager",
    "ConnectionManagerError",
    "Creator",
    "CreatorFunc",
    "CreatorRegistry",
    "DatabaseManager",
    "FunctionCreator",
    "InvalidConfigError",
    "ReentrantConnectionError",
    "ManagerConfig",
    "UnknownConnectionError",
    "UnknownDriverError",
    "__version__",
    "as_creator",
]
