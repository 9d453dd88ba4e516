"""QueryKit: fluent SQL statement builders with positional parameter binding."""

from querykit import builder, driver, exceptions, typing, utils
from querykit.__metadata__ import __version__
from querykit._sql import QueryFactory
from querykit.builder import (
    CaseBuilder,
    DeleteQuery,
    InsertQuery,
    QueryBuilder,
    SafeQuery,
    SelectQuery,
    StatementRenderer,
    UpdateQuery,
    render,
)
from querykit.config import BuilderConfig
from querykit.driver import Connection
from querykit.exceptions import (
    ExecutorError,
    ExtensionError,
    ExtensionNotFoundError,
    QueryKitError,
    SQLBuilderError,
    TransactionError,
    UnsupportedOperatorError,
    ValidationError,
)
from querykit.protocols import ExecutorProtocol, Renderable
from querykit.registry import ExtensionRegistry, default_registry
from querykit.typing import Bindings, ModelDTOT, Record, Row

__all__ = (
    "Bindings",
    "BuilderConfig",
    "CaseBuilder",
    "Connection",
    "DeleteQuery",
    "ExecutorError",
    "ExecutorProtocol",
    "ExtensionError",
    "ExtensionNotFoundError",
    "ExtensionRegistry",
    "InsertQuery",
    "ModelDTOT",
    "QueryBuilder",
    "QueryFactory",
    "QueryKitError",
    "Record",
    "Renderable",
    "Row",
    "SQLBuilderError",
    "SafeQuery",
    "SelectQuery",
    "StatementRenderer",
    "TransactionError",
    "UnsupportedOperatorError",
    "UpdateQuery",
    "ValidationError",
    "__version__",
    "builder",
    "default_registry",
    "driver",
    "exceptions",
    "render",
    "typing",
    "utils",
)
