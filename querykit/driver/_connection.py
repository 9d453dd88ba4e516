"""Connection facade executing rendered statements through an executor."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from querykit._sql import QueryFactory
from querykit.config import BuilderConfig
from querykit.driver._result_tools import ToSchemaMixin
from querykit.exceptions import TransactionError
from querykit.utils.logging import get_logger

if TYPE_CHECKING:
    from querykit.builder import DeleteQuery, InsertQuery, QueryBuilder, SelectQuery, UpdateQuery
    from querykit.protocols import ExecutorProtocol, Renderable
    from querykit.typing import ModelDTOT, Row

__all__ = ("Connection",)

logger = get_logger("driver.connection")


class Connection(ToSchemaMixin):
    """Runs builders against one executor and maps the results.

    The executor owns the physical connection. ``Connection`` renders
    builders, hands ``(sql, bindings)`` to the executor and never interprets
    the executor's exceptions.

    Example:
        ```python
        db = Connection(executor)
        adults = db.get(db.query("users").where("age", ">", 18), schema_type=User)
        with db.transaction():
            db.execute_insert(db.insert("users").values({"name": "Ann"}))
        ```
    """

    __slots__ = ("_factory", "_in_transaction", "executor")

    def __init__(self, executor: "ExecutorProtocol", config: Optional[BuilderConfig] = None) -> None:
        self.executor = executor
        self._factory = QueryFactory(config)
        self._in_transaction = False

    @property
    def config(self) -> BuilderConfig:
        return self._factory.config

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def query(self, table: Optional[str] = None) -> "SelectQuery":
        """Create a SELECT builder sharing this connection's configuration."""
        return self._factory.query(table)

    def from_(self, table: str) -> "SelectQuery":
        return self._factory.query(table)

    def table(self, table: str) -> "SelectQuery":
        return self._factory.query(table)

    def insert(self, table: Optional[str] = None) -> "InsertQuery":
        return self._factory.insert(table)

    def update(self, table: Optional[str] = None) -> "UpdateQuery":
        return self._factory.update(table)

    def delete(self, table: Optional[str] = None) -> "DeleteQuery":
        return self._factory.delete(table)

    def expression(self, kind: str, *args: Any, **kwargs: Any) -> "Renderable":
        """Create a registered expression kind, such as ``"case"``."""
        return self._factory.expression(kind, *args, **kwargs)

    def _execute(self, sql: str, bindings: "tuple[Any, ...]") -> "list[Row]":
        logger.debug(
            "Executing %s with %d bindings", sql, len(bindings), extra={"extra_fields": {"binding_count": len(bindings)}}
        )
        return self.executor.execute(sql, bindings)

    def _execute_builder(self, query: "QueryBuilder") -> "list[Row]":
        sql, bindings = query.render()
        return self._execute(sql, bindings)

    def get(self, query: "SelectQuery", schema_type: "Optional[type[ModelDTOT]]" = None) -> "list[Any]":
        """Execute a SELECT and return every row.

        Args:
            query: The query to run.
            schema_type: Optional model to map each row to.

        Returns:
            The rows, mapped to ``schema_type`` when given.
        """
        rows = self._execute_builder(query)
        return self.to_schema(rows, schema_type=schema_type)

    def first(self, query: "SelectQuery", schema_type: "Optional[type[ModelDTOT]]" = None) -> Any:
        """Execute a SELECT limited to one row and return that row, or None.

        The limit is applied to a copy; ``query`` itself is left unchanged. A
        UNION chain runs without an added LIMIT and its first row is returned.
        """
        rows = self._execute_builder(query if query.has_unions else query.copy().limit(1))
        if not rows:
            return None
        return self.to_schema(rows[0], schema_type=schema_type)

    def execute_insert(self, query: "InsertQuery") -> Any:
        """Execute an INSERT and return the executor's last insert id."""
        self._execute_builder(query)
        return self.executor.last_insert_id()

    def execute_update(self, query: "UpdateQuery") -> int:
        """Execute an UPDATE and return the number of affected rows."""
        self._execute_builder(query)
        return self.executor.affected_rows()

    def execute_delete(self, query: "DeleteQuery") -> int:
        """Execute a DELETE and return the number of affected rows."""
        self._execute_builder(query)
        return self.executor.affected_rows()

    def execute_scalar(self, query: "SelectQuery") -> Any:
        """Return the first column of the first row, or None.

        Useful for aggregate queries such as ``count()`` or ``avg()``.
        """
        row = self.first(query)
        if row is None:
            return None
        return next(iter(row.values()), None)

    def raw(self, sql: str, *bindings: Any, schema_type: "Optional[type[ModelDTOT]]" = None) -> "list[Any]":
        """Execute raw SQL with positional bindings.

        Bindings may be passed individually or as a single list or tuple.
        """
        values: "tuple[Any, ...]" = bindings
        if len(bindings) == 1 and isinstance(bindings[0], (list, tuple)):
            values = tuple(bindings[0])
        rows = self._execute(sql, values)
        return self.to_schema(rows, schema_type=schema_type)

    @contextmanager
    def transaction(self) -> "Iterator[Connection]":
        """Run a block inside one transaction.

        Commits when the block completes. Any exception rolls the transaction
        back and is re-raised unchanged.

        Raises:
            TransactionError: If a transaction is already open on this connection.
        """
        if self._in_transaction:
            msg = "A transaction is already open on this connection; nested transactions are not supported"
            raise TransactionError(msg)
        self._in_transaction = True
        try:
            self.executor.begin_transaction()
            logger.debug("Transaction started")
            try:
                yield self
            except BaseException as e:
                logger.warning(
                    "Rolling back transaction after %s",
                    type(e).__name__,
                    extra={"extra_fields": {"error_type": type(e).__name__}},
                )
                self.executor.rollback()
                raise
            self.executor.commit()
            logger.debug("Transaction committed")
        finally:
            self._in_transaction = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executor={self.executor!r})"

