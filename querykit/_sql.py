"""Factory for creating SQL builders that share one configuration.

QueryKit does not create a module-level factory. Build one where the
configuration is decided and pass it by reference::

    from querykit import BuilderConfig, QueryFactory

    sql = QueryFactory(BuilderConfig(check_raw_placeholders=True))
    query = sql.query("users").where("age", ">", 18)
"""

from typing import TYPE_CHECKING, Any, Optional

from querykit.builder import CaseBuilder, DeleteQuery, InsertQuery, SelectQuery, UpdateQuery
from querykit.config import BuilderConfig

if TYPE_CHECKING:
    from querykit.protocols import Renderable

__all__ = ("QueryFactory",)


class QueryFactory:
    """Creates statement builders bound to a shared ``BuilderConfig``."""

    __slots__ = ("config",)

    def __init__(self, config: Optional[BuilderConfig] = None) -> None:
        self.config = config if config is not None else BuilderConfig()

    def query(self, table: Optional[str] = None) -> SelectQuery:
        """Create a SELECT builder, optionally for ``table``."""
        return SelectQuery(table, config=self.config)

    def select(self, *columns: Any) -> SelectQuery:
        """Create a SELECT builder with an initial projection list."""
        return SelectQuery(config=self.config).select(*columns)

    def insert(self, table: Optional[str] = None) -> InsertQuery:
        return InsertQuery(table, config=self.config)

    def update(self, table: Optional[str] = None) -> UpdateQuery:
        return UpdateQuery(table, config=self.config)

    def delete(self, table: Optional[str] = None) -> DeleteQuery:
        return DeleteQuery(table, config=self.config)

    def case(self, subject: Optional[str] = None) -> CaseBuilder:
        """Create a CASE expression through the configured ``"case"`` kind."""
        return self.config.extensions.create("case", subject)  # type: ignore[return-value]

    def expression(self, kind: str, *args: Any, **kwargs: Any) -> "Renderable":
        """Create a registered expression kind by name.

        Raises:
            ExtensionNotFoundError: If ``kind`` is not registered.
        """
        return self.config.extensions.create(kind, *args, **kwargs)
