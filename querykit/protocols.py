"""Runtime protocols for QueryKit collaborators.

These define the capabilities QueryKit relies on without binding to concrete
classes: renderable expressions that can sit in a projection list and the
executor that performs I/O for rendered statements.
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from querykit.typing import Bindings, Row

__all__ = ("ExecutorProtocol", "Renderable")


@runtime_checkable
class Renderable(Protocol):
    """An expression that renders itself to SQL text plus ordered bindings."""

    def render(self) -> "tuple[str, Bindings]":
        """Return the SQL text and the bindings for each ``?`` it contains."""
        ...


@runtime_checkable
class ExecutorProtocol(Protocol):
    """The database-facing collaborator that executes rendered statements."""

    def execute(self, sql: str, bindings: "Sequence[Any]") -> "list[Row]": ...

    def last_insert_id(self) -> Any: ...

    def affected_rows(self) -> int: ...

    def begin_transaction(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
