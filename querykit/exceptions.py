from typing import Any, Optional

__all__ = (
    "ExecutorError",
    "ExtensionError",
    "ExtensionNotFoundError",
    "QueryKitError",
    "SQLBuilderError",
    "TransactionError",
    "UnsupportedOperatorError",
    "ValidationError",
)


class QueryKitError(Exception):
    """Base exception class from which all QueryKit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``QueryKitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class SQLBuilderError(QueryKitError):
    """Issues building or rendering SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class ValidationError(SQLBuilderError):
    """A builder was configured with invalid or incomplete clause data."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Invalid query configuration."
        super().__init__(message)


class UnsupportedOperatorError(SQLBuilderError):
    """An operator outside the recognized comparison set was used."""

    operator: str

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Unsupported operator: {operator!r}")


class ExtensionError(QueryKitError):
    """Issues registering or creating extension expressions."""


class ExtensionNotFoundError(ExtensionError):
    """No expression kind is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No expression kind registered as {name!r}")


class TransactionError(QueryKitError):
    """Transaction block misuse, such as nesting on one connection."""


class ExecutorError(QueryKitError):
    """Optional base class for errors raised by executor implementations.

    QueryKit never raises or translates this exception itself; anything an
    executor raises reaches the caller unchanged.
    """
