"""Registry of renderable expression kinds.

Builders never check for concrete expression classes. Anything that should sit
in a projection list only has to provide ``render() -> (text, bindings)``; the
registry gives such kinds a name so builders and connections can create them.
"""

from typing import TYPE_CHECKING, Any, Callable, Optional

from querykit.exceptions import ExtensionError, ExtensionNotFoundError
from querykit.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

    from querykit.protocols import Renderable

__all__ = ("ExpressionFactory", "ExtensionRegistry", "default_registry")

logger = get_logger("registry")

ExpressionFactory = Callable[..., "Renderable"]


class ExtensionRegistry:
    """Maps expression kind names to factories producing ``Renderable`` values."""

    __slots__ = ("_factories",)

    def __init__(self, factories: "Optional[dict[str, ExpressionFactory]]" = None) -> None:
        self._factories: dict[str, ExpressionFactory] = {}
        for name, factory in (factories or {}).items():
            self.register(name, factory)

    def register(self, name: str, factory: ExpressionFactory) -> None:
        """Register a new expression kind.

        Args:
            name: The kind name used with :meth:`create`.
            factory: A class or callable returning a renderable expression. When
                a class is given it must define a callable ``render``.

        Raises:
            ExtensionError: If the name is taken or the factory cannot produce
                renderable expressions.
        """
        if not name:
            msg = "Expression kind name must be a non-empty string"
            raise ExtensionError(msg)
        if name in self._factories:
            msg = f"Expression kind {name!r} is already registered"
            raise ExtensionError(msg)
        if not callable(factory):
            msg = f"Factory for {name!r} is not callable"
            raise ExtensionError(msg)
        if isinstance(factory, type) and not callable(getattr(factory, "render", None)):
            msg = f"{factory.__name__} does not implement render() and cannot be registered as {name!r}"
            raise ExtensionError(msg)
        self._factories[name] = factory
        logger.debug("Registered expression kind %s", name)

    def unregister(self, name: str) -> None:
        if name not in self._factories:
            raise ExtensionNotFoundError(name)
        del self._factories[name]

    def create(self, name: str, *args: Any, **kwargs: Any) -> "Renderable":
        """Create a new expression of the named kind.

        Raises:
            ExtensionNotFoundError: If ``name`` was never registered.
            ExtensionError: If the factory returned something without ``render()``.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ExtensionNotFoundError(name)
        expression = factory(*args, **kwargs)
        if not callable(getattr(expression, "render", None)):
            msg = f"Factory for {name!r} returned {type(expression).__name__}, which has no render()"
            raise ExtensionError(msg)
        return expression

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> "Iterator[str]":
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self._factories)!r})"


def default_registry() -> ExtensionRegistry:
    """Return a fresh registry with the built-in ``case`` expression kind."""
    from querykit.builder._case import CaseBuilder

    return ExtensionRegistry({"case": CaseBuilder})
