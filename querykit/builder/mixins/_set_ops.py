from typing import TYPE_CHECKING

from typing_extensions import Self

from querykit.builder._clauses import UnionPart
from querykit.exceptions import ValidationError

if TYPE_CHECKING:
    from querykit.builder._select import SelectQuery

__all__ = ("SetOperationMixin",)


class SetOperationMixin:
    """Mixin providing UNION and UNION ALL for SELECT builders.

    The other query is held by reference, so later changes to it show up in
    this query's rendering. Reference cycles are reported at render time.
    """

    _unions: "list[UnionPart]"

    def _add_union(self, other: "SelectQuery", union_all: bool) -> Self:
        from querykit.builder._select import SelectQuery

        if not isinstance(other, SelectQuery):
            msg = f"UNION requires another select query, got {type(other).__name__}"
            raise ValidationError(msg)
        if other is self:
            msg = "A query cannot be unioned with itself"
            raise ValidationError(msg)
        self._unions.append(UnionPart(other, all=union_all))
        return self

    @property
    def has_unions(self) -> bool:
        """Whether this query is the head of a UNION chain."""
        return bool(self._unions)

    def union(self, other: "SelectQuery") -> Self:
        """Append ``UNION <other>``, removing duplicate rows."""
        return self._add_union(other, union_all=False)

    def union_all(self, other: "SelectQuery") -> Self:
        """Append ``UNION ALL <other>``, keeping duplicate rows."""
        return self._add_union(other, union_all=True)
