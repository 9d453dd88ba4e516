from querykit.builder.mixins._join import JoinClauseMixin
from querykit.builder.mixins._order_limit import GroupByClauseMixin, LimitOffsetClauseMixin, OrderByClauseMixin
from querykit.builder.mixins._select_columns import AggregateFunctionsMixin, CaseBuilderMixin, SelectColumnsMixin
from querykit.builder.mixins._set_ops import SetOperationMixin
from querykit.builder.mixins._where import HavingClauseMixin, WhereClauseMixin

__all__ = (
    "AggregateFunctionsMixin",
    "CaseBuilderMixin",
    "GroupByClauseMixin",
    "HavingClauseMixin",
    "JoinClauseMixin",
    "LimitOffsetClauseMixin",
    "OrderByClauseMixin",
    "SelectColumnsMixin",
    "SetOperationMixin",
    "WhereClauseMixin",
)
