import dataclasses
import inspect
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union, cast, overload

from mypy_extensions import trait

from querykit.typing import ModelDTOT, Row
from querykit.utils.logging import get_logger

__all__ = ("ToSchemaMixin",)

logger = get_logger("driver.result_tools")


def _accepts_no_arguments(schema_type: type) -> bool:
    try:
        signature = inspect.signature(schema_type)
    except (TypeError, ValueError):
        return False
    return not signature.parameters


def _annotated_names(schema_type: type) -> "set[str]":
    names: set[str] = set()
    for klass in schema_type.__mro__:
        names.update(getattr(klass, "__annotations__", None) or {})
    return names


def _row_to_schema(row: Row, schema_type: "type[ModelDTOT]") -> ModelDTOT:
    if dataclasses.is_dataclass(schema_type):
        init_fields = {field.name for field in dataclasses.fields(schema_type) if field.init}
        return schema_type(**{key: value for key, value in row.items() if key in init_fields})
    if _accepts_no_arguments(schema_type):
        instance = schema_type()
        annotated = _annotated_names(schema_type)
        for key, value in row.items():
            if key in annotated or hasattr(instance, key):
                setattr(instance, key, value)
        return instance
    return schema_type(**dict(row))


@trait
class ToSchemaMixin:
    __slots__ = ()

    @overload
    @staticmethod
    def to_schema(data: "Sequence[Row]", *, schema_type: "type[ModelDTOT]") -> "list[ModelDTOT]": ...
    @overload
    @staticmethod
    def to_schema(data: Row, *, schema_type: "type[ModelDTOT]") -> ModelDTOT: ...
    @overload
    @staticmethod
    def to_schema(data: "Sequence[Row]", *, schema_type: None = None) -> "list[Row]": ...
    @overload
    @staticmethod
    def to_schema(data: Row, *, schema_type: None = None) -> Row: ...

    @staticmethod
    def to_schema(
        data: "Union[Row, Sequence[Row]]", *, schema_type: "Optional[type[ModelDTOT]]" = None
    ) -> "Union[Row, ModelDTOT, list[Row], list[ModelDTOT]]":
        """Convert result rows to a model type.

        Dataclasses receive the row keys matching their init fields. Classes
        constructed without arguments get each row key that names an existing
        or annotated attribute assigned with ``setattr``. Any other class is called with the
        row as keyword arguments.

        Args:
            data: One row or a sequence of rows.
            schema_type: The model to map to. ``None`` returns ``data`` unchanged.

        Returns:
            The mapped row or rows.
        """
        if schema_type is None:
            if isinstance(data, Mapping):
                return data
            return list(cast("Sequence[Row]", data))
        if isinstance(data, Mapping):
            return _row_to_schema(data, schema_type)
        logger.debug("Mapping %d rows to %s", len(data), schema_type.__name__)
        return [_row_to_schema(row, schema_type) for row in data]
