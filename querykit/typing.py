from collections.abc import Mapping
from typing import Any, TypeVar

from typing_extensions import TypeAlias

__all__ = ("Bindings", "ModelDTOT", "Record", "Row")

Bindings: TypeAlias = tuple[Any, ...]
"""Positional parameter values, one per ``?`` placeholder."""
Record: TypeAlias = Mapping[str, Any]
"""A column to value mapping used by ``where``, ``values`` and ``set``."""
Row: TypeAlias = Mapping[str, Any]
"""A result row keyed by output column name."""

ModelDTOT = TypeVar("ModelDTOT")
