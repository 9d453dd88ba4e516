"""Connection facade and result mapping for executing rendered statements."""

from querykit.driver._connection import Connection
from querykit.driver._result_tools import ToSchemaMixin

__all__ = ("Connection", "ToSchemaMixin")
