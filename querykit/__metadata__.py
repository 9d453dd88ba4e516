"""Metadata for the Project."""

from importlib.metadata import PackageNotFoundError, metadata, version

__all__ = ("__project__", "__version__")

try:
    __version__ = version("querykit")
    """Version of the project."""
    __project__ = metadata("querykit")["Name"]
    """Name of the project."""
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
    __project__ = "QueryKit"
finally:
    del version, PackageNotFoundError, metadata
