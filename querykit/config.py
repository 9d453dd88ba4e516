from dataclasses import dataclass, field

from querykit.registry import ExtensionRegistry, default_registry

__all__ = ("BuilderConfig",)


@dataclass(frozen=True)
class BuilderConfig:
    """Settings shared by every builder created from one factory or connection.

    Construct it once and pass it by reference; QueryKit keeps no global
    configuration of its own.
    """

    pretty: bool = False
    """Emit multi-line SQL instead of a single line."""
    check_raw_placeholders: bool = False
    """Reject raw fragments whose ``?`` count differs from the values passed with them."""
    extensions: ExtensionRegistry = field(default_factory=default_registry, compare=False)
    """Named renderable expression kinds available to builders."""
