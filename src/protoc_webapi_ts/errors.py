from __future__ import annotations


class GeneratorError(Exception):
    """Base class for errors that abort generation of a file."""


class UnresolvedTypeError(GeneratorError):
    """Raised when a fully-qualified type name has no registered definition."""

    def __init__(self, full_name: str, using_file: str):
        self.full_name = full_name
        self.using_file = using_file
        super().__init__(
            f"Unresolved type '{full_name}' referenced from '{using_file}'. "
            f"No registered schema file defines it."
        )


class UnsupportedFieldTypeError(GeneratorError):
    """Raised in strict mode for field kinds without an explicit TypeScript mapping."""


class OptionsError(GeneratorError):
    """Raised for unknown generator options."""


class ProtocError(GeneratorError):
    """Raised when protoc is missing or fails to build a descriptor set."""


class ModuleCollisionError(GeneratorError):
    """Raised when two schema files would be generated into the same module."""
