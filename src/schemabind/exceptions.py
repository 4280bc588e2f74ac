"""
Custom exception classes for schemabind.

This module defines structured exception types for schema compilation,
bind-time extraction faults, output validation and configuration loading.
"""

from typing import Optional


class SchemaBindError(Exception):
    """Base exception for all schemabind errors."""

    path_annotated = False


class SchemaCompileError(SchemaBindError):
    """Error turning an annotated schema into a bind tree."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        if path:
            super().__init__(f"Schema compile error at {path}: {message}")
        else:
            super().__init__(f"Schema compile error: {message}")


class UnsupportedFamilyError(SchemaCompileError):
    """A directive names a family absent from the registry."""

    def __init__(self, family: str, path: Optional[str] = None):
        self.family = family
        super().__init__(f"unsupported family '{family}'", path)


class InvalidExpressionError(SchemaCompileError):
    """A family rejected the expression it was given."""

    def __init__(self, family: str, expression: str, message: str, path: Optional[str] = None):
        self.family = family
        self.expression = expression
        self.reason = message
        super().__init__(f"invalid {family} expression {expression!r}: {message}", path)


class CastError(SchemaBindError):
    """Container value does not have the shape its children expect."""

    def __init__(self, expected: str, actual: object):
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(f"cast error: can not cast {self.actual} to {expected}")


class CapacityError(SchemaBindError):
    """Indexed container is shorter than its declared children."""

    def __init__(self, length: int, required: int):
        self.length = length
        self.required = required
        super().__init__(
            f"capacity error: sequence has {length} slots, {required} required"
        )


class ExtractionError(SchemaBindError):
    """A path-expression evaluator failed while evaluating."""

    def __init__(self, family: str, expression: str, message: str):
        self.family = family
        self.expression = expression
        self.message = message
        super().__init__(f"{family} evaluation of {expression!r} failed: {message}")


class RepresentationError(SchemaBindError):
    """The document could not be parsed into a representation."""

    def __init__(self, representation: str, message: str):
        self.representation = representation
        self.message = message
        super().__init__(f"cannot build {representation} representation: {message}")


class BindPathError(SchemaBindError):
    """A bind fault annotated with the output path of the node that raised it."""

    path_annotated = True

    def __init__(self, path: str, cause: SchemaBindError):
        self.path = path
        self.cause = cause
        super().__init__(f"[{path}] {cause}")


class BindCancelledError(SchemaBindError):
    """The caller cancelled a bind call before it completed."""


class OutputValidationError(SchemaBindError):
    """The bound value does not satisfy the schema."""

    def __init__(self, message: str, field_path: str = "$"):
        self.message = message
        self.field_path = field_path
        super().__init__(f"Output validation error at {field_path}: {message}")


class ConfigLoadError(SchemaBindError):
    """Error loading a binder configuration file."""

    def __init__(self, file_name: str, message: str):
        self.file_name = file_name
        self.message = message
        super().__init__(f"Error loading {file_name}: {message}")


class SchemaLoadError(SchemaBindError):
    """Error reading a schema file."""

    def __init__(self, file_name: str, message: str):
        self.file_name = file_name
        self.message = message
        super().__init__(f"Error loading {file_name}: {message}")
