"""schemabind package root.

Bind values from arbitrary JSON documents into the shape declared by an
annotated JSON Schema, then validate the result against that schema.
"""

__version__ = "0.1.0"

from schemabind.binder import Binder, compile_schema, load_schema  # noqa: F401
from schemabind.config import BinderConfig, load_binder_config  # noqa: F401
from schemabind.exceptions import (  # noqa: F401
    BindCancelledError,
    BindPathError,
    CapacityError,
    CastError,
    ConfigLoadError,
    ExtractionError,
    InvalidExpressionError,
    OutputValidationError,
    RepresentationError,
    SchemaBindError,
    SchemaCompileError,
    SchemaLoadError,
    UnsupportedFamilyError,
)
from schemabind.registry import DEFAULT_REGISTRY, RegistryBuilder, StrategyRegistry, default_registry_builder  # noqa: F401

__all__ = [
    "__version__",
    "Binder",
    "compile_schema",
    "load_schema",
    "BinderConfig",
    "load_binder_config",
    "DEFAULT_REGISTRY",
    "RegistryBuilder",
    "StrategyRegistry",
    "default_registry_builder",
    "BindCancelledError",
    "BindPathError",
    "CapacityError",
    "CastError",
    "ConfigLoadError",
    "ExtractionError",
    "InvalidExpressionError",
    "OutputValidationError",
    "RepresentationError",
    "SchemaBindError",
    "SchemaCompileError",
    "SchemaLoadError",
    "UnsupportedFamilyError",
]
