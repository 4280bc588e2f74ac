"""Compile annotated schemas into reusable binders.

``compile_schema`` builds the bind tree and the output validator once; the
returned ``Binder`` is immutable and every ``bind`` call works on its own
document cache, so a binder can be shared between threads.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Type, Union

import yaml
from jsonschema import Draft4Validator, Draft6Validator, Draft7Validator, Draft201909Validator, Draft202012Validator
from jsonschema.exceptions import SchemaError, best_match
from jsonschema.validators import extend, validator_for

from .compiler import BindNode, CancelToken, compile_tree
from .config import DEFAULT_CONFIG, BinderConfig
from .exceptions import OutputValidationError, SchemaCompileError, SchemaLoadError
from .registry import DEFAULT_REGISTRY, StrategyRegistry
from .representations import DocumentCache

logger = logging.getLogger(__name__)

SchemaSource = Union[bytes, str, Mapping[str, Any]]

DRAFT_VALIDATORS = {
    "draft4": Draft4Validator,
    "draft6": Draft6Validator,
    "draft7": Draft7Validator,
    "draft2019-09": Draft201909Validator,
    "draft2020-12": Draft202012Validator,
}


def _ignore_keyword(validator, value, instance, schema):
    return None


@lru_cache(maxsize=None)
def _binding_validator(base: Type, keyword: str) -> Type:
    """Extend a validator class so the binding keyword is accepted and ignored."""
    return extend(base, {keyword: _ignore_keyword})


def _parse_schema(schema: SchemaSource) -> dict:
    if isinstance(schema, Mapping):
        raw = dict(schema)
    else:
        try:
            raw = json.loads(schema)
        except ValueError as exc:
            raise SchemaCompileError(f"invalid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise SchemaCompileError(f"schema root must be an object, got {type(raw).__name__}")
    return raw


def load_schema(path: Union[str, Path]) -> dict:
    """Read a schema from a .json, .yaml or .yml file.

    Raises:
        SchemaLoadError: If the file is missing or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise SchemaLoadError(path.name, "File not found")
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, ValueError) as e:
        raise SchemaLoadError(path.name, f"Invalid document: {e}") from e
    if not isinstance(data, dict):
        raise SchemaLoadError(path.name, "Expected a mapping at the top level")
    return data


@dataclass(frozen=True)
class Binder:
    """A compiled bind tree paired with the validator for its schema."""

    root: BindNode
    registry: StrategyRegistry
    config: BinderConfig
    validator: Any = None

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        config: Optional[BinderConfig] = None,
        registry: Optional[StrategyRegistry] = None,
    ) -> "Binder":
        return compile_schema(load_schema(path), config=config, registry=registry)

    def bind(self, document: Union[bytes, str], cancel: Optional[CancelToken] = None) -> Tuple[Any, bool]:
        """Bind a document into the schema's shape and validate the result.

        Args:
            document: Source JSON document.
            cancel: Optional token (e.g. threading.Event) checked before each
                node is evaluated.

        Returns:
            Tuple of (value, bound). When nothing binds the result is
            (None, False) and validation is skipped.

        Raises:
            BindPathError: On any extraction, cast or capacity fault.
            BindCancelledError: If ``cancel`` is set during the call.
            OutputValidationError: If the bound value violates the schema.
        """
        cache = DocumentCache(document, self.registry.representations)
        value, bound = self.root.bind(cache, cancel)
        if not bound:
            logger.debug("Nothing bound from %d byte document", len(cache.raw))
            return None, False
        if self.validator is not None:
            self.validate(value)
        return value, True

    def validate(self, value: Any) -> None:
        """Raise OutputValidationError if ``value`` violates the schema."""
        error = best_match(self.validator.iter_errors(value))
        if error is not None:
            raise OutputValidationError(error.message, error.json_path)


def compile_schema(
    schema: SchemaSource,
    config: Optional[BinderConfig] = None,
    registry: Optional[StrategyRegistry] = None,
) -> Binder:
    """Compile an annotated JSON Schema into a Binder.

    Args:
        schema: Schema as JSON bytes, JSON text or an already parsed mapping.
        config: Binder settings; defaults to ``DEFAULT_CONFIG``.
        registry: Families available to directives; defaults to
            ``DEFAULT_REGISTRY``.

    Raises:
        SchemaCompileError: If the schema is not a well-formed JSON Schema
            object, or any directive fails to compile.
    """
    config = config or DEFAULT_CONFIG
    registry = registry or DEFAULT_REGISTRY

    raw = _parse_schema(schema)
    validator_cls = _binding_validator(
        validator_for(raw, default=DRAFT_VALIDATORS[config.draft]), config.keyword
    )
    try:
        validator_cls.check_schema(raw)
    except SchemaError as exc:
        raise SchemaCompileError(f"invalid schema: {exc.message}") from exc

    root = compile_tree(raw, registry, config)
    validator = validator_cls(raw) if config.validate_output else None
    return Binder(root=root, registry=registry, config=config, validator=validator)


__all__ = ["Binder", "DRAFT_VALIDATORS", "SchemaSource", "compile_schema", "load_schema"]
