"""Compile annotated JSON Schemas into bind trees and execute them.

A schema node contributes to the output when it carries a binding directive
or when at least one of its ``properties``/``items`` descendants does. Every
other subtree is pruned at compile time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Optional, Protocol, Tuple, Union

from .config import DEFAULT_CONFIG, BinderConfig
from .directive import split_directive
from .exceptions import (
    BindCancelledError,
    BindPathError,
    CapacityError,
    CastError,
    InvalidExpressionError,
    SchemaBindError,
    SchemaCompileError,
    UnsupportedFamilyError,
)
from .registry import DEFAULT_REGISTRY, StrategyRegistry
from .representations import DocumentCache
from .strategies import ABSENT, Strategy

logger = logging.getLogger(__name__)

ROOT_PATH = "$"


class CancelToken(Protocol):
    def is_set(self) -> bool:
        ...


@dataclass(frozen=True)
class NamedChildren:
    nodes: Mapping[str, "BindNode"]


@dataclass(frozen=True)
class IndexedChildren:
    nodes: Tuple[Optional["BindNode"], ...]


Children = Union[NamedChildren, IndexedChildren, None]


@dataclass(frozen=True)
class BindNode:
    """One compiled node of the output tree.

    ``path`` locates the node in the output and is only used to attribute
    errors. Leaves have ``children=None``.
    """

    path: str
    strategy: Strategy
    children: Children = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def walk(self) -> Iterator["BindNode"]:
        """Yield this node and every descendant, depth first."""
        yield self
        if isinstance(self.children, NamedChildren):
            for child in self.children.nodes.values():
                yield from child.walk()
        elif isinstance(self.children, IndexedChildren):
            for child in self.children.nodes:
                if child is not None:
                    yield from child.walk()

    def bind(self, cache: DocumentCache, cancel: Optional[CancelToken] = None) -> Tuple[Any, bool]:
        """Evaluate this subtree against a document.

        Returns:
            Tuple of (value, bound). ``bound`` is False when nothing in the
            subtree produced a value for the parent to write.

        Raises:
            BindPathError: Wrapping the first fault, annotated with the path
                of the node closest to it.
            BindCancelledError: If ``cancel`` is set before a node runs.
        """
        if cancel is not None and cancel.is_set():
            raise BindCancelledError(f"bind cancelled at {self.path}")

        try:
            value, bound = self._extract(cache)
        except SchemaBindError as exc:
            if exc.path_annotated:
                raise
            raise BindPathError(self.path, exc) from exc

        if self.children is None or (value is None and not bound):
            return value, bound

        if isinstance(self.children, NamedChildren):
            if not isinstance(value, dict):
                raise BindPathError(self.path, CastError("mapping", value))
            # Never write into a value owned by a cached representation.
            value = dict(value)
            for name, child in self.children.nodes.items():
                child_value, child_bound = child.bind(cache, cancel)
                if child_bound:
                    value[name] = child_value
                    bound = True
            return value, bound

        nodes = self.children.nodes
        if not isinstance(value, list):
            raise BindPathError(self.path, CastError("sequence", value))
        if len(value) < len(nodes):
            raise BindPathError(self.path, CapacityError(len(value), len(nodes)))
        value = list(value)
        for index, child in enumerate(nodes):
            if child is None:
                continue
            child_value, child_bound = child.bind(cache, cancel)
            if child_bound:
                value[index] = child_value
                bound = True
        return value, bound

    def _extract(self, cache: DocumentCache) -> Tuple[Any, bool]:
        representation = self.strategy.representation
        document = cache.get(representation) if representation is not None else None
        return self.strategy.extract(document)


def _positional_items(schema: Mapping[str, Any]) -> Optional[List[Any]]:
    items = schema.get("items")
    if isinstance(items, list):
        return items
    prefix_items = schema.get("prefixItems")
    if isinstance(prefix_items, list):
        return prefix_items
    return None


def compile_node(
    schema: Any,
    path: str,
    registry: StrategyRegistry = DEFAULT_REGISTRY,
    config: BinderConfig = DEFAULT_CONFIG,
) -> Optional[BindNode]:
    """Compile one schema node and its descendants.

    Returns:
        The compiled node, or None when nothing in the subtree binds.

    Raises:
        SchemaCompileError: If a directive is not a string.
        UnsupportedFamilyError: If a directive names an unknown family.
        InvalidExpressionError: If a family rejects its expression.
    """
    if not isinstance(schema, dict):
        return None

    family: Optional[str] = None
    expression: Optional[str] = None
    explicitly_bound = config.keyword in schema
    if explicitly_bound:
        directive = schema[config.keyword]
        if not isinstance(directive, str):
            raise SchemaCompileError(f"'{config.keyword}' must be a string", path)
        family, expression = split_directive(directive, registry, config.default_family)

    items = _positional_items(schema)
    properties = schema.get("properties")
    if family is None:
        if "properties" in schema:
            family = "map"
        elif items is not None:
            family = "slice"

    children: Children = None
    any_child_bound = False
    if "properties" in schema:
        if isinstance(properties, dict):
            named = {}
            for name, child_schema in properties.items():
                child = compile_node(child_schema, f"{path}.{name}", registry, config)
                if child is not None:
                    named[name] = child
            if named:
                any_child_bound = True
                children = NamedChildren(MappingProxyType(named))
    elif items is not None:
        if family == "slice" and expression is None:
            expression = str(len(items))
        indexed: List[Optional[BindNode]] = [None] * len(items)
        for index, child_schema in enumerate(items):
            indexed[index] = compile_node(child_schema, f"{path}[{index}]", registry, config)
        if any(child is not None for child in indexed):
            any_child_bound = True
            children = IndexedChildren(tuple(indexed))

    if not explicitly_bound and not any_child_bound:
        return None

    if family not in registry:
        raise UnsupportedFamilyError(family, path)
    try:
        strategy = registry.create(family, expression or "")
    except InvalidExpressionError as exc:
        raise InvalidExpressionError(exc.family, exc.expression, exc.reason, path) from exc

    return BindNode(path, strategy, children)


def compile_tree(
    schema: Mapping[str, Any],
    registry: StrategyRegistry = DEFAULT_REGISTRY,
    config: BinderConfig = DEFAULT_CONFIG,
) -> BindNode:
    """Compile a whole schema; a schema that binds nothing yields an absent root."""
    if config.default_family not in registry:
        raise UnsupportedFamilyError(config.default_family)
    root = compile_node(schema, ROOT_PATH, registry, config)
    if root is None:
        logger.debug("Schema binds nothing; using absent root")
        return BindNode(ROOT_PATH, ABSENT)
    logger.debug("Compiled schema into %d bind nodes", sum(1 for _ in root.walk()))
    return root


__all__ = [
    "BindNode",
    "CancelToken",
    "Children",
    "IndexedChildren",
    "NamedChildren",
    "ROOT_PATH",
    "compile_node",
    "compile_tree",
]
