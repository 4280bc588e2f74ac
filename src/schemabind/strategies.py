"""Extraction strategies.

Each strategy turns one document representation into ``(value, present)``.
Container seeds (``map`` and ``slice``) need no representation and report
``present=False``; path-expression strategies compile their expression once
at construction and evaluate it per bind call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

import jmespath
from jmespath.exceptions import JMESPathError
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath
from jsonpointer import EndOfList, JsonPointer, JsonPointerException

from .exceptions import ExtractionError, InvalidExpressionError

Extraction = Tuple[Any, bool]

_MISSING = object()

# JMESPath node types whose result is a list of matches.
PROJECTION_NODES = frozenset({"projection", "filter_projection", "flatten", "value_projection"})


def shape_matches(matches: List[Any]) -> Extraction:
    """Collapse an evaluator's match list into ``(value, present)``.

    No match yields ``(None, False)``, a single match yields the match itself
    and several matches yield them as an ordered list.
    """
    if not matches:
        return None, False
    if len(matches) == 1:
        return matches[0], True
    return list(matches), True


class Strategy(ABC):
    """Base class for everything a bind node can evaluate."""

    family: str = ""
    expression: str = ""
    representation: Optional[str] = None

    @abstractmethod
    def extract(self, document: Any) -> Extraction:
        """Evaluate against a representation (``None`` when none is required)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.expression!r})"


class AbsentStrategy(Strategy):
    family = "nil"

    def extract(self, document: Any) -> Extraction:
        return None, False


class MappingSeedStrategy(Strategy):
    """Seed for schema nodes with ``properties`` and no explicit directive."""

    family = "map"

    def extract(self, document: Any) -> Extraction:
        return {}, False


class SequenceSeedStrategy(Strategy):
    """Seed producing a fixed-length list of ``None`` slots."""

    family = "slice"

    def __init__(self, expression: str):
        try:
            length = int(expression)
        except ValueError as exc:
            raise InvalidExpressionError(self.family, expression, "length must be an integer") from exc
        if length < 0:
            raise InvalidExpressionError(self.family, expression, "length must not be negative")
        self.expression = expression
        self.length = length

    def extract(self, document: Any) -> Extraction:
        return [None] * self.length, False


class JMESPathStrategy(Strategy):
    """JMESPath evaluator.

    A ``null`` result counts as no match. Projections and filters produce
    match lists, which are shaped like any other family's matches.
    """

    family = "jmes"
    representation = "json"

    def __init__(self, expression: str):
        self.expression = expression
        try:
            self._compiled = jmespath.compile(expression)
        except JMESPathError as exc:
            raise InvalidExpressionError(self.family, expression, str(exc)) from exc
        self._projects = self._compiled.parsed.get("type") in PROJECTION_NODES

    def extract(self, document: Any) -> Extraction:
        try:
            result = self._compiled.search(document)
        except JMESPathError as exc:
            raise ExtractionError(self.family, self.expression, str(exc)) from exc
        if self._projects and isinstance(result, list):
            return shape_matches(result)
        if result is None:
            return None, False
        return result, True


class JSONPathStrategy(Strategy):
    """JSONPath evaluator (jsonpath-ng with filter and arithmetic extensions)."""

    family = "jp"
    representation = "json"

    def __init__(self, expression: str, family: Optional[str] = None, representation: Optional[str] = None):
        if family is not None:
            self.family = family
        if representation is not None:
            self.representation = representation
        self.expression = expression
        try:
            self._compiled = parse_jsonpath(expression)
        except (JSONPathError, ValueError) as exc:
            raise InvalidExpressionError(self.family, expression, str(exc)) from exc

    def extract(self, document: Any) -> Extraction:
        try:
            matches = self._compiled.find(document)
        except (JSONPathError, TypeError, ValueError) as exc:
            raise ExtractionError(self.family, self.expression, str(exc)) from exc
        return shape_matches([match.value for match in matches])


class JSONPointerStrategy(Strategy):
    """RFC 6901 pointer; resolves to at most one value."""

    family = "pointer"
    representation = "json"

    def __init__(self, expression: str):
        self.expression = expression
        try:
            self._pointer = JsonPointer(expression)
        except JsonPointerException as exc:
            raise InvalidExpressionError(self.family, expression, str(exc)) from exc

    def extract(self, document: Any) -> Extraction:
        result = self._pointer.resolve(document, _MISSING)
        if result is _MISSING or isinstance(result, EndOfList):
            return None, False
        return result, True


ABSENT = AbsentStrategy()
MAPPING_SEED = MappingSeedStrategy()


__all__ = [
    "ABSENT",
    "AbsentStrategy",
    "Extraction",
    "JMESPathStrategy",
    "JSONPathStrategy",
    "JSONPointerStrategy",
    "MAPPING_SEED",
    "MappingSeedStrategy",
    "SequenceSeedStrategy",
    "Strategy",
    "shape_matches",
]
