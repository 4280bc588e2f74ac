"""Extraction strategy registry.

Families and representations are registered on a ``RegistryBuilder`` and
frozen into a ``StrategyRegistry`` by ``build()``. A built registry is never
mutated, so it can be shared by any number of compiled binders.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Callable, Dict, Iterator, Mapping, Optional

from .directive import DIRECTIVE_WINDOW
from .exceptions import UnsupportedFamilyError
from .representations import RepresentationBuilder, parse_json, parse_json_decimal
from .strategies import (
    ABSENT,
    MAPPING_SEED,
    JMESPathStrategy,
    JSONPathStrategy,
    JSONPointerStrategy,
    SequenceSeedStrategy,
    Strategy,
)

StrategyFactory = Callable[[str], Strategy]

# The family name and its colon must fit in the directive window.
MAX_FAMILY_LENGTH = DIRECTIVE_WINDOW - 1


@dataclass(frozen=True)
class FamilySpec:
    name: str
    factory: StrategyFactory
    representation: Optional[str] = None

    def create(self, expression: str) -> Strategy:
        strategy = self.factory(expression)
        if strategy.representation != self.representation:
            raise ValueError(
                f"Family '{self.name}' declares representation {self.representation!r} "
                f"but its strategy reads {strategy.representation!r}"
            )
        return strategy


class StrategyRegistry:
    """Read-only table of families and the representations they need."""

    def __init__(
        self,
        families: Mapping[str, FamilySpec],
        representations: Mapping[str, RepresentationBuilder],
    ):
        self._families = MappingProxyType(dict(families))
        self._representations = MappingProxyType(dict(representations))

    @property
    def families(self) -> Mapping[str, FamilySpec]:
        return self._families

    @property
    def representations(self) -> Mapping[str, RepresentationBuilder]:
        return self._representations

    def __contains__(self, family: object) -> bool:
        return family in self._families

    def __iter__(self) -> Iterator[str]:
        return iter(self._families)

    def get(self, family: str) -> FamilySpec:
        """Look up a family.

        Raises:
            UnsupportedFamilyError: If the family is not registered.
        """
        spec = self._families.get(family)
        if spec is None:
            raise UnsupportedFamilyError(family)
        return spec

    def create(self, family: str, expression: str) -> Strategy:
        return self.get(family).create(expression)


class RegistryBuilder:
    """Collects registrations until ``build()`` is called."""

    def __init__(self):
        self._families: Dict[str, FamilySpec] = {}
        self._representations: Dict[str, RepresentationBuilder] = {}

    def register_representation(self, name: str, builder: RepresentationBuilder) -> "RegistryBuilder":
        if name in self._representations:
            raise ValueError(f"Representation '{name}' is already registered")
        self._representations[name] = builder
        return self

    def register_family(
        self,
        name: str,
        factory: StrategyFactory,
        representation: Optional[str] = None,
    ) -> "RegistryBuilder":
        """Register a family.

        Args:
            name: Family tag used as a directive prefix.
            factory: Callable building a strategy from an expression.
            representation: Representation the strategy evaluates against,
                or None for strategies that ignore the document.

        Raises:
            ValueError: If the name is empty, too long, already taken, or the
                representation has not been registered.
        """
        if not name or ":" in name:
            raise ValueError(f"Invalid family name '{name}'")
        if len(name) > MAX_FAMILY_LENGTH:
            raise ValueError(
                f"Family name '{name}' exceeds {MAX_FAMILY_LENGTH} characters"
            )
        if name in self._families:
            raise ValueError(f"Family '{name}' is already registered")
        if representation is not None and representation not in self._representations:
            raise ValueError(
                f"Family '{name}' requires unknown representation '{representation}'"
            )
        self._families[name] = FamilySpec(name, factory, representation)
        return self

    def build(self) -> StrategyRegistry:
        return StrategyRegistry(self._families, self._representations)


def default_registry_builder() -> RegistryBuilder:
    """Return a builder holding the built-in families."""
    builder = RegistryBuilder()
    builder.register_representation("json", parse_json)
    builder.register_representation("decimal", parse_json_decimal)

    builder.register_family("nil", lambda expression: ABSENT)
    builder.register_family("map", lambda expression: MAPPING_SEED)
    builder.register_family("slice", SequenceSeedStrategy)
    builder.register_family("jmes", JMESPathStrategy, representation="json")
    builder.register_family("jp", JSONPathStrategy, representation="json")
    builder.register_family("pointer", JSONPointerStrategy, representation="json")
    builder.register_family(
        "exact",
        partial(JSONPathStrategy, family="exact", representation="decimal"),
        representation="decimal",
    )
    return builder


DEFAULT_REGISTRY = default_registry_builder().build()


__all__ = [
    "DEFAULT_REGISTRY",
    "FamilySpec",
    "MAX_FAMILY_LENGTH",
    "RegistryBuilder",
    "StrategyFactory",
    "StrategyRegistry",
    "default_registry_builder",
]
