"""Binding directive parsing.

A directive is ``[family ":"] expression``. Only the first
``DIRECTIVE_WINDOW`` characters are searched for the family delimiter, so a
colon further into the string always belongs to the expression.
"""

from __future__ import annotations

from typing import Container, NamedTuple

DIRECTIVE_WINDOW = 8


class Directive(NamedTuple):
    family: str
    expression: str


def split_directive(directive: str, families: Container[str], default_family: str) -> Directive:
    """Split a directive string into its family and expression.

    Args:
        directive: Raw directive value taken from the schema node.
        families: Registered family names.
        default_family: Family to use when the directive names none.

    Returns:
        Directive tuple. The expression is the whole string when no
        registered family prefix is found.
    """
    idx = directive.find(":", 0, DIRECTIVE_WINDOW)
    if idx <= 0:
        return Directive(default_family, directive)
    family = directive[:idx]
    if family in families:
        return Directive(family, directive[idx + 1:])
    return Directive(default_family, directive)


__all__ = ["DIRECTIVE_WINDOW", "Directive", "split_directive"]
