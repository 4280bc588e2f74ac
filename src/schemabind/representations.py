"""Document representations and the per-bind representation cache."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Union

from .exceptions import RepresentationError

logger = logging.getLogger(__name__)

RepresentationBuilder = Callable[[bytes], Any]

_EMPTY = object()


def parse_json(raw: bytes) -> Any:
    """Parse into plain Python objects (``int``/``float`` numbers)."""
    return json.loads(raw)


def parse_json_decimal(raw: bytes) -> Any:
    """Parse keeping non-integer numbers exact as ``Decimal``."""
    return json.loads(raw, parse_float=Decimal)


class DocumentCache:
    """Raw document bytes plus lazily built representations.

    One slot per registered representation. A slot is filled at most once per
    cache; a failed build leaves the slot empty so the next ``ensure`` parses
    again.
    """

    def __init__(self, raw: Union[bytes, str], builders: Mapping[str, RepresentationBuilder]):
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        self.raw = raw
        self._builders = builders
        self._slots: Dict[str, Any] = {name: _EMPTY for name in builders}

    def is_built(self, representation: str) -> bool:
        return self._slots.get(representation, _EMPTY) is not _EMPTY

    def ensure(self, representation: str) -> None:
        """Build the named representation unless it is already built.

        Raises:
            RepresentationError: If the representation is unknown or the
                document cannot be parsed into it.
        """
        if representation not in self._slots:
            raise RepresentationError(representation, "unknown representation")
        if self._slots[representation] is not _EMPTY:
            return
        try:
            parsed = self._builders[representation](self.raw)
        except (ValueError, TypeError, RecursionError) as exc:
            raise RepresentationError(representation, str(exc)) from exc
        self._slots[representation] = parsed
        logger.debug("Built %s representation from %d bytes", representation, len(self.raw))

    def get(self, representation: str) -> Any:
        self.ensure(representation)
        return self._slots[representation]


__all__ = ["DocumentCache", "RepresentationBuilder", "parse_json", "parse_json_decimal"]
