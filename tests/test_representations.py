"""Tests for the per-bind document representation cache."""

from decimal import Decimal

import pytest

from schemabind.exceptions import RepresentationError
from schemabind.registry import DEFAULT_REGISTRY
from schemabind.representations import DocumentCache, parse_json, parse_json_decimal


class CountingBuilder:
    def __init__(self, fail_times: int = 0):
        self.calls = 0
        self.fail_times = fail_times

    def __call__(self, raw: bytes):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise ValueError("transient parse failure")
        return parse_json(raw)


def test_ensure_builds_once() -> None:
    builder = CountingBuilder()
    cache = DocumentCache(b'{"a": 1}', {"json": builder})

    assert not cache.is_built("json")
    cache.ensure("json")
    cache.ensure("json")
    assert cache.get("json") == {"a": 1}
    assert builder.calls == 1
    assert cache.is_built("json")


def test_parse_fault_is_not_cached() -> None:
    builder = CountingBuilder(fail_times=1)
    cache = DocumentCache(b'{"a": 1}', {"json": builder})

    with pytest.raises(RepresentationError) as exc:
        cache.ensure("json")
    assert exc.value.representation == "json"
    assert not cache.is_built("json")

    # The next call parses again and succeeds.
    assert cache.get("json") == {"a": 1}
    assert builder.calls == 2


def test_invalid_document_fails_every_time() -> None:
    cache = DocumentCache(b"{", DEFAULT_REGISTRY.representations)
    for _ in range(2):
        with pytest.raises(RepresentationError):
            cache.ensure("json")


def test_trailing_data_is_rejected() -> None:
    cache = DocumentCache(b'{"a": 1} {"b": 2}', DEFAULT_REGISTRY.representations)
    with pytest.raises(RepresentationError):
        cache.ensure("json")


def test_null_document_is_memoized() -> None:
    builder = CountingBuilder()
    cache = DocumentCache(b"null", {"json": builder})
    assert cache.get("json") is None
    assert cache.get("json") is None
    assert builder.calls == 1


def test_distinct_representations_coexist() -> None:
    json_builder = CountingBuilder()
    decimal_calls = []

    def decimal_builder(raw: bytes):
        decimal_calls.append(raw)
        return parse_json_decimal(raw)

    cache = DocumentCache(b'{"price": 0.1}', {"json": json_builder, "decimal": decimal_builder})
    assert cache.get("json") == {"price": 0.1}
    assert cache.get("decimal") == {"price": Decimal("0.1")}
    cache.get("json")
    cache.get("decimal")
    assert json_builder.calls == 1
    assert len(decimal_calls) == 1


def test_unknown_representation() -> None:
    cache = DocumentCache(b"{}", DEFAULT_REGISTRY.representations)
    with pytest.raises(RepresentationError):
        cache.ensure("xml")


def test_text_documents_are_encoded() -> None:
    cache = DocumentCache('{"name": "é"}', DEFAULT_REGISTRY.representations)
    assert cache.raw == '{"name": "é"}'.encode("utf-8")
    assert cache.get("json") == {"name": "é"}


def test_deeply_nested_document_is_a_representation_error() -> None:
    depth = 100000
    cache = DocumentCache(b"[" * depth + b"]" * depth, DEFAULT_REGISTRY.representations)
    with pytest.raises(RepresentationError) as exc:
        cache.ensure("json")
    assert isinstance(exc.value.__cause__, RecursionError)
    assert not cache.is_built("json")
