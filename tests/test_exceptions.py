"""Tests for the exception hierarchy."""

from schemabind.exceptions import (
    BindPathError,
    CapacityError,
    CastError,
    InvalidExpressionError,
    OutputValidationError,
    SchemaBindError,
    SchemaCompileError,
    UnsupportedFamilyError,
)


def test_compile_errors_share_a_base() -> None:
    assert issubclass(UnsupportedFamilyError, SchemaCompileError)
    assert issubclass(InvalidExpressionError, SchemaCompileError)
    assert issubclass(SchemaCompileError, SchemaBindError)


def test_path_error_carries_flag_and_cause() -> None:
    cause = CapacityError(2, 3)
    err = BindPathError("$.B", cause)

    assert err.path_annotated
    assert not cause.path_annotated
    assert err.cause is cause
    assert str(err) == "[$.B] capacity error: sequence has 2 slots, 3 required"


def test_cast_error_message() -> None:
    assert str(CastError("mapping", 1)) == "cast error: can not cast int to mapping"


def test_messages_include_paths() -> None:
    assert "at $.A" in str(UnsupportedFamilyError("foo", "$.A"))
    assert "'foo'" in str(UnsupportedFamilyError("foo"))
    assert str(OutputValidationError("bad", "$.A")) == "Output validation error at $.A: bad"
