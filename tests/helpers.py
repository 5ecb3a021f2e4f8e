"""Shared test helpers for the rank1typeable test suite."""

from __future__ import annotations

from rank1typeable.errors import UnifyError
from rank1typeable.parser import parse_type
from rank1typeable.unification import fun_result_ty, is_instance_of


def instance_ok(required: str, actual: str) -> None:
    """Assert that a term of type ``actual`` can be used as ``required``."""
    error = is_instance_of(parse_type(required), parse_type(actual))
    assert error is None, f"{actual} should be usable as {required}: {error}"


def instance_fails(required: str, actual: str) -> UnifyError:
    """Assert that ``actual`` is not an instance of ``required``; return the error."""
    error = is_instance_of(parse_type(required), parse_type(actual))
    assert error is not None, f"{actual} should not be usable as {required}"
    return error


def apply_ok(fun: str, arg: str) -> str:
    """Apply and return the rendered result type, asserting success."""
    result = fun_result_ty(parse_type(fun), parse_type(arg))
    assert not isinstance(result, UnifyError), f"Unexpected error: {result}"
    return str(result)


def apply_fails(fun: str, arg: str) -> UnifyError:
    """Apply and return the error, asserting failure."""
    result = fun_result_ty(parse_type(fun), parse_type(arg))
    assert isinstance(result, UnifyError), f"Expected an error, got {result}"
    return result
