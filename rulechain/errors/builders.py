"""Error Builders

Constructors for the built-in violations and faults. Every call returns a
fresh object, so callers may customise a copy without affecting other rules.
"""
from typing import Any

from .types import (
    DuplicateKeyError,
    ErrorCode,
    ErrorObject,
    IndirectionCycleError,
    InternalError,
    NotAContainerError,
    RecursionLimitError,
    ValidationCancelledError,
)


def _type_name(value: Any) -> str:
    return type(value).__name__


# =============================================================================
# Sentinel violations
# =============================================================================

def required() -> ErrorObject:
    return ErrorObject(ErrorCode.REQUIRED, "cannot be blank")


def nil_or_not_empty_required() -> ErrorObject:
    return ErrorObject(ErrorCode.NIL_OR_NOT_EMPTY_REQUIRED, "cannot be blank")


def not_nil_required() -> ErrorObject:
    return ErrorObject(ErrorCode.NOT_NIL_REQUIRED, "is required")


def must_be_nil() -> ErrorObject:
    return ErrorObject(ErrorCode.NIL, "must be blank")


def must_be_empty() -> ErrorObject:
    return ErrorObject(ErrorCode.EMPTY, "must be blank")


# =============================================================================
# Leaf rule violations
# =============================================================================

def length_error(min: int, max: int) -> ErrorObject:
    """Pick the length message matching the configured bounds.

    A bound of 0 means unbounded; Length(0, 0) requires an empty value.
    """
    if min == 0 and max > 0:
        err = ErrorObject(ErrorCode.LENGTH_TOO_LONG, "the length must be no more than {max}")
    elif min > 0 and max > 0:
        err = (ErrorObject(ErrorCode.LENGTH_INVALID, "the length must be exactly {min}") if min == max
            else ErrorObject(ErrorCode.LENGTH_OUT_OF_RANGE, "the length must be between {min} and {max}"))
    elif min > 0:
        err = ErrorObject(ErrorCode.LENGTH_TOO_SHORT, "the length must be no less than {min}")
    else:
        err = ErrorObject(ErrorCode.LENGTH_EMPTY_REQUIRED, "the value must be empty")
    return err.with_params({"min": min, "max": max})


def in_invalid() -> ErrorObject:
    return ErrorObject(ErrorCode.IN_INVALID, "must be a valid value")


def not_in_invalid() -> ErrorObject:
    return ErrorObject(ErrorCode.NOT_IN_INVALID, "must not be in list")


def not_iterable() -> ErrorObject:
    return ErrorObject(ErrorCode.NOT_ITERABLE, "must be an iterable (map, slice or array)")


def custom(message: str, **params: Any) -> ErrorObject:
    """Violation for ad-hoc rules built with By/WithContext."""
    return ErrorObject(ErrorCode.CUSTOM, message, params)


# =============================================================================
# Keyed container violations
# =============================================================================

def key_wrong_type() -> ErrorObject:
    return ErrorObject(ErrorCode.KEY_WRONG_TYPE, "key not the correct type")


def key_missing() -> ErrorObject:
    return ErrorObject(ErrorCode.KEY_MISSING, "required key is missing")


def key_unexpected() -> ErrorObject:
    return ErrorObject(ErrorCode.KEY_UNEXPECTED, "key not expected")


# =============================================================================
# Introspection mismatches
# =============================================================================

def not_string_or_bytes(value: Any) -> ErrorObject:
    return ErrorObject(ErrorCode.NOT_STRING_OR_BYTES, "must be either a string or bytes",
        {"type": _type_name(value)})


def no_length(value: Any) -> ErrorObject:
    return ErrorObject(ErrorCode.NO_LENGTH, "cannot get the length of {type}", {"type": _type_name(value)})


def not_convertible(value: Any, target: str) -> ErrorObject:
    return ErrorObject(ErrorCode.NOT_CONVERTIBLE, "cannot convert {type} to {target}",
        {"type": _type_name(value), "target": target})


# =============================================================================
# Faults
# =============================================================================

def internal_error(message: str, **context: Any) -> InternalError:
    return InternalError(message, context=context)


def not_a_container(value: Any) -> NotAContainerError:
    return NotAContainerError("only a map can be validated", context={"type": _type_name(value)})


def duplicate_key(key: Any) -> DuplicateKeyError:
    return DuplicateKeyError(f"duplicate key declaration: {key!r}", context={"key": key})


def cancelled(reason: str = "context canceled") -> ValidationCancelledError:
    return ValidationCancelledError(reason)


def recursion_limit(depth: int) -> RecursionLimitError:
    return RecursionLimitError(f"validation nested deeper than {depth} levels", context={"max_depth": depth})


def indirection_cycle(value: Any) -> IndirectionCycleError:
    return IndirectionCycleError(f"reference cycle while resolving {_type_name(value)}",
        context={"type": _type_name(value)})
