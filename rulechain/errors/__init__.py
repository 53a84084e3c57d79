"""Error Handling

Violations are returned, faults are raised.

Key components:
- ErrorCode: validation / introspection / internal taxonomy
- ErrorObject, Errors: leaf and structured violations
- InternalError and subclasses: faults that abort a validation call
- Result[T, E] (Ok / Err): fallible introspection results
- Builder functions for every built-in violation and fault

Usage:
    from rulechain.errors import Errors, ErrorObject

    errs = Errors({"A": ErrorObject("code", "error abc")})
    str(errs)  # 'A: error abc.'
"""
from .types import (
    # Core types
    ErrorCode,
    ValidationError,
    ErrorObject,
    Errors,
    error_key_name,
    # Faults
    InternalError,
    NotAContainerError,
    DuplicateKeyError,
    ValidationCancelledError,
    RecursionLimitError,
    IndirectionCycleError,
    # Result
    Result,
    Ok,
    Err,
)

from .builders import (
    # Sentinels
    required,
    nil_or_not_empty_required,
    not_nil_required,
    must_be_nil,
    must_be_empty,
    # Leaf rules
    length_error,
    in_invalid,
    not_in_invalid,
    not_iterable,
    custom,
    # Keyed containers
    key_wrong_type,
    key_missing,
    key_unexpected,
    # Introspection
    not_string_or_bytes,
    no_length,
    not_convertible,
    # Faults
    internal_error,
    not_a_container,
    duplicate_key,
    cancelled,
    recursion_limit,
    indirection_cycle,
)

__all__ = [
    # Core types
    "ErrorCode",
    "ValidationError",
    "ErrorObject",
    "Errors",
    "error_key_name",
    # Faults
    "InternalError",
    "NotAContainerError",
    "DuplicateKeyError",
    "ValidationCancelledError",
    "RecursionLimitError",
    "IndirectionCycleError",
    # Result
    "Result",
    "Ok",
    "Err",
    # Builders
    "required",
    "nil_or_not_empty_required",
    "not_nil_required",
    "must_be_nil",
    "must_be_empty",
    "length_error",
    "in_invalid",
    "not_in_invalid",
    "not_iterable",
    "custom",
    "key_wrong_type",
    "key_missing",
    "key_unexpected",
    "not_string_or_bytes",
    "no_length",
    "not_convertible",
    "internal_error",
    "not_a_container",
    "duplicate_key",
    "cancelled",
    "recursion_limit",
    "indirection_cycle",
]
