"""Error Types

Typed error taxonomy shared by every rule and by the validation engine.

Two families of errors flow through a validation call:
- Violations (ValidationError): expected and data-driven. Rules return them,
  the engine aggregates them per key into a structured Errors mapping and
  hands the result back to the caller.
- Faults (InternalError): configuration or infrastructure problems such as a
  duplicate key declaration. Raised, never aggregated, and abort the call.

Fallible introspection returns Result[T, ErrorObject] instead of raising, so a
rule can surface a type mismatch as an ordinary violation.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, TypeVar, Union, final

T = TypeVar("T")
E = TypeVar("E")


class ErrorCode(str, Enum):
    """Error code taxonomy.

    validation_*: data-driven violations reported per key
    introspection_*: value shape mismatches, reported as violations
    internal_*: faults that abort the whole validation call
    """
    # Sentinels
    REQUIRED = "validation_required"
    NIL_OR_NOT_EMPTY_REQUIRED = "validation_nil_or_not_empty_required"
    NOT_NIL_REQUIRED = "validation_not_nil_required"
    NIL = "validation_nil"
    EMPTY = "validation_empty"

    # Leaf rules
    LENGTH_TOO_LONG = "validation_length_too_long"
    LENGTH_TOO_SHORT = "validation_length_too_short"
    LENGTH_INVALID = "validation_length_invalid"
    LENGTH_OUT_OF_RANGE = "validation_length_out_of_range"
    LENGTH_EMPTY_REQUIRED = "validation_length_empty_required"
    IN_INVALID = "validation_in_invalid"
    NOT_IN_INVALID = "validation_not_in_invalid"
    NOT_ITERABLE = "validation_not_iterable"
    CUSTOM = "validation_custom"

    # Keyed containers
    KEY_WRONG_TYPE = "validation_key_wrong_type"
    KEY_MISSING = "validation_key_missing"
    KEY_UNEXPECTED = "validation_key_unexpected"
    ERRORS = "validation_errors"

    # Introspection
    NOT_STRING_OR_BYTES = "introspection_not_string_or_bytes"
    NO_LENGTH = "introspection_no_length"
    NOT_CONVERTIBLE = "introspection_not_convertible"

    # Faults
    INTERNAL = "internal_error"
    NOT_A_CONTAINER = "internal_not_a_container"
    DUPLICATE_KEY = "internal_duplicate_key"
    CANCELLED = "internal_cancelled"
    RECURSION_LIMIT = "internal_recursion_limit"
    INDIRECTION_CYCLE = "internal_indirection_cycle"

    @property
    def category(self) -> str:
        """Error family: validation, introspection or internal."""
        return self.value.split("_", 1)[0]

    @property
    def is_fault(self) -> bool:
        return self.category == "internal"


def error_key_name(key: Any) -> str:
    """Stringified identity used for a key inside a structured error."""
    return key if isinstance(key, str) else str(key)


# ============================================================================
# Violations
# ============================================================================

class ValidationError(Exception):
    """Base class for data-driven violations returned by rules."""
    code: str
    message: str

    def to_dict(self) -> Any:
        return str(self)


class _TemplateParams(dict):
    """Leaves unknown placeholders untouched when rendering a message."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


@dataclass(eq=True)
class ErrorObject(ValidationError):
    """Leaf violation with a code, a message template and template params.

    The message may reference params with ``{name}`` placeholders:

        ErrorObject("validation_length_out_of_range",
                    "the length must be between {min} and {max}",
                    {"min": 5, "max": 10})
    """
    code: str
    message: str
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.render()

    def render(self) -> str:
        """Message with params substituted."""
        if not self.params: return self.message
        return self.message.format_map(_TemplateParams(self.params))

    def with_code(self, code: str) -> ErrorObject: return replace(self, code=code)

    def with_message(self, message: str) -> ErrorObject: return replace(self, message=message)

    def with_params(self, params: Mapping[str, Any]) -> ErrorObject: return replace(self, params=dict(params))

    def with_param(self, name: str, value: Any) -> ErrorObject:
        return replace(self, params={**self.params, name: value})

    def copy(self) -> ErrorObject:
        """Independent copy, params included. Rules hand these out per call."""
        return replace(self, params=dict(self.params))

    def to_dict(self) -> str:
        return self.render()


class Errors(ValidationError, MutableMapping[str, ValidationError]):
    """Structured error: ordered mapping of key name to violation.

    Entries keep insertion order (the declaration order of the rules that
    produced them). Rendering sorts entries by key name so the text is the same
    for every run, whatever the iteration order of the validated container:

        H: (0: error xyz; 1: error xyz.); I: (foo: error xyz.).
    """
    code = ErrorCode.ERRORS

    def __init__(self, entries: Mapping[Any, ValidationError | None] | None = None, **kwargs: ValidationError | None):
        Exception.__init__(self)
        self._entries: dict[str, ValidationError | None] = {}
        for key, error in {**(entries or {}), **kwargs}.items(): self[key] = error

    def __getitem__(self, key: Any) -> ValidationError | None: return self._entries[error_key_name(key)]

    def __setitem__(self, key: Any, error: ValidationError | None) -> None:
        self._entries[error_key_name(key)] = error

    def __delitem__(self, key: Any) -> None: del self._entries[error_key_name(key)]

    def __iter__(self) -> Iterator[str]: return iter(self._entries)

    def __len__(self) -> int: return len(self._entries)

    def __repr__(self) -> str: return f"Errors({self._entries!r})"

    def __str__(self) -> str:
        parts = []
        for key in sorted(self._entries):
            if (error := self._entries[key]) is None or (isinstance(error, Errors) and not error): continue
            parts.append(f"{key}: ({error})" if isinstance(error, Errors) else f"{key}: {error}")
        return "; ".join(parts) + "." if parts else ""

    @property
    def message(self) -> str: return str(self)

    def add(self, key: Any, error: ValidationError) -> None:
        """Record error under key's name.

        Distinct keys can share a name (1 and "1"). The later one is recorded
        under repr(key), or type(repr) when that is taken too, so neither
        violation is lost.
        """
        for name in (error_key_name(key), repr(key), f"{type(key).__name__}({key!r})"):
            if name not in self._entries: break
        self._entries[name] = error

    def filter(self) -> Errors | None:
        """Drop empty entries. Returns None when nothing is left."""
        for key in [k for k, v in self._entries.items() if v is None or (isinstance(v, Errors) and not v)]:
            del self._entries[key]
        return self if self._entries else None

    def to_dict(self) -> dict[str, Any]:
        """Nested plain dict of rendered messages, in insertion order."""
        return {key: error.to_dict() for key, error in self._entries.items() if error is not None}


# ============================================================================
# Faults
# ============================================================================

class InternalError(Exception):
    """Fault raised from inside a validation call.

    Faults are never merged into a structured error: they propagate out of
    validate() unchanged and carry their own message verbatim.
    """
    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "category": self.code.category, "context": self.context}


class NotAContainerError(InternalError):
    code = ErrorCode.NOT_A_CONTAINER


class DuplicateKeyError(InternalError):
    code = ErrorCode.DUPLICATE_KEY


class ValidationCancelledError(InternalError):
    code = ErrorCode.CANCELLED


class RecursionLimitError(InternalError):
    code = ErrorCode.RECURSION_LIMIT


class IndirectionCycleError(InternalError):
    code = ErrorCode.INDIRECTION_CYCLE


# ============================================================================
# Result
# ============================================================================

@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result. Consumed with match: case Ok(value)."""
    value: T


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result. Carries the error describing the mismatch."""
    error: E


Result = Union[Ok[T], Err[E]]
