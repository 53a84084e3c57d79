"""Value Introspection

Type-uniform operations every rule relies on, so a rule never has to care
whether it was handed a scalar, a container or a reference wrapper:
- String/bytes coercion, length, numeric conversion (Result-returning)
- Emptiness detection through any depth of references
- Indirection through references with an optional per-call materializer

Materializers replace a value with an alternate representation (a database
adapter, a pydantic model dumped to a dict, ...). There is no process-wide
hook: a materializer is passed to indirect() explicitly or scoped to one
validation call with use_materializer().
"""
from __future__ import annotations

import weakref
from collections.abc import Iterator, Sized
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from decimal import Decimal
from numbers import Integral, Real
from typing import Any, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, RootModel, SecretBytes, SecretStr

from rulechain.errors import (
    ErrorObject,
    Err,
    Ok,
    Result,
    indirection_cycle,
    no_length,
    not_convertible,
    not_string_or_bytes,
)

Materializer = Callable[[Any], tuple[Any, bool]]

UNSET: Any = object()


@runtime_checkable
class Reference(Protocol):
    """A value standing in for another one. deref() returns None when nil."""

    def deref(self) -> Any: ...


@runtime_checkable
class Valuer(Protocol):
    """A value that can produce an alternate representation of itself."""

    def value(self) -> Any: ...


@dataclass(frozen=True, slots=True)
class Ref:
    """Explicit reference wrapper. Ref() and Ref(None) are nil references."""
    target: Any = None

    def deref(self) -> Any: return self.target


# ============================================================================
# Materializers
# ============================================================================

_materializer: ContextVar[Materializer | None] = ContextVar("rulechain_materializer", default=None)


@contextmanager
def use_materializer(materializer: Materializer | None) -> Iterator[None]:
    """Make ``materializer`` the active one for the enclosed block."""
    token = _materializer.set(materializer)
    try:
        yield
    finally:
        _materializer.reset(token)


def current_materializer() -> Materializer | None:
    return _materializer.get()


def default_materializer(value: Any) -> tuple[Any, bool]:
    """Unwrap objects implementing Valuer.value()."""
    if not isinstance(value, type) and isinstance(value, Valuer) and callable(value.value):
        return value.value(), True
    return value, False


def pydantic_materializer(value: Any) -> tuple[Any, bool]:
    """Expose pydantic models to the engine as plain data.

    RootModel -> its root, BaseModel -> model_dump(), SecretStr/SecretBytes ->
    the secret value. Anything else falls back to default_materializer.
    """
    match value:
        case RootModel():
            return value.root, True
        case BaseModel():
            return value.model_dump(), True
        case SecretStr() | SecretBytes():
            return value.get_secret_value(), True
    return default_materializer(value)


# ============================================================================
# Indirection
# ============================================================================

def _deref(value: Any) -> tuple[Any, bool]:
    """One level of indirection. Returns (target, True) if value was a reference."""
    if isinstance(value, weakref.ref): return value(), True
    if not isinstance(value, type) and isinstance(value, Reference): return value.deref(), True
    return value, False


def indirect(value: Any, materializer: Materializer | None = UNSET) -> tuple[Any, bool]:
    """Follow references down to a concrete value.

    Returns (value, is_nil). A nil reference at any level returns (None, True)
    without unwrapping further. When a materializer transforms the concrete
    value, the replacement is indirected again. Without an explicit
    materializer the one scoped by use_materializer() applies.

    Raises:
        IndirectionCycleError: a reference chain leads back to itself
    """
    if materializer is UNSET: materializer = _materializer.get()
    seen: list[Any] = []
    while True:
        if value is None: return None, True
        target, is_reference = _deref(value)
        if not is_reference:
            if materializer is None: return value, False
            target, changed = materializer(value)
            if not changed or target is value: return value, False
        if any(value is s for s in seen): raise indirection_cycle(value)
        seen.append(value)
        value = target


def is_nil(value: Any) -> bool:
    return indirect(value)[1]


# ============================================================================
# Introspection
# ============================================================================

def is_empty(value: Any) -> bool:
    """True for None, nil references, False, numeric zero and zero-length values.

    References are followed to any depth, so is_empty(Ref(Ref(v))) == is_empty(v).
    Objects without a length or truth value of their own are never empty.
    """
    value, nil = indirect(value, materializer=None)
    if nil: return True
    if isinstance(value, Sized): return len(value) == 0
    return not value


def as_string_or_bytes(value: Any) -> Result[str | bytes, ErrorObject]:
    match value:
        case str() | bytes():
            return Ok(value)
        case bytearray():
            return Ok(bytes(value))
        case memoryview():
            return Ok(value.tobytes())
    return Err(not_string_or_bytes(value))


def ensure_string(value: Any) -> Result[str, ErrorObject]:
    """Like as_string_or_bytes, decoding bytes as UTF-8."""
    match as_string_or_bytes(value):
        case Ok(str() as text):
            return Ok(text)
        case Ok(data):
            try: return Ok(data.decode("utf-8"))
            except UnicodeDecodeError: return Err(not_convertible(value, "str"))
        case err:
            return err


def length_of(value: Any) -> Result[int, ErrorObject]:
    if isinstance(value, Sized): return Ok(len(value))
    return Err(no_length(value))


def to_int(value: Any) -> Result[int, ErrorObject]:
    if isinstance(value, Integral) and not isinstance(value, bool): return Ok(int(value))
    return Err(not_convertible(value, "int"))


def to_uint(value: Any) -> Result[int, ErrorObject]:
    if isinstance(value, Integral) and not isinstance(value, bool) and value >= 0: return Ok(int(value))
    return Err(not_convertible(value, "uint"))


def to_float(value: Any) -> Result[float, ErrorObject]:
    if isinstance(value, Decimal) or (isinstance(value, Real) and not isinstance(value, Integral)):
        return Ok(float(value))
    return Err(not_convertible(value, "float"))
