"""Rules and Sentinels

A rule is an immutable unit of validation: validate(value) returns None when
the value is acceptable and a ValidationError describing the violation
otherwise. Faults are raised, never returned.

Rule families:
- Rule: plain rules, invoked without a context
- ContextRule: rules that consult a ValidationContext when one is supplied
- CustomizableRule: rules whose violation can be replaced per instance
- Sentinels: Skip, Required, NilOrNotEmpty, NotNil, Nil, Empty
- Adapters: By (plain callable), WithContext (context-aware callable)

Sentinels are shared module-level instances:

    Key("name", Skip.when(is_draft), Required, Length(1, 64))
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Self

from rulechain.errors import (
    ErrorObject,
    ValidationError,
    must_be_empty,
    must_be_nil,
    nil_or_not_empty_required,
    not_nil_required,
    required,
)
from rulechain.validation.context import ValidationContext
from rulechain.validation.introspect import indirect, is_empty


def _evolve(rule: Any, **changes: Any) -> Any:
    """Copy of a frozen rule with some fields replaced.

    Rules with a variadic __init__ cannot go through dataclasses.replace, so the
    copy is assembled field by field.
    """
    clone = object.__new__(type(rule))
    for f in fields(rule): object.__setattr__(clone, f.name, changes.get(f.name, getattr(rule, f.name)))
    return clone


class Rule(ABC):
    """Base class for every rule."""

    @abstractmethod
    def validate(self, value: Any) -> ValidationError | None:
        """Return None if value passes, otherwise the violation."""


class ContextRule(Rule):
    """Rule that can consult a ValidationContext.

    validate() runs the rule against a background context, so context-aware
    rules still work in chains evaluated without one. Composite rules override
    it to keep nested rules on the plain path.
    """

    @abstractmethod
    def validate_with_context(self, ctx: ValidationContext, value: Any) -> ValidationError | None:
        """Return None if value passes, otherwise the violation."""

    def validate(self, value: Any) -> ValidationError | None:
        return self.validate_with_context(ValidationContext.background(), value)


class CustomizableRule(Rule):
    """Rule carrying its violation in an ``err`` field."""
    err: ErrorObject

    def error(self, message: str) -> Self:
        """New rule reporting ``message`` instead of the default text."""
        return _evolve(self, err=self.err.with_message(message))

    def error_object(self, err: ErrorObject) -> Self:
        """New rule reporting ``err`` as its violation."""
        return _evolve(self, err=err)

    def violation(self) -> ErrorObject:
        """Fresh copy of ``err``; the caller owns what a rule returns."""
        return self.err.copy()


# ============================================================================
# Sentinels
# ============================================================================

@dataclass(frozen=True, slots=True)
class SkipRule(Rule):
    """Ends the chain it appears in; the value counts as valid.

    An inactive Skip (Skip.when(False)) is a no-op.
    """
    active: bool = True

    def when(self, condition: bool) -> SkipRule: return SkipRule(bool(condition))

    def validate(self, value: Any) -> ValidationError | None: return None


@dataclass(frozen=True, slots=True)
class RequiredRule(CustomizableRule):
    """Fails when the value is empty after following references.

    With skip_nil a nil value passes and only present-but-empty values fail.
    """
    skip_nil: bool = False
    condition: bool = True
    err: ErrorObject = field(default_factory=required)

    def when(self, condition: bool) -> RequiredRule:
        """Variant that only applies while ``condition`` is true."""
        return _evolve(self, condition=bool(condition))

    def validate(self, value: Any) -> ValidationError | None:
        if not self.condition: return None
        value, nil = indirect(value)
        if nil: return None if self.skip_nil else self.violation()
        return self.violation() if is_empty(value) else None


@dataclass(frozen=True, slots=True)
class NotNilRule(CustomizableRule):
    """Fails only on nil. An empty but present value passes."""
    err: ErrorObject = field(default_factory=not_nil_required)

    def validate(self, value: Any) -> ValidationError | None:
        _, nil = indirect(value)
        return self.violation() if nil else None


@dataclass(frozen=True, slots=True)
class NilRule(CustomizableRule):
    """Fails unless the value is nil."""
    err: ErrorObject = field(default_factory=must_be_nil)

    def validate(self, value: Any) -> ValidationError | None:
        _, nil = indirect(value)
        return None if nil else self.violation()


@dataclass(frozen=True, slots=True)
class EmptyRule(CustomizableRule):
    """Fails when the value is present and not empty."""
    err: ErrorObject = field(default_factory=must_be_empty)

    def validate(self, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil or is_empty(value): return None
        return self.violation()


Skip = SkipRule()
Required = RequiredRule()
NilOrNotEmpty = RequiredRule(skip_nil=True, err=nil_or_not_empty_required())
NotNil = NotNilRule()
Nil = NilRule()
Empty = EmptyRule()


# ============================================================================
# Callable adapters
# ============================================================================

@dataclass(frozen=True, slots=True)
class By(Rule):
    """Rule from a callable returning a ValidationError or None.

    A ValidationError raised by the callable is reported like a returned one.

    Usage:
        def even(value):
            return None if value % 2 == 0 else custom("must be even")

        validate(3, By(even))
    """
    fn: Callable[[Any], ValidationError | None]

    def validate(self, value: Any) -> ValidationError | None:
        try: return self.fn(value)
        except ValidationError as e: return e


@dataclass(frozen=True, slots=True)
class WithContext(ContextRule):
    """Rule from a callable taking (ctx, value)."""
    fn: Callable[[ValidationContext, Any], ValidationError | None]

    def validate_with_context(self, ctx: ValidationContext, value: Any) -> ValidationError | None:
        try: return self.fn(ctx, value)
        except ValidationError as e: return e
