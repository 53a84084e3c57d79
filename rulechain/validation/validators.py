"""Leaf and Composite Rules

Leaf rules check one aspect of a value; composite rules run other rules.
Nil and empty values pass every leaf rule here: pair a leaf rule with
Required when presence matters.

    Key("code", Required, Length(3, 3), StringIn(False, "usd", "eur"))
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rulechain.errors import (
    ErrorObject,
    Err,
    Errors,
    Ok,
    ValidationError,
    in_invalid,
    length_error,
    not_in_invalid,
    not_iterable,
)
from rulechain.validation.context import ValidationContext
from rulechain.validation.engine import check, run_chain
from rulechain.validation.introspect import ensure_string, indirect, is_empty, length_of
from rulechain.validation.rules import ContextRule, CustomizableRule


# ============================================================================
# Length
# ============================================================================

@dataclass(frozen=True, slots=True)
class Length(CustomizableRule):
    """Length bounds, inclusive. A bound of 0 means unbounded.

    Length(0, 0) only accepts empty values. Values without a length are
    reported with the introspection violation instead of the length message.
    """
    min: int
    max: int
    err: ErrorObject | None = None

    def __post_init__(self):
        if self.err is None: object.__setattr__(self, "err", length_error(self.min, self.max))

    def validate(self, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil or is_empty(value): return None
        match length_of(value):
            case Err(error):
                return error
            case Ok(n) if self._out_of_bounds(n):
                return self.violation()
        return None

    def _out_of_bounds(self, n: int) -> bool:
        if self.min == 0 and self.max == 0: return n > 0
        return (self.min > 0 and n < self.min) or (self.max > 0 and n > self.max)


# ============================================================================
# Membership
# ============================================================================

@dataclass(frozen=True, slots=True, init=False)
class In(CustomizableRule):
    """Value must equal one of the elements."""
    elements: tuple[Any, ...]
    err: ErrorObject

    def __init__(self, *elements: Any):
        object.__setattr__(self, "elements", elements)
        object.__setattr__(self, "err", in_invalid())

    def validate(self, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil or is_empty(value) or value in self.elements: return None
        return self.violation()


@dataclass(frozen=True, slots=True, init=False)
class NotIn(CustomizableRule):
    """Value must not equal any of the elements."""
    elements: tuple[Any, ...]
    err: ErrorObject

    def __init__(self, *elements: Any):
        object.__setattr__(self, "elements", elements)
        object.__setattr__(self, "err", not_in_invalid())

    def validate(self, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil or is_empty(value) or value not in self.elements: return None
        return self.violation()


def _fold(text: str, case_sensitive: bool) -> str: return text if case_sensitive else text.casefold()


@dataclass(frozen=True, slots=True, init=False)
class StringIn(CustomizableRule):
    """String must be one of values, optionally ignoring case. "" passes."""
    case_sensitive: bool
    values: frozenset[str]
    err: ErrorObject

    def __init__(self, case_sensitive: bool, *values: str):
        object.__setattr__(self, "case_sensitive", case_sensitive)
        object.__setattr__(self, "values", frozenset(_fold(v, case_sensitive) for v in values))
        object.__setattr__(self, "err", in_invalid())

    def validate(self, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil: return None
        match ensure_string(value):
            case Err(error):
                return error
            case Ok(text) if text and _fold(text, self.case_sensitive) not in self.values:
                return self.violation()
        return None


@dataclass(frozen=True, slots=True, init=False)
class StringNotIn(CustomizableRule):
    """String must not be one of values, optionally ignoring case."""
    case_sensitive: bool
    values: frozenset[str]
    err: ErrorObject

    def __init__(self, case_sensitive: bool, *values: str):
        object.__setattr__(self, "case_sensitive", case_sensitive)
        object.__setattr__(self, "values", frozenset(_fold(v, case_sensitive) for v in values))
        object.__setattr__(self, "err", not_in_invalid())

    def validate(self, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil: return None
        match ensure_string(value):
            case Err(error):
                return error
            case Ok(text) if text and _fold(text, self.case_sensitive) in self.values:
                return self.violation()
        return None


# ============================================================================
# Composites
# ============================================================================

@dataclass(frozen=True, slots=True, init=False)
class Each(ContextRule, CustomizableRule):
    """Run rules against every element of a list, tuple or mapping.

    Violations are keyed by index, or by key for mappings:

        H: (0: error xyz; 1: error xyz.)
    """
    rules: tuple[Any, ...]
    err: ErrorObject

    def __init__(self, *rules: Any):
        object.__setattr__(self, "rules", rules)
        object.__setattr__(self, "err", not_iterable())

    def validate(self, value: Any) -> ValidationError | None: return self._validate(None, value)

    def validate_with_context(self, ctx: ValidationContext, value: Any) -> ValidationError | None:
        return self._validate(ctx, value)

    def _validate(self, ctx: ValidationContext | None, value: Any) -> ValidationError | None:
        value, nil = indirect(value)
        if nil: return None
        match value:
            case Mapping():
                items = value.items()
            case list() | tuple():
                items = enumerate(value)
            case _:
                return self.violation()
        errors = Errors()
        for key, element in items:
            if (err := check(ctx, element, self.rules)) is not None: errors.add(key, err)
        return errors.filter()


@dataclass(frozen=True, slots=True, init=False)
class When(ContextRule):
    """Run rules only when condition holds, else the otherwise() rules.

    Usage:
        When(country == "US", Required, Length(5, 5)).otherwise(Nil)
    """
    condition: bool
    rules: tuple[Any, ...]
    else_rules: tuple[Any, ...] = field(default=())

    def __init__(self, condition: bool, *rules: Any):
        object.__setattr__(self, "condition", bool(condition))
        object.__setattr__(self, "rules", rules)
        object.__setattr__(self, "else_rules", ())

    def otherwise(self, *rules: Any) -> When:
        clone = When(self.condition, *self.rules)
        object.__setattr__(clone, "else_rules", rules)
        return clone

    def validate(self, value: Any) -> ValidationError | None: return self._validate(None, value)

    def validate_with_context(self, ctx: ValidationContext, value: Any) -> ValidationError | None:
        return self._validate(ctx, value)

    def _validate(self, ctx: ValidationContext | None, value: Any) -> ValidationError | None:
        err, _ = run_chain(ctx, value, self.rules if self.condition else self.else_rules)
        return err
