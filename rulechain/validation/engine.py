"""Rule Chain Evaluator

Entry points for validating a value against an ordered chain of rules.

Evaluation of one chain:
1. Rules run left to right. An active Skip ends the chain and the value is
   valid; no later rule runs.
2. The first violation wins and is returned as is.
3. When every rule passed, a value that can validate itself is asked to
   (Validatable / ValidatableWithContext, references to one, and lists,
   tuples or mappings made of them).

Faults raised by a rule propagate unchanged. Nesting is bounded by
Settings.MAX_DEPTH so self-referencing structures fail with
RecursionLimitError instead of exhausting the interpreter stack.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from rulechain.config import get_settings
from rulechain.errors import Errors, ValidationError, internal_error, recursion_limit
from rulechain.logging import get_logger
from rulechain.validation.context import ValidationContext
from rulechain.validation.introspect import UNSET, Materializer, indirect, use_materializer
from rulechain.validation.rules import ContextRule, Rule, SkipRule

logger = get_logger(__name__)

_depth: ContextVar[int] = ContextVar("rulechain_depth", default=0)


@runtime_checkable
class Validatable(Protocol):
    """A value that validates itself."""

    def validate(self) -> ValidationError | None: ...


@runtime_checkable
class ValidatableWithContext(Protocol):
    """A value that validates itself against a context."""

    def validate_with_context(self, ctx: ValidationContext) -> ValidationError | None: ...


# Values exposing a validate attribute that is not a self-validation hook
_NOT_SELF_VALIDATING = (type, str, bytes, bytearray, Rule, BaseModel)


def is_validatable(value: Any) -> bool:
    if isinstance(value, _NOT_SELF_VALIDATING): return False
    return isinstance(value, (Validatable, ValidatableWithContext))


@contextmanager
def _nested() -> Iterator[int]:
    depth = _depth.get() + 1
    if depth > (limit := get_settings().MAX_DEPTH): raise recursion_limit(limit)
    token = _depth.set(depth)
    try:
        yield depth
    finally:
        _depth.reset(token)


def _checked(source: Any, result: Any) -> ValidationError | None:
    """Normalize what a rule returned. Anything but a violation or None is a fault."""
    if result is None: return None
    if isinstance(result, Errors): return result if result else None
    if isinstance(result, ValidationError): return result
    logger.warning("rule_misuse", rule=type(source).__name__, returned=type(result).__name__)
    raise internal_error(f"{type(source).__name__} returned {type(result).__name__}, "
        "expected a ValidationError or None", rule=type(source).__name__)


# ============================================================================
# Chain evaluation
# ============================================================================

def run_chain(ctx: ValidationContext | None, value: Any, rules: Sequence[Any]) -> tuple[ValidationError | None, bool]:
    """Evaluate rules in order. Returns (first violation, stopped by Skip)."""
    for rule in rules:
        if isinstance(rule, SkipRule):
            if rule.active: return None, True
            continue
        if ctx is not None and isinstance(rule, ContextRule): result = rule.validate_with_context(ctx, value)
        elif callable(getattr(rule, "validate", None)): result = rule.validate(value)
        else: raise internal_error(f"{type(rule).__name__} is not a rule", rule=type(rule).__name__)
        if (err := _checked(rule, result)) is not None: return err, False
    return None, False


def _self_validate(ctx: ValidationContext | None, value: Any) -> ValidationError | None:
    with _nested():
        if isinstance(value, ValidatableWithContext) and (ctx is not None or not isinstance(value, Validatable)):
            return _checked(value, value.validate_with_context(ctx or ValidationContext.background()))
        return _checked(value, value.validate())


def _elements(value: Any) -> Iterator[tuple[Any, Any]] | None:
    match value:
        case Mapping():
            return iter(value.items())
        case list() | tuple():
            return enumerate(value)
    return None


def validate_nested(ctx: ValidationContext | None, value: Any) -> ValidationError | None:
    """Let a value (or the elements of a container of such values) validate itself.

    A container qualifies only when every non-nil element is self-validating,
    so a list of plain data that happens to contain one such object is left
    to the rules.
    """
    value, nil = indirect(value)
    if nil: return None
    if is_validatable(value): return _self_validate(ctx, value)
    if (items := _elements(value)) is None: return None
    resolved = [(key, element) for key, (element, element_nil) in ((k, indirect(v)) for k, v in items) if not element_nil]
    if not resolved or not all(is_validatable(element) for _, element in resolved): return None
    errors = Errors()
    for key, element in resolved:
        if (err := _self_validate(ctx, element)) is not None: errors.add(key, err)
    return errors.filter()


def check(ctx: ValidationContext | None, value: Any, rules: Sequence[Any]) -> ValidationError | None:
    """Run a chain, then the value's own validation if the chain completed."""
    with _nested():
        err, skipped = run_chain(ctx, value, rules)
        if err is not None or skipped: return err
        return validate_nested(ctx, value)


# ============================================================================
# Entry points
# ============================================================================

def validate(value: Any, *rules: Any, materializer: Materializer | None = UNSET) -> ValidationError | None:
    """Validate a value against rules.

    Returns None when the value is valid, otherwise the first violation of the
    chain (an Errors mapping for keyed and nested containers). Faults raise.

    Args:
        value: Any value
        *rules: Rules applied in order
        materializer: Materializer used by indirect() for this call only.
            Defaults to the one currently in scope.

    Usage:
        err = validate({"name": ""}, Map(Key("name", Required)))
        str(err)  # 'name: cannot be blank.'
    """
    if materializer is UNSET: return check(None, value, rules)
    with use_materializer(materializer):
        return check(None, value, rules)


def validate_with_context(ctx: ValidationContext, value: Any, *rules: Any) -> ValidationError | None:
    """Like validate(), passing ctx to context-aware rules.

    The context's materializer, when set, applies for the duration of the call.
    """
    if ctx.materializer is None: return check(ctx, value, rules)
    with use_materializer(ctx.materializer):
        return check(ctx, value, rules)
