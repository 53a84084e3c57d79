"""Map Validation

Validates keyed containers against per-key rule sets:
- Required keys (missing -> "required key is missing"), optional keys
- Rules for every key (keys()) and for every value (values())
- Extra keys rejected unless allow_extra_keys() is called
- Duplicate key declarations rejected before any data is inspected

Usage:
    rule = Map(
        Key("Name", Required),
        Key("Value", Required, Length(5, 10)),
        Key("Note").optional(),
    )
    err = validate({"Name": "name", "Value": "demo", "Extra": True}, rule)
    str(err)  # 'Extra: key not expected; Value: the length must be between 5 and 10.'
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from rulechain.errors import (
    Errors,
    ValidationError,
    duplicate_key,
    internal_error,
    key_missing,
    key_unexpected,
    key_wrong_type,
    not_a_container,
)
from rulechain.logging import get_logger
from rulechain.validation.context import ValidationContext
from rulechain.validation.engine import check, run_chain
from rulechain.validation.introspect import indirect
from rulechain.validation.rules import ContextRule

logger = get_logger(__name__)

_EMPTY: Mapping[Any, Any] = {}


@dataclass(frozen=True, slots=True)
class KeyRules:
    """Rules bound to one key of a container."""
    key: Any
    rules: tuple[Any, ...] = ()
    is_optional: bool = False

    def optional(self) -> KeyRules:
        """Copy whose key may be absent from the container."""
        return replace(self, is_optional=True)


def Key(key: Any, *rules: Any) -> KeyRules:
    """Bind rules to a key. The key is required unless .optional() is called."""
    return KeyRules(key, rules)


def _same_key(a: Any, b: Any) -> bool: return a is b or a == b


@dataclass(frozen=True, slots=True)
class MapRule(ContextRule):
    """Keyed container rule. Build with Map(); every builder returns a new rule."""
    key_rules: tuple[KeyRules, ...] = ()
    key_chain: tuple[Any, ...] = ()
    value_chain: tuple[Any, ...] = ()
    extra_keys_allowed: bool = False

    def keys(self, *items: Any) -> MapRule:
        """Add key rule sets, or rules every container key must satisfy.

        KeyRules items extend the declared keys; any other item is a rule run
        against each key itself.
        """
        declared = tuple(item for item in items if isinstance(item, KeyRules))
        chain = tuple(item for item in items if not isinstance(item, KeyRules))
        return replace(self, key_rules=self.key_rules + declared, key_chain=self.key_chain + chain)

    def values(self, *rules: Any) -> MapRule:
        """Add rules run against every value, after the key's own rules."""
        return replace(self, value_chain=self.value_chain + rules)

    def allow_extra_keys(self) -> MapRule: return replace(self, extra_keys_allowed=True)

    def validate(self, value: Any) -> ValidationError | None: return self._validate(None, value)

    def validate_with_context(self, ctx: ValidationContext, value: Any) -> ValidationError | None:
        return self._validate(ctx, value)

    def _validate(self, ctx: ValidationContext | None, value: Any) -> ValidationError | None:
        self._check_declarations()
        container = self._container(value)
        errors = Errors()
        matched: set[Any] = set()

        for key_rules in self.key_rules:
            if ctx is not None: ctx.raise_if_done()
            key = key_rules.key
            try:
                present = key in container
            except TypeError:
                errors.add(key, key_wrong_type())
                continue
            if not present:
                if not key_rules.is_optional: errors.add(key, key_missing())
                continue
            matched.add(key)
            err, _ = run_chain(ctx, key, self.key_chain)
            if err is None: err = check(ctx, container[key], (*key_rules.rules, *self.value_chain))
            if err is not None: errors.add(key, err)

        for key in container:
            if key in matched: continue
            if ctx is not None: ctx.raise_if_done()
            if not self.extra_keys_allowed:
                errors.add(key, key_unexpected())
                continue
            err, _ = run_chain(ctx, key, self.key_chain)
            if err is None: err, _ = run_chain(ctx, container[key], self.value_chain)
            if err is not None: errors.add(key, err)

        if errors:
            logger.debug("map_validation_failed", violations=len(errors), declared_keys=len(self.key_rules))
        return errors.filter()

    def _check_declarations(self) -> None:
        """Raise DuplicateKeyError when two key rule sets share a key."""
        seen: list[Any] = []
        for key_rules in self.key_rules:
            if any(_same_key(key_rules.key, s) for s in seen):
                logger.warning("duplicate_key_declaration", key=repr(key_rules.key))
                raise duplicate_key(key_rules.key)
            seen.append(key_rules.key)

    @staticmethod
    def _container(value: Any) -> Mapping[Any, Any]:
        """Resolve value to a mapping. Nil is an empty container."""
        value, nil = indirect(value)
        if nil: return _EMPTY
        if not isinstance(value, Mapping):
            logger.warning("not_a_container", type=type(value).__name__)
            raise not_a_container(value)
        return value


def Map(*key_rules: KeyRules) -> MapRule:
    """Rule validating a keyed container against key rule sets."""
    for item in key_rules:
        if not isinstance(item, KeyRules): raise internal_error(f"Map() takes Key() rule sets, got {type(item).__name__}")
    return MapRule(key_rules=tuple(key_rules))
