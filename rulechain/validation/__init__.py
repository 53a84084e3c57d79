"""Validation Engine

Composable rule chains over arbitrary Python values.

Key components:
- introspect: string/length/numeric conversion, emptiness, indirection
- rules: Rule base classes and the Skip / Required / NotNil sentinels
- engine: validate() and validate_with_context()
- validators: Length, In, NotIn, StringIn, StringNotIn, Each, When
- map: Key() rule sets and the Map() keyed container rule
- context: ValidationContext (cancellation and deadlines)

Usage:
    from rulechain.validation import Key, Length, Map, Required, validate

    rule = Map(Key("Name", Required), Key("Value", Required, Length(5, 10)))
    if (err := validate(payload, rule)) is not None:
        print(err)
"""
from .introspect import (
    Materializer,
    Reference,
    Valuer,
    Ref,
    use_materializer,
    current_materializer,
    default_materializer,
    pydantic_materializer,
    indirect,
    is_nil,
    is_empty,
    as_string_or_bytes,
    ensure_string,
    length_of,
    to_int,
    to_uint,
    to_float,
)

from .context import ValidationContext

from .rules import (
    Rule,
    ContextRule,
    CustomizableRule,
    SkipRule,
    RequiredRule,
    NotNilRule,
    NilRule,
    EmptyRule,
    Skip,
    Required,
    NilOrNotEmpty,
    NotNil,
    Nil,
    Empty,
    By,
    WithContext,
)

from .engine import (
    Validatable,
    ValidatableWithContext,
    is_validatable,
    run_chain,
    validate_nested,
    check,
    validate,
    validate_with_context,
)

from .validators import (
    Length,
    In,
    NotIn,
    StringIn,
    StringNotIn,
    Each,
    When,
)

from .map import KeyRules, Key, MapRule, Map

__all__ = [
    # Introspection
    "Materializer",
    "Reference",
    "Valuer",
    "Ref",
    "use_materializer",
    "current_materializer",
    "default_materializer",
    "pydantic_materializer",
    "indirect",
    "is_nil",
    "is_empty",
    "as_string_or_bytes",
    "ensure_string",
    "length_of",
    "to_int",
    "to_uint",
    "to_float",
    # Context
    "ValidationContext",
    # Rules
    "Rule",
    "ContextRule",
    "CustomizableRule",
    "SkipRule",
    "RequiredRule",
    "NotNilRule",
    "NilRule",
    "EmptyRule",
    "Skip",
    "Required",
    "NilOrNotEmpty",
    "NotNil",
    "Nil",
    "Empty",
    "By",
    "WithContext",
    # Engine
    "Validatable",
    "ValidatableWithContext",
    "is_validatable",
    "run_chain",
    "validate_nested",
    "check",
    "validate",
    "validate_with_context",
    # Leaf and composite rules
    "Length",
    "In",
    "NotIn",
    "StringIn",
    "StringNotIn",
    "Each",
    "When",
    # Keyed containers
    "KeyRules",
    "Key",
    "MapRule",
    "Map",
]
