"""rulechain: composable validation of arbitrary Python values.

    from rulechain import Key, Length, Map, Required, validate

    err = validate(
        {"Name": "name", "Value": "demo", "Extra": True},
        Map(Key("Name", Required), Key("Value", Required, Length(5, 10))),
    )
    str(err)  # 'Extra: key not expected; Value: the length must be between 5 and 10.'
"""
from rulechain.errors import (
    ErrorCode,
    ValidationError,
    ErrorObject,
    Errors,
    InternalError,
    NotAContainerError,
    DuplicateKeyError,
    ValidationCancelledError,
    RecursionLimitError,
    IndirectionCycleError,
    Result,
    Ok,
    Err,
)
from rulechain.validation import (
    Ref,
    ValidationContext,
    Rule,
    ContextRule,
    Skip,
    Required,
    NilOrNotEmpty,
    NotNil,
    Nil,
    Empty,
    By,
    WithContext,
    Length,
    In,
    NotIn,
    StringIn,
    StringNotIn,
    Each,
    When,
    Key,
    Map,
    indirect,
    is_empty,
    pydantic_materializer,
    default_materializer,
    validate,
    validate_with_context,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorCode",
    "ValidationError",
    "ErrorObject",
    "Errors",
    "InternalError",
    "NotAContainerError",
    "DuplicateKeyError",
    "ValidationCancelledError",
    "RecursionLimitError",
    "IndirectionCycleError",
    "Result",
    "Ok",
    "Err",
    "Ref",
    "ValidationContext",
    "Rule",
    "ContextRule",
    "Skip",
    "Required",
    "NilOrNotEmpty",
    "NotNil",
    "Nil",
    "Empty",
    "By",
    "WithContext",
    "Length",
    "In",
    "NotIn",
    "StringIn",
    "StringNotIn",
    "Each",
    "When",
    "Key",
    "Map",
    "indirect",
    "is_empty",
    "pydantic_materializer",
    "default_materializer",
    "validate",
    "validate_with_context",
]
