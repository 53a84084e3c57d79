"""Rules and self-validating values shared by the test modules."""
from dataclasses import dataclass
from typing import Any

from rulechain.errors import ErrorObject, InternalError, custom
from rulechain.validation import ContextRule, Key, Map, Rule, validate


class ValidateAbc(Rule):
    """Passes only "abc"."""

    def validate(self, value):
        return None if value == "abc" else ErrorObject("abc", "error abc")


class ValidateXyz(Rule):
    """Passes only "xyz"."""

    def validate(self, value):
        return None if value == "xyz" else ErrorObject("xyz", "error xyz")


class ValidateContextAbc(ContextRule):
    def validate_with_context(self, ctx, value):
        return None if value == "abc" else ErrorObject("abc", "error abc")


class ValidateContextXyz(ContextRule):
    def validate_with_context(self, ctx, value):
        return None if value == "xyz" else ErrorObject("xyz", "error xyz")


class DualPathRule(ContextRule):
    """Passes through validate() and fails through validate_with_context()."""

    def validate(self, value):
        return None

    def validate_with_context(self, ctx, value):
        return custom("context path used")


class ValidateInternalError(Rule):
    """Raises a fault for the value "internal"."""

    def validate(self, value):
        if value == "internal": raise InternalError("error internal")
        return None


@dataclass(frozen=True)
class String123:
    """Self-validating value that always fails."""
    text: str

    def validate(self):
        return ErrorObject("123", "error 123")


@dataclass(frozen=True)
class Model3:
    A: str = ""

    def validate(self):
        return validate({"A": self.A}, Map(Key("A", ValidateAbc())))


@dataclass(frozen=True)
class ContextModel:
    """Self-validating value reporting a message taken from the context."""

    def validate_with_context(self, ctx):
        return custom(ctx.value("msg", "no context"))


class NullableString:
    """Database-style adapter: value() yields the underlying string or None."""

    def __init__(self, text: str | None):
        self.text = text

    def value(self) -> Any:
        return self.text


class Box:
    """Mutable reference, used to build reference cycles."""

    def __init__(self, target: Any = None):
        self.target = target

    def deref(self) -> Any:
        return self.target
