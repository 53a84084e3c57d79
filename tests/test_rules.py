"""Tests for sentinel rules and callable adapters."""

import pytest

from rulechain.errors import ErrorCode, ErrorObject, custom
from rulechain.validation import (
    By,
    Empty,
    Nil,
    NilOrNotEmpty,
    NotNil,
    Ref,
    Required,
    RequiredRule,
    Skip,
    SkipRule,
    ValidationContext,
    WithContext,
    validate,
    validate_with_context,
)


def _text(err):
    return "" if err is None else str(err)


class TestSkip:
    def test_skip_is_active(self):
        assert Skip.active
        assert Skip.validate("anything") is None

    @pytest.mark.parametrize("condition,active", [(True, True), (False, False), (1, True), ("", False)])
    def test_when(self, condition, active):
        assert Skip.when(condition) == SkipRule(active)

    def test_when_returns_new_rule(self):
        Skip.when(False)
        assert Skip.active


class TestRequired:
    @pytest.mark.parametrize("value,expected", [
        ("abc", ""),
        ("", "cannot be blank"),
        (None, "cannot be blank"),
        (0, "cannot be blank"),
        (1, ""),
        (False, "cannot be blank"),
        ([], "cannot be blank"),
        ([0], ""),
        ({}, "cannot be blank"),
        (Ref(None), "cannot be blank"),
        (Ref(Ref("")), "cannot be blank"),
        (Ref(Ref("x")), ""),
        (object(), ""),
    ])
    def test_required(self, value, expected):
        assert _text(Required.validate(value)) == expected

    def test_error_code(self):
        assert Required.validate("").code == ErrorCode.REQUIRED

    def test_when(self):
        assert Required.when(False).validate("") is None
        assert _text(Required.when(True).validate("")) == "cannot be blank"
        assert Required.condition

    def test_custom_message(self):
        rule = Required.error("must be set")
        assert isinstance(rule, RequiredRule)
        assert _text(rule.validate("")) == "must be set"
        assert rule.validate("").code == ErrorCode.REQUIRED
        assert _text(Required.validate("")) == "cannot be blank"

    def test_custom_error_object(self):
        err = ErrorObject("code", "abc")
        rule = Required.error_object(err)
        assert rule.err == err
        returned = rule.validate(None)
        assert returned == err and returned is not err

    def test_custom_message_survives_when(self):
        assert _text(Required.error("x").when(True).validate("")) == "x"


class TestNilOrNotEmpty:
    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (Ref(None), ""),
        ("", "cannot be blank"),
        (Ref(""), "cannot be blank"),
        ("abc", ""),
    ])
    def test_nil_or_not_empty(self, value, expected):
        assert _text(NilOrNotEmpty.validate(value)) == expected

    def test_error_code(self):
        assert NilOrNotEmpty.validate("").code == ErrorCode.NIL_OR_NOT_EMPTY_REQUIRED


class TestNotNil:
    @pytest.mark.parametrize("value,expected", [
        (None, "is required"),
        (Ref(None), "is required"),
        (Ref(Ref(None)), "is required"),
        ("", ""),
        (0, ""),
        (Ref(""), ""),
    ])
    def test_not_nil(self, value, expected):
        assert _text(NotNil.validate(value)) == expected

    def test_error_code(self):
        assert NotNil.validate(None).code == ErrorCode.NOT_NIL_REQUIRED


class TestNilAndEmpty:
    @pytest.mark.parametrize("value,expected", [(None, ""), (Ref(None), ""), ("", "must be blank"), ("a", "must be blank")])
    def test_nil(self, value, expected):
        assert _text(Nil.validate(value)) == expected

    @pytest.mark.parametrize("value,expected", [(None, ""), ("", ""), ([], ""), (0, ""), ("a", "must be blank"), ([1], "must be blank")])
    def test_empty(self, value, expected):
        assert _text(Empty.validate(value)) == expected


class TestAdapters:
    def test_by_returned_error(self):
        rule = By(lambda v: None if v > 0 else custom("must be positive"))
        assert rule.validate(1) is None
        assert _text(rule.validate(-1)) == "must be positive"

    def test_by_raised_validation_error(self):
        def positive(value):
            if value <= 0: raise custom("must be positive")
            return None

        assert _text(validate(-1, By(positive))) == "must be positive"

    def test_by_other_exceptions_propagate(self):
        with pytest.raises(ZeroDivisionError):
            validate(0, By(lambda v: 1 / v and None))

    def test_with_context(self):
        rule = WithContext(lambda ctx, v: custom("too small") if v < ctx.value("min", 0) else None)
        ctx = ValidationContext(values={"min": 3})
        assert _text(validate_with_context(ctx, 2, rule)) == "too small"
        assert validate_with_context(ctx, 3, rule) is None
        assert validate(2, rule) is None


class TestErrorOwnership:
    def test_mutating_a_returned_error_leaves_the_rule_intact(self):
        first = validate("", Required)
        first.message = "tampered"
        first.params["extra"] = 1
        second = validate("", Required)
        assert second is not first
        assert str(second) == "cannot be blank"
        assert second.params == {}
        assert str(Required.err) == "cannot be blank"

    @pytest.mark.parametrize("rule,value", [
        (Required, None),
        (NilOrNotEmpty, ""),
        (NotNil, None),
        (Nil, "x"),
        (Empty, "x"),
        (Required.error("must be set"), ""),
    ])
    def test_each_call_gets_its_own_error(self, rule, value):
        first, second = rule.validate(value), rule.validate(value)
        assert first == second
        assert first is not second
        assert first is not rule.err

    def test_raising_a_returned_error_does_not_leak_into_later_calls(self):
        with pytest.raises(ErrorObject) as raised:
            raise validate("", Required)
        raised.value.add_note("seen once")
        assert not hasattr(validate("", Required), "__notes__")
