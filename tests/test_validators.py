"""Tests for validators from formwork/forms/validators.py."""

import pytest

from formwork.forms.fields import Element
from formwork.forms.validators import (
    Custom,
    CustomError,
    Equal,
    EqualError,
    Mandatory,
    MandatoryError,
    ValidationResult,
    loose_equals,
)
from formwork.lib.exceptions import (
    ConfigurationError,
    InvalidPredicateError,
    UnknownErrorCodeError,
)


# ---------------------------------------------------------------------------
# ValidationResult
# ---------------------------------------------------------------------------


class TestValidationResult:
    def test_truthy_when_passed(self):
        assert ValidationResult(True)

    def test_falsy_when_failed(self):
        assert not ValidationResult(False, {"x": "y"})

    def test_default_errors_empty(self):
        assert ValidationResult(True).errors == {}


# ---------------------------------------------------------------------------
# Error codes and message lookup
# ---------------------------------------------------------------------------


class TestErrorCodes:
    def test_codes_are_stable_strings(self):
        assert MandatoryError.NO_VALUE == "no_value_set"
        assert EqualError.NOT_EQUAL == "not_equal"
        assert CustomError.NOT_VALID == "not_valid"

    def test_error_message_lookup(self):
        validator = Mandatory("Required")
        assert validator.error_message(MandatoryError.NO_VALUE) == "Required"
        assert validator.error_message("no_value_set") == "Required"

    def test_unknown_code_fails_fast(self):
        validator = Mandatory("Required")
        with pytest.raises(UnknownErrorCodeError) as exc_info:
            validator.error_message("not_equal")
        assert exc_info.value.code == "not_equal"
        assert "no_value_set" in str(exc_info.value)

    def test_unknown_code_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            Mandatory().error_message("typo")

    def test_failed_result_keys_are_plain_strings(self):
        result = Mandatory("Required").is_valid(None)
        (code,) = result.errors
        assert type(code) is str

    def test_messages_are_copied(self):
        validator = Mandatory("Required")
        validator.messages["no_value_set"] = "changed"
        assert validator.error_message("no_value_set") == "Required"


# ---------------------------------------------------------------------------
# Mandatory
# ---------------------------------------------------------------------------


class TestMandatory:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_values_fail(self, value):
        result = Mandatory("Required").is_valid(value)
        assert result.passed is False
        assert result.errors == {"no_value_set": "Required"}

    @pytest.mark.parametrize("value", ["0", 0, False, " ", "bob", 0.0, []])
    def test_present_values_pass(self, value):
        result = Mandatory("Required").is_valid(value)
        assert result.passed is True
        assert result.errors == {}

    def test_default_message_is_empty(self):
        assert Mandatory().is_valid(None).errors == {"no_value_set": ""}


# ---------------------------------------------------------------------------
# Equal
# ---------------------------------------------------------------------------


class TestEqual:
    def test_passes_when_equal(self):
        other = Element("pass", value="x")
        assert Equal("Differs", other).is_valid("x").passed is True

    def test_fails_when_different(self):
        other = Element("pass", value="x")
        result = Equal("Differs", other).is_valid("y")
        assert result.passed is False
        assert result.errors == {"not_equal": "Differs"}

    def test_reads_value_at_validation_time(self):
        other = Element("pass", value="before")
        validator = Equal("Differs", other)
        other.value = "after"
        assert validator.is_valid("after").passed is True
        assert validator.is_valid("before").passed is False

    def test_compares_unvalidated_raw_input(self):
        other = Element("pass", Mandatory("Required"), value="")
        assert Equal("Differs", other).is_valid("").passed is True

    def test_numeric_string_equals_number(self):
        other = Element("age", value=42)
        assert Equal("Differs", other).is_valid("42").passed is True

    def test_compare_property(self):
        other = Element("pass")
        assert Equal("Differs", other).compare is other


# ---------------------------------------------------------------------------
# Custom
# ---------------------------------------------------------------------------


class TestCustom:
    def test_passes_when_predicate_truthy(self):
        assert Custom("Bad", lambda v: v == "ok").is_valid("ok").passed is True

    def test_fails_when_predicate_falsy(self):
        result = Custom("Bad", lambda v: v == "ok").is_valid("nope")
        assert result.passed is False
        assert result.errors == {"not_valid": "Bad"}

    def test_falsy_non_bool_result_fails(self):
        assert Custom("Bad", lambda v: 0).is_valid("x").passed is False
        assert Custom("Bad", lambda v: "").is_valid("x").passed is False

    @pytest.mark.parametrize("predicate", [None, "strlen", 42, ["a"]])
    def test_non_callable_fails_at_construction(self, predicate):
        with pytest.raises(InvalidPredicateError):
            Custom("Bad", predicate)

    def test_invalid_predicate_is_configuration_and_type_error(self):
        with pytest.raises(ConfigurationError):
            Custom("Bad", None)
        with pytest.raises(TypeError):
            Custom("Bad", None)

    def test_predicate_not_called_at_construction(self):
        calls = []
        Custom("Bad", calls.append)
        assert calls == []

    def test_predicate_exceptions_propagate(self):
        def explode(value):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            Custom("Bad", explode).is_valid("x")

    def test_builtin_callables_accepted(self):
        assert Custom("Bad", str.isdigit).is_valid("123").passed is True


# ---------------------------------------------------------------------------
# loose_equals
# ---------------------------------------------------------------------------


class TestLooseEquals:
    @pytest.mark.parametrize(
        "a, b",
        [
            (None, None),
            (None, ""),
            ("", None),
            ("1", 1),
            (1, "1"),
            ("01", "1.0"),
            (" 2.50", 2.5),
            ("1e3", 1000),
            ("-0", 0),
            (True, "yes"),
            (False, ""),
            (False, 0),
            (False, "0"),
            ("0.1", 0.1),
            ("12345678901234567890", 12345678901234567890),
            (True, 1),
            ("abc", "abc"),
        ],
    )
    def test_equal(self, a, b):
        assert loose_equals(a, b) is True

    @pytest.mark.parametrize(
        "a, b",
        [
            (None, 0),
            (None, False),
            (None, "0"),
            ("abc", 0),
            ("1", "2"),
            ("abc", "ABC"),
            (True, ""),
            ("inf", "infinity"),
            ("0x1A", 26),
            (True, "0"),
            ("9007199254740993", "9007199254740992"),
            (10**17, 10**17 + 1),
            ("100000000000000001", 10**17),
        ],
    )
    def test_not_equal(self, a, b):
        assert loose_equals(a, b) is False
