"""Validators - single pass/fail rules evaluated against one value.

Each validator is built with the messages for exactly the error codes it can
produce. Running it returns a ``ValidationResult``; a failed run carries a
``{code: message}`` map.

Usage:
    password = Element("pass", Mandatory("Choose a password"))
    confirm = Element(
        "pass_confirm",
        Equal("Passwords do not match", password),
        Custom("Too short", lambda v: v is not None and len(v) >= 8),
    )
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from formwork.lib.exceptions import InvalidPredicateError, UnknownErrorCodeError

if TYPE_CHECKING:
    from formwork.forms.fields import Element


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of running one validator against one value.

    Falsy when the validator failed, so ``if not validator.is_valid(v):``
    reads naturally.
    """

    passed: bool
    errors: Mapping[str, str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.passed


PASSED = ValidationResult(True)


class MandatoryError(StrEnum):
    NO_VALUE = "no_value_set"


class EqualError(StrEnum):
    NOT_EQUAL = "not_equal"


class CustomError(StrEnum):
    NOT_VALID = "not_valid"


class Validator(ABC):
    """Base class for validators.

    Subclasses set ``error_kind`` to the enum of codes they can produce and
    implement ``is_valid``. Messages are fixed at construction.
    """

    error_kind: ClassVar[type[StrEnum]]

    def __init__(self, messages: Mapping[str, str]):
        self._messages: dict[str, str] = dict(messages)

    @property
    def messages(self) -> Mapping[str, str]:
        return dict(self._messages)

    def error_message(self, code: str) -> str:
        """Look up the message for *code*.

        Raises:
            UnknownErrorCodeError: the validator was not given this code.
        """
        try:
            return self._messages[code]
        except KeyError:
            raise UnknownErrorCodeError(str(code), list(self._messages)) from None

    def fail(self, code: str) -> ValidationResult:
        """Build a failed result carrying the message for *code*."""
        return ValidationResult(False, {str(code): self.error_message(code)})

    @abstractmethod
    def is_valid(self, value: Any) -> ValidationResult:
        """Check *value*, returning the result with any error messages."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._messages!r})"


class Mandatory(Validator):
    """Value must be set: not ``None`` and not an empty string."""

    error_kind = MandatoryError

    def __init__(self, message: str = ""):
        super().__init__({MandatoryError.NO_VALUE: message})

    def is_valid(self, value: Any) -> ValidationResult:
        if value is None or (isinstance(value, str) and not value):
            return self.fail(MandatoryError.NO_VALUE)
        return PASSED


class Equal(Validator):
    """Value must loosely equal another element's value at validation time."""

    error_kind = EqualError

    def __init__(self, message: str, compare: Element):
        super().__init__({EqualError.NOT_EQUAL: message})
        self._compare = compare

    @property
    def compare(self) -> Element:
        return self._compare

    def is_valid(self, value: Any) -> ValidationResult:
        if not loose_equals(value, self._compare.value):
            return self.fail(EqualError.NOT_EQUAL)
        return PASSED

    def __repr__(self) -> str:
        return f"Equal({self._messages[EqualError.NOT_EQUAL]!r}, compare={self._compare.name!r})"


class Custom(Validator):
    """Value must satisfy a caller-supplied ``(value) -> bool`` predicate."""

    error_kind = CustomError

    def __init__(self, message: str, predicate: Callable[[Any], bool]):
        if not callable(predicate):
            raise InvalidPredicateError(
                f"Custom validator predicate must be callable, got {type(predicate).__name__}"
            )
        super().__init__({CustomError.NOT_VALID: message})
        self._predicate = predicate

    @property
    def predicate(self) -> Callable[[Any], bool]:
        return self._predicate

    def is_valid(self, value: Any) -> ValidationResult:
        if not self._predicate(value):
            return self.fail(CustomError.NOT_VALID)
        return PASSED


# -- Loose equality --

# Decimal literals only; "nan", "inf" and hex are compared as text
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


def _as_number(value: Any) -> int | float | Decimal | None:
    """Return *value* as a number if it is numeric, else None. Bools are not numeric.

    Numeric strings become ``Decimal`` so long digit strings keep every digit.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        return Decimal(value.strip())
    return None


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def loose_equals(a: Any, b: Any) -> bool:
    """Compare two submitted values the way a form user would expect.

    Rules, first match wins:
        1. ``None`` equals only ``None`` and ``""``.
        2. Two numeric values (numbers or numeric strings) compare by value,
           so ``"1" == 1`` and ``"01" == "1.0"``. Integers and numeric strings
           compare exactly, so ``"9007199254740993" != "9007199254740992"``;
           if either side is a float both sides are compared as floats.
        3. If either side is a bool, truthiness is compared, with ``""`` and
           ``"0"`` the only falsy strings: ``False == "0"``.
        4. Anything else compares as text: ``str(a) == str(b)``.
    """
    if a is None or b is None:
        other = b if a is None else a
        return other is None or other == ""

    num_a, num_b = _as_number(a), _as_number(b)
    if num_a is not None and num_b is not None:
        if isinstance(num_a, float) or isinstance(num_b, float):
            return float(num_a) == float(num_b)
        return num_a == num_b

    if isinstance(a, bool) or isinstance(b, bool):
        return _truthy(a) == _truthy(b)

    return str(a) == str(b)
