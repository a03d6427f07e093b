"""Core Form class: element aggregation, population and cached validation.

``is_valid()`` and ``get_errors()`` validate once and cache the outcome.
Changing element values afterwards (through ``populate`` or directly) does
NOT invalidate the cache; call ``revalidate()`` to get correct results for
the new data. This lets callers populate, correct a few values, then
validate once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from enum import Enum, StrEnum
from types import MappingProxyType
from typing import Any

from markupsafe import Markup, escape

from formwork.config import get_settings
from formwork.forms.fields import Element, _render_attrs
from formwork.lib.exceptions import ConfigurationError
from formwork.lib.hooks import FORM_ERRORS, FORM_VALIDATED, form_errors_hook, hooks

logger = logging.getLogger(__name__)


class Method(StrEnum):
    GET = "get"
    POST = "post"


class FormState(Enum):
    """Cached validity. Only validation moves a form out of UNKNOWN."""

    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"


class Form:
    """HTML form abstraction with chained element validation.

    Usage:
        form = Form("login", action="/login")
        form.add_element(Element("user", Mandatory("Enter your user name")))
        password = form.add_element(Element("pass", Mandatory("Enter a password")))
        form.add_element(Element("pass_confirm", Equal("Passwords differ", password)))

        form.populate(submitted)          # keys are element ids: "login-user", ...
        if not form.is_valid():
            errors = form.get_errors()    # {"pass_confirm": {"not_equal": "Passwords differ"}}
    """

    def __init__(self, name: str, *, action: str = "", method: str | None = None):
        self.name = name
        self.action = action
        self.method = method or get_settings().default_method

        self._elements: dict[str, Element] = {}
        self._state = FormState.UNKNOWN
        self._errors: dict[str, dict[str, str]] | None = None

    # -- Attributes --

    @property
    def method(self) -> Method:
        return self._method

    @method.setter
    def method(self, value: str) -> None:
        try:
            self._method = Method(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Form '{self.name}': unsupported method '{value}', expected 'get' or 'post'"
            ) from None

    @property
    def state(self) -> FormState:
        return self._state

    # -- Elements --

    def add_element(self, element: Element) -> Element:
        """Add *element*, assigning its id. Returns the element.

        An element with the same name replaces the earlier one.
        """
        if element.name in self._elements:
            logger.debug("Form %r: replacing element %r", self.name, element.name)
        element.assign_id(f"{self.name}-{element.name}")
        self._elements[element.name] = element
        return element

    @property
    def elements(self) -> Mapping[str, Element]:
        return MappingProxyType(self._elements)

    def get_element(self, name: str) -> Element | None:
        """Get an element or None if not existent."""
        return self._elements.get(name)

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, name: object) -> bool:
        return name in self._elements

    # -- Data --

    def populate(self, data: Mapping[str, Any], by_name: bool = False) -> None:
        """Set every element's value from *data*.

        Keys are element ids unless *by_name* is set. Elements whose key is
        missing are set to None. Cached validation results are left as they
        are; call ``revalidate()`` afterwards.
        """
        for element in self._elements.values():
            key = element.name if by_name else element.id
            element.value = data.get(key)

    def get_data(self) -> dict[str, Any]:
        """Snapshot of current values keyed by element id."""
        return {element.id: element.value for element in self._elements.values()}

    # -- Validation --

    def is_valid(self) -> bool:
        if self._state is FormState.UNKNOWN:
            self._validate()
        return self._state is FormState.VALID

    def get_errors(self) -> dict[str, dict[str, str]]:
        """Validation errors by element name. Only failing elements appear."""
        if self._errors is None:
            self._validate()
        return self._errors

    def revalidate(self) -> bool:
        """Re-run validation. Must be called after repopulating data."""
        return self._validate()

    def _validate(self) -> bool:
        errors: dict[str, dict[str, str]] = {}
        for name, element in self._elements.items():
            element_errors: dict[str, str] = {}
            if not element.is_valid(element_errors):
                errors[name] = element_errors

        errors = hooks.apply_filters(form_errors_hook(self.name), errors, self)
        errors = hooks.apply_filters(FORM_ERRORS, errors, self) or {}

        valid = not errors
        self._errors = errors
        self._state = FormState.VALID if valid else FormState.INVALID
        logger.debug("Form %r validated: valid=%s failing=%s", self.name, valid, sorted(errors))

        hooks.do_action(FORM_VALIDATED, self, valid)
        return valid

    # -- Rendering --

    def open(self, **attrs) -> Markup:
        """Render the opening ``<form>`` tag."""
        extra = _render_attrs(attrs)
        return Markup(
            f'<form id="{escape(self.name)}" action="{escape(self.action)}" '
            f'method="{self.method}"{extra}>'
        )

    def close(self) -> Markup:
        return Markup("</form>")

    def display(self, name: str) -> Markup:
        """Render a single element's widget."""
        element = self.get_element(name)
        if element is None:
            available = ", ".join(self._elements) or "(none)"
            raise LookupError(f"Form '{self.name}' has no element '{name}'. Elements: {available}")
        return element.render()

    def render(self) -> Markup:
        """Render the whole form: open tag, every element, close tag."""
        parts = [str(self.open())]
        parts.extend(str(element.render()) for element in self)
        parts.append(str(self.close()))
        return Markup("\n".join(parts))

    def __repr__(self) -> str:
        return f"Form({self.name!r}, elements={list(self._elements)!r}, state={self._state.value})"
