"""Form elements: a named value plus an ordered chain of validators."""

from __future__ import annotations

import logging
from typing import Any

from markupsafe import Markup, escape

from formwork.forms.validators import Validator
from formwork.lib.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Element:
    """A single named form field.

    The value is a plain attribute; setting it never triggers validation.
    ``id`` is assigned by the owning form as ``"<form name>-<element name>"``.

    Usage:
        user = form.add_element(Element("user", Mandatory("Required")))
        user.value = "bob"
        errors = {}
        user.is_valid(errors)
    """

    input_type = "text"

    def __init__(
        self,
        name: str,
        *validators: Validator,
        value: Any = None,
        attrs: dict | None = None,
    ):
        self.name = name
        self.value = value
        self.validators: list[Validator] = list(validators)
        self.attrs: dict = dict(attrs or {})
        self._id: str | None = None

    # -- Identity --

    @property
    def id(self) -> str | None:
        return self._id

    def assign_id(self, element_id: str) -> None:
        """Set the id once. Called by ``Form.add_element``."""
        if self._id is not None and self._id != element_id:
            raise ConfigurationError(
                f"Element '{self.name}' already has id '{self._id}', cannot reassign to '{element_id}'"
            )
        self._id = element_id

    # -- Value --

    def get_value(self) -> Any:
        return self.value

    def set_value(self, value: Any) -> Element:
        self.value = value
        return self

    # -- Validation --

    def add_validator(self, validator: Validator) -> Element:
        self.validators.append(validator)
        return self

    def is_valid(self, errors: dict[str, str] | None = None) -> bool:
        """Run every validator against the current value.

        All validators run even after one fails. Error maps of failing
        validators are merged into *errors*, later codes overwriting earlier
        ones on collision.
        """
        if errors is None:
            errors = {}

        valid = True
        for validator in self.validators:
            result = validator.is_valid(self.value)
            if not result.passed:
                errors.update(result.errors)
                valid = False

        if not valid:
            logger.debug("Element %r failed validation: %s", self.name, sorted(errors))
        return valid

    # -- Rendering --

    @property
    def field_name(self) -> str:
        """Name attribute used in markup; matches the key ``populate`` reads by default."""
        return self._id or self.name

    def render(self, **override_attrs) -> Markup:
        """Render the widget. Keyword arguments become HTML attributes."""
        attrs_str = _render_attrs({**self.attrs, **override_attrs})
        return Markup(
            f'<input type="{self.input_type}" id="{escape(self.field_name)}" '
            f'name="{escape(self.field_name)}" value="{escape(_display_value(self.value))}"{attrs_str}>'
        )

    def __str__(self) -> str:
        return str(self.render())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, value={self.value!r})"


class TextElement(Element):
    pass


class PasswordElement(Element):
    """Password input. The submitted value is never echoed back into markup."""

    input_type = "password"

    def render(self, **override_attrs) -> Markup:
        attrs_str = _render_attrs({**self.attrs, **override_attrs})
        return Markup(
            f'<input type="password" id="{escape(self.field_name)}" '
            f'name="{escape(self.field_name)}"{attrs_str}>'
        )


class HiddenElement(Element):
    input_type = "hidden"


class TextareaElement(Element):
    def render(self, **override_attrs) -> Markup:
        attrs_str = _render_attrs({**self.attrs, **override_attrs})
        return Markup(
            f'<textarea id="{escape(self.field_name)}" name="{escape(self.field_name)}"{attrs_str}>'
            f"{escape(_display_value(self.value))}</textarea>"
        )


ELEMENT_TYPES: dict[str, type[Element]] = {
    "text": TextElement,
    "password": PasswordElement,
    "hidden": HiddenElement,
    "textarea": TextareaElement,
}


# -- Utilities --


def _display_value(value: Any) -> str:
    return "" if value is None else str(value)


def _render_attrs(attrs: dict) -> str:
    """Render a dict as HTML attributes string. Returns '' or ' key="val" key2="val2"'."""
    if not attrs:
        return ""
    parts = []
    for k, v in attrs.items():
        # class_ -> class, data_id -> data-id
        attr_name = k.rstrip("_").replace("_", "-")
        parts.append(f'{attr_name}="{escape(str(v))}"')
    return " " + " ".join(parts)
