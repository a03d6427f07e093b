"""Declarative form definitions with a named registry.

A definition describes a form once; ``build_form`` turns it into a fresh
``Form`` each time it is needed, so cached validation state is never shared
between submissions.

Usage (forms.yaml):
    forms:
      login:
        action: /login
        elements:
          - name: user
            validators:
              - kind: mandatory
                message: Enter your user name
          - name: pass
            type: password
            validators:
              - kind: mandatory
                message: Enter a password
          - name: pass_confirm
            type: password
            validators:
              - kind: equal
                element: pass
                message: Passwords do not match

    load_form_definitions(Path("forms.yaml"))
    form = create_form("login")
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from formwork.config import load_yaml_file
from formwork.forms.core import Form, Method
from formwork.forms.fields import ELEMENT_TYPES, Element
from formwork.forms.validators import Custom, Equal, Mandatory, Validator
from formwork.lib.exceptions import ConfigurationError, InvalidPredicateError

logger = logging.getLogger(__name__)

_definition_registry: dict[str, FormDefinition] = {}


class ValidatorDefinition(BaseModel):
    kind: Literal["mandatory", "equal", "custom"]
    message: str = ""
    # Name of the element to compare against (equal)
    element: str | None = None
    # "module:attribute" import path or a key into the predicates mapping (custom)
    predicate: str | None = None

    @model_validator(mode="after")
    def check_kind_options(self) -> ValidatorDefinition:
        if self.kind == "equal" and not self.element:
            raise ValueError("equal validator requires 'element'")
        if self.kind == "custom" and not self.predicate:
            raise ValueError("custom validator requires 'predicate'")
        return self


class ElementDefinition(BaseModel):
    name: str
    type: Literal["text", "password", "hidden", "textarea"] = "text"
    validators: list[ValidatorDefinition] = []
    attrs: dict[str, str] = {}


class FormDefinition(BaseModel):
    name: str
    action: str = ""
    method: Method | None = None
    elements: list[ElementDefinition] = Field(default_factory=list)

    @field_validator("method", mode="before")
    @classmethod
    def lower_method(cls, value):
        return value.lower() if isinstance(value, str) else value


def build_form(
    definition: FormDefinition,
    predicates: Mapping[str, Callable[[Any], bool]] | None = None,
) -> Form:
    """Build a new Form from *definition*.

    ``equal`` validators may reference any element of the same form,
    including ones defined later.

    Raises:
        ConfigurationError: an ``equal`` reference or predicate cannot be resolved.
    """
    form = Form(definition.name, action=definition.action, method=definition.method)

    for element_def in definition.elements:
        element_cls = ELEMENT_TYPES[element_def.type]
        form.add_element(element_cls(element_def.name, attrs=element_def.attrs))

    for element_def in definition.elements:
        element = form.get_element(element_def.name)
        for validator_def in element_def.validators:
            element.add_validator(_build_validator(form, element_def.name, validator_def, predicates or {}))

    logger.debug("Built form %r with %d elements", form.name, len(form))
    return form


def _build_validator(
    form: Form,
    element_name: str,
    definition: ValidatorDefinition,
    predicates: Mapping[str, Callable[[Any], bool]],
) -> Validator:
    if definition.kind == "mandatory":
        return Mandatory(definition.message)

    if definition.kind == "equal":
        compare: Element | None = form.get_element(definition.element)
        if compare is None:
            raise ConfigurationError(
                f"Form '{form.name}': element '{element_name}' compares against "
                f"unknown element '{definition.element}'"
            )
        return Equal(definition.message, compare)

    return Custom(definition.message, _resolve_predicate(definition.predicate, predicates))


def _resolve_predicate(
    spec: str,
    predicates: Mapping[str, Callable[[Any], bool]],
) -> Callable[[Any], bool]:
    """Resolve a predicate by registered name or "module:attribute" import path."""
    if spec in predicates:
        return predicates[spec]

    if ":" not in spec:
        raise ConfigurationError(
            f"Unknown predicate '{spec}': not provided and not in format 'module:attribute'"
        )

    parts = spec.split(":")
    if len(parts) != 2:
        raise ConfigurationError(f"Invalid predicate spec '{spec}': must contain exactly one colon")

    module_path, attr_name = parts
    try:
        module = importlib.import_module(module_path)
        predicate = getattr(module, attr_name)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load predicate '{spec}': {e}") from e

    if not callable(predicate):
        raise InvalidPredicateError(f"Predicate '{spec}' is not callable")

    return predicate


# -- Registry --


def register_form_definition(definition: FormDefinition) -> FormDefinition:
    if definition.name in _definition_registry:
        logger.debug("Replacing form definition %r", definition.name)
    _definition_registry[definition.name] = definition
    return definition


def get_form_definition(name: str) -> FormDefinition:
    """Look up a registered form definition by name. Raises LookupError if not found."""
    try:
        return _definition_registry[name]
    except KeyError:
        available = ", ".join(sorted(_definition_registry)) or "(none)"
        raise LookupError(f"No form named '{name}'. Registered: {available}")


def create_form(
    name: str,
    predicates: Mapping[str, Callable[[Any], bool]] | None = None,
) -> Form:
    """Build a fresh Form from the registered definition *name*."""
    return build_form(get_form_definition(name), predicates)


def load_form_definitions(path: Path, register: bool = True) -> dict[str, FormDefinition]:
    """Load form definitions from a YAML file with a top-level ``forms`` mapping.

    Mapping keys are form names. ``$VAR`` references are read from the
    environment.
    """
    data = load_yaml_file(path)
    forms = data.get("forms") or {}
    if not isinstance(forms, dict):
        raise ConfigurationError(f"{path}: 'forms' must be a mapping of form name to definition")

    definitions = {
        name: FormDefinition.model_validate({**(body or {}), "name": name})
        for name, body in forms.items()
    }

    if register:
        for definition in definitions.values():
            register_form_definition(definition)

    logger.debug("Loaded %d form definitions from %s", len(definitions), path)
    return definitions
