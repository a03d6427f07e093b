"""Form system - declarative forms, chained validators, cached validation."""

from formwork.forms.core import Form, FormState, Method
from formwork.forms.definition import (
    ElementDefinition,
    FormDefinition,
    ValidatorDefinition,
    build_form,
    create_form,
    get_form_definition,
    load_form_definitions,
    register_form_definition,
)
from formwork.forms.fields import (
    ELEMENT_TYPES,
    Element,
    HiddenElement,
    PasswordElement,
    TextareaElement,
    TextElement,
)
from formwork.forms.validators import (
    Custom,
    CustomError,
    Equal,
    EqualError,
    Mandatory,
    MandatoryError,
    ValidationResult,
    Validator,
    loose_equals,
)

__all__ = [
    "Custom",
    "CustomError",
    "ELEMENT_TYPES",
    "Element",
    "ElementDefinition",
    "Equal",
    "EqualError",
    "Form",
    "FormDefinition",
    "FormState",
    "HiddenElement",
    "Mandatory",
    "MandatoryError",
    "Method",
    "PasswordElement",
    "TextElement",
    "TextareaElement",
    "ValidationResult",
    "Validator",
    "ValidatorDefinition",
    "build_form",
    "create_form",
    "get_form_definition",
    "load_form_definitions",
    "loose_equals",
    "register_form_definition",
]
