"""Configuration errors raised when forms or validators are wired incorrectly.

Validation failures are never raised; they are returned as error maps.
"""


class ConfigurationError(Exception):
    """A form, element or validator was set up incorrectly."""


class UnknownErrorCodeError(ConfigurationError, LookupError):
    """A validator looked up a message for an error code it was not given."""

    def __init__(self, code: str, known: list[str]):
        self.code = code
        self.known = known
        available = ", ".join(sorted(known)) or "(none)"
        super().__init__(f"Error message not found for key '{code}'. Known: {available}")


class InvalidPredicateError(ConfigurationError, TypeError):
    """A custom validator was given something that cannot be called."""
