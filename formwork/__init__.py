"""formwork - declarative HTML forms with chained server-side validation."""

__version__ = "0.1.0"
