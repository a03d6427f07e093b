"""CLI commands for formwork."""

import logging
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from formwork.config import get_settings
from formwork.forms.definition import build_form, load_form_definitions
from formwork.lib.exceptions import ConfigurationError

_forms_option = click.option(
    "--forms",
    "forms_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Form definitions file (default: FORMWORK_FORMS_FILE or forms.yaml)",
)


def _load_definitions(forms_file: Path | None):
    path = forms_file or get_settings().forms_file
    try:
        return load_form_definitions(path, register=False)
    except (FileNotFoundError, ValueError, ConfigurationError, ValidationError) as e:
        raise click.ClickException(f"Could not load form definitions: {e}") from e


def _build(definitions, form_name: str):
    if form_name not in definitions:
        available = ", ".join(sorted(definitions)) or "(none)"
        raise click.ClickException(f"No form named '{form_name}'. Defined: {available}")
    try:
        return build_form(definitions[form_name])
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(package_name="formwork")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level (default: FORMWORK_LOG_LEVEL or warning)",
)
def cli(log_level):
    """formwork - declarative forms with chained validation."""
    level = log_level or get_settings().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@_forms_option
def check(forms_file):
    """Load every form definition and build it once."""
    definitions = _load_definitions(forms_file)
    for name in definitions:
        form = _build(definitions, name)
        click.echo(f"{name}: {len(form)} elements")


@cli.command()
@click.argument("form_name")
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_forms_option
@click.option("--by-name", is_flag=True, help="Data keys are element names instead of ids")
def validate(form_name, data_file, forms_file, by_name):
    """Validate DATA_FILE (YAML or JSON mapping) against FORM_NAME."""
    definitions = _load_definitions(forms_file)
    form = _build(definitions, form_name)

    with open(data_file, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise click.ClickException(f"{data_file} must contain a mapping of field to value")

    form.populate(data, by_name=by_name)
    if form.is_valid():
        click.echo("valid")
        return

    click.echo(yaml.safe_dump(form.get_errors(), sort_keys=True), nl=False)
    sys.exit(1)


@cli.command()
@click.argument("form_name")
@_forms_option
def render(form_name, forms_file):
    """Print the markup for FORM_NAME."""
    definitions = _load_definitions(forms_file)
    click.echo(_build(definitions, form_name).render())
