"""Shared pytest fixtures."""

import pytest
import yaml

from formwork.config import clear_settings_cache
from formwork.forms import definition
from formwork.lib.hooks import hooks


@pytest.fixture(autouse=True)
def clean_hooks():
    """Save and restore hooks state around a test."""
    original_filters = hooks._filters.copy()
    original_actions = hooks._actions.copy()
    hooks.clear()
    yield
    hooks._filters = original_filters
    hooks._actions = original_actions


@pytest.fixture(autouse=True)
def clean_registry():
    """Save and restore the form definition registry around each test."""
    saved = definition._definition_registry.copy()
    definition._definition_registry.clear()
    yield
    definition._definition_registry.clear()
    definition._definition_registry.update(saved)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from FORMWORK_* variables in the environment."""
    for var in ("FORMWORK_DEFAULT_METHOD", "FORMWORK_FORMS_FILE", "FORMWORK_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def write_yaml(tmp_path):
    """Write a dict to a YAML file under tmp_path and return its path."""

    def _write(data: dict, name: str = "forms.yaml"):
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return path

    return _write


LOGIN_FORMS = {
    "forms": {
        "login": {
            "action": "/login",
            "elements": [
                {
                    "name": "user",
                    "validators": [{"kind": "mandatory", "message": "Enter your user name"}],
                },
                {
                    "name": "pass",
                    "type": "password",
                    "validators": [{"kind": "mandatory", "message": "Enter a password"}],
                },
                {
                    "name": "pass_confirm",
                    "type": "password",
                    "validators": [
                        {"kind": "equal", "element": "pass", "message": "Passwords do not match"}
                    ],
                },
            ],
        }
    }
}


@pytest.fixture
def login_forms_file(write_yaml):
    return write_yaml(LOGIN_FORMS)
