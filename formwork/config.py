import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
load_dotenv(Path.cwd() / ".env")

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping with environment variable interpolation."""
    if not path.exists():
        raise FileNotFoundError(f"{path.name} not found at {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")

    return interpolate_env_vars(data)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FORMWORK_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Method used by forms that don't set one
    default_method: str = "post"

    # Form definitions file read by the CLI
    forms_file: Path = Path("forms.yaml")

    log_level: str = "warning"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
