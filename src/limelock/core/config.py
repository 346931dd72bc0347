# src/limelock/core/config.py
"""
Client configuration schema and loading.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from limelock.core.fingerprint import DEFAULT_CHUNK_SIZE

DEFAULT_BASE_URL = "https://1utxgnx3k5.execute-api.us-east-1.amazonaws.com/dev"


class LimelockSettings(BaseModel):
    """Top-level client settings.

    Example YAML:
        base_url: https://api.limelock.io
        timeout_seconds: 10
        auth_token: ${LIMELOCK_SESSION:-}
        verify_local_fingerprint: true
        file_access: true
    """

    model_config = {"frozen": True}

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Limelock service",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )
    auth_token: str | None = Field(
        default=None,
        description="Session token for authenticated operations",
    )
    verify_local_fingerprint: bool = Field(
        default=True,
        description="Recompute fetched fingerprints locally when an expected hash is known",
    )
    file_access: bool = Field(
        default=True,
        description="Whether upload/download may touch the local file system",
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Read size in bytes for streamed file fingerprints",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Base URL must be absolute http(s); trailing slashes are dropped."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v.rstrip("/")

    @field_validator("auth_token", mode="before")
    @classmethod
    def normalize_token(cls, v: Any) -> str | None:
        """Treat an empty token (e.g. from ${VAR:-}) as unset.

        Dynaconf parses environment values as TOML, so a numeric-looking
        token arrives as int and is turned back into a string here.
        """
        if v is None:
            return None
        v = str(v)
        if not v.strip():
            return None
        return v


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default = match.group(2)
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default is not None:
                return default
            # No env var and no default - keep original so validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


# Secret field names that are redacted in resolved output (exact matches)
_SECRET_FIELD_NAMES = frozenset({"token", "password", "secret", "credential"})

# Secret field suffixes that are redacted in resolved output
_SECRET_FIELD_SUFFIXES = ("_secret", "_key", "_token", "_password", "_credential")


def _is_secret_field(field_name: str) -> bool:
    """Check if a field name represents a secret."""
    return field_name in _SECRET_FIELD_NAMES or field_name.endswith(_SECRET_FIELD_SUFFIXES)


def load_settings(config_path: Path | None = None) -> LimelockSettings:
    """Load settings from an optional YAML file with environment overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (LIMELOCK_*) - highest priority
    2. Config file (if given)
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file, or None for
            environment and defaults only

    Returns:
        Validated LimelockSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="LIMELOCK",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    return LimelockSettings(**raw_config)


def resolve_config(settings: LimelockSettings) -> dict[str, Any]:
    """Convert settings to a JSON-safe dict for display.

    Secret fields are redacted: the returned dict is safe to print or log
    but must NOT be used to build a client.
    """
    config_dict = settings.model_dump(mode="json")
    return {
        key: ("<redacted>" if value is not None else None) if _is_secret_field(key) else value
        for key, value in config_dict.items()
    }
