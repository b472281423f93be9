"""
Configuration management and loading.

Handles dashboard settings and the API credential from the environment.
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


DEFAULT_ENTERPRISE = "octodemo"
DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_API_VERSION = "2022-11-28"
DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"
DEFAULT_TIMEOUT = 30.0


class ConfigurationError(ValueError):
    """Raised when configuration is invalid or the credential is missing."""


class FailurePolicy(Enum):
    """What to do when the real-data fetch fails."""
    FALLBACK = "fallback"  # Substitute synthetic data
    ERROR = "error"        # Surface the error to the caller


@dataclass(frozen=True)
class DashboardConfig:
    """Resolved dashboard configuration.

    Built once at startup and passed explicitly; nothing downstream reads
    the environment.
    """
    enterprise: str = DEFAULT_ENTERPRISE
    api_base_url: str = DEFAULT_API_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    token_env: str = DEFAULT_TOKEN_ENV
    on_failure: FailurePolicy = FailurePolicy.FALLBACK
    timeout: float = DEFAULT_TIMEOUT
    token: Optional[str] = None

    def __post_init__(self):
        """Validate basic settings."""
        if not self.enterprise or not self.enterprise.strip():
            raise ConfigurationError("enterprise cannot be empty")
        if not self.api_base_url or not self.api_base_url.strip():
            raise ConfigurationError("api_base_url cannot be empty")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def require_token(self) -> str:
        """Return the API credential.

        Raises:
            ConfigurationError: If the credential was not set
        """
        if not self.token:
            raise ConfigurationError(
                f"{self.token_env} environment variable is not set"
            )
        return self.token

    def with_policy(self, policy: FailurePolicy) -> "DashboardConfig":
        """Return a copy using a different failure policy."""
        return replace(self, on_failure=policy)

    def __repr__(self) -> str:
        # Never leak the credential into logs or tracebacks
        token = "***" if self.token else None
        return (
            f"DashboardConfig(enterprise={self.enterprise!r}, "
            f"api_base_url={self.api_base_url!r}, api_version={self.api_version!r}, "
            f"token_env={self.token_env!r}, on_failure={self.on_failure.value!r}, "
            f"timeout={self.timeout!r}, token={token!r})"
        )


def parse_failure_policy(value: Any, path: str = "on_failure") -> FailurePolicy:
    """Parse a failure policy name.

    Raises:
        ConfigurationError: If the value is not a known policy
    """
    if not isinstance(value, str):
        raise ConfigurationError(f"'{path}' must be a string")
    try:
        return FailurePolicy(value.strip().lower())
    except ValueError:
        valid = [policy.value for policy in FailurePolicy]
        raise ConfigurationError(f"'{path}' must be one of: {valid}")


def load_dashboard_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DashboardConfig:
    """Load and validate dashboard configuration.

    The YAML file is optional; every key has a default. The credential is
    read from the environment variable named by ``token_env``.

    Args:
        path: Optional path to YAML configuration file
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Validated DashboardConfig object

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if environ is None:
        environ = os.environ

    raw_config: Dict[str, Any] = {}
    if path is not None:
        raw_config = _read_yaml(path)

    allowed_keys = {
        'enterprise', 'api_base_url', 'api_version',
        'token_env', 'on_failure', 'timeout',
    }
    unknown_keys = set(raw_config.keys()) - allowed_keys
    if unknown_keys:
        raise ConfigurationError(f"Unknown configuration keys: {unknown_keys}")

    settings: Dict[str, Any] = {}
    for key in ('enterprise', 'api_base_url', 'api_version', 'token_env'):
        if key in raw_config:
            value = raw_config[key]
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"'{key}' must be a non-empty string")
            settings[key] = value.strip()

    if 'api_base_url' in settings:
        settings['api_base_url'] = settings['api_base_url'].rstrip('/')

    if 'on_failure' in raw_config:
        settings['on_failure'] = parse_failure_policy(raw_config['on_failure'])

    if 'timeout' in raw_config:
        timeout = raw_config['timeout']
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError("'timeout' must be a number > 0")
        settings['timeout'] = float(timeout)

    token_env = settings.get('token_env', DEFAULT_TOKEN_ENV)
    token = environ.get(token_env) or None

    return DashboardConfig(token=token, **settings)


def _read_yaml(path: str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Dashboard config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")
    return raw_config
