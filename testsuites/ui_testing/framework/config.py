"""
================================================================================
Portal Configuration
================================================================================

YAML-based configuration with environment variable overrides, loaded once
into an immutable `PortalConfig` value that is passed explicitly to the
session registry and every collaborator that needs it.

Features:
    - Built-in defaults merged with config/config.yaml
    - Config file path override via PORTAL_CONFIG
    - Environment variable override (APP_BASE_URL overrides app.base_url)
    - Override values typed after the value they replace
    - Dot notation path access

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml
from loguru import logger

from .exceptions import ConfigurationError


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"
CONFIG_PATH_ENV = "PORTAL_CONFIG"

DEFAULTS: Dict[str, Any] = {
    "app": {
        "base_url": "http://localhost:3000",
        "api_base_url": "http://localhost:8000",
        "api_token": "",
    },
    "browser": {
        "name": "chromium",
        "headless": True,
        "auto_install": False,
        "viewport_width": 1920,
        "viewport_height": 1080,
        "action_timeout": 5.0,
    },
    "timeouts": {
        "implicit_wait": 0.0,
        "page_load": 30.0,
        "script": 30.0,
    },
    "waits": {
        "default_timeout": 30.0,
        "poll_interval": 0.5,
        "display_check": 5.0,
        "readiness_timeout": 30.0,
        "transient_appear": 5.0,
        "transient_disappear": 30.0,
    },
    "retry": {
        "enabled": True,
        "backoff_seconds": 2.0,
    },
    "recovery": {
        "settle_delay": 1.0,
        "backoff_base": 2.0,
        "driver_fault_delay": 2.0,
        "overlay_timeout": 10.0,
        "scroll_pause": 1.0,
    },
    "credentials": {
        "email": "superadmin@example.com",
        "password": "",
    },
    "test_data": {
        "state": "Arizona",
        "gender": "Male",
        "staff_role": "Admin",
        "license_valid_days": 30,
    },
    "performance": {
        "threshold_ms": 60000,
    },
    "reports": {
        "screenshots_dir": "reports/screenshots",
    },
    "logging": {
        "level": "INFO",
        "file": "",
        "rotation": "10 MB",
        "retention": "7 days",
    },
}


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merges two dictionaries, with override taking precedence."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _convert_type(value: str, reference: Any) -> Any:
    """
    Convert string value to match reference type.

    Used for environment variables which are always strings.
    """
    if reference is None:
        return value

    if isinstance(reference, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(reference, int):
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(reference, float):
        try:
            return float(value)
        except ValueError:
            return value

    return value


def _apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str], prefix: str = "") -> None:
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            _apply_env_overrides(value, environ, path)
            continue
        env_key = path.upper().replace(".", "_")
        if env_key in environ:
            data[key] = _convert_type(environ[env_key], value)
            logger.debug(f"Config override from environment: {env_key}")


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


class PortalConfig:
    """
    Read-only configuration value.

    Usage:
        >>> config = load_config()
        >>> config.get("app.base_url")
        'http://localhost:3000'
        >>> config.get("waits.missing", 5)
        5
    """

    __slots__ = ("_data", "_source")

    def __init__(self, data: Dict[str, Any], source: Optional[Path] = None) -> None:
        object.__setattr__(self, "_data", _freeze(data))
        object.__setattr__(self, "_source", source)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("PortalConfig is immutable")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key: Dot-notation path (e.g., "app.base_url")
            default: Value returned when the key is absent

        Returns:
            Configuration value or default
        """
        value: Any = self._data
        for part in key.split("."):
            if isinstance(value, Mapping) and part in value:
                value = value[part]
            else:
                return default
        return value

    def with_overrides(self, overrides: Mapping[str, Any]) -> "PortalConfig":
        """Return a new config with dotted keys replaced, leaving this one untouched."""
        data = _thaw(self._data)
        for key, value in overrides.items():
            node = data
            parts = key.split(".")
            for part in parts[:-1]:
                node = node.setdefault(part, {})
            node[parts[-1]] = value
        return PortalConfig(data, self._source)

    @property
    def source(self) -> Optional[Path]:
        return self._source

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return str(self.get("app.base_url"))

    @property
    def api_base_url(self) -> str:
        return str(self.get("app.api_base_url"))

    @property
    def browser(self) -> str:
        return str(self.get("browser.name", "chromium")).lower()

    @property
    def headless(self) -> bool:
        return bool(self.get("browser.headless", True))

    @property
    def auto_install_browsers(self) -> bool:
        return bool(self.get("browser.auto_install", False))

    @property
    def action_timeout(self) -> float:
        return float(self.get("browser.action_timeout", 5.0))

    @property
    def implicit_wait(self) -> float:
        return float(self.get("timeouts.implicit_wait", 0.0))

    @property
    def page_load_timeout(self) -> float:
        return float(self.get("timeouts.page_load", 30.0))

    @property
    def script_timeout(self) -> float:
        return float(self.get("timeouts.script", 30.0))

    @property
    def default_timeout(self) -> float:
        return float(self.get("waits.default_timeout", 30.0))

    @property
    def poll_interval(self) -> float:
        return float(self.get("waits.poll_interval", 0.5))

    @property
    def readiness_timeout(self) -> float:
        return float(self.get("waits.readiness_timeout", 30.0))

    @property
    def retry_backoff(self) -> float:
        return float(self.get("retry.backoff_seconds", 2.0))

    @property
    def credentials(self) -> Dict[str, str]:
        return {
            "email": str(self.get("credentials.email", "")),
            "password": str(self.get("credentials.password", "")),
        }

    @property
    def default_state(self) -> str:
        return str(self.get("test_data.state", "Arizona"))

    @property
    def default_gender(self) -> str:
        return str(self.get("test_data.gender", "Male"))

    @property
    def default_staff_role(self) -> str:
        return str(self.get("test_data.staff_role", "Admin"))

    @property
    def license_valid_days(self) -> int:
        return int(self.get("test_data.license_valid_days", 30))

    def __repr__(self) -> str:
        return f"PortalConfig(source={self._source}, base_url={self.base_url!r}, browser={self.browser!r})"


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PortalConfig:
    """
    Build a PortalConfig from defaults, YAML and environment variables.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (APP_BASE_URL)
        2. YAML configuration file
        3. Built-in defaults

    Args:
        config_path: YAML file to read. Falls back to $PORTAL_CONFIG, then DEFAULT_CONFIG_PATH.
        environ: Environment mapping, os.environ when omitted.

    Returns:
        Immutable configuration value

    Raises:
        ConfigurationError: When the file is not valid YAML or not a mapping
    """
    environ = os.environ if environ is None else environ
    path = Path(config_path or environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)

    file_config: Dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        logger.debug(f"Loaded configuration from: {path}")
    else:
        logger.warning(
            f"Configuration file not found: {path}. "
            f"Using defaults and environment variables only."
        )

    data = _deep_merge(DEFAULTS, file_config)
    _apply_env_overrides(data, environ)
    return PortalConfig(data, path if path.exists() else None)


__all__ = ["PortalConfig", "load_config", "DEFAULTS", "DEFAULT_CONFIG_PATH"]
