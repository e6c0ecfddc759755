import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from .exceptions import ConfigError
from .utils import merge_dicts

ENV_PREFIX = "BANDWIDTH_"
DEFAULT_API_HOST = "api.catapult.inetwork.com"
SCHEMES = ("http", "https")

class Config:
    """
    Client settings: API endpoint, HTTP pool and logging.

    Values are layered as defaults, then BANDWIDTH_* environment
    variables, then an optional JSON file. Credentials are never read
    from here; they are passed to the client explicitly.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = self._defaults()
        self._load_environment_variables()
        if config_path:
            self.load(config_path)
        self.validate(self._config)

    @staticmethod
    def _defaults() -> Dict[str, Any]:
        return {
            "api": {
                "scheme": "https",
                "host": DEFAULT_API_HOST,
                "version": "v1",
                "timeout": 30.0,
                "verify_ssl": True,
                "user_agent": "bandwidth-client/1.0",
                "max_connections": 100
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "console_output": False,
                # package root, so every module logger propagates here
                "name": "src",
                "max_size": 1024 * 1024,
                "backup_count": 3,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def load(self, path: Path) -> None:
        """Merge settings from a JSON file"""
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to load config from {path}: {str(e)}")
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        self.validate(file_config)
        self.update(file_config)

    def save(self, path: Path) -> None:
        """Write the current settings to a JSON file"""
        try:
            with open(path, 'w') as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {path}: {str(e)}")

    @staticmethod
    def _env_key(name: str) -> Tuple[str, ...]:
        """BANDWIDTH_API_VERIFY_SSL -> ("api", "verify_ssl")"""
        section, _, key = name[len(ENV_PREFIX):].lower().partition('_')
        return (section, key) if key else (section,)

    def _load_environment_variables(self) -> None:
        for name, value in os.environ.items():
            if name.startswith(ENV_PREFIX):
                self.set('.'.join(self._env_key(name)), self._convert_value(value))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, e.g. "api.timeout" """
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def section(self, name: str) -> Dict[str, Any]:
        """Copy of one top-level section, {} when absent"""
        value = self._config.get(name)
        return dict(value) if isinstance(value, dict) else {}

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key, creating sections as needed"""
        *parents, leaf = key.split('.')
        d = self._config
        for part in parents:
            d = d.setdefault(part, {})
            if not isinstance(d, dict):
                raise ConfigError(f"Cannot set {key}: {part} is not a section")
        d[leaf] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        self._config = merge_dicts(self._config, config_dict)

    def validate(self, config: Dict[str, Any]) -> None:
        """Check the api section of a settings mapping"""
        api_config = config.get("api")
        if not isinstance(api_config, dict):
            return
        if "scheme" in api_config and api_config["scheme"] not in SCHEMES:
            raise ConfigError(f"api.scheme must be one of {', '.join(SCHEMES)}")
        if "host" in api_config and not api_config["host"]:
            raise ConfigError("api.host must not be empty")
        if "version" in api_config:
            version = api_config["version"]
            if not version or '/' in str(version):
                raise ConfigError("api.version must be a single path segment")
        for key in ("timeout", "max_connections"):
            if key in api_config:
                value = api_config[key]
                if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                    raise ConfigError(f"api.{key} must be a positive number")

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Environment strings to bool, int or float where they parse"""
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        for convert in (int, float):
            try:
                return convert(value)
            except ValueError:
                continue
        return value
