"""Configuration management for the CKS autoscaler.

Supports:
- Environment variables (API_KEY, SECRET_KEY, ENDPOINT, CKS_NODES, etc.)
- Config file (~/.cks/config.toml)
- Programmatic configuration
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from cks._http import DEFAULT_TIMEOUT
from cks._polling import DEFAULT_JOB_TIMEOUT, DEFAULT_POLL_INTERVAL
from cks.auth import Credentials
from cks.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".cks"
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names for each config key
ENV_VARS = {
    "api_key": "API_KEY",
    "secret_key": "SECRET_KEY",
    "endpoint": "ENDPOINT",
    "nodes": "CKS_NODES",
    "timeout": "CKS_TIMEOUT",
    "poll_interval": "CKS_POLL_INTERVAL",
    "job_timeout": "CKS_JOB_TIMEOUT",
    "verify_ssl": "CKS_VERIFY_SSL",
    "debug": "CKS_DEBUG",
}

SECRET_KEYS = ("api_key", "secret_key")


@dataclass(frozen=True)
class NodeGroupSpec:
    """Node group directive of the form ``<min>:<max>:<cluster id>``."""

    min_size: int
    max_size: int
    cluster_id: str

    @classmethod
    def parse(cls, value: str) -> NodeGroupSpec:
        """Parse a node group directive.

        Raises:
            ConfigurationError: If the directive is malformed.
        """
        usage = "Please use <min>:<max>:<cluster id>"
        parts = value.strip().split(":")
        if len(parts) != 3:
            raise ConfigurationError(f"Invalid node group '{value}'. {usage}")

        min_raw, max_raw, cluster_id = parts
        try:
            min_size = int(min_raw)
        except ValueError:
            raise ConfigurationError(f"Invalid value for min cluster size: {min_raw!r}") from None
        try:
            max_size = int(max_raw)
        except ValueError:
            raise ConfigurationError(f"Invalid value for max cluster size: {max_raw!r}") from None

        if min_size < 0 or max_size < 0:
            raise ConfigurationError(f"Cluster size bounds must not be negative: '{value}'")
        if min_size > max_size:
            raise ConfigurationError(f"Min size {min_size} is larger than max size {max_size}")
        if not cluster_id.strip():
            raise ConfigurationError(f"Cluster ID missing in '{value}'. {usage}")

        return cls(min_size=min_size, max_size=max_size, cluster_id=cluster_id.strip())

    def __str__(self) -> str:
        return f"{self.min_size}:{self.max_size}:{self.cluster_id}"


@dataclass
class CKSConfig:
    """Autoscaler configuration."""

    api_key: str | None = None
    secret_key: str | None = None
    endpoint: str | None = None
    nodes: str | None = None

    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    job_timeout: float = DEFAULT_JOB_TIMEOUT

    # Additional settings
    verify_ssl: bool = True
    debug: bool = False

    @classmethod
    def from_env(cls) -> CKSConfig:
        """Load configuration from environment variables."""
        return cls(
            api_key=os.getenv("API_KEY"),
            secret_key=os.getenv("SECRET_KEY"),
            endpoint=os.getenv("ENDPOINT"),
            nodes=os.getenv("CKS_NODES"),
            timeout=_float_env("CKS_TIMEOUT", DEFAULT_TIMEOUT),
            poll_interval=_float_env("CKS_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            job_timeout=_float_env("CKS_JOB_TIMEOUT", DEFAULT_JOB_TIMEOUT),
            verify_ssl=_bool_value("CKS_VERIFY_SSL", os.getenv("CKS_VERIFY_SSL") or True),
            debug=_bool_value("CKS_DEBUG", os.getenv("CKS_DEBUG") or False),
        )

    @classmethod
    def from_file(cls, path: Path | None = None) -> CKSConfig:
        """Load configuration from TOML file."""
        config_path = path or CONFIG_FILE

        if not config_path.exists():
            return cls()

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        try:
            return cls(
                api_key=data.get("api_key"),
                secret_key=data.get("secret_key"),
                endpoint=data.get("endpoint"),
                nodes=data.get("nodes"),
                timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
                poll_interval=float(data.get("poll_interval", DEFAULT_POLL_INTERVAL)),
                job_timeout=float(data.get("job_timeout", DEFAULT_JOB_TIMEOUT)),
                verify_ssl=_bool_value("verify_ssl", data.get("verify_ssl", True)),
                debug=_bool_value("debug", data.get("debug", False)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    @classmethod
    def load(cls) -> CKSConfig:
        """Load configuration with precedence: env > file > defaults."""
        # Start with file config
        config = cls.from_file()

        # Override with environment variables
        env_config = cls.from_env()

        for name, env_var in ENV_VARS.items():
            if os.getenv(env_var):
                setattr(config, name, getattr(env_config, name))

        return config

    def validate(self) -> None:
        """Check that everything needed to run is present.

        Raises:
            ConfigurationError: Naming every missing value.
        """
        missing = [
            ENV_VARS[name]
            for name in ("api_key", "secret_key", "endpoint", "nodes")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing configuration: {', '.join(missing)} not set")
        self.node_group()

    def credentials(self) -> Credentials:
        if not (self.api_key and self.secret_key and self.endpoint):
            raise ConfigurationError("API_KEY, SECRET_KEY and ENDPOINT must all be set")
        return Credentials(
            api_key=self.api_key,
            secret_key=self.secret_key,
            endpoint=self.endpoint,
        )

    def node_group(self) -> NodeGroupSpec:
        if not self.nodes:
            raise ConfigurationError(
                "Cluster details not present. Please use CKS_NODES=<min>:<max>:<cluster id>"
            )
        if "," in self.nodes:
            raise ConfigurationError("Only one node group is supported per process")
        return NodeGroupSpec.parse(self.nodes)


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _bool_value(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.strip().lower() in _TRUE_VALUES:
            return True
        if value.strip().lower() in _FALSE_VALUES:
            return False
    raise ConfigurationError(f"Invalid value for {name}: {value!r} is not a boolean")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from None


def save_config(config: dict[str, Any], path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Sets restrictive file permissions (0o600) since the file holds the
    API and secret keys.
    """
    import tomli_w

    config_path = path or CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    config_path.chmod(0o600)


def get_config_value(key: str) -> Any:
    """Get a single config value."""
    config = CKSConfig.load()
    return getattr(config, key, None)


def set_config_value(key: str, value: Any, path: Path | None = None) -> None:
    """Set a single config value in the config file."""
    if key not in ENV_VARS:
        raise ConfigurationError(f"Unknown config key: {key}")

    config_path = path or CONFIG_FILE

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    else:
        data = {}

    data[key] = value
    save_config(data, config_path)
