"""
Configuration management for the CredHub client.

Handles loading config from ~/.credhub/config.yaml and providing
default values for all settings. Connection settings can also come from
the CREDHUB_URL, CREDHUB_CLIENT, CREDHUB_SECRET and CREDHUB_CA_CERT
environment variables, which take precedence over the file.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import yaml


# Default paths
DEFAULT_BASE_DIR = Path.home() / ".credhub"
DEFAULT_CONFIG_FILE = DEFAULT_BASE_DIR / "config.yaml"

DEFAULT_SCOPES = ["credhub.read", "credhub.write"]

# Where the overwrite-mode comparison runs
CONFLICT_RESOLUTION_CHOICES = ("server", "client")

# Environment overrides: env var -> attribute
ENV_OVERRIDES = {
    "CREDHUB_URL": "url",
    "CREDHUB_CLIENT": "client_id",
    "CREDHUB_SECRET": "client_secret",
    "CREDHUB_CA_CERT": "ca_cert",
}


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "WARNING"
    file: Optional[Path] = None


@dataclass
class Config:
    """Main configuration container."""

    config_file: Path = DEFAULT_CONFIG_FILE

    # Server and credentials
    url: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = field(default=None, repr=False)
    scopes: List[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))

    # TLS
    ca_cert: Optional[Path] = None
    skip_tls_validation: bool = False

    # Requests
    timeout: Optional[float] = 30.0
    conflict_resolution: str = "server"

    # Logging
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file. If None, uses default location.
                         Can also be set via CREDHUB_CONFIG env var.

        Returns:
            Config instance with values from file merged with defaults,
            then environment overrides applied.

        Raises:
            ValueError: On invalid YAML or an unknown setting value.
        """
        if config_path is None:
            config_path = Path(
                os.environ.get("CREDHUB_CONFIG", str(DEFAULT_CONFIG_FILE))
            )

        config = cls()
        config.config_file = Path(config_path)

        data = {}
        if config.config_file.exists():
            try:
                with open(config.config_file) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid config YAML: {e}")

            if not isinstance(data, dict):
                raise ValueError(f"Invalid config: expected a mapping in {config.config_file}")

        for key in ("url", "client_id", "client_secret"):
            if data.get(key):
                setattr(config, key, str(data[key]))

        if "scopes" in data:
            scopes = data["scopes"]
            if isinstance(scopes, str):
                scopes = [s for s in scopes.replace(",", " ").split() if s]
            config.scopes = list(scopes or [])

        if data.get("ca_cert"):
            config.ca_cert = Path(data["ca_cert"]).expanduser()

        if "skip_tls_validation" in data:
            config.skip_tls_validation = bool(data["skip_tls_validation"])

        if "timeout" in data:
            timeout = data["timeout"]
            config.timeout = float(timeout) if timeout is not None else None

        if "conflict_resolution" in data:
            config.conflict_resolution = str(data["conflict_resolution"]).lower()

        # Logging settings
        if "logging" in data:
            log_data = data["logging"] or {}
            log_file = log_data.get("file")
            config.logging = LoggingConfig(
                level=str(log_data.get("level", "WARNING")).upper(),
                file=Path(log_file).expanduser() if log_file else None,
            )

        config._apply_env()
        config.validate()
        return config

    def _apply_env(self):
        for env_var, attr in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if not value:
                continue
            if attr == "ca_cert":
                self.ca_cert = Path(value).expanduser()
            else:
                setattr(self, attr, value)

    def validate(self):
        """Reject settings the client cannot act on."""
        if self.conflict_resolution not in CONFLICT_RESOLUTION_CHOICES:
            raise ValueError(
                f"Invalid conflict_resolution '{self.conflict_resolution}'. "
                f"Choose one of: {', '.join(CONFLICT_RESOLUTION_CHOICES)}"
            )
        if self.url and not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid url '{self.url}': must start with http:// or https://")
        if not isinstance(logging.getLevelName(self.logging.level), int):
            raise ValueError(f"Invalid logging level '{self.logging.level}'")

    @property
    def verify(self) -> Union[bool, str]:
        """TLS verification argument for requests."""
        if self.skip_tls_validation:
            return False
        if self.ca_cert:
            return str(self.ca_cert)
        return True

    def apply_logging(self):
        """Configure the package logger. Never touches the root logger."""
        pkg_logger = logging.getLogger("credhub")
        pkg_logger.setLevel(self.logging.level)

        if self.logging.file:
            self.logging.file.parent.mkdir(parents=True, exist_ok=True)
            target = str(self.logging.file.resolve())
            already = any(
                isinstance(h, logging.FileHandler) and h.baseFilename == target
                for h in pkg_logger.handlers
            )
            if not already:
                handler = logging.FileHandler(target)
                handler.setFormatter(logging.Formatter(
                    "%(asctime)s %(levelname)s %(name)s: %(message)s"
                ))
                pkg_logger.addHandler(handler)

    def save_default_config(self):
        """Save a default config file if one doesn't exist."""
        if self.config_file.exists():
            return

        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        default_config = f"""\
# CredHub client configuration

# =============================================================================
# Server
# =============================================================================

# CredHub API base URL
url: {self.url or 'https://credhub.example.com:8844'}

# OAuth2 client used for the client-credentials grant
client_id: {self.client_id or ''}
client_secret: ''
scopes: [{', '.join(self.scopes)}]

# =============================================================================
# TLS
# =============================================================================

# CA bundle used to verify the server (and its UAA)
# ca_cert: ~/.credhub/ca.pem
skip_tls_validation: false

# =============================================================================
# Requests
# =============================================================================

timeout: {self.timeout}              # Seconds per request
conflict_resolution: {self.conflict_resolution}   # server | client

# =============================================================================
# Logging
# =============================================================================

logging:
  level: {self.logging.level}              # DEBUG, INFO, WARNING, ERROR
  # file: {DEFAULT_BASE_DIR / 'credhub.log'}
"""

        with open(self.config_file, "w") as f:
            f.write(default_config)


# Singleton instance
_config: Optional[Config] = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload from file.

    Returns:
        Config instance.
    """
    global _config

    if _config is None or reload:
        _config = Config.load()

    return _config
