"""
Configuration loader: command-line flags with environment and YAML fallback.
"""
import argparse
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import yaml

DEFAULT_LISTEN_ADDRESS = ":9101"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

# setting -> (flag, environment variable)
SETTINGS = {
    "listen_address": ("--listen-address", "LISTEN_ADDRESS"),
    "hubitat_address": ("--hubitat-address", "HUBITAT_ADDRESS"),
    "hubitat_access_token": ("--hubitat-access-token", "HUBITAT_ACCESS_TOKEN"),
    "include_name_label": ("--include-name-label", "HUBITAT_INCLUDE_NAME_LABEL"),
    "timeout": ("--timeout", "HUBITAT_TIMEOUT"),
    "log_level": ("--log-level", "LOG_LEVEL"),
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Configuration is missing or invalid."""


@dataclass(frozen=True)
class Config:
    hubitat_address: str
    hubitat_access_token: str
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    include_name_label: bool = False
    timeout: Optional[float] = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def listen_host_port(self) -> Tuple[str, int]:
        return parse_listen_address(self.listen_address)


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split a listen address into host and port.

    Args:
        address: "host:port" or ":port" (empty host listens on all interfaces)

    Returns:
        (host, port) tuple

    Raises:
        ConfigError: If the address has no valid port
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ConfigError(f"Invalid listen address {address!r}: expected host:port")
    try:
        port_number = int(port)
    except ValueError:
        raise ConfigError(f"Invalid port in listen address {address!r}")
    if not 0 <= port_number <= 65535:
        raise ConfigError(f"Port out of range in listen address {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port_number


def parse_bool(value, setting: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {setting}: {value!r}")


def parse_timeout(value) -> Optional[float]:
    """Parse a timeout in seconds; 0 disables the timeout."""
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout: {value!r}")
    if timeout < 0:
        raise ConfigError(f"Timeout must not be negative: {value!r}")
    return timeout or None


class ConfigLoader:
    """
    Resolve exporter configuration.

    Priority for each setting:
    1. Command-line flag
    2. Environment variable
    3. YAML config file (--config or CONFIG_PATH, optional)
    4. Built-in default

    The hub address and access token have no default; missing either one
    raises ConfigError.
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="hubitat-exporter",
            description="Prometheus exporter for Hubitat device sensors."
        )
        parser.add_argument(
            "--config",
            help="Path to a YAML config file. "
                 "Can also be specified via the CONFIG_PATH environment variable."
        )
        for setting, (flag, env) in SETTINGS.items():
            kwargs = {
                "dest": setting,
                "default": None,
                "help": f"Can also be specified via the {env} environment variable.",
            }
            if setting == "include_name_label":
                kwargs["action"] = "store_const"
                kwargs["const"] = True
            parser.add_argument(flag, **kwargs)
        return parser

    def load(self, argv: Optional[List[str]] = None) -> Config:
        """
        Load configuration from flags, environment and config file.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Validated Config

        Raises:
            ConfigError: If a required setting is missing or a value is invalid
        """
        args = self.build_parser().parse_args(argv)

        config_path = args.config or self.environ.get("CONFIG_PATH")
        file_config = self._load_file(config_path) if config_path else {}

        values = {}
        for setting, (flag, env) in SETTINGS.items():
            value = getattr(args, setting)
            if value is None:
                value = self.environ.get(env) or None
            if value is None:
                value = file_config.get(setting)
            if value is not None:
                values[setting] = value

        for setting in ("hubitat_address", "hubitat_access_token"):
            if not values.get(setting):
                flag, env = SETTINGS[setting]
                name = setting.replace("_", " ").replace("hubitat", "Hubitat")
                raise ConfigError(
                    f"{name} must be specified via the {flag} flag "
                    f"or the {env} environment variable."
                )

        config = Config(
            hubitat_address=str(values["hubitat_address"]).rstrip("/"),
            hubitat_access_token=str(values["hubitat_access_token"]),
            listen_address=str(values.get("listen_address", DEFAULT_LISTEN_ADDRESS)),
            include_name_label=parse_bool(
                values.get("include_name_label", False), "include_name_label"
            ),
            timeout=parse_timeout(values.get("timeout", DEFAULT_TIMEOUT)),
            log_level=str(values.get("log_level", DEFAULT_LOG_LEVEL)).upper(),
        )
        # Validate early so a bad address is fatal before serving
        parse_listen_address(config.listen_address)
        if not isinstance(logging.getLevelName(config.log_level), int):
            raise ConfigError(f"Invalid log level: {config.log_level!r}")
        return config

    def _load_file(self, path: str) -> Dict:
        """
        Load settings from a YAML config file.

        Raises:
            ConfigError: If the file cannot be read or is not a mapping
        """
        self.logger.info(f"Loading config from {path}")
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config file {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        unknown = set(data) - set(SETTINGS)
        if unknown:
            self.logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return data
