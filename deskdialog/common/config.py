"""Configuration file loading and management"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass
class BackendConfig:
    """Backend selection settings"""
    preferred: Optional[str] = None  # kdialog, zenity, or None to detect
    qdbus_command: str = "qdbus"


@dataclass
class NotifyConfig:
    """Notification helper settings"""
    app_name: str = "deskdialog"


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """Complete application configuration"""
    backend: BackendConfig = field(default_factory=BackendConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "config.yml",
        "~/.config/deskdialog/config.yml",
        "/etc/deskdialog/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Missing sections and keys take their dataclass defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object
        """
        defaults = Config()

        backend_data = data.get("backend") or {}
        preferred = backend_data.get("preferred")
        if preferred is not None:
            preferred = str(preferred).strip().lower()
            if preferred not in ("kdialog", "zenity"):
                raise ValueError(
                    f"backend.preferred must be 'kdialog' or 'zenity', got '{preferred}'"
                )
        backend = BackendConfig(
            preferred=preferred,
            qdbus_command=backend_data.get("qdbus_command", defaults.backend.qdbus_command),
        )

        notify_data = data.get("notify") or {}
        notify = NotifyConfig(
            app_name=notify_data.get("app_name", defaults.notify.app_name),
        )

        logging_data = data.get("logging") or {}
        logging = LoggingConfig(
            level=logging_data.get("level", defaults.logging.level),
            file=logging_data.get("file"),
            format=logging_data.get("format", defaults.logging.format),
        )

        return Config(backend=backend, notify=notify, logging=logging)

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, searches standard locations.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If config file not found
            ValueError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                raise FileNotFoundError(
                    f"Config file not found in standard locations: "
                    f"{ConfigLoader.DEFAULT_CONFIG_PATHS}"
                )

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configOrDefault_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration, falling back to defaults when no file exists

        An explicit file_path that does not exist still raises.

        Args:
            file_path: Optional path to config file

        Returns:
            Parsed or default Config object
        """
        if file_path is None and ConfigLoader.configFile_find() is None:
            return Config()
        return ConfigLoader.config_load(file_path)
