"""Application settings singleton - single source of truth for configuration

This module provides a singleton Settings class that consolidates:
1. Backend protocol constants (binary names, progress line protocol)
2. Environment variable names consulted during backend detection
3. Runtime configuration from config.yml

Usage:
    from deskdialog.common.settings import settings

    config = ConfigLoader.configOrDefault_load()
    settings.initialize(config)

    qdbus = settings.config.backend.qdbus_command
"""

from typing import Optional

from deskdialog.common.config import Config


class Settings:
    """Singleton settings manager combining config.yml and protocol constants"""

    _instance: Optional["Settings"] = None

    def __new__(cls) -> "Settings":
        """Ensure only one Settings instance exists"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize settings singleton (only runs once)"""
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._config: Optional[Config] = None

    def initialize(self, config: Config) -> None:
        """
        Initialize with loaded configuration

        Args:
            config: Loaded configuration
        """
        self._config = config

    # =========================================================================
    # Binaries
    # =========================================================================

    KDIALOG_BINARY: str = "kdialog"
    ZENITY_BINARY: str = "zenity"
    NOTIFY_BINARY: str = "notify-send"
    LOCATE_BINARY: str = "whereis"
    RELAY_SHELL: str = "sh"

    # =========================================================================
    # Environment
    # =========================================================================

    PREFERRED_ENV: str = "DESKDIALOG_PREFERRED"
    """Selects a backend when both binaries are installed"""

    DESKTOP_ENV: str = "XDG_CURRENT_DESKTOP"

    KDE_DESKTOPS: frozenset = frozenset({"kde", "lxqt", "trinity"})
    GTK_DESKTOPS: frozenset = frozenset(
        {"gnome", "gtk", "unity", "xfce", "cinnamon", "mate", "budgie", "pantheon"}
    )

    # =========================================================================
    # Zenity progress relay
    # =========================================================================

    ZENITY_PROGRESS_SCALE: int = 100
    """zenity --progress always runs on a 0..100 scale"""

    PROGRESS_SENTINEL: str = "done"
    """Written to the completion FIFO when zenity exits"""

    PROGRESS_LABEL_PREFIX: str = "# "
    """zenity reads lines starting with '#' as label updates"""

    FIFO_DIR_PREFIX: str = "deskdialog-"

    # =========================================================================
    # Zenity forms and lists
    # =========================================================================

    FORM_SEPARATOR: str = "|"
    LIST_SEPARATOR: str = "\n"

    PASSWORD_MISMATCH_TEXT: str = "Passwords did not match"
    NEW_PASSWORD_TEXT: str = "Enter a New Password"

    @property
    def config(self) -> Config:
        """Get loaded configuration object"""
        if self._config is None:
            raise RuntimeError("Settings not initialized. Call settings.initialize(config) first.")
        return self._config

    def isInitialized_check(self) -> bool:
        """Return True once a configuration has been loaded"""
        return self._config is not None


# Global singleton instance
settings = Settings()
"""Global settings singleton instance

Import this anywhere in the application:
    from deskdialog.common.settings import settings
"""
