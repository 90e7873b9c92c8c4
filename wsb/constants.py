"""
Constants for the WSB tracker.

Note: These constants serve as default fallback values.
Actual values are loaded from .wsb/config.json at runtime via ConfigManager.
"""
from pathlib import Path
from typing import Any, Optional
import json

from wsb.exceptions import ConfigurationError

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

# Identifier text format (not configurable)
TASK_ID_SEPARATOR = "."

# Status constants (not configurable)
STATUS_IN_PROGRESS = "InProgress"
STATUS_DONE = "Done"

# Status glyph defaults
DEFAULT_DONE_GLYPH = "✔"
DEFAULT_IN_PROGRESS_GLYPH = "✗"

# Validation messages
VALIDATION_NAME_REQUIRED = "Name is required for all tasks."

# Storage defaults
DEFAULT_WSB_DIR = ".wsb"
DEFAULT_STORE_FILE_NAME = "project.json"
STORE_FORMAT_VERSION = 1

# Logging defaults
DEFAULT_LOG_FILE_NAME = "wsb.log"

# Tree text connectors (not configurable)
TREE_BRANCH = "├─ "
TREE_LAST_BRANCH = "└─ "
TREE_CONTINUATION = "│  "
TREE_BLANK = "   "


# =============================================================================
# Config Loader
# Load values from .wsb/config.json at runtime.
# =============================================================================

_config_manager_instance: Optional['ConfigManager'] = None


class ConfigManager:
    """
    Manages loading configuration from a config.json file with fallback to defaults.

    Usage:
        # With default path (.wsb/config.json)
        config = ConfigManager()
        glyph = config.get_str('done_glyph', DEFAULT_DONE_GLYPH)

        # With custom path
        config = ConfigManager(config_path=Path("/custom/path/config.json"))
    """

    def __init__(self, config_path: Optional[Path] = None, wsb_dir: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Direct path to config.json file. Takes precedence over wsb_dir.
            wsb_dir: Path to .wsb/ directory. Config path will be wsb_dir/config.json.
        """
        self._config: Optional[dict] = None

        if config_path is not None:
            self._config_path = config_path
        elif wsb_dir is not None:
            self._config_path = wsb_dir / "config.json"
        else:
            self._config_path = Path(DEFAULT_WSB_DIR) / "config.json"

    def _load_config(self) -> dict:
        """Load config from config.json file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    config = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError, OSError):
                config = {}
            if not isinstance(config, dict):
                raise ConfigurationError(
                    f"{self._config_path} must hold a JSON object, got {type(config).__name__}."
                )
            self._config = config
        else:
            self._config = {}

        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Default value if key not found.

        Returns:
            Config value or default.
        """
        config = self._load_config()
        return config.get(key, default)

    def get_str(self, key: str, default: str) -> str:
        """Get a string config value with fallback."""
        value = self.get(key, default)
        return str(value) if value is not None else default

    def reload(self) -> dict:
        """Force reload of config from disk."""
        self._config = None
        return self._load_config()

    @property
    def config_path(self) -> Path:
        """Get the config file path."""
        return self._config_path


def get_config_manager(reset: bool = False) -> ConfigManager:
    """
    Get the singleton ConfigManager instance with default path.

    Args:
        reset: If True, reset the singleton and create a new instance.

    Returns:
        ConfigManager singleton instance.
    """
    global _config_manager_instance
    if _config_manager_instance is None or reset:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance


def set_config_manager(manager: ConfigManager) -> None:
    """Install a ConfigManager as the singleton (used when --wsb-dir is given)."""
    global _config_manager_instance
    _config_manager_instance = manager


def reset_config_manager() -> None:
    """Reset the singleton ConfigManager instance (useful for testing)."""
    global _config_manager_instance
    _config_manager_instance = None


# Convenience functions for common config access
def get_done_glyph() -> str:
    """Get the glyph shown for done tasks."""
    return get_config_manager().get_str('done_glyph', DEFAULT_DONE_GLYPH)


def get_in_progress_glyph() -> str:
    """Get the glyph shown for tasks still in progress."""
    return get_config_manager().get_str('in_progress_glyph', DEFAULT_IN_PROGRESS_GLYPH)


def get_store_file_name() -> str:
    """Get the store file name from config or default."""
    return get_config_manager().get_str('store_file_name', DEFAULT_STORE_FILE_NAME)


def get_log_dir() -> Optional[str]:
    """Get the log directory from config; None disables file logging."""
    return get_config_manager().get("log_dir")
