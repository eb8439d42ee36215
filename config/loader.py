"""Configuration loader for Codex Auth Chat

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file (path overridable with CODEX_CHAT_ENV_FILE)
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_FILE_VAR = "CODEX_CHAT_ENV_FILE"
TRUTHY = ("true", "1", "yes")


class ConfigLoader:
    """Handles loading configuration from the environment and a .env file"""

    def __init__(self, env_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to $CODEX_CHAT_ENV_FILE, then '.env' in the current directory.
        """
        env_path = env_path or os.getenv(ENV_FILE_VAR)
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        """Load environment variables from .env file if it exists"""
        if self.env_path.exists():
            # Real environment variables keep precedence over the file
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        The raw environment string is coerced to the type of ``default``:
        flags accept true/1/yes, timeouts and byte caps fall back to the
        default with a warning when they do not parse.

        Args:
            env_var: Environment variable name to check
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        raw = os.getenv(env_var)
        if raw is None:
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(default).expanduser())
            return default

        # bool is checked first since it is a subclass of int
        if isinstance(default, bool):
            return raw.strip().lower() in TRUTHY
        if isinstance(default, (int, float)):
            return self._parse_number(env_var, raw, default)
        return raw

    def _parse_number(self, env_var: str, raw: str, default: Union[int, float]) -> Union[int, float]:
        """Parse ``raw`` as the numeric type of ``default``"""
        kind = type(default)
        try:
            return kind(raw.strip())
        except ValueError:
            logger.warning(f"Failed to parse {env_var}={raw} as {kind.__name__}, using default: {default}")
            return default

    def get_path(self, env_var: str, default: Optional[str]) -> Optional[Path]:
        """Get a filesystem path setting with ``~`` expanded

        Blank environment values are treated as unset.

        Args:
            env_var: Environment variable name to check
            default: Default path string, or None for no default

        Returns:
            Expanded Path, or None when neither env nor default is set
        """
        env_value = os.getenv(env_var)
        if env_value is not None and env_value.strip():
            return Path(env_value.strip()).expanduser()
        if default is None:
            return None
        return Path(default).expanduser()


_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def reset_config_loader() -> None:
    """Drop the global ConfigLoader so the next call re-reads the .env file"""
    global _config_loader
    _config_loader = None
