"""
Configuration Service

Loads the optional JSON configuration file for ngimport.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger("NgImport.ConfigService")

DEFAULT_CONFIG_NAME = ".ngimport.json"


class ConfigService:
    """
    Service class for configuration management.

    Provides:
    - Configuration loading (a missing file is an empty config)
    - Dot-notation lookups
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config service.

        Args:
            config_path: Path to config file (defaults to ./.ngimport.json)
        """
        if config_path is None:
            config_path = Path.cwd() / DEFAULT_CONFIG_NAME

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Configuration dictionary (empty if the file does not exist)

        Raises:
            ValueError: If config file is invalid JSON or not an object
        """
        if not self.config_path.exists():
            logger.debug(f"No config file at: {self.config_path}")
            self._config = {}
            return {}

        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing {self.config_path}: {e}")
            raise ValueError(
                f"Error parsing {self.config_path}: {e}\n"
                "Please ensure the config file is valid JSON."
            )

        if not isinstance(data, dict):
            raise ValueError(f"{self.config_path} must contain a JSON object")

        self._config = data
        logger.info(f"Configuration loaded from {self.config_path}")
        return self._config.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key (supports dot notation: "schematic.decorator_name")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value if value is not None else default
