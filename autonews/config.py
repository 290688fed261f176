"""
Configuration management for autonews.
"""
import copy
import os
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = 'AUTONEWS_'

# Default configuration
DEFAULT_CONFIG = {
    "api": {
        "base_url": "https://webapi.autodoc.ru",
        "page_size": 15
    },
    "feed": {
        "prefetch_threshold": 5
    },
    "http": {
        "timeout_seconds": 30,
        "max_concurrent": 6
    },
    "images": {
        "cache_capacity": 256,
        "prefetch": True,
        "max_concurrent": None
    },
    "detail": {
        "mode": "browser"
    },
    "display": {
        "screen_size": 5
    },
    "logging": {
        "level": "INFO",
        "file": None
    }
}

class Config:
    """
    Configuration manager for autonews.
    """
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the Config.

        Args:
            config_path: Path to a YAML or JSON configuration file
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Load configuration from file or use defaults.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            try:
                path = Path(self.config_path)
                if path.exists():
                    if path.suffix.lower() in ['.yaml', '.yml']:
                        with open(path, 'r') as f:
                            user_config = yaml.safe_load(f) or {}
                    elif path.suffix.lower() == '.json':
                        with open(path, 'r') as f:
                            user_config = json.load(f)
                    else:
                        raise ValueError(f"Unsupported config file format: {path.suffix}")

                    # Update config with user settings
                    self._update_dict(config, user_config)
                else:
                    logger.warning(f"Config file {self.config_path} not found, using defaults")
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.error(f"Error loading config from {self.config_path}: {e}")
                logger.error("Using default configuration")

        # Override with environment variables
        self._override_from_env(config)

        return config

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """
        Recursively update a dictionary.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _override_from_env(self, config: Dict, prefix: str = ENV_PREFIX) -> None:
        """
        Override configuration with environment variables.

        AUTONEWS_<SECTION>_<KEY> sets config[section][key], so
        AUTONEWS_API_BASE_URL sets api.base_url. Variables naming an unknown
        section are ignored.

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix):].lower()
            section, _, option = name.partition('_')
            if not option or not isinstance(config.get(section), dict):
                continue

            try:
                # Try to parse as JSON
                config[section][option] = json.loads(value)
            except json.JSONDecodeError:
                # If not valid JSON, use as string
                config[section][option] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'api.base_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        parts = key.split('.')
        current = self.config

        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def save(self, path: Optional[str] = None) -> bool:
        """
        Save the current configuration to a file.

        Args:
            path: Path to save the configuration to

        Returns:
            True if successful, False otherwise
        """
        save_path = path or self.config_path
        if not save_path:
            logger.error("No path specified for saving configuration")
            return False

        try:
            path = Path(save_path)
            if path.suffix.lower() in ['.yaml', '.yml']:
                with open(path, 'w') as f:
                    yaml.dump(self.config, f, default_flow_style=False)
            elif path.suffix.lower() == '.json':
                with open(path, 'w') as f:
                    json.dump(self.config, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

            return True
        except (OSError, ValueError) as e:
            logger.error(f"Error saving config to {save_path}: {e}")
            return False


# Global configuration instance
config = Config(os.getenv('AUTONEWS_CONFIG_PATH'))
