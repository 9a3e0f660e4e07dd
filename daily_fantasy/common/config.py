"""Configuration management using YAML files and environment variables."""
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:52.0) Gecko/20100101 Firefox/52.0"
)


class FanDuelConfig(BaseModel):
    """FanDuel credentials and HTTP settings."""
    username: str = ""
    password: str = ""
    timeout: float = 30.0  # Request timeout in seconds
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)


class Config(BaseModel):
    """Main application configuration."""
    fanduel: FanDuelConfig = Field(default_factory=FanDuelConfig)

    # General settings
    log_level: str = "INFO"
    debug: bool = False  # Timestamped diagnostic logging to stdout

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Load configuration from YAML file and environment variables.

        Args:
            config_path: Path to settings.yaml. Defaults to config/settings.yaml

        Returns:
            Loaded Config instance
        """
        if config_path is None:
            config_path = str(Path(__file__).parent.parent.parent / "config" / "settings.yaml")

        config_data = {}

        # Load from YAML if exists
        if Path(config_path).exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
            logger.info(f"Loaded config from {config_path}")
        else:
            logger.warning(f"Config file not found: {config_path}, using defaults")

        # Override with environment variables
        config_data = cls._apply_env_overrides(config_data)

        return cls(**config_data)

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Override config values with environment variables.

        Environment variable format: DFS_SECTION_KEY (e.g., DFS_FANDUEL_USERNAME).
        DEBUG is honoured as-is to match the usual debug toggle.
        """
        env_mappings = {
            "DFS_FANDUEL_USERNAME": ("fanduel", "username"),
            "DFS_FANDUEL_PASSWORD": ("fanduel", "password"),
            "DFS_LOG_LEVEL": ("log_level",),
            "DEBUG": ("debug",),
        }

        for env_var, path in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Navigate to nested key and set value
                current = config_data
                for key in path[:-1]:
                    current = current.setdefault(key, {})

                # Any non-empty DEBUG value switches diagnostics on
                if env_var == "DEBUG":
                    value = bool(value)

                current[path[-1]] = value
                logger.debug(f"Config override from {env_var}")

        return config_data

    def save(self, config_path: Optional[str] = None) -> None:
        """Save current configuration to YAML file.

        Args:
            config_path: Destination path. Defaults to config/settings.yaml
        """
        if config_path is None:
            config_path = str(Path(__file__).parent.parent.parent / "config" / "settings.yaml")

        # Don't save sensitive data
        config_dict = self.model_dump()
        config_dict["fanduel"]["password"] = ""

        with open(config_path, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Config saved to {config_path}")


# Singleton instance
_config_instance: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """Get or load the configuration singleton.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config.load(config_path)
    return _config_instance


def reload_config(config_path: Optional[str] = None) -> Config:
    """Force reload configuration from file.

    Args:
        config_path: Path to config file

    Returns:
        Newly loaded Config instance
    """
    global _config_instance
    _config_instance = Config.load(config_path)
    return _config_instance
