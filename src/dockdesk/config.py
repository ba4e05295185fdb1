"""
Configuration management for dockdesk.

This module provides configuration file support with YAML format and
default settings.

Features:
- YAML configuration file at ~/.config/dockdesk/config.yaml
- Default values with user overrides
- Daemon endpoint override (DOCKER_HOST still takes precedence)
- Initial refresh toggle
- Log level and location override

Architecture:
- ConfigManager: Main configuration interface
- Merges user config with defaults
- Provides typed access to settings
- Handles missing/invalid config gracefully
"""

import yaml
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

@dataclass
class DaemonConfig:
    """Docker daemon connection settings."""
    host: Optional[str] = None  # None for DOCKER_HOST / platform default
    initial_refresh: bool = True

@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_path: Optional[str] = None  # None for default
    max_size_mb: int = 10
    backup_count: int = 5

@dataclass
class AppConfig:
    """Main application configuration."""
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    logging: LogConfig = field(default_factory=LogConfig)

class ConfigManager:
    """Configuration manager with YAML file support."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".config" / "dockdesk"
        self.config_file = self.config_dir / "config.yaml"
        self._config: AppConfig = AppConfig()
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r') as f:
                    user_config = yaml.safe_load(f) or {}
                if not isinstance(user_config, dict):
                    raise ValueError("top-level value must be a mapping")

                # Merge with defaults
                self._config = self._merge_configs(AppConfig(), user_config)
                logger.debug(f"Loaded configuration from {self.config_file}")
            else:
                # Create default config file
                self.save_config()
                logger.info(f"Created default configuration at {self.config_file}")
        except Exception as e:
            logger.error(f"Failed to load config: {e}, using defaults")
            self._config = AppConfig()

    def save_config(self) -> None:
        """Save current configuration to YAML file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            config_dict = self._config_to_dict(self._config)
            with open(self.config_file, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            logger.debug(f"Saved configuration to {self.config_file}")
        except Exception as e:
            logger.error(f"Failed to save config: {e}")

    def get_config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def _merge_configs(self, default: AppConfig, user: Dict[str, Any]) -> AppConfig:
        """Merge user config with defaults."""
        if isinstance(user.get('daemon'), dict):
            self._merge_dataclass(default.daemon, user['daemon'])
        if isinstance(user.get('logging'), dict):
            self._merge_dataclass(default.logging, user['logging'])

        return default

    def _merge_dataclass(self, obj: Any, updates: Dict[str, Any]) -> None:
        """Merge updates into dataclass object."""
        for key, value in updates.items():
            if hasattr(obj, key):
                setattr(obj, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

    def _config_to_dict(self, config: AppConfig) -> Dict[str, Any]:
        """Convert config dataclass to dictionary."""
        return {
            'daemon': {
                'host': config.daemon.host,
                'initial_refresh': config.daemon.initial_refresh,
            },
            'logging': {
                'level': config.logging.level,
                'file_path': config.logging.file_path,
                'max_size_mb': config.logging.max_size_mb,
                'backup_count': config.logging.backup_count,
            }
        }

    def get_daemon_host(self) -> Optional[str]:
        """Get configured daemon endpoint, if any."""
        return self._config.daemon.host or None

    def should_refresh_on_start(self) -> bool:
        return bool(self._config.daemon.initial_refresh)

    def get_log_level(self) -> str:
        """Get configured log level."""
        return str(self._config.logging.level).upper()

    def get_custom_log_path(self) -> Optional[str]:
        """Get custom log file path if configured."""
        return self._config.logging.file_path

# Global config instance
config_manager = ConfigManager()
