"""
dockdesk - reactive Docker inventory for desktop UIs.

This package keeps a cached, observable view of a local Docker daemon's
containers, images and volumes, refreshes it concurrently, and applies
start/stop requests followed by a container refresh.

Main Components:
  - backend.py: Docker API wrapper and record normalization
  - state.py: Observable resource store
  - refresh.py: Concurrent list refreshes
  - actions.py: Container start/stop with refresh
  - tasks.py: Background task runner
  - main.py: Session wiring and headless entry point
  - model.py: Data structures (ContainerRecord, ImageRecord, VolumeRecord)

Usage:
  python -m dockdesk

Dependencies:
  - docker>=7.0.0
  - PyYAML
  - Python 3.9+
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

__version__ = "0.1.0"

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def get_log_path() -> str:
    """
    Get the log file path following XDG Base Directory spec.

    Returns XDG_DATA_HOME/dockdesk/logs/dockdesk.log with fallback to /tmp.
    Creates directory if it doesn't exist.

    Returns:
        str: Absolute path to log file (/tmp/dockdesk.log as fallback)
    """
    # Try XDG_DATA_HOME first (Linux/macOS)
    xdg_data_home = os.environ.get('XDG_DATA_HOME')
    if not xdg_data_home:
        # Default fallback: ~/.local/share
        home = Path.home()
        xdg_data_home = home / '.local' / 'share'
    else:
        xdg_data_home = Path(xdg_data_home)

    log_dir = xdg_data_home / 'dockdesk' / 'logs'

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return str(log_dir / 'dockdesk.log')
    except (PermissionError, OSError):
        # Fallback to /tmp if permission denied
        return '/tmp/dockdesk.log'


def configure_logging(level: str = "INFO", file_path: Optional[str] = None,
                      max_size_mb: int = 10, backup_count: int = 5) -> logging.Handler:
    """
    Attach a rotating file handler to the package logger.

    Calling it again only updates the level; the handler already attached is
    returned and no second one is added.
    """
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for existing in package_logger.handlers:
        if isinstance(existing, RotatingFileHandler):
            return existing

    handler = RotatingFileHandler(
        file_path or get_log_path(),
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding='utf-8',
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return handler
