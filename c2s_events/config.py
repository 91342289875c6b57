"""
Client Configuration

ClientConfig, loading it from reporting_config.py, and logging setup.
"""

import importlib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import host

log = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "UnityGamesLauncher"
DEFAULT_TIMEOUT = 15.0
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings for one reporting client"""

    dev_key: str
    app_id: str
    app_version: str
    device_model: str
    os_version: str
    is_sandbox: bool = False
    client_name: str = DEFAULT_CLIENT_NAME
    timeout: float = DEFAULT_TIMEOUT
    install_path: Optional[str] = None

    def is_configured(self) -> bool:
        """Check if credentials are present"""
        return bool(self.dev_key and self.app_id)

    def __repr__(self) -> str:
        # dev_key is a secret
        return (
            f"ClientConfig(app_id={self.app_id!r}, app_version={self.app_version!r}, "
            f"is_sandbox={self.is_sandbox})"
        )


def load_config(app_version: str, module_name: str = "reporting_config") -> Optional[ClientConfig]:
    """
    Build a ClientConfig from the reporting_config module

    Device model and OS string come from the host when the module doesn't set them.

    Args:
        app_version: Current app version
        module_name: Importable config module (copy of reporting_config.example.py)

    Returns:
        ClientConfig, or None if the module is missing
    """
    try:
        config = importlib.import_module(module_name)
    except ImportError as e:
        log.warning("%s.py not found - reporting disabled: %s", module_name, e)
        return None

    return ClientConfig(
        dev_key=getattr(config, 'DEV_KEY', '') or '',
        app_id=getattr(config, 'APP_ID', '') or '',
        app_version=app_version,
        device_model=getattr(config, 'DEVICE_MODEL', None) or host.device_model(),
        os_version=getattr(config, 'OS_VERSION', None) or host.os_descriptor(),
        is_sandbox=bool(getattr(config, 'IS_SANDBOX', False)),
        client_name=getattr(config, 'CLIENT_NAME', DEFAULT_CLIENT_NAME),
        timeout=float(getattr(config, 'REQUEST_TIMEOUT', DEFAULT_TIMEOUT)),
        install_path=getattr(config, 'INSTALL_PATH', None),
    )


def is_debug_enabled(module_name: str = "reporting_config") -> bool:
    """Check REPORTING_DEBUG in the config module"""
    try:
        config = importlib.import_module(module_name)
    except ImportError:
        return False
    return bool(getattr(config, 'REPORTING_DEBUG', False))


def configure_logging(debug: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Attach console (and optionally debug file) handlers to the package logger

    Args:
        debug: Log at DEBUG level and mirror everything to a debug log file
        log_file: Debug log location (default: ~/Desktop/c2s_events_debug.log)

    Returns:
        The package logger
    """
    logger = logging.getLogger("c2s_events")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if not any(getattr(h, "_c2s_console", False) for h in logger.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        console._c2s_console = True
        logger.addHandler(console)

    if debug:
        path = Path(log_file) if log_file else Path.home() / "Desktop" / "c2s_events_debug.log"
        try:
            file_handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot open debug log %s: %s", path, e)
        else:
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)
            logger.debug("Debug logging to %s", path)

    return logger
