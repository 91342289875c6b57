"""
Host Environment

Device model, OS descriptor and install timestamp supplied by the running machine.
"""

import os
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


def device_model() -> str:
    """Best-effort hardware description, e.g. "Windows AMD64" """
    return f"{platform.system()} {platform.machine()}".strip()


def os_descriptor() -> str:
    """
    User-facing OS string, e.g. "Windows 10 (10.0.19045) 64bit"

    The collector only receives a sanitized form of this (see payload.sanitize_os_version);
    the raw string goes into the User-Agent.
    """
    os_name = platform.system()
    bits = platform.architecture()[0]
    if os_name == "Darwin":
        mac_ver = platform.mac_ver()[0]  # e.g., "15.4"
        return f"Mac OS X {mac_ver or platform.release()}"
    if os_name == "Windows":
        return f"Windows {platform.release()} ({platform.version()}) {bits}"
    return f"{os_name} {platform.release()} {bits}"


def default_install_path() -> str:
    """Directory of the running executable (PyInstaller) or entry script"""
    if getattr(sys, 'frozen', False):
        return os.path.dirname(sys.executable)
    return os.path.dirname(os.path.abspath(sys.argv[0] or "."))


def install_time(path: Optional[str] = None) -> Optional[datetime]:
    """
    Creation time of the install directory as an aware UTC datetime

    Args:
        path: Install directory (default: default_install_path())

    Returns:
        Creation time, or None if the path doesn't exist
    """
    target = Path(path or default_install_path())
    try:
        stat = target.stat()
    except FileNotFoundError:
        return None
    # st_birthtime: macOS/BSD, Windows on 3.12+; st_ctime is creation time on older Windows
    created = getattr(stat, 'st_birthtime', None) or stat.st_ctime
    return datetime.fromtimestamp(created, tz=timezone.utc)
