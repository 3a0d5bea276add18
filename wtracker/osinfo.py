"""Operating system name and kernel version lookup."""

import platform
import subprocess
import sys


def os_name() -> str:
    """Return the lower-case operating system name, such as the kernel family."""
    return platform.system().lower()


def os_version() -> str:
    """Return the kernel release from ``uname -r``, or "" when unavailable."""
    if sys.platform == "win32":
        return ""
    try:
        result = subprocess.run(
            ["uname", "-r"], capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError):
        return ""
    return result.stdout.strip()