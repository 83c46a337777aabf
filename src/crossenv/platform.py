"""Host platform detection."""

import os
import sys


def is_windows() -> bool:
    """Return True on Windows, including Cygwin and MSYS shells."""
    if sys.platform == "win32":
        return True
    return os.environ.get("OSTYPE", "").startswith(("cygwin", "msys"))
