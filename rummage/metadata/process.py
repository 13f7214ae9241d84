"""Process-level metadata: command line and environment variables."""

import os
import sys
from typing import Optional


def read_envvar(name: str) -> Optional[str]:
    """
    Read an environment variable.

    Args:
        name: Variable name

    Returns:
        The value if set (an empty string counts as set), otherwise None
    """
    return os.environ.get(name)


def read_command_line() -> list[str]:
    """Return a copy of the process arguments, program name first."""
    return list(sys.argv)
