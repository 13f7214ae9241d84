"""Git revision metadata collection."""

import logging
import subprocess
from pathlib import Path
from typing import Union

from ..core.models import RevisionInfo
from ..exceptions import RevisionUnavailableError

logger = logging.getLogger(__name__)

# Never match a tag, always print a hash, full length, mark modified trees
DESCRIBE_ARGS = [
    "describe",
    "--always",
    "--abbrev=0",
    "--match",
    "NOT A TAG",
    "--dirty=-dirty",
]

GIT_TIMEOUT_SECONDS = 5


def describe_revision(
    source_path: Union[str, Path] = ".",
    strict: bool = False,
    fallback: str = "",
) -> str:
    """
    Describe the current git revision of a source tree.

    Args:
        source_path: Directory inside the git working tree
        strict: Raise instead of returning ``fallback`` when git cannot
            describe the tree
        fallback: Descriptor returned in best-effort mode when git fails

    Returns:
        Raw descriptor of the form ``<hash>[-dirty]``

    Raises:
        RevisionUnavailableError: Only when ``strict`` is True
    """
    try:
        result = subprocess.run(
            ["git", *DESCRIBE_ARGS],
            cwd=source_path,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        return _unavailable(f"git could not be run: {e}", strict, fallback)

    descriptor = result.stdout.strip()
    if result.returncode != 0 or not descriptor:
        reason = result.stderr.strip() or f"git exited with {result.returncode}"
        return _unavailable(reason, strict, fallback)

    return descriptor


def _unavailable(reason: str, strict: bool, fallback: str) -> str:
    if strict:
        raise RevisionUnavailableError(f"Cannot describe git revision: {reason}")
    logger.debug("Git revision unavailable, using %r: %s", fallback, reason)
    return fallback


class GitRevisionCollector:
    """Collects the revision of a git working tree."""

    def __init__(self, source_path: Union[str, Path] = ".", strict: bool = False):
        """
        Initialize collector.

        Args:
            source_path: Directory inside the git working tree
            strict: Raise RevisionUnavailableError instead of falling back
        """
        self.source_path = Path(source_path)
        self.strict = strict

    def describe(self) -> str:
        """Return the raw ``<hash>[-dirty]`` descriptor."""
        return describe_revision(self.source_path, strict=self.strict)

    def collect(self) -> RevisionInfo:
        """Collect revision information."""
        return RevisionInfo.from_descriptor(self.describe())
