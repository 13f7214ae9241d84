"""Generated build-facts module: rendering, writing and loading."""

import importlib
import importlib.util
import logging
from pathlib import Path
from typing import Optional, Union

from .capture import BuildFacts

logger = logging.getLogger(__name__)

BUILD_FACTS_NAME = "BUILD_FACTS"

MODULE_HEADER = '''\
"""Build facts captured by ``rummage capture``.

This file is generated. Re-run the capture step instead of editing it.
"""

from rummage import BuildFacts

'''


def render_build_module(facts: BuildFacts) -> str:
    """
    Render the source text of a generated build-facts module.

    The output only depends on ``facts``, so re-capturing an unchanged build
    produces an identical file.

    Args:
        facts: Captured build facts

    Returns:
        Python source defining ``BUILD_FACTS``
    """
    lines = [MODULE_HEADER, f"{BUILD_FACTS_NAME} = BuildFacts(\n"]
    for name, value in facts.model_dump().items():
        lines.append(f"    {name}={value!r},\n")
    lines.append(")\n")
    return "".join(lines)


def write_build_module(path: Union[str, Path], facts: BuildFacts) -> Path:
    """
    Write a generated build-facts module to disk.

    Args:
        path: Destination ``.py`` file
        facts: Captured build facts

    Returns:
        Path of the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_build_module(facts), encoding="utf-8")
    logger.info("Wrote build facts to %s", path)
    return path


def load_build_facts(module_name: str) -> Optional[BuildFacts]:
    """
    Import a generated module by dotted name and return its BUILD_FACTS.

    Args:
        module_name: Dotted module name, e.g. ``myapp._build_info``

    Returns:
        The captured BuildFacts, or None if the module does not exist
    """
    try:
        spec = importlib.util.find_spec(module_name)
    except ModuleNotFoundError:
        # Parent package missing
        spec = None
    if spec is None:
        logger.debug("Build facts module %s not found", module_name)
        return None

    module = importlib.import_module(module_name)
    facts = getattr(module, BUILD_FACTS_NAME, None)
    if not isinstance(facts, BuildFacts):
        raise TypeError(f"{module_name}.{BUILD_FACTS_NAME} is not a BuildFacts")
    return facts
