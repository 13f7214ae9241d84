"""Rummage - diagnostic snapshots of build and runtime facts.

Usage:
    # At build/release time, from the host package's source tree
    $ rummage capture myapp/_build_info.py --package-name myapp \\
        --package-version 1.2.0 --binary-name myapp

    # At runtime
    import rummage
    from myapp._build_info import BUILD_FACTS

    rummage.info(BUILD_FACTS).with_envvars(["HOME", "LANG"]).log_debug()
"""

__version__ = "0.1.0"

from .core.assembler import info
from .core.capture import BuildFacts, collect_build_facts
from .core.codegen import load_build_facts, render_build_module, write_build_module
from .core.emitter import emit
from .core.models import (
    CompileInfo,
    CpuIdentity,
    CrateInfo,
    Info,
    PackageIdentity,
    RevisionInfo,
    SystemInfo,
    TargetConfig,
    ToolchainVersion,
    format_semver,
)
from .exceptions import RevisionUnavailableError, RummageError

__all__ = [
    # Primary API
    "info",
    "emit",
    "collect_build_facts",
    "write_build_module",
    "render_build_module",
    "load_build_facts",
    "format_semver",
    # Exceptions
    "RummageError",
    "RevisionUnavailableError",
    # Models
    "BuildFacts",
    "Info",
    "CrateInfo",
    "RevisionInfo",
    "PackageIdentity",
    "CompileInfo",
    "ToolchainVersion",
    "TargetConfig",
    "SystemInfo",
    "CpuIdentity",
]
