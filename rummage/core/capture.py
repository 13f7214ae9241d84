"""Build-time capture of toolchain, target and package facts."""

import logging
import os
import platform
import struct
import sys
import sysconfig
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..metadata.git import describe_revision
from .models import (
    UNKNOWN,
    CompileInfo,
    CrateInfo,
    PackageIdentity,
    RevisionInfo,
    TargetConfig,
    ToolchainVersion,
    format_semver,
)

logger = logging.getLogger(__name__)

# sysconfig flag -> feature name reported in target_features
INTERPRETER_FEATURES = [
    ("Py_DEBUG", "debug"),
    ("Py_GIL_DISABLED", "free-threading"),
    ("Py_TRACE_REFS", "trace-refs"),
    ("WITH_PYMALLOC", "pymalloc"),
    ("Py_ENABLE_SHARED", "shared"),
]


class BuildFacts(BaseModel):
    """
    Fixed table of facts resolved at build time.

    Instances are written into a generated module by ``rummage capture`` and
    handed back to :func:`rummage.info` at runtime. Every value is a plain
    string; missing values hold ``"unknown"``, or ``""`` for the segments
    that are only appended when present.
    """

    model_config = ConfigDict(frozen=True)

    build_profile: str = UNKNOWN
    host_triple: str = UNKNOWN
    target_triple: str = UNKNOWN
    target_family: str = UNKNOWN
    target_os: str = UNKNOWN
    target_arch: str = UNKNOWN
    target_pointer_width: str = UNKNOWN
    target_endian: str = UNKNOWN
    target_features: str = ""

    toolchain_major: str = UNKNOWN
    toolchain_minor: str = UNKNOWN
    toolchain_patch: str = UNKNOWN
    toolchain_pre: str = ""
    toolchain_build: str = ""
    toolchain_commit_hash: str = UNKNOWN
    toolchain_commit_date: str = UNKNOWN
    toolchain_codegen_version: str = UNKNOWN

    package_name: str = UNKNOWN
    package_version: str = UNKNOWN
    binary_name: str = UNKNOWN
    revision: str = Field(default="", description="Raw <hash>[-dirty] descriptor")

    def toolchain_version(self) -> ToolchainVersion:
        """Build the ToolchainVersion record from the captured table."""
        return ToolchainVersion(
            semantic_version=format_semver(
                self.toolchain_major,
                self.toolchain_minor,
                self.toolchain_patch,
                pre=self.toolchain_pre,
                build=self.toolchain_build,
            ),
            commit_hash=self.toolchain_commit_hash,
            commit_date=self.toolchain_commit_date,
            backend_codegen_version=self.toolchain_codegen_version,
        )

    def target_config(self) -> TargetConfig:
        """Build the TargetConfig record from the captured table."""
        return TargetConfig(
            build_profile=self.build_profile,
            host_triple=self.host_triple,
            target_triple=self.target_triple,
            target_family=self.target_family,
            target_os=self.target_os,
            target_arch=self.target_arch,
            pointer_width=self.target_pointer_width,
            endianness=self.target_endian,
            target_features=self.target_features,
        )

    def compile_info(self) -> CompileInfo:
        """Build the CompileInfo record from the captured table."""
        return CompileInfo(
            toolchain=self.toolchain_version(), target=self.target_config()
        )

    def crate_info(self) -> CrateInfo:
        """Build the CrateInfo record from the captured identity and revision."""
        identity = PackageIdentity(
            package_name=self.package_name,
            package_version=self.package_version,
            binary_name=self.binary_name,
        )
        return CrateInfo.combine(RevisionInfo.from_descriptor(self.revision), identity)


def _or_unknown(value: object) -> str:
    if value is None or value == "":
        return UNKNOWN
    return str(value)


def _config_flag(name: str) -> bool:
    try:
        return bool(int(sysconfig.get_config_var(name) or 0))
    except (TypeError, ValueError):
        return False


def interpreter_features() -> str:
    """Comma-joined list of interpreter build features enabled in sysconfig."""
    return ",".join(
        feature for var, feature in INTERPRETER_FEATURES if _config_flag(var)
    )


def _toolchain_pre() -> str:
    if sys.version_info.releaselevel == "final":
        return ""
    return f"{sys.version_info.releaselevel}.{sys.version_info.serial}"


def collect_toolchain_facts() -> dict[str, str]:
    """Resolve the interpreter version facts of the running Python."""
    return {
        "toolchain_major": str(sys.version_info.major),
        "toolchain_minor": str(sys.version_info.minor),
        "toolchain_patch": str(sys.version_info.micro),
        "toolchain_pre": _toolchain_pre(),
        "toolchain_build": getattr(sys, "abiflags", ""),
        "toolchain_commit_hash": _or_unknown(platform.python_revision()),
        "toolchain_commit_date": _or_unknown(platform.python_build()[1]),
        "toolchain_codegen_version": _or_unknown(platform.python_compiler()),
    }


def collect_target_facts() -> dict[str, str]:
    """Resolve the target configuration of the running Python."""
    return {
        "build_profile": "debug" if _config_flag("Py_DEBUG") else "release",
        "host_triple": _or_unknown(sysconfig.get_config_var("BUILD_GNU_TYPE")),
        "target_triple": _or_unknown(sysconfig.get_config_var("HOST_GNU_TYPE")),
        "target_family": _or_unknown(os.name),
        "target_os": _or_unknown(sys.platform),
        "target_arch": _or_unknown(platform.machine()),
        "target_pointer_width": str(struct.calcsize("P") * 8),
        "target_endian": _or_unknown(sys.byteorder),
        "target_features": interpreter_features(),
    }


def collect_build_facts(
    package_name: Optional[str] = None,
    package_version: Optional[str] = None,
    binary_name: Optional[str] = None,
    revision: Optional[str] = None,
    source_path: Union[str, Path] = ".",
    strict_revision: bool = False,
) -> BuildFacts:
    """
    Resolve every build-time fact into a BuildFacts table.

    Args:
        package_name: Name of the host package
        package_version: Version of the host package
        binary_name: Name of the executable the host ships
        revision: Raw ``<hash>[-dirty]`` descriptor; described from git
            at ``source_path`` when omitted
        source_path: Git working tree of the host package
        strict_revision: Fail instead of recording an empty revision when
            git cannot describe ``source_path``

    Returns:
        BuildFacts instance

    Raises:
        RevisionUnavailableError: Only when ``strict_revision`` is True
    """
    if revision is None:
        revision = describe_revision(source_path, strict=strict_revision)

    facts = BuildFacts(
        **collect_target_facts(),
        **collect_toolchain_facts(),
        package_name=_or_unknown(package_name),
        package_version=_or_unknown(package_version),
        binary_name=_or_unknown(binary_name),
        revision=revision,
    )
    logger.debug("Captured build facts: %s", facts)
    return facts
