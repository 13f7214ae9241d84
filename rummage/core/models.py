"""Snapshot schema definitions and serialization for rummage."""

import logging
from collections.abc import Iterable
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..metadata.process import read_envvar

UNKNOWN = "unknown"
OS_QUERY_FAILED = "<failed to query OS information>"
NOT_AVAILABLE = "<failed to get>"

DIRTY_SUFFIX = "-dirty"


def format_semver(
    major: Any, minor: Any, patch: Any, pre: str = "", build: str = ""
) -> str:
    """
    Format a version as ``major.minor.patch[-pre][+build]``.

    The pre-release and build segments are only appended when non-empty.

    Examples:
        >>> format_semver(3, 12, 1)
        '3.12.1'
        >>> format_semver(1, 0, 0, pre="beta.1")
        '1.0.0-beta.1'
        >>> format_semver(1, 0, 0, build="20240101")
        '1.0.0+20240101'
    """
    version = f"{major}.{minor}.{patch}"
    if pre:
        version += f"-{pre}"
    if build:
        version += f"+{build}"
    return version


class _Record(BaseModel):
    """Base for immutable snapshot records."""

    model_config = ConfigDict(frozen=True)


class RevisionInfo(_Record):
    """VCS revision of the package that requested the snapshot."""

    commit_hash: str = Field(..., description="Commit hash without dirty suffix")
    is_dirty: bool = Field(..., description="Whether the working tree was modified")

    @classmethod
    def from_descriptor(cls, descriptor: Optional[str]) -> "RevisionInfo":
        """
        Split a raw ``<hash>[-dirty]`` descriptor.

        Args:
            descriptor: Output of the revision provider (may be empty)

        Returns:
            RevisionInfo instance
        """
        descriptor = descriptor or ""
        is_dirty = descriptor.endswith(DIRTY_SUFFIX)
        if is_dirty:
            descriptor = descriptor[: -len(DIRTY_SUFFIX)]
        return cls(commit_hash=descriptor, is_dirty=is_dirty)


class PackageIdentity(_Record):
    """Name, version and binary name of the package that requested the snapshot."""

    package_name: str = Field(default=UNKNOWN, description="Package name")
    package_version: str = Field(default=UNKNOWN, description="Package version")
    binary_name: str = Field(default=UNKNOWN, description="Executable name")

    @field_validator("package_name", "package_version", "binary_name", mode="before")
    @classmethod
    def default_to_unknown(cls, v: Optional[str]) -> str:
        """Replace missing values with the unknown sentinel."""
        return v or UNKNOWN


class CrateInfo(_Record):
    """Revision and identity of the package that requested the snapshot."""

    commit_hash: str
    is_dirty: bool
    package_name: str = UNKNOWN
    package_version: str = UNKNOWN
    binary_name: str = UNKNOWN

    @classmethod
    def combine(cls, revision: RevisionInfo, identity: PackageIdentity) -> "CrateInfo":
        """Merge a revision and a package identity into one record."""
        return cls(**revision.model_dump(), **identity.model_dump())


class ToolchainVersion(_Record):
    """Interpreter that the build facts were captured with."""

    semantic_version: str = Field(..., description="major.minor.patch[-pre][+build]")
    commit_hash: str = Field(default=UNKNOWN, description="Interpreter source revision")
    commit_date: str = Field(default=UNKNOWN, description="Interpreter build date")
    backend_codegen_version: str = Field(
        default=UNKNOWN, description="C compiler that built the interpreter"
    )


class TargetConfig(_Record):
    """Platform configuration captured at build time."""

    build_profile: str = UNKNOWN
    host_triple: str = UNKNOWN
    target_triple: str = UNKNOWN
    target_family: str = UNKNOWN
    target_os: str = UNKNOWN
    target_arch: str = UNKNOWN
    pointer_width: str = UNKNOWN
    endianness: str = UNKNOWN
    target_features: str = Field(default="", description="Comma-joined feature list")


class CompileInfo(_Record):
    """Toolchain and target configuration."""

    toolchain: ToolchainVersion
    target: TargetConfig


class CpuIdentity(_Record):
    """CPU vendor and brand string."""

    vendor: Optional[str] = None
    brand_string: Optional[str] = None


class SystemInfo(_Record):
    """Runtime information about the host actually running the program."""

    hostname: Optional[str] = None
    os_description: str = OS_QUERY_FAILED
    linux_distro: Optional[str] = None
    cpu_vendor: Optional[str] = None
    cpu_brand_string: Optional[str] = None


class Info(BaseModel):
    """
    Top level snapshot returned by :func:`rummage.info`.

    Example:
        >>> rummage.info(BUILD_FACTS).with_envvars(["HOME", "PATH"]).log_debug()

    No field can be reassigned once the snapshot exists. ``envvars`` only
    grows, in place, through :meth:`with_envvar` and :meth:`with_envvars`.
    """

    crate_info: CrateInfo
    compile_info: CompileInfo
    system_info: SystemInfo
    command_line: list[str] = Field(
        default_factory=list, description="Full command line, program name first"
    )
    envvars: dict[str, Optional[str]] = Field(
        default_factory=dict, description="Explicitly gathered environment variables"
    )

    def __setattr__(self, name: str, value: Any) -> None:
        if name in type(self).model_fields:
            raise AttributeError(f"{name} is fixed once the snapshot is assembled")
        super().__setattr__(name, value)

    def with_envvar(self, name: str) -> "Info":
        """
        Add the current value of an environment variable to the snapshot.

        Unset variables are recorded as ``None``. Adding the same name again
        replaces the earlier entry.

        Args:
            name: Environment variable name

        Returns:
            This snapshot, for chaining
        """
        self.envvars[name] = read_envvar(name)
        return self

    def with_envvars(self, names: Iterable[str]) -> "Info":
        """Add several environment variables, one after the other, in order."""
        for name in names:
            self.with_envvar(name)
        return self

    def log_debug(self, logger: Optional[logging.Logger] = None) -> None:
        """Emit the snapshot as DEBUG log records. See :func:`rummage.core.emitter.emit`."""
        from .emitter import emit

        emit(self, logger=logger)

    def to_yaml(self) -> str:
        """
        Serialize snapshot to YAML string.

        Returns:
            YAML string representation
        """
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def to_json(self, indent: int = 2) -> str:
        """
        Serialize snapshot to JSON string.

        Args:
            indent: JSON indentation level

        Returns:
            JSON string representation
        """
        return self.model_dump_json(indent=indent)
