"""Snapshot assembly."""

from typing import Optional

from ..metadata.process import read_command_line
from ..metadata.system import SystemInfoCollector
from .capture import BuildFacts
from .models import CompileInfo, CrateInfo, Info


def gather_crate_info(facts: BuildFacts) -> CrateInfo:
    """Revision and identity of the host package, from its captured facts."""
    return facts.crate_info()


def gather_compile_info(facts: BuildFacts) -> CompileInfo:
    """Toolchain and target configuration, from the captured facts."""
    return facts.compile_info()


def info(
    build_facts: Optional[BuildFacts] = None,
    *,
    system_collector: Optional[SystemInfoCollector] = None,
) -> Info:
    """
    Assemble a fresh snapshot of build-time and runtime facts.

    Nothing is cached: the command line and system information are queried
    again on every call.

    Args:
        build_facts: Facts written by ``rummage capture`` into the host
            package. Without them every build-time field holds its sentinel.
        system_collector: Collector for runtime system information
            (default: query the live host)

    Returns:
        Info snapshot with no environment variables recorded yet
    """
    if build_facts is None:
        build_facts = BuildFacts()
    if system_collector is None:
        system_collector = SystemInfoCollector()

    return Info(
        crate_info=gather_crate_info(build_facts),
        compile_info=gather_compile_info(build_facts),
        system_info=system_collector.collect(),
        command_line=read_command_line(),
    )
