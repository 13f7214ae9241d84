"""Emission of snapshots as structured log records."""

import logging
from typing import Any, Optional

from ..utils.formatters import display_optional, format_fields
from .models import CompileInfo, CrateInfo, Info, SystemInfo

# Every record is emitted at this level
LEVEL = logging.DEBUG


def _event(log: logging.Logger, title: str, fields: dict[str, Any]) -> None:
    # Fields go on the record as a single attribute; LogRecord reserves
    # names such as "args" and "module".
    log.log(LEVEL, "%s %s", title, format_fields(fields), extra={"fields": fields})


def crate_fields(crate: CrateInfo) -> dict[str, Any]:
    return {
        "git_commit_hash": crate.commit_hash,
        "git_repo_dirty": crate.is_dirty,
        "crate_name": crate.package_name,
        "crate_version": crate.package_version,
        "bin_name": crate.binary_name,
    }


def target_fields(compile_info: CompileInfo) -> dict[str, Any]:
    return compile_info.target.model_dump()


def toolchain_fields(compile_info: CompileInfo) -> dict[str, Any]:
    return compile_info.toolchain.model_dump()


def system_fields(system: SystemInfo) -> dict[str, Any]:
    return {
        "hostname": display_optional(system.hostname),
        "os": system.os_description,
        "linux_distro": display_optional(system.linux_distro),
        "cpu_vendor": display_optional(system.cpu_vendor),
        "cpu_brand_string": display_optional(system.cpu_brand_string),
    }


def emit(info: Info, logger: Optional[logging.Logger] = None) -> None:
    """
    Emit a snapshot as six DEBUG log records.

    One record each for crate, target, toolchain and system information,
    then one carrying the command line and one carrying the recorded
    environment variables, each as a single repr-formatted field.

    Nothing is formatted when the logger is not enabled for DEBUG. The
    snapshot is left untouched and can be emitted again.

    Failures inside handlers (a closed stream, a full disk) are absorbed by
    :meth:`logging.Handler.handleError` and never reach the caller. Filters
    run before any handler, so an exception raised by a filter the caller
    installed on the logger propagates out of this function.

    Args:
        info: Snapshot to emit
        logger: Destination logger (default: this module's logger)
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    if not log.isEnabledFor(LEVEL):
        return

    _event(log, "Crate information:", crate_fields(info.crate_info))
    _event(log, "Target information:", target_fields(info.compile_info))
    _event(log, "Toolchain information:", toolchain_fields(info.compile_info))
    _event(log, "System information:", system_fields(info.system_info))
    _event(log, "Command line args:", {"args": repr(info.command_line)})
    _event(log, "Environment variables:", {"envvars": repr(info.envvars)})
