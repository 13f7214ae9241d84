"""System metadata collection."""

import logging
import platform
import socket
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from ..core.models import OS_QUERY_FAILED, CpuIdentity, SystemInfo

logger = logging.getLogger(__name__)

PROC_CPUINFO = Path("/proc/cpuinfo")
SYSCTL_TIMEOUT_SECONDS = 5
WINDOWS_CPU_KEY = r"HARDWARE\DESCRIPTION\System\CentralProcessor\0"
BSD_PLATFORMS = ("freebsd", "openbsd", "netbsd", "dragonfly")


def query_hostname() -> Optional[str]:
    """Return the host name, or None if it cannot be determined."""
    try:
        hostname = socket.gethostname()
    except OSError as e:
        logger.debug("Hostname query failed: %s", e)
        return None
    return hostname or None


def query_os_description() -> str:
    """
    Describe the operating system as ``"<type> <release>"``.

    Returns:
        e.g. "Linux 6.1.0", or OS_QUERY_FAILED if either part is unavailable
    """
    try:
        os_type = platform.system()
        os_release = platform.release()
    except OSError as e:
        logger.debug("OS query failed: %s", e)
        return OS_QUERY_FAILED

    if not os_type or not os_release:
        return OS_QUERY_FAILED
    return f"{os_type} {os_release}"


def query_linux_distro() -> Optional[str]:
    """Return the os-release PRETTY_NAME on Linux, otherwise None."""
    if not sys.platform.startswith("linux"):
        return None
    try:
        return platform.freedesktop_os_release().get("PRETTY_NAME") or None
    except OSError as e:
        logger.debug("os-release not readable: %s", e)
        return None


def _read_proc_cpuinfo(path: Optional[Path] = None) -> CpuIdentity:
    """Read vendor and model name of the first CPU from /proc/cpuinfo."""
    if path is None:
        path = PROC_CPUINFO
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return CpuIdentity()

    fields: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            # End of the first processor block
            break
        if ":" not in line:
            continue
        key, value = line.split(":", maxsplit=1)
        fields.setdefault(key.strip(), value.strip())

    return CpuIdentity(
        vendor=fields.get("vendor_id") or None,
        brand_string=fields.get("model name") or None,
    )


def _sysctl(name: str) -> Optional[str]:
    try:
        result = subprocess.run(
            ["sysctl", "-n", name],
            capture_output=True,
            text=True,
            timeout=SYSCTL_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("sysctl %s failed: %s", name, e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def _read_windows_registry() -> CpuIdentity:
    """Read vendor and brand of the first CPU from the Windows registry."""
    import winreg

    values: dict[str, Optional[str]] = {}
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, WINDOWS_CPU_KEY) as key:
            for name in ("VendorIdentifier", "ProcessorNameString"):
                try:
                    value, _ = winreg.QueryValueEx(key, name)
                except OSError as e:
                    logger.debug("Registry value %s not readable: %s", name, e)
                    continue
                values[name] = str(value).strip() or None
    except OSError as e:
        logger.debug("Cannot open registry key %s: %s", WINDOWS_CPU_KEY, e)

    return CpuIdentity(
        vendor=values.get("VendorIdentifier"),
        brand_string=values.get("ProcessorNameString") or platform.processor() or None,
    )


def query_cpu_identity() -> CpuIdentity:
    """
    Identify the CPU vendor and brand string.

    Linux reads /proc/cpuinfo, macOS asks sysctl for the machdep.cpu keys,
    Windows reads the CentralProcessor registry key and the BSDs ask sysctl
    for hw.model. Each part is None when the platform does not report it
    (e.g. ARM).
    """
    if sys.platform.startswith("linux"):
        return _read_proc_cpuinfo()
    if sys.platform == "darwin":
        return CpuIdentity(
            vendor=_sysctl("machdep.cpu.vendor"),
            brand_string=_sysctl("machdep.cpu.brand_string"),
        )
    if sys.platform == "win32":
        return _read_windows_registry()
    if sys.platform.startswith(BSD_PLATFORMS):
        return CpuIdentity(brand_string=_sysctl("hw.model"))
    return CpuIdentity()


class SystemInfoCollector:
    """Collects runtime system information."""

    def __init__(
        self,
        hostname: Callable[[], Optional[str]] = query_hostname,
        os_description: Callable[[], str] = query_os_description,
        linux_distro: Callable[[], Optional[str]] = query_linux_distro,
        cpu_identity: Callable[[], CpuIdentity] = query_cpu_identity,
    ):
        """
        Initialize collector.

        Each argument is the provider used for one part of SystemInfo;
        replace them to collect from somewhere other than the live host.
        """
        self.hostname = hostname
        self.os_description = os_description
        self.linux_distro = linux_distro
        self.cpu_identity = cpu_identity

    def collect(self) -> SystemInfo:
        """Query each provider once and assemble SystemInfo."""
        cpu = self.cpu_identity()
        return SystemInfo(
            hostname=self.hostname(),
            os_description=self.os_description(),
            linux_distro=self.linux_distro(),
            cpu_vendor=cpu.vendor,
            cpu_brand_string=cpu.brand_string,
        )


def collect_system_info() -> SystemInfo:
    """
    Convenience function to collect system information.

    Returns:
        SystemInfo instance
    """
    return SystemInfoCollector().collect()
