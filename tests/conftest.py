"""Pytest configuration and shared fixtures for rummage tests."""

import subprocess

import pytest

from rummage.core.capture import BuildFacts
from rummage.core.models import OS_QUERY_FAILED, CpuIdentity
from rummage.metadata.system import SystemInfoCollector


def _git(repo, *args):
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)


@pytest.fixture
def git_repo(tmp_path):
    """
    Create a git repository with one commit.

    The working tree is clean; tests modify files to make it dirty.
    """
    _git(tmp_path, "init")
    _git(tmp_path, "config", "user.name", "Test User")
    _git(tmp_path, "config", "user.email", "test@example.com")
    (tmp_path / "test.txt").write_text("test")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "Initial commit")

    return tmp_path


@pytest.fixture
def head_commit(git_repo):
    """Full hash of HEAD in the git_repo fixture."""
    result = subprocess.run(
        ["git", "rev-parse", "HEAD"],
        cwd=git_repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def sample_facts():
    """Build facts as a capture on a typical Linux build would produce them."""
    return BuildFacts(
        build_profile="release",
        host_triple="x86_64-pc-linux-gnu",
        target_triple="x86_64-pc-linux-gnu",
        target_family="posix",
        target_os="linux",
        target_arch="x86_64",
        target_pointer_width="64",
        target_endian="little",
        target_features="pymalloc,shared",
        toolchain_major="3",
        toolchain_minor="12",
        toolchain_patch="4",
        toolchain_commit_hash="8e8a4baf65",
        toolchain_commit_date="Jun  6 2024 19:30:16",
        toolchain_codegen_version="GCC 12.2.0",
        package_name="myapp",
        package_version="1.2.0",
        binary_name="myapp-cli",
        revision="abc123-dirty",
    )


@pytest.fixture
def absent_system_collector():
    """System collector whose providers all report nothing."""
    return SystemInfoCollector(
        hostname=lambda: None,
        os_description=lambda: OS_QUERY_FAILED,
        linux_distro=lambda: None,
        cpu_identity=CpuIdentity,
    )


@pytest.fixture
def fixed_system_collector():
    """System collector with fixed, fully populated answers."""
    return SystemInfoCollector(
        hostname=lambda: "build-host",
        os_description=lambda: "Linux 6.1.0",
        linux_distro=lambda: "Debian GNU/Linux 12 (bookworm)",
        cpu_identity=lambda: CpuIdentity(
            vendor="GenuineIntel",
            brand_string="Intel(R) Xeon(R) CPU @ 2.20GHz",
        ),
    )
