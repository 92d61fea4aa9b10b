"""Test configuration and fixtures."""

import os
import stat
import sys
from pathlib import Path

import pytest

from pmresolver.constants import ENV_VAR_NAME


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "posix: tests that rely on POSIX executables")


@pytest.fixture(autouse=True)
def skip_posix_on_windows(request):
    """Skip tests that create shell-style fake executables on Windows."""
    if request.node.get_closest_marker("posix") and sys.platform == "win32":
        pytest.skip("Fake executables need a POSIX search path")


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    """Set up an empty project directory and make it the working directory."""
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Provide an empty home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Provide an empty directory used as the whole executable search path."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def env(home: Path, bin_dir: Path) -> dict[str, str]:
    """Environment snapshot with no override and no installed package managers."""
    return {"HOME": str(home), "PATH": str(bin_dir)}


@pytest.fixture
def make_executable(bin_dir: Path):
    """Create a fake executable on the test search path."""
    def _make(name: str) -> Path:
        path = bin_dir / name
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path
    return _make


@pytest.fixture
def process_env(monkeypatch, home: Path, bin_dir: Path) -> dict[str, str]:
    """Point the process environment at the test home and search path.

    Used by CLI and hook tests, which read os.environ.
    """
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("PATH", str(bin_dir))
    monkeypatch.delenv("USERPROFILE", raising=False)
    monkeypatch.delenv(ENV_VAR_NAME, raising=False)
    return dict(os.environ)


HUGE_INT_JSON = b'{"x": ' + b"1" * 5000 + b"}"
DEEP_NESTING_JSON = b"[" * 100000 + b"]" * 100000

# Interpreters without an integer string conversion limit parse the huge int
int_limit_only = pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"),
    reason="No integer string conversion limit on this interpreter",
)


@pytest.fixture(
    params=[
        pytest.param(b"{not json", id="syntax-error"),
        pytest.param(b"\xff\xfe{", id="not-utf8"),
        pytest.param(HUGE_INT_JSON, id="huge-int", marks=int_limit_only),
        pytest.param(DEEP_NESTING_JSON, id="deep-nesting"),
    ]
)
def malformed_json(request) -> bytes:
    """File contents the JSON reader cannot turn into an object."""
    return request.param
