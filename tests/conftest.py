"""Pytest configuration and fixtures for safeterm tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from safeterm import BoundaryConfig, BoundaryGuard, ExecutionCoordinator, PolicyEngine, SessionState
from safeterm.policy.defaults import AGGRESSIVE, MEDIUM, MINIMAL, NONE
from safeterm.validation import (
    AggressiveValidator,
    MediumValidator,
    MinimalValidator,
    NoneValidator,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests (symlinks resolved)."""
    with tempfile.TemporaryDirectory(prefix="safeterm_test_") as tmp:
        yield Path(tmp).resolve()


@pytest.fixture
def environ() -> dict[str, str]:
    """An isolated environment snapshot with a few sensitive variables."""
    return {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "HOME": "/home/tester",
        "USER": "tester",
        "SHELL": "/bin/sh",
        "SECRET": "hunter2",
        "TOKEN": "abc123",
        "EDITOR": "vi",
    }


@pytest.fixture
def aggressive(environ: dict[str, str]) -> AggressiveValidator:
    return AggressiveValidator(AGGRESSIVE, environ=environ)


@pytest.fixture
def medium(environ: dict[str, str]) -> MediumValidator:
    return MediumValidator(MEDIUM, environ=environ)


@pytest.fixture
def minimal(environ: dict[str, str]) -> MinimalValidator:
    return MinimalValidator(MINIMAL, environ=environ)


@pytest.fixture
def none_validator(environ: dict[str, str]) -> NoneValidator:
    return NoneValidator(NONE, environ=environ)


@pytest.fixture
def restore_cwd() -> Generator[None, None, None]:
    """Restore the process working directory after a test that changes it."""
    original = os.getcwd()
    try:
        yield
    finally:
        os.chdir(original)


@pytest.fixture
def make_terminal(temp_dir: Path, environ: dict[str, str]):
    """Factory for coordinators confined to temp_dir under a given policy."""

    def _make(policy=AGGRESSIVE, *, escape: bool = False) -> ExecutionCoordinator:
        engine = PolicyEngine.from_config(policy, environ)
        guard = BoundaryGuard(BoundaryConfig(root_directory=str(temp_dir), escape_enabled=escape))
        return ExecutionCoordinator(engine, guard, state=SessionState(current_directory=str(temp_dir)))

    return _make
