"""
Process-level settings, read once from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from safeterm._types import BoundaryConfig

BOUNDARY_DIR_ENV_VAR = "BOUNDARY_DIR"
BOUNDARY_ESCAPE_ENV_VAR = "BOUNDARY_ESCAPE"
CONFIG_DIR_ENV_VAR = "SAFETERM_CONFIG_DIR"

DEFAULT_BOUNDARY_DIR = "/tmp"
# Repository root for a source checkout (src/safeterm/settings.py -> ../..)
DEFAULT_INSTALL_ROOT = Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class Settings:
    """
    Startup configuration.

    Attributes:
        boundary_dir: Root directory for directory changes.
        boundary_escape: Disable boundary enforcement entirely.
        config_dir: Directory of `<level>.yaml` overrides for built-in levels.
        install_root: First directory tried for relative policy paths.
        max_output_chars: Maximum characters kept from command output.
    """

    boundary_dir: str = DEFAULT_BOUNDARY_DIR
    boundary_escape: bool = False
    config_dir: Path | None = None
    install_root: Path = DEFAULT_INSTALL_ROOT
    max_output_chars: int = 30_000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ
        config_dir = env.get(CONFIG_DIR_ENV_VAR)
        return cls(
            boundary_dir=env.get(BOUNDARY_DIR_ENV_VAR) or DEFAULT_BOUNDARY_DIR,
            boundary_escape=env.get(BOUNDARY_ESCAPE_ENV_VAR, "").strip().lower() == "true",
            config_dir=Path(config_dir) if config_dir else None,
        )

    @property
    def boundary(self) -> BoundaryConfig:
        return BoundaryConfig(root_directory=self.boundary_dir, escape_enabled=self.boundary_escape)
