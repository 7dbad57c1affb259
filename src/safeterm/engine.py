"""
Policy engine: the single cached validator for a process.

The engine holds one `(selection, validator)` slot. Each lookup re-reads
the selector from the injected environment mapping and rebuilds the
validator only when the selection changed. Engines are explicit values, so
tests can build isolated ones without touching shared state.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from safeterm.policy.config import PolicyConfig
from safeterm.policy.defaults import AGGRESSIVE
from safeterm.policy.loader import PolicyLoader
from safeterm.policy.selector import SELECTOR_ENV_VAR, Selection, select_level
from safeterm.validation import Validator, validator_for

logger = logging.getLogger(__name__)


class PolicyEngine:
    """
    Lazily constructed, single-slot validator cache.

    Example:
        >>> engine = PolicyEngine({"COMMAND_VALIDATION": "medium"})
        >>> engine.get_validator().validate_command("ls", ["-la"]).accepted
        True

    Example with an explicit policy:
        >>> engine = PolicyEngine.from_config(MINIMAL)
        >>> engine.get_validator().config.level
        <SecurityLevel.MINIMAL: 'minimal'>
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        loader: PolicyLoader | None = None,
        install_root: Path | str | None = None,
        cwd: Path | str | None = None,
    ) -> None:
        """
        Initialize a policy engine.

        Args:
            environ: Mapping holding the selector and the variables passed
                to spawned commands. Defaults to os.environ.
            loader: Policy loader. Defaults to built-in policies only.
            install_root: First directory tried for relative policy paths.
            cwd: Second directory tried for relative policy paths.
        """
        self._environ = os.environ if environ is None else environ
        self._loader = loader or PolicyLoader()
        self._install_root = install_root
        self._cwd = cwd
        self._slot: tuple[Selection | None, Validator] | None = None
        self._pinned = False

    @classmethod
    def from_config(cls, config: PolicyConfig, environ: Mapping[str, str] | None = None) -> PolicyEngine:
        """Create an engine pinned to an explicit policy."""
        engine = cls(environ)
        engine.refresh(config)
        return engine

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ

    @property
    def selection(self) -> Selection | None:
        """The selection behind the cached validator, None if pinned or empty."""
        return self._slot[0] if self._slot else None

    def select(self) -> Selection:
        """Run the level selector against the current environment."""
        return select_level(
            self._environ.get(SELECTOR_ENV_VAR),
            install_root=self._install_root,
            cwd=self._cwd,
        )

    def get_validator(self) -> Validator:
        """
        Return the active validator, rebuilding it if the selection changed.
        """
        if self._pinned and self._slot is not None:
            return self._slot[1]

        selection = self.select()
        if self._slot is not None and self._slot[0] == selection:
            logger.debug(f"Reusing cached validator for {selection.value}")
            return self._slot[1]

        validator = self._build(selection)
        self._slot = (selection, validator)
        return validator

    def recreate(self) -> Validator:
        """
        Drop the cached validator and build a new one.

        Use when the backing policy document may have changed. Also unpins
        an engine created with refresh().
        """
        self._slot = None
        self._pinned = False
        return self.get_validator()

    def refresh(self, config: PolicyConfig) -> Validator:
        """
        Replace the cached validator with one for an explicit policy.

        The engine stays pinned to it until recreate() is called.
        """
        validator = validator_for(config, environ=self._environ)
        self._slot = (None, validator)
        self._pinned = True
        logger.info(f"Policy engine pinned to {config.level.value} policy")
        return validator

    def _build(self, selection: Selection) -> Validator:
        try:
            config = self._loader.load(selection)
            validator = validator_for(config, environ=self._environ)
        except Exception as e:
            logger.error(f"Error creating validator for {selection.value}: {e}")
            logger.warning("Using aggressive validator as fallback")
            return validator_for(AGGRESSIVE, environ=self._environ)

        logger.info(f"Created {type(validator).__name__} for {selection.kind.value} policy {selection.value}")
        return validator
