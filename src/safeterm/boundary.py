"""
Working-directory boundary enforcement.
"""

from __future__ import annotations

import logging
import os

from safeterm._types import BoundaryConfig
from safeterm.errors import BoundaryViolation

logger = logging.getLogger(__name__)


class BoundaryGuard:
    """
    Keeps directory changes inside a root directory.

    Paths are resolved lexically against the current directory; symlinks are
    not followed. With `escape_enabled` every check is disabled for the
    lifetime of the guard.

    Example:
        >>> guard = BoundaryGuard(BoundaryConfig(root_directory="/tmp"))
        >>> guard.resolve("/tmp", "work")
        '/tmp/work'
        >>> guard.resolve("/tmp", "../etc")
        Traceback (most recent call last):
        ...
        safeterm.errors.BoundaryViolation: Path '/etc' is outside the allowed boundary (/tmp)
    """

    def __init__(self, config: BoundaryConfig | None = None) -> None:
        self._config = config or BoundaryConfig()
        self._root = os.path.abspath(self._config.root_directory)
        if self._config.escape_enabled:
            logger.warning("Boundary escape enabled: directory enforcement disabled")

    @property
    def root(self) -> str:
        return self._root

    @property
    def escape_enabled(self) -> bool:
        return self._config.escape_enabled

    def contains(self, path: str) -> bool:
        """True if `path` is the root or lies beneath it."""
        return path == self._root or path.startswith(self._root.rstrip(os.sep) + os.sep)

    def resolve(self, current_dir: str, requested: str) -> str:
        """
        Resolve `requested` against `current_dir`.

        Returns:
            The absolute path.

        Raises:
            BoundaryViolation: If the path escapes the root and escape is
                not enabled.
        """
        resolved = os.path.abspath(os.path.join(current_dir, requested))
        if self._config.escape_enabled or self.contains(resolved):
            return resolved
        raise BoundaryViolation(resolved, self._root)

    def enter(self) -> str:
        """
        Move the process into the root directory.

        Does nothing when escape is enabled. Failure is logged, not raised:
        the process keeps running in whatever directory it started in.

        Returns:
            The process working directory afterwards.
        """
        if not self._config.escape_enabled and os.getcwd() != self._root:
            try:
                os.chdir(self._root)
            except OSError as e:
                logger.warning(f"Could not change working directory to boundary dir ({self._root}): {e}")
        return os.getcwd()
