"""Gitignore integration: prune entries ignored by the root .gitignore."""

from __future__ import annotations

import logging
from pathlib import Path

from pathspec import GitIgnoreSpec

logger = logging.getLogger(__name__)


class GitignoreFilter:
    """Exclude entries matched by a compiled ``.gitignore`` spec.

    Paths are slash-separated and relative to the directory holding the
    ``.gitignore``; directories carry a trailing ``/`` so that
    directory-only rules such as ``build/`` apply to them.
    """

    def __init__(self, spec: GitIgnoreSpec) -> None:
        self._spec = spec

    @classmethod
    def load(cls, root: Path) -> GitignoreFilter | None:
        """Load ``.gitignore`` rules from *root*.

        Args:
            root: Directory containing the ``.gitignore`` file.

        Returns:
            A filter when a ``.gitignore`` exists and is readable,
            otherwise ``None``.
        """
        gitignore_path = root / ".gitignore"
        try:
            lines = gitignore_path.read_text(encoding="utf-8").splitlines()
        except OSError:
            logger.debug("Cannot read .gitignore: %s", gitignore_path)
            return None
        return cls(GitIgnoreSpec.from_lines(lines))

    def is_ignored(self, pathname: str) -> bool:
        """Return whether *pathname* is ignored."""
        return self._spec.match_file(pathname)
