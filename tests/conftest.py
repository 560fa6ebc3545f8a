"""Shared fixtures for starwalk tests."""

from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest


@pytest.fixture
def files_tree(tmp_path: Path) -> Path:
    """Create the reference glob tree.

    Structure::

        root/
        ├── files/
        │   ├── dir1/
        │   │   ├── file1.txt
        │   │   └── file2.txt
        │   ├── dir2/
        │   │   └── file3.ignore
        │   └── dir3/
        │       └── file4.txt
        └── ignore/
            └── dir4/
                └── file5.txt
    """
    (tmp_path / "files" / "dir1").mkdir(parents=True)
    (tmp_path / "files" / "dir2").mkdir()
    (tmp_path / "files" / "dir3").mkdir()
    (tmp_path / "ignore" / "dir4").mkdir(parents=True)
    (tmp_path / "files" / "dir1" / "file1.txt").write_text("")
    (tmp_path / "files" / "dir1" / "file2.txt").write_text("")
    (tmp_path / "files" / "dir2" / "file3.ignore").write_text("")
    (tmp_path / "files" / "dir3" / "file4.txt").write_text("")
    (tmp_path / "ignore" / "dir4" / "file5.txt").write_text("")
    return tmp_path


@pytest.fixture
def mixed_case_tree(tmp_path: Path) -> Path:
    """Tree with mixed-case file names for case-folding tests.

    Structure::

        root/
        └── files/
            ├── dir1/
            │   ├── File1.txt
            │   └── File2.txt
            └── dir2/
                └── File3.txt
    """
    (tmp_path / "files" / "dir1").mkdir(parents=True)
    (tmp_path / "files" / "dir2").mkdir()
    (tmp_path / "files" / "dir1" / "File1.txt").write_text("")
    (tmp_path / "files" / "dir1" / "File2.txt").write_text("")
    (tmp_path / "files" / "dir2" / "File3.txt").write_text("")
    return tmp_path


@pytest.fixture
def gitignore_tree(tmp_path: Path) -> Path:
    """Tree with .gitignore for gitignore-integration testing.

    Structure::

        root/
        ├── .gitignore          (*.pyc, node_modules/, dist/)
        ├── dist/
        │   └── bundle.js
        ├── node_modules/
        │   └── pkg/
        │       └── index.js
        ├── src/
        │   ├── app.py
        │   └── app.pyc
        └── README.md
    """
    (tmp_path / ".gitignore").write_text("*.pyc\nnode_modules/\ndist/\n")
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "bundle.js").write_text("bundle")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("js")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("app")
    (tmp_path / "src" / "app.pyc").write_bytes(b"\x00")
    (tmp_path / "README.md").write_text("readme")
    return tmp_path


@pytest.fixture
def deny_dir(monkeypatch: pytest.MonkeyPatch):
    """Make listing directories with a given name fail with EACCES.

    Works regardless of the effective user, unlike ``chmod``.

    Usage::

        deny_dir("dir3")
    """
    real_scandir = os.scandir

    def _deny(name: str) -> None:
        def _scandir(path):
            if Path(path).name == name:
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)

    return _deny
