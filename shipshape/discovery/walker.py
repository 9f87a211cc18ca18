"""Filesystem traversal with exclusion patterns."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterator, Sequence, Tuple

from ..logging import get_logger

_LOGGER = get_logger("walker")

DEFAULT_EXCLUDE_PATTERNS: Tuple[str, ...] = (
    # Version control
    ".git",
    ".svn",
    ".hg",
    # Dependencies
    "node_modules",
    "vendor",
    "venv",
    ".venv",
    "env",
    ".env",
    "__pycache__",
    ".tox",
    # Build outputs
    "dist",
    "build",
    "target",
    "out",
    "bin",
    ".next",
    ".nuxt",
    # IDE/editor
    ".idea",
    ".vscode",
    ".vs",
    "*.swp",
    "*.swo",
    ".DS_Store",
    # Coverage output
    "coverage",
    ".coverage",
    "htmlcov",
    ".nyc_output",
    # Misc
    "tmp",
    "temp",
    ".cache",
)

# Conventional dotfiles that stay visible even when hidden entries are skipped.
ALLOWED_DOTFILES: Tuple[str, ...] = (
    ".gitignore",
    ".gitattributes",
    ".editorconfig",
    ".prettierrc",
    ".eslintrc",
    ".pylintrc",
    ".go-version",
    ".python-version",
    ".ruby-version",
    ".nvmrc",
)


@dataclass(frozen=True)
class FileInfo:
    """A file visited by the walker."""

    path: str
    rel_path: str
    name: str
    ext: str
    is_dir: bool
    size: int


def is_allowed_dotfile(name: str) -> bool:
    """Return True for allow-listed dotfiles such as ``.eslintrc.json``."""
    return any(name == allowed or name.startswith(f"{allowed}.") for allowed in ALLOWED_DOTFILES)


def file_extension(name: str) -> str:
    """Return the suffix starting at the last dot, or an empty string."""
    index = name.rfind(".")
    return name[index:] if index >= 0 else ""


def _raise_walk_error(exc: OSError) -> None:
    raise exc


class Walker:
    """Walks a directory tree, pruning excluded and hidden entries."""

    def __init__(
        self,
        root: str | os.PathLike[str],
        exclude_patterns: Sequence[str] | None = None,
        include_hidden: bool = False,
    ) -> None:
        self.root = Path(root)
        self.exclude_patterns: Tuple[str, ...] = tuple(
            DEFAULT_EXCLUDE_PATTERNS if exclude_patterns is None else exclude_patterns
        )
        self.include_hidden = include_hidden

    def should_exclude(self, rel_path: str) -> bool:
        """Return True when ``rel_path`` (POSIX, relative to root) is excluded."""
        if rel_path in ("", "."):
            return False

        parts = rel_path.split("/")
        if not self.include_hidden:
            base = parts[-1]
            if base.startswith(".") and not is_allowed_dotfile(base):
                return True

        for pattern in self.exclude_patterns:
            for part in parts:
                if part == pattern or fnmatchcase(part, pattern):
                    return True
        return False

    def iter_files(self) -> Iterator[FileInfo]:
        """Yield every included file, depth-first in directory enumeration order.

        Excluded directories are pruned so their subtrees are never read.
        Errors raised by the filesystem propagate to the caller.
        """
        root = str(self.root)
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            rel_dir = os.path.relpath(dirpath, root)
            rel_dir = "" if rel_dir == "." else Path(rel_dir).as_posix()

            kept = []
            for name in dirnames:
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self.should_exclude(rel_path):
                    _LOGGER.debug("Pruning %s", rel_path)
                    continue
                kept.append(name)
            dirnames[:] = kept

            for name in filenames:
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self.should_exclude(rel_path):
                    continue
                path = os.path.join(dirpath, name)
                stat_result = os.lstat(path)
                yield FileInfo(
                    path=os.path.abspath(path),
                    rel_path=rel_path,
                    name=name,
                    ext=file_extension(name),
                    is_dir=False,
                    size=stat_result.st_size,
                )

    def walk(self, callback: Callable[[FileInfo], None]) -> int:
        """Invoke ``callback`` for each included file and return the file count."""
        count = 0
        for info in self.iter_files():
            callback(info)
            count += 1
        return count

    def count_files(self) -> int:
        """Return how many files a walk would visit."""
        return self.walk(lambda _info: None)


__all__ = [
    "ALLOWED_DOTFILES",
    "DEFAULT_EXCLUDE_PATTERNS",
    "FileInfo",
    "Walker",
    "file_extension",
    "is_allowed_dotfile",
]
