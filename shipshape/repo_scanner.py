"""Repository discovery entry point producing a :class:`Repository`."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .config import ShipShapeConfig
from .discovery.frameworks import FrameworkDetector
from .discovery.language import LanguageDetector
from .discovery.walker import Walker
from .logging import get_logger
from .models import Repository

_LOGGER = get_logger("scanner")


class RepoScanner:
    """Classifies a repository's languages and configured tooling."""

    def __init__(
        self,
        exclude_patterns: Sequence[str] | None = None,
        include_hidden: bool = False,
    ) -> None:
        self.exclude_patterns = None if exclude_patterns is None else list(exclude_patterns)
        self.include_hidden = include_hidden

    @classmethod
    def from_config(cls, config: ShipShapeConfig) -> "RepoScanner":
        return cls(
            exclude_patterns=config.exclude_patterns(),
            include_hidden=config.discovery.include_hidden,
        )

    def scan(self, root: str) -> Repository:
        """Return language statistics, tools and file counts for ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        _LOGGER.info("Discovering repository context in %s", root_path)
        walker = Walker(root_path, self.exclude_patterns, self.include_hidden)

        total_files = walker.count_files()
        _LOGGER.debug("Repository scan found %d files", total_files)

        languages = LanguageDetector(walker).detect()
        _LOGGER.debug("Languages detected: %d", len(languages))

        frameworks = FrameworkDetector(root_path, walker).detect()
        _LOGGER.debug("Frameworks detected: %d", len(frameworks))

        return Repository(
            path=str(root_path),
            languages=languages,
            frameworks=frameworks,
            total_files=total_files,
            excluded_paths=list(walker.exclude_patterns),
        )


__all__ = ["RepoScanner"]
