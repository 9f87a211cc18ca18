"""Language classification by file extension and conventional filenames."""

from __future__ import annotations

from collections import Counter
from types import MappingProxyType
from typing import List, Mapping, Optional

from ..logging import get_logger
from ..models import Language, LanguageStats
from .walker import FileInfo, Walker

_LOGGER = get_logger("language")

PRIMARY_THRESHOLD = 10.0

EXTENSION_LANGUAGES: Mapping[str, Language] = MappingProxyType(
    {
        ".go": Language.GO,
        ".py": Language.PYTHON,
        ".pyw": Language.PYTHON,
        ".pyx": Language.PYTHON,
        ".pyi": Language.PYTHON,
        ".ipynb": Language.PYTHON,  # Jupyter notebooks
        ".js": Language.JAVASCRIPT,
        ".jsx": Language.JAVASCRIPT,
        ".mjs": Language.JAVASCRIPT,
        ".cjs": Language.JAVASCRIPT,
        ".ts": Language.TYPESCRIPT,
        ".tsx": Language.TYPESCRIPT,
        ".mts": Language.TYPESCRIPT,
        ".cts": Language.TYPESCRIPT,
        ".java": Language.JAVA,
        ".rs": Language.RUST,
        ".cs": Language.CSHARP,
        ".cshtml": Language.CSHARP,
        ".csx": Language.CSHARP,
        ".rb": Language.RUBY,
        ".rake": Language.RUBY,
    }
)

# Extensionless files. ``None`` marks build tooling that belongs to no language.
FILENAME_LANGUAGES: Mapping[str, Optional[Language]] = MappingProxyType(
    {
        "gemfile": Language.RUBY,
        "rakefile": Language.RUBY,
        "makefile": None,
    }
)


def build_language_stats(counts: Mapping[Language, int]) -> List[LanguageStats]:
    """Convert per-language file counts into ordered statistics.

    Rows are sorted by percentage descending with the language name as a
    tiebreak. A language is primary only when its share is above 10%.
    """
    total = sum(counts.values())
    if total <= 0:
        return []

    stats = []
    for language, count in counts.items():
        if count <= 0:
            continue
        percentage = count * 100.0 / total
        stats.append(
            LanguageStats(
                language=language,
                file_count=count,
                percentage=percentage,
                is_primary=percentage > PRIMARY_THRESHOLD,
            )
        )
    stats.sort(key=lambda item: (-item.percentage, item.language.value))
    return stats


class LanguageDetector:
    """Counts source files per language over a walker pass."""

    def __init__(
        self,
        walker: Walker,
        extensions: Mapping[str, Language] = EXTENSION_LANGUAGES,
        filenames: Mapping[str, Optional[Language]] = FILENAME_LANGUAGES,
    ) -> None:
        self._walker = walker
        self._extensions = extensions
        self._filenames = filenames

    def classify(self, ext: str, name: str) -> Optional[Language]:
        """Return the language for a file, or None when it is not source code."""
        language = self._extensions.get(ext.lower())
        if language is not None:
            return language
        return self._filenames.get(name.lower())

    def detect(self) -> List[LanguageStats]:
        counts: Counter[Language] = Counter()

        def _count(info: FileInfo) -> None:
            language = self.classify(info.ext, info.name)
            if language is not None and language is not Language.UNKNOWN:
                counts[language] += 1

        visited = self._walker.walk(_count)
        _LOGGER.debug(
            "Classified %d of %d files into %d languages",
            sum(counts.values()),
            visited,
            len(counts),
        )
        return build_language_stats(counts)


__all__ = [
    "EXTENSION_LANGUAGES",
    "FILENAME_LANGUAGES",
    "LanguageDetector",
    "PRIMARY_THRESHOLD",
    "build_language_stats",
]
