"""Repository discovery: traversal, language classification and tool detection."""

from __future__ import annotations

from .frameworks import BUILTIN_CONVENTIONS, ConventionRule, FrameworkDetector, deduplicate_frameworks
from .language import EXTENSION_LANGUAGES, FILENAME_LANGUAGES, LanguageDetector, build_language_stats
from .manifests import (
    DEFAULT_CATALOG,
    DEFAULT_SOURCES,
    ManifestError,
    ManifestParser,
    ManifestSource,
    TextMarker,
    ToolCatalog,
)
from .walker import ALLOWED_DOTFILES, DEFAULT_EXCLUDE_PATTERNS, FileInfo, Walker

__all__ = [
    "ALLOWED_DOTFILES",
    "BUILTIN_CONVENTIONS",
    "ConventionRule",
    "DEFAULT_CATALOG",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_SOURCES",
    "EXTENSION_LANGUAGES",
    "FILENAME_LANGUAGES",
    "FileInfo",
    "FrameworkDetector",
    "LanguageDetector",
    "ManifestError",
    "ManifestParser",
    "ManifestSource",
    "TextMarker",
    "ToolCatalog",
    "Walker",
    "build_language_stats",
    "deduplicate_frameworks",
]
