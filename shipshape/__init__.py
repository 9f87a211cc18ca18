"""Repository discovery for test-quality analysis."""

from __future__ import annotations

__version__ = "0.1.0"

from .models import Framework, FrameworkType, Language, LanguageStats, Repository
from .repo_scanner import RepoScanner

__all__ = [
    "Framework",
    "FrameworkType",
    "Language",
    "LanguageStats",
    "RepoScanner",
    "Repository",
    "__version__",
]
