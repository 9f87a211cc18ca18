"""Framework detection combining manifests with file-naming conventions."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from ..logging import get_logger
from ..models import Framework, FrameworkType, Language
from .manifests import ManifestParser
from .walker import FileInfo, Walker

_LOGGER = get_logger("frameworks")


def is_go_test_file(name: str) -> bool:
    return len(name) > 8 and name.endswith("_test.go")


def is_python_test_file(name: str) -> bool:
    """Match ``test_*.py`` and ``*_test.py`` with a non-empty stem."""
    if len(name) <= 8 or not name.endswith(".py"):
        return False
    return name.startswith("test_") or name.endswith("_test.py")


@dataclass(frozen=True)
class ConventionRule:
    """A tool shipped with a language toolchain, found by test-file convention.

    When ``content_markers`` is set, a matching file only counts once its text
    contains one of the markers.
    """

    name: str
    language: Language
    type: FrameworkType
    matches: Callable[[str], bool]
    content_markers: Tuple[str, ...] = ()

    def framework(self) -> Framework:
        return Framework(name=self.name, language=self.language, type=self.type)

    def confirms(self, info: FileInfo) -> bool:
        if not self.matches(info.name):
            return False
        if not self.content_markers:
            return True
        try:
            content = Path(info.path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            _LOGGER.debug("Could not read %s: %s", info.rel_path, exc)
            return False
        return any(marker in content for marker in self.content_markers)


BUILTIN_CONVENTIONS: Tuple[ConventionRule, ...] = (
    ConventionRule(
        name="testing",
        language=Language.GO,
        type=FrameworkType.TEST,
        matches=is_go_test_file,
    ),
    # unittest needs an explicit import, so the file name alone is not enough.
    ConventionRule(
        name="unittest",
        language=Language.PYTHON,
        type=FrameworkType.TEST,
        matches=is_python_test_file,
        content_markers=("import unittest", "from unittest"),
    ),
)


def deduplicate_frameworks(frameworks: Iterable[Framework]) -> List[Framework]:
    """Drop repeated ``(name, language)`` entries, keeping the first one seen."""
    seen: Set[Tuple[str, Language]] = set()
    result: List[Framework] = []
    for framework in frameworks:
        if framework.key in seen:
            continue
        seen.add(framework.key)
        result.append(framework)
    return result


class FrameworkDetector:
    """Detects test frameworks and development tools in a repository."""

    def __init__(
        self,
        root: str | Path,
        walker: Walker,
        parser: Optional[ManifestParser] = None,
        conventions: Sequence[ConventionRule] = BUILTIN_CONVENTIONS,
    ) -> None:
        self.root = Path(root)
        self._walker = walker
        self._parser = parser if parser is not None else ManifestParser(self.root)
        self._conventions = tuple(conventions)

    def detect(self) -> List[Framework]:
        """Return manifest-declared tools followed by convention-detected ones.

        On a ``(name, language)`` collision the manifest entry is kept.
        """
        frameworks = list(self._parser.parse_all())
        frameworks.extend(self.detect_builtin())
        result = deduplicate_frameworks(frameworks)
        _LOGGER.debug("Detected %d frameworks", len(result))
        return result

    def detect_builtin(self) -> List[Framework]:
        """Return toolchain frameworks whose convention matched at least one file."""
        return [rule.framework() for rule in self._conventions if self._has_match(rule)]

    def _has_match(self, rule: ConventionRule) -> bool:
        for info in self._walker.iter_files():
            if rule.confirms(info):
                _LOGGER.debug("%s detected via %s", rule.name, info.rel_path)
                return True
        return False


__all__ = [
    "BUILTIN_CONVENTIONS",
    "ConventionRule",
    "FrameworkDetector",
    "deduplicate_frameworks",
    "is_go_test_file",
    "is_python_test_file",
]
