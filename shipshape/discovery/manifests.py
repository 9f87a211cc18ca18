"""Dependency manifest parsing for framework and tool detection.

Each ecosystem is a :class:`ManifestSource` reading one fixed file from the
repository root. Sources are stateless; the lookup tables they match against
live in a :class:`ToolCatalog` so callers can swap in a different catalog.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import Framework, FrameworkType, Language

_LOGGER = get_logger("manifests")

_REQUIREMENT_NAME_SPLIT = re.compile(r"[=<>!~]")


class ManifestError(RuntimeError):
    """Raised when a manifest exists but cannot be read or decoded."""


@dataclass(frozen=True)
class TextMarker:
    """Tool reported when any of ``needles`` occurs in a manifest's raw text."""

    needles: Tuple[str, ...]
    name: str
    type: FrameworkType


@dataclass(frozen=True)
class ToolCatalog:
    """Known tools per ecosystem, keyed by the name they are declared under."""

    node_test: Mapping[str, str]
    node_coverage: Mapping[str, str]
    node_lint: Mapping[str, str]
    node_format: Mapping[str, str]
    go_markers: Tuple[TextMarker, ...]
    pyproject_markers: Tuple[TextMarker, ...]
    python_packages: Mapping[str, Tuple[str, FrameworkType]]
    typescript_config: str = "tsconfig.json"


DEFAULT_CATALOG = ToolCatalog(
    node_test=MappingProxyType(
        {
            "jest": "jest",
            "mocha": "mocha",
            "vitest": "vitest",
            "jasmine": "jasmine",
            "@jest/core": "jest",
        }
    ),
    node_coverage=MappingProxyType({"nyc": "nyc", "c8": "c8", "istanbul": "istanbul"}),
    node_lint=MappingProxyType(
        {
            "eslint": "eslint",
            "tslint": "tslint",
            "@typescript-eslint/parser": "eslint",
        }
    ),
    node_format=MappingProxyType({"prettier": "prettier"}),
    go_markers=(
        TextMarker(("github.com/stretchr/testify",), "testify", FrameworkType.TEST),
        TextMarker(("github.com/golang/mock", "go.uber.org/mock"), "gomock", FrameworkType.TEST),
        TextMarker(("github.com/onsi/ginkgo",), "ginkgo", FrameworkType.TEST),
    ),
    pyproject_markers=(
        TextMarker(("pytest",), "pytest", FrameworkType.TEST),
        TextMarker(("coverage", "pytest-cov"), "coverage.py", FrameworkType.COVERAGE),
        TextMarker(("black",), "black", FrameworkType.FORMAT),
        TextMarker(("ruff",), "ruff", FrameworkType.LINT),
    ),
    python_packages=MappingProxyType(
        {
            "pytest": ("pytest", FrameworkType.TEST),
            "coverage": ("coverage.py", FrameworkType.COVERAGE),
            "pytest-cov": ("coverage.py", FrameworkType.COVERAGE),
            "black": ("black", FrameworkType.FORMAT),
            "pylint": ("pylint", FrameworkType.LINT),
            "flake8": ("flake8", FrameworkType.LINT),
            "ruff": ("ruff", FrameworkType.LINT),
        }
    ),
)


def _read_text(path: Path) -> str:
    """Read a manifest, raising FileNotFoundError when absent."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as exc:
        raise ManifestError(f"{path.name} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"Failed to read {path.name}: {exc}") from exc


def _match_markers(
    content: str, markers: Sequence[TextMarker], language: Language, filename: str
) -> List[Framework]:
    frameworks: List[Framework] = []
    for marker in markers:
        if any(needle in content for needle in marker.needles):
            frameworks.append(
                Framework(
                    name=marker.name,
                    language=language,
                    type=marker.type,
                    config_files=(filename,),
                )
            )
    return frameworks


def requirement_name(line: str) -> Optional[str]:
    """Return the package name declared on a requirements line, if any."""
    stripped = line.strip()
    if not stripped or stripped.startswith(("#", "-")):
        return None
    name = _REQUIREMENT_NAME_SPLIT.split(stripped, 1)[0]
    name = name.split("[", 1)[0].strip()
    return name or None


class ManifestSource(ABC):
    """Contract for parsers that read one ecosystem manifest."""

    filename: str

    @abstractmethod
    def parse(self, root: Path, catalog: ToolCatalog) -> List[Framework]:
        """Return tools declared in ``root / filename``.

        Raises FileNotFoundError when the manifest is absent and
        ManifestError when it cannot be decoded.
        """


class PackageJsonSource(ManifestSource):
    """JavaScript/TypeScript dependencies from package.json."""

    filename = "package.json"

    def parse(self, root: Path, catalog: ToolCatalog) -> List[Framework]:
        data = self._load(root / self.filename)

        dependencies: Dict[str, str] = {}
        for key in ("dependencies", "devDependencies"):
            dependencies.update(self._dependency_map(data, key))

        has_tsconfig = (root / catalog.typescript_config).exists()
        categories = (
            (catalog.node_coverage, FrameworkType.COVERAGE),
            (catalog.node_lint, FrameworkType.LINT),
            (catalog.node_format, FrameworkType.FORMAT),
        )

        frameworks: List[Framework] = []
        for package, version in dependencies.items():
            test_name = catalog.node_test.get(package)
            if test_name is not None:
                language = (
                    Language.TYPESCRIPT
                    if "typescript" in package or has_tsconfig
                    else Language.JAVASCRIPT
                )
                frameworks.append(self._framework(test_name, language, FrameworkType.TEST, version))

            for table, framework_type in categories:
                name = table.get(package)
                if name is not None:
                    frameworks.append(
                        self._framework(name, Language.JAVASCRIPT, framework_type, version)
                    )
        return frameworks

    def _framework(
        self, name: str, language: Language, framework_type: FrameworkType, version: str
    ) -> Framework:
        return Framework(
            name=name,
            language=language,
            type=framework_type,
            version=version or None,
            config_files=(self.filename,),
        )

    def _load(self, path: Path) -> Dict[str, Any]:
        text = _read_text(path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Failed to parse {path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"{path.name} must contain a JSON object")
        return data

    def _dependency_map(self, data: Mapping[str, Any], key: str) -> Dict[str, str]:
        value = data.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ManifestError(f"package.json '{key}' must be an object")
        for package, version in value.items():
            if not isinstance(version, str):
                raise ManifestError(f"package.json '{key}.{package}' must be a string")
        return dict(value)


class GoModSource(ManifestSource):
    """Go test libraries referenced in go.mod.

    Matching is a substring search over the raw file, so a module path that
    appears in a comment or replace directive is reported too.
    """

    filename = "go.mod"

    def parse(self, root: Path, catalog: ToolCatalog) -> List[Framework]:
        content = _read_text(root / self.filename)
        # The built-in testing package never appears here; it is found by convention.
        return _match_markers(content, catalog.go_markers, Language.GO, self.filename)


class PyprojectSource(ManifestSource):
    """Python tools mentioned anywhere in pyproject.toml (substring match)."""

    filename = "pyproject.toml"

    def parse(self, root: Path, catalog: ToolCatalog) -> List[Framework]:
        content = _read_text(root / self.filename)
        return _match_markers(content, catalog.pyproject_markers, Language.PYTHON, self.filename)


class RequirementsSource(ManifestSource):
    """Python tools pinned in requirements.txt."""

    filename = "requirements.txt"

    def parse(self, root: Path, catalog: ToolCatalog) -> List[Framework]:
        content = _read_text(root / self.filename)
        frameworks: List[Framework] = []
        for line in content.splitlines():
            package = requirement_name(line)
            if package is None:
                continue
            match = catalog.python_packages.get(package.lower())
            if match is None:
                continue
            name, framework_type = match
            frameworks.append(
                Framework(
                    name=name,
                    language=Language.PYTHON,
                    type=framework_type,
                    config_files=(self.filename,),
                )
            )
        return frameworks


DEFAULT_SOURCES: Tuple[ManifestSource, ...] = (
    PackageJsonSource(),
    GoModSource(),
    PyprojectSource(),
    RequirementsSource(),
)


class ManifestParser:
    """Runs the registered manifest sources against a repository root."""

    def __init__(
        self,
        root: str | Path,
        catalog: ToolCatalog = DEFAULT_CATALOG,
        sources: Sequence[ManifestSource] = DEFAULT_SOURCES,
    ) -> None:
        self.root = Path(root)
        self.catalog = catalog
        self._sources = tuple(sources)

    def parse(self, filename: str) -> List[Framework]:
        """Run the source registered for ``filename``."""
        for source in self._sources:
            if source.filename == filename:
                return source.parse(self.root, self.catalog)
        raise ValueError(f"No manifest source registered for {filename!r}")

    def parse_package_json(self) -> List[Framework]:
        return self.parse(PackageJsonSource.filename)

    def parse_go_mod(self) -> List[Framework]:
        return self.parse(GoModSource.filename)

    def parse_pyproject_toml(self) -> List[Framework]:
        return self.parse(PyprojectSource.filename)

    def parse_requirements_txt(self) -> List[Framework]:
        return self.parse(RequirementsSource.filename)

    def parse_all(self) -> List[Framework]:
        """Concatenate results from every source that parsed successfully.

        Missing manifests contribute nothing; malformed ones are logged and
        skipped so one ecosystem cannot hide the others.
        """
        frameworks: List[Framework] = []
        for source in self._sources:
            try:
                found = source.parse(self.root, self.catalog)
            except FileNotFoundError:
                _LOGGER.debug("No %s found", source.filename)
                continue
            except ManifestError as exc:
                _LOGGER.warning("Skipping %s: %s", source.filename, exc)
                continue
            _LOGGER.debug("%s declared %d tools", source.filename, len(found))
            frameworks.extend(found)
        return frameworks


__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_SOURCES",
    "GoModSource",
    "ManifestError",
    "ManifestParser",
    "ManifestSource",
    "PackageJsonSource",
    "PyprojectSource",
    "RequirementsSource",
    "TextMarker",
    "ToolCatalog",
    "requirement_name",
]
