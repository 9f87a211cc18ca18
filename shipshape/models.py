"""Core data models shared across shipshape components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Language(str, Enum):
    """Programming languages recognised during discovery."""

    GO = "Go"
    PYTHON = "Python"
    JAVASCRIPT = "JavaScript"
    TYPESCRIPT = "TypeScript"
    JAVA = "Java"
    RUST = "Rust"
    CSHARP = "C#"
    RUBY = "Ruby"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


class FrameworkType(str, Enum):
    """Functional category of a detected tool."""

    TEST = "test"
    BUILD = "build"
    LINT = "lint"
    FORMAT = "format"
    COVERAGE = "coverage"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class WorkspaceType(str, Enum):
    """Workspace management systems found in monorepos."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    GO = "go"
    MAVEN = "maven"
    GRADLE = "gradle"
    LERNA = "lerna"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LanguageStats:
    """Share of classified files belonging to one language."""

    language: Language
    file_count: int
    percentage: float
    is_primary: bool


@dataclass(frozen=True)
class Framework:
    """A test framework or development tool detected in the repository."""

    name: str
    language: Language
    type: FrameworkType
    version: Optional[str] = None
    config_files: Tuple[str, ...] = ()

    @property
    def key(self) -> Tuple[str, Language]:
        return (self.name, self.language)


@dataclass(frozen=True)
class Workspace:
    """A package inside a monorepo."""

    name: str
    path: str
    language: Language
    type: WorkspaceType


@dataclass
class Repository:
    """Discovery result handed to downstream analysis."""

    path: str
    languages: List[LanguageStats] = field(default_factory=list)
    frameworks: List[Framework] = field(default_factory=list)
    is_monorepo: bool = False
    workspaces: List[Workspace] = field(default_factory=list)
    total_files: int = 0
    excluded_paths: List[str] = field(default_factory=list)

    def primary_language(self) -> Language:
        """Return the language with the highest share, or ``Language.UNKNOWN``."""
        best: Optional[LanguageStats] = None
        for stats in self.languages:
            if best is None or stats.percentage > best.percentage:
                best = stats
        return best.language if best is not None else Language.UNKNOWN

    def has_language(self, language: Language) -> bool:
        return any(stats.language == language for stats in self.languages)

    def get_framework(self, name: str) -> Optional[Framework]:
        """Return the first framework with ``name``."""
        for framework in self.frameworks:
            if framework.name == name:
                return framework
        return None

    def has_framework(self, name: str) -> bool:
        return self.get_framework(name) is not None

    def frameworks_by_type(self, framework_type: FrameworkType) -> List[Framework]:
        return [fw for fw in self.frameworks if fw.type == framework_type]

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the JSON shape consumed by downstream tooling."""
        payload: Dict[str, Any] = {
            "path": self.path,
            "languages": [_language_stats_to_dict(stats) for stats in self.languages],
            "frameworks": [_framework_to_dict(fw) for fw in self.frameworks],
            "is_monorepo": self.is_monorepo,
        }
        if self.workspaces:
            payload["workspaces"] = [_workspace_to_dict(ws) for ws in self.workspaces]
        payload["total_files"] = self.total_files
        payload["excluded_paths"] = list(self.excluded_paths)
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Repository":
        """Rebuild a repository from :meth:`to_dict` output."""
        return cls(
            path=str(payload["path"]),
            languages=[_language_stats_from_dict(item) for item in payload.get("languages") or []],
            frameworks=[_framework_from_dict(item) for item in payload.get("frameworks") or []],
            is_monorepo=bool(payload.get("is_monorepo", False)),
            workspaces=[_workspace_from_dict(item) for item in payload.get("workspaces") or []],
            total_files=int(payload.get("total_files", 0)),
            excluded_paths=[str(item) for item in payload.get("excluded_paths") or []],
        )


def _language_stats_to_dict(stats: LanguageStats) -> Dict[str, Any]:
    return {
        "language": stats.language.value,
        "file_count": stats.file_count,
        "percentage": stats.percentage,
        "is_primary": stats.is_primary,
    }


def _language_stats_from_dict(payload: Mapping[str, Any]) -> LanguageStats:
    return LanguageStats(
        language=Language(payload["language"]),
        file_count=int(payload["file_count"]),
        percentage=float(payload["percentage"]),
        is_primary=bool(payload["is_primary"]),
    )


def _framework_to_dict(framework: Framework) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": framework.name,
        "language": framework.language.value,
        "type": framework.type.value,
    }
    if framework.version:
        payload["version"] = framework.version
    if framework.config_files:
        payload["config_files"] = list(framework.config_files)
    return payload


def _framework_from_dict(payload: Mapping[str, Any]) -> Framework:
    return Framework(
        name=str(payload["name"]),
        language=Language(payload["language"]),
        type=FrameworkType(payload["type"]),
        version=payload.get("version") or None,
        config_files=tuple(payload.get("config_files") or ()),
    )


def _workspace_to_dict(workspace: Workspace) -> Dict[str, Any]:
    return {
        "name": workspace.name,
        "path": workspace.path,
        "language": workspace.language.value,
        "type": workspace.type.value,
    }


def _workspace_from_dict(payload: Mapping[str, Any]) -> Workspace:
    return Workspace(
        name=str(payload["name"]),
        path=str(payload["path"]),
        language=Language(payload["language"]),
        type=WorkspaceType(payload["type"]),
    )
