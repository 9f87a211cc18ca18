"""Configuration loading for shipshape (.shipshape.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .discovery.walker import DEFAULT_EXCLUDE_PATTERNS

CONFIG_FILENAME = ".shipshape.yml"
OUTPUT_FORMATS = ("text", "json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DiscoveryConfig:
    """Walker settings."""

    exclude_patterns: Optional[List[str]] = None
    include_hidden: bool = False


@dataclass
class OutputConfig:
    """How discovery results are printed."""

    format: str = "text"


@dataclass
class ShipShapeConfig:
    """Represents the settings defined in .shipshape.yml."""

    root: Path
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    exclude_paths: List[str] = field(default_factory=list)
    source: Optional[Path] = None

    def exclude_patterns(self) -> List[str]:
        """Return the effective walker exclusions.

        ``discovery.exclude_patterns`` replaces the defaults; top-level
        ``exclude_paths`` entries are appended either way.
        """
        if self.discovery.exclude_patterns is not None:
            patterns = list(self.discovery.exclude_patterns)
        else:
            patterns = list(DEFAULT_EXCLUDE_PATTERNS)
        for pattern in self.exclude_paths:
            if pattern not in patterns:
                patterns.append(pattern)
        return patterns


def load_config(config_path: Path) -> ShipShapeConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ShipShapeConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    discovery_data = _as_dict(data.get("discovery"))
    discovery = DiscoveryConfig()
    if discovery_data:
        if "exclude_patterns" in discovery_data:
            discovery.exclude_patterns = _as_str_list(discovery_data.get("exclude_patterns"))
        discovery.include_hidden = _as_bool(discovery_data.get("include_hidden")) or False

    output_data = _as_dict(data.get("output"))
    output = OutputConfig()
    if output_data:
        fmt = _as_str(output_data.get("format"))
        if fmt is not None:
            fmt = fmt.lower()
            if fmt not in OUTPUT_FORMATS:
                raise ConfigError(
                    f"output.format must be one of {', '.join(OUTPUT_FORMATS)} (got {fmt!r})"
                )
            output.format = fmt

    return ShipShapeConfig(
        root=root,
        discovery=discovery,
        output=output,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        source=config_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DiscoveryConfig",
    "OutputConfig",
    "ShipShapeConfig",
    "load_config",
]
