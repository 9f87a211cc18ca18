"""CLI entrypoints for shipshape commands."""

from __future__ import annotations

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Dict, List

from . import __version__
from .config import ConfigError, ShipShapeConfig, load_config
from .logging import configure_logging, get_logger
from .models import Framework, FrameworkType, Repository
from .repo_scanner import RepoScanner

_LOGGER = get_logger("cli")

_FRAMEWORK_SECTIONS = (
    (FrameworkType.TEST, "Testing"),
    (FrameworkType.COVERAGE, "Coverage"),
    (FrameworkType.LINT, "Linting"),
    (FrameworkType.FORMAT, "Formatting"),
    (FrameworkType.BUILD, "Build"),
    (FrameworkType.OTHER, "Other"),
)


def _add_global_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def _kwargs(default: object) -> dict[str, object]:
        return {"default": argparse.SUPPRESS if suppress_default else default}

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
        **_kwargs(False),
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors.",
        **_kwargs(False),
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a .shipshape.yml file (defaults to the repository root).",
        **_kwargs(None),
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file.",
        **_kwargs(None),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shipshape",
        description="Discover languages, test frameworks and quality tools in a repository.",
    )
    _add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser(
        "discover",
        help="Discover languages and frameworks in a repository.",
    )
    _add_global_options(discover_parser, suppress_default=True)
    discover_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    discover_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the discovery result as JSON.",
    )
    discover_parser.add_argument(
        "--include-hidden",
        action="store_true",
        help="Also walk hidden files and directories.",
    )
    discover_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Additional path segment or glob to exclude (repeatable).",
    )

    version_parser = subparsers.add_parser(
        "version",
        help="Show version information.",
    )
    _add_global_options(version_parser, suppress_default=True)
    version_format = version_parser.add_mutually_exclusive_group()
    version_format.add_argument(
        "--short",
        action="store_true",
        help="Show the version number only.",
    )
    version_format.add_argument(
        "--json",
        action="store_true",
        help="Print version information as JSON.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for shipshape commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=getattr(args, "log_file", None),
    )

    if args.command == "discover":
        _run_discover(parser, args)
    elif args.command == "version":
        _run_version(args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_discover(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    repo_path = Path(args.path)
    if not repo_path.exists():
        parser.exit(1, f"directory does not exist: {args.path}\n")
    if not repo_path.is_dir():
        parser.exit(1, f"not a directory: {args.path}\n")

    try:
        config = _load_cli_config(args, repo_path)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    patterns = config.exclude_patterns()
    for pattern in args.exclude:
        if pattern not in patterns:
            patterns.append(pattern)
    scanner = RepoScanner(
        exclude_patterns=patterns,
        include_hidden=bool(args.include_hidden) or config.discovery.include_hidden,
    )

    try:
        repo = scanner.scan(str(repo_path))
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        _LOGGER.debug("Discovery aborted", exc_info=True)
        parser.exit(1, f"shipshape discover failed: {exc}\nRun with --verbose for more details.\n")

    if args.json or config.output.format == "json":
        print(json.dumps(repo.to_dict(), indent=2))
    else:
        print(render_text(repo), end="")


def _load_cli_config(args: argparse.Namespace, repo_path: Path) -> ShipShapeConfig:
    config_arg = getattr(args, "config", None)
    if config_arg:
        config_path = Path(config_arg)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_arg}")
        config = load_config(config_path)
    else:
        config = load_config(repo_path)
    if config.source is not None:
        _LOGGER.debug("Using config file %s", config.source)
    return config


def render_text(repo: Repository) -> str:
    """Render the human-readable discovery summary."""
    lines: List[str] = [f"Repository: {repo.path}", f"Total Files: {repo.total_files}", ""]

    if repo.languages:
        lines.append("Languages:")
        for stats in repo.languages:
            primary = " (primary)" if stats.is_primary else ""
            lines.append(
                f"  • {stats.language}: {stats.percentage:.1f}% ({stats.file_count} files){primary}"
            )
    else:
        lines.append("Languages: None detected")
    lines.append("")

    if repo.frameworks:
        grouped: Dict[FrameworkType, List[Framework]] = {}
        for framework in repo.frameworks:
            grouped.setdefault(framework.type, []).append(framework)
        lines.append("Frameworks & Tools:")
        for framework_type, title in _FRAMEWORK_SECTIONS:
            items = grouped.get(framework_type)
            if not items:
                continue
            lines.append(f"  {title}:")
            lines.extend(f"    • {fw.name} ({fw.language})" for fw in items)
    else:
        lines.append("Frameworks & Tools: None detected")
    lines.append("")

    return "\n".join(lines) + "\n"


def _run_version(args: argparse.Namespace) -> None:
    info = {
        "version": __version__,
        "python_version": platform.python_version(),
        "platform": f"{sys.platform}/{platform.machine()}",
    }
    if args.short:
        print(__version__)
    elif args.json:
        print(json.dumps(info, indent=2))
    else:
        print(f"Ship Shape v{info['version']}")
        print(f"Python Version: {info['python_version']}")
        print(f"Platform: {info['platform']}")


if __name__ == "__main__":
    main(sys.argv[1:])
