"""Tests for shipshape.repo_scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from shipshape.config import load_config
from shipshape.discovery.frameworks import FrameworkDetector
from shipshape.discovery.language import LanguageDetector
from shipshape.discovery.walker import DEFAULT_EXCLUDE_PATTERNS
from shipshape.models import FrameworkType, Language
from shipshape.repo_scanner import RepoScanner
from tests._fixtures.repo_builder import deny_directory


def test_scan_builds_repository(repo_builder) -> None:
    repo_builder.write(
        {
            "go.mod": "module example.com/app\n\nrequire github.com/stretchr/testify v1.8.4\n",
            "cmd/app/main.go": "package main\n",
            "internal/store/store.go": "package store\n",
            "internal/store/store_test.go": "package store\n",
            "scripts/seed.py": "print('seed')\n",
            "README.md": "# app\n",
            "node_modules/pkg/index.js": "module.exports = {}\n",
        }
    )

    repo = repo_builder.scan()

    assert repo.path == str(repo_builder.path().resolve())
    assert repo.total_files == 6
    assert [(row.language, row.file_count) for row in repo.languages] == [
        (Language.GO, 3),
        (Language.PYTHON, 1),
    ]
    assert [row.is_primary for row in repo.languages] == [True, True]
    assert [(fw.name, fw.type) for fw in repo.frameworks] == [
        ("testify", FrameworkType.TEST),
        ("testing", FrameworkType.TEST),
    ]
    assert repo.is_monorepo is False
    assert repo.workspaces == []
    assert repo.excluded_paths == list(DEFAULT_EXCLUDE_PATTERNS)


def test_scan_empty_repository(repo_builder) -> None:
    repo = repo_builder.scan()

    assert repo.languages == []
    assert repo.frameworks == []
    assert repo.total_files == 0


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        RepoScanner().scan(str(missing))

    assert str(missing) in str(excinfo.value)


def test_scan_rejects_file_path(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        RepoScanner().scan(str(target))


def test_scan_applies_custom_exclusions_and_hidden_flag(repo_builder) -> None:
    repo_builder.touch(["app.py", "generated/client.py", ".tools/lint.py"])

    repo = RepoScanner(exclude_patterns=["generated"], include_hidden=True).scan(
        str(repo_builder.path())
    )

    assert repo.total_files == 2
    assert repo.excluded_paths == ["generated"]
    assert repo.languages[0].file_count == 2


def test_scanner_from_config(repo_builder) -> None:
    repo_builder.write(
        {
            ".shipshape.yml": """
            exclude_paths:
              - fixtures
            discovery:
              include_hidden: true
            """,
            "src/main.rs": "fn main() {}\n",
            "fixtures/sample.rs": "fn sample() {}\n",
        }
    )

    scanner = RepoScanner.from_config(load_config(repo_builder.path()))
    repo = scanner.scan(str(repo_builder.path()))

    assert scanner.include_hidden is True
    assert repo.excluded_paths[-1] == "fixtures"
    assert [(row.language, row.file_count) for row in repo.languages] == [(Language.RUST, 1)]
    # include_hidden makes the config file itself visible to the walk.
    assert repo.total_files == 2


def test_scan_is_idempotent(repo_builder) -> None:
    repo_builder.write(
        {
            "package.json": '{"devDependencies": {"jest": "29", "prettier": "3"}}',
            "src/index.js": "export {}\n",
            "src/index.test.js": "test('x', () => {})\n",
            "tests/test_tool.py": "import unittest\n",
        }
    )

    assert repo_builder.scan() == repo_builder.scan()


@pytest.mark.parametrize(
    "run",
    [
        lambda builder: builder.walker().walk(lambda info: None),
        lambda builder: LanguageDetector(builder.walker()).detect(),
        lambda builder: FrameworkDetector(builder.path(), builder.walker()).detect(),
        lambda builder: builder.scan(),
    ],
    ids=["walker", "languages", "frameworks", "scanner"],
)
def test_unreadable_subdirectory_aborts_discovery(repo_builder, monkeypatch, run) -> None:
    repo_builder.touch(["app.py", "locked/secret.py"])
    deny_directory(monkeypatch, "locked")

    with pytest.raises(PermissionError):
        run(repo_builder)
