"""Tests for shipshape.discovery.language."""

from __future__ import annotations

import pytest

from shipshape.discovery.language import (
    EXTENSION_LANGUAGES,
    LanguageDetector,
    build_language_stats,
)
from shipshape.models import Language


def test_build_stats_orders_by_percentage_and_applies_threshold() -> None:
    stats = build_language_stats(
        {Language.PYTHON: 3, Language.JAVASCRIPT: 1, Language.GO: 6}
    )

    assert [row.language for row in stats] == [
        Language.GO,
        Language.PYTHON,
        Language.JAVASCRIPT,
    ]
    assert [row.percentage for row in stats] == [60.0, 30.0, 10.0]
    assert [row.is_primary for row in stats] == [True, True, False]


@pytest.mark.parametrize(
    ("count", "total", "expected"),
    [
        (1, 10, False),
        (1001, 10000, True),
        (15, 100, True),
        (1, 11, False),
    ],
)
def test_primary_threshold_is_strictly_above_ten_percent(
    count: int, total: int, expected: bool
) -> None:
    stats = build_language_stats({Language.RUST: count, Language.JAVA: total - count})

    rust = next(row for row in stats if row.language is Language.RUST)
    assert rust.is_primary is expected


def test_build_stats_breaks_ties_by_language_name() -> None:
    stats = build_language_stats({Language.RUBY: 2, Language.GO: 2, Language.JAVA: 2})

    assert [row.language for row in stats] == [Language.GO, Language.JAVA, Language.RUBY]


def test_build_stats_returns_empty_for_no_files() -> None:
    assert build_language_stats({}) == []


def test_detect_counts_only_classified_files(repo_builder) -> None:
    repo_builder.touch(
        [
            "cmd/main.go",
            "pkg/util.go",
            "scripts/tool.py",
            "notebooks/analysis.ipynb",
            "README.md",
            "config.yaml",
            "data.json",
            "Makefile",
        ]
    )

    stats = LanguageDetector(repo_builder.walker()).detect()

    by_language = {row.language: row for row in stats}
    assert set(by_language) == {Language.GO, Language.PYTHON}
    assert by_language[Language.GO].file_count == 2
    assert by_language[Language.PYTHON].file_count == 2
    assert sum(row.percentage for row in stats) == pytest.approx(100.0)


def test_detect_ruby_convention_files(repo_builder) -> None:
    repo_builder.touch(["Gemfile", "Rakefile"])

    stats = LanguageDetector(repo_builder.walker()).detect()

    assert len(stats) == 1
    assert stats[0].language is Language.RUBY
    assert stats[0].file_count == 2
    assert stats[0].percentage == pytest.approx(100.0)
    assert stats[0].is_primary is True


def test_detect_returns_empty_when_nothing_classifies(repo_builder) -> None:
    repo_builder.touch(["README.md", "Makefile", "docs/guide.rst"])

    assert LanguageDetector(repo_builder.walker()).detect() == []


def test_detect_is_case_insensitive_for_extensions(repo_builder) -> None:
    repo_builder.touch(["App.TS", "Main.Java", "gemfile"])

    stats = LanguageDetector(repo_builder.walker()).detect()

    assert {row.language for row in stats} == {
        Language.TYPESCRIPT,
        Language.JAVA,
        Language.RUBY,
    }


def test_detect_ignores_excluded_directories(repo_builder) -> None:
    repo_builder.touch(["src/index.ts", "node_modules/lib/index.js", "dist/bundle.js"])

    stats = LanguageDetector(repo_builder.walker()).detect()

    assert [(row.language, row.file_count) for row in stats] == [(Language.TYPESCRIPT, 1)]


def test_detect_percentages_sum_to_hundred_for_mixed_repo(repo_builder) -> None:
    repo_builder.touch(
        ["a.go", "b.go", "c.py", "d.js", "e.ts", "f.rs", "g.cs", "h.rb", "i.java"]
    )

    stats = LanguageDetector(repo_builder.walker()).detect()

    assert len(stats) == 8
    assert sum(row.percentage for row in stats) == pytest.approx(100.0)
    assert stats[0].language is Language.GO


def test_detect_accepts_substituted_tables(repo_builder) -> None:
    repo_builder.touch(["a.go", "b.py"])

    detector = LanguageDetector(
        repo_builder.walker(), extensions={".py": Language.PYTHON}, filenames={}
    )
    stats = detector.detect()

    assert [(row.language, row.percentage) for row in stats] == [(Language.PYTHON, 100.0)]


def test_detect_is_repeatable(repo_builder) -> None:
    repo_builder.touch(["a.go", "b.py", "c.py"])
    detector = LanguageDetector(repo_builder.walker())

    assert detector.detect() == detector.detect()


def test_extension_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        EXTENSION_LANGUAGES[".kt"] = Language.JAVA  # type: ignore[index]
