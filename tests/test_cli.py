"""Tests for the command-line interface."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from plural_rules.cli import build_parser, main


@pytest.fixture
def db_path() -> Generator[Path]:
    """Path for a temporary database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)

    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


class TestClassify:
    def test_russian_counts(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["classify", "ru", "1", "2", "5", "21"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines() == ["1\tone", "2\tfew", "5\tmany", "21\tone"]

    def test_suffix_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["classify", "fr", "0", "2", "--suffix"]) == 0
        assert capsys.readouterr().out.splitlines() == ["0\t_one", "2\t_other"]

    def test_unknown_locale_notes_fallback(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["classify", "xx-unknown", "21"]) == 0
        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["21\tother"]
        assert "one_singular" in captured.err

    def test_negative_count_is_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["classify", "ru", "-1"]) == 1
        assert "non-negative" in capsys.readouterr().err

    def test_non_integer_count_is_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["classify", "ru", "2.5"]) == 1
        assert "integer" in capsys.readouterr().err


class TestLocales:
    def test_lists_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["locales"]) == 0
        out = capsys.readouterr().out
        assert "pl-PL" in out
        assert "polish" in out
        assert "Default for other locales: one_singular" in out


class TestDescribe:
    def test_by_locale(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["describe", "cs-CZ", "--limit", "10"]) == 0
        out = capsys.readouterr().out
        assert out.strip() == "czech: one = 1; few = 2, 3, 4; other = 0, 5, 6, 7, 8, 9..."

    def test_by_rule(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["describe", "--rule", "no_singular", "--limit", "2"]) == 0
        assert capsys.readouterr().out.strip() == "no_singular: other = 0, 1, 2"

    def test_all_rules(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["describe"]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 7

    def test_unknown_rule(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["describe", "--rule", "dual"]) == 1
        assert "Unknown rule" in capsys.readouterr().err


class TestExportStatsVerify:
    def test_export_then_stats(self, db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["export", "-d", str(db_path), "--limit", "10"]) == 0
        assert "Samples: 77" in capsys.readouterr().out

        assert main(["stats", "-d", str(db_path)]) == 0
        out = capsys.readouterr().out
        assert "Locales: 8" in out
        assert "Samples by category:" in out

    def test_verify_with_database(self, db_path: Path) -> None:
        assert main(["export", "-d", str(db_path), "--limit", "10"]) == 0
        assert main(["verify", "-d", str(db_path)]) == 0

    def test_verify_rules_only(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["verify"]) == 0
        assert "checks passed" in capsys.readouterr().out

    def test_stats_missing_database(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["stats", "-d", "/nonexistent/plurals.db"]) == 1
        assert "Database not found" in capsys.readouterr().err

    def test_export_negative_limit(self, db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["export", "-d", str(db_path), "--limit", "-1"]) == 1
        assert "non-negative" in capsys.readouterr().err


class TestParser:
    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_log_level_case_insensitive(self) -> None:
        args = build_parser().parse_args(["--log-level", "debug", "locales"])
        assert args.log_level == "DEBUG"
