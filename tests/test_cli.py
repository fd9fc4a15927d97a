"""Tests for the snapline CLI."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from snapline.cli import app
from snapline.config import settings

runner = CliRunner()

SQUARE = "M0,0L100,0L100,100L0,100Z"


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Every invocation reconfigures the root logger; undo that afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestNormalizeCommand:
    def test_path_string(self) -> None:
        result = runner.invoke(app, ["normalize", "M0,0L100,100"])
        assert result.exit_code == 0
        assert result.output.strip() == "M0,0C0,0,100,100,100,100"

    def test_json_segments(self) -> None:
        result = runner.invoke(app, ["normalize", '[["M", 0, 0], ["L", 100, 100]]'])
        assert result.exit_code == 0
        assert result.output.strip() == "M0,0C0,0,100,100,100,100"

    def test_invalid_json(self) -> None:
        result = runner.invoke(app, ["normalize", '[["M", 0'])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_json_not_segments(self) -> None:
        result = runner.invoke(app, ["normalize", '["M", 0, 0]'])
        assert result.exit_code == 1


class TestIntersectCommand:
    def test_count(self) -> None:
        result = runner.invoke(app, ["intersect", "M0,0L100,100", "M0,100L100,0", "--count"])
        assert result.exit_code == 0
        assert result.output.strip() == "1"

    def test_table(self) -> None:
        result = runner.invoke(app, ["intersect", "M0,0L100,100", "M0,100L100,0"])
        assert result.exit_code == 0
        assert "Intersections" in result.output
        assert "0.5000" in result.output

    def test_no_intersections(self) -> None:
        result = runner.invoke(app, ["intersect", "M0,0L10,10", "M50,50L60,60"])
        assert result.exit_code == 0
        assert "No intersections found" in result.output


class TestCropCommand:
    def test_crop_start(self) -> None:
        result = runner.invoke(app, ["crop", SQUARE, "M50,50L200,50"])
        assert result.exit_code == 0
        assert result.output.strip() == "100,50"

    def test_crop_end(self) -> None:
        result = runner.invoke(app, ["crop", SQUARE, "M-50,50L150,50", "--end"])
        assert result.exit_code == 0
        assert result.output.strip() == "0,50"

    def test_miss(self) -> None:
        result = runner.invoke(app, ["crop", SQUARE, "M200,200L300,300"])
        assert result.exit_code == 1


class TestGridCommands:
    def test_snap(self) -> None:
        result = runner.invoke(app, ["snap", "17"])
        assert result.exit_code == 0
        assert result.output.strip() == "20"

    def test_snap_with_offset(self) -> None:
        result = runner.invoke(app, ["snap", "17", "--offset", "5"])
        assert result.output.strip() == "15"

    def test_snap_with_bounds(self) -> None:
        result = runner.invoke(app, ["snap", "95", "--max", "93"])
        assert result.output.strip() == "90"

    def test_quantize(self) -> None:
        result = runner.invoke(app, ["quantize", "11", "--mode", "ceil"])
        assert result.exit_code == 0
        assert result.output.strip() == "20"

    def test_quantize_invalid_mode(self) -> None:
        result = runner.invoke(app, ["quantize", "11", "--mode", "nearest"])
        assert result.exit_code == 1
        assert "Invalid quantize mode" in result.output

    def test_quantize_zero_quantum(self) -> None:
        result = runner.invoke(app, ["quantize", "11", "--quantum", "0"])
        assert result.exit_code == 1
        assert "quantum must be positive" in result.output


class TestLoggingOptions:
    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "snapline.log"
        result = runner.invoke(
            app,
            ["--verbose", "--log-file", str(log_file), "normalize", '[["M", 0, 0], ["L", 10, 10]]'],
        )

        assert result.exit_code == 0
        assert "Read 2 JSON path segments" in log_file.read_text()

    def test_log_file_from_settings(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        log_file = tmp_path / "snapline.log"
        monkeypatch.setattr(settings, "log_file", str(log_file))

        result = runner.invoke(app, ["--verbose", "normalize", '[["M", 5, 5]]'])

        assert result.exit_code == 0
        assert "Read 1 JSON path segments" in log_file.read_text()

    def test_quiet_by_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(settings, "log_level", "INFO")
        log_file = tmp_path / "snapline.log"
        result = runner.invoke(app, ["--log-file", str(log_file), "normalize", '[["M", 0, 0]]'])

        assert result.exit_code == 0
        assert "Read 1 JSON path segments" not in log_file.read_text()
