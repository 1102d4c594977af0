"""Tests for command configuration loaders."""

from pathlib import Path

import pytest
import yaml

from candlestick.commands.render_chart import (build_controller,
                                               load_chart_config, load_points)
from candlestick.exceptions import ConfigError, DataSourceError
from candlestick.types import TimeWindow

CSV_TEXT = (
    "date,open,high,low,close\n"
    "2024-01-01,10,12,9,11\n"
    "2024-01-02,11,12,8,9\n"
    "2024-01-03,9,13,8.5,12\n"
)


def _write_config(tmp_path: Path, config: object) -> Path:
    path = tmp_path / "chart.yaml"
    path.write_text(yaml.safe_dump(config))
    return path


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    """CSV file with three daily points."""
    path = tmp_path / "prices.csv"
    path.write_text(CSV_TEXT)
    return path


class TestLoadChartConfig:
    """Tests for load_chart_config."""

    def test_minimal_config(self, tmp_path: Path, csv_file: Path) -> None:
        """Only source is required; everything else defaults."""
        path = _write_config(
            tmp_path, {"source": "csv", "source_params": {"file_path": str(csv_file)}}
        )

        config = load_chart_config(path)

        assert config.source == "csv"
        assert config.window is None
        assert config.display.bar_width == 8
        assert config.zoom.step == 0.1
        assert config.log_level == "INFO"

    def test_full_config(self, tmp_path: Path, csv_file: Path) -> None:
        """All sections are parsed."""
        path = _write_config(
            tmp_path,
            {
                "source": "csv",
                "source_params": {"file_path": str(csv_file)},
                "display": {
                    "height": 300,
                    "color_up": "#0f0",
                    "series": {"close": {"label": "Close", "color": "#333"}},
                },
                "window": {"start": "2024-01-01", "end": "2024-01-02"},
                "zoom": {"step": 0.2, "clamp_to_series": True, "min_span_ms": 1000},
                "logging": {"level": "debug"},
            },
        )

        config = load_chart_config(path)

        assert config.display.height == 300
        assert config.display.color_up == "#0f0"
        assert config.display.series["close"].label == "Close"
        assert config.window == TimeWindow(start="2024-01-01", end="2024-01-02")
        assert config.zoom.clamp_to_series is True
        assert config.zoom.min_span_ms == 1000
        assert config.log_level == "DEBUG"

    def test_relative_file_path_resolved_against_config(self, tmp_path: Path) -> None:
        """Relative data paths are relative to the config file."""
        path = _write_config(
            tmp_path, {"source": "csv", "source_params": {"file_path": "prices.csv"}}
        )

        config = load_chart_config(path)

        assert config.source_params["file_path"] == str(tmp_path / "prices.csv")

    def test_unquoted_yaml_dates_become_strings(self, tmp_path: Path) -> None:
        """YAML date scalars in the window are turned back into strings."""
        path = tmp_path / "chart.yaml"
        path.write_text("source: csv\nwindow:\n  start: 2024-01-01\n  end: 2024-01-03\n")

        config = load_chart_config(path)

        assert config.window == TimeWindow(start="2024-01-01", end="2024-01-03")

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_chart_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML raises ConfigError."""
        path = tmp_path / "chart.yaml"
        path.write_text("source: [csv\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_chart_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Top-level lists are rejected."""
        with pytest.raises(ConfigError, match="mapping"):
            load_chart_config(_write_config(tmp_path, ["csv"]))

    def test_missing_source(self, tmp_path: Path) -> None:
        """source is required."""
        with pytest.raises(ConfigError, match="Missing required field: source"):
            load_chart_config(_write_config(tmp_path, {"display": {}}))

    def test_invalid_source(self, tmp_path: Path) -> None:
        """Unknown sources are rejected."""
        with pytest.raises(ConfigError, match="Invalid source"):
            load_chart_config(_write_config(tmp_path, {"source": "parquet"}))

    def test_window_requires_both_bounds(self, tmp_path: Path) -> None:
        """A window without an end is rejected."""
        path = _write_config(tmp_path, {"source": "csv", "window": {"start": "2024-01-01"}})

        with pytest.raises(ConfigError, match="'start' and 'end'"):
            load_chart_config(path)

    def test_inverted_window_rejected(self, tmp_path: Path) -> None:
        """A configured window must not be inverted."""
        path = _write_config(
            tmp_path,
            {"source": "csv", "window": {"start": "2024-01-03", "end": "2024-01-01"}},
        )

        with pytest.raises(ConfigError, match="must not be after"):
            load_chart_config(path)

    def test_bad_display_value(self, tmp_path: Path) -> None:
        """Display sizes must be positive integers."""
        path = _write_config(tmp_path, {"source": "csv", "display": {"bar_width": 0}})

        with pytest.raises(ConfigError, match="display.bar_width"):
            load_chart_config(path)

    def test_bad_series_entry(self, tmp_path: Path) -> None:
        """Series entries need a label."""
        path = _write_config(
            tmp_path, {"source": "csv", "display": {"series": {"close": {"color": "#333"}}}}
        )

        with pytest.raises(ConfigError, match="display.series.close"):
            load_chart_config(path)

    def test_bad_zoom_step(self, tmp_path: Path) -> None:
        """Zoom step must be positive."""
        path = _write_config(tmp_path, {"source": "csv", "zoom": {"step": -1}})

        with pytest.raises(ConfigError, match="Invalid zoom"):
            load_chart_config(path)

    def test_bad_log_level(self, tmp_path: Path) -> None:
        """Unknown log levels are rejected."""
        path = _write_config(tmp_path, {"source": "csv", "logging": {"level": "loud"}})

        with pytest.raises(ConfigError, match="Invalid log level"):
            load_chart_config(path)


class TestLoadPoints:
    """Tests for load_points and build_controller."""

    def test_load_points_and_build(self, tmp_path: Path, csv_file: Path) -> None:
        """Points load from the source and feed a controller."""
        path = _write_config(
            tmp_path,
            {
                "source": "csv",
                "source_params": {"file_path": str(csv_file)},
                "window": {"start": "2024-01-02", "end": "2024-01-03"},
            },
        )
        config = load_chart_config(path)

        points = load_points(config)
        chart = build_controller(config, points)

        assert len(points) == 3
        assert [s.date for s in chart.segments()] == ["2024-01-02", "2024-01-03"]
        assert chart.reset_available is True

    def test_load_points_missing_file(self, tmp_path: Path) -> None:
        """A missing data file surfaces as DataSourceError."""
        path = _write_config(
            tmp_path, {"source": "csv", "source_params": {"file_path": "gone.csv"}}
        )
        config = load_chart_config(path)

        with pytest.raises(DataSourceError):
            load_points(config)
