"""Configuration and execution for the render command.

Example config file (chart.yaml):

    source: "csv"
    source_params:
      file_path: "prices.csv"
    display:
      height: 400
      color_up: "#00906F"
      color_down: "#B23507"
      bar_width: 8
      line_width: 4
      series:
        close: {label: "Close", color: "#333333"}
    window:                 # Optional
      start: "2024-01-02"
      end: "2024-01-04"
    zoom:                   # Optional
      step: 0.1
      clamp_to_series: false
      min_span_ms: null
    logging:                # Optional
      level: "INFO"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from candlestick.controller import ChartController
from candlestick.data.sources import resolve_point_source
from candlestick.exceptions import ConfigError
from candlestick.types import (ChartConfig, DisplayConfig, RawPoint,
                               TimeWindow, ZoomPolicy)

# Valid point source types
VALID_SOURCES = frozenset(["csv", "json", "yahoo"])

# Valid logging levels
VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


def _parse_mapping(raw_config: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw_config.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _parse_display(raw: dict[str, Any]) -> DisplayConfig:
    """Build display parameters, naming the offending field on failure.

    :param raw: The ``display`` mapping.
    :returns: Validated DisplayConfig.
    :raises ConfigError: If a field has the wrong type or a series entry is malformed.
    """
    series = raw.get("series", {})
    if not isinstance(series, dict):
        raise ConfigError("'display.series' must be a mapping")
    for name, entry in series.items():
        if not isinstance(entry, dict) or "label" not in entry:
            raise ConfigError(f"'display.series.{name}' must be a mapping with a 'label'")

    for field in ("height", "bar_width", "line_width"):
        if field in raw and (not isinstance(raw[field], int) or raw[field] <= 0):
            raise ConfigError(f"'display.{field}' must be a positive integer")

    try:
        return DisplayConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid display configuration: {e}") from e


def _parse_window(raw: Any) -> TimeWindow | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ConfigError("'window' must be a mapping with 'start' and 'end'")
    if "start" not in raw or "end" not in raw:
        raise ConfigError("'window' must contain 'start' and 'end'")

    # YAML turns unquoted dates into date objects
    start, end = str(raw["start"]), str(raw["end"])
    if start > end:
        raise ConfigError("'window.start' must not be after 'window.end'")
    return TimeWindow(start=start, end=end)


def _parse_zoom(raw: dict[str, Any]) -> ZoomPolicy:
    try:
        return ZoomPolicy.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid zoom configuration: {e}") from e


def load_chart_config(config_path: str | Path) -> ChartConfig:
    """Parse and validate a chart configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated ChartConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    if "source" not in raw_config:
        raise ConfigError("Missing required field: source")

    source = raw_config["source"]
    if source not in VALID_SOURCES:
        raise ConfigError(
            f"Invalid source '{source}'. Valid options: {sorted(VALID_SOURCES)}"
        )

    source_params = _parse_mapping(raw_config, "source_params")

    # Relative file paths resolve against the config file's directory
    file_path = source_params.get("file_path")
    if file_path and not Path(file_path).is_absolute():
        source_params = {
            **source_params,
            "file_path": str(config_path.parent / file_path),
        }

    display = _parse_display(_parse_mapping(raw_config, "display"))
    window = _parse_window(raw_config.get("window"))
    zoom = _parse_zoom(_parse_mapping(raw_config, "zoom"))

    # Parse logging (optional)
    raw_logging = _parse_mapping(raw_config, "logging")
    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return ChartConfig(
        source=source,
        source_params=source_params,
        display=display,
        window=window,
        zoom=zoom,
        log_level=log_level,
    )


def load_points(config: ChartConfig) -> list[RawPoint]:
    """Fetch every raw point from the configured source.

    :param config: Chart configuration.
    :returns: Points in source order.
    :raises DataSourceError: If the source cannot be built or read.
    """
    source = resolve_point_source(config.source, config.source_params)
    return list(source.fetch_points())


def build_controller(config: ChartConfig, points: list[RawPoint]) -> ChartController:
    """Create a controller for ``points`` using the display, window and zoom settings."""
    return ChartController(
        points,
        display=config.display,
        zoom_policy=config.zoom,
        window=config.window,
    )
