#!/usr/bin/env python3
"""Command-line interface for the candlestick chart core."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("candlestick")


def configure_logging(level: str = "INFO") -> None:
    """Send package logs to stderr through rich."""
    if not logger.handlers:
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
        logger.propagate = False
    logger.setLevel(level.upper())


def cmd_render(args: argparse.Namespace) -> int:
    """Render a chart from configuration, replaying the given events."""
    from candlestick.commands.render_chart import (build_controller,
                                                   load_chart_config,
                                                   load_points)
    from candlestick.exceptions import ChartError, ConfigError, DataSourceError
    from candlestick.render import JsonBackend, TableBackend

    try:
        config = load_chart_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    configure_logging(args.log_level or config.log_level)

    try:
        points = load_points(config)
    except DataSourceError as e:
        print(f"Failed to load points: {e}")
        return 1

    chart = build_controller(config, points)
    logger.info("Loaded %d points (%d usable)", len(points), len(chart.viewport.series))

    if len(chart.viewport.series) < 2:
        print("At least two points with valid dates are needed to draw a chart.")
        return 1

    try:
        if args.select:
            left, right = args.select
            chart.begin_select(left)
            chart.update_select(right)
            chart.commit_select()

        for delta_y, pivot in args.wheel or []:
            chart.handle_wheel(delta_y, pivot)

        if args.reset:
            chart.reset_window()

        frame = chart.frame()
    except ChartError as e:
        print(f"Chart error: {e}")
        return 1

    backend = JsonBackend() if args.format == "json" else TableBackend()
    backend.draw(frame)
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Summarize a point file after normalization."""
    from candlestick.data import normalize, resolve_point_source
    from candlestick.exceptions import DataSourceError
    from candlestick.render import build_segments, segment_columns, value_domain

    configure_logging(args.log_level or "INFO")

    try:
        source = resolve_point_source(args.source, {"file_path": args.file})
        raw_points = list(source.fetch_points())
    except DataSourceError as e:
        print(f"Failed to load points: {e}")
        return 1

    series = normalize(raw_points)
    segments = build_segments(series)
    columns = segment_columns(segments)
    ups = int(columns["up"].sum())

    print("=" * 60)
    print(f"SERIES: {args.file}")
    print("=" * 60)
    print(f"Points:      {len(raw_points)}")
    print(f"Usable:      {len(series)}")
    print(f"Dropped:     {len(raw_points) - len(series)}")
    domain = value_domain(segments)
    if domain is not None:
        print(f"First:       {series[0].date}")
        print(f"Last:        {series[-1].date}")
        print(f"Domain:      {domain[0]:.4f} to {domain[1]:.4f}")
        print(f"Up/Down:     {ups}/{len(segments) - ups}")
        print(f"Avg body:    {columns['bar_height'].mean():.4f}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Interactive candlestick chart core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser(
        "render", help="Render the visible candles for a chart configuration"
    )
    render_parser.add_argument("config", help="Path to YAML configuration file")
    render_parser.add_argument(
        "-f",
        "--format",
        default="table",
        choices=["table", "json"],
        help="Output format (default: table)",
    )
    render_parser.add_argument(
        "--select",
        nargs=2,
        metavar=("LEFT", "RIGHT"),
        help="Drag-select from one date label to another",
    )
    render_parser.add_argument(
        "--wheel",
        nargs=2,
        type=float,
        action="append",
        metavar=("DELTA_Y", "PIVOT"),
        help="Wheel event; negative DELTA_Y zooms in (repeatable)",
    )
    render_parser.add_argument(
        "--reset", action="store_true", help="Reset to the full range last"
    )

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect", help="Summarize a point file after normalization"
    )
    inspect_parser.add_argument("file", help="Path to a CSV or JSON point file")
    inspect_parser.add_argument(
        "-s",
        "--source",
        default="csv",
        choices=["csv", "json"],
        help="File format (default: csv)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "render":
        return cmd_render(args)
    elif args.command == "inspect":
        return cmd_inspect(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
