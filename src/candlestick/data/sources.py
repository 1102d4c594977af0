"""Point source implementations for loading OHLC series.

This module provides an abstract interface for point sources and concrete
implementations for CSV files, JSON files, pandas DataFrames and Yahoo Finance.
Sources only convert rows into :class:`RawPoint`; ordering and date parsing are
left to :func:`candlestick.data.normalize.normalize`.
"""

from __future__ import annotations

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from candlestick.exceptions import DataSourceError
from candlestick.types import RawPoint

if TYPE_CHECKING:
    import pandas as pd


class PointSource(ABC):
    """Abstract base class for point sources.

    All point source implementations must inherit from this class and
    implement the `fetch_points` method.
    """

    @abstractmethod
    def fetch_points(self) -> Iterator[RawPoint]:
        """Yield the raw points of the series.

        :returns: Iterator of RawPoint objects in source order.
        :raises DataSourceError: If loading fails.
        """
        ...


def _point_from_row(
    row: dict[str, Any],
    date_col: str,
    open_col: str,
    high_col: str,
    low_col: str,
    close_col: str,
) -> RawPoint:
    try:
        return RawPoint(
            date=str(row[date_col]),
            open=float(row[open_col]),
            high=float(row[high_col]),
            low=float(row[low_col]),
            close=float(row[close_col]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DataSourceError(f"Failed to parse row {row}: {e}") from e


class CSVPointSource(PointSource):
    """Point source that reads OHLC rows from a CSV file.

    Expected CSV format (default columns):
    - date: Date string, ISO format
    - open, high, low, close: Values

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - date_col: Column name for the date (default: "date")
        - open_col: Column name for open (default: "open")
        - high_col: Column name for high (default: "high")
        - low_col: Column name for low (default: "low")
        - close_col: Column name for close (default: "close")
        - delimiter: CSV delimiter (default: ",")
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize CSV point source.

        :param source_params: Configuration with file_path and optional column mappings.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("CSVPointSource requires 'file_path' in source_params")

        # Column name mappings with defaults
        self.date_col = self.params.get("date_col", "date")
        self.open_col = self.params.get("open_col", "open")
        self.high_col = self.params.get("high_col", "high")
        self.low_col = self.params.get("low_col", "low")
        self.close_col = self.params.get("close_col", "close")
        self.delimiter = self.params.get("delimiter", ",")

    def fetch_points(self) -> Iterator[RawPoint]:
        """Read points from the CSV file.

        Rows with an empty date are skipped.

        :returns: Iterator of RawPoint objects.
        :raises DataSourceError: If reading fails.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"CSV file not found: {self.file_path}")

        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)
                for row in reader:
                    if not row.get(self.date_col):
                        continue
                    yield _point_from_row(
                        row,
                        self.date_col,
                        self.open_col,
                        self.high_col,
                        self.low_col,
                        self.close_col,
                    )
        except csv.Error as e:
            raise DataSourceError(f"CSV parsing error: {e}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read CSV file: {e}") from e


class JSONPointSource(PointSource):
    """Point source that reads a JSON array of point objects.

    Each object needs ``date``, ``open``, ``high``, ``low`` and ``close`` keys;
    other keys are ignored.

    :param source_params: Required parameters:
        - file_path: Path to the JSON file.
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("JSONPointSource requires 'file_path' in source_params")

    def fetch_points(self) -> Iterator[RawPoint]:
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"JSON file not found: {self.file_path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DataSourceError(f"Invalid JSON in {self.file_path}: {e}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read JSON file: {e}") from e

        if not isinstance(data, list):
            raise DataSourceError("JSON point file must contain an array of objects")

        for row in data:
            if not isinstance(row, dict):
                raise DataSourceError(f"Expected an object, got {type(row).__name__}")
            yield _point_from_row(row, "date", "open", "high", "low", "close")


class FramePointSource(PointSource):
    """Point source backed by a pandas DataFrame.

    Works with yfinance-style frames (``Open``/``High``/``Low``/``Close``
    columns with a DatetimeIndex) as well as frames with lowercase columns.

    :param frame: DataFrame holding the series.
    :param date_col: Column holding the date; the index is used when None.
    :param date_format: strftime format applied to datetime values.
    """

    def __init__(
        self,
        frame: pd.DataFrame,
        date_col: str | None = None,
        date_format: str = "%Y-%m-%d",
    ) -> None:
        self.frame = frame
        self.date_col = date_col
        self.date_format = date_format

    def _column(self, name: str) -> str:
        for candidate in (name, name.capitalize()):
            if candidate in self.frame.columns:
                return candidate
        raise DataSourceError(f"DataFrame is missing a '{name}' column")

    def _format_date(self, value: Any) -> str:
        if hasattr(value, "strftime"):
            return value.strftime(self.date_format)
        return str(value)

    def fetch_points(self) -> Iterator[RawPoint]:
        columns = {name: self._column(name) for name in ("open", "high", "low", "close")}
        if self.date_col is not None and self.date_col not in self.frame.columns:
            raise DataSourceError(f"DataFrame is missing a '{self.date_col}' column")

        for index, row in self.frame.iterrows():
            date_value = row[self.date_col] if self.date_col is not None else index
            try:
                yield RawPoint(
                    date=self._format_date(date_value),
                    open=float(row[columns["open"]]),
                    high=float(row[columns["high"]]),
                    low=float(row[columns["low"]]),
                    close=float(row[columns["close"]]),
                )
            except (TypeError, ValueError) as e:
                raise DataSourceError(f"Failed to convert row {index}: {e}") from e


class YahooPointSource(PointSource):
    """Point source that fetches daily history from Yahoo Finance via yfinance.

    :param source_params: Required parameters:
        - symbol: Ticker symbol.
        Optional parameters:
        - period: History period (default: "3mo")
        - interval: Bar interval (default: "1d")
        - timeout: Request timeout in seconds (default: 30)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.symbol = self.params.get("symbol")
        if not self.symbol:
            raise DataSourceError("YahooPointSource requires 'symbol' in source_params")
        self.period = self.params.get("period", "3mo")
        self.interval = self.params.get("interval", "1d")
        self.timeout = self.params.get("timeout", 30)

    def fetch_points(self) -> Iterator[RawPoint]:
        try:
            import yfinance as yf
        except ImportError as e:
            raise DataSourceError(
                "yfinance is not installed. Install it with: pip install yfinance"
            ) from e

        try:
            ticker = yf.Ticker(str(self.symbol))
            df = ticker.history(
                period=self.period,
                interval=self.interval,
                timeout=self.timeout,
            )
        except Exception as e:
            raise DataSourceError(
                f"Failed to fetch data for symbol '{self.symbol}': {e}"
            ) from e

        if df.empty:
            return

        # Intraday intervals need the time of day to keep dates distinct
        if self.interval.endswith(("d", "wk", "mo")):
            date_format = "%Y-%m-%d"
        else:
            date_format = "%Y-%m-%dT%H:%M:%S"
        yield from FramePointSource(df, date_format=date_format).fetch_points()


def resolve_point_source(kind: str, source_params: dict[str, Any] | None = None) -> PointSource:
    """Construct a point source from its type name.

    :param kind: Source type ("csv", "json" or "yahoo").
    :param source_params: Source-specific parameters.
    :returns: PointSource instance for the specified type.
    :raises DataSourceError: If the source type is unrecognized.
    """
    source_type = kind.lower()

    if source_type == "csv":
        return CSVPointSource(source_params)
    elif source_type == "json":
        return JSONPointSource(source_params)
    elif source_type == "yahoo":
        return YahooPointSource(source_params)
    else:
        raise DataSourceError(
            f"Unrecognized point source type: '{kind}'. "
            f"Supported types: csv, json, yahoo"
        )


__all__ = [
    "PointSource",
    "CSVPointSource",
    "JSONPointSource",
    "FramePointSource",
    "YahooPointSource",
    "resolve_point_source",
]
