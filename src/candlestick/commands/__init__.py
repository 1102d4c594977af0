"""CLI command implementations for the candlestick chart.

Each command module provides:
- Configuration loading and validation
- Command execution logic
- Integration with core library functions
"""

from candlestick.commands.render_chart import (build_controller,
                                               load_chart_config, load_points)

__all__ = [
    "load_chart_config",
    "load_points",
    "build_controller",
]
