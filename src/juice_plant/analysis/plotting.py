# src/juice_plant/analysis/plotting.py

"""
Provides optional plotting utilities for visualizing plant throughput.

This module depends on 'matplotlib', 'seaborn' and 'numpy', which
are not part of the core package's dependencies. These are intended
to be installed via the '[analysis]' extra:

    pip install juice-plant[analysis]

All functions take a 'PlantStats' object as their data source.
"""

import logging
from typing import Optional

# Optional Dependency Handling
try:
    import matplotlib.pyplot as plt
    import matplotlib.axes
    import seaborn as sns
except ImportError:
    log = logging.getLogger(__name__)
    log.error("Analysis dependencies (matplotlib, seaborn, numpy) not found.")
    log.error("Please install them with: pip install juice-plant[analysis]")
    raise

from ..measure import PlantStats
from .throughput import calculate_throughput

log = logging.getLogger(__name__)

# Set a nice default style for the plots
sns.set_theme(style="whitegrid")


def plot_throughput_over_time(
    stats: PlantStats,
    ax: Optional[matplotlib.axes.Axes] = None,
    label: str = ""
) -> matplotlib.axes.Axes:
    """
    Generates step plots of cumulative supplied and processed oranges.

    The gap between the two curves is the plant's backlog: oranges
    supplied but not yet bottled.

    Args:
        stats (PlantStats): The tracker of a stopped plant.
        ax (Optional[matplotlib.axes.Axes]): The matplotlib Axes
            on which to draw the plot. If None, a new Figure/Axes is created.
        label (str): Prefix for the legend entries, e.g. the plant name.

    Returns:
        matplotlib.axes.Axes: The Axes object with the plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 6))

    data = calculate_throughput(stats)
    if data is None:
        log.warning("Not enough samples to plot throughput. Plot will be empty.")
        ax.set_title("Throughput Over Time (No Data)")
        return ax

    prefix = f"{label} " if label else ""
    ax.step(data["elapsed"], data["supplied"], where="post",
            label=f"{prefix}Supplied")
    ax.step(data["elapsed"], data["processed"], where="post",
            label=f"{prefix}Processed "
                  f"({data['mean_processing_rate']:.1f}/s)")

    ax.set_title("Oranges Supplied and Processed Over Time")
    ax.set_xlabel("Elapsed Time (s)")
    ax.set_ylabel("Oranges (cumulative)")
    ax.set_ylim(bottom=0)
    ax.set_xlim(left=0)
    ax.legend()

    log.debug("Plotted throughput over time.")

    return ax


def plot_backlog_over_time(
    stats: PlantStats,
    ax: Optional[matplotlib.axes.Axes] = None
) -> matplotlib.axes.Axes:
    """
    Generates a step plot of the backlog (supplied minus processed).

    Args:
        stats (PlantStats): The tracker of a stopped plant.
        ax (Optional[matplotlib.axes.Axes]): The matplotlib Axes
            on which to draw the plot. If None, a new Figure/Axes is created.

    Returns:
        matplotlib.axes.Axes: The Axes object with the plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 6))

    data = calculate_throughput(stats)
    if data is None:
        log.warning("Not enough samples to plot backlog. Plot will be empty.")
        ax.set_title("Backlog Over Time (No Data)")
        return ax

    backlog = data["backlog"]
    ax.step(data["elapsed"], backlog, where="post")
    ax.axhline(
        backlog.mean(),
        color="red",
        linestyle="--",
        label=f"Mean Backlog: {backlog.mean():.2f}"
    )

    ax.set_title("Backlog Over Time")
    ax.set_xlabel("Elapsed Time (s)")
    ax.set_ylabel("Oranges Waiting or In Process")
    ax.set_ylim(bottom=0)
    ax.set_xlim(left=0)
    ax.legend()

    log.debug("Plotted backlog over time.")

    return ax
