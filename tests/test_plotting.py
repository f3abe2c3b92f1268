# tests/test_plotting.py

"""
Smoke tests for the optional plotting helpers.

Skipped unless matplotlib and seaborn are installed.
"""

import pytest

matplotlib = pytest.importorskip("matplotlib")
pytest.importorskip("seaborn")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from juice_plant.analysis.plotting import (  # noqa: E402
    plot_backlog_over_time,
    plot_throughput_over_time
)
from juice_plant.measure import PlantStats  # noqa: E402


@pytest.fixture
def stats() -> PlantStats:
    s = PlantStats(items_per_unit=3)
    for _ in range(5):
        s.record_supplied()
        s.record_processed()
    return s


def test_plot_throughput_over_time(stats: PlantStats):
    ax = plot_throughput_over_time(stats, label="Plant[1]")
    assert ax.get_title() == "Oranges Supplied and Processed Over Time"
    assert len(ax.get_lines()) == 2
    plt.close("all")


def test_plot_backlog_over_time(stats: PlantStats):
    ax = plot_backlog_over_time(stats)
    assert ax.get_title() == "Backlog Over Time"
    plt.close("all")


def test_plot_without_data():
    ax = plot_throughput_over_time(PlantStats(items_per_unit=3))
    assert "No Data" in ax.get_title()
    plt.close("all")
