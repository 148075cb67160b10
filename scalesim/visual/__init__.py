"""Matplotlib charts for simulation runs.

Requires matplotlib; charts render with the non-interactive Agg backend.
"""

from scalesim.visual.plots import plot_components, plot_series

__all__ = ["plot_components", "plot_series"]
