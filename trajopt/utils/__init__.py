"""
Utility functions and helpers.

Currently plotting of solved trajectories.
"""

from .plotting import plot_trajectory

__all__ = [
    "plot_trajectory",
]
