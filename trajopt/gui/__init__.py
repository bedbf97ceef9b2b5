"""Tk front end."""

from trajopt.gui.panel import TrajectoryOptimizationGUI, main

__all__ = ["TrajectoryOptimizationGUI", "main"]
