"""Offline diagnostics for reward pools."""

from .draw_simulator import DrawSimulator, SimulationResult

__all__ = ["DrawSimulator", "SimulationResult"]
