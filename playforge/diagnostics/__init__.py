"""Diagnostics for tuning the player economy."""

from .economy_simulator import EconomySimulator, SimulationResult

__all__ = ["EconomySimulator", "SimulationResult"]
