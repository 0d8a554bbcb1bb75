"""Simulated ST2 backend."""

from .sim import ISim, Sim, create_sim_app

__all__ = ["ISim", "Sim", "create_sim_app"]
