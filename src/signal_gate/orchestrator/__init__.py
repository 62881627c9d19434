"""Maintenance loop — pruning and daily digest dispatch."""

from signal_gate.orchestrator.runner import run_loop, run_tick

__all__ = ["run_loop", "run_tick"]
