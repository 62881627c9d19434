"""Digest dispatch."""

from signal_gate.digest.dispatcher import DigestDispatcher, render_digest

__all__ = ["DigestDispatcher", "render_digest"]
