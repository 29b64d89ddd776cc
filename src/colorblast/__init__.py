"""Deterministic grid core for a tap-to-blast colour matching game."""
