"""Geometry helpers shared by the engine and the exporters."""
