"""Adaptive maze: shortest-path walking under regenerating obstacles."""

__version__ = "0.1.0"
