"""Structural port-coverage tracking between a reference codebase and its reimplementation."""

__version__ = "0.1.0"
