"""Raycasting maze game: scene parsing, map checks, camera, rendering and the window loop."""

__version__ = "0.1.0"
__all__ = ["__version__"]