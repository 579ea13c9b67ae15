"""Textured grid raycaster for .cub scene files, with a pygame front end."""

__version__ = "0.1.0"