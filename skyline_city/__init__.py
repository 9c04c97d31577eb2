"""
City Skyline - procedural parallax skyline for the terminal.
"""

__version__ = "0.1.0"

from .buildings import Building, City, Layer, LayerDesc
from .field_hash import FieldHash, cell_seed
from .grid import Grid

__all__ = [
    "Building",
    "City",
    "Layer",
    "LayerDesc",
    "FieldHash",
    "cell_seed",
    "Grid",
]
