"""
RowLegal - Standard-Cell Row Legalization

Generates synthetic standard-cell placements from a small shape library and
legalizes them row by row so that no two cells in the same row overlap.
"""

__version__ = "0.1.0"
__author__ = "RowLegal Team"

from .layout.abstraction import Point, Rectangle
from .layout.library import ShapeLibrary, get_library
from .placement.legalizer import (
    RowLegalizer,
    LegalizerConfig,
    LegalizationResult,
    legalize_cells,
)

__all__ = [
    "Point",
    "Rectangle",
    "ShapeLibrary",
    "get_library",
    "RowLegalizer",
    "LegalizerConfig",
    "LegalizationResult",
    "legalize_cells",
]
