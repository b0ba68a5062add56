"""Cell geometry, shape libraries and synthetic cell generation."""

from .abstraction import Point, Rectangle, ORIGIN
from .library import ShapeLibrary, get_library, list_libraries, REFERENCE
from .generator import CellGenerator, generate_cells

__all__ = [
    "Point",
    "Rectangle",
    "ORIGIN",
    "ShapeLibrary",
    "get_library",
    "list_libraries",
    "REFERENCE",
    "CellGenerator",
    "generate_cells",
]
