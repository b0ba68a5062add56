"""
Shape Libraries

A shape library is the fixed, ordered set of cell templates the generator
samples from. Widths are expressed in grid columns and every template is one
grid row tall, so a library only becomes concrete rectangles once a grid is
known.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..errors import ConfigError
from .abstraction import ORIGIN, Point, Rectangle


@dataclass(frozen=True)
class ShapeLibrary:
    """Named set of standard-cell widths."""

    name: str
    description: str = ""

    # Cell widths in grid columns, in library order
    widths: Tuple[float, ...] = field(default_factory=tuple)

    # Cell height in grid rows
    height_rows: float = 1.0

    def __len__(self) -> int:
        return len(self.widths)

    def templates(self, grid: Point) -> Tuple[Rectangle, ...]:
        """
        Build the template rectangles for a grid.

        Templates sit at the origin; the generator offsets them by a
        sampled position.
        """
        return tuple(
            Rectangle(ORIGIN, Point(width * grid.x, self.height_rows * grid.y))
            for width in self.widths
        )


# Pre-defined libraries

REFERENCE = ShapeLibrary(
    name="reference",
    description="Four cell widths (20, 40, 160, 320 columns), one row tall",
    widths=(20.0, 40.0, 160.0, 320.0),
)

NARROW = ShapeLibrary(
    name="narrow",
    description="Small cells only, useful for dense rows",
    widths=(2.0, 4.0, 8.0, 16.0),
)

UNIFORM = ShapeLibrary(
    name="uniform",
    description="A single 40 column cell",
    widths=(40.0,),
)

# Library registry
LIBRARIES: Dict[str, ShapeLibrary] = {
    "reference": REFERENCE,
    "narrow": NARROW,
    "uniform": UNIFORM,
}


def get_library(name: str) -> ShapeLibrary:
    """
    Get shape library by name.

    Args:
        name: Library identifier (e.g., "reference")

    Returns:
        ShapeLibrary instance

    Raises:
        ConfigError: If library name is not found
    """
    if name not in LIBRARIES:
        available = ", ".join(sorted(LIBRARIES.keys()))
        raise ConfigError(f"Unknown shape library '{name}'. Available: {available}")
    return LIBRARIES[name]


def list_libraries() -> List[str]:
    """List all available shape library names."""
    return sorted(LIBRARIES.keys())
