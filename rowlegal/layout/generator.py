"""
Synthetic cell generation.

Cells are scattered around the middle of the boundary with a 2-D Gaussian
(standard deviation is a fifth of the boundary size per axis) and take their
size from a uniformly chosen library template. Randomness always comes from
an explicit ``random.Random`` handle so runs are reproducible with a seed.
"""

import logging
import random
from typing import List, Optional, Sequence

from ..errors import ConfigError, PreconditionError
from .abstraction import Point, Rectangle

logger = logging.getLogger(__name__)

# Standard deviation of the position distribution, as a fraction of the boundary size
SPREAD_DIVISOR = 5.0


class CellGenerator:
    """Samples cells from a library of templates inside a boundary."""

    def __init__(
        self,
        boundary: Rectangle,
        templates: Sequence[Rectangle],
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            boundary: Canvas the positions are centred on
            templates: Library templates (see ShapeLibrary.templates)
            rng: Random engine to draw from; a new one is created if omitted
            seed: Seed for the new engine when ``rng`` is not given
        """
        if not templates:
            raise ConfigError("shape library is empty")
        self.boundary = boundary
        self.templates = tuple(templates)
        self.rng = rng if rng is not None else random.Random(seed)

        self._mean = boundary.center()
        self._sigma = boundary.size / SPREAD_DIVISOR

    def generate_cell(self) -> Rectangle:
        """Draw a single cell."""
        template = self.templates[self.rng.randrange(len(self.templates))]
        offset = Point(
            self.rng.gauss(self._mean.x, self._sigma.x),
            self.rng.gauss(self._mean.y, self._sigma.y),
        )
        return Rectangle(template.position + offset, template.size)

    def generate(self, count: int) -> List[Rectangle]:
        """Draw ``count`` cells."""
        if count < 0:
            raise PreconditionError(f"cell count must be non-negative, got {count}")
        cells = [self.generate_cell() for _ in range(count)]
        logger.debug("Generated %d cells from %d templates", count, len(self.templates))
        return cells


def generate_cells(
    boundary: Rectangle,
    templates: Sequence[Rectangle],
    count: int,
    seed: Optional[int] = None,
) -> List[Rectangle]:
    """
    Convenience function to draw a set of cells.

    Args:
        boundary: Canvas the positions are centred on
        templates: Library templates
        count: Number of cells
        seed: Optional seed for reproducible output

    Returns:
        List of generated cells
    """
    return CellGenerator(boundary, templates, seed=seed).generate(count)
