"""
Shared test fixtures for RowLegal tests.

Provides reusable grids, boundaries, shape libraries and cell sets
for testing the legalization pipeline and its collaborators.
"""

import pytest
from typing import List

from rowlegal.layout.abstraction import Point, Rectangle
from rowlegal.layout.generator import CellGenerator
from rowlegal.layout.library import REFERENCE


def cell(x: float, y: float, width: float, height: float = 10.0) -> Rectangle:
    """Shorthand for building a cell rectangle."""
    return Rectangle(Point(x, y), Point(width, height))


@pytest.fixture
def make_cell():
    """Factory for cell rectangles: make_cell(x, y, width, height=10)."""
    return cell


@pytest.fixture
def unit_grid() -> Point:
    """One unit columns, ten unit rows."""
    return Point(1.0, 10.0)


@pytest.fixture
def small_boundary() -> Rectangle:
    """A 200 x 50 canvas: five rows on the unit grid."""
    return Rectangle(Point(0.0, 0.0), Point(200.0, 50.0))


@pytest.fixture
def reference_grid() -> Point:
    """Grid of the reference run: 1 unit columns, 200 unit rows."""
    return Point(1.0, 200.0)


@pytest.fixture
def reference_boundary() -> Rectangle:
    """Canvas of the reference run."""
    return Rectangle(Point(0.0, 0.0), Point(300000.0, 300000.0))


@pytest.fixture
def reference_templates(reference_grid):
    """Reference library templates on the reference grid."""
    return REFERENCE.templates(reference_grid)


@pytest.fixture
def overlapping_row() -> List[Rectangle]:
    """Three cells in one row; the second overlaps the first."""
    return [
        cell(5.0, 0.0, 10.0),
        cell(8.0, 0.0, 5.0),
        cell(20.0, 0.0, 3.0),
    ]


@pytest.fixture
def scattered_cells(reference_boundary, reference_templates) -> List[Rectangle]:
    """A reproducible set of generated cells on the reference canvas."""
    generator = CellGenerator(reference_boundary, reference_templates, seed=1234)
    return generator.generate(2000)
