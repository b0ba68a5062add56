"""
Legality Validation

Checks a placed cell set for the properties the row legalizer guarantees:
no overlap between cells sharing a row, positions on the grid, and rows
inside the boundary.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple
import math

from ..layout.abstraction import Point, Rectangle
from ..placement.legalizer import row_count_for

# Grid alignment tolerance, in grid units
ALIGNMENT_TOLERANCE = 1e-6


@dataclass
class LegalityIssue:
    """An issue found during legality validation."""
    severity: str  # "error", "warning"
    category: str  # "overlap", "alignment", "row_range"
    message: str
    location: str  # Cell index, or "i/j" for a pair


class LegalityChecker:
    """Validates a placed cell set against a grid and boundary."""

    def __init__(self, grid: Point, boundary: Rectangle):
        self.grid = grid
        self.boundary = boundary
        self.row_count = row_count_for(boundary, grid)
        self.issues: List[LegalityIssue] = []

    def check(self, cells: Sequence[Rectangle]) -> Tuple[bool, List[LegalityIssue]]:
        """
        Run all legality checks.

        Returns:
            (legal, issues) - legal is False if errors found
        """
        self.issues = []

        self._check_alignment(cells)
        self._check_row_range(cells)
        self._check_overlaps(cells)

        has_errors = any(i.severity == "error" for i in self.issues)
        return (not has_errors, self.issues)

    def _check_alignment(self, cells: Sequence[Rectangle]):
        """Check that every position is a whole number of grid steps."""
        for index, cell in enumerate(cells):
            steps = cell.position / self.grid
            if (abs(steps.x - round(steps.x)) > ALIGNMENT_TOLERANCE
                    or abs(steps.y - round(steps.y)) > ALIGNMENT_TOLERANCE):
                self.issues.append(LegalityIssue(
                    severity="error",
                    category="alignment",
                    message=f"Cell at ({cell.x:g}, {cell.y:g}) is off the grid",
                    location=str(index),
                ))

    def _check_row_range(self, cells: Sequence[Rectangle]):
        """Check that every cell sits in one of the configured rows."""
        for index, cell in enumerate(cells):
            row = cell.y / self.grid.y
            if not math.isfinite(row) or row < 0 or round(row) >= self.row_count:
                self.issues.append(LegalityIssue(
                    severity="warning",
                    category="row_range",
                    message=f"Cell at ({cell.x:g}, {cell.y:g}) is outside rows 0..{self.row_count - 1}",
                    location=str(index),
                ))

    def _check_overlaps(self, cells: Sequence[Rectangle]):
        """Check for x overlaps between cells that share a y coordinate."""
        rows: Dict[float, List[int]] = defaultdict(list)
        for index, cell in enumerate(cells):
            rows[cell.y].append(index)

        for y, members in rows.items():
            members.sort(key=lambda i: (cells[i].x, i))
            # Sweep: compare each cell with the one reaching furthest right so far
            reach = members[0]
            for index in members[1:]:
                if cells[index].overlaps_x(cells[reach]):
                    self.issues.append(LegalityIssue(
                        severity="error",
                        category="overlap",
                        message=(
                            f"Cells {reach} and {index} overlap in row y={y:g} "
                            f"by {cells[reach].right() - cells[index].x:g}"
                        ),
                        location=f"{reach}/{index}",
                    ))
                if cells[index].right() > cells[reach].right():
                    reach = index
