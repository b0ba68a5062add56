"""
Row Legalizer

Removes horizontal overlaps between standard cells, one row at a time.

Pipeline (each stage is a pure function over lists of rectangles):
1. Grid snapping - floor every position onto the placement grid
2. Sorting - deterministic merge sort by cell center x
3. Row partitioning - bucket cells by exact row y coordinate
4. Row legalization - push each cell right until it abuts its left neighbour
5. Flattening - concatenate rows back into one list

Rows are independent of each other, so step 4 may fan out over a thread
pool. Cells whose snapped y does not land on a configured row are dropped;
the orchestrator counts them but does not treat them as an error.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..errors import EmptyRowError, GridError, PreconditionError
from ..layout.abstraction import Point, Rectangle

logger = logging.getLogger(__name__)


@dataclass
class LegalizerConfig:
    """Configuration for the legalization pass."""
    # > 1 fans rows out over a thread pool. Row legalization is pure Python and
    # holds the GIL, so this gives no speedup over the sequential path.
    max_workers: int = 1
    warn_on_dropped: bool = True  # log a warning when cells fall outside every row


@dataclass
class LegalizationResult:
    """Result of legalization pass."""
    cells: List[Rectangle] = field(default_factory=list)  # flattened, legalized cells
    rows: List[List[Rectangle]] = field(default_factory=list)  # legalized cells per row
    input_cells: int = 0
    rows_used: int = 0  # rows holding at least one cell
    dropped_cells: int = 0  # cells whose row matched no configured row
    cells_moved: int = 0  # cells shifted right by legalization
    total_displacement: float = 0.0
    max_displacement: float = 0.0


def _check_grid(grid: Point):
    if grid.x == 0 or grid.y == 0:
        raise GridError(grid)


def row_count_for(boundary: Rectangle, grid: Point) -> int:
    """Number of grid rows that fit in the boundary height."""
    _check_grid(grid)
    return int((boundary.size / grid).y)


def snap_to_grid(cells: Sequence[Rectangle], grid: Point) -> List[Rectangle]:
    """
    Floor every cell position onto the grid.

    Args:
        cells: Cells to snap
        grid: Grid pitch (x, y); both components must be non-zero

    Returns:
        New list, same order and sizes, positions ``floor(p / grid) * grid``
    """
    _check_grid(grid)
    return [
        cell.with_position((cell.position / grid).floor() * grid)
        for cell in cells
    ]


def _merge_by_center_x(left: List[Rectangle], right: List[Rectangle]) -> List[Rectangle]:
    merged: List[Rectangle] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # Left head wins ties
        if right[j].center().x < left[i].center().x:
            merged.append(right[j])
            j += 1
        else:
            merged.append(left[i])
            i += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def sort_by_center_x(cells: Sequence[Rectangle]) -> List[Rectangle]:
    """
    Sort cells by ascending center x with a top-down merge sort.

    The input is split by index, each half sorted recursively, and the halves
    merged preferring the left half when centers are equal. Equal keys
    therefore keep their input order.
    """
    if len(cells) <= 1:
        return list(cells)
    middle = len(cells) // 2
    return _merge_by_center_x(
        sort_by_center_x(cells[:middle]),
        sort_by_center_x(cells[middle:]),
    )


def _row_index(cell: Rectangle, grid: Point, row_count: int) -> Optional[int]:
    """Index of the row whose y equals the cell's y exactly, if any."""
    y = cell.position.y
    if not math.isfinite(y):
        return None
    # grid.y * i is injective, so the rounded quotient is the only candidate
    index = int(round(y / grid.y))
    if 0 <= index < row_count and y == grid.y * index:
        return index
    return None


def partition_by_row(
    cells: Sequence[Rectangle],
    grid: Point,
    row_count: int,
) -> List[List[Rectangle]]:
    """
    Bucket cells into rows.

    Row ``i`` receives, in input order, every cell with
    ``position.y == grid.y * i``. Cells that match no row in
    ``[0, row_count)`` are silently dropped; snap first so that y values are
    exact row multiples.

    Returns:
        List of ``row_count`` rows
    """
    _check_grid(grid)
    if row_count < 0:
        raise PreconditionError(f"row count must be non-negative, got {row_count}")

    partitions: List[List[Rectangle]] = [[] for _ in range(row_count)]
    for cell in cells:
        index = _row_index(cell, grid, row_count)
        if index is not None:
            partitions[index].append(cell)
    return partitions


def count_unplaced(cells: Sequence[Rectangle], grid: Point, row_count: int) -> int:
    """Number of cells ``partition_by_row`` would drop."""
    _check_grid(grid)
    return sum(1 for cell in cells if _row_index(cell, grid, row_count) is None)


def legalize_row(row: Sequence[Rectangle]) -> List[Rectangle]:
    """
    Remove overlaps within one row.

    Walks the row in the given order. The first cell stays put; every later
    cell keeps its x unless that would overlap the previously placed cell, in
    which case it is moved right to abut it. Y and size never change.

    The row must already be sorted by x; no sorting happens here.

    Raises:
        EmptyRowError: If the row has no cells
    """
    if not row:
        raise EmptyRowError()

    out = [row[0]]
    for cell in row[1:]:
        prev_right = out[-1].right()
        if cell.position.x < prev_right:
            cell = cell.with_position(Point(prev_right, cell.position.y))
        out.append(cell)
    return out


def join(partitions: Sequence[Sequence[Rectangle]]) -> List[Rectangle]:
    """Concatenate rows in partition order, keeping intra-row order."""
    out: List[Rectangle] = []
    for row in partitions:
        out.extend(row)
    return out


class RowLegalizer:
    """
    Runs the full snap, sort, partition, legalize, flatten pipeline.

    Empty rows are left empty rather than passed to ``legalize_row``.
    """

    def __init__(self, grid: Point, boundary: Rectangle,
                 config: Optional[LegalizerConfig] = None):
        """
        Initialize the legalizer.

        Args:
            grid: Placement grid pitch
            boundary: Canvas; its height fixes the number of rows
            config: Legalization configuration
        """
        self.grid = grid
        self.boundary = boundary
        self.config = config or LegalizerConfig()
        self.row_count = row_count_for(boundary, grid)

    def legalize(self, cells: Sequence[Rectangle]) -> LegalizationResult:
        """
        Run full legalization pass.

        Returns:
            LegalizationResult with legalized cells and statistics
        """
        result = LegalizationResult(input_cells=len(cells))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Legalization start: cells=%d rows=%d grid=(%g, %g) workers=%d",
                len(cells),
                self.row_count,
                self.grid.x,
                self.grid.y,
                self.config.max_workers,
            )

        ordered = sort_by_center_x(snap_to_grid(cells, self.grid))
        partitions = partition_by_row(ordered, self.grid, self.row_count)

        result.dropped_cells = count_unplaced(ordered, self.grid, self.row_count)
        if result.dropped_cells and self.config.warn_on_dropped:
            logger.warning(
                "%d of %d cells fall outside every row and were dropped",
                result.dropped_cells,
                len(ordered),
            )

        result.rows = self._legalize_rows(partitions)
        result.rows_used = sum(1 for row in result.rows if row)
        result.cells = join(result.rows)
        self._collect_displacement(partitions, result)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Legalization done: rows_used=%d moved=%d dropped=%d max_shift=%g",
                result.rows_used,
                result.cells_moved,
                result.dropped_cells,
                result.max_displacement,
            )
        return result

    def _legalize_rows(self, partitions: List[List[Rectangle]]) -> List[List[Rectangle]]:
        """Legalize every non-empty row, optionally on a thread pool."""
        occupied = [i for i, row in enumerate(partitions) if row]
        legalized: List[List[Rectangle]] = [[] for _ in partitions]

        if self.config.max_workers > 1 and len(occupied) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                rows = executor.map(legalize_row, (partitions[i] for i in occupied))
                for i, row in zip(occupied, rows):
                    legalized[i] = row
        else:
            for i in occupied:
                legalized[i] = legalize_row(partitions[i])
        return legalized

    @staticmethod
    def _collect_displacement(before: List[List[Rectangle]], result: LegalizationResult):
        for original, legal in zip(before, result.rows):
            for old, new in zip(original, legal):
                shift = new.position.x - old.position.x
                if shift > 0:
                    result.cells_moved += 1
                    result.total_displacement += shift
                    result.max_displacement = max(result.max_displacement, shift)


def legalize_cells(
    cells: Sequence[Rectangle],
    grid: Point,
    boundary: Rectangle,
    max_workers: int = 1,
) -> List[Rectangle]:
    """
    Convenience function to legalize a cell set.

    Equivalent to
    ``join(map(legalize_row, partition_by_row(sort_by_center_x(snap_to_grid(cells, grid)), grid, rows)))``
    with empty rows skipped.

    Args:
        cells: Cells to legalize
        grid: Placement grid pitch
        boundary: Canvas; its height fixes the number of rows
        max_workers: Threads used for per-row legalization

    Returns:
        Flattened list of legalized cells
    """
    config = LegalizerConfig(max_workers=max_workers)
    return RowLegalizer(grid, boundary, config).legalize(cells).cells
