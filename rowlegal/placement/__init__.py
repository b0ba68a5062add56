"""Row-based legalization of standard-cell placements."""

from .legalizer import (
    RowLegalizer,
    LegalizerConfig,
    LegalizationResult,
    snap_to_grid,
    sort_by_center_x,
    partition_by_row,
    count_unplaced,
    legalize_row,
    join,
    row_count_for,
    legalize_cells,
)

__all__ = [
    "RowLegalizer",
    "LegalizerConfig",
    "LegalizationResult",
    "snap_to_grid",
    "sort_by_center_x",
    "partition_by_row",
    "count_unplaced",
    "legalize_row",
    "join",
    "row_count_for",
    "legalize_cells",
]
