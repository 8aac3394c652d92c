"""Cabinet visiting orders over a rows x columns grid."""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..errors import ValidationError
from .models import GridCell


def _check(columns: int, rows: int) -> None:
    if columns < 0 or rows < 0:
        raise ValidationError(f"Cabinet grid must be non-negative, got {columns}x{rows}")


def serpentine_cells(columns: int, rows: int) -> List[GridCell]:
    """Boustrophedon order: even rows left to right, odd rows right to left.

    Consecutive cabinets are always physically adjacent, so a data cable can
    daisy-chain through the whole sequence.
    """
    _check(columns, rows)
    cells: List[GridCell] = []
    cabinet_id = 1
    for row in range(rows):
        cols = range(columns) if row % 2 == 0 else range(columns - 1, -1, -1)
        for col in cols:
            cells.append(GridCell(cabinet_id, row, col))
            cabinet_id += 1
    return cells


def row_major_cells(columns: int, rows: int) -> List[GridCell]:
    """Every row left to right; used for power runs."""
    _check(columns, rows)
    return [
        GridCell(row * columns + col + 1, row, col)
        for row in range(rows)
        for col in range(columns)
    ]


def order(columns: int, rows: int, serpentine: bool = True) -> List[int]:
    cells = serpentine_cells(columns, rows) if serpentine else row_major_cells(columns, rows)
    return [c.cabinet_id for c in cells]


def cell_index(cells: Iterable[GridCell]) -> Dict[int, GridCell]:
    return {c.cabinet_id: c for c in cells}


def are_adjacent(a: GridCell, b: GridCell) -> bool:
    return abs(a.row - b.row) + abs(a.column - b.column) == 1
