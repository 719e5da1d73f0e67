import logging
from collections import defaultdict, deque
from typing import Iterable, List, Sequence

import pandas as pd

from batch_types import CellFill, ColumnDef, LayerKind, LayerRef, Rename, SortDirection
from column_names import get_column_name
from grid_undo import GridHistory
from name_parser import get_max_columns, pad_parts, parse_layer_name
from spatial_sort import sort_layers_by_direction

logger = logging.getLogger(__name__)


def _blank_column(frame: pd.DataFrame) -> pd.Series:
    return pd.Series([""] * len(frame), index=frame.index, dtype=object)


class GridState:
    """Column definitions, the cell matrix and the per-row layer identity.

    The matrix is a DataFrame whose columns are the ``ColumnDef`` ids, so
    column identity never depends on position.
    """

    def __init__(
        self,
        columns: List[ColumnDef],
        frame: pd.DataFrame,
        layer_ids: List[str],
        layer_types: List[LayerKind],
        sort_direction: SortDirection = SortDirection.READING_ORDER,
    ):
        self.columns = list(columns)
        self.frame = frame
        self.layer_ids = list(layer_ids)
        self.layer_types = list(layer_types)
        self.sort_direction = SortDirection(sort_direction)

    @classmethod
    def from_rows(cls, columns, rows, layer_ids, layer_types, sort_direction):
        ids = [c.id for c in columns]
        frame = pd.DataFrame([list(r) for r in rows], columns=ids, dtype=object)
        return cls(columns, frame, layer_ids, layer_types, sort_direction)

    @property
    def rows(self) -> List[List[str]]:
        return [list(r) for r in self.frame.to_numpy(dtype=object).tolist()]

    @property
    def row_count(self) -> int:
        return len(self.frame)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def copy(self) -> "GridState":
        return GridState(
            self.columns,
            self.frame.copy(deep=True),
            self.layer_ids,
            self.layer_types,
            self.sort_direction,
        )

    def permuted(self, ordered_ids: Sequence[str]) -> "GridState":
        """Return a copy whose rows follow ``ordered_ids``.

        Rows whose layer is missing from ``ordered_ids`` keep their relative
        order after the listed ones.
        """
        positions = defaultdict(deque)
        for i, layer_id in enumerate(self.layer_ids):
            positions[layer_id].append(i)
        # each row is taken at most once, even when layer ids repeat
        order = [positions[i].popleft() for i in ordered_ids if positions.get(i)]
        seen = set(order)
        order.extend(i for i in range(len(self.layer_ids)) if i not in seen)
        frame = self.frame.iloc[order].reset_index(drop=True)
        return GridState(
            self.columns,
            frame,
            [self.layer_ids[i] for i in order],
            [self.layer_types[i] for i in order],
            self.sort_direction,
        )

    def __eq__(self, other):
        if not isinstance(other, GridState):
            return NotImplemented
        return (
            self.columns == other.columns
            and self.layer_ids == other.layer_ids
            and self.layer_types == other.layer_types
            and self.sort_direction == other.sort_direction
            and self.rows == other.rows
        )

    def __repr__(self):
        return (
            f"GridState(columns={[c.header for c in self.columns]}, "
            f"rows={self.rows}, layer_ids={self.layer_ids})"
        )


class GridStore:
    """Owns the grid state and its undo/redo history.

    Every structural mutation goes through here so rows, columns and the
    parallel layer lists always stay the same shape.
    """

    def __init__(
        self,
        undo_max_depth: int = 50,
        sort_direction=SortDirection.READING_ORDER,
    ):
        self._column_counter = 0
        self.history = GridHistory(undo_max_depth)
        first = ColumnDef(self._new_column_id(), get_column_name(0))
        self.state = GridState.from_rows([first], [], [], [], sort_direction)

    def _new_column_id(self) -> str:
        self._column_counter += 1
        return f"col_{self._column_counter}"

    def _save_to_history(self):
        self.history.push_undo(self.state.copy())

    # ---------- reads ----------
    @property
    def columns(self) -> List[ColumnDef]:
        return list(self.state.columns)

    @property
    def rows(self) -> List[List[str]]:
        return self.state.rows

    @property
    def layer_ids(self) -> List[str]:
        return list(self.state.layer_ids)

    @property
    def row_count(self) -> int:
        return self.state.row_count

    @property
    def column_count(self) -> int:
        return self.state.column_count

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.row_count and 0 <= col < self.column_count

    def get_cell(self, row: int, col: int) -> str:
        if not self.in_bounds(row, col):
            return ""
        return self.state.frame.iat[row, col]

    # ---------- session ----------
    def initialize_from_layers(self, layers: Iterable[LayerRef], direction=None):
        """Replace the whole grid from a fresh host selection. Not undoable."""
        direction = SortDirection(direction or self.state.sort_direction)
        ordered = sort_layers_by_direction(list(layers), direction)
        parsed = [parse_layer_name(layer.name) for layer in ordered]

        # one extra blank column so "add a segment" is discoverable
        column_count = get_max_columns(parsed)
        columns = [
            ColumnDef(self._new_column_id(), get_column_name(i))
            for i in range(column_count + 1)
        ]
        rows = [pad_parts(p.parts, column_count) + [""] for p in parsed]

        self.state = GridState.from_rows(
            columns,
            rows,
            [layer.id for layer in ordered],
            [layer.type for layer in ordered],
            direction,
        )
        self.history.clear()
        logger.debug(
            "Grid initialized: %d rows x %d columns", len(rows), len(columns)
        )

    # ---------- mutations ----------
    def set_cell_value(self, row: int, col: int, value: str):
        if not self.in_bounds(row, col):
            logger.debug("Ignoring write outside grid at (%s, %s)", row, col)
            return
        self._save_to_history()
        self.state.frame.iat[row, col] = "" if value is None else str(value)

    def set_column_header(self, col_index: int, header: str):
        if not 0 <= col_index < self.column_count:
            logger.debug("Ignoring header rename for column %s", col_index)
            return
        self._save_to_history()
        old = self.state.columns[col_index]
        self.state.columns[col_index] = ColumnDef(old.id, str(header))

    def add_column(self, after_index: int) -> ColumnDef:
        insert_at = max(0, min(after_index + 1, self.column_count))
        self._save_to_history()
        column = ColumnDef(self._new_column_id(), get_column_name(self.column_count))
        frame = self.state.frame
        frame.insert(insert_at, column.id, _blank_column(frame))
        self.state.columns.insert(insert_at, column)
        return column

    def delete_column(self, col_index: int) -> bool:
        if self.column_count <= 1 or not 0 <= col_index < self.column_count:
            return False
        self._save_to_history()
        column = self.state.columns.pop(col_index)
        self.state.frame = self.state.frame.drop(columns=[column.id])
        return True

    def fill_cells(self, fills: Iterable) -> int:
        """Apply many writes as one history entry. Returns the number applied."""
        valid = []
        for fill in fills:
            fill = _as_fill(fill)
            if self.in_bounds(fill.row, fill.col):
                valid.append(fill)
        if not valid:
            return 0
        self._save_to_history()
        frame = self.state.frame
        for fill in valid:
            frame.iat[fill.row, fill.col] = fill.value
        return len(valid)

    def set_sort_direction(self, direction):
        self.state.sort_direction = SortDirection(direction)

    def reorder_by_direction(self, layers: Iterable[LayerRef], direction):
        """Permute existing rows into a new spatial order, keeping edits.

        A view change rather than an edit: nothing is pushed to history, but
        stored snapshots get the same permutation so undo keeps the order.
        """
        direction = SortDirection(direction)
        ordered_ids = [
            layer.id for layer in sort_layers_by_direction(list(layers), direction)
        ]

        def reorder(snap: GridState) -> GridState:
            result = snap.permuted(ordered_ids)
            result.sort_direction = direction
            return result

        self.state = reorder(self.state)
        self.history.remap(reorder)

    def undo(self) -> bool:
        snap = self.history.undo(self.state)
        if snap is None:
            return False
        self.state = snap
        return True

    def redo(self) -> bool:
        snap = self.history.redo(self.state)
        if snap is None:
            return False
        self.state = snap
        return True

    # ---------- derived ----------
    def get_preview_names(self) -> List[str]:
        frame = self.state.frame
        if len(frame) == 0:
            return []
        return frame.apply(compose_name, axis=1).tolist()

    def get_renames(self) -> List[Rename]:
        return [
            Rename(node_id, name)
            for node_id, name in zip(self.state.layer_ids, self.get_preview_names())
        ]

    def get_column_values(self, rows: Iterable[int], col: int) -> List[str]:
        return [self.get_cell(r, col) for r in rows]

    def get_row_values(self, row: int, cols: Iterable[int]) -> List[str]:
        return [self.get_cell(row, c) for c in cols]


def compose_name(cells) -> str:
    """Join a row into a name. Inner blank cells render as a single space;
    trailing blank cells contribute nothing."""
    values = [("" if v is None else str(v)) for v in cells]
    while values and values[-1] == "":
        values.pop()
    return "".join(v if v else " " for v in values)


def _as_fill(fill) -> CellFill:
    if isinstance(fill, CellFill):
        return fill
    if isinstance(fill, dict):
        return CellFill(int(fill["row"]), int(fill["col"]), str(fill["value"]))
    row, col, value = fill
    return CellFill(int(row), int(col), str(value))
