import logging
from typing import List, Optional

from auto_scroll import AutoScroller
from batch_types import CellFill
from grid_clipboard import GridClipboard, parse_tsv
from grid_context import GridContext
from grid_selection import Selection
from series_generator import continue_series, detect_series

logger = logging.getLogger(__name__)

VERTICAL = "vertical"
HORIZONTAL = "horizontal"


class GridController:
    """Selection, editing, drag-fill and clipboard state machine over a GridStore.

    States: idle (no selection) -> selected (rectangle) -> editing (one cell).
    Drag-filling overlays the selected state. All writes go through the
    store so each user action is one undo step.
    """

    def __init__(
        self,
        store,
        set_status_cb=None,
        clipboard_command=None,
        scroll_cb=None,
        schedule=None,
    ):
        self.store = store
        self.ctx = GridContext(
            store=store,
            _set_status=set_status_cb or (lambda *_: None),
            clipboard=GridClipboard(clipboard_command),
            scroller=AutoScroller(scroll_cb or (lambda *_: None), schedule),
        )

    # ---------- read-only views ----------
    @property
    def selection(self) -> Optional[Selection]:
        return self.ctx.selection

    @property
    def mode(self) -> str:
        return self.ctx.mode

    @property
    def is_editing(self) -> bool:
        return self.ctx.mode == "editing"

    @property
    def is_drag_filling(self) -> bool:
        return self.ctx.is_drag_filling

    @property
    def clipboard(self) -> GridClipboard:
        return self.ctx.clipboard

    def is_cell_in_selection(self, row: int, col: int) -> bool:
        return self.ctx.selection is not None and self.ctx.selection.contains(row, col)

    def is_primary_selected(self, row: int, col: int) -> bool:
        """The cell carrying the fill handle: the normalized end corner."""
        if self.ctx.selection is None:
            return False
        r0, r1, c0, c1 = self.ctx.selection.rect()
        return row == r1 and col == c1

    def is_cell_in_drag_range(self, row: int, col: int) -> bool:
        targets = self._drag_targets()
        if targets is None:
            return False
        axis, indices = targets
        r0, r1, c0, c1 = self.ctx.selection.rect()
        if axis == VERTICAL:
            return c0 <= col <= c1 and row in indices
        return r0 <= row <= r1 and col in indices

    # ---------- helpers ----------
    def _status(self, msg: str, seconds: float = 2):
        self.ctx._set_status(msg, seconds)

    def _grid_size(self):
        return self.store.row_count, self.store.column_count

    def _select(self, selection: Optional[Selection]):
        rows, cols = self._grid_size()
        if selection is not None:
            selection = selection.clamped(rows, cols)
        self.ctx.selection = selection
        if selection is None:
            self.ctx.mode = "idle"
        elif self.ctx.mode == "idle":
            self.ctx.mode = "selected"

    def _select_cell(self, row: int, col: int):
        self._select(Selection.cell(row, col))

    def _ensure_selection(self) -> bool:
        if self.ctx.selection is not None:
            return True
        rows, cols = self._grid_size()
        if rows == 0 or cols == 0:
            return False
        self._select_cell(0, 0)
        return True

    def sync_with_grid(self):
        """Re-clamp the selection after the grid shape changed underneath it."""
        if self.ctx.selection is None:
            return
        if self.is_editing and not self.store.in_bounds(self.ctx.edit_row, self.ctx.edit_col):
            self._end_edit()
        self._select(self.ctx.selection)

    # ---------- editing ----------
    def _begin_edit(self, row: int, col: int, edit_mode: str, initial: Optional[str] = None):
        if not self.store.in_bounds(row, col):
            return
        value = self.store.get_cell(row, col) if initial is None else initial
        self.ctx.mode = "editing"
        self.ctx.edit_mode = edit_mode
        self.ctx.edit_row = row
        self.ctx.edit_col = col
        self.ctx.cell_buffer = value
        self.ctx.cell_cursor = len(value)
        self.ctx.edit_original = value
        self._select_cell(row, col)

    def _end_edit(self):
        self.ctx.mode = "selected" if self.ctx.selection is not None else "idle"
        self.ctx.edit_mode = None
        self.ctx.cell_buffer = ""
        self.ctx.cell_cursor = 0
        self.ctx.edit_original = ""

    def commit_edit(self):
        if not self.is_editing:
            return
        if self.ctx.cell_buffer != self.ctx.edit_original:
            self.store.set_cell_value(self.ctx.edit_row, self.ctx.edit_col, self.ctx.cell_buffer)
        self._end_edit()

    def _edit_insert(self, text: str):
        if self.ctx.edit_mode == "replace_all":
            self.ctx.cell_buffer = ""
            self.ctx.cell_cursor = 0
            self.ctx.edit_mode = "caret_append"
        buf, cur = self.ctx.cell_buffer, self.ctx.cell_cursor
        self.ctx.cell_buffer = buf[:cur] + text + buf[cur:]
        self.ctx.cell_cursor = cur + len(text)

    def _edit_backspace(self, forward: bool = False):
        if self.ctx.edit_mode == "replace_all":
            self.ctx.cell_buffer = ""
            self.ctx.cell_cursor = 0
            self.ctx.edit_mode = "caret_append"
            return
        buf, cur = self.ctx.cell_buffer, self.ctx.cell_cursor
        if forward:
            self.ctx.cell_buffer = buf[:cur] + buf[cur + 1 :]
        elif cur > 0:
            self.ctx.cell_buffer = buf[: cur - 1] + buf[cur:]
            self.ctx.cell_cursor = cur - 1

    def _edit_move_caret(self, position: int):
        self.ctx.edit_mode = "caret_append"
        self.ctx.cell_cursor = max(0, min(position, len(self.ctx.cell_buffer)))

    # ---------- pointer ----------
    def press_cell(self, row: int, col: int, shift: bool = False):
        if not self.store.in_bounds(row, col):
            return
        if self.is_editing:
            if (row, col) == (self.ctx.edit_row, self.ctx.edit_col):
                return
            self.commit_edit()

        sel = self.ctx.selection
        if shift and sel is not None:
            self._select(sel.extend_to(row, col))
            return
        if sel is not None and sel.is_single_cell and (sel.start_row, sel.start_col) == (row, col):
            self._begin_edit(row, col, "caret_append")
            return
        self._select_cell(row, col)
        self.ctx.is_selecting = True

    def enter_cell(self, row: int, col: int):
        if self.ctx.is_drag_filling:
            self.drag_over(row, col)
        elif self.ctx.is_selecting and self.ctx.selection is not None:
            self._select(self.ctx.selection.extend_to(row, col))

    def double_click_cell(self, row: int, col: int):
        if not self.store.in_bounds(row, col):
            return
        if self.is_editing:
            self.commit_edit()
        self._begin_edit(row, col, "replace_all")

    def pointer_move(self, pointer, viewport):
        """Feed pointer coordinates while selecting or drag-filling to drive auto-scroll."""
        if not (self.ctx.is_selecting or self.ctx.is_drag_filling):
            return
        self.ctx.scroller.update(pointer, viewport)

    def release(self):
        self.ctx.scroller.stop()
        self.ctx.is_selecting = False
        if self.ctx.is_drag_filling:
            self._apply_drag_fill()
            self._reset_drag()

    # ---------- drag-fill ----------
    def press_fill_handle(self):
        if self.ctx.selection is None:
            return
        if self.is_editing:
            self.commit_edit()
        r0, r1, c0, c1 = self.ctx.selection.rect()
        self.ctx.is_drag_filling = True
        self.ctx.drag_target_row = r1
        self.ctx.drag_target_col = c1
        self.ctx.drag_axis = None

    def drag_over(self, row: int, col: int):
        if not self.ctx.is_drag_filling or self.ctx.selection is None:
            return
        rows, cols = self._grid_size()
        row = max(0, min(row, rows - 1))
        col = max(0, min(col, cols - 1))
        self.ctx.drag_target_row = row
        self.ctx.drag_target_col = col
        if self.ctx.drag_axis is not None:
            return

        r0, r1, c0, c1 = self.ctx.selection.rect()
        row_out = max(r0 - row, row - r1, 0)
        col_out = max(c0 - col, col - c1, 0)
        if row_out == 0 and col_out == 0:
            return
        # a jump crossing both edges at once commits to the larger overshoot
        self.ctx.drag_axis = VERTICAL if row_out >= col_out else HORIZONTAL
        logger.debug("Drag-fill locked to %s axis", self.ctx.drag_axis)

    def _drag_targets(self):
        if not self.ctx.is_drag_filling or self.ctx.selection is None:
            return None
        r0, r1, c0, c1 = self.ctx.selection.rect()
        if self.ctx.drag_axis == VERTICAL:
            target = self.ctx.drag_target_row
            if target > r1:
                return VERTICAL, list(range(r1 + 1, target + 1))
            if target < r0:
                return VERTICAL, list(range(r0 - 1, target - 1, -1))
        elif self.ctx.drag_axis == HORIZONTAL:
            target = self.ctx.drag_target_col
            if target > c1:
                return HORIZONTAL, list(range(c1 + 1, target + 1))
            if target < c0:
                return HORIZONTAL, list(range(c0 - 1, target - 1, -1))
        return None

    def _apply_drag_fill(self) -> int:
        targets = self._drag_targets()
        if targets is None:
            return 0
        axis, indices = targets
        sel = self.ctx.selection
        r0, r1, c0, c1 = sel.rect()

        fills: List[CellFill] = []
        if axis == VERTICAL:
            for col in range(c0, c1 + 1):
                source = self.store.get_column_values(range(r0, r1 + 1), col)
                values = continue_series(detect_series(source), len(indices))
                fills.extend(CellFill(row, col, v) for row, v in zip(indices, values))
        else:
            for row in range(r0, r1 + 1):
                source = self.store.get_row_values(row, range(c0, c1 + 1))
                values = continue_series(detect_series(source), len(indices))
                fills.extend(CellFill(row, col, v) for col, v in zip(indices, values))

        applied = self.store.fill_cells(fills)
        if applied:
            edge = indices[-1]
            if axis == VERTICAL:
                self._select(Selection(min(r0, edge), c0, max(r1, edge), c1))
            else:
                self._select(Selection(r0, min(c0, edge), r1, max(c1, edge)))
            self._status(f"Filled {applied} cell{'s' if applied != 1 else ''}", 2)
        return applied

    def _reset_drag(self):
        self.ctx.is_drag_filling = False
        self.ctx.drag_target_row = None
        self.ctx.drag_target_col = None
        self.ctx.drag_axis = None

    # ---------- range operations ----------
    def select_all(self):
        rows, cols = self._grid_size()
        if rows == 0 or cols == 0:
            return
        self._select(Selection(0, 0, rows - 1, cols - 1))

    def clear_selected_cells(self) -> int:
        if self.ctx.selection is None:
            return 0
        fills = [CellFill(r, c, "") for r, c in self.ctx.selection.cells()]
        return self.store.fill_cells(fills)

    def _selected_values(self) -> List[List[str]]:
        r0, r1, c0, c1 = self.ctx.selection.rect()
        return [self.store.get_row_values(r, range(c0, c1 + 1)) for r in range(r0, r1 + 1)]

    def copy(self) -> bool:
        if self.ctx.selection is None:
            return False
        data = self._selected_values()
        self.ctx.clipboard.capture(data)
        self._status(f"Copied {len(data)}x{len(data[0])} cells", 2)
        return True

    def cut(self) -> bool:
        if self.ctx.selection is None:
            return False
        data = self._selected_values()
        self.ctx.clipboard.capture(data, cut=True, origin=self.ctx.selection.normalized())
        self._status(f"Cut {len(data)}x{len(data[0])} cells", 2)
        return True

    def paste(self, text: Optional[str] = None) -> int:
        """Paste system text (tab/newline delimited) or the internal buffer at the selection's top-left.

        Cells falling outside the grid are dropped; the grid never grows.
        """
        clipboard = self.ctx.clipboard
        from_internal = text is None
        data = clipboard.data if from_internal else parse_tsv(text)
        if not data:
            return 0
        if not self._ensure_selection():
            return 0
        if self.is_editing:
            self.commit_edit()

        r0, _, c0, _ = self.ctx.selection.rect()
        fills: List[CellFill] = []
        for dr, line in enumerate(data):
            for dc, value in enumerate(line):
                row, col = r0 + dr, c0 + dc
                if self.store.in_bounds(row, col):
                    fills.append(CellFill(row, col, value))
        total = sum(len(line) for line in data)
        if len(fills) < total:
            logger.debug("Paste clipped to grid: %d of %d cells", len(fills), total)
        if not fills:
            return 0

        if from_internal and clipboard.is_cut and clipboard.cut_origin is not None:
            pasted = {(f.row, f.col) for f in fills}
            fills = [
                CellFill(r, c, "")
                for r, c in clipboard.cut_origin.cells()
                if (r, c) not in pasted
            ] + fills
            clipboard.clear_cut()

        applied = self.store.fill_cells(fills)
        self._status(f"Pasted {applied} cell{'s' if applied != 1 else ''}", 2)
        return applied

    # ---------- structure ----------
    def add_column(self, after_index: int):
        if self.is_editing:
            self.commit_edit()
        self.store.add_column(after_index)
        self.sync_with_grid()

    def delete_column(self, col_index: int) -> bool:
        if self.is_editing:
            self.commit_edit()
        deleted = self.store.delete_column(col_index)
        if not deleted:
            self._status("Cannot delete the last column", 2)
        self.sync_with_grid()
        return deleted

    def begin_header_edit(self, col_index: int):
        if 0 <= col_index < self.store.column_count:
            self.ctx.editing_header = col_index

    def commit_header(self, col_index: int, header: str, direction: Optional[str] = None):
        """Rename a header and optionally move on: next header, previous header, or down into the column."""
        current = self.store.columns[col_index].header if 0 <= col_index < self.store.column_count else None
        if current is not None and header != current:
            self.store.set_column_header(col_index, header)
        self.ctx.editing_header = None
        cols = self.store.column_count
        if direction == "next":
            if col_index < cols - 1:
                self.ctx.editing_header = col_index + 1
            elif self.store.row_count:
                self._begin_edit(0, 0, "replace_all")
        elif direction == "prev":
            if col_index > 0:
                self.ctx.editing_header = col_index - 1
        elif direction == "down" and self.store.row_count:
            self._begin_edit(0, col_index, "replace_all")

    def undo(self):
        if self.is_editing:
            self._end_edit()
        if not self.store.undo():
            self._status("Nothing to undo", 2)
            return
        self.sync_with_grid()
        remaining = len(self.store.history.undo_stack)
        self._status(f"Undone ({remaining} more)" if remaining else "Undone", 2)

    def redo(self):
        if self.is_editing:
            self._end_edit()
        if not self.store.redo():
            self._status("Nothing to redo", 2)
            return
        self.sync_with_grid()
        remaining = len(self.store.history.redo_stack)
        self._status(f"Redone ({remaining} more)" if remaining else "Redone", 2)

    def teardown(self):
        self.ctx.scroller.stop()
        self._reset_drag()
        self.ctx.is_selecting = False
        self.ctx.editing_header = None
        self._end_edit()
        self._select(None)

    # ---------- navigation ----------
    def _move(self, d_row: int, d_col: int, extend: bool):
        sel = self.ctx.selection
        rows, cols = self._grid_size()
        if extend:
            self._select(
                sel.extend_to(
                    max(0, min(sel.end_row + d_row, rows - 1)),
                    max(0, min(sel.end_col + d_col, cols - 1)),
                )
            )
            return
        r0, _, c0, _ = sel.rect()
        self._select_cell(
            max(0, min(r0 + d_row, rows - 1)),
            max(0, min(c0 + d_col, cols - 1)),
        )

    def _tab(self, backward: bool):
        rows, cols = self._grid_size()
        r0, _, c0, _ = self.ctx.selection.rect()
        if backward:
            if c0 > 0:
                self._select_cell(r0, c0 - 1)
            elif r0 > 0:
                self._select_cell(r0 - 1, cols - 1)
        elif c0 < cols - 1:
            self._select_cell(r0, c0 + 1)
        elif r0 < rows - 1:
            self._select_cell(r0 + 1, 0)

    def _enter(self, backward: bool):
        self._move(-1 if backward else 1, 0, extend=False)

    # ---------- keys ----------
    def handle_key(self, key: str, shift: bool = False, cmd: bool = False) -> bool:
        """Dispatch one key press. ``key`` uses DOM-style names ("ArrowUp", "Tab", "a")."""
        if cmd:
            return self._handle_cmd_key(key.lower(), shift)

        if self.is_editing:
            return self._handle_editing_key(key, shift)

        if key == "Escape":
            if self.ctx.selection is None:
                return False
            self._select(None)
            return True

        if not self._ensure_selection():
            return False

        arrows = {
            "ArrowUp": (-1, 0),
            "ArrowDown": (1, 0),
            "ArrowLeft": (0, -1),
            "ArrowRight": (0, 1),
        }
        if key in arrows:
            self._move(*arrows[key], extend=shift)
            return True
        if key == "Tab":
            self._tab(backward=shift)
            return True
        if key == "Enter":
            self._enter(backward=shift)
            return True
        if key in ("Delete", "Backspace"):
            self.clear_selected_cells()
            return True
        if key == "F2":
            r0, _, c0, _ = self.ctx.selection.rect()
            self._begin_edit(r0, c0, "replace_all")
            return True
        if key in ("Home", "End"):
            r0, _, _, _ = self.ctx.selection.rect()
            self._select_cell(r0, 0 if key == "Home" else self.store.column_count - 1)
            return True
        if len(key) == 1 and key.isprintable():
            # first keystroke replaces the cell content
            r0, _, c0, _ = self.ctx.selection.rect()
            self.store.set_cell_value(r0, c0, key)
            self._begin_edit(r0, c0, "caret_append", initial=key)
            return True
        return False

    def _handle_cmd_key(self, key: str, shift: bool) -> bool:
        if key == "z":
            if shift:
                self.redo()
            else:
                self.undo()
            return True
        if key == "y":
            self.redo()
            return True
        if self.is_editing:
            # text-level shortcuts belong to the cell editor
            return False
        if key == "a":
            self.select_all()
            return True
        if self.ctx.selection is None:
            return False
        if key == "c":
            return self.copy()
        if key == "x":
            return self.cut()
        if key == "v":
            return self.paste() > 0
        if key in ("home", "end"):
            rows, cols = self._grid_size()
            if key == "home":
                self._select_cell(0, 0)
            else:
                self._select_cell(rows - 1, cols - 1)
            return True
        return False

    def _handle_editing_key(self, key: str, shift: bool) -> bool:
        if key == "Escape":
            self.commit_edit()
            return True
        if key == "Enter":
            self.commit_edit()
            self._enter(backward=shift)
            return True
        if key == "Tab":
            self.commit_edit()
            self._tab(backward=shift)
            return True
        if key in ("ArrowUp", "ArrowDown"):
            self.commit_edit()
            self._move(-1 if key == "ArrowUp" else 1, 0, extend=False)
            return True
        if key == "ArrowLeft":
            self._edit_move_caret(self.ctx.cell_cursor - 1)
            return True
        if key == "ArrowRight":
            self._edit_move_caret(self.ctx.cell_cursor + 1)
            return True
        if key == "Home":
            self._edit_move_caret(0)
            return True
        if key == "End":
            self._edit_move_caret(len(self.ctx.cell_buffer))
            return True
        if key == "Backspace":
            self._edit_backspace()
            return True
        if key == "Delete":
            self._edit_backspace(forward=True)
            return True
        if len(key) == 1 and key.isprintable():
            self._edit_insert(key)
            return True
        return False
