from dataclasses import dataclass
from typing import Any, Callable, Optional

from grid_selection import Selection


@dataclass
class GridContext:
    """Transient interaction state of one grid; nothing here is undoable."""

    store: Any
    _set_status: Callable[[str, float], None]
    clipboard: Any = None
    scroller: Any = None

    # Selection rectangle (None == idle)
    selection: Optional[Selection] = None
    is_selecting: bool = False

    # Cell editing state
    mode: str = "idle"  # idle | selected | editing
    edit_mode: Optional[str] = None  # replace_all | caret_append
    edit_row: int = 0
    edit_col: int = 0
    cell_buffer: str = ""
    cell_cursor: int = 0
    edit_original: str = ""

    # Header editing
    editing_header: Optional[int] = None

    # Drag-fill
    is_drag_filling: bool = False
    drag_target_row: Optional[int] = None
    drag_target_col: Optional[int] = None
    drag_axis: Optional[str] = None  # vertical | horizontal
