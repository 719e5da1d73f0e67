import logging
import threading
from typing import Callable, Iterable, List, Optional

import config_paths
from batch_types import LayerRef, Rename, SortDirection
from grid_controller import GridController
from grid_state import GridStore
from host_messages import (
    BatchRenameMessage,
    CancelMessage,
    CloseMessage,
    EnterFrameMessage,
    GetLayerPositionsMessage,
    HighlightLayerMessage,
    InitMessage,
    LayerPositionsMessage,
    RemoveHighlightMessage,
    RenameMessage,
    ResizeUIMessage,
    SelectNextMessage,
    SelectPreviousMessage,
    SelectionMessage,
    ZoomToLayerMessage,
    ZoomToSelectionMessage,
    decode_message,
    encode_message,
)

logger = logging.getLogger(__name__)

MIN_UI_WIDTH, MAX_UI_WIDTH = 380, 800
MIN_UI_HEIGHT, MAX_UI_HEIGHT = 180, 500
RENAME_DEBOUNCE_SECONDS = 0.15


def _start_timer(interval: float, callback):
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    timer.start()
    return timer


def ui_size_for_grid(column_count: int, row_count: int):
    # icon column + data columns + preview column + padding
    width = 32 + column_count * 100 + 200 + 24 + 20
    # toolbar + header + rows + actions + padding
    height = 36 + 33 + row_count * 33 + 44 + 32
    return (
        min(MAX_UI_WIDTH, max(MIN_UI_WIDTH, width)),
        min(MAX_UI_HEIGHT, max(MIN_UI_HEIGHT, height)),
    )


def apply_batch_rename(renames: Iterable[Rename], rename_node: Callable[[str, str], None]) -> List[str]:
    """Host-side apply: rename each node, skipping the ones that fail.

    Not transactional. A vanished node (KeyError/LookupError), a locked one
    (PermissionError) or a rejected name (ValueError) is logged and skipped;
    the rest of the batch still applies. Returns the ids actually renamed.
    """
    applied = []
    for rename in renames:
        try:
            rename_node(rename.node_id, rename.new_name)
        except (LookupError, PermissionError, ValueError) as exc:
            logger.warning("Skipping rename of %s: %s", rename.node_id, exc)
            continue
        applied.append(rename.node_id)
    return applied


class BatchRenameSession:
    """Connects one grid (store + controller) to the host message channel.

    ``send`` receives encoded payload dicts; delivery is fire-and-forget.
    """

    def __init__(
        self,
        send: Callable[[dict], None],
        config: Optional[dict] = None,
        set_status_cb=None,
        timer=None,
        **controller_kwargs,
    ):
        cfg = config if config is not None else config_paths.load_config()
        self.send_payload = send
        self.default_direction = SortDirection(cfg.get("DEFAULT_SORT_DIRECTION", SortDirection.READING_ORDER))
        self.store = GridStore(
            undo_max_depth=cfg.get("UNDO_MAX_DEPTH", 50),
            sort_direction=self.default_direction,
        )
        self.controller = GridController(
            self.store,
            set_status_cb=set_status_cb,
            clipboard_command=cfg.get("CLIPBOARD_INTERFACE_COMMAND"),
            **controller_kwargs,
        )
        self.layers: List[LayerRef] = []
        self.host_selection: Optional[SelectionMessage] = None
        self._highlighted: Optional[str] = None
        self._start_timer = timer or _start_timer
        self._pending_name: Optional[str] = None
        self._rename_timer = None

    def _send(self, message):
        self.send_payload(encode_message(message))

    # ---------- inbound ----------
    def handle_message(self, payload: dict) -> bool:
        try:
            message = decode_message(payload)
        except ValueError as exc:
            logger.debug("Ignoring host message: %s", exc)
            return False

        if isinstance(message, SelectionMessage):
            self.host_selection = message
        elif isinstance(message, LayerPositionsMessage):
            self.load_layers(message.layers)
        return True

    def load_layers(self, layers: Iterable[LayerRef], direction=None):
        self.controller.teardown()
        self.layers = list(layers)
        self.store.initialize_from_layers(self.layers, direction or self.default_direction)
        self.request_resize()

    # ---------- outbound ----------
    def start(self):
        self._send(InitMessage())

    def enter_batch_mode(self):
        self._send(GetLayerPositionsMessage())

    def rename_selection(self, name: str):
        if name:
            self._send(RenameMessage(name))

    def queue_rename(self, name: str):
        """Quick mode: send the typed name once typing pauses."""
        self._cancel_rename_timer()
        self._pending_name = name
        self._rename_timer = self._start_timer(RENAME_DEBOUNCE_SECONDS, self.flush_rename)

    def flush_rename(self):
        self._cancel_rename_timer()
        name, self._pending_name = self._pending_name, None
        if name:
            self.rename_selection(name)

    def _cancel_rename_timer(self):
        if self._rename_timer is not None:
            self._rename_timer.cancel()
            self._rename_timer = None

    def cancel(self, original_names: Iterable[str]):
        self._send(CancelMessage(tuple(original_names)))

    def close(self):
        self.flush_rename()
        self.controller.teardown()
        self.remove_highlight()
        self._send(CloseMessage())

    def select_next(self):
        self._send(SelectNextMessage())

    def select_previous(self):
        self._send(SelectPreviousMessage())

    def enter_frame(self):
        self._send(EnterFrameMessage())

    def change_direction(self, direction):
        self.store.reorder_by_direction(self.layers, direction)
        self.controller.sync_with_grid()

    def apply(self) -> List[Rename]:
        if self.controller.is_editing:
            self.controller.commit_edit()
        renames = self.store.get_renames()
        self._send(BatchRenameMessage(tuple(renames)))
        return renames

    def request_resize(self):
        width, height = ui_size_for_grid(self.store.column_count, self.store.row_count)
        self._send(ResizeUIMessage(width, height))

    def _row_node(self, row: int) -> Optional[str]:
        ids = self.store.layer_ids
        return ids[row] if 0 <= row < len(ids) else None

    def zoom_to_row(self, row: int):
        node_id = self._row_node(row)
        if node_id is not None:
            self._send(ZoomToLayerMessage(node_id))

    def zoom_to_selection(self):
        self._send(ZoomToSelectionMessage())

    def highlight_row(self, row: int):
        node_id = self._row_node(row)
        if node_id is None or node_id == self._highlighted:
            return
        self._highlighted = node_id
        self._send(HighlightLayerMessage(node_id))

    def remove_highlight(self):
        if self._highlighted is None:
            return
        self._highlighted = None
        self._send(RemoveHighlightMessage())
