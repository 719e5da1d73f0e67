import pytest

from batch_types import LayerKind, Rename
from host_bridge import BatchRenameSession, apply_batch_rename, ui_size_for_grid
from host_messages import (
    OUTBOUND_TYPES,
    BatchRenameMessage,
    HighlightLayerMessage,
    SelectionMessage,
    decode_message,
    encode_message,
)


def make_session():
    sent = []
    session = BatchRenameSession(sent.append, config={})
    return session, sent


LAYERS_PAYLOAD = {
    "type": "layerPositions",
    "layers": [
        {"id": "b", "name": "btn_secondary", "x": 0, "y": 40, "type": "frame"},
        {"id": "a", "name": "btn_primary", "x": 0, "y": 0, "type": "frame"},
    ],
}


def test_decode_selection_message():
    message = decode_message(
        {
            "type": "selection",
            "count": 2,
            "names": ["a", "b"],
            "hasLocked": True,
            "nodeIds": ["1", "2"],
            "layerType": "text",
        }
    )
    assert message == SelectionMessage(
        count=2,
        names=("a", "b"),
        has_locked=True,
        node_ids=("1", "2"),
        layer_type=LayerKind.TEXT,
    )


def test_unknown_layer_type_becomes_other():
    message = decode_message({"type": "selection", "layerType": "sticky-note"})
    assert message.layer_type == LayerKind.OTHER


@pytest.mark.parametrize("payload", [{"type": "bogus"}, {}, "selection", None])
def test_decode_rejects_unknown_payloads(payload):
    with pytest.raises(ValueError):
        decode_message(payload)


def test_outbound_registry_decodes_batch_rename():
    payload = encode_message(BatchRenameMessage((Rename("1", "a b"),)))
    assert payload == {"type": "batchRename", "renames": [{"nodeId": "1", "newName": "a b"}]}
    assert decode_message(payload, OUTBOUND_TYPES) == BatchRenameMessage((Rename("1", "a b"),))


def test_highlight_message_tag():
    assert encode_message(HighlightLayerMessage("7")) == {"type": "highlightLayer", "nodeId": "7"}


def test_ui_size_is_clamped():
    assert ui_size_for_grid(0, 0) == (380, 180)
    assert ui_size_for_grid(4, 1) == (676, 180)
    assert ui_size_for_grid(20, 50) == (800, 500)


def test_layer_positions_build_grid_and_resize():
    session, sent = make_session()
    assert session.handle_message(LAYERS_PAYLOAD) is True
    assert session.store.layer_ids == ["a", "b"]
    assert session.store.column_count == 4
    assert sent[-1] == {"type": "resizeUI", "width": 676, "height": 211}


def test_unknown_message_is_ignored():
    session, sent = make_session()
    assert session.handle_message({"type": "whatever"}) is False
    assert sent == []


def test_selection_message_is_kept():
    session, _ = make_session()
    session.handle_message({"type": "selection", "count": 1, "names": ["x"]})
    assert session.host_selection.names == ("x",)


def test_apply_commits_pending_edit():
    session, sent = make_session()
    session.handle_message(LAYERS_PAYLOAD)
    session.controller.double_click_cell(0, 2)
    session.controller.handle_key("g")
    session.controller.handle_key("o")

    renames = session.apply()

    assert renames == [Rename("a", "btn_go"), Rename("b", "btn_secondary")]
    assert sent[-1] == {
        "type": "batchRename",
        "renames": [
            {"nodeId": "a", "newName": "btn_go"},
            {"nodeId": "b", "newName": "btn_secondary"},
        ],
    }


def test_change_direction_keeps_edits():
    session, _ = make_session()
    session.handle_message(LAYERS_PAYLOAD)
    session.store.set_cell_value(0, 0, "link")
    session.change_direction("bottom-to-top")
    assert session.store.layer_ids == ["b", "a"]
    assert session.store.get_preview_names() == ["btn_secondary", "link_primary"]


def test_outbound_commands():
    session, sent = make_session()
    session.start()
    session.enter_batch_mode()
    session.rename_selection("")
    session.rename_selection("hero")
    session.cancel(["a", "b"])
    session.select_next()
    session.select_previous()
    session.enter_frame()
    session.zoom_to_selection()
    assert sent == [
        {"type": "init"},
        {"type": "getLayerPositions"},
        {"type": "rename", "name": "hero"},
        {"type": "cancel", "originalNames": ["a", "b"]},
        {"type": "selectNext"},
        {"type": "selectPrevious"},
        {"type": "enterFrame"},
        {"type": "zoomToSelection"},
    ]


def test_highlight_is_deduplicated():
    session, sent = make_session()
    session.handle_message(LAYERS_PAYLOAD)
    del sent[:]
    session.highlight_row(0)
    session.highlight_row(0)
    session.highlight_row(9)
    session.zoom_to_row(9)
    session.remove_highlight()
    session.remove_highlight()
    assert sent == [
        {"type": "highlightLayer", "nodeId": "a"},
        {"type": "removeHighlight"},
    ]


def test_close_clears_highlight():
    session, sent = make_session()
    session.handle_message(LAYERS_PAYLOAD)
    session.highlight_row(1)
    session.close()
    assert sent[-2:] == [{"type": "removeHighlight"}, {"type": "close"}]


def test_apply_batch_rename_skips_failures():
    nodes = {"1": "old", "2": "locked"}

    def rename_node(node_id, name):
        if nodes[node_id] == "locked":
            raise PermissionError("layer is locked")
        nodes[node_id] = name

    applied = apply_batch_rename(
        [Rename("1", "new"), Rename("2", "x"), Rename("gone", "y")], rename_node
    )
    assert applied == ["1"]
    assert nodes == {"1": "new", "2": "locked"}


def test_session_uses_configured_undo_depth():
    session = BatchRenameSession(lambda _payload: None, config={"UNDO_MAX_DEPTH": 2})
    assert session.store.history.max_depth == 2


class _Timer:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


def test_quick_rename_is_debounced():
    sent, timers = [], []

    def timer(_interval, callback):
        timers.append(_Timer(callback))
        return timers[-1]

    session = BatchRenameSession(sent.append, config={}, timer=timer)
    session.queue_rename("h")
    session.queue_rename("he")
    assert timers[0].cancelled
    assert sent == []

    timers[1].callback()
    assert sent == [{"type": "rename", "name": "he"}]

    session.queue_rename("hero")
    session.flush_rename()
    assert timers[2].cancelled
    assert sent[-1] == {"type": "rename", "name": "hero"}

    session.flush_rename()
    assert len(sent) == 2
