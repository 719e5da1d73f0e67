"""Tagged messages exchanged with the host application.

Each direction is a closed set of message classes keyed by their ``TYPE``
tag. Payloads are plain dicts in the host's camelCase shape.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Tuple

from batch_types import LayerKind, LayerRef, Rename


# ---------- host -> engine ----------
@dataclass(frozen=True)
class SelectionMessage:
    TYPE: ClassVar[str] = "selection"
    count: int = 0
    names: Tuple[str, ...] = ()
    has_locked: bool = False
    node_ids: Tuple[str, ...] = ()
    layer_type: LayerKind = LayerKind.OTHER

    def to_payload(self) -> dict:
        return {
            "type": self.TYPE,
            "count": self.count,
            "names": list(self.names),
            "hasLocked": self.has_locked,
            "nodeIds": list(self.node_ids),
            "layerType": self.layer_type.value,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "SelectionMessage":
        return cls(
            count=int(payload.get("count", 0)),
            names=tuple(str(n) for n in payload.get("names") or ()),
            has_locked=bool(payload.get("hasLocked", False)),
            node_ids=tuple(str(n) for n in payload.get("nodeIds") or ()),
            layer_type=LayerKind.coerce(payload.get("layerType", "other")),
        )


@dataclass(frozen=True)
class LayerPositionsMessage:
    TYPE: ClassVar[str] = "layerPositions"
    layers: Tuple[LayerRef, ...] = ()

    def to_payload(self) -> dict:
        return {"type": self.TYPE, "layers": [l.to_dict() for l in self.layers]}

    @classmethod
    def from_payload(cls, payload: dict) -> "LayerPositionsMessage":
        layers = payload.get("layers") or ()
        return cls(layers=tuple(LayerRef.from_dict(l) for l in layers if isinstance(l, dict)))


# ---------- engine -> host ----------
@dataclass(frozen=True)
class _Bare:
    TYPE: ClassVar[str] = ""

    def to_payload(self) -> dict:
        return {"type": self.TYPE}

    @classmethod
    def from_payload(cls, payload: dict):
        return cls()


class InitMessage(_Bare):
    TYPE = "init"


class SelectNextMessage(_Bare):
    TYPE = "selectNext"


class SelectPreviousMessage(_Bare):
    TYPE = "selectPrevious"


class EnterFrameMessage(_Bare):
    TYPE = "enterFrame"


class GetLayerPositionsMessage(_Bare):
    TYPE = "getLayerPositions"


class ZoomToSelectionMessage(_Bare):
    TYPE = "zoomToSelection"


class RemoveHighlightMessage(_Bare):
    TYPE = "removeHighlight"


class CloseMessage(_Bare):
    TYPE = "close"


@dataclass(frozen=True)
class RenameMessage:
    TYPE: ClassVar[str] = "rename"
    name: str = ""

    def to_payload(self) -> dict:
        return {"type": self.TYPE, "name": self.name}

    @classmethod
    def from_payload(cls, payload: dict) -> "RenameMessage":
        return cls(name=str(payload.get("name", "")))


@dataclass(frozen=True)
class CancelMessage:
    TYPE: ClassVar[str] = "cancel"
    original_names: Tuple[str, ...] = ()

    def to_payload(self) -> dict:
        return {"type": self.TYPE, "originalNames": list(self.original_names)}

    @classmethod
    def from_payload(cls, payload: dict) -> "CancelMessage":
        return cls(original_names=tuple(str(n) for n in payload.get("originalNames") or ()))


@dataclass(frozen=True)
class BatchRenameMessage:
    TYPE: ClassVar[str] = "batchRename"
    renames: Tuple[Rename, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        return {"type": self.TYPE, "renames": [r.to_dict() for r in self.renames]}

    @classmethod
    def from_payload(cls, payload: dict) -> "BatchRenameMessage":
        renames = []
        for item in payload.get("renames") or ():
            if isinstance(item, dict) and "nodeId" in item:
                renames.append(Rename(str(item["nodeId"]), str(item.get("newName", ""))))
        return cls(renames=tuple(renames))


@dataclass(frozen=True)
class ResizeUIMessage:
    TYPE: ClassVar[str] = "resizeUI"
    width: int = 0
    height: int = 0

    def to_payload(self) -> dict:
        return {"type": self.TYPE, "width": self.width, "height": self.height}

    @classmethod
    def from_payload(cls, payload: dict) -> "ResizeUIMessage":
        return cls(width=int(payload.get("width", 0)), height=int(payload.get("height", 0)))


@dataclass(frozen=True)
class ZoomToLayerMessage:
    TYPE: ClassVar[str] = "zoomToLayer"
    node_id: str = ""

    def to_payload(self) -> dict:
        return {"type": self.TYPE, "nodeId": self.node_id}

    @classmethod
    def from_payload(cls, payload: dict) -> "ZoomToLayerMessage":
        return cls(node_id=str(payload.get("nodeId", "")))


class HighlightLayerMessage(ZoomToLayerMessage):
    TYPE = "highlightLayer"


INBOUND_TYPES: Dict[str, type] = {
    cls.TYPE: cls for cls in (SelectionMessage, LayerPositionsMessage)
}

OUTBOUND_TYPES: Dict[str, type] = {
    cls.TYPE: cls
    for cls in (
        InitMessage,
        RenameMessage,
        CancelMessage,
        CloseMessage,
        SelectNextMessage,
        SelectPreviousMessage,
        EnterFrameMessage,
        GetLayerPositionsMessage,
        BatchRenameMessage,
        ResizeUIMessage,
        ZoomToLayerMessage,
        ZoomToSelectionMessage,
        HighlightLayerMessage,
        RemoveHighlightMessage,
    )
}


def encode_message(message) -> dict:
    return message.to_payload()


def decode_message(payload: dict, registry: Dict[str, type] = INBOUND_TYPES):
    """Build the message object for a payload; unknown tags raise ValueError."""
    if not isinstance(payload, dict):
        raise ValueError(f"Message payload must be a dict, got {type(payload).__name__}")
    tag = payload.get("type")
    cls = registry.get(tag)
    if cls is None:
        raise ValueError(f"Unknown message type: {tag!r}")
    return cls.from_payload(payload)
