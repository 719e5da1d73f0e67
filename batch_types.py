from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LayerKind(str, Enum):
    FRAME = "frame"
    TEXT = "text"
    VECTOR = "vector"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    POLYGON = "polygon"
    STAR = "star"
    LINE = "line"
    IMAGE = "image"
    COMPONENT = "component"
    INSTANCE = "instance"
    GROUP = "group"
    MIXED = "mixed"
    OTHER = "other"

    @classmethod
    def coerce(cls, value) -> "LayerKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.OTHER


class SortDirection(str, Enum):
    LEFT_TO_RIGHT = "left-to-right"
    RIGHT_TO_LEFT = "right-to-left"
    TOP_TO_BOTTOM = "top-to-bottom"
    BOTTOM_TO_TOP = "bottom-to-top"
    READING_ORDER = "reading-order"


class SeriesType(str, Enum):
    CONSTANT = "constant"
    NUMERIC = "numeric"
    ALPHABETIC = "alphabetic"
    MIXED = "mixed"


@dataclass(frozen=True)
class LayerRef:
    """Read-only snapshot of a host layer."""

    id: str
    name: str
    x: float = 0.0
    y: float = 0.0
    type: LayerKind = LayerKind.OTHER

    @classmethod
    def from_dict(cls, data: dict) -> "LayerRef":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            x=float(data.get("x") or 0),
            y=float(data.get("y") or 0),
            type=LayerKind.coerce(data.get("type", "other")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "type": self.type.value,
        }


@dataclass(frozen=True)
class ParsedName:
    parts: tuple


@dataclass(frozen=True)
class ColumnDef:
    id: str
    header: str


@dataclass(frozen=True)
class CellFill:
    row: int
    col: int
    value: str


@dataclass(frozen=True)
class Rename:
    node_id: str
    new_name: str

    def to_dict(self) -> dict:
        return {"nodeId": self.node_id, "newName": self.new_name}


@dataclass
class SeriesInfo:
    type: SeriesType
    values: List[str] = field(default_factory=list)
    step: int = 0
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    pad_length: Optional[int] = None
