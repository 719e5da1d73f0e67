import math
from typing import List, Sequence

from batch_types import LayerRef, SortDirection

MIN_BUCKET_THRESHOLD = 20.0
# Host positions carry no extent, so every layer is assumed to be this size.
ASSUMED_LAYER_EXTENT = 50.0
BUCKET_EXTENT_FACTOR = 0.5


def bucket_threshold(layers: Sequence[LayerRef]) -> float:
    if len(layers) < 2:
        return MIN_BUCKET_THRESHOLD
    average_extent = sum(ASSUMED_LAYER_EXTENT for _ in layers) / len(layers)
    return max(MIN_BUCKET_THRESHOLD, average_extent * BUCKET_EXTENT_FACTOR)


def sort_layers_by_direction(layers: Sequence[LayerRef], direction) -> List[LayerRef]:
    """Order layers spatially. Stable: exact ties keep their input order."""
    direction = SortDirection(direction)
    threshold = bucket_threshold(layers)

    if direction == SortDirection.LEFT_TO_RIGHT:
        key = lambda l: (l.x, l.y)
    elif direction == SortDirection.RIGHT_TO_LEFT:
        key = lambda l: (-l.x, l.y)
    elif direction == SortDirection.BOTTOM_TO_TOP:
        key = lambda l: (-l.y, l.x)
    elif direction == SortDirection.TOP_TO_BOTTOM:
        # column by column, top to bottom inside each column
        key = lambda l: (math.floor(l.x / threshold), l.y)
    else:
        # row by row, left to right inside each row
        key = lambda l: (math.floor(l.y / threshold), l.x)

    return sorted(layers, key=key)
