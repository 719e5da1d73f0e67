import re
from typing import List, Optional, Sequence

import numpy as np

from batch_types import SeriesInfo, SeriesType

_DIGIT_RUN_RE = re.compile(r"[0-9]+")
_DIGITS_ONLY_RE = re.compile(r"^[0-9]+$")
_SINGLE_LETTER_RE = re.compile(r"^[A-Za-z]$")


def _common_step(numbers: Sequence[int]) -> Optional[int]:
    """Return the shared successive difference, or None if the steps differ."""
    if len(numbers) < 2:
        return None
    steps = np.diff(np.array(list(numbers), dtype=object))
    if not bool((steps == steps[0]).all()):
        return None
    return int(steps[0])


def detect_series(values: Sequence[str]) -> SeriesInfo:
    """Classify the progression implied by an ordered run of cell values."""
    values = [("" if v is None else str(v)) for v in values]
    if not values:
        return SeriesInfo(type=SeriesType.CONSTANT, values=[], step=0)
    if len(values) == 1:
        return SeriesInfo(type=SeriesType.CONSTANT, values=values, step=0)

    for attempt in (_try_mixed, _try_numeric, _try_alphabetic):
        series = attempt(values)
        if series is not None:
            return series

    return SeriesInfo(type=SeriesType.CONSTANT, values=values, step=0)


def _split_last_number(value: str):
    matches = list(_DIGIT_RUN_RE.finditer(value))
    if not matches:
        return None
    last = matches[-1]
    return value[: last.start()], last.group(0), value[last.end() :]


def _try_mixed(values: List[str]) -> Optional[SeriesInfo]:
    # "icon-01", "icon-02" / "Item 1", "Item 2"
    parsed = [_split_last_number(v) for v in values]
    if any(p is None for p in parsed):
        return None
    prefix, first_digits, suffix = parsed[0]
    if not prefix and not suffix:
        # bare digit runs belong to the numeric series
        return None
    if any(p[0] != prefix or p[2] != suffix for p in parsed):
        return None
    step = _common_step([int(p[1]) for p in parsed])
    if step is None:
        return None
    return SeriesInfo(
        type=SeriesType.MIXED,
        values=values,
        step=step,
        prefix=prefix,
        suffix=suffix,
        pad_length=len(first_digits),
    )


def _try_numeric(values: List[str]) -> Optional[SeriesInfo]:
    if not all(_DIGITS_ONLY_RE.match(v) for v in values):
        return None
    step = _common_step([int(v) for v in values])
    if step is None:
        return None
    return SeriesInfo(type=SeriesType.NUMERIC, values=values, step=step)


def _try_alphabetic(values: List[str]) -> Optional[SeriesInfo]:
    if not all(_SINGLE_LETTER_RE.match(v) for v in values):
        return None
    step = _common_step([ord(v) for v in values])
    if step is None:
        return None
    return SeriesInfo(type=SeriesType.ALPHABETIC, values=values, step=step)


def continue_series(series: SeriesInfo, count: int) -> List[str]:
    """Generate the next ``count`` terms after the observed values."""
    count = max(0, int(count))
    if count == 0:
        return []

    if series.type == SeriesType.NUMERIC:
        last = series.values[-1]
        start = int(last)
        width = len(last)
        return [
            str(max(0, start + series.step * k)).zfill(width)
            for k in range(1, count + 1)
        ]

    if series.type == SeriesType.ALPHABETIC:
        last = series.values[-1]
        base = ord("A") if last.isupper() else ord("a")
        offset = ord(last.upper() if last.isupper() else last.lower()) - base
        return [
            chr(base + (offset + series.step * k) % 26) for k in range(1, count + 1)
        ]

    if series.type == SeriesType.MIXED:
        split = _split_last_number(series.values[-1])
        start = int(split[1]) if split else 0
        width = series.pad_length or (len(split[1]) if split else 1)
        prefix = series.prefix or ""
        suffix = series.suffix or ""
        return [
            f"{prefix}{str(max(0, start + series.step * k)).zfill(width)}{suffix}"
            for k in range(1, count + 1)
        ]

    cycle = list(series.values) or [""]
    return [cycle[i % len(cycle)] for i in range(count)]
