import re
from typing import Iterable, List, Optional

from batch_types import ParsedName
from word_dictionary import COMMON_WORDS, MAX_WORD_LENGTH, MIN_WORD_LENGTH

SEPARATORS = "_-/. "

_SEPARATOR_RE = re.compile(r"[_\-/. ]")
_CAMEL_RE = re.compile(r"[a-z][A-Z]")
_CAMEL_SPLIT_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_DIGIT_RE = re.compile(r"[A-Za-z]\d|\d[A-Za-z]")
_DIGIT_SPLIT_RE = re.compile(r"(?<=[A-Za-z])(?=\d)|(?<=\d)(?=[A-Za-z])")


def parse_layer_name(name: str) -> ParsedName:
    """Split a layer name into tokens, one grid column per token.

    Strategies are tried in order (separators, case boundaries, digit
    boundaries, dictionary words); the first one producing more than one
    token wins. Falls back to the whole name as a single token.
    """
    name = "" if name is None else str(name)
    for strategy in (
        _split_separators,
        _split_case_boundaries,
        _split_digit_boundaries,
        _split_dictionary_words,
    ):
        parts = strategy(name)
        if parts and len(parts) > 1:
            return ParsedName(parts=tuple(parts))
    return ParsedName(parts=(name,))


def _split_separators(name: str) -> Optional[List[str]]:
    if not _SEPARATOR_RE.search(name):
        return None
    parts: List[str] = []
    current = ""
    for ch in name:
        if ch in SEPARATORS:
            if current:
                parts.append(current)
                current = ""
            parts.append(ch)
        else:
            current += ch
    if current:
        parts.append(current)
    return parts


def _split_case_boundaries(name: str) -> Optional[List[str]]:
    # iconBgHover -> icon, Bg, Hover
    if not _CAMEL_RE.search(name):
        return None
    return [p for p in _CAMEL_SPLIT_RE.split(name) if p]


def _split_digit_boundaries(name: str) -> Optional[List[str]]:
    # button01 -> button, 01
    if not _DIGIT_RE.search(name):
        return None
    return [p for p in _DIGIT_SPLIT_RE.split(name) if p]


def _split_dictionary_words(name: str) -> Optional[List[str]]:
    lowered = name.lower()
    if len(lowered) != len(name):
        return None

    parts: List[str] = []
    pos = 0
    total = len(name)
    while pos < total:
        matched = False
        longest = min(total - pos, MAX_WORD_LENGTH)
        for length in range(longest, MIN_WORD_LENGTH - 1, -1):
            if lowered[pos : pos + length] in COMMON_WORDS:
                parts.append(name[pos : pos + length])
                pos += length
                matched = True
                break
        if matched:
            continue
        if parts and len(parts[-1]) < 3:
            parts[-1] += name[pos]
        else:
            parts.append(name[pos])
        pos += 1

    return _merge_single_chars(parts)


def _merge_single_chars(parts: Iterable[str]) -> List[str]:
    result: List[str] = []
    for part in parts:
        if len(part) == 1:
            if result:
                result[-1] += part
            else:
                result.append(part)
        elif result and len(result[-1]) == 1:
            result[-1] += part
        else:
            result.append(part)
    return result


def get_max_columns(parsed_names: Iterable[ParsedName]) -> int:
    return max([1] + [len(p.parts) for p in parsed_names])


def pad_parts(parts, column_count: int) -> List[str]:
    result = list(parts)
    if len(result) < column_count:
        result.extend([""] * (column_count - len(result)))
    return result
