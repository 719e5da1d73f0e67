import logging
import re
import subprocess
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def to_tsv(data: Sequence[Sequence[str]]) -> str:
    return "\n".join("\t".join(row) for row in data)


def parse_tsv(text: str, strip: bool = True) -> List[List[str]]:
    """Parse pasted text into rows of cells. Empty lines are dropped; ragged rows are kept as-is."""
    if not text:
        return []
    lines = [line for line in _LINE_SPLIT_RE.split(text) if line]
    if strip:
        return [[cell.strip() for cell in line.split("\t")] for line in lines]
    return [line.split("\t") for line in lines]


class GridClipboard:
    """In-memory 2-D copy buffer with a best-effort system clipboard mirror."""

    def __init__(self, interface_command: Optional[List[str]] = None):
        self.interface_command = interface_command
        self.data: Optional[List[List[str]]] = None
        self.is_cut = False
        self.cut_origin = None

    def capture(self, data: Sequence[Sequence[str]], cut: bool = False, origin=None):
        self.data = [list(row) for row in data]
        self.is_cut = cut
        self.cut_origin = origin if cut else None
        self._write_system(to_tsv(self.data))

    def clear_cut(self):
        self.is_cut = False
        self.cut_origin = None

    @property
    def has_data(self) -> bool:
        return bool(self.data)

    def _write_system(self, text: str) -> bool:
        if not self.interface_command:
            return False
        try:
            subprocess.run(self.interface_command, input=text, text=True, check=True)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("System clipboard copy failed: %s", exc)
            return False
        return True
