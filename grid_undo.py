class GridHistory:
    """Bounded undo/redo stacks of full grid snapshots."""

    def __init__(self, max_depth: int = 50):
        self.max_depth = max(1, int(max_depth))
        self.undo_stack: list = []
        self.redo_stack: list = []

    # ---------- stack helpers ----------
    def _push_bounded(self, stack: list, snap):
        stack.append(snap)
        if len(stack) > self.max_depth:
            stack.pop(0)

    def push_undo(self, snap):
        self._push_bounded(self.undo_stack, snap)
        self.redo_stack.clear()

    def clear(self):
        self.undo_stack.clear()
        self.redo_stack.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    # ---------- undo/redo ----------
    def undo(self, current):
        """Return the state to restore, or None when there is nothing to undo."""
        if not self.undo_stack:
            return None
        snap = self.undo_stack.pop()
        self._push_bounded(self.redo_stack, current)
        return snap

    def redo(self, current):
        if not self.redo_stack:
            return None
        snap = self.redo_stack.pop()
        self._push_bounded(self.undo_stack, current)
        return snap

    def remap(self, fn):
        """Rewrite every stored snapshot in place (e.g. a row permutation)."""
        self.undo_stack[:] = [fn(s) for s in self.undo_stack]
        self.redo_stack[:] = [fn(s) for s in self.redo_stack]
