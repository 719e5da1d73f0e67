import threading
from typing import Callable, Optional, Tuple

EDGE_THRESHOLD = 40
MIN_SPEED = 4
MAX_SPEED = 30
TICK_SECONDS = 0.016


def scroll_speed(distance: float) -> float:
    """Pixels per tick; grows linearly with how far the pointer is past the edge band."""
    ratio = min(1.0, max(0.0, distance / 100))
    return MIN_SPEED + (MAX_SPEED - MIN_SPEED) * ratio


def edge_velocity(pointer: Tuple[float, float], viewport: Tuple[float, float, float, float]):
    """Return (dx, dy) for a pointer inside/near viewport=(left, top, right, bottom)."""
    x, y = pointer
    left, top, right, bottom = viewport
    dx = dy = 0.0
    if y > bottom - EDGE_THRESHOLD:
        dy = scroll_speed(y - (bottom - EDGE_THRESHOLD))
    elif y < top + EDGE_THRESHOLD:
        dy = -scroll_speed((top + EDGE_THRESHOLD) - y)
    if x > right - EDGE_THRESHOLD:
        dx = scroll_speed(x - (right - EDGE_THRESHOLD))
    elif x < left + EDGE_THRESHOLD:
        dx = -scroll_speed((left + EDGE_THRESHOLD) - x)
    return dx, dy


class _RepeatingTimer:
    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._timer: Optional[threading.Timer] = None
        self._cancelled = False
        self._arm()

    def _arm(self):
        self._timer = threading.Timer(self.interval, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self):
        if self._cancelled:
            return
        self.callback()
        if not self._cancelled:
            self._arm()

    def cancel(self):
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()


class AutoScroller:
    """Repeating edge scroll used while drag-selecting or drag-filling.

    The owner must call ``stop()`` on pointer release and on teardown;
    nothing else cancels the repeating tick.
    """

    def __init__(self, scroll_cb: Callable[[float, float], None], schedule=None):
        self.scroll_cb = scroll_cb
        self.schedule = schedule or _RepeatingTimer
        self._handle = None
        self.velocity = (0.0, 0.0)

    @property
    def active(self) -> bool:
        return self._handle is not None

    def update(self, pointer, viewport):
        self.stop()
        dx, dy = edge_velocity(pointer, viewport)
        if dx == 0 and dy == 0:
            return
        self.velocity = (dx, dy)
        self._handle = self.schedule(TICK_SECONDS, self._tick)

    def _tick(self):
        dx, dy = self.velocity
        self.scroll_cb(dx, dy)

    def stop(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.velocity = (0.0, 0.0)
