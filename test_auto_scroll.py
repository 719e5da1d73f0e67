import pytest

from auto_scroll import AutoScroller, edge_velocity, scroll_speed

VIEWPORT = (0, 0, 300, 300)


@pytest.mark.parametrize(
    "distance, speed",
    [(0, 4), (50, 17), (100, 30), (400, 30), (-10, 4)],
)
def test_scroll_speed(distance, speed):
    assert scroll_speed(distance) == pytest.approx(speed)


def test_no_velocity_in_the_middle():
    assert edge_velocity((150, 150), VIEWPORT) == (0, 0)


def test_velocity_near_edges():
    dx, dy = edge_velocity((150, 290), VIEWPORT)
    assert dx == 0
    assert dy == pytest.approx(scroll_speed(30))

    dx, dy = edge_velocity((5, 10), VIEWPORT)
    assert dx == pytest.approx(-scroll_speed(35))
    assert dy == pytest.approx(-scroll_speed(30))


class _Handle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


def test_update_replaces_previous_tick():
    handles = []
    scroller = AutoScroller(
        lambda dx, dy: None,
        schedule=lambda _interval, cb: handles.append(_Handle(cb)) or handles[-1],
    )
    scroller.update((150, 295), VIEWPORT)
    scroller.update((150, 299), VIEWPORT)
    assert len(handles) == 2
    assert handles[0].cancelled
    assert scroller.active

    scroller.update((150, 150), VIEWPORT)
    assert handles[1].cancelled
    assert not scroller.active
