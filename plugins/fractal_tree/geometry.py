"""
Growth-Space Geometry - Directions, Points and Tip Populations

The growth front is stored as four direction-indexed point arrays rather
than a list of (point, direction) pairs. The branching rule always works on
"every tip currently moving DOWN" and so on, so each batch is a single
(n, 2) float64 array that numpy can move and copy in one operation.
"""

import enum
from collections import namedtuple

import numpy as np


class Direction(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def unit(self):
        """Unit step in virtual space (y grows downwards, like the framebuffer)."""
        return _UNIT_STEPS[self]


_UNIT_STEPS = {
    Direction.UP: (0.0, -1.0),
    Direction.DOWN: (0.0, 1.0),
    Direction.LEFT: (-1.0, 0.0),
    Direction.RIGHT: (1.0, 0.0),
}

# Order tips are visited when painting. Later entries overwrite earlier ones
# when two tips land on the same pixel.
DIRECTION_ORDER = (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN)


VirtualPoint = namedtuple("VirtualPoint", ["x", "y"])
PixelPoint = namedtuple("PixelPoint", ["x", "y"])


def _empty_points():
    return np.zeros((0, 2), dtype=np.float64)


class Population:
    """The current growth front: one ordered point array per direction.

    Arrays handed out by a Population are read-only. Moving or branching
    builds a new Population; nothing is updated in place.
    """

    def __init__(self, collections=None):
        self._points = {}
        collections = collections or {}
        for direction in Direction:
            pts = collections.get(direction)
            if pts is None:
                arr = _empty_points()
            else:
                arr = np.array(pts, dtype=np.float64).reshape(-1, 2)
            arr.setflags(write=False)
            self._points[direction] = arr

    @classmethod
    def seed(cls, point, direction):
        """Population holding a single tip."""
        return cls({direction: [tuple(point)]})

    def __getitem__(self, direction):
        return self._points[direction]

    def __len__(self):
        return sum(len(pts) for pts in self._points.values())

    def __eq__(self, other):
        if not isinstance(other, Population):
            return NotImplemented
        return all(np.array_equal(self[d], other[d]) for d in Direction)

    def __repr__(self):
        counts = ", ".join(f"{d.name}={len(self[d])}" for d in DIRECTION_ORDER)
        return f"Population({counts})"

    def count(self, direction):
        return len(self._points[direction])

    def counts(self):
        return {d: len(self._points[d]) for d in Direction}

    def moved(self, step):
        """Every tip advanced `step` virtual units along its own direction."""
        moved = {}
        for direction, pts in self._points.items():
            if len(pts):
                moved[direction] = pts + np.asarray(direction.unit) * step
        return Population(moved)

    def positions(self):
        """All tip positions as one (n, 2) array, in DIRECTION_ORDER."""
        return np.concatenate([self._points[d] for d in DIRECTION_ORDER], axis=0)

    def tips(self):
        """Iterate (Direction, VirtualPoint) pairs in paint order."""
        for direction in DIRECTION_ORDER:
            for x, y in self._points[direction]:
                yield direction, VirtualPoint(float(x), float(y))
