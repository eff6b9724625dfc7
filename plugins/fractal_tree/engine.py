"""
Growth Engine - Generational Branching of a Tip Population

A single seed tip grows DOWN from the virtual origin. Each tick moves every
tip one pixel's worth (1 / zoom_scale virtual units) along its direction.
When the current segment runs out of ticks the segment length halves and
every tip is replaced by its descendants, one per enabled turning rule:

    tier 1   turn          LEFT->DOWN   RIGHT->UP     DOWN->LEFT   UP->RIGHT
    tier 2   opposite turn LEFT->UP     RIGHT->DOWN   DOWN->RIGHT  UP->LEFT
    tier 3   straight      LEFT->LEFT   RIGHT->RIGHT  DOWN->DOWN   UP->UP
    tier 4   reversal      LEFT->RIGHT  RIGHT->LEFT   DOWN->UP     UP->DOWN

Tiers are cumulative: branch_rule_count=2 enables tiers 1 and 2 (the
classic binary H-tree), 3 adds a straight trunk, 4 adds back-turns.
Growth stops ("exhausted") once a halved segment rounds to zero ticks.

Usage:
    state = reset(GrowthConfig(zoom_scale=1.0, branch_rule_count=2))
    frame = bytearray(width * height * 4)
    advance(state, frame, width, height)
"""

import numpy as np

from .geometry import Direction, Population, VirtualPoint
from .projector import Projector

SEED_POINT = VirtualPoint(0.0, 0.0)
SEED_DIRECTION = Direction.DOWN

# Each tier maps source direction -> destination direction.
RULE_TIERS = (
    {Direction.LEFT: Direction.DOWN, Direction.RIGHT: Direction.UP,
     Direction.DOWN: Direction.LEFT, Direction.UP: Direction.RIGHT},
    {Direction.RIGHT: Direction.DOWN, Direction.LEFT: Direction.UP,
     Direction.DOWN: Direction.RIGHT, Direction.UP: Direction.LEFT},
    {Direction.DOWN: Direction.DOWN, Direction.UP: Direction.UP,
     Direction.RIGHT: Direction.RIGHT, Direction.LEFT: Direction.LEFT},
    {Direction.LEFT: Direction.RIGHT, Direction.RIGHT: Direction.LEFT,
     Direction.UP: Direction.DOWN, Direction.DOWN: Direction.UP},
)

RULE_LABELS = ("turn", "opposite turn", "straight", "reversal")


def ticks_for_length(segment_length, zoom_scale):
    """Ticks needed to draw a segment: its length in pixels, rounded half-to-even."""
    return round(segment_length * zoom_scale)


def transitions_until_exhausted(segment_length, zoom_scale):
    """Number of generation transitions before growth stops.

    Depends only on the initial segment length and zoom. A segment that
    rounds to zero ticks from the start exhausts on the first tick with
    zero transitions.
    """
    transitions = 0
    while True:
        segment_length /= 2.0
        if ticks_for_length(segment_length, zoom_scale) == 0:
            return transitions
        transitions += 1


def branch(population, branch_rule_count):
    """Replace every tip by its descendants under the first N rule tiers.

    Each enabled tier contributes a full copy of a source collection to a
    destination collection. Destinations collect tier 1 first, then tier 2,
    and so on; the new collections replace the old ones all at once.
    """
    gathered = {d: [] for d in Direction}
    for tier in RULE_TIERS[:branch_rule_count]:
        for source, dest in tier.items():
            pts = population[source]
            if len(pts):
                gathered[dest].append(pts)
    return Population({d: _stack(chunks) for d, chunks in gathered.items() if chunks})


def _stack(chunks):
    return np.concatenate(chunks, axis=0)


class GenerationSchedule:
    """Segment length, ticks left in the segment and generation counter."""

    __slots__ = ("segment_length", "remaining_ticks", "generation")

    def __init__(self, segment_length, remaining_ticks, generation=0):
        self.segment_length = segment_length
        self.remaining_ticks = remaining_ticks
        self.generation = generation

    def as_tuple(self):
        return (self.segment_length, self.remaining_ticks, self.generation)

    def __eq__(self, other):
        if not isinstance(other, GenerationSchedule):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return (f"GenerationSchedule(segment_length={self.segment_length!r}, "
                f"remaining_ticks={self.remaining_ticks!r}, generation={self.generation!r})")


class GrowthState:
    """One growing tree: config, schedule, population and projector.

    A GrowthState is built once per configuration by reset() and then owned
    by whoever drives it. Changing pan, zoom or branch rules means building
    a new state; there is no way to retarget a tree mid-growth.
    """

    def __init__(self, config):
        self.config = config
        self.projector = Projector(config)
        self.schedule = GenerationSchedule(
            config.segment_length,
            ticks_for_length(config.segment_length, config.zoom_scale),
        )
        self.population = Population.seed(SEED_POINT, SEED_DIRECTION)
        self.exhausted = False
        self.ticks = 0
        self.on_transition = None

    @property
    def generation(self):
        return self.schedule.generation

    def _next_generation(self):
        """Halve the segment and branch. Returns False when growth is exhausted."""
        schedule = self.schedule
        schedule.segment_length /= 2.0
        schedule.remaining_ticks = ticks_for_length(schedule.segment_length,
                                                    self.config.zoom_scale)
        if schedule.remaining_ticks == 0:
            self.exhausted = True
            return False

        self.population = branch(self.population, self.config.branch_rule_count)
        schedule.generation += 1
        if self.on_transition is not None:
            self.on_transition(self)
        return True

    def advance(self, framebuffer, width, height):
        """Run one tick and paint it. Returns the number of pixels written.

        An exhausted state does nothing and returns 0.
        """
        if self.exhausted:
            return 0
        if self.schedule.remaining_ticks == 0 and not self._next_generation():
            return 0

        self.schedule.remaining_ticks -= 1
        self.population = self.population.moved(self.config.step_per_tick)
        self.ticks += 1
        return self.projector.paint(self.population, self.schedule.generation,
                                    framebuffer, width, height)

    def advance_n(self, n, framebuffer, width, height):
        """Run up to n ticks, stopping early if growth is exhausted."""
        written = 0
        for _ in range(n):
            if self.exhausted:
                break
            written += self.advance(framebuffer, width, height)
        return written

    @property
    def stats(self):
        return {
            "generation": self.schedule.generation,
            "tips": len(self.population),
            "segment_length": self.schedule.segment_length,
            "remaining_ticks": self.schedule.remaining_ticks,
            "ticks": self.ticks,
            "exhausted": self.exhausted,
        }


def reset(config):
    """Fresh GrowthState: one seed tip, generation 0."""
    return GrowthState(config)


def advance(state, framebuffer, width, height):
    """Advance `state` by one tick, painting into `framebuffer`."""
    return state.advance(framebuffer, width, height)
