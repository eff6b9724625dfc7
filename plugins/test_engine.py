#!/usr/bin/env python3
"""
Tests for the growth engine.

Verifies:
1. Branch rule table, tier by tier, including destination ordering
2. Population size per generation for every branch rule count
3. Segment halving, exhaustion and the idle exhausted state
4. reset() idempotence and the seed tip
"""

import numpy as np
from fractal_tree.config import GrowthConfig
from fractal_tree.engine import (
    RULE_TIERS, branch, reset, advance, transitions_until_exhausted, ticks_for_length,
)
from fractal_tree.geometry import Direction, Population

L, R, U, D = Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN


def _one_per_direction():
    """Population with one tip per direction, tagged by x coordinate."""
    return Population({L: [(1.0, 0.0)], R: [(2.0, 0.0)], U: [(3.0, 0.0)], D: [(4.0, 0.0)]})


def _xs(pop, direction):
    return list(pop[direction][:, 0])


def _small_config(**kw):
    params = {"zoom_scale": 1.0, "pan_offset": (0.0, 0.0), "segment_length": 64.0,
              "branch_rule_count": 2}
    params.update(kw)
    return GrowthConfig(**params)


def test_rule_tiers():
    """Each tier is a permutation of the four directions."""
    print("Testing rule tiers...")
    assert len(RULE_TIERS) == 4
    for tier in RULE_TIERS:
        assert set(tier.keys()) == set(Direction), "Every direction needs a source"
        assert set(tier.values()) == set(Direction), "Every direction needs a destination"
    print("  ✓ rule tiers are permutations")


def test_branch_single_rule():
    print("Testing branch with one rule...")
    new = branch(_one_per_direction(), 1)
    assert _xs(new, D) == [1.0], "LEFT turns DOWN"
    assert _xs(new, U) == [2.0], "RIGHT turns UP"
    assert _xs(new, L) == [4.0], "DOWN turns LEFT"
    assert _xs(new, R) == [3.0], "UP turns RIGHT"
    print("  ✓ tier 1 mapping correct")


def test_branch_all_rules_order():
    """Destinations collect tier 1 first, then 2, 3, 4."""
    print("Testing branch with four rules...")
    new = branch(_one_per_direction(), 4)
    assert _xs(new, D) == [1.0, 2.0, 4.0, 3.0], f"DOWN: {_xs(new, D)}"
    assert _xs(new, U) == [2.0, 1.0, 3.0, 4.0], f"UP: {_xs(new, U)}"
    assert _xs(new, L) == [4.0, 3.0, 1.0, 2.0], f"LEFT: {_xs(new, L)}"
    assert _xs(new, R) == [3.0, 4.0, 2.0, 1.0], f"RIGHT: {_xs(new, R)}"
    print("  ✓ tier ordering correct")


def test_branch_is_cumulative():
    """Raising the rule count only ever adds destinations."""
    print("Testing cumulative tiers...")
    pop = _one_per_direction()
    previous = None
    for count in (1, 2, 3, 4):
        new = branch(pop, count)
        assert len(new) == 4 * count, f"{count} rules: expected {4 * count} tips, got {len(new)}"
        if previous is not None:
            for d in Direction:
                n_prev = previous.count(d)
                assert np.array_equal(new[d][:n_prev], previous[d]), \
                    f"{count} rules must extend the {d.name} collection of {count - 1} rules"
        previous = new
    print("  ✓ each tier extends the previous ones")


def test_branch_keeps_positions():
    """Descendants inherit the exact parent position."""
    pop = Population.seed((3.25, -7.5), D)
    new = branch(pop, 4)
    for direction, point in new.tips():
        assert point == (3.25, -7.5), f"{direction.name} descendant moved: {point}"


def test_branch_does_not_touch_source():
    pop = _one_per_direction()
    branch(pop, 4)
    assert pop == _one_per_direction(), "branch must not modify its input"


def test_seed_state():
    print("Testing reset...")
    state = reset(_small_config())
    assert len(state.population) == 1
    assert state.population.count(D) == 1, "Seed tip moves DOWN"
    assert tuple(state.population[D][0]) == (0.0, 0.0), "Seed tip starts at origin"
    assert state.schedule.as_tuple() == (64.0, 64, 0)
    assert not state.exhausted
    print("  ✓ seed state correct")


def test_reset_idempotent():
    cfg = _small_config(branch_rule_count=3)
    a = reset(cfg)
    b = reset(cfg)
    assert a.schedule == b.schedule
    assert a.population == b.population
    assert a.exhausted == b.exhausted


def test_step_size_follows_zoom():
    state = reset(_small_config(zoom_scale=2.0))
    fb = bytearray(4 * 4 * 4)
    advance(state, fb, 4, 4)
    assert tuple(state.population[D][0]) == (0.0, 0.5), "One tick moves 1/zoom units"
    assert state.schedule.remaining_ticks == 127


def _run_generations(count, segment_length=64.0):
    """Advance until exhausted. Returns {generation: population size}."""
    state = reset(_small_config(branch_rule_count=count, segment_length=segment_length))
    fb = bytearray(8 * 8 * 4)
    sizes = {0: len(state.population)}
    while not state.exhausted:
        advance(state, fb, 8, 8)
        sizes[state.generation] = len(state.population)
    return state, sizes


def test_population_sizes():
    print("Testing population size per generation...")
    for count in (1, 2, 3, 4):
        _, sizes = _run_generations(count)
        for gen, size in sizes.items():
            assert size == count ** gen, \
                f"{count} rules, generation {gen}: expected {count ** gen}, got {size}"
    print("  ✓ size is rule_count ** generation")


def test_single_rule_never_grows():
    _, sizes = _run_generations(1)
    assert set(sizes.values()) == {1}, "One rule gives one descendant per tip"


def test_binary_doubles():
    _, sizes = _run_generations(2)
    assert [sizes[g] for g in sorted(sizes)] == [1, 2, 4, 8, 16, 32, 64]


def test_schedule_halving_and_exhaustion():
    print("Testing schedule...")
    state = reset(_small_config())
    fb = bytearray(8 * 8 * 4)
    lengths = {0: state.schedule.segment_length}
    ticks = 0
    while True:
        before = state.generation
        advance(state, fb, 8, 8)
        if state.exhausted:
            break
        ticks += 1
        if state.generation != before:
            assert state.generation == before + 1, "One transition at a time"
            lengths[state.generation] = state.schedule.segment_length

    assert ticks == 64 + 32 + 16 + 8 + 4 + 2 + 1, f"Unexpected tick count {ticks}"
    assert state.generation == 6 == transitions_until_exhausted(64.0, 1.0)
    for gen in range(1, 7):
        assert lengths[gen] == lengths[gen - 1] / 2, f"Generation {gen} must halve the segment"
    print("  ✓ segment halves once per transition, exhausts after 6")


def test_exhausted_is_idle():
    state, _ = _run_generations(2)
    fb = bytearray(8 * 8 * 4)
    snapshot = (state.schedule.as_tuple(), len(state.population), state.ticks)
    for _ in range(5):
        assert advance(state, fb, 8, 8) == 0
    assert fb == bytearray(8 * 8 * 4), "Exhausted engine must not paint"
    assert (state.schedule.as_tuple(), len(state.population), state.ticks) == snapshot


def test_transitions_until_exhausted():
    assert ticks_for_length(2.5, 1.0) == 2, "Half-to-even rounding"
    assert transitions_until_exhausted(5.0, 1.0) == 3   # 2.5 -> 2, 1.25 -> 1, 0.625 -> 1
    assert transitions_until_exhausted(0.4, 1.0) == 0
    assert transitions_until_exhausted(540.0, 1.0) == transitions_until_exhausted(270.0, 2.0)

    for seg, zoom in ((5.0, 1.0), (540.0, 1.0), (100.0, 0.75)):
        state = reset(_small_config(segment_length=seg, zoom_scale=zoom))
        fb = bytearray(8 * 8 * 4)
        while not state.exhausted:
            advance(state, fb, 8, 8)
        assert state.generation == transitions_until_exhausted(seg, zoom), \
            f"segment {seg}, zoom {zoom}"


def test_zero_length_segment_exhausts_immediately():
    state = reset(_small_config(segment_length=0.4))
    fb = bytearray(8 * 8 * 4)
    assert advance(state, fb, 8, 8) == 0
    assert state.exhausted
    assert state.generation == 0


def test_transition_hook():
    state = reset(_small_config(segment_length=4.0))
    seen = []
    state.on_transition = lambda s: seen.append((s.generation, len(s.population)))
    state.advance_n(100, bytearray(8 * 8 * 4), 8, 8)
    assert seen == [(1, 2), (2, 4)], f"Unexpected transitions: {seen}"


if __name__ == "__main__":
    print("\n=== Testing Growth Engine ===\n")

    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()

    print("\n✓ All tests passed!\n")
