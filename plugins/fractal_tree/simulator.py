"""
GrowthSimulator - Headless tick driver for the fractal tree engine

Owns the RGBA framebuffer and the current GrowthState, runs
ticks_per_frame ticks per frame and turns control deltas (pan, zoom,
branch rules, speed, presets) into fresh engine states. No pygame here;
viewer.py adds the window on top and __main__.py uses it for headless
snapshots.

Usage:
    from fractal_tree.simulator import GrowthSimulator
    sim = GrowthSimulator(1920, 1080, preset="binary")
    frame = sim.step_frame()  # (H, W, 4) uint8 RGBA
"""

import time
import numpy as np

from .config import GrowthConfig, PAN_STEP
from .engine import reset
from .presets import DEFAULT_PRESET, get_preset, preset_config_params


class GrowthSimulator:
    """Frame-level driver: framebuffer + engine state + config deltas.

    Args:
        width, height: Framebuffer size in pixels
        preset: Preset key (ignored when `config` is given)
        config: Explicit GrowthConfig
        verbose: Print per-frame and per-generation timings
        backoff: Seconds to sleep on a frame where growth is exhausted
    """

    def __init__(self, width=1920, height=1080, preset=None, config=None,
                 verbose=False, backoff=0.016):
        self.width = width
        self.height = height
        self.verbose = verbose
        self.backoff = backoff
        self.frames = 0
        self.framebuffer = np.zeros((height, width, 4), dtype=np.uint8)

        if config is None:
            self.preset_key = preset or DEFAULT_PRESET
            config = self._preset_config(self.preset_key)
        else:
            self.preset_key = preset
        self.config = config
        self.state = None
        self._reseed()

    def _preset_config(self, key):
        if get_preset(key) is None:
            raise ValueError(f"Unknown preset: {key!r}")
        return GrowthConfig.for_canvas(self.width, self.height, **preset_config_params(key))

    def _reseed(self):
        self.framebuffer[:] = 0
        self.state = reset(self.config)
        if self.verbose:
            self.state.on_transition = self._report_transition

    def _report_transition(self, state):
        print(f"  generation {state.generation}: {len(state.population)} tips, "
              f"segment {state.schedule.segment_length:g}")

    # --- Ticking ---

    @property
    def exhausted(self):
        return self.state.exhausted

    def step_frame(self):
        """Run one frame's worth of ticks. Returns the framebuffer.

        Once growth is exhausted, a frame sleeps for `backoff` seconds
        instead of painting, so a caller polling in a loop does not spin.
        """
        t0 = time.perf_counter()
        if self.verbose:
            print(f"Rendering {len(self.state.population)} nodes... ", end="", flush=True)

        for _ in range(self.config.ticks_per_frame):
            self.state.advance(self.framebuffer, self.width, self.height)
            if self.state.exhausted:
                break

        if self.verbose:
            print(f"done in: {(time.perf_counter() - t0) * 1000:.2f}ms")
        if self.state.exhausted and self.backoff > 0:
            time.sleep(self.backoff)
        self.frames += 1
        return self.framebuffer

    def run(self, frames):
        """Run `frames` frames (or until exhausted). Returns frames executed."""
        done = 0
        while done < frames and not self.state.exhausted:
            self.step_frame()
            done += 1
        return done

    def run_until_exhausted(self, max_frames=100000):
        return self.run(max_frames)

    # --- Config deltas ---

    def apply_config(self, config):
        """Switch to `config`. Reseeds unless only ticks_per_frame changed."""
        needs_reset = self.config.requires_reset(config)
        self.config = config
        if needs_reset:
            self._reseed()
        else:
            self.state.config = config
        return needs_reset

    def apply_preset(self, key):
        """Apply a preset, keeping the current pan and zoom."""
        params = preset_config_params(self._check_preset(key))
        params.setdefault("cull_mode", "visible")
        self.preset_key = key
        return self.apply_config(self.config.replace(**params))

    def _check_preset(self, key):
        if get_preset(key) is None:
            raise ValueError(f"Unknown preset: {key!r}")
        return key

    def reset(self):
        self._reseed()

    def pan(self, dx, dy):
        return self.apply_config(self.config.panned(dx, dy))

    def pan_left(self, step=PAN_STEP):
        return self.pan(-step, 0.0)

    def pan_right(self, step=PAN_STEP):
        return self.pan(step, 0.0)

    def pan_up(self, step=PAN_STEP):
        return self.pan(0.0, -step)

    def pan_down(self, step=PAN_STEP):
        return self.pan(0.0, step)

    def zoom_in(self, anchor=None):
        return self.apply_config(self.config.zoomed_in(anchor))

    def zoom_out(self, anchor=None):
        return self.apply_config(self.config.zoomed_out(anchor))

    def cycle_branches(self):
        return self.apply_config(self.config.with_next_branch_rule())

    def faster(self):
        return self.apply_config(self.config.with_ticks_per_frame(self.config.ticks_per_frame + 1))

    def slower(self):
        return self.apply_config(self.config.with_ticks_per_frame(self.config.ticks_per_frame - 1))

    # --- Output ---

    def render_rgb(self):
        """Current frame as an (H, W, 3) uint8 RGB array (copy)."""
        return self.framebuffer[:, :, :3].copy()

    def save_png(self, path):
        from PIL import Image
        Image.fromarray(self.framebuffer).save(path)
        return path

    @property
    def stats(self):
        stats = dict(self.state.stats)
        stats.update({
            "frames": self.frames,
            "branch_rule_count": self.config.branch_rule_count,
            "zoom_scale": self.config.zoom_scale,
            "ticks_per_frame": self.config.ticks_per_frame,
            "preset": self.preset_key,
        })
        return stats
