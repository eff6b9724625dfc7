"""
Growth Configuration

GrowthConfig holds every knob the engine reads: pan, zoom, branch rule
count, ticks per frame, initial segment length, culling mode and palette.
Configs are validated when they are built and never mutated afterwards;
every control delta (pan, zoom, cycle branches, speed) returns a new config.
Changing anything but ticks_per_frame means the growth must be reseeded.
"""

import math

from .palettes import PALETTES

REFERENCE_WIDTH = 1920
REFERENCE_HEIGHT = 1080

ZOOM_FACTOR = 1.33
PAN_STEP = 10.0
MIN_TICKS_PER_FRAME = 1
MAX_TICKS_PER_FRAME = 40
MAX_BRANCH_RULES = 4

# "visible": paint tips inside the current window.
# "legacy": paint tips outside the window bounds, comparing pixel coordinates
# against virtual-space bounds, as the first renderer did.
CULL_MODES = ("visible", "legacy")

# Fields whose change invalidates the growing tree.
GROWTH_FIELDS = ("pan_offset", "zoom_scale", "branch_rule_count",
                 "segment_length", "cull_mode", "palette")


class GrowthConfig:
    """Validated, immutable engine configuration.

    Args:
        ticks_per_frame: Growth ticks processed per presentation frame
        pan_offset: (x, y) translation in pixels, subtracted after scaling
        zoom_scale: Magnification factor; one tick moves 1/zoom_scale units
        branch_rule_count: Number of cumulative turning rules enabled (1-4)
        segment_length: Length of the first segment in virtual units
        cull_mode: "visible" or "legacy"
        palette: Palette name from palettes.PALETTES
    """

    __slots__ = ("ticks_per_frame", "pan_offset", "zoom_scale",
                 "branch_rule_count", "segment_length", "cull_mode", "palette")

    def __init__(self, ticks_per_frame=10, pan_offset=(-REFERENCE_WIDTH / 2, 0.0),
                 zoom_scale=1.0, branch_rule_count=3,
                 segment_length=REFERENCE_HEIGHT / 2, cull_mode="visible",
                 palette="carmine"):
        pan_x, pan_y = pan_offset
        values = {
            "ticks_per_frame": int(ticks_per_frame),
            "pan_offset": (float(pan_x), float(pan_y)),
            "zoom_scale": float(zoom_scale),
            "branch_rule_count": int(branch_rule_count),
            "segment_length": float(segment_length),
            "cull_mode": cull_mode,
            "palette": palette,
        }
        _validate(values)
        for key, value in values.items():
            object.__setattr__(self, key, value)

    def __setattr__(self, key, value):
        raise AttributeError("GrowthConfig is immutable; use replace()")

    @classmethod
    def for_canvas(cls, width, height, **overrides):
        """Config that seeds the tree at the top-centre of a width x height canvas."""
        params = {
            "pan_offset": (-width / 2.0, 0.0),
            "segment_length": height / 2.0,
        }
        params.update(overrides)
        return cls(**params)

    @property
    def step_per_tick(self):
        return 1.0 / self.zoom_scale

    def as_dict(self):
        return {key: getattr(self, key) for key in self.__slots__}

    def replace(self, **changes):
        params = self.as_dict()
        params.update(changes)
        return GrowthConfig(**params)

    def requires_reset(self, other):
        """True if switching from this config to `other` invalidates growth."""
        return any(getattr(self, f) != getattr(other, f) for f in GROWTH_FIELDS)

    def __eq__(self, other):
        if not isinstance(other, GrowthConfig):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self):
        return hash(tuple(self.as_dict().values()))

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"GrowthConfig({fields})"

    # --- Control deltas ---

    def panned(self, dx, dy):
        """Shift the view by (dx, dy) pixels."""
        pan_x, pan_y = self.pan_offset
        return self.replace(pan_offset=(pan_x + dx, pan_y + dy))

    def zoomed(self, factor, anchor=None):
        """Scale zoom by `factor`.

        With an anchor pixel (x, y), the virtual point under that pixel stays
        put; without one, the view scales about the virtual origin.
        """
        new_zoom = self.zoom_scale * factor
        if anchor is None:
            return self.replace(zoom_scale=new_zoom)
        ax, ay = anchor
        pan_x, pan_y = self.pan_offset
        new_pan = ((ax + pan_x) * factor - ax, (ay + pan_y) * factor - ay)
        return self.replace(zoom_scale=new_zoom, pan_offset=new_pan)

    def zoomed_in(self, anchor=None):
        return self.zoomed(ZOOM_FACTOR, anchor)

    def zoomed_out(self, anchor=None):
        return self.zoomed(1.0 / ZOOM_FACTOR, anchor)

    def with_next_branch_rule(self):
        """Cycle branch_rule_count 1 -> 2 -> 3 -> 4 -> 1."""
        return self.replace(branch_rule_count=self.branch_rule_count % MAX_BRANCH_RULES + 1)

    def with_ticks_per_frame(self, ticks):
        ticks = max(MIN_TICKS_PER_FRAME, min(MAX_TICKS_PER_FRAME, int(ticks)))
        return self.replace(ticks_per_frame=ticks)


def _validate(values):
    zoom = values["zoom_scale"]
    if not math.isfinite(zoom) or zoom <= 0:
        raise ValueError(f"zoom_scale must be a positive finite number, got {zoom!r}")
    if not 1 <= values["branch_rule_count"] <= MAX_BRANCH_RULES:
        raise ValueError(f"branch_rule_count must be in [1, {MAX_BRANCH_RULES}], "
                         f"got {values['branch_rule_count']!r}")
    if values["ticks_per_frame"] < MIN_TICKS_PER_FRAME:
        raise ValueError(f"ticks_per_frame must be >= {MIN_TICKS_PER_FRAME}, "
                         f"got {values['ticks_per_frame']!r}")
    length = values["segment_length"]
    if not math.isfinite(length) or length <= 0:
        raise ValueError(f"segment_length must be a positive finite number, got {length!r}")
    if not all(math.isfinite(v) for v in values["pan_offset"]):
        raise ValueError(f"pan_offset must be finite, got {values['pan_offset']!r}")
    if values["cull_mode"] not in CULL_MODES:
        raise ValueError(f"Unknown cull_mode: {values['cull_mode']!r}. "
                         f"Supported: {list(CULL_MODES)}")
    if values["palette"] not in PALETTES:
        raise ValueError(f"Unknown palette: {values['palette']!r}. "
                         f"Supported: {list(PALETTES.keys())}")
