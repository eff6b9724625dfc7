"""
Projector / Rasterizer - Virtual Growth Space to RGBA Framebuffer

Virtual space is unbounded and centred on the seed. Pixel space is the
framebuffer, origin at the top-left. The forward transform scales first
and pans second, so a pan is always measured in screen pixels:

    pixel = virtual * zoom_scale - pan_offset
    virtual = (pixel + pan_offset) / zoom_scale

Rasterization is point-sampled: every tip writes one RGBA pixel, rounded
half-to-even so sub-pixel offsets do not drift in one direction over many
generations. Tips that land outside the framebuffer are dropped silently;
that is the normal steady state once the tree outgrows the window.
"""

import numpy as np

from .geometry import PixelPoint, VirtualPoint
from .palettes import get_palette, color_for_generation


def as_pixel_buffer(framebuffer, width, height):
    """View a writable RGBA8 buffer as an (n_pixels, 4) uint8 array.

    Accepts a bytearray, memoryview or contiguous numpy uint8 array. The
    returned array shares memory with `framebuffer`.
    """
    if isinstance(framebuffer, np.ndarray):
        if framebuffer.dtype != np.uint8 or not framebuffer.flags.c_contiguous:
            raise ValueError("Framebuffer array must be C-contiguous uint8")
        flat = framebuffer.reshape(-1)
    else:
        flat = np.frombuffer(framebuffer, dtype=np.uint8)
    if flat.size < width * height * 4:
        raise ValueError(f"Framebuffer holds {flat.size} bytes, "
                         f"need {width * height * 4} for {width}x{height} RGBA")
    if not flat.flags.writeable:
        raise ValueError("Framebuffer must be writable")
    return flat[: flat.size - flat.size % 4].reshape(-1, 4)


class Projector:
    """Affine transform plus point rasterizer for one GrowthConfig."""

    def __init__(self, config):
        self.config = config
        self.scale = config.zoom_scale
        self.pan = np.array(config.pan_offset, dtype=np.float64)
        self.palette = get_palette(config.palette)

    def project(self, point):
        """Virtual point -> pixel point."""
        x, y = point
        return PixelPoint(x * self.scale - self.pan[0], y * self.scale - self.pan[1])

    def pixel_to_virtual(self, pixel):
        """Pixel point -> virtual point (inverse of project)."""
        px, py = pixel
        return VirtualPoint((px + self.pan[0]) / self.scale, (py + self.pan[1]) / self.scale)

    def project_array(self, positions):
        return positions * self.scale - self.pan

    def visible_bounds(self, width, height):
        """Virtual-space rectangle (min, max) covered by a width x height window."""
        return self.pixel_to_virtual((0.0, 0.0)), self.pixel_to_virtual((float(width), float(height)))

    def pixel_indices(self, positions, width, height):
        """Linear pixel indices of the tips that survive culling.

        Returns an int64 array of indices inside the width x height frame.
        """
        if len(positions) == 0:
            return np.zeros(0, dtype=np.int64)

        lo, hi = self.visible_bounds(width, height)
        lo = np.asarray(lo)
        hi = np.asarray(hi)
        pixels = self.project_array(positions)

        if self.config.cull_mode == "legacy":
            # Pixel coordinates tested against virtual bounds, keeping what
            # lies outside; index rounded after linearising.
            outside = np.any((pixels < lo) | (pixels > hi), axis=1)
            pixels = pixels[outside]
            linear = np.rint(pixels[:, 1] * width + pixels[:, 0])
            keep = np.isfinite(linear) & (linear >= 0) & (linear < width * height)
            return linear[keep].astype(np.int64)

        inside = np.all((positions >= lo) & (positions <= hi), axis=1)
        pixels = np.rint(pixels[inside])
        # Rounding can push a tip on the far edge to column `width`, which
        # would wrap onto the next row.
        keep = ((pixels[:, 0] >= 0) & (pixels[:, 0] < width) &
                (pixels[:, 1] >= 0) & (pixels[:, 1] < height))
        pixels = pixels[keep].astype(np.int64)
        return pixels[:, 1] * width + pixels[:, 0]

    def paint(self, population, generation, framebuffer, width, height):
        """Write every visible tip of `population` into `framebuffer`.

        Bytes past width * height * 4 are never touched. Returns the number
        of pixels written.
        """
        pixels = as_pixel_buffer(framebuffer, width, height)[: width * height]
        idx = self.pixel_indices(population.positions(), width, height)
        if len(idx):
            pixels[idx] = color_for_generation(self.palette, generation)
        return len(idx)


def project(point, config):
    return Projector(config).project(point)


def pixel_to_virtual(pixel, config):
    return Projector(config).pixel_to_virtual(pixel)
