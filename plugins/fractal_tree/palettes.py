"""
Generation Palettes for the Fractal Tree Rasterizer

Each palette is a (13, 4) uint8 RGBA table. A generation paints with
entry `generation % 13`, so colours cycle as the tree subdivides.
"""

import numpy as np

PALETTE_SIZE = 13


def _interpolate_colors(stops, n=PALETTE_SIZE):
    """
    Sample n opaque RGBA colours evenly along smoothstep-blended color stops.

    Args:
        stops: List of (position, (r, g, b)), positions ascending in [0, 1]
        n: Number of palette entries
    """
    positions = np.array([p for p, _ in stops], dtype=np.float64)
    colors = np.array([c for _, c in stops], dtype=np.float64)

    t = np.linspace(0.0, 1.0, n)
    seg = np.clip(np.searchsorted(positions, t, side="right") - 1, 0, len(stops) - 2)
    span = positions[seg + 1] - positions[seg]
    frac = np.divide(t - positions[seg], span, out=np.zeros(n), where=span > 0)
    frac = frac * frac * (3 - 2 * frac)

    lut = np.full((n, 4), 255, dtype=np.uint8)
    rgb = colors[seg] + frac[:, None] * (colors[seg + 1] - colors[seg])
    lut[:, :3] = rgb.astype(np.uint8)
    return lut


# --- Palette Definitions ---

def carmine():
    """Carmine reds with a pink highlight - the default growth colours."""
    carmin = (140, 4, 40, 255)
    dark = (115, 0, 13, 255)
    rare_red = (222, 87, 123, 255)
    pink = (230, 119, 184, 255)
    return np.array([
        carmin, carmin, carmin, dark,
        rare_red, carmin, rare_red, rare_red,
        carmin, dark, carmin, rare_red,
        pink,
    ], dtype=np.uint8)


def moss():
    """Dark earth to vibrant green - outer generations glow."""
    return _interpolate_colors([
        (0.00, (30, 45, 15)),
        (0.40, (50, 120, 30)),
        (0.75, (100, 220, 80)),
        (1.00, (190, 255, 160)),
    ])


def ocean():
    """Deep blue through cyan to white."""
    return _interpolate_colors([
        (0.00, (10, 30, 110)),
        (0.50, (20, 120, 200)),
        (0.80, (60, 200, 230)),
        (1.00, (210, 250, 255)),
    ])


def fire():
    """Red through orange to yellow-white."""
    return _interpolate_colors([
        (0.00, (150, 20, 0)),
        (0.40, (230, 80, 10)),
        (0.75, (255, 190, 50)),
        (1.00, (255, 255, 200)),
    ])


PALETTES = {
    "carmine": carmine,
    "moss": moss,
    "ocean": ocean,
    "fire": fire,
}

PALETTE_ORDER = list(PALETTES.keys())


def get_palette(name):
    """Get a palette (13, 4) uint8 RGBA array by name."""
    return PALETTES[name]()


def color_for_generation(palette, generation):
    return palette[generation % len(palette)]
