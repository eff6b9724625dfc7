"""
Fractal Tree Presets

Each preset names a branch rule count plus view settings known to give a
readable picture at the reference 1920x1080 canvas. Keys not present in a
preset fall back to GrowthConfig defaults.
"""

PRESETS = {
    "spiral": {
        "name": "Spiral",
        "description": "One turning rule - a single tip winding inwards",
        "branch_rule_count": 1,
        "ticks_per_frame": 20,
        "palette": "ocean",
    },
    "binary": {
        "name": "H-Tree",
        "description": "Left and right turns - the classic binary H-tree",
        "branch_rule_count": 2,
        "ticks_per_frame": 10,
        "palette": "carmine",
    },
    "trident": {
        "name": "Trident",
        "description": "Both turns plus a straight trunk at every node",
        "branch_rule_count": 3,
        "ticks_per_frame": 10,
        "palette": "carmine",
    },
    "bloom": {
        "name": "Bloom",
        "description": "All four rules - dense self-overlapping fans",
        "branch_rule_count": 4,
        "ticks_per_frame": 6,
        "palette": "fire",
    },
    "legacy": {
        "name": "Legacy Cull",
        "description": "Trident with inverted window culling",
        "branch_rule_count": 3,
        "ticks_per_frame": 10,
        "palette": "carmine",
        "cull_mode": "legacy",
    },
}

PRESET_ORDER = ["spiral", "binary", "trident", "bloom", "legacy"]

DEFAULT_PRESET = "trident"

# Preset keys that map onto GrowthConfig fields.
CONFIG_KEYS = ("branch_rule_count", "ticks_per_frame", "zoom_scale",
               "palette", "cull_mode")


def get_preset(key):
    """Get a preset dict by key, or None."""
    return PRESETS.get(key)


def preset_config_params(key):
    """GrowthConfig keyword arguments defined by a preset."""
    preset = PRESETS[key]
    return {k: preset[k] for k in CONFIG_KEYS if k in preset}


def list_presets():
    """Return list of (key, name, description) tuples in display order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"]) for k in PRESET_ORDER]
