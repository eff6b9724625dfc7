"""
Fractal Tree Viewer - Entry Point

Usage:
    python -m fractal_tree [preset] [--window WxH] [--snap N]
                           [--legacy-cull] [--verbose]

Examples:
    python -m fractal_tree
    python -m fractal_tree binary
    python -m fractal_tree bloom --window 1280x720
    python -m fractal_tree spiral --snap 500

Presets:
    spiral      - one turning rule
    binary      - left/right turns (H-tree)
    trident     - turns plus straight trunk (default)
    bloom       - all four rules
    legacy      - trident with inverted window culling

Use --list to see all available presets.
"""

import os
import sys

from .presets import DEFAULT_PRESET, PRESET_ORDER, list_presets


def snap(preset, width, height, frames, legacy_cull=False, verbose=False):
    """Headless mode: run N frames, save a PNG, exit."""
    from .simulator import GrowthSimulator

    screenshots_dir = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "screenshots"
    )
    os.makedirs(screenshots_dir, exist_ok=True)

    presets_to_snap = [preset] if preset != "all" else PRESET_ORDER

    for pkey in presets_to_snap:
        sim = GrowthSimulator(width, height, preset=pkey, verbose=verbose, backoff=0.0)
        if legacy_cull:
            sim.apply_config(sim.config.replace(cull_mode="legacy"))

        print(f"  {pkey}: running {frames} frames...", end="", flush=True)
        done = sim.run(frames)
        path = os.path.join(screenshots_dir, f"tree_{pkey}.png")
        latest = os.path.join(screenshots_dir, "latest.png")

        try:
            from PIL import Image
            sim.save_png(path)
            sim.save_png(latest)
        except ImportError:
            # Fallback: save with pygame
            import pygame
            pygame.init()
            surface = pygame.surfarray.make_surface(sim.render_rgb().swapaxes(0, 1))
            pygame.image.save(surface, path)
            pygame.image.save(surface, latest)
            pygame.quit()
        print(f" {done} frames, generation {sim.stats['generation']}, saved: {path}")


def main():
    preset = DEFAULT_PRESET
    win_w, win_h = 1920, 1080
    snap_frames = 0
    legacy_cull = False
    verbose = False

    args = sys.argv[1:]
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_frames = int(args[i + 1])
            i += 2
        elif arg == "--legacy-cull":
            legacy_cull = True
            i += 1
        elif arg == "--verbose":
            verbose = True
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:14s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in PRESET_ORDER or arg == "all":
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print(f"Use --list to see available presets")
            return

    if snap_frames > 0:
        print(f"Headless snap mode: {preset} @ {win_w}x{win_h}, {snap_frames} frames")
        snap(preset, win_w, win_h, snap_frames, legacy_cull=legacy_cull, verbose=verbose)
        return

    if preset == "all":
        preset = DEFAULT_PRESET

    from .viewer import Viewer

    print(f"Starting Fractal Tree Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(
        width=win_w,
        height=win_h,
        start_preset=preset,
        verbose=verbose,
        legacy_cull=legacy_cull,
    )
    viewer.run()


if __name__ == "__main__":
    main()
