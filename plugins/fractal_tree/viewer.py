"""
Interactive Pygame Viewer for the Fractal Tree

Draws the growing tree one framebuffer per display frame. Every pan, zoom
or branch-rule change throws the current tree away and regrows it from the
seed.

Controls:
  Arrows      Pan (hold)
  Z / X       Zoom in / out about the window centre
  T           Cycle branch rules 1 -> 2 -> 3 -> 4 -> 1
  A / S       More / fewer growth ticks per frame (hold)
  1-5         Select preset
  SPACE       Pause / Resume
  R           Regrow from the seed
  H           Toggle HUD overlay
  P           Save screenshot
  Q / ESC     Quit
"""

import os
import time
import numpy as np
import pygame

from .engine import RULE_LABELS
from .presets import PRESET_ORDER, get_preset
from .simulator import GrowthSimulator

HUD_BG = (0, 0, 0, 140)
HUD_TEXT = (210, 215, 225)


class Viewer:
    def __init__(self, width=1920, height=1080, start_preset="trident",
                 verbose=False, legacy_cull=False):
        self.canvas_w = width
        self.canvas_h = height
        self.running = True
        self.paused = False
        self.show_hud = True
        self.fps_history = []

        self.sim = GrowthSimulator(width, height, preset=start_preset,
                                   verbose=verbose, backoff=0.0)
        if legacy_cull:
            self.sim.apply_config(self.sim.config.replace(cull_mode="legacy"))

        self.hud_font = None

    @property
    def center(self):
        return (self.canvas_w / 2.0, self.canvas_h / 2.0)

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        stats = self.sim.stats
        preset = get_preset(self.sim.preset_key) if self.sim.preset_key else None
        label = preset["name"] if preset else "Custom"
        rules = ", ".join(RULE_LABELS[:stats["branch_rule_count"]])

        line = (f"{label}  |  Rules: {rules}  |  Gen: {stats['generation']}  |  "
                f"Tips: {stats['tips']:,}  |  Zoom: {stats['zoom_scale']:.2f}  |  "
                f"Ticks/frame: {stats['ticks_per_frame']}  |  FPS: {fps:.0f}")
        if stats["exhausted"]:
            line = "[DONE]  " + line
        if self.paused:
            line = "[PAUSED]  " + line

        padding = 6
        bg_height = 24
        bg_surface = pygame.Surface((self.canvas_w, bg_height), pygame.SRCALPHA)
        bg_surface.fill(HUD_BG)
        screen.blit(bg_surface, (0, 0))

        text_surface = self.hud_font.render(line, True, HUD_TEXT)
        screen.blit(text_surface, (padding + 4, padding))

    def _frame_surface(self):
        return pygame.surfarray.make_surface(self.sim.render_rgb().swapaxes(0, 1))

    def _save_screenshot(self):
        screenshots_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots"
        )
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        name = self.sim.preset_key or "custom"
        path = os.path.join(screenshots_dir, f"tree_{name}_{timestamp}.png")
        pygame.image.save(self._frame_surface(), path)
        print(f"Screenshot saved: {path}")

    def _handle_held_keys(self):
        """Arrow pans and speed changes repeat while the key is held."""
        keys = pygame.key.get_pressed()
        if keys[pygame.K_UP]:
            self.sim.pan_up()
        elif keys[pygame.K_DOWN]:
            self.sim.pan_down()
        elif keys[pygame.K_LEFT]:
            self.sim.pan_left()
        elif keys[pygame.K_RIGHT]:
            self.sim.pan_right()
        elif keys[pygame.K_a]:
            self.sim.faster()
        elif keys[pygame.K_s]:
            self.sim.slower()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_r:
            self.sim.reset()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_p:
            self._save_screenshot()

        elif key == pygame.K_z:
            self.sim.zoom_in(anchor=self.center)

        elif key == pygame.K_x:
            self.sim.zoom_out(anchor=self.center)

        elif key == pygame.K_t:
            self.sim.cycle_branches()

        # Preset selection (1-5)
        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self.sim.apply_preset(PRESET_ORDER[idx])

    def run(self):
        """Main viewer loop."""
        pygame.init()
        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h))
        pygame.display.set_caption("Fractal Tree")
        self.hud_font = pygame.font.SysFont("monospace", 14)
        clock = pygame.time.Clock()

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)

            self._handle_held_keys()

            # Exhausted trees idle on the clock tick below instead of spinning
            if not self.paused and not self.sim.exhausted:
                self.sim.step_frame()

            screen.blit(self._frame_surface(), (0, 0))

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()
