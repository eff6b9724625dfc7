"""
Fractal Tree - real-time branching growth rasterized into an RGBA framebuffer.
"""

from .config import GrowthConfig
from .engine import GrowthState, GenerationSchedule, advance, reset, branch
from .geometry import Direction, PixelPoint, Population, VirtualPoint
from .projector import Projector, project, pixel_to_virtual
from .simulator import GrowthSimulator

__all__ = [
    "GrowthConfig", "GrowthState", "GenerationSchedule", "advance", "reset",
    "branch", "Direction", "PixelPoint", "Population", "VirtualPoint", "Projector",
    "project", "pixel_to_virtual", "GrowthSimulator",
]
