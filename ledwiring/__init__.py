"""
ledwiring: wiring-topology planning for LED video walls.

Main interface: plan_wall()
"""

__version__ = "0.1.0"

from .core.planner import WallPlan, plan_wall
from .core.selector import select_controller

__all__ = ["plan_wall", "WallPlan", "select_controller"]
