"""
autosnake - Snake with an A* autopilot.
"""

__version__ = "1.0.0"
