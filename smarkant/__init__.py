"""
smarkant - voice control for a height-adjustable desk
"""

__version__ = "0.1.0"
__logo__ = "🪑"
