"""
coworkbooking - booking previews, cost evaluation and tiered pricing for coworking spaces.
"""

__version__ = "0.1.0"
