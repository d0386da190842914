"""
HomeHub household management package.

The package tracks pantry inventory, derives shopping lists from low-stock items and
manages recipes, including AI-assisted recipe suggestions built from available inventory.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
