"""
Procedural hex map generation and grid search.
"""

__version__ = "0.1.0"
