"""
Configuration for the application and the map generator.
"""

from .config import Settings, settings
from .generator_settings import HemisphereMode, MapGeneratorSettings

__all__ = ["Settings", "settings", "HemisphereMode", "MapGeneratorSettings"]
