"""
Configuration for terrain generation and the viewer service.
"""

from .config import Settings, settings
from .viewer_settings import (
    TerrainTexture,
    WaterTexture,
    GenerationOptions,
    GenerationUpdate,
    SurfaceOptions,
    WaterOptions,
    TEXTURE_REPEAT,
    parameter_limit_errors,
)

__all__ = ['Settings', 'settings', 'TerrainTexture', 'WaterTexture', 'GenerationOptions',
           'GenerationUpdate', 'SurfaceOptions', 'WaterOptions', 'TEXTURE_REPEAT',
           'parameter_limit_errors']
