"""
Core terrain generation functionality.
"""

from .alea_prng import AleaPRNG
from .heightmap_generator import HeightGrid, InvalidParameterError, generate, grid_size
from .terrain_mesh import TerrainMesh, build_terrain_mesh
from .terrain_statistics import TerrainStatistics, compute_statistics
from .terrain import Terrain, TerrainParameters, TerrainState, TerrainSurface, WaterSurface

__all__ = ['AleaPRNG', 'HeightGrid', 'InvalidParameterError', 'generate', 'grid_size',
           'TerrainMesh', 'build_terrain_mesh', 'TerrainStatistics', 'compute_statistics',
           'Terrain', 'TerrainParameters', 'TerrainState', 'TerrainSurface', 'WaterSurface']
