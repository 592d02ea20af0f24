"""
Terrain export: binary glTF scenes and raw heightmaps.
"""

from .scene_export import (
    build_scene,
    export_scene_glb,
    export_heightmap_json,
    save_heightmap_npy,
    load_heightmap_npy,
)

__all__ = ['build_scene', 'export_scene_glb', 'export_heightmap_json',
           'save_heightmap_npy', 'load_heightmap_npy']
