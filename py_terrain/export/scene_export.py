"""
Export of generated terrain.

Scenes are written as binary glTF through trimesh; the raw heightmap can be
exported as JSON or as a NumPy ``.npy`` file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import structlog
import trimesh
from trimesh.transformations import rotation_matrix
from trimesh.visual.material import PBRMaterial

from ..config.viewer_settings import TEXTURE_REPEAT
from ..core.heightmap_generator import HeightGrid
from ..core.terrain import Terrain, TerrainSurface, WaterSurface
from ..core.terrain_mesh import TerrainMesh

logger = structlog.get_logger()

# Heights are stored along +z; glTF scenes are y-up
Z_UP_TO_Y_UP = rotation_matrix(-np.pi / 2, [1, 0, 0])


def _rgba(color: int, alpha: float = 1.0) -> list:
    return [
        ((color >> 16) & 0xFF) / 255.0,
        ((color >> 8) & 0xFF) / 255.0,
        (color & 0xFF) / 255.0,
        float(alpha),
    ]


def terrain_material(surface: TerrainSurface) -> PBRMaterial:
    return PBRMaterial(
        name=f"terrain_{surface.texture.value}",
        baseColorFactor=_rgba(surface.color),
        metallicFactor=0.0,
        roughnessFactor=0.9,
        doubleSided=True,
    )


def water_material(water: WaterSurface) -> PBRMaterial:
    return PBRMaterial(
        name=f"water_{water.texture.value}",
        baseColorFactor=_rgba(water.color, water.opacity),
        metallicFactor=0.0,
        roughnessFactor=0.2,
        alphaMode="BLEND",
        doubleSided=True,
    )


def texture_repeat(texture) -> float:
    """How often ``texture`` tiles across the plane; 1 when untextured."""
    return float(TEXTURE_REPEAT.get(texture, 1))


def terrain_to_trimesh(mesh: TerrainMesh, surface: TerrainSurface) -> trimesh.Trimesh:
    """Convert a TerrainMesh into a trimesh object carrying its material."""
    return trimesh.Trimesh(
        vertices=mesh.vertices,
        faces=mesh.faces,
        vertex_normals=mesh.normals,
        visual=trimesh.visual.TextureVisuals(
            uv=mesh.uvs * texture_repeat(surface.texture),
            material=terrain_material(surface),
        ),
        process=False,
    )


def water_plane(plane_size: float, water: WaterSurface) -> trimesh.Trimesh:
    """Square water plane at the water level, matching the terrain footprint."""
    half = plane_size / 2.0
    vertices = np.array(
        [
            [-half, half, water.level],
            [half, half, water.level],
            [-half, -half, water.level],
            [half, -half, water.level],
        ]
    )
    faces = np.array([[0, 2, 1], [2, 3, 1]])
    uvs = np.array([[0.0, 1.0], [1.0, 1.0], [0.0, 0.0], [1.0, 0.0]]) * texture_repeat(water.texture)
    return trimesh.Trimesh(
        vertices=vertices,
        faces=faces,
        visual=trimesh.visual.TextureVisuals(uv=uvs, material=water_material(water)),
        process=False,
    )


def build_scene(terrain: Terrain) -> trimesh.Scene:
    """
    Assemble the terrain mesh and water plane into a y-up scene.

    Raises:
        ValueError: If the terrain has not been generated yet
    """
    if terrain.state is None:
        raise ValueError("Terrain has not been generated")

    scene = trimesh.Scene()
    scene.add_geometry(
        terrain_to_trimesh(terrain.state.mesh, terrain.surface),
        node_name="terrain",
        geom_name="terrain",
        transform=Z_UP_TO_Y_UP,
    )
    scene.add_geometry(
        water_plane(terrain.plane_size, terrain.water),
        node_name="water",
        geom_name="water",
        transform=Z_UP_TO_Y_UP,
    )
    return scene


def export_scene_glb(terrain: Terrain) -> bytes:
    """Serialize the terrain scene to binary glTF."""
    scene = build_scene(terrain)
    data = scene.export(file_type="glb")
    logger.info(
        "Scene exported",
        generation=terrain.state.generation,
        vertices=terrain.state.mesh.vertex_count,
        bytes=len(data),
    )
    return data


def export_heightmap_json(grid: HeightGrid) -> Dict[str, Any]:
    """Heightmap as a JSON-serializable dict with row-major values."""
    return {
        "detail_exponent": grid.detail_exponent,
        "size": grid.size,
        "values": grid.to_list(),
    }


def save_heightmap_npy(grid: HeightGrid, path: Union[str, Path]) -> Path:
    """Save the heightmap as a ``size x size`` array."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.save(path, grid.as_matrix())
    logger.info("Heightmap saved", path=str(path), size=grid.size)
    return path


def load_heightmap_npy(path: Union[str, Path]) -> HeightGrid:
    """Load a heightmap written by ``save_heightmap_npy``."""
    matrix = np.load(Path(path))
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {matrix.shape}")
    side = matrix.shape[0] - 1
    if side < 1 or side & (side - 1):
        raise ValueError(f"Grid side {matrix.shape[0]} is not a power of two plus one")
    return HeightGrid(
        detail_exponent=side.bit_length() - 1,
        values=np.array(matrix, dtype=np.float64).reshape(-1),
    )
