"""Mesh construction from heightmaps."""

from dataclasses import dataclass

import numpy as np

from .heightmap_generator import HeightGrid

DEFAULT_PLANE_SIZE = 100.0


@dataclass(frozen=True, eq=False)
class TerrainMesh:
    """
    Triangle mesh of a heightmap laid over a square plane.

    Vertices follow the grid's row-major order: vertex ``k`` carries the
    height ``grid.values[k]`` as its z coordinate.
    """

    vertices: np.ndarray  # (n, 3) float64 x, y, z
    faces: np.ndarray     # (m, 3) int64 vertex indices, counter-clockwise from +z
    normals: np.ndarray   # (n, 3) float64 unit vertex normals
    uvs: np.ndarray       # (n, 2) float64 texture coordinates
    plane_size: float

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)


def plane_vertices(size: int, plane_size: float) -> np.ndarray:
    """
    XY positions of a ``size x size`` vertex plane centred on the origin.

    Row 0 is the top edge (``y = +plane_size / 2``); columns run from
    ``-plane_size / 2`` to ``+plane_size / 2``.
    """
    half = plane_size / 2.0
    xs = np.linspace(-half, half, size)
    ys = np.linspace(half, -half, size)
    xx, yy = np.meshgrid(xs, ys)
    return np.stack([xx.ravel(), yy.ravel()], axis=1)


def grid_faces(size: int) -> np.ndarray:
    """Two triangles for every quad of a ``size x size`` vertex grid."""
    i, j = np.mgrid[0 : size - 1, 0 : size - 1]
    top_left = (i * size + j).ravel()
    top_right = top_left + 1
    bottom_left = top_left + size
    bottom_right = bottom_left + 1

    # Row index grows towards -y, so this winding faces +z
    first = np.stack([top_left, bottom_left, top_right], axis=1)
    second = np.stack([bottom_left, bottom_right, top_right], axis=1)
    return np.vstack([first, second]).astype(np.int64)


def vertex_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Area-weighted vertex normals from face cross products."""
    normals = np.zeros_like(vertices)
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    face_normals = np.cross(v1 - v0, v2 - v0)
    for corner in range(3):
        np.add.at(normals, faces[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    lengths[lengths == 0] = 1.0
    return normals / lengths


def build_terrain_mesh(grid: HeightGrid, plane_size: float = DEFAULT_PLANE_SIZE) -> TerrainMesh:
    """
    Map a heightmap onto a regular planar mesh.

    Args:
        grid: Heightmap to convert
        plane_size: Side length of the plane in world units

    Returns:
        TerrainMesh with ``grid.size ** 2`` vertices and
        ``2 * (grid.size - 1) ** 2`` triangles
    """
    if plane_size <= 0:
        raise ValueError(f"plane_size must be positive, got {plane_size}")

    size = grid.size
    xy = plane_vertices(size, plane_size)
    vertices = np.column_stack([xy, np.asarray(grid.values, dtype=np.float64)])
    faces = grid_faces(size)

    uvs = np.empty((size * size, 2))
    uvs[:, 0] = xy[:, 0] / plane_size + 0.5
    uvs[:, 1] = xy[:, 1] / plane_size + 0.5

    return TerrainMesh(
        vertices=vertices,
        faces=faces,
        normals=vertex_normals(vertices, faces),
        uvs=uvs,
        plane_size=float(plane_size),
    )
