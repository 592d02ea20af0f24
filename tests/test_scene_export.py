"""Tests for scene and heightmap export."""

import numpy as np
import pytest

from py_terrain.core.heightmap_generator import HeightGrid
from py_terrain.core.terrain import Terrain, TerrainParameters
from py_terrain.export.scene_export import (
    build_scene,
    export_heightmap_json,
    export_scene_glb,
    load_heightmap_npy,
    save_heightmap_npy,
)


@pytest.fixture
def terrain():
    t = Terrain(parameters=TerrainParameters(detail_exponent=3, max_height=10.0, roughness=5.0))
    t.generate(seed="export")
    return t


class TestSceneExport:
    """Test glTF scene export."""

    def test_scene_contents(self, terrain):
        scene = build_scene(terrain)

        assert set(scene.geometry.keys()) == {"terrain", "water"}
        assert len(scene.geometry["terrain"].vertices) == 81
        assert len(scene.geometry["water"].faces) == 2

    def test_heights_become_y_up(self, terrain):
        """After export the terrain heights lie along +y."""
        scene = build_scene(terrain)
        transform, geom_name = scene.graph["terrain"]
        vertices = scene.geometry[geom_name].vertices
        homogeneous = np.column_stack([vertices, np.ones(len(vertices))])
        world = homogeneous @ transform.T

        np.testing.assert_allclose(world[:, 1], terrain.state.grid.values, atol=1e-9)

    @pytest.mark.parametrize(
        "target, texture, geometry, repeat",
        [
            ("terrain", "rock", "terrain", 25.0),
            ("terrain", "none", "terrain", 1.0),
            ("water", "water", "water", 10.0),
            ("water", "none", "water", 1.0),
        ],
    )
    def test_texture_repeat_scales_uvs(self, terrain, target, texture, geometry, repeat):
        terrain.apply_texture(target, texture)
        scene = build_scene(terrain)
        uv = scene.geometry[geometry].visual.uv

        assert uv.min() == pytest.approx(0.0)
        assert uv.max() == pytest.approx(repeat)

    def test_glb_bytes(self, terrain):
        data = export_scene_glb(terrain)

        assert isinstance(data, bytes)
        assert data[:4] == b"glTF"

    def test_requires_generated_terrain(self):
        with pytest.raises(ValueError):
            export_scene_glb(Terrain())


class TestHeightmapExport:
    """Test raw heightmap export."""

    def test_json(self):
        grid = HeightGrid(detail_exponent=1, values=np.arange(9, dtype=np.float64))
        data = export_heightmap_json(grid)

        assert data == {
            "detail_exponent": 1,
            "size": 3,
            "values": [0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0],
        }

    def test_npy_file(self, tmp_path, terrain):
        grid = terrain.state.grid
        path = save_heightmap_npy(grid, tmp_path / "maps" / "terrain.npy")
        loaded = load_heightmap_npy(path)

        assert loaded.detail_exponent == 3
        np.testing.assert_array_equal(loaded.values, grid.values)

    @pytest.mark.parametrize("shape", [(3, 4), (4, 4), (1, 1)])
    def test_npy_rejects_bad_shapes(self, tmp_path, shape):
        path = tmp_path / "bad.npy"
        np.save(path, np.zeros(shape))

        with pytest.raises(ValueError):
            load_heightmap_npy(path)
