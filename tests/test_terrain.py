"""Tests for the terrain session model."""

import numpy as np
import pytest

from py_terrain.config.viewer_settings import (
    DEFAULT_TERRAIN_COLOR,
    DEFAULT_WATER_COLOR,
    WHITE,
    TerrainTexture,
    WaterTexture,
)
from py_terrain.core.heightmap_generator import InvalidParameterError
from py_terrain.core.terrain import Terrain, TerrainParameters
from conftest import ConstantSource


class InterruptingSource(ConstantSource):
    """Runs a callback on its first draw, like a request arriving mid-build."""

    def __init__(self, on_first_draw):
        super().__init__(0.0)
        self.on_first_draw = on_first_draw

    def uniform(self, low, high):
        if not self.calls:
            self.on_first_draw()
        return super().uniform(low, high)


@pytest.fixture
def terrain():
    return Terrain(parameters=TerrainParameters(detail_exponent=2, max_height=10.0, roughness=4.0))


class TestTerrainGeneration:
    """Test generation and regeneration."""

    def test_defaults(self):
        t = Terrain()

        assert t.parameters == TerrainParameters(8, 0.0, 30.0)
        assert t.state is None
        assert t.surface.color == DEFAULT_TERRAIN_COLOR
        assert t.surface.wireframe is True
        assert t.water.color == DEFAULT_WATER_COLOR
        assert t.water.opacity == 0.75

    def test_generate_builds_grid_and_mesh(self, terrain):
        state = terrain.generate(rng=ConstantSource(0.0))

        assert terrain.state is state
        assert state.generation == 1
        assert state.grid.size == 5
        assert state.mesh.vertex_count == 25
        assert np.all(state.grid.values == 0.0)

    def test_regeneration_creates_new_state(self, terrain):
        first = terrain.generate(seed="a")
        snapshot = first.grid.values.copy()
        second = terrain.generate(seed="b")

        assert second is not first
        assert second.generation == first.generation + 1
        assert terrain.state is second
        np.testing.assert_array_equal(first.grid.values, snapshot)

    def test_seeded_generation_repeats(self, terrain):
        first = terrain.generate(seed="same")
        second = terrain.generate(seed="same")

        assert first.seed == "same"
        np.testing.assert_array_equal(first.grid.values, second.grid.values)

    def test_update_parameters(self, terrain):
        state = terrain.update_parameters(detail_exponent=3, roughness=0.0)

        assert state.grid.size == 9
        assert terrain.parameters.detail_exponent == 3
        assert terrain.parameters.max_height == 10.0
        assert terrain.parameters.roughness == 0.0

    def test_invalid_update_keeps_parameters(self, terrain):
        with pytest.raises(InvalidParameterError):
            terrain.update_parameters(roughness=-1.0)

        assert terrain.parameters.roughness == 4.0

    def test_invalid_parameters(self):
        with pytest.raises(InvalidParameterError):
            TerrainParameters(detail_exponent=-1)


class TestLastRequestWins:
    """Test that superseded results are discarded."""

    def test_out_of_order_results(self, terrain):
        older = terrain.request_generation()
        newer = terrain.request_generation()

        newer_state = terrain.build(newer, terrain.parameters, seed="new")
        older_state = terrain.build(older, terrain.parameters, seed="old")

        assert terrain.accept(newer_state) is True
        assert terrain.accept(older_state) is False
        assert terrain.state is newer_state

    def test_build_does_not_change_current_state(self, terrain):
        current = terrain.generate()
        terrain.build(terrain.request_generation(), terrain.parameters)

        assert terrain.state is current

    def test_regenerate_superseded_mid_build(self, terrain):
        current = terrain.generate(rng=ConstantSource(0.0))
        newer = []
        source = InterruptingSource(lambda: newer.append(terrain.request_generation()))

        state = terrain.regenerate(TerrainParameters(3, 1.0, 1.0), rng=source)

        assert newer == [state.generation + 1]
        assert terrain.state is current
        assert terrain.parameters == TerrainParameters(2, 10.0, 4.0)

    def test_update_parameters_superseded_keeps_parameters(self, terrain):
        source = InterruptingSource(terrain.request_generation)

        terrain.update_parameters(detail_exponent=3, rng=source)

        assert terrain.state is None
        assert terrain.parameters.detail_exponent == 2


class TestAppearance:
    """Test surface and water appearance changes."""

    def test_texture_resets_tint(self, terrain):
        terrain.apply_texture("terrain", "rock")

        assert terrain.surface.texture == TerrainTexture.ROCK
        assert terrain.surface.color == WHITE

    def test_water_texture(self, terrain):
        terrain.apply_texture("water", WaterTexture.WATER)

        assert terrain.water.texture == WaterTexture.WATER
        assert terrain.water.color == WHITE

    def test_reset_colors(self, terrain):
        terrain.set_terrain_color("#102030")
        terrain.set_water_color(0x405060)
        assert terrain.surface.color == 0x102030
        assert terrain.water.color == 0x405060

        terrain.reset_terrain_color()
        terrain.reset_water_color()

        assert terrain.surface.color == DEFAULT_TERRAIN_COLOR
        assert terrain.water.color == DEFAULT_WATER_COLOR

    def test_unknown_texture(self, terrain):
        with pytest.raises(ValueError):
            terrain.apply_texture("terrain", "water")
        with pytest.raises(ValueError):
            terrain.apply_texture("sky", "none")

    def test_invalid_color(self, terrain):
        with pytest.raises(ValueError):
            terrain.set_terrain_color("#gggggg")
        with pytest.raises(ValueError):
            terrain.set_water_color(0x1000000)
