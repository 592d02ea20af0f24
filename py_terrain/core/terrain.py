"""
Terrain session model.

Holds what a viewer needs to show one terrain: the generation parameters,
the latest generated heightmap and mesh, and the appearance of the terrain
surface and the water plane. Rendering itself happens elsewhere; this module
only keeps the state consistent.
"""

import threading
from dataclasses import dataclass, field, replace
from typing import Optional, Union

import structlog

from ..config.viewer_settings import (
    DEFAULT_TERRAIN_COLOR,
    DEFAULT_WATER_COLOR,
    WHITE,
    TerrainTexture,
    WaterTexture,
    parse_color,
)
from ..utils.random import RandomSource, create_random_source
from .heightmap_generator import HeightGrid, generate, validate_parameters
from .terrain_mesh import DEFAULT_PLANE_SIZE, TerrainMesh, build_terrain_mesh

logger = structlog.get_logger()


@dataclass(frozen=True)
class TerrainParameters:
    """Inputs of the diamond-square generator."""

    detail_exponent: int = 8
    max_height: float = 0.0
    roughness: float = 30.0

    def __post_init__(self):
        validate_parameters(self.detail_exponent, self.max_height, self.roughness)


@dataclass
class TerrainSurface:
    """Appearance of the terrain mesh."""

    color: int = DEFAULT_TERRAIN_COLOR
    default_color: int = DEFAULT_TERRAIN_COLOR
    texture: TerrainTexture = TerrainTexture.NONE
    wireframe: bool = True


@dataclass
class WaterSurface:
    """Appearance and placement of the water plane."""

    color: int = DEFAULT_WATER_COLOR
    default_color: int = DEFAULT_WATER_COLOR
    texture: WaterTexture = WaterTexture.NONE
    level: float = 0.0
    opacity: float = 0.75


@dataclass(frozen=True, eq=False)
class TerrainState:
    """One generated terrain. Never modified after creation."""

    generation: int
    parameters: TerrainParameters
    grid: HeightGrid
    mesh: TerrainMesh
    seed: Optional[str] = None


@dataclass
class Terrain:
    """
    A terrain and its display settings.

    Every generation request gets a generation number. Results are built
    outside the lock and may finish out of order; ``accept`` keeps only the
    result of the most recent request, and only an accepted result changes
    ``parameters`` and ``state``.
    """

    parameters: TerrainParameters = field(default_factory=TerrainParameters)
    surface: TerrainSurface = field(default_factory=TerrainSurface)
    water: WaterSurface = field(default_factory=WaterSurface)
    plane_size: float = DEFAULT_PLANE_SIZE
    state: Optional[TerrainState] = field(default=None, init=False)
    _requested: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def request_generation(self) -> int:
        """Reserve the next generation number."""
        with self._lock:
            self._requested += 1
            return self._requested

    def build(
        self,
        generation: int,
        parameters: TerrainParameters,
        rng: Optional[RandomSource] = None,
        seed: Optional[str] = None,
    ) -> TerrainState:
        """Generate a heightmap and mesh without touching the current state."""
        if rng is None:
            rng = create_random_source(seed)
        grid = generate(
            parameters.detail_exponent, parameters.max_height, parameters.roughness, rng
        )
        mesh = build_terrain_mesh(grid, self.plane_size)
        return TerrainState(
            generation=generation, parameters=parameters, grid=grid, mesh=mesh, seed=seed
        )

    def accept(self, state: TerrainState) -> bool:
        """
        Make ``state`` and its parameters current unless a newer generation
        was requested.

        Returns:
            True if the state was accepted
        """
        with self._lock:
            if state.generation < self._requested:
                logger.info(
                    "Discarding superseded terrain",
                    generation=state.generation,
                    latest=self._requested,
                )
                return False
            self.state = state
            self.parameters = state.parameters
            return True

    def regenerate(
        self,
        parameters: TerrainParameters,
        rng: Optional[RandomSource] = None,
        seed: Optional[str] = None,
    ) -> TerrainState:
        """
        Request, build and accept a terrain for ``parameters``.

        The returned state is always the one built by this call; check
        ``state.generation`` against ``self.state`` to see whether it won.
        """
        generation = self.request_generation()
        state = self.build(generation, parameters, rng=rng, seed=seed)
        if self.accept(state):
            logger.info(
                "Terrain generated",
                generation=generation,
                size=state.grid.size,
                roughness=parameters.roughness,
                max_height=parameters.max_height,
            )
        return state

    def generate(
        self, rng: Optional[RandomSource] = None, seed: Optional[str] = None
    ) -> TerrainState:
        """Regenerate the terrain from the current parameters."""
        return self.regenerate(self.parameters, rng=rng, seed=seed)

    def merged_parameters(
        self,
        detail_exponent: Optional[int] = None,
        max_height: Optional[float] = None,
        roughness: Optional[float] = None,
    ) -> TerrainParameters:
        """Current parameters with the given fields replaced."""
        changes = {
            name: value
            for name, value in (
                ("detail_exponent", detail_exponent),
                ("max_height", max_height),
                ("roughness", roughness),
            )
            if value is not None
        }
        return replace(self.parameters, **changes)

    def update_parameters(
        self,
        detail_exponent: Optional[int] = None,
        max_height: Optional[float] = None,
        roughness: Optional[float] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[str] = None,
    ) -> TerrainState:
        """Change generation parameters and regenerate."""
        parameters = self.merged_parameters(detail_exponent, max_height, roughness)
        return self.regenerate(parameters, rng=rng, seed=seed)

    def apply_texture(self, target: str, name: Union[str, TerrainTexture, WaterTexture]) -> None:
        """
        Select a texture for the terrain or the water plane.

        Choosing a texture resets the tint to white so the texture shows
        with its own colors.
        """
        if target == "terrain":
            self.surface.texture = TerrainTexture(name)
            self.surface.color = WHITE
        elif target == "water":
            self.water.texture = WaterTexture(name)
            self.water.color = WHITE
        else:
            raise ValueError(f"Unknown texture target: {target!r}")

    def set_terrain_color(self, color: Union[int, str]) -> None:
        self.surface.color = parse_color(color)

    def set_water_color(self, color: Union[int, str]) -> None:
        self.water.color = parse_color(color)

    def reset_terrain_color(self) -> None:
        self.surface.color = self.surface.default_color

    def reset_water_color(self) -> None:
        self.water.color = self.water.default_color
