"""FastAPI main application."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel
from typing import List, Optional
import structlog

from ..config import settings
from ..config.viewer_settings import (
    GenerationOptions,
    GenerationUpdate,
    SurfaceOptions,
    WaterOptions,
    format_color,
    parameter_limit_errors,
)
from ..core.heightmap_generator import InvalidParameterError, generate
from ..core.terrain import Terrain, TerrainParameters
from ..core.terrain_statistics import compute_statistics
from ..export.scene_export import export_heightmap_json, export_scene_glb
from ..utils.logging import configure_logging
from ..utils.random import create_random_source
from .. import __version__

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Terrain Viewer API",
    description="Diamond-square terrain generation and export",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Terrain shown by the viewer; regenerated on request
terrain = Terrain(
    parameters=TerrainParameters(
        detail_exponent=settings.default_detail_exponent,
        max_height=settings.default_max_height,
        roughness=settings.default_roughness,
    ),
    plane_size=settings.plane_size,
)


# Request/Response models
class HeightmapResponse(BaseModel):
    """Generated heightmap in row-major order."""

    detail_exponent: int
    size: int
    seed: Optional[str] = None
    values: List[float]


class SurfaceInfo(BaseModel):
    color: str
    default_color: str
    texture: str
    wireframe: bool


class WaterInfo(BaseModel):
    color: str
    default_color: str
    texture: str
    level: float
    opacity: float


class TerrainInfo(BaseModel):
    """Current terrain parameters and appearance."""

    generation: int
    detail_exponent: int
    max_height: float
    roughness: float
    size: int
    seed: Optional[str] = None
    surface: SurfaceInfo
    water: WaterInfo


class StatisticsResponse(BaseModel):
    size: int
    cell_count: int
    min_height: float
    max_height: float
    mean_height: float
    std_height: float
    water_level: float
    submerged_cells: int
    submerged_fraction: float
    relief: float


def check_limits(detail_exponent: int, max_height: float, roughness: float) -> None:
    errors = parameter_limit_errors(detail_exponent, max_height, roughness, settings)
    if errors:
        logger.error("Generation request out of limits", errors=errors)
        raise HTTPException(status_code=400, detail="; ".join(errors))


def current_terrain() -> Terrain:
    """Return the viewer terrain, generating it on first use."""
    if terrain.state is None:
        terrain.generate()
    return terrain


def terrain_info(t: Terrain) -> TerrainInfo:
    state = t.state
    return TerrainInfo(
        generation=state.generation,
        detail_exponent=state.parameters.detail_exponent,
        max_height=state.parameters.max_height,
        roughness=state.parameters.roughness,
        size=state.grid.size,
        seed=state.seed,
        surface=SurfaceInfo(
            color=format_color(t.surface.color),
            default_color=format_color(t.surface.default_color),
            texture=t.surface.texture.value,
            wireframe=t.surface.wireframe,
        ),
        water=WaterInfo(
            color=format_color(t.water.color),
            default_color=format_color(t.water.default_color),
            texture=t.water.texture.value,
            level=t.water.level,
            opacity=t.water.opacity,
        ),
    )


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Generate the initial terrain on startup."""
    logger.info("Starting Terrain Viewer API")
    current_terrain()
    logger.info("API startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Terrain Viewer API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terrain Viewer API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/heightmap", response_model=HeightmapResponse)
def create_heightmap(request: GenerationOptions):
    """Generate a standalone heightmap without touching the viewer terrain."""
    logger.info("Heightmap requested", request=request.model_dump())
    check_limits(request.detail_exponent, request.max_height, request.roughness)

    try:
        grid = generate(
            request.detail_exponent,
            request.max_height,
            request.roughness,
            create_random_source(request.seed),
        )
    except InvalidParameterError as e:
        logger.error("Heightmap generation failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return HeightmapResponse(seed=request.seed, **export_heightmap_json(grid))


@app.get("/terrain", response_model=TerrainInfo)
def get_terrain():
    """Get the current terrain parameters and appearance."""
    return terrain_info(current_terrain())


@app.post("/terrain/generate", response_model=TerrainInfo)
def generate_terrain(request: GenerationUpdate):
    """
    Change some generation parameters and regenerate the terrain.

    Fields left out of the request keep their current values. Limits are
    checked on the merged parameters.
    """
    logger.info(
        "Terrain regeneration requested", request=request.model_dump(exclude_none=True)
    )

    try:
        parameters = terrain.merged_parameters(
            detail_exponent=request.detail_exponent,
            max_height=request.max_height,
            roughness=request.roughness,
        )
    except InvalidParameterError as e:
        logger.error("Terrain regeneration failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    check_limits(parameters.detail_exponent, parameters.max_height, parameters.roughness)
    terrain.regenerate(parameters, seed=request.seed)
    return terrain_info(current_terrain())


@app.post("/terrain/surface", response_model=TerrainInfo)
def update_surface(request: SurfaceOptions):
    """Change the terrain surface appearance."""
    t = current_terrain()
    if request.texture is not None:
        t.apply_texture("terrain", request.texture)
    if request.color is not None:
        t.set_terrain_color(request.color)
    if request.reset_color:
        t.reset_terrain_color()
    if request.wireframe is not None:
        t.surface.wireframe = request.wireframe
    return terrain_info(t)


@app.post("/terrain/water", response_model=TerrainInfo)
def update_water(request: WaterOptions):
    """Change the water plane."""
    t = current_terrain()
    if request.texture is not None:
        t.apply_texture("water", request.texture)
    if request.color is not None:
        t.set_water_color(request.color)
    if request.reset_color:
        t.reset_water_color()
    if request.level is not None:
        t.water.level = request.level
    if request.opacity is not None:
        t.water.opacity = request.opacity
    return terrain_info(t)


@app.get("/terrain/statistics", response_model=StatisticsResponse)
def get_statistics():
    """Elevation statistics of the current terrain relative to the water level."""
    t = current_terrain()
    stats = compute_statistics(t.state.grid, water_level=t.water.level)
    return StatisticsResponse(**stats.to_dict())


@app.get("/terrain/heightmap", response_model=HeightmapResponse)
def get_heightmap():
    """Heightmap of the current terrain."""
    t = current_terrain()
    return HeightmapResponse(seed=t.state.seed, **export_heightmap_json(t.state.grid))


@app.get("/terrain/download")
def download_scene():
    """Download the terrain and water plane as a binary glTF file."""
    t = current_terrain()
    try:
        data = export_scene_glb(t)
    except ValueError as e:
        logger.error("Scene export failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=data,
        media_type="model/gltf-binary",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"'
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
