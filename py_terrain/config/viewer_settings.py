"""
Option models for the terrain viewer.

These describe what a parameter source (GUI, config file or API client) may
ask for: generation parameters, terrain surface appearance and the water
plane. Validation here covers value types and hard bounds; configurable
limits are checked against ``Settings`` by ``parameter_limit_errors``.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class TerrainTexture(str, Enum):
    """Textures available for the terrain surface."""

    NONE = "none"
    DIRT = "dirt"
    ROCK = "rock"
    GRASS = "grass"
    SNOW = "snow"


class WaterTexture(str, Enum):
    """Textures available for the water plane."""

    NONE = "none"
    WATER = "water"


# How many times each texture tiles across the plane
TEXTURE_REPEAT = {
    TerrainTexture.DIRT: 25,
    TerrainTexture.ROCK: 25,
    TerrainTexture.GRASS: 25,
    TerrainTexture.SNOW: 25,
    WaterTexture.WATER: 10,
}

DEFAULT_TERRAIN_COLOR = 0xF765B8
DEFAULT_WATER_COLOR = 0x27FDF5
WHITE = 0xFFFFFF


def parse_color(value: Union[int, str]) -> int:
    """
    Normalize a color to a 24-bit integer.

    Accepts integers and hex strings such as ``"#f765b8"`` or ``"0xf765b8"``.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("#"):
            text = text[1:]
        elif text.startswith("0x"):
            text = text[2:]
        try:
            value = int(text, 16)
        except ValueError:
            raise ValueError(f"Invalid color: {value!r}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid color: {value!r}")
    if not 0 <= value <= WHITE:
        raise ValueError(f"Color out of range: {value:#x}")
    return value


def format_color(value: int) -> str:
    return f"#{value:06x}"


class GenerationOptions(BaseModel):
    """Parameters for a heightmap generation request."""

    detail_exponent: int = Field(8, ge=0, description="Grid has 2**detail_exponent + 1 points per side")
    max_height: float = Field(0.0, ge=0, description="Upper bound for the random corner heights")
    roughness: float = Field(30.0, ge=0, description="Initial perturbation amplitude")
    seed: Optional[str] = Field(None, description="Seed for reproducible generation")

    def limit_errors(self, settings) -> List[str]:
        """Return messages for every configured limit this request exceeds."""
        return parameter_limit_errors(
            self.detail_exponent, self.max_height, self.roughness, settings
        )


class GenerationUpdate(BaseModel):
    """Partial parameter change for the viewer terrain; unset fields are kept."""

    detail_exponent: Optional[int] = Field(None, ge=0, description="Grid has 2**detail_exponent + 1 points per side")
    max_height: Optional[float] = Field(None, ge=0, description="Upper bound for the random corner heights")
    roughness: Optional[float] = Field(None, ge=0, description="Initial perturbation amplitude")
    seed: Optional[str] = Field(None, description="Seed for reproducible generation")


def parameter_limit_errors(
    detail_exponent: int, max_height: float, roughness: float, settings
) -> List[str]:
    """Messages for every configured generation limit the values exceed."""
    errors = []
    if detail_exponent > settings.max_detail_exponent:
        errors.append(
            f"detail_exponent must be at most {settings.max_detail_exponent}"
        )
    if max_height > settings.max_initial_height_limit:
        errors.append(
            f"max_height must be at most {settings.max_initial_height_limit}"
        )
    if not settings.min_roughness <= roughness <= settings.max_roughness:
        errors.append(
            f"roughness must be between {settings.min_roughness} and {settings.max_roughness}"
        )
    return errors


class SurfaceOptions(BaseModel):
    """Terrain surface changes; unset fields are left as they are."""

    color: Optional[int] = Field(None, description="Surface color as 0xRRGGBB or '#rrggbb'")
    texture: Optional[TerrainTexture] = Field(None, description="Surface texture")
    wireframe: Optional[bool] = Field(None, description="Render as wireframe")
    reset_color: bool = Field(False, description="Restore the default surface color")

    @field_validator("color", mode="before")
    @classmethod
    def _parse_color(cls, value):
        return None if value is None else parse_color(value)


class WaterOptions(BaseModel):
    """Water plane changes; unset fields are left as they are."""

    level: Optional[float] = Field(None, ge=-100, le=100, description="Water surface height")
    opacity: Optional[float] = Field(None, ge=0, le=1, description="Water opacity")
    color: Optional[int] = Field(None, description="Water color as 0xRRGGBB or '#rrggbb'")
    texture: Optional[WaterTexture] = Field(None, description="Water texture")
    reset_color: bool = Field(False, description="Restore the default water color")

    @field_validator("color", mode="before")
    @classmethod
    def _parse_color(cls, value):
        return None if value is None else parse_color(value)
