from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Load .env for local/dev environments only for values missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Terrain Generation Defaults
    default_detail_exponent: int = Field(default=8, ge=0, description="Initial grid exponent")
    default_max_height: float = Field(default=0.0, ge=0, description="Initial corner height bound")
    default_roughness: float = Field(default=30.0, ge=0, description="Initial roughness")

    # Generation Limits
    max_detail_exponent: int = Field(default=10, ge=0, description="Largest accepted grid exponent")
    max_initial_height_limit: float = Field(default=50.0, ge=0, description="Largest accepted corner height bound")
    min_roughness: float = Field(default=0.0, ge=0, description="Smallest accepted roughness")
    max_roughness: float = Field(default=100.0, ge=0, description="Largest accepted roughness")

    # Scene Configuration
    plane_size: float = Field(default=100.0, gt=0, description="Side length of the terrain plane")
    export_filename: str = Field(default="scene.glb", description="File name offered for scene downloads")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Instantiate singleton settings object
settings = Settings()
