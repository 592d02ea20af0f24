"""Summary statistics for generated heightmaps."""

from dataclasses import asdict, dataclass
from typing import Dict

import numpy as np

from .heightmap_generator import HeightGrid


@dataclass(frozen=True)
class TerrainStatistics:
    """Elevation summary of a heightmap relative to a water level."""

    size: int
    cell_count: int
    min_height: float
    max_height: float
    mean_height: float
    std_height: float
    water_level: float
    submerged_cells: int

    @property
    def submerged_fraction(self) -> float:
        return self.submerged_cells / self.cell_count

    @property
    def relief(self) -> float:
        """Difference between the highest and lowest point."""
        return self.max_height - self.min_height

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data["submerged_fraction"] = self.submerged_fraction
        data["relief"] = self.relief
        return data


def compute_statistics(grid: HeightGrid, water_level: float = 0.0) -> TerrainStatistics:
    """
    Summarize a heightmap.

    Cells strictly below ``water_level`` count as submerged.
    """
    values = grid.values
    return TerrainStatistics(
        size=grid.size,
        cell_count=len(grid),
        min_height=float(np.min(values)),
        max_height=float(np.max(values)),
        mean_height=float(np.mean(values)),
        std_height=float(np.std(values)),
        water_level=float(water_level),
        submerged_cells=int(np.sum(values < water_level)),
    )
