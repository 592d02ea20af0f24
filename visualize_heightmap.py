#!/usr/bin/env python3
"""
Visualize a diamond-square heightmap.
Generates an image showing the height values as a color map, with the
water level drawn as a contour.
"""

import numpy as np
import matplotlib.pyplot as plt
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent))

from py_terrain.core.heightmap_generator import generate
from py_terrain.core.terrain_statistics import compute_statistics
from py_terrain.export.scene_export import save_heightmap_npy
from py_terrain.utils.random import create_random_source


def visualize_heightmap(
    detail_exponent=8, max_height=20.0, roughness=30.0, water_level=0.0, seed="123456"
):
    """
    Generate and visualize a heightmap.

    Args:
        detail_exponent: Grid has 2**detail_exponent + 1 points per side
        max_height: Upper bound for the corner heights
        roughness: Initial perturbation amplitude
        water_level: Height of the water plane
        seed: Random seed
    """
    print(f"Generating heightmap with detail exponent {detail_exponent}...")
    grid = generate(detail_exponent, max_height, roughness, create_random_source(seed))
    heights = grid.as_matrix()

    stats = compute_statistics(grid, water_level=water_level)
    print(f"\nHeightmap statistics:")
    print(f"  Size: {stats.size}x{stats.size} ({stats.cell_count} points)")
    print(f"  Min height: {stats.min_height:.2f}")
    print(f"  Max height: {stats.max_height:.2f}")
    print(f"  Mean height: {stats.mean_height:.2f}")
    print(
        f"  Below water (h<{water_level}): {stats.submerged_cells} ({stats.submerged_fraction*100:.1f}%)"
    )

    print("\nCreating visualization...")
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 8))

    # Left plot: heights as image
    im = ax1.imshow(heights, cmap="terrain", origin="upper", aspect="equal")
    plt.colorbar(im, ax=ax1, label="Height")
    ax1.set_title(f"Diamond-square heightmap\n{stats.size}x{stats.size} points")
    ax1.set_xlabel("Column")
    ax1.set_ylabel("Row")

    # Right plot: contours with the water line
    if stats.relief > 0:
        levels = np.linspace(stats.min_height, stats.max_height, 12)
        ax2.contourf(heights, levels=levels, cmap="terrain")
    if stats.min_height < water_level < stats.max_height:
        ax2.contour(heights, levels=[water_level], colors="blue", linewidths=2)
    ax2.set_aspect("equal")
    ax2.invert_yaxis()
    ax2.set_title(f"Contours\nWater level = {water_level} (blue line)")

    fig.suptitle(f"Heightmap Visualization - Seed: {seed}", fontsize=16)
    plt.tight_layout()

    output_file = f"heightmap_{detail_exponent}_{seed}.png"
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    print(f"\nVisualization saved to: {output_file}")

    npy_file = save_heightmap_npy(grid, f"heightmap_{detail_exponent}_{seed}.npy")
    print(f"Raw heights saved to: {npy_file}")

    plt.show()


if __name__ == "__main__":
    seed = sys.argv[1] if len(sys.argv) > 1 else "123456"
    visualize_heightmap(seed=seed)
