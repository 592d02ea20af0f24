"""
py_terrain: fractal terrain generation with the diamond-square algorithm.
"""

__version__ = "0.1.0"
