"""
visualization/__init__.py - Visualization subpackage for nbmap

Draws neighbour relations on top of the areas they describe.

Usage
-----
    import nbmap
    nbmap.visualization.quickmap_nb(areas)
    nbmap.visualization.quickmap_nb(areas, nodes="numeric", concavehull=True)
"""

from .quickmap import (
    LAYER_BUILDERS,
    MapLayer,
    build_quickmap_layers,
    quickmap_nb,
    render_layers,
)

__all__ = [
    "MapLayer",
    "LAYER_BUILDERS",
    "build_quickmap_layers",
    "render_layers",
    "quickmap_nb",
]
