"""
conftest.py - Shared test fixtures for nbmap

pytest reads this file before running any test. Every fixture defined
here can be requested by name from any test function.

The layout used throughout is a 2 × 2 grid of unit squares:

    2 | 3
    --+--
    0 | 1

Rook neighbours (shared edge) of that grid are 0-1, 0-2, 1-3, 2-3.
"""

import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import box

# ===========================================================================
# Constants
# ===========================================================================

CRS = "EPSG:27700"  # projected, so centroids are exact

ROOK_LIST = [[1, 2], [0, 3], [0, 3], [1, 2]]

ROOK_MATRIX = np.array(
    [
        [0, 1, 1, 0],
        [1, 0, 0, 1],
        [1, 0, 0, 1],
        [0, 1, 1, 0],
    ]
)


def object_column(values, index):
    """One Python object per row, so pandas never stacks rows into 2-D."""
    arr = np.empty(len(values), dtype=object)
    for k, value in enumerate(values):
        arr[k] = value
    return pd.Series(arr, index=index)


# ===========================================================================
# Fixture 1: areas without a neighbour column
# ===========================================================================


@pytest.fixture
def grid():
    """Four unit squares in a 2 × 2 grid, no 'nb' column."""
    squares = [box(0, 0, 1, 1), box(1, 0, 2, 1), box(0, 1, 1, 2), box(1, 1, 2, 2)]
    return gpd.GeoDataFrame(
        {"name": ["sw", "se", "nw", "ne"]},
        geometry=squares,
        crs=CRS,
    )


# ===========================================================================
# Fixture 2: same grid with list-form and matrix-form neighbours
# ===========================================================================


@pytest.fixture
def grid_nb_list(grid):
    """Grid with rook neighbours stored as index lists."""
    out = grid.copy()
    out["nb"] = object_column([list(nbrs) for nbrs in ROOK_LIST], out.index)
    return out


@pytest.fixture
def grid_nb_matrix(grid):
    """Grid with rook neighbours stored as adjacency matrix rows."""
    out = grid.copy()
    out["nb"] = object_column([row.copy() for row in ROOK_MATRIX], out.index)
    return out


# ===========================================================================
# Fixture 3: L-shaped collection (non-convex union)
# ===========================================================================


@pytest.fixture
def l_shape():
    """Three unit squares forming an L, with rook neighbours."""
    squares = [box(0, 0, 1, 1), box(1, 0, 2, 1), box(0, 1, 1, 2)]
    gdf = gpd.GeoDataFrame(geometry=squares, crs=CRS)
    gdf["nb"] = object_column([[1, 2], [0], [0]], gdf.index)
    return gdf
