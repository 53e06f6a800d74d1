"""
contiguity.py - Contiguity neighbours from polygon geometry

Builds the ``nb`` column that quickmap_nb expects. Two areas are
neighbours if their polygons satisfy a spatial predicate
('intersects' = touch or overlap, 'touches' = shared boundary only).
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import geopandas as gpd

import logging
from typing import Optional

import numpy as np

from ..data.config import NbMapConfig
from .neighbours import NeighbourList, set_nb

logger = logging.getLogger(__name__)


def contact_nb(gdf: 'gpd.GeoDataFrame',
               predicate: str = 'intersects',
               verbose: bool = False) -> NeighbourList:
    """
    Build a contiguity NeighbourList from polygon contacts.

    Uses a spatial join (STRtree under the hood) for the pairwise checks.
    Rows with missing or invalid geometry are kept as isolated areas so
    that positions stay aligned with ``gdf``.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Areas, one polygon per row
    predicate : str
        Spatial predicate: 'intersects' or 'touches'

    Returns
    -------
    NeighbourList
        Symmetric list form, neighbours in ascending row order

    Examples
    --------
    >>> nb = contact_nb(constituencies)
    >>> nb.n_links // 2  # undirected edges
    """
    import geopandas as gpd

    if verbose:
        print(f"\n[Contiguity] Building contact neighbours (predicate='{predicate}')...")

    n_areas = len(gdf)
    # positional index so that join results are row positions
    geoms = gpd.GeoDataFrame(geometry=gdf.geometry.values, crs=gdf.crs)

    valid_mask = geoms.geometry.notna() & geoms.geometry.is_valid
    if not valid_mask.all():
        n_invalid = int((~valid_mask).sum())
        logger.warning(f"{n_invalid} areas with invalid/missing geometry are left without neighbours")
        geoms = geoms[valid_mask]

    joined = gpd.sjoin(geoms, geoms, how='inner', predicate=predicate)

    # Remove self-joins
    joined = joined[joined.index != joined['index_right']]

    rows = joined.index.to_numpy(dtype=int)
    cols = joined['index_right'].to_numpy(dtype=int)
    order = np.lexsort((cols, rows))
    rows, cols = rows[order], cols[order]

    neighbours: list[list[int]] = [[] for _ in range(n_areas)]
    for i, j in zip(rows, cols):
        neighbours[i].append(int(j))

    nb = NeighbourList(
        neighbours=tuple(tuple(nbrs) for nbrs in neighbours),
        source='list'
    )

    n_isolated = int((nb.cardinalities == 0).sum())
    if n_isolated:
        logger.warning(f"{n_isolated} areas have no neighbours")

    if verbose:
        print(f"  ✓ Contact neighbours: {nb.n} areas, {nb.n_links // 2} edges")
        if nb.n:
            print(f"    Mean cardinality: {nb.cardinalities.mean():.1f}")

    return nb


def add_contact_nb(gdf: 'gpd.GeoDataFrame',
                   predicate: str = 'intersects',
                   as_matrix: bool = False,
                   config: Optional[NbMapConfig] = None,
                   verbose: bool = False) -> 'gpd.GeoDataFrame':
    """
    Return a copy of ``gdf`` with a contiguity neighbour column.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Areas, one polygon per row
    predicate : str
        Spatial predicate passed to contact_nb
    as_matrix : bool, default=False
        Store the relation as matrix rows instead of index lists
    config : NbMapConfig, optional
        Supplies the neighbour column name

    Returns
    -------
    gpd.GeoDataFrame
        Ready for quickmap_nb
    """
    config = config or NbMapConfig()
    nb = contact_nb(gdf, predicate=predicate, verbose=verbose)
    return set_nb(gdf, nb, nb_col=config.nb_col, as_matrix=as_matrix)
