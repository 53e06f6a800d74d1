"""
lines.py - Derived geometry for neighbourhood maps

Turns a NeighbourList into drawable geometry:
- label points: one representative location per area
- connector lines: one LineString per directed neighbour entry
- endpoints: the vertices of the connector lines
- centroids and concave hulls of the area collection
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .neighbours import NeighbourList

from typing import Optional, Union

import geopandas as gpd
import numpy as np
import shapely
from shapely.geometry import LineString, MultiPolygon


def _label_point(geom):
    if geom is None or geom.is_empty:
        return None
    if isinstance(geom, MultiPolygon):
        largest = max(geom.geoms, key=lambda part: part.area)
        return largest.centroid
    return geom.centroid


def label_points(gdf: gpd.GeoDataFrame) -> gpd.GeoSeries:
    """
    Representative point for each area.

    The centroid of the largest polygon part, so multi-part areas
    (islands, exclaves) anchor on their main body. This is centroid-like
    but not the true centroid of the whole geometry.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Areas, one row per area

    Returns
    -------
    gpd.GeoSeries
        Points aligned to the rows of ``gdf``
    """
    return gpd.GeoSeries(
        [_label_point(geom) for geom in gdf.geometry],
        index=gdf.index,
        crs=gdf.crs
    )


def nb2lines(nb: 'NeighbourList',
             coords: Union[gpd.GeoSeries, np.ndarray],
             crs=None) -> gpd.GeoDataFrame:
    """
    Connector lines between neighbouring areas.

    One line per directed entry ``i → j``, so a symmetric relation gives
    two (opposite) lines per undirected edge.

    Parameters
    ----------
    nb : NeighbourList
        Canonical neighbour relation
    coords : gpd.GeoSeries or np.ndarray
        Representative points (GeoSeries) or an (n, 2) coordinate array,
        aligned to the positions in ``nb``
    crs : optional
        CRS set on the result, whatever ``coords`` carries

    Returns
    -------
    gpd.GeoDataFrame
        Columns: i, j, geometry
    """
    if isinstance(coords, gpd.GeoSeries):
        xy = np.column_stack([coords.x.to_numpy(), coords.y.to_numpy()])
    else:
        xy = np.asarray(coords, dtype=float)

    if len(xy) != nb.n:
        raise ValueError(
            f"Got {len(xy)} coordinates for a neighbour relation over {nb.n} areas"
        )

    edges = nb.to_edge_list()
    geometry = [
        LineString([xy[i], xy[j]])
        for i, j in zip(edges['i'], edges['j'])
    ]

    return gpd.GeoDataFrame(
        {'i': edges['i'].to_numpy(), 'j': edges['j'].to_numpy()},
        geometry=gpd.GeoSeries(geometry, crs=crs),
        crs=crs
    )


def line_endpoints(lines: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Points at every vertex of the connector lines.

    Two points per line, duplicates included, in line order.

    Returns
    -------
    gpd.GeoDataFrame
        Columns: X, Y, geometry; CRS of ``lines``
    """
    coords = shapely.get_coordinates(lines.geometry.values)
    return gpd.GeoDataFrame(
        {'X': coords[:, 0], 'Y': coords[:, 1]},
        geometry=gpd.points_from_xy(coords[:, 0], coords[:, 1]),
        crs=lines.crs
    )


def area_centroids(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """True centroids of each area, attributes kept."""
    out = gdf.copy()
    out[gdf.geometry.name] = gdf.geometry.centroid
    return out


def concave_hull(gdf: gpd.GeoDataFrame, ratio: float = 0.8) -> gpd.GeoDataFrame:
    """
    Concave hull of the whole area collection.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Areas
    ratio : float
        Between 0 and 1. 1 gives the convex hull, 0 the most concave hull.

    Returns
    -------
    gpd.GeoDataFrame
        One row holding the hull polygon
    """
    if not 0 <= ratio <= 1:
        raise ValueError(f"hull ratio must be between 0 and 1, got {ratio}")

    combined = shapely.union_all(gdf.geometry.values)
    hull = shapely.concave_hull(combined, ratio=ratio)
    return gpd.GeoDataFrame({'ratio': [ratio]}, geometry=[hull], crs=gdf.crs)


def connector_geometry(gdf: gpd.GeoDataFrame,
                       nb: 'NeighbourList',
                       coords: Optional[gpd.GeoSeries] = None
                       ) -> tuple[gpd.GeoDataFrame, gpd.GeoDataFrame]:
    """
    Connector lines and their endpoints for ``gdf``.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Areas aligned to ``nb``
    nb : NeighbourList
        Canonical neighbour relation
    coords : gpd.GeoSeries, optional
        Override for the line anchors; defaults to label_points(gdf)

    Returns
    -------
    tuple
        (lines, endpoints), both in the CRS of ``gdf``
    """
    if coords is None:
        coords = label_points(gdf)
    lines = nb2lines(nb, coords, crs=gdf.crs)
    return lines, line_endpoints(lines)
