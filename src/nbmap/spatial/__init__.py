"""
spatial - Neighbour relations and derived geometry for nbmap

neighbours : Reading and normalising neighbour relations
    validate_nbsf, read_nb, mat2nb, as_nb, set_nb, normalize_nb
contiguity : Contiguity neighbours from polygon contacts
    contact_nb, add_contact_nb
lines : Connector lines, endpoints, centroids and hulls
    label_points, nb2lines, line_endpoints, area_centroids, concave_hull

Usage
-----
>>> import nbmap
>>>
>>> areas = nbmap.spatial.add_contact_nb(areas)
>>> nb = nbmap.spatial.normalize_nb(areas)
>>> lines, endpoints = nbmap.spatial.connector_geometry(areas, nb)
"""

from .contiguity import add_contact_nb, contact_nb
from .lines import (
    area_centroids,
    concave_hull,
    connector_geometry,
    label_points,
    line_endpoints,
    nb2lines,
)
from .neighbours import (
    NeighbourList,
    NeighbourMatrix,
    as_nb,
    mat2nb,
    normalize_nb,
    read_nb,
    set_nb,
    validate_nbsf,
)

__all__ = [
    # Neighbours
    "NeighbourList",
    "NeighbourMatrix",
    "validate_nbsf",
    "read_nb",
    "mat2nb",
    "as_nb",
    "set_nb",
    "normalize_nb",
    # Contiguity
    "contact_nb",
    "add_contact_nb",
    # Lines
    "label_points",
    "nb2lines",
    "line_endpoints",
    "area_centroids",
    "concave_hull",
    "connector_geometry",
]
