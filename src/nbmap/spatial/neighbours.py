"""
neighbours.py - Neighbour relation parsing and normalisation

A neighbour relation arrives in one of two forms:
- list form: each row of the ``nb`` column holds the 0-based positional
  indices of that row's neighbours
- matrix form: each row of the ``nb`` column holds one row of an n × n
  adjacency matrix (1-D array of length n)

Both are normalised to a single NeighbourList before any geometry is
built. Matrix input uses binary style: any non-zero entry is a link and
weights are discarded.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import geopandas as gpd

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterator, Optional, Union

import numpy as np
import pandas as pd
from scipy import sparse

from ..data.config import NbMapConfig, NeighbourFormatError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NeighbourList:
    """
    Canonical list-of-neighbours form.

    Attributes
    ----------
    neighbours : tuple of tuple of int
        ``neighbours[i]`` are the 0-based positions of the neighbours of
        row ``i``, in the order given
    source : str
        Which input form produced this list ('list' or 'matrix')
    """
    neighbours: tuple[tuple[int, ...], ...]
    source: str = 'list'

    def __len__(self) -> int:
        return len(self.neighbours)

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        return iter(self.neighbours)

    def __getitem__(self, i: int) -> tuple[int, ...]:
        return self.neighbours[i]

    @property
    def n(self) -> int:
        return len(self.neighbours)

    @property
    def n_links(self) -> int:
        """Number of directed neighbour entries (i → j)."""
        return sum(len(nbrs) for nbrs in self.neighbours)

    @property
    def cardinalities(self) -> np.ndarray:
        return np.array([len(nbrs) for nbrs in self.neighbours], dtype=int)

    def to_edge_list(self) -> pd.DataFrame:
        """Directed edge list with columns ``i`` and ``j``."""
        rows = [(i, j) for i, nbrs in enumerate(self.neighbours) for j in nbrs]
        return pd.DataFrame(rows, columns=['i', 'j'], dtype=int)

    def to_sparse(self) -> sparse.csr_matrix:
        """Binary adjacency matrix (n × n)."""
        edges = self.to_edge_list()
        data = np.ones(len(edges), dtype=np.float32)
        adjacency = sparse.csr_matrix(
            (data, (edges['i'].to_numpy(), edges['j'].to_numpy())),
            shape=(self.n, self.n)
        )
        # duplicate entries sum on construction
        adjacency.data[:] = 1.0
        return adjacency

    def is_symmetric(self) -> bool:
        adjacency = self.to_sparse()
        return (adjacency != adjacency.T).nnz == 0

    def to_lists(self) -> list[list[int]]:
        return [list(nbrs) for nbrs in self.neighbours]


@dataclass(frozen=True)
class NeighbourMatrix:
    """
    Adjacency matrix form of a neighbour relation.

    Attributes
    ----------
    matrix : sparse.csr_matrix
        n × n matrix; any non-zero entry marks a link
    """
    matrix: sparse.csr_matrix

    @property
    def n(self) -> int:
        return self.matrix.shape[0]


NeighbourRelation = Union[NeighbourList, NeighbourMatrix]


# ========== Input validation ==========

def validate_nbsf(nbsf: 'gpd.GeoDataFrame',
                  config: Optional[NbMapConfig] = None) -> None:
    """
    Check that ``nbsf`` is a GeoDataFrame carrying a neighbour column.

    Raises
    ------
    ValidationError
        If ``nbsf`` is not a GeoDataFrame or has no neighbour column
    """
    import geopandas as gpd

    config = config or NbMapConfig()

    if not isinstance(nbsf, gpd.GeoDataFrame):
        raise ValidationError(
            "This function requires a simple features dataframe "
            f"(geopandas.GeoDataFrame) as input, got {type(nbsf).__name__}"
        )

    if config.nb_col not in nbsf.columns:
        raise ValidationError(
            f"The dataframe must contain a column called '{config.nb_col}'"
        )


def _not_a_relation(nb_col: str) -> ValidationError:
    return ValidationError(
        f"The '{nb_col}' column must be a neighbours list or a neighbours matrix"
    )


def _is_matrix_row(value, n: int) -> bool:
    if sparse.issparse(value):
        return value.shape == (1, n)
    return (
        isinstance(value, np.ndarray)
        and value.ndim == 1
        and len(value) == n
        and value.dtype.kind in 'biuf'
    )


def _is_list_like(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping)):
        return False
    if isinstance(value, np.ndarray):
        return value.ndim == 1
    return isinstance(value, (list, tuple, set, frozenset, pd.Series))


def _to_indices(value) -> tuple[int, ...]:
    """Coerce one list-form entry to a tuple of ints."""
    if value is None:
        return ()
    if isinstance(value, (set, frozenset)):
        value = sorted(value)
    arr = np.asarray(list(value))
    if arr.size == 0:
        return ()
    if arr.dtype.kind not in 'iu':
        raise NeighbourFormatError(
            f"Neighbour indices must be integers, got {list(value)}"
        )
    return tuple(int(x) for x in arr)


def _row_length(value) -> Optional[int]:
    """Length of a value that can only be a matrix row, else None."""
    if sparse.issparse(value):
        return value.shape[1] if value.shape[0] == 1 else None
    if (isinstance(value, np.ndarray) and value.ndim == 1
            and value.dtype.kind in 'bf'):
        return len(value)
    return None


def read_nb(nbsf: 'gpd.GeoDataFrame',
            nb_col: str = 'nb') -> NeighbourRelation:
    """
    Read the neighbour column of a GeoDataFrame into a tagged relation.

    Matrix form is recognised by shape: every value is a 1-D numeric
    array (or 1 × n sparse row) whose length equals the number of rows.
    Anything else list-like is taken as list form, whose entries must be
    integers; float or bool rows of the wrong length are rejected rather
    than read as indices.

    Parameters
    ----------
    nbsf : gpd.GeoDataFrame
        Areas with a neighbour column
    nb_col : str
        Name of the neighbour column

    Returns
    -------
    NeighbourList or NeighbourMatrix

    Raises
    ------
    ValidationError
        If the column holds neither neighbour lists nor matrix rows
    NeighbourFormatError
        If matrix rows do not form an n × n matrix
    """
    values = nbsf[nb_col].tolist()
    n = len(values)

    if n > 0 and all(_is_matrix_row(v, n) for v in values):
        if any(sparse.issparse(v) for v in values):
            rows = [sparse.csr_matrix(v) for v in values]
            matrix = sparse.vstack(rows, format='csr')
        else:
            matrix = sparse.csr_matrix(np.vstack(values))
        return NeighbourMatrix(matrix=matrix)

    # float/bool arrays and sparse rows are never index lists
    lengths = [_row_length(v) for v in values]
    if n > 0 and all(length is not None for length in lengths):
        if len(set(lengths)) == 1:
            raise NeighbourFormatError(
                f"Neighbour matrix must be {n} × {n}, got {n} × {lengths[0]}"
            )
        raise NeighbourFormatError(
            f"Neighbour matrix rows have different lengths: {sorted(set(lengths))}"
        )

    if all(_is_list_like(v) for v in values):
        return NeighbourList(
            neighbours=tuple(_to_indices(v) for v in values),
            source='list'
        )

    raise _not_a_relation(nb_col)


# ========== Normalisation ==========

def mat2nb(matrix) -> NeighbourList:
    """
    Convert an adjacency matrix to a NeighbourList (binary style).

    Neighbours of row ``i`` are the columns holding non-zero entries,
    in ascending order. Diagonal entries are dropped.

    Parameters
    ----------
    matrix : array-like or sparse matrix
        Square n × n adjacency matrix

    Returns
    -------
    NeighbourList
        Tagged with source='matrix'
    """
    m = sparse.csr_matrix(matrix)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise NeighbourFormatError(
            f"Neighbour matrix must be square, got shape {m.shape}"
        )

    m = m.copy()
    m.eliminate_zeros()

    n_self = int(np.count_nonzero(m.diagonal()))
    if n_self:
        logger.warning(f"Dropping {n_self} non-zero diagonal entries from neighbour matrix")
        m.setdiag(0)
        m.eliminate_zeros()

    if (m != m.T).nnz:
        logger.warning("Neighbour matrix is not symmetric; links are kept as directed")

    m.sort_indices()
    neighbours = tuple(
        tuple(int(j) for j in m.indices[m.indptr[i]:m.indptr[i + 1]])
        for i in range(m.shape[0])
    )
    return NeighbourList(neighbours=neighbours, source='matrix')


def _check_range(nb: NeighbourList, n: int) -> None:
    for i, nbrs in enumerate(nb.neighbours):
        bad = [j for j in nbrs if j < 0 or j >= n]
        if bad:
            raise NeighbourFormatError(
                f"Row {i} has neighbour indices out of range [0, {n}): {bad}"
            )


def as_nb(relation, n: Optional[int] = None) -> NeighbourList:
    """
    Normalise any supported neighbour relation to a NeighbourList.

    Parameters
    ----------
    relation : NeighbourList, NeighbourMatrix, dense 2-D array, sparse
        matrix, mapping {i: [j, ...]} or sequence of index sequences
    n : int, optional
        Expected number of areas. When given, matrix shape and index
        range are checked against it.

    Returns
    -------
    NeighbourList

    Examples
    --------
    >>> as_nb([[1], [0]]).n_links
    2
    >>> as_nb(np.array([[0, 1], [1, 0]])).neighbours
    ((1,), (0,))
    """
    if isinstance(relation, NeighbourMatrix):
        nb = mat2nb(relation.matrix)
    elif sparse.issparse(relation) or (
            isinstance(relation, np.ndarray) and relation.ndim == 2):
        nb = mat2nb(relation)
    elif isinstance(relation, NeighbourList):
        nb = relation
    elif isinstance(relation, Mapping):
        size = n if n is not None else len(relation)
        nb = NeighbourList(
            neighbours=tuple(_to_indices(relation.get(i)) for i in range(size)),
            source='list'
        )
    else:
        nb = NeighbourList(
            neighbours=tuple(_to_indices(v) for v in relation),
            source='list'
        )

    if n is not None:
        if nb.n != n:
            raise NeighbourFormatError(
                f"Neighbour relation covers {nb.n} areas but the dataframe has {n} rows"
            )
        _check_range(nb, n)
    return nb


def set_nb(gdf: 'gpd.GeoDataFrame',
           relation,
           nb_col: str = 'nb',
           as_matrix: bool = False) -> 'gpd.GeoDataFrame':
    """
    Return a copy of ``gdf`` with the neighbour column filled.

    Matrix-shaped relations are stored as one 1-D array per row (matrix
    form); everything else is stored as lists of indices (list form).

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Areas, one row per area
    relation : see ``as_nb``
        Neighbour relation aligned to the rows of ``gdf``
    nb_col : str
        Name of the neighbour column to write
    as_matrix : bool, default=False
        Store matrix form even when ``relation`` is a list

    Returns
    -------
    gpd.GeoDataFrame
    """
    n = len(gdf)
    out = gdf.copy()

    is_matrix = isinstance(relation, NeighbourMatrix) or sparse.issparse(relation) or (
        isinstance(relation, np.ndarray) and relation.ndim == 2)

    if is_matrix or as_matrix:
        if isinstance(relation, NeighbourMatrix):
            dense = relation.matrix.toarray()
        elif sparse.issparse(relation):
            dense = relation.toarray()
        elif isinstance(relation, np.ndarray):
            dense = relation
        else:
            dense = as_nb(relation, n=n).to_sparse().toarray()
        if dense.shape != (n, n):
            raise NeighbourFormatError(
                f"Neighbour matrix must be {n} × {n}, got shape {dense.shape}"
            )
        values = [np.asarray(row) for row in dense]
    else:
        values = as_nb(relation, n=n).to_lists()

    # one object per row; pandas would otherwise stack equal-length rows
    column = np.empty(n, dtype=object)
    for k, value in enumerate(values):
        column[k] = value
    out[nb_col] = pd.Series(column, index=out.index)
    return out


def normalize_nb(nbsf: 'gpd.GeoDataFrame',
                 config: Optional[NbMapConfig] = None) -> NeighbourList:
    """
    Validate ``nbsf`` and return its canonical NeighbourList.

    Combines validate_nbsf, read_nb and as_nb.
    """
    config = config or NbMapConfig()
    validate_nbsf(nbsf, config)
    relation = read_nb(nbsf, config.nb_col)
    return as_nb(relation, n=len(nbsf))
