"""
Neighbourhood map plotting for GeoDataFrames.

This module draws a neighbour relation on top of the areas it describes:
- Area fill and borders
- Connector lines between neighbouring areas
- Node markers at line endpoints, or 1-based row labels at centroids
- An optional concave hull outline around the whole collection

The map is assembled from a fixed sequence of independent layer
builders; each returns a MapLayer or None when it does not apply.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import geopandas as gpd
import matplotlib.pyplot as plt

from ..data.config import NbMapConfig, QuickmapStyle
from ..spatial.lines import area_centroids, concave_hull, connector_geometry
from ..spatial.neighbours import normalize_nb

logger = logging.getLogger(__name__)

# ============================================================================
# LAYER MODEL
# ============================================================================

@dataclass(frozen=True, eq=False)
class MapLayer:
    """
    One drawable layer of a neighbourhood map.

    Attributes
    ----------
    name : str
        'areas', 'links', 'nodes', 'labels' or 'hull'
    kind : str
        How to draw it: 'polygon', 'line', 'point', 'label' or 'outline'
    data : gpd.GeoDataFrame
        Geometry to draw
    style : dict
        matplotlib keyword arguments (points units)
    label_col : str, optional
        Column holding label text for kind='label'
    """
    name: str
    kind: str
    data: gpd.GeoDataFrame
    style: dict = field(default_factory=dict)
    label_col: Optional[str] = None


@dataclass
class _MapContext:
    nbsf: gpd.GeoDataFrame
    lines: gpd.GeoDataFrame
    endpoints: gpd.GeoDataFrame
    style: QuickmapStyle
    config: NbMapConfig
    nodes: str
    concavehull: bool


# ============================================================================
# LAYER BUILDERS
# ============================================================================

def _area_layer(ctx: _MapContext) -> MapLayer:
    return MapLayer(
        name='areas',
        kind='polygon',
        data=ctx.nbsf,
        style={
            'facecolor': ctx.style.fillcol,
            'edgecolor': ctx.style.bordercol,
            'linewidth': ctx.style.bordersize_pt,
        }
    )


def _link_layer(ctx: _MapContext) -> MapLayer:
    return MapLayer(
        name='links',
        kind='line',
        data=ctx.lines,
        style={
            'color': ctx.style.linkcol,
            'linewidth': ctx.style.linksize_pt,
        }
    )


def _node_layer(ctx: _MapContext) -> MapLayer:
    if ctx.nodes == "numeric":
        # Labels follow current row position, not any stored identifier
        centroids = area_centroids(ctx.nbsf[[ctx.nbsf.geometry.name]])
        centroids[ctx.config.label_col] = range(1, len(centroids) + 1)
        # rows without geometry keep their number but get no label
        geom = centroids.geometry
        centroids = centroids[geom.notna() & ~geom.is_empty]
        return MapLayer(
            name='labels',
            kind='label',
            data=centroids,
            style={
                'fontsize': ctx.style.numericsize_pt,
                'color': ctx.style.numericcol,
                'fontweight': 'bold',
            },
            label_col=ctx.config.label_col
        )

    return MapLayer(
        name='nodes',
        kind='point',
        data=ctx.endpoints,
        style={
            'color': ctx.style.pointcol,
            'markersize': ctx.style.markersize,
        }
    )


def _hull_layer(ctx: _MapContext) -> Optional[MapLayer]:
    if not ctx.concavehull:
        return None
    return MapLayer(
        name='hull',
        kind='outline',
        data=concave_hull(ctx.nbsf, ratio=ctx.style.hullratio),
        style={
            'facecolor': 'none',
            'edgecolor': ctx.style.hullcol,
            'linewidth': ctx.style.hullsize_pt,
        }
    )


LAYER_BUILDERS: List[Callable[[_MapContext], Optional[MapLayer]]] = [
    _area_layer,
    _link_layer,
    _node_layer,
    _hull_layer,
]


def build_quickmap_layers(
    nbsf: gpd.GeoDataFrame,
    nodes: str = "point",
    concavehull: bool = False,
    style: Optional[QuickmapStyle] = None,
    config: Optional[NbMapConfig] = None,
    verbose: bool = False
) -> List[MapLayer]:
    """
    Validate ``nbsf`` and build the layers of its neighbourhood map.

    Parameters
    ----------
    nbsf : gpd.GeoDataFrame
        Areas with a neighbour column (see quickmap_nb)
    nodes : str
        "point" for endpoint markers, "numeric" for row labels.
        Any other value draws points.
    concavehull : bool
        Whether to add the concave hull outline
    style : QuickmapStyle, optional
        Colours and sizes; defaults to QuickmapStyle()
    config : NbMapConfig, optional
        Column names

    Returns
    -------
    List[MapLayer]
        In drawing order
    """
    style = style or QuickmapStyle()
    config = config or NbMapConfig()

    nb = normalize_nb(nbsf, config)

    if nodes not in config.node_modes:
        logger.warning(f"Unknown nodes mode '{nodes}', drawing points")

    if verbose:
        print(f"  → {nb.n} areas, {nb.n_links} neighbour links (from {nb.source})")

    lines, endpoints = connector_geometry(nbsf, nb)

    ctx = _MapContext(
        nbsf=nbsf,
        lines=lines,
        endpoints=endpoints,
        style=style,
        config=config,
        nodes=nodes,
        concavehull=bool(concavehull),
    )

    layers = []
    for builder in LAYER_BUILDERS:
        layer = builder(ctx)
        if layer is not None:
            layers.append(layer)
    return layers


# ============================================================================
# RENDERING
# ============================================================================

def _draw_layer(ax: plt.Axes, layer: MapLayer) -> None:
    if layer.data.empty:
        return

    if layer.kind == 'label':
        geom = layer.data.geometry
        for x, y, text in zip(geom.x, geom.y, layer.data[layer.label_col]):
            ax.text(x, y, str(text), ha='center', va='center', **layer.style)
    elif layer.kind in ('polygon', 'line', 'point', 'outline'):
        layer.data.plot(ax=ax, **layer.style)
    else:
        raise ValueError(f"Unknown layer kind: {layer.kind}")


def render_layers(
    layers: List[MapLayer],
    title: Optional[str] = None,
    subtitle: Optional[str] = None,
    ax: Optional[plt.Axes] = None,
    figsize: Optional[Tuple[float, float]] = None
) -> plt.Figure:
    """
    Draw map layers on a matplotlib axes with a blank (void) theme.

    Parameters
    ----------
    layers : List[MapLayer]
        Layers in drawing order
    title, subtitle : str, optional
        Text drawn above the map, left aligned
    ax : plt.Axes, optional
        Axes to draw into; a new figure is created when None
    figsize : tuple, optional
        Size of a newly created figure

    Returns
    -------
    plt.Figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize or NbMapConfig().figsize)
    else:
        fig = ax.figure

    for layer in layers:
        _draw_layer(ax, layer)

    # No graticule, ticks or axis titles
    ax.set_axis_off()

    if title is not None:
        ax.set_title(title, loc="left", fontsize=14,
                     pad=22 if subtitle is not None else 6)
    if subtitle is not None:
        ax.text(0, 1.01, subtitle, transform=ax.transAxes,
                ha="left", va="bottom", fontsize=10, color="#4D4D4D",
                gid="subtitle")

    return fig


# ============================================================================
# QUICK MAP
# ============================================================================

def quickmap_nb(
    nbsf: gpd.GeoDataFrame,
    linkcol: Optional[str] = None,
    bordercol: Optional[str] = None,
    pointcol: Optional[str] = None,
    fillcol: Optional[str] = None,
    linksize: Optional[float] = None,
    bordersize: Optional[float] = None,
    pointsize: Optional[float] = None,
    title: Optional[str] = None,
    subtitle: Optional[str] = None,
    nodes: str = "point",
    numericsize: Optional[float] = None,
    numericcol: Optional[str] = None,
    concavehull: bool = False,
    hullratio: Optional[float] = None,
    hullcol: Optional[str] = None,
    hullsize: Optional[float] = None,
    style: Optional[QuickmapStyle] = None,
    config: Optional[NbMapConfig] = None,
    ax: Optional[plt.Axes] = None,
    figsize: Optional[Tuple[float, float]] = None,
    save_path: Optional[str] = None,
    show_plot: bool = False,
    verbose: bool = False
) -> plt.Figure:
    """
    Visualise a neighbourhood structure on a map.

    Parameters
    ----------
    nbsf : gpd.GeoDataFrame
        Areas with a neighbour column called "nb" (see NbMapConfig.nb_col)
        holding either neighbour lists (0-based row positions) or the
        rows of an adjacency matrix, aligned to the row order. Build one
        with nbmap.spatial.add_contact_nb or nbmap.spatial.set_nb.
    linkcol : str, optional
        Colour of lines connecting neighbours, default "dodgerblue"
    bordercol : str, optional
        Colour of boundary lines between areas, default gray7
    pointcol : str, optional
        Colour of node points if nodes="point", default "darkred"
    fillcol : str, optional
        Fill of areas, default gray95
    linksize : float, optional
        Line width of links in mm, default 0.2
    bordersize : float, optional
        Line width of borders in mm, default 0.1
    pointsize : float, optional
        Diameter of node points in mm, default 0.8
    title, subtitle : str, optional
        Plot title and subtitle
    nodes : str, default "point"
        "point" draws line endpoints, "numeric" draws the 1-based row
        position of each area at its centroid
    numericsize : float, optional
        Font size in mm if nodes="numeric", default 5
    numericcol : str, optional
        Font colour if nodes="numeric", default "black"
    concavehull : bool, default False
        Whether to outline the concave hull of all areas
    hullratio : float, optional
        Between 0 and 1; 1 gives the convex hull, 0 the most concave
        hull. Default 0.8
    hullcol : str, optional
        Colour of the hull outline, default "darkgreen"
    hullsize : float, optional
        Line width of the hull outline in mm, default 0.5
    style : QuickmapStyle, optional
        Base style; the keyword arguments above override it
    config : NbMapConfig, optional
        Column names and figure defaults
    ax : plt.Axes, optional
        Axes to draw into
    figsize : tuple, optional
        Figure size when a new figure is created
    save_path : str, optional
        Save the figure here when given
    show_plot : bool, default False
        Whether to display the figure
    verbose : bool, default False
        Print progress information

    Returns
    -------
    plt.Figure
        Figure holding the map

    Notes
    -----
    Numeric labels are assigned by current row position, not by any
    identifier stored in the data. Reordering rows renumbers the labels.

    Examples
    --------
    >>> areas = nbmap.spatial.add_contact_nb(constituencies)
    >>> fig = quickmap_nb(areas, nodes="numeric", concavehull=True)
    """
    config = config or NbMapConfig()
    style = (style or QuickmapStyle()).update(
        linkcol=linkcol,
        bordercol=bordercol,
        pointcol=pointcol,
        fillcol=fillcol,
        linksize=linksize,
        bordersize=bordersize,
        pointsize=pointsize,
        numericsize=numericsize,
        numericcol=numericcol,
        hullratio=hullratio,
        hullcol=hullcol,
        hullsize=hullsize,
    )

    if verbose:
        print("Building neighbourhood map layers...")

    layers = build_quickmap_layers(
        nbsf,
        nodes=nodes,
        concavehull=concavehull,
        style=style,
        config=config,
        verbose=verbose
    )

    created = ax is None
    fig = render_layers(
        layers,
        title=title,
        subtitle=subtitle,
        ax=ax,
        figsize=figsize or config.figsize
    )

    if save_path is not None:
        if verbose:
            print("Saving figure...")
        fig.savefig(save_path, dpi=config.dpi, bbox_inches="tight")
        if verbose:
            print(f"Saved to {save_path}")

    if show_plot:
        plt.show()
    elif created:
        plt.close(fig)

    return fig
