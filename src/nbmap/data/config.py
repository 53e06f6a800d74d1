"""
config.py - Configuration and style settings for nbmap

Contains:
- NbMapConfig: Column names and figure settings
- QuickmapStyle: Colour and size defaults for quickmap_nb
- NbMapError and friends: Exception hierarchy
"""

from dataclasses import dataclass, fields, replace

# ggplot sizes are millimetres; matplotlib works in points
MM_TO_PT = 72.27 / 25.4


@dataclass
class NbMapConfig:
    """Configuration for nbmap column names and figure settings."""

    # Column names
    nb_col: str = "nb"
    label_col: str = "id"

    # Figure settings
    figsize: tuple[float, float] = (8.0, 8.0)
    dpi: int = 300

    # Node rendering modes accepted by quickmap_nb
    node_modes: tuple[str, ...] = ("point", "numeric")


@dataclass(frozen=True)
class QuickmapStyle:
    """
    Colour and size defaults for quickmap_nb.

    Sizes use ggplot-style millimetre units. Use the ``*_pt`` helpers
    and ``markersize`` to get matplotlib point values.
    """

    linkcol: str = "dodgerblue"
    bordercol: str = "#121212"  # gray7
    pointcol: str = "darkred"
    fillcol: str = "#F2F2F2"  # gray95
    linksize: float = 0.2
    bordersize: float = 0.1
    pointsize: float = 0.8
    numericsize: float = 5.0
    numericcol: str = "black"
    hullratio: float = 0.8
    hullcol: str = "darkgreen"
    hullsize: float = 0.5

    def update(self, **overrides) -> "QuickmapStyle":
        """
        Return a copy with non-None overrides applied.

        Unknown keys raise ``TypeError``.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown style options: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @staticmethod
    def to_points(size: float) -> float:
        """Convert a millimetre size to matplotlib points."""
        return size * MM_TO_PT

    @property
    def linksize_pt(self) -> float:
        return self.to_points(self.linksize)

    @property
    def bordersize_pt(self) -> float:
        return self.to_points(self.bordersize)

    @property
    def hullsize_pt(self) -> float:
        return self.to_points(self.hullsize)

    @property
    def numericsize_pt(self) -> float:
        return self.to_points(self.numericsize)

    @property
    def markersize(self) -> float:
        """Marker area in points^2 (scatter ``s``), from a diameter in mm."""
        return self.to_points(self.pointsize) ** 2


class NbMapError(Exception):
    """Base exception for nbmap errors."""

    pass


class ValidationError(NbMapError):
    """Raised when quickmap_nb input fails its preconditions."""

    pass


class NeighbourFormatError(NbMapError, ValueError):
    """Raised when a neighbour structure is malformed (shape, index range)."""

    pass
