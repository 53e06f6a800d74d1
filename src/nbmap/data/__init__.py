"""
data module - configuration and errors for nbmap
"""

from .config import (
    MM_TO_PT,
    NbMapConfig,
    NbMapError,
    NeighbourFormatError,
    QuickmapStyle,
    ValidationError,
)

__all__ = [
    'MM_TO_PT',
    'NbMapConfig',
    'QuickmapStyle',
    'NbMapError',
    'ValidationError',
    'NeighbourFormatError',
]
