# src/nbmap/__init__.py

"""
nbmap - Quick maps of spatial neighbourhood structures
"""

# Configuration and errors
from .data.config import NbMapConfig, QuickmapStyle, NbMapError, ValidationError

# Main entry point
from .visualization.quickmap import quickmap_nb

# Import submodules
from . import data
from . import spatial
from . import visualization

__version__ = '0.1.0'

__all__ = [
    # Core
    'quickmap_nb',
    'NbMapConfig',
    'QuickmapStyle',
    'NbMapError',
    'ValidationError',

    # Submodules
    'data',
    'spatial',
    'visualization',
]
