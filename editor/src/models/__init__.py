"""
Planar Layer Compositor - Data Models

This module contains the data model classes for the layer stack.
This is the MODEL in MVC architecture: pure data, no Qt imports.
"""

from .transform import Transform
from .geometry import Bounds, LayerGeometry
from .pivot import Pivot
from .layer import Layer
from .layer_store import LayerStore
from .camera import OrthographicCamera, Ray

__all__ = [
    'Transform', 'Bounds', 'LayerGeometry', 'Pivot',
    'Layer', 'LayerStore', 'OrthographicCamera', 'Ray',
]
