"""
Planar Layer Compositor - Layer Import Service

Creates image layers sized and placed for the current view:
- Width is a third of the visible world width, centered in the view
- Height follows the image aspect ratio (a third of the view height without an image)
- New layers stack on top of the existing ones

These functions provide layer creation logic independent of the canvas widget.
"""

import logging
import os

from constants import DEFAULT_LAYER_VIEWPORT_FRACTION, DEFAULT_SEGMENTS_X, DEFAULT_SEGMENTS_Y
from models.geometry import LayerGeometry
from models.transform import Transform

logger = logging.getLogger('LayerImport')


def load_image(path):
    """Load an image file as a QImage

    Args:
        path: Image file path

    Returns:
        QImage

    Raises:
        ValueError: If the file is missing or cannot be decoded
    """
    from PyQt5.QtGui import QImage

    if not os.path.exists(path):
        raise ValueError(f"Image file '{path}' does not exist")
    image = QImage(path)
    if image.isNull():
        raise ValueError(f"Could not decode image '{path}'")
    logger.debug(f"Loaded {path} ({image.width()}x{image.height()})")
    return image


def layer_size_for_view(camera, image=None):
    """World size of a freshly imported layer

    Args:
        camera: Camera capability providing world_size
        image: Optional image exposing width()/height()

    Returns:
        (width, height) in world units
    """
    world_w, world_h = camera.world_size
    width = world_w * DEFAULT_LAYER_VIEWPORT_FRACTION
    if image is not None and image.width() > 0 and image.height() > 0:
        height = width * image.height() / image.width()
    else:
        height = world_h * DEFAULT_LAYER_VIEWPORT_FRACTION
    return width, height


def add_image_layer(controller, image=None, name=None,
                    segments=(DEFAULT_SEGMENTS_X, DEFAULT_SEGMENTS_Y)) -> str:
    """Add a layer centered in the controller's current view and select it

    Args:
        controller: ToolController that owns the store and camera
        image: Optional image handle (stored on the layer, sizes the quad)
        name: Display name
        segments: (segments_x, segments_y) grid resolution

    Returns:
        UUID of the new layer
    """
    camera = controller.camera
    width, height = layer_size_for_view(camera, image)
    center_x, center_y = camera.center
    geometry = LayerGeometry(width, height, segments[0], segments[1])
    transform = Transform.from_values(position=(center_x, center_y, 0.0))

    uuid = controller.add_layer(geometry, transform, name=name, image=image)
    logger.debug(f"Imported layer {uuid} ({width:.1f}x{height:.1f}) at ({center_x:.1f}, {center_y:.1f})")
    return uuid


def import_image_files(controller, paths, segments=(DEFAULT_SEGMENTS_X, DEFAULT_SEGMENTS_Y)):
    """Load each file and add it as a layer (last one ends up selected)

    Raises:
        ValueError: On the first file that cannot be loaded
    """
    uuids = []
    for path in paths:
        image = load_image(path)
        uuids.append(add_image_layer(controller, image, name=os.path.basename(path), segments=segments))
    return uuids
