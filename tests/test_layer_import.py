"""
Tests for image layer import.

Covers:
- New layers sized to a third of the view and centred in it
- Aspect ratio taken from the image
- Image loading errors
"""
import numpy as np
import pytest

from constants import DEFAULT_SEGMENTS_X, DEFAULT_SEGMENTS_Y
from services.layer_import import add_image_layer, import_image_files, layer_size_for_view, load_image


class FakeImage:
    """Minimal image handle exposing width()/height()"""

    def __init__(self, width, height):
        self._width = width
        self._height = height

    def width(self):
        return self._width

    def height(self):
        return self._height


class TestLayerSize:

    def test_without_image(self, camera):
        assert layer_size_for_view(camera) == pytest.approx((800 / 3, 200))

    def test_image_aspect(self, camera):
        width, height = layer_size_for_view(camera, FakeImage(400, 100))
        assert width == pytest.approx(800 / 3)
        assert height == pytest.approx(800 / 3 / 4)

    def test_follows_zoom(self, camera):
        camera.set_zoom(2.0)
        assert layer_size_for_view(camera)[0] == pytest.approx(400 / 3)


class TestAddImageLayer:

    def test_centred_and_selected(self, controller, store, camera):
        camera.pan_x += 50
        uuid = add_image_layer(controller, FakeImage(300, 300), name="photo.png")
        layer = store.get_by_uuid(uuid)
        assert store.selected_uuid == uuid
        assert layer.name == "photo.png"
        np.testing.assert_allclose(layer.world_bounds().center[:2], [50, 0], atol=1e-9)
        assert layer.geometry.segments_x == DEFAULT_SEGMENTS_X
        assert layer.geometry.segments_y == DEFAULT_SEGMENTS_Y

    def test_stacks_on_top(self, controller, store):
        first = add_image_layer(controller)
        second = add_image_layer(controller, segments=(2, 3))
        assert store.get_by_uuid(second).z_order == store.get_by_uuid(first).z_order + 1
        assert store.get_by_uuid(second).geometry.vertex_count == 12


class TestLoadImage:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="does not exist"):
            load_image(str(tmp_path / "nope.png"))

    def test_undecodable_file(self, qapp, tmp_path):
        path = tmp_path / "broken.png"
        path.write_text("not an image")
        with pytest.raises(ValueError, match="Could not decode"):
            load_image(str(path))

    def test_load_and_import(self, qapp, tmp_path, controller, store):
        from PyQt5.QtGui import QImage, QColor
        image = QImage(40, 20, QImage.Format_ARGB32)
        image.fill(QColor(255, 0, 0))
        path = str(tmp_path / "red.png")
        assert image.save(path)

        loaded = load_image(path)
        assert (loaded.width(), loaded.height()) == (40, 20)

        uuids = import_image_files(controller, [path])
        layer = store.get_by_uuid(uuids[0])
        assert layer.name == "red.png"
        assert layer.geometry.width / layer.geometry.height == pytest.approx(2.0)
