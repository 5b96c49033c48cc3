"""
Shared fixtures for Planar Layer Compositor tests.

Provides a camera centred on the world origin, layer stores, a counting
renderer and a tool controller wired to them.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

# Headless Qt for widget tests
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')


class CountingRenderer:
    """Renderer stand-in that records redraw requests"""

    def __init__(self):
        self.redraws = 0

    def request_redraw(self):
        self.redraws += 1


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def camera():
    """800x600 camera at zoom 1 with the world origin at screen (400, 300)

    One world unit equals one pixel; screen Y is world -Y.
    """
    from models.camera import OrthographicCamera
    cam = OrthographicCamera(800, 600)
    cam.pan_x = -400.0
    cam.pan_y = -300.0
    return cam


@pytest.fixture
def store():
    from models.layer_store import LayerStore
    return LayerStore()


@pytest.fixture
def renderer():
    return CountingRenderer()


@pytest.fixture
def controller(store, camera, renderer):
    from services.tool_controller import ToolController
    return ToolController(store, camera, renderer)


@pytest.fixture
def square_layer(store):
    """100x100 layer with a 10x10 grid centred on the world origin"""
    from models.geometry import LayerGeometry
    uuid = store.add_layer(LayerGeometry(100, 100, 10, 10))
    return store.get_by_uuid(uuid)
