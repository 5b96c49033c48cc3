"""
Integration tests for the main window.

Covers:
- Window starts with the persisted tool
- Tool menu switches the controller and remembers the choice
- Importing images adds layers and recent files
"""
import json
import os

import pytest
from PyQt5.QtGui import QColor, QImage


@pytest.fixture
def window(qtbot, tmp_path):
    from main import CompositorWindow
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps({'last_tool': 'rotate'}))
    win = CompositorWindow(config_dir=str(config_dir))
    qtbot.addWidget(win)
    return win


@pytest.fixture
def image_path(tmp_path):
    image = QImage(30, 30, QImage.Format_ARGB32)
    image.fill(QColor(0, 0, 255))
    path = str(tmp_path / "blue.png")
    image.save(path)
    return path


class TestCompositorWindow:

    def test_starts_with_saved_tool(self, window):
        assert window.canvas.controller.tool == 'rotate'
        assert window.tool_actions['rotate'].isChecked()

    def test_tool_menu(self, window):
        window.tool_actions['distort'].trigger()
        assert window.canvas.controller.tool == 'distort'
        with open(window.config_file, encoding='utf-8') as f:
            assert json.load(f)['last_tool'] == 'distort'

    def test_import_images(self, window, image_path):
        window.import_images([image_path])
        assert len(window.canvas.store) == 1
        assert window.canvas.store.selected_layer.name == os.path.basename(image_path)
        assert window.recent_files == [image_path]
        assert "Layers: 1" in window.status_label.text()

    def test_edit_commands_reach_controller(self, window, image_path):
        window.import_images([image_path, image_path])
        store = window.canvas.store
        selected = store.selected_uuid
        window.canvas.controller.move_selected('down')
        assert store.get_index_by_uuid(selected) == 0
        window.canvas.controller.delete_selected()
        assert len(store) == 1
