import sys
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.WARNING,  # Only show warnings and errors
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # Output to console
    ]
)

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import QMainWindow, QFileDialog, QLabel
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor

# Component imports
from components.canvas_widget import CanvasWidget

# Utility imports
from utils.logger import loggerRaise, set_main_window

# Service imports
from services.layer_import import import_image_files

from constants import CONFIG_DIR, CONFIG_FILE_NAME, MAX_RECENT_FILES, IMAGE_FILE_FILTER

# Mixin imports
from window.config_mixin import ConfigMixin
from window.menu_mixin import MenuMixin


class CompositorWindow(MenuMixin, ConfigMixin, QMainWindow):
    """Main window: canvas, menus, status bar and persisted settings"""

    def __init__(self, config_dir=CONFIG_DIR):
        super().__init__()
        self._logger = logging.getLogger('CompositorWindow')
        self.setWindowTitle("Planar Layer Compositor")
        self.resize(1280, 800)

        set_main_window(self)

        # Recent files and config
        self.max_recent_files = MAX_RECENT_FILES
        self.config_dir = config_dir
        self.config_file = os.path.join(self.config_dir, CONFIG_FILE_NAME)
        self._load_config()

        self.setup_ui()

    def setup_ui(self):
        self.canvas = CanvasWidget(self)
        self.setCentralWidget(self.canvas)
        self.canvas.controller.set_tool(self.last_tool)
        self.canvas.selectionChanged.connect(self._update_status)
        self.canvas.transformEnded.connect(self._update_status)

        self._create_menu_bar()

        self.status_label = QLabel()
        self.statusBar().addWidget(self.status_label)
        self._update_status()

    def set_tool(self, tool):
        """Switch tool from the menu and remember it for the next session"""
        try:
            self.canvas.controller.set_tool(tool)
        except Exception as e:
            loggerRaise(e, f"Cannot switch to tool '{tool}'")
        if tool in self.tool_actions:
            self.tool_actions[tool].setChecked(True)
        self._remember_tool(tool)
        self._update_status()

    def open_images(self):
        """Ask for image files and import each as a layer"""
        paths, _ = QFileDialog.getOpenFileNames(self, "Import Images", "", IMAGE_FILE_FILTER)
        if paths:
            self.import_images(paths)

    def import_images(self, paths):
        try:
            import_image_files(self.canvas.controller, paths, segments=self.default_segments)
        except Exception as e:
            loggerRaise(e, "Failed to import image")
        for path in paths:
            self._add_to_recent_files(path)
        self._update_status()

    def _update_status(self, *args):
        layer = self.canvas.store.selected_layer
        selected = layer.name if layer is not None else "none"
        self.status_label.setText(
            f"Tool: {self.canvas.controller.tool}  |  Layers: {len(self.canvas.store)}  |  Selected: {selected}"
        )


def main():
    """Main entry point for the Planar Layer Compositor"""
    app = QtWidgets.QApplication([])

    # Use Fusion style with dark palette
    app.setStyle("Fusion")

    dark_palette = QPalette()
    dark_palette.setColor(QPalette.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.WindowText, Qt.white)
    dark_palette.setColor(QPalette.Base, QColor(25, 25, 25))
    dark_palette.setColor(QPalette.Text, Qt.white)
    dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ButtonText, Qt.white)
    dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.HighlightedText, Qt.black)

    app.setPalette(dark_palette)

    window = CompositorWindow()
    window.show()
    app.exec_()


if __name__ == "__main__":
    main()
