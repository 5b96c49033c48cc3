"""Menu bar creation and menu action handlers for the compositor window"""

from PyQt5.QtWidgets import QActionGroup

from constants import TOOL_NAMES


# (tool, menu label, shortcut)
TOOL_ACTIONS = (
    ('move', "&Move", "V"),
    ('scale', "&Scale", "S"),
    ('rotate', "&Rotate", "R"),
    ('distort', "&Distort", "D"),
)


class MenuMixin:
    """Menu bar and menu action handlers"""

    def _create_menu_bar(self):
        """Create the menu bar with File, Edit, Tools, View menus"""
        menubar = self.menuBar()

        # File Menu
        file_menu = menubar.addMenu("&File")

        import_action = file_menu.addAction("&Import Images...")
        import_action.setShortcut("Ctrl+O")
        import_action.triggered.connect(self.open_images)

        # Recent Images submenu
        self.recent_menu = file_menu.addMenu("Recent Images")
        self._update_recent_files_menu()

        file_menu.addSeparator()

        exit_action = file_menu.addAction("E&xit")
        exit_action.setShortcut("Alt+F4")
        exit_action.triggered.connect(self.close)

        # Edit Menu
        edit_menu = menubar.addMenu("&Edit")

        delete_action = edit_menu.addAction("&Delete Layer")
        delete_action.setShortcut("Delete")
        delete_action.triggered.connect(self.canvas.controller.delete_selected)

        edit_menu.addSeparator()

        flip_x_action = edit_menu.addAction("Flip &Horizontal")
        flip_x_action.setShortcut("H")
        flip_x_action.triggered.connect(lambda: self.canvas.controller.flip_selected('x'))

        flip_y_action = edit_menu.addAction("Flip &Vertical")
        flip_y_action.setShortcut("Shift+H")
        flip_y_action.triggered.connect(lambda: self.canvas.controller.flip_selected('y'))

        edit_menu.addSeparator()

        up_action = edit_menu.addAction("Move Layer &Up")
        up_action.setShortcut("Ctrl+]")
        up_action.triggered.connect(lambda: self.canvas.controller.move_selected('up'))

        down_action = edit_menu.addAction("Move Layer Do&wn")
        down_action.setShortcut("Ctrl+[")
        down_action.triggered.connect(lambda: self.canvas.controller.move_selected('down'))

        # Tools Menu (exclusive)
        tools_menu = menubar.addMenu("&Tools")
        self.tool_group = QActionGroup(self)
        self.tool_group.setExclusive(True)
        self.tool_actions = {}
        for tool, label, shortcut in TOOL_ACTIONS:
            action = tools_menu.addAction(label)
            action.setShortcut(shortcut)
            action.setCheckable(True)
            action.setChecked(tool == self.canvas.controller.tool)
            action.triggered.connect(lambda checked, t=tool: self.set_tool(t))
            self.tool_group.addAction(action)
            self.tool_actions[tool] = action
        assert set(self.tool_actions) == set(TOOL_NAMES), "Every tool needs a menu entry"

        # View Menu
        view_menu = menubar.addMenu("&View")

        zoom_in_action = view_menu.addAction("Zoom &In")
        zoom_in_action.setShortcut("Ctrl+=")
        zoom_in_action.triggered.connect(lambda: self.canvas.zoom_in())

        zoom_out_action = view_menu.addAction("Zoom &Out")
        zoom_out_action.setShortcut("Ctrl+-")
        zoom_out_action.triggered.connect(lambda: self.canvas.zoom_out())

        zoom_reset_action = view_menu.addAction("&Reset View")
        zoom_reset_action.setShortcut("Ctrl+0")
        zoom_reset_action.triggered.connect(self.canvas.zoom_reset)
