"""UI components for the Planar Layer Compositor

This package contains the Qt-facing components:
- transform_widgets: Handles, per-tool handle sets and drag state
- canvas_widget: Host widget (input source, camera owner, painter)
"""
