"""
Tests for the ToolController state machine and the four gesture tools.

Covers:
- Tool switching, idle state and handle set lifecycle
- Pointer routing priorities (handles, selected body, other layers, empty canvas)
- Move, anchored scale, pivot rotation and corner distortion gestures
- Flip, delete and stacking commands
- Redraw requests after visible changes

The camera fixture maps world (0, 0) to screen (400, 300) at one pixel per
world unit, with screen Y pointing down.
"""
import math

import numpy as np
import pytest

from constants import PAN_BUTTON, PRIMARY_BUTTON, SECONDARY_BUTTON
from components.transform_widgets import DistortHandleSet, RotateHandleSet, ScaleHandleSet
from models.geometry import LayerGeometry
from models.transform import Transform
from services.tool_controller import STATE_IDLE


def drag(controller, start, end, steps=4):
    """Press at start, move in a few steps to end, release"""
    started = controller.pointer_down(*start, PRIMARY_BUTTON)
    for i in range(1, steps + 1):
        t = i / steps
        controller.pointer_move(start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t)
    controller.pointer_up(PRIMARY_BUTTON)
    return started


# ══════════════════════════════════════════════════════════════════════════
# State machine
# ══════════════════════════════════════════════════════════════════════════

class TestStateMachine:
    """Tool and selection state"""

    def test_idle_without_selection(self, controller, square_layer):
        assert controller.state == STATE_IDLE
        assert controller.handle_set is None

    def test_unknown_tool(self, controller):
        with pytest.raises(ValueError, match="Unknown tool"):
            controller.set_tool('lasso')

    def test_unknown_tool_in_constructor(self, store, camera, renderer):
        from services.tool_controller import ToolController
        with pytest.raises(ValueError):
            ToolController(store, camera, renderer, tool='lasso')

    @pytest.mark.parametrize("tool,handle_class,has_gizmo", [
        ('move', type(None), True),
        ('scale', ScaleHandleSet, False),
        ('rotate', RotateHandleSet, True),
        ('distort', DistortHandleSet, False),
    ])
    def test_handles_per_tool(self, controller, square_layer, tool, handle_class, has_gizmo):
        controller.select_layer(square_layer.uuid)
        controller.set_tool(tool)
        assert controller.state == tool
        assert isinstance(controller.handle_set, handle_class)
        assert (controller.gizmo_layer_uuid == square_layer.uuid) == has_gizmo

    def test_switching_tool_replaces_handles(self, controller, square_layer):
        controller.select_layer(square_layer.uuid)
        controller.set_tool('scale')
        old = controller.handle_set
        controller.set_tool('distort')
        assert controller.handle_set is not old
        assert old.is_empty()

    def test_deselect_clears_handles(self, controller, square_layer):
        controller.set_tool('scale')
        controller.select_layer(square_layer.uuid)
        controller.select_layer(None)
        assert controller.state == STATE_IDLE
        assert controller.handle_set is None
        assert controller.gizmo_layer_uuid is None

    def test_select_unknown_layer(self, controller):
        with pytest.raises(ValueError):
            controller.select_layer('missing')

    def test_redraw_requested(self, controller, renderer, square_layer):
        controller.select_layer(square_layer.uuid)
        count = renderer.redraws
        controller.set_tool('rotate')
        assert renderer.redraws > count


# ══════════════════════════════════════════════════════════════════════════
# Pointer routing
# ══════════════════════════════════════════════════════════════════════════

class TestPointerRouting:
    """pointer_down priorities"""

    def test_non_primary_buttons_ignored(self, controller, square_layer):
        assert not controller.pointer_down(400, 300, PAN_BUTTON)
        assert not controller.pointer_down(400, 300, SECONDARY_BUTTON)
        assert controller.store.selected_uuid is None
        assert not controller.pointer_up(SECONDARY_BUTTON)

    def test_click_empty_canvas_clears_selection(self, controller, square_layer):
        controller.select_layer(square_layer.uuid)
        assert not controller.pointer_down(10, 10)
        assert controller.store.selected_uuid is None

    def test_move_tool_picks_and_drags(self, controller, square_layer):
        assert controller.pointer_down(400, 300)
        assert controller.store.selected_uuid == square_layer.uuid
        assert controller.is_dragging

    @pytest.mark.parametrize("tool", ['scale', 'rotate', 'distort'])
    def test_other_tools_only_select(self, controller, square_layer, tool):
        controller.set_tool(tool)
        assert not controller.pointer_down(400, 300)
        assert controller.store.selected_uuid == square_layer.uuid
        assert not controller.is_dragging

    def test_pick_top_most(self, controller, store, square_layer):
        top = store.add_layer(LayerGeometry(40, 40))
        assert controller.pick_layer(400, 300).uuid == top
        # Outside the small layer only the square is hit
        assert controller.pick_layer(440, 300).uuid == square_layer.uuid
        assert controller.pick_layer(10, 10) is None

    def test_down_during_drag_ignored(self, controller, square_layer):
        controller.pointer_down(400, 300)
        drag_context = controller.drag
        assert not controller.pointer_down(410, 300)
        assert controller.drag is drag_context

    def test_move_and_up_without_drag(self, controller):
        assert not controller.pointer_move(10, 10)
        assert not controller.pointer_up()

    def test_handle_takes_priority_over_other_layer(self, controller, store, square_layer):
        controller.set_tool('scale')
        controller.select_layer(square_layer.uuid)
        other = store.add_layer(LayerGeometry(40, 40), Transform.from_values((60, -60, 0)))
        # BR handle of the square sits over the other layer
        assert controller.pointer_down(450, 350)
        assert controller.store.selected_uuid == square_layer.uuid
        assert controller.drag.operation == 'scale'
        assert other != square_layer.uuid


# ══════════════════════════════════════════════════════════════════════════
# Move
# ══════════════════════════════════════════════════════════════════════════

class TestMoveTool:
    """Body drags"""

    def test_move_translates(self, controller, square_layer):
        drag(controller, (400, 300), (420, 310))
        np.testing.assert_allclose(square_layer.transform.position, [20, -10, 0])
        assert not controller.is_dragging

    def test_move_keeps_depth(self, controller, store, square_layer):
        top_uuid = store.add_layer(LayerGeometry(40, 40))
        top = store.get_by_uuid(top_uuid)
        depth = top.transform.position[2]
        drag(controller, (400, 300), (380, 280))
        assert top.transform.position[2] == depth
        np.testing.assert_allclose(top.transform.position[:2], [-20, 20])

    def test_move_follows_zoom(self, controller, camera, square_layer):
        camera.set_zoom(2.0)
        drag(controller, (400, 300), (420, 300))
        np.testing.assert_allclose(square_layer.transform.position, [10, 0, 0])

    def test_body_drag_in_scale_tool_moves_handles(self, controller, square_layer):
        controller.set_tool('scale')
        controller.select_layer(square_layer.uuid)
        drag(controller, (400, 300), (430, 300))
        np.testing.assert_allclose(controller.handle_set.corner(0).position, [-20, 50, 0])

    def test_distort_tool_body_does_not_move(self, controller, square_layer):
        controller.set_tool('distort')
        controller.select_layer(square_layer.uuid)
        assert not drag(controller, (400, 300), (430, 300))
        np.testing.assert_allclose(square_layer.transform.position, [0, 0, 0])


# ══════════════════════════════════════════════════════════════════════════
# Scale
# ══════════════════════════════════════════════════════════════════════════

class TestScaleTool:
    """Anchored, aspect-locked corner scaling"""

    @pytest.fixture
    def scaling(self, controller, square_layer):
        controller.set_tool('scale')
        controller.select_layer(square_layer.uuid)
        return controller

    def test_drag_bottom_right_grows_from_top_left(self, scaling, square_layer):
        drag(scaling, (450, 350), (500, 350))
        bounds = square_layer.world_bounds()
        assert bounds.width == pytest.approx(150)
        assert bounds.height == pytest.approx(150)
        np.testing.assert_allclose(bounds.corners()[0], [-50, 50, 0], atol=1e-9)

    def test_left_corner_grows_leftwards(self, scaling, square_layer):
        drag(scaling, (350, 250), (330, 250))
        bounds = square_layer.world_bounds()
        assert bounds.width == pytest.approx(120)
        np.testing.assert_allclose(bounds.corners()[2], [50, -50, 0], atol=1e-9)

    def test_aspect_preserved(self, controller, store):
        uuid = store.add_layer(LayerGeometry(200, 100, 4, 2))
        layer = store.get_by_uuid(uuid)
        controller.set_tool('scale')
        controller.select_layer(uuid)
        drag(controller, (500, 350), (520, 330))
        bounds = layer.world_bounds()
        assert bounds.width / bounds.height == pytest.approx(2.0)
        assert bounds.width == pytest.approx(220)

    def test_anchor_fixed_under_rotation(self, controller, store):
        uuid = store.add_layer(LayerGeometry(100, 60, 2, 2), Transform.from_values((30, -20, 0), math.radians(35)))
        layer = store.get_by_uuid(uuid)
        controller.set_tool('scale')
        controller.select_layer(uuid)

        before = layer.world_bounds()
        br = controller.camera.project_world_to_screen(before.corners()[2])
        drag(controller, tuple(br), (br[0] + 40, br[1] + 15))

        after = layer.world_bounds()
        np.testing.assert_allclose(after.corners()[0][:2], before.corners()[0][:2], atol=1e-6)
        assert after.width > before.width

    def test_clamped_to_minimum(self, scaling, square_layer):
        drag(scaling, (450, 350), (100, 350))
        scale = square_layer.transform.scale
        assert scale[0] > 0
        assert square_layer.world_bounds().width == pytest.approx(1e-3)

    def test_flipped_layer_keeps_sign(self, controller, store):
        uuid = store.add_layer(LayerGeometry(100, 100), Transform.from_values(scale=(-1, 1, 1)))
        layer = store.get_by_uuid(uuid)
        controller.set_tool('scale')
        controller.select_layer(uuid)
        drag(controller, (450, 350), (500, 350))
        assert layer.transform.scale[0] == pytest.approx(-1.5)
        assert layer.transform.scale[1] == pytest.approx(1.5)


# ══════════════════════════════════════════════════════════════════════════
# Rotate
# ══════════════════════════════════════════════════════════════════════════

class TestRotateTool:
    """Pivot rotation via the ring handle"""

    @pytest.fixture
    def rotating(self, controller, square_layer):
        controller.set_tool('rotate')
        controller.select_layer(square_layer.uuid)
        return controller

    def ring_screen(self, controller):
        return tuple(controller.handle_set.handles['ring'].screen_position(controller.camera))

    def test_quarter_turn(self, rotating, square_layer):
        ring = self.ring_screen(rotating)
        np.testing.assert_allclose(ring, [400, 220])
        # Ring starts straight above the centre; end straight to its left
        drag(rotating, ring, (320, 300))
        assert square_layer.transform.rotation_z == pytest.approx(math.pi / 2)
        np.testing.assert_allclose(square_layer.world_bounds().center, [0, 0, 0], atol=1e-9)
        assert square_layer.pivot is None

    def test_pivot_live_during_drag(self, rotating, square_layer):
        rotating.pointer_down(*self.ring_screen(rotating))
        assert square_layer.pivot is not None
        rotating.pointer_move(480, 300)
        assert square_layer.pivot.rotation == pytest.approx(-math.pi / 2)
        rotating.pointer_up()
        assert square_layer.pivot is None
        assert square_layer.transform.rotation_z == pytest.approx(-math.pi / 2)

    @pytest.mark.parametrize("scale", [(1.5, 1.5, 1), (1, -1, 1), (-1.2, 0.8, 1), (-1, -1, 1)])
    def test_zero_rotation_is_identity(self, controller, store, scale):
        uuid = store.add_layer(LayerGeometry(80, 40), Transform.from_values((25, 15, 0), 0.6, scale))
        layer = store.get_by_uuid(uuid)
        before = layer.world_matrix()
        before_fields = layer.transform.copy()
        controller.set_tool('rotate')
        controller.select_layer(uuid)
        ring = self.ring_screen(controller)
        controller.pointer_down(*ring)
        controller.pointer_up()
        np.testing.assert_allclose(layer.world_matrix(), before, atol=1e-9)
        np.testing.assert_allclose(layer.transform.position, before_fields.position, atol=1e-9)
        np.testing.assert_allclose(layer.transform.scale, before_fields.scale, atol=1e-9)
        assert layer.transform.rotation_z == pytest.approx(0.6)

    def test_rotation_about_off_center_layer(self, controller, store):
        uuid = store.add_layer(LayerGeometry(40, 40), Transform.from_values((100, 50, 0)))
        layer = store.get_by_uuid(uuid)
        controller.set_tool('rotate')
        controller.select_layer(uuid)
        center = controller.camera.project_world_to_screen((100, 50, 0))
        drag(controller, self.ring_screen(controller), (center[0] - 60, center[1]))
        np.testing.assert_allclose(layer.transform.position, [100, 50, 0], atol=1e-9)
        assert layer.transform.rotation_z == pytest.approx(math.pi / 2)

    def test_switching_tool_mid_drag_commits(self, rotating, square_layer):
        rotating.pointer_down(*self.ring_screen(rotating))
        rotating.pointer_move(320, 300)
        rotating.set_tool('move')
        assert square_layer.pivot is None
        assert not rotating.is_dragging
        assert square_layer.transform.rotation_z == pytest.approx(math.pi / 2)


# ══════════════════════════════════════════════════════════════════════════
# Distort
# ══════════════════════════════════════════════════════════════════════════

class TestDistortTool:
    """Corner distortion"""

    @pytest.fixture
    def distorting(self, controller, square_layer):
        controller.set_tool('distort')
        controller.select_layer(square_layer.uuid)
        return controller

    def test_top_right_up(self, distorting, square_layer):
        bottom_before = square_layer.geometry.row(10)
        drag(distorting, (450, 250), (450, 230))

        top = square_layer.world_vertices()[:11]
        np.testing.assert_allclose(top[-1], [50, 70, 0], atol=1e-9)
        # Top row stays a straight line from the fixed top-left corner
        expected_y = np.linspace(50, 70, 11)
        np.testing.assert_allclose(top[:, 1], expected_y, atol=1e-9)
        np.testing.assert_allclose(square_layer.geometry.row(10), bottom_before, atol=1e-9)

    def test_offset_preserved(self, distorting, square_layer):
        # Grab 3px away from the handle centre: the corner follows with that offset
        drag(distorting, (447, 250), (467, 250))
        np.testing.assert_allclose(square_layer.world_corners()[1], [70, 50, 0], atol=1e-9)

    def test_handles_follow_corners(self, distorting, square_layer):
        drag(distorting, (350, 350), (330, 370))
        positions = distorting.handle_set.corner_positions()
        for actual, expected in zip(positions, square_layer.world_corners()):
            np.testing.assert_allclose(actual, expected, atol=1e-9)

    def test_distort_on_rotated_layer_stays_planar(self, controller, store):
        uuid = store.add_layer(LayerGeometry(100, 100, 4, 4), Transform.from_values(rotation_z=math.radians(30)))
        layer = store.get_by_uuid(uuid)
        controller.set_tool('distort')
        controller.select_layer(uuid)
        corner = controller.camera.project_world_to_screen(layer.world_corners()[2])
        drag(controller, tuple(corner), (corner[0] + 25, corner[1] + 10))
        np.testing.assert_allclose(layer.geometry.vertices[:, 2], 0.0, atol=1e-9)
        np.testing.assert_allclose(
            controller.camera.project_world_to_screen(layer.world_corners()[2]),
            [corner[0] + 25, corner[1] + 10], atol=1e-6
        )


# ══════════════════════════════════════════════════════════════════════════
# Commands
# ══════════════════════════════════════════════════════════════════════════

class TestCommands:
    """Flip, delete, reorder and add"""

    def test_flip_without_selection(self, controller, square_layer):
        assert not controller.flip_selected('x')

    @pytest.mark.parametrize("scale", [(1.2, 0.8, 1), (1, -1, 1), (-1, 1, 1)])
    @pytest.mark.parametrize("angle", [0.0, 25.0, 80.0])
    def test_flip_twice_restores(self, controller, store, scale, angle):
        uuid = store.add_layer(LayerGeometry(100, 40, 2, 2), Transform.from_values((10, 5, 0), math.radians(angle), scale))
        layer = store.get_by_uuid(uuid)
        before = layer.world_vertices()
        before_fields = layer.transform.copy()
        controller.select_layer(uuid)
        for axis in ('x', 'y'):
            controller.flip_selected(axis)
            controller.flip_selected(axis)
            np.testing.assert_allclose(layer.world_vertices(), before, atol=1e-9)
            np.testing.assert_allclose(layer.transform.position, before_fields.position, atol=1e-9)
            np.testing.assert_allclose(layer.transform.scale, before_fields.scale, atol=1e-9)
            assert layer.transform.rotation_z == pytest.approx(math.radians(angle))

    def test_flip_mirrors_about_bounds_center(self, controller, store):
        uuid = store.add_layer(LayerGeometry(100, 40), Transform.from_values((10, 5, 0), math.radians(25)))
        layer = store.get_by_uuid(uuid)
        controller.select_layer(uuid)
        center = layer.world_bounds().center
        before = layer.world_vertices()
        controller.flip_selected('x')
        after = layer.world_vertices()
        np.testing.assert_allclose(after[:, 0], 2 * center[0] - before[:, 0], atol=1e-9)
        np.testing.assert_allclose(after[:, 1], before[:, 1], atol=1e-9)
        assert layer.transform.scale[0] < 0
        assert layer.transform.rotation_z == pytest.approx(math.radians(-25))

    def test_flip_bad_axis(self, controller, square_layer):
        controller.select_layer(square_layer.uuid)
        with pytest.raises(ValueError):
            controller.flip_selected('z')

    def test_delete_selected(self, controller, store, square_layer):
        controller.set_tool('scale')
        controller.select_layer(square_layer.uuid)
        assert controller.delete_selected()
        assert len(store) == 0
        assert controller.state == STATE_IDLE
        assert controller.handle_set is None
        assert not controller.delete_selected()

    def test_delete_mid_rotation_drops_pivot(self, controller, square_layer):
        controller.set_tool('rotate')
        controller.select_layer(square_layer.uuid)
        ring = controller.handle_set.handles['ring'].screen_position(controller.camera)
        controller.pointer_down(*ring)
        controller.delete_selected()
        assert square_layer.pivot is None
        assert not controller.is_dragging

    def test_move_selected(self, controller, store, square_layer):
        other = store.add_layer(LayerGeometry(10, 10))
        controller.select_layer(square_layer.uuid)
        assert controller.move_selected('up')
        assert store.get_index_by_uuid(square_layer.uuid) == 1
        assert not controller.move_selected('up')
        assert store.get_index_by_uuid(other) == 0

    def test_add_layer_selects(self, controller, store):
        uuid = controller.add_layer(LayerGeometry(10, 10))
        assert store.selected_uuid == uuid
        assert controller.state == 'move'
