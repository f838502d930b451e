import pytest

from map_viewer.models import GeoPosition
from map_viewer.tiles import build_default_registry
from map_viewer.viewport import (
    PointerButton,
    PointerMoved,
    PointerPressed,
    PointerReleased,
    ViewportController,
    ViewportState,
    WheelScrolled,
)


def make_controller(center=(100.0, 100.0), zoom_level=7, min_zoom=1, max_zoom=17) -> ViewportController:
    return ViewportController(
        ViewportState(center_x=center[0], center_y=center[1], zoom_level=zoom_level),
        min_zoom=min_zoom,
        max_zoom=max_zoom,
    )


class TestPan:
    def test_drag_moves_center_against_pointer(self):
        controller = make_controller()
        controller.dispatch(PointerPressed(50, 50))
        assert controller.dispatch(PointerMoved(30, 70)) is True
        assert (controller.state.center_x, controller.state.center_y) == (120, 80)

    def test_anchor_follows_pointer(self):
        controller = make_controller()
        controller.dispatch(PointerPressed(50, 50))
        controller.dispatch(PointerMoved(40, 50))
        controller.dispatch(PointerMoved(30, 50))
        assert controller.state.center_x == 120

    def test_press_does_not_change_state(self):
        controller = make_controller()
        assert controller.dispatch(PointerPressed(50, 50)) is False
        assert controller.is_panning
        assert (controller.state.center_x, controller.state.center_y) == (100, 100)

    def test_move_without_press_is_ignored(self):
        controller = make_controller()
        assert controller.dispatch(PointerMoved(30, 70)) is False
        assert (controller.state.center_x, controller.state.center_y) == (100, 100)

    def test_release_ends_pan(self):
        controller = make_controller()
        controller.dispatch(PointerPressed(50, 50))
        controller.dispatch(PointerReleased(50, 50))
        assert not controller.is_panning
        controller.dispatch(PointerMoved(0, 0))
        assert (controller.state.center_x, controller.state.center_y) == (100, 100)

    def test_secondary_button_does_not_pan(self):
        controller = make_controller()
        controller.dispatch(PointerPressed(50, 50, PointerButton.SECONDARY))
        assert not controller.is_panning
        assert controller.dispatch(PointerMoved(0, 0)) is False

    def test_center_is_unbounded(self):
        controller = make_controller(center=(0.0, 0.0))
        controller.dispatch(PointerPressed(0, 0))
        controller.dispatch(PointerMoved(500, 500))
        assert (controller.state.center_x, controller.state.center_y) == (-500, -500)


class TestZoom:
    def test_scroll_away_increments_zoom_level(self):
        controller = make_controller()
        assert controller.dispatch(WheelScrolled(-1)) is True
        assert controller.state.zoom_level == 8

    def test_scroll_toward_decrements_zoom_level(self):
        controller = make_controller()
        controller.dispatch(WheelScrolled(1))
        assert controller.state.zoom_level == 6

    def test_zero_rotation_is_ignored(self):
        controller = make_controller()
        assert controller.dispatch(WheelScrolled(0)) is False
        assert controller.state.zoom_level == 7

    def test_one_step_per_event_regardless_of_magnitude(self):
        controller = make_controller()
        controller.dispatch(WheelScrolled(-5))
        assert controller.state.zoom_level == 8

    @pytest.mark.parametrize("start, rotation", [(17, -1), (1, 1)])
    def test_zoom_is_clamped_to_source_range(self, start, rotation):
        controller = make_controller(zoom_level=start)
        assert controller.dispatch(WheelScrolled(rotation)) is False
        assert controller.state.zoom_level == start

    def test_center_is_rescaled_with_world_size(self):
        controller = make_controller(center=(1000.0, 600.0))
        controller.dispatch(WheelScrolled(-1))
        assert (controller.state.center_x, controller.state.center_y) == (500.0, 300.0)
        controller.dispatch(WheelScrolled(1))
        controller.dispatch(WheelScrolled(1))
        assert (controller.state.center_x, controller.state.center_y) == (2000.0, 1200.0)

    def test_zoom_keeps_geographic_center(self):
        controller = make_controller()
        controller.center_on(GeoPosition(latitude=50.11, longitude=8.68))
        controller.dispatch(WheelScrolled(1))
        position = controller.center_position()
        assert position.latitude == pytest.approx(50.11)
        assert position.longitude == pytest.approx(8.68)


class TestSourceSwitch:
    def test_switching_source_preserves_viewport(self):
        registry = build_default_registry()
        source = registry.activate("OpenStreetMap")
        controller = make_controller(min_zoom=source.min_zoom, max_zoom=source.max_zoom)
        controller.dispatch(PointerPressed(10, 10))
        controller.dispatch(PointerMoved(0, 0))
        before = controller.state.copy()

        for name in ("OpenTopoMap", "Satellite", "OpenStreetMap"):
            source = registry.activate(name)
            assert controller.set_zoom_range(source.min_zoom, source.max_zoom) is False
            assert controller.state == before

    def test_narrower_range_clamps_zoom(self):
        controller = make_controller(center=(400.0, 400.0), zoom_level=3, max_zoom=17)
        assert controller.set_zoom_range(5, 17) is True
        assert controller.state.zoom_level == 5
        assert (controller.state.center_x, controller.state.center_y) == (100.0, 100.0)

    def test_tile_size_change_keeps_geographic_center(self):
        controller = make_controller()
        frankfurt = GeoPosition(latitude=50.11, longitude=8.68)
        controller.center_on(frankfurt)
        x, y = controller.state.center_x, controller.state.center_y
        assert controller.set_zoom_range(1, 17, tile_size=512) is True
        assert controller.tile_size == 512
        assert (controller.state.center_x, controller.state.center_y) == (x * 2, y * 2)
        position = controller.center_position()
        assert position.latitude == pytest.approx(frankfurt.latitude)
        assert position.longitude == pytest.approx(frankfurt.longitude)


class TestListeners:
    def test_listeners_get_a_snapshot_after_changes(self):
        controller = make_controller()
        seen = []
        controller.subscribe(seen.append)
        controller.dispatch(PointerPressed(50, 50))
        controller.dispatch(PointerMoved(30, 70))
        controller.dispatch(WheelScrolled(-1))
        assert [s.zoom_level for s in seen] == [7, 8]
        assert (seen[0].center_x, seen[0].center_y) == (120, 80)
        assert seen[0] is not controller.state

    def test_unknown_event_type_is_rejected(self):
        controller = make_controller()
        with pytest.raises(TypeError):
            controller.dispatch("drag")


def test_center_on_round_trips():
    controller = make_controller(zoom_level=7)
    frankfurt = GeoPosition(latitude=50.11, longitude=8.68)
    controller.center_on(frankfurt)
    # provider zoom 10: 1024 tiles across
    assert controller.state.center_x == pytest.approx((8.68 + 180) / 360 * 256 * 1024)
    position = controller.center_position()
    assert position.latitude == pytest.approx(frankfurt.latitude)
    assert position.longitude == pytest.approx(frankfurt.longitude)
