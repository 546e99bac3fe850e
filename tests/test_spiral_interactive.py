from types import SimpleNamespace

import matplotlib
matplotlib.use("Agg")

import pytest

from spiral_config import load_config
from spiral_interactive import PREVIEW_MAX_PIXELS, SpiralViewer, preview_dpi
from spiral_models import SpiralConfig
from spiral_view import ConfigState, ViewState


def test_preview_dpi_caps_longest_side():
    assert preview_dpi(1000, 500, 600) == pytest.approx(PREVIEW_MAX_PIXELS * 25.4 / 1000)
    assert preview_dpi(50, 50, 150) == 150


@pytest.fixture
def viewer(tmp_path):
    path = tmp_path / "spiral.json"
    state = ConfigState(SpiralConfig(paper_width_mm=200, paper_height_mm=200),
                        store=lambda c: None)
    return SpiralViewer(config_state=state, config_path=str(path))


def test_viewer_renders_on_start(viewer):
    assert viewer.image_artist is not None
    assert viewer.config_state.draw_result is not None
    assert "path" in viewer.ax.get_title()


def test_config_change_rerenders(viewer):
    first = viewer.image_artist
    viewer.config_state.update_config(turns=4)
    assert viewer.image_artist is not first
    assert viewer.rendered_config is viewer.config_state.config


def test_keys_drive_view_state(viewer):
    viewer._on_key(SimpleNamespace(key="+"))
    assert viewer.view.zoom == pytest.approx(1.1)
    viewer._on_key(SimpleNamespace(key="left"))
    assert viewer.view.pan_x == ViewState.PAN_STEP
    viewer._on_key(SimpleNamespace(key="0"))
    assert (viewer.view.zoom, viewer.view.pan_x) == (1.0, 0.0)


def test_zoom_narrows_axis_limits(viewer):
    viewer.view.set_zoom(2.0)
    assert viewer.ax.get_xlim() == pytest.approx((50, 150))


def test_invalid_saved_config_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "spiral.json"
    path.write_text('{"turns": 99}')
    assert load_config(str(path)).turns == 99

    viewer = SpiralViewer(config_path=str(path))
    assert viewer.config_state.config == SpiralConfig()
    assert "starting from defaults" in capsys.readouterr().out
