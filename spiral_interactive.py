#!/usr/bin/env python3
"""
SPIRAL_INTERACTIVE.PY - Interactive spiral preview using matplotlib

Scroll to zoom, drag to pan, Ctrl/+/-/0 and arrow keys as shortcuts.
Buttons export PNG, SVG and a print PDF of the current config.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import Button

from spiral_config import CONFIG_PATH, load_config, save_config
from spiral_export import (
    ExportError, render_raster, export_png, export_svg, export_print_pdf,
    generate_filename, print_draw_report,
)
from spiral_renderer import SpiralRenderer
from spiral_surfaces import SurfaceUnavailableError
from spiral_validation import InvalidConfigError, print_validation_report
from spiral_view import ConfigState, ViewState

# Longest preview side in pixels; the preview DPI is derived from it
PREVIEW_MAX_PIXELS = 1600


def preview_dpi(paper_width: float, paper_height: float, max_dpi: float) -> float:
    """DPI at which the longest paper side renders at PREVIEW_MAX_PIXELS."""
    return min(max_dpi, PREVIEW_MAX_PIXELS * 25.4 / max(paper_width, paper_height))


class SpiralViewer:
    """Preview window driven by an explicit ConfigState and ViewState."""

    def __init__(self, config_state: ConfigState = None, view_state: ViewState = None,
                 config_path: str = CONFIG_PATH):
        if config_state is None:
            store = lambda c: save_config(c, config_path)
            config = load_config(config_path)
            try:
                config_state = ConfigState(config, store=store)
            except InvalidConfigError as e:
                print_validation_report(e.violations, config)
                print("Saved config rejected; starting from defaults")
                config_state = ConfigState(store=store)
        self.config_state = config_state
        self.view = view_state or ViewState()

        self.fig, self.ax = plt.subplots(1, 1, figsize=(10, 10))
        self.fig.subplots_adjust(bottom=0.12)
        self.ax.set_aspect('equal')

        self.image_artist = None
        self.rendered_config = None
        self.press_data = None

        # Connect events
        self.fig.canvas.mpl_connect('scroll_event', self._on_scroll)
        self.fig.canvas.mpl_connect('button_press_event', self._on_press)
        self.fig.canvas.mpl_connect('button_release_event', self._on_release)
        self.fig.canvas.mpl_connect('motion_notify_event', self._on_motion)
        self.fig.canvas.mpl_connect('key_press_event', self._on_key)

        # Add buttons
        self._add_buttons()

        self.config_state.subscribe(self._on_config_changed)
        self.view.subscribe(self._apply_view)

    # -------------------------------------------------------------------------
    # State listeners
    # -------------------------------------------------------------------------

    def _on_config_changed(self, state: ConfigState):
        if state.config is not self.rendered_config:
            self._redraw()
        elif state.draw_result is not None:
            r = state.draw_result
            self.ax.set_title(f"Golden spiral - path {r.path_length_mm / 1000:.3f} m, "
                              f"radius {r.initial_radius_mm:.2f} → {r.final_radius_mm:.2f} mm")
            self.fig.canvas.draw_idle()

    def _redraw(self):
        """Render the current config at preview resolution."""
        config = self.config_state.config
        width, height = config.paper_dimensions()
        try:
            image, result = render_raster(config, dpi=preview_dpi(width, height, config.dpi))
        except SurfaceUnavailableError as e:
            print(f"Preview failed: {e}")
            return

        if self.image_artist:
            self.image_artist.remove()
        self.image_artist = self.ax.imshow(np.asarray(image), extent=(0, width, height, 0))
        self.rendered_config = config

        self.config_state.set_draw_result(result)
        self._apply_view(self.view)

    def _mm_per_pixel(self) -> float:
        width, _ = self.config_state.config.paper_dimensions()
        bbox = self.ax.get_window_extent()
        return (width / self.view.zoom) / max(bbox.width, 1)

    def _apply_view(self, view: ViewState):
        """Translate zoom/pan into axis limits (y axis points down)."""
        width, height = self.config_state.config.paper_dimensions()
        half_w = width / 2 / view.zoom
        half_h = height / 2 / view.zoom
        mm_per_px = self._mm_per_pixel()

        cx = width / 2 - view.pan_x * mm_per_px
        cy = height / 2 - view.pan_y * mm_per_px
        self.ax.set_xlim(cx - half_w, cx + half_w)
        self.ax.set_ylim(cy + half_h, cy - half_h)
        self.fig.canvas.draw_idle()

    # -------------------------------------------------------------------------
    # Mouse / keyboard
    # -------------------------------------------------------------------------

    def _on_scroll(self, event):
        if event.inaxes != self.ax:
            return
        if event.button == 'up':
            self.view.zoom_in()
        else:
            self.view.zoom_out()

    def _on_press(self, event):
        """Start a pan drag (left button only)."""
        if event.inaxes != self.ax or event.button != 1:
            return
        self.view.set_dragging(True)
        self.press_data = (event.x, event.y, self.view.pan_x, self.view.pan_y)

    def _on_motion(self, event):
        if not self.view.dragging or self.press_data is None:
            return
        x0, y0, pan_x0, pan_y0 = self.press_data
        # Display y grows upward; pan_y follows screen convention (down)
        self.view.set_pan(pan_x0 + (event.x - x0), pan_y0 - (event.y - y0))

    def _on_release(self, event):
        self.view.set_dragging(False)
        self.press_data = None

    def _on_key(self, event):
        step = ViewState.PAN_STEP
        if event.key in ('+', '=', 'ctrl++', 'ctrl+='):
            self.view.zoom_in()
        elif event.key in ('-', 'ctrl+-'):
            self.view.zoom_out()
        elif event.key in ('0', 'ctrl+0'):
            self.view.reset()
        elif event.key == 'up':
            self.view.pan_by(0, step)
        elif event.key == 'down':
            self.view.pan_by(0, -step)
        elif event.key == 'left':
            self.view.pan_by(step, 0)
        elif event.key == 'right':
            self.view.pan_by(-step, 0)

    # -------------------------------------------------------------------------
    # Buttons
    # -------------------------------------------------------------------------

    def _add_buttons(self):
        """Add control buttons."""
        specs = [
            ("Reset view", lambda event: self.view.reset()),
            ("Export PNG", lambda event: self._export("png")),
            ("Export SVG", lambda event: self._export("svg")),
            ("Print PDF", lambda event: self._export("pdf")),
            ("Defaults", lambda event: self.config_state.reset_config()),
        ]
        self.buttons = []
        for i, (label, callback) in enumerate(specs):
            ax_btn = self.fig.add_axes([0.08 + i * 0.17, 0.02, 0.15, 0.05])
            button = Button(ax_btn, label)
            button.on_clicked(callback)
            self.buttons.append(button)  # keep a reference or the widget dies

    def _export(self, kind: str):
        """Export the current config; failures are reported, not raised."""
        config = self.config_state.config
        try:
            # No preview result when the preview failed to render
            result = self.config_state.draw_result or SpiralRenderer(config).result()
            filename = generate_filename(config, result, kind)
            if kind == "png":
                result = export_png(config, filename)
            elif kind == "svg":
                result = export_svg(config, filename)
            else:
                result, _ = export_print_pdf(config, filename)
        except (ExportError, SurfaceUnavailableError, InvalidConfigError) as e:
            print(f"Export failed: {e}")
            return
        print_draw_report(result, config)

    def show(self):
        """Show the preview window."""
        plt.show()


def main():
    viewer = SpiralViewer()
    viewer.show()


if __name__ == "__main__":
    main()
