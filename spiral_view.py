#!/usr/bin/env python3
"""
SPIRAL_VIEW.PY - Owned view and configuration state

Contains:
- ViewState: zoom/pan/drag state for a preview, with listeners
- ConfigState: current SpiralConfig and last DrawResult, with listeners

Both are plain objects handed to whichever UI drives them; there are no
module-level singletons. Listeners are called with the state object.
"""

from typing import Callable, List, Optional

from spiral_models import SpiralConfig, DrawResult
from spiral_validation import ConfigViolation, require_valid_config


class _Observable:
    """Explicit listener list."""

    def __init__(self):
        self._listeners: List[Callable] = []

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        """Register a listener, call it once with the current state.

        Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)
        listener(self)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)


class ViewState(_Observable):
    """Zoom level (1.0 = 100%) and pan offset in screen pixels."""

    ZOOM_MIN = 0.1
    ZOOM_MAX = 5.0
    ZOOM_STEP = 0.1
    PAN_STEP = 50

    def __init__(self):
        super().__init__()
        self.zoom = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.dragging = False

    def set_zoom(self, zoom: float):
        self.zoom = max(self.ZOOM_MIN, min(self.ZOOM_MAX, zoom))
        self._notify()

    def zoom_in(self):
        self.set_zoom(self.zoom + self.ZOOM_STEP)

    def zoom_out(self):
        self.set_zoom(self.zoom - self.ZOOM_STEP)

    def zoom_by(self, factor: float):
        """Multiplicative zoom (pinch gestures)."""
        self.set_zoom(self.zoom * factor)

    def set_pan(self, x: float, y: float):
        self.pan_x = x
        self.pan_y = y
        self._notify()

    def pan_by(self, dx: float, dy: float):
        self.set_pan(self.pan_x + dx, self.pan_y + dy)

    def reset(self):
        self.zoom = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0
        self._notify()

    def set_dragging(self, dragging: bool):
        # Drag flag changes alone don't warrant a redraw
        self.dragging = dragging


class ConfigState(_Observable):
    """The current configuration and the result of its last render.

    Args:
        config: Starting configuration (defaults if None); must be valid
        store: Optional callback receiving every accepted config, used to
               persist preferences
    """

    def __init__(self, config: Optional[SpiralConfig] = None,
                 store: Optional[Callable[[SpiralConfig], None]] = None):
        super().__init__()
        self.config = config or SpiralConfig()
        require_valid_config(self.config)
        self.draw_result: Optional[DrawResult] = None
        self._store = store

    def update_config(self, **changes) -> List[ConfigViolation]:
        """Apply a patch. Invalid patches raise InvalidConfigError and leave
        the current config in place. Returns any warnings."""
        candidate = self.config.patch(**changes)
        warnings = require_valid_config(candidate)
        self._accept(candidate)
        return warnings

    def reset_config(self):
        self._accept(SpiralConfig())

    def set_draw_result(self, result: DrawResult):
        self.draw_result = result
        self._notify()

    def _accept(self, config: SpiralConfig):
        self.config = config
        self.draw_result = None
        if self._store:
            try:
                self._store(config)
            except OSError as e:
                # Unsaved preferences don't block the change
                print(f"Could not save preferences ({e})")
        self._notify()
