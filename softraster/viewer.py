"""A headless viewer loop that drives a renderer and forwards input events."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

DEFAULT_W = 800
DEFAULT_H = 600

RELEASE = 0
PRESS = 1
REPEAT = 2

KEY_GRAVE_ACCENT = 96
KEY_ESCAPE = 256

OK_COLOR = (0.15, 0.5, 0.15)
WARN_COLOR = (1.0, 0.35, 0.35)


class Renderer(Protocol):
    """What the viewer needs from a renderer."""

    def init(self) -> None: ...
    def render(self) -> None: ...
    def resize(self, width: int, height: int) -> None: ...
    def name(self) -> str: ...
    def info(self) -> str: ...
    def cursor_event(self, x: float, y: float) -> None: ...
    def scroll_event(self, offset_x: float, offset_y: float) -> None: ...
    def mouse_event(self, key: int, event: int, mods: int) -> None: ...
    def keyboard_event(self, key: int, event: int, mods: int) -> None: ...


@dataclass
class OSDLine:
    """One line of on-screen text."""

    x: float
    y: float
    text: str
    size: int
    color: tuple[float, float, float]


class Viewer:
    """Runs the update loop, keeps frame statistics and dispatches events."""

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        width: int = DEFAULT_W,
        height: int = DEFAULT_H,
        hdpi: bool = False,
    ) -> None:
        self.renderer = renderer
        self.width = width
        self.height = height
        self.hdpi = hdpi
        self.buffer_w = width
        self.buffer_h = height
        self.title = ""
        self.show_info = True
        self.should_close = False
        self.framecount = 0
        self.clock: Callable[[], float] = time.monotonic
        self.lines: dict[str, OSDLine] = {}
        self._last_tick = 0.0

    def init(self) -> None:
        """Set up the renderer and the on-screen text."""
        self.title = f"CS184: {self.renderer.name()}" if self.renderer else "CS184"
        self.should_close = False
        if self.width > DEFAULT_W:
            self.hdpi = True
        if self.renderer:
            if self.hdpi:
                use_hdpi = getattr(self.renderer, "use_hdpi_render_target", None)
                if use_hdpi is not None:
                    use_hdpi()
            self.renderer.init()
        self.lines = {
            "renderer": OSDLine(-0.95, 0.90, "Renderer", 18, OK_COLOR),
            "framerate": OSDLine(-0.98, -0.96, "Framerate", 14, OK_COLOR),
        }
        self._last_tick = self.clock()
        self.resize_callback(self.width, self.height)

    def start(self) -> None:
        """Run frames until the viewer is closed."""
        self._last_tick = self.clock()
        while not self.should_close:
            self.update()

    def close(self) -> None:
        self.should_close = True

    def update(self) -> None:
        """Draw one frame."""
        if self.renderer:
            self.renderer.render()
        if self.show_info:
            self.draw_info()

    def draw_info(self) -> None:
        """Refresh the frame-rate and renderer lines."""
        now = self.clock()
        if now - self._last_tick >= 1.0:
            line = self.lines["framerate"]
            line.color = WARN_COLOR if self.framecount < 20 else OK_COLOR
            line.text = f"Framerate: {self.framecount} fps"
            self.framecount = 0
            self._last_tick = now
        else:
            self.framecount += 1
        self.lines["renderer"].text = (
            self.renderer.info() if self.renderer else "No input renderer"
        )

    def resize_callback(self, width: int, height: int) -> None:
        self.buffer_w = width
        self.buffer_h = height
        if self.renderer:
            self.renderer.resize(width, height)

    def cursor_callback(self, xpos: float, ypos: float) -> None:
        if not self.renderer:
            return
        if self.hdpi:
            self.renderer.cursor_event(2 * xpos, 2 * ypos)
        else:
            self.renderer.cursor_event(xpos, ypos)

    def scroll_callback(self, xoffset: float, yoffset: float) -> None:
        if self.renderer:
            self.renderer.scroll_event(xoffset, yoffset)

    def mouse_button_callback(self, button: int, action: int, mods: int) -> None:
        if self.renderer:
            self.renderer.mouse_event(button, action, mods)

    def key_callback(self, key: int, action: int, mods: int) -> None:
        if action == PRESS:
            if key == KEY_ESCAPE:
                self.close()
                return
            if key == KEY_GRAVE_ACCENT:
                self.show_info = not self.show_info
        if self.renderer:
            self.renderer.keyboard_event(key, action, mods)