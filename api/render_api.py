from typing import Optional

from fractals.base import ViewportState
from coloring.shaders import resolve_shader_mode
from rendering.core import Renderer
from rendering.scheduler import RenderGeneration


class RenderConfigBuilder:
    """
    Builder for configuring render settings.
    """
    def __init__(self, api: 'RenderAPI'):
        self.api = api
        self._iterations: Optional[int] = None
        self._shader = None
        self._parallelism: Optional[int] = None
        self._parallel: Optional[bool] = None
        self._view: Optional[tuple] = None

    def iterations(self, value: int) -> 'RenderConfigBuilder':
        self._iterations = value
        return self

    def shader(self, mode) -> 'RenderConfigBuilder':
        self._shader = mode
        return self

    def parallelism(self, value: int) -> 'RenderConfigBuilder':
        self._parallelism = value
        return self

    def parallel(self, enabled: bool) -> 'RenderConfigBuilder':
        self._parallel = enabled
        return self

    def view(self, scale: float, x_delta: float = 0.0, y_delta: float = 0.0) -> 'RenderConfigBuilder':
        self._view = (scale, x_delta, y_delta)
        return self

    def apply(self) -> ViewportState:
        # Apply settings to the viewport state; nothing renders until render()
        if self._iterations is not None:
            self.api.set_iterations(self._iterations)
        if self._shader is not None:
            self.api.set_shader(self._shader)
        if self._parallelism is not None:
            self.api.set_parallelism(self._parallelism)
        if self._parallel is not None:
            self.api.set_parallel(self._parallel)
        if self._view is not None:
            self.api.set_view(*self._view)
        return self.api.state


class RenderAPI:
    """
    Facade for controlling the viewport and triggering renders.
    Holds the mutable ViewportState; every render() snapshots it.
    """
    def __init__(self, renderer: Renderer, state: Optional[ViewportState] = None):
        self.renderer = renderer
        self.state = state or ViewportState()

    # ---------- Callbacks --------------------------------
    def on_log(self, cb): self.renderer.on_log(cb)

    # ----------- Facade methods --------------------------
    def set_view(self, scale: float, x_delta: float = 0.0, y_delta: float = 0.0) -> None:
        """
        Sets the zoom factor and pan offsets.

        Args:
            scale (float): The zoom factor (1.0 shows the whole set).
            x_delta (float): Horizontal pan offset, in pixels at scale 1.0.
            y_delta (float): Vertical pan offset, in pixels at scale 1.0.
        """
        self.state.scale = scale
        self.state.x_delta = x_delta
        self.state.y_delta = y_delta

    def set_shader(self, mode) -> None:
        """
        Sets the shader mode. Accepts a ShaderMode, its value or its name;
        unknown values fall back to the default shader.
        """
        self.state.shader = resolve_shader_mode(mode)

    def set_iterations(self, iterations: int) -> None:
        self.state.iterations = iterations

    def set_parallelism(self, parallelism: int) -> None:
        self.state.parallelism = parallelism

    def set_parallel(self, enabled: bool) -> None:
        self.state.parallel = bool(enabled)

    def pan(self, dx_px: float, dy_px: float) -> None:
        """
        Moves the view by a drag of (dx_px, dy_px) screen pixels.
        """
        self.state.x_delta += dx_px / self.state.scale
        self.state.y_delta += dy_px / self.state.scale

    def zoom_to(self, px: float, py: float, factor: float = 2.0) -> None:
        """
        Zooms in by `factor` towards screen pixel (px, py).

        The pan shift uses the scale before zooming, so the clicked point
        does not land exactly under the cursor.
        """
        width = self.renderer.surface.get_width()
        height = self.renderer.surface.get_height()
        self.state.x_delta += ((width / 2) - px) / self.state.scale
        self.state.y_delta += ((height / 2) - py) / self.state.scale
        self.state.scale = self.state.scale * factor

    def configure(self) -> RenderConfigBuilder:
        """
        Configures the viewport with a fluent builder pattern.

        Returns:
            RenderConfigBuilder: A builder object for configuring render settings.
        """
        return RenderConfigBuilder(self)

    def render(self) -> RenderGeneration:
        """
        Starts a render of the current viewport state.
        """
        return self.renderer.render(self.state)

    def stop(self) -> None:
        """
        Stops the ongoing rendering process.
        """
        self.renderer.stop()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.renderer.wait(timeout)

    def close(self) -> None:
        self.renderer.close()
