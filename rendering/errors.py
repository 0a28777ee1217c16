class RenderError(Exception):
    """Base class for rendering core errors."""


class ConfigurationError(RenderError, ValueError):
    """A render was requested with an invalid configuration."""


class UnsupportedShaderModeError(RenderError):
    """The shader mode is known but has no implementation."""

    def __init__(self, mode):
        super().__init__(f"Shader mode {mode.name} is not supported")
        self.mode = mode


class WorkerSpawnError(RenderError):
    """Parallel render workers could not be started."""
