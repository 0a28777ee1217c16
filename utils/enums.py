from enum import Enum, auto

class ShaderMode(Enum):
    BLUE = 0
    WHITE = 1
    HIST = 2      # declared, not implemented
    INTHIST = 3   # declared, not implemented

class RenderStrategy(Enum):
    PARALLEL = auto()
    SEQUENTIAL = auto()

class GenerationState(Enum):
    IDLE = auto()
    DISPATCHING = auto()
    ACTIVE = auto()
    COMPLETING = auto()
    SUPERSEDED = auto()
