from dataclasses import dataclass
import numpy as np
from typing import Optional

@dataclass(frozen=True)
class ColumnResult:
    generation: int     # render generation the column belongs to
    px: int
    line: np.ndarray    # per-row intensities, read-only, length = height
    height_scalar: float

@dataclass(frozen=True)
class TaskFinished:
    generation: int
    x_init: int

@dataclass(frozen=True)
class LogEvent:
    message: str
    level: Optional[str]
