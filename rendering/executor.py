from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, List, Optional, Union

from fractals.base import Fractal, RenderConfig
from rendering.events import ColumnResult, TaskFinished

logger = logging.getLogger(__name__)

Sink = Callable[[Union[ColumnResult, TaskFinished]], None]


class CancelToken:
    def __init__(self) -> None:
        self._flag = threading.Event()
    def cancel(self) -> None:
        self._flag.set()
    def is_cancelled(self) -> bool:
        return self._flag.is_set()


# ---- Column striping ----------------------------------------------------

def column_indices(x_init: int, x_skip: int, width: int) -> range:
    """Columns owned by the strip starting at x_init with stride x_skip."""
    return range(x_init, width, x_skip)


def partition_columns(width: int, n: int) -> List[range]:
    """Splits [0, width) into n interleaved, disjoint strips."""
    return [column_indices(x_init, n, width) for x_init in range(n)]


# ---- Worker ---------------------------------------------------------------

class RenderTask(threading.Thread):
    """
    Computes the strip of columns x_init, x_init + x_skip, ... of one
    generation and pushes each ColumnResult to `sink` as soon as the
    column is complete. Cancellation is observed at column boundaries.
    """

    def __init__(self, generation: int, config: RenderConfig, fractal: Fractal,
                 x_init: int, x_skip: int, sink: Optional[Sink] = None,
                 token: Optional[CancelToken] = None,
                 on_error: Optional[Callable[[RenderTask, BaseException], None]] = None):
        super().__init__(name=f"render-g{generation}-x{x_init}", daemon=True)
        self.generation = generation
        self.config = config
        self.fractal = fractal
        self.x_init = int(x_init)
        self.x_skip = int(x_skip)
        self.sink = sink
        self.token = token or CancelToken()
        self.on_error = on_error

    def stop(self) -> None:
        self.token.cancel()

    def columns(self) -> Iterator[ColumnResult]:
        for px in column_indices(self.x_init, self.x_skip, self.config.width):
            if self.token.is_cancelled():
                return
            line, height_scalar = self.fractal.compute_column(self.config, px)
            yield ColumnResult(self.generation, px, line, height_scalar)

    def run(self) -> None:
        try:
            for result in self.columns():
                self.sink(result)
        except Exception as e:
            logger.exception("Render task %s failed", self.name)
            self.token.cancel()
            if self.on_error is not None:
                self.on_error(self, e)
            return
        if not self.token.is_cancelled():
            self.sink(TaskFinished(self.generation, self.x_init))
