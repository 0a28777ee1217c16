from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from coloring.shaders import get_shader, resolve_shader_mode
from fractals.base import Fractal, RenderConfig, ViewportState
from rendering.compositor import Compositor, PositionFlushPolicy, TimedFlushPolicy
from rendering.errors import WorkerSpawnError
from rendering.events import ColumnResult, TaskFinished, LogEvent
from rendering.executor import CancelToken, RenderTask, partition_columns
from rendering.surface import DisplaySurface
from utils.enums import GenerationState, RenderStrategy

logger = logging.getLogger(__name__)

_SHUTDOWN = object()


class RenderGeneration:
    """One render() invocation: its config, tasks and lifecycle state."""

    def __init__(self, gen_id: int, config: RenderConfig, strategy: RenderStrategy):
        self.id = gen_id
        self.config = config
        self.strategy = strategy
        self.state = GenerationState.DISPATCHING
        self.token = CancelToken()
        self.tasks: List[RenderTask] = []
        self.task_states: Dict[int, GenerationState] = {}
        self.done = threading.Event()
        self.start_time = time.perf_counter()
        self.elapsed: Optional[float] = None

    @property
    def n_tasks(self) -> int:
        return len(self.task_states)

    def cancel(self) -> None:
        self.token.cancel()
        for task in self.tasks:
            task.stop()


class RenderScheduler:
    """
    Owns the current render generation.

    render() snapshots the viewport into a RenderConfig, supersedes the
    running generation, resets the compositor and dispatches N column
    strips on worker threads. Workers feed a single queue drained by one
    consumer thread, which is the only path into the compositor for
    parallel output. When threads cannot be started, the generation is
    re-dispatched as a single strip on the caller's thread.
    """

    def __init__(self, surface: DisplaySurface, fractal: Fractal,
                 compositor: Optional[Compositor] = None,
                 flush_interval: float = 0.05,
                 task_factory: Callable[..., RenderTask] = RenderTask) -> None:
        self.surface = surface
        self.fractal = fractal
        self.compositor = compositor or Compositor(surface)
        self.flush_interval = float(flush_interval)
        self.task_factory = task_factory

        self._queue: "queue.Queue" = queue.Queue()
        self._consumer: Optional[threading.Thread] = None
        self._lock = threading.RLock()
        self._gen_seq = 0
        self._active: Optional[RenderGeneration] = None
        self._live_tasks: List[RenderTask] = []
        self.state = GenerationState.IDLE

        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    @property
    def generation(self) -> Optional[RenderGeneration]:
        return self._active

    def render(self, viewport: ViewportState) -> RenderGeneration:
        # Validation happens before the running generation is touched.
        width, height = self.surface.get_width(), self.surface.get_height()
        shader = resolve_shader_mode(viewport.shader)
        get_shader(shader)
        parallel = bool(viewport.parallel)
        config = RenderConfig.from_state(viewport, width, height, shader=shader)
        if not parallel:
            config = _sequential(config)

        with self._lock:
            self._supersede()
            gen = self._begin(config, RenderStrategy.PARALLEL if parallel else RenderStrategy.SEQUENTIAL)
            if parallel:
                try:
                    self._dispatch_parallel(gen)
                    return gen
                except WorkerSpawnError as e:
                    logger.warning("Parallel render unavailable (%s); rendering sequentially", e)
                    self._emit_log(f"Parallel render unavailable ({e}); rendering sequentially", "warning")
                    self._supersede()
                    gen = self._begin(_sequential(config), RenderStrategy.SEQUENTIAL)

        self._run_sequential(gen)
        return gen

    def stop(self) -> None:
        with self._lock:
            gen = self._active
            if gen is not None and gen.state is not GenerationState.IDLE:
                self._supersede()
                self.compositor.retire()
            self.state = GenerationState.IDLE

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Blocks until the active generation completes. False on timeout or supersession."""
        gen = self._active
        if gen is None:
            return True
        return gen.done.wait(timeout) and gen.state is GenerationState.IDLE

    def shutdown(self, timeout: float = 1.0) -> None:
        """Stops rendering, joins every worker still running, then the consumer."""
        self.stop()
        with self._lock:
            tasks, self._live_tasks = self._live_tasks, []
        for task in tasks:
            task.stop()
        for task in tasks:
            if task.is_alive():
                task.join(timeout)
            if task.is_alive():
                logger.warning("Render task %s still running after shutdown", task.name)
        consumer = self._consumer
        if consumer is not None and consumer.is_alive():
            self._queue.put(_SHUTDOWN)
            consumer.join(timeout)
        self._consumer = None

    # ---------------------------------------------------------------------
    # Generation lifecycle
    # ---------------------------------------------------------------------

    def _supersede(self) -> None:
        gen = self._active
        if gen is not None and gen.state in (GenerationState.DISPATCHING,
                                             GenerationState.ACTIVE):
            gen.state = GenerationState.SUPERSEDED
            gen.cancel()
            gen.done.set()
            logger.debug("Generation %d superseded", gen.id)

    def _begin(self, config: RenderConfig, strategy: RenderStrategy) -> RenderGeneration:
        self._gen_seq += 1
        gen = RenderGeneration(self._gen_seq, config, strategy)
        if strategy is RenderStrategy.PARALLEL:
            policy = PositionFlushPolicy(config.width, config.parallelism)
        else:
            policy = TimedFlushPolicy(self.flush_interval, self.flush_interval)
        self.compositor.begin(gen.id, config, policy)
        self._active = gen
        self.state = GenerationState.DISPATCHING
        logger.debug("Generation %d: %dx%d, %d iterations, %d strip(s), %s",
                     gen.id, config.width, config.height, config.iterations,
                     config.parallelism, strategy.name)
        return gen

    def _dispatch_parallel(self, gen: RenderGeneration) -> None:
        self._ensure_consumer()
        n = gen.config.parallelism
        self._live_tasks = [t for t in self._live_tasks if t.is_alive()]
        for x_init, strip in enumerate(partition_columns(gen.config.width, n)):
            task = self.task_factory(gen.id, gen.config, self.fractal, strip.start, strip.step,
                                     sink=self._queue.put, token=gen.token,
                                     on_error=self._on_task_error)
            gen.tasks.append(task)
            gen.task_states[x_init] = GenerationState.ACTIVE
        self._live_tasks.extend(gen.tasks)
        gen.state = GenerationState.ACTIVE
        self.state = GenerationState.ACTIVE
        for task in gen.tasks:
            try:
                task.start()
            except RuntimeError as e:
                raise WorkerSpawnError(f"could not start {task.name}: {e}") from e

    def _run_sequential(self, gen: RenderGeneration) -> None:
        task = self.task_factory(gen.id, gen.config, self.fractal, 0, 1,
                                 token=gen.token)
        gen.tasks.append(task)
        gen.task_states[0] = GenerationState.ACTIVE
        with self._lock:
            if gen.state is GenerationState.DISPATCHING:
                gen.state = GenerationState.ACTIVE
                self.state = GenerationState.ACTIVE
        try:
            for result in task.columns():
                self.compositor.consume(result)
        except Exception:
            logger.exception("Sequential render of generation %d failed", gen.id)
            with self._lock:
                if self._active is gen:
                    self.stop()
            raise
        if not gen.token.is_cancelled():
            self._on_task_finished(TaskFinished(gen.id, 0))

    def _on_task_finished(self, msg: TaskFinished) -> None:
        with self._lock:
            gen = self._active
            if gen is None or msg.generation != gen.id or gen.state is not GenerationState.ACTIVE:
                return
            gen.task_states[msg.x_init] = GenerationState.COMPLETING
            if any(s is not GenerationState.COMPLETING for s in gen.task_states.values()):
                self.state = GenerationState.COMPLETING
                return
            gen.elapsed = time.perf_counter() - gen.start_time
            gen.state = GenerationState.IDLE
            self.state = GenerationState.IDLE
        # the surface may call back into render(); no scheduler lock held here
        self.compositor.finish(gen.id)
        gen.done.set()
        logger.info("Generation %d rendered in %.3fs (%d strip(s))", gen.id, gen.elapsed, gen.n_tasks)
        self._emit_log(f"Render time: {round(gen.elapsed, 3)}s", None)

    def _on_task_error(self, task: RenderTask, error: BaseException) -> None:
        with self._lock:
            gen = self._active
            if gen is not None and gen.id == task.generation:
                self._supersede()
                self.compositor.retire()
                self.state = GenerationState.IDLE
        self._emit_log(f"[RenderScheduler] {task.name} failed: {error}", "error")

    # ---------------------------------------------------------------------
    # Consumer
    # ---------------------------------------------------------------------

    def _ensure_consumer(self) -> None:
        if self._consumer is not None and self._consumer.is_alive():
            return
        consumer = threading.Thread(target=self._consume_loop,
                                    name="render-compositor", daemon=True)
        try:
            consumer.start()
        except RuntimeError as e:
            raise WorkerSpawnError(f"could not start compositor thread: {e}") from e
        self._consumer = consumer

    def _consume_loop(self) -> None:
        while True:
            msg = self._queue.get()
            if msg is _SHUTDOWN:
                return
            try:
                if isinstance(msg, ColumnResult):
                    self.compositor.consume(msg)
                elif isinstance(msg, TaskFinished):
                    self._on_task_finished(msg)
            except Exception:
                logger.exception("Compositor failed on %r", type(msg).__name__)

    def _emit_log(self, message: str, level: Optional[str]) -> None:
        if self.on_log:
            self.on_log(LogEvent(message, level=level))


def _sequential(config: RenderConfig) -> RenderConfig:
    return replace(config, parallelism=1)
