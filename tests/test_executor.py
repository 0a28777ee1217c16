import random

import pytest

from rendering.events import ColumnResult, TaskFinished
from rendering.executor import CancelToken, RenderTask, column_indices, partition_columns


def test_partition_covers_every_column_once():
    rng = random.Random(20160301)
    for _ in range(300):
        n = rng.randint(1, 16)
        width = rng.randint(1, 500)
        owned = [px for strip in partition_columns(width, n) for px in strip]
        assert sorted(owned) == list(range(width))
        assert len(owned) == len(set(owned))


def test_strip_is_arithmetic_progression():
    for width in range(1, 40):
        for n in range(1, 8):
            for x_init, strip in enumerate(partition_columns(width, n)):
                cols = list(strip)
                assert cols == list(column_indices(x_init, n, width))
                assert all(b - a == n for a, b in zip(cols, cols[1:]))
                if cols:
                    assert cols[0] == x_init
                    assert cols[-1] < width <= cols[-1] + n


def test_task_emits_columns_in_order_then_finishes(stub_fractal, small_config):
    fractal = stub_fractal()
    out = []
    task = RenderTask(3, small_config, fractal, x_init=1, x_skip=3, sink=out.append)
    task.start()
    task.join(5.0)
    assert [m.px for m in out[:-1]] == [1, 4, 7]
    assert all(isinstance(m, ColumnResult) and m.generation == 3 for m in out[:-1])
    assert out[-1] == TaskFinished(3, 1)


def test_columns_generator_is_lazy(stub_fractal, small_config):
    fractal = stub_fractal()
    task = RenderTask(1, small_config, fractal, x_init=0, x_skip=1)
    it = task.columns()
    assert fractal.calls == []
    first = next(it)
    assert first.px == 0
    assert fractal.calls == [(small_config.iterations, 0)]


def test_cancelled_task_stops_after_in_flight_column(stub_fractal, small_config):
    fractal = stub_fractal()
    token = CancelToken()
    out = []

    def sink(msg):
        out.append(msg)
        if isinstance(msg, ColumnResult) and msg.px == 2:
            token.cancel()

    task = RenderTask(1, small_config, fractal, 0, 1, sink=sink, token=token)
    task.run()
    assert [m.px for m in out] == [0, 1, 2]
    assert not any(isinstance(m, TaskFinished) for m in out)


def test_task_error_is_reported_and_cancels(small_config):
    class Broken:
        def compute_column(self, config, px):
            raise ArithmeticError("boom")

    errors = []
    out = []
    task = RenderTask(1, small_config, Broken(), 0, 1, sink=out.append,
                      on_error=lambda t, e: errors.append(e))
    task.run()
    assert out == []
    assert isinstance(errors[0], ArithmeticError)
    assert task.token.is_cancelled()


def test_task_with_no_columns_finishes_immediately(stub_fractal, small_config):
    out = []
    task = RenderTask(2, small_config, stub_fractal(), x_init=9, x_skip=10, sink=out.append)
    task.run()
    assert out == [TaskFinished(2, 9)]
