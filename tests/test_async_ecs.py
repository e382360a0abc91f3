import queue
import time
from dataclasses import dataclass

import pytest

from dungeonrs.async_ecs import (
    AsyncComponent,
    CommandQueue,
    CorePlugin,
    TaskPool,
    handle_async_components,
    report_progress,
)
from dungeonrs.world import App, World


@dataclass
class FooComponent:
    bar: str


@dataclass
class FooEvent:
    bar: str


def _wait_for_tasks(world, timeout=5.0):
    deadline = time.monotonic() + timeout
    while any(not c.is_finished() for _, c in world.query(AsyncComponent)):
        if time.monotonic() > deadline:
            raise AssertionError("tasks did not finish in time")
        time.sleep(0.01)


def advance_world(app):
    app.update()
    _wait_for_tasks(app.world)
    app.update()


def _should_not_fail(error, sender):
    raise AssertionError(f"Should not fail: {error}")


def _spawning_task(value):
    async def task(sender):
        command_queue = CommandQueue()
        command_queue.push(lambda world: world.spawn(FooComponent(value)))
        sender.put(command_queue)

    return task


@pytest.mark.parametrize(
    ("constructor", "value"),
    [
        (AsyncComponent.new_async, "baz"),
        (AsyncComponent.new_compute, "bazz"),
        (AsyncComponent.new_io, "bazzz"),
    ],
)
def test_spawn_runs_task_and_removes_component(constructor, value):
    app = App()
    app.add_plugins(CorePlugin)
    app.world.spawn(constructor(_spawning_task(value), _should_not_fail))

    advance_world(app)

    foos = [foo for _, foo in app.world.query(FooComponent)]
    assert len(foos) == 1
    assert foos[0].bar == value
    assert list(app.world.query(AsyncComponent)) == []


def test_calls_error_handler_on_failure():
    app = App()
    app.add_plugins(CorePlugin)

    async def failing(sender):
        raise RuntimeError("this went wrong")

    def handler(error, sender):
        command_queue = CommandQueue()
        command_queue.push(lambda world: world.send_event(FooEvent(str(error))))
        sender.put(command_queue)

    app.world.spawn(AsyncComponent.new_async(failing, handler))
    advance_world(app)

    assert list(app.world.query(AsyncComponent)) == []
    events = list(app.world.read_events(FooEvent))
    assert len(events) == 1
    assert events[0].bar.startswith("this went wrong")


def test_synchronous_task_is_supported():
    world = World()

    def task(sender):
        report_progress(sender, FooEvent("sync"))

    world.spawn(AsyncComponent.new_io(task, _should_not_fail))
    _wait_for_tasks(world)
    handle_async_components(world)

    assert [event.bar for event in world.read_events(FooEvent)] == ["sync"]


def test_handler_error_is_raised_when_polled():
    world = World()

    async def failing(sender):
        raise ValueError("boom")

    world.spawn(AsyncComponent.new_async(failing, _should_not_fail))
    _wait_for_tasks(world)

    with pytest.raises(AssertionError, match="Should not fail"):
        handle_async_components(world)
    assert list(world.query(AsyncComponent)) == []


def test_report_progress_sends_event_queue():
    sender = queue.Queue()
    report_progress(sender, FooEvent("progress"))

    command_queue = sender.get_nowait()
    assert len(command_queue) == 1
    world = World()
    command_queue.apply(world)
    assert [event.bar for event in world.read_events(FooEvent)] == ["progress"]
    assert len(command_queue) == 0


def test_command_queue_append_moves_commands_in_order():
    calls = []
    first = CommandQueue()
    first.push(lambda world: calls.append(1))
    second = CommandQueue()
    second.push(lambda world: calls.append(2))
    second.push(lambda world: calls.append(3))

    first.append(second)

    assert len(first) == 3
    assert len(second) == 0
    first.apply(World())
    assert calls == [1, 2, 3]


def test_task_pool_submit_returns_result():
    future = TaskPool.COMPUTE.submit(lambda a, b: a + b, 2, 3)
    assert future.result(timeout=5) == 5


def test_unfinished_component_stays_until_done():
    world = World()
    release = queue.Queue()

    def task(sender):
        report_progress(sender, FooEvent("early"))
        release.get(timeout=5)

    entity = world.spawn(AsyncComponent.new_io(task, _should_not_fail))
    deadline = time.monotonic() + 5
    component = world.get(entity, AsyncComponent)
    while component.receiver.empty():
        assert time.monotonic() < deadline
        time.sleep(0.01)

    handle_async_components(world)
    assert world.has(entity, AsyncComponent)
    assert [event.bar for event in world.read_events(FooEvent)] == ["early"]

    release.put(None)
    _wait_for_tasks(world)
    handle_async_components(world)
    assert not world.has(entity, AsyncComponent)