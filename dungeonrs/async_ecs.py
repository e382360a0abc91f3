"""Background tasks attached to entities that feed commands back into the world."""

from __future__ import annotations

import asyncio
import inspect
import queue
from collections.abc import Awaitable, Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from functools import cache
from typing import Any

from dungeonrs.world import App, Schedule, World

Command = Callable[[World], Any]
Sender = queue.Queue
Task = Callable[[Sender], Any]
ErrorHandler = Callable[[Exception, Sender], Any]


class TaskPool(Enum):
    """The pools background tasks are scheduled on."""

    ASYNC_COMPUTE = "async_compute"
    COMPUTE = "compute"
    IO = "io"

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Schedule ``fn(*args)`` on this pool."""
        return _executor(self).submit(fn, *args)


@cache
def _executor(pool: TaskPool) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(thread_name_prefix=f"{pool.value}-pool")


@dataclass
class CommandQueue:
    """An ordered batch of commands to run against a world."""

    commands: list[Command] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.commands)

    def push(self, command: Command) -> None:
        """Add ``command`` to the end of the queue."""
        self.commands.append(command)

    def append(self, other: CommandQueue) -> None:
        """Move every command of ``other`` to the end of this queue, emptying ``other``."""
        self.commands.extend(other.commands)
        other.commands.clear()

    def apply(self, world: World) -> None:
        """Run every command against ``world`` in order, emptying the queue."""
        commands, self.commands = self.commands, []
        for command in commands:
            command(world)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _run(task: Task, handler: ErrorHandler, sender: Sender) -> None:
    try:
        result = task(sender)
        if inspect.isawaitable(result):
            asyncio.run(_await(result))
    except Exception as error:
        handler(error, sender)


@dataclass
class AsyncComponent:
    """A running background task and the channel through which it sends command queues."""

    task: Future
    receiver: Sender

    @staticmethod
    def _spawn(pool: TaskPool, task: Task, handler: ErrorHandler) -> AsyncComponent:
        receiver: Sender = queue.Queue()
        future = pool.submit(_run, task, handler, receiver)
        return AsyncComponent(task=future, receiver=receiver)

    @staticmethod
    def new_async(task: Task, handler: ErrorHandler) -> AsyncComponent:
        """Run ``task`` on the pool for CPU work spanning several frames.

        ``handler`` is called with the error and the sender if ``task`` raises.
        """
        return AsyncComponent._spawn(TaskPool.ASYNC_COMPUTE, task, handler)

    @staticmethod
    def new_compute(task: Task, handler: ErrorHandler) -> AsyncComponent:
        """Run ``task`` on the pool for CPU work needed by the next frame."""
        return AsyncComponent._spawn(TaskPool.COMPUTE, task, handler)

    @staticmethod
    def new_io(task: Task, handler: ErrorHandler) -> AsyncComponent:
        """Run ``task`` on the pool for I/O-bound work."""
        return AsyncComponent._spawn(TaskPool.IO, task, handler)

    def is_finished(self) -> bool:
        """Whether the task, including any error handling, has completed."""
        return self.task.done()

    def _drain(self) -> CommandQueue:
        merged = CommandQueue()
        while True:
            try:
                merged.append(self.receiver.get_nowait())
            except queue.Empty:
                return merged


def report_progress(sender: Sender, event: Any) -> None:
    """Send a command queue that emits ``event`` into the world."""
    command_queue = CommandQueue()
    command_queue.push(lambda world: world.send_event(event))
    sender.put(command_queue)


def handle_async_components(world: World) -> None:
    """Apply commands sent by each task and despawn the entities whose tasks finished.

    An error raised by a task's error handler is raised again here.
    """
    for entity, component in world.query(AsyncComponent):
        finished = component.is_finished()
        pending = component._drain()
        if pending:
            pending.apply(world)
        if finished:
            world.despawn(entity)
            error = component.task.exception()
            if error is not None:
                raise error


class CorePlugin:
    """Registers the system that drives :class:`AsyncComponent` tasks."""

    def build(self, app: App) -> None:
        """Add :func:`handle_async_components` to the fixed post-update schedule."""
        app.add_systems(Schedule.FIXED_POST_UPDATE, handle_async_components)