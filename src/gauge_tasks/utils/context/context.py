# future
from __future__ import annotations

# standard library
import asyncio
import functools
import time
import traceback
import uuid

from dataclasses import dataclass, field
from types import TracebackType

# typing
from typing import Generic, TypeVar

# relative
from ..utils import to_json
from .models import (
    ContextReporter,
    JsonLike,
    Label,
    LogEntry,
    LogLevel,
    StringLike,
    TContextAttr,
)

T = TypeVar("T")
"""
Type of [env](@yw-nav-attr:Context.env), for the tasks runner the
[Configuration](@yw-nav-class:Configuration).
"""

LEVEL_LABELS = {
    LogLevel.DEBUG: Label.LOG_DEBUG,
    LogLevel.INFO: Label.LOG_INFO,
    LogLevel.WARNING: Label.LOG_WARNING,
    LogLevel.ERROR: Label.LOG_ERROR,
}


@dataclass(frozen=True)
class Context(Generic[T]):
    """
    Traces the execution flow of the tasks and forwards logs to the reporters.

    A context is immutable: [start](@yw-nav-meth:Context.start) creates a child bound to a scope,
    labels and attributes are inherited by the children.
    """

    env: T | None = None
    """
    Static data shared by the root context and all its children.
    """

    logs_reporters: list[ContextReporter] = field(default_factory=list)

    uid: str = "root"

    parent_uid: str | None = None

    trace_uid: str | None = None
    """
    UID of the root context.
    """

    with_attributes: dict[str, TContextAttr] = field(default_factory=dict)
    """
    Attributes forwarded to the children, e.g. the name of the task.
    """

    with_labels: list[str] = field(default_factory=list)
    """
    Labels forwarded to the children, e.g. `TASK`.
    """

    def start(
        self,
        action: str,
        with_labels: list[StringLike] | None = None,
        with_attributes: dict[str, TContextAttr] | None = None,
    ) -> ScopedContext[T]:
        """
        Start a child context bound to a scope.

        **Example:**

        ```python
        async def gzip_file(source: Path, context: Context):
            async with context.start(
                action="gzip_file", with_attributes={"file": source.name}
            ) as ctx:
                await ctx.info(text=f"{source.name} compressed")
        ```

        Parameters:
            action: title of the scope
            with_labels: labels added to the child and its own children
            with_attributes: attributes added to the child and its own children

        Return:
            The child context.
        """
        return ScopedContext[T](
            action=action,
            env=self.env,
            logs_reporters=self.logs_reporters,
            uid=str(uuid.uuid4()),
            parent_uid=self.uid,
            trace_uid=self.trace_uid or self.uid,
            with_labels=[*self.with_labels, *[str(lb) for lb in with_labels or []]],
            with_attributes={**self.with_attributes, **(with_attributes or {})},
        )

    async def log(
        self,
        level: LogLevel,
        text: str,
        labels: list[StringLike] | None = None,
        data: JsonLike | None = None,
    ):
        if not self.logs_reporters:
            return

        entry = LogEntry(
            level=level,
            text=text,
            data=to_json(data) if data else {},
            labels=[
                str(label)
                for label in [*self.with_labels, LEVEL_LABELS[level], *(labels or [])]
            ],
            attributes=self.with_attributes,
            context_id=self.uid,
            parent_context_id=self.parent_uid,
            trace_uid=self.trace_uid,
            timestamp=time.time(),
        )
        await asyncio.gather(*[reporter.log(entry) for reporter in self.logs_reporters])

    async def debug(self, text: str, data: JsonLike | None = None):
        await self.log(level=LogLevel.DEBUG, text=text, data=data)

    async def info(
        self,
        text: str,
        labels: list[StringLike] | None = None,
        data: JsonLike | None = None,
    ):
        await self.log(level=LogLevel.INFO, text=text, labels=labels, data=data)

    async def banner(self, text: str):
        """
        Log a headline announcing a long-running step (e.g. 'Starting unit tests...').
        """
        await self.log(level=LogLevel.INFO, text=text, labels=[Label.BANNER])

    async def warning(self, text: str, data: JsonLike | None = None):
        await self.log(level=LogLevel.WARNING, text=text, data=data)

    async def error(
        self,
        text: str,
        labels: list[StringLike] | None = None,
        data: JsonLike | None = None,
    ):
        await self.log(level=LogLevel.ERROR, text=text, labels=labels, data=data)

    async def failed(self, text: str, data: JsonLike | None = None):
        """
        Log an unrecoverable failure that is not reported with an exception (e.g. before exiting the process).
        """
        await self.log(
            level=LogLevel.ERROR, text=text, labels=[Label.FAILED], data=data
        )


@dataclass(frozen=True)
class ScopedContext(Context[T]):
    """
    A context bound to an `async with` block, created by [start](@yw-nav-meth:Context.start).

    Entering the block logs `STARTED`, leaving it logs `DONE` with the elapsed time. An exception escaping the
    block is logged with its traceback (labels `EXCEPTION` & `FAILED`) then re-raised.
    `SystemExit` and cancellation go through without being reported.
    """

    action: str = ""

    @functools.cached_property
    def start_time(self) -> float:
        return time.time()

    async def __aenter__(self):
        await self.info(text=self.action, labels=[Label.STARTED])
        _ = self.start_time
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ):
        if isinstance(exc, Exception):
            await self.error(
                text=f"Exception: {exc}",
                labels=[Label.EXCEPTION, Label.FAILED],
                data={
                    "type": exc.__class__.__name__,
                    "traceback": traceback.format_exception(exc_type, exc, tb),
                },
            )
        elif exc is None:
            elapsed = int(1000 * (time.time() - self.start_time))
            await self.info(text=f"{self.action} in {elapsed} ms", labels=[Label.DONE])
        return False


class ContextFactory:
    """
    Factory of root contexts.
    """

    @staticmethod
    def get_instance(
        env: T | None = None,
        reporters: list[ContextReporter] | None = None,
        with_labels: list[str] | None = None,
        with_attributes: dict[str, TContextAttr] | None = None,
    ) -> Context[T]:
        return Context(
            env=env,
            logs_reporters=reporters or [],
            with_labels=with_labels or [],
            with_attributes=with_attributes or {},
        )
