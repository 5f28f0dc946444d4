# standard library
from abc import ABC, abstractmethod
from enum import Enum

# typing
from typing import Any, NamedTuple, Union

# third parties
from pydantic import BaseModel

# relative
from ..types import JSON

JsonLike = Union[JSON, BaseModel]
"""
Data attached to a log, pydantic models are serialized.
"""

StringLike = Any
"""
Anything with a meaningful `str` conversion, e.g. a [Label](@yw-nav-class:Label).
"""

TContextAttr = int | str | bool


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Label(Enum):
    """
    Labels attached to the log entries, used by the reporters to format them.
    """

    STARTED = "STARTED"
    DONE = "DONE"
    EXCEPTION = "EXCEPTION"
    FAILED = "FAILED"
    LOG_DEBUG = "LOG_DEBUG"
    LOG_INFO = "LOG_INFO"
    LOG_WARNING = "LOG_WARNING"
    LOG_ERROR = "LOG_ERROR"
    TASK = "TASK"
    """
    Scope of a task executed by the [TaskRunner](@yw-nav-class:TaskRunner).
    """
    BANNER = "BANNER"
    """
    Headline of a long-running step.
    """
    BASH = "BASH"
    STD_OUTPUT = "STD_OUTPUT"
    """
    A line printed by an external command.
    """

    def __str__(self):
        return self.value


class LogEntry(NamedTuple):
    """
    A log emitted by a [Context](@yw-nav-class:Context).
    """

    level: LogLevel
    text: str
    data: JSON
    labels: list[str]
    attributes: dict[str, TContextAttr]
    context_id: str
    parent_context_id: str | None
    trace_uid: str | None
    timestamp: float
    """
    Seconds since epoch.
    """


class ContextReporter(ABC):
    """
    Destination of the logs (terminal, memory).
    """

    @abstractmethod
    async def log(self, entry: LogEntry):
        return NotImplemented
