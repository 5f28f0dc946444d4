# typing
from typing import Any


class TaskFailure(RuntimeError):
    """
    Base class for the failures of a task: the task's dependents are not executed, the host process
    is not crashed.
    """

    def __init__(self, task: str, reason: str, detail: Any = None):
        self.task = task
        self.reason = reason
        self.detail = detail
        super().__init__(f"Task '{task}' failed: {reason}")


class GateFailure(TaskFailure):
    """
    Failure of a quality gate (lint, unit tests), it blocks the execution of all the dependents.
    """


class TaskGraphError(RuntimeError):
    """
    Base class for errors found while building or validating a task graph.
    """


class TaskNotFoundError(TaskGraphError):
    def __init__(self, task: str, referenced_by: str | None = None):
        self.task = task
        self.referenced_by = referenced_by
        suffix = f" (prerequisite of '{referenced_by}')" if referenced_by else ""
        super().__init__(f"Task '{task}' is not registered{suffix}")


class DuplicateTaskError(TaskGraphError):
    def __init__(self, task: str):
        self.task = task
        super().__init__(
            f"Task '{task}' is already registered, use 'override=True' to replace it"
        )


class CircularDependencies(TaskGraphError):
    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Circular dependencies between tasks: {' > '.join(cycle)}")


class BundleStageError(RuntimeError):
    """
    A fatal error raised by a stage of the bundle pipeline (e.g. minification of a disallowed syntax).
    """

    def __init__(self, stage: str, error: Exception):
        self.stage = stage
        self.error = error
        super().__init__(f"Bundle stage '{stage}' failed: {error}")


class CoverageReportFormatError(ValueError):
    """
    The coverage report does not have the expected layout (summary line with
    '<label> : <percentage> (<covered>/<total>)').
    """

    def __init__(self, line: str | None, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Unexpected coverage report format ({reason}): {line!r}")


class ConfigurationError(RuntimeError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Can not load configuration '{path}': {reason}")
