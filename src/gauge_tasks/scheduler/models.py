# standard library
from collections.abc import Awaitable, Callable

# typing
from typing import Any

# third parties
from pydantic import BaseModel, ConfigDict

TaskAction = Callable[..., Awaitable[Any]]
"""
Action of a [Task](@yw-nav-class:Task), called with keyword arguments:

*  runner : the [TaskRunner](@yw-nav-class:TaskRunner) executing the task, used to chain another task
   (e.g. `test` > `test:e2e`)
*  context : the execution [Context](@yw-nav-class:Context) of the task
"""


class Task(BaseModel):
    """
    A named unit of work with explicit prerequisites.

    **Example**

    ```python
    Task(name="gzip", prerequisites=["build"], action=gzip_task, description="Runs gzipping for minified file.")
    ```
    """

    model_config = ConfigDict(frozen=True)

    name: str
    """
    Name of the task, used from the command line.
    """

    prerequisites: list[str] = []
    """
    Ordered list of the tasks' name that needs to complete before the action starts.
    """

    action: TaskAction | None = None
    """
    Action of the task, `None` for pure aggregation of prerequisites (e.g. `default`).
    """

    description: str = ""
    """
    Description displayed by the `help` task.
    """
