# standard library
import asyncio

# typing
from typing import Any

# Gauge tasks utilities
from gauge_tasks.utils import (
    CircularDependencies,
    Context,
    DuplicateTaskError,
    Label,
    TaskNotFoundError,
)

# relative
from .models import Task, TaskAction


class TaskGraph:
    """
    Explicit directed acyclic graph of [Task](@yw-nav-class:Task), built at start-up.

    Tasks are registered once, the graph is then [validated](@yw-nav-meth:TaskGraph.validate) before any
    execution: unknown prerequisites and cycles are reported up-front.

    **Example**

    ```python
    graph = TaskGraph()
    graph.register("clean", action=clean_task)
    graph.register("build", prerequisites=["clean"], action=build_task)
    await graph.runner(context).run("build")
    ```
    """

    def __init__(self):
        self._tasks: dict[str, Task] = {}

    def register(
        self,
        name: str,
        prerequisites: list[str] | None = None,
        action: TaskAction | None = None,
        description: str = "",
        override: bool = False,
    ) -> Task:
        """
        Register a task.

        Parameters:
            name: name of the task
            prerequisites: ordered names of the tasks to complete before `action` starts
            action: the action of the task
            description: text displayed by the `help` task
            override: if `True`, replace an eventual task already registered with the same name
                (last registration wins), otherwise a duplicated name raises `DuplicateTaskError`

        Return:
            The registered task.
        """
        if name in self._tasks and not override:
            raise DuplicateTaskError(task=name)

        task = Task(
            name=name,
            prerequisites=prerequisites or [],
            action=action,
            description=description,
        )
        self._tasks[name] = task
        return task

    def get(self, name: str) -> Task:
        if name not in self._tasks:
            raise TaskNotFoundError(task=name)
        return self._tasks[name]

    def tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def __contains__(self, name: str):
        return name in self._tasks

    def validate(self):
        """
        Check that all prerequisites are registered and that the graph does not include cycles.
        """
        for task in self._tasks.values():
            for prerequisite in task.prerequisites:
                if prerequisite not in self._tasks:
                    raise TaskNotFoundError(task=prerequisite, referenced_by=task.name)

        done: set[str] = set()

        def visit(name: str, path: list[str]):
            if name in path:
                raise CircularDependencies(cycle=[*path[path.index(name) :], name])
            if name in done:
                return
            for prerequisite in self._tasks[name].prerequisites:
                visit(prerequisite, [*path, name])
            done.add(name)

        for task_name in self._tasks:
            visit(task_name, [])

    def execution_order(self, name: str) -> list[str]:
        """
        Return the order in which the tasks are executed when running `name` (prerequisites first).
        """
        self.validate()
        order: list[str] = []

        def visit(current: str):
            if current in order:
                return
            for prerequisite in self.get(current).prerequisites:
                visit(prerequisite)
            order.append(current)

        visit(name)
        return order

    def runner(self, context: Context) -> "TaskRunner":
        self.validate()
        return TaskRunner(graph=self, context=context)


class TaskRunner:
    """
    A run chain over a [TaskGraph](@yw-nav-class:TaskGraph): within a runner, each task executes at most once,
    even if requested multiple times concurrently.
    """

    def __init__(self, graph: TaskGraph, context: Context):
        self.graph = graph
        self.context = context
        self.completed: list[str] = []
        self._executions: dict[str, asyncio.Future] = {}

    async def run(self, name: str) -> Any:
        """
        Run a task after its prerequisites (recursively); a task already started or finished within this
        runner is not executed again, its outcome is shared.

        Parameters:
            name: name of the task.

        Return:
            The value returned by the task's action.
        """
        task = self.graph.get(name)
        if name in self._executions:
            return await self._executions[name]

        execution = asyncio.get_running_loop().create_future()
        self._executions[name] = execution
        try:
            result = await self.__execute(task)
        except Exception as e:
            execution.set_exception(e)
            # mark as retrieved: the exception is re-raised to the current caller
            execution.exception()
            raise
        except BaseException:
            execution.cancel()
            raise
        execution.set_result(result)
        return result

    async def __execute(self, task: Task) -> Any:
        for prerequisite in task.prerequisites:
            await self.run(prerequisite)

        async with self.context.start(
            action=task.name,
            with_labels=[Label.TASK],
            with_attributes={"task": task.name},
        ) as ctx:
            result = (
                await task.action(runner=self, context=ctx) if task.action else None
            )
        self.completed.append(task.name)
        return result
