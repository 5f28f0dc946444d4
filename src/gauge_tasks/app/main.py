# standard library
import asyncio
import sys

# typing
from typing import Optional

# third parties
from colorama import Fore, Style, just_fix_windows_console

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration, configuration_from_json
from gauge_tasks.app.main_args import MainArguments, parse_main_arguments
from gauge_tasks.app.tasks import help_listing, tasks_graph
from gauge_tasks.scheduler import TaskGraph

# Gauge tasks utilities
from gauge_tasks.utils import (
    BundleStageError,
    ConfigurationError,
    ConsoleContextReporter,
    ContextFactory,
    CoverageReportFormatError,
    TaskFailure,
    TaskGraphError,
)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_UNKNOWN_TASK = 2


def print_failure(error: Exception):
    print(f"{Fore.LIGHTRED_EX}{error}{Style.RESET_ALL}", file=sys.stderr)


async def run_task(
    task: str, graph: TaskGraph, config: Configuration, verbose: bool = False
) -> int:
    """
    Run a task and its prerequisites in a new run chain.

    Return:
        The exit code of the process.
    """
    context = ContextFactory.get_instance(
        env=config,
        reporters=[ConsoleContextReporter(verbose=verbose)],
        with_attributes={"command": task},
    )
    try:
        await graph.runner(context=context).run(task)
    except (
        TaskFailure, TaskGraphError, BundleStageError, CoverageReportFormatError
    ) as e:
        print_failure(e)
        return EXIT_FAILURE
    return EXIT_SUCCESS


def execute(args: MainArguments) -> int:
    try:
        graph = tasks_graph()
        config = configuration_from_json(
            path=args.config_path, project_dir=args.project_dir
        )
    except (TaskGraphError, ConfigurationError) as e:
        print_failure(e)
        return EXIT_FAILURE

    if args.task not in graph:
        print_failure(TaskGraphError(f"Unknown task '{args.task}'"))
        print(help_listing(graph))
        return EXIT_UNKNOWN_TASK

    return asyncio.run(
        run_task(task=args.task, graph=graph, config=config, verbose=args.verbose)
    )


def main(argv: Optional[list[str]] = None):
    just_fix_windows_console()
    sys.exit(execute(parse_main_arguments(argv)))


if __name__ == "__main__":
    main()
