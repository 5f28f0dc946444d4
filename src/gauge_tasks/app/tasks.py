# standard library
from pathlib import Path

# third parties
from colorama import Style

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration
from gauge_tasks.pipelines.bundle import BundleOutput, BundlePipeline
from gauge_tasks.pipelines.cleaner import CleanReport, clean_artifacts
from gauge_tasks.pipelines.compressor import gzip_file
from gauge_tasks.pipelines.doc import generate_doc
from gauge_tasks.pipelines.e2e_tests import run_e2e_tests
from gauge_tasks.pipelines.lint import run_lint
from gauge_tasks.pipelines.spec_tests import run_spec_tests
from gauge_tasks.pipelines.watcher import SourcesWatcher
from gauge_tasks.scheduler import TaskGraph, TaskRunner

# Gauge tasks utilities
from gauge_tasks.utils import Context

USAGE = "Usage: gauge-tasks <task> [--conf PATH] [--project PATH] [--verbose]"


def help_listing(graph: TaskGraph) -> str:
    lines = [USAGE, "", "Available tasks:"]
    for task in graph.tasks():
        prerequisites = (
            f" [{', '.join(task.prerequisites)}]" if task.prerequisites else ""
        )
        lines.append(
            f"  {Style.BRIGHT}{task.name}{Style.RESET_ALL}{prerequisites}"
            f"  {task.description}"
        )
    return "\n".join(lines)


async def help_task(runner: TaskRunner, context: Context[Configuration]):
    print(help_listing(runner.graph))


async def clean_task(
    runner: TaskRunner, context: Context[Configuration]
) -> CleanReport:
    return await clean_artifacts(paths=context.env.artifact_paths(), context=context)


async def doc_task(runner: TaskRunner, context: Context[Configuration]) -> Path:
    return await generate_doc(config=context.env, context=context)


async def build_task(
    runner: TaskRunner, context: Context[Configuration]
) -> BundleOutput:
    return await BundlePipeline(config=context.env).run(context=context)


async def watch_task(runner: TaskRunner, context: Context[Configuration]):
    config = context.env

    async def rebuild():
        # each change starts a new run chain: 'build' (and 'clean') execute again
        await runner.graph.runner(context=context).run("build")

    watcher = SourcesWatcher(
        root=config.project_dir,
        patterns=config.watch_patterns,
        action=rebuild,
        context=context,
    )
    await watcher.watch()


async def gzip_task(runner: TaskRunner, context: Context[Configuration]) -> Path:
    config = context.env
    return await gzip_file(source=config.path(config.artifacts.minified), context=context)


async def lint_task(runner: TaskRunner, context: Context[Configuration]) -> list[Path]:
    return await run_lint(config=context.env, context=context)


async def spec_tests_task(
    runner: TaskRunner, context: Context[Configuration]
) -> list[str]:
    return await run_spec_tests(config=context.env, context=context)


async def e2e_tests_task(runner: TaskRunner, context: Context[Configuration]):
    await run_e2e_tests(config=context.env, context=context)


async def test_task(runner: TaskRunner, context: Context[Configuration]):
    await runner.run("test:e2e")


def tasks_graph() -> TaskGraph:
    """
    The graph of the tasks exposed by the command line.

    Return:
        The validated graph.
    """
    graph = TaskGraph()
    graph.register("help", action=help_task, description="Display this help")
    graph.register(
        "clean", action=clean_task, description="Remove the build artifacts"
    )
    graph.register("doc", action=doc_task, description="Generate the documentation")
    graph.register(
        "build",
        prerequisites=["clean"],
        action=build_task,
        description="Bundle, transpile & minify the library with its source map",
    )
    graph.register(
        "watch",
        prerequisites=["build"],
        action=watch_task,
        description="Rebuild on sources change",
    )
    graph.register(
        "gzip",
        prerequisites=["build"],
        action=gzip_task,
        description="Compress the minified bundle",
    )
    graph.register("lint", action=lint_task, description="Check the sources style")
    graph.register(
        "test:spec",
        prerequisites=["lint"],
        action=spec_tests_task,
        description="Run the unit tests",
    )
    graph.register(
        "test:e2e",
        action=e2e_tests_task,
        description="Run the end-to-end tests & generate the coverage badge",
    )
    graph.register(
        "test",
        prerequisites=["test:spec"],
        action=test_task,
        description="Run the unit tests, then the end-to-end tests",
    )
    graph.register(
        "default", prerequisites=["help"], description="Same as 'help'"
    )
    graph.validate()
    return graph
