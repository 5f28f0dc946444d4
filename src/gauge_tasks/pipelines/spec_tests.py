# standard library
import asyncio

from asyncio.subprocess import Process
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration

# Gauge tasks utilities
from gauge_tasks.utils import (
    Context,
    GateFailure,
    Label,
    collect_outputs,
    start_shell_cmd,
)

STOP_TIMEOUT = 5.0


async def stop_process(process: Process, context: Context):
    """
    Stop a process: terminate it if still running (kill if it does not comply), then wait for it.
    """
    if process.returncode is None:
        await context.info(text=f"Stopping test server (pid {process.pid})")
        process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=STOP_TIMEOUT)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
    await context.info(
        text="Test server stopped", data={"returnCode": process.returncode}
    )


@asynccontextmanager
async def karma_server(
    config: Configuration, context: Context
) -> AsyncIterator[Process]:
    """
    Start the headless test runner (single run) from its configuration file.

    The server is bound to the scope: it is stopped on every exit path, including failures.
    """
    cmd = (
        f"{config.commands.karma} start {config.path(config.karma_config)} --single-run"
    )
    async with context.start(
        action="karma_server", with_labels=[Label.BASH]
    ) as ctx:
        await ctx.info(text=cmd)
        process = await start_shell_cmd(cmd=cmd, cwd=config.project_dir)
        try:
            yield process
        finally:
            await stop_process(process=process, context=ctx)


async def run_spec_tests(config: Configuration, context: Context) -> list[str]:
    """
    Run the unit tests; the test server is stopped before the task completes, a failure of the tests is
    then reported as a gate failure.

    Return:
        The outputs of the test runner.
    """
    await context.banner("Starting unit tests...")
    async with context.start(action="run_spec_tests") as ctx:
        async with karma_server(config=config, context=ctx) as server:
            outputs = await collect_outputs(p=server, context=ctx)

        if server.returncode != 0:
            raise GateFailure(
                task="test:spec",
                reason=f"unit tests failed (exit code {server.returncode})",
                detail={"outputs": outputs[-50:]},
            )
        return outputs
