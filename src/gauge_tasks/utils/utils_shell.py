# standard library
import asyncio

from asyncio.subprocess import Process
from pathlib import Path

# third parties
from aiostream import stream

# relative
from .context import Context, Label


class CommandException(Exception):
    """
    A shell command exited with an error, `outputs` are its lines (stdout & stderr merged).
    """

    def __init__(self, command: str, outputs: list[str]):
        self.command = command
        self.outputs = outputs
        super().__init__(f"{self.command} failed")


async def start_shell_cmd(cmd: str, cwd: Path | None = None, **kwargs) -> Process:
    """
    Start a shell command with piped outputs, see [collect_outputs](@yw-nav-func:collect_outputs).
    """
    return await asyncio.create_subprocess_shell(
        cmd=cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
        **kwargs,
    )


async def collect_outputs(
    p: Process, context: Context, log_outputs: bool = True
) -> list[str]:
    """
    Read stdout & stderr of a process line by line until both are closed, then wait for its termination.

    Return:
        The lines in order of arrival.
    """
    outputs = []
    async with stream.merge(p.stdout, p.stderr).stream() as lines:
        async for line in lines:
            outputs.append(line.decode("utf-8"))
            if log_outputs:
                await context.info(text=outputs[-1], labels=[Label.STD_OUTPUT])
    await p.wait()
    return outputs


async def execute_shell_cmd(
    cmd: str,
    context: Context,
    cwd: Path | None = None,
    log_outputs: bool = True,
    **kwargs,
) -> tuple[int | None, list[str]]:
    """
    Execute a shell command, its outputs are logged in the context as they arrive.

    Parameters:
        cmd: the command
        context: current context
        cwd: working directory, default to the current one
        log_outputs: whether to log the outputs
        kwargs: forwarded to `asyncio.create_subprocess_shell`

    Return:
        The return code and the outputs.
    """
    async with context.start(
        action="execute 'shell' command", with_labels=[Label.BASH]
    ) as ctx:
        await ctx.info(text=cmd)
        p = await start_shell_cmd(cmd=cmd, cwd=cwd, **kwargs)
        outputs = await collect_outputs(p=p, context=ctx, log_outputs=log_outputs)
        return p.returncode, outputs
