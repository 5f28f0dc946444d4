# standard library
import shlex

from pathlib import Path

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration

# Gauge tasks utilities
from gauge_tasks.utils import Context, GateFailure, execute_shell_cmd, matching_files


def lint_sources(config: Configuration) -> list[Path]:
    """
    The javascript files of the project, minus dependencies, generated documentation, bundles and
    coverage artifacts.
    """
    return matching_files(folder=config.project_dir, patterns=config.lint_files)


async def run_lint(config: Configuration, context: Context) -> list[Path]:
    """
    Run the linter over the project's sources; any error reported fails the gate.

    Return:
        The checked files.
    """
    await context.banner("Starting linting checks...")
    async with context.start(action="run_lint") as ctx:
        files = lint_sources(config)
        if not files:
            await ctx.warning(text="No file to lint")
            return files

        relative = [str(f.relative_to(config.project_dir)) for f in files]
        await ctx.info(text=f"Linting {len(files)} files", data={"files": relative})
        cmd = f"{config.commands.eslint} {' '.join(shlex.quote(f) for f in relative)}"
        return_code, outputs = await execute_shell_cmd(
            cmd=cmd, context=ctx, cwd=config.project_dir
        )
        if return_code != 0:
            raise GateFailure(
                task="lint",
                reason="linter reported errors",
                detail={"outputs": outputs},
            )
        return files
