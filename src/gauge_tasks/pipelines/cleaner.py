# standard library
from pathlib import Path

# third parties
from pydantic import BaseModel

# Gauge tasks utilities
from gauge_tasks.utils import Context


class CleanReport(BaseModel):
    """
    Outcome of a clean-up: no entry escalates as an error.
    """

    removed: list[Path] = []
    absent: list[Path] = []
    failed: list[Path] = []


def remove_file(path: Path) -> bool:
    """
    Remove a file, return `False` if it does not exist.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


async def clean_artifacts(paths: list[Path], context: Context) -> CleanReport:
    """
    Delete the given paths one after the other; missing files are not errors, and other failures are only
    reported as warnings.

    Parameters:
        paths: the files to delete
        context: current context

    Return:
        The clean-up report.
    """
    async with context.start(action="clean_artifacts") as ctx:
        report = CleanReport()
        for path in paths:
            try:
                removed = remove_file(path)
            except OSError as e:
                await ctx.warning(
                    text=f"Can not remove '{path.name}'", data={"error": str(e)}
                )
                report.failed.append(path)
                continue
            if removed:
                report.removed.append(path)
            else:
                report.absent.append(path)
        await ctx.info(text="Artifacts cleaned", data=report)
        return report
