# standard library
import tempfile

from pathlib import Path

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration

# Gauge tasks utilities
from gauge_tasks.utils import Context, TaskFailure, execute_shell_cmd, write_json


async def generate_doc(config: Configuration, context: Context) -> Path:
    """
    Generate the API documentation of the library from its sources.

    Return:
        The destination folder.
    """
    destination = config.path(config.docs_destination)
    async with context.start(action="generate_doc") as ctx:
        with tempfile.TemporaryDirectory() as tmp_folder:
            esdoc_config = Path(tmp_folder) / "esdoc.json"
            write_json(
                {
                    "source": f"./{config.lib_folder}",
                    "destination": f"./{config.docs_destination}",
                },
                esdoc_config,
            )
            cmd = f"{config.commands.esdoc} -c '{esdoc_config}'"
            return_code, outputs = await execute_shell_cmd(
                cmd=cmd, context=ctx, cwd=config.project_dir
            )
        if return_code != 0:
            raise TaskFailure(
                task="doc",
                reason="documentation generation failed",
                detail={"outputs": outputs},
            )
        await ctx.info(text=f"Documentation generated in '{destination}'")
        return destination
