# standard library
import gzip

from pathlib import Path

# Gauge tasks utilities
from gauge_tasks.utils import Context

MAX_COMPRESSION_LEVEL = 9


async def gzip_file(source: Path, context: Context, destination: Path | None = None) -> Path:
    """
    Compress a file with the maximum compression level, the output is written as a `.gz` sibling.

    Read or write errors are not recovered.

    Parameters:
        source: file to compress
        context: current context
        destination: output file, default to `{source}.gz`

    Return:
        Path of the compressed file.
    """
    destination = destination or source.with_name(f"{source.name}.gz")
    async with context.start(
        action="gzip_file", with_attributes={"file": source.name}
    ) as ctx:
        content = source.read_bytes()
        with open(destination, "wb") as raw:
            with gzip.GzipFile(
                filename=source.name,
                mode="wb",
                fileobj=raw,
                compresslevel=MAX_COMPRESSION_LEVEL,
            ) as fp:
                fp.write(content)
        await ctx.info(
            text=f"{source.name} compressed",
            data={"size": len(content), "compressed": destination.stat().st_size},
        )
        return destination
