# standard library
import gzip

from pathlib import Path

# third parties
import pytest

# Gauge tasks application
from gauge_tasks.pipelines.compressor import gzip_file

# Gauge tasks utilities
from gauge_tasks.utils import Context


@pytest.mark.asyncio
class TestCompressor:
    async def test_gzip(self, project: Path, context: Context):
        source = project / "gauge.min.js"
        content = b"!function(){var a=1;return a}();\n" * 100
        source.write_bytes(content)

        destination = await gzip_file(source=source, context=context)

        assert destination == project / "gauge.min.js.gz"
        assert destination.stat().st_size < len(content)
        assert gzip.decompress(destination.read_bytes()) == content
        assert source.read_bytes() == content

    async def test_explicit_destination(self, project: Path, context: Context):
        source = project / "gauge.min.js"
        source.write_bytes(b"")
        destination = await gzip_file(
            source=source, context=context, destination=project / "out.gz"
        )
        assert gzip.decompress(destination.read_bytes()) == b""

    async def test_missing_source(self, project: Path, context: Context):
        with pytest.raises(FileNotFoundError):
            await gzip_file(source=project / "gauge.min.js", context=context)
