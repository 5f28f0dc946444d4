# standard library
from pathlib import Path

# third parties
import pytest

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration
from gauge_tasks.pipelines.cleaner import clean_artifacts, remove_file

# Gauge tasks utilities
from gauge_tasks.utils import Context, InMemoryReporter, LogLevel


@pytest.mark.asyncio
class TestCleaner:
    async def test_removed_and_absent(
        self, config: Configuration, context: Context, project: Path
    ):
        (project / "gauge.min.js").write_text("minified")
        (project / "gauge.min.js.map").write_text("{}")

        report = await clean_artifacts(paths=config.artifact_paths(), context=context)

        assert report.removed == [project / "gauge.min.js", project / "gauge.min.js.map"]
        assert report.absent == [project / "gauge.js", project / "gauge.min.js.gz"]
        assert report.failed == []
        assert not any(p.exists() for p in config.artifact_paths())

    async def test_nothing_to_clean(self, config: Configuration, context: Context):
        report = await clean_artifacts(paths=config.artifact_paths(), context=context)

        assert report.removed == []
        assert len(report.absent) == 4

    async def test_failure_is_a_warning(
        self,
        config: Configuration,
        context: Context,
        reporter: InMemoryReporter,
        project: Path,
    ):
        # a folder can not be unlinked
        (project / "gauge.js").mkdir()
        (project / "gauge.min.js").write_text("minified")

        report = await clean_artifacts(paths=config.artifact_paths(), context=context)

        assert report.failed == [project / "gauge.js"]
        assert report.removed == [project / "gauge.min.js"]
        assert reporter.texts(level=LogLevel.WARNING) == ["Can not remove 'gauge.js'"]
        assert not reporter.errors


class TestRemoveFile:
    def test_remove_file(self, tmp_path: Path):
        path = tmp_path / "gauge.min.js.gz"
        path.write_bytes(b"")
        assert remove_file(path)
        assert not remove_file(path)
