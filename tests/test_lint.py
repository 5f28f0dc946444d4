# standard library
from pathlib import Path

# third parties
import pytest

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration
from gauge_tasks.pipelines.lint import lint_sources, run_lint

# Gauge tasks utilities
from gauge_tasks.utils import Context, GateFailure, InMemoryReporter, Label


def add_generated_files(project: Path):
    for relative in [
        "node_modules/raf/index.js",
        "docs/script/search.js",
        "coverage/lcov-report/prettify.js",
        "gauge.min.js",
        "karma.conf.js",
        "lib/README.md",
    ]:
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")


class TestLintSources:
    def test_exclusions(self, config: Configuration, project: Path):
        add_generated_files(project)

        files = lint_sources(config)

        assert sorted(f.relative_to(project).as_posix() for f in files) == [
            "karma.conf.js",
            "lib/Animation.js",
            "lib/Gauge.js",
            "lib/babelHelpers.js",
            "lib/utils/index.js",
        ]


@pytest.mark.asyncio
class TestRunLint:
    async def test_pass(
        self, config: Configuration, context: Context, reporter: InMemoryReporter
    ):
        config.commands.eslint = "true"

        files = await run_lint(config=config, context=context)

        assert len(files) == 4
        banner = next(e for e in reporter.entries if str(Label.BANNER) in e.labels)
        assert banner.text == "Starting linting checks..."

    async def test_gate_failure(self, config: Configuration, context: Context):
        config.commands.eslint = "echo 'lib/Gauge.js: Missing semicolon' && false"

        with pytest.raises(GateFailure) as e:
            await run_lint(config=config, context=context)

        assert e.value.task == "lint"
        assert e.value.detail["outputs"][0].startswith("lib/Gauge.js: Missing semicolon")

    async def test_no_file(self, tmp_path: Path, reporter: InMemoryReporter):
        config = Configuration(project_dir=tmp_path)
        context = Context(env=config, logs_reporters=[reporter])

        assert await run_lint(config=config, context=context) == []
        assert "No file to lint" in reporter.texts()
