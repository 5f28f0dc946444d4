# standard library
import re

# third parties
import pytest

from aioresponses import aioresponses

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration
from gauge_tasks.pipelines.e2e_tests import is_ci, run_e2e_tests

# Gauge tasks utilities
from gauge_tasks.utils import Context, InMemoryReporter, LogLevel

REPORT = "\n=== Coverage summary ===\nStatements   : 88% ( 88/100 )\n"
BADGE_URL = "https://img.shields.io/badge/coverage-88%25-red.svg"


def write_report(config: Configuration):
    path = config.path(config.coverage_report)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(REPORT, encoding="UTF-8")


@pytest.mark.asyncio
class TestE2eTests:
    async def test_failure_exits_1(
        self, config: Configuration, context: Context, reporter: InMemoryReporter
    ):
        config.commands.wdio = "false"
        write_report(config)

        with pytest.raises(SystemExit) as e:
            await run_e2e_tests(config=config, context=context)

        assert e.value.code == 1
        assert "End-to-end tests failed" in reporter.texts(level=LogLevel.ERROR)
        assert not config.path(config.badge_path).exists()

    async def test_badge_after_tests(
        self,
        config: Configuration,
        context: Context,
        reporter: InMemoryReporter,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.delenv("TRAVIS", raising=False)
        config.commands.wdio = "echo wdio"
        write_report(config)

        with aioresponses() as mocked, pytest.raises(SystemExit) as e:
            mocked.get(re.compile(re.escape(BADGE_URL)), status=200, body=b"<svg/>")
            await run_e2e_tests(config=config, context=context)

        assert e.value.code == 0
        assert config.path(config.badge_path).read_bytes() == b"<svg/>"
        texts = reporter.texts()
        assert texts.index("Starting end-to-end tests...") < texts.index(
            "Generating badge..."
        )
        assert not any(t.startswith("CI run") for t in texts)

    async def test_ci_delay(
        self,
        config: Configuration,
        context: Context,
        reporter: InMemoryReporter,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setenv("TRAVIS", "true")
        config.commands.wdio = "true"
        config.ci_exit_delay = 0.01
        write_report(config)

        assert is_ci(config)
        with aioresponses() as mocked, pytest.raises(SystemExit):
            mocked.get(re.compile(re.escape(BADGE_URL)), status=200, body=b"<svg/>")
            await run_e2e_tests(config=config, context=context)

        assert any(t.startswith("CI run") for t in reporter.texts())
