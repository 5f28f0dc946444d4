# standard library
import asyncio
import re

from pathlib import Path

# third parties
import aiohttp
import pytest

from aioresponses import aioresponses

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration
from gauge_tasks.pipelines.coverage_badge import (
    BadgeColor,
    badge_url,
    classify,
    generate_badge,
    parse_coverage_report,
    strip_ansi,
)

# Gauge tasks utilities
from gauge_tasks.utils import (
    Context,
    CoverageReportFormatError,
    InMemoryReporter,
    LogLevel,
)

REPORT = (
    "\n"
    "=============================== Coverage summary ===============================\n"
    "\u001b[32;1mStatements   : 92.5% ( 370/400 )\u001b[0m\n"
    "\u001b[33;1mBranches     : 81.25% ( 130/160 )\u001b[0m\n"
    "Functions    : 95% ( 57/60 )\n"
    "Lines        : 93.1% ( 350/376 )\n"
    "================================================================================\n"
)

BADGE_URL = re.compile(r"^https://img\.shields\.io/badge/coverage-.*\.svg$")
SVG = b'<svg xmlns="http://www.w3.org/2000/svg"><text>coverage 92.5%</text></svg>'


def write_report(config: Configuration, content: str = REPORT) -> Path:
    path = config.path(config.coverage_report)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="UTF-8")
    return path


class TestParseCoverageReport:
    def test_summary(self):
        summary = parse_coverage_report(REPORT)
        assert summary.percentage == "92.5%"
        assert summary.value == 92.5
        assert summary.color == BadgeColor.green

    def test_summary_below_threshold(self):
        report = "\n=== Coverage summary ===\nStatements   : 85.0% ( 340/400 )\n"
        summary = parse_coverage_report(report)
        assert summary.percentage == "85.0%"
        assert summary.value == 85.0
        assert summary.color == BadgeColor.red

    def test_crlf(self):
        summary = parse_coverage_report(REPORT.replace("\n", "\r\n"))
        assert summary.percentage == "92.5%"

    def test_threshold(self):
        assert parse_coverage_report(REPORT, threshold=95).color == BadgeColor.red
        assert classify(90.0) == BadgeColor.green
        assert classify(89.99) == BadgeColor.red

    def test_strip_ansi(self):
        assert strip_ansi("\u001b[32;1mStatements\u001b[0m") == "Statements"

    @pytest.mark.parametrize(
        "report",
        [
            "",
            "\n=== Coverage summary ===\n",
            "\n=== Coverage summary ===\nStatements 92.5%\n",
            "\n=== Coverage summary ===\nStatements   : ( 370/400 )\n",
            "\n=== Coverage summary ===\nStatements   : Unknown% ( 0/0 )\n",
        ],
    )
    def test_malformed(self, report: str):
        with pytest.raises(CoverageReportFormatError):
            parse_coverage_report(report)

    def test_badge_url(self):
        summary = parse_coverage_report(REPORT)
        assert (
            badge_url(summary)
            == "https://img.shields.io/badge/coverage-92.5%25-green.svg"
        )


@pytest.mark.asyncio
class TestGenerateBadge:
    async def test_badge_written(self, config: Configuration, context: Context):
        write_report(config)

        with aioresponses() as mocked, pytest.raises(SystemExit) as e:
            mocked.get(BADGE_URL, status=200, body=SVG)
            await generate_badge(config=config, context=context)

        assert e.value.code == 0
        assert config.path(config.badge_path).read_bytes() == SVG

    async def test_fetch_error_exits_0(
        self, config: Configuration, context: Context, reporter: InMemoryReporter
    ):
        write_report(config)

        with aioresponses() as mocked, pytest.raises(SystemExit) as e:
            mocked.get(BADGE_URL, exception=aiohttp.ClientConnectionError("offline"))
            await generate_badge(config=config, context=context)

        assert e.value.code == 0
        assert not config.path(config.badge_path).exists()
        errors = reporter.texts(level=LogLevel.ERROR)
        assert errors == ["Can not fetch the badge: offline"]

    async def test_fetch_error_exit_code(self, config: Configuration, context: Context):
        write_report(config)
        config.badge_failure_exit_code = 1

        with aioresponses() as mocked, pytest.raises(SystemExit) as e:
            mocked.get(BADGE_URL, status=503)
            await generate_badge(config=config, context=context)

        assert e.value.code == 1

    async def test_missing_report(self, config: Configuration, context: Context):
        with pytest.raises(FileNotFoundError):
            await generate_badge(config=config, context=context)

    async def test_malformed_report(self, config: Configuration, context: Context):
        write_report(config, "no summary")

        with pytest.raises(CoverageReportFormatError):
            await generate_badge(config=config, context=context)

    async def test_timeout_exits_0(
        self, config: Configuration, context: Context, reporter: InMemoryReporter
    ):
        write_report(config)

        with aioresponses() as mocked, pytest.raises(SystemExit) as e:
            mocked.get(BADGE_URL, exception=asyncio.TimeoutError())
            await generate_badge(config=config, context=context)

        assert e.value.code == 0
        assert not config.path(config.badge_path).exists()
        assert reporter.texts(level=LogLevel.ERROR)[0].startswith(
            "Can not fetch the badge"
        )

    async def test_interrupted_download_leaves_no_file(
        self,
        config: Configuration,
        context: Context,
        monkeypatch: pytest.MonkeyPatch,
    ):
        write_report(config)

        async def iter_chunked(self, n: int):
            yield b"<svg partial"
            raise aiohttp.ClientPayloadError("Response payload is not completed")

        monkeypatch.setattr(aiohttp.StreamReader, "iter_chunked", iter_chunked)
        with aioresponses() as mocked, pytest.raises(SystemExit) as e:
            mocked.get(BADGE_URL, status=200, body=SVG)
            await generate_badge(config=config, context=context)

        assert e.value.code == 0
        badge = config.path(config.badge_path)
        assert not badge.exists()
        assert not badge.with_name(f"{badge.name}.part").exists()
