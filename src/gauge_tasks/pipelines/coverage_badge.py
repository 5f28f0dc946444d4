# standard library
import asyncio
import re
import sys

from enum import Enum
from pathlib import Path

# third parties
import aiohttp

from pydantic import BaseModel

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration

# Gauge tasks utilities
from gauge_tasks.utils import Context, CoverageReportFormatError

ansi_regex = re.compile(
    "[\u001b\u009b][[()#;?]*"
    "(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?"
    "[0-9A-ORZcf-nqry=><]"
)
newline_regex = re.compile(r"\r?\n")
leading_float_regex = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

SUMMARY_LINE_INDEX = 2
BADGE_LABEL = "coverage"
CHUNK_SIZE = 1024


class BadgeColor(str, Enum):
    green = "green"
    red = "red"


class CoverageSummary(BaseModel):
    """
    Summary extracted from the text coverage report.
    """

    percentage: str
    """
    Percentage as written in the report, e.g. `92.5%`.
    """
    value: float
    color: BadgeColor


def strip_ansi(text: str) -> str:
    return ansi_regex.sub("", text)


def summary_line(report: str) -> str:
    """
    The summary line, at a fixed position in the report (third line).
    """
    lines = newline_regex.split(strip_ansi(report))
    if len(lines) <= SUMMARY_LINE_INDEX:
        raise CoverageReportFormatError(
            line=None, reason=f"expected at least {SUMMARY_LINE_INDEX + 1} lines"
        )
    return lines[SUMMARY_LINE_INDEX]


def extract_percentage(line: str) -> str:
    """
    From e.g. `Statements   : 92.5% ( 370/400 )` extract `92.5%`.
    """
    segments = line.split(":")
    if len(segments) < 2:
        raise CoverageReportFormatError(line=line, reason="no ':' separator")
    percentage = segments[1].split("(")[0].strip()
    if not percentage:
        raise CoverageReportFormatError(line=line, reason="empty percentage")
    return percentage


def parse_leading_float(text: str) -> float:
    match = leading_float_regex.match(text)
    if not match:
        raise CoverageReportFormatError(line=text, reason="percentage is not a number")
    return float(match.group(0))


def classify(value: float, threshold: float = 90.0) -> BadgeColor:
    return BadgeColor.green if value >= threshold else BadgeColor.red


def parse_coverage_report(report: str, threshold: float = 90.0) -> CoverageSummary:
    percentage = extract_percentage(summary_line(report))
    value = parse_leading_float(percentage)
    return CoverageSummary(
        percentage=percentage, value=value, color=classify(value, threshold)
    )


def read_coverage_report(path: Path) -> str:
    return path.read_text(encoding="UTF-8")


def badge_url(summary: CoverageSummary, service: str = "https://img.shields.io") -> str:
    message = summary.percentage.replace("%", "%25")
    return f"{service}/badge/{BADGE_LABEL}-{message}-{summary.color.value}.svg"


async def download_badge(url: str, destination: Path, context: Context):
    """
    The body is streamed in a sibling file, moved to `destination` once complete.
    """
    partial = destination.with_name(f"{destination.name}.part")
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(url=url) as resp:
                resp.raise_for_status()
                with open(partial, "wb") as fp:
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        fp.write(chunk)
        partial.replace(destination)
    finally:
        partial.unlink(missing_ok=True)
    await context.info(text=f"Badge written in '{destination}'")


async def generate_badge(config: Configuration, context: Context):
    """
    Generate the coverage badge from the text coverage report, then terminate the process.

    *  a missing report raises `FileNotFoundError`
    *  a report not following the expected layout raises
       [CoverageReportFormatError](@yw-nav-class:CoverageReportFormatError)
    *  when the badge can not be fetched, the error is logged and the process exits with
       `config.badge_failure_exit_code` (`0` by default: a badge failure does not fail the CI)
    """
    async with context.start(action="generate_badge") as ctx:
        report = read_coverage_report(config.path(config.coverage_report))
        summary = parse_coverage_report(report, threshold=config.coverage_threshold)
        url = badge_url(summary, service=config.badge_service)
        await ctx.info(text=f"Coverage {summary.percentage}", data={"url": url})
        try:
            await download_badge(
                url=url, destination=config.path(config.badge_path), context=ctx
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            await ctx.error(text=f"Can not fetch the badge: {e}", data={"url": url})
            sys.exit(config.badge_failure_exit_code)

    sys.exit(0)
