# standard library
from pathlib import Path

# third parties
import pytest

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration

# Gauge tasks utilities
from gauge_tasks.utils import Context, ContextFactory, InMemoryReporter

GAUGE_SOURCES = {
    "lib/babelHelpers.js": "var babelHelpers = {};\nmodule.exports = babelHelpers;\n",
    "lib/Gauge.js": (
        "// the library's entry point\n"
        "import Animation from './Animation';\n"
        "import { clamp } from './utils';\n"
        "export default class Gauge {}\n"
    ),
    "lib/Animation.js": (
        "var utils = require('./utils');\n"
        "/* var legacy = require('./legacy'); */\n"
        "module.exports = function Animation() {};\n"
    ),
    "lib/utils/index.js": "exports.clamp = function (v) { return v; };\n",
}


def write_sources(folder: Path, sources: dict[str, str]):
    for relative, content in sources.items():
        path = folder / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="UTF-8")


@pytest.fixture
def reporter() -> InMemoryReporter:
    return InMemoryReporter()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    folder = (tmp_path / "gauge").resolve()
    folder.mkdir()
    write_sources(folder, GAUGE_SOURCES)
    return folder


@pytest.fixture
def config(project: Path) -> Configuration:
    return Configuration(project_dir=project)


@pytest.fixture
def context(config: Configuration, reporter: InMemoryReporter) -> Context:
    return ContextFactory.get_instance(env=config, reporters=[reporter])
