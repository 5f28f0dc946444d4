# standard library
from pathlib import Path

# typing
from typing import Optional, Union

# third parties
from pydantic import BaseModel, ValidationError

# Gauge tasks utilities
from gauge_tasks.utils import ConfigurationError, FileListing, parse_json


class TransformConfig(BaseModel):
    """
    Configuration of the transpiler applied to each module of the bundle.
    """

    presets: list[str] = ["es2015"]
    """
    Language presets (syntax down-leveling).
    """
    plugins: list[str] = ["external-helpers-2"]
    """
    Plugins, the default one extracts the shared helpers in the 'babelHelpers' module.
    """


class ArtifactSet(BaseModel):
    """
    The fixed set of files produced by the build, relative to the project's folder.
    Production order is `bundle` > `minified` + `source_map` > `gzip`.
    """

    bundle: str = "gauge.js"
    minified: str = "gauge.min.js"
    source_map: str = "gauge.min.js.map"
    gzip: str = "gauge.min.js.gz"

    def all(self) -> list[str]:
        return [self.bundle, self.minified, self.source_map, self.gzip]


class ToolCommands(BaseModel):
    """
    Commands used to invoke the external toolchain.
    """

    babel: str = "npx babel"
    uglifyjs: str = "npx uglifyjs"
    eslint: str = "npx eslint"
    karma: str = "npx karma"
    wdio: str = "npx wdio"
    esdoc: str = "npx esdoc"


default_lint_files = FileListing(
    include=["*.js"],
    ignore=["node_modules", "docs", "*.min.js", "coverage"],
)


class Configuration(BaseModel):
    """
    Configuration of the tasks runner, all relative paths are resolved from `project_dir`.

    Default values match the layout of the gauge library repository.
    """

    project_dir: Path = Path(".")
    lib_folder: str = "lib"
    entries: list[str] = ["lib/babelHelpers.js", "lib/Gauge.js"]
    """
    Entry modules of the bundle: the extracted helpers first, then the library's main module.
    """
    transform: TransformConfig = TransformConfig()
    artifacts: ArtifactSet = ArtifactSet()
    lint_files: FileListing = default_lint_files
    karma_config: str = "karma.conf.js"
    wdio_config: str = "wdio.conf.js"
    docs_destination: str = "docs"
    coverage_report: str = "coverage/report/coverage.txt"
    badge_path: str = "test-coverage.svg"
    badge_service: str = "https://img.shields.io"
    coverage_threshold: float = 90.0
    ci_env_flag: str = "TRAVIS"
    """
    Environment variable flagging a continuous-integration run.
    """
    ci_exit_delay: float = 0.5
    """
    Delay (in seconds) let to asynchronous resources to close after end-to-end tests in CI.
    """
    badge_failure_exit_code: int = 0
    """
    Exit code when the badge can not be fetched. Historically `0`: a failed fetch does not fail the CI.
    """
    watch_patterns: list[str] = ["lib/**/*.js"]
    commands: ToolCommands = ToolCommands()

    def path(self, relative: Union[str, Path]) -> Path:
        return self.project_dir / relative

    def artifact_paths(self) -> list[Path]:
        return [self.path(p) for p in self.artifacts.all()]


def configuration_from_json(
    path: Optional[Path], project_dir: Optional[Path] = None
) -> Configuration:
    """
    Load the configuration from a JSON file, missing attributes are taken from the defaults.

    Parameters:
        path: Path of the JSON file, if `None` the default configuration is returned.
        project_dir: If provided, overrides the project folder.

    Return:
        The configuration.
    """
    overrides = {}
    if path:
        if not path.exists():
            raise ConfigurationError(path=str(path), reason="file not found")
        overrides = parse_json(path)
        if not isinstance(overrides, dict):
            raise ConfigurationError(path=str(path), reason="expected a JSON object")
    if project_dir:
        overrides = {**overrides, "project_dir": project_dir}
    try:
        return Configuration(**overrides)
    except ValidationError as e:
        raise ConfigurationError(path=str(path), reason=str(e)) from e
