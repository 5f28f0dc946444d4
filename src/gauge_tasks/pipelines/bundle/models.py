# standard library
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# typing
from typing import Generic, Optional, TypeVar

# third parties
from pydantic import BaseModel

# Gauge tasks utilities
from gauge_tasks.utils import JSON

T = TypeVar("T")

SourceMap = dict[str, JSON]
"""
A source map (revision 3), either a regular one or an index map (with `sections`).
"""


class SourceModule(BaseModel):
    """
    A module of the graph resolved from the entry points.
    """

    id: int
    """
    Identifier of the module in the bundle, in the order the resolver first reached the module.
    """
    path: Path
    source: str
    dependencies: dict[str, Path] = {}
    """
    Resolved relative specifiers: `{'./Animation': Path('.../lib/Animation.js')}`.
    """


class TransformedModule(BaseModel):
    """
    A module after the transpiler pass.
    """

    module: SourceModule
    code: str
    source_map: Optional[SourceMap] = None


class Bundle(BaseModel):
    """
    The concatenation of the transformed modules into a single runtime-loadable script.
    """

    code: str = ""
    source_map: Optional[SourceMap] = None
    modules: list[Path] = []


class BundleFile(BaseModel):
    """
    An addressable (in memory) artifact flowing through the materialization stages.
    """

    path: Path
    contents: bytes = b""
    source_map: Optional[SourceMap] = None


class BundleOutput(BaseModel):
    """
    Result of a [BundlePipeline](@yw-nav-class:BundlePipeline) run.
    """

    minified: Path
    source_map: Path
    modules: list[Path] = []
    truncated: bool = False
    """
    Whether the stream has been terminated early because of a recoverable error.
    """
    errors: list[str] = []


class Stage(Enum):
    resolve = "resolve"
    transform = "transform"
    concatenate = "concatenate"
    materialize = "materialize"
    buffer = "buffer"
    rename = "rename"
    init_maps = "init_maps"
    minify = "minify"
    write_map = "write_map"
    persist = "persist"


class ErrorPolicy(Enum):
    RECOVER = "RECOVER"
    """
    The error is logged, the stream ends: downstream stages receive a truncated (possibly empty) content.
    """
    FATAL = "FATAL"
    """
    The error aborts the pipeline (and the dependents of the task running it).
    """


STAGE_POLICIES: dict[Stage, ErrorPolicy] = {
    Stage.resolve: ErrorPolicy.RECOVER,
    Stage.transform: ErrorPolicy.RECOVER,
    Stage.concatenate: ErrorPolicy.RECOVER,
    Stage.materialize: ErrorPolicy.FATAL,
    Stage.buffer: ErrorPolicy.FATAL,
    Stage.rename: ErrorPolicy.FATAL,
    Stage.init_maps: ErrorPolicy.FATAL,
    Stage.minify: ErrorPolicy.FATAL,
    Stage.write_map: ErrorPolicy.FATAL,
    Stage.persist: ErrorPolicy.FATAL,
}


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """
    Outcome of a stage: either a value or an error.
    """

    stage: Stage
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
