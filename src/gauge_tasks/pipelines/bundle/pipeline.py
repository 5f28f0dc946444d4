# standard library
import base64
import json
import re

from collections.abc import Awaitable, Callable
from pathlib import Path

# typing
from typing import Optional, TypeVar, Union

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration

# Gauge tasks utilities
from gauge_tasks.utils import BundleStageError, Context

# relative
from .models import (
    STAGE_POLICIES,
    Bundle,
    BundleFile,
    BundleOutput,
    ErrorPolicy,
    SourceMap,
    Stage,
    StageResult,
    TransformedModule,
)
from .module_graph import resolve_module_graph
from .runtime import concatenate
from .source_map import flatten_index_map
from .toolchain import (
    BabelTransformer,
    Minifier,
    Transformer,
    UglifyMinifier,
    strip_source_mapping_url,
)

T = TypeVar("T")

inline_map_regex = re.compile(
    r"^//[#@] sourceMappingURL=data:application/json(?:;charset=[\w-]+)?;base64,(\S+)\s*$",
    re.MULTILINE,
)


async def execute_stage(
    stage: Stage, fct: Callable[[], Union[T, Awaitable[T]]]
) -> StageResult[T]:
    try:
        value = fct()
        if isinstance(value, Awaitable):
            value = await value
    except Exception as e:
        return StageResult(stage=stage, error=e)
    return StageResult(stage=stage, value=value)


def load_upstream_map(file: BundleFile) -> SourceMap:
    """
    Source map attached to the file, or inlined as a `data:` URL in the content, or an empty map.

    Index maps are flattened: the minifier only reads regular maps.
    """
    if file.source_map:
        return flatten_index_map(file.source_map)
    match = inline_map_regex.search(file.contents.decode("UTF-8"))
    if match:
        return flatten_index_map(json.loads(base64.b64decode(match.group(1))))
    return {
        "version": 3,
        "file": file.path.name,
        "sources": [],
        "names": [],
        "mappings": "",
    }


class BundlePipeline:
    """
    Turns the module graph reachable from the configured entries into a single minified, source-mapped
    artifact.

    Each stage returns a [StageResult](@yw-nav-class:StageResult); what to do with an error is decided by
    [STAGE_POLICIES](@yw-nav-glob:STAGE_POLICIES):

    *  `resolve`, `transform`, `concatenate` are recovered: the error is logged and the stream ends, the
       following stages get a truncated (possibly empty) content.
    *  the remaining stages are fatal: [BundleStageError](@yw-nav-class:BundleStageError) is raised.
    """

    def __init__(
        self,
        config: Configuration,
        transformer: Optional[Transformer] = None,
        minifier: Optional[Minifier] = None,
    ):
        self.config = config
        self.transformer = transformer or BabelTransformer(
            command=config.commands.babel, cwd=config.project_dir
        )
        self.minifier = minifier or UglifyMinifier(
            command=config.commands.uglifyjs, cwd=config.project_dir
        )

    async def apply_policy(
        self, result: StageResult[T], output: BundleOutput, context: Context
    ) -> bool:
        """
        Return whether the stream goes on; raise if the error of the stage is fatal.
        """
        if result.ok:
            return True
        if STAGE_POLICIES[result.stage] == ErrorPolicy.FATAL:
            raise BundleStageError(stage=result.stage.value, error=result.error)

        await context.error(
            text=f"Bundle stage '{result.stage.value}' failed: {result.error}",
            data={"stage": result.stage.value, "error": str(result.error)},
        )
        output.truncated = True
        output.errors.append(f"{result.stage.value}: {result.error}")
        return False

    async def bundle(self, output: BundleOutput, context: Context) -> Bundle:
        config = self.config
        entries = [config.path(e) for e in config.entries]
        graph = await execute_stage(
            Stage.resolve, lambda: resolve_module_graph(entries=entries)
        )
        transformed: list[TransformedModule] = []
        if await self.apply_policy(graph, output, context):
            await context.info(
                text=f"{len(graph.value)} modules resolved",
                data={"modules": [str(m.path) for m in graph.value]},
            )
            for module in graph.value:
                result = await execute_stage(
                    Stage.transform,
                    lambda m=module: self.transformer.transform(
                        module=m, config=config.transform, context=context
                    ),
                )
                if not await self.apply_policy(result, output, context):
                    break
                transformed.append(result.value)

        bundle = await execute_stage(
            Stage.concatenate,
            lambda: concatenate(
                modules=transformed,
                entries=entries,
                root=config.project_dir,
                filename=config.artifacts.bundle,
            ),
        )
        if not await self.apply_policy(bundle, output, context):
            return Bundle()
        return bundle.value

    async def run(self, context: Context) -> BundleOutput:
        config = self.config
        artifacts = config.artifacts
        async with context.start(action="BundlePipeline.run") as ctx:
            output = BundleOutput(
                minified=config.path(artifacts.minified),
                source_map=config.path(artifacts.source_map),
            )
            bundle = await self.bundle(output=output, context=ctx)
            output.modules = bundle.modules

            async def stage(step: Stage, fct: Callable[[], Union[T, Awaitable[T]]]) -> T:
                result = await execute_stage(step, fct)
                await self.apply_policy(result, output, ctx)
                await ctx.debug(text=f"Stage '{step.value}' done")
                return result.value

            file = await stage(
                Stage.materialize,
                lambda: BundleFile(
                    path=config.path(artifacts.bundle),
                    contents=bundle.code.encode("UTF-8"),
                    source_map=bundle.source_map,
                ),
            )
            file = await stage(
                Stage.buffer, lambda: file.model_copy(update={"contents": bytes(file.contents)})
            )
            file = await stage(
                Stage.rename,
                lambda: file.model_copy(
                    update={"path": file.path.with_name(artifacts.minified)}
                ),
            )
            input_map = await stage(Stage.init_maps, lambda: load_upstream_map(file))
            minified, minified_map = await stage(
                Stage.minify,
                lambda: self.minifier.minify(
                    code=strip_source_mapping_url(file.contents.decode("UTF-8")),
                    input_map=input_map,
                    filename=file.path.name,
                    context=ctx,
                ),
            )
            file = await stage(
                Stage.write_map,
                lambda: BundleFile(
                    path=file.path,
                    contents=(
                        strip_source_mapping_url(minified)
                        + f"//# sourceMappingURL={artifacts.source_map}\n"
                    ).encode("UTF-8"),
                    source_map={**minified_map, "file": file.path.name},
                ),
            )

            def persist():
                output.minified.parent.mkdir(parents=True, exist_ok=True)
                output.minified.write_bytes(file.contents)
                output.source_map.write_text(
                    json.dumps(file.source_map), encoding="UTF-8"
                )

            await stage(Stage.persist, persist)
            await ctx.info(
                text=f"{artifacts.minified} written",
                data={
                    "modules": len(output.modules),
                    "truncated": output.truncated,
                    "size": len(file.contents),
                },
            )
            return output
