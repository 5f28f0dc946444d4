# standard library
import re
import tempfile

from abc import ABC, abstractmethod
from pathlib import Path

# Gauge tasks application
from gauge_tasks.app.configuration import TransformConfig

# Gauge tasks utilities
from gauge_tasks.utils import (
    CommandException,
    Context,
    execute_shell_cmd,
    parse_json,
    write_json,
)

# relative
from .models import SourceMap, SourceModule, TransformedModule

source_mapping_url_regex = re.compile(r"^//[#@] sourceMappingURL=.*$", re.MULTILINE)


def strip_source_mapping_url(code: str) -> str:
    return source_mapping_url_regex.sub("", code).rstrip("\n") + "\n"


class Transformer(ABC):
    """
    Transpiler applied on each module of the graph.
    """

    @abstractmethod
    async def transform(
        self, module: SourceModule, config: TransformConfig, context: Context
    ) -> TransformedModule:
        return NotImplemented


class Minifier(ABC):
    """
    Minifier applied on the bundle, it accounts for an upstream source map.
    """

    @abstractmethod
    async def minify(
        self, code: str, input_map: SourceMap, filename: str, context: Context
    ) -> tuple[str, SourceMap]:
        """
        Parameters:
            code: content to minify
            input_map: source map of `code`
            filename: name of the minified file
            context: current context

        Return:
            The minified code and its source map (mapping to the original sources).
        """
        return NotImplemented


class BabelTransformer(Transformer):
    """
    Transpile modules using the babel command line interface.
    """

    def __init__(self, command: str, cwd: Path):
        self.command = command
        self.cwd = cwd

    async def transform(
        self, module: SourceModule, config: TransformConfig, context: Context
    ) -> TransformedModule:
        with tempfile.TemporaryDirectory() as tmp_folder:
            out_file = Path(tmp_folder) / module.path.name
            options = [
                f"--presets {','.join(config.presets)}" if config.presets else "",
                f"--plugins {','.join(config.plugins)}" if config.plugins else "",
            ]
            cmd = (
                f"{self.command} '{module.path}' {' '.join(o for o in options if o)} "
                f"--source-maps --out-file '{out_file}'"
            )
            return_code, outputs = await execute_shell_cmd(
                cmd=cmd, context=context, cwd=self.cwd
            )
            if return_code != 0:
                raise CommandException(command=cmd, outputs=outputs)

            map_file = out_file.with_name(f"{out_file.name}.map")
            return TransformedModule(
                module=module,
                code=strip_source_mapping_url(out_file.read_text(encoding="UTF-8")),
                source_map=parse_json(map_file) if map_file.exists() else None,
            )


class UglifyMinifier(Minifier):
    """
    Minify using the uglify-js command line interface (compress & mangle).
    """

    def __init__(self, command: str, cwd: Path):
        self.command = command
        self.cwd = cwd

    async def minify(
        self, code: str, input_map: SourceMap, filename: str, context: Context
    ) -> tuple[str, SourceMap]:
        with tempfile.TemporaryDirectory() as tmp_folder:
            folder = Path(tmp_folder)
            in_file = folder / "bundle.js"
            in_map = folder / "bundle.js.map"
            out_file = folder / filename
            out_map = folder / f"{filename}.map"
            in_file.write_text(code, encoding="UTF-8")
            write_json(input_map, in_map)
            cmd = (
                f"{self.command} '{in_file}' --compress --mangle "
                f"--source-map \"content='{in_map}',url='{filename}.map'\" "
                f"--output '{out_file}'"
            )
            return_code, outputs = await execute_shell_cmd(
                cmd=cmd, context=context, cwd=self.cwd
            )
            if return_code != 0:
                raise CommandException(command=cmd, outputs=outputs)
            return out_file.read_text(encoding="UTF-8"), parse_json(out_map)
